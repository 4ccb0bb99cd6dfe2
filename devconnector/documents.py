"""Versioned JSON document persistence for aggregates (profiles, posts).

Every aggregate is read whole, mutated in memory and written back whole.
Writes go through `replace_document`, which only succeeds if the row still
carries the version that was read; otherwise `StaleDocumentError` is raised
and the caller's change is discarded instead of silently overwriting a
concurrent one.

The version is kept out of the JSON body and travels on the returned dict
under the `__version__` key; `strip_meta` removes it before a document is
sent to a client.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from devconnector.schema import DOCUMENT_COLLECTIONS
from devconnector.util.time import utcnow_iso


VERSION_KEY = "__version__"


def _debug(msg: str) -> None:
    print(f"[documents] {msg}")


class StaleDocumentError(Exception):
    """The document changed between read and write."""

    def __init__(self, collection: str, doc_id: str, expected_version: int):
        super().__init__(f"{collection}/{doc_id} is no longer at version {expected_version}")
        self.collection = collection
        self.doc_id = doc_id
        self.expected_version = expected_version


def _table(collection: str) -> str:
    if collection not in DOCUMENT_COLLECTIONS:
        raise ValueError(f"unknown_collection: {collection}")
    return collection


def _from_row(row: Any) -> Dict[str, Any]:
    doc = json.loads(str(row["doc_json"]))
    doc[VERSION_KEY] = int(row["version"])
    return doc


def _dump(doc: Dict[str, Any]) -> str:
    return json.dumps(strip_meta(doc), ensure_ascii=False)


def strip_meta(doc: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in doc.items() if k != VERSION_KEY}


def insert_document(conn: Any, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
    """Insert a new document. `doc` must carry `id` and `user`.

    A uniqueness clash (e.g. a second profile for the same user created
    concurrently) is reported as StaleDocumentError, same as a lost update.
    """
    table = _table(collection)
    now = utcnow_iso()
    cur = conn.execute(
        f"""
        INSERT INTO {table} (doc_id, user_id, version, doc_json, created_at, updated_at)
        VALUES (?,?,1,?,?,?)
        ON CONFLICT DO NOTHING
        """,
        (str(doc["id"]), str(doc["user"]), _dump(doc), now, now),
    )
    if int(cur.rowcount or 0) != 1:
        _debug(f"Insert rejected (conflict): {table}/{doc['id']}")
        raise StaleDocumentError(table, str(doc["id"]), 0)
    out = strip_meta(doc)
    out[VERSION_KEY] = 1
    return out


def get_document(conn: Any, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
    table = _table(collection)
    row = conn.execute(
        f"SELECT doc_json, version FROM {table} WHERE doc_id=?",
        (str(doc_id),),
    ).fetchone()
    if row is None:
        return None
    return _from_row(row)


def get_document_by_user(conn: Any, collection: str, user_id: str) -> Optional[Dict[str, Any]]:
    """First document owned by `user_id` (profiles hold at most one per user)."""
    table = _table(collection)
    row = conn.execute(
        f"SELECT doc_json, version FROM {table} WHERE user_id=? ORDER BY created_at ASC LIMIT 1",
        (str(user_id),),
    ).fetchone()
    if row is None:
        return None
    return _from_row(row)


def find_documents(conn: Any, collection: str, *, newest_first: bool = False) -> List[Dict[str, Any]]:
    table = _table(collection)
    order = "DESC" if newest_first else "ASC"
    rows = conn.execute(
        f"SELECT doc_json, version FROM {table} ORDER BY created_at {order}, doc_id {order}",
    ).fetchall()
    return [_from_row(r) for r in rows]


def replace_document(conn: Any, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
    """Write the whole document back if nobody else has written it since it was read.

    Returns the document carrying its new version.
    """
    table = _table(collection)
    doc_id = str(doc["id"])
    expected = int(doc.get(VERSION_KEY) or 0)
    cur = conn.execute(
        f"""
        UPDATE {table}
        SET doc_json=?, version=version+1, updated_at=?
        WHERE doc_id=? AND version=?
        """,
        (_dump(doc), utcnow_iso(), doc_id, expected),
    )
    if int(cur.rowcount or 0) != 1:
        _debug(f"Stale write rejected: {table}/{doc_id} expected version={expected}")
        raise StaleDocumentError(table, doc_id, expected)
    out = strip_meta(doc)
    out[VERSION_KEY] = expected + 1
    return out


def delete_document(conn: Any, collection: str, doc_id: str) -> bool:
    table = _table(collection)
    cur = conn.execute(f"DELETE FROM {table} WHERE doc_id=?", (str(doc_id),))
    return int(cur.rowcount or 0) > 0


def delete_documents_by_user(conn: Any, collection: str, user_id: str) -> int:
    table = _table(collection)
    cur = conn.execute(f"DELETE FROM {table} WHERE user_id=?", (str(user_id),))
    return int(cur.rowcount or 0)
