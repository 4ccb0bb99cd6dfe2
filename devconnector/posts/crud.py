from __future__ import annotations

from typing import Any, Dict, List

from devconnector.documents import (
    delete_document,
    find_documents,
    get_document,
    insert_document,
    replace_document,
    strip_meta,
)
from devconnector.errors import Conflict, Forbidden, NotFound
from devconnector.util.hashing import new_id
from devconnector.util.time import utcnow_iso


COLLECTION = "posts"


def public_post(doc: Dict[str, Any]) -> Dict[str, Any]:
    return strip_meta(doc)


def _author_snapshot(author: Dict[str, Any]) -> Dict[str, Any]:
    # Copied at creation time; later name/avatar changes are not propagated.
    return {"user": str(author["id"]), "name": author.get("name"), "avatar": author.get("avatar")}


def create_post(conn: Any, author: Dict[str, Any], text: str) -> Dict[str, Any]:
    doc: Dict[str, Any] = {
        "id": new_id(),
        "text": text.strip(),
        **_author_snapshot(author),
        "likes": [],
        "comments": [],
        "date": utcnow_iso(),
    }
    return insert_document(conn, COLLECTION, doc)


def list_posts(conn: Any) -> List[Dict[str, Any]]:
    return find_documents(conn, COLLECTION, newest_first=True)


def require_post(conn: Any, post_id: str) -> Dict[str, Any]:
    doc = get_document(conn, COLLECTION, post_id)
    if doc is None:
        raise NotFound("Post not found")
    return doc


def delete_post(conn: Any, post_id: str, user_id: str) -> None:
    doc = require_post(conn, post_id)
    if str(doc.get("user")) != str(user_id):
        raise Forbidden("User not authorized")
    if not delete_document(conn, COLLECTION, post_id):
        raise NotFound("Post not found")


def _liked_by(doc: Dict[str, Any], user_id: str) -> bool:
    return any(str(l.get("user")) == str(user_id) for l in doc.get("likes") or [])


def like_post(conn: Any, post_id: str, user_id: str) -> List[Dict[str, Any]]:
    doc = require_post(conn, post_id)
    if _liked_by(doc, user_id):
        raise Conflict("Post already liked by this user")
    doc["likes"] = [{"user": str(user_id)}] + list(doc.get("likes") or [])
    return replace_document(conn, COLLECTION, doc)["likes"]


def unlike_post(conn: Any, post_id: str, user_id: str) -> List[Dict[str, Any]]:
    doc = require_post(conn, post_id)
    if not _liked_by(doc, user_id):
        raise Conflict("Post has not yet been liked by this user")
    doc["likes"] = [l for l in doc.get("likes") or [] if str(l.get("user")) != str(user_id)]
    return replace_document(conn, COLLECTION, doc)["likes"]


def add_comment(conn: Any, post_id: str, author: Dict[str, Any], text: str) -> List[Dict[str, Any]]:
    doc = require_post(conn, post_id)
    comment = {
        "id": new_id(),
        "text": text.strip(),
        **_author_snapshot(author),
        "date": utcnow_iso(),
    }
    doc["comments"] = [comment] + list(doc.get("comments") or [])
    return replace_document(conn, COLLECTION, doc)["comments"]


def remove_comment(conn: Any, post_id: str, comment_id: str, user_id: str) -> List[Dict[str, Any]]:
    doc = require_post(conn, post_id)
    comments = list(doc.get("comments") or [])
    idx = next((i for i, c in enumerate(comments) if str(c.get("id")) == str(comment_id)), None)
    if idx is None:
        raise NotFound("Comment does not exist")
    if str(comments[idx].get("user")) != str(user_id):
        raise Forbidden("User is not authorized")
    del comments[idx]
    doc["comments"] = comments
    return replace_document(conn, COLLECTION, doc)["comments"]
