from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from devconnector.auth.crud import delete_user, get_users_by_ids
from devconnector.documents import (
    delete_documents_by_user,
    find_documents,
    get_document_by_user,
    insert_document,
    replace_document,
    strip_meta,
)
from devconnector.errors import NotFound
from devconnector.util.hashing import new_id
from devconnector.util.time import utcnow_iso


COLLECTION = "profiles"

PROFILE_FIELDS = ("company", "website", "location", "bio", "status", "githubusername")
SOCIAL_FIELDS = ("youtube", "twitter", "facebook", "linkedin", "instagram")
EXPERIENCE_FIELDS = ("title", "company", "location", "from", "to", "current", "description")
EDUCATION_FIELDS = ("school", "degree", "fieldofstudy", "from", "to", "current", "description")

# Profiles are looked up by user; a miss is reported as 400, not 404.
NO_PROFILE_MSG = "There is no profile for this user"


def parse_skills(skills: Any) -> List[str]:
    """'python, sql ,, go' -> ['python', 'sql', 'go']"""
    if skills is None:
        return []
    parts: Iterable[Any] = skills.split(",") if isinstance(skills, str) else skills
    out: List[str] = []
    for p in parts:
        s = str(p or "").strip()
        if s:
            out.append(s)
    return out


def _provided(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def build_profile_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Pick the profile fields actually supplied (blank strings count as absent)."""
    fields: Dict[str, Any] = {}
    for k in PROFILE_FIELDS:
        v = payload.get(k)
        if _provided(v):
            fields[k] = v.strip() if isinstance(v, str) else v
    if _provided(payload.get("skills")):
        fields["skills"] = parse_skills(payload["skills"])

    social: Dict[str, str] = {}
    for k in SOCIAL_FIELDS:
        v = payload.get(k)
        if _provided(v):
            social[k] = str(v).strip()
    if social:
        fields["social"] = social
    return fields


def _new_profile(user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    doc: Dict[str, Any] = {
        "id": new_id(),
        "user": str(user_id),
        "company": None,
        "website": None,
        "location": None,
        "bio": None,
        "status": None,
        "githubusername": None,
        "skills": [],
        "social": {},
        "experience": [],
        "education": [],
        "date": utcnow_iso(),
    }
    merge_profile_fields(doc, fields)
    return doc


def merge_profile_fields(doc: Dict[str, Any], fields: Dict[str, Any]) -> Dict[str, Any]:
    """Overwrite only the supplied fields; social links merge per platform."""
    for k, v in fields.items():
        if k == "social":
            social = dict(doc.get("social") or {})
            social.update(v)
            doc["social"] = social
        else:
            doc[k] = v
    return doc


def populate(conn: Any, docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Client-facing profiles with `user` expanded to {id, name, avatar}."""
    users = get_users_by_ids(conn, [str(d.get("user")) for d in docs])
    out: List[Dict[str, Any]] = []
    for d in docs:
        p = strip_meta(d)
        u = users.get(str(d.get("user")))
        p["user"] = {"id": u["id"], "name": u["name"], "avatar": u.get("avatar")} if u else None
        out.append(p)
    return out


def populate_one(conn: Any, doc: Dict[str, Any]) -> Dict[str, Any]:
    return populate(conn, [doc])[0]


def get_profile(conn: Any, user_id: str) -> Optional[Dict[str, Any]]:
    return get_document_by_user(conn, COLLECTION, user_id)


def require_profile(conn: Any, user_id: str, msg: str = NO_PROFILE_MSG) -> Dict[str, Any]:
    doc = get_profile(conn, user_id)
    if doc is None:
        raise NotFound(msg, status_code=400)
    return doc


def list_profiles(conn: Any) -> List[Dict[str, Any]]:
    return find_documents(conn, COLLECTION)


def upsert_profile(conn: Any, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    existing = get_profile(conn, user_id)
    if existing is not None:
        return replace_document(conn, COLLECTION, merge_profile_fields(existing, fields))
    return insert_document(conn, COLLECTION, _new_profile(user_id, fields))


def _sub_record(payload: Dict[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    item: Dict[str, Any] = {"id": new_id()}
    for k in keys:
        v = payload.get(k)
        item[k] = v.strip() if isinstance(v, str) else v
    item["current"] = bool(item.get("current") or False)
    return item


def _add_sub_record(conn: Any, user_id: str, key: str, item: Dict[str, Any]) -> Dict[str, Any]:
    doc = require_profile(conn, user_id)
    seq = list(doc.get(key) or [])
    seq.insert(0, item)
    doc[key] = seq
    return replace_document(conn, COLLECTION, doc)


def _remove_sub_record(conn: Any, user_id: str, key: str, item_id: str, missing_msg: str) -> Dict[str, Any]:
    doc = require_profile(conn, user_id)
    seq = list(doc.get(key) or [])
    idx = next((i for i, it in enumerate(seq) if str(it.get("id")) == str(item_id)), None)
    if idx is None:
        raise NotFound(missing_msg)
    del seq[idx]
    doc[key] = seq
    return replace_document(conn, COLLECTION, doc)


def add_experience(conn: Any, user_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    return _add_sub_record(conn, user_id, "experience", _sub_record(payload, EXPERIENCE_FIELDS))


def remove_experience(conn: Any, user_id: str, exp_id: str) -> Dict[str, Any]:
    return _remove_sub_record(conn, user_id, "experience", exp_id, "Experience not found")


def add_education(conn: Any, user_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    return _add_sub_record(conn, user_id, "education", _sub_record(payload, EDUCATION_FIELDS))


def remove_education(conn: Any, user_id: str, edu_id: str) -> Dict[str, Any]:
    return _remove_sub_record(conn, user_id, "education", edu_id, "Education not found")


def delete_account(conn: Any, user_id: str) -> None:
    """Remove the profile and the user. Posts by the user are kept."""
    delete_documents_by_user(conn, COLLECTION, user_id)
    delete_user(conn, user_id)
