from __future__ import annotations

from typing import Any, Dict, Optional

from email_validator import EmailNotValidError, validate_email

from devconnector.config import Config
from devconnector.util.hashing import gravatar_url, new_id
from devconnector.util.time import utcnow_iso

from .security import hash_password, verify_password


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def is_valid_email(email: str) -> bool:
    try:
        validate_email((email or "").strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def public_user(row: Any | Dict[str, Any]) -> Dict[str, Any]:
    d = dict(row)
    d.pop("password_hash", None)
    d["id"] = d.pop("user_id", None)
    return d


def get_user_by_email(conn: Any, email: str) -> Optional[Any]:
    e = normalize_email(email)
    if not e:
        return None
    return conn.execute(
        "SELECT * FROM users WHERE email=?",
        (e,),
    ).fetchone()


def get_user_by_id(conn: Any, user_id: str) -> Optional[Any]:
    return conn.execute(
        "SELECT * FROM users WHERE user_id=?",
        (str(user_id),),
    ).fetchone()


def get_users_by_ids(conn: Any, user_ids: list[str]) -> Dict[str, Dict[str, Any]]:
    """Public users keyed by id (missing ids are simply absent)."""
    ids = sorted({str(u) for u in user_ids if u})
    if not ids:
        return {}
    marks = ",".join("?" for _ in ids)
    rows = conn.execute(
        f"SELECT * FROM users WHERE user_id IN ({marks})",
        tuple(ids),
    ).fetchall()
    out: Dict[str, Dict[str, Any]] = {}
    for r in rows:
        u = public_user(r)
        out[str(u["id"])] = u
    return out


def verify_user_credentials(conn: Any, email: str, password: str) -> Optional[Any]:
    """Row for valid credentials, else None.

    Unknown email and wrong password are deliberately indistinguishable.
    """
    row = get_user_by_email(conn, email)
    if row is None:
        return None
    if not verify_password(password, str(row["password_hash"])):
        return None
    return row


def email_taken(conn: Any, email: str) -> bool:
    row = conn.execute("SELECT 1 FROM users WHERE email=?", (normalize_email(email),)).fetchone()
    return row is not None


def create_user(
    conn: Any,
    cfg: Config,
    *,
    name: str,
    email: str,
    password: str,
) -> Dict[str, Any]:
    n = (name or "").strip()
    e = normalize_email(email)
    if not n:
        raise ValueError("name_blank")
    if not e:
        raise ValueError("email_blank")

    if email_taken(conn, e):
        raise ValueError("email_exists")

    avatar = gravatar_url(
        e,
        base_url=cfg.GRAVATAR_BASE_URL,
        size=cfg.GRAVATAR_SIZE,
        rating=cfg.GRAVATAR_RATING,
        default=cfg.GRAVATAR_DEFAULT,
    )
    user_id = new_id()
    now = utcnow_iso()
    try:
        conn.execute(
            """
            INSERT INTO users (user_id, name, email, password_hash, avatar, created_at, updated_at)
            VALUES (?,?,?,?,?,?,?)
            """,
            (user_id, n, e, hash_password(password), avatar, now, now),
        )
    except conn.IntegrityError:
        # A concurrent registration took the email after the check above.
        raise ValueError("email_exists")
    row = get_user_by_id(conn, user_id)
    assert row is not None
    return public_user(row)


def delete_user(conn: Any, user_id: str) -> bool:
    cur = conn.execute("DELETE FROM users WHERE user_id=?", (str(user_id),))
    return int(cur.rowcount or 0) > 0
