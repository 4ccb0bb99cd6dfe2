import hashlib
import uuid
from urllib.parse import urlencode


def md5_hex(s: str) -> str:
    return hashlib.md5(s.encode("utf-8")).hexdigest()


def new_id() -> str:
    """Opaque identifier for users, documents and embedded sub-records."""
    return uuid.uuid4().hex


def gravatar_url(email: str, *, base_url: str, size: int, rating: str, default: str) -> str:
    """Deterministic avatar URL for an email (same email -> same URL)."""
    digest = md5_hex((email or "").strip().lower())
    query = urlencode({"s": str(size), "r": rating, "d": default})
    return f"{base_url.rstrip('/')}/{digest}?{query}"
