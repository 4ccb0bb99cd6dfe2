from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext


_pwd = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
_JWT_ALG = "HS256"


class TokenError(Exception):
    """Token could not be verified (malformed, bad signature, expired or incomplete).

    Callers only get "not valid"; the reason is kept for server-side logs.
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("password_blank")
    return _pwd.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return _pwd.verify(password, password_hash)
    except Exception:
        return False


def create_access_token(
    *,
    secret: str,
    user_id: str,
    expires_seconds: int,
) -> str:
    if not secret:
        raise ValueError("jwt_secret_blank")

    now = datetime.now(timezone.utc)
    exp = now + timedelta(seconds=max(1, int(expires_seconds)))

    payload: Dict[str, Any] = {
        "user": {"id": str(user_id)},
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=_JWT_ALG)


def decode_access_token(*, token: str, secret: str) -> Dict[str, Any]:
    if not token:
        raise ValueError("token_blank")
    if not secret:
        raise ValueError("jwt_secret_blank")
    return jwt.decode(token, secret, algorithms=[_JWT_ALG], options={"require": ["exp"]})


def verify_access_token(*, token: str, secret: str) -> str:
    """Return the user id embedded in `token` or raise TokenError."""
    try:
        payload = decode_access_token(token=token, secret=secret)
    except jwt.ExpiredSignatureError:
        raise TokenError("token_expired")
    except jwt.InvalidSignatureError:
        raise TokenError("token_bad_signature")
    except jwt.InvalidTokenError:
        raise TokenError("token_malformed")
    except ValueError as e:
        raise TokenError(str(e))

    user = payload.get("user")
    user_id = user.get("id") if isinstance(user, dict) else None
    if not user_id:
        raise TokenError("token_missing_user")
    return str(user_id)
