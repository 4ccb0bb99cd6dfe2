from __future__ import annotations

from typing import Any, Dict

from fastapi import Depends, Request

from devconnector.config import Config
from devconnector.db import connect
from devconnector.errors import INVALID_TOKEN_MSG, NO_TOKEN_MSG, ApiError, NotFound, Unauthorized

from .crud import get_user_by_id, public_user
from .security import TokenError, verify_access_token


def _debug(msg: str) -> None:
    print(f"[auth] {msg}")


def get_config(request: Request) -> Config:
    cfg = getattr(request.app.state, "cfg", None)
    if cfg is None:
        raise ApiError("server_config_missing", status_code=500)
    return cfg


def get_current_user_id(request: Request, cfg: Config = Depends(get_config)) -> str:
    """Auth gate for protected routes.

    Reads the token from the configured header (default `x-auth-token`),
    verifies it once, and records the user id on `request.state.user_id`.
    Every verification failure produces the same response.
    """

    token = (request.headers.get(cfg.AUTH_HEADER_NAME) or "").strip()
    if not token:
        raise Unauthorized(NO_TOKEN_MSG)

    try:
        user_id = verify_access_token(token=token, secret=cfg.AUTH_JWT_SECRET)
    except TokenError as e:
        _debug(f"Rejected token on {request.method} {request.url.path}: {e.reason}")
        raise Unauthorized(INVALID_TOKEN_MSG)

    request.state.user_id = user_id
    return user_id


def get_current_user(
    user_id: str = Depends(get_current_user_id),
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    """The authenticated identity (minus secret).

    Tokens stay valid after account deletion, so a verified token can still
    point at a user that no longer exists.
    """
    with connect(cfg.DB_DSN) as conn:
        row = get_user_by_id(conn, user_id)
    if row is None:
        raise NotFound("User not found")
    return public_user(row)
