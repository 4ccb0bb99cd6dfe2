from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from devconnector.auth.crud import create_user, is_valid_email
from devconnector.auth.deps import get_config
from devconnector.auth.security import create_access_token
from devconnector.config import Config
from devconnector.db import connect
from devconnector.errors import Checks, ValidationFailed


def _debug(msg: str) -> None:
    print(f"[api.users] {msg}")


router = APIRouter(tags=["users"])


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


def issue_token(cfg: Config, user_id: str) -> Dict[str, Any]:
    token = create_access_token(
        secret=cfg.AUTH_JWT_SECRET,
        user_id=str(user_id),
        expires_seconds=int(cfg.AUTH_TOKEN_EXPIRE_SECONDS),
    )
    return {"token": token}


@router.post("/users")
def register_user(payload: RegisterRequest, cfg: Config = Depends(get_config)) -> Dict[str, Any]:
    """Register a user and return a session token."""
    checks = Checks()
    checks.require(payload.name, "name", "Name is required")
    checks.check(is_valid_email(payload.email or ""), "email", "Please include a valid email")
    checks.check(
        len(payload.password or "") >= cfg.PASSWORD_MIN_LENGTH,
        "password",
        f"Please enter a password with {cfg.PASSWORD_MIN_LENGTH} or more characters",
    )
    checks.raise_if_any()

    with connect(cfg.DB_DSN) as conn:
        try:
            u = create_user(
                conn,
                cfg,
                name=str(payload.name),
                email=str(payload.email),
                password=str(payload.password),
            )
        except ValueError as e:
            if str(e) == "email_exists":
                raise ValidationFailed.single("User already exists")
            raise ValidationFailed.single(str(e))

    _debug(f"Registered user id={u['id']}")
    return issue_token(cfg, u["id"])
