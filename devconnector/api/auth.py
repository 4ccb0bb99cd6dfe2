from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from devconnector.auth.crud import is_valid_email, verify_user_credentials
from devconnector.auth.deps import get_config, get_current_user
from devconnector.config import Config
from devconnector.db import connect
from devconnector.errors import Checks, ValidationFailed

from .users import issue_token


router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


@router.get("/auth")
def auth_me(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return user


@router.post("/auth")
def auth_login(payload: LoginRequest, cfg: Config = Depends(get_config)) -> Dict[str, Any]:
    checks = Checks()
    checks.check(is_valid_email(payload.email or ""), "email", "Please include a valid email")
    checks.check(payload.password is not None and payload.password != "", "password", "Password is required")
    checks.raise_if_any()

    with connect(cfg.DB_DSN) as conn:
        row = verify_user_credentials(conn, str(payload.email), str(payload.password))
    if row is None:
        # Same answer for unknown email and wrong password.
        raise ValidationFailed.single("Invalid Credentials")

    return issue_token(cfg, str(row["user_id"]))
