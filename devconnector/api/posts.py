from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from devconnector.auth.deps import get_config, get_current_user, get_current_user_id
from devconnector.config import Config
from devconnector.db import connect
from devconnector.errors import Checks
from devconnector.posts import crud


router = APIRouter(prefix="/posts", tags=["posts"])


class TextRequest(BaseModel):
    text: Optional[str] = None


def _require_text(payload: TextRequest) -> str:
    checks = Checks()
    checks.require(payload.text, "text", "Text is required")
    checks.raise_if_any()
    return str(payload.text)


@router.post("")
def create_post(
    payload: TextRequest,
    user: Dict[str, Any] = Depends(get_current_user),
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    text = _require_text(payload)
    with connect(cfg.DB_DSN) as conn:
        return crud.public_post(crud.create_post(conn, user, text))


@router.get("")
def list_posts(
    _user_id: str = Depends(get_current_user_id),
    cfg: Config = Depends(get_config),
) -> List[Dict[str, Any]]:
    """All posts, newest first."""
    with connect(cfg.DB_DSN) as conn:
        return [crud.public_post(p) for p in crud.list_posts(conn)]


@router.get("/{post_id}")
def get_post(
    post_id: str,
    _user_id: str = Depends(get_current_user_id),
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        return crud.public_post(crud.require_post(conn, post_id))


@router.delete("/{post_id}")
def delete_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        crud.delete_post(conn, post_id, user_id)
    return {"msg": "Post removed"}


@router.put("/like/{post_id}")
def like_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    cfg: Config = Depends(get_config),
) -> List[Dict[str, Any]]:
    with connect(cfg.DB_DSN) as conn:
        return crud.like_post(conn, post_id, user_id)


@router.put("/unlike/{post_id}")
def unlike_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    cfg: Config = Depends(get_config),
) -> List[Dict[str, Any]]:
    with connect(cfg.DB_DSN) as conn:
        return crud.unlike_post(conn, post_id, user_id)


@router.post("/comment/{post_id}")
def add_comment(
    post_id: str,
    payload: TextRequest,
    user: Dict[str, Any] = Depends(get_current_user),
    cfg: Config = Depends(get_config),
) -> List[Dict[str, Any]]:
    text = _require_text(payload)
    with connect(cfg.DB_DSN) as conn:
        return crud.add_comment(conn, post_id, user, text)


@router.delete("/comment/{post_id}/{comment_id}")
def delete_comment(
    post_id: str,
    comment_id: str,
    user_id: str = Depends(get_current_user_id),
    cfg: Config = Depends(get_config),
) -> List[Dict[str, Any]]:
    with connect(cfg.DB_DSN) as conn:
        return crud.remove_comment(conn, post_id, comment_id, user_id)
