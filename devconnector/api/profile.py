from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from devconnector.auth.deps import get_config, get_current_user, get_current_user_id
from devconnector.config import Config
from devconnector.db import connect
from devconnector.errors import Checks
from devconnector.profiles import crud


def _debug(msg: str) -> None:
    print(f"[api.profile] {msg}")


router = APIRouter(prefix="/profile", tags=["profile"])


class ProfileRequest(BaseModel):
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    status: Optional[str] = None
    githubusername: Optional[str] = None
    # Comma-delimited string (as sent by forms) or a list.
    skills: Optional[Union[str, List[str]]] = None
    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None


class _DatedEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: Optional[str] = Field(None, alias="from")
    to: Optional[str] = None
    current: Optional[bool] = False
    description: Optional[str] = None


class ExperienceRequest(_DatedEntry):
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None


class EducationRequest(_DatedEntry):
    school: Optional[str] = None
    degree: Optional[str] = None
    fieldofstudy: Optional[str] = None


@router.get("/me")
def get_my_profile(
    user_id: str = Depends(get_current_user_id),
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        doc = crud.require_profile(conn, user_id)
        return crud.populate_one(conn, doc)


@router.post("")
def upsert_profile(
    payload: ProfileRequest,
    user: Dict[str, Any] = Depends(get_current_user),
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    """Create the caller's profile, or overwrite only the fields supplied.

    A still-valid token of a deleted account gets 404 "User not found".
    """
    data = payload.model_dump()
    checks = Checks()
    checks.require(data.get("status"), "status", "Status is required")
    checks.check(bool(crud.parse_skills(data.get("skills"))), "skills", "Skills is required")
    checks.raise_if_any()

    fields = crud.build_profile_fields(data)
    with connect(cfg.DB_DSN) as conn:
        doc = crud.upsert_profile(conn, str(user["id"]), fields)
        return crud.populate_one(conn, doc)


@router.get("")
def list_profiles(cfg: Config = Depends(get_config)) -> List[Dict[str, Any]]:
    with connect(cfg.DB_DSN) as conn:
        return crud.populate(conn, crud.list_profiles(conn))


@router.get("/user/{user_id}")
def get_profile_by_user(user_id: str, cfg: Config = Depends(get_config)) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        doc = crud.require_profile(conn, user_id, msg="Profile not found")
        return crud.populate_one(conn, doc)


@router.delete("")
def delete_account(
    user_id: str = Depends(get_current_user_id),
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    """Delete profile and user. The user's posts stay in the feed."""
    with connect(cfg.DB_DSN) as conn:
        crud.delete_account(conn, user_id)
    _debug(f"Deleted account id={user_id}")
    return {"msg": "User deleted"}


@router.put("/experience")
def add_experience(
    payload: ExperienceRequest,
    user_id: str = Depends(get_current_user_id),
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    data = payload.model_dump(by_alias=True)
    checks = Checks()
    checks.require(data.get("title"), "title", "Title is required")
    checks.require(data.get("company"), "company", "Company is required")
    checks.require(data.get("from"), "from", "From date is required")
    checks.raise_if_any()

    with connect(cfg.DB_DSN) as conn:
        doc = crud.add_experience(conn, user_id, data)
        return crud.populate_one(conn, doc)


@router.delete("/experience/{exp_id}")
def delete_experience(
    exp_id: str,
    user_id: str = Depends(get_current_user_id),
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        doc = crud.remove_experience(conn, user_id, exp_id)
        return crud.populate_one(conn, doc)


@router.put("/education")
def add_education(
    payload: EducationRequest,
    user_id: str = Depends(get_current_user_id),
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    data = payload.model_dump(by_alias=True)
    checks = Checks()
    checks.require(data.get("school"), "school", "School is required")
    checks.require(data.get("degree"), "degree", "Degree is required")
    checks.require(data.get("fieldofstudy"), "fieldofstudy", "Field of study is required")
    checks.require(data.get("from"), "from", "From date is required")
    checks.raise_if_any()

    with connect(cfg.DB_DSN) as conn:
        doc = crud.add_education(conn, user_id, data)
        return crud.populate_one(conn, doc)


@router.delete("/education/{edu_id}")
def delete_education(
    edu_id: str,
    user_id: str = Depends(get_current_user_id),
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    with connect(cfg.DB_DSN) as conn:
        doc = crud.remove_education(conn, user_id, edu_id)
        return crud.populate_one(conn, doc)
