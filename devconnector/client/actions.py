"""Action creators.

Each creator returns a thunk `(dispatch, get_state, services)` that calls
the API and dispatches plain actions with the result. `services` is the
`ClientServices` the store was configured with.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from devconnector.errors import INVALID_TOKEN_MSG, NO_TOKEN_MSG
from devconnector.util.hashing import new_id

from . import types as t
from .api import ApiClient, ApiRequestError, TokenStorage


Dispatch = Callable[[Any], Any]


@dataclass
class ClientServices:
    api: ApiClient
    tokens: TokenStorage
    # Seconds before an alert removes itself; None keeps alerts until removed.
    alert_timeout: Optional[float] = 5.0


def _error_payload(err: ApiRequestError) -> Dict[str, Any]:
    return {"msg": err.msg, "status": err.status}


def _is_session_error(err: ApiRequestError) -> bool:
    return err.status == 401 and err.msg in (NO_TOKEN_MSG, INVALID_TOKEN_MSG)


def _drop_session(services: ClientServices) -> None:
    services.tokens.clear()
    services.api.set_auth_token(None)


def _fail(dispatch: Dispatch, services: ClientServices, err: ApiRequestError, fail_type: str) -> None:
    """Alert on field errors, report the failure, and log out on a dead session."""
    for e in err.errors:
        dispatch(set_alert(str(e.get("msg")), "danger"))
    dispatch({"type": fail_type, "payload": _error_payload(err)})
    if _is_session_error(err):
        _drop_session(services)
        dispatch({"type": t.AUTH_ERROR})


# -----------------------------
# Alerts
# -----------------------------


def set_alert(msg: str, alert_type: str, timeout: Optional[float] = None):
    def thunk(dispatch: Dispatch, get_state: Callable[[], Any], services: ClientServices) -> str:
        alert_id = new_id()
        dispatch({"type": t.SET_ALERT, "payload": {"id": alert_id, "msg": msg, "alert_type": alert_type}})

        delay = timeout if timeout is not None else (services.alert_timeout if services else None)
        if delay:
            timer = threading.Timer(delay, dispatch, args=({"type": t.REMOVE_ALERT, "payload": alert_id},))
            timer.daemon = True
            timer.start()
        return alert_id

    return thunk


def remove_alert(alert_id: str) -> Dict[str, Any]:
    return {"type": t.REMOVE_ALERT, "payload": alert_id}


# -----------------------------
# Auth
# -----------------------------


def load_user():
    def thunk(dispatch: Dispatch, get_state: Callable[[], Any], services: ClientServices) -> None:
        token = services.tokens.get()
        if token:
            services.api.set_auth_token(token)
        try:
            user = services.api.get("/api/auth")
        except ApiRequestError:
            _drop_session(services)
            dispatch({"type": t.AUTH_ERROR})
            return
        dispatch({"type": t.USER_LOADED, "payload": user})

    return thunk


def _authenticate(path: str, body: Dict[str, Any], ok_type: str, fail_type: str):
    def thunk(dispatch: Dispatch, get_state: Callable[[], Any], services: ClientServices) -> None:
        try:
            res = services.api.post(path, body)
        except ApiRequestError as err:
            for e in err.errors:
                dispatch(set_alert(str(e.get("msg")), "danger"))
            _drop_session(services)
            dispatch({"type": fail_type})
            return
        services.tokens.set(res["token"])
        dispatch({"type": ok_type, "payload": res})
        dispatch(load_user())

    return thunk


def register(name: str, email: str, password: str):
    body = {"name": name, "email": email, "password": password}
    return _authenticate("/api/users", body, t.REGISTER_SUCCESS, t.REGISTER_FAIL)


def login(email: str, password: str):
    body = {"email": email, "password": password}
    return _authenticate("/api/auth", body, t.LOGIN_SUCCESS, t.LOGIN_FAIL)


def logout():
    """Client-side only: the server keeps no session to end."""

    def thunk(dispatch: Dispatch, get_state: Callable[[], Any], services: ClientServices) -> None:
        _drop_session(services)
        dispatch({"type": t.CLEAR_PROFILE})
        dispatch({"type": t.LOGOUT})

    return thunk


# -----------------------------
# Profile
# -----------------------------


def _profile_call(method: str, path: str, body: Any, ok_type: str, alert: Optional[str] = None):
    def thunk(dispatch: Dispatch, get_state: Callable[[], Any], services: ClientServices) -> None:
        try:
            res = services.api.request(method, path, body)
        except ApiRequestError as err:
            _fail(dispatch, services, err, t.PROFILE_ERROR)
            return
        dispatch({"type": ok_type, "payload": res})
        if alert:
            dispatch(set_alert(alert, "success"))

    return thunk


def get_current_profile():
    return _profile_call("GET", "/api/profile/me", None, t.GET_PROFILE)


def get_profiles():
    def thunk(dispatch: Dispatch, get_state: Callable[[], Any], services: ClientServices) -> None:
        dispatch({"type": t.CLEAR_PROFILE})
        dispatch(_profile_call("GET", "/api/profile", None, t.GET_PROFILES))

    return thunk


def get_profile_by_id(user_id: str):
    return _profile_call("GET", f"/api/profile/user/{user_id}", None, t.GET_PROFILE)


def create_profile(form: Dict[str, Any], edit: bool = False):
    return _profile_call("POST", "/api/profile", form, t.GET_PROFILE, "Profile Updated" if edit else "Profile Created")


def add_experience(form: Dict[str, Any]):
    return _profile_call("PUT", "/api/profile/experience", form, t.UPDATE_PROFILE, "Experience Added")


def add_education(form: Dict[str, Any]):
    return _profile_call("PUT", "/api/profile/education", form, t.UPDATE_PROFILE, "Education Added")


def delete_experience(exp_id: str):
    return _profile_call("DELETE", f"/api/profile/experience/{exp_id}", None, t.UPDATE_PROFILE, "Experience Removed")


def delete_education(edu_id: str):
    return _profile_call("DELETE", f"/api/profile/education/{edu_id}", None, t.UPDATE_PROFILE, "Education Removed")


def delete_account():
    def thunk(dispatch: Dispatch, get_state: Callable[[], Any], services: ClientServices) -> None:
        try:
            services.api.delete("/api/profile")
        except ApiRequestError as err:
            _fail(dispatch, services, err, t.PROFILE_ERROR)
            return
        _drop_session(services)
        dispatch({"type": t.CLEAR_PROFILE})
        dispatch({"type": t.ACCOUNT_DELETED})
        dispatch(set_alert("Your account has been permanently deleted", "info"))

    return thunk


# -----------------------------
# Posts
# -----------------------------


def get_posts():
    def thunk(dispatch: Dispatch, get_state: Callable[[], Any], services: ClientServices) -> None:
        try:
            posts = services.api.get("/api/posts")
        except ApiRequestError as err:
            _fail(dispatch, services, err, t.POST_ERROR)
            return
        dispatch({"type": t.GET_POSTS, "payload": posts})

    return thunk


def get_post(post_id: str):
    def thunk(dispatch: Dispatch, get_state: Callable[[], Any], services: ClientServices) -> None:
        try:
            post = services.api.get(f"/api/posts/{post_id}")
        except ApiRequestError as err:
            _fail(dispatch, services, err, t.POST_ERROR)
            return
        dispatch({"type": t.GET_POST, "payload": post})

    return thunk


def add_post(form: Dict[str, Any]):
    def thunk(dispatch: Dispatch, get_state: Callable[[], Any], services: ClientServices) -> None:
        try:
            post = services.api.post("/api/posts", form)
        except ApiRequestError as err:
            _fail(dispatch, services, err, t.POST_ERROR)
            return
        dispatch({"type": t.ADD_POST, "payload": post})
        dispatch(set_alert("Post Created", "success"))

    return thunk


def delete_post(post_id: str):
    def thunk(dispatch: Dispatch, get_state: Callable[[], Any], services: ClientServices) -> None:
        try:
            services.api.delete(f"/api/posts/{post_id}")
        except ApiRequestError as err:
            _fail(dispatch, services, err, t.POST_ERROR)
            return
        dispatch({"type": t.DELETE_POST, "payload": post_id})
        dispatch(set_alert("Post Removed", "success"))

    return thunk


def _update_likes(post_id: str, path: str):
    def thunk(dispatch: Dispatch, get_state: Callable[[], Any], services: ClientServices) -> None:
        try:
            likes = services.api.put(path)
        except ApiRequestError as err:
            _fail(dispatch, services, err, t.POST_ERROR)
            return
        dispatch({"type": t.UPDATE_LIKES, "payload": {"id": post_id, "likes": likes}})

    return thunk


def add_like(post_id: str):
    return _update_likes(post_id, f"/api/posts/like/{post_id}")


def remove_like(post_id: str):
    return _update_likes(post_id, f"/api/posts/unlike/{post_id}")


def add_comment(post_id: str, form: Dict[str, Any]):
    def thunk(dispatch: Dispatch, get_state: Callable[[], Any], services: ClientServices) -> None:
        try:
            comments = services.api.post(f"/api/posts/comment/{post_id}", form)
        except ApiRequestError as err:
            _fail(dispatch, services, err, t.POST_ERROR)
            return
        dispatch({"type": t.ADD_COMMENT, "payload": {"id": post_id, "comments": comments}})
        dispatch(set_alert("Comment Added", "success"))

    return thunk


def delete_comment(post_id: str, comment_id: str):
    def thunk(dispatch: Dispatch, get_state: Callable[[], Any], services: ClientServices) -> None:
        try:
            services.api.delete(f"/api/posts/comment/{post_id}/{comment_id}")
        except ApiRequestError as err:
            _fail(dispatch, services, err, t.POST_ERROR)
            return
        dispatch({"type": t.REMOVE_COMMENT, "payload": {"id": post_id, "comment_id": comment_id}})
        dispatch(set_alert("Comment Removed", "success"))

    return thunk
