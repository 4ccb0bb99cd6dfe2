"""Pure slice reducers: (state, action) -> new state.

Reducers never mutate their input and never touch storage or the network;
token persistence lives in the actions.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from . import types as t
from .store import Action, combine_reducers


def alert(state: Optional[List[Dict[str, Any]]], action: Action) -> List[Dict[str, Any]]:
    if state is None:
        state = []
    kind = action.get("type")
    payload = action.get("payload")
    if kind == t.SET_ALERT:
        return [*state, payload]
    if kind == t.REMOVE_ALERT:
        return [a for a in state if a.get("id") != payload]
    return state


AUTH_INITIAL: Dict[str, Any] = {
    "token": None,
    "is_authenticated": None,
    "loading": True,
    "user": None,
}


def auth(state: Optional[Dict[str, Any]], action: Action) -> Dict[str, Any]:
    if state is None:
        state = dict(AUTH_INITIAL)
    kind = action.get("type")
    payload = action.get("payload")
    if kind == t.USER_LOADED:
        return {**state, "is_authenticated": True, "loading": False, "user": payload}
    if kind in (t.REGISTER_SUCCESS, t.LOGIN_SUCCESS):
        return {**state, **(payload or {}), "is_authenticated": True, "loading": False}
    if kind in (t.REGISTER_FAIL, t.AUTH_ERROR, t.LOGIN_FAIL, t.LOGOUT, t.ACCOUNT_DELETED):
        return {**state, "token": None, "is_authenticated": False, "loading": False, "user": None}
    return state


PROFILE_INITIAL: Dict[str, Any] = {
    "profile": None,
    "profiles": [],
    "loading": True,
    "error": {},
}


def profile(state: Optional[Dict[str, Any]], action: Action) -> Dict[str, Any]:
    if state is None:
        state = dict(PROFILE_INITIAL)
    kind = action.get("type")
    payload = action.get("payload")
    if kind in (t.GET_PROFILE, t.UPDATE_PROFILE):
        return {**state, "profile": payload, "loading": False}
    if kind == t.GET_PROFILES:
        return {**state, "profiles": list(payload or []), "loading": False}
    if kind == t.PROFILE_ERROR:
        return {**state, "error": payload, "loading": False, "profile": None}
    if kind == t.CLEAR_PROFILE:
        return {**state, "profile": None, "loading": False}
    return state


POST_INITIAL: Dict[str, Any] = {
    "posts": [],
    "post": None,
    "loading": True,
    "error": {},
}


def post(state: Optional[Dict[str, Any]], action: Action) -> Dict[str, Any]:
    if state is None:
        state = dict(POST_INITIAL)
    kind = action.get("type")
    payload = action.get("payload")
    if kind == t.GET_POSTS:
        return {**state, "posts": list(payload or []), "loading": False}
    if kind == t.GET_POST:
        return {**state, "post": payload, "loading": False}
    if kind == t.ADD_POST:
        return {**state, "posts": [payload, *state["posts"]], "loading": False}
    if kind == t.DELETE_POST:
        return {**state, "posts": [p for p in state["posts"] if p.get("id") != payload], "loading": False}
    if kind == t.POST_ERROR:
        return {**state, "error": payload, "loading": False}
    if kind == t.UPDATE_LIKES:
        posts = [
            {**p, "likes": payload["likes"]} if p.get("id") == payload["id"] else p
            for p in state["posts"]
        ]
        current = state["post"]
        if current is not None and current.get("id") == payload["id"]:
            current = {**current, "likes": payload["likes"]}
        return {**state, "posts": posts, "post": current, "loading": False}
    if kind == t.ADD_COMMENT:
        return _set_comments(state, payload["id"], lambda _: list(payload["comments"]))
    if kind == t.REMOVE_COMMENT:
        return _set_comments(
            state,
            payload["id"],
            lambda comments: [c for c in comments if c.get("id") != payload["comment_id"]],
        )
    return state


def _set_comments(state: Dict[str, Any], post_id: str, update) -> Dict[str, Any]:
    """Apply `update` to the comments of `post_id` in both the list and the open post."""
    posts = [
        {**p, "comments": update(p.get("comments") or [])} if p.get("id") == post_id else p
        for p in state["posts"]
    ]
    current = state["post"]
    if current is not None and current.get("id") == post_id:
        current = {**current, "comments": update(current.get("comments") or [])}
    return {**state, "posts": posts, "post": current, "loading": False}


root_reducer = combine_reducers({"alert": alert, "auth": auth, "profile": profile, "post": post})
