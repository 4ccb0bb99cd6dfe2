import pytest

from devconnector.client import ApiClient, Store, TokenStorage, combine_reducers, configure_store
from devconnector.client import actions
from devconnector.client import types as t
from devconnector.client.reducers import alert, auth, post, profile, root_reducer


# -----------------------------
# Reducers
# -----------------------------


def test_reducers_do_not_mutate_state():
    state = root_reducer(None, {"type": "@@INIT"})
    before = {k: (list(v) if isinstance(v, list) else dict(v)) for k, v in state.items()}

    nxt = root_reducer(state, {"type": t.SET_ALERT, "payload": {"id": "1", "msg": "hi", "alert_type": "info"}})
    assert nxt is not state
    assert nxt["alert"] == [{"id": "1", "msg": "hi", "alert_type": "info"}]
    assert state == before


def test_unknown_action_returns_same_state():
    state = root_reducer(None, {"type": "@@INIT"})
    assert root_reducer(state, {"type": "SOMETHING_ELSE"}) is state


def test_alert_add_and_remove():
    s = alert(None, {"type": t.SET_ALERT, "payload": {"id": "a"}})
    s = alert(s, {"type": t.SET_ALERT, "payload": {"id": "b"}})
    assert alert(s, {"type": t.REMOVE_ALERT, "payload": "a"}) == [{"id": "b"}]


def test_auth_transitions():
    s = auth(None, {"type": "@@INIT"})
    assert s["loading"] is True and s["is_authenticated"] is None

    s = auth(s, {"type": t.LOGIN_SUCCESS, "payload": {"token": "tok"}})
    assert s["token"] == "tok" and s["is_authenticated"] is True

    s = auth(s, {"type": t.USER_LOADED, "payload": {"id": "u"}})
    assert s["user"] == {"id": "u"}

    s = auth(s, {"type": t.AUTH_ERROR})
    assert s == {"token": None, "is_authenticated": False, "loading": False, "user": None}


def test_profile_error_clears_profile():
    s = profile(None, {"type": t.GET_PROFILE, "payload": {"id": "p"}})
    s = profile(s, {"type": t.PROFILE_ERROR, "payload": {"msg": "x", "status": 400}})
    assert s["profile"] is None
    assert s["error"] == {"msg": "x", "status": 400}


def test_post_likes_update_list_and_current_post():
    s = post(None, {"type": t.GET_POSTS, "payload": [{"id": "1", "likes": []}, {"id": "2", "likes": []}]})
    s = post(s, {"type": t.GET_POST, "payload": {"id": "1", "likes": [], "comments": []}})
    s = post(s, {"type": t.UPDATE_LIKES, "payload": {"id": "1", "likes": [{"user": "u"}]}})
    assert s["posts"][0]["likes"] == [{"user": "u"}]
    assert s["posts"][1]["likes"] == []
    assert s["post"]["likes"] == [{"user": "u"}]

    s = post(s, {"type": t.DELETE_POST, "payload": "2"})
    assert [p["id"] for p in s["posts"]] == ["1"]


def test_comments_update_list_and_current_post():
    s = post(None, {"type": t.GET_POSTS, "payload": [{"id": "1", "comments": []}, {"id": "2", "comments": []}]})
    s = post(s, {"type": t.GET_POST, "payload": {"id": "1", "likes": [], "comments": []}})

    c = {"id": "c1", "text": "hi"}
    s = post(s, {"type": t.ADD_COMMENT, "payload": {"id": "1", "comments": [c]}})
    assert s["posts"][0]["comments"] == [c]
    assert s["posts"][1]["comments"] == []
    assert s["post"]["comments"] == [c]

    s = post(s, {"type": t.REMOVE_COMMENT, "payload": {"id": "1", "comment_id": "c1"}})
    assert s["posts"][0]["comments"] == []
    assert s["post"]["comments"] == []


def test_comments_on_another_post_leave_open_post_alone():
    s = post(None, {"type": t.GET_POSTS, "payload": [{"id": "1", "comments": []}, {"id": "2", "comments": []}]})
    s = post(s, {"type": t.GET_POST, "payload": {"id": "1", "comments": []}})
    s = post(s, {"type": t.ADD_COMMENT, "payload": {"id": "2", "comments": [{"id": "c"}]}})
    assert s["post"]["comments"] == []
    assert s["posts"][1]["comments"] == [{"id": "c"}]


def test_combine_reducers_routes_by_slice():
    def counter(state, action):
        state = state or 0
        return state + 1 if action["type"] == "INC" else state

    root = combine_reducers({"a": counter, "b": counter})
    s = root(None, {"type": "INC"})
    assert s == {"a": 1, "b": 1}


# -----------------------------
# Store
# -----------------------------


def test_store_dispatch_and_subscribe():
    store = Store(root_reducer)
    seen = []
    unsubscribe = store.subscribe(lambda: seen.append(len(store.get_state()["alert"])))

    store.dispatch({"type": t.SET_ALERT, "payload": {"id": "1"}})
    unsubscribe()
    store.dispatch({"type": t.SET_ALERT, "payload": {"id": "2"}})

    assert seen == [1]
    assert len(store.get_state()["alert"]) == 2


def test_store_rejects_untyped_actions():
    with pytest.raises(ValueError):
        Store(root_reducer).dispatch({"payload": 1})


def test_token_storage_persists_between_instances(tmp_path):
    path = tmp_path / "token"
    TokenStorage(path).set("abc")
    assert TokenStorage(path).get() == "abc"
    TokenStorage(path).clear()
    assert not path.exists()
    assert TokenStorage(path).get() is None


# -----------------------------
# Actions against the API
# -----------------------------


@pytest.fixture
def tokens(tmp_path):
    return TokenStorage(tmp_path / "token")


@pytest.fixture
def store(client, tokens):
    return configure_store(ApiClient("", session=client), tokens, alert_timeout=None)


def test_register_loads_user(store, tokens):
    store.dispatch(actions.register("A", "a@x.com", "secret1"))
    state = store.get_state()["auth"]
    assert state["is_authenticated"] is True
    assert state["token"] == tokens.get()
    assert state["user"]["email"] == "a@x.com"


def test_failed_register_alerts_each_error(store, tokens):
    store.dispatch(actions.register("", "bad", "1"))
    state = store.get_state()
    assert [a["msg"] for a in state["alert"]] == [
        "Name is required",
        "Please include a valid email",
        "Please enter a password with 6 or more characters",
    ]
    assert all(a["alert_type"] == "danger" for a in state["alert"])
    assert state["auth"]["is_authenticated"] is False
    assert tokens.get() is None


def test_persisted_token_restores_session(client, store, tokens, tmp_path):
    store.dispatch(actions.register("A", "a@x.com", "secret1"))

    restored = configure_store(ApiClient("", session=client), TokenStorage(tmp_path / "token"), alert_timeout=None)
    assert restored.get_state()["auth"]["token"] == tokens.get()
    restored.dispatch(actions.load_user())
    assert restored.get_state()["auth"]["user"]["email"] == "a@x.com"


def test_load_user_without_token_is_auth_error(store):
    store.dispatch(actions.load_user())
    assert store.get_state()["auth"]["is_authenticated"] is False


def test_profile_and_experience_flow(store):
    store.dispatch(actions.register("A", "a@x.com", "secret1"))

    store.dispatch(actions.get_current_profile())
    assert store.get_state()["profile"]["error"] == {"msg": "There is no profile for this user", "status": 400}

    store.dispatch(actions.create_profile({"status": "Dev", "skills": "py, go"}))
    assert store.get_state()["profile"]["profile"]["skills"] == ["py", "go"]

    store.dispatch(actions.add_experience({"title": "Eng", "company": "Acme", "from": "2020-01-01"}))
    exp = store.get_state()["profile"]["profile"]["experience"]
    assert [e["title"] for e in exp] == ["Eng"]

    store.dispatch(actions.delete_experience(exp[0]["id"]))
    assert store.get_state()["profile"]["profile"]["experience"] == []
    assert [a["msg"] for a in store.get_state()["alert"]] == [
        "Profile Created",
        "Experience Added",
        "Experience Removed",
    ]

    store.dispatch(actions.get_profiles())
    assert len(store.get_state()["profile"]["profiles"]) == 1


def test_posts_flow(store):
    store.dispatch(actions.register("A", "a@x.com", "secret1"))
    store.dispatch(actions.add_post({"text": "hello"}))
    posts = store.get_state()["post"]["posts"]
    assert [p["text"] for p in posts] == ["hello"]
    pid = posts[0]["id"]

    store.dispatch(actions.add_like(pid))
    assert len(store.get_state()["post"]["posts"][0]["likes"]) == 1

    store.dispatch(actions.add_like(pid))
    assert store.get_state()["post"]["error"] == {"msg": "Post already liked by this user", "status": 400}

    store.dispatch(actions.remove_like(pid))
    assert store.get_state()["post"]["posts"][0]["likes"] == []

    store.dispatch(actions.get_post(pid))
    store.dispatch(actions.add_comment(pid, {"text": "first!"}))
    comments = store.get_state()["post"]["post"]["comments"]
    assert [c["text"] for c in comments] == ["first!"]
    assert store.get_state()["post"]["posts"][0]["comments"] == comments

    store.dispatch(actions.delete_comment(pid, comments[0]["id"]))
    assert store.get_state()["post"]["post"]["comments"] == []
    assert store.get_state()["post"]["posts"][0]["comments"] == []

    store.dispatch(actions.delete_post(pid))
    assert store.get_state()["post"]["posts"] == []


def test_invalid_token_logs_out(store, tokens):
    tokens.set("garbage")
    store.extra.api.set_auth_token("garbage")
    store.dispatch({"type": t.LOGIN_SUCCESS, "payload": {"token": "garbage"}})

    store.dispatch(actions.get_posts())
    state = store.get_state()
    assert state["post"]["error"] == {"msg": "Token is not valid", "status": 401}
    assert state["auth"]["is_authenticated"] is False
    assert tokens.get() is None


def test_logout_is_client_side(store, tokens):
    store.dispatch(actions.register("A", "a@x.com", "secret1"))
    store.dispatch(actions.logout())
    assert store.get_state()["auth"]["token"] is None
    assert tokens.get() is None
    assert store.extra.api.auth_token is None


def test_delete_account(store, tokens):
    store.dispatch(actions.register("A", "a@x.com", "secret1"))
    store.dispatch(actions.delete_account())
    state = store.get_state()
    assert state["auth"]["is_authenticated"] is False
    assert state["alert"][-1]["msg"] == "Your account has been permanently deleted"
    assert tokens.get() is None
