"""Client-side state for DevConnector.

A `Store` holds four slices (alert, auth, profile, post) updated by pure
reducers. Action creators in `actions` wrap API calls and dispatch their
results. Nothing here is a module-level singleton: build a store with
`configure_store` and pass it around.
"""

from __future__ import annotations

from typing import Any, Optional

from devconnector.config import Config

from .actions import ClientServices
from .api import ApiClient, ApiRequestError, TokenStorage
from .reducers import AUTH_INITIAL, root_reducer
from .store import Store, combine_reducers


def configure_store(
    api: ApiClient,
    tokens: Optional[TokenStorage] = None,
    *,
    alert_timeout: Optional[float] = 5.0,
) -> Store:
    """Store wired to `api`, with any persisted token restored into the auth slice."""
    tokens = tokens or TokenStorage()
    token = tokens.get()
    if token:
        api.set_auth_token(token)
    initial: dict[str, Any] = {"auth": {**AUTH_INITIAL, "token": token}}
    services = ClientServices(api=api, tokens=tokens, alert_timeout=alert_timeout)
    return Store(root_reducer, initial, extra=services)


def store_from_config(cfg: Config) -> Store:
    api = ApiClient(cfg.API_BASE_URL, token_header=cfg.AUTH_HEADER_NAME)
    return configure_store(
        api,
        TokenStorage(cfg.CLIENT_TOKEN_PATH or None),
        alert_timeout=cfg.ALERT_TIMEOUT_SECONDS or None,
    )


__all__ = [
    "ApiClient",
    "ApiRequestError",
    "ClientServices",
    "Store",
    "TokenStorage",
    "combine_reducers",
    "configure_store",
    "store_from_config",
]
