"""HTTP access to the DevConnector API for the client store.

`ApiClient` wraps a `requests.Session` (any object exposing
`request(method, url, json=..., headers=...)` with a `status_code` /
`json()` response works, e.g. FastAPI's TestClient). The session token is
sent as `x-auth-token` on every call once set, and `TokenStorage` keeps it
across runs.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import requests


DEFAULT_TIMEOUT = 30


class ApiRequestError(Exception):
    """Non-2xx answer from the API."""

    def __init__(self, status: int, data: Any, reason: str = ""):
        super().__init__(f"HTTP {status} {reason}".strip())
        self.status = int(status)
        self.data = data
        self.reason = reason

    @property
    def errors(self) -> list:
        """Field errors of a 400 validation answer (may be empty)."""
        if isinstance(self.data, dict) and isinstance(self.data.get("errors"), list):
            return self.data["errors"]
        return []

    @property
    def msg(self) -> str:
        if isinstance(self.data, dict) and self.data.get("msg"):
            return str(self.data["msg"])
        return self.reason or f"HTTP {self.status}"


class TokenStorage:
    """Session token kept in a file between runs (memory only when path is empty)."""

    def __init__(self, path: str | os.PathLike[str] | None = None):
        self._path = Path(path) if path else None
        self._token: Optional[str] = None
        if self._path is not None and self._path.exists():
            self._token = self._path.read_text(encoding="utf-8").strip() or None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token
        if self._path is not None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(token, encoding="utf-8")

    def clear(self) -> None:
        self._token = None
        if self._path is not None and self._path.exists():
            self._path.unlink()


class ApiClient:
    def __init__(
        self,
        base_url: str = "",
        *,
        session: Any = None,
        token_header: str = "x-auth-token",
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.token_header = token_header
        self.timeout = timeout
        self._token: Optional[str] = None

    def set_auth_token(self, token: Optional[str]) -> None:
        """Attach (or with None, detach) the token sent on every request."""
        self._token = token or None

    @property
    def auth_token(self) -> Optional[str]:
        return self._token

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers[self.token_header] = self._token
        return headers

    def request(self, method: str, path: str, body: Any = None) -> Any:
        kwargs: Dict[str, Any] = {"headers": self._headers()}
        if body is not None:
            kwargs["json"] = body
        if isinstance(self.session, requests.Session):
            kwargs["timeout"] = self.timeout

        resp = self.session.request(method, f"{self.base_url}{path}", **kwargs)
        try:
            data = resp.json()
        except ValueError:
            data = None

        status = int(resp.status_code)
        if status >= 400:
            reason = getattr(resp, "reason", None) or getattr(resp, "reason_phrase", "") or ""
            raise ApiRequestError(status, data, str(reason))
        return data

    def get(self, path: str) -> Any:
        return self.request("GET", path)

    def post(self, path: str, body: Any = None) -> Any:
        return self.request("POST", path, body)

    def put(self, path: str, body: Any = None) -> Any:
        return self.request("PUT", path, body)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
