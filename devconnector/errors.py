"""API error taxonomy.

Handlers raise these; `api.server` turns them into responses:

- ValidationFailed -> 400 {"errors": [{"msg": ..., "param": ...}]}
- everything else  -> status_code {"msg": ...}
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


# Auth gate answers; the client treats these as "session is gone".
NO_TOKEN_MSG = "No token, authorization denied"
INVALID_TOKEN_MSG = "Token is not valid"


class ApiError(Exception):
    status_code: int = 500

    def __init__(self, msg: str, *, status_code: Optional[int] = None):
        super().__init__(msg)
        self.msg = msg
        if status_code is not None:
            self.status_code = int(status_code)

    def to_payload(self) -> Dict[str, Any]:
        return {"msg": self.msg}


class ValidationFailed(ApiError):
    status_code = 400

    def __init__(self, errors: List[Dict[str, Any]]):
        super().__init__("; ".join(str(e.get("msg")) for e in errors) or "invalid_request")
        self.errors = errors

    @classmethod
    def single(cls, msg: str, param: Optional[str] = None) -> "ValidationFailed":
        err: Dict[str, Any] = {"msg": msg}
        if param:
            err["param"] = param
        return cls([err])

    def to_payload(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class Unauthorized(ApiError):
    status_code = 401


class Forbidden(ApiError):
    # The API reports ownership failures as 401, not 403.
    status_code = 401


class NotFound(ApiError):
    status_code = 404


class Conflict(ApiError):
    status_code = 400


class StaleWrite(Conflict):
    status_code = 409

    def __init__(self, msg: str = "Resource was modified by another request, please retry"):
        super().__init__(msg)


class Checks:
    """Collects field errors the way a form validator would, then raises once."""

    def __init__(self) -> None:
        self.errors: List[Dict[str, Any]] = []

    def require(self, value: Any, param: str, msg: str) -> None:
        if value is None or (isinstance(value, str) and not value.strip()):
            self.errors.append({"msg": msg, "param": param})

    def check(self, ok: bool, param: str, msg: str) -> None:
        if not ok:
            self.errors.append({"msg": msg, "param": param})

    def raise_if_any(self) -> None:
        if self.errors:
            raise ValidationFailed(list(self.errors))
