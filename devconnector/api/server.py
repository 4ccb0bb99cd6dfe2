from __future__ import annotations

import traceback
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from devconnector import __version__
from devconnector.config import Config, load_config
from devconnector.db import init_db
from devconnector.documents import StaleDocumentError
from devconnector.errors import ApiError, StaleWrite

from . import auth, posts, profile, users


def _debug(msg: str) -> None:
    print(f"[api] {msg}")


def _param(loc: Any) -> str:
    # ("body", "email") -> "email"
    parts = [str(p) for p in (loc or ()) if p not in ("body", "query", "path")]
    return ".".join(parts)


def _install_error_handlers(app: FastAPI, cfg: Config) -> None:
    @app.exception_handler(ApiError)
    async def _api_error(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(StaleDocumentError)
    async def _stale_document(request: Request, exc: StaleDocumentError) -> JSONResponse:
        err = StaleWrite()
        return JSONResponse(status_code=err.status_code, content=err.to_payload())

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [{"msg": str(e.get("msg")), "param": _param(e.get("loc"))} for e in exc.errors()]
        return JSONResponse(status_code=400, content={"errors": errors})

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        # Detail stays in the server log; clients only see a generic message.
        _debug(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
        if cfg.DEBUG_TRACEBACKS:
            traceback.print_exception(type(exc), exc, exc.__traceback__)
        return JSONResponse(status_code=500, content={"msg": "Server Error"})


def create_app(cfg: Optional[Config] = None) -> FastAPI:
    cfg = cfg or load_config()
    app = FastAPI(title="DevConnector API", version=__version__)

    # Make config available to auth deps and routes.
    app.state.cfg = cfg

    # CORS is mainly needed for local development (SPA dev server -> API on :8000).
    cors_origins = [o.strip() for o in (cfg.CORS_ALLOW_ORIGINS or "").split(",") if o.strip()]
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.on_event("startup")
    def _on_startup() -> None:
        # Ensure schema exists.
        init_db(cfg.DB_DSN)

    _install_error_handlers(app, cfg)

    # -----------------------------
    # Health
    # -----------------------------

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"status": "ok"}

    # -----------------------------
    # API
    # -----------------------------

    app.include_router(users.router, prefix="/api")
    app.include_router(auth.router, prefix="/api")
    app.include_router(profile.router, prefix="/api")
    app.include_router(posts.router, prefix="/api")

    return app


app = create_app()
