# backoffice/main.py
from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .db import init_db
from .logging_config import configure_logging

from .middleware.request_id import RequestIDMiddleware
from .middleware.structured_logging import StructuredLoggingMiddleware

from .routers.meta import router as meta_router
from .routers.dashboard import router as dashboard_router
from .routers.properties import router as properties_router
from .routers.proprietors import router as proprietors_router
from .routers.rents import router as rents_router

API_PREFIX = "/api"


def _cors_origins() -> list[str]:
    val = getattr(settings, "cors_allow_origins", ["*"])
    if isinstance(val, str):
        v = val.strip()
        return ["*"] if v == "*" else [x.strip() for x in v.split(",") if x.strip()]
    if isinstance(val, list) and val:
        return val
    return ["*"]


def create_app() -> FastAPI:
    configure_logging()
    init_db()

    app = FastAPI(
        title="Property Back Office",
        version=getattr(settings, "app_version", "dev"),
    )

    # outermost last: request id must be set before the request log line is written
    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router, prefix=API_PREFIX)
    app.include_router(dashboard_router, prefix=API_PREFIX)

    app.include_router(properties_router, prefix=API_PREFIX)
    app.include_router(proprietors_router, prefix=API_PREFIX)
    app.include_router(rents_router, prefix=API_PREFIX)

    return app


app = create_app()
