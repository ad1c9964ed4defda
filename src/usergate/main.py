"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan loads the record store at startup. Middleware, CORS,
error handlers and routers are all registered here.

There is no module-level app: building one needs a signing secret, and
a missing secret must fail loudly at startup rather than on import.
Run with `usergate serve` or `uvicorn usergate.main:create_app --factory`.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from usergate import __version__
from usergate.api import api_router
from usergate.auth.jwt import TokenManager
from usergate.config import Settings, get_settings
from usergate.db.store import UserStore
from usergate.errors import InvalidInput, UserGateError
from usergate.log import configure_logging
from usergate.middleware.request_id import RequestIdMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs
    at shutdown. A store that can't be read aborts startup.
    """
    settings: Settings = app.state.settings
    logger.info(
        "usergate.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
        store=settings.store_path,
    )
    await app.state.store.load()

    yield

    logger.info("usergate.shutdown")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message},
    )


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())[1:])
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or InvalidInput.default_message


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_json)

    app = FastAPI(
        title="UserGate",
        description="Token-authenticated user accounts over a JSON record store",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.tokens = TokenManager(settings)
    app.state.store = UserStore(settings.store_path)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    # ── Error mapping ─────────────────────────────────────────

    @app.exception_handler(UserGateError)
    async def handle_usergate_error(_: Request, exc: UserGateError):
        if exc.status_code >= 500:
            logger.error("usergate.request_failed", kind=exc.kind.value, error=exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_: Request, exc: RequestValidationError):
        return _error(InvalidInput.status_code, _validation_message(exc))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(_: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    app.include_router(api_router)

    return app
