"""Calm Typing - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from calmtype.core.config import Settings, get_settings
from calmtype.core.logging import setup_logging
from calmtype.core.middleware import setup_cors_middleware, setup_security_middleware
from calmtype.db.adapters import create_adapter
from calmtype.db.base import Base
from calmtype.routers import admin, auth, correction, guest, system, user
from calmtype.services.correction import AutoCorrector

logger = logging.getLogger(__name__)

PARAMETER_LOCATIONS = ("path", "query", "header", "cookie")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    db = create_adapter(settings)
    failed = await db.init_schema(Base.metadata)
    if failed:
        logger.error("Schema steps failed at startup: %s", ", ".join(failed))
    app.state.db = db
    if getattr(app.state, "corrector", None) is None:
        app.state.corrector = AutoCorrector.from_settings(settings)
    logger.info("Environment: %s", settings.node_env)

    yield

    await db.close()


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.info("Invalid request on %s: %s", request.url.path, errors)
        loc = errors[0].get("loc", ()) if errors else ()
        if loc and loc[0] in PARAMETER_LOCATIONS:
            return JSONResponse(status_code=400, content={"error": "Invalid request parameters"})
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(SQLAlchemyError)
    async def database_error(request: Request, exc: SQLAlchemyError):
        logger.error("Database error on %s", request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Database error"})


def create_app(settings: Settings | None = None, corrector: AutoCorrector | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Calm typing: users, guest sessions, typing history and passages",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.corrector = corrector

    setup_security_middleware(app, settings)
    setup_cors_middleware(app, settings)
    register_exception_handlers(app)

    app.include_router(system.router)
    app.include_router(auth.router)
    app.include_router(user.router)
    app.include_router(guest.router)
    app.include_router(admin.router)
    app.include_router(correction.router)
    return app


app = create_app()
