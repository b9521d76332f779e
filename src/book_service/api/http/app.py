"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.responses import JSONResponse

from book_service import __version__
from book_service.api.http.app_data import ApplicationDependencies
from book_service.api.http.routers.health import router as health_router
from book_service.api.http.routers.service.book import router as book_router
from book_service.api.utils.app_startup import configure_logging
from book_service.core.exceptions import BookServiceError
from book_service.core.services import DbManageService, DbSessionService
from book_service.runtime.context import get_config

__all__ = ["app", "create_app", "startup", "shutdown"]


# --- Lifecycle hooks ---
async def startup(app: FastAPI) -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    # Tests install their own dependencies before the app starts.
    if getattr(app.state, "app_dependencies", None) is None:
        app.state.app_dependencies = ApplicationDependencies(
            database_service=DbSessionService()
        )

    deps: ApplicationDependencies = app.state.app_dependencies
    DbManageService(deps.database_service.engine).create_all()


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    deps: ApplicationDependencies | None = getattr(app.state, "app_dependencies", None)
    if deps is not None:
        deps.database_service.dispose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup(app)
    try:
        yield
    finally:
        await shutdown(app)


# --- Error rendering ---
async def handle_book_service_error(request: Request, exc: BookServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        # The cause was logged where it was translated; never echo it to the client.
        logger.bind(status_code=exc.status_code).error(
            "request.failed: {}", exc.message
        )
    else:
        logger.bind(status_code=exc.status_code).info(
            "request.rejected: {}", exc.message
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.bind(status_code=400, errors=exc.errors()).info("request.invalid_input")
    return JSONResponse(status_code=400, content={"error": "Invalid input"})


# --- Request logging middleware ---
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            # Catch-all: log the real cause, answer with a generic body.
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error"},
                headers={"X-Request-ID": request_id},
            )


def create_app() -> FastAPI:
    """Build a configured FastAPI application."""
    config = get_config()
    configure_logging()

    app = FastAPI(
        title=config.app.name,
        version=__version__,
        lifespan=lifespan,
        docs_url=None if config.app.environment == "production" else "/docs",
        redoc_url=None if config.app.environment == "production" else "/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    app.middleware("http")(log_requests)

    app.add_exception_handler(BookServiceError, handle_book_service_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    app.include_router(health_router)
    app.include_router(book_router, prefix="/api")

    return app


app = create_app()
