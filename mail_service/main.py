"""
Mail Service - FastAPI Application.

Application factory, middleware, exception handlers, health probe, and the
process entry point. Settings are loaded and validated before the listener binds.

Architecture Layer: Infrastructure
Principles: 12-Factor App, Dependency Injection, Configuration Externalization
"""
from __future__ import annotations

import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from . import __version__
from .config import Environment, MailServiceSettings, load_settings
from .domain import NotificationDispatcher, create_dispatcher
from .exceptions import MailServiceError, MalformedInputError, StartupConfigurationError

logger = structlog.get_logger(__name__)

# Fixed cross-origin policy applied to every response, pre-flight included
CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def configure_logging(settings: MailServiceSettings) -> None:
    """Configure structured logging for the mail service."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.environment == Environment.DEVELOPMENT:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def create_app(
    settings: MailServiceSettings,
    dispatcher: NotificationDispatcher | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging(settings)
    app = FastAPI(
        title="JUIT Robotics Hub Mail Service",
        description="Sends project submission, approval, and rejection emails",
        version=__version__,
        docs_url=None if settings.is_production() else "/docs",
        redoc_url=None if settings.is_production() else "/redoc",
        openapi_url=None if settings.is_production() else "/openapi.json",
    )
    app.state.settings = settings
    app.state.dispatcher = dispatcher or create_dispatcher(settings)

    from .api import router
    app.include_router(router)
    _register_middleware(app)
    _register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        """Liveness probe; performs no dependency checks."""
        return {"status": "ok"}

    logger.info("mail_service_ready", environment=settings.environment.value,
                smtp_host=settings.smtp_host)
    return app


def _register_middleware(app: FastAPI) -> None:
    """Register request tracking middleware."""
    @app.middleware("http")
    async def request_tracking_middleware(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error("unhandled_exception", error=str(exc), exc_type=type(exc).__name__)
            response = JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"}},
            )
        process_time_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers.update(CORS_HEADERS)
        logger.info("request_completed", status_code=response.status_code,
                    process_time_ms=round(process_time_ms, 2))
        return response


def _register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors onto HTTP responses."""
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        reason = errors[0]["msg"] if errors else "invalid request body"
        error = MalformedInputError(reason)
        logger.warning("malformed_input", path=request.url.path,
                       errors=[{"loc": list(e["loc"]), "type": e["type"]} for e in errors])
        return JSONResponse(status_code=error.http_status, content=error.to_dict())

    @app.exception_handler(MailServiceError)
    async def mail_service_error_handler(request: Request, exc: MailServiceError) -> JSONResponse:
        if exc.http_status >= 500:
            logger.error("request_failed", path=request.url.path, error_code=exc.error_code,
                         error=exc.message, cause=repr(exc.__cause__) if exc.__cause__ else None)
        else:
            logger.warning("request_rejected", path=request.url.path,
                           error_code=exc.error_code, error=exc.message)
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


def run() -> None:
    """Process entry point: validate configuration, then start the listener."""
    import uvicorn

    try:
        settings = load_settings()
    except StartupConfigurationError as e:
        logger.error("mail_service_startup_failed", problems=e.problems)
        raise SystemExit(1) from e

    app = create_app(settings)
    logger.info("mail_service_starting", host=settings.listen_host, port=settings.port)
    uvicorn.run(
        app,
        host=settings.listen_host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
