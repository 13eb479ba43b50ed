"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlalchemy import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from src.addressbook.api.http.app_data import ApplicationDependencies
from src.addressbook.api.http.routers.address import router as address_router
from src.addressbook.api.http.routers.health import router as health_router
from src.addressbook.api.utils.app_startup import configure_logging
from src.addressbook.core.services import DbManageService, DbSessionService
from src.addressbook.runtime.config.config_data import ConfigData
from src.addressbook.runtime.context import get_config

__all__ = ["app", "create_app"]


def _format_validation_errors(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(messages) or "invalid request"


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400, content={"error": _format_validation_errors(exc)}
    )


async def log_requests(request: Request, call_next):
    """Log each request with a correlation id bound to every message it emits."""
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
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"error": "Internal Server Error"},
                headers={"X-Request-ID": request_id},
            )

        duration_ms = (time.perf_counter() - start) * 1000
        logger.bind(
            status_code=response.status_code,
            duration_ms=round(duration_ms, 1),
        ).info("request.end")
        response.headers.setdefault("X-Request-ID", request_id)
        return response


def create_app(
    engine: Engine | None = None,
    enable_logging: bool = True,
    seed: bool | None = None,
    config: ConfigData | None = None,
) -> FastAPI:
    """Build the address book application.

    Args:
        engine: Database engine to use; built from configuration when omitted.
        enable_logging: Configure Loguru sinks and log every request.
        seed: Seed an empty address table at startup; defaults to
            ``database.seed_on_empty``.
        config: Configuration to serve with; the current context config when omitted.
    """
    config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if enable_logging:
            configure_logging(config)

        database_service = DbSessionService(config.database, engine=engine)
        db_manage_service = DbManageService(database_service.engine)
        should_seed = config.database.seed_on_empty if seed is None else seed
        seed_file = config.database.seed_file
        db_manage_service.initialize(Path(seed_file) if should_seed and seed_file else None)

        app.state.app_dependencies = ApplicationDependencies(
            config=config,
            database_service=database_service,
            db_manage_service=db_manage_service,
        )
        logger.info("Starting up application in {} environment", config.app.environment)
        try:
            yield
        finally:
            logger.info("Shutting down application")
            # Injected engines belong to the caller
            if engine is None:
                database_service.dispose()

    app = FastAPI(
        title="Address Book",
        lifespan=lifespan,
        docs_url=None if config.app.environment == "production" else "/docs",
        redoc_url=None if config.app.environment == "production" else "/redoc",
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    if config.app.environment == "production" and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    if enable_logging:
        app.middleware("http")(log_requests)

    app.include_router(address_router)
    app.include_router(health_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # request logging happens in middleware
    )
