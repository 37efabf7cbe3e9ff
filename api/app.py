"""FastAPI application factory."""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import load_config
from core.errors import ClockError, EntropyExhaustion, IdError
from core.health import (
    HealthChecker,
    check_event_loop,
    create_generator_check,
    create_sequencer_check,
)
from ids.ksuid import KsuidGenerator
from ids.registry import Generators
from ids.ulid import UlidGenerator
from internal.logging import get_logger, LogLevel, StructuredLogger
from utils.crash import configure as configure_crash, create_async_handler
from api.routes import health, ids as id_routes

VERSION = "1.0.0"


def create_app(config=None, generators=None):
    """Create and configure the FastAPI application."""
    config = config or load_config()

    # Configure structured logging
    StructuredLogger.configure(min_level=LogLevel.parse(config.logging.level))
    logger_instance = get_logger()
    configure_crash(config.logging.crash_file)

    # Create core components
    generators = generators or Generators.from_config(config)
    health_checker = HealthChecker()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger_instance.info("Application starting", version=VERSION)
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(create_async_handler(logger_instance))
        yield
        logger_instance.info("Application shutdown complete")

    app = FastAPI(
        title="Time-ordered ID service",
        version=VERSION,
        description="Snowflake, ULID and KSUID identifier generation",
        lifespan=lifespan,
    )

    health_checker.register("event_loop", check_event_loop, critical=True)
    health_checker.register("sequencer", create_sequencer_check(generators.snowflake.sequencer), critical=False)
    # Checks run on their own instances so the served monotonic state is untouched
    ulid_check = UlidGenerator(monotonic=config.ulid.monotonic)
    health_checker.register("ulid", create_generator_check("ulid", ulid_check.generate), critical=True)
    health_checker.register("ksuid", create_generator_check("ksuid", KsuidGenerator().generate), critical=True)

    @app.exception_handler(IdError)
    async def id_error_handler(request: Request, exc: IdError):
        # Load/clock conditions are transient; everything else is a bad request
        status_code = 503 if isinstance(exc, (ClockError, EntropyExhaustion)) else 400
        logger_instance.warn("request failed", error=exc.message, error_id=exc.error_id,
                             kind=type(exc).__name__, path=request.url.path)
        return JSONResponse(content=exc.to_dict(), status_code=status_code)

    # Initialize route modules with dependencies
    id_routes.init(generators)
    health.init(generators, health_checker)

    app.include_router(id_routes.router)
    app.include_router(health.router)

    app.state.generators = generators
    return app
