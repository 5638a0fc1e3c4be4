"""FastAPI application factory for the crashsim API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from crashsim import __version__
from crashsim.config import Settings
from crashsim.engine.parameters import field_label
from crashsim.errors import ConfigurationError, SimulationFailed
from crashsim.web.schemas import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: log startup and shutdown."""
    logger.info("Starting crashsim API...")
    yield
    logger.info("crashsim API shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title=settings.api_title,
        description="Correlated multi-asset price path simulation with extreme-event injection",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Accept"],
    )

    _register_exception_handlers(app)
    _register_routers(app)

    return app


def _register_exception_handlers(app: FastAPI):
    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        body = ErrorResponse(error={
            "code": "invalid_parameter",
            "message": exc.message,
            "detail": {"field": exc.field},
        })
        return JSONResponse(status_code=422, content=body.model_dump())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        error = exc.errors()[0]
        # Drop the leading "body" segment
        loc = tuple(error.get("loc", ()))[1:]
        body = ErrorResponse(error={
            "code": "invalid_parameter",
            "message": error.get("msg", "Invalid request"),
            "detail": {"field": field_label(loc)},
        })
        return JSONResponse(status_code=422, content=body.model_dump())

    @app.exception_handler(SimulationFailed)
    async def simulation_failed_handler(request: Request, exc: SimulationFailed):
        logger.error("Simulation failed: %s", exc)
        body = ErrorResponse(error={
            "code": "simulation_failed",
            "message": "Failed to run simulation",
        })
        return JSONResponse(status_code=500, content=body.model_dump())


def _register_routers(app: FastAPI):
    """Register all API routers."""
    from crashsim.web.routers.simulation import router as simulation_router
    from crashsim.web.routers.system import router as system_router

    app.include_router(simulation_router, prefix="/api/v1")
    app.include_router(system_router, prefix="/api/v1")
