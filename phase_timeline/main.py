from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from phase_timeline.application.services.timeline_driver import TimelineDriver
from phase_timeline.application.services.timeline_registry import \
    TimelineRegistry
from phase_timeline.domain.exceptions import (TimelineException,
                                              TimelineRunNotFoundError,
                                              ValidationException)
from phase_timeline.infrastructure.config.settings import get_settings
from phase_timeline.infrastructure.display.log_display import LoggingDisplay
from phase_timeline.presentation.api.dependencies import set_timeline_registry
from phase_timeline.presentation.api.v1.routes import timelines, websocket
from phase_timeline.presentation.api.websocket.hub import get_view_hub
from phase_timeline.presentation.middleware.security import \
    CrossOriginIsolationMiddleware
from phase_timeline.presentation.middleware.server_timing import \
    ServerTimingMiddleware
from phase_timeline.shared.telemetry.logging import get_logger, setup_logging
from phase_timeline.shared.telemetry.telemetry import (TelemetryConfig,
                                                       get_telemetry,
                                                       set_telemetry)

logger = get_logger(__name__)

settings = get_settings()

STARTUP_RUN_ID = "startup"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for application initialization and cleanup"""
    # Startup is itself a workflow run, visible at /timelines/startup
    startup = TimelineDriver(LoggingDisplay(logger))

    with startup.phase("setup logging"):
        setup_logging()

    # Initialize OpenTelemetry distributed tracing
    if settings.telemetry_enabled:
        with startup.phase("init telemetry"):
            try:
                telemetry = TelemetryConfig(
                    service_name=settings.app_name,
                    service_version=settings.app_version,
                    enabled=True,
                    environment=settings.telemetry_environment,
                )

                telemetry.setup_telemetry(
                    exporter_type=settings.telemetry_exporter,
                    otlp_endpoint=settings.telemetry_otlp_endpoint,
                    sample_rate=settings.telemetry_sample_rate,
                )

                # Instrument FastAPI
                telemetry.instrument_fastapi(app)

                # Instrument logging for trace correlation
                telemetry.instrument_logging()

                set_telemetry(telemetry)
                logger.info(
                    f"Distributed tracing initialized: exporter={settings.telemetry_exporter}"
                )
            except Exception as e:
                logger.warning(
                    f"Telemetry initialization failed: {e}. Continuing without tracing."
                )
    else:
        logger.info("Distributed tracing disabled in configuration")

    with startup.phase("init timeline registry"):
        registry = TimelineRegistry(max_runs=settings.max_timeline_runs)
        set_timeline_registry(registry)

    registry.register(STARTUP_RUN_ID, startup.timeline)
    startup.finish()

    yield

    # Shutdown: close live view streams
    await get_view_hub().close_all()

    # Shutdown telemetry (flush remaining spans)
    if settings.telemetry_enabled:
        try:
            telemetry_instance = get_telemetry()
            if telemetry_instance:
                telemetry_instance.shutdown()
        except Exception as e:
            logger.warning(f"Error during telemetry shutdown: {e}")

    set_timeline_registry(None)


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)


@app.exception_handler(TimelineException)
async def timeline_exception_handler(request: Request, exc: TimelineException):
    """Map domain exceptions onto JSON error responses"""
    if isinstance(exc, TimelineRunNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ValidationException):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    logger.debug(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# Middleware (order matters - applied in reverse)
# 1. Server-Timing: innermost, so its total covers only the app itself
app.add_middleware(
    ServerTimingMiddleware,
    enabled=settings.server_timing_enabled,
    log_timelines=settings.log_request_timelines,
)

# 2. Cross-origin isolation so browsers expose precise timing
app.add_middleware(
    CrossOriginIsolationMiddleware,
    timing_allow_origin=settings.timing_allow_origin,
    isolate=settings.cross_origin_isolation,
)

# 3. CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Server-Timing"],
)

# Routers
app.include_router(timelines.router, prefix="/timelines", tags=["timelines"])
app.include_router(websocket.router, tags=["websocket"])


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Liveness check for load balancers and monitoring."""
    return {"status": "healthy", "checks": {"api": True}}
