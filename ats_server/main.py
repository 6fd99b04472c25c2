import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ats_server.api.v1.router import api_v1_router
from ats_server.core.config import settings, validate_settings_for_production
from ats_server.core.exceptions import AppError
from ats_server.core.logging import setup_logging
from ats_server.core.metrics import PrometheusMiddleware, metrics_response
from ats_server.core.middleware import RequestLoggingMiddleware
from ats_server.core.sentry import init_sentry
from ats_server.db.postgres import engine
from ats_server.gateway.gateway import AiGateway
from ats_server.gateway.rate_limiter import SlidingWindowRateLimiter
from ats_server.gateway.types import GatewayConfig

# Configure logging before anything else
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    validate_settings_for_production()
    init_sentry()
    # Raises ConfigurationError for an unsupported provider, aborting startup
    app.state.gateway = AiGateway(GatewayConfig.from_settings(settings))
    logger.info("Starting ATS tracker server (env=%s)...", settings.app_env)

    yield

    # Shutdown
    await engine.dispose()
    logger.info("ATS tracker server shut down")


app = FastAPI(
    title="ATS Tracker",
    description="Job application tracker backend with an AI generation gateway",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs" if settings.app_debug else None,
    redoc_url="/api/redoc" if settings.app_debug else None,
)

# Per-process state; the gateway is created at startup (or lazily by get_gateway)
app.state.rate_limiter = SlidingWindowRateLimiter()
app.state.gateway = None


@app.exception_handler(AppError)
async def _app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("Unhandled %s on %s %s:\n%s", type(exc).__name__, request.method, request.url.path, "".join(tb))
    return JSONResponse(status_code=500, content={"detail": "Internal server error", "code": "internal_error"})


app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(PrometheusMiddleware)

# CORS: parse allowed_origins from settings (comma-separated)
_origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Retry-After", "X-Request-Id"],
)

app.include_router(api_v1_router)


@app.get("/health")
async def health():
    gateway = app.state.gateway
    return {
        "status": "ok",
        "ai_provider": gateway.provider_name if gateway is not None else settings.ai_provider,
        "mock": settings.mock_mode,
    }


@app.get("/metrics", include_in_schema=False)
async def metrics():
    return metrics_response()
