"""
FastAPI application entry point.
Operator API-key gate, domain error → HTTP status mapping, and the
contribution / station / alert / health routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import contributions, stations, alerts, health
from app.database import create_tables
from app.config import settings
from app.services.alert_service import AlertNotFound, AlertAlreadyResolved
from app.services.ingest_service import StationNotFound, StationInactive
from app.utils.security import has_valid_api_key
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="TajiCheck Fuel Availability API",
    description="Crowd-sourced fuel status: reports in, waiting time / reliability / alerts out.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (web + mobile clients) ──────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the web app origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Operator endpoints (station admin, status edits, recompute, alert sweep and
    resolve) need X-API-Key. Reads and public report submission stay open;
    the contributions router downgrades keyless OFFICIAL/TRUSTED reports to PUBLIC.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    public_writes = {("POST", "/api/v1/contributions")}
    open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}

    def is_open(self, request: Request) -> bool:
        if request.method in ("GET", "HEAD", "OPTIONS"):
            return True
        return request.url.path in self.open_paths or \
            (request.method, request.url.path) in self.public_writes

    async def dispatch(self, request: Request, call_next):
        if self.is_open(request) or has_valid_api_key(request):
            return await call_next(request)
        logger.warning(f"Rejected {request.method} {request.url.path}: missing or invalid API key")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Invalid or missing API key"},
        )


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Domain Error Handlers ────────────────────────────────────────────────────
def _domain_error(status_code: int):
    async def handler(request: Request, exc: Exception):
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})
    return handler


app.add_exception_handler(StationNotFound, _domain_error(status.HTTP_404_NOT_FOUND))
app.add_exception_handler(StationInactive, _domain_error(status.HTTP_400_BAD_REQUEST))
app.add_exception_handler(AlertNotFound, _domain_error(status.HTTP_404_NOT_FOUND))
app.add_exception_handler(AlertAlreadyResolved, _domain_error(status.HTTP_409_CONFLICT))


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(contributions.router, prefix="/api/v1", tags=["📝 Contributions"])
app.include_router(stations.router,      prefix="/api/v1", tags=["⛽ Stations"])
app.include_router(alerts.router,        prefix="/api/v1", tags=["🔔 Alerts"])
app.include_router(health.router,        prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 TajiCheck backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"🔐 Status writes allowed from: {settings.STATUS_WRITE_SOURCES}")
    logger.info(f"🔑 Operator API key: {'enabled' if settings.API_KEY else 'disabled'}")
    logger.info(f"⏱  Waiting time: last {settings.WAIT_LOOKBACK_CONTRIBUTIONS} reports, "
                f"{settings.AVG_MINUTES_PER_VEHICLE} min/vehicle")
    logger.info(f"📊 Reliability: {settings.RELIABILITY_WINDOW_MINUTES} min window, "
                f"max {settings.RELIABILITY_MAX_CONTRIBUTIONS} reports")
    logger.info(f"🔔 Alerts: no update > {settings.ALERT_NO_UPDATE_MINUTES} min, "
                f"wait > {settings.ALERT_HIGH_WAIT_MINUTES} min")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 TajiCheck backend shutting down...")
