# motowash/main.py
"""
FastAPI application entry point.
Includes the store API key guard, domain error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from motowash.routers import auth, catalog, finance, health, notifications, store_api, vehicles
from motowash.database import create_tables
from motowash.config import settings
from motowash.exceptions import (
    InvalidEntity, InvalidTransition, MissingWorker, NotAuthorized, NotFound, StoreNotReady, WashShopError,
)
from motowash.services.auth_service import AdminSessions
from motowash.services.shop_session import ShopSession
from motowash.services.sync_adapter import build_sync_adapter
from motowash.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title=f"{settings.SHOP_NAME} Wash Shop API",
    description="Motorcycle wash workflow, worker commissions, workshop billing and expenses.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (front-desk tablet + manager browser) ──────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Store API Key Middleware ─────────────────────────────────────────────────
class StoreAPIKeyMiddleware(BaseHTTPMiddleware):
    """
    Bearer key guard for the blob store (/api/data, /api/sync).
    Set STORE_API_KEY in .env. Leave empty to disable auth.
    """
    protected_paths = {"/api/data", "/api/sync"}

    async def dispatch(self, request: Request, call_next):
        if request.url.path not in self.protected_paths or not settings.STORE_API_KEY:
            return await call_next(request)

        header = request.headers.get("Authorization", "")
        if header != f"Bearer {settings.STORE_API_KEY}":
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


app.add_middleware(StoreAPIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Domain Error Handlers ────────────────────────────────────────────────────
_ERROR_STATUS = {
    NotFound: status.HTTP_404_NOT_FOUND,
    InvalidTransition: status.HTTP_409_CONFLICT,
    MissingWorker: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidEntity: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotAuthorized: status.HTTP_401_UNAUTHORIZED,
    StoreNotReady: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@app.exception_handler(WashShopError)
async def wash_shop_error_handler(request: Request, exc: WashShopError):
    code = next((c for kind, c in _ERROR_STATUS.items() if isinstance(exc, kind)), status.HTTP_400_BAD_REQUEST)
    logger.info(f"{request.method} {request.url.path} rejected: {type(exc).__name__}: {exc}")
    return JSONResponse(status_code=code, content={"error": type(exc).__name__, "detail": str(exc)})


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(store_api.router,     prefix="/api",    tags=["Blob Store"])
app.include_router(vehicles.router,      prefix="/api/v1", tags=["Board & Workflow"])
app.include_router(catalog.router,       prefix="/api/v1", tags=["Catalog"])
app.include_router(finance.router,       prefix="/api/v1", tags=["Finance"])
app.include_router(auth.router,          prefix="/api/v1", tags=["Auth"])
app.include_router(notifications.router, prefix="/api/v1", tags=["Notifications"])
app.include_router(health.router,        prefix="/api/v1", tags=["Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info(f"{settings.SHOP_NAME} backend starting up...")
    create_tables()
    logger.info("Database tables ready")

    app.state.admin_sessions = AdminSessions()
    app.state.shop = ShopSession(build_sync_adapter())
    await app.state.shop.load()
    logger.info(f"Store ready, sync via {app.state.shop.outbox.adapter}")
    logger.info(f"Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}, docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info(f"{settings.SHOP_NAME} backend shutting down...")
    await app.state.shop.close()
