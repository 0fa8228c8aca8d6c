# app/main.py
import time
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from .config import settings
from .db import create_tables
from .utils.logger import get_logger

from .routers import (
    ui as ui_router,
    auth as auth_router,
    trips as trips_router,
    driver as driver_router,
    admin as admin_router,
    admin_drivers as admin_drivers_router,
    health as health_router,
)

logger = get_logger(__name__)

app = FastAPI(title="Jaco Rides")

# --- CORS ---
allowed_origins = (
    [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]
    if settings.ALLOWED_ORIGINS
    else ["*"]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Сессии (flash-сообщения страниц) ---
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET_KEY or settings.SECRET_KEY,
    session_cookie="rides_session",
    same_site=settings.COOKIE_SAMESITE or "lax",
    https_only=settings.COOKIE_SECURE,
)


# --- Тайминг запросов ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} -> {response.status_code} ({duration}ms)")
    return response


# --- Ошибки сервисов -> HTTP ---
@app.exception_handler(LookupError)
async def not_found_handler(request: Request, exc: LookupError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc) or "Not found"})


@app.exception_handler(PermissionError)
async def forbidden_handler(request: Request, exc: PermissionError):
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc) or "Forbidden"})


@app.exception_handler(ValueError)
async def bad_request_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# --- Статика (если есть) ---
STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
if STATIC_DIR.is_dir():
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# --- Роутеры ---
app.include_router(ui_router.router)
app.include_router(auth_router.router)
app.include_router(trips_router.router)
app.include_router(driver_router.router)
app.include_router(admin_router.router)
app.include_router(admin_drivers_router.router)
app.include_router(health_router.router)


# --- Инициализация БД ---
@app.on_event("startup")
def on_startup():
    create_tables()
    logger.info("Database tables ready")
