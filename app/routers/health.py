# app/routers/health.py
"""
Проверка живости: база + какие секреты заданы (значения не отдаём).
"""
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


def _presence(value) -> str:
    return "exists" if value else "missing"


@router.get("/api/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "database": "unknown",
        "env": {
            "DATABASE_URL": _presence(settings.DATABASE_URL),
            "SECRET_KEY": _presence(settings.SECRET_KEY),
            "SESSION_SECRET_KEY": _presence(settings.SESSION_SECRET_KEY),
            "ADMIN_EMAILS": _presence(settings.ADMIN_EMAILS),
        },
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        logger.error(f"health: database check failed: {e}")
        result["database"] = f"error: {e}"
        result["status"] = "degraded"

    return result
