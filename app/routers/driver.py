# app/routers/driver.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import require_driver
from ..models.user import User
from ..schemas.driver import ActiveIn
from ..schemas.trip import StatusIn
from ..services import driver as driver_service
from ..services import trips as trips_service

router = APIRouter(tags=["driver"])


@router.get("/api/driver/trips")
def api_driver_trips(driver: User = Depends(require_driver), db: Session = Depends(get_db)):
    return {"ok": True, "items": trips_service.list_driver_trips(db, driver)}


@router.post("/api/driver/trips/{trip_id}/status")
def api_driver_move_status(
    trip_id: int,
    body: StatusIn,
    driver: User = Depends(require_driver),
    db: Session = Depends(get_db),
):
    t = trips_service.driver_update_status(db, driver, trip_id, body.status)
    return {"ok": True, "id": t.id, "status": t.status.value}


@router.get("/api/driver/stats")
def api_driver_stats(driver: User = Depends(require_driver), db: Session = Depends(get_db)):
    return {"ok": True, **driver_service.driver_dashboard_stats(db, driver.id)}


@router.post("/api/driver/active")
def api_driver_active(
    body: ActiveIn,
    driver: User = Depends(require_driver),
    db: Session = Depends(get_db),
):
    """
    Водитель сам включает/выключает себя в списке доступных.
    """
    p = driver_service.set_active(db, driver.id, body.is_active)
    return {"ok": True, "is_active": p.is_active}
