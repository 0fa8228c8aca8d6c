# app/routers/trips.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import require_customer
from ..models.trip import TripType
from ..models.user import User
from ..schemas.trip import TripCreate, RatingIn, CancelIn
from ..services import trips as trips_service

router = APIRouter(tags=["trips"])


@router.get("/api/trips/quote")
def api_quote(
    trip_type: TripType = Query(...),
    hours: Optional[int] = Query(None, ge=1),
):
    return {"ok": True, "trip_type": trip_type.value, "cost": trips_service.quote_cost(trip_type, hours)}


@router.post("/api/trips", status_code=201)
def api_create_trip(
    body: TripCreate,
    user: User = Depends(require_customer),
    db: Session = Depends(get_db),
):
    """
    Бронирование поездки; цена считается по тарифу, статус scheduled.
    """
    t = trips_service.create_trip(db, user, body.model_dump())
    return {"ok": True, "trip": trips_service.trip_to_public(t)}


@router.get("/api/trips/upcoming")
def api_upcoming(user: User = Depends(require_customer), db: Session = Depends(get_db)):
    return {"ok": True, "items": trips_service.list_upcoming(db, user)}


@router.get("/api/trips/past")
def api_past(user: User = Depends(require_customer), db: Session = Depends(get_db)):
    return {"ok": True, "items": trips_service.list_past(db, user)}


@router.get("/api/trips/{trip_id}")
def api_trip_details(trip_id: int, user: User = Depends(require_customer), db: Session = Depends(get_db)):
    return {"ok": True, "trip": trips_service.get_trip_details(db, user, trip_id)}


@router.post("/api/trips/{trip_id}/rating")
def api_rate_trip(
    trip_id: int,
    body: RatingIn,
    user: User = Depends(require_customer),
    db: Session = Depends(get_db),
):
    t = trips_service.rate_trip(db, user, trip_id, body.rating)
    return {"ok": True, "id": t.id, "rating": t.rating, "reviewed": t.reviewed}


@router.post("/api/trips/{trip_id}/cancel")
def api_cancel_trip(
    trip_id: int,
    body: CancelIn,
    user: User = Depends(require_customer),
    db: Session = Depends(get_db),
):
    t = trips_service.cancel_trip(db, user, trip_id, body.reason)
    return {"ok": True, "id": t.id, "status": t.status.value}
