# app/services/trips.py
from __future__ import annotations

import datetime as dt

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..config import settings
from ..models.trip import (
    Trip, TripType, TripStatus, AIRPORT_TYPES, ACTIVE_STATUSES, FINISHED_STATUSES
)
from ..models.user import User
from ..utils.logger import get_logger
from .driver import is_active_driver

logger = get_logger(__name__)

# утилиты

def _trip_by_id(db: Session, trip_id: int) -> Trip:
    t = db.get(Trip, trip_id)
    if not t:
        raise LookupError("Trip not found")
    return t


def _own_trip(db: Session, user: User, trip_id: int) -> Trip:
    t = _trip_by_id(db, trip_id)
    if t.user_id != user.id:
        # чужую поездку не показываем вовсе
        raise LookupError("Trip not found")
    return t


def _with_people():
    return (
        selectinload(Trip.driver).selectinload(User.driver_profile),
        selectinload(Trip.customer),
    )


def _person(u: User | None, with_profile: bool = True) -> dict | None:
    if not u:
        return None
    out = {
        "id": u.id,
        "full_name": u.full_name,
        "phone_number": u.phone_number,
        "email": u.email,
        "avatar_url": u.avatar_url,
    }
    if with_profile:
        p = u.driver_profile
        out["driver_profile"] = p.to_dict() if p else None
    return out


def trip_to_public(t: Trip, with_customer: bool = False) -> dict:
    out = t.to_dict()
    out["driver"] = _person(t.driver)
    if with_customer:
        out["customer"] = _person(t.customer, with_profile=False)
    return out


# -------- Клиент --------

def quote_cost(trip_type: TripType, hours: int | None = None) -> float:
    if trip_type in AIRPORT_TYPES:
        return float(settings.AIRPORT_TRANSFER_FARE)
    return float(hours or 0) * settings.CITY_TOUR_HOURLY_RATE


def create_trip(db: Session, user: User, payload: dict, now: dt.datetime | None = None) -> Trip:
    """
    Бронирование.
    - airport_*: нужен адрес высадки, hours не храним.
    - city_tour: нужны часы в пределах тарифа, номер рейса не храним.
    Цена считается по тарифу из настроек.
    """
    now = now or dt.datetime.utcnow()
    try:
        trip_type = TripType(payload.get("trip_type"))
    except ValueError:
        raise ValueError("Unknown trip type")

    pickup_location = (payload.get("pickup_location") or "").strip()
    dropoff_location = (payload.get("dropoff_location") or "").strip() or None
    flight_number = (payload.get("flight_number") or "").strip().upper() or None
    pickup_time = payload.get("pickup_time")
    hours = payload.get("hours")

    if not pickup_location:
        raise ValueError("Pickup location is required")
    if not isinstance(pickup_time, dt.datetime):
        raise ValueError("Pickup time is required")
    if pickup_time <= now:
        raise ValueError("Pickup time must be in the future")

    if trip_type in AIRPORT_TYPES:
        if not dropoff_location:
            raise ValueError("Dropoff location is required for airport transfers")
        hours = None
    else:
        try:
            hours = int(hours) if hours not in (None, "") else None
        except (TypeError, ValueError):
            raise ValueError("Hours must be a number")
        if hours is None or not (settings.CITY_TOUR_MIN_HOURS <= hours <= settings.CITY_TOUR_MAX_HOURS):
            raise ValueError(
                f"City tours last between {settings.CITY_TOUR_MIN_HOURS} "
                f"and {settings.CITY_TOUR_MAX_HOURS} hours"
            )
        flight_number = None

    t = Trip(
        user_id=user.id,
        trip_type=trip_type,
        status=TripStatus.SCHEDULED,
        pickup_location=pickup_location,
        pickup_time=pickup_time,
        dropoff_location=dropoff_location,
        flight_number=flight_number,
        hours=hours,
        cost=quote_cost(trip_type, hours),
        reviewed=False,
    )
    db.add(t); db.commit(); db.refresh(t)
    logger.info(f"trip {t.id} booked by user {user.id}: {trip_type.value} at {pickup_time.isoformat()}")
    return t


def list_upcoming(db: Session, user: User) -> list[dict]:
    rows = db.execute(
        select(Trip)
        .where(Trip.user_id == user.id, Trip.status.in_(ACTIVE_STATUSES))
        .options(*_with_people())
        .order_by(Trip.pickup_time.asc())
    ).scalars().all()
    return [trip_to_public(t) for t in rows]


def list_past(db: Session, user: User) -> list[dict]:
    rows = db.execute(
        select(Trip)
        .where(Trip.user_id == user.id, Trip.status.in_(FINISHED_STATUSES))
        .options(*_with_people())
        .order_by(Trip.pickup_time.desc())
    ).scalars().all()
    return [trip_to_public(t) for t in rows]


def get_trip_details(db: Session, user: User, trip_id: int) -> dict:
    return trip_to_public(_own_trip(db, user, trip_id))


def rate_trip(db: Session, user: User, trip_id: int, rating: int) -> Trip:
    t = _own_trip(db, user, trip_id)
    if not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValueError("Rating must be between 1 and 5")
    if t.status != TripStatus.COMPLETED:
        raise ValueError("Only completed trips can be rated")
    if t.reviewed:
        raise ValueError("Trip has already been rated")

    t.rating = rating
    t.reviewed = True
    db.commit(); db.refresh(t)
    logger.info(f"trip {t.id} rated {rating} by user {user.id}")
    return t


def cancel_trip(db: Session, user: User, trip_id: int, reason: str) -> Trip:
    reason = (reason or "").strip()
    if not reason:
        raise ValueError("Please provide a reason for cancellation")
    t = _own_trip(db, user, trip_id)
    # отменить может только владелец и только до выезда
    if t.status != TripStatus.SCHEDULED:
        raise ValueError("Only scheduled trips can be cancelled")

    t.status = TripStatus.CANCELLED
    t.cancellation_reason = reason
    db.commit(); db.refresh(t)
    logger.info(f"trip {t.id} cancelled by customer {user.id}")
    return t


# -------- Водитель --------

# переходы статусов для водителя
_DRIVER_TRANSITIONS = {
    TripStatus.SCHEDULED: {TripStatus.EN_ROUTE, TripStatus.CANCELLED},
    TripStatus.EN_ROUTE:  {TripStatus.COMPLETED},
}


def list_driver_trips(db: Session, driver: User) -> list[dict]:
    rows = db.execute(
        select(Trip)
        .where(Trip.driver_id == driver.id)
        .options(*_with_people())
        .order_by(Trip.pickup_time.asc())
    ).scalars().all()
    return [trip_to_public(t, with_customer=True) for t in rows]


def driver_update_status(db: Session, driver: User, trip_id: int, new_status) -> Trip:
    t = _trip_by_id(db, trip_id)
    if t.driver_id != driver.id:
        raise PermissionError("You can only update trips assigned to you")
    try:
        new_status = TripStatus(new_status)
    except ValueError:
        raise ValueError("Unknown status")

    allowed = _DRIVER_TRANSITIONS.get(t.status, set())
    if new_status not in allowed:
        raise ValueError(f"Cannot move trip from {t.status.value} to {new_status.value}")

    t.status = new_status
    if new_status == TripStatus.COMPLETED:
        t.dropoff_time = dt.datetime.utcnow()
    db.commit(); db.refresh(t)
    logger.info(f"trip {t.id} -> {new_status.value} by driver {driver.id}")
    return t


# -------- Админ --------

def list_all_trips(
    db: Session,
    status: str | None = None,
    start: dt.datetime | None = None,
    end: dt.datetime | None = None,
) -> list[dict]:
    q = select(Trip).options(*_with_people()).order_by(Trip.pickup_time.desc())
    if status and status != "all":
        try:
            q = q.where(Trip.status == TripStatus(status))
        except ValueError:
            raise ValueError("Unknown status")
    if start:
        q = q.where(Trip.pickup_time >= start)
    if end:
        q = q.where(Trip.pickup_time <= end)
    return [trip_to_public(t, with_customer=True) for t in db.execute(q).scalars().all()]


def admin_update_status(db: Session, trip_id: int, new_status) -> Trip:
    """Админ может выставить любой из четырёх статусов."""
    t = _trip_by_id(db, trip_id)
    try:
        t.status = TripStatus(new_status)
    except ValueError:
        raise ValueError("Unknown status")
    db.commit(); db.refresh(t)
    logger.info(f"trip {t.id} status set to {t.status.value} by admin")
    return t


def update_trip_cost(db: Session, trip_id: int, cost: float) -> Trip:
    t = _trip_by_id(db, trip_id)
    if cost is None or cost < 0:
        raise ValueError("Cost must not be negative")
    t.cost = cost
    db.commit(); db.refresh(t)
    logger.info(f"trip {t.id} cost set to {cost}")
    return t


def assign_driver(db: Session, trip_id: int, driver_id: int) -> Trip:
    t = _trip_by_id(db, trip_id)
    if t.status != TripStatus.SCHEDULED:
        raise ValueError("Drivers can only be assigned to scheduled trips")
    if not is_active_driver(db, driver_id):
        raise ValueError("Driver is not active")

    t.driver_id = driver_id
    db.commit(); db.refresh(t)
    logger.info(f"trip {t.id} assigned to driver {driver_id}")
    return t


def remove_driver_from_trip(db: Session, trip_id: int) -> Trip:
    t = _trip_by_id(db, trip_id)
    t.driver_id = None
    t.status = TripStatus.SCHEDULED
    db.commit(); db.refresh(t)
    logger.info(f"trip {t.id} driver removed, back to scheduled")
    return t
