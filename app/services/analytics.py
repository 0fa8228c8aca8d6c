# app/services/analytics.py
"""
Аналитика для админки.

Строки берём простыми select и считаем здесь, чтобы цифры совпадали
с таблицей поездок за тот же период.
"""

from __future__ import annotations

import calendar
import datetime as dt

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from ..config import settings
from ..models.driver import DriverProfile
from ..models.trip import Trip, TripStatus
from ..models.user import User, UserRole

TIMEFRAMES = ("day", "week", "month", "year")


def _months_back(d: dt.datetime, months: int) -> dt.datetime:
    month = d.month - months
    year = d.year
    while month < 1:
        month += 12
        year -= 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return d.replace(year=year, month=month, day=day)


def timeframe_start(timeframe: str, now: dt.datetime | None = None) -> dt.datetime:
    now = now or dt.datetime.utcnow()
    if timeframe == "day":
        return now - dt.timedelta(days=1)
    if timeframe == "week":
        return now - dt.timedelta(days=7)
    if timeframe == "month":
        return _months_back(now, 1)
    if timeframe == "year":
        return _months_back(now, 12)
    raise ValueError(f"Unknown timeframe: {timeframe}")


def _trips_since(db: Session, start: dt.datetime):
    return db.execute(
        select(Trip.status, Trip.cost, Trip.rating, Trip.dropoff_location)
        .where(Trip.created_at >= start)
        .order_by(Trip.created_at, Trip.id)
    ).all()


def _count_users(db: Session, role: UserRole) -> int:
    return db.execute(select(func.count(User.id)).where(User.role == role)).scalar_one()


def admin_stats(db: Session, timeframe: str, now: dt.datetime | None = None) -> dict:
    rows = _trips_since(db, timeframe_start(timeframe, now))
    active_drivers = db.execute(
        select(func.count(DriverProfile.id)).where(DriverProfile.is_active.is_(True))
    ).scalar_one()

    ratings = [r.rating for r in rows if r.rating]
    return {
        "total_trips": len(rows),
        "completed_trips": sum(1 for r in rows if r.status == TripStatus.COMPLETED),
        "cancelled_trips": sum(1 for r in rows if r.status == TripStatus.CANCELLED),
        "total_revenue": sum(r.cost or 0 for r in rows),
        "active_drivers": active_drivers or 0,
        "average_rating": sum(ratings) / len(ratings) if ratings else 0,
    }


def popular_destinations(db: Session, timeframe: str, now: dt.datetime | None = None,
                         limit: int | None = None) -> list[dict]:
    limit = limit or settings.POPULAR_DESTINATIONS_LIMIT
    acc: dict[str, dict] = {}
    for r in _trips_since(db, timeframe_start(timeframe, now)):
        if not r.dropoff_location:
            continue
        item = acc.setdefault(r.dropoff_location, {"location": r.dropoff_location, "count": 0, "total_revenue": 0})
        item["count"] += 1
        item["total_revenue"] += r.cost or 0

    # sorted стабилен: при равенстве остаётся порядок первого появления
    return sorted(acc.values(), key=lambda x: x["count"], reverse=True)[:limit]


def recent_reviews(db: Session, limit: int | None = None) -> list[dict]:
    rows = db.execute(
        select(Trip)
        .where(Trip.rating.is_not(None))
        .options(selectinload(Trip.driver))
        .order_by(Trip.created_at.desc(), Trip.id.desc())
        .limit(limit or settings.RECENT_REVIEWS_LIMIT)
    ).scalars().all()
    return [{
        "trip_id": t.id,
        "driver_name": (t.driver.full_name if t.driver and t.driver.full_name else "Unknown Driver"),
        "rating": t.rating,
        "date": t.created_at.date().isoformat() if t.created_at else None,
    } for t in rows]


def admin_analytics(db: Session, timeframe: str, now: dt.datetime | None = None) -> dict:
    rows = _trips_since(db, timeframe_start(timeframe, now))

    by_status: dict[str, int] = {}
    for r in rows:
        key = r.status.value if hasattr(r.status, "value") else str(r.status)
        by_status[key] = by_status.get(key, 0) + 1

    return {
        "total_trips": len(rows),
        "total_drivers": _count_users(db, UserRole.DRIVER),
        "total_customers": _count_users(db, UserRole.CUSTOMER),
        "total_revenue": sum(r.cost or 0 for r in rows),
        "popular_destinations": popular_destinations(db, timeframe, now),
        "recent_reviews": recent_reviews(db),
        "trips_by_status": [{"status": s, "count": c} for s, c in by_status.items()],
    }
