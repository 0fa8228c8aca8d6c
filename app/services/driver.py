from __future__ import annotations

import datetime as dt

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..models.user import User, UserRole
from ..models.driver import DriverProfile, DriverTag
from ..models.trip import Trip, TripStatus, ACTIVE_STATUSES
from ..utils.clock import local_day_start
from ..utils.logger import get_logger
from ..utils.security import hash_password
from .users import normalize_email, get_user_by_email, validate_password

logger = get_logger(__name__)

PROFILE_FIELDS = (
    "license_number", "vehicle_make", "vehicle_model",
    "vehicle_year", "vehicle_color", "vehicle_plate",
)
TAG_MAX_LEN = 50


def _driver_user(db: Session, driver_id: int) -> User:
    u = db.get(User, driver_id)
    if not u or u.role != UserRole.DRIVER:
        raise LookupError("Driver not found")
    return u


def get_profile(db: Session, user_id: int) -> DriverProfile | None:
    return db.execute(select(DriverProfile).where(DriverProfile.user_id == user_id)).scalar_one_or_none()


def is_active_driver(db: Session, user_id: int) -> bool:
    p = get_profile(db, user_id)
    return bool(p and p.is_active)


# -------- Админ: заведение / правка / удаление --------

def create_driver(db: Session, payload: dict) -> User:
    """
    Учётка + профиль водителя одной транзакцией: если профиль не лёг,
    не остаётся «полу-водителя» без машины.
    """
    email = normalize_email(payload.get("email"))
    validate_password(payload.get("password") or "")
    if get_user_by_email(db, email):
        raise ValueError("An account with this email already exists")

    u = User(
        email=email,
        full_name=(payload.get("full_name") or "").strip() or None,
        phone_number=(payload.get("phone_number") or "").strip() or None,
        password_hash=hash_password(payload["password"]),
        role=UserRole.DRIVER,
    )
    u.driver_profile = DriverProfile(
        is_active=True,
        **{f: payload.get(f) for f in PROFILE_FIELDS},
    )
    db.add(u)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"create driver <{email}> failed")
        raise
    db.refresh(u)
    logger.info(f"driver {u.id} <{email}> created")
    return u


def update_driver(db: Session, driver_id: int, payload: dict) -> User:
    """
    Меняем только пришедшие непустые поля; is_active, если это bool.
    """
    u = _driver_user(db, driver_id)

    for f in ("full_name", "phone_number"):
        if payload.get(f):
            setattr(u, f, payload[f])

    p = u.driver_profile
    if p is None:
        p = u.driver_profile = DriverProfile(is_active=False)
    for f in PROFILE_FIELDS:
        if payload.get(f):
            setattr(p, f, payload[f])
    if isinstance(payload.get("is_active"), bool):
        p.is_active = payload["is_active"]

    db.commit(); db.refresh(u)
    logger.info(f"driver {u.id} updated: {sorted(k for k, v in payload.items() if v not in (None, ''))}")
    return u


def set_active(db: Session, driver_id: int, value: bool) -> DriverProfile:
    """
    Вкл/выкл водителя. Если профиля ещё нет, создаём.
    """
    u = _driver_user(db, driver_id)
    p = u.driver_profile
    if p is None:
        p = u.driver_profile = DriverProfile(is_active=value)
    else:
        p.is_active = value
    db.commit(); db.refresh(p)
    logger.info(f"driver {driver_id} active={value}")
    return p


def remove_driver(db: Session, driver_id: int) -> int:
    """
    Активные поездки водителя (scheduled/en-route) снова scheduled без водителя,
    у завершённых просто отвязываем водителя. Возвращает число сброшенных.
    """
    u = _driver_user(db, driver_id)

    reset = 0
    trips = db.execute(select(Trip).where(Trip.driver_id == driver_id)).scalars().all()
    for t in trips:
        if t.status in ACTIVE_STATUSES:
            t.status = TripStatus.SCHEDULED
            reset += 1
        t.driver = None

    # профиль и теги уходят каскадом
    db.delete(u)
    db.commit()
    logger.info(f"driver {driver_id} removed, {reset} trip(s) reset to scheduled")
    return reset


# -------- Теги --------

def _clean_tag(tag: str) -> str:
    tag = (tag or "").strip()
    if not tag:
        raise ValueError("Tag must not be empty")
    if len(tag) > TAG_MAX_LEN:
        raise ValueError(f"Tag must be at most {TAG_MAX_LEN} characters")
    return tag


def add_tag(db: Session, driver_id: int, tag: str) -> list[str]:
    u = _driver_user(db, driver_id)
    tag = _clean_tag(tag)
    if tag not in (t.tag for t in u.tags):
        u.tags.append(DriverTag(tag=tag))
        db.commit()
    return [t.tag for t in u.tags]


def remove_tag(db: Session, driver_id: int, tag: str) -> list[str]:
    u = _driver_user(db, driver_id)
    tag = (tag or "").strip()
    for t in [t for t in u.tags if t.tag == tag]:
        u.tags.remove(t)  # delete-orphan
    db.commit()
    return [t.tag for t in u.tags]


def list_tags(db: Session, driver_id: int) -> list[str]:
    return [t.tag for t in _driver_user(db, driver_id).tags]


# -------- Списки / статистика --------

def _average(values: list) -> float:
    return sum(values) / len(values) if values else 0


def list_drivers(db: Session) -> list[dict]:
    drivers = db.execute(
        select(User)
        .where(User.role == UserRole.DRIVER)
        .options(selectinload(User.driver_profile), selectinload(User.tags))
        .order_by(User.full_name)
    ).scalars().all()

    trips = db.execute(
        select(Trip.driver_id, Trip.status, Trip.cost, Trip.rating)
        .where(Trip.driver_id.in_([d.id for d in drivers]))
    ).all() if drivers else []

    by_driver: dict[int, list] = {}
    for row in trips:
        by_driver.setdefault(row.driver_id, []).append(row)

    out = []
    for d in drivers:
        rows = by_driver.get(d.id, [])
        p = d.driver_profile
        completed = [r for r in rows if r.status == TripStatus.COMPLETED]
        item = d.to_dict()
        item.update({
            "driver_profile": p.to_dict() if p else None,
            "is_active": bool(p and p.is_active),
            "tags": [t.tag for t in d.tags],
            "total_trips": len(rows),
            "completed_trips": len(completed),
            "cancelled_trips": sum(1 for r in rows if r.status == TripStatus.CANCELLED),
            "total_revenue": sum(r.cost or 0 for r in completed),
            "average_rating": _average([r.rating for r in rows if r.rating is not None]),
        })
        out.append(item)
    return out


def list_active_drivers(db: Session) -> list[User]:
    return db.execute(
        select(User)
        .join(DriverProfile, DriverProfile.user_id == User.id)
        .where(User.role == UserRole.DRIVER, DriverProfile.is_active.is_(True))
        .order_by(User.full_name)
    ).scalars().all()


def driver_dashboard_stats(db: Session, driver_id: int, now: dt.datetime | None = None) -> dict:
    """
    Для экрана водителя: сколько завершено сегодня и средний рейтинг.
    «Сегодня» считается по местным суткам (APP_TIMEZONE).
    """
    now = now or dt.datetime.utcnow()
    today = local_day_start(now)

    today_trips = db.execute(
        select(Trip.id).where(
            Trip.driver_id == driver_id,
            Trip.status == TripStatus.COMPLETED,
            Trip.pickup_time >= today,
        )
    ).scalars().all()
    ratings = db.execute(
        select(Trip.rating).where(Trip.driver_id == driver_id, Trip.rating.is_not(None))
    ).scalars().all()

    return {
        "today_trips": len(today_trips),
        "average_rating": round(_average(list(ratings)), 1),
        "is_active": is_active_driver(db, driver_id),
    }
