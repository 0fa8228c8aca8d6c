import datetime as dt
import enum

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, ForeignKey, Numeric, Enum, Index
)
from sqlalchemy.orm import relationship

from ..db import Base


class TripType(str, enum.Enum):
    AIRPORT_PICKUP  = "airport_pickup"
    AIRPORT_DROPOFF = "airport_dropoff"
    CITY_TOUR       = "city_tour"


class TripStatus(str, enum.Enum):
    SCHEDULED = "scheduled"   # создано / ждёт водителя
    EN_ROUTE  = "en-route"    # водитель в пути / везёт
    COMPLETED = "completed"
    CANCELLED = "cancelled"


AIRPORT_TYPES = (TripType.AIRPORT_PICKUP, TripType.AIRPORT_DROPOFF)
ACTIVE_STATUSES = (TripStatus.SCHEDULED, TripStatus.EN_ROUTE)
FINISHED_STATUSES = (TripStatus.COMPLETED, TripStatus.CANCELLED)


def _values(e):
    return [x.value for x in e]


class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    driver_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    trip_type = Column(Enum(TripType, values_callable=_values), nullable=False)
    status = Column(Enum(TripStatus, values_callable=_values), nullable=False, default=TripStatus.SCHEDULED)

    pickup_location = Column(String(255), nullable=False)
    pickup_time = Column(DateTime(timezone=True), nullable=False)
    dropoff_location = Column(String(255), nullable=True)
    dropoff_time = Column(DateTime(timezone=True), nullable=True)

    flight_number = Column(String(20), nullable=True)
    hours = Column(Integer, nullable=True)               # только для city_tour
    cost = Column(Numeric(10, 2, asdecimal=False), nullable=True)

    rating = Column(Integer, nullable=True)              # 1..5, только после completed
    reviewed = Column(Boolean, default=False, nullable=False)
    cancellation_reason = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), default=dt.datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow)

    customer = relationship("User", foreign_keys=[user_id])
    driver = relationship("User", foreign_keys=[driver_id])

    __table_args__ = (
        Index("ix_trips_status", "status"),
        Index("ix_trips_pickup_time", "pickup_time"),
    )

    # сериализатор для фронта (водителя добавляет сервис)
    def to_dict(self):
        def _dt(x):
            return x.isoformat() if x else None

        return {
            "id": self.id,
            "user_id": self.user_id,
            "driver_id": self.driver_id,
            "trip_type": self.trip_type.value if hasattr(self.trip_type, "value") else self.trip_type,
            "status": self.status.value if hasattr(self.status, "value") else self.status,
            "pickup_location": self.pickup_location,
            "pickup_time": _dt(self.pickup_time),
            "dropoff_location": self.dropoff_location,
            "dropoff_time": _dt(self.dropoff_time),
            "flight_number": self.flight_number,
            "hours": self.hours,
            "cost": self.cost,
            "rating": self.rating,
            "reviewed": bool(self.reviewed),
            "cancellation_reason": self.cancellation_reason,
            "created_at": _dt(self.created_at),
            "updated_at": _dt(self.updated_at),
        }
