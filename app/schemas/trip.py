# app/schemas/trip.py
import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..models.trip import TripType, TripStatus


def to_naive_utc(value: Optional[dt.datetime]) -> Optional[dt.datetime]:
    # в БД храним naive UTC, как и created_at
    if value is not None and value.tzinfo is not None:
        return value.astimezone(dt.timezone.utc).replace(tzinfo=None)
    return value


class TripCreate(BaseModel):
    trip_type: TripType
    pickup_location: str = Field(..., max_length=255)
    pickup_time: dt.datetime
    dropoff_location: Optional[str] = Field(None, max_length=255)
    flight_number: Optional[str] = Field(None, max_length=20)
    hours: Optional[int] = None

    @field_validator("pickup_time")
    @classmethod
    def pickup_as_naive_utc(cls, v):
        return to_naive_utc(v)


class RatingIn(BaseModel):
    rating: int = Field(..., ge=1, le=5)


class CancelIn(BaseModel):
    reason: str = ""


class StatusIn(BaseModel):
    status: TripStatus


class AssignDriverIn(BaseModel):
    driver_id: int


class CostIn(BaseModel):
    cost: float = Field(..., ge=0)
