# app/schemas/driver.py
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class DriverCreate(BaseModel):
    email: EmailStr
    password: str
    full_name: str = Field(..., min_length=1, max_length=200)
    phone_number: Optional[str] = None
    license_number: str
    vehicle_make: str
    vehicle_model: str
    vehicle_year: int = Field(..., ge=1950, le=2100)
    vehicle_color: str
    vehicle_plate: str


class DriverUpdate(BaseModel):
    # всё опционально: меняем только то, что пришло непустым
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    license_number: Optional[str] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    vehicle_year: Optional[int] = None
    vehicle_color: Optional[str] = None
    vehicle_plate: Optional[str] = None
    is_active: Optional[bool] = None


class ActiveIn(BaseModel):
    is_active: bool


class TagIn(BaseModel):
    tag: str
