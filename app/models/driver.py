# app/models/driver.py
import datetime as dt

from sqlalchemy import Column, Integer, Boolean, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from ..db import Base


class DriverProfile(Base):
    __tablename__ = "driver_profiles"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    license_number = Column(String(50), nullable=True)
    vehicle_make   = Column(String(80), nullable=True)
    vehicle_model  = Column(String(80), nullable=True)
    vehicle_year   = Column(Integer, nullable=True)
    vehicle_color  = Column(String(40), nullable=True)
    vehicle_plate  = Column(String(20), nullable=True)

    is_active = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), default=dt.datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow)

    user = relationship("User", back_populates="driver_profile")

    __table_args__ = (
        # один профиль на пользователя
        UniqueConstraint("user_id", name="uniq_driver_profile_per_user"),
    )

    def to_dict(self):
        return {
            "license_number": self.license_number,
            "vehicle_make": self.vehicle_make,
            "vehicle_model": self.vehicle_model,
            "vehicle_year": self.vehicle_year,
            "vehicle_color": self.vehicle_color,
            "vehicle_plate": self.vehicle_plate,
            "is_active": bool(self.is_active),
        }


class DriverTag(Base):
    __tablename__ = "driver_tags"

    id = Column(Integer, primary_key=True)
    driver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    tag = Column(String(50), nullable=False)
    created_at = Column(DateTime(timezone=True), default=dt.datetime.utcnow, nullable=False)

    driver = relationship("User", back_populates="tags")

    __table_args__ = (
        UniqueConstraint("driver_id", "tag", name="uniq_driver_tag"),
    )
