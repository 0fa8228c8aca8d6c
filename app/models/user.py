import datetime as dt
import enum

from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship

from ..db import Base


class UserRole(str, enum.Enum):
    CUSTOMER = "customer"
    DRIVER   = "driver"
    ADMIN    = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, index=True, nullable=False)  # всегда lower+strip
    password_hash = Column(String(255), nullable=True)

    full_name = Column(String(200), nullable=True)
    phone_number = Column(String(50), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    role = Column(
        Enum(UserRole, values_callable=lambda e: [x.value for x in e]),
        nullable=False,
        default=UserRole.CUSTOMER,
    )

    created_at = Column(DateTime(timezone=True), default=dt.datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow)

    driver_profile = relationship(
        "DriverProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    tags = relationship(
        "DriverTag", back_populates="driver", cascade="all, delete-orphan", order_by="DriverTag.id"
    )

    # Удобное отображаемое имя
    @property
    def display_name(self) -> str:
        return self.full_name or self.email

    def to_dict(self):
        return {
            "id": self.id,
            "full_name": self.full_name,
            "email": self.email,
            "phone_number": self.phone_number,
            "avatar_url": self.avatar_url,
            "role": self.role.value if hasattr(self.role, "value") else self.role,
        }
