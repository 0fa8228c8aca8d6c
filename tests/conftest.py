# tests/conftest.py
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# до импорта app.*: настройки читаются при импорте
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ADMIN_EMAILS", "")

import datetime as dt

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db import Base, create_tables, get_db, make_engine
from app.main import app
from app.models.trip import Trip, TripStatus, TripType
from app.models.user import User, UserRole
from app.services.driver import create_driver
from app.utils.security import hash_password, session_token_for

PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    create_tables(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = TestingSession()
    app.dependency_overrides[get_db] = lambda: session
    yield session
    app.dependency_overrides.pop(get_db, None)
    session.close()


def make_user(db, email, role=UserRole.CUSTOMER, full_name="Test User", password=PASSWORD):
    u = User(email=email, full_name=full_name, password_hash=hash_password(password), role=role)
    db.add(u); db.commit(); db.refresh(u)
    return u


def make_driver(db, email="driver@example.com", full_name="Dan Driver", **extra):
    payload = {
        "email": email,
        "password": PASSWORD,
        "full_name": full_name,
        "phone_number": "+1555000111",
        "license_number": "DL-1",
        "vehicle_make": "Toyota",
        "vehicle_model": "Hiace",
        "vehicle_year": 2021,
        "vehicle_color": "White",
        "vehicle_plate": "JCO-001",
    }
    payload.update(extra)
    return create_driver(db, payload)


def make_trip(db, customer, status=TripStatus.SCHEDULED, driver=None, **extra):
    fields = {
        "trip_type": TripType.AIRPORT_PICKUP,
        "pickup_location": "SJO Airport",
        "pickup_time": dt.datetime.utcnow() + dt.timedelta(days=2),
        "dropoff_location": "Hotel Jaco Beach",
        "cost": 60.0,
        "reviewed": False,
    }
    fields.update(extra)
    t = Trip(user_id=customer.id, driver_id=driver.id if driver else None, status=status, **fields)
    db.add(t); db.commit(); db.refresh(t)
    return t


def client_for(user=None, role=None) -> TestClient:
    headers = {}
    if user is not None:
        headers["Authorization"] = f"Bearer {session_token_for(user, role)}"
    return TestClient(app, headers=headers)


@pytest.fixture
def customer(db):
    return make_user(db, "carla@example.com", full_name="Carla Customer")


@pytest.fixture
def driver(db):
    return make_driver(db)


@pytest.fixture
def admin(db):
    return make_user(db, "boss@example.com", role=UserRole.ADMIN, full_name="Ana Admin")


@pytest.fixture
def anon_client(db):
    return client_for()


@pytest.fixture
def customer_client(customer):
    return client_for(customer)


@pytest.fixture
def driver_client(driver):
    return client_for(driver)


@pytest.fixture
def admin_client(admin):
    return client_for(admin, "admin")


def future_iso(days=2, hours=0) -> str:
    return (dt.datetime.utcnow() + dt.timedelta(days=days, hours=hours)).replace(microsecond=0).isoformat()
