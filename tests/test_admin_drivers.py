# tests/test_admin_drivers.py
"""Admin driver management: provisioning, edits, availability, tags, removal."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from app.models.trip import Trip, TripStatus
from app.models.user import User, UserRole
from app.models.driver import DriverProfile, DriverTag

from conftest import make_driver, make_trip, client_for


def _new_driver(**overrides):
    body = {
        "email": "new.driver@example.com",
        "password": "drive123",
        "full_name": "Nico Wheels",
        "phone_number": "+50688887777",
        "license_number": "CR-998",
        "vehicle_make": "Hyundai",
        "vehicle_model": "H1",
        "vehicle_year": 2020,
        "vehicle_color": "Black",
        "vehicle_plate": "SJB-123",
    }
    body.update(overrides)
    return body


class TestAccess:
    def test_customer_forbidden(self, customer_client):
        assert customer_client.get("/api/admin/drivers").status_code == 403

    def test_admin_in_customer_view_forbidden(self, admin):
        assert client_for(admin, "customer").get("/api/admin/drivers").status_code == 403

    def test_anonymous(self, anon_client, db):
        assert anon_client.get("/api/admin/drivers").status_code == 401


class TestCreate:
    def test_creates_account_and_active_profile(self, admin_client, db):
        resp = admin_client.post("/api/admin/drivers", json=_new_driver())
        assert resp.status_code == 201
        u = db.get(User, resp.json()["driver_id"])
        assert u.role == UserRole.DRIVER
        assert u.driver_profile.is_active is True
        assert u.driver_profile.vehicle_plate == "SJB-123"

        drivers = admin_client.get("/api/admin/drivers").json()
        assert [d["email"] for d in drivers] == ["new.driver@example.com"]

    def test_new_driver_can_log_in(self, admin_client, anon_client):
        admin_client.post("/api/admin/drivers", json=_new_driver())
        resp = anon_client.post(
            "/api/auth/login",
            json={"email": "new.driver@example.com", "password": "drive123", "role": "driver"},
        )
        assert resp.status_code == 200

    def test_duplicate_email(self, admin_client, customer):
        resp = admin_client.post("/api/admin/drivers", json=_new_driver(email=customer.email))
        assert resp.status_code == 400

    def test_short_password_creates_nothing(self, admin_client, db):
        resp = admin_client.post("/api/admin/drivers", json=_new_driver(password="abc"))
        assert resp.status_code == 400
        assert db.query(User).filter_by(email="new.driver@example.com").first() is None
        assert db.query(DriverProfile).count() == 0

    def test_vehicle_year_range(self, admin_client):
        assert admin_client.post("/api/admin/drivers", json=_new_driver(vehicle_year=1900)).status_code == 422


class TestUpdate:
    def test_only_non_empty_fields_change(self, admin_client, driver, db):
        resp = admin_client.patch(
            f"/api/admin/drivers/{driver.id}",
            json={"vehicle_color": "Red", "vehicle_plate": "", "full_name": None},
        )
        assert resp.status_code == 200
        db.refresh(driver)
        assert driver.driver_profile.vehicle_color == "Red"
        assert driver.driver_profile.vehicle_plate == "JCO-001"
        assert driver.full_name == "Dan Driver"

    def test_is_active_flag(self, admin_client, driver, db):
        admin_client.patch(f"/api/admin/drivers/{driver.id}", json={"is_active": False})
        db.refresh(driver)
        assert driver.driver_profile.is_active is False

    def test_unknown_driver(self, admin_client):
        assert admin_client.patch("/api/admin/drivers/9999", json={"vehicle_color": "Red"}).status_code == 404

    def test_customer_is_not_a_driver(self, admin_client, customer):
        resp = admin_client.patch(f"/api/admin/drivers/{customer.id}", json={"vehicle_color": "Red"})
        assert resp.status_code == 404


class TestAvailability:
    def test_inactive_driver_leaves_dispatch_list(self, admin_client, driver):
        active = admin_client.get("/api/admin/drivers/active").json()
        assert [d["id"] for d in active] == [driver.id]

        resp = admin_client.post(f"/api/admin/drivers/{driver.id}/active", json={"is_active": False})
        assert resp.json()["is_active"] is False
        assert admin_client.get("/api/admin/drivers/active").json() == []


class TestTags:
    def test_add_is_idempotent_and_remove(self, admin_client, driver, db):
        url = f"/api/admin/drivers/{driver.id}/tags"
        assert admin_client.post(url, json={"tag": " bilingual "}).json()["tags"] == ["bilingual"]
        admin_client.post(url, json={"tag": "van"})
        assert admin_client.post(url, json={"tag": "bilingual"}).json()["tags"] == ["bilingual", "van"]

        resp = admin_client.delete(f"{url}/bilingual")
        assert resp.json()["tags"] == ["van"]
        assert db.query(DriverTag).count() == 1

        listed = admin_client.get("/api/admin/drivers").json()[0]
        assert listed["tags"] == ["van"]

    def test_tag_with_slash_can_be_removed(self, admin_client, driver, db):
        url = f"/api/admin/drivers/{driver.id}/tags"
        admin_client.post(url, json={"tag": "airport/cruise"})
        resp = admin_client.delete(f"{url}/airport%2Fcruise")
        assert resp.status_code == 200
        assert resp.json()["tags"] == []
        assert db.query(DriverTag).count() == 0

    def test_tag_with_quote_stays_out_of_onclick(self, admin_client, driver):
        admin_client.post(f"/api/admin/drivers/{driver.id}/tags", json={"tag": "driver's pick"})
        page = admin_client.get("/admin", params={"tab": "drivers"}).text
        assert 'data-tag="driver&#39;s pick"' in page
        assert f"removeTag({driver.id}, this.dataset.tag)" in page
        assert f"removeTag({driver.id}, '" not in page

    @pytest.mark.parametrize("tag", ["   ", "x" * 51])
    def test_invalid_tags(self, admin_client, driver, tag):
        resp = admin_client.post(f"/api/admin/drivers/{driver.id}/tags", json={"tag": tag})
        assert resp.status_code == 400


class TestListStats:
    def test_per_driver_totals(self, admin_client, driver, customer, db):
        make_trip(db, customer, status=TripStatus.COMPLETED, driver=driver, cost=60, rating=5, reviewed=True)
        make_trip(db, customer, status=TripStatus.COMPLETED, driver=driver, cost=90, rating=4, reviewed=True)
        make_trip(db, customer, status=TripStatus.CANCELLED, driver=driver, cost=45)
        make_trip(db, customer, driver=driver, cost=60)

        d = admin_client.get("/api/admin/drivers").json()[0]
        assert d["total_trips"] == 4
        assert d["completed_trips"] == 2
        assert d["cancelled_trips"] == 1
        assert d["total_revenue"] == 150
        assert d["average_rating"] == 4.5
        assert d["is_active"] is True
        assert d["driver_profile"]["vehicle_make"] == "Toyota"


class TestRemove:
    def test_active_trips_go_back_to_queue(self, admin_client, driver, customer, db):
        scheduled = make_trip(db, customer, driver=driver)
        en_route = make_trip(db, customer, status=TripStatus.EN_ROUTE, driver=driver)
        done = make_trip(db, customer, status=TripStatus.COMPLETED, driver=driver, rating=5, reviewed=True)
        admin_client.post(f"/api/admin/drivers/{driver.id}/tags", json={"tag": "van"})
        driver_id = driver.id

        resp = admin_client.delete(f"/api/admin/drivers/{driver_id}")
        assert resp.status_code == 200
        assert resp.json()["reassigned_trips"] == 2

        for t in (scheduled, en_route):
            db.refresh(t)
            assert t.status == TripStatus.SCHEDULED
            assert t.driver_id is None
        db.refresh(done)
        assert done.status == TripStatus.COMPLETED
        assert done.driver_id is None

        assert db.get(User, driver_id) is None
        assert db.query(DriverProfile).count() == 0
        assert db.query(DriverTag).count() == 0
        assert db.query(Trip).count() == 3

    def test_customer_view_of_trip_after_removal(self, admin_client, driver, customer, db):
        t = make_trip(db, customer, driver=driver)
        admin_client.delete(f"/api/admin/drivers/{driver.id}")
        trip = client_for(customer).get(f"/api/trips/{t.id}").json()["trip"]
        assert trip["driver"] is None
        assert trip["status"] == "scheduled"

    def test_unknown_driver(self, admin_client):
        assert admin_client.delete("/api/admin/drivers/9999").status_code == 404

    def test_other_drivers_untouched(self, admin_client, driver, customer, db):
        other = make_driver(db, email="keep@example.com", full_name="Keep Me")
        t = make_trip(db, customer, driver=other)
        admin_client.delete(f"/api/admin/drivers/{driver.id}")
        db.refresh(t)
        assert t.driver_id == other.id
