# scripts/create_test_driver.py
"""
Демо-водитель для локальной разработки.
Usage: python scripts/create_test_driver.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.db import SessionLocal, create_tables
from app.services.driver import create_driver

TEST_DRIVER = {
    "email": "testdriver@example.com",
    "password": "testdriver123",
    "full_name": "Test Driver",
    "phone_number": "+1234567890",
    "license_number": "DL123456",
    "vehicle_make": "Toyota",
    "vehicle_model": "Camry",
    "vehicle_year": 2022,
    "vehicle_color": "Silver",
    "vehicle_plate": "ABC123",
}


def main():
    create_tables()
    with SessionLocal() as db:
        try:
            u = create_driver(db, TEST_DRIVER)
        except ValueError as e:
            print(f"Error creating test driver: {e}")
            sys.exit(1)

    print("Test driver created successfully!")
    print(f"ID: {u.id}")
    print(f"Email: {TEST_DRIVER['email']}")
    print(f"Password: {TEST_DRIVER['password']}")


if __name__ == "__main__":
    main()
