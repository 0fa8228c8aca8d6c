# scripts/promote_admin.py
"""
Выдать админку существующей учётке.
Usage: python scripts/promote_admin.py user@example.com
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.db import SessionLocal
from app.models import driver, trip  # noqa: F401  регистрируем все модели
from app.services.users import promote_to_admin


def main(argv=None):
    parser = argparse.ArgumentParser(description="Promote an account to admin")
    parser.add_argument("email")
    args = parser.parse_args(argv)

    with SessionLocal() as db:
        try:
            u = promote_to_admin(db, args.email)
        except LookupError as e:
            print(f"Error: {e}")
            sys.exit(1)

    print(f"{u.email} is now an admin")


if __name__ == "__main__":
    main()
