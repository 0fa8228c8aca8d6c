# scripts/init_db.py
"""
Создаёт все таблицы (без alembic) и проверяет соединение.
Usage: python scripts/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from sqlalchemy import inspect, text

from app.config import settings
from app.db import create_tables, engine


def main():
    print(f"Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("Database connection OK")
    except Exception as e:
        print(f"Cannot connect to database: {e}")
        sys.exit(1)

    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"Tables ({len(tables)}):")
    for t in tables:
        print(f"  - {t}")


if __name__ == "__main__":
    main()
