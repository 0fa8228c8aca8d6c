from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from .config import settings

# ---------- Declarative Base ----------
class Base(DeclarativeBase):
    pass

# ---------- Engine / Session ----------
# Строка берётся из настроек (.env через app.config.settings)
DATABASE_URL = settings.DATABASE_URL


def _sqlite_foreign_keys(dbapi_conn, _record):
    # sqlite по умолчанию не проверяет FK и игнорирует ON DELETE
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys = ON")
    cur.close()


def make_engine(url: str, **kw):
    """
    SQLite (локально, тесты) или PostgreSQL (прод).
    """
    if url.startswith("sqlite"):
        # FastAPI ходит в базу из пула потоков
        kw.setdefault("connect_args", {"check_same_thread": False})
        eng = create_engine(url, future=True, **kw)
        event.listen(eng, "connect", _sqlite_foreign_keys)
        return eng
    return create_engine(url, pool_pre_ping=True, future=True, **kw)


engine = make_engine(DATABASE_URL)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    future=True,
)


def create_tables(bind=None):
    # импорт моделей, чтобы create_all увидел все таблицы
    from app.models import user, driver, trip  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


# ---------- Dependency ----------
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
