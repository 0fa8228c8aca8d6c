# app/utils/clock.py
"""
Время в БД naive UTC; формы и «сегодня» водителя живут в APP_TIMEZONE.
"""
import datetime as dt
from zoneinfo import ZoneInfo

from app.config import settings


def app_tz() -> ZoneInfo:
    return ZoneInfo(settings.APP_TIMEZONE)


def local_to_utc(value: dt.datetime) -> dt.datetime:
    # naive значение из формы считаем местным
    if value.tzinfo is None:
        value = value.replace(tzinfo=app_tz())
    return value.astimezone(dt.timezone.utc).replace(tzinfo=None)


def utc_to_local(value: dt.datetime) -> dt.datetime:
    return value.replace(tzinfo=dt.timezone.utc).astimezone(app_tz()).replace(tzinfo=None)


def local_day_start(now: dt.datetime) -> dt.datetime:
    """Начало местных суток для naive-UTC момента, снова в naive UTC."""
    local = utc_to_local(now).replace(hour=0, minute=0, second=0, microsecond=0)
    return local_to_utc(local)
