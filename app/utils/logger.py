# app/utils/logger.py
"""
Общая настройка логов для всего приложения.
Консоль всегда; файл с ротацией, только если задан LOG_FILE.
"""

import logging
from logging.handlers import RotatingFileHandler

from app.config import settings

_configured = False


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    level = settings.LOG_LEVEL.upper()
    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(console)

    if settings.LOG_FILE:
        # 10 файлов по 5MB
        file_handler = RotatingFileHandler(
            filename=settings.LOG_FILE,
            maxBytes=5 * 1024 * 1024,
            backupCount=10,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Named logger; the first call configures the root logger."""
    _configure_root_logger()
    return logging.getLogger(name)
