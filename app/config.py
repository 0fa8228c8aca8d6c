# app/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AliasChoices


class Settings(BaseSettings):
    # читаем .env, не падаем на лишние ключи
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    # База данных
    DATABASE_URL: str = "sqlite:///./rides.db"

    # Админы, которых пускаем независимо от users.role (через запятую)
    ADMIN_EMAILS: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ADMIN_EMAILS", "admin_emails"),
    )

    # Безопасность и куки
    SECRET_KEY: str = "dev-secret"
    SESSION_SECRET_KEY: str | None = None
    COOKIE_NAME: str = "access_token"
    COOKIE_SECURE: bool = False
    COOKIE_SAMESITE: str = "lax"
    PASSWORD_MIN_LENGTH: int = 6

    # JWT
    JWT_TTL_SEC: int = 60 * 60 * 24 * 7
    JWT_ALG: str = "HS256"

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Логи
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None

    # Часовой пояс форм бронирования и «сегодня» водителя (Jaco, UTC-6)
    APP_TIMEZONE: str = "America/Costa_Rica"

    # Тарифы
    AIRPORT_TRANSFER_FARE: float = 60.0
    CITY_TOUR_HOURLY_RATE: float = 45.0
    CITY_TOUR_MIN_HOURS: int = 2
    CITY_TOUR_MAX_HOURS: int = 8

    # Аналитика
    RECENT_REVIEWS_LIMIT: int = 6
    POPULAR_DESTINATIONS_LIMIT: int = 5

    @property
    def admin_emails(self) -> set[str]:
        if not self.ADMIN_EMAILS:
            return set()
        return {e.strip().lower() for e in self.ADMIN_EMAILS.split(",") if e.strip()}


settings = Settings()
