"""Application configuration."""

from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "PickFoo Owner API"
    log_level: str = getenv("LOG_LEVEL", "INFO")
    database_url: str = getenv("DATABASE_URL", "sqlite:///./pickfoo.db")
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "60"))
    admin_email: str = getenv("ADMIN_EMAIL", "")
    admin_password: str = getenv("ADMIN_PASSWORD", "")
    scheduler_enabled: bool = getenv("SCHEDULER_ENABLED", "1") == "1"
    scheduler_interval_seconds: float = float(getenv("SCHEDULER_INTERVAL_SECONDS", "60"))
    # Empty means the server's local time zone.
    scheduler_timezone: str = getenv("SCHEDULER_TIMEZONE", "")


settings: Settings = Settings()
