import os
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    ENV: str = os.getenv("ENV", "development")  # development, dev-server, production
    DEBUG: bool = ENV in ["development", "dev-server"]

    # Database settings
    POSTGRES_HOST: str = os.getenv("POSTGRES_HOST", "localhost")
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "rapidwaste")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "rapidwaste")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "rapidwaste_db")
    POSTGRES_PORT: int = int(os.getenv("POSTGRES_PORT", "5432"))
    DATABASE_URL: str = os.getenv("DATABASE_URL", f"postgresql://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}")

    # Database connection pool settings
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "20"))
    DB_POOL_TIMEOUT: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    DB_POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "3600"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_COLORS: bool = os.getenv("LOG_COLORS", "true").lower() == "true"

    # Booking engine
    BOOKING_ID_MAX_ATTEMPTS: int = int(os.getenv("BOOKING_ID_MAX_ATTEMPTS", "5"))
    DRIVER_SEQUENCE_NAME: str = "driver_number"

    # Payments
    PAYMENT_PROVIDER: str = os.getenv("PAYMENT_PROVIDER", "manual")
    PAYMENT_CURRENCY: str = os.getenv("PAYMENT_CURRENCY", "usd")

    # Comma separated list, empty means allow all
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")

    # Seed accounts
    SEED_ADMIN_EMAIL: str = os.getenv("SEED_ADMIN_EMAIL", "admin@rapidwaste.com")
    SEED_ADMIN_PASSWORD: str = os.getenv("SEED_ADMIN_PASSWORD", "admin123")
    SEED_DRIVER_EMAIL: str = os.getenv("SEED_DRIVER_EMAIL", "driver@rapidwaste.com")
    SEED_DRIVER_PASSWORD: str = os.getenv("SEED_DRIVER_PASSWORD", "password123")

    # API specific settings
    API_PREFIX: str = "/api/v1"
    APP_NAME: str = "RapidWaste"
    APP_VERSION: str = "1.0.0"

    @property
    def cors_origin_list(self) -> list:
        origins = [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
        return origins or ["*"]

    class Config:
        case_sensitive = True
        env_file = None

settings = Settings()
