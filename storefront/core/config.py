# storefront/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string, or sqlite:/// for local runs)
      - JWT_SECRET (HS256 signing secret for access tokens)

    Optional:
      - DB_SSLMODE (appended to Postgres URLs, e.g. "require")
      - pricing knobs (SHIPPING_FLAT_FEE, FREE_SHIPPING_THRESHOLD, TAX_RATE)
    """

    PROJECT_NAME: str = "Storefront API"
    API_V1_STR: str = "/api/v1"

    # Database
    DATABASE_URL: str
    DB_SSLMODE: str | None = None

    # JWT signing / verification
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Address book / shipping snapshot default
    DEFAULT_COUNTRY: str = "India"

    # Pricing policy (cash on delivery only, so no payment fees)
    SHIPPING_FLAT_FEE: float = 0.0
    FREE_SHIPPING_THRESHOLD: float | None = None
    TAX_RATE: float = 0.0

    # How many times checkout regenerates an order number on collision
    ORDER_NUMBER_MAX_ATTEMPTS: int = 5

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
