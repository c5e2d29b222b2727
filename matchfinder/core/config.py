from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./matchfinder.db"

    # Football-Data.org (fixtures provider)
    FOOTBALL_DATA_API_URL: Optional[str] = "https://api.football-data.org/v4"
    FOOTBALL_DATA_API_KEY: Optional[str] = None

    # OpenCage (geocoding)
    OPENCAGE_API_URL: str = "https://api.opencagedata.com/geocode/v1/json"
    OPENCAGE_API_KEY: Optional[str] = None

    # Wikipedia (stadium lookup)
    WIKIPEDIA_API_URL: str = "https://en.wikipedia.org/w/api.php"

    # Import window: fixtures from now until now + N days
    IMPORT_HORIZON_DAYS: int = 15
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # --- Auth ---
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 60

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
