from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ─── App ──────────────────────────────
    APP_NAME: str = "ephemera-core"
    ENV: str = "local"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # ─── Ephemeris ────────────────────────
    # Unset means the Moshier fallback built into Swiss Ephemeris
    EPHE_PATH: Optional[str] = None
    DEFAULT_NODE_TYPE: str = "true"

    # ─── Chart / Transits ─────────────────
    ASPECTS_INCLUDE_ANGLES: bool = False
    TRANSIT_TOP_N: int = 6

    # ─── Redis ────────────────────────────
    CACHE_ENABLED: bool = True
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None
    REDIS_TIMEOUT: float = 5.0
    TRANSIT_CACHE_TTL: int = 60 * 5

    # ─── Geocoding ────────────────────────
    GEOCODING_API_URL: str = "https://geocoding-api.open-meteo.com/v1/search"
    GEOCODING_TIMEOUT: float = 10.0


    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
