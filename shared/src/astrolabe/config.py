"""Application configuration from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from astrolabe.schemas.chart import HouseSystem


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Swiss Ephemeris data files; empty means the built-in Moshier ephemeris
    ephe_path: str = Field(default="", alias="SWISSEPH_EPHE_PATH")

    # Chart defaults
    house_system: HouseSystem = Field(default=HouseSystem.WHOLE_SIGN, alias="ASTRO_HOUSE_SYSTEM")
    speed_step_days: float = Field(default=1.0 / 24.0, gt=0.0, alias="ASTRO_SPEED_STEP_DAYS")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


class EphemerisConfig(BaseModel):
    """Options handed to the ephemeris provider."""

    ephe_path: str | None = None
    flags: int = 0

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, settings: Settings) -> EphemerisConfig:
        path = settings.ephe_path.strip()
        return cls(ephe_path=path or None)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reset_settings_cache() -> None:
    """Clear cached settings (useful in tests)."""
    get_settings.cache_clear()
