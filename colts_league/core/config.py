from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./colts_league.db"

    # Where the {"currentSeason": ...} document lives (URL or file path)
    SEASON_CONFIG_SOURCE: str = ".config.json"
    SEASON_CONFIG_TIMEOUT: float = 5.0
    FALLBACK_SEASON: str = "2025-26"

    SCHEDULER_ENABLED: bool = False
    RECALCULATE_HOUR: int = 4
    RECALCULATE_MINUTE: int = 0

    # Go up two levels from core/config.py → project root
    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[2] / ".env"),
        extra="ignore",
    )

settings = Settings()
