import json
import logging
from pathlib import Path
from typing import Optional

import httpx
from fastapi import Request
from pydantic import BaseModel, ConfigDict

from colts_league.core.config import settings

logger = logging.getLogger(__name__)


class SeasonConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_season: str
    source: str = "fallback"


async def _fetch_document(source: str, timeout: float) -> dict:
    if source.startswith(("http://", "https://")):
        async with httpx.AsyncClient(timeout=timeout) as client:
            resp = await client.get(source)
            resp.raise_for_status()
            return resp.json()
    return json.loads(Path(source).read_text(encoding="utf-8"))


async def load_season_config(
    source: Optional[str] = None,
    fallback: Optional[str] = None,
    timeout: Optional[float] = None,
) -> SeasonConfig:
    """
    Load the current season once at startup.

    Never raises: an unreachable or malformed document falls back to
    ``settings.FALLBACK_SEASON`` with a warning.
    """
    source = source or settings.SEASON_CONFIG_SOURCE
    fallback = fallback or settings.FALLBACK_SEASON
    timeout = timeout if timeout is not None else settings.SEASON_CONFIG_TIMEOUT

    try:
        document = await _fetch_document(source, timeout)
    except (httpx.HTTPError, OSError, ValueError) as e:
        logger.warning(f"⚠️ Could not load current season from {source}, using default {fallback}: {e}")
        return SeasonConfig(current_season=fallback)

    season = document.get("currentSeason") if isinstance(document, dict) else None
    if not isinstance(season, str) or not season.strip():
        logger.warning(f"⚠️ No currentSeason in {source}, using default {fallback}")
        return SeasonConfig(current_season=fallback)

    logger.info(f"📅 Current season {season} loaded from {source}")
    return SeasonConfig(current_season=season.strip(), source=source)


def get_season_config(request: Request) -> SeasonConfig:
    """FastAPI dependency: the config loaded at startup, or the fallback before it resolves."""
    season_config = getattr(request.app.state, "season_config", None)
    if season_config is None:
        return SeasonConfig(current_season=settings.FALLBACK_SEASON)
    return season_config
