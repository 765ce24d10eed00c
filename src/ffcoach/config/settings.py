"""Runtime settings for the league client and summarizer."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Optional


logger = logging.getLogger(__name__)

ESPN_API_ROOT = "https://lm-api-reads.fantasy.espn.com/apis/v3/games/ffl"
DEFAULT_LLM_BASE_URL = "https://api.openai.com/v1"
DEFAULT_LLM_MODEL = "gpt-4o-mini"
DEFAULT_LLM_TIMEOUT = 5.0

_LEAGUE_ID_ENV = "FFCOACH_LEAGUE_ID"
_SEASON_ENV = "FFCOACH_SEASON"
_TEAM_ID_ENV = "FFCOACH_TEAM_ID"
_FORMAT_ENV = "FFCOACH_LINEUP_FORMAT"
_SWID_ENV = "ESPN_SWID"
_ESPN_S2_ENV = "ESPN_S2"
_LLM_KEY_ENV = "OPENAI_API_KEY"
_LLM_BASE_URL_ENV = "FFCOACH_LLM_BASE_URL"
_LLM_MODEL_ENV = "FFCOACH_LLM_MODEL"
_LLM_TIMEOUT_ENV = "FFCOACH_LLM_TIMEOUT"

_LEAGUE_ID_DEFAULT = 1820127949
_SEASON_DEFAULT = 2025
_TEAM_ID_DEFAULT = 11


def _env_float(name: str, default: float, *, clamp_min: float | None = None, clamp_max: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    if clamp_max is not None:
        value = min(clamp_max, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


@dataclass(frozen=True)
class LeagueSettings:
    league_id: int = _LEAGUE_ID_DEFAULT
    season_id: int = _SEASON_DEFAULT
    team_id: int = _TEAM_ID_DEFAULT
    swid: Optional[str] = None
    espn_s2: Optional[str] = None
    api_root: str = ESPN_API_ROOT
    lineup_format: str = "STANDARD"
    llm_api_key: Optional[str] = None
    llm_base_url: str = DEFAULT_LLM_BASE_URL
    llm_model: str = DEFAULT_LLM_MODEL
    llm_timeout: float = DEFAULT_LLM_TIMEOUT

    @property
    def league_url(self) -> str:
        return f"{self.api_root}/seasons/{self.season_id}/segments/0/leagues/{self.league_id}"

    def with_overrides(self, **changes: object) -> "LeagueSettings":
        """Return a copy with the non-None keyword values applied."""

        return replace(self, **{key: value for key, value in changes.items() if value is not None})


def load_settings() -> LeagueSettings:
    """Build settings from ``FFCOACH_*``, ``ESPN_*`` and ``OPENAI_API_KEY`` variables."""

    return LeagueSettings(
        league_id=_env_int(_LEAGUE_ID_ENV, _LEAGUE_ID_DEFAULT, min_value=1),
        season_id=_env_int(_SEASON_ENV, _SEASON_DEFAULT, min_value=2000),
        team_id=_env_int(_TEAM_ID_ENV, _TEAM_ID_DEFAULT, min_value=1),
        swid=os.getenv(_SWID_ENV) or None,
        espn_s2=os.getenv(_ESPN_S2_ENV) or None,
        lineup_format=os.getenv(_FORMAT_ENV, "STANDARD").upper(),
        llm_api_key=os.getenv(_LLM_KEY_ENV) or None,
        llm_base_url=os.getenv(_LLM_BASE_URL_ENV, DEFAULT_LLM_BASE_URL).rstrip("/"),
        llm_model=os.getenv(_LLM_MODEL_ENV, DEFAULT_LLM_MODEL),
        llm_timeout=_env_float(_LLM_TIMEOUT_ENV, DEFAULT_LLM_TIMEOUT, clamp_min=0.5, clamp_max=60.0),
    )
