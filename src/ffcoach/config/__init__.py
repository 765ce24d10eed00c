"""Configuration helpers for league rules and runtime settings."""

from .rules import DEFAULT_RULES, POSITIONS, LeagueRules, get_rules, iter_rules
from .settings import LeagueSettings, load_settings

__all__ = [
    "DEFAULT_RULES",
    "POSITIONS",
    "LeagueRules",
    "LeagueSettings",
    "get_rules",
    "iter_rules",
    "load_settings",
]
