"""Input adapters that normalize raw league payloads."""

from .espn import (
    RawScheduleEntry,
    RawStatLine,
    RawTeam,
    RawWeeklyBundle,
    normalize_season,
    normalize_weekly,
    parse_teams,
    roster_to_cards,
    team_display_name,
    transform_live_data,
)

__all__ = [
    "RawScheduleEntry",
    "RawStatLine",
    "RawTeam",
    "RawWeeklyBundle",
    "normalize_season",
    "normalize_weekly",
    "parse_teams",
    "roster_to_cards",
    "team_display_name",
    "transform_live_data",
]
