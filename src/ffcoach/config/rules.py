"""League lineup rules for supported scoring formats."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Tuple

POSITIONS: Tuple[str, ...] = ("QB", "RB", "WR", "TE", "K", "D/ST")
UNKNOWN_POSITION = "??"

# ESPN defaultPositionId -> label
ESPN_POSITION_LABELS: Mapping[int, str] = {
    1: "QB",
    2: "RB",
    3: "WR",
    4: "TE",
    5: "K",
    16: "D/ST",
}


@dataclass(frozen=True)
class LeagueRules:
    lineup_format: str
    starter_counts: Mapping[str, int]
    starter_cutoff: int
    bench_slot_id: int = 20
    position_labels: Mapping[int, str] = field(default_factory=lambda: dict(ESPN_POSITION_LABELS))
    stream_positions: Tuple[str, ...] = ("QB", "K", "D/ST")
    stream_rank_threshold: int = 8

    def position_label(self, position_id: int | None) -> str:
        if position_id is None:
            return UNKNOWN_POSITION
        return self.position_labels.get(position_id, UNKNOWN_POSITION)


_LEAGUE_RULES: Dict[str, LeagueRules] = {
    "STANDARD": LeagueRules(
        lineup_format="STANDARD",
        starter_counts={"QB": 1, "RB": 2, "WR": 2, "TE": 1, "K": 1, "D/ST": 1},
        starter_cutoff=9,
    ),
    "SUPERFLEX": LeagueRules(
        lineup_format="SUPERFLEX",
        starter_counts={"QB": 2, "RB": 2, "WR": 2, "TE": 1, "K": 1, "D/ST": 1},
        starter_cutoff=10,
    ),
}

DEFAULT_RULES = _LEAGUE_RULES["STANDARD"]


def iter_rules() -> Iterable[LeagueRules]:
    """Return an iterator of all configured rule sets."""

    return _LEAGUE_RULES.values()


def get_rules(lineup_format: str) -> LeagueRules:
    """Fetch rules for a lineup format, raising KeyError if missing."""

    key = lineup_format.upper()
    if key not in _LEAGUE_RULES:
        raise KeyError(f"No league rules configured for lineup_format={lineup_format!r}")
    return _LEAGUE_RULES[key]
