"""Persist and load CLI league profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class LeagueProfile:
    league_id: Optional[int] = None
    season_id: Optional[int] = None
    team_id: Optional[int] = None
    lineup_format: Optional[str] = None

    @classmethod
    def load(cls, path: Path) -> "LeagueProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            league_id=data.get("league_id"),
            season_id=data.get("season_id"),
            team_id=data.get("team_id"),
            lineup_format=data.get("lineup_format"),
        )

    def save(self, path: Path) -> None:
        payload = {
            "league_id": self.league_id,
            "season_id": self.season_id,
            "team_id": self.team_id,
            "lineup_format": self.lineup_format,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
