"""Normalized league models shared by the ingest, coaching and API layers."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


class FrozenModel(BaseModel):
    """Immutable DTO serialized with camelCase keys."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class PlayerCard(FrozenModel):
    """A rostered player in the context of one scoring period."""

    id: int
    name: str
    team: str = ""
    position: str
    projected_points: float = 0.0
    actual_points: float = 0.0
    bench: bool = False
    injury_status: Optional[str] = None


class TeamSide(FrozenModel):
    team_id: int
    name: str
    total_points: float = 0.0
    total_projected_points_live: Optional[float] = None
    roster: List[PlayerCard] = Field(default_factory=list)

    @computed_field(alias="totalProjectedPoints")  # type: ignore[prop-decorator]
    @property
    def total_projected_points(self) -> float:
        """Sum of projected points over the active (non-bench) roster."""

        return sum(card.projected_points for card in self.roster if not card.bench)


class MatchupDTO(FrozenModel):
    week: int
    matchup_id: Optional[int] = None
    home: TeamSide
    away: TeamSide

    def side_for(self, team_id: int) -> Optional[TeamSide]:
        if self.home.team_id == team_id:
            return self.home
        if self.away.team_id == team_id:
            return self.away
        return None

    def opponent_of(self, team_id: int) -> Optional[TeamSide]:
        if self.home.team_id == team_id:
            return self.away
        if self.away.team_id == team_id:
            return self.home
        return None


class TeamInfo(FrozenModel):
    id: int
    name: str
    abbrev: Optional[str] = None
    location: Optional[str] = None
    nickname: Optional[str] = None
    logo: Optional[str] = None


class FantasyDataDTO(FrozenModel):
    season_id: Optional[int] = None
    week: int
    matchups: List[MatchupDTO] = Field(default_factory=list)
    teams: List[TeamInfo] = Field(default_factory=list)


class LiveTeamTotal(FrozenModel):
    team_id: int
    name: str
    total_points: float = 0.0
    total_points_live: float = 0.0


class LiveScoreboard(FrozenModel):
    week: int
    teams: List[LiveTeamTotal] = Field(default_factory=list)
