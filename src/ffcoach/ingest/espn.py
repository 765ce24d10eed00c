"""Parse raw ESPN league payloads and emit normalized fantasy DTOs."""

from __future__ import annotations

import logging
import math
from typing import Annotated, Any, Dict, Iterable, List, Mapping, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, BeforeValidator, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from ffcoach.config import DEFAULT_RULES, LeagueRules
from ffcoach.errors import MalformedBundle
from ffcoach.models import (
    FantasyDataDTO,
    LiveScoreboard,
    LiveTeamTotal,
    MatchupDTO,
    PlayerCard,
    TeamInfo,
    TeamSide,
)


logger = logging.getLogger(__name__)

ACTUAL_STAT_SOURCE = 0
PROJECTED_STAT_SOURCE = 1
UNKNOWN_TEAM_ID = -1


def _coerce_float(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _coerce_optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


Points = Annotated[float, BeforeValidator(_coerce_float)]
OptionalPoints = Annotated[Optional[float], BeforeValidator(_coerce_optional_float)]


class _RawModel(BaseModel):
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)


class RawStatLine(_RawModel):
    season_id: Optional[int] = None
    scoring_period_id: Optional[int] = None
    stat_source_id: Optional[int] = None
    applied_total: OptionalPoints = None
    applied_stats: Optional[Dict[str, Points]] = None
    stats: Optional[Dict[str, Points]] = None

    def applied_points(self) -> float:
        """Fantasy points for the line: explicit total, else applied breakdown, else raw breakdown."""

        if self.applied_total is not None:
            return self.applied_total
        if self.applied_stats is not None:
            return sum(self.applied_stats.values())
        if self.stats is not None:
            return sum(self.stats.values())
        return 0.0


class RawPlayer(_RawModel):
    id: int
    full_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    default_position_id: Optional[int] = None
    pro_team_abbreviation: Optional[str] = None
    injury_status: Optional[str] = None
    stats: List[RawStatLine] = Field(default_factory=list)

    @field_validator("stats", mode="before")
    @classmethod
    def _null_stats(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []

    @property
    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or f"Player {self.id}"


class RawPlayerPoolEntry(_RawModel):
    applied_stat_total: OptionalPoints = None
    player: RawPlayer


class RawRosterEntry(_RawModel):
    lineup_slot_id: Optional[int] = None
    injury_status: Optional[str] = None
    player_pool_entry: RawPlayerPoolEntry


class RawRoster(_RawModel):
    entries: List[RawRosterEntry] = Field(default_factory=list)


class RawTeam(_RawModel):
    id: int
    abbrev: Optional[str] = None
    location: Optional[str] = None
    nickname: Optional[str] = None
    name: Optional[str] = None
    logo: Optional[str] = None
    roster: Optional[RawRoster] = None


class RawTeamSide(_RawModel):
    team_id: Optional[int] = None
    total_points: Points = 0.0
    total_points_live: OptionalPoints = None
    total_projected_points_live: OptionalPoints = None
    roster_for_current_scoring_period: Optional[RawRoster] = None


class RawScheduleEntry(_RawModel):
    id: Optional[int] = None
    matchup_id: Optional[int] = None
    matchup_period_id: Optional[int] = None
    home: RawTeamSide
    away: RawTeamSide


class RawWeeklyBundle(_RawModel):
    season_id: Optional[int] = None
    scoring_period_id: Optional[int] = None
    schedule: List[RawScheduleEntry]


class _LiveHeader(_RawModel):
    scoring_period_id: Optional[int] = None


class RawSeasonStatus(_RawModel):
    latest_scoring_period: Optional[int] = None


class RawSeasonBundle(_RawModel):
    season_id: Optional[int] = None
    status: Optional[RawSeasonStatus] = None
    schedule: List[RawScheduleEntry] = Field(default_factory=list)

    @field_validator("schedule", mode="before")
    @classmethod
    def _null_schedule(cls, value: Any) -> Any:
        return [] if value is None else value


_ModelT = TypeVar("_ModelT", bound=BaseModel)


def _parse(model: Type[_ModelT], payload: Any, what: str) -> _ModelT:
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise MalformedBundle(f"Invalid {what}: {exc.error_count()} validation error(s): {exc.errors()[0]['msg']}") from exc


def parse_teams(teams: Iterable[Mapping[str, Any] | RawTeam] | None) -> List[RawTeam]:
    return [_parse(RawTeam, team, "team") for team in teams or ()]


def team_display_name(team: Optional[RawTeam], team_id: Optional[int] = None) -> str:
    """Friendly team name: ``name``, else ``location nickname``, else ``Team <id>``."""

    if team is not None:
        name = team.name or f"{team.location or ''} {team.nickname or ''}".strip()
        return name or f"Team {team.id}"
    if team_id is None or team_id == UNKNOWN_TEAM_ID:
        return "Unknown Team"
    return f"Team {team_id}"


def _find_stat_line(
    lines: Sequence[RawStatLine],
    source_id: int,
    week: Optional[int],
    season_id: Optional[int],
) -> Optional[RawStatLine]:
    for line in lines:
        if line.stat_source_id != source_id:
            continue
        if week is not None and line.scoring_period_id != week:
            continue
        if season_id is not None and line.season_id != season_id:
            continue
        return line
    return None


def roster_to_cards(
    entries: Sequence[RawRosterEntry],
    *,
    week: Optional[int],
    season_id: Optional[int],
    rules: LeagueRules = DEFAULT_RULES,
) -> List[PlayerCard]:
    """Map roster entries to player cards for one scoring period.

    ``week`` or ``season_id`` set to ``None`` disables that stat line filter.
    """

    cards: List[PlayerCard] = []
    for entry in entries:
        pool_entry = entry.player_pool_entry
        player = pool_entry.player
        actual = _find_stat_line(player.stats, ACTUAL_STAT_SOURCE, week, season_id)
        projected = _find_stat_line(player.stats, PROJECTED_STAT_SOURCE, week, season_id)
        if actual is not None:
            actual_points = actual.applied_points()
        else:
            actual_points = pool_entry.applied_stat_total or 0.0
        cards.append(
            PlayerCard(
                id=player.id,
                name=player.display_name,
                team=player.pro_team_abbreviation or "",
                position=rules.position_label(player.default_position_id),
                projected_points=projected.applied_points() if projected is not None else 0.0,
                actual_points=actual_points,
                bench=entry.lineup_slot_id == rules.bench_slot_id,
                injury_status=entry.injury_status or player.injury_status,
            )
        )
    return cards


def _team_info(team: RawTeam) -> TeamInfo:
    return TeamInfo(
        id=team.id,
        name=team_display_name(team),
        abbrev=team.abbrev,
        location=team.location,
        nickname=team.nickname,
        logo=team.logo,
    )


def _side_team_id(side: RawTeamSide) -> int:
    return side.team_id if side.team_id is not None else UNKNOWN_TEAM_ID


def normalize_weekly(
    weekly: Mapping[str, Any] | RawWeeklyBundle,
    teams: Iterable[Mapping[str, Any] | RawTeam] | None = None,
    *,
    season_id: Optional[int] = None,
    rules: LeagueRules = DEFAULT_RULES,
) -> FantasyDataDTO:
    """Transform a weekly bundle plus the league's teams into a :class:`FantasyDataDTO`.

    Rosters come from ``teams`` (the weekly views carry none). Stat lines are
    selected for the bundle's scoring period and ``season_id`` (defaulting to
    the bundle's ``seasonId``). Raises :class:`MalformedBundle` when the bundle
    has no ``schedule``.
    """

    if isinstance(weekly, Mapping) and weekly.get("schedule") is None:
        raise MalformedBundle("Weekly bundle has no schedule")
    bundle = _parse(RawWeeklyBundle, weekly, "weekly bundle")
    raw_teams = parse_teams(teams)

    if bundle.scoring_period_id is None:
        logger.warning("Weekly bundle has no scoringPeriodId; defaulting to week 0")
    week = bundle.scoring_period_id or 0
    season = season_id if season_id is not None else bundle.season_id
    index = {team.id: team for team in raw_teams}

    def build_side(side: RawTeamSide) -> TeamSide:
        team_id = _side_team_id(side)
        team = index.get(team_id)
        entries = team.roster.entries if team is not None and team.roster is not None else []
        return TeamSide(
            team_id=team_id,
            name=team_display_name(team, team_id),
            total_points=side.total_points,
            total_projected_points_live=side.total_projected_points_live,
            roster=roster_to_cards(entries, week=week, season_id=season, rules=rules),
        )

    matchups = [
        MatchupDTO(
            week=entry.matchup_period_id if entry.matchup_period_id is not None else week,
            matchup_id=entry.matchup_id if entry.matchup_id is not None else entry.id,
            home=build_side(entry.home),
            away=build_side(entry.away),
        )
        for entry in bundle.schedule
    ]
    logger.debug("Normalized %s matchups for week %s", len(matchups), week)
    return FantasyDataDTO(
        season_id=season,
        week=week,
        matchups=matchups,
        teams=[_team_info(team) for team in raw_teams],
    )


def normalize_season(
    season: Mapping[str, Any] | RawSeasonBundle,
    teams: Iterable[Mapping[str, Any] | RawTeam] | None = None,
    *,
    rules: LeagueRules = DEFAULT_RULES,
) -> FantasyDataDTO:
    """Transform a season (``mMatchupScore``) bundle into a DTO spanning every matchup period.

    Rosters come from each side's ``rosterForCurrentScoringPeriod`` snapshot.
    """

    bundle = _parse(RawSeasonBundle, season, "season bundle")
    raw_teams = parse_teams(teams)
    index = {team.id: team for team in raw_teams}

    def build_side(side: RawTeamSide) -> TeamSide:
        team_id = _side_team_id(side)
        snapshot = side.roster_for_current_scoring_period
        return TeamSide(
            team_id=team_id,
            name=team_display_name(index.get(team_id), team_id),
            total_points=side.total_points,
            roster=roster_to_cards(
                snapshot.entries if snapshot is not None else [],
                week=None,
                season_id=None,
                rules=rules,
            ),
        )

    matchups = [
        MatchupDTO(
            week=entry.matchup_period_id or 0,
            matchup_id=entry.id,
            home=build_side(entry.home),
            away=build_side(entry.away),
        )
        for entry in bundle.schedule
    ]
    latest = bundle.status.latest_scoring_period if bundle.status is not None else None
    return FantasyDataDTO(
        season_id=bundle.season_id,
        week=latest or 1,
        matchups=matchups,
        teams=[_team_info(team) for team in raw_teams],
    )


def transform_live_data(
    live: Mapping[str, Any],
    teams: Iterable[Mapping[str, Any] | RawTeam] | None = None,
) -> LiveScoreboard:
    """Per-team actual and live totals from a live-scoring payload.

    Falls back to every known team at zero when the payload carries no schedule.
    """

    raw_teams = parse_teams(teams)
    index = {team.id: team for team in raw_teams}
    week = _parse(_LiveHeader, live, "live bundle").scoring_period_id or 0
    schedule = [_parse(RawScheduleEntry, entry, "schedule entry") for entry in live.get("schedule") or []]

    buckets: dict[int, LiveTeamTotal] = {}
    for entry in schedule:
        for side in (entry.home, entry.away):
            if side.team_id is None or side.team_id < 0:
                continue
            live_total = side.total_points_live if side.total_points_live is not None else side.total_points
            previous = buckets.get(side.team_id)
            buckets[side.team_id] = LiveTeamTotal(
                team_id=side.team_id,
                name=team_display_name(index.get(side.team_id), side.team_id),
                total_points=max(previous.total_points if previous else 0.0, side.total_points),
                total_points_live=max(previous.total_points_live if previous else 0.0, live_total),
            )

    if not buckets:
        for team in raw_teams:
            buckets[team.id] = LiveTeamTotal(team_id=team.id, name=team_display_name(team))

    return LiveScoreboard(week=week, teams=[buckets[key] for key in sorted(buckets)])
