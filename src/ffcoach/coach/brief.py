"""Deterministic coach brief: start/sit swaps, positional mismatches and streamers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple

from ffcoach.config import DEFAULT_RULES, LeagueRules
from ffcoach.models import (
    AlternativeLine,
    CoachBrief,
    FantasyDataDTO,
    MatchupDTO,
    Mismatch,
    PlayerCard,
    ProjectionLine,
    StartSitAdvice,
    StreamerAdvice,
    TeamInfo,
    TeamSide,
)

from .scoring import clamp_risk, live_projection_basis, risk_adjusted_projection


logger = logging.getLogger(__name__)

NO_MATCHUP_BULLET = "No matchup found for this team/week."
SWAP_BULLET_THRESHOLD = 0.5
MAX_SWAP_BULLETS = 3
MISMATCH_DEPTH = 2
STREAMER_EXPECTED_GAIN = 2.0
HEALTHY_STATUSES = {"NORMAL", "ACTIVE"}


class RosterPartition(Protocol):
    """Split a roster into (starters, bench)."""

    def split(self, roster: Sequence[PlayerCard]) -> Tuple[List[PlayerCard], List[PlayerCard]]:
        ...


@dataclass(frozen=True)
class FirstNPartition:
    """First ``size`` roster entries in source order start; the rest sit.

    Matches a standard nine-man lineup; not slot aware.
    """

    size: int = 9

    def split(self, roster: Sequence[PlayerCard]) -> Tuple[List[PlayerCard], List[PlayerCard]]:
        return list(roster[: self.size]), list(roster[self.size :])


@dataclass(frozen=True)
class BenchFlagPartition:
    """Use the lineup-slot bench flag captured during normalization."""

    def split(self, roster: Sequence[PlayerCard]) -> Tuple[List[PlayerCard], List[PlayerCard]]:
        starters = [card for card in roster if not card.bench]
        bench = [card for card in roster if card.bench]
        return starters, bench


def _find_matchup(dto: FantasyDataDTO, week: int, team_id: int) -> Optional[MatchupDTO]:
    for matchup in dto.matchups:
        if matchup.week == week and matchup.side_for(team_id) is not None:
            return matchup
    return None


def _team_name(teams: Iterable[TeamInfo], side: TeamSide) -> str:
    for team in teams:
        if team.id == side.team_id:
            return team.name
    return side.name


def _injury(card: PlayerCard) -> Optional[str]:
    status = (card.injury_status or "").upper()
    if not status or status in HEALTHY_STATUSES:
        return None
    return status


def _top_total(roster: Sequence[PlayerCard], position: str) -> float:
    ranked = sorted(
        (card for card in roster if card.position == position),
        key=lambda card: card.projected_points,
        reverse=True,
    )
    return sum(card.projected_points for card in ranked[:MISMATCH_DEPTH])


def _start_sit(
    starters: Sequence[PlayerCard],
    bench: Sequence[PlayerCard],
    opponent_ranks: Mapping[str, int],
    risk: float,
    live: bool,
) -> List[StartSitAdvice]:
    def basis(card: PlayerCard) -> float:
        return live_projection_basis(card) if live else card.projected_points

    advice: List[StartSitAdvice] = []
    for starter in starters:
        rank = opponent_ranks.get(starter.position)
        current = risk_adjusted_projection(basis(starter), rank, risk)
        best: Optional[AlternativeLine] = None
        best_delta = 0.0
        for candidate in bench:
            if candidate.position != starter.position:
                continue
            adjusted = risk_adjusted_projection(basis(candidate), rank, risk)
            delta = adjusted - current
            if delta > best_delta:
                best_delta = delta
                best = AlternativeLine(
                    name=candidate.name,
                    proj=basis(candidate),
                    risk_adj_proj=adjusted,
                    reason="Better risk-adjusted projection",
                )
        advice.append(
            StartSitAdvice(
                slot=starter.position,
                current=ProjectionLine(
                    name=starter.name,
                    proj=basis(starter),
                    risk_adj_proj=current,
                    injury=_injury(starter),
                ),
                alternative=best,
                delta=best_delta,
            )
        )
    return advice


def _mismatches(you: TeamSide, opp: TeamSide) -> List[Mismatch]:
    positions = list(dict.fromkeys(card.position for card in you.roster))
    mismatches = []
    for position in positions:
        yours = _top_total(you.roster, position)
        theirs = _top_total(opp.roster, position)
        mismatches.append(Mismatch(position=position, you=yours, opp=theirs, delta=yours - theirs))
    mismatches.sort(key=lambda item: abs(item.delta), reverse=True)
    return mismatches


def _streamers(opponent_ranks: Mapping[str, int], rules: LeagueRules) -> List[StreamerAdvice]:
    streamers = []
    for position in rules.stream_positions:
        rank = opponent_ranks.get(position)
        if rank and rank <= rules.stream_rank_threshold:
            streamers.append(
                StreamerAdvice(
                    position=position,
                    candidate=f"Best available {position}",
                    reason=f"Faces top-{rules.stream_rank_threshold} defense vs {position}",
                    expected_gain=STREAMER_EXPECTED_GAIN,
                )
            )
    return streamers


def _summary_bullets(
    start_sit: Sequence[StartSitAdvice],
    mismatches: Sequence[Mismatch],
    streamers: Sequence[StreamerAdvice],
) -> List[str]:
    swaps = sorted(
        (item for item in start_sit if item.alternative is not None and item.delta > SWAP_BULLET_THRESHOLD),
        key=lambda item: item.delta,
        reverse=True,
    )[:MAX_SWAP_BULLETS]
    bullets = [
        f"Start **{item.alternative.name}** over **{item.current.name}** at {item.slot} "
        f"(+{item.delta:.1f} rAdj pts)."
        for item in swaps
        if item.alternative is not None
    ]
    if mismatches:
        top = mismatches[0]
        if top.delta >= 0:
            bullets.append(f"Exploit {top.position}: you +{top.delta:.1f} vs opp.")
        else:
            bullets.append(f"Shore up {top.position}: you {top.delta:.1f} vs opp.")
    if streamers:
        bullets.append(f"Consider a {streamers[0].position} streamer; tough matchup for your starter.")
    return bullets


def build_coach_brief(
    dto: FantasyDataDTO,
    teams: Iterable[TeamInfo],
    week: int,
    team_id: int,
    risk: float,
    live: bool,
    opponent_ranks: Mapping[str, int],
    *,
    partition: RosterPartition | None = None,
    rules: LeagueRules = DEFAULT_RULES,
) -> CoachBrief:
    """Build the deterministic brief for ``team_id`` in ``week``.

    ``opponent_ranks`` maps position to the opponent's DvP rank (see
    :func:`ffcoach.coach.dvp.opponent_position_ranks`). Only matchups for
    ``week`` are considered. When none contains the team, the brief carries a
    single explanatory bullet and no advice.
    """

    risk = clamp_risk(risk)
    matchup = _find_matchup(dto, week, team_id)
    if matchup is None:
        logger.info("No matchup for team %s in week %s", team_id, week)
        return CoachBrief(
            week=week,
            team_name="Unknown",
            opponent_name="Unknown",
            summary_bullets=[NO_MATCHUP_BULLET],
            risk=risk,
            live=live,
        )

    if matchup.home.team_id == team_id:
        you, opp = matchup.home, matchup.away
    else:
        you, opp = matchup.away, matchup.home
    teams = list(teams)
    partition = partition or FirstNPartition(rules.starter_cutoff)
    starters, bench = partition.split(you.roster)

    start_sit = _start_sit(starters, bench, opponent_ranks, risk, live)
    mismatches = _mismatches(you, opp)
    streamers = _streamers(opponent_ranks, rules)

    return CoachBrief(
        week=week,
        team_name=_team_name(teams, you),
        opponent_name=_team_name(teams, opp),
        summary_bullets=_summary_bullets(start_sit, mismatches, streamers),
        start_sit=start_sit,
        streamers=streamers,
        mismatches=mismatches,
        risk=risk,
        live=live,
    )
