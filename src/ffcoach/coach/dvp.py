"""Projection-implied defense-vs-position (DvP) rankings."""

from __future__ import annotations

import math
from typing import Dict, List, Mapping, Sequence

from ffcoach.config import DEFAULT_RULES, POSITIONS
from ffcoach.models import DvpRanks, DvpTable, FantasyDataDTO, PlayerCard


def top_n_by_position(
    roster: Sequence[PlayerCard],
    starter_counts: Mapping[str, int],
) -> Dict[str, List[PlayerCard]]:
    """Approximate a starting lineup as the top-N projections at each position.

    Used when slot-level lineup detail is unavailable. Cards with an unknown
    position are ignored.
    """

    buckets: Dict[str, List[PlayerCard]] = {position: [] for position in starter_counts}
    for card in roster:
        if card.position not in buckets or not math.isfinite(card.projected_points):
            continue
        buckets[card.position].append(card)
    return {
        position: sorted(cards, key=lambda card: card.projected_points, reverse=True)[: starter_counts[position]]
        for position, cards in buckets.items()
    }


def build_dvp_table(
    dto: FantasyDataDTO,
    week: int,
    *,
    starter_counts: Mapping[str, int] = DEFAULT_RULES.starter_counts,
) -> DvpTable:
    """Sum each team's opponents' projected starter points per position for one week.

    Points a side's starters are projected to score are charged to the
    opposing team's defense: home offense to the away tally and vice versa.
    """

    table: DvpTable = {}

    def add_allowed(defense_team_id: int, starters: Mapping[str, Sequence[PlayerCard]]) -> None:
        allowed = table.setdefault(defense_team_id, {})
        for position in starter_counts:
            points = sum(card.projected_points for card in starters.get(position, ()))
            allowed[position] = allowed.get(position, 0.0) + points

    for matchup in dto.matchups:
        if matchup.week != week:
            continue
        home_starters = top_n_by_position(matchup.home.roster, starter_counts)
        away_starters = top_n_by_position(matchup.away.roster, starter_counts)
        add_allowed(matchup.away.team_id, home_starters)
        add_allowed(matchup.home.team_id, away_starters)
    return table


def rank_dvp_table(table: DvpTable, positions: Sequence[str] = POSITIONS) -> DvpRanks:
    """Convert points allowed into ranks per position (1 = fewest allowed).

    Ties on points allowed are broken by team id ascending. Teams without a
    finite value for a position get no entry for it.
    """

    ranks: DvpRanks = {}
    for position in positions:
        entries = [
            (team_id, allowed[position])
            for team_id, allowed in table.items()
            if position in allowed and math.isfinite(allowed[position])
        ]
        entries.sort(key=lambda item: (item[1], item[0]))
        for rank, (team_id, _) in enumerate(entries, start=1):
            ranks.setdefault(team_id, {})[position] = rank
    return ranks


def build_implied_dvp(
    dto: FantasyDataDTO,
    week: int,
    *,
    starter_counts: Mapping[str, int] = DEFAULT_RULES.starter_counts,
) -> DvpRanks:
    """Projection-implied DvP ranks for ``week``; absent entries mean "no opinion"."""

    table = build_dvp_table(dto, week, starter_counts=starter_counts)
    return rank_dvp_table(table, positions=tuple(starter_counts))


def opponent_position_ranks(
    dto: FantasyDataDTO,
    ranks: DvpRanks,
    week: int,
    team_id: int,
) -> Dict[str, int]:
    """Per-position DvP ranks of ``team_id``'s opponent in ``week`` (empty if unknown)."""

    for matchup in dto.matchups:
        if matchup.week != week:
            continue
        opponent = matchup.opponent_of(team_id)
        if opponent is not None:
            return dict(ranks.get(opponent.team_id, {}))
    return {}
