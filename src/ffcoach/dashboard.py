"""Request-level pipeline: fetch, normalize, analyze, summarize."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ffcoach.client import EspnClient, gather_bundles
from ffcoach.coach import (
    build_coach_brief,
    build_implied_dvp,
    matchup_win_probability,
    opponent_position_ranks,
    summarize_or_advisory,
)
from ffcoach.config import LeagueRules, get_rules
from ffcoach.ingest import normalize_season, normalize_weekly, transform_live_data
from ffcoach.models import CoachBrief, CoachReport, FantasyDataDTO, LiveScoreboard, WinProbability


logger = logging.getLogger(__name__)


def _rules_for(client: EspnClient) -> LeagueRules:
    return get_rules(client.settings.lineup_format)


async def load_weekly(client: EspnClient) -> FantasyDataDTO:
    """Fetch the static and weekly bundles together and normalize them."""

    static, weekly = await client.fetch_static_and_weekly()
    return normalize_weekly(
        weekly,
        static.get("teams") or [],
        season_id=client.settings.season_id,
        rules=_rules_for(client),
    )


async def load_season(client: EspnClient) -> FantasyDataDTO:
    static, season = await gather_bundles(client.get_static_bundle(), client.get_season_bundle())
    return normalize_season(season, static.get("teams") or [], rules=_rules_for(client))


async def load_live(client: EspnClient) -> LiveScoreboard:
    static, live = await gather_bundles(client.get_static_bundle(), client.get_live_scoring())
    return transform_live_data(live, static.get("teams") or [])


def coach_brief_for(
    dto: FantasyDataDTO,
    *,
    week: int,
    team_id: int,
    risk: float,
    live: bool,
    rules: LeagueRules,
) -> CoachBrief:
    """DvP ranks for the week, the opponent's rank map, then the brief."""

    ranks = build_implied_dvp(dto, week, starter_counts=rules.starter_counts)
    opponent_ranks = opponent_position_ranks(dto, ranks, week, team_id)
    return build_coach_brief(dto, dto.teams, week, team_id, risk, live, opponent_ranks, rules=rules)


async def build_coach_report(
    client: EspnClient,
    *,
    week: Optional[int] = None,
    team_id: Optional[int] = None,
    risk: float = 50.0,
    live: bool = False,
    summarize: bool = True,
    llm_client: httpx.AsyncClient | None = None,
) -> CoachReport:
    """Deterministic brief plus, when requested, the narrative summary.

    Summary failures are reported in ``summary_error``; the brief is always
    returned.
    """

    dto = await load_weekly(client)
    selected_week = week or dto.week
    selected_team = team_id if team_id is not None else client.settings.team_id
    brief = coach_brief_for(
        dto,
        week=selected_week,
        team_id=selected_team,
        risk=risk,
        live=live,
        rules=_rules_for(client),
    )
    logger.info(
        "Built coach brief for team %s week %s (%s start/sit rows, %s streamers)",
        selected_team,
        selected_week,
        len(brief.start_sit),
        len(brief.streamers),
    )
    if not summarize:
        return CoachReport(brief=brief)

    summary, error = await summarize_or_advisory(brief, settings=client.settings, http_client=llm_client)
    return CoachReport(brief=brief, summary=summary, summary_error=error)


async def build_win_probability(
    client: EspnClient,
    *,
    week: Optional[int] = None,
    team_id: Optional[int] = None,
    live: bool = False,
) -> Optional[WinProbability]:
    dto = await load_weekly(client)
    return matchup_win_probability(dto, week or dto.week, team_id, live=live)
