"""Head-to-head win probability from current scores and remaining projections."""

from __future__ import annotations

import math
from typing import Optional

from ffcoach.models import FantasyDataDTO, WinProbability

REMAINING_TILT = 0.35
BASE_UNCERTAINTY = 8.0
PREGAME_DAMPING = 0.7
P_FLOOR = 0.01
P_CEILING = 0.99


def compute_win_probability(
    home_score: float,
    away_score: float,
    home_remaining: float,
    away_remaining: float,
) -> float:
    """Home win probability: ``logistic((diff + 0.35 * remaining_diff) / sqrt(remaining + 8))``.

    Clamped to [0.01, 0.99].
    """

    diff = (home_score or 0.0) - (away_score or 0.0)
    tilt = REMAINING_TILT * ((home_remaining or 0.0) - (away_remaining or 0.0))
    uncertainty = math.sqrt(max(home_remaining + away_remaining, 0.0) + BASE_UNCERTAINTY)
    z = (diff + tilt) / (uncertainty or 1.0)
    p = 1.0 / (1.0 + math.exp(-z))
    return min(P_CEILING, max(P_FLOOR, p))


def matchup_win_probability(
    dto: FantasyDataDTO,
    week: int,
    team_id: Optional[int] = None,
    *,
    live: bool = False,
) -> Optional[WinProbability]:
    """Win probability for the week's matchup containing ``team_id``.

    Without a team id the week's first matchup is used. Remaining points are
    projection minus actual (live projection totals in live mode), damped
    outside live mode.
    """

    week_matchups = [matchup for matchup in dto.matchups if matchup.week == week]
    if team_id is not None:
        target = next((m for m in week_matchups if m.side_for(team_id) is not None), None)
    else:
        target = week_matchups[0] if week_matchups else None
    if target is None:
        return None

    home, away = target.home, target.away
    if live:
        home_proj = home.total_projected_points_live or 0.0
        away_proj = away.total_projected_points_live or 0.0
    else:
        home_proj = home.total_projected_points
        away_proj = away.total_projected_points
    damping = 1.0 if live else PREGAME_DAMPING

    p_home = compute_win_probability(
        home.total_points,
        away.total_points,
        damping * max(home_proj - home.total_points, 0.0),
        damping * max(away_proj - away.total_points, 0.0),
    )
    return WinProbability(
        key=f"{home.name} vs {away.name}",
        home_team=home.name,
        away_team=away.name,
        home_proj=home_proj,
        away_proj=away_proj,
        value=round(p_home * 100),
        p_home=p_home,
        p_away=1.0 - p_home,
    )
