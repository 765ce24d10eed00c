"""Risk-adjusted projection scoring."""

from __future__ import annotations

import math
from typing import Any, Optional

from ffcoach.models import PlayerCard

MATCHUP_MULT_TOUGHEST = 0.90
MATCHUP_MULT_SOFTEST = 1.10
RANK_MIN = 1
RANK_MAX = 32

RISK_TILT_MIN = 0.85
RISK_TILT_MAX = 1.15
NEUTRAL_RISK = 50.0

VARIANCE_TILT_SCALE = 0.2


def _finite(value: Any, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def clamp_risk(risk: Any) -> float:
    """Coerce a risk tolerance to [0, 100]; unusable values become neutral (50)."""

    return max(0.0, min(100.0, _finite(risk, NEUTRAL_RISK)))


def matchup_multiplier(opponent_rank: Optional[float]) -> float:
    """Map an opponent difficulty rank (1 = toughest, 32 = softest) to 0.90..1.10.

    Missing or out-of-range ranks are neutral.
    """

    rank = _finite(opponent_rank, 0.0)
    if rank < RANK_MIN or rank > RANK_MAX:
        return 1.0
    span = MATCHUP_MULT_SOFTEST - MATCHUP_MULT_TOUGHEST
    return MATCHUP_MULT_TOUGHEST + (rank - RANK_MIN) / (RANK_MAX - RANK_MIN) * span


def risk_tilt(risk: Any) -> float:
    # Centered form keeps risk 50 at exactly 1.0.
    fraction = clamp_risk(risk) / 100.0
    return 1.0 + (fraction - 0.5) * (RISK_TILT_MAX - RISK_TILT_MIN)


def risk_adjusted_projection(
    base_projection: Any,
    opponent_rank: Optional[float] = None,
    risk: Any = NEUTRAL_RISK,
    variance_guess: Any = 0.0,
) -> float:
    """Scale a projection by matchup difficulty, risk tolerance and volatility.

    ``variance_guess`` is reserved for a per-player volatility input; callers
    currently pass 0. Never raises: non-numeric inputs fall back to 0 for the
    projection and variance and to neutral for the rank and risk.
    """

    base = _finite(base_projection, 0.0)
    variance = _finite(variance_guess, 0.0)
    fraction = clamp_risk(risk) / 100.0
    variance_mult = 1.0 + variance * (fraction - 0.5) * VARIANCE_TILT_SCALE
    return base * matchup_multiplier(opponent_rank) * risk_tilt(risk) * variance_mult


def live_projection_basis(card: PlayerCard) -> float:
    """Projection fed to the scorer in live mode; banked points are a floor."""

    return max(card.projected_points, card.actual_points)
