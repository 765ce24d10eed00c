"""Deterministic coaching analytics and the narrative summarizer."""

from .brief import BenchFlagPartition, FirstNPartition, RosterPartition, build_coach_brief
from .dvp import build_dvp_table, build_implied_dvp, opponent_position_ranks, rank_dvp_table
from .scoring import live_projection_basis, matchup_multiplier, risk_adjusted_projection
from .summarize import summarize_coach_brief, summarize_or_advisory
from .winprob import compute_win_probability, matchup_win_probability

__all__ = [
    "BenchFlagPartition",
    "FirstNPartition",
    "RosterPartition",
    "build_coach_brief",
    "build_dvp_table",
    "build_implied_dvp",
    "compute_win_probability",
    "live_projection_basis",
    "matchup_multiplier",
    "matchup_win_probability",
    "opponent_position_ranks",
    "rank_dvp_table",
    "risk_adjusted_projection",
    "summarize_coach_brief",
    "summarize_or_advisory",
]
