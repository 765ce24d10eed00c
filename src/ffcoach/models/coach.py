"""Coaching advice models (deterministic brief and narrative summary)."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field

from .fantasy import FrozenModel

# team id -> position -> cumulative projected points allowed
DvpTable = Dict[int, Dict[str, float]]
# team id -> position -> rank (1 = toughest defense vs that position)
DvpRanks = Dict[int, Dict[str, int]]


class ProjectionLine(FrozenModel):
    name: str
    proj: float
    risk_adj_proj: float
    injury: Optional[str] = None


class AlternativeLine(FrozenModel):
    name: str
    proj: float
    risk_adj_proj: float
    reason: str


class StartSitAdvice(FrozenModel):
    slot: str
    current: ProjectionLine
    alternative: Optional[AlternativeLine] = None
    delta: float = 0.0


class StreamerAdvice(FrozenModel):
    position: str
    candidate: str
    reason: str
    expected_gain: float


class Mismatch(FrozenModel):
    position: str
    you: float
    opp: float
    delta: float


class CoachBrief(FrozenModel):
    week: int
    team_name: str
    opponent_name: str
    summary_bullets: List[str] = Field(default_factory=list)
    start_sit: List[StartSitAdvice] = Field(default_factory=list)
    streamers: List[StreamerAdvice] = Field(default_factory=list)
    mismatches: List[Mismatch] = Field(default_factory=list)
    risk: float
    live: bool


class SuggestedMove(FrozenModel):
    label: str
    reason: Optional[str] = None


class CoachBriefLLM(FrozenModel):
    """Narrative summary returned by the LLM, validated before use."""

    headline: str = Field(..., min_length=1)
    bullets: List[str] = Field(..., min_length=1, max_length=6)
    risks: List[str] = Field(default_factory=list)
    moves: List[SuggestedMove] = Field(default_factory=list)


class CoachReport(FrozenModel):
    brief: CoachBrief
    summary: Optional[CoachBriefLLM] = None
    summary_error: Optional[str] = None


class WinProbability(FrozenModel):
    key: str
    home_team: str
    away_team: str
    home_proj: float
    away_proj: float
    value: int
    p_home: float
    p_away: float
