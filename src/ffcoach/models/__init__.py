"""Canonical models shared across ingest, coaching and API layers."""

from .coach import (
    AlternativeLine,
    CoachBrief,
    CoachBriefLLM,
    CoachReport,
    DvpRanks,
    DvpTable,
    Mismatch,
    ProjectionLine,
    StartSitAdvice,
    StreamerAdvice,
    SuggestedMove,
    WinProbability,
)
from .fantasy import (
    FantasyDataDTO,
    LiveScoreboard,
    LiveTeamTotal,
    MatchupDTO,
    PlayerCard,
    TeamInfo,
    TeamSide,
)

__all__ = [
    "AlternativeLine",
    "CoachBrief",
    "CoachBriefLLM",
    "CoachReport",
    "DvpRanks",
    "DvpTable",
    "FantasyDataDTO",
    "LiveScoreboard",
    "LiveTeamTotal",
    "MatchupDTO",
    "Mismatch",
    "PlayerCard",
    "ProjectionLine",
    "StartSitAdvice",
    "StreamerAdvice",
    "SuggestedMove",
    "TeamInfo",
    "TeamSide",
    "WinProbability",
]
