from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class WeekQuery(BaseModel):
    week: int | None = Field(default=None, ge=1)
    team: int | None = None
    live: bool = False


class CoachQuery(WeekQuery):
    # Clamped to 0-100 downstream rather than rejected.
    risk: float = 50.0
    summary: bool = True


class EndpointIndexResponse(BaseModel):
    endpoints: List[str]
    hint: str
