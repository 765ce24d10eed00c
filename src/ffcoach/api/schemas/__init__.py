"""Pydantic models for API I/O."""

from .dashboard import CoachQuery, EndpointIndexResponse, WeekQuery

__all__ = [
    "CoachQuery",
    "EndpointIndexResponse",
    "WeekQuery",
]
