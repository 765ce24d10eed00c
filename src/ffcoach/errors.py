"""Exception types raised across the ingest, client and coaching layers."""

from __future__ import annotations


class FFCoachError(Exception):
    """Base class for ffcoach failures."""


class MalformedBundle(FFCoachError, ValueError):
    """Raw league payload is missing a structural field (e.g. ``schedule``)."""


class LeagueFetchError(FFCoachError):
    """The league data provider returned an error or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SummaryUnavailable(FFCoachError):
    """The narrative summarizer failed; the deterministic brief is unaffected."""


class SummaryTimeout(SummaryUnavailable):
    pass
