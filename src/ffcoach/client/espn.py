"""Async client for the ESPN fantasy football league API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Sequence, Tuple

import httpx

from ffcoach.config import LeagueSettings
from ffcoach.errors import LeagueFetchError


logger = logging.getLogger(__name__)

STATIC_VIEWS = ("mSettings", "mTeam", "mRoster", "mMatchup")
WEEKLY_VIEWS = ("mMatchup", "mScoreboard", "mMatchupScore")
SEASON_VIEWS = ("mMatchupScore",)
LIVE_VIEWS = ("mLiveScoring",)
SETTINGS_VIEWS = ("mSettings", "mTeam", "mNav", "mPositionalRatings")
TRANSACTION_VIEWS = ("mPendingTransactions",)

DEFAULT_TIMEOUT = 15.0

LeagueBundle = Dict[str, Any]


async def gather_bundles(*fetches: Awaitable[LeagueBundle]) -> List[LeagueBundle]:
    """Run bundle fetches concurrently; if one fails, cancel and reap the rest."""

    tasks = [asyncio.ensure_future(fetch) for fetch in fetches]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class EspnClient:
    """Fetches named view sets for one league/season.

    Use as an async context manager, or pass an existing ``httpx.AsyncClient``
    (which the caller then owns and closes).
    """

    def __init__(self, settings: LeagueSettings, *, http_client: httpx.AsyncClient | None = None):
        self.settings = settings
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=DEFAULT_TIMEOUT)

    async def __aenter__(self) -> "EspnClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"x-fantasy-filter": "{}"}
        cookies = []
        if self.settings.swid:
            cookies.append(f"SWID={self.settings.swid}")
        if self.settings.espn_s2:
            cookies.append(f"espn_s2={self.settings.espn_s2}")
        if cookies:
            headers["Cookie"] = "; ".join(cookies)
        return headers

    async def fetch_league(self, views: Sequence[str]) -> LeagueBundle:
        """GET the league document for ``views``; no retries."""

        params = [("view", view) for view in views]
        try:
            response = await self._client.get(self.settings.league_url, params=params, headers=self._headers())
        except httpx.HTTPError as exc:
            raise LeagueFetchError(f"Failed to fetch league data: {exc}") from exc
        if response.is_error:
            raise LeagueFetchError(
                f"Failed to fetch league data: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise LeagueFetchError("League data response was not JSON") from exc
        logger.info("Fetched league %s views=%s", self.settings.league_id, ",".join(views))
        return payload

    async def get_static_bundle(self) -> LeagueBundle:
        return await self.fetch_league(STATIC_VIEWS)

    async def get_weekly_bundle(self) -> LeagueBundle:
        return await self.fetch_league(WEEKLY_VIEWS)

    async def get_season_bundle(self) -> LeagueBundle:
        return await self.fetch_league(SEASON_VIEWS)

    async def get_live_scoring(self) -> LeagueBundle:
        return await self.fetch_league(LIVE_VIEWS)

    async def get_settings(self) -> LeagueBundle:
        return await self.fetch_league(SETTINGS_VIEWS)

    async def get_transactions(self) -> LeagueBundle:
        return await self.fetch_league(TRANSACTION_VIEWS)

    async def fetch_static_and_weekly(self) -> Tuple[LeagueBundle, LeagueBundle]:
        """Fetch the static and weekly bundles concurrently."""

        static, weekly = await gather_bundles(self.get_static_bundle(), self.get_weekly_bundle())
        return static, weekly
