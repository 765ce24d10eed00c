"""REST API for the ffcoach dashboard."""

from __future__ import annotations

import json
from typing import Annotated, Any, Awaitable, Callable, TypeVar

import httpx
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse, Response

from ffcoach.api.schemas import CoachQuery, EndpointIndexResponse, WeekQuery
from ffcoach.client import EspnClient
from ffcoach.config import LeagueSettings, load_settings
from ffcoach.dashboard import build_coach_report, build_win_probability, load_live, load_season, load_weekly
from ffcoach.errors import LeagueFetchError, MalformedBundle
from ffcoach.models import CoachReport, FantasyDataDTO, LiveScoreboard, WinProbability


ClientFactory = Callable[[LeagueSettings], EspnClient]

_T = TypeVar("_T")

RAW_CACHE_CONTROL = {
    "weekly": "no-store",
    "live": "no-store",
    "settings": "max-age=86400",
    "matchup-score": "max-age=600",
    "tx": "public, s-maxage=120, stale-while-revalidate=120",
}


async def _upstream(awaitable: Awaitable[_T]) -> _T:
    try:
        return await awaitable
    except LeagueFetchError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc
    except MalformedBundle as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


def _raw_response(data: Any, cache_control: str, *, pretty: bool = False) -> Response:
    headers = {"Cache-Control": cache_control}
    if pretty:
        return Response(
            content=json.dumps(data, indent=2),
            media_type="application/json; charset=utf-8",
            headers=headers,
        )
    return JSONResponse(data, headers=headers)


def create_app(
    settings: LeagueSettings | None = None,
    *,
    client_factory: ClientFactory | None = None,
    llm_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    app = FastAPI(title="ffcoach dashboard")
    settings = settings or load_settings()
    client_factory = client_factory or EspnClient
    app.state.settings = settings

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/espn", response_model=EndpointIndexResponse)
    async def espn_index() -> EndpointIndexResponse:
        return EndpointIndexResponse(
            endpoints=[f"/espn/{name}" for name in RAW_CACHE_CONTROL],
            hint="Append ?pretty=1 for indented JSON",
        )

    @app.get("/espn/weekly")
    async def espn_weekly(pretty: str | None = None) -> Response:
        async with client_factory(settings) as client:
            data = await _upstream(client.get_weekly_bundle())
        return _raw_response(data, RAW_CACHE_CONTROL["weekly"], pretty=pretty == "1")

    @app.get("/espn/live")
    async def espn_live() -> Response:
        async with client_factory(settings) as client:
            data = await _upstream(client.get_live_scoring())
        return _raw_response(data, RAW_CACHE_CONTROL["live"])

    @app.get("/espn/settings")
    async def espn_settings() -> Response:
        async with client_factory(settings) as client:
            data = await _upstream(client.get_settings())
        return _raw_response(data, RAW_CACHE_CONTROL["settings"])

    @app.get("/espn/matchup-score")
    async def espn_matchup_score() -> Response:
        async with client_factory(settings) as client:
            data = await _upstream(client.get_season_bundle())
        return _raw_response(data, RAW_CACHE_CONTROL["matchup-score"])

    @app.get("/espn/tx")
    async def espn_transactions() -> Response:
        async with client_factory(settings) as client:
            data = await _upstream(client.get_transactions())
        return _raw_response(data, RAW_CACHE_CONTROL["tx"])

    @app.get("/dashboard/weekly", response_model=FantasyDataDTO)
    async def dashboard_weekly() -> FantasyDataDTO:
        async with client_factory(settings) as client:
            return await _upstream(load_weekly(client))

    @app.get("/dashboard/season", response_model=FantasyDataDTO)
    async def dashboard_season() -> FantasyDataDTO:
        async with client_factory(settings) as client:
            return await _upstream(load_season(client))

    @app.get("/dashboard/live", response_model=LiveScoreboard)
    async def dashboard_live() -> LiveScoreboard:
        async with client_factory(settings) as client:
            return await _upstream(load_live(client))

    @app.get("/dashboard/coach", response_model=CoachReport)
    async def dashboard_coach(params: Annotated[CoachQuery, Query()]) -> CoachReport:
        async with client_factory(settings) as client:
            return await _upstream(
                build_coach_report(
                    client,
                    week=params.week,
                    team_id=params.team,
                    risk=params.risk,
                    live=params.live,
                    summarize=params.summary,
                    llm_client=llm_client,
                )
            )

    @app.get("/dashboard/win-probability", response_model=WinProbability | None)
    async def dashboard_win_probability(params: Annotated[WeekQuery, Query()]) -> WinProbability | None:
        async with client_factory(settings) as client:
            return await _upstream(
                build_win_probability(client, week=params.week, team_id=params.team, live=params.live)
            )

    return app
