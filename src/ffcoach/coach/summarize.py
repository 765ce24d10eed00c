"""Narrative coach summary from an OpenAI-compatible chat completions API."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional, Tuple

import httpx
from pydantic import ValidationError

from ffcoach.config import LeagueSettings
from ffcoach.errors import SummaryTimeout, SummaryUnavailable
from ffcoach.models import CoachBrief, CoachBriefLLM


logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "\n".join(
    [
        "You are a fantasy football coach assistant.",
        "Only use facts from the provided JSON. Do NOT invent numbers, names, statuses, or injuries.",
        "Keep it concise and actionable. Prefer imperative voice.",
        "Prioritize start/sit deltas, positional mismatches, and streamer needs.",
        "Return only the structured result.",
    ]
)

SCHEMA_KEYWORDS_DROPPED = ("title", "default")


def strict_json_schema(node: Any) -> Any:
    """Adapt a pydantic JSON schema to strict structured-output rules.

    Every object closes with ``additionalProperties: false`` and lists all of
    its properties as required; ``title`` and ``default`` annotations are dropped.
    """

    if isinstance(node, list):
        return [strict_json_schema(item) for item in node]
    if not isinstance(node, dict):
        return node
    adapted: dict[str, Any] = {}
    for key, value in node.items():
        if key in SCHEMA_KEYWORDS_DROPPED:
            continue
        if key in ("properties", "$defs"):
            adapted[key] = {name: strict_json_schema(sub) for name, sub in value.items()}
        else:
            adapted[key] = strict_json_schema(value)
    if "properties" in adapted:
        adapted["additionalProperties"] = False
        adapted["required"] = list(adapted["properties"])
    return adapted


COACH_BRIEF_SCHEMA: dict[str, Any] = strict_json_schema(CoachBriefLLM.model_json_schema(by_alias=True))


def brief_payload(brief: CoachBrief) -> dict[str, Any]:
    """The deterministic facts handed to the model, and nothing else."""

    return {
        "week": brief.week,
        "teamName": brief.team_name,
        "opponentName": brief.opponent_name,
        "risk": brief.risk,
        "live": brief.live,
        "startSit": [
            {
                "slot": item.slot,
                "current": {
                    "name": item.current.name,
                    "proj": item.current.proj,
                    "rAdj": item.current.risk_adj_proj,
                },
                "alternative": (
                    {
                        "name": item.alternative.name,
                        "proj": item.alternative.proj,
                        "rAdj": item.alternative.risk_adj_proj,
                    }
                    if item.alternative is not None
                    else None
                ),
                "delta": item.delta,
            }
            for item in brief.start_sit
        ],
        "mismatches": [item.model_dump(by_alias=True) for item in brief.mismatches],
        "streamers": [item.model_dump(by_alias=True) for item in brief.streamers],
    }


def build_request(brief: CoachBrief, settings: LeagueSettings) -> dict[str, Any]:
    return {
        "model": settings.llm_model,
        "temperature": 0,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "system", "content": "Return ONLY valid JSON matching the schema. No explanations."},
            {"role": "user", "content": json.dumps(brief_payload(brief))},
        ],
        "response_format": {
            "type": "json_schema",
            "json_schema": {"name": "coach_brief", "strict": True, "schema": COACH_BRIEF_SCHEMA},
        },
    }


def parse_completion(body: Any) -> CoachBriefLLM:
    """Extract and validate the structured summary from a chat completion body."""

    try:
        message = body["choices"][0]["message"]
    except (KeyError, IndexError, TypeError) as exc:
        raise SummaryUnavailable("LLM response had no message") from exc
    if not isinstance(message, dict):
        raise SummaryUnavailable("LLM response had no message")
    if message.get("refusal"):
        raise SummaryUnavailable(f"LLM refused: {message['refusal']}")
    content = message.get("content")
    if not content:
        raise SummaryUnavailable("Structured parse returned null")
    if not isinstance(content, str):
        raise SummaryUnavailable("LLM response content was not text")
    try:
        return CoachBriefLLM.model_validate_json(content)
    except ValidationError as exc:
        raise SummaryUnavailable(f"LLM output failed schema validation ({exc.error_count()} errors)") from exc


async def _request_summary(client: httpx.AsyncClient, brief: CoachBrief, settings: LeagueSettings) -> CoachBriefLLM:
    response = await client.post(
        f"{settings.llm_base_url}/chat/completions",
        json=build_request(brief, settings),
        headers={"Authorization": f"Bearer {settings.llm_api_key}"},
    )
    response.raise_for_status()
    try:
        body = response.json()
    except ValueError as exc:
        raise SummaryUnavailable("LLM response was not JSON") from exc
    return parse_completion(body)


async def summarize_coach_brief(
    brief: CoachBrief,
    *,
    settings: LeagueSettings,
    http_client: httpx.AsyncClient | None = None,
) -> CoachBriefLLM:
    """Ask the LLM for a headline/bullets/moves summary of ``brief``.

    The whole exchange is bounded by ``settings.llm_timeout`` seconds. Raises
    :class:`SummaryTimeout` on expiry and :class:`SummaryUnavailable` for any
    other failure.
    """

    if not settings.llm_api_key:
        raise SummaryUnavailable("LLM API key is not configured")

    try:
        if http_client is not None:
            return await asyncio.wait_for(_request_summary(http_client, brief, settings), settings.llm_timeout)
        async with httpx.AsyncClient(timeout=settings.llm_timeout) as client:
            return await asyncio.wait_for(_request_summary(client, brief, settings), settings.llm_timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        raise SummaryTimeout("LLM request timed out") from exc
    except httpx.HTTPStatusError as exc:
        raise SummaryUnavailable(f"LLM upstream error: {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise SummaryUnavailable(f"LLM request failed: {exc}") from exc


async def summarize_or_advisory(
    brief: CoachBrief,
    *,
    settings: LeagueSettings,
    http_client: httpx.AsyncClient | None = None,
) -> Tuple[Optional[CoachBriefLLM], Optional[str]]:
    """Return ``(summary, None)`` or ``(None, error message)``; never raises."""

    try:
        summary = await summarize_coach_brief(brief, settings=settings, http_client=http_client)
    except SummaryUnavailable as exc:
        logger.warning("Coach summary unavailable for %s week %s: %s", brief.team_name, brief.week, exc)
        return None, str(exc)
    logger.info("Coach summary generated for %s week %s", brief.team_name, brief.week)
    return summary, None
