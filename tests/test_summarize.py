import asyncio
import json

import httpx
import pytest

from ffcoach.coach.summarize import (
    COACH_BRIEF_SCHEMA,
    brief_payload,
    parse_completion,
    summarize_coach_brief,
    summarize_or_advisory,
)
from ffcoach.config import LeagueSettings
from ffcoach.errors import SummaryTimeout, SummaryUnavailable
from ffcoach.models import AlternativeLine, CoachBrief, ProjectionLine, StartSitAdvice


SETTINGS = LeagueSettings(llm_api_key="test-key", llm_base_url="http://llm.test/v1", llm_model="test-model")

SUMMARY = {
    "headline": "Swap your RB2 and lean on the run game",
    "bullets": ["Start Bench Back over Slow Back."],
    "risks": ["Ace Passer is questionable."],
    "moves": [{"label": "Start Bench Back", "reason": "+3.7 risk-adjusted points"}],
}


def _brief() -> CoachBrief:
    return CoachBrief(
        week=3,
        team_name="Gridiron Gurus",
        opponent_name="Blitz Brigade",
        summary_bullets=["Start **Bench Back** over **Slow Back** at RB (+3.7 rAdj pts)."],
        start_sit=[
            StartSitAdvice(
                slot="RB",
                current=ProjectionLine(name="Slow Back", proj=12.0, risk_adj_proj=11.0),
                alternative=AlternativeLine(
                    name="Bench Back", proj=16.0, risk_adj_proj=14.7, reason="Better risk-adjusted projection"
                ),
                delta=3.7,
            )
        ],
        risk=50.0,
        live=False,
    )


def _completion(content) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def test_summary_success_sends_structured_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion(json.dumps(SUMMARY)))

    async with _client(handler) as http:
        summary = await summarize_coach_brief(_brief(), settings=SETTINGS, http_client=http)

    assert summary.headline == SUMMARY["headline"]
    assert summary.moves[0].label == "Start Bench Back"
    assert seen["url"] == "http://llm.test/v1/chat/completions"
    assert seen["auth"] == "Bearer test-key"
    body = seen["body"]
    assert body["model"] == "test-model"
    assert body["temperature"] == 0
    assert body["response_format"]["json_schema"]["strict"] is True
    assert body["response_format"]["json_schema"]["schema"] == COACH_BRIEF_SCHEMA
    facts = json.loads(body["messages"][-1]["content"])
    assert facts["teamName"] == "Gridiron Gurus"
    assert facts["startSit"][0]["alternative"]["rAdj"] == 14.7


def test_brief_payload_carries_only_brief_facts():
    payload = brief_payload(_brief())
    assert set(payload) == {"week", "teamName", "opponentName", "risk", "live", "startSit", "mismatches", "streamers"}
    assert payload["startSit"][0]["current"] == {"name": "Slow Back", "proj": 12.0, "rAdj": 11.0}


def test_parse_completion_failures():
    with pytest.raises(SummaryUnavailable, match="null"):
        parse_completion(_completion(None))
    with pytest.raises(SummaryUnavailable, match="schema"):
        parse_completion(_completion(json.dumps({"headline": "No bullets"})))
    with pytest.raises(SummaryUnavailable, match="refused"):
        parse_completion({"choices": [{"message": {"refusal": "cannot help", "content": None}}]})
    with pytest.raises(SummaryUnavailable):
        parse_completion({"choices": []})


@pytest.mark.parametrize("message", [None, "oops", ["content"]])
def test_parse_completion_rejects_non_object_message(message):
    with pytest.raises(SummaryUnavailable, match="no message"):
        parse_completion({"choices": [{"message": message}]})


def test_parse_completion_rejects_non_text_content():
    with pytest.raises(SummaryUnavailable, match="not text"):
        parse_completion(_completion({"headline": "Go", "bullets": ["one"]}))


@pytest.mark.parametrize("message", [None, "oops"])
async def test_advisory_survives_malformed_message(message):
    body = {"choices": [{"message": message}]}
    async with _client(lambda request: httpx.Response(200, json=body)) as http:
        summary, error = await summarize_or_advisory(_brief(), settings=SETTINGS, http_client=http)

    assert summary is None
    assert error == "LLM response had no message"


def test_schema_follows_summary_model():
    properties = COACH_BRIEF_SCHEMA["properties"]
    assert properties["headline"] == {"type": "string", "minLength": 1}
    assert properties["bullets"]["minItems"] == 1
    assert properties["bullets"]["maxItems"] == 6
    assert COACH_BRIEF_SCHEMA["required"] == ["headline", "bullets", "risks", "moves"]
    assert COACH_BRIEF_SCHEMA["additionalProperties"] is False
    move = COACH_BRIEF_SCHEMA["$defs"]["SuggestedMove"]
    assert move["required"] == ["label", "reason"]
    assert move["additionalProperties"] is False
    assert "default" not in move["properties"]["reason"]
    assert properties["moves"]["items"] == {"$ref": "#/$defs/SuggestedMove"}


async def test_missing_api_key():
    with pytest.raises(SummaryUnavailable, match="LLM API key is not configured"):
        await summarize_coach_brief(_brief(), settings=LeagueSettings())


async def test_upstream_error_is_unavailable():
    async with _client(lambda request: httpx.Response(500, json={"error": "boom"})) as http:
        with pytest.raises(SummaryUnavailable, match="500"):
            await summarize_coach_brief(_brief(), settings=SETTINGS, http_client=http)


async def test_slow_llm_times_out():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1.0)
        return httpx.Response(200, json=_completion(json.dumps(SUMMARY)))

    settings = SETTINGS.with_overrides(llm_timeout=0.05)
    async with _client(handler) as http:
        with pytest.raises(SummaryTimeout, match="LLM request timed out"):
            await summarize_coach_brief(_brief(), settings=settings, http_client=http)


async def test_advisory_never_raises(caplog):
    summary, error = await summarize_or_advisory(_brief(), settings=LeagueSettings())

    assert summary is None
    assert error == "LLM API key is not configured"
    assert "Coach summary unavailable" in caplog.text


async def test_advisory_returns_summary():
    async with _client(lambda request: httpx.Response(200, json=_completion(json.dumps(SUMMARY)))) as http:
        summary, error = await summarize_or_advisory(_brief(), settings=SETTINGS, http_client=http)

    assert error is None
    assert summary.bullets == SUMMARY["bullets"]
