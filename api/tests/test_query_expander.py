"""Smart search state machine: expansion, fallback, suggestions, failures."""

from __future__ import annotations

import asyncio

import pytest
import respx
from httpx import Response

from app.models.project import Project, Source
from app.models.search import SearchRequest, SourceFilter
from app.services.openrouter_client import MissingCredentialError, OpenRouterError
from app.services.query_expander import (
    ExpansionState,
    SmartSearch,
    SmartSearchError,
    parse_keywords,
)


def _p(pid: str, name: str | None = None, tags: list[str] | None = None) -> Project:
    return Project(id=pid, name=name or pid, url=f"https://example.com/{pid}", source=Source.GITHUB, tags=tags or [])


class ScriptedCompleter:
    """Returns (or raises) the next scripted answer; records prompts."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts: list[str] = []

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer


class RecordingSearch:
    def __init__(self, results_by_query: dict[str, list[Project]]):
        self.results_by_query = results_by_query
        self.requests: list[SearchRequest] = []

    async def __call__(self, request: SearchRequest) -> list[Project]:
        self.requests.append(request)
        return list(self.results_by_query.get(request.query or "", []))


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-test")


def test_parse_keywords_cleans_llm_formatting():
    text = '1. "robot dog"\n2. quadruped, Quadruped\n- stair climbing\n\n* legged locomotion'

    assert parse_keywords(text) == ["robot dog", "quadruped", "stair climbing", "legged locomotion"]


def test_parse_keywords_caps_length():
    assert len(parse_keywords(",".join(f"k{i}" for i in range(20)))) == 8


@pytest.mark.asyncio
async def test_expanded_keywords_drive_search_and_suggestions(configured):
    complete = ScriptedCompleter("quadruped, legged robot", "stair climbing, unitree, quadruped")
    hit = _p("1", name="legged-gym", tags=["legged-robot", "isaac-gym"])
    search = RecordingSearch({"quadruped, legged robot": [hit]})

    flow = SmartSearch("a quadruped that climbs", complete=complete, search=search)
    result = await flow.run()

    assert result.keywords == "quadruped, legged robot"
    assert result.results == [hit]
    # "quadruped" is already part of the description.
    assert result.suggestions == ["stair climbing", "unitree"]
    assert [r.source for r in search.requests] == [SourceFilter.ALL]
    assert "legged-gym [legged-robot, isaac-gym]" in complete.prompts[1]
    assert flow.history == [
        ExpansionState.RECEIVED,
        ExpansionState.EXPANDED,
        ExpansionState.SEARCHED,
        ExpansionState.SUGGESTED,
        ExpansionState.DONE,
    ]


def test_known_terms_match_whole_words_only():
    flow = SmartSearch("swarm of farm robots")

    assert flow._exclude_known(["arm", "drone", "Farm", "farm robots", "robot"]) == ["arm", "drone", "robot"]


@pytest.mark.asyncio
async def test_empty_expanded_search_falls_back_to_raw_description(configured):
    complete = ScriptedCompleter("very specific nonsense", "gripper")
    fallback_hit = _p("2", name="soft-hand")
    search = RecordingSearch({"soft robot hand": [fallback_hit]})

    flow = SmartSearch("soft robot hand", complete=complete, search=search)
    result = await flow.run()

    assert [r.query for r in search.requests] == ["very specific nonsense", "soft robot hand"]
    assert result.results == [fallback_hit]
    assert result.keywords == "very specific nonsense"
    assert ExpansionState.FALLBACK in flow.history


@pytest.mark.asyncio
async def test_expansion_failure_uses_raw_description_as_keyword(configured):
    complete = ScriptedCompleter(OpenRouterError("upstream 502"), "extra")
    search = RecordingSearch({"robot arm": [_p("3")]})

    result = await SmartSearch("robot arm", complete=complete, search=search).run()

    assert result.keywords == "robot arm"
    assert [r.query for r in search.requests] == ["robot arm"]
    assert result.suggestions == ["extra"]


@pytest.mark.asyncio
async def test_suggestion_failure_is_non_fatal(configured):
    complete = ScriptedCompleter("arm", OpenRouterError("timeout"))
    search = RecordingSearch({"arm": [_p("4")]})

    result = await SmartSearch("robot arm", complete=complete, search=search).run()

    assert result.results and result.suggestions == []


@pytest.mark.asyncio
async def test_no_results_skips_suggestions(configured):
    complete = ScriptedCompleter("nothing here")
    search = RecordingSearch({})

    result = await SmartSearch("obscure thing", complete=complete, search=search).run()

    assert result.results == []
    assert result.suggestions == []
    assert len(complete.prompts) == 1
    assert len(search.requests) == 2


@pytest.mark.asyncio
async def test_missing_credential_fails_before_any_search():
    complete = ScriptedCompleter()
    search = RecordingSearch({})

    with pytest.raises(MissingCredentialError):
        await SmartSearch("robot arm", complete=complete, search=search).run()

    assert search.requests == []
    assert complete.prompts == []


@pytest.mark.asyncio
async def test_search_timeout_raises_smart_search_error(configured):
    async def slow_search(request: SearchRequest) -> list[Project]:
        await asyncio.sleep(5)
        return []

    flow = SmartSearch("robot arm", complete=ScriptedCompleter("arm"), search=slow_search, timeout_s=0.05)

    with pytest.raises(SmartSearchError, match="timed out"):
        await flow.run()


@pytest.mark.asyncio
async def test_search_exception_raises_smart_search_error(configured):
    async def broken_search(request: SearchRequest) -> list[Project]:
        raise ValueError("bad state")

    with pytest.raises(SmartSearchError, match="bad state"):
        await SmartSearch("robot arm", complete=ScriptedCompleter("arm"), search=broken_search).run()


@pytest.mark.asyncio
async def test_default_completer_calls_openrouter(configured):
    search = RecordingSearch({})
    with respx.mock:
        route = respx.post("https://openrouter.ai/api/v1/chat/completions").mock(
            return_value=Response(200, json={"id": "r1", "choices": [{"message": {"content": "humanoid, biped"}}]})
        )
        result = await SmartSearch("walking robot", search=search).run()

    assert result.keywords == "humanoid, biped"
    sent = route.calls[0].request
    assert sent.headers["authorization"] == "Bearer sk-test"
    assert b"walking robot" in sent.content
