import pytest
from dataclasses import replace
from unittest.mock import AsyncMock, MagicMock, patch

from website_updater.models import Confidence, CustomerRecord, ResolutionCandidate, Source
from website_updater.resolvers.domain_guess import guess_domain
from website_updater.resolvers.llm_resolver import ai_resolve, parse_ai_answer
from website_updater.resolvers.resolution_orchestrator import resolve_website
from website_updater.resolvers.search_resolver import (
    build_search_query,
    is_blocked,
    rank_results,
    score_result,
    search_for_website,
)

RECORD = CustomerRecord(
    id="1042", code="WE01", name="W E Bowers, Inc.", city="Glen Burnie", state="MD", phone="410-555-0100"
)


def _search_client(results):
    client = MagicMock()
    client.configured = True
    client.search = AsyncMock(return_value=results)
    return client


def _ai_client(content):
    resp = MagicMock()
    resp.choices = [MagicMock()]
    resp.choices[0].message.content = content
    client = MagicMock()
    client.chat_completions_create = AsyncMock(return_value=resp)
    return client


# Domain guessing


@pytest.mark.asyncio
async def test_guess_domain_returns_first_live_candidate(settings):
    resolves = AsyncMock(side_effect=lambda host, timeout: host == "www.e-bowers.com")
    with patch("website_updater.resolvers.domain_guess.name_resolves", resolves), \
         patch("website_updater.resolvers.domain_guess.http_responds", AsyncMock(return_value=True)) as responds:
        candidate = await guess_domain("E Bowers", "", settings)

    assert candidate.hostname == "www.e-bowers.com"
    assert candidate.confidence is Confidence.HIGH
    assert candidate.source is Source.DOMAIN_GUESS
    # The HTTP check only runs for the candidate that resolved
    responds.assert_awaited_once_with("www.e-bowers.com", settings.http_timeout)


@pytest.mark.asyncio
async def test_guess_domain_stops_after_first_hit(settings):
    resolves = AsyncMock(return_value=True)
    with patch("website_updater.resolvers.domain_guess.name_resolves", resolves), \
         patch("website_updater.resolvers.domain_guess.http_responds", AsyncMock(return_value=True)):
        candidate = await guess_domain("4Print Wraps, Inc.", "Glenburnie", settings)

    assert candidate.hostname == "www.4printwraps.com"
    assert resolves.await_count == 1


@pytest.mark.asyncio
async def test_guess_domain_none_when_nothing_is_live(settings):
    with patch("website_updater.resolvers.domain_guess.name_resolves", AsyncMock(return_value=True)), \
         patch("website_updater.resolvers.domain_guess.http_responds", AsyncMock(return_value=False)):
        assert await guess_domain("Acme", "Springfield", settings) is None


# Search scoring


def test_score_result_components():
    assert score_result({"link": "https://acme.com", "title": "Acme - Official Site", "snippet": ""}) == 15
    assert score_result({"link": "https://acme.net", "title": "Home", "snippet": "The official website of Acme"}) == 10
    assert score_result({"link": "https://www.yelp.com/biz/acme", "title": "Acme", "snippet": ""}) == -10


def test_is_blocked_matches_subdomains_only():
    assert is_blocked("https://m.facebook.com/acme")
    assert is_blocked("https://bbb.org/us/md/acme")
    assert not is_blocked("https://notfacebook.com")


def test_rank_results_is_stable_for_ties():
    results = [
        {"link": "https://first.com", "title": "", "snippet": ""},
        {"link": "https://second.com", "title": "", "snippet": ""},
    ]
    ranked = rank_results(results)
    assert [r["link"] for _, r in ranked] == ["https://first.com", "https://second.com"]


def test_build_search_query():
    assert build_search_query(RECORD) == "W E Bowers, Inc. Glen Burnie MD official website"


@pytest.mark.asyncio
async def test_search_for_website_picks_top_scored_result(settings):
    client = _search_client([
        {"link": "https://www.facebook.com/webowers", "title": "W E Bowers | Facebook", "snippet": ""},
        {"link": "https://webowers.com/contact", "title": "W E Bowers - Home", "snippet": ""},
    ])
    candidate = await search_for_website(RECORD, settings, client)

    assert candidate.hostname == "www.webowers.com"
    assert candidate.confidence is Confidence.HIGH
    assert candidate.source is Source.SEARCH
    assert candidate.alternates == ["www.webowers.com", "www.facebook.com"]
    client.search.assert_awaited_once_with("W E Bowers, Inc. Glen Burnie MD official website", num=5)


@pytest.mark.asyncio
async def test_search_for_website_medium_confidence_below_ten(settings):
    client = _search_client([{"link": "https://webowers.net", "title": "Welcome home", "snippet": ""}])
    candidate = await search_for_website(RECORD, settings, client)
    assert candidate.confidence is Confidence.MEDIUM


@pytest.mark.asyncio
async def test_search_for_website_rejects_negative_top_score(settings):
    client = _search_client([{"link": "https://www.yelp.com/biz/webowers", "title": "W E Bowers", "snippet": ""}])
    assert await search_for_website(RECORD, settings, client) is None


@pytest.mark.asyncio
async def test_search_for_website_none_on_error_or_no_results(settings):
    failing = _search_client([])
    failing.search = AsyncMock(side_effect=Exception("HTTP 403"))
    assert await search_for_website(RECORD, settings, failing) is None
    assert await search_for_website(RECORD, settings, _search_client([])) is None


@pytest.mark.asyncio
async def test_search_for_website_skipped_when_not_configured(settings):
    client = _search_client([{"link": "https://webowers.com"}])
    client.configured = False
    assert await search_for_website(RECORD, settings, client) is None
    client.search.assert_not_awaited()


# AI fallback


@pytest.mark.parametrize(
    "text, expected",
    [
        ("webowers.com", "www.webowers.com"),
        ("  https://www.webowers.com/  ", "www.webowers.com"),
        ("NOT_FOUND", None),
        ("Sorry, not_found.", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_ai_answer(text, expected):
    assert parse_ai_answer(text) == expected


@pytest.mark.asyncio
async def test_ai_resolve_returns_medium_candidate(settings):
    client = _ai_client("webowers.com")
    candidate = await ai_resolve(RECORD, settings, client)

    assert candidate.hostname == "www.webowers.com"
    assert candidate.confidence is Confidence.MEDIUM
    assert candidate.source is Source.AI
    kwargs = client.chat_completions_create.call_args.kwargs
    assert kwargs["temperature"] == 0
    assert "410-555-0100" in kwargs["messages"][1]["content"]


@pytest.mark.asyncio
async def test_ai_resolve_never_raises(settings):
    client = MagicMock()
    client.chat_completions_create = AsyncMock(side_effect=Exception("rate limited"))
    assert await ai_resolve(RECORD, settings, client) is None
    assert await ai_resolve(RECORD, settings, None) is None


# Orchestrator


@pytest.mark.asyncio
async def test_orchestrator_short_circuits_on_domain_guess(settings):
    hit = ResolutionCandidate("www.webowers.com", Confidence.HIGH, Source.DOMAIN_GUESS)
    with patch("website_updater.resolvers.resolution_orchestrator.guess_domain", AsyncMock(return_value=hit)), \
         patch("website_updater.resolvers.resolution_orchestrator.search_for_website", AsyncMock()) as search, \
         patch("website_updater.resolvers.resolution_orchestrator.ai_resolve", AsyncMock()) as ai:
        result = await resolve_website(RECORD, settings, MagicMock(), MagicMock())

    assert result is hit
    search.assert_not_called()
    ai.assert_not_called()


@pytest.mark.asyncio
async def test_orchestrator_falls_through_to_ai(settings):
    ai_hit = ResolutionCandidate("www.webowers.com", Confidence.MEDIUM, Source.AI)
    with patch("website_updater.resolvers.resolution_orchestrator.guess_domain", AsyncMock(return_value=None)) as guess, \
         patch("website_updater.resolvers.resolution_orchestrator.search_for_website", AsyncMock(return_value=None)) as search, \
         patch("website_updater.resolvers.resolution_orchestrator.ai_resolve", AsyncMock(return_value=ai_hit)) as ai:
        result = await resolve_website(RECORD, settings, MagicMock(), MagicMock())

    assert result is ai_hit
    assert guess.await_count == search.await_count == ai.await_count == 1


@pytest.mark.asyncio
async def test_orchestrator_respects_disabled_tiers(settings):
    only_ai = replace(settings, enable_domain_guess=False, enable_search=False)
    with patch("website_updater.resolvers.resolution_orchestrator.guess_domain", AsyncMock()) as guess, \
         patch("website_updater.resolvers.resolution_orchestrator.search_for_website", AsyncMock()) as search, \
         patch("website_updater.resolvers.resolution_orchestrator.ai_resolve", AsyncMock(return_value=None)) as ai:
        assert await resolve_website(RECORD, only_ai, MagicMock(), MagicMock()) is None

    guess.assert_not_called()
    search.assert_not_called()
    ai.assert_awaited_once()
