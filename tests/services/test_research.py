"""Tests for prior-art research: queries, source lookups and aggregation."""

from __future__ import annotations

import time

import pytest

from patent_pipeline.domain.events import SourceLookupFailed
from patent_pipeline.domain.exceptions import ResearchFailed
from patent_pipeline.domain.values import InventionIdea, RawCandidate
from patent_pipeline.infrastructure.config import ResearchConfig
from patent_pipeline.infrastructure.event_bus import EventBus, EventStore
from patent_pipeline.services.research import (
    CallableSourceLookup,
    PriorArtAggregator,
    build_search_queries,
)
from patent_pipeline.testing import (
    FailingSourceLookup,
    SlowSourceLookup,
    StaticSourceLookup,
)


# ===================================================================== #
#  Queries                                                                #
# ===================================================================== #


class TestBuildSearchQueries:

    def test_five_queries(self, smart_valve: InventionIdea) -> None:
        queries = build_search_queries(smart_valve)
        assert queries == [
            "Smart Valve patent prior art",
            "Fluid Control leak detection patent",
            '"pressure sensor array" patent application',
            "Fluid Control invention similar to Smart Valve",
            "patent database Fluid Control leak detection",
        ]

    def test_limit(self, smart_valve: InventionIdea) -> None:
        assert len(build_search_queries(smart_valve, limit=2)) == 2

    def test_whitespace_normalized(self) -> None:
        idea = InventionIdea(title="  Multi\nLine  ", technical_field="F")
        assert build_search_queries(idea)[0] == "Multi Line patent prior art"


# ===================================================================== #
#  Source lookups                                                         #
# ===================================================================== #


class TestCallableSourceLookup:

    @pytest.mark.asyncio
    async def test_sync_function(self) -> None:
        def search(query: str) -> list[dict]:
            return [{"title": query, "url": "u"}]

        source = CallableSourceLookup(search)
        assert source.name == "search"
        assert await source.lookup("q") == [{"title": "q", "url": "u"}]

    @pytest.mark.asyncio
    async def test_async_function(self) -> None:
        async def search(query: str) -> list[dict]:
            return [{"title": query, "url": "u"}]

        source = CallableSourceLookup(search, name="web")
        assert source.name == "web"
        assert await source.lookup("q") == [{"title": "q", "url": "u"}]


# ===================================================================== #
#  Aggregator                                                             #
# ===================================================================== #


class TestPriorArtAggregator:

    @pytest.mark.asyncio
    async def test_no_sources_yields_empty_set(self, smart_valve: InventionIdea) -> None:
        results = await PriorArtAggregator().aggregate(smart_valve, [])
        assert results.is_empty
        assert results.sources_attempted == 0
        assert not results.all_sources_failed

    @pytest.mark.asyncio
    async def test_every_query_sent_to_every_source(
        self, smart_valve: InventionIdea
    ) -> None:
        first = StaticSourceLookup("a")
        second = StaticSourceLookup("b")
        await PriorArtAggregator().aggregate(smart_valve, [first, second])
        assert first.queries == build_search_queries(smart_valve)
        assert len(second.queries) == 5

    @pytest.mark.asyncio
    async def test_scores_and_ranks(
        self, smart_valve: InventionIdea, valve_candidates: list[RawCandidate]
    ) -> None:
        results = await PriorArtAggregator().aggregate(
            smart_valve, [StaticSourceLookup("uspto", valve_candidates)]
        )
        assert len(results) == 2
        assert results[0].relevance_score == 100
        assert results[1].relevance_score == 0
        assert results[0].source == "uspto"

    @pytest.mark.asyncio
    async def test_same_url_keeps_highest_score(
        self, smart_valve: InventionIdea, text_value_scorer
    ) -> None:
        url = "https://patents.example.com/US3333333"
        high = StaticSourceLookup("a", [RawCandidate(title="Same", url=url, text="80")])
        low = StaticSourceLookup("b", [RawCandidate(title="Same", url=url, text="60")])
        aggregator = PriorArtAggregator(scorer=text_value_scorer)

        for sources in ([high, low], [low, high]):
            results = await aggregator.aggregate(smart_valve, sources)
            assert len(results) == 1
            assert results[0].url == url
            assert results[0].relevance_score == 80

    @pytest.mark.asyncio
    async def test_failing_source_does_not_block_others(
        self, smart_valve: InventionIdea, valve_candidates: list[RawCandidate]
    ) -> None:
        results = await PriorArtAggregator().aggregate(
            smart_valve,
            [FailingSourceLookup("down"), StaticSourceLookup("up", valve_candidates)],
        )
        assert {r.url for r in results} == {c.url for c in valve_candidates}
        assert len(results.warnings) == 5
        assert all("'down'" in w for w in results.warnings)
        assert results.sources_attempted == 2
        assert results.sources_failed == 1
        assert not results.all_sources_failed

    @pytest.mark.asyncio
    async def test_partially_failing_source_is_not_failed(
        self, smart_valve: InventionIdea, valve_candidates: list[RawCandidate]
    ) -> None:
        first_query = build_search_queries(smart_valve)[0]
        source = FailingSourceLookup(
            "flaky", fail_on=[first_query], candidates=valve_candidates
        )
        results = await PriorArtAggregator().aggregate(smart_valve, [source])
        assert len(results) == 2
        assert len(results.warnings) == 1
        assert results.sources_failed == 0

    @pytest.mark.asyncio
    async def test_all_sources_failing(self, smart_valve: InventionIdea) -> None:
        results = await PriorArtAggregator().aggregate(
            smart_valve, [FailingSourceLookup("a"), FailingSourceLookup("b")]
        )
        assert results.is_empty
        assert results.all_sources_failed
        assert len(results.warnings) == 10

    @pytest.mark.asyncio
    async def test_research_raises_when_all_failed(self, smart_valve: InventionIdea) -> None:
        with pytest.raises(ResearchFailed) as info:
            await PriorArtAggregator().research(smart_valve, [FailingSourceLookup("a")])
        assert len(info.value.warnings) == 5

    @pytest.mark.asyncio
    async def test_research_without_sources_is_fine(self, smart_valve: InventionIdea) -> None:
        results = await PriorArtAggregator().research(smart_valve, [])
        assert results.is_empty

    @pytest.mark.asyncio
    async def test_timeout_counts_as_failure(
        self, smart_valve: InventionIdea, valve_candidates: list[RawCandidate]
    ) -> None:
        aggregator = PriorArtAggregator(config=ResearchConfig(lookup_timeout=0.05))
        results = await aggregator.aggregate(
            smart_valve,
            [SlowSourceLookup("slow", delay=5.0), StaticSourceLookup("fast", valve_candidates)],
        )
        assert len(results) == 2
        assert results.sources_failed == 1
        assert all("timed out" in w for w in results.warnings)

    @pytest.mark.asyncio
    async def test_lookups_run_concurrently(self, smart_valve: InventionIdea) -> None:
        sources = [SlowSourceLookup("s1", delay=0.2), SlowSourceLookup("s2", delay=0.2)]
        start = time.perf_counter()
        await PriorArtAggregator().aggregate(smart_valve, sources)
        elapsed = time.perf_counter() - start
        # ten calls of 0.2s each would take 2s sequentially
        assert elapsed < 1.0
        assert sources[0].completed == 5
        assert sources[1].completed == 5

    @pytest.mark.asyncio
    async def test_provider_mappings_are_validated(self, smart_valve: InventionIdea) -> None:
        source = StaticSourceLookup(
            "web",
            [
                {
                    "title": "Leak detector",
                    "url": "https://example.com/leak",
                    "snippet": "leak detection with a pressure sensor",
                    "publishedDate": "2020-05-01",
                },
                {"title": "", "url": "https://example.com/untitled"},
                {"url": "https://example.com/missing-title"},
            ],
        )
        results = await PriorArtAggregator().aggregate(smart_valve, [source])
        assert len(results) == 1
        assert results[0].summary == "leak detection with a pressure sensor"
        assert results[0].publication_date == "2020-05-01"

    @pytest.mark.asyncio
    async def test_max_results(self, smart_valve: InventionIdea) -> None:
        candidates = [
            RawCandidate(title=f"Valve {i}", url=f"https://example.com/{i}") for i in range(15)
        ]
        results = await PriorArtAggregator().aggregate(
            smart_valve, [StaticSourceLookup("s", candidates)]
        )
        assert len(results) == 10

    @pytest.mark.asyncio
    async def test_candidates_per_query(self, smart_valve: InventionIdea) -> None:
        candidates = [
            RawCandidate(title=f"Valve {i}", url=f"https://example.com/{i}") for i in range(3)
        ]
        aggregator = PriorArtAggregator(config=ResearchConfig(candidates_per_query=1))
        results = await aggregator.aggregate(smart_valve, [StaticSourceLookup("s", candidates)])
        assert [r.url for r in results] == ["https://example.com/0"]

    @pytest.mark.asyncio
    async def test_failures_published(self, smart_valve: InventionIdea) -> None:
        bus = EventBus()
        store = EventStore()
        bus.subscribe_all(store.append)
        await PriorArtAggregator(event_bus=bus).aggregate(
            smart_valve, [FailingSourceLookup("down")]
        )
        failures = store.query(SourceLookupFailed)
        assert len(failures) == 5
        assert {e.source for e in failures} == {"down"}

    @pytest.mark.asyncio
    async def test_per_query_answers(
        self, smart_valve: InventionIdea, valve_candidates: list[RawCandidate]
    ) -> None:
        first_query = build_search_queries(smart_valve)[0]
        source = StaticSourceLookup("s", per_query={first_query: valve_candidates[:1]})
        results = await PriorArtAggregator().aggregate(smart_valve, [source])
        assert [r.url for r in results] == [valve_candidates[0].url]
        assert not results.warnings

    @pytest.mark.asyncio
    async def test_malformed_response_becomes_warning(
        self, smart_valve: InventionIdea, valve_candidates: list[RawCandidate]
    ) -> None:
        bad = CallableSourceLookup(lambda query: 42, name="bad")
        results = await PriorArtAggregator().aggregate(
            smart_valve, [StaticSourceLookup("good", valve_candidates), bad]
        )
        assert len(results) == 2
        assert results.sources_failed == 1
        assert len(results.warnings) == 5
        assert all("'bad'" in w and "malformed response" in w for w in results.warnings)
