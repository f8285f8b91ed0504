"""Prior-art research across pluggable source lookups.

Classes
-------
BaseSourceLookup
    Abstract capability: ``lookup(query) -> candidates``.
CallableSourceLookup
    Adapts a plain (sync or async) function into a source lookup.
PriorArtAggregator
    Fans every search query out to every source concurrently, waits for all
    of them to settle, scores the survivors and builds a
    :class:`ResearchResultSet`.

A failing or slow source never aborts research: its calls settle as
:class:`LookupErr` values and surface as warnings on the result set.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

from patent_pipeline.domain.events import SourceLookupFailed
from patent_pipeline.domain.exceptions import ResearchFailed
from patent_pipeline.domain.values import (
    InventionIdea,
    LookupErr,
    LookupOk,
    LookupResult,
    PriorArtReference,
    RawCandidate,
    ResearchResultSet,
)
from patent_pipeline.infrastructure.config import ResearchConfig
from patent_pipeline.infrastructure.event_bus import EventBus
from patent_pipeline.infrastructure.schemas import coerce_candidates
from patent_pipeline.services.scoring import RelevanceScorer

logger = logging.getLogger(__name__)

CandidatePayloads = Sequence[RawCandidate | Mapping[str, Any]]


# ===================================================================== #
#  Source lookups                                                        #
# ===================================================================== #


class BaseSourceLookup(ABC):
    """A read-only external search capability.

    Implementations may raise anything (network errors, quota errors,
    :class:`SourceLookupFailure`); the aggregator treats every exception the
    same way.
    """

    name: str = "source"

    @abstractmethod
    async def lookup(self, query: str) -> CandidatePayloads:
        """Return candidates for *query* as ``RawCandidate`` values or raw
        provider mappings (``title``, ``url``, ``text``...)."""


class CallableSourceLookup(BaseSourceLookup):
    """Wrap ``fn(query)`` (sync or async) as a source lookup."""

    def __init__(
        self,
        fn: Callable[[str], CandidatePayloads | Awaitable[CandidatePayloads]],
        name: str = "",
    ) -> None:
        self._fn = fn
        self.name = name or getattr(fn, "__name__", "callable")

    async def lookup(self, query: str) -> CandidatePayloads:
        result = self._fn(query)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"CallableSourceLookup(name={self.name!r})"


def build_search_queries(idea: InventionIdea, limit: int = 5) -> list[str]:
    """Search queries derived from the idea, most specific first."""
    queries = [
        f"{idea.title} patent prior art",
        f"{idea.technical_field} {idea.problem_solved} patent",
        f'"{idea.solution}" patent application',
        f"{idea.technical_field} invention similar to {idea.title}",
        f"patent database {idea.technical_field} {idea.problem_solved}",
    ]
    return [" ".join(q.split()) for q in queries[:limit]]


# ===================================================================== #
#  Aggregator                                                            #
# ===================================================================== #


class PriorArtAggregator:
    """Run all source lookups, merge, deduplicate, rank and truncate.

    Parameters
    ----------
    scorer:
        Relevance scorer applied to every candidate.
    config:
        Result cap, per-call timeout and query fan-out.
    event_bus:
        Optional bus; receives a :class:`SourceLookupFailed` per failed call.
    """

    def __init__(
        self,
        scorer: RelevanceScorer | None = None,
        config: ResearchConfig | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._scorer = scorer or RelevanceScorer()
        self._config = config or ResearchConfig()
        self._event_bus = event_bus

    @property
    def config(self) -> ResearchConfig:
        return self._config

    async def _call(self, source: BaseSourceLookup, query: str) -> LookupResult:
        try:
            payloads = await asyncio.wait_for(
                source.lookup(query), timeout=self._config.lookup_timeout
            )
        except asyncio.TimeoutError:
            reason = f"timed out after {self._config.lookup_timeout:g}s"
            return LookupErr(source=source.name, query=query, reason=reason)
        except Exception as exc:
            reason = f"{type(exc).__name__}: {exc}"
            return LookupErr(source=source.name, query=query, reason=reason)

        try:
            candidates = coerce_candidates(payloads or (), source=source.name)
        except TypeError as exc:
            reason = f"malformed response: {exc}"
            return LookupErr(source=source.name, query=query, reason=reason)
        limit = self._config.candidates_per_query
        if limit is not None:
            candidates = candidates[:limit]
        return LookupOk(source=source.name, query=query, candidates=tuple(candidates))

    async def collect(
        self,
        idea: InventionIdea,
        sources: Sequence[BaseSourceLookup],
    ) -> list[LookupResult]:
        """Issue every (source, query) call concurrently and wait for all."""
        queries = build_search_queries(idea, self._config.max_queries)
        calls = [self._call(source, query) for source in sources for query in queries]
        if not calls:
            return []
        return list(await asyncio.gather(*calls))

    async def aggregate(
        self,
        idea: InventionIdea,
        sources: Sequence[BaseSourceLookup],
    ) -> ResearchResultSet:
        """Research *idea* across *sources* and return the ranked result set.

        Never raises for lookup failures; an empty or all-failing source list
        yields an empty result set.
        """
        outcomes = await self.collect(idea, sources)

        references: list[PriorArtReference] = []
        warnings: list[str] = []
        succeeded: set[str] = set()
        for outcome in outcomes:
            if isinstance(outcome, LookupErr):
                logger.warning("Prior-art lookup failed: %s", outcome.warning)
                warnings.append(outcome.warning)
                if self._event_bus is not None:
                    self._event_bus.publish(
                        SourceLookupFailed(
                            source_id=outcome.source,
                            source=outcome.source,
                            query=outcome.query,
                            reason=outcome.reason,
                        )
                    )
                continue
            succeeded.add(outcome.source)
            for candidate in outcome.candidates:
                references.append(self._scorer.to_reference(candidate, idea))

        attempted = {source.name for source in sources}
        results = ResearchResultSet.build(
            references,
            self._config.max_results,
            warnings=warnings,
            sources_attempted=len(attempted),
            sources_failed=len(attempted - succeeded),
        )
        logger.info(
            "Research for %r: %d candidates -> %d references (%d/%d sources failed)",
            idea.title,
            len(references),
            len(results),
            results.sources_failed,
            results.sources_attempted,
        )
        return results

    async def research(
        self,
        idea: InventionIdea,
        sources: Sequence[BaseSourceLookup],
    ) -> ResearchResultSet:
        """Like :meth:`aggregate`, but fail when no configured source answered.

        Raises
        ------
        ResearchFailed
            If at least one source was configured and every one of them
            failed on every query.  The exception carries the warnings.
        """
        results = await self.aggregate(idea, sources)
        if results.all_sources_failed:
            raise ResearchFailed(
                f"All {results.sources_attempted} prior-art sources failed",
                warnings=results.warnings,
                details={"sources_attempted": results.sources_attempted},
            )
        return results
