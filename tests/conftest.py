"""Shared fixtures for the patent pipeline test suite."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from patent_pipeline.domain.values import (
    InventionIdea,
    PriorArtReference,
    RawCandidate,
    ResearchResultSet,
)
from patent_pipeline.infrastructure.event_bus import EventBus, EventStore
from patent_pipeline.services.pipeline import PatentPipeline
from patent_pipeline.services.scoring import RelevanceScorer
from patent_pipeline.testing import (
    InMemoryLedgerRecorder,
    InMemoryPaymentProcessor,
    InMemorySigner,
    StaticSourceLookup,
)

SUBMITTED_AT = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Scorers
# ---------------------------------------------------------------------------


class TextValueScorer(RelevanceScorer):
    """Reads the relevance score straight from the candidate text.

    Lets a test pin exact scores (``text="80"``) without reverse-engineering
    keyword overlap.
    """

    def score_candidate(self, candidate: RawCandidate, idea: InventionIdea) -> int:
        return int(candidate.text)


@pytest.fixture
def text_value_scorer() -> TextValueScorer:
    return TextValueScorer()


@pytest.fixture
def text_value_scorer_cls() -> type[TextValueScorer]:
    """For tests that need the scorer built with a custom ScoringConfig."""
    return TextValueScorer


# ---------------------------------------------------------------------------
# Value-object fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def smart_valve() -> InventionIdea:
    """The reference idea: a leak-detecting valve."""
    return InventionIdea(
        title="Smart Valve",
        technical_field="Fluid Control",
        problem_solved="leak detection",
        solution="pressure sensor array",
        advantages="early warning",
        submitter_name="Ada Inventor",
        submitter_email="ada@example.com",
        created_at=SUBMITTED_AT,
    )


@pytest.fixture
def valve_candidates() -> list[RawCandidate]:
    return [
        RawCandidate(
            title="Pressure sensor array for leak detection in fluid control valves",
            url="https://patents.example.com/US1111111",
            text="A smart valve with a pressure sensor array that performs leak detection.",
            published_date="2019-04-02",
            patent_number="US1111111",
        ),
        RawCandidate(
            title="Garden hose reel",
            url="https://patents.example.com/US2222222",
            text="A reel for storing a garden hose.",
            published_date="2001-06-19",
        ),
    ]


@pytest.fixture
def sample_results() -> ResearchResultSet:
    """Two references: one high similarity, one low."""
    return ResearchResultSet.build(
        [
            PriorArtReference(
                title="Close match",
                url="https://example.com/close",
                summary="Nearly the same valve.",
                relevance_score=90,
                publication_date="2020-01-01",
            ),
            PriorArtReference(
                title="Loose match",
                url="https://example.com/loose",
                summary="A different valve.",
                relevance_score=10,
            ),
        ]
    )


# ---------------------------------------------------------------------------
# Infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def event_store(event_bus: EventBus) -> EventStore:
    store = EventStore()
    event_bus.subscribe_all(store.append)
    return store


# ---------------------------------------------------------------------------
# Pipeline fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def payment() -> InMemoryPaymentProcessor:
    return InMemoryPaymentProcessor()


@pytest.fixture
def signer() -> InMemorySigner:
    return InMemorySigner()


@pytest.fixture
def ledger() -> InMemoryLedgerRecorder:
    return InMemoryLedgerRecorder()


@pytest.fixture
def pipeline(
    valve_candidates: list[RawCandidate],
    payment: InMemoryPaymentProcessor,
    signer: InMemorySigner,
    ledger: InMemoryLedgerRecorder,
    event_bus: EventBus,
) -> PatentPipeline:
    """Pipeline with one static source and in-memory collaborators."""
    return PatentPipeline(
        [StaticSourceLookup("uspto", valve_candidates)],
        payment=payment,
        signer=signer,
        ledger=ledger,
        event_bus=event_bus,
    )
