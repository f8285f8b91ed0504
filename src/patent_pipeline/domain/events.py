"""Domain events for the patent pipeline.

Every event is a frozen dataclass inheriting from ``DomainEvent``.  The
pipeline and the aggregator publish events on an optional bus; listeners
(progress displays, audit logs, tests) react without the pipeline knowing
about them.

All events carry a ``timestamp`` and a ``source_id`` identifying the
originating run or component.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from .enums import Stage

# ---------------------------------------------------------------------------
# Base event
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    timestamp: float = field(default_factory=time.time)
    source_id: str = ""


# ---------------------------------------------------------------------------
# Run lifecycle
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IdeaSubmitted(DomainEvent):
    """A new run was created for a submitted idea."""

    run_id: str = ""
    title: str = ""


@dataclass(frozen=True)
class StageStarted(DomainEvent):
    """A stage entry action began executing."""

    run_id: str = ""
    stage: Stage | None = None


@dataclass(frozen=True)
class StageCompleted(DomainEvent):
    """A stage entry action produced its output."""

    run_id: str = ""
    stage: Stage | None = None
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class StageFailed(DomainEvent):
    """A stage entry action failed; the run stays on that stage."""

    run_id: str = ""
    stage: Stage | None = None
    error: str = ""


@dataclass(frozen=True)
class StageAdvanced(DomainEvent):
    """The run moved forward to the next stage."""

    run_id: str = ""
    from_stage: Stage | None = None
    to_stage: Stage | None = None


@dataclass(frozen=True)
class TransitionRejected(DomainEvent):
    """``advance`` was called while its preconditions were unmet."""

    run_id: str = ""
    stage: Stage | None = None
    reason: str = ""


# ---------------------------------------------------------------------------
# Research / recording
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SourceLookupFailed(DomainEvent):
    """One source lookup call raised or timed out (absorbed as a warning)."""

    source: str = ""
    query: str = ""
    reason: str = ""


@dataclass(frozen=True)
class PatentRecorded(DomainEvent):
    """A document hash was written to the ledger."""

    run_id: str = ""
    patent_id: str = ""
    document_hash: str = ""
    transaction_hash: str = ""
    block_number: int = 0
