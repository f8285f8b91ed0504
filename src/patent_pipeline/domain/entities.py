"""Domain entities for the patent pipeline.

Entities have *identity* that persists across their lifecycle.  Both are
frozen: a lifecycle step produces a new instance via ``dataclasses.replace``
and leaves the original untouched.

* ``PatentDocument`` -- the assembled application, identified by
  ``document_id``.  The only post-assembly change is attaching recording
  metadata.
* ``PipelineRun`` -- one state-machine instance per session, identified by
  ``run_id``.
"""

from __future__ import annotations

import dataclasses
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime

from .enums import DocumentStatus, Stage, StageStatus
from .values import (
    BlockchainRecord,
    InventionIdea,
    PatentabilityAssessment,
    PaymentReceipt,
    ResearchResultSet,
)

# ---------------------------------------------------------------------------
# PatentDocument
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PatentDocument:
    """A generated patent application.

    ``claims[0]`` is always the single independent claim; every following
    claim depends on claim 1.
    """

    document_id: str
    idea: InventionIdea
    results: ResearchResultSet
    assessment: PatentabilityAssessment
    claims: tuple[str, ...]
    abstract: str
    detailed_description: str
    drawings_description: str
    inventorship_statement: str
    patentability_analysis: str
    next_steps: tuple[str, ...]
    created_at: datetime
    status: DocumentStatus = DocumentStatus.DRAFT
    blockchain_hash: str | None = None
    transaction_hash: str | None = None

    def __post_init__(self) -> None:
        if not self.claims:
            raise ValueError("a patent document needs at least one claim")
        if not self.claims[0].startswith("1."):
            raise ValueError("claim 1 must be the first claim")
        for claim in self.claims[1:]:
            if "of claim 1" not in claim:
                raise ValueError(f"dependent claim does not reference claim 1: {claim!r}")

    @property
    def independent_claim(self) -> str:
        return self.claims[0]

    @property
    def dependent_claims(self) -> tuple[str, ...]:
        return self.claims[1:]

    @property
    def is_recorded(self) -> bool:
        return self.status is DocumentStatus.BLOCKCHAIN_RECORDED

    def with_recording(self, record: BlockchainRecord) -> PatentDocument:
        """Return a copy carrying *record*'s hash and transaction reference."""
        return dataclasses.replace(
            self,
            status=DocumentStatus.BLOCKCHAIN_RECORDED,
            blockchain_hash=record.document_hash,
            transaction_hash=record.transaction_hash,
        )


# ---------------------------------------------------------------------------
# PipelineRun
# ---------------------------------------------------------------------------

def _initial_statuses() -> dict[Stage, StageStatus]:
    return {stage: StageStatus.PENDING for stage in Stage}


@dataclass(frozen=True)
class StageReport:
    """Snapshot of the current stage handed to callers for display."""

    stage: Stage
    status: StageStatus
    error: str | None = None
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class PipelineRun:
    """A single pass through the pipeline for one submitted idea.

    Runs are independent of each other; abandoning one never affects a
    fresh run created afterwards.
    """

    idea: InventionIdea
    run_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    stage: Stage = Stage.SUBMISSION
    statuses: Mapping[Stage, StageStatus] = field(default_factory=_initial_statuses)
    errors: Mapping[Stage, str] = field(default_factory=dict)
    warnings: tuple[str, ...] = ()
    results: ResearchResultSet | None = None
    document: PatentDocument | None = None
    payment: PaymentReceipt | None = None
    record: BlockchainRecord | None = None

    # -- queries --------------------------------------------------------------

    def status_of(self, stage: Stage) -> StageStatus:
        return self.statuses.get(stage, StageStatus.PENDING)

    @property
    def status(self) -> StageStatus:
        """Status of the current stage."""
        return self.status_of(self.stage)

    @property
    def error(self) -> str | None:
        return self.errors.get(self.stage)

    @property
    def is_terminal(self) -> bool:
        return self.stage is Stage.COMPLETED

    @property
    def has_failed(self) -> bool:
        return self.status is StageStatus.ERROR

    def output_of(self, stage: Stage) -> object | None:
        """The artifact *stage* must produce before the run may leave it."""
        if stage is Stage.SUBMISSION:
            return self.idea
        if stage is Stage.RESEARCH:
            return self.results
        if stage is Stage.GENERATION:
            return self.document
        if stage is Stage.BLOCKCHAIN:
            return self.record
        return None

    def report(self) -> StageReport:
        return StageReport(
            stage=self.stage,
            status=self.status,
            error=self.error,
            warnings=self.warnings,
        )

    # -- transitions ----------------------------------------------------------

    def with_status(
        self,
        stage: Stage,
        status: StageStatus,
        error: str | None = None,
    ) -> PipelineRun:
        """Return a copy with *stage* set to *status* (and its error message)."""
        statuses = dict(self.statuses)
        statuses[stage] = status
        errors = dict(self.errors)
        if error is None:
            errors.pop(stage, None)
        else:
            errors[stage] = error
        return dataclasses.replace(self, statuses=statuses, errors=errors)

    def moved_to(self, stage: Stage) -> PipelineRun:
        """Return a copy positioned on *stage*.  Only forward moves are allowed."""
        if stage.index <= self.stage.index:
            raise ValueError(
                f"cannot move from {self.stage.value} back to {stage.value}"
            )
        return dataclasses.replace(self, stage=stage)
