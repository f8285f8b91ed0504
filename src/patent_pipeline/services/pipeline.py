"""The pipeline state machine.

``PatentPipeline`` drives one idea through the ordered stages::

    submission -> research -> generation -> blockchain -> completed

Every operation takes a :class:`PipelineRun` and returns a new one; nothing
is mutated in place.  Two kinds of operation exist:

* **entry actions** (:meth:`PatentPipeline.research`,
  :meth:`~PatentPipeline.generate`, :meth:`~PatentPipeline.record`) produce
  the current stage's output.  A whole-stage failure marks the stage
  ``error`` and leaves the run where it is; re-invoking the entry action
  retries it with every earlier output intact.
* :meth:`PatentPipeline.advance` moves forward one stage once the current
  stage's output exists.  Calling it too early is a no-op, not an error, so
  stale or repeated calls from a UI are harmless.

Collaborators are injected through the constructor; there is no module-level
client state.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence

from patent_pipeline.domain.entities import PipelineRun, StageReport
from patent_pipeline.domain.enums import Stage, StageStatus
from patent_pipeline.domain.events import (
    DomainEvent,
    IdeaSubmitted,
    PatentRecorded,
    StageAdvanced,
    StageCompleted,
    StageFailed,
    StageStarted,
    TransitionRejected,
)
from patent_pipeline.domain.exceptions import (
    CollaboratorRejection,
    InvalidIdeaError,
    ResearchFailed,
)
from patent_pipeline.domain.values import InventionIdea
from patent_pipeline.infrastructure.config import PipelineConfig
from patent_pipeline.infrastructure.event_bus import EventBus
from patent_pipeline.services.assessment import PatentabilityEstimator
from patent_pipeline.services.collaborators import (
    DocumentSigner,
    LedgerRecorder,
    PaymentProcessor,
)
from patent_pipeline.services.drafting import DocumentAssembler
from patent_pipeline.services.recording import BlockchainRecorder
from patent_pipeline.services.research import BaseSourceLookup, PriorArtAggregator
from patent_pipeline.services.scoring import RelevanceScorer

logger = logging.getLogger(__name__)

_RETRYABLE = (StageStatus.PENDING, StageStatus.ERROR)


class PatentPipeline:
    """Sequential research and document-generation pipeline.

    Parameters
    ----------
    sources:
        Prior-art source lookups queried during research.  An empty list is
        valid and means "no prior art found".
    payment, signer, ledger:
        Collaborators for the blockchain stage.  All three are required for
        that stage to succeed; a missing one is reported as a stage error.
    config:
        Scoring, research and recording settings.
    event_bus:
        Optional bus receiving lifecycle events.
    scorer, estimator, assembler:
        Overrides for the default services built from *config*.
    """

    def __init__(
        self,
        sources: Sequence[BaseSourceLookup] = (),
        *,
        payment: PaymentProcessor | None = None,
        signer: DocumentSigner | None = None,
        ledger: LedgerRecorder | None = None,
        config: PipelineConfig | None = None,
        event_bus: EventBus | None = None,
        scorer: RelevanceScorer | None = None,
        estimator: PatentabilityEstimator | None = None,
        assembler: DocumentAssembler | None = None,
    ) -> None:
        self._config = config or PipelineConfig()
        self._config.validate()
        self._sources = tuple(sources)
        self._event_bus = event_bus
        self._scorer = scorer or RelevanceScorer(self._config.scoring)
        self._aggregator = PriorArtAggregator(
            scorer=self._scorer,
            config=self._config.research,
            event_bus=event_bus,
        )
        self._estimator = estimator or PatentabilityEstimator(
            self._config.scoring, self._scorer
        )
        self._assembler = assembler or DocumentAssembler()
        self._recorder: BlockchainRecorder | None = None
        if payment is not None and signer is not None and ledger is not None:
            self._recorder = BlockchainRecorder(
                payment, signer, ledger, self._config.recording
            )

    # -- properties -----------------------------------------------------------

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def sources(self) -> tuple[BaseSourceLookup, ...]:
        return self._sources

    @property
    def recorder(self) -> BlockchainRecorder | None:
        return self._recorder

    # -- helpers --------------------------------------------------------------

    def _emit(self, event: DomainEvent) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)

    def _entry_allowed(self, run: PipelineRun, stage: Stage) -> bool:
        if run.stage is not stage:
            logger.debug(
                "Run %s: %s entry ignored while on stage %s",
                run.run_id,
                stage.value,
                run.stage.value,
            )
            return False
        if run.status_of(stage) not in _RETRYABLE:
            logger.debug(
                "Run %s: %s already %s",
                run.run_id,
                stage.value,
                run.status_of(stage).value,
            )
            return False
        return True

    def _start(self, run: PipelineRun, stage: Stage) -> PipelineRun:
        self._emit(StageStarted(source_id=run.run_id, run_id=run.run_id, stage=stage))
        return run.with_status(stage, StageStatus.PROCESSING)

    def _complete(
        self,
        run: PipelineRun,
        stage: Stage,
        warnings: tuple[str, ...] = (),
    ) -> PipelineRun:
        logger.info("Run %s: %s completed", run.run_id, stage.value)
        self._emit(
            StageCompleted(
                source_id=run.run_id, run_id=run.run_id, stage=stage, warnings=warnings
            )
        )
        return run.with_status(stage, StageStatus.COMPLETED)

    def _fail(self, run: PipelineRun, stage: Stage, error: str) -> PipelineRun:
        logger.warning("Run %s: %s failed: %s", run.run_id, stage.value, error)
        self._emit(
            StageFailed(source_id=run.run_id, run_id=run.run_id, stage=stage, error=error)
        )
        return run.with_status(stage, StageStatus.ERROR, error)

    # -- submission -----------------------------------------------------------

    def submit_idea(self, idea: InventionIdea) -> PipelineRun:
        """Create a fresh run for *idea*.

        Raises
        ------
        InvalidIdeaError
            If required fields are missing or the email is malformed.
        """
        field_errors = idea.validate()
        if field_errors:
            raise InvalidIdeaError(
                f"Invalid invention idea: {', '.join(sorted(field_errors))}",
                field_errors=field_errors,
            )
        run = PipelineRun(idea=idea).with_status(Stage.SUBMISSION, StageStatus.COMPLETED)
        logger.info("Run %s: submitted %r", run.run_id, idea.title)
        self._emit(IdeaSubmitted(source_id=run.run_id, run_id=run.run_id, title=idea.title))
        return run

    def restart(self, run: PipelineRun) -> PipelineRun:
        """Start over with the same idea; the old run is left untouched."""
        return self.submit_idea(run.idea)

    # -- transitions ----------------------------------------------------------

    def advance(self, run: PipelineRun) -> PipelineRun:
        """Move *run* to the next stage if the current stage's output exists.

        Returns *run* unchanged when it is terminal, when the current stage
        has not completed, or when its output is missing.
        """
        target = run.stage.next
        reason = ""
        if target is None:
            reason = "run already completed"
        elif run.status is not StageStatus.COMPLETED:
            reason = f"{run.stage.value} is {run.status.value}"
        elif run.output_of(run.stage) is None:
            reason = f"{run.stage.value} produced no output"

        if reason:
            logger.warning("Run %s: advance rejected (%s)", run.run_id, reason)
            self._emit(
                TransitionRejected(
                    source_id=run.run_id, run_id=run.run_id, stage=run.stage, reason=reason
                )
            )
            return run

        advanced = run.moved_to(target)
        if target is Stage.COMPLETED:
            advanced = advanced.with_status(Stage.COMPLETED, StageStatus.COMPLETED)
        logger.info("Run %s: %s -> %s", run.run_id, run.stage.value, target.value)
        self._emit(
            StageAdvanced(
                source_id=run.run_id,
                run_id=run.run_id,
                from_stage=run.stage,
                to_stage=target,
            )
        )
        return advanced

    def current_stage_status(self, run: PipelineRun) -> StageReport:
        return run.report()

    # -- entry actions --------------------------------------------------------

    async def research(self, run: PipelineRun) -> PipelineRun:
        """Run prior-art research for the run's idea."""
        if not self._entry_allowed(run, Stage.RESEARCH):
            return run
        run = self._start(run, Stage.RESEARCH)
        try:
            results = await self._aggregator.research(run.idea, self._sources)
        except ResearchFailed as exc:
            run = dataclasses.replace(run, warnings=exc.warnings)
            return self._fail(run, Stage.RESEARCH, str(exc))
        run = dataclasses.replace(run, results=results, warnings=results.warnings)
        return self._complete(run, Stage.RESEARCH, results.warnings)

    def generate(self, run: PipelineRun) -> PipelineRun:
        """Assess patentability and assemble the patent document."""
        if not self._entry_allowed(run, Stage.GENERATION):
            return run
        if run.results is None:
            logger.debug("Run %s: generation without research results", run.run_id)
            return run
        run = self._start(run, Stage.GENERATION)
        try:
            assessment = self._estimator.assess(run.results)
            document = self._assembler.assemble(run.idea, run.results, assessment)
        except ValueError as exc:
            logger.exception("Run %s: document generation failed", run.run_id)
            return self._fail(run, Stage.GENERATION, f"Document generation failed: {exc}")
        run = dataclasses.replace(run, document=document)
        return self._complete(run, Stage.GENERATION)

    async def record(self, run: PipelineRun) -> PipelineRun:
        """Charge the fee, sign and record the document on the ledger."""
        if not self._entry_allowed(run, Stage.BLOCKCHAIN):
            return run
        if run.document is None:
            logger.debug("Run %s: recording without a document", run.run_id)
            return run
        if self._recorder is None:
            return self._fail(
                run,
                Stage.BLOCKCHAIN,
                "Recording requires payment, signer and ledger collaborators",
            )

        run = self._start(run, Stage.BLOCKCHAIN)
        try:
            payment, record = await self._recorder.record(run.document, payment=run.payment)
        except CollaboratorRejection as exc:
            if exc.payment is not None:
                run = dataclasses.replace(run, payment=exc.payment)
            return self._fail(run, Stage.BLOCKCHAIN, str(exc))

        run = dataclasses.replace(
            run,
            payment=payment,
            record=record,
            document=run.document.with_recording(record),
        )
        self._emit(
            PatentRecorded(
                source_id=run.run_id,
                run_id=run.run_id,
                patent_id=record.patent_id,
                document_hash=record.document_hash,
                transaction_hash=record.transaction_hash,
                block_number=record.block_number,
            )
        )
        return self._complete(run, Stage.BLOCKCHAIN)

    async def run_stage(self, run: PipelineRun) -> PipelineRun:
        """Invoke the entry action of the run's current stage."""
        if run.stage is Stage.RESEARCH:
            return await self.research(run)
        if run.stage is Stage.GENERATION:
            return self.generate(run)
        if run.stage is Stage.BLOCKCHAIN:
            return await self.record(run)
        return run
