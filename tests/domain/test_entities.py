"""Tests for domain entities: PatentDocument and PipelineRun."""

from __future__ import annotations

import dataclasses

import pytest

from patent_pipeline.domain.entities import PatentDocument, PipelineRun
from patent_pipeline.domain.enums import DocumentStatus, Stage, StageStatus
from patent_pipeline.domain.values import (
    BlockchainRecord,
    InventionIdea,
    PatentabilityAssessment,
    ResearchResultSet,
)
from patent_pipeline.services.assessment import PatentabilityEstimator
from patent_pipeline.services.drafting import DocumentAssembler


@pytest.fixture
def document(smart_valve: InventionIdea) -> PatentDocument:
    results = ResearchResultSet()
    return DocumentAssembler().assemble(
        smart_valve, results, PatentabilityEstimator().assess(results)
    )


class TestStage:

    def test_forward_order(self) -> None:
        assert [s.value for s in Stage] == [
            "submission", "research", "generation", "blockchain", "completed",
        ]
        assert Stage.SUBMISSION.next is Stage.RESEARCH
        assert Stage.BLOCKCHAIN.next is Stage.COMPLETED
        assert Stage.COMPLETED.next is None

    def test_index(self) -> None:
        assert Stage.SUBMISSION.index == 0
        assert Stage.COMPLETED.index == 4


class TestPatentDocument:

    def test_requires_claims(self, document: PatentDocument) -> None:
        with pytest.raises(ValueError, match="at least one claim"):
            dataclasses.replace(document, claims=())

    def test_first_claim_numbered(self, document: PatentDocument) -> None:
        with pytest.raises(ValueError, match="claim 1"):
            dataclasses.replace(document, claims=("A method.",))

    def test_dependent_claims_reference_claim_one(self, document: PatentDocument) -> None:
        with pytest.raises(ValueError, match="dependent claim"):
            dataclasses.replace(document, claims=("1. A method.", "2. Another method."))

    def test_with_recording(self, document: PatentDocument) -> None:
        record = BlockchainRecord(
            patent_id=document.document_id,
            document_hash="0xabc",
            transaction_hash="0xdef",
            block_number=1,
        )
        recorded = document.with_recording(record)
        assert recorded.is_recorded
        assert recorded.status is DocumentStatus.BLOCKCHAIN_RECORDED
        assert recorded.blockchain_hash == "0xabc"
        assert recorded.transaction_hash == "0xdef"
        assert document.status is DocumentStatus.COMPLETED
        assert recorded.claims == document.claims


class TestPipelineRun:

    def test_initial_state(self, smart_valve: InventionIdea) -> None:
        run = PipelineRun(idea=smart_valve)
        assert run.stage is Stage.SUBMISSION
        assert all(run.status_of(s) is StageStatus.PENDING for s in Stage)
        assert run.results is None
        assert run.error is None
        assert len(run.run_id) == 8

    def test_run_ids_are_unique(self, smart_valve: InventionIdea) -> None:
        assert PipelineRun(idea=smart_valve).run_id != PipelineRun(idea=smart_valve).run_id

    def test_with_status_is_non_mutating(self, smart_valve: InventionIdea) -> None:
        run = PipelineRun(idea=smart_valve)
        failed = run.with_status(Stage.SUBMISSION, StageStatus.ERROR, "bad")
        assert failed.status is StageStatus.ERROR
        assert failed.error == "bad"
        assert run.status is StageStatus.PENDING
        cleared = failed.with_status(Stage.SUBMISSION, StageStatus.COMPLETED)
        assert cleared.error is None

    def test_moved_to_forward_only(self, smart_valve: InventionIdea) -> None:
        run = PipelineRun(idea=smart_valve).moved_to(Stage.RESEARCH)
        assert run.stage is Stage.RESEARCH
        with pytest.raises(ValueError, match="back"):
            run.moved_to(Stage.SUBMISSION)
        with pytest.raises(ValueError):
            run.moved_to(Stage.RESEARCH)

    def test_output_of(self, smart_valve: InventionIdea) -> None:
        run = PipelineRun(idea=smart_valve)
        assert run.output_of(Stage.SUBMISSION) is smart_valve
        assert run.output_of(Stage.RESEARCH) is None
        results = ResearchResultSet()
        assert dataclasses.replace(run, results=results).output_of(Stage.RESEARCH) is results

    def test_report(self, smart_valve: InventionIdea) -> None:
        run = dataclasses.replace(PipelineRun(idea=smart_valve), warnings=("w",))
        report = run.report()
        assert report.stage is Stage.SUBMISSION
        assert report.status is StageStatus.PENDING
        assert report.warnings == ("w",)

    def test_assessment_is_attached(self, document: PatentDocument) -> None:
        assert isinstance(document.assessment, PatentabilityAssessment)
