"""Tests for the rich console display."""

from __future__ import annotations

import io

import pytest

from patent_pipeline.domain.values import InventionIdea, ResearchResultSet
from patent_pipeline.presentation.console import PipelineConsole
from patent_pipeline.services.pipeline import PatentPipeline


def _console() -> tuple[PipelineConsole, io.StringIO]:
    buf = io.StringIO()
    return PipelineConsole(file=buf, width=120), buf


class TestPipelineConsole:

    def test_status_table(self, pipeline: PatentPipeline, smart_valve: InventionIdea) -> None:
        console, buf = _console()
        console.print_status(pipeline.submit_idea(smart_valve))
        out = buf.getvalue()
        assert "Smart Valve" in out
        for stage in ("submission", "research", "generation", "blockchain", "completed"):
            assert stage in out

    def test_empty_results(self) -> None:
        console, buf = _console()
        console.print_results(ResearchResultSet())
        assert "No prior art found." in buf.getvalue()

    def test_results_table(self, sample_results: ResearchResultSet) -> None:
        console, buf = _console()
        console.print_results(sample_results)
        out = buf.getvalue()
        assert "Close match" in out
        assert "Loose match" in out
        assert "2020-01-01" in out

    @pytest.mark.asyncio
    async def test_print_run(self, pipeline: PatentPipeline, smart_valve: InventionIdea) -> None:
        from patent_pipeline.graph import run_pipeline

        run = await run_pipeline(pipeline, smart_valve)
        console, buf = _console()
        console.print_run(run)
        out = buf.getvalue()
        assert "Patentability" in out
        assert "35/100" in out
        assert run.document.document_id in out
        assert "blockchain_recorded" in out
