"""Rich-based console display for pipeline runs.

:class:`PipelineConsole` renders stage progress, the prior-art table and
the patentability assessment with colour and formatting.
"""

from __future__ import annotations

import sys
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from patent_pipeline.domain.entities import PatentDocument, PipelineRun
from patent_pipeline.domain.enums import (
    PatentabilityTier,
    SimilarityTier,
    Stage,
    StageStatus,
)
from patent_pipeline.domain.values import PatentabilityAssessment, ResearchResultSet

_STATUS_STYLE: dict[StageStatus, tuple[str, str]] = {
    StageStatus.PENDING: ("dim", "pending"),
    StageStatus.PROCESSING: ("yellow", "processing"),
    StageStatus.COMPLETED: ("green", "completed"),
    StageStatus.ERROR: ("red", "error"),
}

_SIMILARITY_COLOUR: dict[SimilarityTier, str] = {
    SimilarityTier.HIGH: "red",
    SimilarityTier.MEDIUM: "yellow",
    SimilarityTier.LOW: "green",
}

_TIER_COLOUR: dict[PatentabilityTier, str] = {
    PatentabilityTier.HIGH: "green",
    PatentabilityTier.MODERATE: "yellow",
    PatentabilityTier.LOW: "red",
}


class PipelineConsole:
    """Console presentation layer for pipeline runs.

    Parameters
    ----------
    file:
        Output stream.  Defaults to ``sys.stdout``.
    width:
        Fixed console width; ``None`` lets rich detect it.
    """

    def __init__(self, file: Any = None, width: int | None = None) -> None:
        self._console = Console(file=file or sys.stdout, width=width)

    @property
    def console(self) -> Console:
        return self._console

    # -- public API --------------------------------------------------------

    def print_status(self, run: PipelineRun) -> None:
        """Print one row per stage with its status and error, if any."""
        table = Table(
            title=f"Run {run.run_id}: {run.idea.title}",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("Stage", style="bold")
        table.add_column("Status", justify="center")
        table.add_column("Detail")

        for stage in Stage:
            style, label = _STATUS_STYLE[run.status_of(stage)]
            marker = " <" if stage is run.stage else ""
            table.add_row(
                f"{stage.value}{marker}",
                f"[{style}]{label}[/{style}]",
                run.errors.get(stage, ""),
            )

        self._console.print()
        self._console.print(table)
        for warning in run.warnings:
            self._console.print(f"  [yellow]warning:[/yellow] {warning}")

    def print_results(self, results: ResearchResultSet) -> None:
        """Print the ranked prior-art references."""
        if results.is_empty:
            self._console.print("[green]No prior art found.[/green]")
            return

        table = Table(
            title=f"Prior Art ({len(results)} references)",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("#", justify="right")
        table.add_column("Title", style="bold")
        table.add_column("Score", justify="right")
        table.add_column("Similarity", justify="center")
        table.add_column("Published")

        for index, ref in enumerate(results, start=1):
            colour = _SIMILARITY_COLOUR[ref.similarity]
            table.add_row(
                str(index),
                ref.title,
                f"[{colour}]{ref.relevance_score}[/{colour}]",
                f"[{colour}]{ref.similarity.value}[/{colour}]",
                ref.publication_date or "-",
            )

        self._console.print()
        self._console.print(table)

    def print_assessment(self, assessment: PatentabilityAssessment) -> None:
        colour = _TIER_COLOUR[assessment.tier]
        body = "\n".join(
            f"{i}. {step}" for i, step in enumerate(assessment.recommendations, start=1)
        )
        self._console.print()
        self._console.print(
            Panel(
                body,
                title=(
                    f"Patentability [{colour}]{assessment.score}/100 "
                    f"{assessment.tier.value}[/{colour}]"
                ),
                expand=False,
            )
        )

    def print_document(self, document: PatentDocument) -> None:
        """Print the headline facts of a generated document."""
        self._console.print()
        self._console.print(f"[bold]{document.document_id}[/bold]  {document.idea.title}")
        self._console.print(f"  [dim]status:[/dim] {document.status.value}")
        self._console.print(f"  [dim]claims:[/dim] {len(document.claims)}")
        if document.transaction_hash:
            self._console.print(f"  [dim]transaction:[/dim] {document.transaction_hash}")

    def print_run(self, run: PipelineRun) -> None:
        """Print everything the run has produced so far."""
        self.print_status(run)
        if run.results is not None:
            self.print_results(run.results)
        if run.document is not None:
            self.print_assessment(run.document.assessment)
            self.print_document(run.document)
