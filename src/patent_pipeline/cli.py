"""Command-line interface for the patent pipeline.

Provides subcommands for running an idea through the whole pipeline,
scoring a single text against an idea, and querying package information.
Each subcommand imports its dependencies lazily so that
``patent-pipeline info`` stays fast.

Entry point
-----------
The ``main()`` function is registered as a console script in
``pyproject.toml``::

    [project.scripts]
    patent-pipeline = "patent_pipeline.cli:main"

Usage examples::

    patent-pipeline run --idea idea.yaml --candidates hits.json --format html --output out/patent.html
    patent-pipeline score --idea idea.json --text "A smart valve that shuts off water..."
    patent-pipeline info
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any


def _build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="patent-pipeline",
        description=(
            "Patent pipeline -- research prior art, assess patentability and "
            "assemble a patent application for an invention idea."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        default=False,
        help="Show package version and exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging.",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available subcommands")

    # -- run ---------------------------------------------------------------
    run_parser = subparsers.add_parser(
        "run",
        help="Run an idea through every pipeline stage.",
        description=(
            "Submit an idea, research it against a candidate file, generate the "
            "document and record it on an in-memory ledger."
        ),
    )
    run_parser.add_argument(
        "--idea",
        type=str,
        required=True,
        help="Path to the invention idea (JSON or YAML).",
    )
    run_parser.add_argument(
        "--candidates",
        type=str,
        default=None,
        help="Path to a list of prior-art candidates (JSON or YAML).",
    )
    run_parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a pipeline config file (JSON or YAML).",
    )
    run_parser.add_argument(
        "--format",
        type=str,
        default="text",
        choices=["text", "html", "json"],
        help="Export format for --output. (default: text)",
    )
    run_parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the generated document to this path.",
    )
    run_parser.add_argument(
        "--no-record",
        action="store_true",
        default=False,
        help="Stop after document generation instead of recording it.",
    )

    # -- score -------------------------------------------------------------
    score_parser = subparsers.add_parser(
        "score",
        help="Score one candidate text against an idea.",
        description="Compute the 0-100 relevance score of a text for an idea.",
    )
    score_parser.add_argument(
        "--idea",
        type=str,
        required=True,
        help="Path to the invention idea (JSON or YAML).",
    )
    score_parser.add_argument(
        "--text",
        type=str,
        required=True,
        help="Candidate text to score.",
    )
    score_parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a pipeline config file (JSON or YAML).",
    )

    # -- info --------------------------------------------------------------
    subparsers.add_parser(
        "info",
        help="Show package version, dependencies and default settings.",
        description="Display version, dependency status and default configuration.",
    )

    return parser


# =========================================================================
# Helpers
# =========================================================================

def _load_file(path: str) -> Any:
    from patent_pipeline.infrastructure.serialization import load_structured

    p = Path(path)
    return load_structured(p.read_text(encoding="utf-8"), p.suffix)


def _load_idea(path: str) -> Any:
    from patent_pipeline.infrastructure.serialization import idea_from_dict

    return idea_from_dict(_load_file(path))


# =========================================================================
# Subcommand handlers
# =========================================================================

def _cmd_run(args: argparse.Namespace) -> int:
    """Handle the ``run`` subcommand."""
    import asyncio

    from patent_pipeline.domain.exceptions import InvalidIdeaError
    from patent_pipeline.graph.builder import run_pipeline
    from patent_pipeline.infrastructure.config import PipelineConfig, load_config_file
    from patent_pipeline.presentation.console import PipelineConsole
    from patent_pipeline.presentation.export import export_html, export_json, export_text
    from patent_pipeline.services.pipeline import PatentPipeline
    from patent_pipeline.testing.fakes import (
        InMemoryLedgerRecorder,
        InMemoryPaymentProcessor,
        InMemorySigner,
        StaticSourceLookup,
    )

    idea = _load_idea(args.idea)
    config = load_config_file(args.config) if args.config else PipelineConfig()

    sources = []
    if args.candidates is not None:
        candidates = _load_file(args.candidates) or []
        if not isinstance(candidates, list):
            print("Error: candidates file must contain a list", file=sys.stderr)
            return 1
        sources.append(StaticSourceLookup(Path(args.candidates).stem, candidates))

    collaborators: dict[str, Any] = {}
    if not args.no_record:
        collaborators = {
            "payment": InMemoryPaymentProcessor(),
            "signer": InMemorySigner(key=idea.submitter_email or idea.submitter_name),
            "ledger": InMemoryLedgerRecorder(),
        }
    pipeline = PatentPipeline(sources, config=config, **collaborators)

    try:
        run = asyncio.run(run_pipeline(pipeline, idea))
    except InvalidIdeaError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        for field, message in sorted(exc.field_errors.items()):
            print(f"  {field}: {message}", file=sys.stderr)
        return 1

    console = PipelineConsole()
    console.print_run(run)

    if args.output is not None and run.document is not None:
        exporters = {"text": export_text, "html": export_html, "json": export_json}
        out = exporters[args.format](run.document, args.output, run.record)
        print(f"\nExported {args.format} document to {out}")
    if run.record is not None:
        explorer = config.recording.explorer_url.format(tx_hash=run.record.transaction_hash)
        print(f"Explorer: {explorer}")

    if run.is_terminal:
        return 0
    if args.no_record and run.document is not None:
        return 0
    return 1


def _cmd_score(args: argparse.Namespace) -> int:
    """Handle the ``score`` subcommand."""
    from patent_pipeline.infrastructure.config import PipelineConfig, load_config_file
    from patent_pipeline.services.scoring import RelevanceScorer

    idea = _load_idea(args.idea)
    config = load_config_file(args.config) if args.config else PipelineConfig()
    scorer = RelevanceScorer(config.scoring)
    score = scorer.score(args.text, idea)
    print(f"Relevance: {score}/100 ({scorer.similarity(score).value})")
    return 0


def _cmd_info(args: argparse.Namespace) -> int:
    """Handle the ``info`` subcommand."""
    from patent_pipeline import __version__
    from patent_pipeline.infrastructure.config import PipelineConfig

    print(f"patent-pipeline v{__version__}")
    print()

    deps = {
        "numpy": "Patentability estimation",
        "pydantic": "Search provider payload validation",
        "yaml": "YAML config and idea files",
        "langgraph": "Stage graph driver",
        "rich": "Console display",
    }

    print("Dependencies:")
    for pkg, desc in deps.items():
        try:
            mod = __import__(pkg)
            version = getattr(mod, "__version__", "unknown")
            print(f"  [installed] {pkg} {version} -- {desc}")
        except ImportError:
            print(f"  [missing]   {pkg} -- {desc}")

    print()
    config = PipelineConfig()
    print("Default settings:")
    print(f"  max results: {config.research.max_results}")
    print(f"  lookup timeout: {config.research.lookup_timeout:g}s")
    print(
        f"  similarity tiers: high >= {config.scoring.high_threshold}, "
        f"medium >= {config.scoring.medium_threshold}"
    )
    print(f"  recording fee: {config.recording.fee} {config.recording.currency}")
    print()

    print("Stages:")
    print("  submission -> research -> generation -> blockchain -> completed")

    return 0


# =========================================================================
# Main entry point
# =========================================================================

def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parameters
    ----------
    argv:
        Command-line arguments.  Defaults to ``sys.argv[1:]``.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        from patent_pipeline import __version__
        print(f"patent-pipeline {__version__}")
        sys.exit(0)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handlers: dict[str, Any] = {
        "run": _cmd_run,
        "score": _cmd_score,
        "info": _cmd_info,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        exit_code = handler(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        exit_code = 130
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)
