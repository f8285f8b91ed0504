"""Presentation layer: rendering, file export and console display."""

from patent_pipeline.presentation.console import PipelineConsole
from patent_pipeline.presentation.export import (
    export_html,
    export_json,
    export_text,
    render_html,
    render_text,
)

__all__ = [
    "PipelineConsole",
    "export_html",
    "export_json",
    "export_text",
    "render_html",
    "render_text",
]
