"""Conditional edge functions for the pipeline graph."""

from __future__ import annotations

from typing import Any

from patent_pipeline.domain.enums import Stage


def route_by_stage(state: dict[str, Any]) -> str:
    """Route to the node named after the run's current stage.

    Returns ``"__end__"`` once the run is terminal or a node recorded a
    ``stop_reason``.
    """
    if state.get("stop_reason"):
        return "__end__"
    run = state.get("run")
    if run is None or run.stage is Stage.COMPLETED:
        return "__end__"
    return run.stage.value
