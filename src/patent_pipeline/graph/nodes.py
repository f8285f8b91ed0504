"""LangGraph node functions for the pipeline graph.

Each node wraps one stage: it runs the stage's entry action through
:class:`PatentPipeline` and then asks the pipeline to advance.  The nodes hold
no logic of their own; ordering and preconditions stay in the state machine.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from patent_pipeline.domain.enums import Stage
from patent_pipeline.services.pipeline import PatentPipeline

logger = logging.getLogger(__name__)

NodeFn = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]


def make_stage_node(pipeline: PatentPipeline, stage: Stage) -> NodeFn:
    """Create the node handling *stage*.

    Parameters
    ----------
    pipeline:
        The pipeline whose entry actions and transitions the node invokes.
    stage:
        The stage this node is responsible for.

    Returns
    -------
    Callable
        An async LangGraph node function.
    """

    async def stage_node(state: dict[str, Any]) -> dict[str, Any]:
        run = state["run"]
        if run.stage is stage:
            run = await pipeline.run_stage(run)
        advanced = pipeline.advance(run)

        update: dict[str, Any] = {"run": advanced, "visited": [stage.value]}
        if advanced.stage is stage:
            update["stop_reason"] = "error" if advanced.has_failed else "stalled"
            logger.info(
                "stage_node[%s]: run %s stopped (%s)",
                stage.value,
                advanced.run_id,
                update["stop_reason"],
            )
        return update

    stage_node.__name__ = f"{stage.value}_node"
    return stage_node
