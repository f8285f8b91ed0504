"""Build the pipeline StateGraph.

``build_pipeline_graph()`` wires one node per non-terminal stage.  Routing is
driven entirely by the run's current stage, so the same graph can start a
fresh run or resume one that stopped at a failed stage.
"""

from typing import Any

from langgraph.graph import END, START, StateGraph

from patent_pipeline.domain.entities import PipelineRun
from patent_pipeline.domain.enums import Stage
from patent_pipeline.domain.values import InventionIdea
from patent_pipeline.graph.edges import route_by_stage
from patent_pipeline.graph.nodes import make_stage_node
from patent_pipeline.graph.state import PipelineGraphState
from patent_pipeline.services.pipeline import PatentPipeline

STAGE_NODES: tuple[Stage, ...] = (
    Stage.SUBMISSION,
    Stage.RESEARCH,
    Stage.GENERATION,
    Stage.BLOCKCHAIN,
)


def build_pipeline_graph(
    pipeline: PatentPipeline,
    checkpointer: Any | None = None,
    interrupt_before: list[str] | None = None,
    interrupt_after: list[str] | None = None,
) -> Any:
    """Build and compile the pipeline StateGraph.

    Parameters
    ----------
    pipeline:
        The state machine the nodes delegate to.
    checkpointer:
        Optional LangGraph checkpointer for persistence.
    interrupt_before:
        Stage names to interrupt before (e.g. ``["blockchain"]`` to confirm
        the recording fee with a human first).
    interrupt_after:
        Stage names to interrupt after.

    Returns
    -------
    CompiledStateGraph
        A compiled graph ready for ``.ainvoke()`` or ``.astream()``.
    """
    graph = StateGraph(PipelineGraphState)

    for stage in STAGE_NODES:
        graph.add_node(stage.value, make_stage_node(pipeline, stage))

    routes: dict[str, str] = {stage.value: stage.value for stage in STAGE_NODES}
    routes["__end__"] = END

    graph.add_conditional_edges(START, route_by_stage, routes)
    for stage in STAGE_NODES:
        graph.add_conditional_edges(stage.value, route_by_stage, routes)

    compile_kwargs: dict[str, Any] = {}
    if checkpointer is not None:
        compile_kwargs["checkpointer"] = checkpointer
    if interrupt_before:
        compile_kwargs["interrupt_before"] = interrupt_before
    if interrupt_after:
        compile_kwargs["interrupt_after"] = interrupt_after

    return graph.compile(**compile_kwargs)


async def resume_pipeline(pipeline: PatentPipeline, run: PipelineRun) -> PipelineRun:
    """Drive *run* forward from its current stage until it completes or stops."""
    app = build_pipeline_graph(pipeline)
    final = await app.ainvoke({"run": run, "stop_reason": "", "visited": []})
    return final["run"]


async def run_pipeline(pipeline: PatentPipeline, idea: InventionIdea) -> PipelineRun:
    """Submit *idea* and drive it through every stage.

    Raises
    ------
    InvalidIdeaError
        If the idea fails validation.
    """
    return await resume_pipeline(pipeline, pipeline.submit_idea(idea))
