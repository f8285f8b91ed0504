"""LangGraph driver for the patent pipeline.

Public API
----------
build_pipeline_graph
    Build and compile the stage graph around a :class:`PatentPipeline`.
run_pipeline, resume_pipeline
    Drive a new idea, or an existing run, to completion.
PipelineGraphState
    The TypedDict state flowing through the graph.
"""

from patent_pipeline.graph.builder import (
    STAGE_NODES,
    build_pipeline_graph,
    resume_pipeline,
    run_pipeline,
)
from patent_pipeline.graph.edges import route_by_stage
from patent_pipeline.graph.nodes import make_stage_node
from patent_pipeline.graph.state import PipelineGraphState

__all__ = [
    "PipelineGraphState",
    "STAGE_NODES",
    "build_pipeline_graph",
    "make_stage_node",
    "resume_pipeline",
    "route_by_stage",
    "run_pipeline",
]
