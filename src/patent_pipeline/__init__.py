"""Patent pipeline.

In-memory research and document-generation pipeline for invention ideas:
prior-art research across pluggable sources, relevance scoring,
patentability assessment, patent document assembly and payment-gated
ledger recording, driven by a LangGraph stage graph.
"""

__version__ = "0.1.0"

from patent_pipeline.domain import InventionIdea, PipelineRun, Stage, StageStatus
from patent_pipeline.graph import build_pipeline_graph, run_pipeline
from patent_pipeline.services import PatentPipeline

__all__ = [
    "InventionIdea",
    "PatentPipeline",
    "PipelineRun",
    "Stage",
    "StageStatus",
    "build_pipeline_graph",
    "run_pipeline",
]
