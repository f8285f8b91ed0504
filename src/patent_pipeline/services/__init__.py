"""Service layer for the patent pipeline.

Scoring, research aggregation, patentability estimation, document assembly,
ledger recording and the stage state machine that ties them together.
"""

from patent_pipeline.services.assessment import (
    RECOMMENDATIONS,
    TRAILING_RECOMMENDATIONS,
    PatentabilityEstimator,
)
from patent_pipeline.services.collaborators import (
    DocumentSigner,
    LedgerRecorder,
    PaymentProcessor,
)
from patent_pipeline.services.drafting import DocumentAssembler, generate_patent_id
from patent_pipeline.services.pipeline import PatentPipeline
from patent_pipeline.services.recording import BlockchainRecorder, compute_document_hash
from patent_pipeline.services.research import (
    BaseSourceLookup,
    CallableSourceLookup,
    PriorArtAggregator,
    build_search_queries,
)
from patent_pipeline.services.scoring import RelevanceScorer, clamp_score, round_half_up

__all__ = [
    # Scoring
    "RelevanceScorer",
    "clamp_score",
    "round_half_up",
    # Research
    "BaseSourceLookup",
    "CallableSourceLookup",
    "PriorArtAggregator",
    "build_search_queries",
    # Assessment
    "PatentabilityEstimator",
    "RECOMMENDATIONS",
    "TRAILING_RECOMMENDATIONS",
    # Drafting
    "DocumentAssembler",
    "generate_patent_id",
    # Recording
    "BlockchainRecorder",
    "DocumentSigner",
    "LedgerRecorder",
    "PaymentProcessor",
    "compute_document_hash",
    # State machine
    "PatentPipeline",
]
