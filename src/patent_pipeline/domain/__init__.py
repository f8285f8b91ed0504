"""Domain layer for the patent pipeline.

Re-exports all public domain types so that consumers can write::

    from patent_pipeline.domain import InventionIdea, PipelineRun, Stage
"""

# -- Enumerations -------------------------------------------------------------
from .enums import (
    Currency,
    DocumentStatus,
    PatentabilityTier,
    SimilarityTier,
    Stage,
    StageStatus,
)

# -- Value Objects ------------------------------------------------------------
from .values import (
    BlockchainRecord,
    InventionIdea,
    LedgerReceipt,
    LookupErr,
    LookupOk,
    LookupResult,
    PatentabilityAssessment,
    PaymentReceipt,
    PriorArtReference,
    RawCandidate,
    ResearchResultSet,
    SignatureResult,
    patentability_tier_for,
    similarity_tier_for,
)

# -- Entities -----------------------------------------------------------------
from .entities import PatentDocument, PipelineRun, StageReport

# -- Domain Events ------------------------------------------------------------
from .events import (
    DomainEvent,
    IdeaSubmitted,
    PatentRecorded,
    SourceLookupFailed,
    StageAdvanced,
    StageCompleted,
    StageFailed,
    StageStarted,
    TransitionRejected,
)

# -- Exceptions ---------------------------------------------------------------
from .exceptions import (
    CollaboratorRejection,
    InvalidIdeaError,
    PatentPipelineError,
    ResearchFailed,
    SourceLookupFailure,
)

__all__ = [
    # enums
    "Currency",
    "DocumentStatus",
    "PatentabilityTier",
    "SimilarityTier",
    "Stage",
    "StageStatus",
    # values
    "BlockchainRecord",
    "InventionIdea",
    "LedgerReceipt",
    "LookupErr",
    "LookupOk",
    "LookupResult",
    "PatentabilityAssessment",
    "PaymentReceipt",
    "PriorArtReference",
    "RawCandidate",
    "ResearchResultSet",
    "SignatureResult",
    "patentability_tier_for",
    "similarity_tier_for",
    # entities
    "PatentDocument",
    "PipelineRun",
    "StageReport",
    # events
    "DomainEvent",
    "IdeaSubmitted",
    "PatentRecorded",
    "SourceLookupFailed",
    "StageAdvanced",
    "StageCompleted",
    "StageFailed",
    "StageStarted",
    "TransitionRejected",
    # exceptions
    "CollaboratorRejection",
    "InvalidIdeaError",
    "PatentPipelineError",
    "ResearchFailed",
    "SourceLookupFailure",
]
