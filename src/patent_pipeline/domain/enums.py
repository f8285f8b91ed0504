"""Domain enumerations for the patent pipeline.

These enums capture the fixed vocabularies used across the domain layer:
similarity and patentability tiers, pipeline stages, per-stage statuses,
document lifecycle statuses and the currencies accepted by the payment gate.
"""

from enum import Enum


class SimilarityTier(Enum):
    """Coarse bucket for how closely a prior-art reference matches an idea."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PatentabilityTier(Enum):
    """Coarse bucket for a patentability score."""

    HIGH = "HIGH"
    MODERATE = "MODERATE"
    LOW = "LOW"


class Stage(Enum):
    """Ordered stages of the pipeline state machine."""

    SUBMISSION = "submission"
    RESEARCH = "research"
    GENERATION = "generation"
    BLOCKCHAIN = "blockchain"
    COMPLETED = "completed"  # terminal

    @property
    def index(self) -> int:
        """Position of the stage in the forward ordering."""
        return _STAGE_ORDER.index(self)

    @property
    def next(self) -> "Stage | None":
        """The stage that follows this one, or ``None`` for the terminal stage."""
        idx = self.index
        if idx + 1 >= len(_STAGE_ORDER):
            return None
        return _STAGE_ORDER[idx + 1]


_STAGE_ORDER: tuple[Stage, ...] = (
    Stage.SUBMISSION,
    Stage.RESEARCH,
    Stage.GENERATION,
    Stage.BLOCKCHAIN,
    Stage.COMPLETED,
)


class StageStatus(Enum):
    """Status of a single pipeline stage."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class DocumentStatus(Enum):
    """Lifecycle status of a ``PatentDocument``."""

    DRAFT = "draft"
    RESEARCHING = "researching"
    GENERATING = "generating"
    COMPLETED = "completed"
    BLOCKCHAIN_RECORDED = "blockchain_recorded"


class Currency(Enum):
    """Currencies accepted for the recording fee."""

    ETH = "ETH"
    USDC = "USDC"
