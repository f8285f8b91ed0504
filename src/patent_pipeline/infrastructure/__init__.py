"""Infrastructure layer for the patent pipeline.

Re-exports the public API surface for convenience::

    from patent_pipeline.infrastructure import (
        EventBus, EventStore,
        PipelineConfig, ScoringConfig, ResearchConfig, RecordingConfig,
    )
"""

from patent_pipeline.infrastructure.config import (
    DEFAULT_FEES,
    PipelineConfig,
    RecordingConfig,
    ResearchConfig,
    ScoringConfig,
    load_config_file,
    load_config_from_json,
    load_config_from_yaml,
)
from patent_pipeline.infrastructure.event_bus import EventBus, EventStore
from patent_pipeline.infrastructure.schemas import CandidatePayload, coerce_candidates
from patent_pipeline.infrastructure.serialization import (
    candidate_from_dict,
    deserialize,
    from_json,
    from_yaml,
    idea_from_dict,
    serialize,
    to_json,
    to_yaml,
)

__all__ = [
    # Event bus
    "EventBus",
    "EventStore",
    # Configuration
    "DEFAULT_FEES",
    "PipelineConfig",
    "RecordingConfig",
    "ResearchConfig",
    "ScoringConfig",
    "load_config_file",
    "load_config_from_json",
    "load_config_from_yaml",
    # Provider payloads
    "CandidatePayload",
    "coerce_candidates",
    # Serialization
    "candidate_from_dict",
    "deserialize",
    "from_json",
    "from_yaml",
    "idea_from_dict",
    "serialize",
    "to_json",
    "to_yaml",
]
