"""Configuration dataclasses for the patent pipeline.

Each config is a plain ``dataclass`` with a ``validate()`` method that raises
``ValueError`` on invalid combinations.  Configs are **frozen** so a
pipeline can share one instance across runs without risking silent mutation.

The scoring weights and penalties are tuning constants exposed here so
deployments can change them without touching the services.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from patent_pipeline.domain.enums import Currency


# ===================================================================== #
#  Scoring Configuration                                                 #
# ===================================================================== #

@dataclass(frozen=True)
class ScoringConfig:
    """Weights for relevance scoring and patentability estimation.

    Attributes
    ----------
    keyword_weight:
        Points for the fraction of idea keywords found in a candidate.
    field_weight:
        Flat points when the technical field appears verbatim.
    problem_weight, solution_weight:
        Points for the fraction of problem / solution keywords found.
    term_bonus:
        Flat points when any of ``bonus_terms`` appears.
    bonus_terms:
        Vocabulary that triggers ``term_bonus``.
    min_keyword_length:
        Tokens must be strictly longer than this to count as keywords.
    high_threshold, medium_threshold:
        Tier boundaries shared by similarity and patentability tiers.
    no_prior_art_score:
        Patentability score when research found nothing.
    high_similarity_penalty:
        Points subtracted per ``high`` similarity reference.
    """

    keyword_weight: float = 60.0
    field_weight: float = 20.0
    problem_weight: float = 10.0
    solution_weight: float = 10.0
    term_bonus: float = 5.0
    bonus_terms: tuple[str, ...] = ("patent", "invention", "claim")
    min_keyword_length: int = 3
    high_threshold: int = 70
    medium_threshold: int = 40
    no_prior_art_score: int = 85
    high_similarity_penalty: float = 15.0

    def __post_init__(self) -> None:
        # JSON / YAML hand us lists; keep the frozen config hashable.
        if not isinstance(self.bonus_terms, tuple):
            object.__setattr__(self, "bonus_terms", tuple(self.bonus_terms or ()))

    def validate(self) -> None:
        """Raise ``ValueError`` if any field is out of valid range."""
        for name in (
            "keyword_weight",
            "field_weight",
            "problem_weight",
            "solution_weight",
            "term_bonus",
            "high_similarity_penalty",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.min_keyword_length < 0:
            raise ValueError(
                f"min_keyword_length must be >= 0, got {self.min_keyword_length}"
            )
        if not (0 <= self.medium_threshold <= self.high_threshold <= 100):
            raise ValueError(
                "thresholds must satisfy 0 <= medium_threshold <= high_threshold <= 100, "
                f"got medium={self.medium_threshold} high={self.high_threshold}"
            )
        if not (0 <= self.no_prior_art_score <= 100):
            raise ValueError(
                f"no_prior_art_score must be in [0, 100], got {self.no_prior_art_score}"
            )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["bonus_terms"] = list(self.bonus_terms)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScoringConfig:
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        cfg = cls(**filtered)
        cfg.validate()
        return cfg


# ===================================================================== #
#  Research Configuration                                                #
# ===================================================================== #

@dataclass(frozen=True)
class ResearchConfig:
    """Parameters for the prior-art research stage.

    Attributes
    ----------
    max_results:
        Size cap of the aggregated result set.
    lookup_timeout:
        Seconds each source lookup call may take before it counts as failed.
    max_queries:
        How many of the generated search queries each source receives.
    candidates_per_query:
        Keep only the first *n* candidates of each call (``None`` keeps all).
    """

    max_results: int = 10
    lookup_timeout: float = 30.0
    max_queries: int = 5
    candidates_per_query: int | None = None

    def validate(self) -> None:
        if self.max_results < 1:
            raise ValueError(f"max_results must be >= 1, got {self.max_results}")
        if self.lookup_timeout <= 0:
            raise ValueError(
                f"lookup_timeout must be positive, got {self.lookup_timeout}"
            )
        if self.max_queries < 1:
            raise ValueError(f"max_queries must be >= 1, got {self.max_queries}")
        if self.candidates_per_query is not None and self.candidates_per_query < 1:
            raise ValueError(
                f"candidates_per_query must be >= 1, got {self.candidates_per_query}"
            )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResearchConfig:
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        cfg = cls(**filtered)
        cfg.validate()
        return cfg


# ===================================================================== #
#  Recording Configuration                                               #
# ===================================================================== #

_VALID_CURRENCIES = frozenset(c.value for c in Currency)

DEFAULT_FEES: dict[str, str] = {
    Currency.ETH.value: "0.001",
    Currency.USDC.value: "5.00",
}


@dataclass(frozen=True)
class RecordingConfig:
    """Parameters for the payment gate and ledger recording stage.

    Attributes
    ----------
    currency:
        Currency the recording fee is charged in.
    fee_amount:
        Fee as a decimal string.  Empty means the default for *currency*.
    recipient:
        Wallet that receives the fee.
    collaborator_timeout:
        Seconds each payment / signing / recording call may take.
    explorer_url:
        Template for transaction links, formatted with ``tx_hash``.
    """

    currency: str = "ETH"
    fee_amount: str = ""
    recipient: str = "0x742d35Cc7BB7fb6d3d4b9C1e4b8bF2b2a8f8B8a8"
    collaborator_timeout: float = 60.0
    explorer_url: str = "https://basescan.org/tx/{tx_hash}"

    @property
    def fee(self) -> str:
        return self.fee_amount or DEFAULT_FEES[self.currency]

    def validate(self) -> None:
        if self.currency not in _VALID_CURRENCIES:
            raise ValueError(
                f"currency must be one of {sorted(_VALID_CURRENCIES)}, "
                f"got '{self.currency}'"
            )
        if self.fee_amount:
            try:
                amount = float(self.fee_amount)
            except ValueError:
                raise ValueError(
                    f"fee_amount must be a decimal string, got '{self.fee_amount}'"
                ) from None
            if amount < 0:
                raise ValueError(f"fee_amount must be >= 0, got {self.fee_amount}")
        if self.collaborator_timeout <= 0:
            raise ValueError(
                f"collaborator_timeout must be positive, got {self.collaborator_timeout}"
            )
        if "{tx_hash}" not in self.explorer_url:
            raise ValueError("explorer_url must contain a '{tx_hash}' placeholder")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecordingConfig:
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        cfg = cls(**filtered)
        cfg.validate()
        return cfg


# ===================================================================== #
#  Pipeline Configuration                                                #
# ===================================================================== #

@dataclass(frozen=True)
class PipelineConfig:
    """Bundle of every section the pipeline reads."""

    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    research: ResearchConfig = field(default_factory=ResearchConfig)
    recording: RecordingConfig = field(default_factory=RecordingConfig)

    def validate(self) -> None:
        self.scoring.validate()
        self.research.validate()
        self.recording.validate()

    def to_dict(self) -> dict[str, Any]:
        return {
            "scoring": self.scoring.to_dict(),
            "research": self.research.to_dict(),
            "recording": self.recording.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PipelineConfig:
        cfg = cls(
            scoring=ScoringConfig.from_dict(data.get("scoring") or {}),
            research=ResearchConfig.from_dict(data.get("research") or {}),
            recording=RecordingConfig.from_dict(data.get("recording") or {}),
        )
        cfg.validate()
        return cfg


# ===================================================================== #
#  Unified config loader                                                 #
# ===================================================================== #

def _from_raw(raw: Any) -> PipelineConfig:
    if raw is None:
        return PipelineConfig()
    if not isinstance(raw, dict):
        raise ValueError("Top-level config must be a mapping")
    return PipelineConfig.from_dict(raw)


def load_config_from_json(json_str: str) -> PipelineConfig:
    """Parse a JSON object with ``scoring`` / ``research`` / ``recording``
    sections into a :class:`PipelineConfig`.  Missing sections use defaults;
    unknown keys are ignored."""
    return _from_raw(json.loads(json_str))


def load_config_from_yaml(yaml_str: str) -> PipelineConfig:
    """YAML counterpart of :func:`load_config_from_json`."""
    return _from_raw(yaml.safe_load(yaml_str))


def load_config_file(path: str | Path) -> PipelineConfig:
    """Load a config file, picking the parser from the file extension."""
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in (".yaml", ".yml"):
        return load_config_from_yaml(text)
    return load_config_from_json(text)
