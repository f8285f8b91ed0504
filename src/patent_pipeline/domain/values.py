"""Value objects for the patent pipeline.

All types here are frozen dataclasses -- immutable, compared by value.
They describe the invention being submitted, the raw and scored prior-art
candidates, the aggregated research result set, the patentability
assessment, and the receipts handed back by external collaborators.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .enums import PatentabilityTier, SimilarityTier

# Tier boundaries shared by references and assessments.
HIGH_THRESHOLD = 70
MEDIUM_THRESHOLD = 40

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def similarity_tier_for(
    score: float,
    high: float = HIGH_THRESHOLD,
    medium: float = MEDIUM_THRESHOLD,
) -> SimilarityTier:
    """Map a 0-100 relevance score onto a :class:`SimilarityTier`."""
    if score >= high:
        return SimilarityTier.HIGH
    if score >= medium:
        return SimilarityTier.MEDIUM
    return SimilarityTier.LOW


def patentability_tier_for(
    score: float,
    high: float = HIGH_THRESHOLD,
    medium: float = MEDIUM_THRESHOLD,
) -> PatentabilityTier:
    """Map a 0-100 patentability score onto a :class:`PatentabilityTier`."""
    if score >= high:
        return PatentabilityTier.HIGH
    if score >= medium:
        return PatentabilityTier.MODERATE
    return PatentabilityTier.LOW


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# InventionIdea
# ---------------------------------------------------------------------------

_REQUIRED_IDEA_FIELDS: Mapping[str, str] = {
    "title": "Patent title is required",
    "technical_field": "Technical field is required",
    "problem_solved": "Problem description is required",
    "solution": "Solution description is required",
}


@dataclass(frozen=True)
class InventionIdea:
    """The invention as submitted by its inventor.

    Immutable once submitted.  Every downstream value references the idea
    rather than copying its fields.
    """

    title: str
    description: str = ""
    technical_field: str = ""
    problem_solved: str = ""
    solution: str = ""
    advantages: str = ""
    submitter_name: str = ""
    submitter_email: str = ""
    created_at: datetime = field(default_factory=_utcnow)

    def validate(self) -> dict[str, str]:
        """Return a mapping of field name to error message (empty when valid)."""
        errors: dict[str, str] = {}
        for name, message in _REQUIRED_IDEA_FIELDS.items():
            if not getattr(self, name).strip():
                errors[name] = message
        email = self.submitter_email.strip()
        if email and not _EMAIL_RE.match(email):
            errors["submitter_email"] = "Valid email is required"
        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validate()

    @property
    def search_text(self) -> str:
        """Concatenation of the fields that describe the invention itself."""
        return " ".join(
            (
                self.title,
                self.description,
                self.technical_field,
                self.problem_solved,
                self.solution,
            )
        )


# ---------------------------------------------------------------------------
# RawCandidate / LookupResult
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RawCandidate:
    """An unscored candidate disclosure returned by a source lookup."""

    title: str
    url: str
    text: str = ""
    published_date: str | None = None
    patent_number: str | None = None
    source: str = ""

    @property
    def scoring_text(self) -> str:
        """Text the relevance scorer sees: body followed by the title."""
        return f"{self.text or self.title} {self.title}"


@dataclass(frozen=True)
class LookupOk:
    """A source lookup call that settled successfully."""

    source: str
    query: str
    candidates: tuple[RawCandidate, ...] = ()

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class LookupErr:
    """A source lookup call that raised or timed out."""

    source: str
    query: str
    reason: str

    @property
    def ok(self) -> bool:
        return False

    @property
    def warning(self) -> str:
        return f"Source {self.source!r} failed for query {self.query!r}: {self.reason}"


LookupResult = LookupOk | LookupErr


# ---------------------------------------------------------------------------
# PriorArtReference
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PriorArtReference:
    """A scored candidate conflicting disclosure.

    ``url`` is the identity key used for deduplication.
    """

    title: str
    url: str
    summary: str
    relevance_score: int
    publication_date: str | None = None
    patent_number: str | None = None
    source: str = ""
    # Stamped by the scorer that built the reference, using its thresholds.
    similarity_tier: SimilarityTier | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not 0 <= self.relevance_score <= 100:
            raise ValueError(
                f"relevance_score must be in [0, 100], got {self.relevance_score}"
            )

    @property
    def key(self) -> str:
        return self.url

    @property
    def similarity(self) -> SimilarityTier:
        if self.similarity_tier is not None:
            return self.similarity_tier
        return similarity_tier_for(self.relevance_score)


# ---------------------------------------------------------------------------
# ResearchResultSet
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ResearchResultSet:
    """Deduplicated prior-art references, sorted by descending relevance.

    Use :meth:`build` to construct one from arbitrary references; the
    constructor itself only checks that the invariants already hold.
    """

    references: tuple[PriorArtReference, ...] = ()
    warnings: tuple[str, ...] = ()
    sources_attempted: int = 0
    sources_failed: int = 0

    def __post_init__(self) -> None:
        seen: set[str] = set()
        previous: int | None = None
        for ref in self.references:
            if ref.key in seen:
                raise ValueError(f"duplicate reference url {ref.key!r}")
            seen.add(ref.key)
            if previous is not None and ref.relevance_score > previous:
                raise ValueError("references must be sorted by descending relevance")
            previous = ref.relevance_score

    @classmethod
    def build(
        cls,
        references: Iterable[PriorArtReference],
        max_results: int | None = 10,
        *,
        warnings: Iterable[str] = (),
        sources_attempted: int = 0,
        sources_failed: int = 0,
    ) -> ResearchResultSet:
        """Deduplicate by URL (highest score wins), sort, and truncate."""
        best: dict[str, PriorArtReference] = {}
        for ref in references:
            current = best.get(ref.key)
            if current is None or ref.relevance_score > current.relevance_score:
                best[ref.key] = ref
        ranked = sorted(best.values(), key=lambda r: r.relevance_score, reverse=True)
        if max_results is not None:
            ranked = ranked[:max_results]
        return cls(
            references=tuple(ranked),
            warnings=tuple(warnings),
            sources_attempted=sources_attempted,
            sources_failed=sources_failed,
        )

    @property
    def is_empty(self) -> bool:
        return not self.references

    @property
    def all_sources_failed(self) -> bool:
        """True when at least one source was tried and none of them succeeded."""
        return self.sources_attempted > 0 and self.sources_failed >= self.sources_attempted

    @property
    def high_similarity_count(self) -> int:
        return sum(1 for r in self.references if r.similarity is SimilarityTier.HIGH)

    def __len__(self) -> int:
        return len(self.references)

    def __iter__(self) -> Iterator[PriorArtReference]:
        return iter(self.references)

    def __getitem__(self, index: int) -> PriorArtReference:
        return self.references[index]


# ---------------------------------------------------------------------------
# PatentabilityAssessment
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PatentabilityAssessment:
    """Single-number summary of a research result set."""

    score: int
    tier: PatentabilityTier
    recommendations: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not 0 <= self.score <= 100:
            raise ValueError(f"score must be in [0, 100], got {self.score}")


# ---------------------------------------------------------------------------
# Collaborator receipts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PaymentReceipt:
    """Returned by a payment processor once the recording fee is charged."""

    transaction_ref: str
    amount: str = ""
    currency: str = ""


@dataclass(frozen=True)
class SignatureResult:
    """Returned by a document signer."""

    signature: str


@dataclass(frozen=True)
class LedgerReceipt:
    """Returned by a ledger recorder once a document hash is written."""

    tx_hash: str
    block_number: int
    gas_used: str = ""


@dataclass(frozen=True)
class BlockchainRecord:
    """Recording metadata attached to a document after a successful write."""

    patent_id: str
    document_hash: str
    transaction_hash: str
    block_number: int
    signature: str = ""
    gas_used: str = ""
    fee: str = ""
    currency: str = ""
    payment_ref: str = ""
    recorded_at: datetime = field(default_factory=_utcnow)
