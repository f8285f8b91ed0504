"""Relevance scoring for prior-art candidates.

``RelevanceScorer`` computes a 0-100 score for how closely a candidate
disclosure overlaps an invention.  The score is a weighted keyword overlap:

* fraction of idea keywords present in the candidate (``keyword_weight``)
* technical field appearing verbatim (``field_weight``)
* fraction of problem / solution keywords present
  (``problem_weight`` / ``solution_weight``)
* a flat bonus for patent vocabulary (``term_bonus``)

Scoring is pure: no randomness, no I/O.  The same text and idea always
yield the same score.
"""

from __future__ import annotations

import math

from patent_pipeline.domain.enums import PatentabilityTier, SimilarityTier
from patent_pipeline.domain.values import (
    InventionIdea,
    PriorArtReference,
    RawCandidate,
    patentability_tier_for,
    similarity_tier_for,
)
from patent_pipeline.infrastructure.config import ScoringConfig


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero for positives."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Round *value* and clamp it into [0, 100]."""
    return max(0, min(100, round_half_up(value)))


class RelevanceScorer:
    """Keyword-overlap relevance scorer.

    Parameters
    ----------
    config:
        Weights and vocabulary.  Defaults to :class:`ScoringConfig`.
    """

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self._config = config or ScoringConfig()

    @property
    def config(self) -> ScoringConfig:
        return self._config

    def keywords(self, text: str) -> list[str]:
        """Lower-cased whitespace tokens longer than ``min_keyword_length``.

        Duplicates are kept so repeated words weigh more.
        """
        limit = self._config.min_keyword_length
        return [word for word in text.lower().split() if len(word) > limit]

    @staticmethod
    def _overlap(keywords: list[str], text: str) -> float:
        if not keywords:
            return 0.0
        return sum(1 for word in keywords if word in text) / len(keywords)

    def score(self, candidate_text: str, idea: InventionIdea) -> int:
        """Return the relevance of *candidate_text* to *idea* in [0, 100]."""
        cfg = self._config
        text = candidate_text.lower()

        total = self._overlap(self.keywords(idea.search_text), text) * cfg.keyword_weight

        field = idea.technical_field.strip().lower()
        if field and field in text:
            total += cfg.field_weight

        total += self._overlap(self.keywords(idea.problem_solved), text) * cfg.problem_weight
        total += self._overlap(self.keywords(idea.solution), text) * cfg.solution_weight

        if any(term in text for term in cfg.bonus_terms):
            total += cfg.term_bonus

        return clamp_score(total)

    def score_candidate(self, candidate: RawCandidate, idea: InventionIdea) -> int:
        """Score a raw search hit using its body text followed by its title."""
        return self.score(candidate.scoring_text, idea)

    def to_reference(self, candidate: RawCandidate, idea: InventionIdea) -> PriorArtReference:
        """Score *candidate* and wrap it as a :class:`PriorArtReference`."""
        score = self.score_candidate(candidate, idea)
        return PriorArtReference(
            title=candidate.title,
            url=candidate.url,
            summary=candidate.text or "No summary available",
            relevance_score=score,
            publication_date=candidate.published_date,
            patent_number=candidate.patent_number,
            source=candidate.source,
            similarity_tier=self.similarity(score),
        )

    def similarity(self, score: float) -> SimilarityTier:
        return similarity_tier_for(
            score, self._config.high_threshold, self._config.medium_threshold
        )

    def patentability(self, score: float) -> PatentabilityTier:
        return patentability_tier_for(
            score, self._config.high_threshold, self._config.medium_threshold
        )
