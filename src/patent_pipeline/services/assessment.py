"""Patentability estimation.

Reduces a :class:`ResearchResultSet` to a single 0-100 score, a tier and an
ordered list of recommended next steps.
"""

from __future__ import annotations

import logging

import numpy as np

from patent_pipeline.domain.enums import PatentabilityTier
from patent_pipeline.domain.values import PatentabilityAssessment, ResearchResultSet
from patent_pipeline.infrastructure.config import ScoringConfig
from patent_pipeline.services.scoring import RelevanceScorer, clamp_score

logger = logging.getLogger(__name__)

RECOMMENDATIONS: dict[PatentabilityTier, tuple[str, ...]] = {
    PatentabilityTier.HIGH: (
        "Patent shows high patentability - proceed with formal filing",
        "Prepare formal patent application with USPTO",
        "Conduct professional prior art search for confirmation",
        "Consider filing provisional patent application for early priority date",
    ),
    PatentabilityTier.MODERATE: (
        "Moderate patentability - refine claims before filing",
        "Modify invention claims to emphasize novel aspects",
        "Conduct additional prior art research",
        "Consult with patent attorney for claim strategy",
    ),
    PatentabilityTier.LOW: (
        "Low patentability - significant modifications needed",
        "Major revision of invention concept required",
        "Extensive prior art analysis and claim differentiation",
        "Mandatory consultation with patent professional",
        "Consider alternative IP protection strategies",
    ),
}

TRAILING_RECOMMENDATIONS: tuple[str, ...] = (
    "Document saved to blockchain for permanent record",
    "Patent documentation available for download and printing",
)


class PatentabilityEstimator:
    """Score how likely an invention is to be novel given its prior art.

    * No references: ``no_prior_art_score`` (85).
    * Otherwise: ``100 - mean(relevance)`` minus ``high_similarity_penalty``
      for every ``high`` reference, then clamped to [0, 100].
    """

    def __init__(
        self,
        config: ScoringConfig | None = None,
        scorer: RelevanceScorer | None = None,
    ) -> None:
        self._config = config or (scorer.config if scorer else ScoringConfig())
        self._scorer = scorer or RelevanceScorer(self._config)

    def raw_score(self, results: ResearchResultSet) -> float:
        """Unclamped score, exposed for diagnostics."""
        if results.is_empty:
            return float(self._config.no_prior_art_score)
        relevance = np.array([ref.relevance_score for ref in results], dtype=float)
        return float(
            100.0
            - relevance.mean()
            - results.high_similarity_count * self._config.high_similarity_penalty
        )

    def assess(self, results: ResearchResultSet) -> PatentabilityAssessment:
        score = clamp_score(self.raw_score(results))
        tier = self._scorer.patentability(score)
        logger.debug(
            "Patentability: %d references -> score=%d tier=%s",
            len(results),
            score,
            tier.value,
        )
        return PatentabilityAssessment(
            score=score,
            tier=tier,
            recommendations=RECOMMENDATIONS[tier] + TRAILING_RECOMMENDATIONS,
        )
