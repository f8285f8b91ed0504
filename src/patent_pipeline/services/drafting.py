"""Deterministic patent document assembly.

``DocumentAssembler.assemble`` renders a fixed-section application from an
idea, its research result set and its patentability assessment.  It makes no
network calls and reads no clock: the document id and every date are derived
from the inputs, so assembling twice yields identical documents.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime

from patent_pipeline.domain.entities import PatentDocument
from patent_pipeline.domain.enums import DocumentStatus, PatentabilityTier
from patent_pipeline.domain.values import (
    InventionIdea,
    PatentabilityAssessment,
    ResearchResultSet,
)

logger = logging.getLogger(__name__)

DATE_FORMAT = "%a %b %d %Y"

DRAWINGS_DESCRIPTION = (
    "Drawings and diagrams can be added to illustrate the invention "
    "implementation and technical specifications."
)

_ABSTRACT = """ABSTRACT

{title}

This patent application discloses {description} in the field of {field}. \
The invention solves the problem of {problem} through {solution}. {novelty} \
The primary advantages include {advantages}. This application provides \
detailed claims, technical specifications, and implementation guidance for \
the disclosed invention."""

_NOVEL = "This invention presents a novel approach with no direct prior art identified."
_LIMITATIONS = "This invention addresses limitations found in {count} related prior art references."

_DESCRIPTION = """DETAILED DESCRIPTION

Field of the Invention:
This invention relates to {field}, and more particularly to methods and systems for {problem_lower}.

Background of the Invention:
The technical field of {field} has long faced challenges related to {problem}. \
Current solutions have limitations that this invention addresses through innovative approaches.

Summary of the Invention:
{description}

The present invention provides {solution}, resulting in significant advantages including {advantages}.

Detailed Description of Preferred Embodiments:
The invention can be implemented through various embodiments, each providing the core \
benefits described. The technical implementation involves systematic approaches that \
ensure reliability and effectiveness.

Technical Specifications:
- Primary Function: {problem}
- Technical Domain: {field}
- Key Innovation: {solution}
- Primary Benefits: {advantages}

Implementation Examples:
Various implementations are possible within the scope of this invention, each maintaining \
the core innovative principles while adapting to specific use cases and requirements."""

_INVENTORSHIP = """INVENTORSHIP STATEMENT

The undersigned declares that they are the sole inventor of the subject matter disclosed \
in this patent application. The invention titled "{title}" was conceived and developed by {name}.

Inventor Information:
Name: {name}
Email: {email}
Date of Conception: {conceived}

Declaration:
I hereby declare that I believe myself to be the original inventor of the subject matter \
disclosed and claimed in this application. I acknowledge that willful false statements are \
punishable by fine or imprisonment under applicable laws.

Digital Signature: {name}
Date: {signed}"""

_ANALYSIS = """PATENTABILITY ANALYSIS

Overall Patentability Score: {score}/100
Novelty Assessment: {tier}

Prior Art Analysis:
{count} prior art references were identified and analyzed for relevance and similarity.
{references}
Patentability Assessment:
{assessment}

Recommendation:
{recommendation}"""

_REFERENCE = """
Reference {index}: {title}
- Relevance Score: {score}/100
- Similarity Level: {similarity}
- Publication: {published}
- Analysis: {summary}
"""

_TIER_ASSESSMENT: dict[PatentabilityTier, str] = {
    PatentabilityTier.HIGH: (
        "This invention demonstrates high novelty and non-obviousness. The prior art "
        "search revealed limited directly relevant references, suggesting strong "
        "patentability."
    ),
    PatentabilityTier.MODERATE: (
        "This invention shows moderate patentability. Some related prior art exists, "
        "but distinguishing features may support patent claims."
    ),
    PatentabilityTier.LOW: (
        "This invention faces patentability challenges due to closely related prior "
        "art. Consider refining the claims to emphasize novel aspects."
    ),
}

_TIER_RECOMMENDATION: dict[PatentabilityTier, str] = {
    PatentabilityTier.HIGH: (
        "Proceed with patent filing. Strong likelihood of successful examination."
    ),
    PatentabilityTier.MODERATE: (
        "Consider claim refinement to emphasize distinguishing features before filing."
    ),
    PatentabilityTier.LOW: (
        "Recommend significant claim modification or consideration of alternative "
        "IP protection strategies."
    ),
}


def generate_patent_id(idea: InventionIdea) -> str:
    """Stable identifier derived from the idea's content and submission time."""
    digest = hashlib.sha256(
        "\x1f".join(
            (
                idea.title,
                idea.description,
                idea.technical_field,
                idea.problem_solved,
                idea.solution,
                idea.advantages,
                idea.submitter_name,
                idea.submitter_email,
                idea.created_at.isoformat(),
            )
        ).encode("utf-8")
    ).hexdigest()
    return f"PAT-{idea.created_at:%Y%m%d%H%M%S}-{digest[:8].upper()}"


class DocumentAssembler:
    """Render every section of a :class:`PatentDocument`.

    The individual section builders are public so callers (and tests) can
    render one section without assembling a whole document.
    """

    def claims(self, idea: InventionIdea) -> tuple[str, ...]:
        return (
            f"1. A method for {idea.problem_solved.lower()}, comprising: {idea.solution}",
            "2. The method of claim 1, wherein the technical field relates to "
            f"{idea.technical_field.lower()}.",
            f"3. The method of claim 1, providing the advantage of {idea.advantages.lower()}.",
            "4. The method of claim 1, further comprising additional implementations "
            "as described in the detailed description.",
        )

    def abstract(self, idea: InventionIdea, results: ResearchResultSet) -> str:
        if results.is_empty:
            novelty = _NOVEL
        else:
            novelty = _LIMITATIONS.format(count=len(results))
        return _ABSTRACT.format(
            title=idea.title,
            description=idea.description,
            field=idea.technical_field,
            problem=idea.problem_solved,
            solution=idea.solution,
            novelty=novelty,
            advantages=idea.advantages,
        )

    def detailed_description(self, idea: InventionIdea) -> str:
        return _DESCRIPTION.format(
            field=idea.technical_field,
            problem=idea.problem_solved,
            problem_lower=idea.problem_solved.lower(),
            description=idea.description,
            solution=idea.solution,
            advantages=idea.advantages,
        )

    def inventorship_statement(self, idea: InventionIdea, signed_at: datetime) -> str:
        return _INVENTORSHIP.format(
            title=idea.title,
            name=idea.submitter_name,
            email=idea.submitter_email,
            conceived=idea.created_at.strftime(DATE_FORMAT),
            signed=signed_at.strftime(DATE_FORMAT),
        )

    def patentability_analysis(
        self,
        results: ResearchResultSet,
        assessment: PatentabilityAssessment,
    ) -> str:
        references = "".join(
            _REFERENCE.format(
                index=index,
                title=ref.title,
                score=ref.relevance_score,
                similarity=ref.similarity.value.upper(),
                published=ref.publication_date or "Unknown",
                summary=ref.summary,
            )
            for index, ref in enumerate(results, start=1)
        )
        return _ANALYSIS.format(
            score=assessment.score,
            tier=assessment.tier.value,
            count=len(results),
            references=references,
            assessment=_TIER_ASSESSMENT[assessment.tier],
            recommendation=_TIER_RECOMMENDATION[assessment.tier],
        )

    def assemble(
        self,
        idea: InventionIdea,
        results: ResearchResultSet,
        assessment: PatentabilityAssessment,
        *,
        generated_at: datetime | None = None,
    ) -> PatentDocument:
        """Build the complete document.  ``generated_at`` defaults to the
        idea's submission time."""
        generated_at = generated_at or idea.created_at
        document = PatentDocument(
            document_id=generate_patent_id(idea),
            idea=idea,
            results=results,
            assessment=assessment,
            claims=self.claims(idea),
            abstract=self.abstract(idea, results),
            detailed_description=self.detailed_description(idea),
            drawings_description=DRAWINGS_DESCRIPTION,
            inventorship_statement=self.inventorship_statement(idea, generated_at),
            patentability_analysis=self.patentability_analysis(results, assessment),
            next_steps=assessment.recommendations,
            created_at=generated_at,
            status=DocumentStatus.COMPLETED,
        )
        logger.debug(
            "Assembled %s with %d claims", document.document_id, len(document.claims)
        )
        return document
