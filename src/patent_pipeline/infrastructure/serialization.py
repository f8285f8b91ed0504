"""Serialization utilities for the patent pipeline.

Provides ``to_dict`` conversion for every domain value and entity, plus
``from_dict`` reconstructors for the inputs a caller hands in (ideas,
candidates, references, result sets).  Every ``to_dict`` output is
JSON-serializable: enums become their value, datetimes become ISO-8601
strings, tuples become lists.

Reconstructors accept both ``snake_case`` and the ``camelCase`` keys web
front-ends send, and raise ``ValueError`` for unrecoverable data.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import yaml

from patent_pipeline.domain.entities import PatentDocument, PipelineRun
from patent_pipeline.domain.enums import PatentabilityTier, SimilarityTier
from patent_pipeline.domain.values import (
    BlockchainRecord,
    InventionIdea,
    PatentabilityAssessment,
    PaymentReceipt,
    PriorArtReference,
    RawCandidate,
    ResearchResultSet,
)
from patent_pipeline.infrastructure.config import PipelineConfig

logger = logging.getLogger(__name__)


# =========================================================================== #
#  Generic helpers                                                             #
# =========================================================================== #

def _enum_val(v: Any) -> Any:
    """Return the ``.value`` if *v* is an enum member, else *v* unchanged."""
    if hasattr(v, "value"):
        return v.value
    return v


def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """First present key among *keys* (snake_case first, then aliases)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def parse_datetime(value: Any) -> datetime:
    """Parse an ISO-8601 string (``Z`` suffix allowed) into an aware datetime."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError(f"Invalid datetime: {value!r}") from None
    else:
        raise ValueError(f"Invalid datetime: {value!r}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


# =========================================================================== #
#  Inputs                                                                      #
# =========================================================================== #

def idea_to_dict(idea: InventionIdea) -> dict[str, Any]:
    return {
        "title": idea.title,
        "description": idea.description,
        "technical_field": idea.technical_field,
        "problem_solved": idea.problem_solved,
        "solution": idea.solution,
        "advantages": idea.advantages,
        "submitter_name": idea.submitter_name,
        "submitter_email": idea.submitter_email,
        "created_at": _iso(idea.created_at),
    }


def idea_from_dict(data: Mapping[str, Any]) -> InventionIdea:
    if not isinstance(data, Mapping):
        raise ValueError("An invention idea must be a mapping")
    kwargs: dict[str, Any] = {
        "title": str(_pick(data, "title", default="")),
        "description": str(_pick(data, "description", default="")),
        "technical_field": str(_pick(data, "technical_field", "technicalField", default="")),
        "problem_solved": str(_pick(data, "problem_solved", "problemSolved", default="")),
        "solution": str(_pick(data, "solution", default="")),
        "advantages": str(_pick(data, "advantages", default="")),
        "submitter_name": str(_pick(data, "submitter_name", "submitterName", default="")),
        "submitter_email": str(_pick(data, "submitter_email", "submitterEmail", default="")),
    }
    created = _pick(data, "created_at", "createdAt")
    if created is not None:
        kwargs["created_at"] = parse_datetime(created)
    return InventionIdea(**kwargs)


def candidate_to_dict(candidate: RawCandidate) -> dict[str, Any]:
    return {
        "title": candidate.title,
        "url": candidate.url,
        "text": candidate.text,
        "published_date": candidate.published_date,
        "patent_number": candidate.patent_number,
        "source": candidate.source,
    }


def candidate_from_dict(data: Mapping[str, Any]) -> RawCandidate:
    title = _pick(data, "title")
    url = _pick(data, "url")
    if not title or not url:
        raise ValueError("A candidate needs both 'title' and 'url'")
    return RawCandidate(
        title=str(title),
        url=str(url),
        text=str(_pick(data, "text", "summary", "snippet", default="")),
        published_date=_pick(data, "published_date", "publishedDate", "publication_date"),
        patent_number=_pick(data, "patent_number", "patentNumber"),
        source=str(_pick(data, "source", default="")),
    )


# =========================================================================== #
#  Research and assessment                                                     #
# =========================================================================== #

def reference_to_dict(ref: PriorArtReference) -> dict[str, Any]:
    return {
        "title": ref.title,
        "url": ref.url,
        "summary": ref.summary,
        "relevance_score": ref.relevance_score,
        "similarity": ref.similarity.value,
        "publication_date": ref.publication_date,
        "patent_number": ref.patent_number,
        "source": ref.source,
    }


def reference_from_dict(data: Mapping[str, Any]) -> PriorArtReference:
    similarity = _pick(data, "similarity")
    return PriorArtReference(
        title=str(data["title"]),
        url=str(data["url"]),
        summary=str(_pick(data, "summary", default="")),
        relevance_score=int(_pick(data, "relevance_score", "relevanceScore", default=0)),
        publication_date=_pick(data, "publication_date", "publicationDate"),
        patent_number=_pick(data, "patent_number", "patentNumber"),
        source=str(_pick(data, "source", default="")),
        similarity_tier=SimilarityTier(similarity) if similarity is not None else None,
    )


def results_to_dict(results: ResearchResultSet) -> dict[str, Any]:
    return {
        "references": [reference_to_dict(r) for r in results],
        "warnings": list(results.warnings),
        "sources_attempted": results.sources_attempted,
        "sources_failed": results.sources_failed,
    }


def results_from_dict(data: Mapping[str, Any]) -> ResearchResultSet:
    """Rebuild a result set, re-applying deduplication and ordering."""
    return ResearchResultSet.build(
        (reference_from_dict(r) for r in data.get("references", [])),
        max_results=None,
        warnings=data.get("warnings", ()),
        sources_attempted=int(data.get("sources_attempted", 0)),
        sources_failed=int(data.get("sources_failed", 0)),
    )


def assessment_to_dict(assessment: PatentabilityAssessment) -> dict[str, Any]:
    return {
        "score": assessment.score,
        "tier": _enum_val(assessment.tier),
        "recommendations": list(assessment.recommendations),
    }


def assessment_from_dict(data: Mapping[str, Any]) -> PatentabilityAssessment:
    return PatentabilityAssessment(
        score=int(data["score"]),
        tier=PatentabilityTier(data["tier"]),
        recommendations=tuple(data.get("recommendations", ())),
    )


# =========================================================================== #
#  Recording                                                                   #
# =========================================================================== #

def payment_to_dict(receipt: PaymentReceipt) -> dict[str, Any]:
    return {
        "transaction_ref": receipt.transaction_ref,
        "amount": receipt.amount,
        "currency": receipt.currency,
    }


def record_to_dict(record: BlockchainRecord) -> dict[str, Any]:
    return {
        "patent_id": record.patent_id,
        "document_hash": record.document_hash,
        "transaction_hash": record.transaction_hash,
        "block_number": record.block_number,
        "signature": record.signature,
        "gas_used": record.gas_used,
        "fee": record.fee,
        "currency": record.currency,
        "payment_ref": record.payment_ref,
        "recorded_at": _iso(record.recorded_at),
    }


# =========================================================================== #
#  Entities                                                                    #
# =========================================================================== #

def document_to_dict(doc: PatentDocument) -> dict[str, Any]:
    return {
        "id": doc.document_id,
        "status": _enum_val(doc.status),
        "created_at": _iso(doc.created_at),
        "idea": idea_to_dict(doc.idea),
        "claims": list(doc.claims),
        "abstract": doc.abstract,
        "detailed_description": doc.detailed_description,
        "drawings_description": doc.drawings_description,
        "inventorship_statement": doc.inventorship_statement,
        "patentability_analysis": doc.patentability_analysis,
        "next_steps": list(doc.next_steps),
        "assessment": assessment_to_dict(doc.assessment),
        "prior_art": results_to_dict(doc.results),
        "blockchain_hash": doc.blockchain_hash,
        "transaction_hash": doc.transaction_hash,
    }


def run_to_dict(run: PipelineRun) -> dict[str, Any]:
    return {
        "run_id": run.run_id,
        "stage": _enum_val(run.stage),
        "statuses": {_enum_val(k): _enum_val(v) for k, v in run.statuses.items()},
        "errors": {_enum_val(k): v for k, v in run.errors.items()},
        "warnings": list(run.warnings),
        "idea": idea_to_dict(run.idea),
        "results": results_to_dict(run.results) if run.results is not None else None,
        "document": document_to_dict(run.document) if run.document is not None else None,
        "payment": payment_to_dict(run.payment) if run.payment is not None else None,
        "record": record_to_dict(run.record) if run.record is not None else None,
    }


# =========================================================================== #
#  Unified serializer                                                          #
# =========================================================================== #

# Maps type -> (to_dict_fn, from_dict_fn)
_SERIALIZERS: dict[type, tuple[Any, Any]] = {
    InventionIdea: (idea_to_dict, idea_from_dict),
    RawCandidate: (candidate_to_dict, candidate_from_dict),
    PriorArtReference: (reference_to_dict, reference_from_dict),
    ResearchResultSet: (results_to_dict, results_from_dict),
    PatentabilityAssessment: (assessment_to_dict, assessment_from_dict),
    PaymentReceipt: (payment_to_dict, None),
    BlockchainRecord: (record_to_dict, None),
    PatentDocument: (document_to_dict, None),
    PipelineRun: (run_to_dict, None),
    PipelineConfig: (PipelineConfig.to_dict, PipelineConfig.from_dict),
}


def serialize(obj: Any) -> dict[str, Any]:
    """Serialize a known domain/infrastructure object to a dict.

    Raises ``TypeError`` for unsupported types.
    """
    ser = _SERIALIZERS.get(type(obj))
    if ser is None:
        raise TypeError(f"No serializer registered for {type(obj).__name__}")
    to_fn, _ = ser
    return to_fn(obj)


def deserialize(data: Mapping[str, Any], target_type: type) -> Any:
    """Deserialize a dict into *target_type*."""
    ser = _SERIALIZERS.get(target_type)
    if ser is not None and ser[1] is not None:
        return ser[1](data)
    raise TypeError(f"No deserializer registered for {target_type.__name__}")


# =========================================================================== #
#  JSON / YAML helpers                                                         #
# =========================================================================== #

def to_json(obj: Any, *, indent: int | None = 2) -> str:
    """Serialize a domain/infra object to a JSON string."""
    return json.dumps(serialize(obj), indent=indent, default=str, ensure_ascii=False)


def from_json(json_str: str, target_type: type) -> Any:
    """Deserialize a JSON string into *target_type*."""
    return deserialize(json.loads(json_str), target_type)


def to_yaml(obj: Any) -> str:
    """Serialize a domain/infra object to a YAML string."""
    return yaml.safe_dump(serialize(obj), default_flow_style=False, sort_keys=False)


def from_yaml(yaml_str: str, target_type: type) -> Any:
    """Deserialize a YAML string into *target_type*."""
    return deserialize(yaml.safe_load(yaml_str), target_type)


def load_structured(text: str, suffix: str = ".json") -> Any:
    """Parse JSON or YAML text, choosing by file *suffix*."""
    if suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)
