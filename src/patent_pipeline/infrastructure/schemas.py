"""Pydantic schemas for payloads handed back by external search providers.

Providers return loosely-shaped JSON (``text`` vs ``summary``,
``publishedDate`` vs ``published_date``).  ``CandidatePayload`` validates one
entry and converts it into the typed :class:`RawCandidate` value the
aggregator works with.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from patent_pipeline.domain.values import RawCandidate

logger = logging.getLogger(__name__)


class CandidatePayload(BaseModel):
    """One search hit as returned by a provider."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    title: str = Field(min_length=1)
    url: str = Field(min_length=1)
    text: str = Field(
        default="",
        validation_alias=AliasChoices("text", "summary", "snippet", "content"),
    )
    published_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("published_date", "publishedDate", "publication_date"),
    )
    patent_number: str | None = Field(
        default=None,
        validation_alias=AliasChoices("patent_number", "patentNumber"),
    )

    def to_candidate(self, source: str = "") -> RawCandidate:
        return RawCandidate(
            title=self.title,
            url=self.url,
            text=self.text,
            published_date=self.published_date,
            patent_number=self.patent_number,
            source=source,
        )


def coerce_candidates(
    payloads: Iterable[RawCandidate | Mapping[str, Any]],
    source: str = "",
) -> list[RawCandidate]:
    """Turn a provider response into ``RawCandidate`` values.

    ``RawCandidate`` instances pass through (tagged with *source* when they
    carry none); mappings are validated; anything without a title and URL is
    dropped.
    """
    candidates: list[RawCandidate] = []
    for item in payloads:
        if isinstance(item, RawCandidate):
            if not item.title or not item.url:
                logger.debug("Dropping candidate without title/url from %s", source)
                continue
            if not item.source and source:
                item = dataclasses.replace(item, source=source)
            candidates.append(item)
            continue
        try:
            payload = CandidatePayload.model_validate(item)
        except ValidationError as exc:
            logger.debug("Dropping malformed candidate from %s: %s", source, exc)
            continue
        candidates.append(payload.to_candidate(source))
    return candidates
