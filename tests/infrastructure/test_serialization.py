"""Tests for dict / JSON / YAML serialization of domain objects."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from patent_pipeline.domain.values import (
    InventionIdea,
    PatentabilityAssessment,
    RawCandidate,
    ResearchResultSet,
)
from patent_pipeline.domain.enums import PatentabilityTier
from patent_pipeline.infrastructure.config import PipelineConfig, ResearchConfig
from patent_pipeline.infrastructure.serialization import (
    candidate_from_dict,
    deserialize,
    from_json,
    from_yaml,
    idea_from_dict,
    load_structured,
    parse_datetime,
    serialize,
    to_json,
    to_yaml,
)
from patent_pipeline.services.pipeline import PatentPipeline


class TestParseDatetime:

    def test_z_suffix(self) -> None:
        assert parse_datetime("2025-01-15T10:30:00Z") == datetime(
            2025, 1, 15, 10, 30, tzinfo=timezone.utc
        )

    def test_naive_is_utc(self) -> None:
        assert parse_datetime("2025-01-15T10:30:00").tzinfo is timezone.utc

    @pytest.mark.parametrize("value", ["yesterday", 42])
    def test_invalid(self, value: object) -> None:
        with pytest.raises(ValueError):
            parse_datetime(value)


class TestIdeas:

    def test_camel_case_keys(self) -> None:
        idea = idea_from_dict(
            {
                "title": "Smart Valve",
                "technicalField": "Fluid Control",
                "problemSolved": "leak detection",
                "solution": "pressure sensor array",
                "submitterName": "Ada",
                "submitterEmail": "ada@example.com",
                "createdAt": "2025-01-15T10:30:00Z",
            }
        )
        assert idea.technical_field == "Fluid Control"
        assert idea.problem_solved == "leak detection"
        assert idea.submitter_email == "ada@example.com"
        assert idea.created_at.year == 2025
        assert idea.is_valid

    def test_round_trip(self, smart_valve: InventionIdea) -> None:
        assert from_json(to_json(smart_valve), InventionIdea) == smart_valve
        assert from_yaml(to_yaml(smart_valve), InventionIdea) == smart_valve

    def test_not_a_mapping(self) -> None:
        with pytest.raises(ValueError):
            idea_from_dict(["title"])


class TestCandidates:

    def test_aliases(self) -> None:
        candidate = candidate_from_dict(
            {"title": "T", "url": "u", "snippet": "s", "publishedDate": "2020"}
        )
        assert candidate == RawCandidate(title="T", url="u", text="s", published_date="2020")

    def test_missing_url(self) -> None:
        with pytest.raises(ValueError):
            candidate_from_dict({"title": "T"})


class TestResults:

    def test_round_trip(self, sample_results: ResearchResultSet) -> None:
        data = serialize(sample_results)
        assert data["references"][0]["similarity"] == "high"
        assert deserialize(data, ResearchResultSet) == sample_results

    def test_assessment(self) -> None:
        assessment = PatentabilityAssessment(
            score=35, tier=PatentabilityTier.LOW, recommendations=("a", "b")
        )
        data = serialize(assessment)
        assert data == {"score": 35, "tier": "LOW", "recommendations": ["a", "b"]}
        assert deserialize(data, PatentabilityAssessment) == assessment


class TestRunsAndConfig:

    @pytest.mark.asyncio
    async def test_run_is_json_serializable(self, smart_valve: InventionIdea) -> None:
        pipeline = PatentPipeline()
        run = await pipeline.research(pipeline.advance(pipeline.submit_idea(smart_valve)))
        data = json.loads(to_json(run))
        assert data["stage"] == "research"
        assert data["statuses"]["research"] == "completed"
        assert data["results"]["references"] == []
        assert data["document"] is None

    def test_config(self) -> None:
        cfg = PipelineConfig(research=ResearchConfig(max_results=3))
        assert from_yaml(to_yaml(cfg), PipelineConfig) == cfg

    def test_unknown_type(self) -> None:
        with pytest.raises(TypeError):
            serialize(object())
        with pytest.raises(TypeError):
            deserialize({}, PatentPipeline)


class TestLoadStructured:

    def test_by_suffix(self) -> None:
        assert load_structured('{"a": 1}', ".json") == {"a": 1}
        assert load_structured("a: 1\n", ".YAML") == {"a": 1}
