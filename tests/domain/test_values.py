"""Tests for domain value objects."""

from __future__ import annotations

from datetime import timezone

import pytest

from patent_pipeline.domain.enums import PatentabilityTier, SimilarityTier
from patent_pipeline.domain.values import (
    InventionIdea,
    LookupErr,
    LookupOk,
    PatentabilityAssessment,
    PriorArtReference,
    RawCandidate,
    ResearchResultSet,
    patentability_tier_for,
    similarity_tier_for,
)


def _ref(url: str, score: int, title: str = "") -> PriorArtReference:
    return PriorArtReference(
        title=title or url,
        url=url,
        summary="summary",
        relevance_score=score,
    )


# ===================================================================== #
#  InventionIdea                                                          #
# ===================================================================== #


class TestInventionIdea:

    def test_valid_idea_has_no_errors(self, smart_valve: InventionIdea) -> None:
        assert smart_valve.validate() == {}
        assert smart_valve.is_valid

    def test_missing_required_fields(self) -> None:
        errors = InventionIdea(title="  ").validate()
        assert set(errors) == {"title", "technical_field", "problem_solved", "solution"}

    def test_invalid_email(self, smart_valve: InventionIdea) -> None:
        idea = InventionIdea(
            title=smart_valve.title,
            technical_field=smart_valve.technical_field,
            problem_solved=smart_valve.problem_solved,
            solution=smart_valve.solution,
            submitter_email="not-an-email",
        )
        assert "submitter_email" in idea.validate()

    def test_email_optional(self) -> None:
        idea = InventionIdea(
            title="T", technical_field="F", problem_solved="P", solution="S"
        )
        assert idea.is_valid

    def test_created_at_defaults_to_utc(self) -> None:
        idea = InventionIdea(title="T")
        assert idea.created_at.tzinfo is timezone.utc

    def test_frozen(self, smart_valve: InventionIdea) -> None:
        with pytest.raises(AttributeError):
            smart_valve.title = "Other"  # type: ignore[misc]

    def test_search_text_includes_core_fields(self, smart_valve: InventionIdea) -> None:
        text = smart_valve.search_text
        for part in ("Smart Valve", "Fluid Control", "leak detection", "pressure sensor array"):
            assert part in text
        assert "early warning" not in text


# ===================================================================== #
#  Candidates and lookup results                                          #
# ===================================================================== #


class TestRawCandidate:

    def test_scoring_text_uses_body_then_title(self) -> None:
        c = RawCandidate(title="Title", url="u", text="Body")
        assert c.scoring_text == "Body Title"

    def test_scoring_text_falls_back_to_title(self) -> None:
        c = RawCandidate(title="Title", url="u")
        assert c.scoring_text == "Title Title"


class TestLookupResult:

    def test_ok_and_err_are_tagged(self) -> None:
        ok = LookupOk(source="a", query="q")
        err = LookupErr(source="a", query="q", reason="boom")
        assert ok.ok is True
        assert err.ok is False
        assert "boom" in err.warning
        assert "'a'" in err.warning


# ===================================================================== #
#  Tiers                                                                  #
# ===================================================================== #


class TestTiers:

    @pytest.mark.parametrize(
        ("score", "tier"),
        [(100, SimilarityTier.HIGH), (70, SimilarityTier.HIGH),
         (69, SimilarityTier.MEDIUM), (40, SimilarityTier.MEDIUM),
         (39, SimilarityTier.LOW), (0, SimilarityTier.LOW)],
    )
    def test_similarity_boundaries(self, score: int, tier: SimilarityTier) -> None:
        assert similarity_tier_for(score) is tier

    @pytest.mark.parametrize(
        ("score", "tier"),
        [(85, PatentabilityTier.HIGH), (70, PatentabilityTier.HIGH),
         (69, PatentabilityTier.MODERATE), (40, PatentabilityTier.MODERATE),
         (39, PatentabilityTier.LOW)],
    )
    def test_patentability_boundaries(self, score: int, tier: PatentabilityTier) -> None:
        assert patentability_tier_for(score) is tier

    def test_reference_similarity(self) -> None:
        assert _ref("u", 75).similarity is SimilarityTier.HIGH
        assert _ref("u", 45).similarity is SimilarityTier.MEDIUM
        assert _ref("u", 5).similarity is SimilarityTier.LOW


# ===================================================================== #
#  PriorArtReference                                                      #
# ===================================================================== #


class TestPriorArtReference:

    @pytest.mark.parametrize("score", [-1, 101])
    def test_score_out_of_range_rejected(self, score: int) -> None:
        with pytest.raises(ValueError, match="relevance_score"):
            _ref("u", score)

    def test_key_is_url(self) -> None:
        assert _ref("https://x", 10).key == "https://x"


# ===================================================================== #
#  ResearchResultSet                                                      #
# ===================================================================== #


class TestResearchResultSet:

    def test_build_deduplicates_keeping_highest_score(self) -> None:
        rs = ResearchResultSet.build([_ref("a", 60), _ref("b", 50), _ref("a", 80)])
        assert [r.url for r in rs] == ["a", "b"]
        assert rs[0].relevance_score == 80

    def test_build_sorts_descending(self) -> None:
        rs = ResearchResultSet.build([_ref(f"u{i}", s) for i, s in enumerate([5, 90, 40, 70])])
        scores = [r.relevance_score for r in rs]
        assert scores == sorted(scores, reverse=True)

    def test_ties_keep_first_seen_order(self) -> None:
        rs = ResearchResultSet.build([_ref("first", 50), _ref("second", 50)])
        assert [r.url for r in rs] == ["first", "second"]

    def test_equal_score_duplicate_keeps_first(self) -> None:
        rs = ResearchResultSet.build([_ref("a", 50, "one"), _ref("a", 50, "two")])
        assert len(rs) == 1
        assert rs[0].title == "one"

    def test_build_truncates(self) -> None:
        rs = ResearchResultSet.build([_ref(f"u{i}", i) for i in range(25)], max_results=10)
        assert len(rs) == 10
        assert rs[0].relevance_score == 24

    def test_build_without_cap(self) -> None:
        rs = ResearchResultSet.build([_ref(f"u{i}", i) for i in range(25)], max_results=None)
        assert len(rs) == 25

    def test_invariants_hold_for_many_inputs(self) -> None:
        import random

        rng = random.Random(7)
        for _ in range(50):
            refs = [
                _ref(f"u{rng.randint(0, 15)}", rng.randint(0, 100))
                for _ in range(rng.randint(0, 30))
            ]
            rs = ResearchResultSet.build(refs)
            urls = [r.url for r in rs]
            scores = [r.relevance_score for r in rs]
            assert len(urls) == len(set(urls))
            assert scores == sorted(scores, reverse=True)
            assert len(rs) <= 10

    def test_constructor_rejects_duplicates(self) -> None:
        with pytest.raises(ValueError, match="duplicate"):
            ResearchResultSet(references=(_ref("a", 50), _ref("a", 40)))

    def test_constructor_rejects_unsorted(self) -> None:
        with pytest.raises(ValueError, match="descending"):
            ResearchResultSet(references=(_ref("a", 40), _ref("b", 50)))

    def test_empty(self) -> None:
        rs = ResearchResultSet()
        assert rs.is_empty
        assert len(rs) == 0
        assert not rs.all_sources_failed

    def test_all_sources_failed(self) -> None:
        assert ResearchResultSet(sources_attempted=2, sources_failed=2).all_sources_failed
        assert not ResearchResultSet(sources_attempted=2, sources_failed=1).all_sources_failed

    def test_high_similarity_count(self, sample_results: ResearchResultSet) -> None:
        assert sample_results.high_similarity_count == 1


class TestPatentabilityAssessment:

    @pytest.mark.parametrize("score", [-5, 101])
    def test_score_range(self, score: int) -> None:
        with pytest.raises(ValueError):
            PatentabilityAssessment(score=score, tier=PatentabilityTier.LOW)
