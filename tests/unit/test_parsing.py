"""Tests for coercion and clamping of generator output."""

import pytest

from health_links.exceptions import GenerationError
from health_links.generation.models import Claim
from health_links.generation.parsing import (
    ELLIPSIS,
    clamp_briefing,
    clamp_list,
    clamp_sentences,
    clamp_text,
    collect_cite_aliases,
    parse_answer,
    parse_json_object,
    sanitize_claims,
)


class TestParseJsonObject:
    """Test raw completion parsing."""

    def test_object(self):
        assert parse_json_object('{"answer": "x"}') == {"answer": "x"}

    @pytest.mark.parametrize("content", [None, "", "   ", "not json", "[1, 2]", '"text"'])
    def test_unusable_content(self, content):
        with pytest.raises(GenerationError):
            parse_json_object(content)


class TestClampHelpers:
    """Test text, sentence and list clamps."""

    def test_clamp_text_short_is_trimmed_only(self):
        assert clamp_text("  abc  ", 5) == "abc"

    def test_clamp_text_long_ends_with_ellipsis(self):
        result = clamp_text("a" * 200, 120)

        assert len(result) == 120
        assert result.endswith(ELLIPSIS)

    def test_clamp_sentences_keeps_first(self):
        assert clamp_sentences("첫 문장입니다. 둘째 문장입니다. 셋째!", 1) == "첫 문장입니다."

    def test_clamp_sentences_counts_unterminated_tail(self):
        assert clamp_sentences("하나. 둘", 1) == "하나."
        assert clamp_sentences("하나. 둘", 2) == "하나. 둘"

    def test_clamp_sentences_handles_ideographic_full_stop(self):
        assert clamp_sentences("一。二。", 1) == "一。"

    def test_clamp_list_filters_and_truncates(self):
        value = ["a", "", "  ", 3, None, "b", "c", "d", "e", "f", "g"]

        assert clamp_list(value, 6) == ["a", "b", "c", "d", "e", "f"]

    def test_clamp_list_non_list(self):
        assert clamp_list("a, b", 6) == []


class TestClaims:
    """Test claim sanitization."""

    def test_unknown_aliases_are_dropped(self):
        claims = sanitize_claims([{"text": "사실", "cites": ["kdca", "blog", "kdca", 5]}])

        assert claims == [Claim(text="사실", cites=["kdca"])]

    def test_claims_without_valid_alias_are_dropped(self):
        claims = sanitize_claims([
            {"text": "근거 없음", "cites": ["blog"]},
            {"text": "근거 없음", "cites": []},
            {"text": "", "cites": ["who"]},
            {"text": "유효", "cites": ["who"]},
            "not a dict",
        ])

        assert [c.text for c in claims] == ["유효"]

    def test_accepts_claim_models(self):
        claims = sanitize_claims([Claim(text="x", cites=["mfds", "cdc"])])

        assert claims == [Claim(text="x", cites=["cdc"])]

    def test_non_list(self):
        assert sanitize_claims({"text": "x"}) == []

    def test_parse_answer_defaults(self):
        result = parse_answer({"answer": 42, "claims": "nope"})

        assert result.answer == ""
        assert result.claims == []

    def test_collect_cite_aliases(self):
        claims = [Claim(text="a", cites=["kdca", "pubmed"]), Claim(text="b", cites=["pubmed", "who"])]

        assert collect_cite_aliases(claims) == ["kdca", "pubmed", "who"]


class TestClampBriefing:
    """Test pre-visit briefing coercion."""

    def test_one_liner_is_one_sentence_within_limit(self):
        one_liner = "가" * 80 + ". " + "나" * 60 + ". " + "다" * 56 + "."
        result = clamp_briefing({"preVisitBriefing": {"oneLiner": one_liner}})

        text = result.pre_visit_briefing.one_liner
        assert text == "가" * 80 + "."
        assert len(text) <= 120

    def test_long_single_sentence_one_liner_is_cut(self):
        result = clamp_briefing({"preVisitBriefing": {"oneLiner": "가" * 200}})

        text = result.pre_visit_briefing.one_liner
        assert len(text) == 120
        assert text.endswith(ELLIPSIS)

    def test_visit_purpose_keeps_two_sentences(self):
        result = clamp_briefing({"preVisitBriefing": {"visitPurpose": "하나. 둘. 셋."}})

        assert result.pre_visit_briefing.visit_purpose == "하나. 둘."

    def test_list_limits(self):
        result = clamp_briefing({
            "preVisitBriefing": {"topConcerns": [str(i) for i in range(10)]},
            "questionsForDoctor": ["q1", "q2", "q3", "q4"],
            "redFlags": [str(i) for i in range(8)],
        })

        assert len(result.pre_visit_briefing.top_concerns) == 6
        assert result.questions_for_doctor == ["q1", "q2", "q3"]
        assert len(result.red_flags) == 6

    def test_missing_and_mistyped_fields_become_empty(self):
        result = clamp_briefing({
            "preVisitBriefing": {"oneLiner": 5, "symptomsSummary": "bad", "familyHistory": ["x"]},
            "redFlags": "fever",
        })

        briefing = result.pre_visit_briefing
        assert briefing.one_liner == ""
        assert briefing.family_history == ""
        assert briefing.symptoms_summary.onset == ""
        assert briefing.symptoms_summary.worse_factors == []
        assert result.red_flags == []

    def test_symptom_fields_are_clamped(self):
        result = clamp_briefing({
            "preVisitBriefing": {
                "symptomsSummary": {
                    "onset": "x" * 300,
                    "severity0to10": "7",
                    "associatedSymptoms": ["a"] * 9,
                }
            }
        })

        summary = result.pre_visit_briefing.symptoms_summary
        assert len(summary.onset) == 240
        assert summary.severity_0_to_10 == "7"
        assert len(summary.associated_symptoms) == 6

    def test_non_dict_briefing(self):
        result = clamp_briefing({"preVisitBriefing": None})

        assert result.pre_visit_briefing.one_liner == ""

    def test_serializes_in_camel_case(self):
        data = clamp_briefing({}).model_dump(by_alias=True)

        assert "preVisitBriefing" in data
        assert "severity0to10" in data["preVisitBriefing"]["symptomsSummary"]
        assert "questionsForDoctor" in data
