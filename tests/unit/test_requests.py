"""Tests for query payload classification."""

import pytest

from health_links.exceptions import InvalidRequestError
from health_links.orchestration.requests import RequestKind, classify_request, parse_qa


class TestClassifyRequest:
    """Test mapping payloads onto request kinds."""

    def test_intake_followup(self):
        parsed = classify_request({"mode": "intake", "stage": "followup", "input": "  두통  "})

        assert parsed.kind is RequestKind.INTAKE_FOLLOWUP
        assert parsed.text == "두통"
        assert parsed.kind.metered is False

    def test_intake_final_with_qa(self):
        parsed = classify_request({
            "mode": "intake",
            "stage": "final",
            "input": "두통",
            "qa": [{"q": "언제?", "a": "3일 전"}, {"q": "발열?"}],
        })

        assert parsed.kind is RequestKind.INTAKE_FINAL
        assert [(p.q, p.a) for p in parsed.qa] == [("언제?", "3일 전"), ("발열?", "")]
        assert parsed.kind.metered is True

    def test_info_answer(self):
        parsed = classify_request({"mode": "info", "stage": "answer", "input": "감기 예방법"})

        assert parsed.kind is RequestKind.INFO_ANSWER
        assert parsed.text == "감기 예방법"

    def test_legacy_question(self):
        parsed = classify_request({"question": "감기 예방법"})

        assert parsed.kind is RequestKind.INFO_ANSWER
        assert parsed.mode is None

    @pytest.mark.parametrize("body", [None, [], "text", 3])
    def test_non_object_body(self, body):
        with pytest.raises(InvalidRequestError, match="JSON object"):
            classify_request(body)

    @pytest.mark.parametrize("value", [None, "", "   ", 5])
    def test_intake_requires_input(self, value):
        with pytest.raises(InvalidRequestError, match="input is required"):
            classify_request({"mode": "intake", "stage": "followup", "input": value})

    def test_info_requires_input(self):
        with pytest.raises(InvalidRequestError, match="input is required"):
            classify_request({"mode": "info", "stage": "answer"})

    def test_unknown_intake_stage(self):
        with pytest.raises(InvalidRequestError, match="stage"):
            classify_request({"mode": "intake", "stage": "middle", "input": "x"})

    def test_blank_legacy_question(self):
        with pytest.raises(InvalidRequestError, match="question is required"):
            classify_request({"question": "  "})

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"mode": "info", "stage": "followup", "input": "x"},
            {"mode": "other", "input": "x"},
            {"question": 5},
        ],
    )
    def test_unknown_shapes(self, body):
        with pytest.raises(InvalidRequestError, match="question or valid mode/stage"):
            classify_request(body)

    def test_error_status_is_400(self):
        with pytest.raises(InvalidRequestError) as exc_info:
            classify_request({})
        assert exc_info.value.status_code == 400


class TestParseQa:
    """Test the lenient Q/A list parser."""

    def test_skips_bad_entries(self):
        pairs = parse_qa([{"q": "a", "a": "b"}, {"a": "orphan"}, "text", {"q": 1}, {"q": "c", "a": 2}])

        assert [(p.q, p.a) for p in pairs] == [("a", "b"), ("c", "")]

    def test_non_list(self):
        assert parse_qa({"q": "a"}) == []


class TestUnencodableText:
    """Text that cannot become UTF-8 is rejected at classification."""

    @pytest.mark.parametrize(
        "body",
        [
            {"mode": "intake", "stage": "followup", "input": "\ud800 두통"},
            {"mode": "intake", "stage": "final", "input": "두통 \udfff"},
            {"mode": "info", "stage": "answer", "input": "\ud800"},
            {"question": "\ud800 headache"},
        ],
    )
    def test_lone_surrogate(self, body):
        with pytest.raises(InvalidRequestError, match="invalid characters"):
            classify_request(body)


class TestLegacyShapeGuard:
    """The legacy question shape only applies without a mode or stage."""

    @pytest.mark.parametrize("extra", [{"mode": 7}, {"stage": True}, {"mode": "chat"}, {"stage": "answer"}])
    def test_unrecognised_mode_or_stage_is_rejected(self, extra):
        with pytest.raises(InvalidRequestError, match="question or valid mode/stage"):
            classify_request({"question": "x", **extra})

    @pytest.mark.parametrize("extra", [{"mode": None}, {"mode": ""}, {"stage": 0}])
    def test_falsy_mode_or_stage_keeps_legacy_shape(self, extra):
        parsed = classify_request({"question": "x", **extra})

        assert parsed.kind is RequestKind.INFO_ANSWER
