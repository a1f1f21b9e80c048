"""Unit tests for domain models."""

import dataclasses

import pytest

from conftest import make_record
from survey_pulse.errors import StoreError
from survey_pulse.models import (
    Question,
    QuestionKind,
    ScaleOption,
    StepResult,
    SurveyPhase,
    SurveySession,
)


class TestQuestion:
    def test_scale_without_options_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            Question(id=1, kind=QuestionKind.SCALE, prompt="?")

    def test_duplicate_option_values_are_rejected(self) -> None:
        with pytest.raises(ValueError):
            Question(
                id=1,
                kind=QuestionKind.SCALE,
                prompt="?",
                options=(ScaleOption(1, "a"), ScaleOption(1, "b")),
            )

    def test_option_for(self, scale_question: Question) -> None:
        assert scale_question.option_for(2) == ScaleOption(2, "B")
        assert scale_question.option_for(3) is None
        assert scale_question.option_for("2") is None
        assert scale_question.option_for(True) is None

    def test_to_dict_omits_unset_placeholder(self, scale_question: Question) -> None:
        assert scale_question.to_dict() == {
            "id": 1,
            "type": "emoji_scale",
            "text": "How satisfied are you?",
            "options": [{"value": 1, "text": "A"}, {"value": 2, "text": "B"}],
        }


class TestSubmissionRecord:
    def test_record_is_immutable(self) -> None:
        record = make_record("G1", (1, 1))
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.group_id = "G2"

    def test_to_payload_shape(self) -> None:
        record = make_record("G1", (1, 1), (2, "text"))
        payload = record.to_payload()
        assert set(payload) == {"submissionId", "groupId", "answers", "timestamp"}
        assert payload["answers"] == [
            {"questionId": 1, "answer": 1},
            {"questionId": 2, "answer": "text"},
        ]
        assert payload["timestamp"].endswith("+00:00")


class TestSurveySession:
    def test_defaults(self) -> None:
        session = SurveySession(session_id="s1")
        assert session.phase is SurveyPhase.UNSTARTED
        assert session.group_id is None
        assert session.answers == {}
        assert session.current_index == 0


class TestStepResult:
    def test_ok(self) -> None:
        assert StepResult(phase=SurveyPhase.INTRO).ok
        assert not StepResult(phase=SurveyPhase.COMPLETED, error=StoreError("down")).ok
