"""Domain models for Survey Pulse."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Optional, Union

from .errors import SurveyError

AnswerValue = Union[int, str]


class QuestionKind(Enum):
    """Question types. Values are the names used in question payloads."""
    SCALE = "emoji_scale"
    TEXT = "text_input"


class SurveyPhase(Enum):
    """Phases a respondent's session moves through."""
    UNSTARTED = auto()
    INTRO = auto()
    IN_PROGRESS = auto()
    COMPLETED = auto()
    SUBMITTED = auto()


@dataclass(frozen=True)
class ScaleOption:
    """One selectable point on a scale question."""
    value: int
    label: str


@dataclass(frozen=True)
class Question:
    """A single catalog question."""
    id: int
    kind: QuestionKind
    prompt: str
    options: tuple[ScaleOption, ...] = ()
    placeholder: Optional[str] = None

    def __post_init__(self):
        if self.kind is QuestionKind.SCALE:
            if not self.options:
                raise ValueError(f"Scale question {self.id} must have options")
            values = [option.value for option in self.options]
            if len(set(values)) != len(values):
                raise ValueError(f"Scale question {self.id} has duplicate option values")

    def option_for(self, value: Any) -> Optional[ScaleOption]:
        """Return the option whose value equals ``value``, if any."""
        # bool is an int subclass; True must not match option 1
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        for option in self.options:
            if option.value == value:
                return option
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the question definition payload shape."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.kind.value,
            "text": self.prompt,
        }
        if self.kind is QuestionKind.SCALE:
            data["options"] = [
                {"value": option.value, "text": option.label} for option in self.options
            ]
        if self.placeholder is not None:
            data["placeholder"] = self.placeholder
        return data


@dataclass(frozen=True)
class Answer:
    """A respondent's answer to one question."""
    question_id: int
    value: AnswerValue


@dataclass(frozen=True)
class SubmissionRecord:
    """A completed survey, as persisted. Never mutated after construction."""
    submission_id: str
    group_id: str
    answers: tuple[Answer, ...]
    timestamp: datetime

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the submission payload shape."""
        return {
            "submissionId": self.submission_id,
            "groupId": self.group_id,
            "answers": [
                {"questionId": answer.question_id, "answer": answer.value}
                for answer in self.answers
            ],
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class SurveySession:
    """Runtime session state for one respondent (not persisted)."""
    session_id: str
    phase: SurveyPhase = SurveyPhase.UNSTARTED
    group_id: Optional[str] = None
    current_index: int = 0
    answers: dict[int, Answer] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class StepResult:
    """Outcome of sending one event to the survey state machine."""
    phase: SurveyPhase
    error: Optional[SurveyError] = None
    record: Optional[SubmissionRecord] = None

    @property
    def ok(self) -> bool:
        return self.error is None
