"""Error types shared by the survey core and its collaborators."""

from typing import Optional, Union


class SurveyError(Exception):
    """Base class for survey domain errors."""


class ValidationError(SurveyError):
    """Input failed validation; the respondent can be re-prompted.

    ``field`` names what failed: ``"groupId"`` for the group, a question id
    for an answer, or a payload key for boundary validation.
    """

    def __init__(self, field: Union[str, int], message: Optional[str] = None):
        super().__init__(message or f"Invalid value for {field}")
        self.field = field


class StoreError(SurveyError):
    """A submission store operation failed. Callers decide whether to retry."""


class NotFoundError(SurveyError):
    """A catalog operation referenced a question id that does not exist."""

    def __init__(self, question_id: int):
        super().__init__(f"Question not found: {question_id}")
        self.question_id = question_id


class PhaseError(SurveyError):
    """An event was sent to a session whose phase does not accept it."""

    def __init__(self, event: str, phase: str):
        super().__init__(f"Cannot {event} while {phase}")
        self.event = event
        self.phase = phase
