"""Survey traversal state machine."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Sequence

from .errors import PhaseError, StoreError, ValidationError
from .models import (
    Answer,
    AnswerValue,
    Question,
    StepResult,
    SubmissionRecord,
    SurveyPhase,
    SurveySession,
)
from .repository.base import SubmissionRepository
from .validation import answer_is_valid, is_blank

logger = logging.getLogger(__name__)


class SurveyStateMachine:
    """Walks one respondent through the question catalog.

    Each event is a method returning a ``StepResult``. A failed event carries
    its error in the result and leaves the session untouched.

        UNSTARTED --start--> INTRO --acknowledge--> IN_PROGRESS(0)
        IN_PROGRESS(i) --advance--> IN_PROGRESS(i+1) | COMPLETED
        COMPLETED --submit--> SUBMITTED
    """

    def __init__(self, session: SurveySession, catalog: Sequence[Question]):
        if not catalog:
            raise ValueError("Question catalog must not be empty")
        self.session = session
        self.catalog = catalog
        self.log_prefix = f"[SESSION {session.session_id[:8]}]"

    @property
    def phase(self) -> SurveyPhase:
        return self.session.phase

    @property
    def current_question(self) -> Optional[Question]:
        """The question being answered, or None outside IN_PROGRESS."""
        if self.session.phase is SurveyPhase.IN_PROGRESS:
            return self.catalog[self.session.current_index]
        return None

    @property
    def progress_percent(self) -> int:
        """Progress shown to the respondent.

        Counts answered questions only, so the last question still shows
        less than 100%.
        """
        match self.session.phase:
            case SurveyPhase.IN_PROGRESS:
                return round(self.session.current_index / len(self.catalog) * 100)
            case SurveyPhase.COMPLETED | SurveyPhase.SUBMITTED:
                return 100
            case _:
                return 0

    def _result(self, error=None, record=None) -> StepResult:
        return StepResult(phase=self.session.phase, error=error, record=record)

    def _reject(self, event: str) -> StepResult:
        return self._result(error=PhaseError(event, self.session.phase.name.lower()))

    def start(self, group_id: str) -> StepResult:
        """Set the respondent's group and show the introduction."""
        if self.session.phase not in (SurveyPhase.UNSTARTED, SurveyPhase.INTRO):
            return self._reject("start")
        if is_blank(group_id):
            return self._result(error=ValidationError("groupId", "Group ID cannot be empty"))

        self.session.group_id = group_id
        self.session.answers = {}
        self.session.current_index = 0
        self.session.phase = SurveyPhase.INTRO
        return self._result()

    def acknowledge(self) -> StepResult:
        """Leave the introduction and present the first question."""
        if self.session.phase is not SurveyPhase.INTRO:
            return self._reject("acknowledge")
        self.session.current_index = 0
        self.session.phase = SurveyPhase.IN_PROGRESS
        return self._result()

    def record_answer(self, value: AnswerValue) -> StepResult:
        """Store or overwrite the answer to the current question.

        The value is kept exactly as given; it is checked on ``advance``.
        """
        question = self.current_question
        if question is None:
            return self._reject("record an answer")
        self.session.answers[question.id] = Answer(question_id=question.id, value=value)
        return self._result()

    def advance(self) -> StepResult:
        """Move past the current question if its answer is valid.

        A no-op once the survey is completed.
        """
        if self.session.phase is SurveyPhase.COMPLETED:
            return self._result()
        question = self.current_question
        if question is None:
            return self._reject("advance")

        if not answer_is_valid(question, self.session.answers.get(question.id)):
            return self._result(error=ValidationError(question.id))

        if self.session.current_index + 1 < len(self.catalog):
            self.session.current_index += 1
        else:
            self.session.phase = SurveyPhase.COMPLETED
            logger.info("%s Survey completed", self.log_prefix)
        return self._result()

    def build_record(self) -> SubmissionRecord:
        """Assemble a fresh submission record from the collected answers."""
        answers = tuple(
            self.session.answers[question.id]
            for question in self.catalog
            if question.id in self.session.answers
        )
        return SubmissionRecord(
            submission_id=str(uuid.uuid4()),
            group_id=self.session.group_id,
            answers=answers,
            timestamp=datetime.now(timezone.utc),
        )

    async def submit(self, store: SubmissionRepository) -> StepResult:
        """Append the submission to the store.

        On a store failure the session stays COMPLETED and may be submitted
        again. Retries are not deduplicated: every successful call writes a
        record with its own submission id.
        """
        if self.session.phase is not SurveyPhase.COMPLETED:
            return self._reject("submit")

        record = self.build_record()
        try:
            await store.append(record)
        except StoreError as e:
            logger.warning("%s Submission failed: %s", self.log_prefix, e)
            return self._result(error=e)

        self.session.phase = SurveyPhase.SUBMITTED
        logger.info(
            "%s Submitted %s (%d answers)",
            self.log_prefix,
            record.submission_id,
            len(record.answers),
        )
        return self._result(record=record)
