"""Shared test fixtures."""

import uuid
from datetime import datetime, timezone
from pathlib import Path

import pytest

from survey_pulse.config.settings import Settings, StorageSettings, SurveySettings
from survey_pulse.errors import StoreError
from survey_pulse.models import (
    Answer,
    Question,
    QuestionKind,
    ScaleOption,
    SubmissionRecord,
    SurveySession,
)
from survey_pulse.repository.base import SubmissionRepository
from survey_pulse.repository.memory import InMemorySubmissionRepository
from survey_pulse.state_machine import SurveyStateMachine


class FlakyStore(SubmissionRepository):
    """Fails the first ``failures`` appends, then behaves like a list."""

    def __init__(self, failures: int = 1) -> None:
        self.failures = failures
        self.records: list[SubmissionRecord] = []
        self.attempted: list[str] = []

    async def append(self, record: SubmissionRecord) -> None:
        self.attempted.append(record.submission_id)
        if self.failures > 0:
            self.failures -= 1
            raise StoreError("backend unavailable")
        self.records.append(record)

    async def list_all(self) -> list[SubmissionRecord]:
        return list(self.records)


def make_record(group_id: str, *answers: tuple[int, object]) -> SubmissionRecord:
    """Build a submission record from (question_id, value) pairs."""
    return SubmissionRecord(
        submission_id=str(uuid.uuid4()),
        group_id=group_id,
        answers=tuple(Answer(question_id=q, value=v) for q, v in answers),
        timestamp=datetime.now(timezone.utc),
    )


@pytest.fixture
def scale_question() -> Question:
    return Question(
        id=1,
        kind=QuestionKind.SCALE,
        prompt="How satisfied are you?",
        options=(ScaleOption(1, "A"), ScaleOption(2, "B")),
    )


@pytest.fixture
def text_question() -> Question:
    return Question(id=2, kind=QuestionKind.TEXT, prompt="Anything to add?", placeholder="...")


@pytest.fixture
def catalog(scale_question: Question, text_question: Question) -> list[Question]:
    return [scale_question, text_question]


@pytest.fixture
def session() -> SurveySession:
    return SurveySession(session_id=str(uuid.uuid4()))


@pytest.fixture
def machine(session: SurveySession, catalog: list[Question]) -> SurveyStateMachine:
    return SurveyStateMachine(session, catalog)


@pytest.fixture
def store() -> InMemorySubmissionRepository:
    return InMemorySubmissionRepository()


@pytest.fixture
def flaky_store() -> FlakyStore:
    return FlakyStore(failures=1)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Temporary data directory."""
    return tmp_path / "survey-data"


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    return Settings(
        storage=StorageSettings(backend="memory", data_path=str(data_dir)),
        survey=SurveySettings(title="Test Survey", intro_text="Welcome to the test."),
    )
