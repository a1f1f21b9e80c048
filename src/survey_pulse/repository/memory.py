"""In-process repository implementations."""

from dataclasses import replace
from typing import Iterable, Optional

from ..errors import NotFoundError
from ..models import Question, SubmissionRecord
from .base import QuestionRepository, SubmissionRepository, next_question_id


class InMemoryQuestionRepository(QuestionRepository):
    """List-backed question repository."""

    def __init__(self, questions: Iterable[Question] = ()):
        self.questions: list[Question] = list(questions)

    def _index_of(self, question_id: int) -> int:
        for index, question in enumerate(self.questions):
            if question.id == question_id:
                return index
        raise NotFoundError(question_id)

    async def list_all(self) -> list[Question]:
        return list(self.questions)

    async def get_by_id(self, question_id: int) -> Optional[Question]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    async def create(self, question: Question) -> Question:
        created = replace(question, id=next_question_id(self.questions))
        self.questions.append(created)
        return created

    async def update(self, question: Question) -> Question:
        self.questions[self._index_of(question.id)] = question
        return question

    async def delete(self, question_id: int) -> Question:
        return self.questions.pop(self._index_of(question_id))


class InMemorySubmissionRepository(SubmissionRepository):
    """List-backed submission store."""

    def __init__(self):
        self.records: list[SubmissionRecord] = []

    async def append(self, record: SubmissionRecord) -> None:
        self.records.append(record)

    async def list_all(self) -> list[SubmissionRecord]:
        return list(self.records)
