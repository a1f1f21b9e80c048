"""Abstract repository interfaces."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import Question, SubmissionRecord


class QuestionRepository(ABC):
    """Abstract interface for question catalog storage."""

    @abstractmethod
    async def list_all(self) -> list[Question]:
        """Get all questions in catalog order."""
        pass

    @abstractmethod
    async def get_by_id(self, question_id: int) -> Optional[Question]:
        """Get a question by ID."""
        pass

    @abstractmethod
    async def create(self, question: Question) -> Question:
        """Add a question, assigning it the next free ID.

        The ID carried by ``question`` is ignored.
        """
        pass

    @abstractmethod
    async def update(self, question: Question) -> Question:
        """Replace the question with the same ID.

        Raises:
            NotFoundError: If no question has that ID.
        """
        pass

    @abstractmethod
    async def delete(self, question_id: int) -> Question:
        """Remove a question and return it.

        Raises:
            NotFoundError: If no question has that ID.
        """
        pass


class SubmissionRepository(ABC):
    """Abstract interface for append-only submission storage.

    Implementations raise StoreError when the backend fails.
    """

    @abstractmethod
    async def append(self, record: SubmissionRecord) -> None:
        """Persist a submission record."""
        pass

    @abstractmethod
    async def list_all(self) -> list[SubmissionRecord]:
        """Get every submission in the order it was appended."""
        pass

    async def list_by_group(self, group_id: str) -> list[SubmissionRecord]:
        """Get the submissions of one group."""
        return [record for record in await self.list_all() if record.group_id == group_id]


def next_question_id(questions: list[Question]) -> int:
    """One more than the highest existing ID, or 1 for an empty catalog."""
    if not questions:
        return 1
    return max(question.id for question in questions) + 1
