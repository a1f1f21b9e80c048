"""Local JSON file repository implementation."""

import asyncio
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional, Union

import aiofiles

from ..errors import NotFoundError, StoreError, ValidationError
from ..models import Question, SubmissionRecord
from ..validation import parse_question_payload, parse_submission_payload
from .base import QuestionRepository, SubmissionRepository, next_question_id

logger = logging.getLogger(__name__)


class JsonArrayFile:
    """A JSON array kept in one file, rewritten whole on every change.

    Writers hold ``lock`` across read-modify-write so concurrent changes in
    this process are not lost.
    """

    def __init__(self, file_path: Path):
        self.file_path = file_path
        self.lock = asyncio.Lock()

    async def read_all(self) -> list[dict]:
        """Read all items from file."""
        if not self.file_path.exists():
            return []
        try:
            async with aiofiles.open(self.file_path, "r", encoding="utf-8") as f:
                content = await f.read()
            data = json.loads(content) if content else []
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Failed to read {self.file_path}: {e}") from e
        if not isinstance(data, list):
            raise StoreError(f"Failed to read {self.file_path}: expected a JSON array")
        return data

    async def write_all(self, data: list[dict]) -> None:
        """Write all items to file."""
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(self.file_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(data, indent=2, ensure_ascii=False))
        except OSError as e:
            raise StoreError(f"Failed to write {self.file_path}: {e}") from e


class LocalQuestionRepository(QuestionRepository):
    """JSON file-based question catalog."""

    def __init__(self, data_path: Union[str, Path]):
        self.file = JsonArrayFile(Path(data_path) / "survey_questions.json")

    def _to_models(self, data: list[dict]) -> list[Question]:
        questions = []
        for item in data:
            try:
                questions.append(parse_question_payload(item))
            except ValidationError as e:
                logger.warning("Skipping invalid question in %s: %s", self.file.file_path, e)
        return questions

    async def list_all(self) -> list[Question]:
        """Get all questions in catalog order."""
        return self._to_models(await self.file.read_all())

    async def get_by_id(self, question_id: int) -> Optional[Question]:
        """Get a question by ID."""
        for question in await self.list_all():
            if question.id == question_id:
                return question
        return None

    async def create(self, question: Question) -> Question:
        """Append a question with the next free ID."""
        async with self.file.lock:
            data = await self.file.read_all()
            created = replace(question, id=next_question_id(self._to_models(data)))
            data.append(created.to_dict())
            await self.file.write_all(data)
        logger.info("Created question %d", created.id)
        return created

    async def update(self, question: Question) -> Question:
        """Replace the stored question with the same ID."""
        async with self.file.lock:
            data = await self.file.read_all()
            for index, item in enumerate(data):
                if isinstance(item, dict) and item.get("id") == question.id:
                    data[index] = question.to_dict()
                    break
            else:
                raise NotFoundError(question.id)
            await self.file.write_all(data)
        logger.info("Updated question %d", question.id)
        return question

    async def delete(self, question_id: int) -> Question:
        """Remove a question and return it."""
        async with self.file.lock:
            data = await self.file.read_all()
            for index, item in enumerate(data):
                if isinstance(item, dict) and item.get("id") == question_id:
                    deleted = data.pop(index)
                    break
            else:
                raise NotFoundError(question_id)
            await self.file.write_all(data)
        logger.info("Deleted question %d", question_id)
        return parse_question_payload(deleted)


class LocalSubmissionRepository(SubmissionRepository):
    """JSON file-based submission store."""

    def __init__(self, data_path: Union[str, Path]):
        self.file = JsonArrayFile(Path(data_path) / "survey_submissions.json")

    def _to_model(self, data: dict) -> Optional[SubmissionRecord]:
        """Convert a stored payload to a SubmissionRecord."""
        try:
            return parse_submission_payload(data)
        except ValidationError as e:
            logger.warning("Skipping invalid submission in %s: %s", self.file.file_path, e)
            return None

    async def append(self, record: SubmissionRecord) -> None:
        """Append a submission record."""
        async with self.file.lock:
            data = await self.file.read_all()
            data.append(record.to_payload())
            await self.file.write_all(data)
        logger.info(
            "Recorded submission %s for group %r (%d answers)",
            record.submission_id,
            record.group_id,
            len(record.answers),
        )

    async def list_all(self) -> list[SubmissionRecord]:
        """Get every stored submission."""
        records = (self._to_model(item) for item in await self.file.read_all())
        return [record for record in records if record is not None]
