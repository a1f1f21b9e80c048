"""Repository layer for data access."""

from .base import QuestionRepository, SubmissionRepository
from .factory import create_repositories
from .local import LocalQuestionRepository, LocalSubmissionRepository
from .memory import InMemoryQuestionRepository, InMemorySubmissionRepository

__all__ = [
    "QuestionRepository",
    "SubmissionRepository",
    "create_repositories",
    "LocalQuestionRepository",
    "LocalSubmissionRepository",
    "InMemoryQuestionRepository",
    "InMemorySubmissionRepository",
]
