"""Repository factory."""

import logging
from pathlib import Path
from typing import Tuple

from ..config.settings import Settings
from .base import QuestionRepository, SubmissionRepository
from .local import LocalQuestionRepository, LocalSubmissionRepository
from .memory import InMemorySubmissionRepository
from .supabase import SupabaseClientManager, SupabaseSubmissionRepository

logger = logging.getLogger(__name__)


def create_repositories(settings: Settings) -> Tuple[QuestionRepository, SubmissionRepository]:
    """Create the question catalog and submission store for the configured backend.

    The question catalog always lives in the local data path; only submissions
    follow ``settings.storage.backend``.

    Args:
        settings: Application settings

    Returns:
        Tuple of (question_repo, submission_repo)

    Raises:
        ValueError: If the backend is unknown, or Supabase is selected but not configured
    """
    data_path = Path(settings.storage.data_path).expanduser().resolve()
    question_repo = LocalQuestionRepository(data_path)
    backend = settings.storage.backend.lower()

    match backend:
        case "local":
            submission_repo: SubmissionRepository = LocalSubmissionRepository(data_path)
        case "memory":
            submission_repo = InMemorySubmissionRepository()
        case "supabase":
            if not settings.supabase.is_configured:
                raise ValueError(
                    "SUPABASE_URL and SUPABASE_KEY must be set in environment"
                )
            client_manager = SupabaseClientManager(
                settings.supabase.url,
                settings.supabase.key,
            )
            submission_repo = SupabaseSubmissionRepository(client_manager, settings.supabase.table)
        case _:
            raise ValueError(f"Unknown storage backend: {settings.storage.backend}")

    logger.info("Using %s submission store, data path %s", backend, data_path)
    return question_repo, submission_repo
