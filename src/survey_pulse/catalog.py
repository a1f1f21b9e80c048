"""Question catalog loading."""

import logging

from .models import Question, QuestionKind, ScaleOption
from .repository.base import QuestionRepository

logger = logging.getLogger(__name__)


def default_catalog() -> list[Question]:
    """The catalog used when no questions have been configured."""
    return [
        Question(
            id=1,
            kind=QuestionKind.SCALE,
            prompt="Overall, how satisfied are you at work?",
            options=(
                ScaleOption(1, "Very dissatisfied"),
                ScaleOption(2, "Dissatisfied"),
                ScaleOption(3, "Neutral"),
                ScaleOption(4, "Satisfied"),
                ScaleOption(5, "Very satisfied"),
            ),
        ),
        Question(
            id=2,
            kind=QuestionKind.TEXT,
            prompt="What could concretely improve communication within your team?",
            placeholder="Type your answer here...",
        ),
    ]


async def load_catalog(question_repo: QuestionRepository) -> list[Question]:
    """Load the catalog once for the whole process.

    The same list is handed to every survey session and to reporting so the
    two never disagree about which questions exist.
    """
    questions = await question_repo.list_all()
    if not questions:
        logger.warning("No questions configured, using the default catalog")
        return default_catalog()
    logger.info("Loaded %d questions", len(questions))
    return questions
