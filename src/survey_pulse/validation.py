"""Answer rules and boundary payload validation."""

from datetime import datetime, timezone
from typing import Any, Optional

from .errors import ValidationError
from .models import Answer, Question, QuestionKind, ScaleOption, SubmissionRecord

SUBMISSION_FIELDS = ("submissionId", "groupId", "answers", "timestamp")


def answer_is_valid(question: Question, answer: Optional[Answer]) -> bool:
    """Check an answer against its question's type rule.

    Scale answers must equal one of the option values. Text answers must be
    non-empty once surrounding whitespace is removed; the stored value itself
    is never trimmed.
    """
    if answer is None:
        return False
    match question.kind:
        case QuestionKind.SCALE:
            return question.option_for(answer.value) is not None
        case QuestionKind.TEXT:
            return isinstance(answer.value, str) and len(answer.value.strip()) > 0
    return False


def is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _is_number(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _missing(data: dict, key: str) -> bool:
    return data.get(key) is None or data.get(key) == ""


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp. Naive values are taken as UTC."""
    if not isinstance(value, str):
        raise ValidationError("timestamp", "Timestamp must be an ISO-8601 string")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError("timestamp", "Timestamp must be an ISO-8601 string") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_submission_payload(data: Any) -> SubmissionRecord:
    """Validate a submission payload and build the record it describes.

    Raises:
        ValidationError: With a user-facing message naming what is wrong.
    """
    if not isinstance(data, dict):
        raise ValidationError("body", "Request body must be a JSON object")

    if any(_missing(data, key) for key in SUBMISSION_FIELDS):
        raise ValidationError(
            "body",
            "Missing required fields: submissionId, groupId, answers, or timestamp",
        )

    answers = data["answers"]
    if not isinstance(answers, list) or len(answers) == 0:
        raise ValidationError("answers", "Answers must be a non-empty array")

    if is_blank(data["groupId"]):
        raise ValidationError("groupId", "GroupId cannot be empty")

    if not isinstance(data["submissionId"], str):
        raise ValidationError("submissionId", "SubmissionId must be a string")

    parsed: list[Answer] = []
    seen: set[int] = set()
    for item in answers:
        if (
            not isinstance(item, dict)
            or not _is_number(item.get("questionId"))
            or not (isinstance(item.get("answer"), str) or _is_number(item.get("answer")))
        ):
            raise ValidationError(
                "answers",
                "Each answer must have a numeric questionId and a string or numeric answer",
            )
        question_id = item["questionId"]
        if question_id in seen:
            raise ValidationError("answers", f"Duplicate answer for question {question_id}")
        seen.add(question_id)
        parsed.append(Answer(question_id=question_id, value=item["answer"]))

    return SubmissionRecord(
        submission_id=data["submissionId"],
        group_id=data["groupId"],
        answers=tuple(parsed),
        timestamp=parse_timestamp(data["timestamp"]),
    )


def _parse_options(raw: Any) -> tuple[ScaleOption, ...]:
    if not isinstance(raw, list) or len(raw) == 0:
        raise ValidationError("options", "Emoji scale questions must have options")
    options = []
    for item in raw:
        if (
            not isinstance(item, dict)
            or not _is_number(item.get("value"))
            or not isinstance(item.get("text"), str)
        ):
            raise ValidationError("options", "Each option must have a numeric value and text")
        options.append(ScaleOption(value=item["value"], label=item["text"]))
    values = [option.value for option in options]
    if len(set(values)) != len(values):
        raise ValidationError("options", "Option values must be unique within a question")
    return tuple(options)


def parse_question_payload(data: Any, assign_id: Optional[int] = None) -> Question:
    """Validate a question definition payload.

    When ``assign_id`` is given (creating a question) the payload's own id is
    ignored; otherwise the payload must carry one.

    Raises:
        ValidationError: With a user-facing message naming what is wrong.
    """
    if not isinstance(data, dict):
        raise ValidationError("body", "Request body must be a JSON object")

    if assign_id is None:
        if not _is_number(data.get("id")) or _missing(data, "text") or _missing(data, "type"):
            raise ValidationError("body", "Missing required fields: id, text, and type")
        question_id = data["id"]
    else:
        if _missing(data, "text") or _missing(data, "type"):
            raise ValidationError("body", "Missing required fields: text and type")
        question_id = assign_id

    try:
        kind = QuestionKind(data["type"])
    except ValueError:
        raise ValidationError(
            "type", 'Invalid question type. Must be "emoji_scale" or "text_input"'
        ) from None

    if not isinstance(data["text"], str):
        raise ValidationError("text", "Question text must be a string")

    placeholder = data.get("placeholder")
    if placeholder is not None and not isinstance(placeholder, str):
        raise ValidationError("placeholder", "Placeholder must be a string")

    options: tuple[ScaleOption, ...] = ()
    if kind is QuestionKind.SCALE:
        options = _parse_options(data.get("options"))

    return Question(
        id=question_id,
        kind=kind,
        prompt=data["text"],
        options=options,
        placeholder=placeholder or None,
    )
