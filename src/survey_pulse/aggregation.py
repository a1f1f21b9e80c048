"""Aggregation of submission records into per-question reports."""

from collections import defaultdict
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional, Sequence, Union

from .models import AnswerValue, Question, QuestionKind, SubmissionRecord


@dataclass(frozen=True)
class OptionTally:
    """How many submissions chose one scale option."""
    value: int
    label: str
    count: int
    percentage: float


@dataclass(frozen=True)
class ScaleResult:
    """Tallies for a scale question, in declared option order."""
    question_id: int
    prompt: str
    options: tuple[OptionTally, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "questionId": self.question_id,
            "type": QuestionKind.SCALE.value,
            "text": self.prompt,
            "options": [
                {
                    "value": tally.value,
                    "label": tally.label,
                    "count": tally.count,
                    "percentage": tally.percentage,
                }
                for tally in self.options
            ],
        }


@dataclass(frozen=True)
class TextResult:
    """Non-blank free-text answers, in submission order."""
    question_id: int
    prompt: str
    answers: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "questionId": self.question_id,
            "type": QuestionKind.TEXT.value,
            "text": self.prompt,
            "answers": list(self.answers),
            "answerCount": len(self.answers),
        }


QuestionResult = Union[ScaleResult, TextResult]


@dataclass(frozen=True)
class Report:
    """Aggregated results over one snapshot of submissions."""
    group_filter: Optional[str]
    total: int
    results: tuple[QuestionResult, ...]
    group_ids: tuple[str, ...] = ()

    def result_for(self, question_id: int) -> Optional[QuestionResult]:
        for result in self.results:
            if result.question_id == question_id:
                return result
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "groupFilter": self.group_filter,
            "total": self.total,
            "groupIds": list(self.group_ids),
            "results": [result.to_dict() for result in self.results],
        }


def list_group_ids(submissions: Iterable[SubmissionRecord]) -> list[str]:
    """Distinct group ids, sorted."""
    return sorted({record.group_id for record in submissions})


def percentage(count: int, total: int) -> float:
    """Share of ``total`` as a percentage, one decimal, halves rounded up."""
    if total == 0:
        return 0.0
    share = Decimal(count) * 100 / Decimal(total)
    return float(share.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _tally_scale(question: Question, values: list[AnswerValue], total: int) -> ScaleResult:
    counts = {option.value: 0 for option in question.options}
    for value in values:
        option = question.option_for(value)
        # values matching no option are ignored
        if option is not None:
            counts[option.value] += 1
    return ScaleResult(
        question_id=question.id,
        prompt=question.prompt,
        options=tuple(
            OptionTally(
                value=option.value,
                label=option.label,
                count=counts[option.value],
                percentage=percentage(counts[option.value], total),
            )
            for option in question.options
        ),
    )


def _collect_text(question: Question, values: list[AnswerValue]) -> TextResult:
    return TextResult(
        question_id=question.id,
        prompt=question.prompt,
        answers=tuple(
            value for value in values if isinstance(value, str) and value.strip()
        ),
    )


def aggregate(
    submissions: Sequence[SubmissionRecord],
    catalog: Sequence[Question],
    group_filter: Optional[str] = None,
) -> Report:
    """Reduce submissions to per-question statistics.

    Every scale percentage uses the number of selected submissions as its
    denominator, whether or not each of them answered that question. Answers
    to questions missing from the catalog, and scale values matching no
    option, are skipped rather than treated as errors, so editing the catalog
    never breaks reports on older data.

    Args:
        submissions: Snapshot of submission records, in submission order.
        catalog: Questions to report on, in display order.
        group_filter: If given, only submissions whose group id equals it
            exactly are counted.
    """
    selected = [
        record for record in submissions
        if group_filter is None or record.group_id == group_filter
    ]

    values_by_question: dict[int, list[AnswerValue]] = defaultdict(list)
    for record in selected:
        for answer in record.answers:
            values_by_question[answer.question_id].append(answer.value)

    total = len(selected)
    results: list[QuestionResult] = []
    for question in catalog:
        values = values_by_question.get(question.id, [])
        match question.kind:
            case QuestionKind.SCALE:
                results.append(_tally_scale(question, values, total))
            case QuestionKind.TEXT:
                results.append(_collect_text(question, values))

    return Report(
        group_filter=group_filter,
        total=total,
        results=tuple(results),
        group_ids=tuple(list_group_ids(submissions)),
    )


def format_report(report: Report) -> str:
    """Render a report as plain text."""
    scope = report.group_filter if report.group_filter is not None else "all groups"
    lines = [
        "=" * 50,
        f"SURVEY RESULTS ({scope})",
        "=" * 50,
        f"Total submissions: {report.total}",
        f"Groups: {len(report.group_ids)}",
    ]

    if report.total == 0:
        lines.extend(["", "No submissions yet."])

    for result in report.results:
        lines.extend(["", result.prompt])
        if isinstance(result, ScaleResult):
            for tally in result.options:
                lines.append(f"  {tally.label}: {tally.count} ({tally.percentage:.1f}%)")
        else:
            if not result.answers:
                lines.append("  (no answers)")
            for answer in result.answers:
                lines.append(f"  - {answer}")
            lines.append(f"  Answers: {len(result.answers)}")

    return "\n".join(lines)
