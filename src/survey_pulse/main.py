"""Entry points for the Survey Pulse server, report and question CLIs."""

import argparse
import asyncio
import json
import logging
from typing import Any, Optional

from dotenv import load_dotenv

from .aggregation import aggregate, format_report
from .catalog import load_catalog
from .config.settings import Settings
from .errors import SurveyError, ValidationError
from .logging_config import setup_logging
from .models import Question, QuestionKind
from .repository import create_repositories
from .repository.base import next_question_id
from .server import SurveyServer
from .validation import parse_question_payload

logger = logging.getLogger(__name__)


def _load_settings() -> Settings:
    # Load environment variables
    load_dotenv()
    settings = Settings()
    setup_logging(settings.logging.level, settings.logging.json_logs)
    return settings


async def _run_server(settings: Settings) -> None:
    question_repo, submission_repo = create_repositories(settings)
    catalog = await load_catalog(question_repo)
    server = SurveyServer(
        settings=settings,
        catalog=catalog,
        submission_repo=submission_repo,
    )
    await server.start()


def main() -> None:
    """Start the Survey Pulse server."""
    settings = _load_settings()
    try:
        asyncio.run(_run_server(settings))
    except KeyboardInterrupt:
        logger.info("Server shutdown.")


async def _build_report(settings: Settings, group: Optional[str]):
    question_repo, submission_repo = create_repositories(settings)
    catalog = await load_catalog(question_repo)
    submissions = await submission_repo.list_all()
    return aggregate(submissions, catalog, group)


def report_main(argv: Optional[list[str]] = None) -> int:
    """Print the aggregated survey report."""
    parser = argparse.ArgumentParser(description="Print aggregated survey results.")
    parser.add_argument("--group", help="only count submissions from this group ID")
    parser.add_argument("--json", action="store_true", help="print the report as JSON")
    args = parser.parse_args(argv)

    settings = _load_settings()
    try:
        report = asyncio.run(_build_report(settings, args.group))
    except SurveyError as e:
        logger.error("Could not build report: %s", e)
        return 1

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(format_report(report))
    return 0


async def _list_questions(settings: Settings) -> list[Question]:
    question_repo, _ = create_repositories(settings)
    return await question_repo.list_all()


async def _add_question(settings: Settings, data: Any) -> Question:
    question_repo, _ = create_repositories(settings)
    next_id = next_question_id(await question_repo.list_all())
    return await question_repo.create(parse_question_payload(data, assign_id=next_id))


async def _update_question(settings: Settings, data: Any) -> Question:
    question_repo, _ = create_repositories(settings)
    return await question_repo.update(parse_question_payload(data))


async def _delete_question(settings: Settings, question_id: int) -> Question:
    question_repo, _ = create_repositories(settings)
    return await question_repo.delete(question_id)


def _question_line(question: Question) -> str:
    line = f"{question.id}: [{question.kind.value}] {question.prompt}"
    if question.kind is QuestionKind.SCALE:
        values = ", ".join(f"{o.value}={o.label}" for o in question.options)
        line += f" ({values})"
    return line


def questions_main(argv: Optional[list[str]] = None) -> int:
    """Manage the question catalog."""
    parser = argparse.ArgumentParser(description="Manage survey questions.")
    commands = parser.add_subparsers(dest="command", required=True)
    list_parser = commands.add_parser("list", help="show the stored questions")
    list_parser.add_argument("--json", action="store_true", help="print questions as JSON")
    add_parser = commands.add_parser("add", help="add a question from a JSON definition")
    add_parser.add_argument("definition", help='e.g. \'{"type": "text_input", "text": "Why?"}\'')
    update_parser = commands.add_parser("update", help="replace a question by its id")
    update_parser.add_argument("definition", help="JSON definition including the id")
    delete_parser = commands.add_parser("delete", help="remove a question")
    delete_parser.add_argument("id", type=int)
    args = parser.parse_args(argv)

    settings = _load_settings()
    try:
        match args.command:
            case "list":
                questions = asyncio.run(_list_questions(settings))
                if args.json:
                    print(json.dumps([q.to_dict() for q in questions], indent=2, ensure_ascii=False))
                elif not questions:
                    print("No questions stored; the default catalog is served.")
                else:
                    for question in questions:
                        print(_question_line(question))
            case "add":
                question = asyncio.run(_add_question(settings, _parse_definition(args.definition)))
                print(f"Added {_question_line(question)}")
            case "update":
                question = asyncio.run(_update_question(settings, _parse_definition(args.definition)))
                print(f"Updated {_question_line(question)}")
            case "delete":
                question = asyncio.run(_delete_question(settings, args.id))
                print(f"Deleted {_question_line(question)}")
    except SurveyError as e:
        logger.error("Question %s failed: %s", args.command, e)
        return 1
    return 0


def _parse_definition(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        raise ValidationError("body", "Question definition must be valid JSON") from None


if __name__ == "__main__":
    main()
