"""Text conversation flow driving a survey session."""

from .config.settings import SurveySettings
from .errors import ValidationError
from .models import Question, QuestionKind, SurveyPhase
from .repository.base import SubmissionRepository
from .state_machine import SurveyStateMachine


class SurveyConversation:
    """Turns free-text messages into state machine events and replies.

    Scale questions are answered with the option value, text questions with
    any text. Once every question is answered the respondent sends ``submit``.
    """

    SUBMIT_COMMAND = "submit"

    def __init__(
        self,
        machine: SurveyStateMachine,
        store: SubmissionRepository,
        survey: SurveySettings,
    ):
        self.machine = machine
        self.store = store
        self.survey = survey

    def get_welcome_message(self) -> str:
        """Get the greeting that asks for the group ID."""
        return f"""\
=== {self.survey.title} ===

Please enter your group ID (for example: Team A) to begin:"""

    async def process_input(self, message: str) -> str:
        """Process respondent input based on current phase."""
        match self.machine.phase:
            case SurveyPhase.UNSTARTED:
                return self._handle_group_input(message)
            case SurveyPhase.INTRO:
                return self._handle_intro_input()
            case SurveyPhase.IN_PROGRESS:
                return self._handle_answer_input(message)
            case SurveyPhase.COMPLETED:
                return await self._handle_submit_input(message)
            case _:
                return "Session error. Please reconnect."

    def _handle_group_input(self, message: str) -> str:
        result = self.machine.start(message.strip())
        if not result.ok:
            return "Group ID cannot be empty. Please enter your group ID:"
        return f"""\
Group ID: {self.machine.session.group_id}

{self.survey.intro_text}

Send any message to start."""

    def _handle_intro_input(self) -> str:
        self.machine.acknowledge()
        return self.render_question(self.machine.current_question)

    def _handle_answer_input(self, message: str) -> str:
        question = self.machine.current_question
        self.machine.record_answer(self._parse_answer(question, message))

        result = self.machine.advance()
        if isinstance(result.error, ValidationError):
            return f"""\
[ERROR: {self._validation_hint(question)}]

{self.render_question(question)}"""

        if self.machine.phase is SurveyPhase.COMPLETED:
            return f"""\
Response recorded.

All questions answered. Send '{self.SUBMIT_COMMAND}' to send your answers."""

        return f"""\
Response recorded.

{self.render_question(self.machine.current_question)}"""

    async def _handle_submit_input(self, message: str) -> str:
        if message.strip().lower() != self.SUBMIT_COMMAND:
            return f"Send '{self.SUBMIT_COMMAND}' to send your answers."

        result = await self.machine.submit(self.store)
        if not result.ok:
            return f"""\
[ERROR: Your answers could not be saved.]

Send '{self.SUBMIT_COMMAND}' to try again."""
        return ""  # Summary is sent separately

    @staticmethod
    def _parse_answer(question: Question, message: str):
        if question.kind is QuestionKind.SCALE:
            try:
                return int(message.strip())
            except ValueError:
                return message
        # text answers are stored exactly as sent
        return message

    @staticmethod
    def _validation_hint(question: Question) -> str:
        if question.kind is QuestionKind.SCALE:
            values = ", ".join(str(option.value) for option in question.options)
            return f"Invalid response. Please answer with one of: {values}."
        return "Please enter an answer."

    def render_question(self, question: Question) -> str:
        """Format a question with its progress line."""
        index = self.machine.session.current_index
        total = len(self.machine.catalog)
        lines = [
            f"Question {index + 1} of {total} ({self.machine.progress_percent}%)",
            question.prompt,
        ]
        if question.kind is QuestionKind.SCALE:
            lines.extend(f"  {option.value}) {option.label}" for option in question.options)
        elif question.placeholder:
            lines.append(f"  ({question.placeholder})")
        return "\n".join(lines)

    def get_summary(self) -> str:
        """Get the summary of all answers."""
        session = self.machine.session
        lines = [
            "",
            "=== Survey Complete ===",
            "",
            f"Group ID: {session.group_id}",
            "",
            "Summary of your responses:",
            "",
        ]

        for i, question in enumerate(self.machine.catalog):
            answer = session.answers.get(question.id)
            if answer is None:
                continue
            shown = answer.value
            option = question.option_for(answer.value)
            if option is not None:
                shown = option.label
            lines.append(f"Q{i + 1}: {question.prompt}")
            lines.append(f"    Your answer: {shown}")
            lines.append("")

        lines.extend([
            "Thank you for taking part!",
            "",
            "[Connection will now close]",
        ])

        return "\n".join(lines)
