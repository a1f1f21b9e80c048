"""WebSocket server for Survey Pulse."""

import asyncio
import json
import logging
import uuid
from typing import Any, Optional, Sequence
from urllib.parse import parse_qs, urlsplit

from websockets.asyncio.server import serve, ServerConnection

from .aggregation import aggregate
from .config.settings import Settings
from .conversation import SurveyConversation
from .errors import StoreError
from .models import Question, SurveyPhase, SurveySession
from .repository.base import SubmissionRepository
from .state_machine import SurveyStateMachine

logger = logging.getLogger(__name__)

HTTP_REASONS = {200: "OK", 404: "Not Found", 405: "Method Not Allowed", 500: "Internal Server Error"}


def http_response(status: int, body: dict[str, Any]) -> bytes:
    """Encode a JSON HTTP/1.1 response."""
    content = json.dumps(body, ensure_ascii=False).encode("utf-8")
    head = (
        f"HTTP/1.1 {status} {HTTP_REASONS[status]}\r\n"
        "Content-Type: application/json\r\n"
        f"Content-Length: {len(content)}\r\n"
        "Connection: close\r\n"
        "\r\n"
    )
    return head.encode("ascii") + content


class SurveyServer:
    """WebSocket server running one survey conversation per connection.

    A small HTTP listener on a side port serves ``/health`` and ``/report``.
    """

    def __init__(
        self,
        settings: Settings,
        catalog: Sequence[Question],
        submission_repo: SubmissionRepository,
    ):
        self.settings = settings
        self.catalog = catalog
        self.submission_repo = submission_repo
        self.active_sessions: dict[str, SurveySession] = {}

    def create_conversation(self, session: SurveySession) -> SurveyConversation:
        machine = SurveyStateMachine(session, self.catalog)
        return SurveyConversation(machine, self.submission_repo, self.settings.survey)

    async def handle_connection(self, websocket: ServerConnection) -> None:
        """Handle a single WebSocket connection."""
        session_id = str(uuid.uuid4())
        session = SurveySession(session_id=session_id)
        self.active_sessions[session_id] = session
        prefix = f"[SESSION {session_id[:8]}]"

        logger.info("%s Respondent connected", prefix)

        try:
            conversation = self.create_conversation(session)
            await websocket.send(conversation.get_welcome_message())

            async for message in websocket:
                if isinstance(message, bytes):
                    message = message.decode("utf-8", errors="replace")
                # Log message receipt without exposing respondent content
                logger.debug("%s Received input (%d chars)", prefix, len(message))

                response = await conversation.process_input(message)

                if response:
                    await websocket.send(response)

                if session.phase is SurveyPhase.SUBMITTED:
                    await websocket.send(conversation.get_summary())
                    logger.info("%s Submitted - closing connection", prefix)
                    await websocket.close(1000, "Survey complete")
                    break

        except Exception:
            logger.exception("%s Connection failed", prefix)
        finally:
            del self.active_sessions[session_id]
            logger.info("%s Disconnected", prefix)

    async def build_report(self, group_filter: Optional[str] = None) -> dict[str, Any]:
        """Aggregate the current submissions into a JSON-ready report."""
        submissions = await self.submission_repo.list_all()
        return aggregate(submissions, self.catalog, group_filter).to_dict()

    async def route_http(self, method: str, target: str) -> bytes:
        """Produce the response for one HTTP request line."""
        url = urlsplit(target)
        if url.path not in ("/", "/health", "/report"):
            return http_response(404, {"error": "Not found"})
        if method != "GET":
            return http_response(405, {"error": "Method not allowed"})
        if url.path in ("/", "/health"):
            return http_response(200, {"status": "ok"})

        group = parse_qs(url.query).get("group", [None])[0]
        try:
            report = await self.build_report(group or None)
        except StoreError as e:
            logger.error("Report failed: %s", e)
            return http_response(500, {"error": "Failed to load survey data"})
        return http_response(200, report)

    async def _handle_http(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        """Handle HTTP health check and report requests."""
        try:
            request_line = (await reader.readline()).decode("latin-1").split()
            if len(request_line) < 2:
                response = http_response(404, {"error": "Not found"})
            else:
                response = await self.route_http(request_line[0], request_line[1])
            writer.write(response)
            await writer.drain()
        finally:
            writer.close()
            await writer.wait_closed()

    async def _start_http_server(self) -> asyncio.Server:
        """Start the HTTP health check and report server."""
        host = self.settings.server.host
        http_port = self.settings.server.http_port
        server = await asyncio.start_server(self._handle_http, host, http_port)
        logger.info("Health check on http://%s:%d/health, report on /report", host, http_port)
        return server

    async def start(self) -> None:
        """Start the WebSocket server and the HTTP endpoint."""
        host = self.settings.server.host
        port = self.settings.server.port

        logger.info("%s: WebSocket server on ws://%s:%d", self.settings.survey.title, host, port)
        logger.info("Serving %d questions, waiting for respondents...", len(self.catalog))

        http_server = await self._start_http_server()

        async with http_server, serve(self.handle_connection, host, port) as ws_server:
            await ws_server.serve_forever()
