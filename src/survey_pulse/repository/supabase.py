"""Supabase repository implementation."""

import logging
from typing import Optional

from supabase import create_client, Client

from ..errors import StoreError, ValidationError
from ..models import SubmissionRecord
from ..validation import parse_submission_payload
from .base import SubmissionRepository

logger = logging.getLogger(__name__)


class SupabaseClientManager:
    """Manages Supabase client lifecycle."""

    def __init__(self, url: str, key: str):
        self.url = url
        self.key = key
        self._client: Optional[Client] = None

    def get_client(self) -> Client:
        """Get or create Supabase client."""
        if self._client is None:
            self._client = create_client(self.url, self.key)
        return self._client


class SupabaseSubmissionRepository(SubmissionRepository):
    """Supabase-backed submission store."""

    def __init__(self, client_manager: SupabaseClientManager, table: str = "survey_submissions"):
        self.client_manager = client_manager
        self.table = table

    def _to_model(self, data: dict) -> Optional[SubmissionRecord]:
        """Convert Supabase row to SubmissionRecord model."""
        try:
            return parse_submission_payload({
                "submissionId": data.get("submission_id"),
                "groupId": data.get("group_id"),
                "answers": data.get("answers"),
                "timestamp": data.get("created_at"),
            })
        except ValidationError as e:
            logger.warning("Skipping invalid row in %s: %s", self.table, e)
            return None

    def _to_models(self, rows: list[dict]) -> list[SubmissionRecord]:
        records = (self._to_model(row) for row in rows)
        return [record for record in records if record is not None]

    async def append(self, record: SubmissionRecord) -> None:
        """Insert a submission row."""
        payload = record.to_payload()
        try:
            client = self.client_manager.get_client()
            client.table(self.table).insert({
                "submission_id": record.submission_id,
                "group_id": record.group_id,
                "answers": payload["answers"],
                "created_at": payload["timestamp"],
            }).execute()
        except Exception as e:
            logger.error("Supabase insert into %s failed: %s", self.table, e)
            raise StoreError("Failed to save survey data to database") from e
        logger.info(
            "Recorded submission %s for group %r (Supabase)",
            record.submission_id,
            record.group_id,
        )

    async def list_all(self) -> list[SubmissionRecord]:
        """Get all submissions, oldest first."""
        try:
            client = self.client_manager.get_client()
            response = client.table(self.table).select("*").order("created_at").execute()
        except Exception as e:
            raise StoreError("Failed to load survey data from database") from e
        return self._to_models(response.data)

    async def list_by_group(self, group_id: str) -> list[SubmissionRecord]:
        """Get the submissions of one group, oldest first."""
        try:
            client = self.client_manager.get_client()
            response = (
                client.table(self.table)
                .select("*")
                .eq("group_id", group_id)
                .order("created_at")
                .execute()
            )
        except Exception as e:
            raise StoreError("Failed to load survey data from database") from e
        return self._to_models(response.data)
