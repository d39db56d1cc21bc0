"""Supabase implementation of the pie store."""

import logging
from dataclasses import dataclass

from supabase import Client, PostgrestAPIError

from pie_tracker.domain.pies import PieRecord
from pie_tracker.services.collection import PieStore, StoreResult
from pie_tracker.services.drafts import apply_payload

_logger = logging.getLogger(__name__)


@dataclass
class SupabasePieStore(PieStore):
    """Supabase-backed store for pie records."""

    client: Client
    table: str = "apple_pies"

    async def list_pies(self) -> StoreResult[list[PieRecord]]:
        """Return every stored pie."""
        try:
            response = self.client.table(self.table).select("*").execute()
        except PostgrestAPIError as exc:
            _logger.warning("Supabase list on %s failed: %s", self.table, exc)
            return StoreResult.failed(str(exc))
        try:
            return StoreResult.ok([_parse_pie(row) for row in response.data or []])
        except (KeyError, TypeError, ValueError) as exc:
            return _malformed(exc)

    async def create_pie(self, payload: dict[str, object]) -> StoreResult[PieRecord]:
        """Create a pie and return it with its assigned id."""
        try:
            response = self.client.table(self.table).insert(payload).execute()
        except PostgrestAPIError as exc:
            _logger.warning("Supabase insert on %s failed: %s", self.table, exc)
            return StoreResult.failed(str(exc))
        if not response.data:
            return StoreResult.failed("Failed to create pie")
        try:
            return StoreResult.ok(_parse_pie(response.data[0]))
        except (KeyError, TypeError, ValueError) as exc:
            return _malformed(exc)

    async def update_pie(
        self, pie_id: str, payload: dict[str, object]
    ) -> StoreResult[PieRecord]:
        """Replace every field of an existing pie and return it."""
        try:
            response = (
                self.client.table(self.table)
                .update(payload)
                .eq("id", pie_id)
                .execute()
            )
        except PostgrestAPIError as exc:
            _logger.warning("Supabase update on %s failed: %s", self.table, exc)
            return StoreResult.failed(str(exc))
        if not response.data:
            return StoreResult.failed(f"Pie {pie_id} not found")
        try:
            return StoreResult.ok(_parse_pie(response.data[0]))
        except (KeyError, TypeError, ValueError) as exc:
            return _malformed(exc)


def _malformed(exc: Exception) -> StoreResult:
    _logger.warning("Supabase returned a malformed pie row: %s", exc)
    return StoreResult.failed(f"Malformed pie record: {exc}")


def _parse_pie(row: dict[str, object]) -> PieRecord:
    """Parse a pie row into a domain model."""
    return apply_payload(str(row["id"]), row)
