"""Pie collection manager: loads pies, drives the edit session, saves drafts."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Generic, Protocol, TypeVar

from pie_tracker.domain.errors import (
    LoadError,
    NotFoundError,
    SaveError,
    SessionStateError,
)
from pie_tracker.domain.pies import (
    MAX_RATING,
    EditSession,
    Notice,
    PieDraft,
    PieRecord,
    PieStats,
)
from pie_tracker.services.drafts import from_draft, to_draft, validate_draft
from pie_tracker.services.stats import compute_stats

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Terminal outcome of a store request."""

    success: bool
    data: T | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: T) -> "StoreResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, error: str) -> "StoreResult[T]":
        return cls(success=False, error=error)


class PieStore(Protocol):
    """Persistence interface for pie records."""

    async def list_pies(self) -> StoreResult[list[PieRecord]]:
        """Return every stored pie."""

    async def create_pie(self, payload: dict[str, object]) -> StoreResult[PieRecord]:
        """Create a pie and return it with its assigned id."""

    async def update_pie(
        self, pie_id: str, payload: dict[str, object]
    ) -> StoreResult[PieRecord]:
        """Replace every field of an existing pie and return it."""


@dataclass(frozen=True)
class PieView:
    """Snapshot of everything the presentation layer renders."""

    records: tuple[PieRecord, ...]
    stats: PieStats
    session: EditSession
    loading: bool
    submitting: bool


@dataclass
class PieCollectionService:
    """Single owner of the pie collection and the add/edit workflow."""

    store: PieStore
    today: Callable[[], date] = date.today
    records: tuple[PieRecord, ...] = ()
    session: EditSession = field(default_factory=EditSession.closed)
    loading: bool = False
    submitting: bool = False
    notices: list[Notice] = field(default_factory=list)

    async def start(self) -> None:
        """Load the collection once at startup."""
        try:
            await self.load_all()
        except LoadError:
            _logger.warning("Initial pie load failed; starting with an empty list")

    async def load_all(self) -> tuple[PieRecord, ...]:
        """Replace the collection with the store's current contents."""
        self.loading = True
        try:
            try:
                result = await self.store.list_pies()
            except Exception as exc:
                _logger.exception("Pie store raised while listing pies")
                self._notify("warning", "Failed to load apple pies")
                raise LoadError("Failed to load apple pies") from exc
            if not result.success:
                _logger.warning("Pie store list failed: %s", result.error)
                self._notify("warning", "Failed to load apple pies")
                raise LoadError(result.error or "Failed to load apple pies")
            self.records = tuple(result.data or [])
            return self.records
        finally:
            self.loading = False

    def begin_create(self) -> EditSession:
        """Open the form for a new pie with default values."""
        self._ensure_idle("open a new pie")
        draft = PieDraft(rating=MAX_RATING, date_eaten=self.today())
        self.session = EditSession.drafting(None, draft)
        return self.session

    def begin_edit(self, pie_id: str) -> EditSession:
        """Open the form pre-filled from an existing pie."""
        self._ensure_idle("edit a pie")
        record = self.get(pie_id)
        if record is None:
            self._notify("error", "That pie is no longer in your collection")
            raise NotFoundError(pie_id)
        self.session = EditSession.drafting(pie_id, to_draft(record))
        return self.session

    def cancel(self) -> EditSession:
        """Close the form and discard the draft."""
        self._ensure_idle("cancel")
        self.session = EditSession.closed()
        return self.session

    async def submit(self, draft: PieDraft) -> PieRecord:
        """Validate and save a draft, then refresh the collection."""
        if not self.session.is_open:
            raise SessionStateError("No pie form is open")
        if self.submitting:
            raise SessionStateError("A save is already in progress")

        target_id = self.session.target_id
        self.session = EditSession.drafting(target_id, draft)
        validate_draft(draft)

        payload = from_draft(draft)
        self.submitting = True
        try:
            saved = await self._save(target_id, payload)
        finally:
            self.submitting = False

        self.session = EditSession.closed()
        if target_id is None:
            _logger.info("Pie created: id=%s", saved.id)
            self._notify("success", "Pie added successfully!")
        else:
            _logger.info("Pie updated: id=%s", saved.id)
            self._notify("success", "Pie updated successfully!")

        try:
            await self.load_all()
        except LoadError:
            _logger.warning("Reload after saving pie %s failed", saved.id)
        return saved

    def get(self, pie_id: str) -> PieRecord | None:
        """Return a pie from the current collection, if present."""
        for record in self.records:
            if record.id == pie_id:
                return record
        return None

    def stats(self) -> PieStats:
        """Return aggregate metrics for the current collection."""
        return compute_stats(self.records)

    def view(self) -> PieView:
        """Return a snapshot of the collection, metrics and session."""
        return PieView(
            records=self.records,
            stats=self.stats(),
            session=self.session,
            loading=self.loading,
            submitting=self.submitting,
        )

    def drain_notices(self) -> list[Notice]:
        """Return queued notices and clear the queue."""
        notices, self.notices = self.notices, []
        return notices

    async def _save(
        self, target_id: str | None, payload: dict[str, object]
    ) -> PieRecord:
        try:
            if target_id is None:
                result = await self.store.create_pie(payload)
            else:
                result = await self.store.update_pie(target_id, payload)
        except Exception as exc:
            _logger.exception("Pie store raised while saving pie %s", target_id)
            self._notify("error", "Failed to save pie")
            raise SaveError("Failed to save pie") from exc
        if not result.success or result.data is None:
            _logger.warning(
                "Pie store save failed for %s: %s", target_id, result.error
            )
            self._notify("error", "Failed to save pie")
            raise SaveError(result.error or "Failed to save pie")
        return result.data

    def _ensure_idle(self, action: str) -> None:
        if self.submitting:
            raise SessionStateError(f"Cannot {action} while a save is in progress")

    def _notify(self, level: str, message: str) -> None:
        self.notices.append(Notice(level=level, message=message))
