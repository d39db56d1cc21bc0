"""Domain models for pie-eating events."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

FLAVOR_SUGGESTIONS = (
    "Classic",
    "Caramel Apple",
    "Cinnamon",
    "Dutch Apple",
    "French Apple",
    "Apple Crumb",
    "Other",
)

MIN_RATING = 0
MAX_RATING = 5


@dataclass(frozen=True)
class PieRecord:
    """A stored pie-eating event."""

    id: str
    name: str
    flavor: str | None
    location: str | None
    rating: int
    date_eaten: date
    notes: str | None


@dataclass(frozen=True)
class PieDraft:
    """Editable field values for a pie that is not persisted yet."""

    name: str = ""
    flavor: str | None = None
    location: str | None = None
    rating: int | None = None
    date_eaten: date | datetime | str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class PieStats:
    """Aggregate metrics over the pie collection."""

    total_count: int
    average_rating: float
    top_location: str


class SessionState(str, Enum):
    """Whether the add/edit form is open."""

    CLOSED = "CLOSED"
    DRAFTING = "DRAFTING"


@dataclass(frozen=True)
class EditSession:
    """Tracks which pie, if any, is being created or edited."""

    state: SessionState = SessionState.CLOSED
    target_id: str | None = None
    draft: PieDraft | None = None

    @classmethod
    def closed(cls) -> "EditSession":
        return cls()

    @classmethod
    def drafting(cls, target_id: str | None, draft: PieDraft) -> "EditSession":
        return cls(state=SessionState.DRAFTING, target_id=target_id, draft=draft)

    @property
    def is_open(self) -> bool:
        return self.state is SessionState.DRAFTING

    @property
    def is_creating(self) -> bool:
        return self.is_open and self.target_id is None


@dataclass(frozen=True)
class Notice:
    """User-visible message queued for the presentation layer."""

    level: str
    message: str
