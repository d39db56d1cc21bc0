"""Mapping between stored pies and editable drafts."""

from datetime import date, datetime

from pie_tracker.domain.errors import ValidationError
from pie_tracker.domain.pies import MAX_RATING, MIN_RATING, PieDraft, PieRecord


def parse_date_eaten(value: date | datetime | str) -> date:
    """Parse a draft date value into a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            return datetime.fromisoformat(text).date()
    raise ValueError(f"Unsupported date value: {value!r}")


def to_draft(record: PieRecord) -> PieDraft:
    """Copy a stored pie into editable draft values."""
    return PieDraft(
        name=record.name,
        flavor=record.flavor,
        location=record.location,
        rating=record.rating,
        date_eaten=record.date_eaten,
        notes=record.notes,
    )


def from_draft(draft: PieDraft) -> dict[str, object]:
    """Build a store payload from a draft, normalising the date to YYYY-MM-DD."""
    if draft.date_eaten is None:
        raise ValueError("date_eaten is required")
    return {
        "name": draft.name,
        "flavor": draft.flavor,
        "location": draft.location,
        "rating": draft.rating,
        "date_eaten": parse_date_eaten(draft.date_eaten).isoformat(),
        "notes": draft.notes,
    }


def apply_payload(pie_id: str, payload: dict[str, object]) -> PieRecord:
    """Build a stored pie from an id and a store payload.

    Raises ValueError when the payload breaks the record invariants.
    """
    name = str(payload.get("name") or "")
    if not name.strip():
        raise ValueError(f"Pie {pie_id} has no name")
    rating = int(payload["rating"])
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValueError(f"Pie {pie_id} has rating {rating} outside 0-5")
    return PieRecord(
        id=pie_id,
        name=name,
        flavor=payload.get("flavor"),
        location=payload.get("location"),
        rating=rating,
        date_eaten=parse_date_eaten(payload["date_eaten"]),
        notes=payload.get("notes"),
    )


def validate_draft(draft: PieDraft) -> None:
    """Raise ValidationError naming every invalid field of a draft."""
    errors: dict[str, str] = {}
    if not (draft.name or "").strip():
        errors["name"] = "required"

    rating = draft.rating
    if rating is None:
        errors["rating"] = "required"
    elif isinstance(rating, bool) or not isinstance(rating, int):
        errors["rating"] = "must be a whole number"
    elif not MIN_RATING <= rating <= MAX_RATING:
        errors["rating"] = f"must be between {MIN_RATING} and {MAX_RATING}"

    if draft.date_eaten is None or draft.date_eaten == "":
        errors["date_eaten"] = "required"
    else:
        try:
            parse_date_eaten(draft.date_eaten)
        except ValueError:
            errors["date_eaten"] = "not a calendar date"

    if errors:
        raise ValidationError(errors)
