"""Tests for draft mapping and validation."""

from datetime import date, datetime

import pytest

from pie_tracker.domain.errors import ValidationError
from pie_tracker.domain.pies import PieDraft, PieRecord
from pie_tracker.services.drafts import (
    apply_payload,
    from_draft,
    parse_date_eaten,
    to_draft,
    validate_draft,
)


def _record(**overrides: object) -> PieRecord:
    fields = {
        "id": "pie-1",
        "name": "Grandma's best",
        "flavor": "Dutch Apple",
        "location": "Grandma's kitchen",
        "rating": 5,
        "date_eaten": date(2023, 11, 23),
        "notes": "Still warm",
    }
    fields.update(overrides)
    return PieRecord(**fields)


@pytest.mark.parametrize(
    "record",
    [
        _record(),
        _record(flavor=None, location=None, notes=None, rating=0),
        _record(flavor="Rhubarb swirl", date_eaten=date(2024, 2, 29)),
    ],
)
def test_draft_round_trip_preserves_record(record: PieRecord) -> None:
    payload = from_draft(to_draft(record))

    assert apply_payload(record.id, payload) == record


def test_to_draft_keeps_date_as_calendar_date() -> None:
    draft = to_draft(_record())

    assert draft.date_eaten == date(2023, 11, 23)


@pytest.mark.parametrize(
    "value",
    [
        date(2024, 5, 1),
        datetime(2024, 5, 1, 18, 30),
        "2024-05-01",
        "2024-05-01T18:30:00",
        " 2024-05-01 ",
    ],
)
def test_from_draft_normalises_date(value: object) -> None:
    draft = PieDraft(name="Pie", rating=3, date_eaten=value)

    assert from_draft(draft)["date_eaten"] == "2024-05-01"


def test_parse_date_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_date_eaten("last tuesday")


def test_validate_accepts_complete_draft() -> None:
    validate_draft(PieDraft(name="Pie", rating=0, date_eaten="2024-05-01"))


def test_validate_names_every_bad_field() -> None:
    draft = PieDraft(name="   ", rating=7, date_eaten="not-a-date")

    with pytest.raises(ValidationError) as excinfo:
        validate_draft(draft)

    assert set(excinfo.value.fields) == {"name", "rating", "date_eaten"}


def test_validate_requires_rating_and_date() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_draft(PieDraft(name="Pie"))

    assert excinfo.value.fields == {"rating": "required", "date_eaten": "required"}


def test_validate_rejects_boolean_rating() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_draft(PieDraft(name="Pie", rating=True, date_eaten="2024-05-01"))

    assert "rating" in excinfo.value.fields


@pytest.mark.parametrize(
    "overrides",
    [{"rating": 6}, {"rating": -1}, {"name": ""}, {"name": "  "}, {"name": None}],
)
def test_apply_payload_rejects_broken_records(overrides: dict[str, object]) -> None:
    payload = from_draft(to_draft(_record()))
    payload.update(overrides)

    with pytest.raises(ValueError):
        apply_payload("pie-1", payload)
