"""Statistics over the pie collection."""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from pie_tracker.domain.pies import PieRecord, PieStats

NO_LOCATION = "None"
_ONE_DECIMAL = Decimal("0.1")


def compute_stats(pies: Iterable[PieRecord] | None) -> PieStats:
    """Return count, average rating and favorite location for a collection."""
    records = list(pies or [])
    return PieStats(
        total_count=len(records),
        average_rating=_average_rating(records),
        top_location=_top_location(records),
    )


def _average_rating(records: list[PieRecord]) -> float:
    if not records:
        return 0.0
    total = sum(record.rating for record in records)
    mean = Decimal(total) / Decimal(len(records))
    return float(mean.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def _top_location(records: list[PieRecord]) -> str:
    """Most frequent location; ties go to the earliest first appearance."""
    counts: dict[str, int] = {}
    first_seen: list[str] = []
    for record in records:
        location = record.location or ""
        if location not in counts:
            counts[location] = 0
            first_seen.append(location)
        counts[location] += 1

    if not first_seen:
        return NO_LOCATION
    top = first_seen[0]
    for location in first_seen[1:]:
        if counts[location] > counts[top]:
            top = location
    return top
