"""Errors raised by the pie collection workflow."""


class PieTrackerError(Exception):
    """Base class for recoverable pie tracker failures."""


class LoadError(PieTrackerError):
    """The store could not list the pie collection."""


class ValidationError(PieTrackerError):
    """A draft failed local validation."""

    def __init__(self, fields: dict[str, str]) -> None:
        self.fields = fields
        details = ", ".join(f"{name} ({reason})" for name, reason in fields.items())
        super().__init__(f"Invalid draft: {details}")


class NotFoundError(PieTrackerError):
    """The requested pie is not in the current collection."""

    def __init__(self, pie_id: str) -> None:
        self.pie_id = pie_id
        super().__init__(f"Pie {pie_id} not found")


class SaveError(PieTrackerError):
    """The store rejected a create or update."""


class SessionStateError(PieTrackerError):
    """The edit session cannot accept the requested transition."""
