"""Pydantic models for the pie API payloads."""

from pydantic import BaseModel, ConfigDict, Field

from pie_tracker.domain.pies import PieDraft


class DraftPayload(BaseModel):
    """Form values submitted for a new or edited pie."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    flavor: str | None = None
    location: str | None = None
    rating: int | None = None
    date_eaten: str | None = Field(default=None, alias="dateEaten")
    notes: str | None = None

    def to_draft(self) -> PieDraft:
        """Convert the request body into a domain draft."""
        return PieDraft(
            name=self.name,
            flavor=self.flavor,
            location=self.location,
            rating=self.rating,
            date_eaten=self.date_eaten,
            notes=self.notes,
        )
