"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, HTTPException, Request, status

from pie_tracker.api.models import DraftPayload
from pie_tracker.app_logging import configure_logging
from pie_tracker.containers import AppContainer
from pie_tracker.domain.errors import (
    LoadError,
    NotFoundError,
    SaveError,
    SessionStateError,
    ValidationError,
)
from pie_tracker.domain.pies import FLAVOR_SUGGESTIONS, PieDraft, PieRecord
from pie_tracker.services.collection import PieCollectionService

_UNPROCESSABLE = 422


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await app.state.container.pie_service.start()
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/flavors")
    async def flavors() -> dict[str, list[str]]:
        """Return the flavor suggestions offered by the form."""
        return {"flavors": list(FLAVOR_SUGGESTIONS)}

    @app.get("/pies")
    async def read_view(request: Request) -> dict[str, object]:
        """Return pies, statistics, the edit session and pending notices."""
        return _view_payload(_service(request))

    @app.post("/pies/load")
    async def request_load(request: Request) -> dict[str, object]:
        """Reload the collection from the store."""
        service = _service(request)
        try:
            await service.load_all()
        except LoadError as exc:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        return _view_payload(service)

    @app.post("/session/create")
    async def begin_create(request: Request) -> dict[str, object]:
        """Open the form for a new pie."""
        service = _service(request)
        try:
            service.begin_create()
        except SessionStateError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        return _view_payload(service)

    @app.post("/session/edit/{pie_id}")
    async def begin_edit(pie_id: str, request: Request) -> dict[str, object]:
        """Open the form for an existing pie."""
        service = _service(request)
        try:
            service.begin_edit(pie_id)
        except NotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        except SessionStateError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        return _view_payload(service)

    @app.post("/session/cancel")
    async def cancel(request: Request) -> dict[str, object]:
        """Close the form without saving."""
        service = _service(request)
        try:
            service.cancel()
        except SessionStateError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        return _view_payload(service)

    @app.post("/session/submit")
    async def submit(payload: DraftPayload, request: Request) -> dict[str, object]:
        """Save the submitted draft."""
        service = _service(request)
        try:
            saved = await service.submit(payload.to_draft())
        except ValidationError as exc:
            raise HTTPException(
                status_code=_UNPROCESSABLE,
                detail={"message": str(exc), "fields": exc.fields},
            ) from exc
        except SessionStateError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        except SaveError as exc:
            logger.warning("Submit failed: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        return {"saved": _record_payload(saved), **_view_payload(service)}

    return app


def _service(request: Request) -> PieCollectionService:
    container: AppContainer = request.app.state.container
    return container.pie_service


def _view_payload(service: PieCollectionService) -> dict[str, object]:
    """Serialize the collection view for the frontend."""
    view = service.view()
    draft = view.session.draft
    return {
        "records": [_record_payload(record) for record in view.records],
        "totalCount": view.stats.total_count,
        "averageRating": view.stats.average_rating,
        "topLocation": view.stats.top_location,
        "sessionState": view.session.state.value,
        "editingId": view.session.target_id,
        "draft": _draft_payload(draft) if draft is not None else None,
        "loading": view.loading,
        "submitting": view.submitting,
        "notices": [
            {"level": notice.level, "message": notice.message}
            for notice in service.drain_notices()
        ],
    }


def _record_payload(record: PieRecord) -> dict[str, object]:
    return {
        "id": record.id,
        "name": record.name,
        "flavor": record.flavor,
        "location": record.location,
        "rating": record.rating,
        "dateEaten": record.date_eaten.isoformat(),
        "notes": record.notes,
    }


def _draft_payload(draft: PieDraft) -> dict[str, object]:
    date_eaten = draft.date_eaten
    if isinstance(date_eaten, date):
        date_eaten = date_eaten.isoformat()
    return {
        "name": draft.name,
        "flavor": draft.flavor,
        "location": draft.location,
        "rating": draft.rating,
        "dateEaten": date_eaten,
        "notes": draft.notes,
    }
