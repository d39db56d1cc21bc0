"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date
from uuid import uuid4

import pytest

from pie_tracker.config import Settings
from pie_tracker.containers import AppContainer
from pie_tracker.domain.pies import PieRecord
from pie_tracker.services.collection import PieCollectionService, PieStore, StoreResult
from pie_tracker.services.drafts import apply_payload

FIXED_TODAY = date(2024, 3, 14)


@dataclass
class InMemoryPieStore(PieStore):
    """In-memory pie store that records calls and can be told to fail."""

    pies: dict[str, PieRecord] = field(default_factory=dict)
    calls: list[tuple[str, object]] = field(default_factory=list)
    fail_list: bool = False
    fail_save: bool = False
    raise_on_save: bool = False

    def add(self, **fields: object) -> PieRecord:
        pie_id = str(fields.pop("id", uuid4()))
        payload = {
            "name": "Classic slice",
            "flavor": "Classic",
            "location": "Home",
            "rating": 4,
            "date_eaten": "2024-01-01",
            "notes": None,
            **fields,
        }
        pie = apply_payload(pie_id, payload)
        self.pies[pie_id] = pie
        return pie

    async def list_pies(self) -> StoreResult[list[PieRecord]]:
        self.calls.append(("list", None))
        if self.fail_list:
            return StoreResult.failed("store offline")
        return StoreResult.ok(list(self.pies.values()))

    async def create_pie(self, payload: dict[str, object]) -> StoreResult[PieRecord]:
        self.calls.append(("create", payload))
        if self.raise_on_save:
            raise ConnectionError("connection reset")
        if self.fail_save:
            return StoreResult.failed("write rejected")
        pie = apply_payload(str(uuid4()), payload)
        self.pies[pie.id] = pie
        return StoreResult.ok(pie)

    async def update_pie(
        self, pie_id: str, payload: dict[str, object]
    ) -> StoreResult[PieRecord]:
        self.calls.append(("update", (pie_id, payload)))
        if self.raise_on_save:
            raise ConnectionError("connection reset")
        if self.fail_save:
            return StoreResult.failed("write rejected")
        if pie_id not in self.pies:
            return StoreResult.failed("not found")
        pie = apply_payload(pie_id, payload)
        self.pies[pie_id] = pie
        return StoreResult.ok(pie)

    def count(self, kind: str) -> int:
        return sum(1 for call_kind, _ in self.calls if call_kind == kind)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        pie_store_backend="http",
        pie_store_base_url="https://pies.example.test/api",
    )


@pytest.fixture
def pie_store() -> InMemoryPieStore:
    return InMemoryPieStore()


@pytest.fixture
def pie_service(pie_store: InMemoryPieStore) -> PieCollectionService:
    return PieCollectionService(pie_store, today=lambda: FIXED_TODAY)


@pytest.fixture
def container(
    settings: Settings,
    pie_store: InMemoryPieStore,
    pie_service: PieCollectionService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        pie_store=pie_store,
        pie_service=pie_service,
        close_resources=close_resources,
    )
