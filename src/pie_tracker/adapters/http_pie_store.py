"""REST implementation of the pie store."""

import logging
from dataclasses import dataclass

import httpx

from pie_tracker.domain.pies import PieRecord
from pie_tracker.services.collection import PieStore, StoreResult
from pie_tracker.services.drafts import apply_payload

_logger = logging.getLogger(__name__)

_COLLECTION_PATH = "/apple-pies"


@dataclass
class HttpPieStore(PieStore):
    """HTTPX-backed store speaking the `{success, data}` envelope."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(cls, base_url: str, timeout: float = 15) -> "HttpPieStore":
        """Create a store with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def list_pies(self) -> StoreResult[list[PieRecord]]:
        """Return every stored pie."""
        envelope = await self._request("GET", _COLLECTION_PATH)
        if not envelope.success:
            return StoreResult.failed(envelope.error or "list failed")
        rows = envelope.data or []
        if not isinstance(rows, list):
            return StoreResult.failed("Malformed pie list")
        try:
            return StoreResult.ok([_parse_pie(row) for row in rows])
        except (KeyError, TypeError, ValueError) as exc:
            return StoreResult.failed(f"Malformed pie record: {exc}")

    async def create_pie(self, payload: dict[str, object]) -> StoreResult[PieRecord]:
        """Create a pie and return it with its assigned id."""
        envelope = await self._request("POST", _COLLECTION_PATH, _to_wire(payload))
        return _single(envelope)

    async def update_pie(
        self, pie_id: str, payload: dict[str, object]
    ) -> StoreResult[PieRecord]:
        """Replace every field of an existing pie and return it."""
        envelope = await self._request(
            "PUT", f"{_COLLECTION_PATH}/{pie_id}", _to_wire(payload)
        )
        return _single(envelope)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self, method: str, path: str, body: dict[str, object] | None = None
    ) -> StoreResult[object]:
        url = f"{self.base_url}{path}"
        try:
            response = await self.http_client.request(
                method, url, json=body, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            _logger.warning(
                "Pie store %s %s returned %s", method, url, exc.response.status_code
            )
            if exc.response.status_code == httpx.codes.NOT_FOUND:
                return StoreResult.failed("not found")
            return StoreResult.failed(f"HTTP {exc.response.status_code}")
        except (httpx.HTTPError, ValueError) as exc:
            _logger.warning("Pie store %s %s failed: %s", method, url, exc)
            return StoreResult.failed(str(exc))
        if not isinstance(payload, dict) or not payload.get("success"):
            error = payload.get("error") if isinstance(payload, dict) else None
            return StoreResult.failed(str(error or "request rejected"))
        return StoreResult.ok(payload.get("data"))


def _single(envelope: StoreResult[object]) -> StoreResult[PieRecord]:
    if not envelope.success:
        return StoreResult.failed(envelope.error or "request rejected")
    if not isinstance(envelope.data, dict):
        return StoreResult.failed("Malformed pie record")
    try:
        return StoreResult.ok(_parse_pie(envelope.data))
    except (KeyError, TypeError, ValueError) as exc:
        return StoreResult.failed(f"Malformed pie record: {exc}")


def _to_wire(payload: dict[str, object]) -> dict[str, object]:
    """Rename payload keys to the service's camelCase fields."""
    wire = {key: value for key, value in payload.items() if key != "date_eaten"}
    wire["dateEaten"] = payload["date_eaten"]
    return wire


def _parse_pie(row: dict[str, object]) -> PieRecord:
    """Parse a wire record into a domain model."""
    pie_id = row.get("_id", row.get("id"))
    if pie_id is None:
        raise KeyError("_id")
    fields = {key: value for key, value in row.items() if key != "dateEaten"}
    fields["date_eaten"] = row["dateEaten"]
    return apply_payload(str(pie_id), fields)
