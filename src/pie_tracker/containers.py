"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from pie_tracker.adapters.http_pie_store import HttpPieStore
from pie_tracker.adapters.supabase_pie_store import SupabasePieStore
from pie_tracker.config import Settings
from pie_tracker.services.collection import PieCollectionService, PieStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    pie_store: PieStore
    pie_service: PieCollectionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    closers: list[Callable[[], Awaitable[None]]] = []
    pie_store: PieStore
    backend = resolved_settings.pie_store_backend
    if backend == "supabase":
        if not (
            resolved_settings.supabase_url and resolved_settings.supabase_service_key
        ):
            raise ValueError(
                "Supabase backend needs SUPABASE_URL and SUPABASE_SERVICE_KEY"
            )
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        pie_store = SupabasePieStore(supabase_client, table=resolved_settings.pie_table)
    elif backend == "http":
        if not resolved_settings.pie_store_base_url:
            raise ValueError("HTTP backend needs PIE_STORE_BASE_URL")
        http_store = HttpPieStore.create(
            resolved_settings.pie_store_base_url,
            timeout=resolved_settings.pie_store_timeout_seconds,
        )
        closers.append(http_store.close)
        pie_store = http_store
    else:
        raise ValueError(f"Unknown pie store backend: {backend}")

    async def close_resources() -> None:
        for close in closers:
            await close()

    return AppContainer(
        settings=resolved_settings,
        pie_store=pie_store,
        pie_service=PieCollectionService(pie_store),
        close_resources=close_resources,
    )
