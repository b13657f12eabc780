"""Dependency container wiring for the application."""

import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from foodlens.adapters.document_repositories import (
    DocumentLogRepository,
    DocumentProfileRepository,
)
from foodlens.adapters.document_store import DocumentStore
from foodlens.adapters.json_catalog_repository import JsonCatalogRepository
from foodlens.adapters.json_file_store import JsonFileDocumentStore
from foodlens.adapters.openai_vision_client import OpenAIVisionClient
from foodlens.adapters.supabase_document_store import SupabaseDocumentStore
from foodlens.config import Settings, parse_timezone
from foodlens.services.catalog import CatalogService
from foodlens.services.profiles import ProfileService
from foodlens.services.stats import StatsService
from foodlens.services.tracking import TrackingService
from foodlens.services.vision import VisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_service: ProfileService
    tracking_service: TrackingService
    stats_service: StatsService
    catalog_service: CatalogService
    vision_service: VisionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timezone_name = parse_timezone(resolved_settings.timezone).key
    store = _build_store(resolved_settings)
    profile_repository = DocumentProfileRepository(
        store, namespace=resolved_settings.store_namespace
    )
    log_repository = DocumentLogRepository(
        store, namespace=resolved_settings.store_namespace
    )
    profile_lock = threading.Lock()
    profile_service = ProfileService(
        repository=profile_repository,
        log_repository=log_repository,
        lock=profile_lock,
    )
    tracking_service = TrackingService(
        profile_repository=profile_repository,
        log_repository=log_repository,
        timezone_name=timezone_name,
        lock=profile_lock,
    )
    stats_service = StatsService(log_repository, timezone_name=timezone_name)
    catalog_service = CatalogService(
        JsonCatalogRepository(resolved_settings.catalog_path)
    )
    openai_client = OpenAIVisionClient.create(resolved_settings.openai_api_key)
    vision_service = VisionService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        profile_service=profile_service,
        tracking_service=tracking_service,
        stats_service=stats_service,
        catalog_service=catalog_service,
        vision_service=vision_service,
        close_resources=close_resources,
    )


def _build_store(settings: Settings) -> DocumentStore:
    if settings.store_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase backend requires SUPABASE_URL and key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseDocumentStore(client, table=settings.store_table)
    if settings.store_backend == "file":
        return JsonFileDocumentStore(settings.data_dir)
    raise ValueError(f"Unknown store backend: {settings.store_backend}")
