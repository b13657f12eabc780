"""Shared test fixtures."""

import copy
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from foodlens.adapters.document_repositories import (
    DocumentLogRepository,
    DocumentProfileRepository,
)
from foodlens.adapters.document_store import Document, DocumentStore
from foodlens.config import Settings
from foodlens.containers import AppContainer
from foodlens.domain.catalog import CatalogFood
from foodlens.domain.errors import StoreUnavailable
from foodlens.services.catalog import CatalogRepository, CatalogService
from foodlens.services.profiles import ProfileService
from foodlens.services.stats import StatsService
from foodlens.services.tracking import TrackingService
from foodlens.services.vision import VisionClient, VisionService


@dataclass
class InMemoryDocumentStore(DocumentStore):
    """In-memory document store for tests."""

    documents: dict[str, Document] = field(default_factory=dict)
    failing_keys: set[str] = field(default_factory=set)
    writes: list[str] = field(default_factory=list)
    read_hooks: dict[str, Callable[[], None]] = field(default_factory=dict)

    def get(self, key: str) -> Document | None:
        hook = self.read_hooks.pop(key, None)
        document = self.documents.get(key)
        if hook is not None:
            hook()
        return copy.deepcopy(document) if document is not None else None

    def put(self, key: str, document: Document) -> None:
        if key in self.failing_keys:
            raise StoreUnavailable(f"Failed to write {key}")
        self.writes.append(key)
        self.documents[key] = copy.deepcopy(document)

    def delete(self, key: str) -> None:
        self.documents.pop(key, None)


@dataclass
class FakeVisionClient(VisionClient):
    """Fake classification client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "items": [
                {
                    "name": "Masala Dosa",
                    "confidence": 0.41,
                    "estimated_calories": 390,
                    "estimated_protein": 8,
                    "estimated_carbs": 52,
                    "estimated_fat": 16,
                },
                {
                    "name": "Grilled Salmon",
                    "confidence": 0.87,
                    "estimated_calories": 370,
                    "estimated_protein": 40,
                    "estimated_carbs": 0,
                    "estimated_fat": 22,
                },
            ]
        }
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        self.calls.append({"prompt": prompt, "image_data_url": image_data_url})
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory catalog for tests."""

    foods: list[CatalogFood] = field(
        default_factory=lambda: [
            CatalogFood("Chicken Biryani", 520, 25, 62, 19, 50),
            CatalogFood("Biryani", 480, 18, 60, 17, 52),
            CatalogFood("Veg Biryani Bowl", 410, 9, 66, 12, 58),
            CatalogFood("Greek Salad", 210, 6, 10, 17, 82),
        ]
    )

    def list_foods(self) -> list[CatalogFood]:
        return self.foods


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        data_dir=tmp_path / "data",
        timezone="UTC",
        environment="local",
    )


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def profile_repository(store: InMemoryDocumentStore) -> DocumentProfileRepository:
    return DocumentProfileRepository(store)


@pytest.fixture
def log_repository(store: InMemoryDocumentStore) -> DocumentLogRepository:
    return DocumentLogRepository(store)


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def container(
    settings: Settings,
    profile_repository: DocumentProfileRepository,
    log_repository: DocumentLogRepository,
    vision_client: FakeVisionClient,
) -> AppContainer:
    vision_service = VisionService(
        client=vision_client,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )

    profile_lock = threading.Lock()

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        profile_service=ProfileService(
            repository=profile_repository,
            log_repository=log_repository,
            lock=profile_lock,
        ),
        tracking_service=TrackingService(
            profile_repository=profile_repository,
            log_repository=log_repository,
            timezone_name=settings.timezone,
            lock=profile_lock,
        ),
        stats_service=StatsService(log_repository, timezone_name=settings.timezone),
        catalog_service=CatalogService(InMemoryCatalogRepository()),
        vision_service=vision_service,
        close_resources=close_resources,
    )
