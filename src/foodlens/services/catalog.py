"""Food catalog search."""

from dataclasses import dataclass
from typing import Protocol

from foodlens.domain.catalog import CatalogFood
from foodlens.domain.models import CandidateFood
from foodlens.domain.nutrition import DEFAULT_HEALTH_SCORE

CUSTOM_FOOD_DEFAULTS = {
    "calories": 200.0,
    "protein": 10.0,
    "carbs": 25.0,
    "fat": 8.0,
}


class CatalogRepository(Protocol):
    """Read-only source of catalog foods."""

    def list_foods(self) -> list[CatalogFood]:
        """Return every catalog entry."""


@dataclass
class CatalogService:
    """Application service for catalog lookups."""

    repository: CatalogRepository

    def search(self, query: str | None, limit: int | None = None) -> list[CatalogFood]:
        """Search by name: exact matches first, then prefix, then containment."""
        if not query or not query.strip():
            return []
        term = query.strip().lower()
        matches = [
            food for food in self.repository.list_foods() if term in food.name.lower()
        ]
        ranked = sorted(matches, key=lambda food: _rank(food.name.lower(), term))
        return ranked[:limit] if limit is not None else ranked

    def get_by_name(self, name: str) -> CatalogFood | None:
        """Return the catalog entry with this exact name, ignoring case."""
        target = name.strip().lower()
        for food in self.repository.list_foods():
            if food.name.lower() == target:
                return food
        return None

    @staticmethod
    def custom_food(name: str) -> CandidateFood:
        """Build a default entry for a dish missing from the catalog."""
        return CandidateFood(
            dish_name=name.strip(),
            health_score=DEFAULT_HEALTH_SCORE,
            **CUSTOM_FOOD_DEFAULTS,
        )

    @staticmethod
    def to_candidate(food: CatalogFood) -> CandidateFood:
        """Convert a catalog entry into a loggable candidate."""
        return CandidateFood(
            dish_name=food.name,
            calories=food.calories,
            protein=food.protein,
            carbs=food.carbs,
            fat=food.fat,
            health_score=food.health_score,
        )


def _rank(name: str, term: str) -> int:
    if name == term:
        return 0
    if name.startswith(term):
        return 1
    return 2
