"""Catalog repository reading a static JSON file."""

import json
from dataclasses import dataclass, field
from pathlib import Path

from foodlens.domain.catalog import CatalogFood
from foodlens.services.catalog import CatalogRepository


@dataclass
class JsonCatalogRepository(CatalogRepository):
    """Loads ``[{dish, calories, protein, carbs, fat, healthScore}]`` once."""

    path: Path
    _foods: list[CatalogFood] | None = field(default=None, init=False, repr=False)

    def list_foods(self) -> list[CatalogFood]:
        """Return every catalog entry."""
        if self._foods is None:
            rows = json.loads(self.path.read_text(encoding="utf-8"))
            self._foods = [_parse_food(row) for row in rows]
        return self._foods


def _parse_food(row: dict[str, object]) -> CatalogFood:
    return CatalogFood(
        name=str(row.get("dish") or row.get("name") or ""),
        calories=float(row.get("calories", 0.0)),
        protein=float(row.get("protein", 0.0)),
        carbs=float(row.get("carbs", 0.0)),
        fat=float(row.get("fat", 0.0)),
        health_score=int(row.get("healthScore", 50)),
    )
