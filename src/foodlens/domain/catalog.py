"""Domain models for the food catalog."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogFood:
    """A static catalog entry with per-serving nutrition."""

    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    health_score: int
