"""Models for classification suggestions."""

from pydantic import BaseModel, Field

MAX_SUGGESTIONS = 3


class FoodSuggestion(BaseModel):
    """Single candidate dish returned by a classifier."""

    name: str
    confidence: float = Field(ge=0.0, le=1.0)
    estimated_calories: float | None = Field(default=None, ge=0)
    estimated_protein: float | None = Field(default=None, ge=0)
    estimated_carbs: float | None = Field(default=None, ge=0)
    estimated_fat: float | None = Field(default=None, ge=0)


class FoodSuggestions(BaseModel):
    """Structured classifier output."""

    items: list[FoodSuggestion]
