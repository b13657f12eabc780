"""Pydantic models for API requests."""

from pydantic import BaseModel, Field


class MeasurementsRequest(BaseModel):
    """Weight and height as entered by the user."""

    weight: float | None = None
    weight_unit: str = "kg"
    height: float | None = None
    height_unit: str = "cm"
    feet: int | None = Field(default=None, ge=0)
    inches: int | None = Field(default=None, ge=0, lt=12)


class OnboardingRequest(MeasurementsRequest):
    """Answers collected during onboarding."""

    username: str = ""
    email: str = ""
    daily_calories: int = Field(default=2200, gt=0)
    activity_level: str | None = None
    age: int | None = Field(default=None, gt=0)


class ProfileUpdateRequest(BaseModel):
    """Editable profile details."""

    username: str | None = None
    email: str | None = None
    daily_calories: int | None = Field(default=None, gt=0)
    activity_level: str | None = None
    age: int | None = Field(default=None, gt=0)


class LogMealRequest(BaseModel):
    """A selected food to log."""

    dish_name: str = Field(min_length=1)
    calories: float
    protein: float
    carbs: float
    fat: float
    health_score: int


class ImageRequest(BaseModel):
    """Base64-encoded photo for classification."""

    image_base64: str = Field(min_length=1)


class TextRequest(BaseModel):
    """Free-text dish description for classification."""

    query: str = Field(min_length=1)


class CatalogMealRequest(BaseModel):
    """A catalog dish to log by name."""

    dish_name: str = Field(min_length=1)
