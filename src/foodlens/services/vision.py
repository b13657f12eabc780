"""Food classification service using LLMs."""

import base64
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from foodlens.domain.errors import VisionUnavailable
from foodlens.domain.models import CandidateFood
from foodlens.domain.nutrition import MacroProfile, estimate_health_score
from foodlens.domain.vision import MAX_SUGGESTIONS, FoodSuggestion, FoodSuggestions

_NULLABLE_NUMBER = {"anyOf": [{"type": "number", "minimum": 0}, {"type": "null"}]}

SUGGESTION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
                    "estimated_calories": _NULLABLE_NUMBER,
                    "estimated_protein": _NULLABLE_NUMBER,
                    "estimated_carbs": _NULLABLE_NUMBER,
                    "estimated_fat": _NULLABLE_NUMBER,
                },
                "required": [
                    "name",
                    "confidence",
                    "estimated_calories",
                    "estimated_protein",
                    "estimated_carbs",
                    "estimated_fat",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}

_IMAGE_PROMPT = (
    "Analyze this food image and identify the dish. "
    "Focus on Indian and international dishes. "
    "Return up to 3 suggestions ordered by confidence (0-1), each with an "
    "estimate of calories and grams of protein, carbs and fat for one serving. "
    "If you cannot identify the food clearly, return an empty list."
)

_TEXT_PROMPT = (
    "Identify the dish described by the following text. "
    "Return up to 3 suggestions ordered by confidence (0-1), each with an "
    "estimate of calories and grams of protein, carbs and fat for one serving.\n"
    "Text: {query}"
)


class VisionClient(Protocol):
    """Interface for LLM food classification."""

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
        """Return structured classification data."""


@dataclass
class VisionService:
    """Service that prepares classification prompts and validates results."""

    client: VisionClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def suggest_from_image(self, image_bytes: bytes) -> list[FoodSuggestion]:
        """Suggest dishes for a photo."""
        return await self._suggest(_IMAGE_PROMPT, _to_data_url(image_bytes))

    async def suggest_from_text(self, query: str) -> list[FoodSuggestion]:
        """Suggest dishes for a free-text description."""
        return await self._suggest(_TEXT_PROMPT.format(query=query.strip()), None)

    @staticmethod
    def to_candidate(suggestion: FoodSuggestion) -> CandidateFood:
        """Convert a suggestion into a loggable candidate.

        Confidence is display-only; the health score comes from the estimated
        macros.
        """
        macros = None
        if suggestion.estimated_calories is not None:
            macros = MacroProfile(
                calories=suggestion.estimated_calories,
                protein_g=suggestion.estimated_protein or 0.0,
                carbs_g=suggestion.estimated_carbs or 0.0,
                fat_g=suggestion.estimated_fat or 0.0,
            )
        return CandidateFood(
            dish_name=suggestion.name,
            calories=suggestion.estimated_calories or 0.0,
            protein=suggestion.estimated_protein or 0.0,
            carbs=suggestion.estimated_carbs or 0.0,
            fat=suggestion.estimated_fat or 0.0,
            health_score=estimate_health_score(macros),
        )

    async def _suggest(
        self, prompt: str, image_data_url: str | None
    ) -> list[FoodSuggestion]:
        try:
            raw = await self.client.extract(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
                schema=SUGGESTION_SCHEMA,
                image_data_url=image_data_url,
            )
        except Exception as exc:
            raise VisionUnavailable(str(exc) or type(exc).__name__) from exc
        try:
            result = FoodSuggestions.model_validate(raw)
        except ValidationError as exc:
            raise VisionUnavailable("Classifier returned malformed output") from exc
        ranked = sorted(result.items, key=lambda item: item.confidence, reverse=True)
        return ranked[:MAX_SUGGESTIONS]


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
