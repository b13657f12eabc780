"""Tests for catalog search."""

import json
from pathlib import Path

from foodlens.adapters.json_catalog_repository import JsonCatalogRepository
from foodlens.config import DEFAULT_CATALOG_PATH
from foodlens.domain.catalog import CatalogFood
from foodlens.domain.nutrition import health_score_label
from foodlens.services.catalog import CatalogService
from tests.conftest import InMemoryCatalogRepository


def _service() -> CatalogService:
    return CatalogService(InMemoryCatalogRepository())


def test_search_ranks_exact_then_prefix_then_contains() -> None:
    results = _service().search("biryani")

    assert [food.name for food in results] == [
        "Biryani",
        "Chicken Biryani",
        "Veg Biryani Bowl",
    ]


def test_search_prefix_beats_contains() -> None:
    results = _service().search("veg")

    assert [food.name for food in results] == ["Veg Biryani Bowl"]


def test_search_respects_limit_and_blank_queries() -> None:
    service = _service()

    assert len(service.search("biryani", limit=2)) == 2
    assert service.search("") == []
    assert service.search("   ") == []
    assert service.search(None) == []
    assert service.search("pizza") == []


def test_get_by_name_is_case_insensitive() -> None:
    food = _service().get_by_name("greek salad")

    assert food is not None
    assert food.health_score == 82
    assert _service().get_by_name("Pizza") is None


def test_custom_food_defaults() -> None:
    candidate = CatalogService.custom_food("  Grandma's Stew ")

    assert candidate.dish_name == "Grandma's Stew"
    assert candidate.calories == 200
    assert candidate.protein == 10
    assert candidate.carbs == 25
    assert candidate.fat == 8
    assert candidate.health_score == 50


def test_to_candidate_copies_nutrition() -> None:
    candidate = CatalogService.to_candidate(CatalogFood("Dal", 230, 12, 30, 6, 78))

    assert candidate.dish_name == "Dal"
    assert candidate.health_score == 78


def test_json_catalog_repository_reads_dish_rows(tmp_path: Path) -> None:
    path = tmp_path / "foods.json"
    path.write_text(
        json.dumps(
            [
                {
                    "dish": "Idli",
                    "calories": 150,
                    "protein": 5,
                    "carbs": 30,
                    "fat": 1,
                    "healthScore": 80,
                }
            ]
        ),
        encoding="utf-8",
    )
    repository = JsonCatalogRepository(path)

    foods = repository.list_foods()

    assert foods == [CatalogFood("Idli", 150, 5, 30, 1, 80)]
    assert repository.list_foods() is foods


def test_bundled_catalog_loads() -> None:
    foods = JsonCatalogRepository(DEFAULT_CATALOG_PATH).list_foods()

    assert foods
    assert all(0 <= food.health_score <= 100 for food in foods)


def test_health_score_label() -> None:
    assert health_score_label(85) == "Very Healthy"
    assert health_score_label(60) == "Healthy"
    assert health_score_label(40) == "Moderate"
    assert health_score_label(39) == "Less Healthy"
