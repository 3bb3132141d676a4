"""
Pytest configuration and shared fixtures.

Fixtures are reusable test setup that can be injected into tests.
"""

import pytest
import random
import tempfile
import shutil
from datetime import datetime, timedelta

from ayewam.data.behavior_store import BehaviorStore
from ayewam.data.catalog import RecipeCatalog
from ayewam.data.models import Recipe
from ayewam.service import RecommendationService


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


# Wednesday evening
WEEKDAY_EVENING = datetime(2025, 10, 15, 19, 0, 0)
# Saturday morning
WEEKEND_MORNING = datetime(2025, 10, 18, 9, 0, 0)


@pytest.fixture
def temp_db_dir():
    """
    Create a temporary database directory for testing.

    This fixture is automatically cleaned up after each test.
    """
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def store(temp_db_dir):
    """Fresh BehaviorStore for each test."""
    return BehaviorStore(db_dir=temp_db_dir)


@pytest.fixture
def catalog(temp_db_dir):
    """Fresh, empty RecipeCatalog for each test."""
    return RecipeCatalog(db_dir=temp_db_dir)


@pytest.fixture
def clock():
    """Clock pinned to a weekday evening."""
    return FixedClock(WEEKDAY_EVENING)


@pytest.fixture
def make_recipe():
    """
    Factory for recipes with sensible defaults.

    Usage in tests:
        def test_something(make_recipe):
            recipe = make_recipe("koko", "Koko", cook_time=15)
    """
    def _make(recipe_id, name, category="Soups", difficulty="Easy",
              prep_time=10, cook_time=10, servings=2, is_favorite=False):
        return Recipe(
            id=recipe_id,
            name=name,
            category=category,
            difficulty=difficulty,
            prep_time=prep_time,
            cook_time=cook_time,
            servings=servings,
            is_favorite=is_favorite,
        )

    return _make


@pytest.fixture
def sample_recipes(make_recipe):
    """Small Ghanaian catalog, sorted by name like RecipeCatalog returns it."""
    recipes = [
        make_recipe("light_soup", "Light Soup", "Soups", "Medium", 15, 45, 4),
        make_recipe("groundnut_soup", "Groundnut Soup", "Soups", "Medium", 20, 60, 6),
        make_recipe("jollof_rice", "Jollof Rice", "Rice Dishes", "Medium", 20, 45, 6),
        make_recipe("waakye", "Waakye", "Rice Dishes", "Medium", 30, 60, 6),
        make_recipe("kelewele", "Kelewele", "Street Food", "Easy", 10, 15, 4),
        make_recipe("koko", "Koko", "Breakfast", "Easy", 5, 15, 2),
        make_recipe("bofrot", "Bofrot", "Desserts", "Easy", 15, 20, 8),
        make_recipe("pito", "Pito", "Drinks", "Hard", 30, 120, 10),
        make_recipe("red_red", "Red Red", "Stews", "Easy", 10, 35, 4),
        make_recipe("fufu", "Fufu with Palm Nut Soup", "Soups", "Hard", 30, 90, 6),
    ]
    return sorted(recipes, key=lambda r: (r.name, r.id))


@pytest.fixture
def seeded_catalog(catalog, sample_recipes):
    """Catalog loaded with the sample recipes."""
    catalog.load_recipes(sample_recipes)
    return catalog


@pytest.fixture
def service(seeded_catalog, store, clock):
    """
    RecommendationService over the sample catalog.

    Usage in tests:
        def test_something(service, clock):
            service.track_recipe_cooked("koko")
    """
    return RecommendationService(seeded_catalog, store, clock=clock, rng=random.Random(42))
