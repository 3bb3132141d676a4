"""
Unit tests for the contextual recommendation engine.

Tests cover:
- Time-of-day windows (weekday and weekend)
- Favorite expansion
- Skill progression thresholds
- Cultural context
- Section caps, uniqueness and determinism
"""

from datetime import datetime

import pytest

from ayewam.data.models import BehaviorSnapshot, RecommendationType
from ayewam.recommendations.engine import (
    RecommendationEngine,
    format_hour,
    is_weekend,
    next_skill_difficulty,
)

# Wednesday evening and Saturday morning
WEEKDAY_EVENING = datetime(2025, 10, 15, 19, 0, 0)
WEEKEND_MORNING = datetime(2025, 10, 18, 9, 0, 0)


@pytest.fixture
def engine():
    return RecommendationEngine()


def _section(sections, section_type):
    matches = [s for s in sections if s.section_type == section_type]
    return matches[0] if matches else None


def _at(hour, weekend=False):
    day = 18 if weekend else 15
    return datetime(2025, 10, day, hour, 0, 0)


class TestHelpers:
    """Test module helpers."""

    def test_is_weekend(self):
        assert is_weekend(WEEKEND_MORNING)
        assert not is_weekend(WEEKDAY_EVENING)

    @pytest.mark.parametrize("hour,label", [
        (0, "12 AM"),
        (8, "8 AM"),
        (12, "12 PM"),
        (19, "7 PM"),
    ])
    def test_format_hour(self, hour, label):
        assert format_hour(hour) == label


class TestEmptyCatalog:
    """An empty catalog yields no sections."""

    def test_empty_catalog(self, engine):
        assert engine.generate([], WEEKDAY_EVENING) == []

    def test_empty_catalog_with_behavior(self, engine):
        behavior = BehaviorSnapshot(completed_recipes=["koko"])
        assert engine.generate([], WEEKEND_MORNING, behavior) == []


class TestTimeBased:
    """Test time-of-day suggestions."""

    def test_weekday_evening_scenario(self, engine, make_recipe):
        """Three soups/stews are the evening picks; the rest are not."""
        recipes = sorted([
            make_recipe("beef_stew", "Beef Stew", "Stews", "Medium", cook_time=40),
            make_recipe("light_soup", "Light Soup", "Soups", "Medium", cook_time=40),
            make_recipe("okro_soup", "Okro Soup", "Soups", "Medium", cook_time=40),
            make_recipe("kelewele", "Kelewele", "Street Food", "Easy", cook_time=15),
            make_recipe("koko", "Koko", "Breakfast", "Easy", cook_time=15),
            make_recipe("pito", "Pito", "Drinks", "Hard", cook_time=60),
        ], key=lambda r: r.name)

        sections = engine.generate(recipes, WEEKDAY_EVENING)
        time_section = _section(sections, RecommendationType.TIME_BASED)

        assert sections[0] is time_section
        assert time_section.title == "Traditional Evening Meals"
        assert time_section.recipe_ids == ["beef_stew", "light_soup", "okro_soup"]

    def test_weekday_morning_under_20_minutes(self, engine, make_recipe):
        recipes = [
            make_recipe("bofrot", "Bofrot", prep_time=15, cook_time=20),
            make_recipe("koko", "Koko", prep_time=5, cook_time=15),
            make_recipe("tea_bread", "Tea Bread", prep_time=10, cook_time=5),
        ]

        section = engine.time_based_section(recipes, _at(8))

        assert section.title == "Quick Breakfast Ideas"
        assert section.recipe_ids == ["koko", "tea_bread"]
        assert "8 AM" in section.reasoning

    def test_weekend_morning_allows_longer_dishes(self, engine, make_recipe):
        recipes = [
            make_recipe("bofrot", "Bofrot", prep_time=15, cook_time=20),
            make_recipe("jollof_rice", "Jollof Rice", prep_time=10, cook_time=25),
            make_recipe("koko", "Koko", prep_time=5, cook_time=15),
        ]

        section = engine.time_based_section(recipes, WEEKEND_MORNING)

        assert section.title == "Perfect for Weekend Morning"
        # Jollof is 35 minutes and not a morning dish
        assert section.recipe_ids == ["bofrot", "koko"]

    def test_weekday_lunch_window(self, engine, make_recipe):
        recipes = [
            make_recipe("jollof_rice", "Jollof Rice", difficulty="Hard", prep_time=10, cook_time=25),
            make_recipe("kelewele", "Kelewele", prep_time=10, cook_time=10),
            make_recipe("red_red", "Red Red", difficulty="Medium", prep_time=10, cook_time=20),
            make_recipe("pito", "Pito", difficulty="Hard", prep_time=10, cook_time=20),
        ]

        section = engine.time_based_section(recipes, _at(13))

        assert section.title == "Satisfying Lunch Options"
        assert section.recipe_ids == ["jollof_rice", "red_red"]

    @pytest.mark.parametrize("hour", [23, 2])
    def test_late_night(self, engine, make_recipe, hour):
        recipes = [
            make_recipe("kelewele", "Kelewele", difficulty="Medium", prep_time=5, cook_time=15),
            make_recipe("light_soup", "Light Soup", difficulty="Medium", prep_time=5, cook_time=15),
            make_recipe("koko", "Koko", difficulty="Easy", prep_time=5, cook_time=30),
        ]

        section = engine.time_based_section(recipes, _at(hour))

        assert section.title == "Quick Late Night Bites"
        assert section.recipe_ids == ["kelewele"]

    def test_absent_when_nothing_matches(self, engine, make_recipe):
        recipes = [make_recipe("pito", "Pito", difficulty="Hard", prep_time=30, cook_time=120)]
        assert engine.time_based_section(recipes, _at(8)) is None


class TestFavoriteExpansion:
    """Test suggestions similar to favorites."""

    def test_absent_without_favorites(self, engine, sample_recipes):
        assert engine.favorite_expansion_section(sample_recipes) is None

    def test_never_suggests_favorites(self, engine, make_recipe):
        recipes = [
            make_recipe("groundnut_soup", "Groundnut Soup", "Soups", is_favorite=True),
            make_recipe("light_soup", "Light Soup", "Soups", is_favorite=True),
            make_recipe("palm_nut_soup", "Palm Nut Soup", "Soups"),
        ]

        section = engine.favorite_expansion_section(recipes)

        assert section.recipe_ids == ["palm_nut_soup"]

    def test_matches_category_difficulty_or_time(self, engine, make_recipe):
        recipes = [
            make_recipe("fav", "Fav", "Soups", "Medium", prep_time=10, cook_time=30, is_favorite=True),
            make_recipe("same_category", "A", "Soups", "Hard", prep_time=60, cook_time=60),
            make_recipe("same_difficulty", "B", "Drinks", "Medium", prep_time=60, cook_time=60),
            make_recipe("similar_time", "C", "Drinks", "Hard", prep_time=20, cook_time=30),
            make_recipe("unrelated", "D", "Drinks", "Hard", prep_time=60, cook_time=60),
        ]

        section = engine.favorite_expansion_section(recipes)

        assert section.recipe_ids == ["same_category", "same_difficulty", "similar_time"]

    def test_absent_when_everything_is_favorite(self, engine, make_recipe):
        recipes = [make_recipe("koko", "Koko", is_favorite=True)]
        assert engine.favorite_expansion_section(recipes) is None


class TestSkillProgression:
    """Test the Easy -> Medium -> Hard progression."""

    @pytest.mark.parametrize("completed,expected", [
        ([], "Easy"),
        (["Easy"] * 2, "Easy"),
        (["Easy"] * 3, "Medium"),
        (["Easy"] * 5, "Medium"),
        (["Easy"] * 9 + ["Medium"] * 5, "Medium"),
        (["Easy"] * 10 + ["Medium"] * 5, "Hard"),
        (["Easy"] * 3 + ["Medium"] + ["Hard"] * 2, "Easy"),
    ])
    def test_next_skill_difficulty(self, completed, expected):
        assert next_skill_difficulty(completed) == expected

    def test_three_easy_completions_suggest_medium(self, engine, make_recipe):
        recipes = [
            make_recipe("e1", "E1", difficulty="Easy"),
            make_recipe("e2", "E2", difficulty="Easy"),
            make_recipe("e3", "E3", difficulty="Easy"),
            make_recipe("e4", "E4", difficulty="Easy"),
            make_recipe("m1", "M1", difficulty="Medium"),
        ]
        behavior = BehaviorSnapshot(completed_recipes=["e1", "e2", "e3"])

        section = engine.skill_progression_section(recipes, behavior)

        assert section.title == "Ready for More Challenge"
        assert section.recipe_ids == ["m1"]

    def test_excludes_completed(self, engine, make_recipe):
        recipes = [
            make_recipe("e1", "E1", difficulty="Easy"),
            make_recipe("e2", "E2", difficulty="Easy"),
        ]
        behavior = BehaviorSnapshot(completed_recipes=["e1"])

        section = engine.skill_progression_section(recipes, behavior)

        assert section.title == "Master the Basics"
        assert section.recipe_ids == ["e2"]

    def test_unknown_completed_ids_are_skipped(self, engine, make_recipe):
        recipes = [make_recipe("e1", "E1", difficulty="Easy")]
        behavior = BehaviorSnapshot(completed_recipes=["gone1", "gone2", "gone3"])

        section = engine.skill_progression_section(recipes, behavior)

        assert section.recipe_ids == ["e1"]


class TestCulturalContext:
    """Test weekday/weekend cultural sections."""

    def test_weekday_practical(self, engine, sample_recipes):
        section = engine.cultural_context_section(sample_recipes, WEEKDAY_EVENING)

        assert section.title == "Practical Weekday Dishes"
        # Waakye is 90 minutes, too long for a weekday
        assert section.recipe_ids == ["kelewele", "red_red"]

    def test_weekend_traditional(self, engine, make_recipe):
        recipes = [
            make_recipe("banku", "Banku", prep_time=5, cook_time=10, servings=2),
            make_recipe("koko", "Koko", prep_time=5, cook_time=10, servings=2),
            make_recipe("party_jollof", "Party Jollof", prep_time=5, cook_time=10, servings=10),
            make_recipe("waakye", "Waakye", prep_time=30, cook_time=60, servings=2),
        ]

        section = engine.cultural_context_section(recipes, WEEKEND_MORNING)

        assert section.title == "Traditional Weekend Cooking"
        assert section.recipe_ids == ["banku", "party_jollof", "waakye"]


class TestInvariants:
    """Caps, uniqueness, ordering and determinism."""

    @pytest.fixture
    def large_catalog(self, make_recipe):
        recipes = []
        for i in range(12):
            recipes.append(make_recipe(f"soup{i:02d}", f"Groundnut Soup {i:02d}", "Soups", "Easy",
                                       prep_time=10, cook_time=40, servings=6, is_favorite=(i == 0)))
            recipes.append(make_recipe(f"jollof{i:02d}", f"Jollof {i:02d}", "Rice Dishes", "Easy",
                                       prep_time=10, cook_time=20, servings=6))
        return sorted(recipes, key=lambda r: r.name)

    @pytest.mark.parametrize("now", [_at(8), _at(13), WEEKDAY_EVENING, _at(23), WEEKEND_MORNING])
    def test_section_caps(self, engine, large_catalog, now):
        sections = engine.generate(large_catalog, now)

        assert sections
        for section in sections:
            assert section.recipes
            if section.section_type in (RecommendationType.SKILL_PROGRESSION,
                                        RecommendationType.CULTURAL_CONTEXT):
                assert len(section.recipes) <= 4
            else:
                assert len(section.recipes) <= 5

    def test_no_duplicates_within_section(self, engine, make_recipe):
        soup = make_recipe("light_soup", "Light Soup", cook_time=40)
        recipes = [soup, soup, make_recipe("okro_soup", "Okro Soup", cook_time=40)]

        for section in engine.generate(recipes, WEEKDAY_EVENING):
            assert len(section.recipe_ids) == len(set(section.recipe_ids))

    def test_section_order(self, engine, large_catalog):
        sections = engine.generate(large_catalog, WEEKDAY_EVENING)

        assert [s.section_type for s in sections] == [
            RecommendationType.TIME_BASED,
            RecommendationType.FAVORITE_EXPANSION,
            RecommendationType.SKILL_PROGRESSION,
            RecommendationType.CULTURAL_CONTEXT,
        ]

    def test_deterministic(self, engine, sample_recipes):
        behavior = BehaviorSnapshot(completed_recipes=["koko", "kelewele", "bofrot"])

        first = engine.generate(sample_recipes, WEEKDAY_EVENING, behavior)
        second = engine.generate(sample_recipes, WEEKDAY_EVENING, behavior)

        assert first == second
