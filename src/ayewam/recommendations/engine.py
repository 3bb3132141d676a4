"""
Contextual recommendation engine.

Generates labeled, explained sections of suggested recipes from contextual
signals: time of day, day of week, favorites, completion history and
cultural context.

The engine is a pure function of (catalog recipes, current time, behavior
snapshot). It keeps catalog order within a section and never emits an empty
section.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from ..data.models import (
    BehaviorSnapshot,
    Recipe,
    RecommendationSection,
    RecommendationType,
)
from ..vocabulary import (
    EASY,
    EVENING_KEYWORDS,
    HARD,
    LATE_NIGHT_KEYWORDS,
    LUNCH_KEYWORDS,
    MAX_CULTURAL_RECIPES,
    MAX_SECTION_RECIPES,
    MAX_SKILL_RECIPES,
    MEDIUM,
    MORNING_KEYWORDS,
    WEEKDAY_PRACTICAL_KEYWORDS,
    WEEKEND_TRADITIONAL_KEYWORDS,
    name_matches,
)

logger = logging.getLogger(__name__)

SKILL_PROGRESSION_TITLES = {
    EASY: ("Master the Basics", "Build confidence with these fundamentals"),
    MEDIUM: ("Ready for More Challenge", "Take your skills to the next level"),
    HARD: ("Advanced Techniques", "Master traditional Ghanaian cooking"),
}


def is_weekend(now: datetime) -> bool:
    """Saturday or Sunday."""
    return now.weekday() >= 5


def format_hour(hour: int) -> str:
    """Format an hour of day as e.g. "8 AM" or "7 PM"."""
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12} {suffix}"


def take_unique(recipes: Iterable[Recipe], limit: int) -> Tuple[Recipe, ...]:
    """First `limit` recipes in order, skipping repeated recipe ids."""
    seen = set()
    selected = []
    for recipe in recipes:
        if recipe.id in seen:
            continue
        seen.add(recipe.id)
        selected.append(recipe)
        if len(selected) >= limit:
            break
    return tuple(selected)


def next_skill_difficulty(completed_difficulties: Sequence[str]) -> str:
    """
    Pick the difficulty to practice next from completed recipe difficulties.

    Progression: Easy -> Medium -> Hard.
    """
    easy_count = sum(1 for d in completed_difficulties if d == EASY)
    medium_count = sum(1 for d in completed_difficulties if d == MEDIUM)
    hard_count = sum(1 for d in completed_difficulties if d == HARD)

    if easy_count < 3 or hard_count > medium_count:
        return EASY
    if medium_count < 5 or easy_count < medium_count * 2:
        return MEDIUM
    return HARD


class RecommendationEngine:
    """Builds contextual recommendation sections."""

    def generate(
        self,
        recipes: Sequence[Recipe],
        now: datetime,
        behavior: Optional[BehaviorSnapshot] = None,
    ) -> List[RecommendationSection]:
        """
        Generate recommendation sections for the current context.

        Args:
            recipes: Full catalog, sorted by name
            now: Time to evaluate time-of-day and weekend context at
            behavior: Behavior snapshot (empty behavior if not given)

        Returns:
            Ordered sections: time-based, favorite expansion, skill
            progression, cultural context (each only when it has recipes)
        """
        if not recipes:
            return []

        behavior = behavior or BehaviorSnapshot()

        candidates = [
            self.time_based_section(recipes, now),
            self.favorite_expansion_section(recipes),
            self.skill_progression_section(recipes, behavior),
            self.cultural_context_section(recipes, now),
        ]
        sections = [section for section in candidates if section is not None]

        logger.info(
            f"[RECS] Generated {len(sections)} sections at {now.isoformat(timespec='minutes')}: "
            f"{[s.section_type.value for s in sections]}"
        )
        return sections

    # ==================== Time-Based ====================

    def time_based_section(self, recipes: Sequence[Recipe], now: datetime) -> Optional[RecommendationSection]:
        hour = now.hour
        weekend = is_weekend(now)

        if 5 <= hour <= 11:
            time_limit = 45 if weekend else 20
            suggested = [
                r for r in recipes
                if r.total_time <= time_limit
                and (name_matches(r.name, MORNING_KEYWORDS) or r.total_time <= 30)
            ]
            title = "Perfect for Weekend Morning" if weekend else "Quick Breakfast Ideas"
            subtitle = "Start your weekend with something special" if weekend else "Ready in under 20 minutes"
            reasoning = (
                f"Selected based on current time ({format_hour(hour)}) "
                "and typical morning cooking preferences."
            )

        elif 12 <= hour <= 17:
            time_limit = 60 if weekend else 35
            suggested = [
                r for r in recipes
                if 20 < r.total_time <= time_limit
                and (name_matches(r.name, LUNCH_KEYWORDS) or r.difficulty in (EASY, MEDIUM))
            ]
            title = "Weekend Lunch Specials" if weekend else "Satisfying Lunch Options"
            subtitle = "Perfect for a relaxed weekend meal" if weekend else "Filling and not too heavy"
            reasoning = "Moderate preparation time dishes suitable for midday cooking."

        elif 18 <= hour <= 22:
            suggested = [
                r for r in recipes
                if name_matches(r.name, EVENING_KEYWORDS)
                or (r.cook_time >= 30 and r.difficulty != HARD)
            ]
            title = "Traditional Evening Meals"
            subtitle = "Hearty dishes perfect for dinner"
            reasoning = "Traditional Ghanaian dinner dishes that bring family together."

        else:
            suggested = [
                r for r in recipes
                if r.total_time <= 25
                and (name_matches(r.name, LATE_NIGHT_KEYWORDS) or r.difficulty == EASY)
            ]
            title = "Quick Late Night Bites"
            subtitle = "Simple and satisfying"
            reasoning = "Easy-to-make dishes perfect for late evening cooking."

        if not suggested:
            return None

        return RecommendationSection(
            title=title,
            subtitle=subtitle,
            recipes=take_unique(suggested, MAX_SECTION_RECIPES),
            reasoning=reasoning,
            section_type=RecommendationType.TIME_BASED,
        )

    # ==================== Favorite Expansion ====================

    def favorite_expansion_section(self, recipes: Sequence[Recipe]) -> Optional[RecommendationSection]:
        favorites = [r for r in recipes if r.is_favorite]
        if not favorites:
            return None

        favorite_categories = {r.category for r in favorites}
        favorite_difficulties = {r.difficulty for r in favorites}
        average_time = sum(r.total_time for r in favorites) // len(favorites)

        suggestions = [
            r for r in recipes
            if not r.is_favorite
            and (
                r.category in favorite_categories
                or r.difficulty in favorite_difficulties
                or abs(r.total_time - average_time) <= 15
            )
        ]
        if not suggestions:
            return None

        return RecommendationSection(
            title="More Like Your Favorites",
            subtitle="Based on recipes you've saved",
            recipes=take_unique(suggestions, MAX_SECTION_RECIPES),
            reasoning=(
                "Suggested because they match the categories, difficulty levels, "
                "or cooking times of your favorite recipes."
            ),
            section_type=RecommendationType.FAVORITE_EXPANSION,
        )

    # ==================== Skill Progression ====================

    def skill_progression_section(
        self,
        recipes: Sequence[Recipe],
        behavior: BehaviorSnapshot,
    ) -> Optional[RecommendationSection]:
        completed = set(behavior.completed_recipes)
        by_id = {r.id: r for r in recipes}
        # Completed ids no longer in the catalog are skipped
        completed_difficulties = [by_id[rid].difficulty for rid in behavior.completed_recipes if rid in by_id]

        target = next_skill_difficulty(completed_difficulties)

        suggestions = [r for r in recipes if r.id not in completed and r.difficulty == target]
        if not suggestions:
            return None

        title, subtitle = SKILL_PROGRESSION_TITLES[target]
        return RecommendationSection(
            title=title,
            subtitle=subtitle,
            recipes=take_unique(suggestions, MAX_SKILL_RECIPES),
            reasoning="Suggested to help you progress your cooking skills at a comfortable pace.",
            section_type=RecommendationType.SKILL_PROGRESSION,
        )

    # ==================== Cultural Context ====================

    def cultural_context_section(self, recipes: Sequence[Recipe], now: datetime) -> Optional[RecommendationSection]:
        if is_weekend(now):
            # Family cooking, elaborate dishes, traditional preparations
            suggestions = [
                r for r in recipes
                if r.total_time >= 45
                or name_matches(r.name, WEEKEND_TRADITIONAL_KEYWORDS)
                or r.servings >= 4
            ]
            title = "Traditional Weekend Cooking"
            subtitle = "Perfect for family time and relaxed cooking"
            reasoning = "Weekend dishes that bring family together and celebrate Ghanaian cooking traditions."
        else:
            # Practical, efficient, still authentic
            suggestions = [
                r for r in recipes
                if r.total_time <= 45
                and r.difficulty != HARD
                and name_matches(r.name, WEEKDAY_PRACTICAL_KEYWORDS)
            ]
            title = "Practical Weekday Dishes"
            subtitle = "Authentic flavors without the weekend time commitment"
            reasoning = "Traditional Ghanaian dishes adapted for busy weekday schedules."

        if not suggestions:
            return None

        return RecommendationSection(
            title=title,
            subtitle=subtitle,
            recipes=take_unique(suggestions, MAX_CULTURAL_RECIPES),
            reasoning=reasoning,
            section_type=RecommendationType.CULTURAL_CONTEXT,
        )
