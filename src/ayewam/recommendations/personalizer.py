"""
Personalization pass over engine-generated recommendations.

Filters suggestions the user ignored, re-ranks and narrows each section with
the learned CookingPatterns/TimePreferences, and injects two adaptive
sections: skill progression and exploration.
"""

import logging
import random
from dataclasses import replace
from typing import List, Optional, Sequence

from ..data.models import (
    BehaviorSnapshot,
    CookingPatterns,
    Recipe,
    RecommendationSection,
    RecommendationType,
    SkillLevel,
    TimePreferences,
)
from ..vocabulary import (
    EASY,
    HARD,
    HEARTY_KEYWORDS,
    MAX_EXPLORATION_RECIPES,
    MAX_SECTION_RECIPES,
    MAX_SKILL_RECIPES,
    MEDIUM,
    name_matches,
)
from .engine import take_unique

logger = logging.getLogger(__name__)

TARGET_DIFFICULTY_BY_SKILL = {
    SkillLevel.NOVICE: EASY,
    SkillLevel.DEVELOPING: MEDIUM,
    SkillLevel.INTERMEDIATE: MEDIUM,
    SkillLevel.ADVANCED: HARD,
}

QUICK_MEAL_THRESHOLD = 0.7
TRADITIONAL_MEAL_THRESHOLD = 0.6
EXPLORATION_THRESHOLD = 0.6
MIN_COMPLETED_FOR_SKILL_SECTION = 2
UNRANKED_CATEGORY = 99


def target_difficulty(skill_level: SkillLevel) -> str:
    return TARGET_DIFFICULTY_BY_SKILL[skill_level]


class Personalizer:
    """Adapts recommendation sections to a user's learned behavior."""

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Args:
            rng: Random generator used to shuffle exploration picks
        """
        self.rng = rng or random.Random()

    def personalize(
        self,
        base_sections: Sequence[RecommendationSection],
        patterns: CookingPatterns,
        time_preferences: TimePreferences,
        behavior: BehaviorSnapshot,
        recipes: Sequence[Recipe],
    ) -> List[RecommendationSection]:
        """
        Personalize engine output.

        Args:
            base_sections: Sections from RecommendationEngine.generate
            patterns: Current cooking patterns
            time_preferences: Current time preferences
            behavior: Behavior snapshot the patterns were computed from
            recipes: Full catalog, sorted by name

        Returns:
            New list of sections; sections emptied by filtering are dropped
        """
        favorite_count = sum(1 for r in recipes if r.is_favorite)

        sections = []
        for section in base_sections:
            personalized = self.personalize_section(
                section, patterns, time_preferences, behavior, favorite_count
            )
            if personalized.recipes:
                sections.append(personalized)
            else:
                logger.debug(f"[RECS] Dropped emptied section: {section.title}")

        present = {s.section_type for s in sections}
        if RecommendationType.SKILL_PROGRESSION not in present:
            skill_section = self.skill_progression_section(patterns, behavior, recipes)
            if skill_section:
                sections.insert(min(1, len(sections)), skill_section)

        if patterns.exploration_rate > EXPLORATION_THRESHOLD:
            exploration_section = self.exploration_section(patterns, behavior, recipes)
            if exploration_section:
                sections.append(exploration_section)

        return sections

    def personalize_section(
        self,
        section: RecommendationSection,
        patterns: CookingPatterns,
        time_preferences: TimePreferences,
        behavior: BehaviorSnapshot,
        favorite_count: int = 0,
    ) -> RecommendationSection:
        """Apply ignore filtering and the type-specific adjustment to one section."""
        recipes = [r for r in section.recipes if not behavior.is_ignored(r.id, section.section_type)]

        if section.section_type == RecommendationType.TIME_BASED:
            if time_preferences.quick_meal_preference > QUICK_MEAL_THRESHOLD:
                recipes = [r for r in recipes if r.total_time <= 30]

        elif section.section_type == RecommendationType.FAVORITE_EXPANSION:
            # Boost recipes in preferred categories (stable sort)
            ranking = patterns.favorite_categories
            recipes.sort(
                key=lambda r: ranking.index(r.category) if r.category in ranking else UNRANKED_CATEGORY
            )

        elif section.section_type == RecommendationType.SKILL_PROGRESSION:
            target = target_difficulty(patterns.skill_progression)
            recipes = [r for r in recipes if r.difficulty == target]

        elif section.section_type == RecommendationType.CULTURAL_CONTEXT:
            if time_preferences.traditional_meal_preference > TRADITIONAL_MEAL_THRESHOLD:
                recipes = [r for r in recipes if name_matches(r.name, HEARTY_KEYWORDS)]

        completed_count = len(behavior.completed_recipes)
        return replace(
            section,
            subtitle=self._personalized_subtitle(section, patterns, completed_count),
            recipes=take_unique(recipes, MAX_SECTION_RECIPES),
            reasoning=self._personalized_reasoning(section, completed_count, favorite_count),
        )

    # ==================== Injected Sections ====================

    def skill_progression_section(
        self,
        patterns: CookingPatterns,
        behavior: BehaviorSnapshot,
        recipes: Sequence[Recipe],
    ) -> Optional[RecommendationSection]:
        completed = behavior.completed_recipes
        if len(completed) < MIN_COMPLETED_FOR_SKILL_SECTION:
            return None

        target = target_difficulty(patterns.skill_progression)
        completed_ids = set(completed)
        favorite_categories = set(patterns.favorite_categories)

        skill_recipes = [
            r for r in recipes
            if r.id not in completed_ids
            and r.difficulty == target
            and r.category in favorite_categories
            and not behavior.is_ignored(r.id, RecommendationType.SKILL_PROGRESSION)
        ]
        if not skill_recipes:
            return None

        title, subtitle = self._skill_progression_title(patterns.skill_progression, len(completed))
        return RecommendationSection(
            title=title,
            subtitle=subtitle,
            recipes=take_unique(skill_recipes, MAX_SKILL_RECIPES),
            reasoning=(
                f"Based on your cooking progress ({len(completed)} recipes completed), "
                f"these {target.lower()} recipes will help you advance your skills."
            ),
            section_type=RecommendationType.SKILL_PROGRESSION,
        )

    def exploration_section(
        self,
        patterns: CookingPatterns,
        behavior: BehaviorSnapshot,
        recipes: Sequence[Recipe],
    ) -> Optional[RecommendationSection]:
        viewed = set(behavior.recently_viewed_recipes)
        familiar = set(patterns.favorite_categories)

        candidates = [
            r for r in recipes
            if r.id not in viewed
            and r.category not in familiar
            and not behavior.is_ignored(r.id, RecommendationType.SEASONAL)
        ]
        candidates = list(take_unique(candidates, len(candidates)))
        if not candidates:
            return None

        self.rng.shuffle(candidates)
        return RecommendationSection(
            title="Discover Something New",
            subtitle="Based on your adventurous cooking style",
            recipes=tuple(candidates[:MAX_EXPLORATION_RECIPES]),
            reasoning=(
                "You enjoy trying new recipes! These dishes from categories you haven't "
                "explored much might become new favorites."
            ),
            section_type=RecommendationType.SEASONAL,
        )

    # ==================== Copy ====================

    def _personalized_subtitle(
        self,
        section: RecommendationSection,
        patterns: CookingPatterns,
        completed_count: int,
    ) -> Optional[str]:
        if section.section_type == RecommendationType.SKILL_PROGRESSION:
            return f"You've completed {completed_count} recipes!"
        if section.section_type == RecommendationType.FAVORITE_EXPANSION:
            if not patterns.favorite_categories:
                return "Based on your recently viewed recipes"
            return f"More {patterns.favorite_categories[0].lower()} you might love"
        return section.subtitle

    def _personalized_reasoning(
        self,
        section: RecommendationSection,
        completed_count: int,
        favorite_count: int,
    ) -> str:
        # Nothing learned yet: keep the engine's reasoning as is
        if completed_count == 0 and favorite_count == 0:
            return section.reasoning

        reasoning = section.reasoning
        if completed_count > 0:
            reasoning += f" With {completed_count} recipes in your cooking journey"
            if favorite_count > 0:
                reasoning += f" and {favorite_count} favorites saved"
        else:
            reasoning += f" With {favorite_count} favorites saved"

        return reasoning + ", these suggestions are tailored to your preferences."

    def _skill_progression_title(self, level: SkillLevel, completed_count: int):
        if level == SkillLevel.NOVICE:
            return "Build Your Foundation", f"Master these basics ({completed_count} completed so far)"
        if level == SkillLevel.DEVELOPING:
            return "Ready for More Challenge", "Time to level up your skills!"
        if level == SkillLevel.INTERMEDIATE:
            return "Advanced Techniques", "You're becoming a skilled cook!"
        return "Master Chef Level", "Challenge yourself with complex recipes"
