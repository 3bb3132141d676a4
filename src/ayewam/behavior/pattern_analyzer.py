"""
Pattern analysis over stored user behavior.

Derives CookingPatterns and TimePreferences from a BehaviorSnapshot. Every
method is a pure function of the snapshot it is given; results are recomputed
from scratch after each tracked event rather than patched incrementally.
"""

import logging
from typing import Dict, List

from ..data.models import (
    BehaviorSnapshot,
    CookingFrequency,
    CookingPatterns,
    SkillLevel,
    TimePreferences,
)
from ..vocabulary import (
    DEFAULT_MORNING_LIKELIHOOD,
    DEFAULT_QUICK_MEAL_PREFERENCE,
    DEFAULT_TRADITIONAL_PREFERENCE,
    DIFFICULTY_LEVELS,
    EASY,
    FREQUENCY_THRESHOLDS,
    HARD,
    MAX_EXPLORATION_RATE,
    MEDIUM,
    MIN_EXPLORATION_RATE,
    NEW_USER_EXPLORATION_RATE,
    NEW_USER_VIEW_THRESHOLD,
    TOP_CATEGORY_COUNT,
    TOTAL_CATEGORY_COUNT,
    TRADITIONAL_CATEGORIES,
    WEEKEND_PREFERENCE_BY_FREQUENCY,
)

logger = logging.getLogger(__name__)

MORNING_HOURS = range(5, 12)  # 5 AM through 11 AM


class PatternAnalyzer:
    """Computes derived cooking profiles from behavior snapshots."""

    def analyze(self, behavior: BehaviorSnapshot) -> CookingPatterns:
        """
        Build the full CookingPatterns profile.

        Args:
            behavior: Snapshot of stored behavior data

        Returns:
            Freshly computed CookingPatterns
        """
        return CookingPatterns(
            preferred_cooking_times=list(behavior.cooking_time_slots),
            average_session_duration=self.average_session_duration(behavior),
            preferred_complexity=self.preferred_difficulty(behavior),
            exploration_rate=self.exploration_rate(behavior),
            favorite_categories=self.preferred_categories(behavior),
            cooking_frequency=self.cooking_frequency(behavior),
            skill_progression=self.skill_level(behavior),
        )

    def time_preferences(self, behavior: BehaviorSnapshot) -> TimePreferences:
        """Build the TimePreferences profile."""
        return TimePreferences(
            morning_cooking_likelihood=self.morning_cooking_likelihood(behavior),
            weekend_cooking_preference=self.weekend_preference(behavior),
            quick_meal_preference=self.quick_meal_preference(behavior),
            traditional_meal_preference=self.traditional_meal_preference(behavior),
        )

    # ==================== CookingPatterns ====================

    def preferred_difficulty(self, behavior: BehaviorSnapshot) -> str:
        """
        Most preferred difficulty level.

        Completed recipes weigh 2.0 per completion, favorites contribute their
        accumulated preference weight. Defaults to Easy; ties go to the least
        difficult tied level.
        """
        scores: Dict[str, float] = {}
        for difficulty, count in behavior.difficulty_progression.items():
            scores[difficulty] = scores.get(difficulty, 0.0) + 2.0 * count
        for difficulty, weight in behavior.difficulty_preferences.items():
            scores[difficulty] = scores.get(difficulty, 0.0) + 1.0 * weight

        if not scores or max(scores.values()) <= 0:
            return EASY

        best = max(scores.values())
        for difficulty in DIFFICULTY_LEVELS:
            if scores.get(difficulty) == best:
                return difficulty
        # Only unknown difficulty labels reached the top score
        return EASY

    def preferred_categories(self, behavior: BehaviorSnapshot) -> List[str]:
        """Top categories by accumulated preference score, highest first."""
        ranked = sorted(
            behavior.category_preferences.items(),
            key=lambda item: item[1],
            reverse=True,
        )
        return [category for category, _ in ranked[:TOP_CATEGORY_COUNT]]

    def exploration_rate(self, behavior: BehaviorSnapshot) -> float:
        """How much the user samples unfamiliar categories, in [0.2, 0.8]."""
        if len(behavior.recently_viewed_recipes) < NEW_USER_VIEW_THRESHOLD:
            return NEW_USER_EXPLORATION_RATE

        category_exploration = len(set(behavior.explored_categories)) / TOTAL_CATEGORY_COUNT
        return max(MIN_EXPLORATION_RATE, min(MAX_EXPLORATION_RATE, category_exploration))

    def cooking_frequency(self, behavior: BehaviorSnapshot) -> CookingFrequency:
        completed = len(behavior.completed_recipes)

        if completed >= FREQUENCY_THRESHOLDS["experienced"]:
            return CookingFrequency.EXPERIENCED
        if completed >= FREQUENCY_THRESHOLDS["regular"]:
            return CookingFrequency.REGULAR
        if completed >= FREQUENCY_THRESHOLDS["occasional"]:
            return CookingFrequency.OCCASIONAL
        return CookingFrequency.BEGINNER

    def skill_level(self, behavior: BehaviorSnapshot) -> SkillLevel:
        """Skill assessment from the completed difficulty histogram."""
        progression = behavior.difficulty_progression
        easy_count = progression.get(EASY, 0)
        medium_count = progression.get(MEDIUM, 0)
        hard_count = progression.get(HARD, 0)

        total = easy_count + medium_count + hard_count

        if total < 3:
            return SkillLevel.NOVICE
        if hard_count > 2 and hard_count >= total * 0.3:
            return SkillLevel.ADVANCED
        if medium_count > 3 and medium_count >= total * 0.4:
            return SkillLevel.INTERMEDIATE
        return SkillLevel.DEVELOPING

    def average_session_duration(self, behavior: BehaviorSnapshot) -> float:
        durations = behavior.session_durations
        if not durations:
            return 0.0
        return sum(durations) / len(durations)

    # ==================== TimePreferences ====================

    def morning_cooking_likelihood(self, behavior: BehaviorSnapshot) -> float:
        slots = behavior.cooking_time_slots
        if not slots:
            return DEFAULT_MORNING_LIKELIHOOD

        morning = sum(1 for hour in slots if hour in MORNING_HOURS)
        return morning / len(slots)

    def weekend_preference(self, behavior: BehaviorSnapshot) -> float:
        # Day-of-week of cooking events is not tracked; frequency stands in
        frequency = self.cooking_frequency(behavior)
        return WEEKEND_PREFERENCE_BY_FREQUENCY[frequency.value]

    def quick_meal_preference(self, behavior: BehaviorSnapshot) -> float:
        buckets = behavior.cooking_time_preferences
        total = sum(buckets.values())
        if total <= 0:
            return DEFAULT_QUICK_MEAL_PREFERENCE

        return buckets.get("quick", 0) / total

    def traditional_meal_preference(self, behavior: BehaviorSnapshot) -> float:
        scores = behavior.category_preferences
        total = sum(scores.values())
        if total <= 0:
            return DEFAULT_TRADITIONAL_PREFERENCE

        traditional = sum(scores.get(category, 0.0) for category in TRADITIONAL_CATEGORIES)
        return traditional / total
