"""
Behavior tracker for the Ayewam recommendation engine.

The single write path into the BehaviorStore. Each tracking call updates the
stored counters and then recomputes the cached CookingPatterns and
TimePreferences from a fresh snapshot.

Tracking is fire-and-forget: callers get no return value and never see an
exception. Persistence failures are logged by the store and the affected
update is skipped.
"""

import functools
import logging
from datetime import datetime
from typing import Callable, List, Optional

from ..data.behavior_store import BehaviorStore
from ..data.models import (
    CookingPatterns,
    Recipe,
    RecommendationType,
    TimePreferences,
    suggestion_key,
)
from ..vocabulary import (
    COOKED_CATEGORY_WEIGHT,
    COOKING_TIME_SLOTS_LIMIT,
    FAVORITED_CATEGORY_WEIGHT,
    FAVORITED_DIFFICULTY_WEIGHT,
    RECENTLY_VIEWED_LIMIT,
    SESSION_DURATIONS_LIMIT,
    SESSION_GAP_SECONDS,
    SESSION_TIMES_LIMIT,
    cooking_time_bucket,
)
from .pattern_analyzer import PatternAnalyzer

logger = logging.getLogger(__name__)


def _tracking_event(method):
    """
    Run a tracking method atomically, swallow and log failures, then refresh
    patterns. The store lock is held for the whole event and the refresh.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.store.transaction():
            try:
                method(self, *args, **kwargs)
            except Exception as e:
                logger.error(f"[TRACK] {method.__name__} failed: {e}", exc_info=True)
            self.refresh_patterns()

    return wrapper


class BehaviorTracker:
    """Records user interactions and keeps derived patterns current."""

    def __init__(
        self,
        store: BehaviorStore,
        analyzer: Optional[PatternAnalyzer] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the tracker.

        Args:
            store: Behavior store to write to
            analyzer: Pattern analyzer (a new one if not given)
            clock: Returns the current time; injectable for tests
        """
        self.store = store
        self.analyzer = analyzer or PatternAnalyzer()
        self.clock = clock

        self.current_cooking_patterns = CookingPatterns.default()
        self.current_time_preferences = TimePreferences.default()

        # Load existing patterns
        self.refresh_patterns()

    # ==================== Tracking Operations ====================

    @_tracking_event
    def track_recipe_viewed(self, recipe: Recipe):
        """Track when user views a recipe."""
        now = self.clock()

        recent = [rid for rid in self.store.get_recently_viewed_recipes() if rid != recipe.id]
        recent.insert(0, recipe.id)
        self.store.set_recently_viewed_recipes(recent[:RECENTLY_VIEWED_LIMIT])

        session_times = self.store.get_session_times()
        session_times.append(now.timestamp())
        self.store.set_session_times(_keep_last(session_times, SESSION_TIMES_LIMIT))

        explored = self.store.get_explored_categories()
        if recipe.category not in explored:
            explored.append(recipe.category)
            self.store.set_explored_categories(explored)

        self._update_session_metrics(now)

        logger.debug(f"[TRACK] Viewed: {recipe.name}")

    @_tracking_event
    def track_recipe_cooked(self, recipe: Recipe):
        """Track when user cooks (completes) a recipe."""
        now = self.clock()

        # Completed set is idempotent; every cook still counts toward skill and category
        completed = self.store.get_completed_recipes()
        if recipe.id not in completed:
            completed.append(recipe.id)
            self.store.set_completed_recipes(completed)

        self.store.set_last_cooking_session(now)

        slots = self.store.get_cooking_time_slots()
        slots.append(now.hour)
        self.store.set_cooking_time_slots(_keep_last(slots, COOKING_TIME_SLOTS_LIMIT))

        progression = self.store.get_difficulty_progression()
        progression[recipe.difficulty] = progression.get(recipe.difficulty, 0) + 1
        self.store.set_difficulty_progression(progression)

        self._add_category_score(recipe.category, COOKED_CATEGORY_WEIGHT)

        logger.info(f"[TRACK] Recipe cooked: {recipe.name} - Updated user patterns")

    @_tracking_event
    def track_recipe_favorited(self, recipe: Recipe):
        """Track when user favorites a recipe."""
        self._add_category_score(recipe.category, FAVORITED_CATEGORY_WEIGHT)

        preferences = self.store.get_difficulty_preferences()
        preferences[recipe.difficulty] = preferences.get(recipe.difficulty, 0.0) + FAVORITED_DIFFICULTY_WEIGHT
        self.store.set_difficulty_preferences(preferences)

        bucket = cooking_time_bucket(recipe.total_time)
        buckets = self.store.get_cooking_time_preferences()
        buckets[bucket] = buckets.get(bucket, 0) + 1
        self.store.set_cooking_time_preferences(buckets)

        logger.info(f"[TRACK] Recipe favorited: {recipe.name}")

    @_tracking_event
    def track_suggestion_ignored(self, recipe: Recipe, section_type: RecommendationType):
        """Track an ignored suggestion so it stops appearing in that section type."""
        key = suggestion_key(recipe.id, section_type)

        ignored = self.store.get_ignored_suggestions()
        if key not in ignored:
            ignored.append(key)
            self.store.set_ignored_suggestions(ignored)

        logger.info(f"[TRACK] Suggestion ignored: {recipe.name} ({key})")

    @_tracking_event
    def track_suggestion_interacted(self, recipe: Recipe, section_type: RecommendationType):
        """Track a suggestion the user acted on and reinforce its section type."""
        section_type = RecommendationType(section_type)
        key = suggestion_key(recipe.id, section_type)

        successful = self.store.get_successful_suggestions()
        if key not in successful:
            successful.append(key)
            self.store.set_successful_suggestions(successful)

        scores = self.store.get_suggestion_type_scores()
        scores[section_type.value] = scores.get(section_type.value, 0.0) + 1.0
        self.store.set_suggestion_type_scores(scores)

        logger.info(f"[TRACK] Suggestion interacted: {recipe.name} ({key})")

    @_tracking_event
    def track_cooking_session_ended(self, started_at: datetime):
        """Record the duration of a finished cooking session."""
        duration = (self.clock() - started_at).total_seconds()
        if duration < 0:
            logger.warning(f"[TRACK] Ignoring cooking session that ends before it starts ({started_at})")
            return

        durations = self.store.get_session_durations()
        durations.append(duration)
        self.store.set_session_durations(_keep_last(durations, SESSION_DURATIONS_LIMIT))

        logger.info(f"[TRACK] Cooking session ended: {int(duration / 60)} minutes")

    @_tracking_event
    def reset_behavior_data(self):
        """Reset all behavioral data (user privacy control)."""
        self.store.reset()
        logger.info("[TRACK] User behavior data reset")

    # ==================== Derived Patterns ====================

    def refresh_patterns(self):
        """Recompute cached patterns from the committed store contents."""
        behavior = self.store.snapshot()
        self.current_cooking_patterns = self.analyzer.analyze(behavior)
        self.current_time_preferences = self.analyzer.time_preferences(behavior)

    def get_cooking_patterns(self) -> CookingPatterns:
        return self.current_cooking_patterns

    def get_time_preferences(self) -> TimePreferences:
        return self.current_time_preferences

    def get_preferred_difficulty(self) -> str:
        return self.current_cooking_patterns.preferred_complexity

    def get_preferred_categories(self) -> List[str]:
        return list(self.current_cooking_patterns.favorite_categories)

    def get_exploration_rate(self) -> float:
        return self.current_cooking_patterns.exploration_rate

    def seems_to_prefer_quick_recipes(self) -> bool:
        """True when more than 60% of favorited recipes are quick."""
        return self.current_time_preferences.quick_meal_preference > 0.6

    # ==================== Private Helpers ====================

    def _add_category_score(self, category: str, weight: float):
        preferences = self.store.get_category_preferences()
        preferences[category] = preferences.get(category, 0.0) + weight
        self.store.set_category_preferences(preferences)

    def _update_session_metrics(self, now: datetime):
        """Interactions less than an hour apart extend the same browsing session."""
        last = self.store.get_last_session_time()
        if last is not None:
            gap = (now - last).total_seconds()
            if 0 <= gap < SESSION_GAP_SECONDS:
                durations = self.store.get_session_durations()
                durations.append(gap)
                self.store.set_session_durations(_keep_last(durations, SESSION_DURATIONS_LIMIT))

        self.store.set_last_session_time(now)


def _keep_last(values: list, limit: int) -> list:
    return values[-limit:] if len(values) > limit else values
