"""
Recommendation service for the Ayewam recipe app.

Composition root: wires the recipe catalog, behavior store, pattern analyzer,
behavior tracker, recommendation engine and personalizer together, and is
the API that outer layers (CLI, web app) talk to.
"""

import logging
import random
from datetime import datetime
from typing import Callable, List, Optional

from .behavior.pattern_analyzer import PatternAnalyzer
from .behavior.tracker import BehaviorTracker
from .data.behavior_store import BehaviorStore
from .data.catalog import RecipeCatalog
from .data.models import (
    CookingPatterns,
    Recipe,
    RecommendationSection,
    RecommendationType,
    TimePreferences,
)
from .recommendations.engine import RecommendationEngine
from .recommendations.personalizer import Personalizer
from .vocabulary import TOTAL_CATEGORY_COUNT

logger = logging.getLogger(__name__)


class RecommendationService:
    """Entry point for recommendations and behavior tracking."""

    def __init__(
        self,
        catalog: RecipeCatalog,
        store: BehaviorStore,
        clock: Callable[[], datetime] = datetime.now,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the service.

        Args:
            catalog: Recipe catalog to recommend from
            store: Behavior store holding the user's history
            clock: Returns the current time; injectable for tests
            rng: Random generator for exploration shuffling
        """
        self.catalog = catalog
        self.store = store
        self.clock = clock

        self.analyzer = PatternAnalyzer()
        self.tracker = BehaviorTracker(store, analyzer=self.analyzer, clock=clock)
        self.engine = RecommendationEngine()
        self.personalizer = Personalizer(rng=rng)

        logger.info("Recommendation service initialized")

    @classmethod
    def from_data_dir(cls, db_dir: str = "data", **kwargs) -> "RecommendationService":
        """Build a service backed by the databases in db_dir."""
        return cls(RecipeCatalog(db_dir=db_dir), BehaviorStore(db_dir=db_dir), **kwargs)

    # ==================== Recommendations ====================

    def get_recommendations(self, now: Optional[datetime] = None) -> List[RecommendationSection]:
        """Contextual recommendation sections for `now` (defaults to the clock)."""
        now = now or self.clock()
        recipes = self.catalog.fetch_all_recipes()
        behavior = self.store.snapshot()
        return self.engine.generate(recipes, now, behavior)

    def get_personalized_recommendations(self, now: Optional[datetime] = None) -> List[RecommendationSection]:
        """
        Recommendation sections adapted to learned user behavior.

        The catalog and behavior store are each read once, so the whole pass
        works from one consistent snapshot.
        """
        now = now or self.clock()
        recipes = self.catalog.fetch_all_recipes()
        behavior = self.store.snapshot()

        patterns = self.analyzer.analyze(behavior)
        time_preferences = self.analyzer.time_preferences(behavior)

        base_sections = self.engine.generate(recipes, now, behavior)
        sections = self.personalizer.personalize(
            base_sections, patterns, time_preferences, behavior, recipes
        )

        logger.info(f"[RECS] Personalized {len(base_sections)} base sections into {len(sections)}")
        return sections

    # ==================== Tracking ====================

    def _lookup(self, recipe_id: str) -> Optional[Recipe]:
        recipe = self.catalog.get_recipe(recipe_id)
        if recipe is None:
            logger.warning(f"[TRACK] Unknown recipe id {recipe_id!r}, event ignored")
        return recipe

    def track_recipe_viewed(self, recipe_id: str) -> bool:
        recipe = self._lookup(recipe_id)
        if recipe:
            self.tracker.track_recipe_viewed(recipe)
        return recipe is not None

    def track_recipe_cooked(self, recipe_id: str) -> bool:
        recipe = self._lookup(recipe_id)
        if recipe:
            self.tracker.track_recipe_cooked(recipe)
        return recipe is not None

    def track_recipe_favorited(self, recipe_id: str) -> bool:
        recipe = self._lookup(recipe_id)
        if recipe:
            self.tracker.track_recipe_favorited(recipe)
        return recipe is not None

    def track_suggestion_ignored(self, recipe_id: str, section_type: RecommendationType) -> bool:
        recipe = self._lookup(recipe_id)
        if recipe:
            self.tracker.track_suggestion_ignored(recipe, RecommendationType(section_type))
        return recipe is not None

    def track_suggestion_interacted(self, recipe_id: str, section_type: RecommendationType) -> bool:
        recipe = self._lookup(recipe_id)
        if recipe:
            self.tracker.track_suggestion_interacted(recipe, RecommendationType(section_type))
        return recipe is not None

    def track_cooking_session_ended(self, started_at: datetime):
        self.tracker.track_cooking_session_ended(started_at)

    def toggle_favorite(self, recipe_id: str) -> Optional[bool]:
        """
        Flip a recipe's favorite flag.

        Returns:
            The new favorite state, or None if the recipe does not exist
        """
        recipe = self._lookup(recipe_id)
        if recipe is None:
            return None

        new_state = not recipe.is_favorite
        if not self.catalog.set_favorite(recipe_id, new_state):
            return None

        if new_state:
            self.tracker.track_recipe_favorited(recipe)
        return new_state

    def reset_behavior_data(self):
        self.tracker.reset_behavior_data()

    # ==================== Patterns ====================

    def get_cooking_patterns(self) -> CookingPatterns:
        return self.tracker.get_cooking_patterns()

    def get_time_preferences(self) -> TimePreferences:
        return self.tracker.get_time_preferences()

    def get_preferred_difficulty(self) -> str:
        return self.tracker.get_preferred_difficulty()

    def get_preferred_categories(self) -> List[str]:
        return self.tracker.get_preferred_categories()

    def get_exploration_rate(self) -> float:
        return self.tracker.get_exploration_rate()

    def seems_to_prefer_quick_recipes(self) -> bool:
        return self.tracker.seems_to_prefer_quick_recipes()

    # ==================== Summaries ====================

    def has_significant_cooking_data(self) -> bool:
        """Whether there is enough history for personalization to matter."""
        behavior = self.store.snapshot()
        return (
            len(behavior.completed_recipes) >= 3
            or len(behavior.recently_viewed_recipes) >= 10
            or len(behavior.category_preferences) >= 3
        )

    def get_cooking_journey_summary(self) -> str:
        """Summary of the user's cooking journey for debugging/analytics."""
        behavior = self.store.snapshot()
        patterns = self.get_cooking_patterns()
        favorites = len(self.catalog.get_favorite_recipes())

        return "\n".join([
            "Cooking Journey Summary:",
            f"- Completed Recipes: {len(behavior.completed_recipes)}",
            f"- Favorite Recipes: {favorites}",
            f"- Categories Explored: {len(set(behavior.explored_categories))}/{TOTAL_CATEGORY_COUNT}",
            f"- Skill Level: {patterns.skill_progression.value}",
            f"- Cooking Frequency: {patterns.cooking_frequency.value}",
            f"- Preferred Difficulty: {patterns.preferred_complexity}",
            f"- Exploration Rate: {patterns.exploration_rate * 100:.1f}%",
        ])

    def get_behavior_tracking_summary(self) -> str:
        """Privacy-friendly summary of what is tracked."""
        behavior = self.store.snapshot()
        patterns = self.get_cooking_patterns()

        return "\n".join([
            "Your Cooking Data:",
            f"- Recipes completed: {len(behavior.completed_recipes)}",
            f"- Recently viewed: {len(behavior.recently_viewed_recipes)}",
            f"- Favorite categories: {len(patterns.favorite_categories)}",
            "",
            "This data helps improve your recipe suggestions and stays on your device.",
        ])
