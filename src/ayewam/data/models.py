"""
Data models for the Ayewam recommendation engine.

These models define the core entities used throughout the system:
- Recipe: Catalog recipes (read-only to the recommendation core)
- RecommendationSection: A titled, explained group of suggested recipes
- CookingPatterns / TimePreferences: Profiles derived from user behavior
- BehaviorSnapshot: Typed, defaulted view of every persisted behavior collection
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from ..vocabulary import (
    DEFAULT_EXPLORATION_RATE,
    DEFAULT_MORNING_LIKELIHOOD,
    DEFAULT_QUICK_MEAL_PREFERENCE,
    DEFAULT_TRADITIONAL_PREFERENCE,
    DEFAULT_WEEKEND_PREFERENCE,
    EASY,
    UNCATEGORIZED,
)

TRUE_FLAG_VALUES = ("1", "true", "yes")


def _parse_flag(value: Any) -> bool:
    """Boolean from JSON/SQLite values or CSV text ("False" and "0" are false)."""
    if isinstance(value, str):
        return value.strip().lower() in TRUE_FLAG_VALUES
    return bool(value)


@dataclass
class Recipe:
    """Recipe from the catalog."""

    id: str
    name: str
    description: str = ""
    category: str = UNCATEGORIZED  # Category name
    difficulty: str = EASY  # "Easy", "Medium", "Hard"
    region: str = ""
    prep_time: int = 0  # Minutes
    cook_time: int = 0  # Minutes
    servings: int = 0
    is_favorite: bool = False
    image_name: Optional[str] = None

    @property
    def total_time(self) -> int:
        """Canonical total time (prep + cook) used by all scoring."""
        return self.prep_time + self.cook_time

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "difficulty": self.difficulty,
            "region": self.region,
            "prep_time": self.prep_time,
            "cook_time": self.cook_time,
            "total_time": self.total_time,
            "servings": self.servings,
            "is_favorite": self.is_favorite,
            "image_name": self.image_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recipe":
        """Create Recipe from dictionary.

        Unknown keys (e.g. "total_time", "ingredients") are ignored and
        negative times/servings are clamped to zero.
        """
        return cls(
            id=str(data["id"]),
            name=data["name"],
            description=data.get("description") or "",
            category=data.get("category") or UNCATEGORIZED,
            difficulty=data.get("difficulty") or EASY,
            region=data.get("region") or "",
            prep_time=max(0, int(data.get("prep_time") or 0)),
            cook_time=max(0, int(data.get("cook_time") or 0)),
            servings=max(0, int(data.get("servings") or 0)),
            is_favorite=_parse_flag(data.get("is_favorite", False)),
            image_name=data.get("image_name"),
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.difficulty}, {self.total_time} min)"


class RecommendationType(str, Enum):
    """Kinds of recommendation section."""
    TIME_BASED = "timeBased"
    FAVORITE_EXPANSION = "favoriteExpansion"
    SKILL_PROGRESSION = "skillProgression"
    CULTURAL_CONTEXT = "culturalContext"
    SEASONAL = "seasonal"
    QUICK_AND_EASY = "quickAndEasy"


def suggestion_key(recipe_id: str, section_type: RecommendationType) -> str:
    """Composite key used by ignored/successful suggestion sets."""
    return f"{recipe_id}|{RecommendationType(section_type).value}"


@dataclass(frozen=True)
class RecommendationSection:
    """A named, reasoned group of recommended recipes of one type.

    Immutable: personalization builds new sections instead of editing these.
    """
    title: str
    subtitle: Optional[str]
    recipes: Tuple[Recipe, ...]
    reasoning: str
    section_type: RecommendationType

    @property
    def recipe_ids(self) -> List[str]:
        return [recipe.id for recipe in self.recipes]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "reasoning": self.reasoning,
            "section_type": self.section_type.value,
            "recipes": [recipe.to_dict() for recipe in self.recipes],
        }


class CookingFrequency(str, Enum):
    """How often the user cooks, from completed-recipe count."""
    BEGINNER = "beginner"        # < 5 completed recipes
    OCCASIONAL = "occasional"    # 5-14 completed recipes
    REGULAR = "regular"          # 15-29 completed recipes
    EXPERIENCED = "experienced"  # 30+ completed recipes


class SkillLevel(str, Enum):
    """Cooking skill assessment from the completed difficulty histogram."""
    NOVICE = "novice"              # Mostly easy recipes
    DEVELOPING = "developing"      # Mix of easy and medium
    INTERMEDIATE = "intermediate"  # Comfortable with medium
    ADVANCED = "advanced"          # Regularly tackles hard recipes


@dataclass(frozen=True)
class CookingPatterns:
    """Derived statistical summary of a user's cooking history."""
    preferred_cooking_times: List[int] = field(default_factory=list)  # Hours of day
    average_session_duration: float = 0.0  # Seconds
    preferred_complexity: str = EASY
    exploration_rate: float = DEFAULT_EXPLORATION_RATE  # 0.2-0.8
    favorite_categories: List[str] = field(default_factory=list)  # Ranked
    cooking_frequency: CookingFrequency = CookingFrequency.BEGINNER
    skill_progression: SkillLevel = SkillLevel.NOVICE

    @classmethod
    def default(cls) -> "CookingPatterns":
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "preferred_cooking_times": list(self.preferred_cooking_times),
            "average_session_duration": self.average_session_duration,
            "preferred_complexity": self.preferred_complexity,
            "exploration_rate": self.exploration_rate,
            "favorite_categories": list(self.favorite_categories),
            "cooking_frequency": self.cooking_frequency.value,
            "skill_progression": self.skill_progression.value,
        }


@dataclass(frozen=True)
class TimePreferences:
    """Behavioral affinities, each a probability in [0, 1]."""
    morning_cooking_likelihood: float = DEFAULT_MORNING_LIKELIHOOD
    weekend_cooking_preference: float = DEFAULT_WEEKEND_PREFERENCE
    quick_meal_preference: float = DEFAULT_QUICK_MEAL_PREFERENCE  # Prefers <=30 min
    traditional_meal_preference: float = DEFAULT_TRADITIONAL_PREFERENCE

    @classmethod
    def default(cls) -> "TimePreferences":
        return cls()

    def to_dict(self) -> Dict[str, float]:
        return {
            "morning_cooking_likelihood": self.morning_cooking_likelihood,
            "weekend_cooking_preference": self.weekend_cooking_preference,
            "quick_meal_preference": self.quick_meal_preference,
            "traditional_meal_preference": self.traditional_meal_preference,
        }


class BehaviorSnapshot(BaseModel):
    """
    Consistent, typed copy of every persisted behavior collection.

    Each field is also a BehaviorStore key; a missing or undecodable key
    reads as the field default.
    """
    completed_recipes: List[str] = Field(default_factory=list)
    recently_viewed_recipes: List[str] = Field(default_factory=list)  # Most recent first
    category_preferences: Dict[str, float] = Field(default_factory=dict)
    difficulty_progression: Dict[str, int] = Field(default_factory=dict)
    difficulty_preferences: Dict[str, float] = Field(default_factory=dict)
    cooking_time_preferences: Dict[str, int] = Field(default_factory=dict)
    explored_categories: List[str] = Field(default_factory=list)
    cooking_time_slots: List[int] = Field(default_factory=list)
    session_times: List[float] = Field(default_factory=list)  # Epoch seconds
    session_durations: List[float] = Field(default_factory=list)  # Seconds
    last_session_time: Optional[datetime] = None
    last_cooking_session: Optional[datetime] = None
    ignored_suggestions: List[str] = Field(default_factory=list)
    successful_suggestions: List[str] = Field(default_factory=list)
    suggestion_type_scores: Dict[str, float] = Field(default_factory=dict)

    def is_ignored(self, recipe_id: str, section_type: RecommendationType) -> bool:
        return suggestion_key(recipe_id, section_type) in self.ignored_suggestions
