"""
Canonical vocabulary for recipe recommendations.

This file provides the authoritative constants for:
- Difficulty levels and categories used by the catalog
- Dish keywords matched against recipe names (time windows, cultural context)
- Thresholds and caps shared by the engine, tracker and analyzer

Keyword matching is always case-insensitive substring matching.
"""

from typing import Dict, Iterable, Tuple

# =============================================================================
# DIFFICULTY
# =============================================================================
EASY = "Easy"
MEDIUM = "Medium"
HARD = "Hard"

# Ordered least to most difficult (tie-break order)
DIFFICULTY_LEVELS: Tuple[str, ...] = (EASY, MEDIUM, HARD)

# =============================================================================
# CATEGORIES
# =============================================================================
UNCATEGORIZED = "Uncategorized"

CATALOG_CATEGORIES: Tuple[str, ...] = (
    "Soups",
    "Stews",
    "Rice Dishes",
    "Street Food",
    "Breakfast",
    "Desserts",
    "Drinks",
    "Sides",
)

TOTAL_CATEGORY_COUNT = len(CATALOG_CATEGORIES)

# Share of category score in these drives traditional-meal preference
TRADITIONAL_CATEGORIES: Tuple[str, ...] = ("Soups", "Stews", "Rice Dishes")

# =============================================================================
# DISH KEYWORDS (matched against recipe names)
# =============================================================================
MORNING_KEYWORDS = ("koko", "porridge", "tea", "bread", "bofrot")
LUNCH_KEYWORDS = ("rice", "waakye", "jollof")
EVENING_KEYWORDS = ("soup", "stew", "light soup", "palm nut", "groundnut")
LATE_NIGHT_KEYWORDS = ("kelewele", "plantain")

WEEKEND_TRADITIONAL_KEYWORDS = ("banku", "fufu", "palm nut", "groundnut")
WEEKDAY_PRACTICAL_KEYWORDS = ("jollof", "waakye", "kelewele", "red red")

# Personalizer narrows cultural sections to these for traditional cooks
HEARTY_KEYWORDS = ("soup", "stew", "fufu", "banku")

# =============================================================================
# SECTION CAPS
# =============================================================================
MAX_SECTION_RECIPES = 5
MAX_SKILL_RECIPES = 4
MAX_CULTURAL_RECIPES = 4
MAX_EXPLORATION_RECIPES = 4

# =============================================================================
# BEHAVIOR TRACKING LIMITS
# =============================================================================
RECENTLY_VIEWED_LIMIT = 20
SESSION_TIMES_LIMIT = 50
SESSION_DURATIONS_LIMIT = 20
COOKING_TIME_SLOTS_LIMIT = 30
SESSION_GAP_SECONDS = 3600  # interactions closer than this share a session

COOKED_CATEGORY_WEIGHT = 2.0
FAVORITED_CATEGORY_WEIGHT = 1.5
FAVORITED_DIFFICULTY_WEIGHT = 1.5

# Cooking-time buckets: (name, inclusive upper bound in minutes)
COOKING_TIME_BUCKETS: Tuple[Tuple[str, int], ...] = (
    ("quick", 20),
    ("medium", 45),
    ("long", 90),
)
EXTENDED_BUCKET = "extended"

# =============================================================================
# PATTERN DEFAULTS
# =============================================================================
DEFAULT_MORNING_LIKELIHOOD = 0.3
DEFAULT_WEEKEND_PREFERENCE = 0.6
DEFAULT_QUICK_MEAL_PREFERENCE = 0.7
DEFAULT_TRADITIONAL_PREFERENCE = 0.5
DEFAULT_EXPLORATION_RATE = 0.5

NEW_USER_EXPLORATION_RATE = 0.8
MIN_EXPLORATION_RATE = 0.2
MAX_EXPLORATION_RATE = 0.8
NEW_USER_VIEW_THRESHOLD = 10

TOP_CATEGORY_COUNT = 5

# Completed-count lower bounds for each cooking frequency
FREQUENCY_THRESHOLDS: Dict[str, int] = {
    "occasional": 5,
    "regular": 15,
    "experienced": 30,
}

# Cooking frequency -> weekend cooking preference
WEEKEND_PREFERENCE_BY_FREQUENCY: Dict[str, float] = {
    "beginner": 0.7,
    "occasional": 0.6,
    "regular": 0.5,
    "experienced": 0.4,
}


def name_matches(name: str, keywords: Iterable[str]) -> bool:
    """Check whether a recipe name contains any keyword (case-insensitive)."""
    lower = (name or "").lower()
    return any(keyword in lower for keyword in keywords)


def cooking_time_bucket(total_minutes: int) -> str:
    """
    Map a total cooking time to its bucket name.

    Examples:
        15 -> "quick"
        45 -> "medium"
        60 -> "long"
        120 -> "extended"
    """
    for bucket, upper in COOKING_TIME_BUCKETS:
        if total_minutes <= upper:
            return bucket
    return EXTENDED_BUCKET
