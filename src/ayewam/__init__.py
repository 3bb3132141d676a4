"""
Ayewam: contextual recipe recommendations and behavior personalization.
"""

from .data.behavior_store import BehaviorStore
from .data.catalog import RecipeCatalog
from .data.models import Recipe, RecommendationSection, RecommendationType
from .service import RecommendationService

__version__ = "0.1.0"

__all__ = [
    "BehaviorStore",
    "RecipeCatalog",
    "Recipe",
    "RecommendationSection",
    "RecommendationType",
    "RecommendationService",
]
