"""Recommendation generation and personalization."""

from .engine import RecommendationEngine
from .personalizer import Personalizer

__all__ = ["RecommendationEngine", "Personalizer"]
