"""Behavior tracking and pattern analysis."""

from .pattern_analyzer import PatternAnalyzer
from .tracker import BehaviorTracker

__all__ = ["PatternAnalyzer", "BehaviorTracker"]
