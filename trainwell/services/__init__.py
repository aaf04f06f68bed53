"""Services module."""

from .streaks import StreakTracker
from .recovery import RecoveryScorer
from .correlation import CorrelationBuilder
from .suggestions import SuggestionGenerator
from .insights import InsightsEngine

__all__ = [
    "StreakTracker",
    "RecoveryScorer",
    "CorrelationBuilder",
    "SuggestionGenerator",
    "InsightsEngine",
]
