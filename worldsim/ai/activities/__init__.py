"""Activity weighting plugin system.

Each optional activity is an ActivityScorer registered in ACTIVITY_REGISTRY.
The ActivityPolicy collects the weights of all registered scorers and picks
one by weighted random.
"""

from worldsim.ai.activities.base import (
    ACTIVITY_REGISTRY,
    ActivityContext,
    ActivityPolicy,
    ActivityScorer,
    ActivityWeight,
    experience_for_level,
)
from worldsim.ai.activities.registry import register_all_activities

# Auto-register all built-in activities on import
register_all_activities()

__all__ = [
    "ACTIVITY_REGISTRY",
    "ActivityContext",
    "ActivityPolicy",
    "ActivityScorer",
    "ActivityWeight",
    "experience_for_level",
]
