"""AI layer: per-actor brains and the activity weighting policy."""

from worldsim.ai.brain import Action, Brain, IdleBrain, PersonalityBrain
from worldsim.ai.activities import ActivityPolicy

__all__ = ["Action", "ActivityPolicy", "Brain", "IdleBrain", "PersonalityBrain"]
