"""Engine layer: simulator, scheduler, combat, respawn, social and political dynamics."""

from worldsim.engine.combat import CombatEngine
from worldsim.engine.politics import PoliticalIntrigue
from worldsim.engine.respawn import RespawnManager
from worldsim.engine.scheduler import WorldScheduler
from worldsim.engine.simulator import WorldSimulator
from worldsim.engine.social import SocialDynamics

__all__ = [
    "CombatEngine",
    "PoliticalIntrigue",
    "RespawnManager",
    "SocialDynamics",
    "WorldScheduler",
    "WorldSimulator",
]
