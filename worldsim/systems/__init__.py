"""Engine systems: RNG, monster and actor generation."""

from worldsim.systems.rng import SimRandom
from worldsim.systems.monsters import MonsterGenerator
from worldsim.systems.generator import ActorGenerator

__all__ = ["ActorGenerator", "MonsterGenerator", "SimRandom"]
