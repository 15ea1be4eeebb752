"""Actor generator — populates the town with randomised NPCs and a kingdom."""

from __future__ import annotations

from typing import TYPE_CHECKING

from worldsim.ai.brain import PersonalityBrain
from worldsim.core.enums import Domain, GAME_LOCATIONS
from worldsim.core.kingdom import Kingdom
from worldsim.core.models import Actor, Personality

if TYPE_CHECKING:
    from worldsim.config import SimulationConfig
    from worldsim.systems.rng import SimRandom


_FIRST_NAMES: tuple[str, ...] = (
    "Aldous", "Brenna", "Cedric", "Dagny", "Edric", "Fiora", "Gareth", "Helka",
    "Ivor", "Jessa", "Kael", "Liora", "Magnus", "Nessa", "Osric", "Perrin",
    "Quilla", "Rowan", "Sigrid", "Torvald", "Ulla", "Varek", "Wynn", "Yrsa",
)

_EPITHETS: tuple[str, ...] = (
    "the Bold", "the Quiet", "Ironhand", "the Red", "Two-Blades", "the Pious",
    "Goldtooth", "the Wanderer", "Blackcloak", "the Younger", "Stormborn", "the Sly",
)

_PERSONALITY_TRAITS: tuple[str, ...] = (
    "aggression", "greed", "loyalty", "trustworthiness", "ambition",
    "romanticism", "commitment", "sociability", "piety", "impulsiveness",
)

# Town locations where new actors may start
_START_LOCATIONS: tuple[str, ...] = tuple(loc for loc in GAME_LOCATIONS if loc != "Dungeon")


class ActorGenerator:
    """Builds actors with level-scaled stats, a random personality and a brain."""

    __slots__ = ("_config", "_rng")

    def __init__(self, config: SimulationConfig, rng: SimRandom) -> None:
        self._config = config
        self._rng = rng

    def personality(self) -> Personality:
        traits = {t: round(self._rng.random(Domain.SPAWN), 2) for t in _PERSONALITY_TRAITS}
        return Personality(**traits)

    def spawn(self, index: int) -> Actor:
        r = self._rng
        level = r.randint(Domain.SPAWN, 1, 12)
        name = f"{r.choice(Domain.SPAWN, _FIRST_NAMES)} {r.choice(Domain.SPAWN, _EPITHETS)}"

        base_hp = 30 + level * 12 + r.randint(Domain.SPAWN, 0, 10)
        actor = Actor(
            id=f"npc_{index:04d}",
            name=name,
            level=level,
            hp=base_hp,
            max_hp=base_hp,
            base_max_hp=base_hp,
            base_strength=5 + level * 2 + r.randint(Domain.SPAWN, 0, 4),
            base_defence=2 + level + r.randint(Domain.SPAWN, 0, 2),
            base_agility=5 + level + r.randint(Domain.SPAWN, 0, 3),
            wisdom=r.randint(Domain.SPAWN, 10, 80),
            charisma=r.randint(Domain.SPAWN, 10, 80),
            base_weapon_power=2 + level,
            base_armor_power=level // 2,
            gold=r.randint(Domain.SPAWN, 50, 400) * level,
            location=r.choice(Domain.SPAWN, _START_LOCATIONS),
            chivalry=r.randint(Domain.SPAWN, 0, 120),
            darkness=r.randint(Domain.SPAWN, 0, 120),
            loyalty=r.randint(Domain.SPAWN, 10, 100),
            personality=self.personality(),
        )
        actor.recalculate_stats()
        actor.hp = actor.max_hp
        actor.brain = PersonalityBrain(actor, r)
        return actor

    def build_roster(self, count: int | None = None) -> list[Actor]:
        n = self._config.initial_actor_count if count is None else count
        return [self.spawn(i) for i in range(n)]

    def build_kingdom(self) -> Kingdom:
        cfg = self._config
        return Kingdom(
            treasury=cfg.starting_treasury,
            tax_rate=cfg.starting_tax_rate,
            magic_budget=cfg.starting_magic_budget,
        )
