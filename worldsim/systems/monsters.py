"""Monster generator: level-scaled dungeon opponents."""

from __future__ import annotations

from typing import TYPE_CHECKING

from worldsim.core.enums import Domain
from worldsim.core.models import Monster

if TYPE_CHECKING:
    from worldsim.systems.rng import SimRandom


# (max_level, names); the first bracket whose max_level >= level is used
_MONSTER_NAMES: tuple[tuple[int, tuple[str, ...]], ...] = (
    (5,   ("Giant Rat", "Cave Bat", "Kobold", "Slime")),
    (15,  ("Goblin", "Skeleton", "Wolf", "Bandit")),
    (30,  ("Orc Warrior", "Ghoul", "Harpy", "Troll")),
    (50,  ("Ogre", "Wraith", "Minotaur", "Basilisk")),
    (75,  ("Vampire", "Wyvern", "Golem", "Lich")),
    (100, ("Death Knight", "Ancient Dragon", "Demon Lord", "Titan")),
)

_BOSS_PREFIXES: tuple[str, ...] = ("Dread", "Elder", "Champion", "Lord")


class MonsterGenerator:
    """Creates monsters whose stats scale smoothly with dungeon level."""

    __slots__ = ("_rng", "_boss_chance")

    def __init__(self, rng: SimRandom, boss_chance: float = 0.05) -> None:
        self._rng = rng
        self._boss_chance = boss_chance

    def generate(self, level: int, boss: bool | None = None) -> Monster:
        level = max(1, min(100, level))
        if boss is None:
            boss = self._rng.chance(Domain.SPAWN, self._boss_chance)
        mult = 2.0 if boss else 1.0

        hp = int(((25 * level) + level ** 1.1 * 8) * mult)
        strength = int(((2 * level) + level ** 1.05 * 1.5) * mult)
        defence = int(((level) + level ** 1.02 * 0.5) * mult * 0.5)
        weapon_power = int(((1.5 * level) + level ** 1.05) * mult)
        armor_power = int(((0.5 * level) + level ** 1.02 * 0.3) * mult * 0.4)

        names = _MONSTER_NAMES[-1][1]
        for max_level, bracket in _MONSTER_NAMES:
            if level <= max_level:
                names = bracket
                break
        name = self._rng.choice(Domain.SPAWN, names)
        if boss:
            name = f"{self._rng.choice(Domain.SPAWN, _BOSS_PREFIXES)} {name}"

        hp = max(15, hp)
        return Monster(
            name=name, level=level, hp=hp, max_hp=hp,
            strength=max(3, strength), defence=max(0, defence),
            weapon_power=max(1, weapon_power), armor_power=max(0, armor_power),
            is_boss=boss,
        )

    def gold_reward(self, monster: Monster) -> int:
        gold = monster.base_gold_reward() + self._rng.randint(Domain.LOOT, 10, 50)
        if monster.is_boss:
            gold *= 3
        return gold
