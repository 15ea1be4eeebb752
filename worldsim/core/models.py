"""Core data models: Personality, Actor, Monster."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from worldsim.core.enums import EquipmentSlot
from worldsim.core.items import DEFAULT_CATALOG, EquipmentCatalog, LootItem

if TYPE_CHECKING:
    from worldsim.ai.brain import Brain


# ---------------------------------------------------------------------------
# Personality
# ---------------------------------------------------------------------------

_COMPAT_TRAITS = ("aggression", "greed", "loyalty", "sociability", "piety")


@dataclass(slots=True)
class Personality:
    """Trait profile in [0, 1] consulted by activities and social dynamics."""

    aggression: float = 0.5
    greed: float = 0.5
    loyalty: float = 0.5
    trustworthiness: float = 0.5
    ambition: float = 0.5
    romanticism: float = 0.5
    commitment: float = 0.5
    sociability: float = 0.5
    piety: float = 0.5
    impulsiveness: float = 0.5

    def likely_to_join_gang(self) -> bool:
        return self.sociability > 0.6 or (self.aggression > 0.6 and self.loyalty > 0.4)

    def likely_to_betray(self) -> bool:
        return self.trustworthiness < 0.25 or (self.loyalty < 0.3 and self.greed > 0.6)

    def likely_to_seek_revenge(self) -> bool:
        return self.aggression > 0.6 and self.impulsiveness > 0.5

    def compatibility(self, other: Personality | None) -> float:
        """1.0 for identical profiles, 0.0 for opposite ones, 0.5 if unknown."""
        if other is None:
            return 0.5
        diff = sum(abs(getattr(self, t) - getattr(other, t)) for t in _COMPAT_TRAITS)
        return max(0.0, min(1.0, 1.0 - diff / len(_COMPAT_TRAITS)))


# ---------------------------------------------------------------------------
# Actor
# ---------------------------------------------------------------------------

@dataclass(slots=True, eq=False)
class Actor:
    """An autonomous NPC living in the simulated town.

    ``hp`` reaching zero makes an actor not-alive; ``is_dead`` is the separate
    permanent-death flag that only the respawn manager clears.
    """

    id: str
    name: str
    level: int = 1
    experience: int = 0

    # --- Vitality ---
    hp: int = 30
    max_hp: int = 30
    base_max_hp: int = 30
    is_dead: bool = False

    # --- Combat ---
    strength: int = 5
    base_strength: int = 5
    defence: int = 2
    base_defence: int = 2
    agility: int = 5
    base_agility: int = 5
    wisdom: int = 20
    charisma: int = 20
    base_weapon_power: int = 0
    base_armor_power: int = 0
    weapon_power: int = 0
    armor_power: int = 0

    # --- Economy ---
    gold: int = 0
    bank_gold: int = 0
    equipped: dict[EquipmentSlot, int] = field(default_factory=dict)
    market_inventory: list[LootItem] = field(default_factory=list)
    max_market_inventory: int = 10

    location: str = "Main Street"

    # --- Social ---
    team: str = ""
    team_secret: str = ""
    controls_turf: bool = False
    team_record: int = 0
    gang_id: str | None = None
    gang_members: list[str] = field(default_factory=list)
    relationships: dict[str, int] = field(default_factory=dict)
    enemies: set[str] = field(default_factory=set)

    # --- Alignment & civic status ---
    chivalry: int = 0
    darkness: int = 0
    loyalty: int = 50
    bank_guard: bool = False
    bank_wage: int = 0
    days_in_prison: int = 0
    is_king: bool = False
    is_story_npc: bool = False

    personality: Personality | None = None
    brain: Brain | None = None
    activity: str = ""

    # -- derived state --

    @property
    def alive(self) -> bool:
        return self.hp > 0 and not self.is_dead

    @property
    def hp_ratio(self) -> float:
        return self.hp / self.max_hp if self.max_hp > 0 else 0.0

    @property
    def attack_power(self) -> int:
        return self.strength + self.weapon_power

    @property
    def armor_class(self) -> int:
        return self.defence + self.armor_power

    @property
    def power(self) -> int:
        """Contribution to team power."""
        return self.level + self.strength + self.defence

    # -- mutation helpers --

    def recalculate_stats(self, catalog: EquipmentCatalog | None = None) -> None:
        """Rebuild derived stats from base values plus equipped items."""
        catalog = catalog or DEFAULT_CATALOG
        weapon = armor = str_bonus = hp_bonus = 0
        for slot, item_id in self.equipped.items():
            item = catalog.get(item_id)
            if item is None:
                continue
            if slot == EquipmentSlot.MAIN_HAND:
                weapon += item.weapon_power
            armor += item.armor_class
            str_bonus += item.strength_bonus
            hp_bonus += item.max_hp_bonus
        self.weapon_power = self.base_weapon_power + weapon
        self.armor_power = self.base_armor_power + armor
        self.strength = self.base_strength + str_bonus
        self.defence = self.base_defence
        self.agility = self.base_agility
        self.max_hp = self.base_max_hp + hp_bonus
        self.hp = min(self.hp, self.max_hp)

    def take_damage(self, amount: int) -> None:
        self.hp = max(0, self.hp - max(0, amount))

    def heal(self, amount: int) -> None:
        self.hp = min(self.max_hp, self.hp + max(0, amount))

    def gain_gold(self, amount: int) -> None:
        self.gold += max(0, amount)

    def spend_gold(self, amount: int) -> int:
        """Spend up to *amount*; gold never drops below zero.  Returns the amount spent."""
        spent = min(self.gold, max(0, amount))
        self.gold -= spent
        return spent

    def gain_experience(self, amount: int) -> None:
        self.experience += max(0, amount)

    def update_location(self, location: str) -> None:
        self.location = location

    def adjust_relationship(self, other_id: str, delta: int) -> None:
        if other_id == self.id:
            return
        self.relationships[other_id] = self.relationships.get(other_id, 0) + delta

    def add_enemy(self, other_id: str) -> None:
        if other_id and other_id != self.id:
            self.enemies.add(other_id)

    def join_team(self, name: str, secret: str, controls_turf: bool = False) -> None:
        if not name or not secret:
            raise ValueError(f"{self.name}: team membership requires a name and a secret")
        self.team = name
        self.team_secret = secret
        self.controls_turf = controls_turf

    def leave_team(self) -> None:
        self.team = ""
        self.team_secret = ""
        self.controls_turf = False
        self.team_record = 0


# ---------------------------------------------------------------------------
# Monster
# ---------------------------------------------------------------------------

@dataclass(slots=True, eq=False)
class Monster:
    """A transient dungeon opponent generated for a single encounter."""

    name: str
    level: int
    hp: int
    max_hp: int
    strength: int
    defence: int
    weapon_power: int
    armor_power: int
    is_boss: bool = False

    @property
    def alive(self) -> bool:
        return self.hp > 0

    def take_damage(self, amount: int) -> None:
        self.hp = max(0, self.hp - max(0, amount))

    def experience_reward(self) -> int:
        level = max(1, self.level)
        exp = int(level ** 1.5 * 15)
        exp += (self.strength + self.defence + self.weapon_power + self.armor_power) // 8
        if self.is_boss:
            exp *= 3
        return exp

    def base_gold_reward(self) -> int:
        """Deterministic part of the gold reward; callers add a 10..50 roll."""
        return int(max(1, self.level) ** 1.5 * 12)
