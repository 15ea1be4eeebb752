"""Enumerations used throughout the simulator."""

from __future__ import annotations

from enum import Enum, IntEnum, unique


@unique
class ActionType(IntEnum):
    """Actions a brain can return from ``decide()``."""

    IDLE = 0
    EXPLORE = 1
    TRADE = 2
    SOCIALIZE = 3
    ATTACK = 4
    REST = 5
    TRAIN = 6
    JOIN_GANG = 7
    SEEK_REVENGE = 8


@unique
class ActivityKind(str, Enum):
    """Optional per-tick activities picked by the weighting policy."""

    DUNGEON = "dungeon"
    SHOP = "shop"
    TRAIN = "train"
    LEVEL_UP = "level_up"
    HEAL = "heal"
    WANDER = "wander"
    LOVE_STREET = "love_street"
    TEMPLE = "temple"
    BANK = "bank"
    GO_HOME = "go_home"
    MARKETPLACE = "marketplace"
    CASTLE = "castle"
    TEAM_RECRUIT = "team_recruit"
    TEAM_DUNGEON = "team_dungeon"


@unique
class Domain(IntEnum):
    """RNG domains so independent subsystems draw from separate streams."""

    COMBAT = 0
    LOOT = 1
    ACTIVITY = 2
    SOCIAL = 3
    POLITICS = 4
    SPAWN = 5
    ECONOMY = 6
    WORLD_EVENT = 7
    AI_DECISION = 8


@unique
class PlotKind(str, Enum):
    ASSASSINATION = "Assassination"
    COUP = "Coup"
    SCANDAL = "Scandal"
    SABOTAGE = "Sabotage"


@unique
class CourtFaction(str, Enum):
    LOYALISTS = "loyalists"
    REFORMISTS = "reformists"
    MILITARISTS = "militarists"
    MERCHANTS = "merchants"
    FAITHFUL = "faithful"


@unique
class EquipmentSlot(str, Enum):
    MAIN_HAND = "main_hand"
    OFF_HAND = "off_hand"
    BODY = "body"
    HEAD = "head"
    HANDS = "hands"
    FEET = "feet"
    LEGS = "legs"
    ARMS = "arms"


ARMOR_SLOTS: tuple[EquipmentSlot, ...] = (
    EquipmentSlot.BODY, EquipmentSlot.HEAD, EquipmentSlot.HANDS,
    EquipmentSlot.FEET, EquipmentSlot.LEGS, EquipmentSlot.ARMS,
)

# Named places that match the town's locations
GAME_LOCATIONS: tuple[str, ...] = (
    "Main Street", "Dungeon", "Weapon Shop", "Armor Shop", "Magic Shop",
    "Healer", "Inn", "Temple", "Church", "Market", "Castle", "Love Street", "Bank",
)
