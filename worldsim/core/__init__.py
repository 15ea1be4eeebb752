"""Core data models and world representation."""

from worldsim.core.enums import ActionType, ActivityKind, Domain, EquipmentSlot, PlotKind
from worldsim.core.kingdom import CourtMember, Kingdom, Plot, RoyalGuard
from worldsim.core.models import Actor, Monster, Personality
from worldsim.core.world_state import Roster, TeamInfo, WorldView

__all__ = [
    "ActionType",
    "ActivityKind",
    "Actor",
    "CourtMember",
    "Domain",
    "EquipmentSlot",
    "Kingdom",
    "Monster",
    "Personality",
    "Plot",
    "PlotKind",
    "Roster",
    "RoyalGuard",
    "TeamInfo",
    "WorldView",
]
