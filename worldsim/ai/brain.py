"""Brain — the per-actor decision delegate.

The simulator only relies on ``Brain.decide(world) -> Action``.  Concrete
brains are strategies: ``PersonalityBrain`` is the default used for town
NPCs, ``IdleBrain`` never does anything and is handy in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from worldsim.core.enums import ActionType, Domain

if TYPE_CHECKING:
    from worldsim.core.models import Actor, Personality
    from worldsim.core.world_state import WorldView
    from worldsim.systems.rng import SimRandom


@dataclass(frozen=True, slots=True)
class Action:
    """What an actor wants to do this tick; ``target`` is another actor's id."""

    type: ActionType
    target: str = ""
    reason: str = ""


IDLE = Action(ActionType.IDLE)


class Brain(ABC):
    """Decision-making capability attached to one actor."""

    def __init__(self, owner: Actor) -> None:
        self.owner = owner

    @property
    def personality(self) -> Personality | None:
        return self.owner.personality

    @abstractmethod
    def decide(self, world: WorldView) -> Action:
        """Return the action for this tick."""


class IdleBrain(Brain):

    def decide(self, world: WorldView) -> Action:
        return IDLE


class PersonalityBrain(Brain):
    """Scores a handful of candidate actions from traits and surroundings.

    Candidates are collected as (action, weight) pairs and one is picked by
    weighted random, the same way activities are selected.
    """

    def __init__(self, owner: Actor, rng: SimRandom) -> None:
        super().__init__(owner)
        self._rng = rng

    def decide(self, world: WorldView) -> Action:
        me = self.owner
        p = self.personality
        if p is None:
            return IDLE

        nearby = world.at_location(me.location, exclude=me)
        options: list[tuple[Action, float]] = [(IDLE, 0.2), (Action(ActionType.EXPLORE), 0.3)]

        if me.hp_ratio < 0.5:
            options.append((Action(ActionType.REST, reason="wounded"), 0.6))
        options.append((Action(ActionType.TRAIN), 0.1 + p.ambition * 0.2))

        if nearby:
            other = self._rng.choice(Domain.AI_DECISION, nearby)
            options.append((Action(ActionType.SOCIALIZE, other.id), 0.1 + p.sociability * 0.4))
            if me.gold > 50:
                options.append((Action(ActionType.TRADE, other.id), 0.05 + p.greed * 0.3))
            enemies_here = [a for a in nearby if a.id in me.enemies]
            if enemies_here and p.aggression > 0.5:
                foe = self._rng.choice(Domain.AI_DECISION, enemies_here)
                options.append((Action(ActionType.ATTACK, foe.id, "old grudge"), p.aggression * 0.5))
            leaders = [a for a in nearby if a.gang_members and a.gang_id is None]
            if me.gang_id is None and not me.gang_members and leaders and p.likely_to_join_gang():
                leader = self._rng.choice(Domain.AI_DECISION, leaders)
                options.append((Action(ActionType.JOIN_GANG, leader.id), 0.3))

        if me.enemies and p.likely_to_seek_revenge():
            target = self._rng.choice(Domain.AI_DECISION, sorted(me.enemies))
            options.append((Action(ActionType.SEEK_REVENGE, target), 0.25))

        total = sum(w for _, w in options)
        roll = self._rng.random(Domain.AI_DECISION) * total
        cumulative = 0.0
        for action, weight in options:
            cumulative += weight
            if roll < cumulative:
                return action
        return options[-1][0]
