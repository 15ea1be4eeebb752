"""ActionExecutor — applies the Action a brain returned for this tick.

Targets are resolved through the world view at execution time; an action
whose target is missing, dead or elsewhere simply does nothing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from worldsim.core.enums import ActionType, Domain, GAME_LOCATIONS
from worldsim.engine.social import compatibility

if TYPE_CHECKING:
    from worldsim.ai.brain import Action
    from worldsim.core.models import Actor
    from worldsim.core.world_state import WorldView
    from worldsim.engine.social import SocialDynamics
    from worldsim.systems.rng import SimRandom
    from worldsim.utils.event_log import SafeAnnouncer

logger = logging.getLogger(__name__)


class ActionExecutor:
    """Dispatches on ``ActionType`` to one handler per action."""

    __slots__ = ("_rng", "_world", "_news", "_social", "_handlers")

    def __init__(
        self,
        rng: SimRandom,
        world: WorldView,
        news: SafeAnnouncer,
        social: SocialDynamics,
    ) -> None:
        self._rng = rng
        self._world = world
        self._news = news
        self._social = social
        self._handlers: dict[ActionType, Callable[[Actor, str], None]] = {
            ActionType.IDLE: lambda actor, target: None,
            ActionType.EXPLORE: lambda actor, target: self.explore(actor),
            ActionType.TRADE: self.trade,
            ActionType.SOCIALIZE: self.socialize,
            ActionType.ATTACK: lambda actor, target: self.attack(actor, target),
            ActionType.REST: lambda actor, target: self.rest(actor),
            ActionType.TRAIN: lambda actor, target: self.train(actor),
            ActionType.JOIN_GANG: self.join_gang,
            ActionType.SEEK_REVENGE: self.seek_revenge,
        }

    def execute(self, actor: Actor, action: Action) -> None:
        handler = self._handlers.get(action.type)
        if handler is None:
            logger.warning("No handler for action %s of %s", action.type, actor.name)
            return
        handler(actor, action.target)

    def _local_target(self, actor: Actor, target_id: str) -> Actor | None:
        if not target_id or target_id == actor.id:
            return None
        target = self._world.get_by_id(target_id)
        if target is None or target.location != actor.location:
            return None
        return target

    # -- handlers --

    def explore(self, actor: Actor) -> None:
        location = self._rng.choice(Domain.AI_DECISION, GAME_LOCATIONS)
        if location != actor.location:
            actor.update_location(location)
        actor.activity = "exploring"

    def trade(self, actor: Actor, target_id: str) -> None:
        target = self._local_target(actor, target_id)
        if target is None or not target.alive:
            return
        amount = self._rng.randint(Domain.ECONOMY, 10, 100)
        if actor.gold < amount or target.gold < amount:
            return
        paid = actor.spend_gold(amount // 2)
        target.gain_gold(paid)
        actor.adjust_relationship(target.id, 1)
        target.adjust_relationship(actor.id, 1)
        actor.activity = "trading"

    def socialize(self, actor: Actor, target_id: str) -> None:
        target = self._local_target(actor, target_id)
        if target is None or not target.alive:
            return
        compat = compatibility(actor, target)
        if compat > 0.6:
            delta = 2
            if self._rng.chance(Domain.AI_DECISION, compat * 0.5):
                delta += 5
            actor.adjust_relationship(target.id, delta)
            target.adjust_relationship(actor.id, delta)
        elif compat < 0.3:
            actor.adjust_relationship(target.id, -2)
            target.adjust_relationship(actor.id, -2)
        actor.activity = "socializing"

    def attack(self, actor: Actor, target_id: str) -> bool:
        """Single blow: attack power + 1..10 against armor class.  Returns True on a kill."""
        target = self._local_target(actor, target_id)
        if target is None or not target.alive:
            return False
        power = actor.attack_power + self._rng.randint(Domain.COMBAT, 1, 10)
        defence = target.armor_class
        if power <= defence:
            return False

        target.take_damage(max(1, power - defence))
        actor.add_enemy(target.id)
        target.add_enemy(actor.id)
        actor.adjust_relationship(target.id, -5)
        target.adjust_relationship(actor.id, -10)
        if not target.alive:
            self._news.death(target.name, actor.name, actor.location or "unknown")
            logger.debug("%s killed %s at %s", actor.name, target.name, actor.location)
            return True
        return False

    def rest(self, actor: Actor) -> None:
        actor.heal(actor.max_hp // 4)
        actor.activity = "resting"

    def train(self, actor: Actor) -> None:
        if self._rng.chance(Domain.AI_DECISION, 0.3):
            actor.gain_experience(self._rng.randint(Domain.AI_DECISION, 10, 30))
        actor.activity = "training"

    def join_gang(self, actor: Actor, target_id: str) -> None:
        if actor.gang_id is not None:
            return
        leader = self._local_target(actor, target_id)
        if leader is None:
            return
        if compatibility(actor, leader) > 0.5:
            self._social.join_gang(actor, leader)

    def seek_revenge(self, actor: Actor, target_id: str) -> None:
        if not target_id:
            return
        if self._local_target(actor, target_id) is not None:
            self.attack(actor, target_id)
            return
        self.explore(actor)
        actor.activity = "hunting"
