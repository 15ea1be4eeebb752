"""RespawnManager — countdown queue that brings dead actors back.

Two timers exist: ``respawn_ticks`` for deaths observed during play and
the shorter ``load_respawn_ticks`` for actors that were already dead when
a save was restored.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from worldsim.config import SimulationConfig
    from worldsim.core.items import EquipmentCatalog
    from worldsim.core.world_state import WorldView
    from worldsim.utils.event_log import SafeAnnouncer

logger = logging.getLogger(__name__)


class RespawnManager:
    """Owns the ``actor id -> remaining ticks`` queue."""

    __slots__ = ("_config", "_world", "_news", "_catalog", "_timers")

    def __init__(
        self,
        config: SimulationConfig,
        world: WorldView,
        news: SafeAnnouncer,
        catalog: EquipmentCatalog | None = None,
    ) -> None:
        self._config = config
        self._world = world
        self._news = news
        self._catalog = catalog
        self._timers: dict[str, int] = {}

    # -- queries --

    @property
    def queue(self) -> dict[str, int]:
        """Copy of the pending timers."""
        return dict(self._timers)

    def __len__(self) -> int:
        return len(self._timers)

    def __contains__(self, actor_id: str) -> bool:
        return actor_id in self._timers

    # -- queueing --

    def queue_for_respawn(self, actor_id: str, ticks: int | None = None) -> bool:
        """Queue *actor_id*; a no-op when already queued.  Returns True if added."""
        if not actor_id or actor_id in self._timers:
            return False
        timer = ticks if ticks is not None and ticks > 0 else self._config.respawn_ticks
        self._timers[actor_id] = timer
        logger.debug("Queued %s for respawn (%d ticks)", actor_id, timer)
        return True

    def queue_dead(self) -> int:
        """Queue every currently dead actor that is not already waiting."""
        added = 0
        for actor in self._world.all_dead():
            if self.queue_for_respawn(actor.id):
                added += 1
        return added

    def clear_queue(self) -> None:
        if self._timers:
            logger.debug("Clearing respawn queue (%d entries)", len(self._timers))
        self._timers.clear()

    def process_dead_on_load(self) -> int:
        """Rebuild the queue from the freshly loaded roster using the fast timer."""
        self.clear_queue()
        dead = self._world.all_dead()
        if not self._world.all():
            logger.warning("process_dead_on_load: roster is empty")
            return 0
        for actor in dead:
            self._timers[actor.id] = self._config.load_respawn_ticks
        logger.info("Respawn queue rebuilt after load: %d dead actors", len(dead))
        return len(dead)

    # -- per tick --

    def tick(self) -> list[str]:
        """Count every timer down by one and resurrect the expired ones.

        Returns the ids that were resurrected.
        """
        expired: list[str] = []
        for actor_id in list(self._timers):
            self._timers[actor_id] -= 1
            if self._timers[actor_id] <= 0:
                expired.append(actor_id)

        revived: list[str] = []
        for actor_id in expired:
            del self._timers[actor_id]
            actor = self._world.get_by_id(actor_id)
            if actor is None:
                logger.warning("Could not find actor %s to respawn; dropping entry", actor_id)
                continue
            self._resurrect(actor)
            revived.append(actor_id)
        return revived

    def _resurrect(self, actor) -> None:
        cfg = self._config
        actor.is_dead = False
        actor.recalculate_stats(self._catalog)

        min_hp = cfg.respawn_min_hp_base + actor.level * cfg.respawn_min_hp_per_level
        if actor.max_hp < min_hp:
            logger.warning("%s had invalid max HP %d, reset to %d", actor.name, actor.max_hp, min_hp)
            actor.base_max_hp = min_hp
            actor.max_hp = min_hp

        actor.hp = actor.max_hp
        actor.update_location(cfg.default_location)
        actor.gold = max(0, actor.gold // 2)

        self._news.announce(True, f"{actor.name} has returned from the realm of the dead!")
        logger.info("Respawned %s (HP %d/%d)", actor.name, actor.hp, actor.max_hp)
