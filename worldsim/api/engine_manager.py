"""EngineManager — builds the simulation and runs it on a background thread.

The simulator mutates actors on the scheduler thread; API handlers and
roster loads take ``lock`` so they never observe or cause a half-applied
step.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Iterable

from worldsim.ai.activities import ActivityPolicy
from worldsim.core.world_state import Roster, WorldView
from worldsim.engine.actions import ActionExecutor
from worldsim.engine.activities import ActivityHandlers
from worldsim.engine.combat import CombatEngine
from worldsim.engine.politics import PoliticalIntrigue
from worldsim.engine.respawn import RespawnManager
from worldsim.engine.scheduler import WorldScheduler
from worldsim.engine.simulator import WorldSimulator
from worldsim.engine.social import SocialDynamics
from worldsim.systems.generator import ActorGenerator
from worldsim.systems.monsters import MonsterGenerator
from worldsim.systems.rng import SimRandom
from worldsim.utils.event_log import NewsFeed, SafeAnnouncer

if TYPE_CHECKING:
    from worldsim.ai.activities.base import PartnerLookup
    from worldsim.config import SimulationConfig
    from worldsim.core.kingdom import Kingdom
    from worldsim.core.models import Actor

logger = logging.getLogger(__name__)


class EngineManager:
    """Owns the roster, the simulator and its scheduler.

    Provides:
      - lifecycle commands (start / stop / step / reset)
      - ``load_roster()`` for restoring a saved world
      - ``lock`` for consistent reads from other threads

    *partners* maps an actor id to "spouse", "lover" or None.  Marriage and
    romance live outside the simulator; without a lookup nobody has a
    partner and GO_HOME is never weighted.
    """

    def __init__(
        self,
        config: SimulationConfig,
        populate: bool = True,
        partners: PartnerLookup | None = None,
    ) -> None:
        self.config = config
        self.partners = partners
        self.lock = threading.RLock()
        self._populate = populate
        self.feed = NewsFeed()
        self.roster = Roster()
        self.world = WorldView.of(self.roster)
        self._build()

    # -- public properties --

    @property
    def running(self) -> bool:
        return self.scheduler.running

    @property
    def tick(self) -> int:
        return self.simulator.tick

    @property
    def kingdom(self) -> Kingdom:
        return self.simulator.politics.kingdom

    # -- lifecycle --

    def start(self) -> bool:
        return self.scheduler.start()

    def stop(self) -> bool:
        return self.scheduler.stop()

    def step(self) -> bool:
        """Run exactly one step on the calling thread."""
        return self.scheduler.step_once()

    def reset(self) -> None:
        """Stop, rebuild a fresh world, and leave it stopped."""
        self.stop()
        with self.lock:
            self.feed.clear()
            self.feed.tick = 0
            self._build()
        logger.info("EngineManager reset.")

    def load_roster(self, actors: Iterable[Actor]) -> int:
        """Swap in a restored roster and rebuild the respawn queue.

        Returns the number of dead actors queued with the fast load timer.
        """
        with self.lock:
            self.roster.replace(actors)
            self.simulator.clear_queue()
            queued = self.simulator.process_dead_on_load()
        logger.info("Roster loaded: %d actors, %d queued for respawn", len(self.roster), queued)
        return queued

    # -- internals --

    def _locked_step(self) -> None:
        with self.lock:
            self.simulator.simulate_step()

    def _build(self) -> None:
        """Construct all simulation components from config."""
        cfg = self.config
        rng = SimRandom(cfg.world_seed)
        news = SafeAnnouncer(self.feed)
        generator = ActorGenerator(cfg, rng)

        self.roster.replace(generator.build_roster() if self._populate else [])
        kingdom = generator.build_kingdom()

        monsters = MonsterGenerator(rng, cfg.boss_chance)
        combat = CombatEngine(cfg, rng, monsters, news)
        social = SocialDynamics(cfg, rng, self.world, news, combat)
        politics = PoliticalIntrigue(cfg, rng, news, self.world, kingdom)
        self.simulator = WorldSimulator(
            config=cfg,
            rng=rng,
            world=self.world,
            news=news,
            respawn=RespawnManager(cfg, self.world, news),
            policy=ActivityPolicy(cfg, rng, partners=self.partners),
            actions=ActionExecutor(rng, self.world, news, social),
            activities=ActivityHandlers(
                cfg, rng, self.world, news, combat, monsters, social, kingdom, partners=self.partners,
            ),
            social=social,
            politics=politics,
            feed=self.feed,
        )
        self.scheduler = WorldScheduler(self._locked_step, cfg.tick_interval, cfg.shutdown_timeout)
        logger.info("World built: %d actors, seed %d", len(self.roster), cfg.world_seed)
