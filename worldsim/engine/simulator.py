"""WorldSimulator — one step of the autonomous world.

Step order:
  1. Respawn countdown (dead actors may come back)
  2. Per actor: brain decision -> action, then optional activity
  3. Bookkeeping: queue newly dead actors for respawn
  4. World flavour events
  5. Social dynamics (gangs, rivalries, teams, turf)
  6. Court politics

A failure inside one actor's turn is logged and the loop moves on to the
next actor; the step itself only fails for errors outside that boundary.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from worldsim.core.enums import Domain

if TYPE_CHECKING:
    from worldsim.ai.activities.base import ActivityPolicy
    from worldsim.config import SimulationConfig
    from worldsim.core.models import Actor
    from worldsim.core.world_state import TeamInfo, WorldView
    from worldsim.engine.actions import ActionExecutor
    from worldsim.engine.activities import ActivityHandlers
    from worldsim.engine.politics import PoliticalIntrigue
    from worldsim.engine.respawn import RespawnManager
    from worldsim.engine.social import SocialDynamics
    from worldsim.systems.rng import SimRandom
    from worldsim.utils.event_log import NewsFeed, SafeAnnouncer

logger = logging.getLogger(__name__)


WORLD_EVENTS: tuple[str, ...] = (
    "A merchant caravan arrives in town",
    "Strange noises are heard from the dungeon",
    "The king makes a royal decree",
    "A festival begins in the town square",
    "Bandits are spotted near the roads",
    "A mysterious stranger appears",
    "The weather turns stormy",
    "A new shop opens in the market",
)


class WorldSimulator:
    """Advances the whole world by one tick per ``simulate_step()`` call.

    Holds no actor state of its own: everything is read through the world
    view, so swapping the roster between steps is always safe.
    """

    def __init__(
        self,
        config: SimulationConfig,
        rng: SimRandom,
        world: WorldView,
        news: SafeAnnouncer,
        respawn: RespawnManager,
        policy: ActivityPolicy,
        actions: ActionExecutor,
        activities: ActivityHandlers,
        social: SocialDynamics,
        politics: PoliticalIntrigue,
        feed: NewsFeed | None = None,
    ) -> None:
        self._config = config
        self._rng = rng
        self._world = world
        self._news = news
        self._feed = feed
        self.respawn = respawn
        self.policy = policy
        self.actions = actions
        self.activities = activities
        self.social = social
        self.politics = politics
        self.tick = 0

    @property
    def world(self) -> WorldView:
        return self._world

    # ------------------------------------------------------------------
    # Step
    # ------------------------------------------------------------------

    def simulate_step(self) -> None:
        self.tick += 1
        if self._feed is not None:
            self._feed.tick = self.tick

        revived = self.respawn.tick()
        if revived:
            logger.debug("Tick %d: %d actors respawned", self.tick, len(revived))

        for actor in self._world.all():
            if not actor.alive or actor.brain is None:
                continue
            self._process_actor(actor)

        queued = self.respawn.queue_dead()
        if queued:
            logger.debug("Tick %d: %d actors queued for respawn", self.tick, queued)

        self.process_world_events()
        self.social.update()
        self.politics.update()

        logger.debug("Tick %d complete: %s", self.tick, self.status())

    def _process_actor(self, actor: Actor) -> None:
        try:
            action = actor.brain.decide(self._world)
            self.actions.execute(actor, action)
            kind = self.policy.choose_activity(actor, self._world)
            if kind is not None:
                self.activities.run(actor, kind)
        except Exception:
            logger.exception("Error processing actor %s (%s)", actor.name, actor.id)

    def process_world_events(self) -> str | None:
        if not self._rng.chance(Domain.WORLD_EVENT, self._config.world_event_chance):
            return None
        event = self._rng.choice(Domain.WORLD_EVENT, WORLD_EVENTS)
        self._news.announce(False, event)
        return event

    # ------------------------------------------------------------------
    # Persistence hooks
    # ------------------------------------------------------------------

    def clear_queue(self) -> None:
        self.respawn.clear_queue()

    def process_dead_on_load(self) -> int:
        return self.respawn.process_dead_on_load()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def active_teams(self) -> list[TeamInfo]:
        """Teams of living actors, strongest first."""
        return sorted(self._world.teams().values(), key=lambda t: t.total_power, reverse=True)

    def teammates(self, team: str) -> list[Actor]:
        return self._world.team_members(team)

    def status(self) -> str:
        actors = self._world.all()
        alive = sum(1 for a in actors if a.alive)
        teams = len({a.team for a in actors if a.team})
        gangs = sum(1 for a in actors if a.gang_members)
        turf = self.social.turf_holder() or "None"
        relationships = sum(len(a.relationships) for a in actors)
        return (
            f"Active NPCs: {alive}, Teams: {teams}, Turf: {turf}, "
            f"Gangs: {gangs}, Relationships: {relationships}"
        )
