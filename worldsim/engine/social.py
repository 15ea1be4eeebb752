"""SocialDynamics — teams, gangs, rivalries and turf control.

Every pass is small-probability and safe to run every tick: nothing here
assumes it has not run before.  Team membership is derived from the actors
themselves (``Actor.team``), so a team exists exactly while someone carries
its name.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from worldsim.core.enums import Domain

if TYPE_CHECKING:
    from worldsim.config import SimulationConfig
    from worldsim.core.models import Actor
    from worldsim.core.world_state import WorldView
    from worldsim.engine.combat import CombatEngine
    from worldsim.systems.rng import SimRandom
    from worldsim.utils.event_log import SafeAnnouncer

logger = logging.getLogger(__name__)


TEAM_NAME_PREFIXES: tuple[str, ...] = (
    "The Tidal", "The Azure", "The Storm", "The Deep", "The Salt",
    "The Wave", "The Coral", "The Tempest", "The Abyssal", "The Pearl",
    "The Manwe", "The Seafoam", "The Riptide", "The Trident", "The Nautical",
    "The Leviathan", "The Kraken", "The Siren", "The Maritime", "The Oceanic",
)

TEAM_NAME_SUFFIXES: tuple[str, ...] = (
    "Tide", "Current", "Mariners", "Sailors", "Corsairs",
    "Navigators", "Voyagers", "Depths", "Wanderers", "Brotherhood",
    "Covenant", "Order", "Guild", "Company", "Alliance",
    "Conclave", "Fellowship", "Syndicate", "Circle", "Legion",
)


def compatibility(a: Actor, b: Actor) -> float:
    """Personality compatibility of *a* towards *b*; 0.5 when *a* has none."""
    if a.personality is None:
        return 0.5
    return a.personality.compatibility(b.personality)


def _gang_inclined(actor: Actor) -> bool:
    return actor.personality is not None and actor.personality.likely_to_join_gang()


class SocialDynamics:
    """Mutates the social graph: team formation, betrayals, wars, gangs."""

    __slots__ = ("_config", "_rng", "_world", "_news", "_combat")

    def __init__(
        self,
        config: SimulationConfig,
        rng: SimRandom,
        world: WorldView,
        news: SafeAnnouncer,
        combat: CombatEngine,
    ) -> None:
        self._config = config
        self._rng = rng
        self._world = world
        self._news = news
        self._combat = combat

    # ------------------------------------------------------------------
    # Per-tick pass
    # ------------------------------------------------------------------

    def update(self) -> None:
        """Run every world-level social check once."""
        self.check_gang_betrayals()
        self.check_gang_formations()
        self.process_rivalries()
        self.check_team_betrayals()
        self.check_team_wars()
        self.update_turf_control()

    # ------------------------------------------------------------------
    # Teams: recruitment (driven by the team_recruit activity)
    # ------------------------------------------------------------------

    def generate_team_name(self) -> str:
        """A team name no actor carries yet, dead members included.

        Teams are grouped by name, so a reused name would merge two teams.
        """
        for _ in range(10):
            prefix = self._rng.choice(Domain.SOCIAL, TEAM_NAME_PREFIXES)
            suffix = self._rng.choice(Domain.SOCIAL, TEAM_NAME_SUFFIXES)
            name = f"{prefix} {suffix}"
            if self.team_size(name) == 0:
                return name
        for prefix in TEAM_NAME_PREFIXES:
            for suffix in TEAM_NAME_SUFFIXES:
                name = f"{prefix} {suffix}"
                if self.team_size(name) == 0:
                    return name
        n = 2
        while self.team_size(f"{name} {n}"):
            n += 1
        return f"{name} {n}"

    def team_size(self, team: str) -> int:
        """Members carrying *team*, dead ones included since they come back."""
        return len(self._world.filter(lambda a: a.team == team))

    def team_recruitment(self, actor: Actor) -> None:
        if actor.team:
            self.recruit_for_team(actor)
        else:
            self.join_or_form_team(actor)

    def join_or_form_team(self, actor: Actor) -> bool:
        """Join a co-located team or found a new one.  Returns True on change."""
        cfg = self._config
        if actor.team or not actor.alive:
            return False

        local = self._world.teams_at_location(actor.location)
        open_teams = [
            members for name, members in local.items()
            if self.team_size(name) < cfg.max_team_size
        ]
        if open_teams and self._rng.chance(Domain.SOCIAL, cfg.join_team_chance):
            members = self._rng.choice(Domain.SOCIAL, open_teams)
            leader = members[0]
            if compatibility(actor, leader) > cfg.join_compatibility:
                actor.join_team(leader.team, leader.team_secret, leader.controls_turf)
                self._news.announce(True, f"{actor.name} joined the team '{actor.team}'!")
                logger.debug("%s joined team %s", actor.name, actor.team)
                return True

        candidates = [
            a for a in self._world.at_location(actor.location, exclude=actor)
            if not a.team and _gang_inclined(a)
        ]
        if not candidates or not self._rng.chance(Domain.SOCIAL, cfg.form_team_chance):
            return False

        recruit = self._rng.choice(Domain.SOCIAL, candidates)
        if compatibility(actor, recruit) <= cfg.form_compatibility:
            return False

        name = self.generate_team_name()
        secret = uuid.uuid4().hex[:8]
        actor.join_team(name, secret)
        actor.team_record = 0
        recruit.join_team(name, secret)
        self._news.announce(True, f"{actor.name} formed a new team called '{name}' with {recruit.name}!")
        logger.info("Team '%s' formed by %s and %s", name, actor.name, recruit.name)
        return True

    def recruit_for_team(self, actor: Actor) -> bool:
        """Try to bring one co-located unaffiliated actor into *actor*'s team."""
        if not actor.team or not actor.alive:
            return False
        if self.team_size(actor.team) >= self._config.max_team_size:
            return False

        candidates = [a for a in self._world.at_location(actor.location, exclude=actor) if not a.team]
        if not candidates:
            return False

        candidate = self._rng.choice(Domain.SOCIAL, candidates)
        chance = compatibility(actor, candidate) * 0.5 + (actor.charisma / 100) * 0.2
        if _gang_inclined(candidate):
            chance += 0.2
        if not self._rng.chance(Domain.SOCIAL, chance):
            return False

        candidate.join_team(actor.team, actor.team_secret, actor.controls_turf)
        if self._rng.chance(Domain.SOCIAL, 0.3):
            self._news.announce(True, f"{actor.name} recruited {candidate.name} into '{actor.team}'!")
        logger.debug("%s recruited %s into %s", actor.name, candidate.name, actor.team)
        return True

    # ------------------------------------------------------------------
    # Teams: world-level dynamics
    # ------------------------------------------------------------------

    def check_team_betrayals(self) -> list[Actor]:
        """Disloyal members walk out.  Returns those who left."""
        cfg = self._config
        leavers: list[Actor] = []
        for member in self._world.filter(lambda a: bool(a.team) and a.alive):
            p = member.personality
            likely = (p is not None and p.likely_to_betray()) or member.loyalty < cfg.betrayal_loyalty_threshold
            if not likely or not self._rng.chance(Domain.SOCIAL, cfg.betrayal_chance):
                continue

            old_team = member.team
            member.leave_team()
            leavers.append(member)
            self._news.announce(True, f"{member.name} abandoned '{old_team}'!")
            if not self._world.team_members(old_team):
                self._news.announce(True, f"The team '{old_team}' has been disbanded!")
                logger.info("Team '%s' disbanded", old_team)
        return leavers

    def check_team_wars(self) -> bool:
        """Two teams sharing a location may clash.  Returns True if a war happened."""
        teams = [t for t in self._world.teams().values() if t.member_count >= 2]
        if len(teams) < 2:
            return False
        if not self._rng.chance(Domain.SOCIAL, self._config.team_war_chance):
            return False

        first = self._rng.choice(Domain.SOCIAL, teams)
        location = first.members[0].location
        rivals = [
            t for t in teams
            if t.name != first.name and any(m.location == location for m in t.members)
        ]
        if not rivals:
            return False
        second = self._rng.choice(Domain.SOCIAL, rivals)

        side_a = [m for m in first.members if m.location == location and m.alive]
        side_b = [m for m in second.members if m.location == location and m.alive]
        if not side_a or not side_b:
            return False

        self._news.announce(True, f"Team War! '{first.name}' clashes with '{second.name}' at {location}!")
        result = self._combat.team_vs_team(side_a, side_b)
        winner, loser = (first.name, second.name) if result.side_a_won else (second.name, first.name)
        self._news.announce(True, f"'{winner}' emerged victorious against '{loser}'!")
        logger.info("Team war at %s: %s beat %s in %d rounds", location, winner, loser, result.rounds)
        return True

    def turf_holder(self) -> str | None:
        for a in self._world.all():
            if a.controls_turf and a.team:
                return a.team
        return None

    def update_turf_control(self) -> str | None:
        """The strongest team may claim the unclaimed turf.  Returns the new holder."""
        if self.turf_holder() is not None:
            return None
        teams = self._world.teams()
        if not teams:
            return None

        strongest = max(teams.values(), key=lambda t: t.total_power)
        if strongest.total_power <= self._config.turf_min_power:
            return None
        if not self._rng.chance(Domain.SOCIAL, self._config.turf_claim_chance):
            return None

        # Dead members carry the flag too so they respawn as holders
        for member in self._world.filter(lambda a: a.team == strongest.name):
            member.controls_turf = True
            member.team_record = 0
        self._news.announce(True, f"'{strongest.name}' has taken control of the town!")
        logger.info("Turf claimed by '%s' (power %d)", strongest.name, strongest.total_power)
        return strongest.name

    # ------------------------------------------------------------------
    # Gangs
    # ------------------------------------------------------------------

    def join_gang(self, actor: Actor, leader: Actor) -> bool:
        if actor.gang_id is not None or actor is leader or actor.gang_members:
            return False
        if len(leader.gang_members) >= self._config.max_gang_size:
            return False
        actor.gang_id = leader.id
        leader.gang_members.append(actor.id)
        actor.adjust_relationship(leader.id, 5)
        leader.adjust_relationship(actor.id, 5)
        logger.debug("%s joined %s's gang", actor.name, leader.name)
        return True

    def check_gang_betrayals(self) -> None:
        for member in self._world.filter(lambda a: a.gang_id is not None):
            p = member.personality
            if p is None or not p.likely_to_betray():
                continue
            if not self._rng.chance(Domain.SOCIAL, self._config.gang_betrayal_chance):
                continue
            leader = self._world.get_by_id(member.gang_id)
            if leader is None:
                logger.warning("Gang leader %s of %s not found; clearing membership", member.gang_id, member.name)
                member.gang_id = None
                continue
            member.gang_id = None
            if member.id in leader.gang_members:
                leader.gang_members.remove(member.id)
            member.adjust_relationship(leader.id, -10)
            leader.adjust_relationship(member.id, -10)
            leader.add_enemy(member.id)
            self._news.announce(False, f"{member.name} betrayed {leader.name}'s gang.")

    def check_gang_formations(self) -> None:
        leaders = self._world.filter(
            lambda a: a.alive and a.gang_id is None and not a.gang_members
            and _gang_inclined(a) and a.personality.ambition > 0.7
        )
        for leader in leaders:
            if not self._rng.chance(Domain.SOCIAL, self._config.gang_formation_chance):
                continue
            nearby = [
                a for a in self._world.at_location(leader.location, exclude=leader)
                if a.gang_id is None and not a.gang_members and _gang_inclined(a)
            ]
            if len(nearby) < 2:
                continue
            recruit = self._rng.choice(Domain.SOCIAL, nearby)
            if self.join_gang(recruit, leader):
                self._news.announce(False, f"{leader.name} has started a gang in {leader.location}.")

    # ------------------------------------------------------------------
    # Rivalries
    # ------------------------------------------------------------------

    def process_rivalries(self) -> int:
        """Co-located enemies occasionally come to blows.  Returns the number of fights."""
        fights = 0
        for actor in self._world.filter(lambda a: bool(a.enemies)):
            for enemy_id in sorted(actor.enemies):
                enemy = self._world.get_by_id(enemy_id)
                if enemy is None or not enemy.alive:
                    continue
                if not self._rng.chance(Domain.SOCIAL, self._config.rivalry_chance):
                    continue
                if actor.alive and actor.location == enemy.location:
                    self._combat.duel(actor, enemy)
                    fights += 1
        return fights
