"""Combat resolution — solo, group-vs-monsters and team-vs-team.

All three modes share one damage law:

    damage = max(1, power + weapon - defence [- armor]) + randint(1, max(2, weapon // k))

Each mode has its own round cap and variance divisor ``k`` (see
``COMBAT_RULES``), so every encounter terminates and every hit lands for
at least one point.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, unique
from typing import TYPE_CHECKING, Protocol, Sequence

from worldsim.core.enums import Domain
from worldsim.core.items import LOOT_ADJECTIVES, LOOT_NOUNS, LootItem

if TYPE_CHECKING:
    from worldsim.config import SimulationConfig
    from worldsim.core.models import Actor, Monster
    from worldsim.systems.monsters import MonsterGenerator
    from worldsim.systems.rng import SimRandom
    from worldsim.utils.event_log import SafeAnnouncer

logger = logging.getLogger(__name__)


class Combatant(Protocol):
    name: str
    hp: int
    strength: int
    defence: int
    weapon_power: int
    armor_power: int

    @property
    def alive(self) -> bool: ...

    def take_damage(self, amount: int) -> None: ...


# ---------------------------------------------------------------------------
# Rules per mode
# ---------------------------------------------------------------------------

@unique
class CombatMode(str, Enum):
    SOLO = "solo"
    GROUP = "group"
    TEAM = "team"


@dataclass(frozen=True, slots=True)
class CombatRules:
    max_rounds: int
    variance_divisor: int


def combat_rules(config: SimulationConfig) -> dict[CombatMode, CombatRules]:
    return {
        CombatMode.SOLO: CombatRules(config.solo_max_rounds, config.solo_variance_divisor),
        CombatMode.GROUP: CombatRules(config.group_max_rounds, config.group_variance_divisor),
        CombatMode.TEAM: CombatRules(config.team_max_rounds, config.team_variance_divisor),
    }


def compute_damage(
    attacker: Combatant,
    defender: Combatant,
    rng: SimRandom,
    variance_divisor: int,
    subtract_armor: bool = False,
    multiplier: float = 1.0,
) -> int:
    """Apply the shared damage law.  The result is always >= 1."""
    base = attacker.strength + attacker.weapon_power - defender.defence
    if subtract_armor:
        base -= defender.armor_power
    damage = max(1, base)
    damage += rng.randint(Domain.COMBAT, 1, max(2, attacker.weapon_power // max(1, variance_divisor)))
    return max(1, int(damage * multiplier))


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@unique
class CombatOutcome(str, Enum):
    VICTORY = "victory"
    DEFEAT = "defeat"
    FLED = "fled"


@dataclass(slots=True)
class CombatResult:
    outcome: CombatOutcome
    rounds: int
    experience: int = 0
    gold: int = 0
    casualties: list[Actor] = field(default_factory=list)
    loot: LootItem | None = None


@dataclass(slots=True)
class TeamBattleResult:
    side_a_won: bool
    rounds: int
    casualties_a: list[Actor] = field(default_factory=list)
    casualties_b: list[Actor] = field(default_factory=list)


def _living(units: Sequence[Combatant]) -> list[Combatant]:
    return [u for u in units if u.alive]


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class CombatEngine:
    """Resolves encounters synchronously within a tick."""

    __slots__ = ("_config", "_rng", "_monsters", "_news", "_rules")

    def __init__(
        self,
        config: SimulationConfig,
        rng: SimRandom,
        monsters: MonsterGenerator,
        news: SafeAnnouncer,
    ) -> None:
        self._config = config
        self._rng = rng
        self._monsters = monsters
        self._news = news
        self._rules = combat_rules(config)

    @property
    def rules(self) -> dict[CombatMode, CombatRules]:
        return self._rules

    # -- solo --

    def _exchange(self, first: Combatant, second: Combatant) -> tuple[int, Combatant | None]:
        """Alternate strikes under solo rules.  Returns (rounds, winner or None on timeout)."""
        rules = self._rules[CombatMode.SOLO]
        rounds = 0
        while first.alive and second.alive and rounds < rules.max_rounds:
            rounds += 1
            second.take_damage(compute_damage(first, second, self._rng, rules.variance_divisor))
            if not second.alive:
                return rounds, first
            first.take_damage(compute_damage(second, first, self._rng, rules.variance_divisor))
            if not first.alive:
                return rounds, second
        return rounds, None

    def solo(self, actor: Actor, monster: Monster, place: str = "the Dungeon") -> CombatResult:
        """One actor against one monster, with rewards, loot, death or flight."""
        rounds, winner = self._exchange(actor, monster)

        if winner is actor:
            exp = monster.experience_reward()
            gold = self._monsters.gold_reward(monster)
            actor.gain_experience(exp)
            actor.gain_gold(gold)
            loot = None
            if (
                len(actor.market_inventory) < actor.max_market_inventory
                and self._rng.chance(Domain.LOOT, self._config.loot_chance)
            ):
                loot = self._make_loot(monster.level)
                actor.market_inventory.append(loot)
            if monster.is_boss or monster.level >= actor.level + 5 or self._rng.chance(Domain.LOOT, 0.1):
                if monster.is_boss:
                    self._news.announce(True, f"{actor.name} defeated the mighty {monster.name} in the dungeon depths!")
                else:
                    self._news.announce(
                        True, f"{actor.name} slew a {monster.name} (Lv{monster.level}) and earned {gold} gold.")
            logger.debug("%s beat %s in %d rounds (+%d xp, +%d gold)", actor.name, monster.name, rounds, exp, gold)
            return CombatResult(CombatOutcome.VICTORY, rounds, exp, gold, loot=loot)

        if not actor.alive:
            self._news.death(actor.name, monster.name, place)
            logger.debug("%s was killed by %s after %d rounds", actor.name, monster.name, rounds)
            return CombatResult(CombatOutcome.DEFEAT, rounds, casualties=[actor])

        actor.update_location(self._config.default_location)
        logger.debug("%s fled from %s after %d rounds", actor.name, monster.name, rounds)
        return CombatResult(CombatOutcome.FLED, rounds)

    def duel(self, attacker: Actor, defender: Actor) -> CombatResult:
        """Actor against actor under solo rules; used by rivalry escalation."""
        rounds, winner = self._exchange(attacker, defender)
        attacker.add_enemy(defender.id)
        defender.add_enemy(attacker.id)
        attacker.adjust_relationship(defender.id, -5)
        defender.adjust_relationship(attacker.id, -5)

        if winner is None:
            return CombatResult(CombatOutcome.FLED, rounds)
        loser = defender if winner is attacker else attacker
        self._news.death(loser.name, winner.name, loser.location)
        outcome = CombatOutcome.VICTORY if winner is attacker else CombatOutcome.DEFEAT
        return CombatResult(outcome, rounds, casualties=[loser])

    # -- group --

    def group(self, party: Sequence[Actor], monsters: Sequence[Monster], place: str = "the Dungeon") -> CombatResult:
        """A party of actors against a group of monsters.

        Party hits get the coordination bonus, monster hits against the party
        are mitigated.  Rewards are pooled and split evenly among survivors.
        """
        cfg = self._config
        rules = self._rules[CombatMode.GROUP]
        total_exp = total_gold = rounds = 0

        while _living(party) and _living(monsters) and rounds < rules.max_rounds:
            rounds += 1
            for member in _living(party):
                targets = _living(monsters)
                if not targets:
                    break
                target = self._rng.choice(Domain.COMBAT, targets)
                target.take_damage(compute_damage(
                    member, target, self._rng, rules.variance_divisor,
                    multiplier=cfg.group_damage_bonus,
                ))
                if not target.alive:
                    total_exp += target.experience_reward()
                    total_gold += self._monsters.gold_reward(target)

            for monster in _living(monsters):
                targets = _living(party)
                if not targets:
                    break
                target = self._rng.choice(Domain.COMBAT, targets)
                target.take_damage(compute_damage(
                    monster, target, self._rng, rules.variance_divisor,
                    subtract_armor=True, multiplier=cfg.group_damage_mitigation,
                ))

        casualties = [m for m in party if not m.alive]
        survivors = _living(party)
        won = bool(survivors) and not _living(monsters)

        killer = monsters[0].name if monsters else "dungeon monsters"
        for dead in casualties:
            self._news.death(dead.name, killer, place)

        if won:
            exp_share = int((total_exp // len(survivors)) * cfg.group_xp_bonus)
            gold_share = total_gold // len(survivors)
            for member in survivors:
                member.gain_experience(exp_share)
                member.gain_gold(gold_share)
            return CombatResult(CombatOutcome.VICTORY, rounds, total_exp, total_gold, casualties)

        for member in survivors:
            member.update_location(cfg.default_location)
        outcome = CombatOutcome.DEFEAT if not survivors or casualties else CombatOutcome.FLED
        return CombatResult(outcome, rounds, casualties=casualties)

    # -- team vs team --

    def team_vs_team(self, side_a: Sequence[Actor], side_b: Sequence[Actor]) -> TeamBattleResult:
        """Two actor rosters attack each other until one side falls or the cap hits.

        Winner: more survivors, then more remaining HP; side A takes exact ties.
        """
        rules = self._rules[CombatMode.TEAM]
        rounds = 0
        while _living(side_a) and _living(side_b) and rounds < rules.max_rounds:
            rounds += 1
            self._volley(side_a, side_b, rules)
            self._volley(side_b, side_a, rules)

        alive_a, alive_b = _living(side_a), _living(side_b)
        if len(alive_a) != len(alive_b):
            a_won = len(alive_a) > len(alive_b)
        else:
            a_won = sum(m.hp for m in alive_a) >= sum(m.hp for m in alive_b)

        losers = alive_b if a_won else alive_a
        for survivor in losers:
            survivor.update_location(self._config.default_location)

        return TeamBattleResult(
            side_a_won=a_won,
            rounds=rounds,
            casualties_a=[m for m in side_a if not m.alive],
            casualties_b=[m for m in side_b if not m.alive],
        )

    def _volley(self, attackers: Sequence[Actor], defenders: Sequence[Actor], rules: CombatRules) -> None:
        for attacker in _living(attackers):
            targets = _living(defenders)
            if not targets:
                break
            target = self._rng.choice(Domain.COMBAT, targets)
            place = target.location
            target.take_damage(compute_damage(
                attacker, target, self._rng, rules.variance_divisor, subtract_armor=True,
            ))
            if not target.alive:
                self._news.death(target.name, attacker.name, place or "battle")

    # -- misc --

    def _make_loot(self, level: int) -> LootItem:
        name = f"{self._rng.choice(Domain.LOOT, LOOT_ADJECTIVES)} {self._rng.choice(Domain.LOOT, LOOT_NOUNS)}"
        value = 20 * level + self._rng.randint(Domain.LOOT, 0, 30 * level)
        return LootItem(name=name, value=value, level=level)
