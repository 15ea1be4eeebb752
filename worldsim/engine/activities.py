"""ActivityHandlers — carry out the optional activity chosen by the policy.

One method per ``ActivityKind``; ``run()`` dispatches through a dict the
same way the action executor does.  Handlers re-check their own
preconditions because the actor may have changed since selection.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from worldsim.ai.activities.base import experience_for_level
from worldsim.core.enums import ARMOR_SLOTS, ActivityKind, Domain, EquipmentSlot, GAME_LOCATIONS
from worldsim.core.items import DEFAULT_CATALOG
from worldsim.core.kingdom import RoyalGuard
from worldsim.engine.combat import CombatOutcome
from worldsim.engine.social import compatibility

if TYPE_CHECKING:
    from worldsim.ai.activities.base import PartnerLookup
    from worldsim.config import SimulationConfig
    from worldsim.core.items import EquipmentCatalog
    from worldsim.core.kingdom import Kingdom
    from worldsim.core.models import Actor
    from worldsim.core.world_state import WorldView
    from worldsim.engine.combat import CombatEngine
    from worldsim.engine.social import SocialDynamics
    from worldsim.systems.monsters import MonsterGenerator
    from worldsim.systems.rng import SimRandom
    from worldsim.utils.event_log import SafeAnnouncer

logger = logging.getLogger(__name__)

_HOME = "Home"


class ActivityHandlers:
    """Executes activities against the live roster."""

    def __init__(
        self,
        config: SimulationConfig,
        rng: SimRandom,
        world: WorldView,
        news: SafeAnnouncer,
        combat: CombatEngine,
        monsters: MonsterGenerator,
        social: SocialDynamics,
        kingdom: Kingdom | None = None,
        catalog: EquipmentCatalog | None = None,
        partners: PartnerLookup | None = None,
    ) -> None:
        self._config = config
        self._rng = rng
        self._world = world
        self._news = news
        self._combat = combat
        self._monsters = monsters
        self._social = social
        self._kingdom = kingdom
        self._catalog = catalog or DEFAULT_CATALOG
        self._partners = partners
        self._handlers: dict[ActivityKind, Callable[[Actor], None]] = {
            ActivityKind.DUNGEON: self.explore_dungeon,
            ActivityKind.SHOP: self.go_shopping,
            ActivityKind.TRAIN: self.train_at_gym,
            ActivityKind.LEVEL_UP: self.visit_master,
            ActivityKind.HEAL: self.visit_healer,
            ActivityKind.WANDER: self.wander,
            ActivityKind.LOVE_STREET: self.visit_love_street,
            ActivityKind.TEMPLE: self.visit_temple,
            ActivityKind.BANK: self.visit_bank,
            ActivityKind.GO_HOME: self.go_home,
            ActivityKind.MARKETPLACE: self.visit_marketplace,
            ActivityKind.CASTLE: self.visit_castle,
            ActivityKind.TEAM_RECRUIT: self._social.team_recruitment,
            ActivityKind.TEAM_DUNGEON: self.team_dungeon_run,
        }

    def run(self, actor: Actor, kind: ActivityKind) -> None:
        if not actor.alive:
            return
        actor.activity = kind.value
        self._handlers[kind](actor)

    def _roll(self) -> float:
        return self._rng.random(Domain.ACTIVITY)

    def _meet_someone(self, actor: Actor, chance: float, delta: int = 1) -> None:
        """Small relationship boost with a random actor at the same place."""
        others = self._world.at_location(actor.location, exclude=actor)
        if others and self._rng.chance(Domain.ACTIVITY, chance):
            other = self._rng.choice(Domain.ACTIVITY, others)
            actor.adjust_relationship(other.id, delta)
            other.adjust_relationship(actor.id, delta)

    # ------------------------------------------------------------------
    # Adventuring
    # ------------------------------------------------------------------

    def explore_dungeon(self, actor: Actor) -> None:
        actor.update_location("Dungeon")
        level = actor.level + self._rng.randint(Domain.ACTIVITY, -2, 2)
        level = max(1, min(self._config.max_level, level))
        monster = self._monsters.generate(level)
        self._combat.solo(actor, monster, "the Dungeon")

    def team_dungeon_run(self, actor: Actor) -> None:
        if not actor.team:
            return
        members = [m for m in self._world.team_members(actor.team) if m.hp > m.max_hp * 0.5]
        if len(members) < 2:
            self.explore_dungeon(actor)
            return

        for member in members:
            member.update_location("Dungeon")
        avg_level = sum(m.level for m in members) // len(members)
        level = max(1, min(self._config.max_level, avg_level + self._rng.randint(Domain.ACTIVITY, -2, 3)))
        count = min(len(members), self._rng.randint(Domain.ACTIVITY, 2, 4))
        monsters = [self._monsters.generate(level) for _ in range(count)]

        result = self._combat.group(members, monsters, "the Dungeon")
        if result.outcome is CombatOutcome.VICTORY:
            if self._rng.chance(Domain.ACTIVITY, 0.15) or any(m.is_boss for m in monsters):
                self._news.announce(
                    True, f"Team '{actor.team}' conquered dungeon level {level}, defeating {count} monsters!")
        logger.debug("Team %s dungeon run at level %d: %s", actor.team, level, result.outcome.value)

    # ------------------------------------------------------------------
    # Self-improvement
    # ------------------------------------------------------------------

    def go_shopping(self, actor: Actor) -> None:
        budget = int(actor.gold * (0.3 + self._roll() * 0.4))
        if self._rng.chance(Domain.ACTIVITY, 0.5):
            actor.update_location("Weapon Shop")
            slot = EquipmentSlot.MAIN_HAND
        else:
            actor.update_location("Armor Shop")
            slot = self._rng.choice(Domain.ACTIVITY, ARMOR_SLOTS)

        current = self._catalog.get(actor.equipped.get(slot, -1))
        if current is None:
            rating = 0
        elif slot == EquipmentSlot.MAIN_HAND:
            rating = current.weapon_power
        else:
            rating = current.armor_class

        item = self._catalog.best_upgrade(slot, rating, budget)
        if item is None:
            return
        actor.spend_gold(item.value)
        actor.equipped[slot] = item.item_id
        if item.two_handed:
            actor.equipped.pop(EquipmentSlot.OFF_HAND, None)
        actor.recalculate_stats(self._catalog)
        if self._rng.chance(Domain.ACTIVITY, 0.15):
            self._news.announce(True, f"{actor.name} purchased {item.name} from the shop.")

    def train_at_gym(self, actor: Actor) -> None:
        cost = actor.level * 10 + 50
        if actor.gold < cost:
            return
        actor.spend_gold(cost)
        stat = self._rng.randint(Domain.ACTIVITY, 0, 3)
        if stat == 0:
            actor.base_strength += 1
        elif stat == 1:
            actor.base_defence += 1
        elif stat == 2:
            actor.base_agility += 1
        else:
            actor.base_max_hp += 5
        actor.recalculate_stats(self._catalog)
        if stat == 3:
            actor.heal(5)
        if self._rng.chance(Domain.ACTIVITY, 0.05):
            self._news.announce(True, f"{actor.name} has been training hard at the Gym!")

    def visit_master(self, actor: Actor) -> None:
        if actor.level >= self._config.max_level:
            return
        if actor.experience < experience_for_level(actor.level + 1):
            return
        actor.level += 1
        actor.base_max_hp += 10 + self._rng.randint(Domain.ACTIVITY, 5, 14)
        actor.base_strength += self._rng.randint(Domain.ACTIVITY, 1, 2)
        actor.base_defence += 1
        actor.recalculate_stats(self._catalog)
        actor.hp = actor.max_hp
        self._news.announce(True, f"{actor.name} has achieved Level {actor.level}!")
        logger.info("%s reached level %d", actor.name, actor.level)

    def visit_healer(self, actor: Actor) -> None:
        actor.update_location("Healer")
        cost = (actor.max_hp - actor.hp) * 2
        if cost > 0 and actor.gold >= cost:
            actor.spend_gold(cost)
            actor.hp = actor.max_hp
        elif actor.hp < actor.max_hp:
            affordable = actor.gold // 2
            amount = affordable // 2
            if amount > 0:
                actor.spend_gold(affordable)
                actor.heal(amount)

    # ------------------------------------------------------------------
    # Town life
    # ------------------------------------------------------------------

    def wander(self, actor: Actor) -> None:
        location = self._rng.choice(Domain.ACTIVITY, GAME_LOCATIONS)
        if location != actor.location:
            actor.update_location(location)

    def go_home(self, actor: Actor) -> None:
        actor.update_location(_HOME)
        if not self._rng.chance(Domain.ACTIVITY, 0.15):
            return
        status = self._partners(actor.id) if self._partners else None
        if status == "spouse":
            lines = (
                f"{actor.name} is spending quality time at home.",
                f"{actor.name} prepared a warm meal at home.",
                f"{actor.name} is waiting faithfully at home.",
            )
        else:
            lines = (
                f"{actor.name} stopped by home for a visit.",
                f"{actor.name} is relaxing at home.",
                f"{actor.name} came home looking for company.",
            )
        self._news.announce(False, self._rng.choice(Domain.ACTIVITY, lines))

    def visit_love_street(self, actor: Actor) -> None:
        actor.update_location("Love Street")
        if actor.personality is None:
            return
        roll = self._roll()
        if roll < 0.4:
            return
        if roll < 0.7 and actor.gold >= 500:
            cost = min(self._rng.randint(Domain.ACTIVITY, 500, 4999), actor.gold)
            actor.spend_gold(cost)
            disease = 0.25 if cost < 2000 else 0.15
            if self._rng.chance(Domain.ACTIVITY, disease):
                actor.hp = max(1, actor.hp // 2)
                self._news.announce(True, f"{actor.name} caught a nasty disease at Love Street!")
            if self._rng.chance(Domain.ACTIVITY, 0.3):
                self._news.announce(True, f"{actor.name} was seen at Love Street last night.")
            return

        others = self._world.at_location("Love Street", exclude=actor)
        if others:
            other = self._rng.choice(Domain.ACTIVITY, others)
            if compatibility(actor, other) > 0.5:
                actor.adjust_relationship(other.id, 2)
                other.adjust_relationship(actor.id, 1)

    def visit_temple(self, actor: Actor) -> None:
        actor.update_location("Temple")
        p = actor.personality
        roll = self._roll()

        if roll < 0.4:
            if self._rng.chance(Domain.ACTIVITY, 0.1):
                boost = self._rng.randint(Domain.ACTIVITY, 1, 2)
                blessing = self._rng.randint(Domain.ACTIVITY, 0, 2)
                if blessing == 0:
                    actor.base_strength += boost
                    actor.strength += boost
                elif blessing == 1:
                    actor.wisdom += boost
                else:
                    actor.heal(actor.max_hp // 4)
                self._news.announce(False, f"{actor.name} received a divine blessing at the Temple.")
        elif roll < 0.6 and actor.gold >= 500:
            sacrifice = self._rng.randint(Domain.ACTIVITY, 500, min(5000, actor.gold))
            actor.spend_gold(sacrifice)
            actor.chivalry += sacrifice // 500
            if sacrifice >= 2000 and self._rng.chance(Domain.ACTIVITY, 0.3):
                self._news.announce(False, f"{actor.name} made a generous offering at the Temple.")
        elif roll < 0.75 and p is not None and p.aggression > 0.6 and actor.darkness > actor.chivalry:
            actor.darkness += self._rng.randint(Domain.ACTIVITY, 10, 24)
            if self._rng.chance(Domain.ACTIVITY, 0.3):
                damage = self._rng.randint(Domain.ACTIVITY, 20, 49 + actor.level)
                actor.hp = max(1, actor.hp - damage)
                self._news.announce(True, f"{actor.name} was struck by divine wrath for desecrating an altar!")
            else:
                self._news.announce(True, f"{actor.name} desecrated an altar at the Temple!")
        else:
            actor.heal(actor.max_hp // 10)
            self._meet_someone(actor, 0.3)

    def visit_bank(self, actor: Actor) -> None:
        actor.update_location("Bank")
        roll = self._roll()

        if actor.gold > 1000 and roll < 0.5:
            deposit = int(actor.gold * (0.5 + self._roll() * 0.3))
            deposit = actor.spend_gold(deposit)
            actor.bank_gold += deposit
            if deposit >= 10000 and self._rng.chance(Domain.ACTIVITY, 0.2):
                self._news.announce(False, f"{actor.name} made a substantial deposit at the Ironvault Bank.")
        elif actor.bank_gold > 0 and actor.gold < 100 and roll < 0.7:
            withdraw = min(actor.bank_gold, 500 + actor.level * 50)
            actor.bank_gold -= withdraw
            actor.gain_gold(withdraw)
        elif not actor.bank_guard and actor.level >= 5 and actor.darkness <= 100 and roll < 0.85:
            if self._rng.chance(Domain.ACTIVITY, 0.3):
                actor.bank_guard = True
                actor.bank_wage = 1000 + actor.level * 50
                self._news.announce(True, f"{actor.name} has been hired as a guard at the Ironvault Bank!")
        elif actor.bank_guard and self._rng.chance(Domain.ACTIVITY, 0.05):
            actor.bank_guard = False
            actor.bank_wage = 0
        else:
            self._meet_someone(actor, 0.2)

    def visit_marketplace(self, actor: Actor) -> None:
        """Sell a trinket, maybe buy one from someone else at the market."""
        actor.update_location("Market")

        if actor.market_inventory and self._rng.chance(Domain.ECONOMY, 0.5):
            item = self._rng.choice(Domain.ECONOMY, actor.market_inventory)
            actor.market_inventory.remove(item)
            actor.gain_gold(item.value)
            logger.debug("%s sold %s for %d gold", actor.name, item.name, item.value)

        if actor.gold > 500 and self._rng.chance(Domain.ECONOMY, 0.5):
            sellers = [a for a in self._world.at_location("Market", exclude=actor) if a.market_inventory]
            if sellers and len(actor.market_inventory) < actor.max_market_inventory:
                seller = self._rng.choice(Domain.ECONOMY, sellers)
                item = self._rng.choice(Domain.ECONOMY, seller.market_inventory)
                if item.value <= actor.gold:
                    seller.market_inventory.remove(item)
                    seller.gain_gold(actor.spend_gold(item.value))
                    actor.market_inventory.append(item)

        self._meet_someone(actor, 0.2)

    def visit_castle(self, actor: Actor) -> None:
        actor.update_location("Castle")
        king = self._kingdom
        if king is None or not king.is_active:
            return
        if king.has_guard(actor.id) or actor.bank_guard:
            return

        cfg = self._config
        if (
            actor.level >= 5 and actor.chivalry > actor.darkness
            and not actor.team and len(king.guards) < cfg.max_guards
        ):
            chance = 0.15 + min(0.20, actor.chivalry / 500)
            if actor.level >= 10:
                chance += 0.10
            if actor.level >= 20:
                chance += 0.10
            if actor.personality is not None:
                chance += actor.personality.aggression * 0.05
                chance -= actor.personality.greed * 0.10
            if self._rng.chance(Domain.POLITICS, chance):
                king.guards.append(RoyalGuard(
                    name=actor.name,
                    daily_salary=cfg.base_guard_salary + actor.level * 20,
                    loyalty=self._rng.randint(Domain.POLITICS, 80, 100),
                    actor_id=actor.id,
                ))
                actor.chivalry += 5
                self._news.announce(True, f"{actor.name} has joined the Royal Guard!")
        elif actor.level >= 3 and self._rng.chance(Domain.ACTIVITY, 0.10):
            if actor.gold > 500 and actor.chivalry > 50:
                donation = actor.spend_gold(min(actor.gold // 10, 200 + actor.level * 10))
                king.treasury += donation
                actor.chivalry += min(5, donation // 50)

        self._meet_someone(actor, 0.15)
