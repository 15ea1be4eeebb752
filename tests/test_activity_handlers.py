"""Tests for the activity handlers that carry out a chosen activity."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import Mock

from worldsim.config import SimulationConfig
from worldsim.core.enums import ActivityKind, EquipmentSlot
from worldsim.core.items import LootItem
from worldsim.core.kingdom import Kingdom, RoyalGuard
from worldsim.core.models import Personality
from worldsim.engine.activities import ActivityHandlers
from worldsim.engine.combat import CombatOutcome, CombatResult
from worldsim.systems.monsters import MonsterGenerator
from tests.helpers.sim_fixtures import FixedRandom, announced, make_actor, make_news, make_world


def _make_handlers(*actors, roll: float = 0.0, kingdom=None, partners=None):
    """Handlers over a hand-built world with mocked combat and social layers."""
    rng = FixedRandom(roll)
    _, world = make_world(*actors)
    news, sink = make_news()
    combat = Mock()
    combat.group.return_value = CombatResult(CombatOutcome.VICTORY, 2)
    social = Mock()
    handlers = ActivityHandlers(
        SimulationConfig(), rng, world, news, combat, MonsterGenerator(rng),
        social, kingdom=kingdom, partners=partners,
    )
    return handlers, combat, social, sink


class TestDispatch:

    def test_run_records_activity(self):
        actor = make_actor("a", location="Inn")
        handlers, _, _, _ = _make_handlers(actor)
        handlers.run(actor, ActivityKind.WANDER)
        assert actor.activity == "wander"
        assert actor.location == "Main Street"

    def test_team_recruit_goes_to_social(self):
        actor = make_actor("a")
        handlers, _, social, _ = _make_handlers(actor)
        handlers.run(actor, ActivityKind.TEAM_RECRUIT)
        social.team_recruitment.assert_called_once_with(actor)

    def test_dead_actor_does_nothing(self):
        actor = make_actor("a", hp=0, gold=1000)
        handlers, _, _, _ = _make_handlers(actor)
        handlers.run(actor, ActivityKind.TRAIN)
        assert actor.gold == 1000
        assert actor.activity == ""

    def test_every_kind_has_a_handler(self):
        actor = make_actor("a", gold=100000, level=10, personality=Personality())
        handlers, _, _, _ = _make_handlers(actor, roll=0.99, kingdom=Kingdom())
        for kind in ActivityKind:
            handlers.run(actor, kind)
            assert actor.activity == kind.value


class TestDungeon:

    def test_solo_dungeon(self):
        actor = make_actor("a", level=1)
        handlers, combat, _, _ = _make_handlers(actor)
        handlers.explore_dungeon(actor)

        assert actor.location == "Dungeon"
        combat.solo.assert_called_once()
        fighter, monster, place = combat.solo.call_args.args
        assert fighter is actor
        assert monster.level == 1
        assert place == "the Dungeon"

    def test_team_run_uses_group_combat(self):
        a = make_actor("a", team="Red", team_secret="s")
        b = make_actor("b", team="Red", team_secret="s")
        handlers, combat, _, sink = _make_handlers(a, b)
        handlers.team_dungeon_run(a)

        combat.group.assert_called_once()
        party, monsters, _ = combat.group.call_args.args
        assert party == [a, b]
        assert len(monsters) == 2
        assert a.location == b.location == "Dungeon"
        assert "Team 'Red' conquered" in announced(sink)[0]
        combat.solo.assert_not_called()

    def test_team_run_falls_back_to_solo(self):
        a = make_actor("a", team="Red", team_secret="s")
        wounded = make_actor("b", hp=40, team="Red", team_secret="s")
        handlers, combat, _, _ = _make_handlers(a, wounded)
        handlers.team_dungeon_run(a)

        combat.group.assert_not_called()
        combat.solo.assert_called_once()


class TestSelfImprovement:

    def test_shop_buys_best_affordable_weapon(self):
        actor = make_actor("a", gold=10000)
        actor.equipped[EquipmentSlot.OFF_HAND] = 21
        handlers, _, _, _ = _make_handlers(actor)
        handlers.go_shopping(actor)

        # budget 3000: War Hammer (1900, two-handed) is the best fit
        assert actor.location == "Weapon Shop"
        assert actor.equipped[EquipmentSlot.MAIN_HAND] == 5
        assert EquipmentSlot.OFF_HAND not in actor.equipped
        assert actor.weapon_power == 19
        assert actor.gold == 8100

    def test_shop_without_budget_buys_nothing(self):
        actor = make_actor("a", gold=50)
        handlers, _, _, _ = _make_handlers(actor)
        handlers.go_shopping(actor)
        assert actor.gold == 50
        assert actor.equipped == {}

    def test_gym_raises_a_stat(self):
        actor = make_actor("a", gold=1000, strength=10)
        handlers, _, _, _ = _make_handlers(actor)
        handlers.train_at_gym(actor)
        assert actor.gold == 940
        assert actor.base_strength == 11
        assert actor.strength == 11

    def test_gym_hp_branch_heals(self):
        actor = make_actor("a", gold=1000, hp=100, max_hp=100)
        handlers, _, _, _ = _make_handlers(actor, roll=0.99)
        handlers.train_at_gym(actor)
        assert actor.max_hp == 105
        assert actor.hp == 105

    def test_gym_requires_gold(self):
        actor = make_actor("a", gold=59, strength=10)
        handlers, _, _, _ = _make_handlers(actor)
        handlers.train_at_gym(actor)
        assert actor.gold == 59
        assert actor.strength == 10

    def test_master_levels_up(self):
        actor = make_actor("a", level=1, hp=20, experience=10 ** 6, strength=10, defence=5)
        handlers, _, _, sink = _make_handlers(actor)
        handlers.visit_master(actor)

        assert actor.level == 2
        assert actor.max_hp == 115
        assert actor.hp == actor.max_hp
        assert actor.strength == 11
        assert actor.defence == 6
        assert announced(sink) == ["A has achieved Level 2!"]

    def test_master_needs_experience(self):
        actor = make_actor("a", level=1, experience=10)
        handlers, _, _, sink = _make_handlers(actor)
        handlers.visit_master(actor)
        assert actor.level == 1
        sink.announce.assert_not_called()

    def test_healer_full_treatment(self):
        actor = make_actor("a", hp=50, max_hp=100, gold=200)
        handlers, _, _, _ = _make_handlers(actor)
        handlers.visit_healer(actor)
        assert actor.location == "Healer"
        assert actor.hp == 100
        assert actor.gold == 100

    def test_healer_partial_treatment(self):
        actor = make_actor("a", hp=50, max_hp=100, gold=40)
        handlers, _, _, _ = _make_handlers(actor)
        handlers.visit_healer(actor)
        assert actor.gold == 20
        assert actor.hp == 60


class TestTownLife:

    def test_go_home(self):
        actor = make_actor("a")
        handlers, _, _, sink = _make_handlers(actor)
        handlers.go_home(actor)
        assert actor.location == "Home"
        sink.announce.assert_called_once_with(False, "A stopped by home for a visit.")

    def test_go_home_spouse_lines(self):
        actor = make_actor("a")
        handlers, _, _, sink = _make_handlers(actor, partners=lambda aid: "spouse")
        handlers.go_home(actor)
        sink.announce.assert_called_once_with(False, "A is spending quality time at home.")

    def test_love_street_spending(self):
        actor = make_actor("a", gold=3000, personality=Personality())
        handlers, _, _, sink = _make_handlers(actor, roll=0.5)
        handlers.visit_love_street(actor)
        assert actor.location == "Love Street"
        assert actor.gold == 250
        assert actor.hp == 100
        sink.announce.assert_not_called()

    def test_temple_blessing(self):
        actor = make_actor("a", strength=10, personality=Personality())
        handlers, _, _, sink = _make_handlers(actor)
        handlers.visit_temple(actor)
        assert actor.location == "Temple"
        assert actor.strength == 11
        assert "divine blessing" in announced(sink)[0]

    def test_bank_deposit(self):
        actor = make_actor("a", gold=2000)
        handlers, _, _, _ = _make_handlers(actor)
        handlers.visit_bank(actor)
        assert actor.location == "Bank"
        assert actor.gold == 1000
        assert actor.bank_gold == 1000

    def test_bank_withdrawal(self):
        actor = make_actor("a", level=2, gold=50, bank_gold=5000)
        handlers, _, _, _ = _make_handlers(actor, roll=0.6)
        handlers.visit_bank(actor)
        assert actor.gold == 650
        assert actor.bank_gold == 4400

    def test_marketplace_sells_loot(self):
        seller = make_actor("a", gold=0)
        seller.market_inventory.append(LootItem("Old Ring", 40))
        handlers, _, _, _ = _make_handlers(seller)
        handlers.visit_marketplace(seller)
        assert seller.location == "Market"
        assert seller.market_inventory == []
        assert seller.gold == 40

    def test_marketplace_buys_from_peer(self):
        buyer = make_actor("buyer", gold=1000, location="Market")
        seller = make_actor("seller", gold=0, location="Market")
        ring = LootItem("Old Ring", 300)
        seller.market_inventory.append(ring)
        handlers, _, _, _ = _make_handlers(buyer, seller)
        handlers.visit_marketplace(buyer)
        assert buyer.market_inventory == [ring]
        assert buyer.gold == 700
        assert seller.market_inventory == []
        assert seller.gold == 300


class TestCastle:

    def test_worthy_actor_joins_guard(self):
        king = Kingdom()
        actor = make_actor("a", level=10, chivalry=200)
        handlers, _, _, sink = _make_handlers(actor, kingdom=king)
        handlers.visit_castle(actor)

        assert actor.location == "Castle"
        assert king.has_guard("a")
        guard = king.guards[0]
        assert guard.daily_salary == 500 + 10 * 20
        assert guard.loyalty == 80
        assert actor.chivalry == 205
        assert "joined the Royal Guard" in announced(sink)[0]

    def test_team_members_cannot_join(self):
        king = Kingdom()
        actor = make_actor("a", level=10, chivalry=200, team="Red", team_secret="s")
        handlers, _, _, _ = _make_handlers(actor, kingdom=king)
        handlers.visit_castle(actor)
        assert king.guards == []

    def test_existing_guard_is_ignored(self):
        king = Kingdom()
        actor = make_actor("a", level=10, chivalry=200)
        handlers, _, _, _ = _make_handlers(actor, kingdom=king)
        handlers.visit_castle(actor)
        handlers.visit_castle(actor)
        assert len(king.guards) == 1

    def test_namesake_of_a_guard_can_apply(self):
        king = Kingdom(guards=[RoyalGuard("A", 500, actor_id="other")])
        actor = make_actor("a", level=10, chivalry=200)
        handlers, _, _, _ = _make_handlers(actor, kingdom=king)
        handlers.visit_castle(actor)
        assert [g.actor_id for g in king.guards] == ["other", "a"]

    def test_without_kingdom(self):
        actor = make_actor("a", level=10, chivalry=200)
        handlers, _, _, _ = _make_handlers(actor)
        handlers.visit_castle(actor)
        assert actor.location == "Castle"
        assert actor.chivalry == 200
