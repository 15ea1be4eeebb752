"""Tests for the activity weighting policy and its scorers."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import dataclasses

import pytest

from worldsim.ai.activities import (
    ACTIVITY_REGISTRY,
    ActivityContext,
    ActivityPolicy,
    ActivityScorer,
    ActivityWeight,
    experience_for_level,
)
from worldsim.ai.activities.registry import register_all_activities
from worldsim.ai.activities.scorers import (
    BankActivity,
    CastleActivity,
    GoHomeActivity,
    LevelUpActivity,
    LoveStreetActivity,
    MarketplaceActivity,
    TeamRecruitActivity,
)
from worldsim.config import SimulationConfig
from worldsim.core.enums import ActivityKind
from worldsim.core.items import LootItem
from worldsim.core.models import Personality
from worldsim.systems.rng import SimRandom
from tests.helpers.sim_fixtures import FixedRandom, make_actor, make_world


def _ctx(actor, partner_status=None):
    _, world = make_world(actor)
    return ActivityContext(actor=actor, world=world, config=SimulationConfig(), partner_status=partner_status)


class TestExperienceCurve:

    def test_first_levels(self):
        assert experience_for_level(1) == 0
        assert experience_for_level(2) == int(2 ** 1.8 * 50)
        assert experience_for_level(3) == int(2 ** 1.8 * 50) + int(3 ** 1.8 * 50)

    def test_monotonic(self):
        values = [experience_for_level(lv) for lv in range(1, 30)]
        assert values == sorted(values)


class TestSelect:

    def test_empty_falls_back_to_wander(self):
        assert ActivityPolicy.select([], 0.3) is ActivityKind.WANDER

    def test_cumulative_walk(self):
        cands = [ActivityWeight(ActivityKind.HEAL, 0.25), ActivityWeight(ActivityKind.SHOP, 0.75)]
        assert ActivityPolicy.select(cands, 0.0) is ActivityKind.HEAL
        assert ActivityPolicy.select(cands, 0.24) is ActivityKind.HEAL
        assert ActivityPolicy.select(cands, 0.25) is ActivityKind.SHOP
        assert ActivityPolicy.select(cands, 0.999) is ActivityKind.SHOP

    def test_weights_need_not_sum_to_one(self):
        cands = [ActivityWeight(ActivityKind.BANK, 3.0), ActivityWeight(ActivityKind.TEMPLE, 1.0)]
        assert ActivityPolicy.select(cands, 0.74) is ActivityKind.BANK
        assert ActivityPolicy.select(cands, 0.76) is ActivityKind.TEMPLE


class TestChooseActivity:

    def test_gate_can_skip(self):
        actor = make_actor("a")
        _, world = make_world(actor)
        policy = ActivityPolicy(SimulationConfig(), FixedRandom(0.99))
        assert policy.choose_activity(actor, world) is None

    def test_dead_actor_skips(self):
        actor = make_actor("a", hp=0)
        _, world = make_world(actor)
        policy = ActivityPolicy(SimulationConfig(), FixedRandom(0.0))
        assert policy.choose_activity(actor, world) is None

    def test_wounded_poor_actor_heals_or_wanders(self):
        actor = make_actor("a", hp=10, max_hp=100, gold=0)
        _, world = make_world(actor)
        policy = ActivityPolicy(SimulationConfig(), FixedRandom(0.0))

        kinds = [c.kind for c in policy.candidates(actor, world)]
        assert kinds == [ActivityKind.HEAL, ActivityKind.WANDER]
        assert policy.choose_activity(actor, world) is ActivityKind.HEAL

    def test_choice_does_not_mutate_actor(self):
        actor = make_actor("a", gold=3000, personality=Personality())
        _, world = make_world(actor)
        before = (actor.hp, actor.gold, actor.location, actor.activity, actor.experience)
        policy = ActivityPolicy(SimulationConfig(activity_chance=1.0), SimRandom(3))

        for _ in range(50):
            kind = policy.choose_activity(actor, world)
            assert kind is None or isinstance(kind, ActivityKind)

        assert (actor.hp, actor.gold, actor.location, actor.activity, actor.experience) == before

    def test_partner_lookup_enables_go_home(self):
        actor = make_actor("a", personality=Personality())
        _, world = make_world(actor)
        policy = ActivityPolicy(SimulationConfig(), FixedRandom(0.0), partners=lambda aid: "spouse")
        assert ActivityKind.GO_HOME in [c.kind for c in policy.candidates(actor, world)]

    def test_custom_scorers(self):
        class AlwaysBank(ActivityScorer):
            @property
            def kind(self):
                return ActivityKind.BANK

            def weight(self, ctx):
                return 1.0

        actor = make_actor("a")
        _, world = make_world(actor)
        policy = ActivityPolicy(SimulationConfig(), FixedRandom(0.0), scorers=[AlwaysBank()])
        assert policy.choose_activity(actor, world) is ActivityKind.BANK


class TestRegistry:

    def test_registry_order(self):
        assert [s.kind for s in ACTIVITY_REGISTRY] == list(ActivityKind)

    def test_registration_is_idempotent(self):
        count = len(ACTIVITY_REGISTRY)
        register_all_activities()
        assert len(ACTIVITY_REGISTRY) == count


class TestScorers:

    def test_level_up_needs_experience(self):
        actor = make_actor("a", experience=experience_for_level(2) - 1)
        assert LevelUpActivity().weight(_ctx(actor)) == 0.0
        actor.experience += 1
        assert LevelUpActivity().weight(_ctx(actor)) == 0.30

    def test_level_up_stops_at_max_level(self):
        actor = make_actor("a", level=100, experience=10 ** 12)
        assert LevelUpActivity().weight(_ctx(actor)) == 0.0

    def test_love_street(self):
        p = Personality(romanticism=1.0, commitment=0.0)
        assert LoveStreetActivity().weight(_ctx(make_actor("a", gold=500, personality=p))) == 0.0
        w = LoveStreetActivity().weight(_ctx(make_actor("a", gold=501, personality=p)))
        assert abs(w - 0.20) < 1e-9

    def test_bank_rich_or_broke(self):
        p = Personality(greed=0.0)
        assert BankActivity().weight(_ctx(make_actor("a", gold=500, personality=p))) == 0.0
        assert abs(BankActivity().weight(_ctx(make_actor("a", gold=6000, personality=p))) - 0.20) < 1e-9
        broke = make_actor("a", gold=50, bank_gold=10, personality=p)
        assert abs(BankActivity().weight(_ctx(broke)) - 0.10) < 1e-9

    def test_go_home_only_for_partners(self):
        actor = make_actor("a", personality=Personality(romanticism=0.0, commitment=0.0))
        assert GoHomeActivity().weight(_ctx(actor)) == 0.0
        assert GoHomeActivity().weight(_ctx(actor, "spouse")) == 0.35
        assert GoHomeActivity().weight(_ctx(actor, "lover")) == 0.20

    def test_castle_needs_level_and_honour(self):
        assert CastleActivity().weight(_ctx(make_actor("a", level=4, chivalry=100))) == 0.0
        assert CastleActivity().weight(_ctx(make_actor("a", level=8, chivalry=10, darkness=20))) == 0.0
        w = CastleActivity().weight(_ctx(make_actor("a", level=12, chivalry=50)))
        assert abs(w - (0.05 + 0.05 + 0.05)) < 1e-9

    def test_team_recruit(self):
        joiner = make_actor("a", personality=Personality(sociability=0.9))
        loner = make_actor("b", personality=Personality(sociability=0.1, aggression=0.1))
        member = make_actor("c", team="Red", team_secret="s")
        assert TeamRecruitActivity().weight(_ctx(joiner)) == 0.15
        assert TeamRecruitActivity().weight(_ctx(loner)) == 0.0
        assert TeamRecruitActivity().weight(_ctx(member)) == 0.10

    def test_marketplace_for_sellers(self):
        seller = make_actor("a", gold=0)
        assert MarketplaceActivity().weight(_ctx(seller)) == 0.0
        seller.market_inventory.append(LootItem(name="Old Ring", value=40, level=1))
        assert MarketplaceActivity().weight(_ctx(seller)) == 0.12

    def test_context_is_frozen(self):
        ctx = _ctx(make_actor("a"))
        with pytest.raises(dataclasses.FrozenInstanceError):
            ctx.partner_status = "spouse"
