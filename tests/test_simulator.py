"""Tests for the per-tick pipeline and the engine manager that owns it."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import logging
from unittest.mock import Mock

from worldsim.ai.brain import IDLE
from worldsim.api.engine_manager import EngineManager
from worldsim.config import SimulationConfig
from worldsim.core.enums import ActivityKind
from worldsim.core.models import Personality
from worldsim.engine.simulator import WORLD_EVENTS, WorldSimulator
from worldsim.utils.event_log import NewsFeed
from tests.helpers.sim_fixtures import FixedRandom, make_actor, make_news, make_world


def _quiet_config(**overrides) -> SimulationConfig:
    """No optional activities and no random world-level drama."""
    base = dict(
        initial_actor_count=0,
        activity_chance=0.0,
        world_event_chance=0.0,
        gang_formation_chance=0.0,
        gang_betrayal_chance=0.0,
        rivalry_chance=0.0,
        betrayal_chance=0.0,
        team_war_chance=0.0,
        turf_claim_chance=0.0,
        guard_recruitment_chance=0.0,
        intrigue_chance=0.0,
    )
    base.update(overrides)
    return SimulationConfig(**base)


def _brain(decide=None):
    brain = Mock()
    brain.decide.return_value = IDLE
    if decide is not None:
        brain.decide.side_effect = decide
    return brain


class TestPipeline:

    def test_step_order(self):
        calls = []
        actor = make_actor("a")
        actor.brain = _brain(lambda world: calls.append("decide") or IDLE)
        _, world = make_world(actor)
        news, _ = make_news()

        respawn = Mock()
        respawn.tick.side_effect = lambda: calls.append("respawn") or []
        respawn.queue_dead.side_effect = lambda: calls.append("queue_dead") or 0
        actions = Mock()
        actions.execute.side_effect = lambda a, act: calls.append("execute")
        policy = Mock()
        policy.choose_activity.side_effect = lambda a, w: calls.append("choose")
        social = Mock()
        social.update.side_effect = lambda: calls.append("social")
        social.turf_holder.return_value = None
        politics = Mock()
        politics.update.side_effect = lambda: calls.append("politics")
        feed = NewsFeed()

        sim = WorldSimulator(
            SimulationConfig(), FixedRandom(0.99), world, news,
            respawn, policy, actions, Mock(), social, politics, feed=feed,
        )
        sim.simulate_step()

        assert calls == ["respawn", "decide", "execute", "choose", "queue_dead", "social", "politics"]
        assert sim.tick == 1
        assert feed.tick == 1

    def test_chosen_activity_is_run(self):
        actor = make_actor("a")
        actor.brain = _brain()
        _, world = make_world(actor)
        news, _ = make_news()
        policy = Mock()
        policy.choose_activity.return_value = "kind"
        activities = Mock()
        respawn = Mock()
        respawn.tick.return_value = []
        respawn.queue_dead.return_value = 0

        sim = WorldSimulator(
            SimulationConfig(), FixedRandom(0.99), world, news,
            respawn, policy, Mock(), activities, Mock(), Mock(),
        )
        sim.simulate_step()

        activities.run.assert_called_once_with(actor, "kind")

    def test_world_event(self):
        _, world = make_world()
        news, sink = make_news()
        sim = WorldSimulator(
            SimulationConfig(), FixedRandom(0.0), world, news,
            Mock(), Mock(), Mock(), Mock(), Mock(), Mock(),
        )
        assert sim.process_world_events() == WORLD_EVENTS[0]
        sink.announce.assert_called_once_with(False, WORLD_EVENTS[0])


class TestIsolation:

    def test_failing_brain_does_not_stop_the_tick(self, caplog):
        def broken(world):
            raise RuntimeError("brain melted")

        bad = make_actor("bad")
        bad.brain = _brain(broken)
        good = make_actor("good")
        good.brain = _brain()

        manager = EngineManager(_quiet_config(), populate=False)
        manager.roster.replace([bad, good])

        with caplog.at_level(logging.ERROR, logger="worldsim.engine.simulator"):
            assert manager.step()

        good.brain.decide.assert_called_once()
        assert "Error processing actor Bad" in caplog.text
        assert manager.tick == 1

    def test_dead_actor_is_skipped_and_queued(self):
        corpse = make_actor("corpse", hp=0)
        corpse.brain = _brain()
        manager = EngineManager(_quiet_config(), populate=False)
        manager.roster.replace([corpse])

        manager.step()

        corpse.brain.decide.assert_not_called()
        assert manager.simulator.respawn.queue == {"corpse": 5}


class TestRespawnFlow:

    def test_dead_actor_returns_after_timer(self):
        corpse = make_actor("corpse", hp=0, gold=100, location="Dungeon")
        manager = EngineManager(_quiet_config(), populate=False)
        manager.roster.replace([corpse])

        for _ in range(5):
            manager.step()
        assert not corpse.alive

        manager.step()
        assert corpse.alive
        assert corpse.hp == corpse.max_hp
        assert corpse.gold == 50
        assert corpse.location == "Main Street"

    def test_load_roster_uses_fast_timer(self):
        manager = EngineManager(_quiet_config(), populate=False)
        manager.roster.replace([make_actor("old", hp=0)])
        manager.step()
        assert "old" in manager.simulator.respawn

        loaded = [make_actor("alive"), make_actor("dead", hp=0)]
        assert manager.load_roster(loaded) == 1

        assert manager.simulator.respawn.queue == {"dead": 2}
        assert manager.world.get_by_id("old") is None
        assert manager.world.get_by_id("alive") is loaded[0]

        manager.step()
        manager.step()
        assert loaded[1].alive


class TestQueries:

    def test_status_line(self):
        a = make_actor("a", team="Red", team_secret="s", controls_turf=True)
        b = make_actor("b", gang_members=["a"])
        a.adjust_relationship("b", 3)
        manager = EngineManager(_quiet_config(), populate=False)
        manager.roster.replace([a, b])

        status = manager.simulator.status()

        assert status == "Active NPCs: 2, Teams: 1, Turf: Red, Gangs: 1, Relationships: 1"

    def test_active_teams_strongest_first(self):
        weak = make_actor("w", team="Weak", team_secret="s")
        strong = make_actor("s", level=30, strength=50, team="Strong", team_secret="t")
        mate = make_actor("m", team="Strong", team_secret="t")
        manager = EngineManager(_quiet_config(), populate=False)
        manager.roster.replace([weak, strong, mate])

        teams = manager.simulator.active_teams()

        assert [t.name for t in teams] == ["Strong", "Weak"]
        assert manager.simulator.teammates("Strong") == [strong, mate]


class TestEngineManager:

    def test_generated_world(self):
        manager = EngineManager(SimulationConfig(initial_actor_count=12))
        assert len(manager.roster) == 12
        assert all(a.brain is not None for a in manager.world.all())
        assert manager.kingdom.treasury == 50000

    def test_same_seed_same_world(self):
        a = EngineManager(SimulationConfig(initial_actor_count=8, world_seed=3))
        b = EngineManager(SimulationConfig(initial_actor_count=8, world_seed=3))
        assert [x.name for x in a.world.all()] == [x.name for x in b.world.all()]

    def test_many_ticks_keep_invariants(self):
        manager = EngineManager(SimulationConfig(initial_actor_count=30, world_seed=99, activity_chance=0.5))
        for _ in range(60):
            assert manager.step()
            holders = {a.team for a in manager.world.all() if a.controls_turf and a.team}
            assert len(holders) <= 1
            for actor in manager.world.all():
                assert actor.gold >= 0
                assert actor.hp >= 0
                if actor.team:
                    assert actor.team_secret
            counts = {}
            for actor in manager.world.all():
                if actor.team:
                    counts[actor.team] = counts.get(actor.team, 0) + 1
            assert all(c <= manager.config.max_team_size for c in counts.values())

    def test_partner_lookup_is_wired_through(self):
        actor = make_actor("a", personality=Personality())
        lookup = Mock(return_value="spouse")
        manager = EngineManager(_quiet_config(), populate=False, partners=lookup)
        manager.roster.replace([actor])

        kinds = [c.kind for c in manager.simulator.policy.candidates(actor, manager.world)]

        assert ActivityKind.GO_HOME in kinds
        lookup.assert_called_with("a")
        assert manager.simulator.activities._partners is lookup

    def test_no_partner_lookup_means_no_go_home(self):
        actor = make_actor("a", personality=Personality())
        manager = EngineManager(_quiet_config(), populate=False)
        manager.roster.replace([actor])
        kinds = [c.kind for c in manager.simulator.policy.candidates(actor, manager.world)]
        assert ActivityKind.GO_HOME not in kinds

    def test_reset_rebuilds_stopped(self):
        manager = EngineManager(SimulationConfig(initial_actor_count=5, tick_interval=60.0))
        manager.step()
        manager.start()
        manager.reset()
        assert not manager.running
        assert manager.tick == 0
        assert len(manager.feed) == 0
        assert len(manager.roster) == 5
