"""Tests for the respawn queue: timers, resurrection repair, load handling."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import logging

from worldsim.config import SimulationConfig
from worldsim.engine.respawn import RespawnManager
from tests.helpers.sim_fixtures import announced, make_actor, make_news, make_world


def _make_manager(*actors, **cfg):
    roster, world = make_world(*actors)
    news, sink = make_news()
    config = SimulationConfig(**cfg)
    return RespawnManager(config, world, news), roster, sink


class TestQueue:

    def test_queue_once_per_actor(self):
        mgr, _, _ = _make_manager()
        assert mgr.queue_for_respawn("a")
        assert not mgr.queue_for_respawn("a", ticks=1)
        assert mgr.queue == {"a": 5}
        assert len(mgr) == 1
        assert "a" in mgr

    def test_empty_id_is_rejected(self):
        mgr, _, _ = _make_manager()
        assert not mgr.queue_for_respawn("")
        assert len(mgr) == 0

    def test_queue_dead_only_adds_dead_once(self):
        alive = make_actor("alive")
        dead = make_actor("dead", hp=0)
        mgr, _, _ = _make_manager(alive, dead)
        assert mgr.queue_dead() == 1
        assert mgr.queue_dead() == 0
        assert mgr.queue == {"dead": 5}

    def test_queue_is_a_copy(self):
        mgr, _, _ = _make_manager()
        mgr.queue_for_respawn("a")
        mgr.queue["a"] = 99
        assert mgr.queue == {"a": 5}


class TestTick:

    def test_timer_counts_down_then_revives(self):
        dead = make_actor("dead", hp=0, gold=101, location="Dungeon")
        mgr, _, sink = _make_manager(dead)
        mgr.queue_for_respawn("dead", ticks=3)

        assert mgr.tick() == []
        assert mgr.queue == {"dead": 2}
        assert mgr.tick() == []
        assert mgr.tick() == ["dead"]

        assert "dead" not in mgr
        assert dead.alive
        assert dead.hp == dead.max_hp == 100
        assert dead.gold == 50
        assert dead.location == "Main Street"
        assert "returned from the realm of the dead" in announced(sink)[0]

    def test_is_dead_flag_is_cleared(self):
        dead = make_actor("dead", is_dead=True)
        mgr, _, _ = _make_manager(dead)
        mgr.queue_for_respawn("dead", ticks=1)
        mgr.tick()
        assert not dead.is_dead
        assert dead.alive

    def test_invalid_max_hp_is_repaired(self, caplog):
        broken = make_actor("broken", level=3, hp=0, max_hp=5)
        mgr, _, _ = _make_manager(broken)
        mgr.queue_for_respawn("broken", ticks=1)

        with caplog.at_level(logging.WARNING, logger="worldsim.engine.respawn"):
            mgr.tick()

        # 20 + 3 * 10
        assert broken.max_hp == 50
        assert broken.base_max_hp == 50
        assert broken.hp == 50
        assert "invalid max HP" in caplog.text

    def test_missing_actor_is_dropped_with_warning(self, caplog):
        mgr, _, sink = _make_manager(make_actor("someone"))
        mgr.queue_for_respawn("ghost", ticks=1)

        with caplog.at_level(logging.WARNING, logger="worldsim.engine.respawn"):
            assert mgr.tick() == []

        assert len(mgr) == 0
        assert "ghost" in caplog.text
        sink.announce.assert_not_called()

    def test_custom_default_location(self):
        dead = make_actor("dead", hp=0, location="Dungeon")
        mgr, _, _ = _make_manager(dead, default_location="Town Square")
        mgr.queue_for_respawn("dead", ticks=1)
        mgr.tick()
        assert dead.location == "Town Square"


class TestLoad:

    def test_process_dead_on_load_uses_fast_timer(self):
        alive = make_actor("alive")
        dead = make_actor("dead", hp=0)
        mgr, _, _ = _make_manager(alive, dead)
        mgr.queue_for_respawn("stale")

        assert mgr.process_dead_on_load() == 1
        assert mgr.queue == {"dead": 2}

    def test_load_after_roster_swap(self):
        mgr, roster, _ = _make_manager(make_actor("old", hp=0))
        mgr.queue_dead()
        roster.replace([make_actor("new", hp=0)])

        mgr.clear_queue()
        mgr.process_dead_on_load()
        assert mgr.queue == {"new": 2}

    def test_empty_roster_warns(self, caplog):
        mgr, _, _ = _make_manager()
        with caplog.at_level(logging.WARNING, logger="worldsim.engine.respawn"):
            assert mgr.process_dead_on_load() == 0
        assert "roster is empty" in caplog.text
