"""Tests for the background scheduler: idempotent lifecycle, isolation, prompt stop."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import threading
import time

from worldsim.engine.scheduler import WorldScheduler


def _wait_for(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def _sim_threads() -> int:
    return sum(1 for t in threading.enumerate() if t.name == "world-sim" and t.is_alive())


class TestLifecycle:

    def test_start_and_stop_are_idempotent(self):
        sched = WorldScheduler(lambda: None, interval=60.0)
        assert not sched.stop()
        assert sched.start()
        assert not sched.start()
        assert sched.running
        assert sched.stop()
        assert not sched.stop()
        assert not sched.running

    def test_only_one_loop_runs(self):
        before = _sim_threads()
        sched = WorldScheduler(lambda: None, interval=60.0)
        sched.start()
        sched.start()
        try:
            assert _sim_threads() == before + 1
        finally:
            sched.stop()

    def test_stop_wakes_the_wait(self):
        ran = threading.Event()
        sched = WorldScheduler(ran.set, interval=60.0)
        sched.start()
        assert ran.wait(5.0)

        t0 = time.monotonic()
        sched.stop()
        assert time.monotonic() - t0 < 2.0

    def test_in_flight_step_finishes(self):
        started = threading.Event()
        finished = threading.Event()

        def slow_step():
            started.set()
            time.sleep(0.2)
            finished.set()

        sched = WorldScheduler(slow_step, interval=60.0)
        sched.start()
        assert started.wait(5.0)
        sched.stop()
        assert finished.is_set()

    def test_restart_after_stop(self):
        calls = []
        sched = WorldScheduler(lambda: calls.append(1), interval=0.01)
        sched.start()
        assert _wait_for(lambda: len(calls) >= 1)
        sched.stop()
        count = len(calls)

        assert sched.start()
        assert _wait_for(lambda: len(calls) > count)
        sched.stop()


class TestSteps:

    def test_step_once(self):
        calls = []
        sched = WorldScheduler(lambda: calls.append(1))
        assert sched.step_once()
        assert calls == [1]
        assert sched.steps == 1
        assert sched.errors == 0

    def test_failing_step_is_counted(self):
        def boom():
            raise RuntimeError("boom")

        sched = WorldScheduler(boom)
        assert not sched.step_once()
        assert sched.errors == 1
        assert sched.steps == 1

    def test_loop_survives_failing_steps(self):
        calls = []

        def flaky():
            calls.append(1)
            raise ValueError("bad tick")

        sched = WorldScheduler(flaky, interval=0.01)
        sched.start()
        try:
            assert _wait_for(lambda: len(calls) >= 3)
            assert sched.running
        finally:
            sched.stop()
        assert sched.errors >= 3

    def test_interval_property(self):
        assert WorldScheduler(lambda: None, interval=2.5).interval == 2.5
