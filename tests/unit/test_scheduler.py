"""
Unit tests for recurring simulations.
"""

import threading
import time

import pytest

from simulation.monte_carlo import MonteCarloSimulator
from simulation.scheduler import SimulationHandle, start_recurring


def _wait_for(condition, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.005)
    return False


class TestSimulationHandle:
    """Tests for the recurring job handle."""

    def test_runs_until_cancelled(self):
        counter = {"n": 0}

        def job():
            counter["n"] += 1
            return counter["n"]

        handle = start_recurring(job, interval=0.01)
        try:
            assert _wait_for(lambda: handle.runs >= 3)
            assert handle.is_running
            assert handle.latest >= 3
        finally:
            handle.cancel()

        assert not handle.is_running
        runs = handle.runs
        time.sleep(0.05)
        assert handle.runs == runs

    def test_simulation_results(self):
        simulator = MonteCarloSimulator(random_state=1)
        results = []

        handle = start_recurring(
            lambda: simulator.run(0.1, 0.5, simulations=50, time_horizon=5),
            interval=0.01,
            on_result=results.append,
        )
        try:
            assert _wait_for(lambda: len(results) >= 2)
        finally:
            handle.cancel()

        assert len(handle.latest.outcomes) == 50

    def test_errors_do_not_stop_loop(self):
        calls = {"n": 0}

        def flaky():
            calls["n"] += 1
            if calls["n"] == 1:
                raise RuntimeError("boom")
            return "ok"

        handle = start_recurring(flaky, interval=0.01)
        try:
            assert _wait_for(lambda: handle.latest == "ok")
        finally:
            handle.cancel()

        assert handle.runs >= 2

    def test_last_error_recorded(self):
        def failing():
            raise RuntimeError("boom")

        handle = start_recurring(failing, interval=0.01)
        try:
            assert _wait_for(lambda: handle.last_error is not None)
        finally:
            handle.cancel()

        assert isinstance(handle.last_error, RuntimeError)
        assert handle.latest is None

    def test_failing_callback_does_not_stop_loop(self):
        def broken_consumer(result):
            raise RuntimeError("consumer failed")

        handle = start_recurring(lambda: 1, interval=0.01, on_result=broken_consumer)
        try:
            assert _wait_for(lambda: handle.runs >= 2)
            assert handle.is_running
        finally:
            handle.cancel()

        assert isinstance(handle.last_error, RuntimeError)
        assert handle.latest == 1

    def test_delayed_first_run(self):
        handle = start_recurring(lambda: 1, interval=10.0, run_immediately=False)
        try:
            time.sleep(0.05)
            assert handle.runs == 0
        finally:
            handle.cancel()

        assert not handle.is_running

    def test_handles_are_independent(self):
        first = start_recurring(lambda: "first", interval=0.01)
        second = start_recurring(lambda: "second", interval=0.01)
        try:
            first.cancel()
            assert second.is_running
            assert _wait_for(lambda: second.latest == "second")
        finally:
            first.cancel()
            second.cancel()

    def test_context_manager(self):
        event = threading.Event()

        with SimulationHandle(event.set, interval=0.01).start() as handle:
            assert event.wait(5.0)

        assert not handle.is_running

    def test_invalid_interval(self):
        with pytest.raises(ValueError):
            SimulationHandle(lambda: None, interval=0)
