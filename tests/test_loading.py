"""
Tests for generation-tagged loading: stale responses never reach visible state.
"""

import asyncio
import sys
from pathlib import Path

import pytest

# Add scripts directory to path so datalathe_tui package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from datalathe_tui.loading import (  # noqa: E402
    LoadCoordinator, LoadStatus, describe_error, threaded,
)


def gated(value, gate: asyncio.Event):
    """Producer that returns ``value`` once ``gate`` is set."""
    async def producer():
        await gate.wait()
        return value
    return producer


async def settle():
    for _ in range(5):
        await asyncio.sleep(0)


class TestGenerations:
    """Synchronous apply() arbitration."""

    def test_initial_state(self):
        coord = LoadCoordinator()
        assert coord.generation == 0
        assert coord.loading is True
        assert coord.busy is False
        assert coord.data is None
        assert coord.error is None

    def test_stale_generation_dropped(self):
        coord = LoadCoordinator(spawn=lambda coro: coro.close())
        first = coord.load(lambda: None, key="A")
        second = coord.load(lambda: None, key="B")
        assert second == first + 1

        assert coord.apply(second, value="b") is True
        assert coord.apply(first, value="a") is False
        assert coord.data == "b"
        assert coord.state.key == "B"

    def test_generation_strictly_increases(self):
        coord = LoadCoordinator(spawn=lambda coro: coro.close())
        generations = [coord.load(lambda: None, key="same") for _ in range(5)]
        assert generations == sorted(set(generations))

    def test_failure_keeps_previous_value(self):
        coord = LoadCoordinator(spawn=lambda coro: coro.close())
        gen = coord.load(lambda: None)
        coord.apply(gen, value=[1, 2])
        gen = coord.load(lambda: None)
        coord.apply(gen, error="boom")
        assert coord.state.status == LoadStatus.FAILURE
        assert coord.error == "boom"
        assert coord.data == [1, 2]

    def test_disposed_drops_everything(self):
        coord = LoadCoordinator(spawn=lambda coro: coro.close())
        gen = coord.load(lambda: None)
        coord.dispose()
        assert coord.apply(gen, value="late") is False
        assert coord.load(lambda: None) == gen
        assert coord.disposed is True

    def test_set_key_skips_same_key(self):
        coord = LoadCoordinator(spawn=lambda coro: coro.close())
        assert coord.set_key(lambda: None, key="db1") is True
        assert coord.set_key(lambda: None, key="db1") is False
        assert coord.set_key(lambda: None, key="db2") is True
        assert coord.generation == 2

    def test_reload_requires_prior_load(self):
        coord = LoadCoordinator(spawn=lambda coro: coro.close())
        with pytest.raises(RuntimeError):
            coord.reload()

    def test_on_change_sees_every_visible_change(self):
        states = []
        coord = LoadCoordinator(on_change=states.append, spawn=lambda coro: coro.close())
        gen = coord.load(lambda: None)
        coord.apply(gen - 1, value="stale")
        coord.apply(gen, value="fresh")
        assert [s.status for s in states] == [LoadStatus.PENDING, LoadStatus.SUCCESS]

    def test_describe_error_falls_back_to_class_name(self):
        assert describe_error(ValueError("bad url")) == "bad url"
        assert describe_error(TimeoutError()) == "TimeoutError"


class TestAsyncRaces:
    """Real coroutines completing out of order."""

    @pytest.mark.asyncio
    async def test_later_key_wins_when_earlier_arrives_last(self):
        coord = LoadCoordinator()
        gate_a, gate_b = asyncio.Event(), asyncio.Event()

        coord.load(gated("A-data", gate_a), key="A")
        coord.load(gated("B-data", gate_b), key="B")

        gate_b.set()
        await settle()
        assert coord.data == "B-data"
        assert coord.loading is False

        gate_a.set()
        await settle()
        assert coord.data == "B-data"
        assert coord.loading is False
        assert coord.state.key == "B"

    @pytest.mark.asyncio
    async def test_failure_is_captured_not_raised(self):
        coord = LoadCoordinator()

        async def broken():
            raise ConnectionError("engine down")

        coord.load(broken)
        await settle()
        assert coord.state.status == LoadStatus.FAILURE
        assert coord.error == "engine down"
        assert coord.busy is False

    @pytest.mark.asyncio
    async def test_busy_while_in_flight(self):
        coord = LoadCoordinator()
        gate = asyncio.Event()
        coord.load(gated(1, gate))
        await settle()
        assert coord.busy is True
        gate.set()
        await settle()
        assert coord.busy is False
        assert coord.data == 1

    @pytest.mark.asyncio
    async def test_dispose_discards_in_flight_response(self):
        states = []
        coord = LoadCoordinator(on_change=states.append)
        gate = asyncio.Event()
        coord.load(gated("late", gate))
        coord.dispose()
        gate.set()
        await settle()
        assert coord.data is None
        assert [s.status for s in states] == [LoadStatus.PENDING]

    @pytest.mark.asyncio
    async def test_reload_reissues_same_key(self):
        calls = []

        async def producer():
            calls.append(1)
            return len(calls)

        coord = LoadCoordinator()
        coord.load(producer, key="db")
        await settle()
        coord.reload()
        await settle()
        assert coord.data == 2
        assert coord.key == "db"
        assert coord.generation == 2

    @pytest.mark.asyncio
    async def test_threaded_runs_blocking_call(self):
        coord = LoadCoordinator()
        coord.load(threaded(sorted, [3, 1, 2]))
        for _ in range(50):
            if not coord.busy:
                break
            await asyncio.sleep(0.01)
        assert coord.data == [1, 2, 3]
