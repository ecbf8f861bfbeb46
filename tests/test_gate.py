"""Tests for the dwell-floor task gate."""

import asyncio

import pytest

from gate import AsyncTaskGate

# Allowed scheduling slack, in seconds
TOLERANCE = 0.05
# The loop may fire timers up to its clock resolution early
EARLY = 0.005


class Recorder:
    """Completion callback that remembers what it got and when."""

    def __init__(self):
        self.calls = []

    def __call__(self, result):
        self.calls.append((result, asyncio.get_running_loop().time()))


def _sleeping_task(seconds, result="reading"):
    async def task():
        await asyncio.sleep(seconds)
        return result

    return task


def _failing_task(seconds, error=RuntimeError("boom")):
    async def task():
        await asyncio.sleep(seconds)
        raise error

    return task


@pytest.fixture
def gate():
    return AsyncTaskGate("test")


async def test_fast_task_waits_for_floor(gate):
    """A task quicker than the floor completes at the floor."""
    recorder = Recorder()
    started = asyncio.get_running_loop().time()
    gate.run(_sleeping_task(0.01), 150, recorder)
    await gate.wait()

    [(result, at)] = recorder.calls
    assert result == "reading"
    assert 0.15 - EARLY <= at - started < 0.15 + TOLERANCE


async def test_slow_task_completes_when_done(gate):
    """A task slower than the floor completes as soon as it finishes."""
    recorder = Recorder()
    started = asyncio.get_running_loop().time()
    gate.run(_sleeping_task(0.2), 50, recorder)
    await gate.wait()

    [(result, at)] = recorder.calls
    assert result == "reading"
    assert 0.2 - EARLY <= at - started < 0.2 + TOLERANCE


async def test_failure_waits_full_floor_and_reports_none(gate):
    recorder = Recorder()
    started = asyncio.get_running_loop().time()
    gate.run(_failing_task(0.01), 150, recorder)
    await gate.wait()

    [(result, at)] = recorder.calls
    assert result is None
    assert 0.15 - EARLY <= at - started < 0.15 + TOLERANCE


async def test_late_failure_reports_when_it_fails(gate):
    """A task failing after the floor completes at the failure, not the floor."""
    recorder = Recorder()
    started = asyncio.get_running_loop().time()
    gate.run(_failing_task(0.2), 50, recorder)
    await gate.wait()

    [(result, at)] = recorder.calls
    assert result is None
    assert 0.2 - EARLY <= at - started < 0.2 + TOLERANCE


async def test_failure_delivers_fallback(gate):
    recorder = Recorder()
    gate.run(_failing_task(0), 10, recorder, fallback="fallback")
    await gate.wait()
    assert recorder.calls[0][0] == "fallback"


async def test_fallback_not_used_on_success(gate):
    recorder = Recorder()
    gate.run(_sleeping_task(0), 10, recorder, fallback="fallback")
    await gate.wait()
    assert recorder.calls[0][0] == "reading"


async def test_delay_only(gate):
    """Without a task the gate is a plain timer completing with None."""
    recorder = Recorder()
    started = asyncio.get_running_loop().time()
    gate.run(None, 100, recorder, fallback="unused")
    await gate.wait()

    [(result, at)] = recorder.calls
    assert result is None
    assert 0.1 - EARLY <= at - started < 0.1 + TOLERANCE


async def test_timeout_counts_as_failure(gate):
    recorder = Recorder()
    started = asyncio.get_running_loop().time()
    gate.run(_sleeping_task(5), 20, recorder, fallback="fallback", timeout_ms=100)
    await gate.wait()

    [(result, at)] = recorder.calls
    assert result == "fallback"
    assert 0.1 - EARLY <= at - started < 0.1 + TOLERANCE


async def test_close_suppresses_pending_completion(gate):
    recorder = Recorder()
    gate.run(_sleeping_task(0.01), 100, recorder)
    gate.close()
    await gate.wait()
    assert recorder.calls == []
    assert gate.closed


async def test_close_after_task_finished_but_before_floor(gate):
    """The teardown flag is checked right before delivery."""
    recorder = Recorder()
    gate.run(_sleeping_task(0), 100, recorder)
    await asyncio.sleep(0.03)
    gate.close()
    await gate.wait()
    assert recorder.calls == []


async def test_run_after_close_raises(gate):
    gate.close()
    with pytest.raises(RuntimeError):
        gate.run(None, 0, Recorder())


async def test_pending_count(gate):
    gate.run(None, 30, Recorder())
    gate.run(None, 30, Recorder())
    assert gate.pending == 2
    await gate.wait()
    assert gate.pending == 0


async def test_completion_runs_on_the_loop(gate):
    """Completions from concurrent runs are delivered one at a time, in order."""
    order = []
    gate.run(_sleeping_task(0.01, "slow"), 80, order.append)
    gate.run(_sleeping_task(0.01, "fast"), 20, order.append)
    await gate.wait()
    assert order == ["fast", "slow"]
