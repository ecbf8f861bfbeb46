"""Minimum-dwell wrapper for slow, fallible generation calls."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger("gate")

TaskFactory = Callable[[], Awaitable[Any]]
CompletionCallback = Callable[[Any], None]


class AsyncTaskGate:
    """Runs a generation task alongside a dwell-floor timer.

    The completion callback fires no earlier than `min_duration_ms` after
    `run()` was called, whether the task succeeded or failed, and never
    after the gate has been closed. A failed task is logged and reported
    as `fallback` (None unless given), so callers always get a completion.

    Closing is cooperative: in-flight tasks keep running, their results are
    dropped.
    """

    def __init__(self, name: str = "gate") -> None:
        self._name = name
        self._closed = False
        self._pending: set[asyncio.Task] = set()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run(
        self,
        task: TaskFactory | None,
        min_duration_ms: int,
        on_complete: CompletionCallback,
        *,
        fallback: Any = None,
        timeout_ms: int | None = None,
    ) -> asyncio.Task:
        """Start `task` and the dwell timer; must be called inside a running loop.

        Args:
            task: Zero-argument callable returning an awaitable, or None for
                a delay-only run that completes with None.
            min_duration_ms: Dwell floor measured from this call.
            on_complete: Receives the task result, or `fallback` on failure.
            fallback: Value delivered when the task raises or times out.
            timeout_ms: Upper bound for the task itself; exceeding it counts
                as a failure.
        """
        if self._closed:
            raise RuntimeError(f"Gate '{self._name}' is closed")

        loop = asyncio.get_running_loop()
        started = loop.time()
        runner = loop.create_task(
            self._run(task, started, min_duration_ms, on_complete, fallback, timeout_ms)
        )
        self._pending.add(runner)
        runner.add_done_callback(self._pending.discard)
        return runner

    async def _run(
        self,
        task: TaskFactory | None,
        started: float,
        min_duration_ms: int,
        on_complete: CompletionCallback,
        fallback: Any,
        timeout_ms: int | None,
    ) -> None:
        loop = asyncio.get_running_loop()
        result = None

        if task is not None:
            try:
                if timeout_ms is not None:
                    result = await asyncio.wait_for(task(), timeout_ms / 1000)
                else:
                    result = await task()
            except asyncio.TimeoutError:
                logger.error(f"[{self._name}] Task timed out after {timeout_ms}ms")
                result = fallback
            except Exception as e:
                logger.error(f"[{self._name}] Task failed: {e}")
                result = fallback

        # Failures wait out the same floor as successes
        remaining = min_duration_ms / 1000 - (loop.time() - started)
        if remaining > 0:
            await asyncio.sleep(remaining)

        if self._closed:
            logger.debug(f"[{self._name}] Gate closed, dropping completion")
            return

        elapsed_ms = (loop.time() - started) * 1000
        logger.info(f"[{self._name}] Completed after {elapsed_ms:.0f}ms")
        on_complete(result)

    def close(self) -> None:
        """Suppress every completion that has not been delivered yet."""
        self._closed = True

    async def wait(self) -> None:
        """Wait for all runs started so far to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
