"""Debounced invocation for interactive callers.

A host that re-solves on every keystroke wants to wait for input to settle
first. Debouncer implements that delay-then-invoke policy on top of asyncio;
the engine and solvers stay synchronous and never depend on it.

Usage:
    debouncer = Debouncer(delay_s=0.6)
    task = debouncer.schedule(solve_for_breakeven, config, 1960.0, guard=lambda: focused)
    solution = await task  # None if guarded out; cancelled if superseded
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Input inactivity before a scheduled call runs
DEFAULT_DELAY_S = 0.6


class Debouncer:
    """Runs only the most recently scheduled call, after a quiet period."""

    def __init__(self, delay_s: float = DEFAULT_DELAY_S) -> None:
        if delay_s < 0:
            raise ValueError(f"delay_s must be >= 0, got {delay_s}")
        self.delay_s = delay_s
        self._task: asyncio.Task[Any] | None = None
        self._superseded = 0

    @property
    def pending(self) -> bool:
        """Whether a scheduled call is still waiting or running."""
        return self._task is not None and not self._task.done()

    @property
    def superseded_count(self) -> int:
        """Number of calls dropped because a newer one was scheduled."""
        return self._superseded

    def schedule(
        self,
        fn: Callable[..., T],
        *args: Any,
        guard: Callable[[], bool] | None = None,
        **kwargs: Any,
    ) -> asyncio.Task[T | None]:
        """Schedule fn(*args, **kwargs) after the debounce delay.

        Any call still waiting is cancelled. Must be called from a running
        event loop.

        Args:
            fn: Synchronous callable to invoke.
            guard: Checked after the delay; the call is skipped unless it
                returns True.

        Returns:
            Task resolving to fn's result, or None if skipped by guard.
            A superseded task ends cancelled.
        """
        if self.pending and self._task is not None:
            self._task.cancel()
            self._superseded += 1

        task = asyncio.get_running_loop().create_task(self._run(fn, args, kwargs, guard))
        self._task = task
        return task

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self.pending and self._task is not None:
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        """Wait for the pending call (if any) to finish."""
        if self._task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task

    async def _run(
        self,
        fn: Callable[..., T],
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        guard: Callable[[], bool] | None,
    ) -> T | None:
        await asyncio.sleep(self.delay_s)

        if guard is not None and not guard():
            logger.debug("Debounced call skipped by guard")
            return None
        return fn(*args, **kwargs)
