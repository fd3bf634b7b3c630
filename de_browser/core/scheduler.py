"""
Cooperative debouncing for chart work.

Nothing here spawns threads. Timers live in a TimerQueue and only fire
when its owner calls run_due() (the Dash app does that from an interval
tick), so every action runs on the caller's thread, in deadline order.
"""

from __future__ import annotations

import functools
import heapq
import itertools
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

QUIET_INTERVAL = 0.1

Clock = Callable[[], float]
Action = Callable[[], Any]


class TimerHandle:
    __slots__ = ("when", "callback", "cancelled", "fired")

    def __init__(self, when: float, callback: Action) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class TimerQueue:
    """One-shot timers that fire only from run_due()."""

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._heap: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._clock()

    def call_later(self, delay: float, callback: Action) -> TimerHandle:
        handle = TimerHandle(self._clock() + max(delay, 0.0), callback)
        heapq.heappush(self._heap, (handle.when, next(self._seq), handle))
        return handle

    def run_due(self) -> int:
        """Fire every timer whose deadline has passed. Returns how many ran."""
        now = self._clock()
        fired = 0
        while self._heap and self._heap[0][0] <= now:
            _, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            handle.fired = True
            handle.callback()
            fired += 1
        return fired


class Debouncer:
    """
    Keyed debounce: schedule(key, action) replaces any pending timer for
    the same key, so only the last action of a burst ever runs.
    """

    def __init__(self, timers: TimerQueue, quiet_interval: float = QUIET_INTERVAL) -> None:
        self.timers = timers
        self.quiet_interval = quiet_interval
        self._pending: Dict[str, TimerHandle] = {}

    def schedule(self, key: str, action: Action, quiet_interval: Optional[float] = None) -> TimerHandle:
        self.cancel(key)
        interval = self.quiet_interval if quiet_interval is None else quiet_interval

        def fire() -> None:
            # drop first so the action may reschedule its own key
            if self._pending.get(key) is handle:
                del self._pending[key]
            action()

        handle = self.timers.call_later(interval, fire)
        self._pending[key] = handle
        return handle

    def cancel(self, key: str) -> bool:
        handle = self._pending.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def is_pending(self, key: str) -> bool:
        handle = self._pending.get(key)
        return handle is not None and handle.active


class RenderScheduler:
    """
    Two independent debounced chart actions:

    - full redraw: structural changes (load, plot mode); rebuilds the chart
    - points-only update: threshold / opacity / highlight changes

    Triggers mark the scheduler dirty straight away. Dirty clears only when
    the work runs. A redraw that runs also covers any pending points
    update, which is then cancelled.
    """

    DRAW = "draw"
    UPDATE = "update"

    def __init__(
        self,
        timers: TimerQueue,
        draw: Callable[..., Any],
        update: Callable[..., Any],
        quiet_interval: float = QUIET_INTERVAL,
    ) -> None:
        self._debouncer = Debouncer(timers, quiet_interval)
        self._draw = draw
        self._update = update
        self._dirty = {self.DRAW: False, self.UPDATE: False}

    @property
    def dirty(self) -> bool:
        return any(self._dirty.values())

    def is_pending(self, key: str) -> bool:
        return self._debouncer.is_pending(key)

    def request_redraw(self, *args: Any, **kwargs: Any) -> None:
        logger.debug("draw requested")
        self._dirty[self.DRAW] = True
        self._debouncer.schedule(self.DRAW, functools.partial(self._run_draw, args, kwargs))

    def request_update(self, *args: Any, **kwargs: Any) -> None:
        logger.debug("update requested")
        self._dirty[self.UPDATE] = True
        self._debouncer.schedule(self.UPDATE, functools.partial(self._run_update, args, kwargs))

    def _run_draw(self, args: tuple, kwargs: dict) -> None:
        self._draw(*args, **kwargs)
        self._debouncer.cancel(self.UPDATE)
        self._dirty[self.DRAW] = False
        self._dirty[self.UPDATE] = False

    def _run_update(self, args: tuple, kwargs: dict) -> None:
        self._update(*args, **kwargs)
        self._dirty[self.UPDATE] = False
