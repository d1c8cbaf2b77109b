"""
Duration clock and change notifier.

The clock is a cancellable repeating task on a single-threaded
scheduler: every tick runs as its own callback on the event loop, so it
never interleaves with an engine action. Any ``asyncio`` event loop can
serve as the scheduler; ``ManualScheduler`` provides virtual time for
tests and step-driven hosts.
"""
import asyncio
import heapq
import itertools
import logging
import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)


# ============================================================================
# Events and Subscriptions
# ============================================================================

class EventType(Enum):
    """Kinds of notifications published by the engine."""

    DURATION_CHANGE = "duration-change"


Callback = Callable[[int], Any]


@dataclass(frozen=True)
class Subscription:
    """Handle returned by ``subscribe``; pass it back to ``unsubscribe``."""

    event: EventType
    callback: Callback = field(compare=False)
    token: int = 0


class Notifier:
    """
    Ordered registry of subscriber callbacks.

    Delivery is synchronous and in registration order. A callback removed
    while an event is being delivered may or may not still receive it.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[EventType, Dict[int, Subscription]] = {}
        self._tokens = itertools.count(1)

    def subscribe(self, event: EventType, callback: Callback) -> Subscription:
        """Register ``callback`` for ``event`` and return its handle."""
        subscription = Subscription(event, callback, next(self._tokens))
        self._subscribers.setdefault(event, {})[subscription.token] = subscription
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Remove a subscription. Returns False if it was not registered."""
        registered = self._subscribers.get(subscription.event, {})
        return registered.pop(subscription.token, None) is not None

    def publish(self, event: EventType, value: int) -> None:
        """Deliver ``value`` to every subscriber of ``event``."""
        for subscription in list(self._subscribers.get(event, {}).values()):
            subscription.callback(value)

    def subscriber_count(self, event: EventType) -> int:
        return len(self._subscribers.get(event, {}))

    def clear(self) -> None:
        """Drop all subscribers."""
        self._subscribers.clear()


# ============================================================================
# Schedulers
# ============================================================================

class Handle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything with ``call_later``; ``asyncio`` loops qualify."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> Handle: ...


class _ManualHandle:
    def __init__(self, when: float, callback: Callable[[], Any]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler driven by ``advance``.

    Callbacks fire in time order, ties in scheduling order, each one
    running to completion before the next.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: List[Any] = []
        self._sequence = itertools.count()

    def time(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], Any]) -> _ManualHandle:
        handle = _ManualHandle(self._now + delay, callback)
        heapq.heappush(self._queue, (handle.when, next(self._sequence), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of callbacks still waiting to fire."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> None:
        """Move virtual time forward, running every callback that comes due."""
        deadline = self._now + seconds
        while self._queue and self._queue[0][0] <= deadline:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = when
            handle.callback()
        self._now = deadline


# ============================================================================
# Clock
# ============================================================================

class PendingTick:
    """
    Holds the scheduler handle of the next tick.

    Kept apart from the clock so that a teardown hook can cancel the tick
    without holding the clock, its notifier or their subscribers.
    """

    def __init__(self) -> None:
        self.handle: Optional[Handle] = None

    def cancel(self) -> None:
        if self.handle is not None:
            self.handle.cancel()
            self.handle = None


def _weak_callback(method: Callable[[], Any]) -> Callable[[], None]:
    """Wrap a bound method so the scheduler does not keep its owner alive."""
    ref = weakref.WeakMethod(method)

    def callback() -> None:
        target = ref()
        if target is not None:
            target()

    return callback


class Clock:
    """
    Counts elapsed ticks while running and publishes each new duration.

    ``stop`` pauses without clearing the count; ``reset`` stops and
    returns to zero. The pending tick is the only scheduled resource and
    is cancelled on every stop path. The scheduler only holds the clock
    weakly, so a discarded clock never ticks again.
    """

    def __init__(
        self,
        notifier: Notifier,
        interval: float = 1.0,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        """
        Initialize the clock.

        Args:
            notifier: Receives ``DURATION_CHANGE`` events.
            interval: Seconds between ticks.
            scheduler: Event loop to tick on. When None, the running
                asyncio loop is used at ``start()``.
        """
        self.notifier = notifier
        self.interval = interval
        self.pending = PendingTick()
        self._scheduler = scheduler
        self._active: Optional[Scheduler] = None
        self._duration = 0

    @property
    def duration(self) -> int:
        return self._duration

    @property
    def running(self) -> bool:
        return self.pending.handle is not None

    def start(self) -> None:
        """Begin ticking. Does nothing if already running."""
        if self.running:
            return
        scheduler = self._resolve_scheduler()
        if scheduler is None:
            logger.info("No running event loop; duration will not advance")
            return
        self._active = scheduler
        self._schedule()

    def stop(self) -> None:
        """Cancel the pending tick, keeping the current duration."""
        self.pending.cancel()

    def reset(self) -> None:
        """Stop and return the duration to zero."""
        self.stop()
        if self._duration != 0:
            self._duration = 0
            self.notifier.publish(EventType.DURATION_CHANGE, 0)

    def close(self) -> None:
        """Stop for good; used on engine teardown."""
        self.stop()
        self._duration = 0

    def _resolve_scheduler(self) -> Optional[Scheduler]:
        if self._scheduler is not None:
            return self._scheduler
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _schedule(self) -> None:
        self.pending.handle = self._active.call_later(
            self.interval, _weak_callback(self._tick)
        )

    def _tick(self) -> None:
        self._schedule()
        self._duration += 1
        self.notifier.publish(EventType.DURATION_CHANGE, self._duration)
