"""
Unit tests for the duration clock, schedulers and notifier.
"""
import asyncio

import pytest
from minefield import Clock, EventType, ManualScheduler, Notifier


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture
def ticks(notifier: Notifier) -> list:
    """Durations published to a single subscriber."""
    received = []
    notifier.subscribe(EventType.DURATION_CHANGE, received.append)
    return received


# ============================================================================
# Notifier Tests
# ============================================================================

class TestNotifier:
    """Test subscription and delivery."""

    def test_delivers_in_registration_order(self, notifier: Notifier) -> None:
        calls = []
        notifier.subscribe(EventType.DURATION_CHANGE, lambda v: calls.append(("a", v)))
        notifier.subscribe(EventType.DURATION_CHANGE, lambda v: calls.append(("b", v)))
        notifier.publish(EventType.DURATION_CHANGE, 5)
        assert calls == [("a", 5), ("b", 5)]

    def test_unsubscribe_removes_only_that_handle(self, notifier: Notifier) -> None:
        calls = []
        first = notifier.subscribe(EventType.DURATION_CHANGE, calls.append)
        notifier.subscribe(EventType.DURATION_CHANGE, calls.append)
        assert notifier.unsubscribe(first) is True
        notifier.publish(EventType.DURATION_CHANGE, 1)
        assert calls == [1]
        assert notifier.subscriber_count(EventType.DURATION_CHANGE) == 1

    def test_unsubscribe_twice_returns_false(self, notifier: Notifier) -> None:
        handle = notifier.subscribe(EventType.DURATION_CHANGE, print)
        notifier.unsubscribe(handle)
        assert notifier.unsubscribe(handle) is False

    def test_same_callback_twice_gets_two_handles(self, notifier: Notifier) -> None:
        calls = []
        first = notifier.subscribe(EventType.DURATION_CHANGE, calls.append)
        second = notifier.subscribe(EventType.DURATION_CHANGE, calls.append)
        assert first != second
        notifier.publish(EventType.DURATION_CHANGE, 2)
        assert calls == [2, 2]

    def test_unsubscribe_during_publish_is_safe(self, notifier: Notifier) -> None:
        calls = []
        handles = []

        def remove_other(value):
            calls.append(("first", value))
            notifier.unsubscribe(handles[1])

        handles.append(notifier.subscribe(EventType.DURATION_CHANGE, remove_other))
        handles.append(notifier.subscribe(EventType.DURATION_CHANGE, calls.append))
        notifier.publish(EventType.DURATION_CHANGE, 1)
        notifier.publish(EventType.DURATION_CHANGE, 2)
        assert calls[-1] == ("first", 2)
        assert notifier.subscriber_count(EventType.DURATION_CHANGE) == 1

    def test_clear_drops_everything(self, notifier: Notifier, ticks: list) -> None:
        notifier.clear()
        notifier.publish(EventType.DURATION_CHANGE, 1)
        assert ticks == []


# ============================================================================
# Manual Scheduler Tests
# ============================================================================

class TestManualScheduler:
    """Test virtual-time scheduling."""

    def test_runs_due_callbacks_in_time_order(self) -> None:
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(2.0, lambda: calls.append("late"))
        scheduler.call_later(1.0, lambda: calls.append("early"))
        scheduler.advance(1.5)
        assert calls == ["early"]
        scheduler.advance(1.0)
        assert calls == ["early", "late"]
        assert scheduler.time() == 2.5

    def test_cancelled_callback_does_not_run(self) -> None:
        scheduler = ManualScheduler()
        calls = []
        handle = scheduler.call_later(1.0, lambda: calls.append(1))
        handle.cancel()
        scheduler.advance(5)
        assert calls == []
        assert scheduler.pending == 0


# ============================================================================
# Clock Tests
# ============================================================================

class TestClock:
    """Test ticking, pausing and resetting."""

    def test_ticks_once_per_interval(self, notifier: Notifier, ticks: list) -> None:
        scheduler = ManualScheduler()
        clock = Clock(notifier, 1.0, scheduler)
        clock.start()
        scheduler.advance(3.5)
        assert ticks == [1, 2, 3]
        assert clock.duration == 3

    def test_not_running_until_started(self, notifier: Notifier, ticks: list) -> None:
        scheduler = ManualScheduler()
        clock = Clock(notifier, 1.0, scheduler)
        scheduler.advance(5)
        assert ticks == []
        assert clock.running is False

    def test_start_twice_does_not_double_tick(self, notifier: Notifier, ticks: list) -> None:
        scheduler = ManualScheduler()
        clock = Clock(notifier, 1.0, scheduler)
        clock.start()
        clock.start()
        scheduler.advance(2)
        assert ticks == [1, 2]

    def test_stop_pauses_without_reset(self, notifier: Notifier, ticks: list) -> None:
        scheduler = ManualScheduler()
        clock = Clock(notifier, 1.0, scheduler)
        clock.start()
        scheduler.advance(2)
        clock.stop()
        scheduler.advance(5)
        assert ticks == [1, 2]
        assert clock.duration == 2
        assert scheduler.pending == 0

    def test_reset_zeroes_and_publishes(self, notifier: Notifier, ticks: list) -> None:
        scheduler = ManualScheduler()
        clock = Clock(notifier, 1.0, scheduler)
        clock.start()
        scheduler.advance(2)
        clock.reset()
        assert clock.duration == 0
        assert clock.running is False
        assert ticks == [1, 2, 0]

    def test_reset_at_zero_is_silent(self, notifier: Notifier, ticks: list) -> None:
        clock = Clock(notifier, 1.0, ManualScheduler())
        clock.reset()
        assert ticks == []

    def test_stop_from_subscriber_cancels_next_tick(self, notifier: Notifier) -> None:
        scheduler = ManualScheduler()
        clock = Clock(notifier, 1.0, scheduler)
        notifier.subscribe(EventType.DURATION_CHANGE, lambda value: clock.stop())
        clock.start()
        scheduler.advance(5)
        assert clock.duration == 1
        assert scheduler.pending == 0

    def test_without_running_loop_stays_idle(self, notifier: Notifier) -> None:
        clock = Clock(notifier)
        clock.start()
        assert clock.running is False

    def test_ticks_on_running_asyncio_loop(self, notifier: Notifier, ticks: list) -> None:
        async def run():
            clock = Clock(notifier, 0.01)
            clock.start()
            await asyncio.sleep(0.1)
            clock.close()
            return clock

        clock = asyncio.run(run())
        assert len(ticks) >= 2
        assert ticks == list(range(1, len(ticks) + 1))
        assert clock.running is False
