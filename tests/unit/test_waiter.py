"""Tests for lifecycle state polling."""

from __future__ import annotations

import threading
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from oci_kms_operator.sync.waiter import wait_for_state
from oci_kms_operator.utils.errors import (
    PollCancelledError,
    ResourceNotFoundError,
    UnexpectedStateError,
    WaitTimeoutError,
)

PENDING = {"CREATING", "ENABLING"}
TARGET = {"ENABLED"}


class FakeClock:
    """Monotonic clock advanced only by sleeping."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def scripted(*results: Any) -> MagicMock:
    """Observer returning (or raising) each result in turn, repeating the last."""
    remaining = list(results)

    def observe() -> Any:
        result = remaining.pop(0) if len(remaining) > 1 else remaining[0]
        if isinstance(result, Exception):
            raise result
        return result

    return MagicMock(side_effect=observe)


def wait(observe, clock: FakeClock, **kwargs: Any):
    kwargs.setdefault("timeout", 60)
    kwargs.setdefault("interval", 5)
    kwargs.setdefault("jitter", 0)
    return wait_for_state(observe, PENDING, TARGET, sleep=clock.sleep, clock=clock, **kwargs)


class TestWaitForState:
    """Test cases for wait_for_state."""

    def test_returns_immediately_in_target(self):
        """Test that a target state on the first observation ends the wait."""
        clock = FakeClock()
        observe = scripted("ENABLED")

        assert wait(observe, clock) == "ENABLED"
        assert observe.call_count == 1
        assert clock.sleeps == []

    def test_waits_through_pending_states(self):
        """Test that pending states are polled until the target is reached."""
        clock = FakeClock()
        observe = scripted("CREATING", "CREATING", "ENABLED")

        assert wait(observe, clock) == "ENABLED"
        assert observe.call_count == 3
        assert clock.sleeps == [5, 5]

    def test_unexpected_state_fails_fast(self):
        """Test that a state outside pending and target aborts without sleeping."""
        clock = FakeClock()
        observe = scripted("DELETED")

        with pytest.raises(UnexpectedStateError) as exc_info:
            wait(observe, clock)

        assert observe.call_count == 1
        assert clock.sleeps == []
        assert exc_info.value.state == "DELETED"
        assert exc_info.value.target == ["ENABLED"]
        assert exc_info.value.pending == ["CREATING", "ENABLING"]

    def test_unexpected_state_after_pending(self):
        """Test that leaving the pending set for a foreign state fails."""
        clock = FakeClock()
        observe = scripted("CREATING", "DISABLED")

        with pytest.raises(UnexpectedStateError):
            wait(observe, clock)
        assert observe.call_count == 2

    def test_none_state_is_unexpected(self):
        """Test that a missing state is treated as unexpected."""
        clock = FakeClock()
        with pytest.raises(UnexpectedStateError):
            wait(scripted(None), clock)

    def test_timeout(self):
        """Test that the deadline ends a wait stuck in a pending state."""
        clock = FakeClock()
        observe = scripted("CREATING")

        with pytest.raises(WaitTimeoutError) as exc_info:
            wait(observe, clock, timeout=10)

        assert observe.call_count == 3
        assert clock.sleeps == [5, 5]
        assert exc_info.value.last_state == "CREATING"
        assert exc_info.value.timeout == 10

    def test_zero_timeout_observes_once(self):
        """Test that a zero timeout still observes once before failing."""
        clock = FakeClock()
        observe = scripted("CREATING")

        with pytest.raises(WaitTimeoutError):
            wait(observe, clock, timeout=0)
        assert observe.call_count == 1

    def test_zero_timeout_in_target(self):
        """Test that a zero timeout succeeds when already in target."""
        clock = FakeClock()
        assert wait(scripted("ENABLED"), clock, timeout=0) == "ENABLED"

    def test_delay_capped_at_remaining_time(self):
        """Test that the last sleep does not overshoot the deadline."""
        clock = FakeClock()
        observe = scripted("CREATING")

        with pytest.raises(WaitTimeoutError):
            wait(observe, clock, timeout=7, interval=5)

        assert clock.sleeps == [5, 2]

    @patch("oci_kms_operator.sync.waiter.random.uniform", return_value=1.0)
    def test_jitter_added_to_interval(self, mock_uniform):
        """Test that jitter extends the delay between observations."""
        clock = FakeClock()
        observe = scripted("CREATING", "ENABLED")

        wait(observe, clock, interval=5, jitter=0.2)

        assert clock.sleeps == [6.0]
        mock_uniform.assert_called_once_with(0, 1.0)

    def test_not_found_propagates_by_default(self):
        """Test that a missing resource is an error unless tolerated."""
        clock = FakeClock()
        with pytest.raises(ResourceNotFoundError):
            wait(scripted(ResourceNotFoundError("gone")), clock)

    def test_not_found_ok_returns_none(self):
        """Test that a missing resource ends the wait when tolerated."""
        clock = FakeClock()
        observe = scripted("CREATING", ResourceNotFoundError("gone"))

        assert wait(observe, clock, not_found_ok=True) is None
        assert observe.call_count == 2

    def test_other_errors_propagate(self):
        """Test that observer errors other than not found are not swallowed."""
        clock = FakeClock()
        with pytest.raises(RuntimeError):
            wait(scripted(RuntimeError("boom")), clock, not_found_ok=True)

    def test_cancelled_before_first_observation(self):
        """Test that a set cancel event prevents any observation."""
        clock = FakeClock()
        observe = scripted("CREATING")
        event = threading.Event()
        event.set()

        with pytest.raises(PollCancelledError):
            wait(observe, clock, cancel_event=event)
        observe.assert_not_called()

    def test_cancelled_while_waiting(self):
        """Test that the cancel event interrupts the delay between observations."""
        clock = FakeClock()
        observe = scripted("CREATING")
        event = MagicMock(spec=threading.Event)
        event.is_set.return_value = False
        event.wait.return_value = True

        with pytest.raises(PollCancelledError):
            wait(observe, clock, cancel_event=event)

        assert observe.call_count == 1
        event.wait.assert_called_once_with(5)
        assert clock.sleeps == []

    def test_unset_cancel_event_keeps_polling(self):
        """Test that polling continues while the cancel event stays clear."""
        clock = FakeClock()
        observe = scripted("CREATING", "ENABLED")
        event = MagicMock(spec=threading.Event)
        event.is_set.return_value = False
        event.wait.return_value = False

        assert wait(observe, clock, cancel_event=event) == "ENABLED"
        assert observe.call_count == 2

    def test_records_wait_duration(self):
        """Test that the wait duration is recorded with its outcome."""
        clock = FakeClock()
        with patch("oci_kms_operator.sync.waiter.metrics") as mock_metrics:
            wait(scripted("CREATING", "ENABLED"), clock, operation="create")

        mock_metrics.state_wait_duration_seconds.labels.assert_called_once_with(
            operation="create", result="success"
        )
        mock_metrics.state_wait_duration_seconds.labels.return_value.observe.assert_called_once_with(5)
