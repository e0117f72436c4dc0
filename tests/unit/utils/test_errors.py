"""Tests for the error hierarchy."""

import pytest

from streamlauncher.utils.errors import (
    BindError,
    BroadcastError,
    GoLiveError,
    InvalidTimeFormatError,
    LauncherError,
    PlatformError,
    TimeResolutionError,
)


class TestBroadcastError:
    def test_message_carries_step_and_id(self) -> None:
        error = BindError("Error binding broadcast to stream", "bc1")

        assert str(error) == "Error binding broadcast to stream (step: bind, broadcast: bc1)"
        assert error.broadcast_id == "bc1"
        assert isinstance(error, BroadcastError)

    def test_message_without_id(self) -> None:
        assert str(GoLiveError("boom")) == "boom (step: go live)"


class TestPlatformError:
    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (PlatformError("x", reason="redundantTransition"), True),
            (PlatformError("Redundant transition"), True),
            (PlatformError("Invalid transition", reason="invalidTransition"), False),
        ],
    )
    def test_is_redundant_transition(self, error: PlatformError, expected: bool) -> None:
        assert error.is_redundant_transition is expected


def test_hierarchy() -> None:
    """Test every error is catchable as LauncherError."""
    assert issubclass(InvalidTimeFormatError, TimeResolutionError)
    assert issubclass(TimeResolutionError, LauncherError)
    assert issubclass(PlatformError, LauncherError)
