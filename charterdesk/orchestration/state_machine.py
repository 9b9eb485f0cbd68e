"""Canonical state transition helpers for rounds."""

from __future__ import annotations

from charterdesk.models.enums import RoundStatus


class InvalidTransitionError(ValueError):
    """Raised when a disallowed state transition is attempted."""


class StateMachine:
    """Simple in-memory state machine over string or enum states."""

    def __init__(self, transitions: dict[str, set[str]]) -> None:
        self._transitions = transitions

    def can_transition(self, current: str, target: str) -> bool:
        return target in self._transitions.get(current, set())

    def assert_transition(self, current: str, target: str) -> None:
        if not self.can_transition(current=current, target=target):
            raise InvalidTransitionError(f"Transition not allowed: {current} -> {target}")


# Desk-triggered transitions. Re-marking a terminal round with the same
# status is allowed so that fixing the same round twice is a no-op.
ROUND_TRANSITIONS: dict[str, set[str]] = {
    RoundStatus.IN_PROGRESS: {RoundStatus.COMPLETED, RoundStatus.DROPPED},
    RoundStatus.COMPLETED: {RoundStatus.COMPLETED},
    RoundStatus.DROPPED: {RoundStatus.DROPPED},
}

round_state_machine = StateMachine(ROUND_TRANSITIONS)
