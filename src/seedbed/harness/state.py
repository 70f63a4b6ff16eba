"""Lifecycle state machine of one harness run."""

from __future__ import annotations

import threading

from seedbed.domain.errors import InvalidTransitionError
from seedbed.domain.value_objects import HarnessState

TRANSITIONS: dict[HarnessState, frozenset[HarnessState]] = {
    HarnessState.UNINITIALIZED: frozenset(
        {HarnessState.INSTANCE_STARTING, HarnessState.FAILED}
    ),
    HarnessState.INSTANCE_STARTING: frozenset(
        {HarnessState.AWAITING_READY, HarnessState.FAILED}
    ),
    HarnessState.AWAITING_READY: frozenset(
        {HarnessState.PROVISIONING, HarnessState.FAILED}
    ),
    HarnessState.PROVISIONING: frozenset({HarnessState.READY, HarnessState.FAILED}),
    HarnessState.READY: frozenset({HarnessState.TORN_DOWN}),
    HarnessState.TORN_DOWN: frozenset(),
    HarnessState.FAILED: frozenset(),
}


class RunStateMachine:
    """Track and validate the state of one run."""

    def __init__(self) -> None:
        self._state = HarnessState.UNINITIALIZED
        self._lock = threading.Lock()

    @property
    def state(self) -> HarnessState:
        """The current state."""
        return self._state

    def can_transition(self, target: HarnessState) -> bool:
        """True if `target` is reachable from the current state."""
        return target in TRANSITIONS[self._state]

    def transition(self, target: HarnessState) -> None:
        """Move to `target`.

        Raises:
            InvalidTransitionError: If `target` is not reachable.
        """
        with self._lock:
            if target not in TRANSITIONS[self._state]:
                raise InvalidTransitionError(self._state.value, target.value)
            self._state = target

    def fail(self) -> HarnessState:
        """Move to FAILED if possible and return the state that failed."""
        with self._lock:
            failed = self._state
            if HarnessState.FAILED in TRANSITIONS[failed]:
                self._state = HarnessState.FAILED
            return failed
