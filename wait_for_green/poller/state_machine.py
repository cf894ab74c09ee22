"""State machine for a polling session."""

from enum import Enum

import structlog


logger = structlog.get_logger()


class PollState(str, Enum):
    """State of a polling session.

    - RUNNING: Attempts are still being made
    - SUCCEEDED: Both sources reported success
    - FAILED: At least one source reported failure
    - TIMED_OUT: Attempts exhausted without a verdict
    """

    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"


# Every verdict is final; a session never returns to RUNNING
_VALID_TRANSITIONS: dict[PollState, frozenset[PollState]] = {
    PollState.RUNNING: frozenset(
        {PollState.SUCCEEDED, PollState.FAILED, PollState.TIMED_OUT}
    ),
    PollState.SUCCEEDED: frozenset(),
    PollState.FAILED: frozenset(),
    PollState.TIMED_OUT: frozenset(),
}


class PollStateTransitionError(Exception):
    """Raised when a session is driven after reaching a verdict."""

    def __init__(
        self,
        revision: str,
        from_state: PollState,
        to_state: PollState | None,
    ) -> None:
        """Initialize the transition error.

        Args:
            revision: Revision being polled.
            from_state: Current state.
            to_state: Attempted target state, None for a new attempt.
        """
        self.revision = revision
        self.from_state = from_state
        self.to_state = to_state
        target = "new attempt" if to_state is None else to_state.value
        super().__init__(
            f"Illegal poll state transition for '{revision}': "
            f"{from_state.value} -> {target}"
        )


class PollStateMachine:
    """Tracks the attempts and the verdict of one polling session."""

    def __init__(self, revision: str, run_id: str = "") -> None:
        """Initialize the session in RUNNING with no attempts made.

        Args:
            revision: Revision being polled.
            run_id: Identifier for the current run.
        """
        self._revision = revision
        self._state = PollState.RUNNING
        self._attempts = 0
        self._log = logger.bind(
            component="poller",
            run_id=run_id,
            revision=revision,
        )

    @property
    def state(self) -> PollState:
        """Get the current state."""
        return self._state

    @property
    def attempts(self) -> int:
        """Number of attempts started so far."""
        return self._attempts

    @property
    def is_terminal(self) -> bool:
        """Check whether a verdict has been reached."""
        return self._state != PollState.RUNNING

    def begin_attempt(self) -> int:
        """Start the next attempt.

        Returns:
            The 1-based attempt number.

        Raises:
            PollStateTransitionError: If a verdict was already reached.
        """
        if self.is_terminal:
            raise PollStateTransitionError(self._revision, self._state, None)
        self._attempts += 1
        return self._attempts

    def can_transition_to(self, target: PollState) -> bool:
        """Check if a transition to the target state is valid."""
        return target in _VALID_TRANSITIONS[self._state]

    def transition_to(self, target: PollState) -> None:
        """Record the session's verdict.

        Args:
            target: The terminal state reached.

        Raises:
            PollStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_state_transition",
                from_state=self._state.value,
                to_state=target.value,
                attempts=self._attempts,
            )
            raise PollStateTransitionError(self._revision, self._state, target)

        self._log.info(
            "state_transition",
            from_state=self._state.value,
            to_state=target.value,
            attempts=self._attempts,
        )
        self._state = target

    def to_succeeded(self) -> None:
        """Transition to SUCCEEDED state."""
        self.transition_to(PollState.SUCCEEDED)

    def to_failed(self) -> None:
        """Transition to FAILED state."""
        self.transition_to(PollState.FAILED)

    def to_timed_out(self) -> None:
        """Transition to TIMED_OUT state."""
        self.transition_to(PollState.TIMED_OUT)
