"""Polling loop and its state machine."""

from wait_for_green.poller.loop import PollLoop
from wait_for_green.poller.metrics import PollMetrics
from wait_for_green.poller.state_machine import (
    PollState,
    PollStateMachine,
    PollStateTransitionError,
)


__all__ = [
    "PollLoop",
    "PollMetrics",
    "PollState",
    "PollStateMachine",
    "PollStateTransitionError",
]
