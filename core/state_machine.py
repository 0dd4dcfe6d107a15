import logging
import time
from enum import Enum
from typing import Callable, Dict, FrozenSet, Optional


class LoopState(Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    UPLOADING = "uploading"
    ENFORCING = "enforcing"
    PERSISTING = "persisting"
    SLEEPING = "sleeping"
    STOPPED = "stopped"


# Legal transitions of one capture cycle; STOPPED is terminal
TRANSITIONS: Dict[LoopState, FrozenSet[LoopState]] = {
    LoopState.IDLE: frozenset({LoopState.CAPTURING, LoopState.STOPPED}),
    LoopState.CAPTURING: frozenset(
        {LoopState.UPLOADING, LoopState.ENFORCING, LoopState.SLEEPING, LoopState.STOPPED},
    ),
    LoopState.UPLOADING: frozenset({LoopState.SLEEPING, LoopState.STOPPED}),
    LoopState.ENFORCING: frozenset(
        {LoopState.PERSISTING, LoopState.SLEEPING, LoopState.STOPPED},
    ),
    LoopState.PERSISTING: frozenset({LoopState.SLEEPING, LoopState.STOPPED}),
    LoopState.SLEEPING: frozenset({LoopState.IDLE, LoopState.STOPPED}),
    LoopState.STOPPED: frozenset(),
}


class InvalidTransitionError(RuntimeError):
    """Raised when the loop attempts a transition not in TRANSITIONS"""


class LoopStateMachine:
    """
    State tracker for the capture/dispatch loop.

    Idle -> Capturing -> {Uploading | Enforcing -> Persisting} -> Sleeping -> Idle
    Any state may move to Stopped, which is terminal.
    """

    def __init__(self):
        self.current_state = LoopState.IDLE
        self.previous_state: Optional[LoopState] = None
        self.state_start_time = time.time()
        self.cycle_count = 0
        self.logger = logging.getLogger(__name__)

        # Called with (old_state, new_state) after every transition
        self.on_state_change: Optional[Callable[[LoopState, LoopState], None]] = None

    def get_current_state(self) -> LoopState:
        """Get the current loop state"""
        return self.current_state

    def get_state_duration(self) -> float:
        """Get how long we've been in the current state (seconds)"""
        return time.time() - self.state_start_time

    @property
    def is_stopped(self) -> bool:
        return self.current_state == LoopState.STOPPED

    def can_transition(self, new_state: LoopState) -> bool:
        return new_state in TRANSITIONS[self.current_state]

    def transition_to(self, new_state: LoopState, reason: str = "") -> None:
        """
        Move to new_state with logging and callback notification.

        Raises:
            InvalidTransitionError: If the transition is not allowed
        """
        if not self.can_transition(new_state):
            raise InvalidTransitionError(
                f"Invalid transition: {self.current_state.value} -> {new_state.value}",
            )

        old_state = self.current_state
        self.previous_state = old_state
        self.current_state = new_state
        self.state_start_time = time.time()

        if new_state == LoopState.CAPTURING:
            self.cycle_count += 1

        log_msg = f"State transition: {old_state.value} -> {new_state.value}"
        if reason:
            log_msg += f" ({reason})"
        self.logger.debug(log_msg)

        if self.on_state_change:
            try:
                self.on_state_change(old_state, new_state)
            except Exception as e:
                self.logger.error(f"Error in state change callback: {e}")

    def get_status_info(self) -> Dict:
        """Get detailed status information for debugging/monitoring"""
        return {
            "current_state": self.current_state.value,
            "previous_state": (
                self.previous_state.value if self.previous_state else None
            ),
            "state_duration": self.get_state_duration(),
            "cycle_count": self.cycle_count,
        }
