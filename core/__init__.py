"""
Core utilities and modules.

Public API:
    - LoopState: States of the capture/dispatch loop
    - LoopStateMachine: Validated state tracking for the loop

Usage:
    from core import LoopState, LoopStateMachine

    machine = LoopStateMachine()
    machine.transition_to(LoopState.CAPTURING)
"""

from core.state_machine import InvalidTransitionError, LoopState, LoopStateMachine

__all__ = [
    "InvalidTransitionError",
    "LoopState",
    "LoopStateMachine",
]
