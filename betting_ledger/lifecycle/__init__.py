"""Lifecycle — управление статусами ставок.

- Bet state machine с переходами INACTIVE ↔ ACTIVE → COMPLETED
- COMPLETED терминален
"""

from .state_machine import BetStateMachine, BetTransitionResult

__all__ = [
    "BetStateMachine",
    "BetTransitionResult",
]
