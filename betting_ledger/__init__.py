"""
betting_ledger — custodial wagering ledger.

Оператор регистрирует команды и открывает head-to-head ставки, bettors
переводят stake на одну из сторон, после объявления победителя пул
распределяется pro-rata между победителями.
"""

from betting_ledger.core.domain import (
    Bet,
    BetStatus,
    EventType,
    LedgerEvent,
    PayoutMode,
    Stake,
    Team,
)
from betting_ledger.core.errors import (
    AuthorizationError,
    ExternalDependencyError,
    LedgerError,
    LedgerValidationError,
    PayoutInterrupted,
    RejectReason,
    StateConflictError,
)
from betting_ledger.protocol import BettingProtocol, LedgerConfig
from betting_ledger.tokens import InMemoryAccount, InMemoryToken, TokenPort

__all__ = [
    "BettingProtocol",
    "LedgerConfig",
    "PayoutMode",
    "Team",
    "Bet",
    "BetStatus",
    "Stake",
    "LedgerEvent",
    "EventType",
    "LedgerError",
    "AuthorizationError",
    "LedgerValidationError",
    "StateConflictError",
    "ExternalDependencyError",
    "PayoutInterrupted",
    "RejectReason",
    "InMemoryToken",
    "InMemoryAccount",
    "TokenPort",
]
