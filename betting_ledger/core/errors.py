"""
Ledger Errors — Таксономия отказов

Каждый отказ операции несёт стабильный RejectReason (значение enum это
сообщение, которое видят клиенты и conformance-тесты).

Категории:
- AuthorizationError: вызывающий не является оператором
- LedgerValidationError: некорректные идентификаторы, суммы, выбор стороны
- StateConflictError: операция недопустима в текущем состоянии
- ExternalDependencyError: отказ token-компонента

КРИТИЧЕСКИЙ ИНВАРИАНТ:
Любой отказ прерывает операцию целиком, состояние ledger не меняется.
Кроме PayoutInterrupted: переводы, уже ушедшие через необратимый токен,
остаются учтёнными.
"""

from enum import Enum
from typing import Dict, Type


# =============================================================================
# REJECT REASONS
# =============================================================================


class RejectReason(str, Enum):
    """Стабильные коды отказа (значение = сообщение)."""

    # Authorization
    NOT_OWNER = "Not owner"

    # Teams
    INVALID_TEAM_ID = "Invalid team-id"
    INVALID_TEAM_NAME = "Invalid team name"
    ALREADY_INACTIVE = "already inactive"
    ALREADY_ACTIVE = "already active"

    # Bet creation
    SAME_TEAMS = "same teams"
    INVALID_TEAM_A = "Invalid teamAId"
    INVALID_TEAM_B = "Invalid teamBId"
    TEAM_INACTIVE = "team's inactive"
    INVALID_AMOUNT = "Invalid amount"

    # Bet lifecycle
    INVALID_BET_ID = "invalid bet id"
    BET_ALREADY_INACTIVE = "bet already inactive"
    BET_ALREADY_COMPLETED = "bet already completed"
    BETTORS_ALREADY_BETTED = "bettors already betted"

    # Pledges
    BET_INACTIVE = "bet inactive"
    INVALID_BET_AMOUNT = "invalid bet amount"
    INVALID_PLEDGE_TEAM = "invalid team-id"
    SIDE_ALREADY_SELECTED = "side already selected"

    # Settlement / claims
    TEAM_ALREADY_WON = "team already won"
    INVALID_WINNER = "invalid teamId"
    BET_NOT_COMPLETED = "bet not completed"
    NOTHING_TO_CLAIM = "nothing to claim"
    ALREADY_CLAIMED = "already claimed"
    CLAIMS_DISABLED = "claims disabled"
    PAYOUTS_NOT_PUSHED = "payouts not pushed"

    # External
    TOKEN_TRANSFER_FAILED = "token transfer failed"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class LedgerError(Exception):
    """
    Базовый отказ операции ledger.

    str(exc) всегда равен reason.value, детали лежат отдельно в .details.
    """

    def __init__(self, reason: RejectReason, details: str = ""):
        super().__init__(reason.value)
        self.reason = reason
        self.details = details


class AuthorizationError(LedgerError):
    """Вызывающий не является оператором."""


class LedgerValidationError(LedgerError):
    """Некорректные входные данные."""


class StateConflictError(LedgerError):
    """Операция недопустима в текущем состоянии."""


class ExternalDependencyError(LedgerError):
    """Token-компонент вернул отказ или упал."""


class PayoutInterrupted(ExternalDependencyError):
    """
    Выплата в settle прервана токеном, который нельзя откатить.

    Единственное исключение из all-or-nothing: уже выполненные переводы
    необратимы, поэтому COMPLETED и отметки отправленных выплат
    фиксируются. Невыплаченные победители остаются с claimed=False
    и получают выплату через resume_payouts.
    """


_REASON_CATEGORY: Dict[RejectReason, Type[LedgerError]] = {
    RejectReason.NOT_OWNER: AuthorizationError,
    RejectReason.INVALID_TEAM_ID: LedgerValidationError,
    RejectReason.INVALID_TEAM_NAME: LedgerValidationError,
    RejectReason.SAME_TEAMS: LedgerValidationError,
    RejectReason.INVALID_TEAM_A: LedgerValidationError,
    RejectReason.INVALID_TEAM_B: LedgerValidationError,
    RejectReason.INVALID_AMOUNT: LedgerValidationError,
    RejectReason.INVALID_BET_ID: LedgerValidationError,
    RejectReason.INVALID_BET_AMOUNT: LedgerValidationError,
    RejectReason.INVALID_PLEDGE_TEAM: LedgerValidationError,
    RejectReason.INVALID_WINNER: LedgerValidationError,
    RejectReason.ALREADY_INACTIVE: StateConflictError,
    RejectReason.ALREADY_ACTIVE: StateConflictError,
    RejectReason.TEAM_INACTIVE: StateConflictError,
    RejectReason.BET_ALREADY_INACTIVE: StateConflictError,
    RejectReason.BET_ALREADY_COMPLETED: StateConflictError,
    RejectReason.BETTORS_ALREADY_BETTED: StateConflictError,
    RejectReason.BET_INACTIVE: StateConflictError,
    RejectReason.SIDE_ALREADY_SELECTED: StateConflictError,
    RejectReason.TEAM_ALREADY_WON: StateConflictError,
    RejectReason.BET_NOT_COMPLETED: StateConflictError,
    RejectReason.NOTHING_TO_CLAIM: StateConflictError,
    RejectReason.ALREADY_CLAIMED: StateConflictError,
    RejectReason.CLAIMS_DISABLED: StateConflictError,
    RejectReason.PAYOUTS_NOT_PUSHED: StateConflictError,
    RejectReason.TOKEN_TRANSFER_FAILED: ExternalDependencyError,
}


def rejection(reason: RejectReason, details: str = "") -> LedgerError:
    """
    Построение исключения нужной категории по коду отказа.

    Args:
        reason: код отказа
        details: диагностика для логов

    Returns:
        Экземпляр подкласса LedgerError (не выброшенный)
    """
    return _REASON_CATEGORY[reason](reason, details)
