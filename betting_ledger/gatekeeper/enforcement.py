"""Enforcement — перевод решения gate в исключение.

Gates не бросают исключений, они возвращают решение. Реестры вызывают
enforce() и получают LedgerError нужной категории при блокировке.
"""

from typing import Protocol

from betting_ledger.core.errors import RejectReason, rejection


class GateResult(Protocol):
    """Общая форма результатов всех gates."""

    entry_allowed: bool
    block_reason: str
    details: str


def enforce(result: GateResult) -> None:
    """Бросает LedgerError, если gate заблокировал операцию.

    Raises:
        LedgerError: подкласс по категории block_reason
    """
    if not result.entry_allowed:
        raise rejection(RejectReason(result.block_reason), result.details)
