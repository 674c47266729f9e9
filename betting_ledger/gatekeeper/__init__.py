"""Gatekeeper — система гейтов для допуска операций ledger.

Каждая мутирующая операция проходит фиксированную цепочку проверок;
gate возвращает решение, enforce() превращает блокировку в LedgerError.
"""

from .enforcement import enforce
from .gates.gate_00_operator_access import Gate00OperatorAccess, Gate00Result

__all__ = [
    "Gate00OperatorAccess",
    "Gate00Result",
    "enforce",
]
