"""Ledger — реестры, мутирующие LedgerState.

- TeamRegistry: команды и их флаг активности
- BetRegistry: ставки и переходы статуса
- PledgeLedger: stake и списки участников сторон
- SettlementEngine: завершение ставки и выплаты
"""

from .bet_registry import BetRegistry
from .pledge_ledger import PledgeLedger
from .settlement import SettlementEngine
from .state import LedgerState
from .team_registry import TeamRegistry

__all__ = [
    "LedgerState",
    "TeamRegistry",
    "BetRegistry",
    "PledgeLedger",
    "SettlementEngine",
]
