"""
LedgerSnapshot — Модель полного состояния ledger

Immutable Pydantic модель, представляющая снапшот ledger для экспорта,
аудита и восстановления. Полная совместимость с JSON Schema
(core/contracts/schema/ledger_snapshot.json).
"""

from enum import Enum

from pydantic import BaseModel, Field

from .bet import Bet
from .events import LedgerEvent
from .stake import SideMembership, Stake
from .team import Team


# =============================================================================
# ENUMS
# =============================================================================


class PayoutMode(str, Enum):
    """
    Способ распределения выигрыша.

    PUSH: settle сам переводит выплаты всем победителям
    PULL: settle только фиксирует результат, каждый победитель вызывает claim
    """

    PUSH = "PUSH"
    PULL = "PULL"


# =============================================================================
# SNAPSHOT MODEL
# =============================================================================


class LedgerSnapshot(BaseModel):
    """
    Снапшот ledger.

    Содержит:
    - Идентичности (operator, custody)
    - Режим выплат
    - Все команды, ставки, stake и списки участников сторон
    - Журнал событий
    """

    schema_version: str = Field("1", pattern="^1$", description="Версия схемы")
    operator: str = Field(..., min_length=1, description="Единственный оператор")
    custody_identity: str = Field(..., min_length=1, description="Адрес custody в токене")
    payout_mode: PayoutMode = Field(PayoutMode.PUSH)

    teams: list[Team] = Field(default_factory=list)
    bets: list[Bet] = Field(default_factory=list)
    stakes: list[Stake] = Field(default_factory=list)
    memberships: list[SideMembership] = Field(default_factory=list)
    events: list[LedgerEvent] = Field(default_factory=list)

    model_config = {"frozen": True}
