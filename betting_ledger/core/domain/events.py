"""
LedgerEvent — Уведомления о мутациях ledger

Упорядоченный журнал событий позволяет внешним наблюдателям восстановить
историю ledger без опроса read-поверхности.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Тип уведомления."""

    TEAM_ADDED = "TEAM_ADDED"
    TEAM_ACTIVE = "TEAM_ACTIVE"
    TEAM_INACTIVE = "TEAM_INACTIVE"
    BET_CREATED = "BET_CREATED"
    BET_ACTIVE = "BET_ACTIVE"
    BET_INACTIVE = "BET_INACTIVE"
    FUNDS_PLEDGED = "FUNDS_PLEDGED"
    BET_COMPLETED = "BET_COMPLETED"
    PAYOUT_ISSUED = "PAYOUT_ISSUED"
    PAYOUT_CLAIMED = "PAYOUT_CLAIMED"


class LedgerEvent(BaseModel):
    """
    Одно уведомление.

    Заполняются только поля, относящиеся к event_type:
    - TEAM_*: team_id
    - BET_CREATED / BET_ACTIVE / BET_INACTIVE: bet_id
    - BET_COMPLETED: bet_id, team_id (победитель)
    - FUNDS_PLEDGED: bet_id, team_id, bettor, amount
    - PAYOUT_ISSUED / PAYOUT_CLAIMED: bet_id, bettor, amount
    """

    seq: int = Field(..., ge=0, description="Порядковый номер в журнале")
    event_type: EventType
    bet_id: Optional[int] = Field(None, ge=0)
    team_id: Optional[int] = Field(None, ge=1)
    bettor: Optional[str] = Field(None, min_length=1)
    amount: Optional[int] = Field(None, ge=0)

    model_config = {"frozen": True}
