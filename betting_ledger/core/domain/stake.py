"""
Stake — Запись о средствах bettor на одной ставке

Одна запись на пару (bettor, bet_id). Повторные pledge суммируются в ту же
запись, сторона фиксируется первым pledge. Записи не удаляются.
"""

from pydantic import BaseModel, Field


class Stake(BaseModel):
    """Накопленный stake bettor на ставке."""

    bettor: str = Field(..., min_length=1, description="Идентификатор bettor (адрес)")
    bet_id: int = Field(..., ge=0, description="Ставка")
    team_id: int = Field(..., ge=1, description="Выбранная сторона (фиксируется первым pledge)")
    amount: int = Field(..., gt=0, description="Накопленная сумма (base units)")
    claimed: bool = Field(False, description="Выплата получена (только PULL режим)")

    model_config = {"frozen": True}


class SideMembership(BaseModel):
    """
    Упорядоченный список bettor одной стороны ставки (без дубликатов).

    Используется в snapshot; в рабочем состоянии хранится как list по ключу
    (bet_id, team_id).
    """

    bet_id: int = Field(..., ge=0)
    team_id: int = Field(..., ge=1)
    bettors: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}
