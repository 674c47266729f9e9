"""
Bet — Модель head-to-head ставки

Immutable Pydantic модель. Все изменения (статус, суммы, победитель)
создают новый экземпляр через model_copy.

ИНВАРИАНТЫ:
1. team_a_id != team_b_id
2. winner_team_id != NO_TEAM_ID только в статусе COMPLETED
3. total_a / total_b равны сумме stake по соответствующей стороне
"""

from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from .units import NO_TEAM_ID


# =============================================================================
# ENUMS
# =============================================================================


class BetStatus(str, Enum):
    """
    Статус ставки.

    INACTIVE (начальный) → ACTIVE → COMPLETED (терминальный)
    """

    INACTIVE = "INACTIVE"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


# =============================================================================
# BET MODEL
# =============================================================================


class Bet(BaseModel):
    """Ставка между двумя командами."""

    bet_id: int = Field(..., ge=0, description="Последовательный идентификатор (с 0)")
    team_a_id: int = Field(..., ge=1, description="Сторона A")
    team_b_id: int = Field(..., ge=1, description="Сторона B")
    min_stake: int = Field(..., gt=0, description="Минимальный размер pledge (base units)")
    status: BetStatus = Field(BetStatus.INACTIVE, description="Статус жизненного цикла")
    winner_team_id: int = Field(
        NO_TEAM_ID, ge=0, description="Победитель (0 до перехода в COMPLETED)"
    )
    total_a: int = Field(0, ge=0, description="Сумма stake на сторону A")
    total_b: int = Field(0, ge=0, description="Сумма stake на сторону B")

    model_config = {"frozen": True}

    @field_validator("team_b_id")
    @classmethod
    def validate_distinct_teams(cls, v: int, info) -> int:
        """Стороны ставки не могут совпадать."""
        if "team_a_id" in info.data and v == info.data["team_a_id"]:
            raise ValueError(f"team_b_id {v} must differ from team_a_id")
        return v

    @model_validator(mode="after")
    def validate_winner(self) -> "Bet":
        """Победитель задан тогда и только тогда, когда ставка завершена."""
        if self.status == BetStatus.COMPLETED:
            if self.winner_team_id not in (self.team_a_id, self.team_b_id):
                raise ValueError(
                    f"completed bet {self.bet_id} must have winner among its sides"
                )
        elif self.winner_team_id != NO_TEAM_ID:
            raise ValueError(f"bet {self.bet_id} has winner before completion")
        return self

    def has_side(self, team_id: int) -> bool:
        """True если team_id — одна из двух сторон ставки."""
        return team_id != NO_TEAM_ID and team_id in (self.team_a_id, self.team_b_id)

    def side_total(self, team_id: int) -> int:
        """Сумма stake на указанную сторону."""
        return self.total_a if team_id == self.team_a_id else self.total_b

    def opposite_total(self, team_id: int) -> int:
        """Сумма stake на противоположную сторону."""
        return self.total_b if team_id == self.team_a_id else self.total_a

    def total_pool(self) -> int:
        """Полный пул ставки (обе стороны)."""
        return self.total_a + self.total_b
