"""
Team — Модель участника ставок

Immutable Pydantic модель. Команды никогда не удаляются, меняется только
флаг is_active (через model_copy).
"""

from pydantic import BaseModel, Field


class Team(BaseModel):
    """
    Зарегистрированная команда.

    team_id выдаётся последовательно начиная с 1, id 0 зарезервирован.
    Имя не обязано быть уникальным.
    """

    team_id: int = Field(..., ge=1, description="Последовательный идентификатор (с 1)")
    name: str = Field(..., description="Название команды")
    is_active: bool = Field(True, description="Можно ли открывать ставки на команду")

    model_config = {"frozen": True}
