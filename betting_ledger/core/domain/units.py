"""
Ledger Units — Идентификаторы и суммы

Единственное место, где задаются:
- sentinel-идентификатор "нет команды"
- начальные значения последовательных идентификаторов
- проверки сумм (целые base units токена)

Все суммы — неотрицательные int. Float в ledger ЗАПРЕЩЕНЫ.
"""

from typing import Final


# =============================================================================
# ИДЕНТИФИКАТОРЫ
# =============================================================================

# Зарезервированный id "нет команды" / невалидная команда, никогда не выдаётся
NO_TEAM_ID: Final[int] = 0

# Первый выдаваемый team_id (команды нумеруются с 1)
FIRST_TEAM_ID: Final[int] = 1

# Первый выдаваемый bet_id (ставки нумеруются с 0)
FIRST_BET_ID: Final[int] = 0


# =============================================================================
# ПРОВЕРКИ
# =============================================================================


def is_amount(value: object) -> bool:
    """
    Проверка, что значение — сумма в base units (int, не bool).

    Args:
        value: проверяемое значение

    Returns:
        True если value является int и не является bool
    """
    return isinstance(value, int) and not isinstance(value, bool)


def is_positive_amount(value: object) -> bool:
    """True если value — сумма строго больше нуля."""
    return is_amount(value) and value > 0


def is_team_name(value: object) -> bool:
    """True если value — строка (пустая допустима, уникальность не требуется)."""
    return isinstance(value, str)


def is_valid_team_id(team_id: object, team_count: int) -> bool:
    """
    Проверка, что team_id выдан реестром.

    Args:
        team_id: проверяемый идентификатор
        team_count: количество выданных команд

    Returns:
        True если FIRST_TEAM_ID <= team_id <= team_count
    """
    return is_amount(team_id) and FIRST_TEAM_ID <= team_id <= team_count


def is_valid_bet_id(bet_id: object, bet_count: int) -> bool:
    """True если FIRST_BET_ID <= bet_id < bet_count."""
    return is_amount(bet_id) and FIRST_BET_ID <= bet_id < bet_count
