"""
Payouts — Pro-rata (pari-mutuel) распределение пула

Модуль вычисляет выплаты победившей стороне:
- Каждый победитель получает свой stake обратно
- Проигравший пул делится пропорционально доле stake в победившем пуле
- Целочисленное деление с усечением вниз, остаток остаётся в custody

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. sum(payouts) <= pool (переплата невозможна)
2. pool - sum(payouts) < количество победителей (остаток от усечения)
3. Все операции целочисленные, детерминированы и воспроизводимы

ФОРМУЛА:
    payout(bettor) = stake + losing_total * stake // winning_total
"""

from typing import Final, NamedTuple, Sequence, Tuple

from betting_ledger.core.domain.units import is_amount

# Максимальный остаток на одного победителя (усечение целочисленного деления)
MAX_RESIDUE_PER_WINNER: Final[int] = 1


# =============================================================================
# EXCEPTIONS
# =============================================================================


class ConservationViolation(Exception):
    """
    Нарушение сохранения средств при расчёте выплат.

    Возникает если:
    - сумма stake победителей не совпадает с winning_total
    - расписание выплат превышает пул
    - остаток превышает допустимую погрешность усечения
    """


# =============================================================================
# RESULT
# =============================================================================


class PayoutSchedule(NamedTuple):
    """Расписание выплат по одной ставке."""

    payouts: Tuple[Tuple[str, int], ...]  # (bettor, payout) в порядке списка стороны
    total_paid: int
    pool: int
    residue: int  # pool - total_paid, остаётся в custody


# =============================================================================
# ВЫЧИСЛЕНИЯ
# =============================================================================


def pro_rata_payout(stake: int, winning_total: int, losing_total: int) -> int:
    """
    Выплата одному победителю.

    Args:
        stake: stake победителя (> 0)
        winning_total: сумма stake победившей стороны (>= stake)
        losing_total: сумма stake проигравшей стороны (>= 0)

    Returns:
        stake + losing_total * stake // winning_total

    Raises:
        ValueError: при некорректных аргументах

    Examples:
        >>> pro_rata_payout(10, 10, 10)
        20
        >>> pro_rata_payout(10, 20, 20)
        20
        >>> pro_rata_payout(1, 3, 1)
        1
    """
    if not is_amount(stake) or stake <= 0:
        raise ValueError(f"stake must be a positive int, got {stake!r}")
    if not is_amount(winning_total) or winning_total < stake:
        raise ValueError(
            f"winning_total must be an int >= stake ({stake}), got {winning_total!r}"
        )
    if not is_amount(losing_total) or losing_total < 0:
        raise ValueError(f"losing_total must be a non-negative int, got {losing_total!r}")

    return stake + (losing_total * stake) // winning_total


def build_payout_schedule(
    winners: Sequence[Tuple[str, int]],
    winning_total: int,
    losing_total: int,
) -> PayoutSchedule:
    """
    Расписание выплат всем победителям с проверкой сохранения средств.

    Если у победившей стороны нет участников, выплат нет и весь пул
    остаётся в custody.

    Args:
        winners: (bettor, stake) в порядке списка участников стороны
        winning_total: сумма stake победившей стороны
        losing_total: сумма stake проигравшей стороны

    Returns:
        PayoutSchedule

    Raises:
        ConservationViolation: если stake победителей не сходятся с
            winning_total или выплаты нарушают сохранение пула
    """
    pool = winning_total + losing_total

    if not winners:
        if winning_total != 0:
            raise ConservationViolation(
                f"winning_total {winning_total} recorded without winning members"
            )
        return PayoutSchedule(payouts=(), total_paid=0, pool=pool, residue=pool)

    stakes_sum = sum(stake for _, stake in winners)
    if stakes_sum != winning_total:
        raise ConservationViolation(
            f"winner stakes sum {stakes_sum} != winning_total {winning_total}"
        )

    payouts = tuple(
        (bettor, pro_rata_payout(stake, winning_total, losing_total))
        for bettor, stake in winners
    )
    total_paid = sum(amount for _, amount in payouts)
    residue = pool - total_paid

    if residue < 0:
        raise ConservationViolation(f"payouts {total_paid} exceed pool {pool}")
    if residue >= len(payouts) * MAX_RESIDUE_PER_WINNER:
        raise ConservationViolation(
            f"residue {residue} exceeds truncation bound for {len(payouts)} winners"
        )

    return PayoutSchedule(
        payouts=payouts, total_paid=total_paid, pool=pool, residue=residue
    )
