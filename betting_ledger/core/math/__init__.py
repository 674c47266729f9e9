"""
Core math modules для betting_ledger

Целочисленные примитивы распределения пула с гарантией сохранения средств.
"""

from betting_ledger.core.math.payouts import (
    MAX_RESIDUE_PER_WINNER,
    ConservationViolation,
    PayoutSchedule,
    build_payout_schedule,
    pro_rata_payout,
)

__all__ = [
    "MAX_RESIDUE_PER_WINNER",
    "ConservationViolation",
    "PayoutSchedule",
    "build_payout_schedule",
    "pro_rata_payout",
]
