"""GATE 5: Payout Resume (PUSH payout mode)

Оператор досылает выплаты, прерванные необратимым токеном во время settle.

Порядок проверок (после GATE 0):
1. режим выплат PUSH → "payouts not pushed"
2. bet_id выдан → "invalid bet id"
3. ставка COMPLETED → "bet not completed"
4. есть победители с невыплаченным stake → "nothing to claim"
"""

from dataclasses import dataclass
from typing import List, Optional

from betting_ledger.core.domain.bet import Bet, BetStatus
from betting_ledger.core.domain.stake import Stake
from betting_ledger.core.errors import RejectReason


@dataclass(frozen=True)
class Gate05Result:
    """Результат GATE 5."""

    entry_allowed: bool
    block_reason: str

    bet_id: int
    owed: int

    details: str


class Gate05PayoutResume:
    """GATE 5: валидация resume_payouts."""

    def evaluate(
        self,
        payouts_pushed: bool,
        bet_id: int,
        bet: Optional[Bet],
        owed_stakes: List[Stake],
    ) -> Gate05Result:
        """
        Оценка GATE 5.

        Args:
            payouts_pushed: ledger в PUSH режиме
            bet_id: запрошенная ставка
            bet: ставка или None, если id не выдан
            owed_stakes: stake победителей с claimed=False
        """

        def block(reason: RejectReason, details: str) -> Gate05Result:
            return Gate05Result(
                entry_allowed=False,
                block_reason=reason,
                bet_id=bet_id,
                owed=len(owed_stakes),
                details=details,
            )

        if not payouts_pushed:
            return block(RejectReason.PAYOUTS_NOT_PUSHED, "winners claim payouts themselves")

        if bet is None:
            return block(RejectReason.INVALID_BET_ID, f"bet_id {bet_id!r} not assigned")

        if bet.status != BetStatus.COMPLETED:
            return block(RejectReason.BET_NOT_COMPLETED, f"bet {bet_id} is {bet.status.value}")

        if not owed_stakes:
            return block(RejectReason.NOTHING_TO_CLAIM, f"all payouts of bet {bet_id} were sent")

        return Gate05Result(
            entry_allowed=True,
            block_reason="",
            bet_id=bet_id,
            owed=len(owed_stakes),
            details=f"PASS: {len(owed_stakes)} payouts owed on bet {bet_id}",
        )
