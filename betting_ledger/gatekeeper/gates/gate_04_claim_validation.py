"""GATE 4: Claim Validation (PULL payout mode)

Победитель забирает выплату сам, вместо рассылки всем в settle.

Порядок проверок:
1. claim разрешён режимом выплат → "claims disabled"
2. bet_id выдан → "invalid bet id"
3. ставка COMPLETED → "bet not completed"
4. у bettor есть stake на стороне победителя → "nothing to claim"
5. выплата ещё не получена → "already claimed"
"""

from dataclasses import dataclass
from typing import Optional

from betting_ledger.core.domain.bet import Bet, BetStatus
from betting_ledger.core.domain.stake import Stake
from betting_ledger.core.errors import RejectReason


@dataclass(frozen=True)
class Gate04Result:
    """Результат GATE 4."""

    entry_allowed: bool
    block_reason: str

    bet_id: int
    bettor: str

    details: str


class Gate04ClaimValidation:
    """GATE 4: валидация claim."""

    def evaluate(
        self,
        claims_enabled: bool,
        bet_id: int,
        bet: Optional[Bet],
        bettor: str,
        stake: Optional[Stake],
    ) -> Gate04Result:
        """Оценка GATE 4."""

        def block(reason: RejectReason, details: str) -> Gate04Result:
            return Gate04Result(
                entry_allowed=False,
                block_reason=reason,
                bet_id=bet_id,
                bettor=bettor,
                details=details,
            )

        if not claims_enabled:
            return block(RejectReason.CLAIMS_DISABLED, "payouts are pushed on settlement")

        if bet is None:
            return block(RejectReason.INVALID_BET_ID, f"bet_id {bet_id!r} not assigned")

        if bet.status != BetStatus.COMPLETED:
            return block(RejectReason.BET_NOT_COMPLETED, f"bet {bet_id} is {bet.status.value}")

        if stake is None or stake.team_id != bet.winner_team_id:
            return block(
                RejectReason.NOTHING_TO_CLAIM,
                f"{bettor!r} has no stake on winning team {bet.winner_team_id}",
            )

        if stake.claimed:
            return block(RejectReason.ALREADY_CLAIMED, f"{bettor!r} already claimed bet {bet_id}")

        return Gate04Result(
            entry_allowed=True,
            block_reason="",
            bet_id=bet_id,
            bettor=bettor,
            details=f"PASS: {bettor} claims bet {bet_id}",
        )
