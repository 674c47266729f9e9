"""GATE 2: Pledge Validation

Открыт для любого вызывающего (без GATE 0).

Порядок проверок:
1. bet_id выдан → "invalid bet id"
2. ставка ACTIVE → "bet inactive"
3. amount >= min_stake → "invalid bet amount"
4. team_id != 0 и является стороной ставки → "invalid team-id"
   (команда, валидная в реестре, но не участвующая в ставке, тоже отклоняется)
5. повторный pledge на ту же сторону → "side already selected"
"""

from dataclasses import dataclass
from typing import Optional

from betting_ledger.core.domain.bet import Bet, BetStatus
from betting_ledger.core.domain.stake import Stake
from betting_ledger.core.domain.units import is_amount
from betting_ledger.core.errors import RejectReason


@dataclass(frozen=True)
class Gate02Result:
    """Результат GATE 2."""

    entry_allowed: bool
    block_reason: str

    bet_id: int
    team_id: int
    amount: int
    is_first_pledge: bool

    details: str


class Gate02PledgeValidation:
    """GATE 2: валидация pledge до обращения к токену."""

    def evaluate(
        self,
        bet_id: int,
        bet: Optional[Bet],
        amount: int,
        team_id: int,
        existing_stake: Optional[Stake],
    ) -> Gate02Result:
        """Оценка GATE 2.

        Args:
            bet_id: запрошенная ставка
            bet: ставка из реестра или None, если bet_id не выдан
            amount: сумма pledge
            team_id: выбранная сторона
            existing_stake: ранее записанный stake bettor на этой ставке

        Returns:
            Gate02Result с решением о допуске
        """
        is_first_pledge = existing_stake is None

        def block(reason: RejectReason, details: str) -> Gate02Result:
            return Gate02Result(
                entry_allowed=False,
                block_reason=reason,
                bet_id=bet_id,
                team_id=team_id,
                amount=amount,
                is_first_pledge=is_first_pledge,
                details=details,
            )

        if bet is None:
            return block(RejectReason.INVALID_BET_ID, f"bet_id {bet_id!r} not assigned")

        if bet.status != BetStatus.ACTIVE:
            return block(RejectReason.BET_INACTIVE, f"bet {bet_id} is {bet.status.value}")

        if not is_amount(amount) or amount < bet.min_stake:
            return block(
                RejectReason.INVALID_BET_AMOUNT,
                f"amount {amount!r} below min_stake {bet.min_stake}",
            )

        if not bet.has_side(team_id):
            return block(
                RejectReason.INVALID_PLEDGE_TEAM,
                f"team {team_id!r} is not a side of bet {bet_id}",
            )

        if existing_stake is not None and existing_stake.team_id != team_id:
            return block(
                RejectReason.SIDE_ALREADY_SELECTED,
                f"bettor already on team {existing_stake.team_id}, requested {team_id}",
            )

        return Gate02Result(
            entry_allowed=True,
            block_reason="",
            bet_id=bet_id,
            team_id=team_id,
            amount=amount,
            is_first_pledge=is_first_pledge,
            details=f"PASS: {amount} on team {team_id}, first={is_first_pledge}",
        )
