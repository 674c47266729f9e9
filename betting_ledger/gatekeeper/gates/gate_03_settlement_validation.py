"""GATE 3: Settlement Validation

Проверка settle после GATE 0.

Порядок проверок:
1. bet_id выдан → "invalid bet id"
2. статус через BetStateMachine (ACTIVE → COMPLETED):
   INACTIVE → "bet inactive", COMPLETED → "team already won" (replay guard)
3. победитель является одной из сторон ставки → "invalid teamId"
"""

from dataclasses import dataclass
from typing import Optional

from betting_ledger.core.domain.bet import Bet, BetStatus
from betting_ledger.core.errors import RejectReason
from betting_ledger.lifecycle.state_machine import BetStateMachine


@dataclass(frozen=True)
class Gate03Result:
    """Результат GATE 3."""

    entry_allowed: bool
    block_reason: str

    bet_id: int
    winning_team_id: int
    losing_team_id: int

    details: str


class Gate03SettlementValidation:
    """GATE 3: валидация settle."""

    def __init__(self, state_machine: Optional[BetStateMachine] = None):
        self.state_machine = state_machine or BetStateMachine()

    def evaluate(
        self,
        bet_id: int,
        bet: Optional[Bet],
        winning_team_id: int,
    ) -> Gate03Result:
        """Оценка GATE 3.

        Args:
            bet_id: запрошенная ставка
            bet: ставка из реестра или None, если bet_id не выдан
            winning_team_id: объявленный победитель

        Returns:
            Gate03Result с решением о допуске
        """

        def block(reason: str, details: str) -> Gate03Result:
            return Gate03Result(
                entry_allowed=False,
                block_reason=reason,
                bet_id=bet_id,
                winning_team_id=winning_team_id,
                losing_team_id=0,
                details=details,
            )

        if bet is None:
            return block(RejectReason.INVALID_BET_ID, f"bet_id {bet_id!r} not assigned")

        transition = self.state_machine.evaluate_transition(bet.status, BetStatus.COMPLETED)
        if not transition.transition_allowed:
            return block(transition.block_reason, transition.details)

        if not bet.has_side(winning_team_id):
            return block(
                RejectReason.INVALID_WINNER,
                f"team {winning_team_id!r} is not a side of bet {bet_id}",
            )

        losing_team_id = bet.team_b_id if winning_team_id == bet.team_a_id else bet.team_a_id

        return Gate03Result(
            entry_allowed=True,
            block_reason="",
            bet_id=bet_id,
            winning_team_id=winning_team_id,
            losing_team_id=losing_team_id,
            details=f"PASS: team {winning_team_id} wins bet {bet_id}",
        )
