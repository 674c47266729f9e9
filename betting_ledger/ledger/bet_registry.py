"""
BetRegistry — Реестр ставок и их жизненный цикл

- create_bet: GATE 0 → GATE 1, следующий id начиная с 0, статус INACTIVE
- set_bet_active / set_bet_inactive: переходы через BetStateMachine

Отклонённое создание не расходует bet_id.
"""

import logging

from betting_ledger.core.domain.bet import Bet, BetStatus
from betting_ledger.core.domain.events import EventType
from betting_ledger.core.errors import RejectReason, rejection
from betting_ledger.gatekeeper.enforcement import enforce
from betting_ledger.gatekeeper.gates.gate_00_operator_access import Gate00OperatorAccess
from betting_ledger.gatekeeper.gates.gate_01_bet_creation import Gate01BetCreation
from betting_ledger.ledger.state import LedgerState
from betting_ledger.lifecycle.state_machine import BetStateMachine

logger = logging.getLogger(__name__)


class BetRegistry:
    """Реестр ставок поверх LedgerState."""

    def __init__(
        self,
        state: LedgerState,
        access_gate: Gate00OperatorAccess,
        state_machine: BetStateMachine,
    ):
        self._state = state
        self._access_gate = access_gate
        self._state_machine = state_machine
        self._creation_gate = Gate01BetCreation()

    @property
    def bet_count(self) -> int:
        return len(self._state.bets)

    def create_bet(self, caller: str, team_a_id: int, team_b_id: int, min_stake: int) -> int:
        """
        Открытие новой ставки (в статусе INACTIVE).

        Args:
            caller: вызывающий (должен быть оператором)
            team_a_id: сторона A (активная команда)
            team_b_id: сторона B (активная команда, != A)
            min_stake: минимальный pledge (> 0)

        Returns:
            Выданный bet_id
        """
        enforce(self._access_gate.evaluate(caller))
        enforce(
            self._creation_gate.evaluate(team_a_id, team_b_id, min_stake, self._state.teams)
        )

        bet_id = self.bet_count
        self._state.add_bet(
            Bet(
                bet_id=bet_id,
                team_a_id=team_a_id,
                team_b_id=team_b_id,
                min_stake=min_stake,
            )
        )
        self._state.emit(EventType.BET_CREATED, bet_id=bet_id)

        logger.info(
            "bet created: id=%s teams=%s/%s min_stake=%s", bet_id, team_a_id, team_b_id, min_stake
        )
        return bet_id

    def set_bet_active(self, caller: str, bet_id: int) -> None:
        """INACTIVE → ACTIVE."""
        self._transition(caller, bet_id, BetStatus.ACTIVE, EventType.BET_ACTIVE)

    def set_bet_inactive(self, caller: str, bet_id: int) -> None:
        """ACTIVE → INACTIVE, только пока на ставку нет ни одного stake."""
        self._transition(caller, bet_id, BetStatus.INACTIVE, EventType.BET_INACTIVE)

    def _transition(
        self, caller: str, bet_id: int, target: BetStatus, event_type: EventType
    ) -> None:
        enforce(self._access_gate.evaluate(caller))

        bet = self._state.find_bet(bet_id)
        if bet is None:
            raise rejection(RejectReason.INVALID_BET_ID, f"bet_id {bet_id!r} not assigned")

        result = self._state_machine.evaluate_transition(
            bet.status, target, self._state.stake_count(bet_id)
        )
        if not result.transition_allowed:
            raise rejection(RejectReason(result.block_reason), result.details)

        self._state.replace_bet(bet.model_copy(update={"status": result.new_status}))
        self._state.emit(event_type, bet_id=bet_id)

        logger.info("bet %s: %s", bet_id, result.details)
