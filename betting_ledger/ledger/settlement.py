"""
SettlementEngine — Терминальный переход и выплаты

settle (только оператор):
1. GATE 0 → GATE 3 (ставка, статус, победитель)
2. Расписание выплат (core/math/payouts) с проверкой сохранения пула
3. EFFECTS: winner, COMPLETED, отметки выплат, уведомления
4. INTERACTIONS: token.transfer каждому победителю (только PUSH),
   PAYOUT_ISSUED после каждого успешного перевода

КРИТИЧЕСКИЙ ИНВАРИАНТ:
Статус COMPLETED фиксируется до первого внешнего вызова, поэтому
reentrant settle/pledge из токена видит уже завершённую ставку.

Если токен необратим и перевод отказал посреди рассылки, ставка остаётся
COMPLETED, невыплаченные победители получают claimed=False и
PayoutInterrupted уходит вызывающему. resume_payouts досылает остаток.

claim (PULL режим): победитель забирает свою выплату один раз.
"""

import logging
from typing import List, Tuple

from betting_ledger.core.domain.bet import Bet, BetStatus
from betting_ledger.core.domain.events import EventType
from betting_ledger.core.domain.ledger_snapshot import PayoutMode
from betting_ledger.core.domain.stake import Stake
from betting_ledger.core.errors import (
    ExternalDependencyError,
    PayoutInterrupted,
    RejectReason,
    rejection,
)
from betting_ledger.core.math.payouts import (
    PayoutSchedule,
    build_payout_schedule,
    pro_rata_payout,
)
from betting_ledger.gatekeeper.enforcement import enforce
from betting_ledger.gatekeeper.gates.gate_00_operator_access import Gate00OperatorAccess
from betting_ledger.gatekeeper.gates.gate_03_settlement_validation import (
    Gate03SettlementValidation,
)
from betting_ledger.gatekeeper.gates.gate_04_claim_validation import Gate04ClaimValidation
from betting_ledger.gatekeeper.gates.gate_05_payout_resume import Gate05PayoutResume
from betting_ledger.ledger.state import LedgerState
from betting_ledger.lifecycle.state_machine import BetStateMachine
from betting_ledger.tokens.port import CheckpointableToken, TokenPort

logger = logging.getLogger(__name__)


class SettlementEngine:
    """Settlement поверх LedgerState."""

    def __init__(
        self,
        state: LedgerState,
        access_gate: Gate00OperatorAccess,
        state_machine: BetStateMachine,
        token: TokenPort,
        custody_identity: str,
        payout_mode: PayoutMode = PayoutMode.PUSH,
    ):
        self._state = state
        self._access_gate = access_gate
        self._token = token
        self._token_reversible = isinstance(token, CheckpointableToken)
        self._custody = custody_identity
        self.payout_mode = payout_mode
        self._settlement_gate = Gate03SettlementValidation(state_machine)
        self._claim_gate = Gate04ClaimValidation()
        self._resume_gate = Gate05PayoutResume()

    def settle(self, caller: str, bet_id: int, winning_team_id: int) -> PayoutSchedule:
        """
        Объявление победителя и распределение пула.

        Args:
            caller: вызывающий (должен быть оператором)
            bet_id: ставка в статусе ACTIVE
            winning_team_id: одна из сторон ставки

        Returns:
            PayoutSchedule (в PULL режиме: выплаты, доступные для claim)

        Raises:
            LedgerError: при отказе валидации или токена
            ConservationViolation: если расписание нарушает сохранение пула
        """
        enforce(self._access_gate.evaluate(caller))

        bet = self._state.find_bet(bet_id)
        enforce(self._settlement_gate.evaluate(bet_id, bet, winning_team_id))

        schedule = build_payout_schedule(
            self._winning_stakes(bet, winning_team_id),
            winning_total=bet.side_total(winning_team_id),
            losing_total=bet.opposite_total(winning_team_id),
        )

        # EFFECTS
        self._state.replace_bet(
            bet.model_copy(
                update={"status": BetStatus.COMPLETED, "winner_team_id": winning_team_id}
            )
        )
        self._state.emit(EventType.BET_COMPLETED, bet_id=bet_id, team_id=winning_team_id)

        logger.info(
            "bet %s completed: winner=%s pool=%s winners=%s residue=%s mode=%s",
            bet_id,
            winning_team_id,
            schedule.pool,
            len(schedule.payouts),
            schedule.residue,
            self.payout_mode.value,
        )

        if self.payout_mode == PayoutMode.PULL:
            return schedule

        for bettor, _ in schedule.payouts:
            self._set_claimed(bet_id, bettor, True)

        # INTERACTIONS
        self._push(bet_id, schedule.payouts)
        return schedule

    def resume_payouts(self, caller: str, bet_id: int) -> List[Tuple[str, int]]:
        """
        Досылка выплат, прерванных в settle (PUSH режим).

        Args:
            caller: вызывающий (должен быть оператором)
            bet_id: завершённая ставка с невыплаченными победителями

        Returns:
            Отправленные выплаты (bettor, amount) в порядке pledge
        """
        enforce(self._access_gate.evaluate(caller))

        bet = self._state.find_bet(bet_id)
        owed = self._owed_stakes(bet) if bet is not None else []
        enforce(
            self._resume_gate.evaluate(self.payout_mode == PayoutMode.PUSH, bet_id, bet, owed)
        )

        payouts = [
            (
                stake.bettor,
                pro_rata_payout(
                    stake.amount,
                    winning_total=bet.side_total(bet.winner_team_id),
                    losing_total=bet.opposite_total(bet.winner_team_id),
                ),
            )
            for stake in owed
        ]

        # EFFECTS
        for bettor, _ in payouts:
            self._set_claimed(bet_id, bettor, True)

        # INTERACTIONS
        self._push(bet_id, payouts)

        logger.info("payouts resumed: bet=%s sent=%s", bet_id, len(payouts))
        return payouts

    def claim(self, bettor: str, bet_id: int) -> int:
        """
        Получение выплаты победителем (PULL режим).

        Args:
            bettor: вызывающий победитель
            bet_id: завершённая ставка

        Returns:
            Выплаченная сумма
        """
        bet = self._state.find_bet(bet_id)
        stake = self._state.find_stake(bet_id, bettor) if bet is not None else None
        enforce(
            self._claim_gate.evaluate(
                self.payout_mode == PayoutMode.PULL, bet_id, bet, bettor, stake
            )
        )

        amount = pro_rata_payout(
            stake.amount,
            winning_total=bet.side_total(bet.winner_team_id),
            losing_total=bet.opposite_total(bet.winner_team_id),
        )

        # EFFECTS
        self._set_claimed(bet_id, bettor, True)
        self._state.emit(EventType.PAYOUT_CLAIMED, bet_id=bet_id, bettor=bettor, amount=amount)

        # INTERACTIONS
        self._send(bettor, amount)

        logger.info("payout claimed: bet=%s bettor=%s amount=%s", bet_id, bettor, amount)
        return amount

    def _winning_stakes(self, bet: Bet, winning_team_id: int) -> List[Tuple[str, int]]:
        return [
            (bettor, self._state.stakes[(bet.bet_id, bettor)].amount)
            for bettor in self._state.side_members(bet.bet_id, winning_team_id)
        ]

    def _owed_stakes(self, bet: Bet) -> List[Stake]:
        if bet.status != BetStatus.COMPLETED:
            return []
        stakes = [
            self._state.stakes[(bet.bet_id, bettor)]
            for bettor in self._state.side_members(bet.bet_id, bet.winner_team_id)
        ]
        return [stake for stake in stakes if not stake.claimed]

    def _set_claimed(self, bet_id: int, bettor: str, claimed: bool) -> None:
        stake = self._state.stakes[(bet_id, bettor)]
        self._state.put_stake(stake.model_copy(update={"claimed": claimed}))

    def _push(self, bet_id: int, payouts: List[Tuple[str, int]]) -> None:
        """Рассылка выплат, уже отмеченных claimed."""
        for index, (bettor, amount) in enumerate(payouts):
            try:
                self._send(bettor, amount)
            except ExternalDependencyError as e:
                if self._token_reversible:
                    raise
                # Отправленное не вернуть: остаток остаётся долгом
                owed = payouts[index:]
                for owed_bettor, _ in owed:
                    self._set_claimed(bet_id, owed_bettor, False)
                logger.error(
                    "payouts interrupted: bet=%s sent=%s owed=%s", bet_id, index, len(owed)
                )
                raise PayoutInterrupted(
                    e.reason, f"{e.details}; {len(owed)} of {len(payouts)} payouts owed"
                ) from e
            self._state.emit(EventType.PAYOUT_ISSUED, bet_id=bet_id, bettor=bettor, amount=amount)
            logger.debug("payout sent: bet=%s bettor=%s amount=%s", bet_id, bettor, amount)

    def _send(self, bettor: str, amount: int) -> None:
        try:
            ok = self._token.transfer(bettor, amount)
        except Exception as e:
            raise rejection(
                RejectReason.TOKEN_TRANSFER_FAILED, f"transfer raised: {e!r}"
            ) from e
        if ok is not True:
            raise rejection(
                RejectReason.TOKEN_TRANSFER_FAILED,
                f"transfer({bettor}, {amount}) from {self._custody} returned {ok!r}",
            )
