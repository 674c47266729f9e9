"""
PledgeLedger — Учёт stake по (bettor, bet)

pledge открыт любому вызывающему:
1. GATE 2 (ставка, статус, сумма, сторона)
2. Списание amount с bettor в custody через token.transfer_from
3. Только после успешного списания: повторный GATE 2 и запись stake,
   списка стороны, totals

Если токен вернул отказ, ledger не меняется. Если отказ случился после
списания, а токен не умеет откатываться, amount возвращается bettor.
"""

import logging

from betting_ledger.core.domain.bet import Bet
from betting_ledger.core.domain.events import EventType
from betting_ledger.core.domain.stake import Stake
from betting_ledger.core.errors import RejectReason, rejection
from betting_ledger.gatekeeper.enforcement import enforce
from betting_ledger.gatekeeper.gates.gate_02_pledge_validation import Gate02PledgeValidation
from betting_ledger.ledger.state import LedgerState
from betting_ledger.tokens.port import CheckpointableToken, TokenPort

logger = logging.getLogger(__name__)


class PledgeLedger:
    """Учёт pledge поверх LedgerState."""

    def __init__(self, state: LedgerState, token: TokenPort, custody_identity: str):
        self._state = state
        self._token = token
        self._token_reversible = isinstance(token, CheckpointableToken)
        self._custody = custody_identity
        self._pledge_gate = Gate02PledgeValidation()

    def pledge(self, bettor: str, amount: int, bet_id: int, team_id: int) -> Stake:
        """
        Pledge amount на сторону team_id ставки bet_id.

        Args:
            bettor: вызывающий bettor
            amount: сумма (>= min_stake ставки)
            bet_id: ставка в статусе ACTIVE
            team_id: team_a_id или team_b_id ставки

        Returns:
            Обновлённый Stake bettor на этой ставке

        Raises:
            LedgerError: при отказе валидации или токена
        """
        bet = self._state.find_bet(bet_id)
        existing = self._state.find_stake(bet_id, bettor) if bet is not None else None
        enforce(self._pledge_gate.evaluate(bet_id, bet, amount, team_id, existing))

        self._pull_into_custody(bettor, amount)

        try:
            stake = self._record(bettor, amount, bet_id, team_id)
        except Exception:
            if not self._token_reversible:
                self._refund(bettor, amount)
            raise

        logger.info("pledge: bet=%s team=%s bettor=%s amount=%s", bet_id, team_id, bettor, amount)
        return stake

    def _record(self, bettor: str, amount: int, bet_id: int, team_id: int) -> Stake:
        # Токен мог вызвать ledger повторно, перечитываем и перепроверяем
        bet = self._state.find_bet(bet_id)
        existing = self._state.find_stake(bet_id, bettor)
        enforce(self._pledge_gate.evaluate(bet_id, bet, amount, team_id, existing))

        if existing is None:
            stake = Stake(bettor=bettor, bet_id=bet_id, team_id=team_id, amount=amount)
            self._state.add_side_member(bet_id, team_id, bettor)
            self._state.add_bettor_bet(bettor, bet_id)
        else:
            stake = existing.model_copy(update={"amount": existing.amount + amount})
        self._state.put_stake(stake)

        self._state.replace_bet(self._credit_side(bet, team_id, amount))
        self._state.emit(
            EventType.FUNDS_PLEDGED, bet_id=bet_id, team_id=team_id, bettor=bettor, amount=amount
        )
        return stake

    def _pull_into_custody(self, bettor: str, amount: int) -> None:
        try:
            ok = self._token.transfer_from(bettor, self._custody, amount)
        except Exception as e:
            raise rejection(
                RejectReason.TOKEN_TRANSFER_FAILED, f"transfer_from raised: {e!r}"
            ) from e
        if ok is not True:
            raise rejection(
                RejectReason.TOKEN_TRANSFER_FAILED,
                f"transfer_from({bettor}, {self._custody}, {amount}) returned {ok!r}",
            )

    def _refund(self, bettor: str, amount: int) -> None:
        try:
            ok = self._token.transfer(bettor, amount)
        except Exception as e:
            logger.error("pledge refund raised: bettor=%s amount=%s error=%r", bettor, amount, e)
            raise rejection(
                RejectReason.TOKEN_TRANSFER_FAILED, f"refund transfer raised: {e!r}"
            ) from e
        if ok is not True:
            logger.error("pledge refund refused: bettor=%s amount=%s", bettor, amount)
            raise rejection(
                RejectReason.TOKEN_TRANSFER_FAILED,
                f"refund transfer({bettor}, {amount}) returned {ok!r}",
            )
        logger.warning("pledge refunded: bettor=%s amount=%s", bettor, amount)

    @staticmethod
    def _credit_side(bet: Bet, team_id: int, amount: int) -> Bet:
        if team_id == bet.team_a_id:
            return bet.model_copy(update={"total_a": bet.total_a + amount})
        return bet.model_copy(update={"total_b": bet.total_b + amount})
