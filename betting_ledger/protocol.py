"""
BettingProtocol — Фасад custodial wagering ledger

Связывает компоненты и даёт:
- Единую точку входа для всех операций (оператор и bettors)
- All-or-nothing транзакции: при любом исключении состояние ledger
  (и токена, если он CheckpointableToken) возвращается к началу операции,
  кроме PayoutInterrupted (часть выплат уже ушла через необратимый токен)
- Доставку уведомлений подписчикам после commit внешней транзакции
- Read-поверхность без побочных эффектов
- Снапшот состояния и восстановление из него

Компоненты (от листьев):
    Gate00OperatorAccess → TeamRegistry → BetRegistry → PledgeLedger → SettlementEngine
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from betting_ledger.core.contracts import get_contract
from betting_ledger.core.domain.bet import Bet
from betting_ledger.core.domain.events import EventType, LedgerEvent
from betting_ledger.core.domain.ledger_snapshot import LedgerSnapshot, PayoutMode
from betting_ledger.core.domain.stake import SideMembership, Stake
from betting_ledger.core.domain.team import Team
from betting_ledger.core.domain.units import NO_TEAM_ID
from betting_ledger.core.errors import LedgerError, PayoutInterrupted, RejectReason, rejection
from betting_ledger.core.math.payouts import PayoutSchedule
from betting_ledger.gatekeeper.gates.gate_00_operator_access import Gate00OperatorAccess
from betting_ledger.ledger import (
    BetRegistry,
    LedgerState,
    PledgeLedger,
    SettlementEngine,
    TeamRegistry,
)
from betting_ledger.lifecycle.state_machine import BetStateMachine
from betting_ledger.tokens.port import CheckpointableToken, TokenPort

logger = logging.getLogger(__name__)

EventSubscriber = Callable[[LedgerEvent], None]


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class LedgerConfig:
    """
    Конфигурация ledger.

    - custody_identity: адрес ledger в токене (получатель pledge, отправитель выплат)
    - payout_mode: PUSH (выплаты в settle) или PULL (каждый победитель вызывает claim)
    """

    custody_identity: str = "betting-ledger-custody"
    payout_mode: PayoutMode = PayoutMode.PUSH


# =============================================================================
# PROTOCOL
# =============================================================================


class BettingProtocol:
    """Custodial wagering ledger.

    Оператор фиксируется при создании (deployer) и не меняется.
    """

    def __init__(
        self,
        token: TokenPort,
        operator: str,
        config: Optional[LedgerConfig] = None,
    ):
        """
        Args:
            token: внешний token-компонент
            operator: идентичность оператора
            config: конфигурация (default LedgerConfig())
        """
        self.config = config or LedgerConfig()
        identity = getattr(token, "identity", None)
        if identity is not None and identity != self.config.custody_identity:
            raise ValueError(
                f"token account {identity!r} != custody_identity "
                f"{self.config.custody_identity!r}"
            )
        self.token = token
        self._token_reversible = isinstance(token, CheckpointableToken)

        self._state = LedgerState()
        self._access_gate = Gate00OperatorAccess(operator)
        state_machine = BetStateMachine()

        self.teams = TeamRegistry(self._state, self._access_gate)
        self.bets = BetRegistry(self._state, self._access_gate, state_machine)
        self.pledges = PledgeLedger(self._state, token, self.config.custody_identity)
        self.settlement = SettlementEngine(
            self._state,
            self._access_gate,
            state_machine,
            token,
            self.config.custody_identity,
            self.config.payout_mode,
        )

        self._subscribers: List[EventSubscriber] = []
        self._tx_depth = 0
        self._dispatched_seq = 0

    # -------------------------------------------------------------------------
    # Транзакции и уведомления
    # -------------------------------------------------------------------------

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        state_checkpoint = self._state.checkpoint()
        token_checkpoint = self.token.checkpoint() if self._token_reversible else None
        self._tx_depth += 1
        try:
            yield
        except PayoutInterrupted as e:
            # Часть выплат ушла через необратимый токен: фиксируем, не откатываем
            self._tx_depth -= 1
            logger.warning("%s interrupted: %s (%s)", operation, e.reason.value, e.details)
            self._commit()
            raise
        except Exception as e:
            self._tx_depth -= 1
            self._state.restore(state_checkpoint)
            if token_checkpoint is not None:
                self.token.restore(token_checkpoint)
            if isinstance(e, LedgerError):
                logger.warning("%s rejected: %s (%s)", operation, e.reason.value, e.details)
            else:
                logger.error("%s aborted: %r", operation, e)
            if self._tx_depth == 0:
                # Уцелеть могли только вложенные операции за seal
                self._commit()
            raise
        else:
            self._tx_depth -= 1
            self._commit()

    def _commit(self) -> None:
        if self._tx_depth == 0:
            self._state.commit()
            self._dispatch_events()
        elif not self._token_reversible:
            # Внешняя операция не может откатить вложенную: её переводы уже ушли
            self._state.seal()

    def subscribe(self, subscriber: EventSubscriber) -> None:
        """Подписка на уведомления (доставляются после commit)."""
        self._subscribers.append(subscriber)

    def _dispatch_events(self) -> None:
        """
        Доставка новых событий всем подписчикам.

        Ошибка подписчика не прерывает доставку остальным; первая ошибка
        выбрасывается после обхода всех событий.
        """
        errors: List[Exception] = []
        while self._dispatched_seq < len(self._state.events):
            event = self._state.events[self._dispatched_seq]
            self._dispatched_seq += 1
            for subscriber in list(self._subscribers):
                try:
                    subscriber(event)
                except Exception as e:
                    logger.error(
                        "subscriber %r failed on event %s (%s): %r",
                        subscriber,
                        event.seq,
                        event.event_type.value,
                        e,
                    )
                    errors.append(e)
        if errors:
            raise errors[0]

    # -------------------------------------------------------------------------
    # Операции оператора
    # -------------------------------------------------------------------------

    def add_team(self, caller: str, name: str) -> int:
        with self._transaction("add_team"):
            return self.teams.add_team(caller, name)

    def set_team_inactive(self, caller: str, team_id: int) -> None:
        with self._transaction("set_team_inactive"):
            self.teams.set_team_inactive(caller, team_id)

    def set_team_active(self, caller: str, team_id: int) -> None:
        with self._transaction("set_team_active"):
            self.teams.set_team_active(caller, team_id)

    def create_bet(self, caller: str, team_a_id: int, team_b_id: int, min_stake: int) -> int:
        with self._transaction("create_bet"):
            return self.bets.create_bet(caller, team_a_id, team_b_id, min_stake)

    def set_bet_active(self, caller: str, bet_id: int) -> None:
        with self._transaction("set_bet_active"):
            self.bets.set_bet_active(caller, bet_id)

    def set_bet_inactive(self, caller: str, bet_id: int) -> None:
        with self._transaction("set_bet_inactive"):
            self.bets.set_bet_inactive(caller, bet_id)

    def settle(self, caller: str, bet_id: int, winning_team_id: int) -> PayoutSchedule:
        with self._transaction("settle"):
            return self.settlement.settle(caller, bet_id, winning_team_id)

    def resume_payouts(self, caller: str, bet_id: int) -> List[Tuple[str, int]]:
        with self._transaction("resume_payouts"):
            return self.settlement.resume_payouts(caller, bet_id)

    # -------------------------------------------------------------------------
    # Операции bettors
    # -------------------------------------------------------------------------

    def pledge(self, bettor: str, amount: int, bet_id: int, team_id: int) -> Stake:
        with self._transaction("pledge"):
            return self.pledges.pledge(bettor, amount, bet_id, team_id)

    def claim(self, bettor: str, bet_id: int) -> int:
        with self._transaction("claim"):
            return self.settlement.claim(bettor, bet_id)

    # -------------------------------------------------------------------------
    # Read-поверхность
    # -------------------------------------------------------------------------

    @property
    def owner(self) -> str:
        return self._access_gate.operator

    @property
    def team_count(self) -> int:
        return len(self._state.teams)

    @property
    def bet_count(self) -> int:
        return len(self._state.bets)

    @property
    def events(self) -> List[LedgerEvent]:
        return list(self._state.events)

    def get_team(self, team_id: int) -> Team:
        team = self._state.find_team(team_id)
        if team is None:
            raise rejection(RejectReason.INVALID_TEAM_ID, f"team_id {team_id!r}")
        return team

    def get_all_teams(self) -> List[Team]:
        return list(self._state.teams)

    def get_bet(self, bet_id: int) -> Bet:
        return self._require_bet(bet_id)

    def get_total_amount_on_bet(self, bet_id: int) -> int:
        return self._require_bet(bet_id).total_pool()

    def get_bettor_bet_details(self, bet_id: int, bettor: str) -> Tuple[int, int]:
        """(team_id, amount) bettor на ставке, (0, 0) если stake нет."""
        self._require_bet(bet_id)
        stake = self._state.find_stake(bet_id, bettor)
        if stake is None:
            return NO_TEAM_ID, 0
        return stake.team_id, stake.amount

    def get_bettors_on_team(self, bet_id: int, team_id: int) -> List[str]:
        self._require_bet(bet_id)
        return self._state.side_members(bet_id, team_id)

    def get_all_bets_by_bettor(self, bettor: str) -> List[int]:
        return list(self._state.bets_by_bettor.get(bettor, []))

    def _require_bet(self, bet_id: int) -> Bet:
        bet = self._state.find_bet(bet_id)
        if bet is None:
            raise rejection(RejectReason.INVALID_BET_ID, f"bet_id {bet_id!r}")
        return bet

    # -------------------------------------------------------------------------
    # Снапшоты
    # -------------------------------------------------------------------------

    def snapshot(self) -> LedgerSnapshot:
        """Снапшот состояния, проверенный по контракту ledger_snapshot."""
        snapshot = LedgerSnapshot(
            operator=self.owner,
            custody_identity=self.config.custody_identity,
            payout_mode=self.config.payout_mode,
            teams=list(self._state.teams),
            bets=list(self._state.bets),
            stakes=list(self._state.stakes.values()),
            memberships=[
                SideMembership(bet_id=bet_id, team_id=team_id, bettors=list(bettors))
                for (bet_id, team_id), bettors in self._state.members.items()
            ],
            events=list(self._state.events),
        )
        get_contract("ledger_snapshot").validate_model(snapshot)
        return snapshot

    @classmethod
    def from_snapshot(cls, token: TokenPort, snapshot: LedgerSnapshot) -> "BettingProtocol":
        """
        Восстановление ledger из снапшота.

        Балансы custody в токене не переносятся: токен должен уже держать
        средства, соответствующие снапшоту.
        """
        get_contract("ledger_snapshot").validate_model(snapshot)

        protocol = cls(
            token,
            snapshot.operator,
            LedgerConfig(
                custody_identity=snapshot.custody_identity,
                payout_mode=snapshot.payout_mode,
            ),
        )
        state = protocol._state
        state.teams = list(snapshot.teams)
        state.bets = list(snapshot.bets)
        state.stakes = {(stake.bet_id, stake.bettor): stake for stake in snapshot.stakes}
        state.members = {
            (m.bet_id, m.team_id): list(m.bettors) for m in snapshot.memberships
        }
        # Порядок ставок bettor восстанавливается из журнала первых pledge
        for event in snapshot.events:
            if event.event_type != EventType.FUNDS_PLEDGED:
                continue
            bet_ids = state.bets_by_bettor.setdefault(event.bettor, [])
            if event.bet_id not in bet_ids:
                bet_ids.append(event.bet_id)
        state.events = list(snapshot.events)
        protocol._dispatched_seq = len(state.events)
        return protocol
