"""Bet State Machine — жизненный цикл ставки.

Состояния:
- INACTIVE: начальное, pledge запрещены
- ACTIVE: ставка открыта, принимаются pledge
- COMPLETED: терминальное, победитель объявлен

Переходы:
- INACTIVE → ACTIVE (activate)
- ACTIVE → INACTIVE (deactivate, только пока нет ни одного stake)
- ACTIVE → COMPLETED (settle)
Из COMPLETED переходов нет.
"""

from dataclasses import dataclass

from betting_ledger.core.domain.bet import BetStatus
from betting_ledger.core.errors import RejectReason


@dataclass(frozen=True)
class BetTransitionResult:
    """Результат оценки перехода статуса ставки."""

    transition_allowed: bool
    block_reason: str

    previous_status: BetStatus
    new_status: BetStatus

    # Диагностика
    details: str


class BetStateMachine:
    """Bet State Machine.

    Stateless: текущий статус и количество stake передаются в
    evaluate_transition, решение возвращается как BetTransitionResult.
    Сама машина ничего не мутирует, это делает BetRegistry.

    Порядок проверок для каждой цели:
    - ACTIVE: уже ACTIVE → already active; COMPLETED → bet already completed
    - INACTIVE: не ACTIVE → bet already inactive; есть stake → bettors already betted
    - COMPLETED: INACTIVE → bet inactive; COMPLETED → team already won
    """

    def evaluate_transition(
        self,
        current_status: BetStatus,
        target_status: BetStatus,
        stake_count: int = 0,
    ) -> BetTransitionResult:
        """Оценка перехода current_status → target_status.

        Args:
            current_status: текущий статус ставки
            target_status: запрошенный статус
            stake_count: количество stake, уже записанных на ставку

        Returns:
            BetTransitionResult с решением
        """
        if target_status == BetStatus.ACTIVE:
            return self._evaluate_activate(current_status)

        if target_status == BetStatus.INACTIVE:
            return self._evaluate_deactivate(current_status, stake_count)

        return self._evaluate_complete(current_status)

    def _evaluate_activate(self, current_status: BetStatus) -> BetTransitionResult:
        if current_status == BetStatus.ACTIVE:
            return self._refuse(current_status, BetStatus.ACTIVE, RejectReason.ALREADY_ACTIVE)
        if current_status == BetStatus.COMPLETED:
            return self._refuse(
                current_status, BetStatus.ACTIVE, RejectReason.BET_ALREADY_COMPLETED
            )
        return self._allow(current_status, BetStatus.ACTIVE)

    def _evaluate_deactivate(
        self, current_status: BetStatus, stake_count: int
    ) -> BetTransitionResult:
        # Деактивировать можно только то, что сейчас ACTIVE
        if current_status != BetStatus.ACTIVE:
            return self._refuse(
                current_status, BetStatus.INACTIVE, RejectReason.BET_ALREADY_INACTIVE
            )
        # Ставку со stake отозвать нельзя
        if stake_count > 0:
            return self._refuse(
                current_status,
                BetStatus.INACTIVE,
                RejectReason.BETTORS_ALREADY_BETTED,
                f"{stake_count} stake(s) recorded",
            )
        return self._allow(current_status, BetStatus.INACTIVE)

    def _evaluate_complete(self, current_status: BetStatus) -> BetTransitionResult:
        if current_status == BetStatus.INACTIVE:
            return self._refuse(current_status, BetStatus.COMPLETED, RejectReason.BET_INACTIVE)
        if current_status == BetStatus.COMPLETED:
            # Replay guard
            return self._refuse(
                current_status, BetStatus.COMPLETED, RejectReason.TEAM_ALREADY_WON
            )
        return self._allow(current_status, BetStatus.COMPLETED)

    def _allow(self, current: BetStatus, target: BetStatus) -> BetTransitionResult:
        return BetTransitionResult(
            transition_allowed=True,
            block_reason="",
            previous_status=current,
            new_status=target,
            details=f"{current.value} → {target.value}",
        )

    def _refuse(
        self,
        current: BetStatus,
        target: BetStatus,
        reason: RejectReason,
        details: str = "",
    ) -> BetTransitionResult:
        return BetTransitionResult(
            transition_allowed=False,
            block_reason=reason,
            previous_status=current,
            new_status=current,
            details=details or f"{current.value} → {target.value} refused: {reason.value}",
        )
