"""
TeamRegistry — Реестр команд

- add_team: следующий id начиная с 1, команда активна, имя только str
- set_team_inactive / set_team_active: переключение флага
- Деактивация не влияет на уже созданные ставки
"""

import logging

from betting_ledger.core.domain.events import EventType
from betting_ledger.core.domain.team import Team
from betting_ledger.core.domain.units import is_team_name
from betting_ledger.core.errors import RejectReason, rejection
from betting_ledger.gatekeeper.enforcement import enforce
from betting_ledger.gatekeeper.gates.gate_00_operator_access import Gate00OperatorAccess
from betting_ledger.ledger.state import LedgerState

logger = logging.getLogger(__name__)


class TeamRegistry:
    """Реестр команд поверх LedgerState."""

    def __init__(self, state: LedgerState, access_gate: Gate00OperatorAccess):
        self._state = state
        self._access_gate = access_gate

    @property
    def team_count(self) -> int:
        return len(self._state.teams)

    def add_team(self, caller: str, name: str) -> int:
        """
        Регистрация новой команды.

        Args:
            caller: вызывающий (должен быть оператором)
            name: название (уникальность не требуется)

        Returns:
            Выданный team_id
        """
        enforce(self._access_gate.evaluate(caller))
        if not is_team_name(name):
            raise rejection(
                RejectReason.INVALID_TEAM_NAME, f"name must be str, got {type(name).__name__}"
            )

        team_id = self.team_count + 1
        self._state.add_team(Team(team_id=team_id, name=name, is_active=True))
        self._state.emit(EventType.TEAM_ADDED, team_id=team_id)

        logger.info("team added: id=%s name=%r", team_id, name)
        return team_id

    def set_team_inactive(self, caller: str, team_id: int) -> None:
        """Деактивация команды."""
        self._set_active(caller, team_id, False)

    def set_team_active(self, caller: str, team_id: int) -> None:
        """Повторная активация команды."""
        self._set_active(caller, team_id, True)

    def _set_active(self, caller: str, team_id: int, is_active: bool) -> None:
        enforce(self._access_gate.evaluate(caller))

        team = self._state.find_team(team_id)
        if team is None:
            raise rejection(
                RejectReason.INVALID_TEAM_ID, f"team_id {team_id!r} not in 1..{self.team_count}"
            )

        if team.is_active == is_active:
            reason = RejectReason.ALREADY_ACTIVE if is_active else RejectReason.ALREADY_INACTIVE
            raise rejection(reason, f"team {team_id}")

        self._state.replace_team(team.model_copy(update={"is_active": is_active}))
        self._state.emit(
            EventType.TEAM_ACTIVE if is_active else EventType.TEAM_INACTIVE, team_id=team_id
        )

        logger.info("team %s active=%s", team_id, is_active)
