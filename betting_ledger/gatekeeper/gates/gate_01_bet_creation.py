"""GATE 1: Bet Creation

Проверка параметров новой ставки (после GATE 0).

Порядок проверок:
1. team_a != team_b → "same teams"
2. team_a выдан реестром → "Invalid teamAId"
3. team_b выдан реестром → "Invalid teamBId"
4. обе команды активны → "team's inactive"
5. min_stake > 0 → "Invalid amount"
"""

from dataclasses import dataclass
from typing import Sequence

from betting_ledger.core.domain.team import Team
from betting_ledger.core.domain.units import is_positive_amount, is_valid_team_id
from betting_ledger.core.errors import RejectReason


@dataclass(frozen=True)
class Gate01Result:
    """Результат GATE 1."""

    entry_allowed: bool
    block_reason: str

    team_a_id: int
    team_b_id: int
    min_stake: int

    details: str


class Gate01BetCreation:
    """GATE 1: валидация параметров create_bet."""

    def evaluate(
        self,
        team_a_id: int,
        team_b_id: int,
        min_stake: int,
        teams: Sequence[Team],
    ) -> Gate01Result:
        """Оценка GATE 1.

        Args:
            team_a_id: сторона A
            team_b_id: сторона B
            min_stake: минимальный pledge
            teams: все зарегистрированные команды (индекс = team_id - 1)

        Returns:
            Gate01Result с решением о допуске
        """

        def block(reason: RejectReason, details: str) -> Gate01Result:
            return Gate01Result(
                entry_allowed=False,
                block_reason=reason,
                team_a_id=team_a_id,
                team_b_id=team_b_id,
                min_stake=min_stake,
                details=details,
            )

        team_count = len(teams)

        if team_a_id == team_b_id:
            return block(RejectReason.SAME_TEAMS, f"team {team_a_id} on both sides")

        if not is_valid_team_id(team_a_id, team_count):
            return block(
                RejectReason.INVALID_TEAM_A, f"team_a_id {team_a_id!r} not in 1..{team_count}"
            )

        if not is_valid_team_id(team_b_id, team_count):
            return block(
                RejectReason.INVALID_TEAM_B, f"team_b_id {team_b_id!r} not in 1..{team_count}"
            )

        inactive = [
            team_id for team_id in (team_a_id, team_b_id) if not teams[team_id - 1].is_active
        ]
        if inactive:
            return block(RejectReason.TEAM_INACTIVE, f"inactive teams: {inactive}")

        if not is_positive_amount(min_stake):
            return block(RejectReason.INVALID_AMOUNT, f"min_stake {min_stake!r} must be > 0")

        return Gate01Result(
            entry_allowed=True,
            block_reason="",
            team_a_id=team_a_id,
            team_b_id=team_b_id,
            min_stake=min_stake,
            details=f"PASS: {team_a_id} vs {team_b_id}, min_stake={min_stake}",
        )
