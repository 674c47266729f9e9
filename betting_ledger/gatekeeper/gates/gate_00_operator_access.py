"""GATE 0: Operator Access

Первый gate для каждой мутирующей операции оператора:
- add_team / set_team_active / set_team_inactive
- create_bet / set_bet_active / set_bet_inactive
- settle

Хранит идентичность единственного оператора (deployer), заданную при
создании. Передачи владения нет.
"""

from dataclasses import dataclass

from betting_ledger.core.errors import RejectReason


@dataclass(frozen=True)
class Gate00Result:
    """Результат GATE 0."""

    entry_allowed: bool
    block_reason: str

    caller: str
    operator: str

    details: str


class Gate00OperatorAccess:
    """GATE 0: проверка, что вызывающий — оператор."""

    def __init__(self, operator: str):
        """
        Args:
            operator: идентичность оператора (непустая строка)
        """
        if not isinstance(operator, str) or not operator:
            raise ValueError(f"operator must be a non-empty string, got {operator!r}")
        self._operator = operator

    @property
    def operator(self) -> str:
        return self._operator

    def evaluate(self, caller: str) -> Gate00Result:
        """Оценка GATE 0.

        Args:
            caller: идентичность вызывающего

        Returns:
            Gate00Result с решением о допуске
        """
        if caller != self._operator:
            return Gate00Result(
                entry_allowed=False,
                block_reason=RejectReason.NOT_OWNER,
                caller=caller,
                operator=self._operator,
                details=f"caller {caller!r} is not the operator",
            )

        return Gate00Result(
            entry_allowed=True,
            block_reason="",
            caller=caller,
            operator=self._operator,
            details="PASS: operator",
        )
