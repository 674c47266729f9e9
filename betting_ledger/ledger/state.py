"""
LedgerState — Общее состояние реестров

Arena-style коллекции, индексированные последовательными id. Между
сущностями нет ссылок, только поиск по id:
- teams[team_id - 1]
- bets[bet_id]
- stakes[(bet_id, bettor)]
- members[(bet_id, team_id)]: упорядоченный список bettor без дубликатов
- bets_by_bettor[bettor]: bet_id в порядке первого pledge
- events: журнал уведомлений

Состояние мутирует только одна выполняющаяся операция, и только через
методы этого класса. Каждая мутация пишет обратную операцию в журнал
отмены: checkpoint() это позиция в журнале, restore() откатывает записи
после неё. Стоимость отката пропорциональна числу изменённых ключей, а не
размеру ledger.

seal() запрещает откат уже записанных мутаций: вложенная операция,
зафиксированная через необратимый токен, переживает отказ внешней.
"""

from typing import (
    Any,
    Callable,
    Dict,
    List,
    MutableMapping,
    MutableSequence,
    Optional,
    Tuple,
    Union,
)

from betting_ledger.core.contracts import get_contract
from betting_ledger.core.domain.bet import Bet
from betting_ledger.core.domain.events import EventType, LedgerEvent
from betting_ledger.core.domain.stake import Stake
from betting_ledger.core.domain.team import Team
from betting_ledger.core.domain.units import is_valid_bet_id, is_valid_team_id

UndoAction = Callable[[], Any]


class LedgerState:
    """Контейнер всех коллекций ledger с журналом отмены."""

    def __init__(self):
        self.teams: List[Team] = []
        self.bets: List[Bet] = []
        self.stakes: Dict[Tuple[int, str], Stake] = {}
        self.members: Dict[Tuple[int, int], List[str]] = {}
        self.bets_by_bettor: Dict[str, List[int]] = {}
        self.events: List[LedgerEvent] = []

        self._journal: List[UndoAction] = []
        self._sealed = 0
        self._event_contract = get_contract("ledger_event")

    # -------------------------------------------------------------------------
    # Поиск
    # -------------------------------------------------------------------------

    def find_team(self, team_id: int) -> Optional[Team]:
        """Команда по id или None, если id не выдан."""
        if not is_valid_team_id(team_id, len(self.teams)):
            return None
        return self.teams[team_id - 1]

    def find_bet(self, bet_id: int) -> Optional[Bet]:
        """Ставка по id или None, если id не выдан."""
        if not is_valid_bet_id(bet_id, len(self.bets)):
            return None
        return self.bets[bet_id]

    def find_stake(self, bet_id: int, bettor: str) -> Optional[Stake]:
        return self.stakes.get((bet_id, bettor))

    def side_members(self, bet_id: int, team_id: int) -> List[str]:
        """Участники стороны (копия списка)."""
        return list(self.members.get((bet_id, team_id), []))

    def stake_count(self, bet_id: int) -> int:
        """Количество stake, записанных на ставку."""
        bet = self.bets[bet_id]
        return len(self.members.get((bet_id, bet.team_a_id), [])) + len(
            self.members.get((bet_id, bet.team_b_id), [])
        )

    # -------------------------------------------------------------------------
    # Мутации
    # -------------------------------------------------------------------------

    def add_team(self, team: Team) -> None:
        self._append(self.teams, team)

    def replace_team(self, team: Team) -> None:
        self._set(self.teams, team.team_id - 1, team)

    def add_bet(self, bet: Bet) -> None:
        self._append(self.bets, bet)

    def replace_bet(self, bet: Bet) -> None:
        self._set(self.bets, bet.bet_id, bet)

    def put_stake(self, stake: Stake) -> None:
        self._set(self.stakes, (stake.bet_id, stake.bettor), stake)

    def add_side_member(self, bet_id: int, team_id: int, bettor: str) -> None:
        """Добавление bettor в список стороны (вызывается на первом pledge)."""
        key = (bet_id, team_id)
        if key not in self.members:
            self._set(self.members, key, [])
        self._append(self.members[key], bettor)

    def add_bettor_bet(self, bettor: str, bet_id: int) -> None:
        if bettor not in self.bets_by_bettor:
            self._set(self.bets_by_bettor, bettor, [])
        self._append(self.bets_by_bettor[bettor], bet_id)

    def emit(self, event_type: EventType, **fields) -> LedgerEvent:
        """Добавление уведомления в журнал (проверяется по контракту ledger_event)."""
        event = LedgerEvent(seq=len(self.events), event_type=event_type, **fields)
        self._event_contract.validate_model(event)
        self._append(self.events, event)
        return event

    # -------------------------------------------------------------------------
    # Checkpoint / restore
    # -------------------------------------------------------------------------

    def checkpoint(self) -> int:
        """Позиция в журнале отмены."""
        return len(self._journal)

    def restore(self, checkpoint: int) -> None:
        """Откат всех мутаций после checkpoint (в обратном порядке), но не глубже seal."""
        floor = max(checkpoint, self._sealed)
        while len(self._journal) > floor:
            undo = self._journal.pop()
            undo()

    def seal(self) -> None:
        self._sealed = len(self._journal)

    def commit(self) -> None:
        """Фиксация внешней транзакции: журнал больше не нужен."""
        self._journal.clear()
        self._sealed = 0

    def _append(self, items: MutableSequence, value: Any) -> None:
        items.append(value)
        self._journal.append(items.pop)

    def _set(
        self, container: Union[MutableMapping, MutableSequence], key: Any, value: Any
    ) -> None:
        if isinstance(container, dict) and key not in container:
            self._journal.append(lambda: container.pop(key))
        else:
            previous = container[key]
            self._journal.append(lambda: container.__setitem__(key, previous))
        container[key] = value
