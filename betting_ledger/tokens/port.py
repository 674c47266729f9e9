"""Token Port — интерфейс внешнего fungible-token компонента.

Ledger видит токен как собственный счёт custody (ERC20 с точки зрения
контракта-держателя): transfer() всегда списывает с custody, а
transfer_from() списывает с bettor по выданному ранее approve.
Любой не-True результат считается жёстким отказом операции.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TokenPort(Protocol):
    """Минимальный интерфейс токена, потребляемый ledger."""

    def transfer_from(self, holder: str, recipient: str, amount: int) -> bool:
        """Списание amount с holder в пользу recipient по ранее выданному approve."""
        ...

    def transfer(self, recipient: str, amount: int) -> bool:
        """Перевод amount со счёта custody на recipient."""
        ...

    def balance_of(self, identity: str) -> int:
        """Баланс identity."""
        ...


@runtime_checkable
class CheckpointableToken(Protocol):
    """Токен, умеющий откатывать собственное состояние.

    Если токен реализует этот протокол, транзакция ledger откатывает и его
    при отказе операции (в том числе после частично выполненных выплат).
    Без него уже выполненные переводы необратимы, и ledger фиксирует их
    вместо отката (см. PayoutInterrupted).
    """

    def checkpoint(self) -> Any:
        ...

    def restore(self, checkpoint: Any) -> None:
        ...
