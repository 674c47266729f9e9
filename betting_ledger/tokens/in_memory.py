"""InMemoryToken — эталонный fungible-token в памяти.

Повторяет поведение ERC20-подобного токена, которым пользуется ledger:
mint / approve / allowance / transfer / transfer_from / balance_of.
Отказ (недостаточный баланс или allowance) возвращается как False.

Сам токен хранит все счета, поэтому его переводы принимают отправителя
явно. Ledger получает InMemoryAccount (token.account(custody)), который
привязывает custody и реализует TokenPort.

on_transfer вызывается после каждого успешного перевода и позволяет
смоделировать reentrant-вызов получателя.
"""

import logging
from typing import Callable, Dict, Optional, Tuple

from betting_ledger.core.domain.units import is_amount

logger = logging.getLogger(__name__)

TransferHook = Callable[[str, str, int], None]
TokenCheckpoint = Tuple[Dict[str, int], Dict[Tuple[str, str], int]]


class InMemoryToken:
    """Токен с балансами и allowance в словарях."""

    def __init__(self, on_transfer: Optional[TransferHook] = None):
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self.on_transfer = on_transfer

    def account(self, identity: str) -> "InMemoryAccount":
        """Счёт identity в форме TokenPort."""
        return InMemoryAccount(self, identity)

    # -------------------------------------------------------------------------
    # Чтение
    # -------------------------------------------------------------------------

    def balance_of(self, identity: str) -> int:
        return self._balances.get(identity, 0)

    def allowance(self, holder: str, spender: str) -> int:
        return self._allowances.get((holder, spender), 0)

    @property
    def total_supply(self) -> int:
        return sum(self._balances.values())

    # -------------------------------------------------------------------------
    # Мутации
    # -------------------------------------------------------------------------

    def mint(self, recipient: str, amount: int) -> None:
        """Выпуск amount на recipient."""
        if not is_amount(amount) or amount < 0:
            raise ValueError(f"amount must be a non-negative int, got {amount!r}")
        self._balances[recipient] = self.balance_of(recipient) + amount

    def approve(self, holder: str, spender: str, amount: int) -> bool:
        """Разрешение spender списывать до amount с holder."""
        if not is_amount(amount) or amount < 0:
            return False
        self._allowances[(holder, spender)] = amount
        return True

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """Перевод с sender на recipient."""
        if not self._move(sender, recipient, amount):
            return False
        self._notify(sender, recipient, amount)
        return True

    def transfer_from(
        self,
        holder: str,
        recipient: str,
        amount: int,
        spender: Optional[str] = None,
    ) -> bool:
        """Списание с holder по allowance.

        Args:
            holder: владелец средств
            recipient: получатель
            amount: сумма
            spender: кто тратит allowance (по умолчанию recipient)
        """
        spender = spender or recipient
        allowed = self.allowance(holder, spender)
        if not is_amount(amount) or amount > allowed:
            logger.debug("transfer_from refused: allowance %s < %s", allowed, amount)
            return False
        if not self._move(holder, recipient, amount):
            return False
        self._allowances[(holder, spender)] = allowed - amount
        self._notify(holder, recipient, amount)
        return True

    # -------------------------------------------------------------------------
    # Checkpoint / restore
    # -------------------------------------------------------------------------

    def checkpoint(self) -> TokenCheckpoint:
        return dict(self._balances), dict(self._allowances)

    def restore(self, checkpoint: TokenCheckpoint) -> None:
        balances, allowances = checkpoint
        self._balances = dict(balances)
        self._allowances = dict(allowances)

    # -------------------------------------------------------------------------
    # Внутреннее
    # -------------------------------------------------------------------------

    def _move(self, sender: str, recipient: str, amount: int) -> bool:
        if not is_amount(amount) or amount < 0:
            return False
        balance = self.balance_of(sender)
        if balance < amount:
            logger.debug("transfer refused: %s has %s < %s", sender, balance, amount)
            return False
        self._balances[sender] = balance - amount
        self._balances[recipient] = self.balance_of(recipient) + amount
        return True

    def _notify(self, sender: str, recipient: str, amount: int) -> None:
        if self.on_transfer is not None:
            self.on_transfer(sender, recipient, amount)


class InMemoryAccount:
    """Счёт одного держателя в InMemoryToken (TokenPort + CheckpointableToken)."""

    def __init__(self, token: InMemoryToken, identity: str):
        self.token = token
        self.identity = identity

    def transfer_from(self, holder: str, recipient: str, amount: int) -> bool:
        return self.token.transfer_from(holder, recipient, amount, spender=self.identity)

    def transfer(self, recipient: str, amount: int) -> bool:
        return self.token.transfer(self.identity, recipient, amount)

    def balance_of(self, identity: str) -> int:
        return self.token.balance_of(identity)

    def checkpoint(self) -> TokenCheckpoint:
        return self.token.checkpoint()

    def restore(self, checkpoint: TokenCheckpoint) -> None:
        self.token.restore(checkpoint)
