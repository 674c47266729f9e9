"""Tokens — порт внешнего токена и эталонная реализация в памяти."""

from .in_memory import InMemoryAccount, InMemoryToken
from .port import CheckpointableToken, TokenPort

__all__ = [
    "TokenPort",
    "CheckpointableToken",
    "InMemoryToken",
    "InMemoryAccount",
]
