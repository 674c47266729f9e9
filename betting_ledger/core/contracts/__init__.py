"""
Contract Validation Module

Модуль для валидации JSON контрактов ledger (снапшоты и события).
"""

from .validators import (
    SCHEMA_DIR,
    ContractValidator,
    ContractViolation,
    SchemaLoader,
    get_contract,
)

__all__ = [
    "SCHEMA_DIR",
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "ContractViolation",
    # Functions
    "get_contract",
]
