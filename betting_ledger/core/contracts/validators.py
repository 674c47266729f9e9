"""
Ledger Contracts — JSON Schema проверка данных на границе ledger

Две точки, где данные ledger покидают процесс:
- снапшот (export / audit / восстановление) → ledger_snapshot.json
- уведомление подписчику → ledger_event.json

Pydantic модели проверяют типы внутри процесса; контракт фиксирует
формат, который видят внешние потребители, и проверяется на дампе модели
в JSON режиме (enum → строка, отсутствующие поля → null).
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator, SchemaError
from pydantic import BaseModel

SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class ContractViolation(ValueError):
    """
    Данные не соответствуют контракту.

    errors: все нарушения в виде "путь: сообщение", отсортированные по пути
    ("<root>" для ошибок верхнего уровня).
    """

    def __init__(self, contract: str, errors: List[str]):
        self.contract = contract
        self.errors = errors
        super().__init__(f"{contract}: {'; '.join(errors)}")


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """Загрузка и meta-валидация схем из каталога (с кэшем)."""

    def __init__(self, schema_dir: Optional[Path] = None):
        self.schema_dir = schema_dir or SCHEMA_DIR
        if not self.schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self.schema_dir}")
        self._cache: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, contract: str) -> Dict[str, Any]:
        """
        Raises:
            FileNotFoundError: файла схемы нет
            ValueError: файл не является валидной Draft 2020-12 схемой
        """
        if contract not in self._cache:
            path = self.schema_dir / f"{contract}.json"
            if not path.is_file():
                raise FileNotFoundError(f"Schema not found: {path}")
            schema = json.loads(path.read_text(encoding="utf-8"))
            try:
                Draft202012Validator.check_schema(schema)
            except SchemaError as e:
                raise ValueError(f"Invalid JSON Schema in {path.name}: {e.message}") from e
            self._cache[contract] = schema
        return self._cache[contract]


# =============================================================================
# CONTRACT
# =============================================================================


class ContractValidator:
    """Проверка данных против одного контракта."""

    def __init__(self, contract: str, loader: Optional[SchemaLoader] = None):
        self.contract = contract
        self._validator = Draft202012Validator((loader or SchemaLoader()).load_schema(contract))

    def errors(self, data: Any) -> List[str]:
        """Все нарушения ("путь: сообщение"), пустой список если данные валидны."""
        found = []
        for error in self._validator.iter_errors(data):
            path = "/".join(str(part) for part in error.absolute_path) or "<root>"
            found.append(f"{path}: {error.message}")
        return sorted(found)

    def is_valid(self, data: Any) -> bool:
        return self._validator.is_valid(data)

    def validate(self, data: Any) -> None:
        """
        Raises:
            ContractViolation: со списком всех нарушений
        """
        found = self.errors(data)
        if found:
            raise ContractViolation(self.contract, found)

    def validate_model(self, model: BaseModel) -> Dict[str, Any]:
        """Проверка JSON-дампа pydantic модели. Возвращает дамп."""
        data = model.model_dump(mode="json")
        self.validate(data)
        return data


@lru_cache(maxsize=None)
def get_contract(contract: str) -> ContractValidator:
    """Валидатор контракта из каталога пакета (один экземпляр на контракт)."""
    return ContractValidator(contract)
