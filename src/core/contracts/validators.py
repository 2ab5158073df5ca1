"""
JSON Schema Contract Validators

Модуль для валидации payload событий ledger согласно формальным
JSON Schema контрактам. Использует библиотеку jsonschema.

Схемы:
- currency_added.json
- rate_changed.json
- staked.json
- withdrawn.json
- fees_collected.json
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Автоматически находит схемы в contracts/schema/ относительно корня проекта.
    """

    def __init__(self, schema_dir: Path | None = None):
        # Корень проекта — 4 уровня вверх от этого файла
        self._schema_dir = schema_dir or (
            Path(__file__).parent.parent.parent.parent / "contracts" / "schema"
        )
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def available(self) -> list[str]:
        """Имена всех схем в каталоге (без расширения)."""
        return sorted(p.stem for p in self._schema_dir.glob("*.json"))

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'staked')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            json.JSONDecodeError: Если файл не является валидным JSON
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Meta-validation
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


# Загрузчик по умолчанию (кэш схем общий для всех валидаторов)
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str, loader: SchemaLoader | None = None):
        self.schema_name = schema_name
        self.schema = (loader or _SCHEMA_LOADER).load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        return self.validator.iter_errors(data)


class CurrencyAddedValidator(ContractValidator):
    def __init__(self):
        super().__init__("currency_added")


class RateChangedValidator(ContractValidator):
    def __init__(self):
        super().__init__("rate_changed")


class StakedValidator(ContractValidator):
    def __init__(self):
        super().__init__("staked")


class WithdrawnValidator(ContractValidator):
    def __init__(self):
        super().__init__("withdrawn")


class FeesCollectedValidator(ContractValidator):
    def __init__(self):
        super().__init__("fees_collected")


# =============================================================================
# EVENT DISPATCH
# =============================================================================

_VALIDATORS: Dict[str, ContractValidator] = {}


def validator_for(schema_name: str) -> ContractValidator:
    """Валидатор по имени схемы (кэшируется)."""
    validator = _VALIDATORS.get(schema_name)
    if validator is None:
        validator = ContractValidator(schema_name)
        _VALIDATORS[schema_name] = validator
    return validator


def validate_event_payload(schema_name: str, data: Dict[str, Any]) -> None:
    """
    Валидация payload события по схеме с тем же именем, что и event_type.

    Raises:
        ValidationError: Если данные не соответствуют схеме
        FileNotFoundError: Если схема для события не найдена
    """
    validator_for(schema_name).validate(data)


def validate_event(event) -> None:
    """
    Валидация LedgerEvent (pydantic модели) по её контракту.

    Raises:
        ValidationError: Если payload не соответствует схеме
    """
    validate_event_payload(event.schema_name, event.payload())
