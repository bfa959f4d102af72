"""
Brand Table Contract

Проверка сырых JSON таблиц брендов по формальному контракту (JSON Schema
Draft 2020-12) до парсинга в pydantic модели. Контракт ловит ошибки
поставки данных: неизвестную категорию или таблицу, запись без range,
нецелую или отрицательную цену.

Схемы лежат в schema/ рядом с модулем и устанавливаются вместе с пакетом.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator, Mapping

import jsonschema
from jsonschema import Draft202012Validator, ValidationError

SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """Чтение схем из каталога с meta-валидацией и кэшем по имени."""

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or SCHEMA_DIR
        if not self._schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        self._schemas: dict[str, dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> dict[str, Any]:
        """
        Схема по имени файла без расширения ("brand_table").

        Raises:
            FileNotFoundError: нет файла <schema_name>.json
            json.JSONDecodeError: файл не JSON
            ValueError: файл не проходит meta-валидацию Draft 2020-12
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        path = self._schema_dir / f"{schema_name}.json"
        if not path.is_file():
            raise FileNotFoundError(f"Schema not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e.message}")

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


def describe_error(error: ValidationError) -> str:
    """Нарушение с путём до поля: "single_vision/Minus Comp/0/HC: -1 is less than ..."."""
    location = "/".join(str(part) for part in error.absolute_path) or "<root>"
    return f"{location}: {error.message}"


class ContractValidator:
    """Валидатор данных одного контракта."""

    def __init__(self, schema_name: str, loader: SchemaLoader | None = None):
        self.schema_name = schema_name
        self.schema = (loader or _SCHEMA_LOADER).load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Mapping[str, Any]) -> None:
        """
        Raises:
            ValidationError: первое (наиболее релевантное) нарушение контракта
        """
        self.validator.validate(data)

    def is_valid(self, data: Mapping[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Mapping[str, Any]) -> Iterator[ValidationError]:
        """Все нарушения контракта, а не только первое."""
        return self.validator.iter_errors(data)

    def error_messages(self, data: Mapping[str, Any]) -> list[str]:
        """Все нарушения в читаемом виде, упорядоченные по пути до поля."""
        errors = sorted(self.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
        return [describe_error(e) for e in errors]


class BrandTableValidator(ContractValidator):
    """Контракт brand_table (schema/brand_table.json)."""

    def __init__(self, loader: SchemaLoader | None = None):
        super().__init__("brand_table", loader)


@lru_cache(maxsize=1)
def _brand_table_validator() -> BrandTableValidator:
    return BrandTableValidator()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_brand_table(data: Mapping[str, Any]) -> None:
    """
    Проверка сырой таблицы бренда (как прочитана из JSON).

    Raises:
        ValidationError: данные нарушают контракт brand_table
    """
    _brand_table_validator().validate(data)


def brand_table_errors(data: Mapping[str, Any]) -> list[str]:
    """Все нарушения контракта brand_table; пустой список — данные валидны."""
    return _brand_table_validator().error_messages(data)
