"""
Tests for JSON Schema Contract Validators

Тестирование контракта прайс-таблицы бренда:
- Валидность самой схемы
- Валидация правильных данных (включая bundled таблицы)
- Детекция нарушений required полей
- Детекция нарушений типов и constraints (minimum/enum/additionalProperties)
- Интеграция с Pydantic моделью BrandTable
"""

import copy
import json

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    BrandTableValidator,
    SchemaLoader,
    brand_table_errors,
    validate_brand_table,
)
from src.core.domain import BrandTable, Category, PriceRangeRecord
from src.core.settings import BUNDLED_BRAND_DATA_DIR


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_brand_table():
    """Валидная таблица бренда для тестирования."""
    return {
        "brand": "Test Brand",
        "single_vision": {
            "Minus Comp": [{"range": "-6.0 to -2.0", "HC": 500, "ARC": 700}],
            "Plus Comp": [{"range": "+3.0 to +2.0", "HC": 700}],
            "SV Cross Comp": [{"range": "+1.75 to -2.0", "HC": 900}],
        },
        "Bifocal KT": [{"range": "+3/+ ADD", "HC": 650, "PG_KT_BC_BLUE": 3850}],
        "CYL_KT": [{"range": "-1, 90/180", "HC": 1000}],
        "COMP_KT": [{"range": "+2/+1 90/180°", "HC": 1200}],
    }


# =============================================================================
# TESTS - SCHEMA LOADING
# =============================================================================


def test_schema_loader_loads_brand_table_schema():
    """Проверка загрузки схемы."""
    loader = SchemaLoader()
    schema = loader.load_schema("brand_table")

    assert schema["title"] == "BrandTable"
    assert set(schema["required"]) == {"brand", "single_vision"}


def test_schema_loader_caches_schemas():
    """Проверка кэширования схем."""
    loader = SchemaLoader()

    schema1 = loader.load_schema("brand_table")
    schema2 = loader.load_schema("brand_table")

    assert schema1 is schema2


def test_schema_loader_raises_on_missing_schema():
    """Проверка ошибки при отсутствующей схеме."""
    loader = SchemaLoader()

    with pytest.raises(FileNotFoundError):
        loader.load_schema("non_existent_schema")


def test_schema_loader_rejects_invalid_schema(tmp_path):
    """Meta-validation: файл, не являющийся JSON Schema, отклоняется."""
    (tmp_path / "broken.json").write_text(json.dumps({"type": 42}), encoding="utf-8")
    loader = SchemaLoader(schema_dir=tmp_path)

    with pytest.raises(ValueError, match="Invalid JSON Schema"):
        loader.load_schema("broken")


def test_schema_loader_rejects_missing_directory(tmp_path):
    with pytest.raises(RuntimeError, match="Schema directory not found"):
        SchemaLoader(schema_dir=tmp_path / "missing")


# =============================================================================
# TESTS - BRAND TABLE VALIDATION
# =============================================================================


def test_brand_table_validator_accepts_valid_data(valid_brand_table):
    """Валидация правильной таблицы."""
    validator = BrandTableValidator()
    validator.validate(valid_brand_table)  # Не должно выбросить исключение
    assert validator.is_valid(valid_brand_table)


@pytest.mark.parametrize("file_name", ["enterprise.json", "brand2.json"])
def test_bundled_tables_satisfy_contract(file_name):
    """Bundled таблицы соответствуют контракту."""
    with open(BUNDLED_BRAND_DATA_DIR / file_name, "r", encoding="utf-8") as f:
        validate_brand_table(json.load(f))


def test_brand_table_rejects_missing_required_field(valid_brand_table):
    """Валидация отклоняет данные без обязательных полей."""
    data = copy.deepcopy(valid_brand_table)
    del data["single_vision"]

    with pytest.raises(ValidationError) as exc_info:
        validate_brand_table(data)
    assert "'single_vision' is a required property" in str(exc_info.value)


def test_brand_table_rejects_unknown_category(valid_brand_table):
    """Категории single_vision — закрытый набор."""
    data = copy.deepcopy(valid_brand_table)
    data["single_vision"]["Trifocal"] = []

    with pytest.raises(ValidationError):
        validate_brand_table(data)


def test_brand_table_rejects_unknown_table(valid_brand_table):
    """Неизвестная таблица верхнего уровня отклоняется."""
    data = copy.deepcopy(valid_brand_table)
    data["TRIFOCAL_KT"] = []

    with pytest.raises(ValidationError):
        validate_brand_table(data)


def test_brand_table_rejects_record_without_range(valid_brand_table):
    data = copy.deepcopy(valid_brand_table)
    data["CYL_KT"].append({"HC": 100})

    with pytest.raises(ValidationError) as exc_info:
        validate_brand_table(data)
    assert "'range' is a required property" in str(exc_info.value)


def test_brand_table_rejects_non_integer_price(valid_brand_table):
    data = copy.deepcopy(valid_brand_table)
    data["single_vision"]["Minus Comp"][0]["HC"] = "500"

    with pytest.raises(ValidationError) as exc_info:
        validate_brand_table(data)
    assert "is not of type 'integer'" in str(exc_info.value)


def test_brand_table_rejects_negative_price(valid_brand_table):
    data = copy.deepcopy(valid_brand_table)
    data["COMP_KT"][0]["HC"] = -1

    with pytest.raises(ValidationError):
        validate_brand_table(data)


def test_brand_table_rejects_empty_brand(valid_brand_table):
    data = copy.deepcopy(valid_brand_table)
    data["brand"] = ""

    with pytest.raises(ValidationError):
        validate_brand_table(data)


def test_iter_errors_returns_all_errors(valid_brand_table):
    """Проверка, что iter_errors возвращает все ошибки валидации."""
    validator = BrandTableValidator()

    invalid_data = copy.deepcopy(valid_brand_table)
    invalid_data["brand"] = ""  # minLength: 1 - НАРУШЕНИЕ
    invalid_data["CYL_KT"][0]["HC"] = -5  # minimum: 0 - НАРУШЕНИЕ
    invalid_data["COMP_KT"][0]["range"] = 7  # type: string - НАРУШЕНИЕ

    errors = list(validator.iter_errors(invalid_data))
    assert len(errors) >= 3


def test_brand_table_errors_name_the_field(valid_brand_table):
    """Нарушения описаны путём до поля."""
    data = copy.deepcopy(valid_brand_table)
    data["CYL_KT"][0]["HC"] = -5

    messages = brand_table_errors(data)
    assert len(messages) == 1
    assert messages[0].startswith("CYL_KT/0/HC: ")


def test_brand_table_errors_empty_for_valid_data(valid_brand_table):
    assert brand_table_errors(valid_brand_table) == []


def test_root_level_error_location():
    messages = brand_table_errors({"single_vision": {}})
    assert messages == ["<root>: 'brand' is a required property"]


# =============================================================================
# TESTS - PYDANTIC INTEGRATION
# =============================================================================


def test_brand_table_model_round_trips_flat_records(valid_brand_table):
    """Модель собирает плоские записи и отдаёт их обратно в формате диска."""
    table = BrandTable.model_validate(valid_brand_table)

    record = table.category_records(Category.MINUS_COMP)[0]
    assert record.prices == {"HC": 500, "ARC": 700}
    assert record.to_flat_dict() == valid_brand_table["single_vision"]["Minus Comp"][0]


def test_flat_record_dump_satisfies_contract():
    record = PriceRangeRecord(range="-1, 90/180", prices={"HC": 100})
    validate_brand_table({"brand": "X", "single_vision": {}, "CYL_KT": [record.to_flat_dict()]})
