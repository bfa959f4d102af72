"""Brand Table Loader — загрузка прайс-таблиц брендов

Реестр доступных брендов и загрузка их статических таблиц:
- JSON файл бренда читается из каталога данных (по умолчанию — bundled data/)
- Сырые данные проверяются JSON Schema контрактом brand_table
- Затем парсятся в immutable BrandTable

Любая ошибка загрузки (неизвестный id, нет файла, битый JSON, нарушение схемы)
не пропагирует в движок: логируется и заменяется таблицей бренда по умолчанию.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Final

from jsonschema import ValidationError as SchemaValidationError
from pydantic import ValidationError as ModelValidationError

from src.core.contracts import brand_table_errors, validate_brand_table
from src.core.domain.brand_table import BrandInfo, BrandTable
from src.core.settings import settings

logger = logging.getLogger(__name__)


# =============================================================================
# REGISTRY
# =============================================================================

AVAILABLE_BRANDS: Final[tuple[BrandInfo, ...]] = (
    BrandInfo(id="enterprise", name="Enterprise", data_file="enterprise.json"),
    BrandInfo(id="brand2", name="Brand 2 (Example)", data_file="brand2.json"),
)

_LOAD_ERRORS = (OSError, json.JSONDecodeError, SchemaValidationError, ModelValidationError)


class BrandDataError(RuntimeError):
    """Таблица бренда по умолчанию не загружается (ошибка поставки данных)."""


def list_available_brands() -> list[BrandInfo]:
    """Список брендов для выбора в UI."""
    return list(AVAILABLE_BRANDS)


def find_brand(brand_id: str) -> BrandInfo | None:
    """Запись реестра по id или None."""
    for brand in AVAILABLE_BRANDS:
        if brand.id == brand_id:
            return brand
    return None


def get_brand_by_id(brand_id: str) -> BrandInfo:
    """Запись реестра по id; неизвестный id → первый бренд реестра."""
    return find_brand(brand_id) or AVAILABLE_BRANDS[0]


# =============================================================================
# LOADING
# =============================================================================


def read_brand_table(path: Path) -> BrandTable:
    """Чтение и валидация одного JSON файла бренда.

    Raises:
        OSError: файл не читается
        json.JSONDecodeError: файл не является JSON
        jsonschema.ValidationError: данные нарушают контракт brand_table
        pydantic.ValidationError: данные не парсятся в BrandTable
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    try:
        validate_brand_table(raw)
    except SchemaValidationError:
        for violation in brand_table_errors(raw):
            logger.error("%s violates brand_table contract: %s", path.name, violation)
        raise

    return BrandTable.model_validate(raw)


@lru_cache(maxsize=None)
def _load_cached(brand_id: str, data_dir: Path, default_brand_id: str) -> BrandTable:
    brand = find_brand(brand_id)

    if brand is not None:
        try:
            table = read_brand_table(data_dir / brand.data_file)
            logger.debug("Loaded brand table %s from %s", brand_id, brand.data_file)
            return table
        except _LOAD_ERRORS as e:
            logger.error("Error loading brand data for %s: %s", brand_id, e)
    else:
        logger.warning("Brand %s not found, falling back to %s", brand_id, default_brand_id)

    default = find_brand(default_brand_id)
    if default is None:
        raise BrandDataError(f"Default brand {default_brand_id!r} is not registered")
    if default.id == brand_id:
        raise BrandDataError(f"Default brand data {default.data_file!r} could not be loaded")

    return _load_cached(default.id, data_dir, default_brand_id)


def load_brand_data(
    brand_id: str,
    data_dir: Path | None = None,
    default_brand_id: str | None = None,
) -> BrandTable:
    """Загрузка прайс-таблицы бренда с fallback на бренд по умолчанию.

    Таблицы immutable, поэтому результат кэшируется.

    Args:
        brand_id: id бренда из реестра
        data_dir: каталог JSON файлов (default: settings.brand_data_dir)
        default_brand_id: бренд для fallback (default: settings.default_brand_id)

    Returns:
        BrandTable запрошенного бренда или бренда по умолчанию

    Raises:
        BrandDataError: если не загружается даже бренд по умолчанию
    """
    return _load_cached(
        brand_id,
        Path(data_dir or settings.brand_data_dir),
        default_brand_id or settings.default_brand_id,
    )


def clear_brand_cache() -> None:
    """Сброс кэша загруженных таблиц (смена каталога данных, тесты)."""
    _load_cached.cache_clear()
