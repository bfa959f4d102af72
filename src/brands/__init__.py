"""Brands — реестр брендов и загрузка их прайс-таблиц.

- Статические JSON таблицы в data/
- Валидация контрактом brand_table (jsonschema) + парсинг в BrandTable (pydantic)
- Fallback на бренд по умолчанию при любой ошибке загрузки
"""

from .loader import (
    AVAILABLE_BRANDS,
    BrandDataError,
    clear_brand_cache,
    find_brand,
    get_brand_by_id,
    list_available_brands,
    load_brand_data,
    read_brand_table,
)

__all__ = [
    "AVAILABLE_BRANDS",
    "BrandDataError",
    "clear_brand_cache",
    "find_brand",
    "get_brand_by_id",
    "list_available_brands",
    "load_brand_data",
    "read_brand_table",
]
