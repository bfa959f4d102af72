"""BrandTable — Модель прайс-таблицы бренда

Immutable Pydantic модели статической таблицы цен бренда:
- PriceRangeRecord: строка таблицы (range-строка + цены по опциям линз)
- BrandTable: single_vision категории + ADD/CYL/COMP/PROGRESSIVE таблицы
- BrandInfo: запись реестра доступных брендов

Совместимость с JSON Schema (src/core/contracts/schema/brand_table.json).
На диске запись хранится плоско: {"range": "-6.0 to -2.0", "HC": 500, ...}.
"""

from typing import Any, Final

from pydantic import BaseModel, Field, model_validator

from .prescription import Category


# =============================================================================
# TABLE KEYS
# =============================================================================

BIFOCAL_KT: Final[str] = "Bifocal KT"
CYL_KT: Final[str] = "CYL_KT"
COMP_KT: Final[str] = "COMP_KT"
PROGRESSIVE_SPH: Final[str] = "PROGRESSIVE_SPH"
PROGRESSIVE_CYL: Final[str] = "PROGRESSIVE__CYL"
PROGRESSIVE_COMP: Final[str] = "PROGRESSIVE_COMP"

# Имя таблицы на диске → имя поля модели
TABLE_FIELDS: Final[dict[str, str]] = {
    BIFOCAL_KT: "bifocal_kt",
    CYL_KT: "cyl_kt",
    COMP_KT: "comp_kt",
    PROGRESSIVE_SPH: "progressive_sph",
    PROGRESSIVE_CYL: "progressive_cyl",
    PROGRESSIVE_COMP: "progressive_comp",
}


# =============================================================================
# MODELS
# =============================================================================


class PriceRangeRecord(BaseModel):
    """Строка прайс-таблицы.

    - range: закодированный диапазон рецептов (одна из range-грамматик)
    - prices: опция линзы (HC, ARC, BLUCUT, ...) → цена в минимальных единицах
    """

    range: str = Field(..., description="Encoded range spec")
    prices: dict[str, int] = Field(default_factory=dict, description="Lens option → price")

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _collect_flat_prices(cls, data: Any) -> Any:
        # Плоская запись с диска: все ключи кроме range это цены
        if isinstance(data, dict) and "prices" not in data:
            return {
                "range": data.get("range"),
                "prices": {k: v for k, v in data.items() if k != "range"},
            }
        return data

    def to_flat_dict(self) -> dict[str, Any]:
        """Плоское представление записи (формат хранения на диске)."""
        return {"range": self.range, **self.prices}


class BrandTable(BaseModel):
    """Прайс-таблица бренда.

    Опциональные таблицы объявлены явно и по умолчанию пусты:
    отсутствие таблицы означает пустой список кандидатов, а не ошибку.
    """

    brand: str = Field(..., description="Brand display name")
    single_vision: dict[Category, list[PriceRangeRecord]] = Field(
        default_factory=dict, description="Single vision categories"
    )
    bifocal_kt: list[PriceRangeRecord] = Field(default_factory=list, alias=BIFOCAL_KT)
    cyl_kt: list[PriceRangeRecord] = Field(default_factory=list, alias=CYL_KT)
    comp_kt: list[PriceRangeRecord] = Field(default_factory=list, alias=COMP_KT)
    progressive_sph: list[PriceRangeRecord] = Field(default_factory=list, alias=PROGRESSIVE_SPH)
    progressive_cyl: list[PriceRangeRecord] = Field(default_factory=list, alias=PROGRESSIVE_CYL)
    progressive_comp: list[PriceRangeRecord] = Field(default_factory=list, alias=PROGRESSIVE_COMP)

    model_config = {"frozen": True, "populate_by_name": True}

    def category_records(self, category: Category) -> list[PriceRangeRecord]:
        """Записи single-vision категории (пустой список если категории нет)."""
        return self.single_vision.get(category, [])

    def records_for(self, table_key: str) -> list[PriceRangeRecord]:
        """Записи таблицы по её имени на диске ("CYL_KT", "Bifocal KT", ...).

        Raises:
            KeyError: Если имя таблицы неизвестно
        """
        return getattr(self, TABLE_FIELDS[table_key])


class BrandInfo(BaseModel):
    """Запись реестра брендов."""

    id: str = Field(..., description="Brand id")
    name: str = Field(..., description="Brand display name")
    data_file: str = Field(..., description="Bundled JSON file name")

    model_config = {"frozen": True}
