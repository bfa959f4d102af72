"""MatchResult — Результат подбора ценовой категории линз

Immutable Pydantic модели результата одного расчёта:
- RangeMatch: совпавшая запись таблицы + форма рецепта, давшая совпадение
- CategoryInfo: категория, приоритетный уровень и форма рецепта
- MatchResult: полный результат (или ошибка валидации)

Инвариант: при ошибке заполнено только error (+ mode); при успехе error is None,
а best_match может быть None (валидный рецепт, но ни одна запись его не покрывает).
"""

from enum import Enum

from pydantic import BaseModel, Field

from .brand_table import PriceRangeRecord
from .prescription import Prescription, Representation


# =============================================================================
# ENUMS
# =============================================================================


class CalculationMode(str, Enum):
    """Режим расчёта.

    SINGLE_VISION — однофокальные линзы (Minus/Plus/SV Cross Comp)
    BIFOCAL — бифокальные (Bifocal KT / CYL_KT / COMP_KT)
    PROGRESSIVE — прогрессивные (PROGRESSIVE_SPH / __CYL / _COMP)
    """

    SINGLE_VISION = "single_vision"
    BIFOCAL = "bifocal"
    PROGRESSIVE = "progressive"


# =============================================================================
# MODELS
# =============================================================================


class RangeMatch(BaseModel):
    """Совпавшая запись таблицы."""

    record: PriceRangeRecord = Field(..., description="Matched price range record")
    representation: Representation = Field(..., description="Prescription form that matched")
    table: str = Field(..., description="Table name (category or KT table key)")

    model_config = {"frozen": True}

    @property
    def range(self) -> str:
        return self.record.range

    @property
    def prices(self) -> dict[str, int]:
        return self.record.prices

    @property
    def is_transposed(self) -> bool:
        return self.representation == Representation.TRANSPOSED


class CategoryInfo(BaseModel):
    """Какое правило сработало: категория и приоритетный уровень (1 — высший)."""

    category: str = Field(..., description="Category or table name")
    priority: int = Field(..., ge=1, description="Priority tier, 1 = highest")
    representation: Representation = Field(..., description="Prescription form used")

    model_config = {"frozen": True}


class MatchResult(BaseModel):
    """Результат расчёта.

    Содержит:
    - original / transposed: рецепт и его транспонированная форма
    - mapped_axis / transposed_mapped_axis: ось после квантования (CYL/COMP таблицы)
    - matches / best_match: все совпадения и лучшее из них
    - category_info + search_strategy: какое правило сработало и почему
    - add_power / calculated_add / calculated_near_sphere: ADD-расчёты
    - error: сообщение об ошибке валидации (для пользователя)
    """

    mode: CalculationMode = Field(CalculationMode.SINGLE_VISION, description="Calculation mode")

    original: Prescription | None = Field(None, description="Prescription as supplied")
    transposed: Prescription | None = Field(None, description="Transposed prescription")
    mapped_axis: int | None = Field(None, description="Bucketed axis of original")
    transposed_mapped_axis: int | None = Field(None, description="Bucketed axis of transposed")

    matches: list[RangeMatch] = Field(default_factory=list, description="All matches, priority order")
    best_match: RangeMatch | None = Field(None, description="Best match")
    category_info: CategoryInfo | None = Field(None, description="Rule that fired")
    search_strategy: str = Field("", description="Human-readable account of the search")
    prescription_case: str | None = Field(None, description="Human-readable prescription case")

    add_power: float | None = Field(None, description="ADD power used")
    calculated_add: float | None = Field(None, description="ADD derived from NV - DV")
    calculated_near_sphere: float | None = Field(None, description="NV sphere derived from DV + ADD")

    error: str | None = Field(None, description="User-facing validation error")

    model_config = {"frozen": True}

    @classmethod
    def failure(cls, message: str, mode: CalculationMode = CalculationMode.SINGLE_VISION) -> "MatchResult":
        """Результат-ошибка: заполнено только error."""
        return cls(mode=mode, error=message)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def has_match(self) -> bool:
        return self.best_match is not None
