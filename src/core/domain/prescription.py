"""Prescription — Модель рецепта очков

Immutable Pydantic модель рецепта (сфера, цилиндр, ось) и перечисления,
описывающие категории single-vision таблиц и форму представления рецепта.

Квантование 0.25 D проверяется на границе (src.matching.validation);
модель только фиксирует форму и диапазоны.
"""

from enum import Enum

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class Category(str, Enum):
    """Категория single-vision таблицы бренда.

    Закрытый набор: ключи single_vision в BrandTable.
    """

    MINUS_COMP = "Minus Comp"
    PLUS_COMP = "Plus Comp"
    SV_CROSS_COMP = "SV Cross Comp"


class Representation(str, Enum):
    """Форма рецепта, давшая совпадение.

    ORIGINAL — рецепт как введён.
    TRANSPOSED — оптически эквивалентная транспонированная форма.
    """

    ORIGINAL = "original"
    TRANSPOSED = "transposed"


# =============================================================================
# MODELS
# =============================================================================


class Prescription(BaseModel):
    """Рецепт одного глаза.

    - sphere: сфера, D (кратна 0.25)
    - cylinder: цилиндр, D (кратен 0.25), 0 — без астигматизма
    - axis: ось цилиндра, градусы [0, 180]; 0 — ось не указана
    """

    sphere: float = Field(0.0, description="Sphere (D)")
    cylinder: float = Field(0.0, description="Cylinder (D)")
    axis: int = Field(0, ge=0, le=180, description="Axis (degrees), 0 = not supplied")

    model_config = {"frozen": True}

    @property
    def has_cylinder(self) -> bool:
        return self.cylinder != 0.0

    @property
    def has_axis(self) -> bool:
        return self.axis != 0
