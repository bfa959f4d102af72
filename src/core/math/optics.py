"""
Optics — Transposition, Axis Bucketing and Power Buckets

Чистые функции оптической арифметики, общие для всех таблиц бренда:
- Транспозиция рецепта (plus-cylinder ↔ minus-cylinder нотация)
- Поворот оси на 90° (flip convention как основная, modular как альтернатива)
- Квантование оси в четыре дискретные оси прайс-таблиц: 45/90/135/180
- Bucket-категории модуля цилиндра и сферы для CYL_KT / COMP_KT таблиц
"""

from enum import Enum
from typing import Final

from src.core.domain.prescription import Prescription
from src.core.math.numerical_safeguards import (
    round_to_quarter,
    within_closed_range,
)


# =============================================================================
# CONSTANTS
# =============================================================================

# Ось по умолчанию, если рецепт содержит цилиндр без оси
DEFAULT_AXIS_DEG: Final[int] = 90

# Допустимый диапазон оси, 0 значит "ось не указана"
AXIS_MIN_DEG: Final[int] = 0
AXIS_MAX_DEG: Final[int] = 180

# Границы axis-bucket'ов: (low, high, bucket). Всё остальное → 180
AXIS_BUCKETS: Final[tuple[tuple[int, int, int], ...]] = (
    (21, 69, 45),
    (70, 110, 90),
    (111, 155, 135),
)
AXIS_BUCKET_HORIZONTAL: Final[int] = 180

# Bucket'ы модуля цилиндра: [low, high] → категория
CYLINDER_BUCKETS: Final[tuple[tuple[float, float, int], ...]] = (
    (0.25, 1.0, 1),
    (1.25, 2.0, 2),
    (2.25, 3.0, 3),
    (3.25, 4.0, 4),
)

# Bucket'ы модуля сферы для COMP_KT: [low, high] → категория
SPHERE_BUCKETS: Final[tuple[tuple[float, float, int], ...]] = (
    (0.25, 2.0, 2),
    (2.25, 3.0, 3),
    (3.25, 4.0, 4),
    (4.25, 5.0, 5),
    (5.25, 6.0, 6),
)


class AxisConvention(str, Enum):
    """Конвенция поворота оси при транспозиции.

    FLIP — основная: axis <= 90 → axis + 90, иначе axis - 90.
    MODULAR — альтернативная: axis + 90, при выходе за 180 вычитается 180.
    """

    FLIP = "flip"
    MODULAR = "modular"


# =============================================================================
# AXIS
# =============================================================================


def flip_axis(axis: int | None, convention: AxisConvention = AxisConvention.FLIP) -> int:
    """Поворот оси на 90° для транспонированного рецепта.

    Отсутствующая ось (None / 0) трактуется как DEFAULT_AXIS_DEG.
    Обе конвенции держат результат в (0, 180].

    Examples:
        >>> flip_axis(90)
        180
        >>> flip_axis(180)
        90
        >>> flip_axis(120, AxisConvention.MODULAR)
        30
    """
    ax = axis or DEFAULT_AXIS_DEG

    if convention == AxisConvention.MODULAR:
        new_axis = ax + 90
        if new_axis > AXIS_MAX_DEG:
            new_axis -= AXIS_MAX_DEG
        return new_axis

    if ax <= 90:
        return ax + 90
    return ax - 90


def map_axis(axis: int | None) -> int:
    """Квантование клинической оси в одну из осей прайс-таблиц.

    [21, 69] → 45, [70, 110] → 90, [111, 155] → 135,
    [156, 180] ∪ [0, 20] → 180. Ось не указана (None) → 0 → 180.

    Вызывающий код, которому нужен другой default (например 90),
    должен подставить его до вызова.
    """
    ax = axis or 0

    for low, high, bucket in AXIS_BUCKETS:
        if low <= ax <= high:
            return bucket

    return AXIS_BUCKET_HORIZONTAL


# =============================================================================
# POWER BUCKETS
# =============================================================================


def _bucket(magnitude: float, buckets: tuple[tuple[float, float, int], ...]) -> int | None:
    for low, high, category in buckets:
        if within_closed_range(magnitude, low, high):
            return category
    return None


def cylinder_bucket(cylinder: float) -> int | None:
    """Bucket-категория модуля цилиндра (1..4) или None вне таблицы.

    Examples:
        >>> cylinder_bucket(-0.75)
        1
        >>> cylinder_bucket(1.25)
        2
        >>> cylinder_bucket(4.5) is None
        True
    """
    return _bucket(abs(cylinder), CYLINDER_BUCKETS)


def sphere_bucket(sphere: float) -> int | None:
    """Bucket-категория модуля сферы для COMP_KT (2..6) или None вне таблицы."""
    return _bucket(abs(sphere), SPHERE_BUCKETS)


# =============================================================================
# TRANSPOSITION
# =============================================================================


def transpose_prescription(
    sphere: float,
    cylinder: float,
    axis: int | None,
    convention: AxisConvention = AxisConvention.FLIP,
) -> Prescription:
    """Транспозиция рецепта в оптически эквивалентную форму.

    newSphere = round4(sphere + cylinder)
    newCylinder = round4(-cylinder)
    newAxis = flip_axis(axis)

    Двойная транспозиция не обязана возвращать исходную ось
    (ось 0 превращается в 90 → 180 → 90).

    Args:
        sphere: сфера (D)
        cylinder: цилиндр (D)
        axis: ось (градусы), None/0 — не указана
        convention: конвенция поворота оси

    Returns:
        Транспонированный Prescription

    Examples:
        >>> transpose_prescription(1.0, -1.5, 90)
        Prescription(sphere=-0.5, cylinder=1.5, axis=180)
    """
    return Prescription(
        sphere=round_to_quarter(sphere + cylinder),
        cylinder=round_to_quarter(-cylinder),
        axis=flip_axis(axis, convention),
    )
