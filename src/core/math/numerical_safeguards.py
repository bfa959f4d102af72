"""
Numerical Safeguards — Diopter Arithmetic Primitives

Все сравнения оптических сил в проекте идут через этот модуль:
- отсев NaN/Inf до того, как значение попадёт в поиск
- сравнения с абсолютной толерантностью EPS_DIOPTER
- квантование к шагу 0.25 D
- попадание в интервалы [0, limit] / [limit, 0] и [low, high]

ИНВАРИАНТЫ:
1. NaN/Inf никогда не проходят как оптическая сила
2. 0.1 + 0.15 квантуется и сравнивается как 0.25
3. -0.0 не выходит наружу из round_to_quarter
"""

import math
from typing import Final

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Абсолютная толерантность для диоптрий; на четыре порядка меньше шага 0.25
EPS_DIOPTER: Final[float] = 1e-9

EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9

QUARTER_DIOPTER_STEP: Final[float] = 0.25


# =============================================================================
# ПРОВЕРКИ И СРАВНЕНИЯ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """False для NaN и ±Inf."""
    return math.isfinite(value)


def is_close(
    a: float,
    b: float,
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_DIOPTER,
) -> bool:
    """
    math.isclose с толерантностями диоптрий по умолчанию.

    Examples:
        >>> is_close(0.1 + 0.15, 0.25)
        True
        >>> is_close(-1.0, -1.25)
        False
    """
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)


def is_zero(value: float, tol: float = EPS_DIOPTER) -> bool:
    return abs(value) <= tol


def is_positive(value: float, tol: float = EPS_DIOPTER) -> bool:
    """Строго больше нуля (value > tol)."""
    return value > tol


def is_negative(value: float, tol: float = EPS_DIOPTER) -> bool:
    """Строго меньше нуля (value < -tol)."""
    return value < -tol


# =============================================================================
# КВАНТОВАНИЕ
# =============================================================================


def round_to_epsilon(value: float, eps: float) -> float:
    """
    Ближайшее кратное eps, половина округляется от нуля.

    Встроенный round() округляет половину к чётному (round(0.5) == 0),
    поэтому шаги считаются через floor/ceil.

    Raises:
        ValueError: eps <= 0

    Examples:
        >>> round_to_epsilon(0.125, 0.25)
        0.25
        >>> round_to_epsilon(-0.125, 0.25)
        -0.25
    """
    if eps <= 0:
        raise ValueError(f"eps must be positive, got {eps}")

    ratio = value / eps
    steps = math.floor(ratio + 0.5) if ratio >= 0 else math.ceil(ratio - 0.5)
    return steps * eps


def round_to_quarter(value: float) -> float:
    """
    Квантование оптической силы к ближайшему шагу 0.25 D.

    round4(x) = round(x * 4) / 4. Отрицательный ноль нормализуется в 0.0,
    чтобы -0.0 не просачивался в отображение и в проверки знака.

    Examples:
        >>> round_to_quarter(1.0 + -1.5)
        -0.5
        >>> round_to_quarter(-0.0)
        0.0
        >>> round_to_quarter(0.1 + 0.15)
        0.25
    """
    rounded = round_to_epsilon(value, QUARTER_DIOPTER_STEP)
    # -0.0 + 0.0 == 0.0
    return rounded + 0.0


def is_quarter_multiple(value: float) -> bool:
    """
    Проверка, кратно ли значение 0.25 D.

    Значение делится на шаг 0.25, и частное должно быть целым с учётом
    машинной точности. Деление на степень двойки точно, поэтому большие
    значения (1e300) не теряют кратность. NaN/Inf всегда дают False.

    Examples:
        >>> is_quarter_multiple(-1.75)
        True
        >>> is_quarter_multiple(0.3)
        False
        >>> is_quarter_multiple(0.1 + 0.15)
        True
    """
    if not is_valid_float(value):
        return False

    steps = value / QUARTER_DIOPTER_STEP
    return is_close(steps, round(steps), abs_tol=1e-6)


# =============================================================================
# ИНТЕРВАЛЫ
# =============================================================================


def within_zero_anchored(value: float, limit: float, tol: float = EPS_DIOPTER) -> bool:
    """
    Попадание значения в интервал, закреплённый на нуле.

    Знак limit задаёт направление интервала:
    - limit >= 0: value ∈ [0, limit]
    - limit <  0: value ∈ [limit, 0]

    Examples:
        >>> within_zero_anchored(-2.5, -6.0)
        True
        >>> within_zero_anchored(0.25, -6.0)
        False
        >>> within_zero_anchored(0.0, 2.0)
        True
    """
    low = min(0.0, limit)
    high = max(0.0, limit)
    return low - tol <= value <= high + tol


def within_closed_range(value: float, low: float, high: float, tol: float = EPS_DIOPTER) -> bool:
    """Попадание значения в замкнутый интервал [low, high] с толерантностью."""
    return low - tol <= value <= high + tol
