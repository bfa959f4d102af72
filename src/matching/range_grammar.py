"""Range Grammar — разбор и проверка range-строк прайс-таблиц

Каждая запись таблицы бренда кодирует покрываемые рецепты строкой.
Грамматика определяется автоматически по содержимому:

- BOUNDED_PAIR   "<A> to <B>"        : sphere ∈ [0, A] / [A, 0], cylinder ∈ [0, B] / [B, 0]
- SINGLE_SPHERE  "<V> sph"           : |sphere - V| <= tol, |cylinder| <= tol
- ADD_POWER      "<B>/+ ADD", "<B>/ADD" : ступенчатое окно сферы от базы B, cylinder == 0
- CYLINDER_AXIS  "<C>, <axis>"       : bucket |cylinder| == |C|, знак совпадает, ось совпадает
- COMPOUND_AXIS  "<S>/<C> <axis>°"   : то же для сферы (sphere bucket) и цилиндра

Ось может перечислять альтернативы через "/": "-1, 90/180", "+2/+1 45/135°".

Все проверки — чистые предикаты. Битая range-строка не совпадает ни с чем
и никогда не бросает исключение.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Final, Union

from src.core.math.numerical_safeguards import (
    EPS_DIOPTER,
    is_close,
    is_valid_float,
    is_zero,
    within_closed_range,
    within_zero_anchored,
)
from src.core.math.optics import cylinder_bucket, map_axis, sphere_bucket


# =============================================================================
# POLICY CONSTANTS
# =============================================================================

# Окно single-sphere грамматики (D). Грубое правило, не диоптрийно-точное
SINGLE_SPHERE_TOLERANCE_D: Final[float] = 1.0

# ADD грамматика: база |B| <= 2.0 покрывает [0, B]
ADD_BASE_WINDOW_D: Final[float] = 2.0

# ADD грамматика: каждая следующая ступень покрывает 1.0 D ...
ADD_STEP_D: Final[float] = 1.0

# ... с зазором 0.25 D от границы предыдущей ступени: [B - 1 + 0.25, B]
ADD_STEP_GAP_D: Final[float] = 0.25


# =============================================================================
# GRAMMARS
# =============================================================================


class RangeGrammar(str, Enum):
    """Грамматика range-строки."""

    BOUNDED_PAIR = "bounded_pair"
    SINGLE_SPHERE = "single_sphere"
    ADD_POWER = "add_power"
    CYLINDER_AXIS = "cylinder_axis"
    COMPOUND_AXIS = "compound_axis"
    UNKNOWN = "unknown"


_NUMBER = r"[+-]?\d+(?:\.\d+)?"
_AXES = r"\d{1,3}(?:\s*/\s*\d{1,3})*"

_BOUNDED_PAIR_RE = re.compile(rf"^\s*({_NUMBER})\s+to\s+({_NUMBER})\s*$", re.IGNORECASE)
_SINGLE_SPHERE_RE = re.compile(rf"^\s*({_NUMBER})\s*sph\s*$", re.IGNORECASE)
_ADD_POWER_RE = re.compile(rf"^\s*({_NUMBER})\s*/\s*\+?\s*ADD\s*$", re.IGNORECASE)
_CYLINDER_AXIS_RE = re.compile(rf"^\s*({_NUMBER})\s*,\s*({_AXES})\s*°?\s*$")
_COMPOUND_AXIS_RE = re.compile(rf"^\s*({_NUMBER})\s*/\s*({_NUMBER})\s+({_AXES})\s*°?\s*$")

_TO_KEYWORD_RE = re.compile(r"\bto\b", re.IGNORECASE)


@dataclass(frozen=True)
class BoundedPair:
    sphere_limit: float
    cylinder_limit: float


@dataclass(frozen=True)
class SingleSphere:
    value: float


@dataclass(frozen=True)
class AddPowerBase:
    base: float


@dataclass(frozen=True)
class CylinderAxisSpec:
    cylinder: float
    axes: tuple[int, ...]


@dataclass(frozen=True)
class CompoundAxisSpec:
    sphere: float
    cylinder: float
    axes: tuple[int, ...]


ParsedRange = Union[BoundedPair, SingleSphere, AddPowerBase, CylinderAxisSpec, CompoundAxisSpec]


def detect_grammar(range_spec: str) -> RangeGrammar:
    """Определение грамматики по содержимому строки (без полного разбора).

    Порядок важен: CYL форма может содержать "/" в списке осей,
    поэтому запятая проверяется раньше слэша.
    """
    if not isinstance(range_spec, str) or not range_spec.strip():
        return RangeGrammar.UNKNOWN

    upper = range_spec.upper()

    if "ADD" in upper:
        return RangeGrammar.ADD_POWER
    if _TO_KEYWORD_RE.search(range_spec):
        return RangeGrammar.BOUNDED_PAIR
    if "SPH" in upper:
        return RangeGrammar.SINGLE_SPHERE
    if "," in range_spec:
        return RangeGrammar.CYLINDER_AXIS
    if "/" in range_spec:
        return RangeGrammar.COMPOUND_AXIS
    return RangeGrammar.UNKNOWN


def _parse_axes(text: str) -> tuple[int, ...]:
    return tuple(int(part) for part in text.split("/"))


@lru_cache(maxsize=2048)
def parse_range(range_spec: str) -> ParsedRange | None:
    """Разбор range-строки в типизированную форму.

    Returns:
        Разобранный диапазон или None для битой / неизвестной строки
    """
    grammar = detect_grammar(range_spec)

    if grammar == RangeGrammar.BOUNDED_PAIR:
        m = _BOUNDED_PAIR_RE.match(range_spec)
        if m:
            return BoundedPair(sphere_limit=float(m.group(1)), cylinder_limit=float(m.group(2)))

    elif grammar == RangeGrammar.SINGLE_SPHERE:
        m = _SINGLE_SPHERE_RE.match(range_spec)
        if m:
            return SingleSphere(value=float(m.group(1)))

    elif grammar == RangeGrammar.ADD_POWER:
        m = _ADD_POWER_RE.match(range_spec)
        if m:
            return AddPowerBase(base=float(m.group(1)))

    elif grammar == RangeGrammar.CYLINDER_AXIS:
        m = _CYLINDER_AXIS_RE.match(range_spec)
        if m:
            return CylinderAxisSpec(cylinder=float(m.group(1)), axes=_parse_axes(m.group(2)))

    elif grammar == RangeGrammar.COMPOUND_AXIS:
        m = _COMPOUND_AXIS_RE.match(range_spec)
        if m:
            return CompoundAxisSpec(
                sphere=float(m.group(1)),
                cylinder=float(m.group(2)),
                axes=_parse_axes(m.group(3)),
            )

    return None


# =============================================================================
# PREDICATES
# =============================================================================


def add_power_window(base: float) -> tuple[float, float]:
    """Ступенчатое окно сферы ADD грамматики.

    |B| <= 2.0 → [0, B] (или [B, 0]);
    |B| >  2.0 → [|B| - 1 + 0.25, |B|], зеркально для отрицательной базы.

    Examples:
        >>> add_power_window(2.0)
        (0.0, 2.0)
        >>> add_power_window(3.0)
        (2.25, 3.0)
        >>> add_power_window(-4.0)
        (-4.0, -3.25)
    """
    magnitude = abs(base)

    if magnitude <= ADD_BASE_WINDOW_D + EPS_DIOPTER:
        low, high = 0.0, magnitude
    else:
        low, high = magnitude - ADD_STEP_D + ADD_STEP_GAP_D, magnitude

    if base < 0:
        return (-high, -low + 0.0)
    return (low, high)


def _sign_matches(value: float, encoded: float) -> bool:
    if is_zero(value) or is_zero(encoded):
        return False
    return (value > 0) == (encoded > 0)


def _bucket_matches(bucket: int | None, value: float, encoded: float) -> bool:
    if bucket is None:
        return False
    return is_close(bucket, abs(encoded)) and _sign_matches(value, encoded)


def _axis_matches(axis: int | None, axes: tuple[int, ...]) -> bool:
    return map_axis(axis) in axes


def matches_parsed(
    parsed: ParsedRange,
    sphere: float,
    cylinder: float,
    axis: int | None = None,
    single_sphere_tolerance: float = SINGLE_SPHERE_TOLERANCE_D,
) -> bool:
    """Проверка рецепта против уже разобранного диапазона."""
    if isinstance(parsed, BoundedPair):
        return within_zero_anchored(sphere, parsed.sphere_limit) and within_zero_anchored(
            cylinder, parsed.cylinder_limit
        )

    if isinstance(parsed, SingleSphere):
        tol = single_sphere_tolerance + EPS_DIOPTER
        return abs(sphere - parsed.value) <= tol and abs(cylinder) <= tol

    if isinstance(parsed, AddPowerBase):
        if not is_zero(cylinder):
            return False
        low, high = add_power_window(parsed.base)
        return within_closed_range(sphere, low, high)

    if isinstance(parsed, CylinderAxisSpec):
        return _bucket_matches(cylinder_bucket(cylinder), cylinder, parsed.cylinder) and _axis_matches(
            axis, parsed.axes
        )

    if isinstance(parsed, CompoundAxisSpec):
        return (
            _bucket_matches(sphere_bucket(sphere), sphere, parsed.sphere)
            and _bucket_matches(cylinder_bucket(cylinder), cylinder, parsed.cylinder)
            and _axis_matches(axis, parsed.axes)
        )

    return False


def matches_range(
    range_spec: str,
    sphere: float,
    cylinder: float,
    axis: int | None = None,
    single_sphere_tolerance: float = SINGLE_SPHERE_TOLERANCE_D,
) -> bool:
    """Покрывает ли range-строка рецепт.

    Args:
        range_spec: range-строка записи таблицы
        sphere: сфера (D)
        cylinder: цилиндр (D)
        axis: ось (градусы); нужна только CYL/COMP грамматикам,
            не указана → 0 → bucket 180
        single_sphere_tolerance: окно single-sphere грамматики

    Returns:
        True если рецепт попадает в диапазон. Битая строка или
        невалидные числа → False.
    """
    if not is_valid_float(sphere) or not is_valid_float(cylinder):
        return False

    parsed = parse_range(range_spec) if isinstance(range_spec, str) else None
    if parsed is None:
        return False

    return matches_parsed(parsed, sphere, cylinder, axis, single_sphere_tolerance)


def add_power_base(range_spec: str) -> float | None:
    """База ADD-строки ("+3/+ ADD" → 3.0) или None для другой грамматики."""
    parsed = parse_range(range_spec) if isinstance(range_spec, str) else None
    if isinstance(parsed, AddPowerBase):
        return parsed.base
    return None
