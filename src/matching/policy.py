"""Policy — конфигурация подбора и таблицы приоритетов

Вся политика приоритетов собрана здесь декларативно:
- SINGLE_VISION_SEARCH_ORDER: порядок (категория, форма рецепта) для single vision
- COMPOUND_SIGN_PRIORITY: ранжирование совпадений COMP таблиц по знакам
- MatchingPolicy: числовые константы политики (окна, диапазон ADD, ось по умолчанию)
"""

from dataclasses import dataclass
from typing import Final, Iterable

from src.core.domain.match_result import RangeMatch
from src.core.domain.prescription import Category, Representation
from src.core.math.optics import DEFAULT_AXIS_DEG
from src.matching.classification import SignPattern, sign_pattern
from src.matching.range_grammar import (
    SINGLE_SPHERE_TOLERANCE_D,
    CompoundAxisSpec,
    parse_range,
)


# =============================================================================
# CONSTANTS
# =============================================================================

# Допустимый диапазон ADD (D)
ADD_POWER_MIN_D: Final[float] = 1.0
ADD_POWER_MAX_D: Final[float] = 3.0


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class MatchingPolicy:
    """Конфигурация подбора.

    Константы политики, которые может уточнить эксперт-оптик,
    не трогая логику сопоставления.
    """

    # Окно single-sphere грамматики "<V> sph"
    single_sphere_tolerance: float = SINGLE_SPHERE_TOLERANCE_D

    # Допустимый диапазон ADD
    add_power_min: float = ADD_POWER_MIN_D
    add_power_max: float = ADD_POWER_MAX_D

    # Ось для single vision, если цилиндр указан без оси
    default_axis: int = DEFAULT_AXIS_DEG


# =============================================================================
# SINGLE VISION ORDER
# =============================================================================


@dataclass(frozen=True)
class SearchStep:
    """Один шаг single-vision поиска."""

    category: Category
    representation: Representation
    priority: int


# Одинаковые знаки раньше перекрёстных, исходная форма раньше транспонированной
SINGLE_VISION_SEARCH_ORDER: Final[tuple[SearchStep, ...]] = (
    SearchStep(Category.MINUS_COMP, Representation.ORIGINAL, 1),
    SearchStep(Category.MINUS_COMP, Representation.TRANSPOSED, 1),
    SearchStep(Category.PLUS_COMP, Representation.ORIGINAL, 2),
    SearchStep(Category.PLUS_COMP, Representation.TRANSPOSED, 2),
    SearchStep(Category.SV_CROSS_COMP, Representation.ORIGINAL, 3),
    SearchStep(Category.SV_CROSS_COMP, Representation.TRANSPOSED, 3),
)


# =============================================================================
# COMPOUND PRIORITY
# =============================================================================

COMPOUND_SIGN_PRIORITY: Final[dict[SignPattern, int]] = {
    SignPattern.BOTH_POSITIVE: 1,
    SignPattern.BOTH_NEGATIVE: 2,
    SignPattern.MIXED: 3,
}

# Ранг записи, чьи знаки не разбираются
COMPOUND_PRIORITY_UNRANKED: Final[int] = len(COMPOUND_SIGN_PRIORITY) + 1

COMPOUND_PRIORITY_RULE: Final[str] = "both-positive > both-negative > mixed-sign"


def compound_sign_pattern(range_spec: str) -> SignPattern | None:
    """Знаковый шаблон COMP записи ("+2/-1 180°" → MIXED) или None."""
    parsed = parse_range(range_spec)
    if not isinstance(parsed, CompoundAxisSpec):
        return None
    return sign_pattern(parsed.sphere, parsed.cylinder)


def compound_priority(match: RangeMatch) -> int:
    """Ранг совпадения COMP таблицы (1 — высший)."""
    pattern = compound_sign_pattern(match.range)
    return COMPOUND_SIGN_PRIORITY.get(pattern, COMPOUND_PRIORITY_UNRANKED)


def sort_by_compound_priority(matches: Iterable[RangeMatch]) -> list[RangeMatch]:
    """Стабильная сортировка: при равном ранге сохраняется порядок (original раньше)."""
    return sorted(matches, key=compound_priority)
