"""Engine — точки входа подбора ценовой категории

Каждая точка входа принимает сырые поля формы (строки / числа / None)
и таблицу бренда, валидирует, выполняет поиск нужной таблицы и
возвращает MatchResult. Исключения наружу не выходят: ошибка
валидации → MatchResult.failure(message).

Диспетчеризация find_lens_options:
- single_vision → SingleVisionSearch
- bifocal / progressive:
    цилиндр и сфера → COMP таблица
    только цилиндр  → CYL таблица
    без цилиндра    → ADD таблица (Bifocal KT / PROGRESSIVE_SPH)
  Цилиндр для дали 0 или пуст → берутся цилиндр и ось для близи.
"""

import logging
from typing import Any, Callable

from src.core.domain.brand_table import BrandTable
from src.core.domain.match_result import CalculationMode, MatchResult
from src.core.domain.prescription import Prescription
from src.core.math.numerical_safeguards import is_zero
from src.matching.policy import MatchingPolicy
from src.matching.searches import (
    SingleVisionSearch,
    bifocal_search,
    comp_kt_search,
    cyl_kt_search,
    progressive_comp_search,
    progressive_cyl_search,
    progressive_sphere_search,
)
from src.matching.validation import (
    BRAND_DATA_MISSING_MESSAGE,
    DISTANCE_SPHERE_REQUIRED_MESSAGE,
    SPHERE_REQUIRED_MESSAGE,
    UNKNOWN_MODE_MESSAGE,
    AddPowerResolution,
    PrescriptionInputError,
    parse_axis,
    parse_diopter,
    resolve_add_power,
)

logger = logging.getLogger(__name__)


# =============================================================================
# HELPERS
# =============================================================================


def _guarded(mode: CalculationMode, brand_table: BrandTable | None, run: Callable[[], MatchResult]) -> MatchResult:
    """Граница движка: отсутствие таблицы и ошибки валидации → failure."""
    if brand_table is None:
        logger.warning("Lens lookup without brand data (mode=%s)", mode.value)
        return MatchResult.failure(BRAND_DATA_MISSING_MESSAGE, mode)

    try:
        return run()
    except PrescriptionInputError as e:
        logger.debug("Prescription rejected (mode=%s): %s", mode.value, e)
        return MatchResult.failure(str(e), mode)


def _resolve_policy(policy: MatchingPolicy | None) -> MatchingPolicy:
    return policy or MatchingPolicy()


def _require_sphere(value: Any, message: str) -> float:
    sphere = parse_diopter(value, "Sphere")
    if sphere is None:
        raise PrescriptionInputError(message)
    return sphere


def _optional_add(
    distance_sphere: float,
    near_sphere: Any,
    add_power: Any,
    policy: MatchingPolicy,
) -> AddPowerResolution | None:
    """ADD-расчёт для CYL / COMP таблиц: только если ADD или NV указаны."""
    near = parse_diopter(near_sphere, "Near Vision Sphere")
    add = parse_diopter(add_power, "ADD Power")
    if near is None and add is None:
        return None
    return resolve_add_power(distance_sphere, near, add, policy.add_power_min, policy.add_power_max)


def _required_add(
    distance_sphere: float,
    near_sphere: Any,
    add_power: Any,
    policy: MatchingPolicy,
) -> AddPowerResolution:
    near = parse_diopter(near_sphere, "Near Vision Sphere")
    add = parse_diopter(add_power, "ADD Power")
    return resolve_add_power(distance_sphere, near, add, policy.add_power_min, policy.add_power_max)


def _parse_mode(mode: CalculationMode | str) -> CalculationMode | None:
    try:
        return CalculationMode(mode)
    except ValueError:
        return None


# =============================================================================
# SINGLE VISION
# =============================================================================


def find_single_vision_options(
    brand_table: BrandTable | None,
    sphere: Any,
    cylinder: Any = None,
    axis: Any = None,
    policy: MatchingPolicy | None = None,
) -> MatchResult:
    """Подбор single-vision категории.

    Args:
        brand_table: таблица бренда (None → ошибка "Brand data not available")
        sphere: сфера, обязательна
        cylinder: цилиндр, пусто → 0
        axis: ось, пусто → ось по умолчанию политики

    Returns:
        MatchResult (error при невалидном вводе)

    Examples:
        >>> result = find_single_vision_options(table, "-2.5", "-1.0", "90")
        >>> result.category_info.category
        'Minus Comp'
    """
    mode = CalculationMode.SINGLE_VISION
    policy = _resolve_policy(policy)

    def run() -> MatchResult:
        sph = _require_sphere(sphere, SPHERE_REQUIRED_MESSAGE)
        cyl = parse_diopter(cylinder, "Cylinder") or 0.0
        ax = parse_axis(axis)
        prescription = Prescription(sphere=sph, cylinder=cyl, axis=ax)
        return SingleVisionSearch(policy).evaluate(brand_table, prescription)

    return _guarded(mode, brand_table, run)


# =============================================================================
# ADD TABLES (no cylinder)
# =============================================================================


def find_add_power_options(
    brand_table: BrandTable | None,
    sphere: Any,
    add_power: Any = None,
    near_sphere: Any = None,
    policy: MatchingPolicy | None = None,
) -> MatchResult:
    """Подбор по таблице Bifocal KT.

    ADD берётся из поля или вычисляется как NV - DV; ADD вне диапазона
    политики — ошибка, поиск не выполняется.
    """
    mode = CalculationMode.BIFOCAL
    policy = _resolve_policy(policy)

    def run() -> MatchResult:
        distance = _require_sphere(sphere, DISTANCE_SPHERE_REQUIRED_MESSAGE)
        add = _required_add(distance, near_sphere, add_power, policy)
        return bifocal_search(policy).evaluate(brand_table, distance, add)

    return _guarded(mode, brand_table, run)


def find_near_vision_options(
    brand_table: BrandTable | None,
    distance_sphere: Any,
    add_power: Any = None,
    near_sphere: Any = None,
    policy: MatchingPolicy | None = None,
) -> MatchResult:
    """Подбор по таблице PROGRESSIVE_SPH (NV = DV + ADD)."""
    mode = CalculationMode.PROGRESSIVE
    policy = _resolve_policy(policy)

    def run() -> MatchResult:
        distance = _require_sphere(distance_sphere, DISTANCE_SPHERE_REQUIRED_MESSAGE)
        add = _required_add(distance, near_sphere, add_power, policy)
        return progressive_sphere_search(policy).evaluate(brand_table, distance, add)

    return _guarded(mode, brand_table, run)


# =============================================================================
# CYL TABLES
# =============================================================================


def _cylinder_lookup(
    factory: Callable[[MatchingPolicy], Any],
    mode: CalculationMode,
    brand_table: BrandTable | None,
    cylinder: Any,
    axis: Any,
    near_sphere: Any,
    add_power: Any,
    policy: MatchingPolicy | None,
) -> MatchResult:
    policy = _resolve_policy(policy)

    def run() -> MatchResult:
        cyl = parse_diopter(cylinder, "Cylinder")
        ax = parse_axis(axis)
        add = _optional_add(0.0, near_sphere, add_power, policy)
        return factory(policy).evaluate(brand_table, cyl, ax, add)

    return _guarded(mode, brand_table, run)


def find_cyl_kt_options(
    brand_table: BrandTable | None,
    cylinder: Any,
    axis: Any,
    near_sphere: Any = None,
    add_power: Any = None,
    policy: MatchingPolicy | None = None,
) -> MatchResult:
    """Подбор по таблице CYL_KT (цилиндр без сферы, ось обязательна)."""
    return _cylinder_lookup(
        cyl_kt_search, CalculationMode.BIFOCAL, brand_table, cylinder, axis, near_sphere, add_power, policy
    )


def find_progressive_cyl_options(
    brand_table: BrandTable | None,
    cylinder: Any,
    axis: Any,
    near_sphere: Any = None,
    add_power: Any = None,
    policy: MatchingPolicy | None = None,
) -> MatchResult:
    """Подбор по таблице PROGRESSIVE__CYL."""
    return _cylinder_lookup(
        progressive_cyl_search,
        CalculationMode.PROGRESSIVE,
        brand_table,
        cylinder,
        axis,
        near_sphere,
        add_power,
        policy,
    )


# =============================================================================
# COMP TABLES
# =============================================================================


def _compound_lookup(
    factory: Callable[[MatchingPolicy], Any],
    mode: CalculationMode,
    brand_table: BrandTable | None,
    sphere: Any,
    cylinder: Any,
    axis: Any,
    near_sphere: Any,
    add_power: Any,
    policy: MatchingPolicy | None,
) -> MatchResult:
    policy = _resolve_policy(policy)

    def run() -> MatchResult:
        sph = _require_sphere(sphere, SPHERE_REQUIRED_MESSAGE)
        cyl = parse_diopter(cylinder, "Cylinder") or 0.0
        ax = parse_axis(axis)
        add = _optional_add(sph, near_sphere, add_power, policy)
        prescription = Prescription(sphere=sph, cylinder=cyl, axis=ax)
        return factory(policy).evaluate(brand_table, prescription, add)

    return _guarded(mode, brand_table, run)


def find_comp_kt_options(
    brand_table: BrandTable | None,
    sphere: Any,
    cylinder: Any,
    axis: Any,
    near_sphere: Any = None,
    add_power: Any = None,
    policy: MatchingPolicy | None = None,
) -> MatchResult:
    """Подбор по таблице COMP_KT.

    Исходный рецепт, затем транспонированный; при совпадениях обеих форм
    результат сортируется по знаковому приоритету (both-positive выше).
    """
    return _compound_lookup(
        comp_kt_search,
        CalculationMode.BIFOCAL,
        brand_table,
        sphere,
        cylinder,
        axis,
        near_sphere,
        add_power,
        policy,
    )


def find_progressive_comp_options(
    brand_table: BrandTable | None,
    sphere: Any,
    cylinder: Any,
    axis: Any,
    near_sphere: Any = None,
    add_power: Any = None,
    policy: MatchingPolicy | None = None,
) -> MatchResult:
    """Подбор по таблице PROGRESSIVE_COMP."""
    return _compound_lookup(
        progressive_comp_search,
        CalculationMode.PROGRESSIVE,
        brand_table,
        sphere,
        cylinder,
        axis,
        near_sphere,
        add_power,
        policy,
    )


# =============================================================================
# DISPATCHER
# =============================================================================


def find_lens_options(
    brand_table: BrandTable | None,
    sphere: Any,
    cylinder: Any = None,
    axis: Any = None,
    mode: CalculationMode | str = CalculationMode.SINGLE_VISION,
    near_sphere: Any = None,
    add_power: Any = None,
    near_cylinder: Any = None,
    near_axis: Any = None,
    policy: MatchingPolicy | None = None,
) -> MatchResult:
    """Единая точка входа: выбор таблицы по режиму и заполненным полям.

    Args:
        brand_table: таблица бренда
        sphere: сфера (для bifocal / progressive — сфера для дали)
        cylinder: цилиндр
        axis: ось
        mode: режим расчёта (CalculationMode или его строковое значение)
        near_sphere: сфера для близи (bifocal / progressive)
        add_power: ADD (bifocal / progressive)
        near_cylinder: цилиндр для близи; используется вместе с near_axis,
            если цилиндр для дали не указан или равен 0 (bifocal / progressive)
        near_axis: ось для близи
        policy: политика подбора

    Returns:
        MatchResult; неизвестный режим → failure
    """
    resolved = _parse_mode(mode)
    if resolved is None:
        return MatchResult.failure(UNKNOWN_MODE_MESSAGE)

    if resolved == CalculationMode.SINGLE_VISION:
        return find_single_vision_options(brand_table, sphere, cylinder, axis, policy)

    progressive = resolved == CalculationMode.PROGRESSIVE

    # Поля проверяются до выбора таблицы
    def has_value(raw: Any, field_name: str) -> bool:
        value = parse_diopter(raw, field_name)
        return value is not None and not is_zero(value)

    if brand_table is None:
        return MatchResult.failure(BRAND_DATA_MISSING_MESSAGE, resolved)

    try:
        has_cylinder = has_value(cylinder, "Cylinder")
        has_near_cylinder = has_value(near_cylinder, "Near Vision Cylinder")
        has_sphere = has_value(sphere, "Sphere")
    except PrescriptionInputError as e:
        return MatchResult.failure(str(e), resolved)

    if not has_cylinder and has_near_cylinder:
        cylinder, axis = near_cylinder, near_axis
        has_cylinder = True

    if has_cylinder and has_sphere:
        finder = find_progressive_comp_options if progressive else find_comp_kt_options
        return finder(brand_table, sphere, cylinder, axis, near_sphere, add_power, policy)

    if has_cylinder:
        finder = find_progressive_cyl_options if progressive else find_cyl_kt_options
        return finder(brand_table, cylinder, axis, near_sphere, add_power, policy)

    finder = find_near_vision_options if progressive else find_add_power_options
    return finder(brand_table, sphere, add_power, near_sphere, policy)
