"""Validation — проверка и разбор сырых полей рецепта

Поля приходят из формы как строки или числа. Пустое поле означает "не указано".

- validate_quarter_interval: предикат квантования 0.25 D (никогда не бросает)
- parse_diopter / parse_axis: разбор поля, PrescriptionInputError при ошибке
- resolve_add_power: вывод ADD = NV - DV или NV = DV + ADD и проверка диапазона ADD

PrescriptionInputError не пересекает границу движка: точки входа
превращают его в MatchResult.failure.
"""

from dataclasses import dataclass
from typing import Any, Final

from src.core.math.numerical_safeguards import (
    is_close,
    is_quarter_multiple,
    is_valid_float,
    round_to_quarter,
    within_closed_range,
)
from src.core.math.optics import AXIS_MAX_DEG, AXIS_MIN_DEG
from src.matching.policy import ADD_POWER_MAX_D, ADD_POWER_MIN_D


# =============================================================================
# MESSAGES
# =============================================================================

BRAND_DATA_MISSING_MESSAGE: Final[str] = "Brand data not available"
QUARTER_INTERVAL_MESSAGE: Final[str] = "Values must be in 0.25 intervals (e.g., -0.25, -0.50, -0.75, etc.)"
ADD_RANGE_TEMPLATE: Final[str] = "ADD Power must be between {low:+.1f} and {high:+.1f}"
ADD_REQUIRED_MESSAGE: Final[str] = "ADD Power value is required"
SPHERE_REQUIRED_MESSAGE: Final[str] = "Sphere value is required"
DISTANCE_SPHERE_REQUIRED_MESSAGE: Final[str] = "Distance Vision Sphere value is required"
AXIS_REQUIRED_MESSAGE: Final[str] = "Axis value is required when cylinder is supplied"
AXIS_RANGE_MESSAGE: Final[str] = "Axis must be a whole number between 1 and 180 (leave blank or 0 if not supplied)"
CYLINDER_REQUIRED_MESSAGE: Final[str] = "Cylinder value is required (non-zero) for CYL lookup"
UNKNOWN_MODE_MESSAGE: Final[str] = "Unknown calculation mode"

# Предел модуля оптической силы, D
DIOPTER_MAGNITUDE_MAX_D: Final[float] = 40.0
DIOPTER_RANGE_TEMPLATE: Final[str] = "{field} must be between {low:+.2f} and {high:+.2f}"


class PrescriptionInputError(ValueError):
    """Невалидное поле рецепта. Сообщение показывается пользователю."""


def add_range_message(low: float = ADD_POWER_MIN_D, high: float = ADD_POWER_MAX_D) -> str:
    return ADD_RANGE_TEMPLATE.format(low=low, high=high)


ADD_RANGE_MESSAGE: Final[str] = add_range_message()


# =============================================================================
# FIELD PARSING
# =============================================================================


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("bool is not a diopter value")
    if isinstance(value, str):
        value = value.strip()
    return float(value)


def validate_quarter_interval(value: Any) -> bool:
    """Кратно ли значение 0.25 D.

    Пустое / None / 0 — валидно (необязательные поля по умолчанию 0).
    Нечисловая строка, NaN, Inf — невалидно.

    Examples:
        >>> validate_quarter_interval("-1.75")
        True
        >>> validate_quarter_interval(0.3)
        False
        >>> validate_quarter_interval("")
        True
    """
    if _is_blank(value):
        return True

    try:
        number = _to_float(value)
    except (TypeError, ValueError):
        return False

    if number == 0:
        return True

    return is_quarter_multiple(number)


def parse_diopter(value: Any, field_name: str) -> float | None:
    """Разбор оптической силы.

    Args:
        value: сырое значение поля (строка / число / None)
        field_name: имя поля для сообщения об ошибке

    Returns:
        Значение, привязанное к сетке 0.25 D, или None если поле пустое

    Raises:
        PrescriptionInputError: нечисловое значение, |value| > 40 D или нарушение квантования
    """
    if _is_blank(value):
        return None

    try:
        number = _to_float(value)
    except (TypeError, ValueError):
        raise PrescriptionInputError(f"{field_name} must be a number")

    if not is_valid_float(number):
        raise PrescriptionInputError(f"{field_name} must be a number")

    if abs(number) > DIOPTER_MAGNITUDE_MAX_D:
        raise PrescriptionInputError(
            DIOPTER_RANGE_TEMPLATE.format(
                field=field_name, low=-DIOPTER_MAGNITUDE_MAX_D, high=DIOPTER_MAGNITUDE_MAX_D
            )
        )

    if not validate_quarter_interval(number):
        raise PrescriptionInputError(QUARTER_INTERVAL_MESSAGE)

    return round_to_quarter(number)


def parse_axis(value: Any) -> int:
    """Разбор оси цилиндра.

    Returns:
        Ось в градусах [0, 180]; 0 — поле пустое (ось не указана)

    Raises:
        PrescriptionInputError: нечисловое, дробное или вне [0, 180]
    """
    if _is_blank(value):
        return 0

    try:
        number = _to_float(value)
    except (TypeError, ValueError):
        raise PrescriptionInputError(AXIS_RANGE_MESSAGE)

    if not is_valid_float(number) or not is_close(number, round(number)):
        raise PrescriptionInputError(AXIS_RANGE_MESSAGE)

    axis = int(round(number))
    if axis < AXIS_MIN_DEG or axis > AXIS_MAX_DEG:
        raise PrescriptionInputError(AXIS_RANGE_MESSAGE)

    return axis


# =============================================================================
# ADD POWER
# =============================================================================


@dataclass(frozen=True)
class AddPowerResolution:
    """Итог ADD-расчёта.

    - add_power: ADD, использованный в расчёте
    - near_sphere: сфера для близи (введённая или вычисленная)
    - calculated_add: ADD, вычисленный как NV - DV (если ADD не был введён)
    - calculated_near_sphere: NV, вычисленная как DV + ADD (если NV не была введена)
    """

    add_power: float
    near_sphere: float
    calculated_add: float | None = None
    calculated_near_sphere: float | None = None


def resolve_add_power(
    distance_sphere: float,
    near_sphere: float | None,
    add_power: float | None,
    add_power_min: float = ADD_POWER_MIN_D,
    add_power_max: float = ADD_POWER_MAX_D,
) -> AddPowerResolution:
    """Вывод недостающей величины ADD / NV и проверка диапазона ADD.

    - ADD не введён, NV введена → ADD = NV - DV
    - ADD введён, NV не введена → NV = DV + ADD
    - введены оба → используется введённый ADD

    Raises:
        PrescriptionInputError: нет ни ADD, ни NV; ADD вне [add_power_min, add_power_max]
    """
    calculated_add = None
    calculated_near_sphere = None

    if add_power is None:
        if near_sphere is None:
            raise PrescriptionInputError(ADD_REQUIRED_MESSAGE)
        add_power = round_to_quarter(near_sphere - distance_sphere)
        calculated_add = add_power

    if near_sphere is None:
        near_sphere = round_to_quarter(distance_sphere + add_power)
        calculated_near_sphere = near_sphere

    if not within_closed_range(add_power, add_power_min, add_power_max):
        raise PrescriptionInputError(add_range_message(add_power_min, add_power_max))

    return AddPowerResolution(
        add_power=add_power,
        near_sphere=near_sphere,
        calculated_add=calculated_add,
        calculated_near_sphere=calculated_near_sphere,
    )
