"""Classification — знаковый шаблон рецепта и single-vision категория

Правила:
- Цилиндр 0 → Minus Comp если сфера < 0, иначе Plus Comp (zero-cylinder shortcut)
- Оба отрицательные → Minus Comp
- Оба положительные → Plus Comp
- Разные знаки → SV Cross Comp

Нулевая сфера при ненулевом цилиндре принимает знак цилиндра,
поэтому для cylinder != 0 ровно один из шаблонов BOTH_NEGATIVE /
BOTH_POSITIVE / MIXED выполняется всегда.
"""

from enum import Enum
from typing import Final

from src.core.domain.prescription import Category
from src.core.math.numerical_safeguards import is_negative, is_positive, is_zero


class SignPattern(str, Enum):
    """Знаковый шаблон пары (сфера, цилиндр)."""

    ZERO_CYLINDER = "zero_cylinder"
    BOTH_NEGATIVE = "both_negative"
    BOTH_POSITIVE = "both_positive"
    MIXED = "mixed"


PATTERN_CATEGORY: Final[dict[SignPattern, Category]] = {
    SignPattern.BOTH_NEGATIVE: Category.MINUS_COMP,
    SignPattern.BOTH_POSITIVE: Category.PLUS_COMP,
    SignPattern.MIXED: Category.SV_CROSS_COMP,
}

PATTERN_CASE_LABEL: Final[dict[SignPattern, str]] = {
    SignPattern.ZERO_CYLINDER: "Zero Cylinder - Minus/Plus Comp",
    SignPattern.BOTH_NEGATIVE: "Both Negative - Minus Comp Priority",
    SignPattern.BOTH_POSITIVE: "Both Positive - Plus Comp Priority",
    SignPattern.MIXED: "Crossed Signs - SV Cross Comp",
}


def sign_pattern(sphere: float, cylinder: float) -> SignPattern:
    """Знаковый шаблон рецепта.

    Examples:
        >>> sign_pattern(-1.0, 0.0)
        <SignPattern.ZERO_CYLINDER: 'zero_cylinder'>
        >>> sign_pattern(0.0, -0.25)
        <SignPattern.BOTH_NEGATIVE: 'both_negative'>
        >>> sign_pattern(1.0, -1.5)
        <SignPattern.MIXED: 'mixed'>
    """
    if is_zero(cylinder):
        return SignPattern.ZERO_CYLINDER

    # Нулевая сфера не задаёт знак: берём знак цилиндра
    sphere_sign = sphere if not is_zero(sphere) else cylinder

    if is_negative(sphere_sign) and is_negative(cylinder):
        return SignPattern.BOTH_NEGATIVE
    if is_positive(sphere_sign) and is_positive(cylinder):
        return SignPattern.BOTH_POSITIVE
    return SignPattern.MIXED


def determine_prescription_type(sphere: float, cylinder: float) -> Category:
    """Single-vision категория рецепта."""
    pattern = sign_pattern(sphere, cylinder)

    if pattern == SignPattern.ZERO_CYLINDER:
        return Category.MINUS_COMP if is_negative(sphere) else Category.PLUS_COMP

    return PATTERN_CATEGORY[pattern]


def describe_prescription_case(sphere: float, cylinder: float) -> str:
    """Человекочитаемое описание случая для отображения в результате."""
    return PATTERN_CASE_LABEL[sign_pattern(sphere, cylinder)]
