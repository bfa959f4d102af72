"""
Тесты для Classification: знаковый шаблон и single-vision категория

Проверяет:
1. Zero-cylinder shortcut
2. Дизъюнктность категорий
3. Нулевую сферу (знак цилиндра)
4. Описание случая для отображения
"""

import itertools

import pytest

from src.core.domain import Category
from src.matching.classification import (
    SignPattern,
    describe_prescription_case,
    determine_prescription_type,
    sign_pattern,
)


QUARTERS = [q / 4 for q in range(-12, 13)]


class TestSignPattern:
    """Тесты для sign_pattern"""

    def test_zero_cylinder(self) -> None:
        assert sign_pattern(-1.0, 0.0) == SignPattern.ZERO_CYLINDER
        assert sign_pattern(2.0, 0.0) == SignPattern.ZERO_CYLINDER

    def test_both_negative(self) -> None:
        assert sign_pattern(-2.5, -1.0) == SignPattern.BOTH_NEGATIVE

    def test_both_positive(self) -> None:
        assert sign_pattern(2.5, 1.5) == SignPattern.BOTH_POSITIVE

    def test_mixed(self) -> None:
        assert sign_pattern(1.0, -1.5) == SignPattern.MIXED
        assert sign_pattern(-1.0, 0.5) == SignPattern.MIXED

    def test_zero_sphere_takes_cylinder_sign(self) -> None:
        assert sign_pattern(0.0, -0.25) == SignPattern.BOTH_NEGATIVE
        assert sign_pattern(0.0, 0.75) == SignPattern.BOTH_POSITIVE


class TestDeterminePrescriptionType:
    """Тесты для determine_prescription_type"""

    def test_zero_cylinder_shortcut(self) -> None:
        assert determine_prescription_type(-1.0, 0.0) == Category.MINUS_COMP
        assert determine_prescription_type(1.0, 0.0) == Category.PLUS_COMP
        assert determine_prescription_type(0.0, 0.0) == Category.PLUS_COMP

    def test_same_sign(self) -> None:
        assert determine_prescription_type(-2.5, -1.0) == Category.MINUS_COMP
        assert determine_prescription_type(2.5, 1.5) == Category.PLUS_COMP

    def test_crossed_signs(self) -> None:
        assert determine_prescription_type(1.0, -1.5) == Category.SV_CROSS_COMP

    def test_every_quarter_pair_has_exactly_one_pattern(self) -> None:
        """Для любого ненулевого цилиндра выполняется ровно один шаблон"""
        for sphere, cylinder in itertools.product(QUARTERS, QUARTERS):
            if cylinder == 0.0:
                continue
            pattern = sign_pattern(sphere, cylinder)
            assert pattern in (
                SignPattern.BOTH_NEGATIVE,
                SignPattern.BOTH_POSITIVE,
                SignPattern.MIXED,
            )
            assert isinstance(determine_prescription_type(sphere, cylinder), Category)


class TestDescribePrescriptionCase:
    """Тесты для describe_prescription_case"""

    @pytest.mark.parametrize(
        "sphere,cylinder,label",
        [
            (-1.0, 0.0, "Zero Cylinder - Minus/Plus Comp"),
            (-2.5, -1.0, "Both Negative - Minus Comp Priority"),
            (2.5, 1.5, "Both Positive - Plus Comp Priority"),
            (1.0, -1.5, "Crossed Signs - SV Cross Comp"),
        ],
    )
    def test_labels(self, sphere: float, cylinder: float, label: str) -> None:
        assert describe_prescription_case(sphere, cylinder) == label
