"""
Тесты для модуля Optics

Проверяет:
1. Транспозицию рецепта (закреплённые значения, без предположения round-trip)
2. Поворот оси (flip и modular конвенции)
3. Квантование оси в 45/90/135/180
4. Bucket-категории цилиндра и сферы
"""

import pytest

from src.core.domain import Prescription
from src.core.math.optics import (
    DEFAULT_AXIS_DEG,
    AxisConvention,
    cylinder_bucket,
    flip_axis,
    map_axis,
    sphere_bucket,
    transpose_prescription,
)


# =============================================================================
# ТРАНСПОЗИЦИЯ
# =============================================================================


class TestTransposePrescription:
    """Тесты для transpose_prescription"""

    def test_crossed_signs_example(self) -> None:
        """+1.0 / -1.5 x 90 → -0.5 / +1.5 x 180"""
        result = transpose_prescription(1.0, -1.5, 90)
        assert result == Prescription(sphere=-0.5, cylinder=1.5, axis=180)

    def test_both_negative(self) -> None:
        result = transpose_prescription(-2.5, -1.0, 45)
        assert result.sphere == -3.5
        assert result.cylinder == 1.0
        assert result.axis == 135

    def test_axis_above_90_decremented(self) -> None:
        assert transpose_prescription(-1.0, 0.5, 170).axis == 80

    def test_missing_axis_treated_as_default(self) -> None:
        """Ось не указана → 90 → 180"""
        assert transpose_prescription(-1.0, -0.5, None).axis == 180
        assert transpose_prescription(-1.0, -0.5, 0).axis == 180

    def test_zero_cylinder_keeps_powers(self) -> None:
        result = transpose_prescription(-1.0, 0.0, 90)
        assert result.sphere == -1.0
        assert result.cylinder == 0.0

    def test_results_are_quarter_quantised(self) -> None:
        result = transpose_prescription(0.1 + 0.15, -0.5, 30)
        assert result.sphere == -0.25
        assert result.cylinder == 0.5

    def test_no_negative_zero(self) -> None:
        """sphere + cylinder == 0 не даёт -0.0"""
        result = transpose_prescription(0.5, -0.5, 90)
        assert str(result.sphere) == "0.0"

    def test_double_transposition_axis_not_restored(self) -> None:
        """Двойная транспозиция оси 0 даёт 90, а не 0"""
        once = transpose_prescription(-1.0, -0.5, 0)
        twice = transpose_prescription(once.sphere, once.cylinder, once.axis)
        assert twice.axis == 90
        assert twice.sphere == -1.0
        assert twice.cylinder == -0.5

    def test_modular_convention(self) -> None:
        result = transpose_prescription(-1.0, -0.5, 120, AxisConvention.MODULAR)
        assert result.axis == 30


# =============================================================================
# ОСЬ
# =============================================================================


class TestFlipAxis:
    """Тесты для flip_axis"""

    @pytest.mark.parametrize(
        "axis,expected",
        [(1, 91), (45, 135), (90, 180), (91, 1), (135, 45), (180, 90)],
    )
    def test_flip_convention(self, axis: int, expected: int) -> None:
        assert flip_axis(axis) == expected

    @pytest.mark.parametrize(
        "axis,expected",
        [(45, 135), (90, 180), (120, 30), (180, 90)],
    )
    def test_modular_convention(self, axis: int, expected: int) -> None:
        assert flip_axis(axis, AxisConvention.MODULAR) == expected

    def test_missing_axis_uses_default(self) -> None:
        assert DEFAULT_AXIS_DEG == 90
        assert flip_axis(None) == 180
        assert flip_axis(0) == 180


class TestMapAxis:
    """Тесты для map_axis"""

    @pytest.mark.parametrize(
        "axis,expected",
        [
            (0, 180),
            (1, 180),
            (20, 180),
            (21, 45),
            (45, 45),
            (69, 45),
            (70, 90),
            (110, 90),
            (111, 135),
            (155, 135),
            (156, 180),
            (180, 180),
        ],
    )
    def test_bucket_boundaries(self, axis: int, expected: int) -> None:
        assert map_axis(axis) == expected

    def test_none_maps_to_horizontal(self) -> None:
        assert map_axis(None) == 180

    def test_result_always_table_axis(self) -> None:
        assert {map_axis(a) for a in range(0, 181)} == {45, 90, 135, 180}


# =============================================================================
# POWER BUCKETS
# =============================================================================


class TestCylinderBucket:
    """Тесты для cylinder_bucket"""

    @pytest.mark.parametrize(
        "cylinder,expected",
        [(0.25, 1), (-1.0, 1), (1.25, 2), (-2.0, 2), (2.25, 3), (3.0, 3), (-3.25, 4), (4.0, 4)],
    )
    def test_buckets(self, cylinder: float, expected: int) -> None:
        assert cylinder_bucket(cylinder) == expected

    def test_outside_table(self) -> None:
        assert cylinder_bucket(0.0) is None
        assert cylinder_bucket(4.25) is None
        assert cylinder_bucket(-6.0) is None


class TestSphereBucket:
    """Тесты для sphere_bucket"""

    @pytest.mark.parametrize(
        "sphere,expected",
        [(0.25, 2), (-2.0, 2), (2.25, 3), (-3.0, 3), (3.5, 4), (-4.75, 5), (5.25, 6), (6.0, 6)],
    )
    def test_buckets(self, sphere: float, expected: int) -> None:
        assert sphere_bucket(sphere) == expected

    def test_outside_table(self) -> None:
        assert sphere_bucket(0.0) is None
        assert sphere_bucket(6.25) is None
