"""Тесты для SingleVisionSearch

Покрытие:
- Приоритет категорий Minus → Plus → SV Cross
- Исходная форма раньше транспонированной
- Категория, форма и приоритетный уровень в результате
- Промах без ошибки
"""

import pytest

from src.brands import load_brand_data
from src.core.domain import (
    BrandTable,
    CalculationMode,
    Category,
    PriceRangeRecord,
    Prescription,
    Representation,
)
from src.matching.policy import MatchingPolicy
from src.matching.searches import SingleVisionSearch


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def search():
    """SingleVisionSearch с политикой по умолчанию."""
    return SingleVisionSearch()


@pytest.fixture
def enterprise():
    """Bundled таблица Enterprise."""
    return load_brand_data("enterprise")


@pytest.fixture
def overlap_table():
    """Рецепт -1.0/+1.0 попадает в Minus (исходный) и в Plus (только транспонированный)."""
    return BrandTable(
        brand="Overlap",
        single_vision={
            Category.MINUS_COMP: [PriceRangeRecord(range="-2.0 sph", prices={"HC": 100})],
            Category.PLUS_COMP: [PriceRangeRecord(range="+1.0 sph", prices={"HC": 200})],
            Category.SV_CROSS_COMP: [],
        },
    )


# =============================================================================
# SCENARIOS
# =============================================================================


class TestSingleVisionScenarios:
    """Сценарии single-vision подбора"""

    def test_same_sign_minus(self, search, enterprise):
        result = search.evaluate(enterprise, Prescription(sphere=-2.5, cylinder=-1.0, axis=90))

        assert result.mode == CalculationMode.SINGLE_VISION
        assert result.best_match.range == "-6.0 to -2.0"
        assert result.category_info.category == "Minus Comp"
        assert result.category_info.representation == Representation.ORIGINAL
        assert result.category_info.priority == 1
        assert result.prescription_case == "Both Negative - Minus Comp Priority"

    def test_same_sign_plus(self, search, enterprise):
        result = search.evaluate(enterprise, Prescription(sphere=2.5, cylinder=1.5, axis=90))

        assert result.best_match.range == "+3.0 to +2.0"
        assert result.category_info.category == "Plus Comp"
        assert result.category_info.representation == Representation.ORIGINAL
        assert result.category_info.priority == 2

    def test_crossed_signs(self, search, enterprise):
        result = search.evaluate(enterprise, Prescription(sphere=1.0, cylinder=-1.5, axis=90))

        assert result.transposed == Prescription(sphere=-0.5, cylinder=1.5, axis=180)
        assert result.category_info.category == "SV Cross Comp"
        assert result.category_info.priority == 3
        assert result.best_match.range == "+1.75 to -2.0"
        assert not result.best_match.is_transposed

    def test_zero_cylinder(self, search, enterprise):
        result = search.evaluate(enterprise, Prescription(sphere=-1.0, cylinder=0.0))

        assert result.category_info.category == "Minus Comp"
        assert result.category_info.representation == Representation.ORIGINAL
        assert result.prescription_case == "Zero Cylinder - Minus/Plus Comp"

    def test_transposed_plus_match(self, search, enterprise):
        """+0.25/-0.25 ложится в Plus Comp только транспонированным (0.00/+0.25)"""
        result = search.evaluate(enterprise, Prescription(sphere=0.25, cylinder=-0.25, axis=90))

        assert result.category_info.category == "Plus Comp"
        assert result.category_info.representation == Representation.TRANSPOSED
        assert result.best_match.is_transposed
        assert "transposed values" in result.search_strategy

    def test_single_sphere_record(self, search, enterprise):
        result = search.evaluate(enterprise, Prescription(sphere=-24.5, cylinder=-0.5, axis=90))
        assert result.best_match.range == "-25.0 sph"

    def test_first_record_in_category_wins(self, search, enterprise):
        """-5.0/-1.0 покрывают и "-6.0 to -2.0", и "-8.0 to -2.0": побеждает первая"""
        result = search.evaluate(enterprise, Prescription(sphere=-5.0, cylinder=-1.0, axis=90))
        assert result.best_match.range == "-6.0 to -2.0"
        assert len(result.matches) == 1


class TestSingleVisionPriority:
    """Приоритет исходной формы и категорий"""

    def test_minus_original_beats_plus_transposed(self, search, overlap_table):
        result = search.evaluate(overlap_table, Prescription(sphere=-1.0, cylinder=1.0, axis=90))

        assert result.category_info.category == "Minus Comp"
        assert result.category_info.representation == Representation.ORIGINAL
        assert result.best_match.prices == {"HC": 100}

    def test_missing_axis_defaults_to_90(self, search, enterprise):
        result = search.evaluate(enterprise, Prescription(sphere=1.0, cylinder=-1.5))
        assert result.original.axis == 90
        assert result.transposed.axis == 180

    def test_custom_default_axis(self, enterprise):
        search = SingleVisionSearch(MatchingPolicy(default_axis=180))
        result = search.evaluate(enterprise, Prescription(sphere=1.0, cylinder=-1.5))
        assert result.transposed.axis == 90


class TestSingleVisionMiss:
    """Промах — не ошибка"""

    def test_no_range(self, search, enterprise):
        result = search.evaluate(enterprise, Prescription(sphere=-30.0, cylinder=0.0))

        assert not result.is_error
        assert result.best_match is None
        assert result.category_info is None
        assert result.search_strategy.startswith("No single vision range")

    def test_empty_table(self, search):
        table = BrandTable(brand="Empty")
        result = search.evaluate(table, Prescription(sphere=-1.0))
        assert result.best_match is None
        assert not result.is_error


class TestZeroCylinderRouting:
    """Цилиндр 0: только категория determine_prescription_type"""

    @pytest.mark.parametrize("sphere", [0.0, -0.0])
    def test_plano_is_plus_comp(self, search, enterprise, sphere):
        result = search.evaluate(enterprise, Prescription(sphere=sphere, cylinder=0.0, axis=90))

        assert result.category_info.category == Category.PLUS_COMP.value
        assert result.category_info.priority == 2
        assert result.best_match.range == "+3.0 to +2.0"
        assert result.search_strategy.endswith("(priority 2, step 1 of 2).")

    def test_other_categories_not_searched(self, search):
        table = BrandTable.model_validate(
            {
                "brand": "Cross only",
                "single_vision": {"SV Cross Comp": [{"range": "+1.75 to -2.0", "HC": 900}]},
            }
        )
        result = search.evaluate(table, Prescription(sphere=1.0, cylinder=0.0))

        assert result.best_match is None
        assert result.search_strategy == (
            "No single vision range covers this prescription. "
            "Tried Plus Comp (original), Plus Comp (transposed)."
        )

    def test_nonzero_cylinder_walks_all_steps(self, search, enterprise):
        result = search.evaluate(enterprise, Prescription(sphere=-2.5, cylinder=-1.0, axis=90))
        assert result.search_strategy.endswith("step 1 of 6).")
