"""Compound Search — COMP_KT / PROGRESSIVE_COMP

Рецепт со сферой и цилиндром. Запись "<S>/<C> <axes>°" проверяется
по bucket сферы, bucket цилиндра, знакам и квантованной оси.

Порядок:
1. Исходный рецепт
2. Транспонированный рецепт (ось повёрнута на ±90)
3. Если совпадения дали обе формы — слияние и стабильная сортировка
   по COMPOUND_SIGN_PRIORITY (both-positive > both-negative > mixed-sign)
"""

import logging

from src.core.domain.brand_table import COMP_KT, PROGRESSIVE_COMP, BrandTable
from src.core.domain.match_result import CalculationMode, CategoryInfo, MatchResult, RangeMatch
from src.core.domain.prescription import Prescription, Representation
from src.core.math.numerical_safeguards import is_zero
from src.core.math.optics import map_axis, transpose_prescription
from src.matching.classification import describe_prescription_case
from src.matching.policy import (
    COMPOUND_PRIORITY_RULE,
    MatchingPolicy,
    compound_priority,
    sort_by_compound_priority,
)
from src.matching.range_grammar import matches_range
from src.matching.validation import AXIS_REQUIRED_MESSAGE, AddPowerResolution, PrescriptionInputError

logger = logging.getLogger(__name__)


class CompoundSearch:
    """Поиск по COMP таблице с учётом транспозиции."""

    def __init__(
        self,
        table_key: str = COMP_KT,
        mode: CalculationMode = CalculationMode.BIFOCAL,
        policy: MatchingPolicy | None = None,
    ):
        self.table_key = table_key
        self.mode = mode
        self.policy = policy or MatchingPolicy()

    def evaluate(
        self,
        brand_table: BrandTable,
        prescription: Prescription,
        add: AddPowerResolution | None = None,
    ) -> MatchResult:
        """Поиск записей для сферо-цилиндрического рецепта.

        Args:
            brand_table: таблица бренда
            prescription: рецепт (ось обязательна при ненулевом цилиндре)
            add: итог ADD-расчёта, если ADD / NV были указаны

        Returns:
            MatchResult: matches в порядке приоритета, best_match — первый

        Raises:
            PrescriptionInputError: цилиндр указан без оси
        """
        if not is_zero(prescription.cylinder) and not prescription.axis:
            raise PrescriptionInputError(AXIS_REQUIRED_MESSAGE)

        original = prescription
        transposed = transpose_prescription(original.sphere, original.cylinder, original.axis)

        original_matches = self._collect(brand_table, original, Representation.ORIGINAL)
        transposed_matches = self._collect(brand_table, transposed, Representation.TRANSPOSED)

        if original_matches and transposed_matches:
            matches = sort_by_compound_priority(original_matches + transposed_matches)
        else:
            matches = original_matches or transposed_matches

        result = dict(
            mode=self.mode,
            original=original,
            transposed=transposed,
            mapped_axis=map_axis(original.axis),
            transposed_mapped_axis=map_axis(transposed.axis),
            prescription_case=describe_prescription_case(original.sphere, original.cylinder),
        )
        if add is not None:
            result.update(
                add_power=add.add_power,
                calculated_add=add.calculated_add,
                calculated_near_sphere=add.calculated_near_sphere,
            )

        if not matches:
            logger.debug("%s: no range for %s or %s", self.table_key, original, transposed)
            return MatchResult(
                **result,
                search_strategy=(
                    f"{self.table_key} lookup: no matching range for original "
                    f"{_describe(original)} or transposed {_describe(transposed)}."
                ),
            )

        best = matches[0]
        logger.debug(
            "%s match: %s (%s, %d original, %d transposed)",
            self.table_key,
            best.range,
            best.representation.value,
            len(original_matches),
            len(transposed_matches),
        )
        return MatchResult(
            **result,
            matches=matches,
            best_match=best,
            category_info=CategoryInfo(
                category=self.table_key,
                priority=compound_priority(best),
                representation=best.representation,
            ),
            search_strategy=self._narrative(best, original_matches, transposed_matches),
        )

    def _collect(
        self,
        brand_table: BrandTable,
        candidate: Prescription,
        representation: Representation,
    ) -> list[RangeMatch]:
        return [
            RangeMatch(record=record, representation=representation, table=self.table_key)
            for record in brand_table.records_for(self.table_key)
            if matches_range(record.range, candidate.sphere, candidate.cylinder, candidate.axis)
        ]

    def _narrative(
        self,
        best: RangeMatch,
        original_matches: list[RangeMatch],
        transposed_matches: list[RangeMatch],
    ) -> str:
        if original_matches and transposed_matches:
            return (
                f"{self.table_key} lookup: matches from original ({len(original_matches)}) "
                f"and transposed ({len(transposed_matches)}) values, merged by sign priority "
                f"({COMPOUND_PRIORITY_RULE}); {best.range} selected using "
                f"{best.representation.value} values."
            )
        return (
            f"{self.table_key} lookup: {best.range} selected using "
            f"{best.representation.value} values only."
        )


def _describe(prescription: Prescription) -> str:
    return f"{prescription.sphere:+.2f}/{prescription.cylinder:+.2f} x {prescription.axis}"


def comp_kt_search(policy: MatchingPolicy | None = None) -> CompoundSearch:
    return CompoundSearch(COMP_KT, CalculationMode.BIFOCAL, policy)


def progressive_comp_search(policy: MatchingPolicy | None = None) -> CompoundSearch:
    return CompoundSearch(PROGRESSIVE_COMP, CalculationMode.PROGRESSIVE, policy)
