"""Single Vision Search — приоритетный поиск по single-vision категориям

Порядок (SINGLE_VISION_SEARCH_ORDER):
1. Minus Comp: исходный рецепт, затем транспонированный
2. Plus Comp: исходный, затем транспонированный
3. SV Cross Comp: исходный, затем транспонированный

Внутри шага побеждает первая запись категории, покрывающая рецепт
(окна внутри категории упорядочены от узких к широким).
Поиск останавливается на первом шаге, давшем совпадение.

Цилиндр 0: знаковая логика не применяется, обходятся только шаги
категории determine_prescription_type (Minus Comp при сфере < 0,
иначе Plus Comp). Плано 0/0 поэтому ищется в Plus Comp.
"""

import logging

from src.core.domain.brand_table import BrandTable
from src.core.domain.match_result import CalculationMode, CategoryInfo, MatchResult, RangeMatch
from src.core.domain.prescription import Prescription, Representation
from src.core.math.numerical_safeguards import is_zero
from src.core.math.optics import transpose_prescription
from src.matching.classification import describe_prescription_case, determine_prescription_type
from src.matching.policy import SINGLE_VISION_SEARCH_ORDER, MatchingPolicy, SearchStep
from src.matching.range_grammar import matches_range

logger = logging.getLogger(__name__)


class SingleVisionSearch:
    """Поиск single-vision категории.

    Stateless: политика задаётся при создании, таблица и рецепт — на вызов.
    """

    def __init__(self, policy: MatchingPolicy | None = None):
        self.policy = policy or MatchingPolicy()

    def evaluate(self, brand_table: BrandTable, prescription: Prescription) -> MatchResult:
        """Поиск лучшей записи для рецепта.

        Args:
            brand_table: таблица бренда
            prescription: валидированный рецепт (ось 0 → ось по умолчанию)

        Returns:
            MatchResult: best_match + category_info при совпадении,
            иначе best_match=None и перечень опробованных шагов в search_strategy
        """
        original = prescription.model_copy(
            update={"axis": prescription.axis or self.policy.default_axis}
        )
        transposed = transpose_prescription(original.sphere, original.cylinder, original.axis)
        forms = {
            Representation.ORIGINAL: original,
            Representation.TRANSPOSED: transposed,
        }

        steps = self._search_order(original)

        for index, step in enumerate(steps, start=1):
            match = self._match_step(brand_table, step, forms[step.representation])
            if match is None:
                continue

            logger.debug(
                "Single vision match: %s (%s) -> %s",
                step.category.value,
                step.representation.value,
                match.range,
            )
            return MatchResult(
                mode=CalculationMode.SINGLE_VISION,
                original=original,
                transposed=transposed,
                matches=[match],
                best_match=match,
                category_info=CategoryInfo(
                    category=step.category.value,
                    priority=step.priority,
                    representation=step.representation,
                ),
                search_strategy=(
                    f"Single vision priority search: {step.category.value} matched using "
                    f"{step.representation.value} values (priority {step.priority}, "
                    f"step {index} of {len(steps)})."
                ),
                prescription_case=describe_prescription_case(original.sphere, original.cylinder),
            )

        logger.debug("Single vision: no range for %s", original)
        return MatchResult(
            mode=CalculationMode.SINGLE_VISION,
            original=original,
            transposed=transposed,
            search_strategy=(
                "No single vision range covers this prescription. Tried "
                + ", ".join(
                    f"{step.category.value} ({step.representation.value})"
                    for step in steps
                )
                + "."
            ),
            prescription_case=describe_prescription_case(original.sphere, original.cylinder),
        )

    def _search_order(self, prescription: Prescription) -> tuple[SearchStep, ...]:
        """Шаги поиска; при нулевом цилиндре только шаги его категории."""
        if not is_zero(prescription.cylinder):
            return SINGLE_VISION_SEARCH_ORDER

        category = determine_prescription_type(prescription.sphere, 0.0)
        return tuple(step for step in SINGLE_VISION_SEARCH_ORDER if step.category == category)

    def _match_step(
        self,
        brand_table: BrandTable,
        step: SearchStep,
        candidate: Prescription,
    ) -> RangeMatch | None:
        for record in brand_table.category_records(step.category):
            if matches_range(
                record.range,
                candidate.sphere,
                candidate.cylinder,
                single_sphere_tolerance=self.policy.single_sphere_tolerance,
            ):
                return RangeMatch(
                    record=record,
                    representation=step.representation,
                    table=step.category.value,
                )
        return None
