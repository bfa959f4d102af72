"""Cylinder Axis Search — CYL_KT / PROGRESSIVE__CYL

Рецепт с цилиндром без сферы. Запись "<C>, <axes>" покрывает рецепт, если
bucket |cylinder| равен |C|, знаки совпадают и квантованная ось входит в axes.

Нулевой цилиндр — ошибка валидации этого пути, а не промах.
"""

import logging

from src.core.domain.brand_table import CYL_KT, PROGRESSIVE_CYL, BrandTable
from src.core.domain.match_result import CalculationMode, CategoryInfo, MatchResult, RangeMatch
from src.core.domain.prescription import Prescription, Representation
from src.core.math.numerical_safeguards import is_zero
from src.core.math.optics import cylinder_bucket, map_axis
from src.matching.policy import MatchingPolicy
from src.matching.range_grammar import matches_range
from src.matching.validation import (
    AXIS_REQUIRED_MESSAGE,
    CYLINDER_REQUIRED_MESSAGE,
    AddPowerResolution,
    PrescriptionInputError,
)

logger = logging.getLogger(__name__)


class CylinderAxisSearch:
    """Поиск по CYL таблице."""

    def __init__(
        self,
        table_key: str = CYL_KT,
        mode: CalculationMode = CalculationMode.BIFOCAL,
        policy: MatchingPolicy | None = None,
    ):
        self.table_key = table_key
        self.mode = mode
        self.policy = policy or MatchingPolicy()

    def evaluate(
        self,
        brand_table: BrandTable,
        cylinder: float | None,
        axis: int,
        add: AddPowerResolution | None = None,
    ) -> MatchResult:
        """Поиск записи для цилиндра и оси.

        Args:
            brand_table: таблица бренда
            cylinder: цилиндр (D), обязателен и ненулевой
            axis: ось (градусы), 0 — не указана
            add: итог ADD-расчёта, если ADD / NV были указаны

        Returns:
            MatchResult с mapped_axis; все совпадения в порядке таблицы

        Raises:
            PrescriptionInputError: цилиндр нулевой / не указан, ось не указана
        """
        if cylinder is None or is_zero(cylinder):
            raise PrescriptionInputError(CYLINDER_REQUIRED_MESSAGE)
        if not axis:
            raise PrescriptionInputError(AXIS_REQUIRED_MESSAGE)

        original = Prescription(sphere=0.0, cylinder=cylinder, axis=axis)
        mapped_axis = map_axis(axis)

        matches = [
            RangeMatch(record=record, representation=Representation.ORIGINAL, table=self.table_key)
            for record in brand_table.records_for(self.table_key)
            if matches_range(record.range, 0.0, cylinder, axis)
        ]

        common = dict(mode=self.mode, original=original, mapped_axis=mapped_axis)
        if add is not None:
            common.update(
                add_power=add.add_power,
                calculated_add=add.calculated_add,
                calculated_near_sphere=add.calculated_near_sphere,
            )

        bucket = cylinder_bucket(cylinder)
        lookup = (
            f"{self.table_key} lookup for cylinder {cylinder:+.2f} "
            f"(bucket {bucket if bucket is not None else 'none'}) at axis {axis} "
            f"(mapped {mapped_axis})"
        )

        if not matches:
            logger.debug("%s: no range for cyl %+.2f axis %s", self.table_key, cylinder, axis)
            return MatchResult(
                **common,
                search_strategy=f"{lookup}: no matching range.",
            )

        best = matches[0]
        logger.debug("%s match: %s", self.table_key, best.range)
        return MatchResult(
            **common,
            matches=matches,
            best_match=best,
            category_info=CategoryInfo(
                category=self.table_key,
                priority=1,
                representation=Representation.ORIGINAL,
            ),
            search_strategy=f"{lookup}: {best.range} selected.",
        )


def cyl_kt_search(policy: MatchingPolicy | None = None) -> CylinderAxisSearch:
    return CylinderAxisSearch(CYL_KT, CalculationMode.BIFOCAL, policy)


def progressive_cyl_search(policy: MatchingPolicy | None = None) -> CylinderAxisSearch:
    return CylinderAxisSearch(PROGRESSIVE_CYL, CalculationMode.PROGRESSIVE, policy)
