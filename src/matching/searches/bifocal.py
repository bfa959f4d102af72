"""ADD Table Search — Bifocal KT / PROGRESSIVE_SPH

Рецепт без цилиндра. Сфера для дали проверяется против ADD-строк
("<B>/+ ADD") со ступенчатыми окнами. Из всех покрывающих записей
лучшая — с ближайшей к сфере базой; при равенстве — с большей базой.

ADD (введённый или вычисленный) уже проверен на диапазон до вызова.
"""

import logging

from src.core.domain.brand_table import BIFOCAL_KT, PROGRESSIVE_SPH, BrandTable
from src.core.domain.match_result import CalculationMode, CategoryInfo, MatchResult, RangeMatch
from src.core.domain.prescription import Prescription, Representation
from src.matching.policy import MatchingPolicy
from src.matching.range_grammar import add_power_base, matches_range
from src.matching.validation import AddPowerResolution

logger = logging.getLogger(__name__)


class BifocalSearch:
    """Поиск по ADD-таблице (Bifocal KT или PROGRESSIVE_SPH)."""

    def __init__(
        self,
        table_key: str = BIFOCAL_KT,
        mode: CalculationMode = CalculationMode.BIFOCAL,
        policy: MatchingPolicy | None = None,
    ):
        self.table_key = table_key
        self.mode = mode
        self.policy = policy or MatchingPolicy()

    def evaluate(
        self,
        brand_table: BrandTable,
        distance_sphere: float,
        add: AddPowerResolution,
    ) -> MatchResult:
        """Поиск записи для сферы дали.

        Args:
            brand_table: таблица бренда
            distance_sphere: сфера для дали (D)
            add: итог ADD-расчёта

        Returns:
            MatchResult с совпадениями, упорядоченными по близости базы
        """
        original = Prescription(sphere=distance_sphere, cylinder=0.0, axis=0)

        candidates: list[tuple[float, RangeMatch]] = []
        for record in brand_table.records_for(self.table_key):
            base = add_power_base(record.range)
            if base is None:
                continue
            if matches_range(record.range, distance_sphere, 0.0):
                candidates.append(
                    (
                        base,
                        RangeMatch(
                            record=record,
                            representation=Representation.ORIGINAL,
                            table=self.table_key,
                        ),
                    )
                )

        # Ближайшая база, при равенстве большая
        candidates.sort(key=lambda item: (abs(distance_sphere - item[0]), -item[0]))
        matches = [match for _, match in candidates]

        common = dict(
            mode=self.mode,
            original=original,
            add_power=add.add_power,
            calculated_add=add.calculated_add,
            calculated_near_sphere=add.calculated_near_sphere,
        )

        if not matches:
            logger.debug("%s: no range for sphere %+.2f", self.table_key, distance_sphere)
            return MatchResult(
                **common,
                search_strategy=(
                    f"{self.table_key} lookup for distance sphere {distance_sphere:+.2f} "
                    f"with ADD {add.add_power:+.2f}: no ADD range covers this sphere."
                ),
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
            search_strategy=(
                f"{self.table_key} lookup for distance sphere {distance_sphere:+.2f} "
                f"with ADD {add.add_power:+.2f}: {best.range} selected "
                f"(closest ADD base, {len(matches)} candidate(s))."
            ),
        )


def bifocal_search(policy: MatchingPolicy | None = None) -> BifocalSearch:
    return BifocalSearch(BIFOCAL_KT, CalculationMode.BIFOCAL, policy)


def progressive_sphere_search(policy: MatchingPolicy | None = None) -> BifocalSearch:
    return BifocalSearch(PROGRESSIVE_SPH, CalculationMode.PROGRESSIVE, policy)
