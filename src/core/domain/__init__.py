"""
Domain models and value objects.

Contains fundamental domain entities like Prescription, BrandTable, MatchResult.
"""

from src.core.domain.brand_table import (
    BIFOCAL_KT,
    COMP_KT,
    CYL_KT,
    PROGRESSIVE_COMP,
    PROGRESSIVE_CYL,
    PROGRESSIVE_SPH,
    TABLE_FIELDS,
    BrandInfo,
    BrandTable,
    PriceRangeRecord,
)
from src.core.domain.match_result import (
    CalculationMode,
    CategoryInfo,
    MatchResult,
    RangeMatch,
)
from src.core.domain.prescription import Category, Prescription, Representation

__all__ = [
    # Prescription
    "Prescription",
    "Category",
    "Representation",
    # Brand table
    "BIFOCAL_KT",
    "CYL_KT",
    "COMP_KT",
    "PROGRESSIVE_SPH",
    "PROGRESSIVE_CYL",
    "PROGRESSIVE_COMP",
    "TABLE_FIELDS",
    "PriceRangeRecord",
    "BrandTable",
    "BrandInfo",
    # Match result
    "CalculationMode",
    "RangeMatch",
    "CategoryInfo",
    "MatchResult",
]
