"""
Table searches.

One search class per table family, each with evaluate() -> MatchResult.
"""

from src.matching.searches.bifocal import BifocalSearch, bifocal_search, progressive_sphere_search
from src.matching.searches.compound import CompoundSearch, comp_kt_search, progressive_comp_search
from src.matching.searches.cylinder_axis import CylinderAxisSearch, cyl_kt_search, progressive_cyl_search
from src.matching.searches.single_vision import SingleVisionSearch

__all__ = [
    "SingleVisionSearch",
    "BifocalSearch",
    "CylinderAxisSearch",
    "CompoundSearch",
    "bifocal_search",
    "progressive_sphere_search",
    "cyl_kt_search",
    "progressive_cyl_search",
    "comp_kt_search",
    "progressive_comp_search",
]
