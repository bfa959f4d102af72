"""
Prescription matching engine.

Validation, classification, range grammars, priority policy,
per-table searches and mode entry points.
"""

from src.matching.classification import (
    SignPattern,
    describe_prescription_case,
    determine_prescription_type,
    sign_pattern,
)
from src.matching.engine import (
    find_add_power_options,
    find_comp_kt_options,
    find_cyl_kt_options,
    find_lens_options,
    find_near_vision_options,
    find_progressive_comp_options,
    find_progressive_cyl_options,
    find_single_vision_options,
)
from src.matching.policy import (
    COMPOUND_SIGN_PRIORITY,
    SINGLE_VISION_SEARCH_ORDER,
    MatchingPolicy,
    SearchStep,
    compound_priority,
    sort_by_compound_priority,
)
from src.matching.range_grammar import RangeGrammar, detect_grammar, matches_range, parse_range
from src.matching.validation import (
    PrescriptionInputError,
    parse_axis,
    parse_diopter,
    resolve_add_power,
    validate_quarter_interval,
)

__all__ = [
    # Entry points
    "find_lens_options",
    "find_single_vision_options",
    "find_add_power_options",
    "find_near_vision_options",
    "find_cyl_kt_options",
    "find_progressive_cyl_options",
    "find_comp_kt_options",
    "find_progressive_comp_options",
    # Validation
    "PrescriptionInputError",
    "validate_quarter_interval",
    "parse_diopter",
    "parse_axis",
    "resolve_add_power",
    # Classification
    "SignPattern",
    "sign_pattern",
    "determine_prescription_type",
    "describe_prescription_case",
    # Range grammar
    "RangeGrammar",
    "detect_grammar",
    "parse_range",
    "matches_range",
    # Policy
    "MatchingPolicy",
    "SearchStep",
    "SINGLE_VISION_SEARCH_ORDER",
    "COMPOUND_SIGN_PRIORITY",
    "compound_priority",
    "sort_by_compound_priority",
]
