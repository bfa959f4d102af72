"""Диоптрийная арифметика: толерантности, квантование 0.25 D, транспозиция и оси."""

from src.core.math.numerical_safeguards import (
    EPS_DIOPTER,
    EPS_FLOAT_COMPARE_REL,
    QUARTER_DIOPTER_STEP,
    is_close,
    is_negative,
    is_positive,
    is_quarter_multiple,
    is_valid_float,
    is_zero,
    round_to_epsilon,
    round_to_quarter,
    within_closed_range,
    within_zero_anchored,
)
from src.core.math.optics import (
    AXIS_BUCKET_HORIZONTAL,
    AXIS_BUCKETS,
    AXIS_MAX_DEG,
    AXIS_MIN_DEG,
    CYLINDER_BUCKETS,
    DEFAULT_AXIS_DEG,
    SPHERE_BUCKETS,
    AxisConvention,
    cylinder_bucket,
    flip_axis,
    map_axis,
    sphere_bucket,
    transpose_prescription,
)

__all__ = [
    "EPS_DIOPTER",
    "EPS_FLOAT_COMPARE_REL",
    "QUARTER_DIOPTER_STEP",
    "is_close",
    "is_negative",
    "is_positive",
    "is_quarter_multiple",
    "is_valid_float",
    "is_zero",
    "round_to_epsilon",
    "round_to_quarter",
    "within_closed_range",
    "within_zero_anchored",
    "AXIS_BUCKET_HORIZONTAL",
    "AXIS_BUCKETS",
    "AXIS_MAX_DEG",
    "AXIS_MIN_DEG",
    "CYLINDER_BUCKETS",
    "DEFAULT_AXIS_DEG",
    "SPHERE_BUCKETS",
    "AxisConvention",
    "cylinder_bucket",
    "flip_axis",
    "map_axis",
    "sphere_bucket",
    "transpose_prescription",
]
