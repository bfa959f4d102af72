"""
Data contracts.

JSON Schema contract for raw brand tables, checked before pydantic parsing.
"""

from .validators import (
    BrandTableValidator,
    ContractValidator,
    SchemaLoader,
    brand_table_errors,
    describe_error,
    validate_brand_table,
)

__all__ = [
    "SchemaLoader",
    "ContractValidator",
    "BrandTableValidator",
    "describe_error",
    "validate_brand_table",
    "brand_table_errors",
]
