"""Schema building: normalization, merging, grouping and validation."""

from .generator import generate_schema, partition_fields, to_field_schema, update_meta
from .normalizer import (
    deduplicate_fields,
    merge_fields,
    normalize_path,
    reorder_sections,
    sort_schema,
)
from .validator import validate_schema

__all__ = [
    "deduplicate_fields",
    "generate_schema",
    "merge_fields",
    "normalize_path",
    "partition_fields",
    "reorder_sections",
    "sort_schema",
    "to_field_schema",
    "update_meta",
    "validate_schema",
]
