"""Output artifacts: schema snapshots, diff reports and type definitions."""

from .diff import compare_schemas, format_schema_diff
from .json_writer import read_schema, schema_from_dict, schema_to_dict, write_schema
from .types_writer import TypesWriter, generate_type_definitions, write_types_file

__all__ = [
    "TypesWriter",
    "compare_schemas",
    "format_schema_diff",
    "generate_type_definitions",
    "read_schema",
    "schema_from_dict",
    "schema_to_dict",
    "write_schema",
    "write_types_file",
]
