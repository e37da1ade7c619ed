"""Marker detection over component source trees."""

from .attributes import AttributeExtractor, ExtractedAttributes
from .walker import ParseResult, SourceWalker, find_duplicate_paths, group_fields_by_path, unique_paths

__all__ = [
    "AttributeExtractor",
    "ExtractedAttributes",
    "ParseResult",
    "SourceWalker",
    "find_duplicate_paths",
    "group_fields_by_path",
    "unique_paths",
]
