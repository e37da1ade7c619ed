"""Path normalization, deduplication and merging of field records."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Dict, List, Sequence

from ..constants import PATH_SEPARATOR, WILDCARD_SEGMENT
from ..models import FIELD_PROPERTIES, FieldSchema, PageSchema, ProjectSchema, SectionSchema

_INVALID_RUN = re.compile(r"[^a-z0-9._]+")
_DOT_RUN = re.compile(r"\.{2,}")
_UNDERSCORE_RUN = re.compile(r"_{2,}")

# Merged alongside the marker properties, first definer wins.
_MERGED_EXTRAS = ("element", "default_content")


def normalize_path(path: str) -> str:
    """Canonicalize a dotted path.

    Trims and lowercases, replaces every run of characters outside
    ``[a-z0-9._]`` with one underscore, then collapses repeated dots and
    repeated underscores. A segment that is exactly the wildcard token is
    kept as-is. Applying it twice gives the same result as applying it once.
    """
    lowered = path.strip().lower()
    segments = [
        segment if segment == WILDCARD_SEGMENT else _INVALID_RUN.sub("_", segment)
        for segment in lowered.split(PATH_SEPARATOR)
    ]
    joined = PATH_SEPARATOR.join(segments)
    joined = _DOT_RUN.sub(PATH_SEPARATOR, joined)
    return _UNDERSCORE_RUN.sub("_", joined)


def normalize_fields(fields: Sequence[FieldSchema]) -> List[FieldSchema]:
    return [replace(item, path=normalize_path(item.path)) for item in fields]


def deduplicate_fields(fields: Sequence[FieldSchema]) -> List[FieldSchema]:
    """Keep the first record per path; later records are dropped wholesale."""
    seen: set[str] = set()
    unique: List[FieldSchema] = []
    for item in fields:
        if item.path in seen:
            continue
        seen.add(item.path)
        unique.append(item)
    return unique


def merge_fields(fields: Sequence[FieldSchema]) -> List[FieldSchema]:
    """Collapse records sharing a path into one, in first-seen order.

    Each optional property takes the value of the first record that defines
    it, independently of the other properties. File, line and column always
    come from the very first record.
    """
    merged: Dict[str, FieldSchema] = {}
    for item in fields:
        existing = merged.get(item.path)
        if existing is None:
            merged[item.path] = replace(item)
            continue
        for name in (*FIELD_PROPERTIES, *_MERGED_EXTRAS):
            if getattr(existing, name) is None:
                value = getattr(item, name)
                if value is not None:
                    setattr(existing, name, value)
    return list(merged.values())


def sort_section_fields(section: SectionSchema) -> SectionSchema:
    return replace(section, fields=sorted(section.fields, key=lambda item: item.path))


def sort_page_sections(page: PageSchema) -> PageSchema:
    sections = sorted((sort_section_fields(section) for section in page.sections), key=lambda s: s.slug)
    return replace(page, sections=sections)


def sort_schema(schema: ProjectSchema) -> ProjectSchema:
    """Return a copy ordered lexicographically by page, section and field path."""
    pages = sorted((sort_page_sections(page) for page in schema.pages), key=lambda p: p.slug)
    return replace(schema, pages=pages)


def reorder_sections(page: PageSchema, order: Sequence[str]) -> PageSchema:
    """Order sections by an explicit slug list; unknown slugs keep their order at the end."""
    positions = {slug: index for index, slug in enumerate(order)}
    sections = sorted(page.sections, key=lambda section: positions.get(section.slug, len(positions)))
    return replace(page, sections=sections)


__all__ = [
    "deduplicate_fields",
    "merge_fields",
    "normalize_fields",
    "normalize_path",
    "reorder_sections",
    "sort_page_sections",
    "sort_schema",
    "sort_section_fields",
]
