"""Build the page -> section -> field hierarchy from detected fields."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..constants import (
    DEFAULT_FIELD_TYPE,
    FIELD_TYPES,
    PATH_SEPARATOR,
    SCHEMA_VERSION,
    WILDCARD_SEGMENT,
)
from ..logging import get_logger
from ..models import (
    FIELD_PROPERTIES,
    DetectedField,
    FieldSchema,
    PageSchema,
    ProjectSchema,
    ScanMeta,
    SectionSchema,
)
from ..naming import format_label
from .normalizer import merge_fields, normalize_fields, normalize_path

LOGGER = get_logger("schema.generator")

MIN_PATH_SEGMENTS = 3


@dataclass
class _SectionGroup:
    slug: str
    fields: List[FieldSchema] = field(default_factory=list)
    is_repeater: bool = False


@dataclass
class _PageGroup:
    slug: str
    sections: "OrderedDict[str, _SectionGroup]" = field(default_factory=OrderedDict)
    source_files: List[str] = field(default_factory=list)


def to_field_schema(detected: DetectedField) -> FieldSchema:
    """Convert a detection into a field record with nothing defaulted yet."""
    values = {name: getattr(detected.attributes, name) for name in FIELD_PROPERTIES}
    return FieldSchema(
        path=detected.path,
        file=detected.file,
        line=detected.line,
        column=detected.column,
        element=detected.element,
        default_content=detected.text_content,
        **values,
    )


def is_valid_path(path: str) -> bool:
    segments = path.split(PATH_SEPARATOR)
    return len(segments) >= MIN_PATH_SEGMENTS and all(segments)


def partition_fields(fields: Iterable[DetectedField]) -> Tuple[List[DetectedField], List[DetectedField]]:
    """Split detections into usable ones and those too short to place in a section."""
    valid: List[DetectedField] = []
    invalid: List[DetectedField] = []
    for item in fields:
        if is_valid_path(normalize_path(item.path)):
            valid.append(item)
        else:
            invalid.append(item)
    return valid, invalid


def _label_segment(path: str) -> str:
    """Last path segment that is not the wildcard."""
    segments = [segment for segment in path.split(PATH_SEPARATOR) if segment != WILDCARD_SEGMENT]
    return segments[-1] if segments else path


def _apply_defaults(item: FieldSchema, default_type: str, include_defaults: bool) -> FieldSchema:
    field_type = item.type
    if field_type is None:
        field_type = default_type
    elif field_type not in FIELD_TYPES:
        LOGGER.warning(
            "Unknown field type %r for %s (%s:%d), using %r",
            field_type,
            item.path,
            item.file,
            item.line,
            default_type,
        )
        field_type = default_type
    label = item.label or format_label(_label_segment(item.path))
    default_content = item.default_content if include_defaults else None
    return replace(item, type=field_type, label=label, default_content=default_content)


def _group(fields: Sequence[FieldSchema]) -> "OrderedDict[str, _PageGroup]":
    pages: "OrderedDict[str, _PageGroup]" = OrderedDict()
    for item in fields:
        segments = item.path.split(PATH_SEPARATOR)
        page_slug, section_slug = segments[0], segments[1]
        page = pages.get(page_slug)
        if page is None:
            page = pages[page_slug] = _PageGroup(slug=page_slug)
        section = page.sections.get(section_slug)
        if section is None:
            section = page.sections[section_slug] = _SectionGroup(slug=section_slug)
        section.fields.append(item)
        # Once a section repeats it stays a repeater.
        if WILDCARD_SEGMENT in segments[2:]:
            section.is_repeater = True
    return pages


def _source_files(fields: Sequence[FieldSchema]) -> Dict[str, List[str]]:
    """Distinct contributing files per page slug, including merged-away duplicates."""
    files: Dict[str, List[str]] = {}
    for item in fields:
        page_files = files.setdefault(item.path.split(PATH_SEPARATOR, 1)[0], [])
        if item.file and item.file not in page_files:
            page_files.append(item.file)
    return files


def _build_section(group: _SectionGroup, order: int, sort: bool) -> SectionSchema:
    fields = sorted(group.fields, key=lambda item: item.path) if sort else list(group.fields)
    ordered = [replace(item, order=index) for index, item in enumerate(fields)]
    return SectionSchema(
        slug=group.slug,
        name=format_label(group.slug),
        fields=ordered,
        is_repeater=group.is_repeater,
        order=order,
    )


def _build_page(group: _PageGroup, sort: bool) -> PageSchema:
    groups = list(group.sections.values())
    if sort:
        groups.sort(key=lambda section: section.slug)
    sections = [_build_section(section, index, sort) for index, section in enumerate(groups)]
    return PageSchema(
        slug=group.slug,
        name=format_label(group.slug),
        sections=sections,
        field_count=sum(len(section.fields) for section in sections),
        source_files=list(group.source_files),
    )


def generate_schema(
    fields: Sequence[DetectedField] | Sequence[FieldSchema],
    *,
    sort: bool = False,
    default_type: str = DEFAULT_FIELD_TYPE,
    include_defaults: bool = True,
    generated_at: Optional[str] = None,
) -> ProjectSchema:
    """Normalize, merge and group fields into a ``ProjectSchema``.

    Accepts raw detections or already converted ``FieldSchema`` records.
    Paths with fewer than three segments are skipped with a warning. Pages,
    sections and fields keep first-seen order unless ``sort`` is set, in
    which case each level is ordered lexicographically.
    """
    records = [to_field_schema(item) if isinstance(item, DetectedField) else item for item in fields]
    normalized = normalize_fields(records)

    usable: List[FieldSchema] = []
    for item in normalized:
        if is_valid_path(item.path):
            usable.append(item)
        else:
            LOGGER.warning(
                "Skipping marker %r in %s:%d: path must be page.section.field",
                item.path,
                item.file,
                item.line,
            )

    merged = [_apply_defaults(item, default_type, include_defaults) for item in merge_fields(usable)]
    groups = _group(merged)
    for slug, files in _source_files(usable).items():
        groups[slug].source_files = files
    page_groups = list(groups.values())
    if sort:
        page_groups.sort(key=lambda page: page.slug)
    pages = [_build_page(group, sort) for group in page_groups]

    schema = ProjectSchema(
        version=SCHEMA_VERSION,
        generated_at=generated_at or datetime.now(UTC).isoformat(),
        pages=pages,
        page_count=len(pages),
        total_fields=sum(page.field_count for page in pages),
    )
    LOGGER.debug("Generated schema with %d pages and %d fields", schema.page_count, schema.total_fields)
    return schema


def update_meta(schema: ProjectSchema, meta: ScanMeta) -> ProjectSchema:
    return replace(schema, meta=meta)


__all__ = [
    "MIN_PATH_SEGMENTS",
    "generate_schema",
    "is_valid_path",
    "partition_fields",
    "to_field_schema",
    "update_meta",
]
