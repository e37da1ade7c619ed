"""Structural checks over a generated or hand-edited schema."""

from __future__ import annotations

from typing import List

from ..constants import PATH_SEPARATOR
from ..models import FieldSchema, PageSchema, ProjectSchema, SectionSchema


def _field_issues(item: FieldSchema, page: PageSchema, section: SectionSchema) -> List[str]:
    issues: List[str] = []
    if not item.path:
        issues.append(f'Field in "{page.slug}.{section.slug}" missing path')
        return issues
    if not item.type:
        issues.append(f'Field "{item.path}" missing type')

    segments = item.path.split(PATH_SEPARATOR)
    if len(segments) < 2 or not all(segments):
        issues.append(f'Field "{item.path}" has invalid path')
        return issues
    if segments[0] != page.slug:
        issues.append(f'Field "{item.path}" has page "{segments[0]}" but is in page "{page.slug}"')
    if segments[1] != section.slug:
        issues.append(
            f'Field "{item.path}" has section "{segments[1]}" but is in section "{section.slug}"'
        )
    return issues


def validate_schema(schema: ProjectSchema) -> List[str]:
    """Return human-readable issues found in ``schema``; never raises."""
    issues: List[str] = []
    seen: set[str] = set()
    for page in schema.pages:
        if not page.slug:
            issues.append("Page missing slug")
        for section in page.sections:
            if not section.slug:
                issues.append(f'Section in page "{page.slug}" missing slug')
            for item in section.fields:
                issues.extend(_field_issues(item, page, section))
                if item.path and item.path in seen:
                    issues.append(f'Duplicate field path "{item.path}"')
                seen.add(item.path)
    return issues


__all__ = ["validate_schema"]
