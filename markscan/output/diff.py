"""Compare schema snapshots and render a line-oriented change report."""

from __future__ import annotations

from typing import Dict, List, Optional

from ..constants import DIFF_PROPERTIES
from ..models import FieldChange, FieldSchema, ProjectSchema, SchemaDiff


def _flatten(schema: ProjectSchema) -> Dict[str, FieldSchema]:
    return {item.path: item for item in schema.iter_fields()}


def field_changes(before: FieldSchema, after: FieldSchema) -> List[str]:
    """Names of differing properties, in the fixed comparison order."""
    return [name for name in DIFF_PROPERTIES if getattr(before, name) != getattr(after, name)]


def compare_schemas(before: Optional[ProjectSchema], after: ProjectSchema) -> SchemaDiff:
    """Report fields added, removed or modified between two snapshots.

    With no previous snapshot every field counts as added.
    """
    if before is None:
        return SchemaDiff(added=after.iter_fields())

    before_fields = _flatten(before)
    after_fields = _flatten(after)

    diff = SchemaDiff()
    for path, item in after_fields.items():
        previous = before_fields.get(path)
        if previous is None:
            diff.added.append(item)
            continue
        changes = field_changes(previous, item)
        if changes:
            diff.modified.append(FieldChange(path=path, before=previous, after=item, changes=changes))
    diff.removed = [item for path, item in before_fields.items() if path not in after_fields]
    return diff


def format_schema_diff(diff: SchemaDiff) -> str:
    if not diff.has_changes:
        return "No changes detected."

    lines: List[str] = []
    if diff.added:
        lines.append(f"Added ({len(diff.added)}):")
        lines.extend(f"  + {item.path} ({item.type})" for item in diff.added)
    if diff.removed:
        lines.append(f"Removed ({len(diff.removed)}):")
        lines.extend(f"  - {item.path} ({item.type})" for item in diff.removed)
    if diff.modified:
        lines.append(f"Modified ({len(diff.modified)}):")
        lines.extend(f"  ~ {change.path}: {', '.join(change.changes)}" for change in diff.modified)
    return "\n".join(lines)


__all__ = ["compare_schemas", "field_changes", "format_schema_diff"]
