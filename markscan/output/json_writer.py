"""Persist and reload schema snapshots as JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

from ..constants import SCHEMA_FILE_NAME
from ..logging import get_logger
from ..models import FIELD_PROPERTIES, FieldSchema, PageSchema, ProjectSchema, ScanMeta, SectionSchema

LOGGER = get_logger("output.json")

# Python attribute -> JSON key where the two differ.
_FIELD_KEYS: Dict[str, str] = {"default_content": "defaultContent"}
_FIELD_OPTIONAL = (*FIELD_PROPERTIES, "element", "default_content")
_NUMERIC_FIELDS = {"min", "max", "step", "rows", "width"}
_BOOLEAN_FIELDS = {"required", "multiple", "readonly", "hidden"}


class SchemaFormatError(ValueError):
    """Raised when a JSON document does not have the schema layout."""


# ---------------------------------------------------------------------------
# Serialisation


def _number(value: float) -> float | int:
    return int(value) if float(value).is_integer() else value


def field_to_dict(item: FieldSchema) -> Dict[str, object]:
    data: Dict[str, object] = {"path": item.path}
    for name in _FIELD_OPTIONAL:
        value = getattr(item, name)
        if value is None:
            continue
        if name in _NUMERIC_FIELDS:
            value = _number(value)
        data[_FIELD_KEYS.get(name, name)] = value
    data["file"] = item.file
    data["line"] = item.line
    data["column"] = item.column
    return data


def schema_to_dict(schema: ProjectSchema) -> Dict[str, object]:
    return {
        "version": schema.version,
        "generatedAt": schema.generated_at,
        "pages": [
            {
                "slug": page.slug,
                "name": page.name,
                "sections": [
                    {
                        "slug": section.slug,
                        "name": section.name,
                        "fields": [field_to_dict(item) for item in section.fields],
                        "isRepeater": section.is_repeater,
                        "order": section.order,
                    }
                    for section in page.sections
                ],
                "fieldCount": page.field_count,
                "sourceFiles": list(page.source_files),
            }
            for page in schema.pages
        ],
        "pageCount": schema.page_count,
        "totalFields": schema.total_fields,
        "meta": {
            "srcDir": schema.meta.src_dir,
            "filesScanned": schema.meta.files_scanned,
            "filesWithMarkers": schema.meta.files_with_markers,
            "scanDuration": schema.meta.scan_duration,
        },
    }


# ---------------------------------------------------------------------------
# Deserialisation


def _require(payload: Dict[str, object], key: str, kind: type) -> object:
    value = payload.get(key)
    if not isinstance(value, kind):
        raise SchemaFormatError(f"Expected {key!r} to be a {kind.__name__}")
    return value


def _mapping_list(payload: Dict[str, object], key: str) -> List[Dict[str, object]]:
    items = _require(payload, key, list)
    if not all(isinstance(item, dict) for item in items):  # type: ignore[union-attr]
        raise SchemaFormatError(f"Expected {key!r} to contain objects")
    return items  # type: ignore[return-value]


def field_from_dict(payload: Dict[str, object]) -> FieldSchema:
    values: Dict[str, object] = {}
    for name in _FIELD_OPTIONAL:
        value = payload.get(_FIELD_KEYS.get(name, name))
        if value is None:
            continue
        if name in _NUMERIC_FIELDS:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise SchemaFormatError(f"Field property {name!r} must be a number")
            value = float(value)
        elif name in _BOOLEAN_FIELDS:
            if not isinstance(value, bool):
                raise SchemaFormatError(f"Field property {name!r} must be a boolean")
        elif not isinstance(value, str):
            raise SchemaFormatError(f"Field property {name!r} must be a string")
        values[name] = value
    line = payload.get("line", 0)
    column = payload.get("column", 0)
    return FieldSchema(
        path=str(_require(payload, "path", str)),
        file=str(payload.get("file") or ""),
        line=line if isinstance(line, int) else 0,
        column=column if isinstance(column, int) else 0,
        **values,  # type: ignore[arg-type]
    )


def _section_from_dict(payload: Dict[str, object]) -> SectionSchema:
    fields = [field_from_dict(item) for item in _mapping_list(payload, "fields")]
    for index, item in enumerate(fields):
        item.order = index
    order = payload.get("order", 0)
    return SectionSchema(
        slug=str(_require(payload, "slug", str)),
        name=str(payload.get("name") or ""),
        fields=fields,
        is_repeater=bool(payload.get("isRepeater", False)),
        order=order if isinstance(order, int) else 0,
    )


def _page_from_dict(payload: Dict[str, object]) -> PageSchema:
    sections = [_section_from_dict(item) for item in _mapping_list(payload, "sections")]
    source_files = payload.get("sourceFiles") or []
    if not isinstance(source_files, list):
        raise SchemaFormatError("Expected 'sourceFiles' to be a list")
    field_count = payload.get("fieldCount")
    return PageSchema(
        slug=str(_require(payload, "slug", str)),
        name=str(payload.get("name") or ""),
        sections=sections,
        field_count=field_count if isinstance(field_count, int) else sum(len(s.fields) for s in sections),
        source_files=[str(item) for item in source_files],
    )


def _meta_from_dict(payload: object) -> ScanMeta:
    if not isinstance(payload, dict):
        return ScanMeta()
    duration = payload.get("scanDuration", 0.0)
    return ScanMeta(
        src_dir=str(payload.get("srcDir") or ""),
        files_scanned=int(payload.get("filesScanned") or 0),
        files_with_markers=int(payload.get("filesWithMarkers") or 0),
        scan_duration=float(duration) if isinstance(duration, (int, float)) else 0.0,
    )


def schema_from_dict(payload: object) -> ProjectSchema:
    """Rebuild a ``ProjectSchema``; raises ``SchemaFormatError`` on layout problems."""
    if not isinstance(payload, dict):
        raise SchemaFormatError("Schema document must be a JSON object")
    pages = [_page_from_dict(item) for item in _mapping_list(payload, "pages")]
    page_count = payload.get("pageCount")
    total_fields = payload.get("totalFields")
    return ProjectSchema(
        version=str(_require(payload, "version", str)),
        generated_at=str(payload.get("generatedAt") or ""),
        pages=pages,
        page_count=page_count if isinstance(page_count, int) else len(pages),
        total_fields=total_fields if isinstance(total_fields, int) else sum(p.field_count for p in pages),
        meta=_meta_from_dict(payload.get("meta")),
    )


# ---------------------------------------------------------------------------
# File access


def schema_path(output_dir: str | Path) -> Path:
    return Path(output_dir) / SCHEMA_FILE_NAME


def write_schema(
    schema: ProjectSchema,
    output_dir: str | Path,
    *,
    pretty: bool = True,
    indent: int = 2,
) -> Path:
    """Write ``schema.json`` under ``output_dir``, creating the directory if needed."""
    path = schema_path(output_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = schema_to_dict(schema)
    if pretty:
        content = json.dumps(payload, indent=indent, ensure_ascii=False)
    else:
        content = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    path.write_text(content + "\n", encoding="utf-8")
    LOGGER.info("Wrote schema snapshot to %s", path)
    return path


def read_schema(output_dir: str | Path) -> Optional[ProjectSchema]:
    """Load the previous snapshot, or ``None`` when it is absent or unreadable."""
    path = schema_path(output_dir)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        LOGGER.debug("Ignoring unreadable snapshot %s: %s", path, exc)
        return None
    try:
        return schema_from_dict(data)
    except (SchemaFormatError, TypeError, ValueError) as exc:
        LOGGER.debug("Ignoring malformed snapshot %s: %s", path, exc)
        return None


__all__ = [
    "SchemaFormatError",
    "field_from_dict",
    "field_to_dict",
    "read_schema",
    "schema_from_dict",
    "schema_path",
    "schema_to_dict",
    "write_schema",
]
