"""TypeScript content-shape definitions derived from a project schema."""

from __future__ import annotations

import json
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from ..constants import DEFAULT_ROOT_TYPE, PATH_SEPARATOR, TYPES_FILE_NAME, WILDCARD_SEGMENT
from ..logging import get_logger
from ..models import FieldSchema, PageSchema, ProjectSchema, SectionSchema
from ..naming import format_label, is_identifier, pascal_case

LOGGER = get_logger("output.types")

_TEMPLATE_NAME = "types.ts.j2"

TYPE_MAPPING: Dict[str, str] = {
    "text": "string",
    "textarea": "string",
    "email": "string",
    "url": "string",
    "phone": "string",
    "wysiwyg": "string",
    "markdown": "string",
    "code": "string",
    "color": "string",
    "number": "number",
    "range": "number",
    "boolean": "boolean",
    "checkbox": "boolean",
    "select": "string",
    "radio": "string",
    "buttongroup": "string",
    "multiselect": "string[]",
    "checkboxgroup": "string[]",
    "date": "string",
    "datetime": "string",
    "time": "string",
    "image": "ImageValue",
    "file": "FileValue",
    "video": "FileValue",
    "audio": "FileValue",
    "gallery": "GalleryValue",
    "link": "LinkValue",
    "pagelink": "LinkValue",
    "map": "MapValue",
    "blocks": "BlocksValue",
}

FALLBACK_TS_TYPE = "string"

# Emitted in this order; each entry lists the shapes it refers to.
VALUE_SHAPES: "OrderedDict[str, str]" = OrderedDict(
    [
        (
            "ImageValue",
            "export interface ImageValue {\n"
            "  url: string;\n"
            "  alt?: string;\n"
            "  width?: number;\n"
            "  height?: number;\n"
            "}",
        ),
        (
            "FileValue",
            "export interface FileValue {\n"
            "  url: string;\n"
            "  name?: string;\n"
            "  size?: number;\n"
            "  mimeType?: string;\n"
            "}",
        ),
        ("GalleryValue", "export type GalleryValue = ImageValue[];"),
        (
            "LinkValue",
            "export interface LinkValue {\n"
            "  url: string;\n"
            "  text?: string;\n"
            "  target?: '_blank' | '_self';\n"
            "}",
        ),
        (
            "MapValue",
            "export interface MapValue {\n"
            "  lat: number;\n"
            "  lng: number;\n"
            "  address?: string;\n"
            "  zoom?: number;\n"
            "}",
        ),
        ("BlocksValue", "export type BlocksValue = Array<{ type: string; data: Record<string, unknown> }>;"),
    ]
)

_SHAPE_DEPENDENCIES: Dict[str, Sequence[str]] = {"GalleryValue": ("ImageValue",)}


def ts_type(field_type: Optional[str]) -> str:
    """TypeScript type for a field kind; unmapped kinds become ``string``."""
    if not field_type:
        return FALLBACK_TS_TYPE
    return TYPE_MAPPING.get(field_type, FALLBACK_TS_TYPE)


@dataclass
class _Member:
    key: str
    ts_type: Optional[str] = None
    required: bool = False
    comment: Optional[str] = None
    children: "OrderedDict[str, _Member]" = field(default_factory=OrderedDict)

    @property
    def is_required(self) -> bool:
        if self.children:
            return any(child.is_required for child in self.children.values())
        return self.required


@dataclass
class _Interface:
    name: str
    comment: Optional[str]
    lines: List[str]


def _comment_text(text: str) -> str:
    return text.replace("*/", "*\\/")


def _member_key(key: str) -> str:
    return key if is_identifier(key) else json.dumps(key)


def _field_tree(fields: Sequence[FieldSchema]) -> "OrderedDict[str, _Member]":
    """Nest fields by the part of their path below the section slug."""
    members: "OrderedDict[str, _Member]" = OrderedDict()
    for item in fields:
        local = [segment for segment in item.path.split(PATH_SEPARATOR)[2:] if segment != WILDCARD_SEGMENT]
        if not local:
            continue
        level = members
        for segment in local[:-1]:
            parent = level.get(segment)
            if parent is None:
                parent = level[segment] = _Member(key=segment, comment=format_label(segment))
            elif not parent.children:
                LOGGER.debug("Field %s nests under %s, dropping the scalar member", item.path, segment)
            parent.ts_type = None
            level = parent.children
        leaf_key = local[-1]
        existing = level.get(leaf_key)
        if existing is not None and existing.children:
            continue
        level[leaf_key] = _Member(
            key=leaf_key,
            ts_type=ts_type(item.type),
            required=bool(item.required),
            comment=item.label or format_label(leaf_key),
        )
    return members


def _member_lines(member: _Member, depth: int, include_comments: bool) -> List[str]:
    indent = "  " * depth
    lines: List[str] = []
    if include_comments and member.comment:
        lines.append(f"{indent}/** {_comment_text(member.comment)} */")
    marker = "" if member.is_required else "?"
    key = _member_key(member.key)
    if member.children:
        lines.append(f"{indent}{key}{marker}: {{")
        for child in member.children.values():
            lines.extend(_member_lines(child, depth + 1, include_comments))
        lines.append(f"{indent}}};")
    else:
        lines.append(f"{indent}{key}{marker}: {member.ts_type};")
    return lines


def _collect_types(members: "OrderedDict[str, _Member]", found: set[str]) -> None:
    for member in members.values():
        if member.children:
            _collect_types(member.children, found)
        elif member.ts_type:
            found.add(member.ts_type)


class TypesWriter:
    """Renders the content-shape definitions for a schema."""

    def __init__(
        self,
        *,
        include_comments: bool = True,
        root_type: str = DEFAULT_ROOT_TYPE,
        templates_dir: Path | None = None,
    ) -> None:
        self.include_comments = include_comments
        self.root_type = root_type
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, schema: ProjectSchema) -> str:
        interfaces: List[_Interface] = []
        used: set[str] = set()
        for page in schema.pages:
            interfaces.extend(self._page_interfaces(page, used))
        interfaces.append(self._root_interface(schema.pages))

        template = self._env.get_template(_TEMPLATE_NAME)
        rendered = template.render(
            version=schema.version,
            generated_at=schema.generated_at,
            shapes=self._shapes(used),
            interfaces=interfaces,
            comments=self.include_comments,
        )
        return rendered.rstrip() + "\n"

    def write(self, schema: ProjectSchema, output_dir: str | Path) -> Path:
        directory = Path(output_dir)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / TYPES_FILE_NAME
        path.write_text(self.render(schema), encoding="utf-8")
        LOGGER.info("Wrote type definitions to %s", path)
        return path

    # ------------------------------------------------------------------
    # Internal helpers

    def _page_interfaces(self, page: PageSchema, used: set[str]) -> List[_Interface]:
        page_name = pascal_case(page.slug)
        interfaces: List[_Interface] = []
        page_lines: List[str] = []
        for section in page.sections:
            interface_name = f"{page_name}{pascal_case(section.slug)}"
            if section.is_repeater:
                interface_name = f"{interface_name}Item"
            interfaces.append(self._section_interface(section, interface_name, used))

            if self.include_comments:
                page_lines.append(f"  /** {_comment_text(section.name)} section */")
            suffix = "[]" if section.is_repeater else ""
            page_lines.append(f"  {_member_key(section.slug)}: {interface_name}{suffix};")

        interfaces.append(
            _Interface(
                name=f"{page_name}Content",
                comment=_comment_text(f"Content for the {page.name} page"),
                lines=page_lines,
            )
        )
        return interfaces

    def _section_interface(self, section: SectionSchema, name: str, used: set[str]) -> _Interface:
        members = _field_tree(section.fields)
        _collect_types(members, used)
        lines: List[str] = []
        for member in members.values():
            lines.extend(_member_lines(member, 1, self.include_comments))
        if section.is_repeater:
            comment = f"One item of the {section.name} list"
        else:
            comment = f"{section.name} section"
        return _Interface(name=name, comment=_comment_text(comment), lines=lines)

    def _root_interface(self, pages: Sequence[PageSchema]) -> _Interface:
        lines: List[str] = []
        for page in pages:
            if self.include_comments:
                lines.append(f"  /** {_comment_text(page.name)} page */")
            lines.append(f"  {_member_key(page.slug)}: {pascal_case(page.slug)}Content;")
        return _Interface(name=self.root_type, comment="All page content, keyed by page slug", lines=lines)

    @staticmethod
    def _shapes(used: set[str]) -> List[str]:
        needed = set(used)
        for name in used:
            needed.update(_SHAPE_DEPENDENCIES.get(name, ()))
        return [definition for name, definition in VALUE_SHAPES.items() if name in needed]


def generate_type_definitions(
    schema: ProjectSchema,
    *,
    include_comments: bool = True,
    root_type: str = DEFAULT_ROOT_TYPE,
) -> str:
    return TypesWriter(include_comments=include_comments, root_type=root_type).render(schema)


def write_types_file(
    schema: ProjectSchema,
    output_dir: str | Path,
    *,
    include_comments: bool = True,
    root_type: str = DEFAULT_ROOT_TYPE,
) -> Path:
    writer = TypesWriter(include_comments=include_comments, root_type=root_type)
    return writer.write(schema, output_dir)


__all__ = [
    "TYPE_MAPPING",
    "TypesWriter",
    "generate_type_definitions",
    "ts_type",
    "write_types_file",
]
