"""Marker attribute detection and typed coercion for JSX elements."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Optional, Union

from tree_sitter import Node

from ..constants import (
    BOOLEAN_PROPERTIES,
    MARKER_ATTRIBUTE,
    NUMERIC_PROPERTIES,
    STRING_PROPERTIES,
    WIDTH_MAX,
    WIDTH_MIN,
)
from ..models import FieldAttributes

OPENING_ELEMENT = "jsx_opening_element"
SELF_CLOSING_ELEMENT = "jsx_self_closing_element"
ELEMENT_NODE_TYPES = frozenset({OPENING_ELEMENT, SELF_CLOSING_ELEMENT})


class _Bare:
    """Sentinel for an attribute written without a value (``<input required />``)."""

    def __repr__(self) -> str:
        return "BARE"


BARE = _Bare()

RawValue = Union[str, _Bare, None]


@dataclass
class ExtractedAttributes:
    """Marker path plus the parsed secondary attributes of one element."""

    path: str
    attributes: FieldAttributes
    raw: Dict[str, object]


# ---------------------------------------------------------------------------
# Coercion, one function per property class


def coerce_bool(raw: RawValue) -> Optional[bool]:
    """Bare or empty -> True, ``"true"``/``"false"`` -> bool, anything else -> None."""
    if raw is BARE:
        return True
    if not isinstance(raw, str):
        return None
    lowered = raw.strip().lower()
    if lowered in {"", "true"}:
        return True
    if lowered == "false":
        return False
    return None


def coerce_number(raw: RawValue) -> Optional[float]:
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def coerce_width(raw: RawValue) -> Optional[float]:
    """Grid width in columns; out-of-range values are rejected, never clamped."""
    value = coerce_number(raw)
    if value is None or value < WIDTH_MIN or value > WIDTH_MAX:
        return None
    return value


def coerce_string(raw: RawValue) -> Optional[str]:
    if isinstance(raw, str) and raw:
        return raw
    return None


def parse_field_attributes(raw: Mapping[str, object]) -> FieldAttributes:
    """Convert raw secondary attribute values into a typed property bag."""
    values: Dict[str, object] = {}
    for name in STRING_PROPERTIES:
        if name in raw:
            values[name] = coerce_string(raw[name])
    for name in BOOLEAN_PROPERTIES:
        if name in raw:
            values[name] = coerce_bool(raw[name])
    for name in NUMERIC_PROPERTIES:
        if name in raw:
            coerce = coerce_width if name == "width" else coerce_number
            values[name] = coerce(raw[name])
    return FieldAttributes(**values)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Syntax tree helpers


def _node_text(node: Node) -> str:
    text = node.text
    if text is None:
        return ""
    return text.decode("utf-8", errors="ignore")


def _strip_quotes(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in {'"', "'", "`"}:
        return text[1:-1]
    return text


def _expression_value(expression: Node) -> Optional[str]:
    inner = [child for child in expression.named_children if child.type != "comment"]
    if len(inner) != 1:
        return None
    node = inner[0]
    if node.type == "string":
        return _strip_quotes(_node_text(node))
    if node.type == "template_string":
        if any(child.type == "template_substitution" for child in node.named_children):
            return None
        return _strip_quotes(_node_text(node))
    if node.type == "number":
        return _node_text(node)
    if node.type == "unary_expression":
        operand = node.child_by_field_name("argument")
        if operand is not None and operand.type == "number":
            return _node_text(node).replace(" ", "")
        return None
    if node.type in {"true", "false"}:
        return node.type
    return None


def attribute_name(attribute: Node) -> str:
    named = attribute.named_children
    return _node_text(named[0]) if named else ""


def attribute_value(attribute: Node) -> RawValue:
    """Resolve a ``jsx_attribute`` value to its static string form.

    Returns ``BARE`` for a valueless attribute and ``None`` when the value
    is an expression that cannot be known without executing the component.
    """
    named = attribute.named_children
    if len(named) < 2:
        return BARE
    value = named[1]
    if value.type == "string":
        return _strip_quotes(_node_text(value))
    if value.type == "jsx_expression":
        return _expression_value(value)
    return None


def iter_attributes(element: Node) -> Iterator[Node]:
    for child in element.named_children:
        if child.type == "jsx_attribute":
            yield child


def tag_name(element: Node) -> str:
    name = element.child_by_field_name("name")
    return _node_text(name) if name is not None else ""


class AttributeExtractor:
    """Detects marked elements and parses their secondary attributes."""

    def __init__(self, marker: str = MARKER_ATTRIBUTE) -> None:
        self.marker = marker
        self.prefix = f"{marker}-"

    def detect(self, element: Node) -> bool:
        """True only when the primary marker carries a non-empty string value."""
        if element.type not in ELEMENT_NODE_TYPES:
            return False
        return self._marker_path(element) is not None

    def extract(self, element: Node) -> Optional[ExtractedAttributes]:
        if not self.detect(element):
            return None

        path: Optional[str] = None
        raw: Dict[str, object] = {}
        for attribute in iter_attributes(element):
            name = attribute_name(attribute)
            if name == self.marker:
                value = attribute_value(attribute)
                if path is None and isinstance(value, str) and value.strip():
                    path = value
            elif name.startswith(self.prefix):
                key = name[len(self.prefix) :]
                if key and key not in raw:
                    raw[key] = attribute_value(attribute)

        if path is None:
            return None
        return ExtractedAttributes(path=path, attributes=parse_field_attributes(raw), raw=raw)

    @staticmethod
    def text_content(element: Node) -> Optional[str]:
        """Text of a non-self-closing element whose only child is static text."""
        if element.type != OPENING_ELEMENT:
            return None
        parent = element.parent
        if parent is None or parent.type != "jsx_element":
            return None
        children = []
        for child in parent.named_children:
            if child.type in {OPENING_ELEMENT, "jsx_closing_element"}:
                continue
            if child.type == "jsx_text" and not _node_text(child).strip():
                continue
            children.append(child)
        if len(children) != 1 or children[0].type != "jsx_text":
            return None
        text = " ".join(_node_text(children[0]).split())
        return text or None

    def _marker_path(self, element: Node) -> Optional[str]:
        for attribute in iter_attributes(element):
            if attribute_name(attribute) != self.marker:
                continue
            value = attribute_value(attribute)
            if isinstance(value, str) and value.strip():
                return value
        return None


__all__ = [
    "AttributeExtractor",
    "BARE",
    "ExtractedAttributes",
    "coerce_bool",
    "coerce_number",
    "coerce_string",
    "coerce_width",
    "parse_field_attributes",
]
