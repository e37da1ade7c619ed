"""Tests for marker detection and attribute coercion."""

from __future__ import annotations

from typing import Iterator

import pytest
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from markscan.parser.attributes import (
    BARE,
    ELEMENT_NODE_TYPES,
    AttributeExtractor,
    coerce_bool,
    coerce_number,
    coerce_width,
    parse_field_attributes,
)


def _iter_elements(node: Node) -> Iterator[Node]:
    for child in node.children:
        if child.type in ELEMENT_NODE_TYPES:
            yield child
        yield from _iter_elements(child)


def _element(markup: str) -> Node:
    parser = Parser(Language(tree_sitter_typescript.language_tsx()))
    tree = parser.parse(f"const view = (\n  {markup}\n);\n".encode("utf-8"))
    return next(_iter_elements(tree.root_node))


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (BARE, True),
        ("", True),
        ("true", True),
        ("TRUE", True),
        ("false", False),
        ("yes", None),
        (None, None),
    ],
)
def test_coerce_bool(raw, expected) -> None:
    assert coerce_bool(raw) is expected


def test_coerce_number_parses_floats_and_rejects_garbage() -> None:
    assert coerce_number("3") == 3.0
    assert coerce_number(" -2.5 ") == -2.5
    assert coerce_number("abc") is None
    assert coerce_number("") is None
    assert coerce_number("nan") is None
    assert coerce_number("inf") is None
    assert coerce_number(BARE) is None


def test_coerce_width_rejects_out_of_range_instead_of_clamping() -> None:
    assert coerce_width("1") == 1.0
    assert coerce_width("12") == 12.0
    assert coerce_width("6.5") == 6.5
    assert coerce_width("0") is None
    assert coerce_width("13") is None


def test_parse_field_attributes_leaves_absent_properties_unset() -> None:
    attributes = parse_field_attributes({"type": "image", "required": BARE, "rows": "x"})

    assert attributes.type == "image"
    assert attributes.required is True
    assert attributes.rows is None
    assert attributes.hidden is None
    assert attributes.multiple is None
    assert attributes.label is None


def test_detect_requires_non_empty_primary_marker() -> None:
    extractor = AttributeExtractor()

    assert extractor.detect(_element('<h1 data-reverso="home.hero.title">Hi</h1>'))
    assert not extractor.detect(_element('<h1 data-reverso="">Hi</h1>'))
    assert not extractor.detect(_element("<h1 data-reverso>Hi</h1>"))
    assert not extractor.detect(_element('<h1 data-reverso-type="text">Hi</h1>'))
    assert not extractor.detect(_element('<h1 className="title">Hi</h1>'))


def test_detect_rejects_dynamic_marker_expression() -> None:
    extractor = AttributeExtractor()

    assert not extractor.detect(_element("<h1 data-reverso={path}>Hi</h1>"))
    assert extractor.detect(_element("<h1 data-reverso={'home.hero.title'}>Hi</h1>"))


def test_extract_returns_none_without_marker() -> None:
    assert AttributeExtractor().extract(_element('<p className="lead">Text</p>')) is None


def test_extract_coerces_secondary_attributes_by_class() -> None:
    element = _element(
        '<input data-reverso="contact.form.email" data-reverso-type="email" '
        'data-reverso-label="Email address" data-reverso-required '
        'data-reverso-hidden="false" data-reverso-max={120} data-reverso-min={-5} '
        'data-reverso-width="13" data-reverso-readonly={true} />'
    )

    extracted = AttributeExtractor().extract(element)

    assert extracted is not None
    assert extracted.path == "contact.form.email"
    attributes = extracted.attributes
    assert attributes.type == "email"
    assert attributes.label == "Email address"
    assert attributes.required is True
    assert attributes.hidden is False
    assert attributes.readonly is True
    assert attributes.max == 120.0
    assert attributes.min == -5.0
    assert attributes.width is None
    assert attributes.placeholder is None


def test_extract_ignores_dynamic_secondary_values() -> None:
    element = _element('<h2 data-reverso="home.hero.title" data-reverso-label={t("title")}>Hi</h2>')

    extracted = AttributeExtractor().extract(element)

    assert extracted is not None
    assert extracted.attributes.label is None


def test_extract_honours_custom_marker() -> None:
    element = _element('<h2 data-cms="home.hero.title" data-cms-type="textarea">Hi</h2>')

    assert AttributeExtractor().extract(element) is None
    extracted = AttributeExtractor("data-cms").extract(element)
    assert extracted is not None
    assert extracted.attributes.type == "textarea"


def test_text_content_captures_single_static_child() -> None:
    element = _element('<h1 data-reverso="home.hero.title">\n    Welcome   home\n  </h1>')

    assert AttributeExtractor.text_content(element) == "Welcome home"


def test_text_content_skips_mixed_children_and_self_closing() -> None:
    mixed = _element('<p data-reverso="home.hero.body">Hello <strong>there</strong></p>')
    dynamic = _element('<p data-reverso="home.hero.body">{copy}</p>')
    closed = _element('<img data-reverso="home.hero.image" />')

    assert AttributeExtractor.text_content(mixed) is None
    assert AttributeExtractor.text_content(dynamic) is None
    assert AttributeExtractor.text_content(closed) is None
