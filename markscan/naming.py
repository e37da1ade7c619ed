"""Helpers for turning slugs into display names and type identifiers."""

from __future__ import annotations

import re

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_SEPARATORS = re.compile(r"[_\-]")
_WORD_START = re.compile(r"\b\w")
_WHITESPACE = re.compile(r"\s+")
_NON_ALNUM_THEN_CHAR = re.compile(r"[^a-z0-9]+(.)")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def format_label(value: str) -> str:
    """Return a human-friendly label, e.g. ``hero_title`` -> ``Hero Title``."""
    text = _CAMEL_BOUNDARY.sub(r"\1 \2", value)
    text = _SEPARATORS.sub(" ", text)
    text = _WORD_START.sub(lambda match: match.group(0).upper(), text)
    return _WHITESPACE.sub(" ", text).strip()


def pascal_case(value: str) -> str:
    """Return ``value`` as a PascalCase type name, e.g. ``about_us`` -> ``AboutUs``."""
    camel = _NON_ALNUM_THEN_CHAR.sub(lambda match: match.group(1).upper(), value.lower())
    camel = camel.strip("_-. ")
    if not camel:
        return ""
    name = camel[0].upper() + camel[1:]
    if name[0].isdigit():
        name = f"_{name}"
    return name


def is_identifier(value: str) -> bool:
    return bool(_IDENTIFIER.match(value))


__all__ = ["format_label", "is_identifier", "pascal_case"]
