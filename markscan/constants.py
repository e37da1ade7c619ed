"""Shared constants for marker detection, schema layout and output files."""

from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

MARKER_ATTRIBUTE = "data-reverso"

WILDCARD_SEGMENT = "$"
PATH_SEPARATOR = "."

DEFAULT_FIELD_TYPE = "text"

SCHEMA_FILE_NAME = "schema.json"
TYPES_FILE_NAME = "types.ts"

CONFIG_FILE_NAME = ".markscan.yml"
DEFAULT_SRC_DIR = "src"
DEFAULT_OUTPUT_DIR = ".markscan"
DEFAULT_ROOT_TYPE = "SiteContent"

DEFAULT_INCLUDE_PATTERNS: tuple[str, ...] = ("**/*.tsx", "**/*.jsx")

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    "**/node_modules/**",
    "**/.next/**",
    "**/dist/**",
    "**/build/**",
    "**/.markscan/**",
    "**/*.test.tsx",
    "**/*.test.jsx",
    "**/*.spec.tsx",
    "**/*.spec.jsx",
    "**/*.stories.tsx",
    "**/*.stories.jsx",
)

FIELD_TYPES: frozenset[str] = frozenset(
    {
        # text inputs
        "text",
        "textarea",
        "number",
        "range",
        "email",
        "url",
        "phone",
        # rich content
        "wysiwyg",
        "markdown",
        "code",
        "blocks",
        # selection
        "select",
        "multiselect",
        "checkbox",
        "checkboxgroup",
        "radio",
        "boolean",
        # media
        "image",
        "file",
        "gallery",
        "video",
        "audio",
        "oembed",
        # date and time
        "date",
        "datetime",
        "time",
        # relationships
        "relation",
        "taxonomy",
        "link",
        "pagelink",
        "user",
        # advanced
        "color",
        "map",
        "repeater",
        "group",
        "flexible",
        # ui helpers
        "message",
        "tab",
        "accordion",
        "buttongroup",
    }
)

BOOLEAN_PROPERTIES: tuple[str, ...] = ("required", "multiple", "readonly", "hidden")
NUMERIC_PROPERTIES: tuple[str, ...] = ("min", "max", "step", "rows", "width")
STRING_PROPERTIES: tuple[str, ...] = (
    "type",
    "label",
    "placeholder",
    "validation",
    "options",
    "condition",
    "default",
    "help",
    "accept",
)

WIDTH_MIN = 1
WIDTH_MAX = 12

# Compared in this order when diffing two snapshots of the same field.
DIFF_PROPERTIES: tuple[str, ...] = (
    "type",
    "label",
    "placeholder",
    "required",
    "validation",
    "options",
    "condition",
    "help",
    "min",
    "max",
    "step",
    "accept",
    "multiple",
    "rows",
    "width",
    "readonly",
    "hidden",
)
