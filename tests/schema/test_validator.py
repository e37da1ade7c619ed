"""Tests for schema validation."""

from __future__ import annotations

from markscan.models import FieldSchema, PageSchema, ProjectSchema, SectionSchema
from markscan.schema.validator import validate_schema


def _schema(*sections: SectionSchema, slug: str = "home") -> ProjectSchema:
    return ProjectSchema(
        version="1.0.0",
        generated_at="2024-01-01T00:00:00+00:00",
        pages=[PageSchema(slug=slug, name="Home", sections=list(sections))],
    )


def test_valid_schema_has_no_issues() -> None:
    schema = _schema(
        SectionSchema(
            slug="hero",
            name="Hero",
            fields=[FieldSchema(path="home.hero.title", type="text")],
        )
    )

    assert validate_schema(schema) == []


def test_reports_page_mismatch_with_both_slugs() -> None:
    schema = _schema(
        SectionSchema(slug="hero", name="Hero", fields=[FieldSchema(path="about.hero.title", type="text")])
    )

    assert validate_schema(schema) == [
        'Field "about.hero.title" has page "about" but is in page "home"',
    ]


def test_reports_section_mismatch() -> None:
    schema = _schema(
        SectionSchema(slug="hero", name="Hero", fields=[FieldSchema(path="home.cta.title", type="text")])
    )

    assert validate_schema(schema) == [
        'Field "home.cta.title" has section "cta" but is in section "hero"',
    ]


def test_reports_missing_slugs_type_and_path() -> None:
    schema = _schema(
        SectionSchema(
            slug="",
            name="",
            fields=[FieldSchema(path="", type="text"), FieldSchema(path=".x.y")],
        ),
        slug="",
    )

    issues = validate_schema(schema)

    assert "Page missing slug" in issues
    assert 'Section in page "" missing slug' in issues
    assert 'Field in "." missing path' in issues
    assert 'Field ".x.y" missing type' in issues


def test_reports_duplicate_paths() -> None:
    schema = _schema(
        SectionSchema(
            slug="hero",
            name="Hero",
            fields=[
                FieldSchema(path="home.hero.title", type="text"),
                FieldSchema(path="home.hero.title", type="text"),
            ],
        )
    )

    assert validate_schema(schema) == ['Duplicate field path "home.hero.title"']
