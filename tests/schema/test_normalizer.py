"""Tests for path normalization, deduplication and merging."""

from __future__ import annotations

import pytest

from markscan.models import FieldSchema, PageSchema, ProjectSchema, SectionSchema
from markscan.schema.normalizer import (
    deduplicate_fields,
    merge_fields,
    normalize_path,
    reorder_sections,
    sort_schema,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("home.hero.title", "home.hero.title"),
        ("  Home.Hero.Title  ", "home.hero.title"),
        ("home.hero.main title", "home.hero.main_title"),
        ("home..hero...title", "home.hero.title"),
        ("home.hero.a--b__c", "home.hero.a_b_c"),
        ("home.features.$.title", "home.features.$.title"),
        ("about-us.team.$.full name", "about_us.team.$.full_name"),
    ],
)
def test_normalize_path(raw: str, expected: str) -> None:
    assert normalize_path(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["Home.Hero.Title", "a..b__c", "x.$.y", " weird!!path..here ", "pricing.plans.$.Price (USD)"],
)
def test_normalize_path_is_idempotent(raw: str) -> None:
    once = normalize_path(raw)
    assert normalize_path(once) == once


def test_deduplicate_keeps_first_occurrence_wholesale() -> None:
    fields = [
        FieldSchema(path="home.hero.title", file="A.tsx"),
        FieldSchema(path="home.hero.title", type="textarea", label="Richer", file="B.tsx"),
        FieldSchema(path="home.hero.body", file="A.tsx"),
    ]

    unique = deduplicate_fields(fields)

    assert len(unique) <= len(fields)
    assert [item.path for item in unique] == ["home.hero.title", "home.hero.body"]
    assert unique[0].type is None
    assert unique[0].label is None
    assert unique[0].file == "A.tsx"


def test_merge_takes_each_property_from_first_definer() -> None:
    first = FieldSchema(path="home.hero.title", type="text", file="A.tsx", line=3, column=5)
    second = FieldSchema(
        path="home.hero.title",
        type="textarea",
        label="Title",
        placeholder="Enter",
        file="B.tsx",
        line=9,
        column=2,
    )

    merged = merge_fields([first, second])

    assert len(merged) == 1
    record = merged[0]
    assert record.type == "text"
    assert record.label == "Title"
    assert record.placeholder == "Enter"
    assert (record.file, record.line, record.column) == ("A.tsx", 3, 5)


def test_merge_keeps_false_booleans_from_first_definer() -> None:
    merged = merge_fields(
        [
            FieldSchema(path="a.b.c", required=False),
            FieldSchema(path="a.b.c", required=True, default_content="Seed"),
        ]
    )

    assert merged[0].required is False
    assert merged[0].default_content == "Seed"


def test_merge_does_not_mutate_inputs() -> None:
    first = FieldSchema(path="a.b.c")
    merge_fields([first, FieldSchema(path="a.b.c", label="Later")])

    assert first.label is None


def _schema() -> ProjectSchema:
    return ProjectSchema(
        version="1.0.0",
        generated_at="2024-01-01T00:00:00+00:00",
        pages=[
            PageSchema(
                slug="home",
                name="Home",
                sections=[
                    SectionSchema(
                        slug="hero",
                        name="Hero",
                        fields=[FieldSchema(path="home.hero.title"), FieldSchema(path="home.hero.body")],
                    ),
                    SectionSchema(slug="cta", name="Cta"),
                ],
            ),
            PageSchema(slug="about", name="About"),
        ],
    )


def test_sort_schema_orders_every_level() -> None:
    ordered = sort_schema(_schema())

    assert [page.slug for page in ordered.pages] == ["about", "home"]
    home = ordered.pages[1]
    assert [section.slug for section in home.sections] == ["cta", "hero"]
    assert [item.path for item in home.sections[1].fields] == ["home.hero.body", "home.hero.title"]


def test_reorder_sections_puts_unknown_slugs_last() -> None:
    page = PageSchema(
        slug="home",
        name="Home",
        sections=[SectionSchema(slug=slug, name=slug) for slug in ("hero", "features", "cta")],
    )

    reordered = reorder_sections(page, ["cta", "hero"])

    assert [section.slug for section in reordered.sections] == ["cta", "hero", "features"]
