"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json

import pytest

from markscan.cli import _build_parser, main

HERO = """
export const Hero = () => (
  <section>
    <h1 data-reverso="home.hero.title" data-reverso-required>Welcome</h1>
  </section>
);
"""


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "scan"])
    assert args.verbose is True
    assert args.command == "scan"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["diff", "--verbose"])
    assert args.verbose is True
    assert args.command == "diff"


def test_cli_scan_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(["scan", "site", "--no-sort", "--no-types", "--compact", "-o", "out"])
    assert args.path == "site"
    assert args.sort is False
    assert args.no_types is True
    assert args.compact is True
    assert args.output == "out"


def test_cli_scan_defaults() -> None:
    args = _build_parser().parse_args(["scan"])
    assert args.path == "."
    assert args.sort is None
    assert args.output is None


def test_scan_command_writes_snapshot(source_builder, capsys) -> None:
    source_builder.write({"Hero.tsx": HERO})

    main(["scan", str(source_builder.path())])

    out = capsys.readouterr().out
    assert "Scanned 1 files: 1 fields in 1 pages" in out
    assert "Added (1):" in out
    assert "  + home.hero.title (text)" in out
    data = json.loads((source_builder.path() / ".markscan" / "schema.json").read_text(encoding="utf-8"))
    assert data["pages"][0]["sections"][0]["fields"][0]["required"] is True
    assert (source_builder.path() / ".markscan" / "types.ts").exists()


def test_scan_command_output_override(source_builder, tmp_path, capsys) -> None:
    source_builder.write({"Hero.tsx": HERO})
    output_dir = tmp_path / "artifacts"

    main(["scan", str(source_builder.path()), "--output", str(output_dir), "--no-types"])

    capsys.readouterr()
    assert (output_dir / "schema.json").exists()
    assert not (output_dir / "types.ts").exists()


def test_diff_command_does_not_write(source_builder, capsys) -> None:
    source_builder.write({"Hero.tsx": HERO})

    main(["diff", str(source_builder.path())])

    out = capsys.readouterr().out
    assert "  + home.hero.title (text)" in out
    assert not (source_builder.path() / ".markscan").exists()


def test_types_command_regenerates_from_snapshot(source_builder, capsys) -> None:
    source_builder.write({"Hero.tsx": HERO})
    main(["scan", str(source_builder.path()), "--no-types"])
    types_path = source_builder.path() / ".markscan" / "types.ts"
    assert not types_path.exists()

    main(["types", str(source_builder.path())])

    assert "Types written to" in capsys.readouterr().out
    assert "  title: string;" in types_path.read_text(encoding="utf-8")


def test_types_command_without_snapshot_exits(source_builder) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["types", str(source_builder.path())])
    assert excinfo.value.code == 1


def test_scan_command_missing_source_exits(tmp_path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["scan", str(tmp_path)])
    assert excinfo.value.code == 1


def test_invalid_config_exits(source_builder) -> None:
    source_builder.write_config("output: [unclosed\n")

    with pytest.raises(SystemExit) as excinfo:
        main(["scan", str(source_builder.path())])
    assert excinfo.value.code == 1
