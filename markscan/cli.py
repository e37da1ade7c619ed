"""CLI entrypoints for markscan commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, ScannerConfig, load_config
from .logging import configure_logging
from .output.diff import format_schema_diff
from .output.json_writer import read_schema
from .output.types_writer import write_types_file
from .scanner import ScanResult, Scanner


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project root or path to .markscan.yml (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="markscan",
        description="Build a content schema from marked elements in JSX/TSX components.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan components and write schema.json and types.ts.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_path_argument(scan_parser)
    scan_parser.add_argument(
        "-o",
        "--output",
        help="Output directory (overrides output_dir from the config file).",
    )
    scan_parser.add_argument(
        "--sort",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Order pages, sections and fields alphabetically.",
    )
    scan_parser.add_argument(
        "--no-types",
        action="store_true",
        help="Skip writing the type definitions file.",
    )
    scan_parser.add_argument(
        "--compact",
        action="store_true",
        help="Write schema.json without indentation.",
    )

    diff_parser = subparsers.add_parser(
        "diff",
        help="Show changes against the last snapshot without writing anything.",
    )
    _add_verbose_option(diff_parser, suppress_default=True)
    _add_path_argument(diff_parser)

    types_parser = subparsers.add_parser(
        "types",
        help="Regenerate types.ts from the existing schema.json.",
    )
    _add_verbose_option(types_parser, suppress_default=True)
    _add_path_argument(types_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for markscan commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        config = load_config(Path(args.path))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "scan":
        _apply_scan_overrides(config, args)
        try:
            result = Scanner(config).scan()
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except OSError as exc:
            parser.exit(1, f"markscan scan failed: {exc}\nRun with --verbose for more details.\n")
        _print_summary(result)
        print(format_schema_diff(result.diff))
        if result.schema_path is not None:
            print(f"Schema written to {_relativize(result.schema_path)}")
        if result.types_path is not None:
            print(f"Types written to {_relativize(result.types_path)}")
    elif args.command == "diff":
        try:
            result = Scanner(config).scan(write=False)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        print(format_schema_diff(result.diff))
    elif args.command == "types":
        schema = read_schema(config.output_dir)
        if schema is None:
            parser.exit(
                1,
                f"No schema snapshot found in {_relativize(config.output_dir)}. Run `markscan scan` first.\n",
            )
        try:
            path = write_types_file(
                schema,
                config.output_dir,
                include_comments=config.output.comments,
                root_type=config.output.root_type,
            )
        except OSError as exc:
            parser.exit(1, f"markscan types failed: {exc}\n")
        print(f"Types written to {_relativize(path)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _apply_scan_overrides(config: ScannerConfig, args: argparse.Namespace) -> None:
    if args.output:
        config.output_dir = Path(args.output).expanduser().resolve()
    if args.sort is not None:
        config.sort = bool(args.sort)
    if args.no_types:
        config.output.types = False
    if args.compact:
        config.output.pretty = False


def _print_summary(result: ScanResult) -> None:
    schema = result.schema
    print(
        f"Scanned {schema.meta.files_scanned} files: "
        f"{schema.total_fields} fields in {schema.page_count} pages"
    )
    for warning in result.warnings:
        location = warning.file or "-"
        if warning.line is not None:
            location = f"{location}:{warning.line}"
        print(f"  warning ({warning.kind}) {location}: {warning.message}")
    for issue in result.issues:
        print(f"  issue: {issue}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
