"""Pipeline orchestration: walk, generate, validate, diff and write."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .config import ScannerConfig
from .logging import get_logger
from .models import FileScanResult, ProjectSchema, ScanMeta, ScanWarning, SchemaDiff
from .output.diff import compare_schemas
from .output.json_writer import read_schema, write_schema
from .output.types_writer import write_types_file
from .parser import AttributeExtractor, SourceWalker
from .schema.generator import generate_schema, partition_fields, update_meta
from .schema.validator import validate_schema


@dataclass
class ScanResult:
    """Outcome of one scan run."""

    schema: ProjectSchema
    diff: SchemaDiff
    files: List[FileScanResult] = field(default_factory=list)
    warnings: List[ScanWarning] = field(default_factory=list)
    issues: List[str] = field(default_factory=list)
    schema_path: Optional[Path] = None
    types_path: Optional[Path] = None

    @property
    def success(self) -> bool:
        return not self.warnings


class Scanner:
    """Runs the scan pipeline for one configured project."""

    def __init__(self, config: ScannerConfig, walker: SourceWalker | None = None) -> None:
        self.config = config
        self.walker = walker or SourceWalker(
            config.src_dir,
            include=config.include,
            exclude=config.exclude,
            extractor=AttributeExtractor(config.marker),
        )
        self.logger = get_logger("scanner")

    def scan(self, *, write: bool = True) -> ScanResult:
        """Scan the source tree; with ``write=False`` only the diff is computed."""
        self.logger.info("Scanning %s", self.walker.root)
        parsed = self.walker.parse_all()

        warnings = list(parsed.warnings)
        valid, invalid = partition_fields(parsed.fields)
        for item in invalid:
            warnings.append(
                ScanWarning(
                    kind="path",
                    message=f'Marker path "{item.path}" must have the form page.section.field',
                    file=item.file,
                    line=item.line,
                )
            )

        schema = generate_schema(valid, sort=self.config.sort)
        schema = update_meta(
            schema,
            ScanMeta(
                src_dir=self._display_path(self.walker.root),
                files_scanned=len(parsed.files),
                files_with_markers=len({item.file for item in valid}),
                scan_duration=parsed.duration,
            ),
        )

        issues = validate_schema(schema)
        for issue in issues:
            self.logger.warning("Schema issue: %s", issue)

        previous = read_schema(self.config.output_dir)
        diff = compare_schemas(previous, schema)
        result = ScanResult(schema=schema, diff=diff, files=parsed.files, warnings=warnings, issues=issues)

        if write:
            output = self.config.output
            result.schema_path = write_schema(
                schema,
                self.config.output_dir,
                pretty=output.pretty,
                indent=output.indent,
            )
            if output.types:
                result.types_path = write_types_file(
                    schema,
                    self.config.output_dir,
                    include_comments=output.comments,
                    root_type=output.root_type,
                )

        self.logger.info(
            "Found %d fields across %d pages in %d files (%d warnings)",
            schema.total_fields,
            schema.page_count,
            len(parsed.files),
            len(warnings),
        )
        return result

    def _display_path(self, path: Path) -> str:
        try:
            return path.relative_to(self.config.root).as_posix() or "."
        except ValueError:
            return path.as_posix()


__all__ = ["ScanResult", "Scanner"]
