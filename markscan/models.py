"""Core data models shared across markscan components."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import List, Optional


@dataclass
class FieldAttributes:
    """Typed property bag parsed from secondary marker attributes.

    ``None`` means the attribute was absent or malformed; booleans never
    default to ``False``.
    """

    type: Optional[str] = None
    label: Optional[str] = None
    placeholder: Optional[str] = None
    required: Optional[bool] = None
    validation: Optional[str] = None
    options: Optional[str] = None
    condition: Optional[str] = None
    default: Optional[str] = None
    help: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    accept: Optional[str] = None
    multiple: Optional[bool] = None
    rows: Optional[float] = None
    width: Optional[float] = None
    readonly: Optional[bool] = None
    hidden: Optional[bool] = None


FIELD_PROPERTIES: tuple[str, ...] = tuple(item.name for item in fields(FieldAttributes))


@dataclass
class DetectedField:
    """A single marked element found in a source file."""

    path: str
    attributes: FieldAttributes
    file: str
    line: int
    column: int
    element: Optional[str] = None
    text_content: Optional[str] = None


@dataclass
class FieldSchema:
    """Canonical field record; ``type``/``label`` stay ``None`` until generation."""

    path: str
    type: Optional[str] = None
    label: Optional[str] = None
    placeholder: Optional[str] = None
    required: Optional[bool] = None
    validation: Optional[str] = None
    options: Optional[str] = None
    condition: Optional[str] = None
    default: Optional[str] = None
    help: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    accept: Optional[str] = None
    multiple: Optional[bool] = None
    rows: Optional[float] = None
    width: Optional[float] = None
    readonly: Optional[bool] = None
    hidden: Optional[bool] = None
    file: str = ""
    line: int = 0
    column: int = 0
    element: Optional[str] = None
    default_content: Optional[str] = None
    order: int = 0


@dataclass
class SectionSchema:
    """A section groups the fields sharing a page and section slug."""

    slug: str
    name: str
    fields: List[FieldSchema] = field(default_factory=list)
    is_repeater: bool = False
    order: int = 0


@dataclass
class PageSchema:
    """A page groups sections sharing the first path segment."""

    slug: str
    name: str
    sections: List[SectionSchema] = field(default_factory=list)
    field_count: int = 0
    source_files: List[str] = field(default_factory=list)


@dataclass
class ScanMeta:
    """Metadata describing the scan that produced a schema."""

    src_dir: str = ""
    files_scanned: int = 0
    files_with_markers: int = 0
    scan_duration: float = 0.0


@dataclass
class ProjectSchema:
    """Complete page -> section -> field hierarchy for a project."""

    version: str
    generated_at: str
    pages: List[PageSchema] = field(default_factory=list)
    page_count: int = 0
    total_fields: int = 0
    meta: ScanMeta = field(default_factory=ScanMeta)

    def iter_fields(self) -> List[FieldSchema]:
        return [item for page in self.pages for section in page.sections for item in section.fields]


@dataclass
class FieldChange:
    """A field present in both snapshots whose properties differ."""

    path: str
    before: FieldSchema
    after: FieldSchema
    changes: List[str]


@dataclass
class SchemaDiff:
    """Added/removed/modified report between two schema snapshots."""

    added: List[FieldSchema] = field(default_factory=list)
    removed: List[FieldSchema] = field(default_factory=list)
    modified: List[FieldChange] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.removed or self.modified)


@dataclass
class ScanWarning:
    """Non-fatal problem recorded during a scan."""

    kind: str
    message: str
    file: Optional[str] = None
    line: Optional[int] = None


@dataclass
class FileScanResult:
    """Fields and warnings produced by a single source file."""

    file: str
    fields: List[DetectedField] = field(default_factory=list)
    warnings: List[ScanWarning] = field(default_factory=list)
    duration: float = 0.0
