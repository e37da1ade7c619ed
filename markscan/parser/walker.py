"""Source tree walking and marker detection over tree-sitter syntax trees."""

from __future__ import annotations

import os
import re
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from ..constants import DEFAULT_EXCLUDE_PATTERNS, DEFAULT_INCLUDE_PATTERNS
from ..logging import get_logger
from ..models import DetectedField, FileScanResult, ScanWarning
from .attributes import ELEMENT_NODE_TYPES, AttributeExtractor, tag_name

_PRUNED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
}

_GRAMMAR_BY_SUFFIX = {
    ".tsx": "tsx",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".jsx": "javascript",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}


def _load_language(grammar: str) -> Language:
    if grammar == "tsx":
        return Language(tree_sitter_typescript.language_tsx())
    if grammar == "typescript":
        return Language(tree_sitter_typescript.language_typescript())
    return Language(tree_sitter_javascript.language())


def _glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a ``**``-aware glob into a regex over posix relative paths."""
    index = 0
    parts: List[str] = []
    while index < len(pattern):
        char = pattern[index]
        if pattern.startswith("**/", index):
            parts.append("(?:.*/)?")
            index += 3
            continue
        if pattern.startswith("**", index):
            parts.append(".*")
            index += 2
            continue
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(char))
        index += 1
    return re.compile("^" + "".join(parts) + "$")


@dataclass
class GlobRule:
    """A compiled include or exclude glob."""

    pattern: str
    regex: re.Pattern[str]

    @classmethod
    def compile(cls, pattern: str) -> "GlobRule":
        return cls(pattern=pattern, regex=_glob_to_regex(pattern.strip().lstrip("/")))

    def matches(self, rel_path: str) -> bool:
        return bool(self.regex.match(rel_path))


@dataclass
class ParseResult:
    """Aggregate output of walking every candidate file."""

    fields: List[DetectedField] = field(default_factory=list)
    files: List[FileScanResult] = field(default_factory=list)
    warnings: List[ScanWarning] = field(default_factory=list)
    duration: float = 0.0

    @property
    def files_with_markers(self) -> int:
        return sum(1 for result in self.files if result.fields)


class SourceWalker:
    """Walks a source root and yields one ``DetectedField`` per marked element."""

    def __init__(
        self,
        root: str | Path,
        *,
        include: Sequence[str] | None = None,
        exclude: Sequence[str] | None = None,
        extractor: AttributeExtractor | None = None,
        include_text: bool = True,
    ) -> None:
        self.root = Path(root).expanduser().resolve()
        self.include = [GlobRule.compile(p) for p in (include or DEFAULT_INCLUDE_PATTERNS)]
        excludes = DEFAULT_EXCLUDE_PATTERNS if exclude is None else exclude
        self.exclude = [GlobRule.compile(p) for p in excludes]
        self.extractor = extractor or AttributeExtractor()
        self.include_text = include_text
        self.logger = get_logger("walker")
        self._parsers: Dict[str, Parser] = {}

    def iter_files(self) -> Iterator[Path]:
        """Yield candidate files under the root in a stable order."""
        self._check_root()
        for dirpath, dirnames, filenames in os.walk(self.root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(self.root).as_posix() if current_dir != self.root else ""
            dirnames[:] = sorted(name for name in dirnames if name not in _PRUNED_DIRS)
            for filename in sorted(filenames):
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if not any(rule.matches(rel_path) for rule in self.include):
                    continue
                if any(rule.matches(rel_path) for rule in self.exclude):
                    continue
                yield current_dir / filename

    def walk(self) -> Iterator[FileScanResult]:
        for path in self.iter_files():
            yield self.walk_file(path)

    def parse_all(self) -> ParseResult:
        start = time.perf_counter()
        result = ParseResult()
        for file_result in self.walk():
            result.files.append(file_result)
            result.fields.extend(file_result.fields)
            result.warnings.extend(file_result.warnings)
        result.duration = (time.perf_counter() - start) * 1000
        self.logger.debug(
            "Walked %d files under %s, %d markers found",
            len(result.files),
            self.root,
            len(result.fields),
        )
        return result

    def walk_file(self, path: Path) -> FileScanResult:
        """Parse one file; failures become warnings instead of exceptions."""
        start = time.perf_counter()
        rel_path = self._relative(path)
        result = FileScanResult(file=rel_path)

        parser = self._get_parser(path)
        if parser is None:
            result.warnings.append(
                ScanWarning(kind="parse", message=f"No grammar for {path.suffix or 'file'}", file=rel_path)
            )
            self.logger.warning("Skipping %s: no grammar for suffix", rel_path)
            return result

        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            result.warnings.append(ScanWarning(kind="io", message=f"Failed to read file: {exc}", file=rel_path))
            self.logger.warning("Skipping %s: %s", rel_path, exc)
            return result

        data = source.encode("utf-8")
        tree = parser.parse(data)
        root = tree.root_node
        if root.has_error:
            error = _first_error(root)
            line = error.start_point[0] + 1 if error is not None else None
            result.warnings.append(
                ScanWarning(kind="parse", message="Syntax error in source file", file=rel_path, line=line)
            )
            self.logger.warning("Skipping %s: syntax error near line %s", rel_path, line)
            result.duration = (time.perf_counter() - start) * 1000
            return result

        for element in self._collect_elements(root):
            detected = self._detect(element, rel_path, data)
            if detected is not None:
                result.fields.append(detected)

        result.duration = (time.perf_counter() - start) * 1000
        return result

    def _detect(self, element: Node, rel_path: str, data: bytes) -> Optional[DetectedField]:
        extracted = self.extractor.extract(element)
        if extracted is None:
            return None
        row, byte_column = element.start_point
        # tree-sitter columns are byte offsets; report characters.
        line_start = element.start_byte - byte_column
        column = len(data[line_start : element.start_byte].decode("utf-8", errors="replace"))
        return DetectedField(
            path=extracted.path,
            attributes=extracted.attributes,
            file=rel_path,
            line=row + 1,
            column=column + 1,
            element=tag_name(element) or None,
            text_content=self.extractor.text_content(element) if self.include_text else None,
        )

    def _collect_elements(self, node: Node) -> Iterable[Node]:
        """Yield element nodes in document order, depth-first without recursion."""
        stack = list(reversed(node.children))
        while stack:
            current = stack.pop()
            if current.type in ELEMENT_NODE_TYPES:
                yield current
            stack.extend(reversed(current.children))

    def _get_parser(self, path: Path) -> Optional[Parser]:
        grammar = _GRAMMAR_BY_SUFFIX.get(path.suffix.lower())
        if grammar is None:
            return None
        parser = self._parsers.get(grammar)
        if parser is None:
            parser = Parser(_load_language(grammar))
            self._parsers[grammar] = parser
        return parser

    def _relative(self, path: Path) -> str:
        try:
            return path.resolve().relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()

    def _check_root(self) -> None:
        if not self.root.exists():
            raise FileNotFoundError(f"Source directory not found: {self.root}")
        if not self.root.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {self.root}")


def _first_error(node: Node) -> Optional[Node]:
    current: Optional[Node] = node
    while current is not None:
        if current.type == "ERROR" or current.is_missing:
            return current
        current = next((child for child in current.children if child.has_error), None)
    return None


def unique_paths(fields: Iterable[DetectedField]) -> List[str]:
    return sorted({item.path for item in fields})


def group_fields_by_path(fields: Iterable[DetectedField]) -> "OrderedDict[str, List[DetectedField]]":
    grouped: "OrderedDict[str, List[DetectedField]]" = OrderedDict()
    for item in fields:
        grouped.setdefault(item.path, []).append(item)
    return grouped


def find_duplicate_paths(fields: Iterable[DetectedField]) -> "OrderedDict[str, List[DetectedField]]":
    """Paths marked in more than one place, in first-seen order."""
    return OrderedDict(
        (path, items) for path, items in group_fields_by_path(fields).items() if len(items) > 1
    )


__all__ = [
    "GlobRule",
    "ParseResult",
    "SourceWalker",
    "find_duplicate_paths",
    "group_fields_by_path",
    "unique_paths",
]
