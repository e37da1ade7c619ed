"""Helper utilities for constructing temporary component trees in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from markscan.config import ScannerConfig, load_config
from markscan.parser import ParseResult, SourceWalker


class SourceBuilder:
    """Utility for writing component files into a throwaway project and scanning them."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.src = self.root / "src"
        self.src.mkdir(parents=True)

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries under the source directory."""
        for relative, content in files.items():
            self._write(self.src / relative, content)

    def write_config(self, content: str) -> Path:
        path = self.root / ".markscan.yml"
        self._write(path, content)
        return path

    def walk(self) -> ParseResult:
        """Return a fresh parse of everything under the source directory."""
        return SourceWalker(self.src).parse_all()

    def config(self) -> ScannerConfig:
        return load_config(self.root)

    def path(self) -> Path:
        """Return the project root path."""
        return self.root

    @staticmethod
    def _write(path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        normalised = textwrap.dedent(content).lstrip("\n")
        path.write_text(normalised, encoding="utf-8")


__all__ = ["SourceBuilder"]
