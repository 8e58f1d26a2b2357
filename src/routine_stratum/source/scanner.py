"""Reading stored routine source files.

A source file holds one routine. Everything above the first line consisting
of the body marker is the directive region.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..exceptions import SourceIOError

BODY_MARKER = "begin"


@dataclass(frozen=True)
class SourceFile:
    """A scanned routine source file."""
    path: Path
    text: str
    lines: tuple[str, ...]
    timestamp: int
    marker_index: int | None  # index of the body marker line, None if absent

    @property
    def routine_name(self) -> str:
        return self.path.stem

    @property
    def directive_lines(self) -> tuple[str, ...]:
        """Lines strictly above the body marker (empty without a marker)."""
        if self.marker_index is None:
            return ()
        return self.lines[:self.marker_index]


def source_timestamp(path: str | Path) -> int:
    """Return the last modification time of a source file in whole seconds."""
    try:
        return int(Path(path).stat().st_mtime)
    except OSError as e:
        raise SourceIOError(f"Unable to get modification time of {path}: {e}") from e


def find_body_marker(lines: tuple[str, ...] | list[str]) -> int | None:
    """Find the index of the first line equal to the body marker."""
    for i, line in enumerate(lines):
        if line.rstrip() == BODY_MARKER:
            return i
    return None


def scan_source(path: str | Path) -> SourceFile:
    """Read a routine source file.

    Args:
        path: Path to the source file

    Returns:
        SourceFile with text, lines, timestamp and body marker position

    Raises:
        SourceIOError: If the file cannot be read
    """
    source_path = Path(path)
    try:
        text = source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceIOError(f"Unable to read {source_path}: {e}") from e

    lines = tuple(text.split("\n"))

    return SourceFile(
        path=source_path,
        text=text,
        lines=lines,
        timestamp=source_timestamp(source_path),
        marker_index=find_body_marker(lines)
    )
