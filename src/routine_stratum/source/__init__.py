"""Routine source file scanning."""
from .scanner import BODY_MARKER, SourceFile, find_body_marker, scan_source, source_timestamp

__all__ = [
    "BODY_MARKER",
    "SourceFile",
    "find_body_marker",
    "scan_source",
    "source_timestamp",
]
