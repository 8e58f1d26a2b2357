"""Directive comments and placeholders in routine sources.

Handles:
- `@NAME@` placeholders and their replacement values
- `-- type:` designation directives
- `-- return:` return type directives
- `-- param:` extended parameter directives
- the DocBlock above the routine header
"""
from __future__ import annotations

from .designation import (
    Designation,
    DesignationKind,
    parse_designation,
    resolve_designation,
)
from .docblock import DocBlock, parse_docblock
from .params import parse_extended_parameters, parse_param_directive
from .placeholders import (
    ReplacePairs,
    expand_placeholders,
    find_placeholders,
    substitute,
)
from .return_type import resolve_return_type, validate_return_type

__all__ = [
    "Designation",
    "DesignationKind",
    "parse_designation",
    "resolve_designation",
    "DocBlock",
    "parse_docblock",
    "parse_extended_parameters",
    "parse_param_directive",
    "ReplacePairs",
    "expand_placeholders",
    "find_placeholders",
    "substitute",
    "resolve_return_type",
    "validate_return_type",
]
