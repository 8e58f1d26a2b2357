"""Extended parameter directives.

`-- param: <name> <type> [<delimiter> <enclosure> <escape>]` declares that a
scalar argument holds a delimited list of `<type>` values.
"""
from __future__ import annotations

import re

from ..exceptions import DuplicateExtendedParameterError, MalformedDirectiveError
from ..metadata.models import ExtendedParameterSpec
from ..source.scanner import SourceFile

PARAM_PREFIX = re.compile(r"^\s*--\s+param:")
PARAM_DIRECTIVE = re.compile(
    r"^\s*--\s+param:\s*(\w+)\s+(\w+)"
    r"(?:\s+([^\s-])\s+([^\s-])\s+([^\s-]))?\s*$"
)

DEFAULT_DELIMITER = ","
DEFAULT_ENCLOSURE = '"'
DEFAULT_ESCAPE = "\\"


def parse_param_directive(line: str) -> ExtendedParameterSpec:
    """Parse a single `-- param:` line.

    Raises:
        MalformedDirectiveError: If the line does not follow the grammar
    """
    match = PARAM_DIRECTIVE.match(line)
    if not match:
        raise MalformedDirectiveError(
            "Expected: -- param: <field_name> <type_of_list> [delimiter enclosure escape]"
        )

    name, data_type, delimiter, enclosure, escape = match.groups()
    if delimiter is None:
        delimiter, enclosure, escape = DEFAULT_DELIMITER, DEFAULT_ENCLOSURE, DEFAULT_ESCAPE

    return ExtendedParameterSpec(
        name=name,
        data_type=data_type,
        delimiter=delimiter,
        enclosure=enclosure,
        escape=escape
    )


def parse_extended_parameters(source: SourceFile) -> dict[str, ExtendedParameterSpec]:
    """Collect all extended parameter declarations of a routine.

    Args:
        source: Scanned routine source

    Returns:
        Map from parameter name to its spec, in declaration order

    Raises:
        MalformedDirectiveError: A `-- param:` line does not follow the grammar
        DuplicateExtendedParameterError: A parameter is declared twice
    """
    specs: dict[str, ExtendedParameterSpec] = {}

    for line in source.directive_lines:
        if not PARAM_PREFIX.match(line):
            continue

        spec = parse_param_directive(line)
        if spec.name in specs:
            raise DuplicateExtendedParameterError(f"Duplicate parameter '{spec.name}'")
        specs[spec.name] = spec

    return specs
