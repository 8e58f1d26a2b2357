"""Parsing of the DocBlock comment above a routine.

    /**
     * Short description.
     *
     * Long description.
     *
     * @param p_name The name of the user.
     */
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

DOCBLOCK_PATTERN = re.compile(r"/\*\*(.*?)\*/", re.DOTALL)
LEADING_STAR = re.compile(r"^\s*\*?\s?")
TAG_LINE = re.compile(r"^@(\w+)\s*(.*)$")


@dataclass(frozen=True)
class DocBlock:
    """Parts of a DocBlock."""
    short_description: str = ""
    long_description: str = ""
    parameters: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    def parameter_description(self, name: str) -> str | None:
        for param_name, description in self.parameters:
            if param_name == name:
                return description
        return None

    @property
    def parameter_names(self) -> list[str]:
        return [name for name, _ in self.parameters]


def _split_descriptions(lines: list[str]) -> tuple[str, str]:
    """Split description lines into short and long description."""
    while lines and not lines[0]:
        lines.pop(0)

    short: list[str] = []
    rest = lines
    for i, line in enumerate(lines):
        if not line:
            rest = lines[i + 1:]
            break
        short.append(line)
        if line.endswith("."):
            rest = lines[i + 1:]
            break
    else:
        rest = []

    return " ".join(short).strip(), "\n".join(rest).strip()


def parse_docblock(text: str) -> DocBlock:
    """Parse the first DocBlock found in text.

    Args:
        text: Source text preceding the routine header

    Returns:
        DocBlock (empty when text holds no DocBlock)
    """
    match = DOCBLOCK_PATTERN.search(text)
    if not match:
        return DocBlock()

    description_lines: list[str] = []
    tags: list[tuple[str, str]] = []

    for raw in match.group(1).split("\n"):
        line = LEADING_STAR.sub("", raw, count=1).rstrip()
        tag = TAG_LINE.match(line)
        if tag:
            tags.append((tag.group(1), tag.group(2)))
        elif tags:
            # Continuation of the previous tag
            if line:
                name, body = tags[-1]
                tags[-1] = (name, f"{body} {line.strip()}".strip())
        else:
            description_lines.append(line)

    short_description, long_description = _split_descriptions(description_lines)

    parameters = []
    for name, body in tags:
        if name != "param" or not body:
            continue
        parts = body.split(None, 1)
        parameters.append((parts[0], parts[1].strip() if len(parts) > 1 else ""))

    return DocBlock(
        short_description=short_description,
        long_description=long_description,
        parameters=tuple(parameters)
    )
