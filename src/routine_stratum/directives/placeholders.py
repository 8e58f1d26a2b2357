"""Placeholder expansion for routine sources.

Placeholders look like `@NAME@` or `@table.column%type@` and are replaced by
literal values before the routine is loaded. Lookup is case-insensitive.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping

from ..exceptions import UnknownPlaceholderError

PLACEHOLDER_PATTERN = re.compile(r"@[A-Za-z0-9_.]+(?:%type)?@")


class ReplacePairs(Mapping[str, str]):
    """Read-only map from placeholder token to replacement, keyed upper case."""

    def __init__(self, pairs: Mapping[str, str] | None = None) -> None:
        self._pairs = {key.upper(): str(value) for key, value in (pairs or {}).items()}

    def __getitem__(self, key: str) -> str:
        return self._pairs[key.upper()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.upper() in self._pairs

    def __iter__(self) -> Iterator[str]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __repr__(self) -> str:
        return f"ReplacePairs({self._pairs!r})"


def find_placeholders(text: str) -> list[str]:
    """Return the distinct placeholder tokens in text, sorted."""
    return sorted(set(PLACEHOLDER_PATTERN.findall(text)))


def highlight(text: str, tokens: list[str]) -> str:
    """Mark every occurrence of the given tokens in text."""
    if not tokens:
        return text
    return substitute(text, {token: f">>>{token}<<<" for token in tokens})


def expand_placeholders(text: str, replace_pairs: Mapping[str, str]) -> dict[str, str]:
    """Resolve all placeholders found in a routine source.

    Args:
        text: Full source text
        replace_pairs: Placeholder values (see ReplacePairs)

    Returns:
        Map from each token found in the source to its value, sorted by token

    Raises:
        UnknownPlaceholderError: Listing every token without a value
    """
    if not isinstance(replace_pairs, ReplacePairs):
        replace_pairs = ReplacePairs(replace_pairs)

    replace: dict[str, str] = {}
    unknown: list[str] = []

    for token in find_placeholders(text):
        if token in replace_pairs:
            replace[token] = replace_pairs[token]
        else:
            unknown.append(token)

    if unknown:
        raise UnknownPlaceholderError(unknown, highlighted_source=highlight(text, unknown))

    return replace


def replacement_pattern(keys: Iterable[str]) -> re.Pattern[str]:
    """Compile a pattern matching any of keys, longest first."""
    ordered = sorted(keys, key=len, reverse=True)
    return re.compile("|".join(re.escape(key) for key in ordered))


def substitute(
    text: str,
    replace: Mapping[str, str],
    pattern: re.Pattern[str] | None = None
) -> str:
    """Replace all keys of `replace` in text in a single pass.

    Longer keys win over shorter ones and replaced text is never scanned
    again. `pattern` may be a precompiled replacement_pattern() over the
    same keys.
    """
    if not replace:
        return text

    if pattern is None:
        pattern = replacement_pattern(replace)
    return pattern.sub(lambda m: replace[m.group(0)], text)
