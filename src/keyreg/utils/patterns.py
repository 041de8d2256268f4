"""Name pattern helpers: exact names and trailing-wildcard prefixes."""

from __future__ import annotations

from collections.abc import Iterable

WILDCARD = "*"


def is_wildcard(pattern: str) -> bool:
    return pattern.endswith(WILDCARD)


def like(pattern: str, name: str, *, case_sensitive: bool = True) -> bool:
    """Return True when ``name`` matches ``pattern``.

    A pattern ending in ``*`` matches every name starting with the text before
    the marker; any other pattern must equal the name.
    """

    if not case_sensitive:
        pattern = pattern.casefold()
        name = name.casefold()
    if is_wildcard(pattern):
        return name.startswith(pattern[: -len(WILDCARD)])
    return name == pattern


def dedupe(names: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(names))


__all__ = ["WILDCARD", "dedupe", "is_wildcard", "like"]
