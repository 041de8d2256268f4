"""Exception hierarchy shared by the registry and its overlays."""

from __future__ import annotations

from collections.abc import Iterable


class RegistryError(Exception):
    """Base class for every error raised by keyreg."""


class NotFoundError(RegistryError, LookupError):
    """Raised when a required name or pattern has no registered match."""

    def __init__(self, message: str, names: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.names = tuple(names)


class NoActiveItemError(RegistryError):
    """Raised when a single selection is queried with nothing selected."""


class CatalogError(RegistryError, ValueError):
    """Raised when a catalog file cannot be loaded or applied."""


__all__ = ["CatalogError", "NoActiveItemError", "NotFoundError", "RegistryError"]
