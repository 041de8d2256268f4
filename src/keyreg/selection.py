"""Active-selection overlays layered on top of a :class:`KeyedRegistry`."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Generic, TypeVar

from keyreg.errors import NoActiveItemError, NotFoundError
from keyreg.registry import KeyedRegistry
from keyreg.utils.patterns import dedupe, is_wildcard

T = TypeVar("T")


class SingleSelection(Generic[T]):
    """Track at most one active name among the items of a registry.

    The name given to :meth:`set_enabled_item` is resolved with the
    registry's case policy and stored as registered.
    """

    def __init__(self, registry: KeyedRegistry[T]) -> None:
        self.registry = registry
        self._active_name: str | None = None

    @property
    def active_name(self) -> str | None:
        return self._active_name

    def get_active_item_name(self) -> str | None:
        return self._active_name

    def set_enabled_item(self, name: str | None) -> None:
        with self.registry.lock:
            if name is None:
                self._active_name = None
                return
            resolved = self.registry.resolve_name(name)
            if resolved is None:
                raise NotFoundError(f"Couldn't set enabled item {name}: not found", [name])
            self._active_name = resolved

    def get_active_item(self) -> T:
        with self.registry.lock:
            name = self._active_name
            if name is None:
                raise NoActiveItemError("No item is currently enabled")
            return self._resolve(name)

    def get_active_item_entry(self) -> dict[str, T]:
        with self.registry.lock:
            name = self._active_name
            if name is None:
                return {}
            return {name: self._resolve(name)}

    def _resolve(self, name: str) -> T:
        try:
            return self.registry.require_item_by_name(name)
        except NotFoundError as exc:
            raise NotFoundError(f"Active item {name} does not exist", [name]) from exc


class MultiSelection(Generic[T]):
    """Track a set of active names, with trailing-wildcard enable/disable.

    Wildcards are expanded against the names registered at call time; later
    registrations matching the same prefix are not activated automatically.
    Every mutating call resolves all of its patterns before touching the
    active set, so a failed call leaves the selection as it was.
    """

    def __init__(self, registry: KeyedRegistry[T]) -> None:
        self.registry = registry
        self._active_names: dict[str, None] = {}

    def get_active_item_names(self) -> frozenset[str]:
        with self.registry.lock:
            return frozenset(self._active_names)

    def enable_items(self, *patterns: str) -> None:
        with self.registry.lock:
            resolved = self._resolve_patterns(patterns, action="enable")
            self._active_names.update(dict.fromkeys(resolved))

    def disable_items(self, *patterns: str) -> None:
        with self.registry.lock:
            resolved = self._resolve_patterns(patterns, action="disable")
            for name in resolved:
                self._active_names.pop(name, None)

    def set_enabled_items(self, *patterns: str) -> None:
        with self.registry.lock:
            resolved = self._resolve_patterns(patterns, action="set enabled items with")
            self._active_names = dict.fromkeys(resolved)

    def get_active_item_entries(self) -> dict[str, T]:
        entries: dict[str, T] = {}
        with self.registry.lock:
            for name in self._active_names:
                try:
                    entries[name] = self.registry.require_item_by_name(name)
                except NotFoundError as exc:
                    raise NotFoundError(
                        f"Couldn't get active item entries for {name}", [name]
                    ) from exc
        return entries

    def _resolve_patterns(self, patterns: Iterable[str], *, action: str) -> list[str]:
        resolved: list[str] = []
        for pattern in patterns:
            names = self.registry.get_item_names_like(pattern)
            if not names:
                reason = "no items found matching prefix" if is_wildcard(pattern) else "not found"
                raise NotFoundError(f"Couldn't {action} {pattern}: {reason}", [pattern])
            resolved.extend(names)
        return dedupe(resolved)


__all__ = ["MultiSelection", "SingleSelection"]
