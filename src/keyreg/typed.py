"""Registry facade keyed by the class name of each stored object."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Generic, TypeVar, cast

from keyreg.registry import KeyedRegistry

T = TypeVar("T")
R = TypeVar("R")


def _flatten(items: Iterable[T | Iterable[T]]) -> list[T]:
    flat: list[T] = []
    for entry in items:
        if isinstance(entry, Iterable) and not isinstance(entry, (str, bytes)):
            flat.extend(cast(Iterable[T], entry))
        else:
            flat.append(cast(T, entry))
    return flat


class TypedRegistry(Generic[T]):
    """Hold at most one object per concrete class, looked up by type.

    Objects are stored under ``type(obj).__name__``, so two classes sharing a
    name in different modules replace each other. Any non-string iterable
    passed to :meth:`register` is treated as a group of objects and flattened
    one level.
    """

    def __init__(self, registry: KeyedRegistry[T] | None = None) -> None:
        self.registry: KeyedRegistry[T] = registry if registry is not None else KeyedRegistry()

    def register(self, *items: T | Iterable[T]) -> None:
        for item in _flatten(items):
            self.registry.register(type(item).__name__, item)

    def unregister(self, *items: T) -> None:
        for item in items:
            self.registry.unregister(type(item).__name__)

    def get_items(self) -> list[T]:
        return self.registry.get_all_item_values()

    def get_item_by_type(self, cls: type[R]) -> R | None:
        return cast("R | None", self.registry.get_item_by_name(cls.__name__))

    def require_item_by_type(self, cls: type[R]) -> R:
        return cast(R, self.registry.require_item_by_name(cls.__name__))

    def wait_for_item_by_type(self, cls: type[R], callback: Callable[[R], None]) -> None:
        self.registry.wait_for_item_by_name(cls.__name__, cast(Callable[[T], None], callback))

    async def wait_for_type(self, cls: type[R]) -> R:
        return cast(R, await self.registry.wait_for_item(cls.__name__))

    def get_item_by_name(self, name: str) -> T | None:
        return self.registry.get_item_by_name(name)

    def require_item_by_name(self, name: str) -> T:
        return self.registry.require_item_by_name(name)


__all__ = ["TypedRegistry"]
