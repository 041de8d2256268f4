"""Name-keyed registry with wait-for-registration subscriptions."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Generic, TypeVar

from keyreg.errors import NotFoundError
from keyreg.utils.patterns import dedupe, like

T = TypeVar("T")
Waiter = Callable[[T], None]


@dataclass(frozen=True)
class PrefixMatch(Generic[T]):
    """Result of resolving command-style text against registered names."""

    name: str
    item: T
    remainder: str


def _set_result(future: asyncio.Future[T], item: T) -> None:
    if not future.done():
        future.set_result(item)


class KeyedRegistry(Generic[T]):
    """Store items by unique name and notify callers waiting for a name.

    Registering an existing name replaces the previous item. Waiters queued
    through :meth:`wait_for_item_by_name` or :meth:`wait_for_item` are invoked
    once, in subscription order, by the next registration of that exact name.
    A waiter whose name is never registered stays queued for the lifetime of
    the registry; :meth:`pending_waiters` reports how many are outstanding.

    ``case_sensitive`` controls pattern matching and :meth:`resolve_name`;
    direct lookups always use the exact name.

    :attr:`lock` guards items and waiters. Overlays built on the registry hold
    the same lock so their state changes atomically with it.
    """

    def __init__(self, *, case_sensitive: bool = True) -> None:
        self.case_sensitive = case_sensitive
        self._items: dict[str, T] = {}
        self._subscribers: dict[str, list[Waiter[T]]] = {}
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self.get_all_item_names())

    def register(self, name: str, item: T) -> None:
        """Store ``item`` under ``name`` and release every waiter on that name.

        All waiters run even when one of them raises; the first error is
        re-raised once the last waiter has been called.
        """

        with self._lock:
            self._items[name] = item
            waiters = self._subscribers.pop(name, [])
        # Waiters run outside the lock so they may use the registry themselves.
        errors: list[Exception] = []
        for callback in waiters:
            try:
                callback(item)
            except Exception as exc:  # noqa: BLE001 - re-raised below
                errors.append(exc)
        if errors:
            raise errors[0]

    def register_all(self, items: Mapping[str, T] | Iterable[tuple[str, T]]) -> None:
        pairs = items.items() if isinstance(items, Mapping) else items
        for name, item in pairs:
            self.register(name, item)

    def unregister(self, name: str) -> None:
        with self._lock:
            self._items.pop(name, None)

    def get_item_by_name(self, name: str, default: T | None = None) -> T | None:
        with self._lock:
            return self._items.get(name, default)

    def require_item_by_name(self, name: str) -> T:
        with self._lock:
            if name in self._items:
                return self._items[name]
            available = ", ".join(self._items)
        raise NotFoundError(f"Item {name} not found. Available: {available}", [name])

    def resolve_name(self, name: str) -> str | None:
        """Return the registered name equal to ``name`` under the case policy."""

        with self._lock:
            if name in self._items:
                return name
            if self.case_sensitive:
                return None
            folded = name.casefold()
            return next((key for key in self._items if key.casefold() == folded), None)

    def wait_for_item_by_name(self, name: str, callback: Waiter[T]) -> None:
        """Call ``callback`` with the item named ``name`` once it exists.

        The callback runs immediately when the name is already registered,
        otherwise it is queued until the next :meth:`register` of that name.
        """

        with self._lock:
            if name not in self._items:
                self._subscribers.setdefault(name, []).append(callback)
                return
            item = self._items[name]
        callback(item)

    async def wait_for_item(self, name: str) -> T:
        """Return the item named ``name``, suspending until it is registered.

        Cancelling the awaiting task (for example through
        :func:`asyncio.wait_for`) drops its waiter from the queue.
        """

        loop = asyncio.get_running_loop()
        future: asyncio.Future[T] = loop.create_future()

        def _resolve(item: T) -> None:
            loop.call_soon_threadsafe(_set_result, future, item)

        with self._lock:
            if name in self._items:
                return self._items[name]
            self._subscribers.setdefault(name, []).append(_resolve)
        try:
            return await future
        except asyncio.CancelledError:
            self._discard_waiter(name, _resolve)
            raise

    def _discard_waiter(self, name: str, callback: Waiter[T]) -> None:
        with self._lock:
            waiters = self._subscribers.get(name)
            if waiters is None or callback not in waiters:
                return
            waiters.remove(callback)
            if not waiters:
                del self._subscribers[name]

    def pending_waiters(self, name: str | None = None) -> int:
        with self._lock:
            if name is not None:
                return len(self._subscribers.get(name, ()))
            return sum(len(waiters) for waiters in self._subscribers.values())

    def ensure_items(self, names: str | Iterable[str]) -> None:
        if isinstance(names, str):
            names = [names]
        with self._lock:
            missing = [name for name in names if name not in self._items]
            available = ", ".join(self._items)
        if missing:
            raise NotFoundError(
                f"Items not found: {', '.join(missing)}. Available: {available}",
                missing,
            )

    def get_all_item_names(self) -> list[str]:
        with self._lock:
            return list(self._items)

    def get_all_item_values(self) -> list[T]:
        with self._lock:
            return list(self._items.values())

    def get_all_items(self) -> dict[str, T]:
        with self._lock:
            return dict(self._items)

    def entries(self) -> list[tuple[str, T]]:
        with self._lock:
            return list(self._items.items())

    def for_each(self, callback: Callable[[str, T], None]) -> None:
        for name, item in self.entries():
            callback(name, item)

    def _names_like(self, pattern: str) -> list[str]:
        return [
            name
            for name in self._items
            if like(pattern, name, case_sensitive=self.case_sensitive)
        ]

    def get_item_names_like(self, patterns: str | Iterable[str]) -> list[str]:
        """Return registered names matching one pattern or a union of patterns.

        A pattern is an exact name or a prefix followed by ``*``. The union
        form drops duplicates and keeps first-seen order.
        """

        if isinstance(patterns, str):
            patterns = [patterns]
        with self._lock:
            return dedupe(name for pattern in patterns for name in self._names_like(pattern))

    def ensure_item_names_like(self, patterns: str | Iterable[str]) -> list[str]:
        if isinstance(patterns, str):
            patterns = [patterns]
        matched: list[str] = []
        unmatched: list[str] = []
        with self._lock:
            for pattern in patterns:
                names = self._names_like(pattern)
                if names:
                    matched.extend(names)
                else:
                    unmatched.append(pattern)
        if unmatched:
            raise NotFoundError(
                f"No items found matching {', '.join(unmatched)}", unmatched
            )
        return dedupe(matched)

    def get_item_entries_like(self, patterns: str | Iterable[str]) -> list[tuple[str, T]]:
        with self._lock:
            return [(name, self._items[name]) for name in self.get_item_names_like(patterns)]

    def get_longest_prefix_match(self, text: str) -> PrefixMatch[T] | None:
        """Resolve command-style ``text`` to the longest registered name.

        A name qualifies when it equals ``text`` or when ``text`` starts with
        the name followed by a single space. The remainder is the rest of the
        text, stripped.
        """

        best: PrefixMatch[T] | None = None
        for name, item in self.entries():
            if text != name and not text.startswith(name + " "):
                continue
            if best is None or len(name) > len(best.name):
                best = PrefixMatch(name=name, item=item, remainder=text[len(name) :].strip())
        return best

    def clone(self) -> KeyedRegistry[T]:
        """Return a registry holding the same items; waiters are not copied."""

        copy: KeyedRegistry[T] = KeyedRegistry(case_sensitive=self.case_sensitive)
        copy.register_all(self.get_all_items())
        return copy


__all__ = ["KeyedRegistry", "PrefixMatch"]
