"""Pending-change overlay for optimistic updates"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, TypeVar

T = TypeVar("T")


@dataclass
class PendingChange(Generic[T]):
    """A staged change: keys to hide and provisional entries to show"""
    hide: set = field(default_factory=set)
    add: list = field(default_factory=list)


class PendingOverlay(Generic[T]):
    """
    Staged changes layered over a canonical list.

    Staging never touches the canonical list. A change either commits
    (the caller applies it for real) or rolls back (it simply disappears).
    """

    def __init__(self, key: Callable[[T], Any]):
        self._key = key
        self._pending: dict[str, PendingChange[T]] = {}

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def stage(self, hide: Iterable[Any] = (), add: Iterable[T] = ()) -> str:
        """Stage a change and return its token"""
        token = uuid.uuid4().hex
        self._pending[token] = PendingChange(hide=set(hide), add=list(add))
        return token

    def view(self, base: Iterable[T]) -> list[T]:
        """Canonical entries minus hidden keys, plus provisional entries"""
        hidden: set = set()
        added: list[T] = []
        for change in self._pending.values():
            hidden |= change.hide
            added.extend(change.add)
        return [entry for entry in base if self._key(entry) not in hidden] + added

    def commit(self, token: str) -> PendingChange[T]:
        """Remove the change from the overlay and hand it to the caller"""
        return self._pending.pop(token)

    def rollback(self, token: str) -> None:
        self._pending.pop(token, None)
