"""Selectable list of query results."""

from __future__ import annotations

from typing import Callable, Generic, List, Sequence, TypeVar

from symfinder.models import Location, QueryRecord
from symfinder.query.session import QuerySession

T = TypeVar("T")

Opener = Callable[[Location], None]


class SelectableList(Generic[T]):
    """Items with a cursor that stays inside the list."""

    def __init__(self, items: Sequence[T] = ()) -> None:
        self.items: List[T] = list(items)
        self.position = 0

    def __len__(self) -> int:
        return len(self.items)

    def move(self, delta: int) -> int:
        if self.items:
            self.position = max(0, min(len(self.items) - 1, self.position + delta))
        return self.position

    def goto(self, index: int) -> int:
        self.position = index
        return index

    def current(self) -> T | None:
        if 0 <= self.position < len(self.items):
            return self.items[self.position]
        return None


class ResultListView:
    """List view over the session's current records.

    The view remembers the result generation it was built from, so activating
    an entry after a newer query has replaced the records does nothing.
    """

    def __init__(self, session: QuerySession, opener: Opener) -> None:
        self.session = session
        self.opener = opener
        self.generation = session.generation
        self.entries: SelectableList[QueryRecord] = SelectableList(session.records)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def stale(self) -> bool:
        return self.generation != self.session.generation

    def activate(self, index: int | None = None) -> Location | None:
        if index is not None:
            self.entries.goto(index)
        location = self.session.select_record(self.entries.position, generation=self.generation)
        if location is not None:
            self.opener(location)
        return location
