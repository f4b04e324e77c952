"""Tests for the selectable result list."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from symfinder.config import AppConfig
from symfinder.models import Location
from symfinder.query.session import QuerySession
from symfinder.ui.listing import ResultListView, SelectableList


class TestSelectableList:
    """Test SelectableList cursor handling."""

    def test_empty_list(self) -> None:
        """An empty list has no current item."""
        items: SelectableList[str] = SelectableList()

        assert len(items) == 0
        assert items.current() is None
        assert items.move(1) == 0

    def test_move_is_clamped(self) -> None:
        """The cursor never leaves the list."""
        items = SelectableList(["a", "b", "c"])

        assert items.move(1) == 1
        assert items.move(10) == 2
        assert items.current() == "c"
        assert items.move(-10) == 0
        assert items.current() == "a"

    def test_goto_out_of_range(self) -> None:
        """Jumping past the end leaves nothing selected."""
        items = SelectableList(["a"])

        items.goto(5)

        assert items.current() is None


@pytest.fixture
def session(fake_runner, sample_output: bytes) -> QuerySession:
    session = QuerySession(AppConfig(editor="vi"), runner=fake_runner)
    fake_runner.queue(sample_output)
    session.execute_query("foo", index_directory=Path("/idx"))
    return session


class TestResultListView:
    """Test ResultListView navigation."""

    def test_activate_opens_location(self, session: QuerySession) -> None:
        """Activating an entry hands its location to the opener."""
        opener = MagicMock()
        view = ResultListView(session, opener)

        location = view.activate(1)

        assert len(view) == 3
        assert location == Location(path=Path("/idx/src/bar.c"), line=7)
        opener.assert_called_once_with(location)

    def test_activate_current_position(self, session: QuerySession) -> None:
        """Without an index the cursor position is used."""
        opener = MagicMock()
        view = ResultListView(session, opener)
        view.entries.move(2)

        assert view.activate() == Location(path=Path("/idx/include/foo.h"), line=3)

    def test_out_of_range_is_noop(self, session: QuerySession) -> None:
        """Invalid entries do not navigate."""
        opener = MagicMock()
        view = ResultListView(session, opener)

        assert view.activate(42) is None
        opener.assert_not_called()

    def test_stale_view_does_not_navigate(self, session: QuerySession, fake_runner) -> None:
        """A view from an older query never opens anything."""
        opener = MagicMock()
        view = ResultListView(session, opener)
        fake_runner.queue(b"lib/x.c f 1 y\n")
        session.execute_query("x", index_directory=Path("/idx"))

        assert view.stale is True
        assert view.activate(0) is None
        opener.assert_not_called()
