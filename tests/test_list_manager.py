import pytest

from iterm2_bookmarks.filters import BookmarkFilter
from iterm2_bookmarks.list_manager import ListManager, ViewportWindow
from iterm2_bookmarks.models import Bookmark, FilterMode


class KeepEven:
    def keep(self, n: int) -> bool:
        return n % 2 == 0


class KeepNothing:
    def keep(self, n: int) -> bool:
        return False


def test_new_manager_shows_everything():
    manager = ListManager([3, 1, 2])
    assert len(manager) == 3
    assert manager.position == 0
    assert manager.get_selected() == 3
    assert list(manager.iterate()) == [(0, 3), (1, 1), (2, 2)]


def test_apply_filter_preserves_order_and_resets_cursor():
    manager = ListManager(list(range(10)))
    manager.select_down()
    manager.select_down()

    manager.apply_filter(KeepEven())

    assert len(manager) == 5
    assert [n for _, n in manager] == [0, 2, 4, 6, 8]
    assert manager.position == 0
    assert manager.items == tuple(range(10))


def test_apply_filter_always_starts_from_full_catalog():
    manager = ListManager(list(range(10)))
    manager.apply_filter(KeepNothing())
    assert len(manager) == 0
    manager.apply_filter(KeepEven())
    assert len(manager) == 5


def test_filter_count_matches_predicate():
    bookmarks = [
        Bookmark(id=i + 1, name=name, cmds=["true"])
        for i, name in enumerate(["alpha", "beta", "alphabet", "gamma"])
    ]
    manager = ListManager(bookmarks)
    manager.apply_filter(BookmarkFilter(FilterMode.NAME, "alpha", ignore_case=True))
    assert [b.name for _, b in manager] == ["alpha", "alphabet"]


def test_navigation_clamps():
    manager = ListManager(["a", "b", "c"])
    manager.select_up()
    assert manager.position == 0

    for _ in range(5):
        manager.select_down()
    assert manager.position == 2
    assert manager.get_selected() == "c"

    manager.select_up()
    assert manager.get_selected() == "b"

    manager.reset_selection()
    assert manager.position == 0


def test_empty_view_navigation_is_noop():
    manager = ListManager(["a", "b"])
    manager.apply_filter(KeepNothing())
    manager.select_down()
    manager.select_up()
    assert manager.position == 0
    assert manager.get_selected() is None
    assert list(manager.iterate()) == []


def test_iterate_is_restartable_and_read_only():
    manager = ListManager(["a", "b"])
    manager.select_down()
    first = list(manager.iterate())
    second = list(manager.iterate())
    assert first == second == [(0, "a"), (1, "b")]
    assert manager.position == 1


def cursor_at(manager: ListManager, position: int) -> ListManager:
    for _ in range(position):
        manager.select_down()
    return manager


def test_viewport_tail_window():
    manager = cursor_at(ListManager(list(range(10))), 7)
    window = manager.viewport_window(total_rows=8, reserved_rows=5)
    assert window == ViewportWindow(begin=5, end=7, hidden_above=5, hidden_below=2)


def test_viewport_head_window():
    manager = cursor_at(ListManager(list(range(10))), 2)
    window = manager.viewport_window(total_rows=8, reserved_rows=5)
    assert window == ViewportWindow(begin=0, end=2, hidden_above=0, hidden_below=7)
    assert window.contains(2)
    assert not window.contains(3)


def test_viewport_last_entry_selected():
    manager = cursor_at(ListManager(list(range(10))), 9)
    window = manager.viewport_window(total_rows=8, reserved_rows=5)
    assert (window.begin, window.end) == (7, 9)
    assert window.hidden_below == 0


def test_viewport_larger_than_list():
    manager = ListManager(["a", "b"])
    window = manager.viewport_window(total_rows=30, reserved_rows=5)
    assert (window.begin, window.end) == (0, 24)
    assert window.hidden_above == 0
    assert window.hidden_below == 0


@pytest.mark.parametrize("total_rows", [0, 3, 5])
def test_viewport_without_room(total_rows):
    manager = ListManager(["a", "b"])
    window = manager.viewport_window(total_rows=total_rows, reserved_rows=5)
    # zero height: the range is empty
    assert window.begin == 1
    assert window.end == 0
    assert not window.contains(0)
