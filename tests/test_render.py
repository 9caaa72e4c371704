from iterm2_bookmarks.list_manager import ListManager
from iterm2_bookmarks.models import FilterMode, Label, ViewMode
from iterm2_bookmarks.render import (
    RESERVED_ROWS,
    Row,
    render_error,
    render_menu,
    render_usage,
    truncate,
)


def labels(count: int) -> ListManager:
    return ListManager([Label(id=i + 1, name=f"label-{i + 1}") for i in range(count)])


def menu(manager, rows=8, cols=40, filter_text="", mode=FilterMode.NAME):
    return render_menu(
        rows, cols, manager, ViewMode.LABELS, filter_text, mode, lambda label: label.name
    )


def entries(rows: list[Row]) -> list[Row]:
    return [row for row in rows if row.style in ("normal", "selected")]


def test_header_and_footer():
    rows = menu(labels(2), filter_text="lab", mode=FilterMode.ID)
    assert Row(0, 2, "Mode: Labels", "title") in rows
    assert Row(1, 2, "Search (by ID) lab_", "title") in rows
    assert Row(7, 2, "All: 2", "title") in rows
    assert not [row for row in rows if row.style == "counter"]


def test_entries_and_selection():
    manager = labels(2)
    manager.select_down()
    rows = entries(menu(manager))
    assert rows == [
        Row(3, 0, "1. label-1", "normal"),
        Row(4, 0, "2. label-2", "selected"),
    ]


def test_hidden_counters():
    manager = labels(10)
    for _ in range(7):
        manager.select_down()

    rows = menu(manager, rows=RESERVED_ROWS + 3, cols=40)

    assert [row.text for row in entries(rows)] == ["6. label-6", "7. label-7", "8. label-8"]
    counters = [row for row in rows if row.style == "counter"]
    assert counters == [
        Row(2, 40 - len("+ 5 more  "), "+ 5 more  ", "counter"),
        Row(7, 40 - len("+ 2 more  "), "+ 2 more  ", "counter"),
    ]


def test_long_entries_are_truncated():
    manager = ListManager([Label(id=1, name="a-very-long-label-name")])
    rows = entries(menu(manager, cols=12))
    assert rows[0].text == "1. a-very..."
    assert len(rows[0].text) == 12


def test_truncate():
    assert truncate("short", 10) == "short"
    assert truncate("exactly-10", 10) == "exactly-10"
    assert truncate("longer text", 8) == "longe..."


def test_too_small_screen():
    rows = menu(labels(2), rows=4, cols=40)
    assert len(rows) == 1
    assert rows[0].style == "error"
    assert "too small" in rows[0].text


def test_error_row():
    assert render_error("boom") == [Row(1, 1, "ERROR: boom", "error")]


def test_usage_table():
    rows = render_usage()
    assert rows[0].text == "Mode: Usage"
    assert rows[1].text.startswith("KeyBinding")
    assert any("Reload bookmarks" in row.text for row in rows)
