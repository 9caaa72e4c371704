"""
Menu layout as positioned text rows.

Nothing here touches the terminal; tui.py draws the rows.
"""

from collections.abc import Callable
from dataclasses import dataclass

from .list_manager import ListManager
from .models import FilterMode, ViewMode

RESERVED_ROWS = 5
RESERVED_COLUMNS = 12

# Screen rows above the first entry: mode, search, "+ N more"
HEADER_ROWS = 3


@dataclass(frozen=True)
class Row:
    y: int
    x: int
    text: str
    style: str = "normal"


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max(0, max_length - 3)] + "..."


def render_error(message: str) -> list[Row]:
    return [Row(1, 1, f"ERROR: {message}", "error")]


def render_too_small(rows: int, cols: int) -> list[Row]:
    return render_error(
        f"The panel is too small: need {RESERVED_ROWS}x{RESERVED_COLUMNS}, got {rows}x{cols}"
    )


def _right_counter(count: int, width: int, y: int) -> list[Row]:
    if count == 0:
        return []
    text = f"+ {count} more  "
    return [Row(y, max(0, width - len(text)), text, "counter")]


def render_menu(
    rows: int,
    cols: int,
    manager: ListManager,
    view: ViewMode,
    filter_text: str,
    filter_mode: FilterMode,
    label_of: Callable[[object], str],
) -> list[Row]:
    """
    Lay out the bookmark or label menu.

    Args:
        rows, cols: Screen size
        manager: List to show
        view: Current view, shown in the title
        filter_text, filter_mode: Shown in the search line
        label_of: Text shown for an entity after its id

    Returns:
        Rows to draw, the selected entry styled "selected"
    """
    if rows < RESERVED_ROWS or cols < RESERVED_COLUMNS:
        return render_too_small(rows, cols)

    window = manager.viewport_window(rows, RESERVED_ROWS)
    out = [
        Row(0, 2, f"Mode: {view}", "title"),
        Row(1, 2, f"Search (by {filter_mode}) {filter_text}_", "title"),
    ]
    out.extend(_right_counter(window.hidden_above, cols, 2))

    y = HEADER_ROWS
    for position, entity in manager.iterate():
        if not window.contains(position):
            continue
        text = truncate(f"{entity.id}. {label_of(entity)}", cols)
        style = "selected" if position == manager.position else "normal"
        out.append(Row(y, 0, text, style))
        y += 1

    out.append(Row(rows - 1, 2, f"All: {len(manager)}", "title"))
    out.extend(_right_counter(window.hidden_below, cols, rows - 1))
    return out


USAGE = [
    ("Esc|Ctrl-C", "Exit the picker.", "*"),
    ("Tab|Down Up", "Navigate through the list of bookmarks or labels.", "Bookmarks|Labels"),
    ("Left Right", "Switch between modes.", "*"),
    ("Backspace", "Remove the last character from the filter.", "Bookmarks|Labels"),
    ("Enter", "Paste the selected bookmark into the terminal.", "Bookmarks"),
    ("Enter", "Find all bookmarks associated with the selected label.", "Labels"),
    ("F1", "Switch to Bookmarks mode.", "*"),
    ("F2", "Switch to Labels mode.", "*"),
    ("F3", "Switch to Usage mode to view instructions.", "*"),
    ("Ctrl-E", "Open the bookmark catalog in $EDITOR.", "*"),
    ("Ctrl-R", "Reload bookmarks after editing the catalog.", "*"),
    ("Ctrl-L", "Switch to label filtering mode.", "Bookmarks"),
    ("Ctrl-N", "Switch to id filtering mode.", "Bookmarks|Labels"),
    ("Ctrl-D", "Show the description of the selected bookmark.", "Bookmarks"),
]


def render_usage() -> list[Row]:
    header = ("KeyBinding", "Action", "Mode")
    table = [header] + USAGE
    widths = [max(len(row[i]) for row in table) for i in range(len(header))]

    out = [Row(0, 2, f"Mode: {ViewMode.USAGE}", "title")]
    for y, row in enumerate(table, start=2):
        text = "  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
        out.append(Row(y, 2, text, "title" if row is header else "normal"))
    return out
