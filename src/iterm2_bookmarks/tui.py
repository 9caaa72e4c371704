"""Curses front end for the picker."""

import curses
import os
import subprocess
import sys
from contextlib import contextmanager
from enum import Enum

from loguru import logger

from .models import ViewMode
from .picker import PickerState
from .render import Row, render_error, render_menu, render_usage


class Action(Enum):
    CONTINUE = "continue"
    QUIT = "quit"
    SUBMIT = "submit"
    EDIT = "edit"


def ctrl(char: str) -> str:
    return chr(ord(char) & 0x1f)


ESCAPE = "\x1b"
QUIT_KEYS = (ESCAPE, ctrl("c"))
ENTER_KEYS = ("\n", "\r", curses.KEY_ENTER)
BACKSPACE_KEYS = ("\x7f", "\b", curses.KEY_BACKSPACE)
VIEW_KEYS = {
    curses.KEY_F1: ViewMode.BOOKMARKS,
    curses.KEY_F2: ViewMode.LABELS,
    curses.KEY_F3: ViewMode.USAGE,
}


def dispatch_key(state: PickerState, key) -> tuple[Action, str | None]:
    """
    Apply one key to the picker.

    Args:
        state: Picker state
        key: Value from ``get_wch``: a str for characters, an int for keys

    Returns:
        (Action, command) where command is set only for SUBMIT
    """
    if key in QUIT_KEYS:
        return Action.QUIT, None
    if key in (curses.KEY_DOWN, "\t"):
        state.select_down()
    elif key == curses.KEY_UP:
        state.select_up()
    elif key == curses.KEY_RIGHT:
        state.next_view()
    elif key == curses.KEY_LEFT:
        state.prev_view()
    elif key in VIEW_KEYS:
        state.switch_view(VIEW_KEYS[key])
    elif key in BACKSPACE_KEYS:
        state.backspace()
    elif key in ENTER_KEYS:
        command = state.confirm()
        if command is not None:
            return Action.SUBMIT, command
    elif key == ctrl("e"):
        return Action.EDIT, None
    elif key == ctrl("r"):
        state.reload()
    elif key == ctrl("l"):
        state.toggle_label_filter()
    elif key == ctrl("n"):
        state.toggle_id_filter()
    elif key == ctrl("d"):
        state.toggle_describe()
    elif isinstance(key, str) and key.isprintable():
        state.type_char(key)
    return Action.CONTINUE, None


def build_rows(state: PickerState, rows: int, cols: int) -> list[Row]:
    error = state.take_error()
    if error is not None:
        return render_error(error)

    if state.view is ViewMode.USAGE:
        return render_usage()

    if state.view is ViewMode.LABELS:
        return render_menu(
            rows, cols, state.labels_mgr, state.view, state.filter, state.filter_mode,
            lambda label: label.name,
        )

    return render_menu(
        rows, cols, state.bookmarks_mgr, state.view, state.filter, state.filter_mode,
        lambda bookmark: bookmark.desc if state.view_desc else bookmark.name,
    )


def _styles() -> dict[str, int]:
    styles = {
        "normal": curses.A_NORMAL,
        "title": curses.A_BOLD,
        "selected": curses.A_REVERSE,
        "counter": curses.A_BOLD,
        "error": curses.A_BOLD,
    }
    try:
        curses.use_default_colors()
        curses.init_pair(1, curses.COLOR_GREEN, -1)
        curses.init_pair(2, curses.COLOR_YELLOW, -1)
        curses.init_pair(3, curses.COLOR_RED, -1)
        styles["title"] = curses.color_pair(1)
        styles["selected"] = curses.color_pair(2) | curses.A_REVERSE
        styles["counter"] = curses.color_pair(2) | curses.A_BOLD
        styles["error"] = curses.color_pair(3) | curses.A_BOLD
    except curses.error:
        pass
    return styles


def draw(stdscr, rows: list[Row], styles: dict[str, int]) -> None:
    stdscr.erase()
    height, width = stdscr.getmaxyx()
    for row in rows:
        if row.y >= height or row.x >= width:
            continue
        try:
            stdscr.addnstr(row.y, row.x, row.text, width - row.x, styles[row.style])
        except curses.error:
            # Writing the bottom-right cell moves the cursor off screen
            pass
    stdscr.refresh()


def edit_catalog(stdscr, state: PickerState) -> None:
    editor = os.environ.get("VISUAL") or os.environ.get("EDITOR") or "vi"
    curses.endwin()
    try:
        subprocess.run([editor, str(state.catalog_path)], check=False)
    except OSError as e:
        state.handle_error(f"Failed to open editor '{editor}': {e}")
    stdscr.refresh()
    state.reload()


def run(stdscr, state: PickerState) -> str | None:
    """Event loop; returns the command to submit, or None on quit."""
    curses.curs_set(0)
    curses.raw()
    stdscr.keypad(True)
    styles = _styles()

    while True:
        height, width = stdscr.getmaxyx()
        draw(stdscr, build_rows(state, height, width), styles)

        key = stdscr.get_wch()
        action, command = dispatch_key(state, key)

        if action is Action.QUIT:
            return None
        if action is Action.SUBMIT:
            return command
        if action is Action.EDIT:
            edit_catalog(stdscr, state)


@contextmanager
def terminal_stdout():
    """
    Point fd 1 at the controlling terminal while curses runs, so the
    picker works inside ``$(...)``.
    """
    if os.isatty(1):
        yield
        return

    tty_fd = os.open("/dev/tty", os.O_RDWR)
    sys.stdout.flush()
    saved_fd = os.dup(1)
    os.dup2(tty_fd, 1)
    try:
        yield
    finally:
        os.dup2(saved_fd, 1)
        os.close(saved_fd)
        os.close(tty_fd)


def pick(state: PickerState) -> str | None:
    os.environ.setdefault("ESCDELAY", "25")
    with terminal_stdout():
        command = curses.wrapper(run, state)
    logger.debug(
        "Picker closed",
        operation="pick",
        status="submitted" if command is not None else "cancelled"
    )
    return command
