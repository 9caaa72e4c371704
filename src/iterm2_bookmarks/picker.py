"""
Picker state: the catalog, both list views and the actions bound to keys.

Every action runs to completion before the next one; a reload swaps the
catalog and both list managers in one assignment.
"""

from pathlib import Path

from loguru import logger

from .config_loader import create_catalog_if_absent, load_catalog
from .errors import Result
from .filters import BookmarkFilter, LabelFilter
from .list_manager import ListManager, ViewportWindow
from .models import Bookmark, Catalog, FilterMode, Label, ViewMode
from .preferences import Preferences
from .resolver import resolve_command


class PickerState:

    def __init__(self, preferences: Preferences | None = None, catalog_path: Path | None = None):
        prefs = preferences or Preferences()
        self.catalog_path = catalog_path or prefs.catalog_path
        self.exec = prefs.exec
        self.ignore_case = prefs.ignore_case
        self.detect_filter_mode = prefs.autodetect_filter_mode

        self.view = ViewMode.default()
        self.filter_mode = FilterMode.default()
        self.filter = ""
        self.view_desc = False

        self.catalog = Catalog()
        self.bookmarks_mgr: ListManager[Bookmark] = ListManager()
        self.labels_mgr: ListManager[Label] = ListManager()

        self.error_message: str | None = None
        self.critical_error: str | None = None

    # -------------------------------------------------------------------------
    # Catalog lifecycle
    # -------------------------------------------------------------------------

    def load(self) -> bool:
        """Create the catalog file if needed, then load it."""
        created = create_catalog_if_absent(self.catalog_path)
        if created.is_err():
            self.handle_critical_error(created.error.message)
            return False
        return self.reload()

    def use_catalog(self, catalog: Catalog) -> None:
        self.catalog, self.bookmarks_mgr, self.labels_mgr = (
            catalog, ListManager(catalog.bookmarks), ListManager(catalog.labels)
        )

    def reload(self) -> bool:
        """
        Reload the catalog file.

        On failure the previous catalog stays usable and the error is kept
        for display. The filter text is cleared either way.
        """
        result = load_catalog(self.catalog_path)
        if result.is_ok():
            self.use_catalog(result.value)
        else:
            self.handle_error(
                f"Failed to load config file '{self.catalog_path}': {result.error.message}."
            )

        self.filter = ""
        self.apply_filter()
        self.reset_selection()
        return result.is_ok()

    # -------------------------------------------------------------------------
    # Errors
    # -------------------------------------------------------------------------

    def handle_error(self, message: str) -> None:
        self.error_message = message
        logger.error("Picker error", operation="picker", status="error", error=message)

    def handle_critical_error(self, message: str) -> None:
        self.critical_error = message
        logger.error("Picker critical error", operation="picker", status="critical", error=message)

    def take_error(self) -> str | None:
        """Return the error to show; transient errors are shown once."""
        if self.critical_error is not None:
            return self.critical_error
        message, self.error_message = self.error_message, None
        return message

    # -------------------------------------------------------------------------
    # Filtering and navigation
    # -------------------------------------------------------------------------

    @property
    def active_manager(self) -> ListManager | None:
        if self.view is ViewMode.BOOKMARKS:
            return self.bookmarks_mgr
        if self.view is ViewMode.LABELS:
            return self.labels_mgr
        return None

    def apply_filter(self) -> None:
        if self.view is ViewMode.BOOKMARKS:
            self.bookmarks_mgr.apply_filter(
                BookmarkFilter(self.filter_mode, self.filter, self.ignore_case)
            )
        elif self.view is ViewMode.LABELS:
            self.labels_mgr.apply_filter(
                LabelFilter(self.filter_mode, self.filter, self.ignore_case)
            )

    def set_filter(self, text: str, mode: FilterMode, ignore_case: bool) -> None:
        self.filter = text
        self.filter_mode = mode
        self.ignore_case = ignore_case
        self.apply_filter()

    def select_down(self) -> None:
        if self.active_manager is not None:
            self.active_manager.select_down()

    def select_up(self) -> None:
        if self.active_manager is not None:
            self.active_manager.select_up()

    def reset_selection(self) -> None:
        self.bookmarks_mgr.reset_selection()
        self.labels_mgr.reset_selection()

    def visible_window(self, rows: int, reserved_rows: int) -> ViewportWindow | None:
        if self.active_manager is None:
            return None
        return self.active_manager.viewport_window(rows, reserved_rows)

    def resolve_selected(self, default_exec: bool | None = None) -> Result[str] | None:
        """Resolve the selected bookmark, or None when nothing is selected."""
        bookmark = self.bookmarks_mgr.get_selected()
        if bookmark is None:
            return None
        if default_exec is None:
            default_exec = self.exec
        return resolve_command(bookmark, self.catalog, default_exec)

    # -------------------------------------------------------------------------
    # Key actions
    # -------------------------------------------------------------------------

    def type_char(self, char: str) -> None:
        if self.active_manager is None:
            return

        if self.detect_filter_mode and not self.filter:
            if char.isdigit():
                self.filter_mode = FilterMode.ID
            elif self.filter_mode is FilterMode.ID:
                self.filter_mode = FilterMode.NAME

        if self.filter_mode is FilterMode.ID:
            # ids start at 1
            if not char.isdigit() or (not self.filter and char == "0"):
                return

        self.filter += char
        self.apply_filter()

    def backspace(self) -> None:
        if self.active_manager is None:
            return
        self.filter = self.filter[:-1]
        self.apply_filter()

    def _enter_view(self, view: ViewMode) -> None:
        self.view = view
        self.filter_mode = FilterMode.default()
        self.apply_filter()

    def next_view(self) -> None:
        self._enter_view(self.view.next())

    def prev_view(self) -> None:
        self._enter_view(self.view.prev())

    def switch_view(self, view: ViewMode) -> None:
        if self.view is not view:
            self._enter_view(view)

    def toggle_label_filter(self) -> None:
        if self.view is ViewMode.BOOKMARKS:
            self.filter_mode = self.filter_mode.switch_to(FilterMode.LABEL)
            self.apply_filter()

    def toggle_id_filter(self) -> None:
        if self.active_manager is not None:
            self.filter_mode = self.filter_mode.switch_to(FilterMode.ID)
            self.apply_filter()

    def toggle_describe(self) -> None:
        if self.view is ViewMode.BOOKMARKS:
            self.view_desc = not self.view_desc

    def confirm(self) -> str | None:
        """
        Handle Enter.

        Returns:
            The resolved command in the bookmarks view, None otherwise or
            when resolution failed (the error is kept for display)
        """
        if self.view is ViewMode.BOOKMARKS:
            result = self.resolve_selected()
            if result is None:
                return None
            if result.is_err():
                self.handle_error(f"Failed to generate command: {result.error.message}")
                return None
            return result.value

        if self.view is ViewMode.LABELS:
            label = self.labels_mgr.get_selected()
            self.filter_mode = FilterMode.LABEL
            self.filter = label.name if label is not None else ""
            self.view = ViewMode.BOOKMARKS
            self.view_desc = False
            self.apply_filter()

        return None
