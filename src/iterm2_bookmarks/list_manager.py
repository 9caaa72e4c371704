"""Filterable, selectable list shared by the bookmark and label views."""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from loguru import logger

from .filters import EntityFilter

T = TypeVar('T')


@dataclass(frozen=True)
class ViewportWindow:
    """
    Inclusive range of filtered positions visible on screen.

    ``hidden_above`` and ``hidden_below`` count the entries outside the
    window, for "+ N more" indicators.
    """
    begin: int
    end: int
    hidden_above: int
    hidden_below: int

    def contains(self, position: int) -> bool:
        return self.begin <= position <= self.end


class ListManager(Generic[T]):
    """
    Owns a full catalog, its filtered view and a selection cursor.

    The catalog is never mutated; a reload builds a new manager.
    """

    def __init__(self, items: Sequence[T] = ()):
        self._items: tuple[T, ...] = tuple(items)
        self._filtered: list[T] = list(self._items)
        self._position = 0

    @property
    def items(self) -> tuple[T, ...]:
        return self._items

    @property
    def position(self) -> int:
        return self._position

    def __len__(self) -> int:
        return len(self._filtered)

    def __iter__(self) -> Iterator[tuple[int, T]]:
        return self.iterate()

    def iterate(self) -> Iterator[tuple[int, T]]:
        """Yield (position, entity) pairs of the filtered view in order."""
        yield from enumerate(self._filtered)

    def apply_filter(self, predicate: EntityFilter[T]) -> None:
        self._filtered = [item for item in self._items if predicate.keep(item)]
        self._position = 0
        logger.debug(
            "Filter applied",
            operation="apply_filter",
            metrics={"total": len(self._items), "kept": len(self._filtered)}
        )

    def select_down(self) -> None:
        if self._filtered and self._position < len(self._filtered) - 1:
            self._position += 1

    def select_up(self) -> None:
        if self._filtered and self._position > 0:
            self._position -= 1

    def reset_selection(self) -> None:
        self._position = 0

    def get_selected(self) -> T | None:
        if not self._filtered:
            return None
        return self._filtered[self._position]

    def viewport_window(self, total_rows: int, reserved_rows: int) -> ViewportWindow:
        """
        Compute the visible window for a screen of ``total_rows``.

        The selection stays on screen: once the cursor passes the window
        height it is pinned to the bottom row.
        """
        height = max(0, total_rows - reserved_rows)

        if self._position >= height:
            begin, end = self._position + 1 - height, self._position
        else:
            begin, end = 0, height - 1

        count = len(self._filtered)
        hidden_below = count - 1 - end if count > end + 1 else 0

        return ViewportWindow(
            begin=begin,
            end=end,
            hidden_above=begin,
            hidden_below=hidden_below,
        )
