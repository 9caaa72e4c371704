"""Catalog data types and the picker's mode enums."""

from dataclasses import dataclass, field
from enum import Enum

BOOKMARK_PREFIX = "bookmark::"
MACRO_PREFIX = "cmd::"


@dataclass
class Bookmark:
    id: int
    name: str
    desc: str = ""
    cmds: list[str] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    vars: dict[str, str] = field(default_factory=dict)
    exec: bool | None = None


@dataclass
class Label:
    id: int
    name: str


@dataclass
class Catalog:
    """
    A loaded bookmark file.

    Attributes:
        vars: Global template variables, overridden by bookmark vars
        cmds: Shared command macros, referenced as ``cmd::<key>``
        bookmarks: Bookmarks in file order, names unique
        labels: Labels derived from the bookmarks in first-seen order
    """
    vars: dict[str, str] = field(default_factory=dict)
    cmds: dict[str, str] = field(default_factory=dict)
    bookmarks: list[Bookmark] = field(default_factory=list)
    labels: list[Label] = field(default_factory=list)

    def find_bookmark(self, name: str) -> Bookmark | None:
        for bookmark in self.bookmarks:
            if bookmark.name == name:
                return bookmark
        return None


class FilterMode(Enum):
    NAME = "Name"
    ID = "ID"
    LABEL = "Label"

    @classmethod
    def default(cls) -> 'FilterMode':
        return cls.NAME

    def switch_to(self, mode: 'FilterMode') -> 'FilterMode':
        """Switch to ``mode``, or back to the default if already there."""
        if self is mode:
            return FilterMode.default()
        return mode

    def __str__(self) -> str:
        return self.value


class ViewMode(Enum):
    BOOKMARKS = 1
    LABELS = 2
    USAGE = 3

    @classmethod
    def default(cls) -> 'ViewMode':
        return cls.BOOKMARKS

    @classmethod
    def from_digit(cls, digit: int) -> 'ViewMode | None':
        for mode in cls:
            if mode.value == digit:
                return mode
        return None

    def next(self) -> 'ViewMode':
        modes = list(ViewMode)
        return modes[(modes.index(self) + 1) % len(modes)]

    def prev(self) -> 'ViewMode':
        modes = list(ViewMode)
        return modes[(modes.index(self) - 1) % len(modes)]

    def __str__(self) -> str:
        return self.name.capitalize()
