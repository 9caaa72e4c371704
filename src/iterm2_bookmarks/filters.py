"""Filter predicates for the bookmark and label lists."""

from typing import Protocol, TypeVar

from .models import Bookmark, FilterMode, Label

T_contra = TypeVar('T_contra', contravariant=True)


class EntityFilter(Protocol[T_contra]):
    def keep(self, entity: T_contra) -> bool:
        ...


def _matches_name(name: str, text: str, ignore_case: bool) -> bool:
    if ignore_case:
        name, text = name.lower(), text.lower()
    return text in name


def _matches_id(entity_id: int, text: str) -> bool:
    return str(entity_id).startswith(text)


class BookmarkFilter:
    """
    Keep bookmarks matching the filter text in the given mode.

    NAME matches substrings of the name, ID matches a prefix of the decimal
    id and LABEL requires one label to equal the text exactly.
    """

    def __init__(self, mode: FilterMode, text: str, ignore_case: bool):
        self.mode = mode
        self.text = text
        self.ignore_case = ignore_case

    def keep(self, bookmark: Bookmark) -> bool:
        if not self.text:
            return True

        if self.mode is FilterMode.ID:
            return _matches_id(bookmark.id, self.text)

        if self.mode is FilterMode.LABEL:
            text = self.text.lower() if self.ignore_case else self.text
            for label in bookmark.labels:
                if (label.lower() if self.ignore_case else label) == text:
                    return True
            return False

        return _matches_name(bookmark.name, self.text, self.ignore_case)


class LabelFilter:
    """Keep labels by name or id; LABEL mode matches like NAME here."""

    def __init__(self, mode: FilterMode, text: str, ignore_case: bool):
        self.mode = mode
        self.text = text
        self.ignore_case = ignore_case

    def keep(self, label: Label) -> bool:
        if not self.text:
            return True

        if self.mode is FilterMode.ID:
            return _matches_id(label.id, self.text)

        return _matches_name(label.name, self.text, self.ignore_case)
