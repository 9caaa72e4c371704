from iterm2_bookmarks.models import Bookmark, Catalog, FilterMode, ViewMode


def test_switch_to_twice_returns_to_default():
    for mode in (FilterMode.ID, FilterMode.LABEL):
        once = FilterMode.default().switch_to(mode)
        assert once is mode
        assert once.switch_to(mode) is FilterMode.NAME


def test_switch_between_non_default_modes():
    assert FilterMode.ID.switch_to(FilterMode.LABEL) is FilterMode.LABEL
    assert FilterMode.NAME.switch_to(FilterMode.NAME) is FilterMode.NAME


def test_filter_mode_display():
    assert str(FilterMode.NAME) == "Name"
    assert str(FilterMode.ID) == "ID"
    assert str(FilterMode.LABEL) == "Label"


def test_view_mode_wraps_around():
    assert ViewMode.BOOKMARKS.next() is ViewMode.LABELS
    assert ViewMode.USAGE.next() is ViewMode.BOOKMARKS
    assert ViewMode.BOOKMARKS.prev() is ViewMode.USAGE
    assert ViewMode.LABELS.prev() is ViewMode.BOOKMARKS


def test_view_mode_from_digit():
    assert ViewMode.from_digit(2) is ViewMode.LABELS
    assert ViewMode.from_digit(0) is None
    assert ViewMode.from_digit(4) is None
    assert str(ViewMode.BOOKMARKS) == "Bookmarks"


def test_find_bookmark():
    catalog = Catalog(bookmarks=[Bookmark(id=1, name="a"), Bookmark(id=2, name="b")])
    assert catalog.find_bookmark("b").id == 2
    assert catalog.find_bookmark("c") is None
