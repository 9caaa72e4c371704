"""Filterable shell-command bookmarks for iTerm2."""

__version__ = "0.3.0"
