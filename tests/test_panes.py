import asyncio

import pytest

iterm2 = pytest.importorskip("iterm2")

from iterm2_bookmarks import panes  # noqa: E402


class FakeSession:
    session_id = "fake-session"

    def __init__(self):
        self.sent = []

    async def async_send_text(self, text):
        self.sent.append(text)


class FakeTab:
    def __init__(self, session):
        self.current_session = session


class FakeWindow:
    def __init__(self, tab):
        self.current_tab = tab


class FakeApp:
    def __init__(self, window):
        self.current_terminal_window = window


def patch_app(monkeypatch, app):
    async def async_get_app(connection):
        return app

    monkeypatch.setattr(panes.iterm2, "async_get_app", async_get_app)


def test_inject_sends_text_to_current_session(monkeypatch):
    session = FakeSession()
    patch_app(monkeypatch, FakeApp(FakeWindow(FakeTab(session))))

    assert asyncio.run(panes.inject_command(None, "ls -la\n"))
    assert session.sent == ["ls -la\n"]


def test_inject_without_window(monkeypatch):
    patch_app(monkeypatch, FakeApp(None))
    assert not asyncio.run(panes.inject_command(None, "ls"))


def test_inject_without_session(monkeypatch):
    patch_app(monkeypatch, FakeApp(FakeWindow(FakeTab(None))))
    assert not asyncio.run(panes.inject_command(None, "ls"))


def test_send_returns_false_when_iterm2_is_unreachable(monkeypatch):
    def run_until_complete(coro):
        raise FileNotFoundError(2, "No such file or directory", "/usr/bin/osascript")

    monkeypatch.setattr(panes.iterm2, "run_until_complete", run_until_complete)
    assert panes.send_to_iterm2("echo hi") is False
