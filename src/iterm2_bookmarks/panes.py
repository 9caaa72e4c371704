"""Send a resolved command to the active iTerm2 session."""

import subprocess

import iterm2
from loguru import logger
from websockets.exceptions import WebSocketException


async def inject_command(connection, text: str) -> bool:
    """
    Type ``text`` into the current session of the current window.

    A trailing newline submits the command; without it the command waits
    at the prompt for edits.

    Args:
        connection: iTerm2 connection
        text: Resolved command

    Returns:
        True if the text was sent
    """
    app = await iterm2.async_get_app(connection)
    window = app.current_terminal_window if app else None
    if window is None or window.current_tab is None:
        logger.warning(
            "No current iTerm2 window - command not sent",
            operation="inject_command",
            status="failed"
        )
        return False

    session = window.current_tab.current_session
    if session is None:
        logger.warning(
            "No current iTerm2 session - command not sent",
            operation="inject_command",
            status="failed"
        )
        return False

    try:
        await session.async_send_text(text)
    except iterm2.RPCException as e:
        logger.error(
            "Failed to send command to session",
            operation="inject_command",
            status="failed",
            session_id=getattr(session, "session_id", "unknown"),
            error=str(e)
        )
        return False

    logger.info(
        "Command sent to session",
        operation="inject_command",
        status="success",
        session_id=getattr(session, "session_id", "unknown"),
        submitted=text.endswith("\n"),
        metrics={"length": len(text)}
    )
    return True


def send_to_iterm2(text: str) -> bool:
    """
    Connect to iTerm2 and inject ``text``; blocks until done.

    Returns False when the API connection cannot be made (API disabled,
    iTerm2 not running, not on macOS) so the caller can print instead.
    """
    sent = []

    async def main(connection):
        sent.append(await inject_command(connection, text))

    try:
        iterm2.run_until_complete(main)
    except (OSError, subprocess.SubprocessError, WebSocketException) as e:
        logger.error(
            "Failed to connect to iTerm2",
            operation="send_to_iterm2",
            status="failed",
            error_type=type(e).__name__,
            error=str(e)
        )
        return False
    return bool(sent and sent[0])
