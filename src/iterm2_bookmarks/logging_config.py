"""Structured logging setup (JSONL format)."""

import json
import sys
from contextvars import ContextVar
from pathlib import Path

import platformdirs
from loguru import logger

APP_NAME = "iterm2-bookmarks"

# Correlation ID for a picker session or a single resolution
trace_id_var: ContextVar[str] = ContextVar('trace_id', default=None)

_RESERVED_EXTRAS = ("operation", "status", "trace_id", "metrics", "error")


def json_sink(message):
    """One JSON object per line on stderr; extras not named below land in ``context``."""
    record = message.record
    extra = record["extra"]
    log_entry = {
        "timestamp": record["time"].strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
        "level": record["level"].name.lower(),
        "component": record["function"],
        "operation": extra.get("operation", "unknown"),
        "operation_status": extra.get("status"),
        "trace_id": extra.get("trace_id") or trace_id_var.get(),
        "message": record["message"],
        "error": extra.get("error"),
        "context": {k: v for k, v in extra.items() if k not in _RESERVED_EXTRAS},
        "metrics": extra.get("metrics", {}),
    }
    sys.stderr.write(json.dumps(log_entry, default=str) + "\n")


def setup_logger(console_level: str | None = "INFO"):
    """
    Configure Loguru for machine-readable JSONL output.

    Args:
        console_level: Level for the stderr sink, or None to disable it
            (the curses picker owns the terminal while it runs)
    """
    logger.remove()

    if console_level is not None:
        logger.add(
            json_sink,
            level=console_level
        )

    # macOS: ~/Library/Logs/iterm2-bookmarks/
    # Linux: ~/.local/state/iterm2-bookmarks/log/
    log_dir = Path(platformdirs.user_log_dir(
        appname=APP_NAME,
        ensure_exists=True
    ))

    logger.add(
        str(log_dir / "bookmarks.jsonl"),
        format="{message}",
        serialize=True,
        rotation="10 MB",
        retention="7 days",
        compression="gz",
        level="DEBUG"
    )

    return logger
