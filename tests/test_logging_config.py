import json
import sys

import pytest
from loguru import logger

from iterm2_bookmarks import logging_config
from iterm2_bookmarks.logging_config import setup_logger, trace_id_var


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(
        logging_config.platformdirs, "user_log_dir",
        lambda appname, ensure_exists: str(tmp_path),
    )
    yield tmp_path
    logger.remove()
    logger.add(sys.stderr)


def test_jsonl_console_output(log_dir, capsys):
    setup_logger("INFO")
    token = trace_id_var.set("trace-123")
    try:
        logger.debug("Hidden", operation="test")
        logger.info(
            "Catalog loaded",
            operation="load_catalog",
            status="success",
            catalog_path="/tmp/bookmarks.toml",
            metrics={"bookmarks_count": 3}
        )
    finally:
        trace_id_var.reset(token)

    lines = capsys.readouterr().err.strip().splitlines()
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry["level"] == "info"
    assert entry["operation"] == "load_catalog"
    assert entry["operation_status"] == "success"
    assert entry["trace_id"] == "trace-123"
    assert entry["context"] == {"catalog_path": "/tmp/bookmarks.toml"}
    assert entry["metrics"] == {"bookmarks_count": 3}
    assert (log_dir / "bookmarks.jsonl").exists()


def test_console_sink_can_be_disabled(log_dir, capsys):
    setup_logger(console_level=None)
    logger.error("Picker error", operation="picker", error="boom")
    assert capsys.readouterr().err == ""


def test_error_extra_is_a_top_level_field(log_dir, capsys):
    setup_logger("INFO")
    logger.warning(
        "Warning reported",
        operation="error_report",
        status="warning",
        error="Bookmark '{x}' not found",
        key="exec"
    )
    entry = json.loads(capsys.readouterr().err)
    assert entry["error"] == "Bookmark '{x}' not found"
    assert entry["context"] == {"key": "exec"}
