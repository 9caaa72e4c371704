"""Picker preferences (TOML)."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

import platformdirs
from loguru import logger

from .errors import Error, ErrorReport, ErrorType
from .logging_config import APP_NAME

CONFIG_DIR = Path(platformdirs.user_config_dir(APP_NAME))
PREFERENCES_PATH = CONFIG_DIR / "preferences.toml"
DEFAULT_CATALOG_FILENAME = "bookmarks.toml"


@dataclass
class Preferences:
    """
    Attributes:
        exec: Auto-submit resolved commands unless a bookmark says otherwise
        ignore_case: Case-insensitive name and label filtering
        autodetect_filter_mode: Typing a digit into an empty filter selects ID mode
        filename: Catalog file, relative names resolve against CONFIG_DIR
        inject: Send the picked command to iTerm2 instead of printing it
    """
    exec: bool = False
    ignore_case: bool = True
    autodetect_filter_mode: bool = True
    filename: str = DEFAULT_CATALOG_FILENAME
    inject: bool = True

    @property
    def catalog_path(self) -> Path:
        path = Path(self.filename).expanduser()
        if not path.is_absolute():
            path = CONFIG_DIR / path
        return path


BOOL_KEYS = ("exec", "ignore_case", "autodetect_filter_mode", "inject")


def _parse_bool(key: str, value, default: bool, report: ErrorReport) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"

    report.add_warning(Error(
        error_type=ErrorType.VALIDATION_ERROR,
        message=(
            f"'{key}' config value must be 'true' or 'false', but it's '{value}'. "
            f"The {'true' if default else 'false'} is used."
        ),
        context={"key": key}
    ))
    return default


def preferences_from_dict(raw: dict, report: ErrorReport) -> Preferences:
    """Build Preferences from decoded TOML, recording bad values in ``report``."""
    prefs = Preferences()

    for key in BOOL_KEYS:
        if key in raw:
            setattr(prefs, key, _parse_bool(key, raw[key], getattr(prefs, key), report))

    filename = raw.get("filename")
    if isinstance(filename, str) and filename:
        prefs.filename = filename
    elif filename is not None and not isinstance(filename, str):
        report.add_warning(Error(
            error_type=ErrorType.VALIDATION_ERROR,
            message=f"'filename' config value must be a string, but it's '{filename}'.",
            context={"key": "filename"}
        ))

    return prefs


def load_preferences(path: Path | None = None) -> tuple[Preferences, ErrorReport]:
    """
    Load picker preferences from TOML file.

    Args:
        path: Preferences file, PREFERENCES_PATH by default

    Returns:
        (Preferences, ErrorReport): defaults are used for anything missing
        or invalid; the report holds a warning for each rejected value
    """
    path = path or PREFERENCES_PATH
    report = ErrorReport()

    if not path.exists():
        logger.debug(
            "Preferences file does not exist, using defaults",
            operation="load_preferences",
            status="default",
            file=str(path)
        )
        return Preferences(), report

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        report.add_warning(Error(
            error_type=ErrorType.PARSE_ERROR,
            message=f"Failed to load preferences '{path}': {e}. Defaults are used.",
            context={"file": str(path)},
            original_exception=e
        ))
        return Preferences(), report

    prefs = preferences_from_dict(raw, report)

    logger.debug(
        "Preferences loaded successfully",
        operation="load_preferences",
        status="success",
        exec=prefs.exec,
        ignore_case=prefs.ignore_case,
        autodetect_filter_mode=prefs.autodetect_filter_mode,
        filename=prefs.filename,
        inject=prefs.inject
    )
    return prefs, report
