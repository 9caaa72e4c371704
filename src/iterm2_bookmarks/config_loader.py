"""Bookmark catalog loading (TOML)."""

import os
import re
import tempfile
import time
import tomllib
from pathlib import Path

from loguru import logger

from .errors import Error, ErrorType, Result
from .models import Bookmark, Catalog, Label

# Written when the catalog file does not exist yet
DEFAULT_CATALOG = '''\
# iterm2-bookmarks catalog
#
# [vars] are available to every template; bookmark vars override them.
# [cmds] are shared macros, referenced from a bookmark as "cmd::<key>".
# A bookmark can include another one with "bookmark::<name>".
#
# [vars]
# user = "deploy"
#
# [cmds]
# ssh = "ssh {{user}}@{{host}}"
#
# [[bookmarks]]
# name = "prod-shell"
# desc = "Shell on the production box"
# cmds = ["cmd::ssh"]
# labels = ["prod"]
# vars = { host = "prod.example.com" }
# exec = true

bookmarks = []
'''


def describe_toml_error(
    error: tomllib.TOMLDecodeError, catalog_path: Path
) -> tuple[int | None, str]:
    """
    One-line description of a catalog syntax error, quoting the offending line.

    Returns:
        (line_number, message): line_number is None when tomllib reports none
    """
    # "Invalid value (at line 15, column 7)"
    line_match = re.search(r'line\s+(\d+)', str(error), re.IGNORECASE)
    if line_match is None:
        return None, f"TOML parse error: {error}"

    line_number = int(line_match.group(1))
    try:
        lines = catalog_path.read_text(encoding="utf-8").splitlines()
    except OSError:
        lines = []

    message = f"TOML parse error on line {line_number}"
    if 0 < line_number <= len(lines):
        line = lines[line_number - 1].strip()
        if len(line) > 50:
            line = line[:50] + "..."
        message += f" '{line}'"
    return line_number, f"{message}: {error}"


def _validation_error(message: str, **context) -> Result:
    return Result.err(Error(
        error_type=ErrorType.VALIDATION_ERROR,
        message=message,
        context=context
    ))


def _is_str_list(value) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _is_str_table(value) -> bool:
    return isinstance(value, dict) and all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    )


def _parse_bookmark(index: int, raw) -> Result[Bookmark]:
    """Validate one [[bookmarks]] entry; ``index`` is 0-based."""
    where = f"bookmarks[{index}]"

    if not isinstance(raw, dict):
        return _validation_error(f"{where} must be a table", index=index)

    name = raw.get("name")
    if not isinstance(name, str):
        return _validation_error(f"{where}: 'name' is required and must be a string", index=index)

    if not _is_str_list(raw.get("cmds")):
        return _validation_error(
            f"{where} ('{name}'): 'cmds' is required and must be a list of strings",
            index=index
        )

    desc = raw.get("desc", "")
    if not isinstance(desc, str):
        return _validation_error(f"{where} ('{name}'): 'desc' must be a string", index=index)

    labels = raw.get("labels", [])
    if not _is_str_list(labels):
        return _validation_error(
            f"{where} ('{name}'): 'labels' must be a list of strings", index=index
        )

    variables = raw.get("vars", {})
    if not _is_str_table(variables):
        return _validation_error(
            f"{where} ('{name}'): 'vars' must be a table of strings", index=index
        )

    exec_flag = raw.get("exec")
    if exec_flag is not None and not isinstance(exec_flag, bool):
        return _validation_error(f"{where} ('{name}'): 'exec' must be a boolean", index=index)

    return Result.ok(Bookmark(
        id=index + 1,
        name=name,
        desc=desc,
        cmds=list(raw["cmds"]),
        labels=list(dict.fromkeys(labels)),
        vars=dict(variables),
        exec=exec_flag,
    ))


def derive_labels(bookmarks: list[Bookmark]) -> list[Label]:
    """Collect unique labels in first-seen order, numbered from 1."""
    labels = []
    seen = set()
    for bookmark in bookmarks:
        for name in bookmark.labels:
            if name not in seen:
                seen.add(name)
                labels.append(Label(id=len(labels) + 1, name=name))
    return labels


def parse_catalog(data: dict) -> Result[Catalog]:
    """
    Build a Catalog from decoded TOML data.

    Bookmark names must be unique: any duplicate rejects the whole catalog.

    Returns:
        Result[Catalog]: Ok with the catalog, or Err(VALIDATION_ERROR /
        DUPLICATE_BOOKMARK_NAME)
    """
    variables = data.get("vars", {})
    if not _is_str_table(variables):
        return _validation_error("'vars' must be a table of strings")

    macros = data.get("cmds", {})
    if not _is_str_table(macros):
        return _validation_error("'cmds' must be a table of strings")

    raw_bookmarks = data.get("bookmarks", [])
    if not isinstance(raw_bookmarks, list):
        return _validation_error("'bookmarks' must be an array of tables")

    bookmarks = []
    names = set()
    duplicate_count = 0

    for index, raw in enumerate(raw_bookmarks):
        parsed = _parse_bookmark(index, raw)
        if parsed.is_err():
            return parsed

        bookmark = parsed.value
        if bookmark.name in names:
            duplicate_count += 1
            continue
        names.add(bookmark.name)
        bookmarks.append(bookmark)

    if duplicate_count > 0:
        return Result.err(Error(
            error_type=ErrorType.DUPLICATE_BOOKMARK_NAME,
            message=f"Duplicate bookmarks names: {duplicate_count}",
            context={"duplicate_count": duplicate_count}
        ))

    return Result.ok(Catalog(
        vars=dict(variables),
        cmds=dict(macros),
        bookmarks=bookmarks,
        labels=derive_labels(bookmarks),
    ))


def load_catalog(catalog_path: Path) -> Result[Catalog]:
    """
    Load the bookmark catalog from a TOML file.

    Args:
        catalog_path: Path to the catalog file

    Returns:
        Result[Catalog]: Ok with the catalog, or Err with error details
    """
    start_time = time.perf_counter()
    logger.debug(
        "Loading catalog",
        operation="load_catalog",
        status="started",
        catalog_path=str(catalog_path)
    )

    if not catalog_path.exists():
        logger.error(
            "Catalog file not found",
            operation="load_catalog",
            status="failed",
            catalog_path=str(catalog_path)
        )
        return Result.err(Error(
            error_type=ErrorType.FILE_NOT_FOUND,
            message=f"Catalog file not found: {catalog_path}",
            context={"catalog_path": str(catalog_path)}
        ))

    try:
        with open(catalog_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        line_number, message = describe_toml_error(e, catalog_path)
        logger.error(
            "Invalid TOML syntax in catalog file",
            operation="load_catalog",
            status="failed",
            file=str(catalog_path),
            line_number=line_number,
            error=message
        )
        return Result.err(Error(
            error_type=ErrorType.PARSE_ERROR,
            message=message,
            context={"catalog_path": str(catalog_path), "line_number": line_number},
            original_exception=e
        ))
    except OSError as e:
        logger.error(
            "Could not read catalog file",
            operation="load_catalog",
            status="failed",
            file=str(catalog_path),
            error=str(e)
        )
        return Result.err(Error(
            error_type=ErrorType.PERMISSION_ERROR,
            message=f"Could not read {catalog_path}: {e}",
            context={"catalog_path": str(catalog_path)},
            original_exception=e
        ))

    result = parse_catalog(data)
    if result.is_err():
        logger.error(
            "Catalog rejected",
            operation="load_catalog",
            status="failed",
            catalog_path=str(catalog_path),
            error_type=result.error.error_type.value,
            error=result.error.message
        )
        return result

    duration_ms = int((time.perf_counter() - start_time) * 1000)
    logger.debug(
        "Catalog loaded successfully",
        operation="load_catalog",
        status="success",
        catalog_path=str(catalog_path),
        metrics={
            "bookmarks_count": len(result.value.bookmarks),
            "labels_count": len(result.value.labels),
            "macros_count": len(result.value.cmds),
            "duration_ms": duration_ms
        }
    )
    return result


def write_catalog(path: Path, content: str) -> None:
    """
    Replace ``path`` with ``content`` in one rename, so an editor or a reload
    never sees a half-written catalog.

    Raises:
        OSError: If the write fails; the temp file is removed
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except OSError:
        Path(temp_path).unlink(missing_ok=True)
        raise

    logger.debug("Catalog written", operation="write_catalog", catalog_path=str(path))


def create_catalog_if_absent(catalog_path: Path) -> Result[Path]:
    """
    Write the starter catalog when ``catalog_path`` does not exist.

    Returns:
        Result[Path]: Ok with the path (existing or created), or
        Err(PERMISSION_ERROR) when it cannot be written
    """
    if catalog_path.exists():
        return Result.ok(catalog_path)

    try:
        write_catalog(catalog_path, DEFAULT_CATALOG)
    except OSError as e:
        logger.error(
            "Failed to create catalog file",
            operation="create_catalog_if_absent",
            status="failed",
            catalog_path=str(catalog_path),
            error=str(e)
        )
        return Result.err(Error(
            error_type=ErrorType.PERMISSION_ERROR,
            message=f"Failed to create file '{catalog_path}': {e}",
            context={"catalog_path": str(catalog_path)},
            original_exception=e
        ))

    logger.info(
        "Created starter catalog",
        operation="create_catalog_if_absent",
        status="created",
        catalog_path=str(catalog_path)
    )
    return Result.ok(catalog_path)
