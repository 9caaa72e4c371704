"""
Command resolution: expand a bookmark's command tokens into one shell string.

Tokens are literal templates (``echo {{name}}``), references to other
bookmarks (``bookmark::<name>``) or references to shared macros
(``cmd::<key>``). Each token becomes one line; lines are joined with a shell
line continuation and ``&&``.
"""

import re
import time
from dataclasses import replace
from uuid import uuid4

import chevron
from chevron.tokenizer import ChevronError
from loguru import logger

from .errors import Error, ErrorType, Result
from .models import BOOKMARK_PREFIX, MACRO_PREFIX, Bookmark, Catalog

COMMAND_SEPARATOR = " \\\n&& "

# Plain {{name}} tags become {{&name}}: values land in a shell command, not HTML
_ESCAPED_TAG = re.compile(r"(?<!\{)\{\{(?![{!#^/>&=])")


def render_template(template: str, variables: dict[str, str]) -> Result[str]:
    """
    Render one mustache/handlebars template string and trim surrounding whitespace.

    Missing variables render empty and ``{{! ... }}`` is a comment.

    Returns:
        Result[str]: Ok with the rendered text, or Err(TEMPLATE_RENDER_ERROR)
    """
    try:
        rendered = chevron.render(_ESCAPED_TAG.sub("{{&", template), variables)
    except ChevronError as e:
        return Result.err(Error(
            error_type=ErrorType.TEMPLATE_RENDER_ERROR,
            message=f"Template rendering error: {e}",
            context={"template": template},
            original_exception=e
        ))
    return Result.ok(rendered.strip())


def _expand(bookmark: Bookmark, catalog: Catalog, visited: set[str]) -> Result[str]:
    # visited is shared by every branch of one resolution, so a bookmark can
    # be expanded at most once per call.
    if bookmark.name in visited:
        return Result.err(Error(
            error_type=ErrorType.CIRCULAR_DEPENDENCY,
            message=f"Circular dependency detected for bookmark '{bookmark.name}'",
            context={"bookmark": bookmark.name}
        ))
    visited.add(bookmark.name)

    variables = {**catalog.vars, **bookmark.vars}
    lines = []

    for cmd in bookmark.cmds:
        if cmd.startswith(BOOKMARK_PREFIX):
            dependency_name = cmd[len(BOOKMARK_PREFIX):]
            dependency = catalog.find_bookmark(dependency_name)
            if dependency is None:
                return Result.err(Error(
                    error_type=ErrorType.BOOKMARK_NOT_FOUND,
                    message=f"Bookmark '{dependency_name}' not found",
                    context={"bookmark": dependency_name}
                ))
            # The referencing bookmark's vars win over the dependency's own
            scoped = replace(dependency, vars={**dependency.vars, **bookmark.vars})
            line = _expand(scoped, catalog, visited)
        elif cmd.startswith(MACRO_PREFIX):
            macro_key = cmd[len(MACRO_PREFIX):]
            if macro_key not in catalog.cmds:
                return Result.err(Error(
                    error_type=ErrorType.MACRO_NOT_FOUND,
                    message=f"Command key '{macro_key}' not found in cmds",
                    context={"macro": macro_key}
                ))
            line = render_template(catalog.cmds[macro_key], variables)
        else:
            line = render_template(cmd, variables)

        if line.is_err():
            return line
        lines.append(line.value)

    return Result.ok(COMMAND_SEPARATOR.join(lines))


def resolve_command(
    bookmark: Bookmark, catalog: Catalog, default_exec: bool = False
) -> Result[str]:
    """
    Resolve a bookmark into the command string to type into the terminal.

    Args:
        bookmark: Selected bookmark
        catalog: Catalog providing global vars, macros and referenced bookmarks
        default_exec: Auto-submit flag used when the bookmark sets none

    Returns:
        Result[str]: Ok with the joined command (ending in a newline when
        auto-submitted), or Err with the first resolution error
    """
    start_time = time.perf_counter()
    op_trace_id = str(uuid4())

    logger.debug(
        "Resolving bookmark",
        operation="resolve_command",
        status="started",
        trace_id=op_trace_id,
        bookmark=bookmark.name
    )

    result = _expand(bookmark, catalog, set())
    if result.is_err():
        logger.warning(
            "Command resolution failed",
            operation="resolve_command",
            status="failed",
            trace_id=op_trace_id,
            bookmark=bookmark.name,
            error_type=result.error.error_type.value,
            error=result.error.message
        )
        return result

    command = result.value
    exec_command = bookmark.exec if bookmark.exec is not None else default_exec
    if exec_command:
        command += "\n"

    duration_ms = int((time.perf_counter() - start_time) * 1000)
    logger.debug(
        "Bookmark resolved",
        operation="resolve_command",
        status="success",
        trace_id=op_trace_id,
        bookmark=bookmark.name,
        exec=exec_command,
        metrics={"length": len(command), "duration_ms": duration_ms}
    )

    return Result.ok(command)
