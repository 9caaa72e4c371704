"""Error handling types (Result + ErrorReport)."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from loguru import logger

T = TypeVar('T')


class ErrorType(Enum):
    FILE_NOT_FOUND = "file_not_found"
    PARSE_ERROR = "parse_error"
    VALIDATION_ERROR = "validation_error"
    PERMISSION_ERROR = "permission_error"
    DUPLICATE_BOOKMARK_NAME = "duplicate_bookmark_name"
    BOOKMARK_NOT_FOUND = "bookmark_not_found"
    MACRO_NOT_FOUND = "macro_not_found"
    CIRCULAR_DEPENDENCY = "circular_dependency"
    TEMPLATE_RENDER_ERROR = "template_render_error"


@dataclass
class Error:
    error_type: ErrorType
    message: str
    context: dict = field(default_factory=dict)
    original_exception: Exception = None


@dataclass
class Result(Generic[T]):
    success: bool
    value: T = None
    error: Error = None

    @staticmethod
    def ok(value: T) -> 'Result[T]':
        return Result(success=True, value=value)

    @staticmethod
    def err(error: Error) -> 'Result[T]':
        return Result(success=False, error=error)

    def is_ok(self) -> bool:
        return self.success

    def is_err(self) -> bool:
        return not self.success


@dataclass
class ErrorReport:
    """Non-fatal problems collected while loading, shown to the user afterwards."""
    warnings: list[Error] = field(default_factory=list)

    # loguru str.formats messages logged with kwargs: error text goes in an extra
    def add_warning(self, error: Error):
        self.warnings.append(error)
        logger.warning(
            "Warning reported",
            operation="error_report",
            status="warning",
            error_type=error.error_type.value,
            error=error.message,
            **error.context
        )

    def messages(self) -> list[str]:
        return [w.message for w in self.warnings]
