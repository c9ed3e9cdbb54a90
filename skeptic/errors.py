"""Error handling for the skeptic package."""

from enum import IntEnum
from typing import Optional


class ErrorCode(IntEnum):
    """Error codes raised while extracting, composing or running doc tests."""

    NO_ERROR = 0
    NO_SUBSTITUTION_MARKER = 1
    MULTIPLE_SUBSTITUTION_MARKERS = 2
    UNRESOLVED_TEMPLATE_REFERENCE = 3
    DUPLICATE_TEST_NAME = 4
    TOOLCHAIN_NOT_FOUND = 5
    GENERIC = 6


class SkepticError(Exception):
    """Base exception for all skeptic errors."""

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        self.code = code


class MalformedTemplateError(SkepticError):
    """Exception raised when a template has zero or several substitution markers."""

    def __init__(self, message: str, code: ErrorCode, template: str = ""):
        super().__init__(message, code)
        self.template = template


class UnresolvedTemplateError(SkepticError):
    """Exception raised when a test names a template its document does not define."""

    def __init__(self, tag: str, path: str):
        super().__init__(
            f"template {tag} not found for {path}",
            ErrorCode.UNRESOLVED_TEMPLATE_REFERENCE,
        )
        self.tag = tag
        self.path = path


class ToolchainError(SkepticError):
    """Exception raised when the external build or run command cannot be started."""

    def __init__(self, message: str, command: Optional[list[str]] = None):
        super().__init__(message, ErrorCode.TOOLCHAIN_NOT_FOUND)
        self.command = command or []


def error_code_to_string(code: int) -> str:
    """Convert an error code to a human-readable string."""
    try:
        error = ErrorCode(code)
        return error.name.replace("_", " ").title()
    except ValueError:
        return f"Unknown Error Code ({code})"
