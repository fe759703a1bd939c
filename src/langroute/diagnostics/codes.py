"""Diagnostic codes and data structures.

Defines error codes and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Configuration errors (registry construction)
        2000-2999: Locale errors (per-call, recoverable)
    """

    # Configuration errors (1000-1999)
    UNSUPPORTED_DEFAULT_LOCALE = 1001
    NO_SUPPORTED_LOCALES = 1002
    INVALID_LOCALE_ENTRY = 1003
    INVALID_DETECTION_ORDER = 1004

    # Locale errors (2000-2999)
    UNSUPPORTED_LOCALE = 2001


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        locale_code: Locale the error is about (None if not applicable)
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    locale_code: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like the Rust compiler.

        Example output:
            error[UNSUPPORTED_LOCALE]: Locale 'xx' is not supported
              = locale: xx
              = help: Add 'xx' to supported_locales or map it in locales_mapping

        Control characters in user-supplied values are escaped so a hostile
        locale code cannot forge extra log lines.

        Returns:
            Formatted error message
        """
        lines = [f"{self.severity}[{self.code.name}]: {_escape(self.message)}"]
        if self.locale_code is not None:
            lines.append(f"  = locale: {_escape(self.locale_code)}")
        if self.hint:
            lines.append(f"  = help: {_escape(self.hint)}")
        return "\n".join(lines)


def _escape(text: str) -> str:
    """Escape control characters (log injection prevention)."""
    return "".join(
        ch if ch.isprintable() else ch.encode("unicode_escape").decode("ascii") for ch in text
    )
