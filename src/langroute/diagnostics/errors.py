"""langroute exception hierarchy with structured diagnostics.

All exceptions can carry a Diagnostic object for rich error information.

Python 3.13+. Zero external dependencies.
"""

from langroute.enums import ConfigurationIssue

from .codes import Diagnostic
from .templates import ErrorTemplate

__all__ = [
    "ConfigurationError",
    "LangRouteError",
    "UnsupportedLocaleError",
]


class LangRouteError(Exception):
    """Base exception for all langroute errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize LangRouteError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class ConfigurationError(LangRouteError):
    """Invalid localization configuration.

    Raised at startup only (registry or config construction). The process
    should refuse to serve localized routes until the configuration is fixed.

    Attributes:
        issue: What is wrong with the configuration
    """

    def __init__(self, message: str | Diagnostic, issue: ConfigurationIssue) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Error message string OR Diagnostic object
            issue: Machine-readable reason
        """
        super().__init__(message)
        self.issue = issue


class UnsupportedLocaleError(LangRouteError):
    """Locale does not resolve (directly or via alias) to a supported entry.

    Raised by URL localization operations. Recoverable: callers typically
    answer with a 400 response.

    Attributes:
        locale_code: The rejected locale code
    """

    def __init__(self, locale_code: str) -> None:
        """Initialize UnsupportedLocaleError.

        Args:
            locale_code: The rejected locale code
        """
        super().__init__(ErrorTemplate.unsupported_locale(locale_code))
        self.locale_code = locale_code
