"""Babel compatibility layer for optional dependency handling.

Provides centralized, lazy import infrastructure for Babel so that consistent
error messaging and import behavior is shared by all Babel-dependent code.

Design Rationale:
    langroute supports two installation modes:
    - Core: `pip install langroute` (no external dependencies)
    - CLDR-enhanced: `pip install langroute[babel]` (Babel locale matching
      and CLDR-derived locale descriptors)

    This module ensures that:
    1. Core installations never trigger Babel imports
    2. Babel-backed features get consistent, helpful error messages when Babel is missing
    3. Babel types are available for TYPE_CHECKING without runtime import

Usage Pattern:
    # At module top-level (for type hints only):
    from typing import TYPE_CHECKING
    if TYPE_CHECKING:
        from babel import Locale

    # At function call site (for runtime use):
    from langroute.core.babel_compat import require_babel

    def my_function(locale_code: str) -> None:
        require_babel("my_function")  # Raises BabelImportError if Babel missing
        from babel import Locale  # Safe to import Babel now
        ...

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from babel.core import UnknownLocaleError as UnknownLocaleErrorType


# pylint: disable=unnecessary-ellipsis
class BabelNegotiateProtocol(Protocol):
    """Protocol for babel.core.negotiate_locale.

    Defines the subset of the Babel API used for best-effort locale matching.
    """

    def __call__(
        self,
        preferred: Iterable[str],
        available: Iterable[str],
        sep: str = "_",
        aliases: dict[str, str] | None = ...,
    ) -> str | None:
        """Return the first preferred locale available, or None."""
        ...
# pylint: enable=unnecessary-ellipsis


__all__ = [
    "BabelImportError",
    "BabelNegotiateProtocol",
    "get_babel_negotiate",
    "get_likely_subtags",
    "get_unknown_locale_error",
    "is_babel_available",
    "require_babel",
]


@lru_cache(maxsize=1)
def _check_babel_available() -> bool:
    """Check if Babel is installed (computed once, cached via lru_cache)."""
    try:
        import babel  # noqa: F401, PLC0415  # pylint: disable=unused-import

        return True
    except ImportError:
        return False


class BabelImportError(ImportError):
    """Raised when Babel is required but not installed.

    Provides a consistent, helpful error message directing users to install
    the Babel dependency.
    """

    def __init__(self, feature: str) -> None:
        """Create error with feature-specific message.

        Args:
            feature: Name of the feature/function requiring Babel
        """
        message = (
            f"{feature} requires Babel for CLDR locale data. "
            "Install with: pip install langroute[babel]"
        )
        super().__init__(message)
        self.feature = feature


def is_babel_available() -> bool:
    """Check if Babel is installed.

    Uses cached result to avoid repeated import attempts.

    Returns:
        True if Babel is installed and importable, False otherwise.
    """
    return _check_babel_available()


def require_babel(feature: str) -> None:
    """Assert that Babel is available, raising BabelImportError if not.

    Use at the entry point of functions/methods that require Babel.

    Args:
        feature: Name of the feature requiring Babel (for error message)

    Raises:
        BabelImportError: If Babel is not installed
    """
    if not _check_babel_available():
        raise BabelImportError(feature)


def get_unknown_locale_error() -> type[UnknownLocaleErrorType]:
    """Get the Babel UnknownLocaleError exception class.

    Use for exception handling when you need to catch UnknownLocaleError.

    Raises:
        BabelImportError: If Babel is not installed
    """
    require_babel("get_unknown_locale_error")
    from babel.core import UnknownLocaleError  # noqa: PLC0415

    return UnknownLocaleError


def get_babel_negotiate() -> BabelNegotiateProtocol:
    """Get babel.core.negotiate_locale.

    Raises:
        BabelImportError: If Babel is not installed
    """
    require_babel("get_babel_negotiate")
    from babel.core import negotiate_locale  # noqa: PLC0415

    return negotiate_locale


def get_likely_subtags() -> dict[str, str]:
    """Get the CLDR likely-subtags table ('ar' -> 'ar_Arab_EG').

    Raises:
        BabelImportError: If Babel is not installed
    """
    require_babel("get_likely_subtags")
    from babel.core import get_global  # noqa: PLC0415

    return get_global("likely_subtags")  # type: ignore[no-any-return]
