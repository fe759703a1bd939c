"""Enumerations for langroute type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, so configuration files can name them
directly ("rtl", "cookie").

Python 3.13+.
"""

from enum import StrEnum


class TextDirection(StrEnum):
    """Writing direction of a locale.

    StrEnum provides automatic string conversion: str(TextDirection.RTL) == "rtl"
    """

    LTR = "ltr"
    """Left-to-right scripts (Latin, Cyrillic, Han, ...)."""

    RTL = "rtl"
    """Right-to-left scripts (Arabic, Hebrew, Thaana, ...)."""


class LocaleSource(StrEnum):
    """Where the locale of a request was taken from.

    Members double as the entries of the configurable detection order.
    """

    URL = "url"
    """First path segment of the request URL: /es/products"""

    SESSION = "session"
    """Preference stored in the server-side session."""

    COOKIE = "cookie"
    """Preference stored in the locale cookie."""

    ENVIRONMENT = "environment"
    """Forced locale from the ROUTING_LOCALE environment variable."""

    ACCEPT_LANGUAGE = "accept_language"
    """Negotiated from the Accept-Language header."""

    DEFAULT = "default"
    """Configured default locale (nothing else applied)."""

    EXPLICIT = "explicit"
    """Set by application code through LocaleSession.set_locale()."""


class ConfigurationIssue(StrEnum):
    """Reason attached to a ConfigurationError."""

    UNSUPPORTED_DEFAULT_LOCALE = "unsupported_default_locale"
    NO_SUPPORTED_LOCALES = "no_supported_locales"
    INVALID_LOCALE_ENTRY = "invalid_locale_entry"
    INVALID_DETECTION_ORDER = "invalid_detection_order"


__all__ = [
    "ConfigurationIssue",
    "LocaleSource",
    "TextDirection",
]
