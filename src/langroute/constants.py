"""Shared constants for langroute.

Constants are grouped by domain:
- Negotiation: default quality factors for Accept-Language entries
- Descriptors: fallback metadata and script direction table
- Request: environment and storage key defaults

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Negotiation
    "DEFAULT_QUALITY",
    "WILDCARD_ALL_QUALITY",
    "WILDCARD_SUBTYPE_QUALITY",
    "WILDCARD_TAG",
    # Descriptors
    "FALLBACK_SCRIPT",
    "RTL_SCRIPTS",
    # Request
    "ENV_ROUTE_KEY",
    "DEFAULT_SESSION_KEY",
    "DEFAULT_COOKIE_NAME",
    "DEFAULT_COOKIE_MINUTES",
    "DEFAULT_UTF8_SUFFIX",
    "MAX_LOCALE_CACHE_SIZE",
]

# ============================================================================
# NEGOTIATION
# ============================================================================

# Quality for an Accept-Language entry without a usable q= parameter.
DEFAULT_QUALITY: float = 1.0

# "*/*" ranks below every explicit entry.
WILDCARD_ALL_QUALITY: float = 0.01

# "*" and "xx/*" rank just above "*/*".
WILDCARD_SUBTYPE_QUALITY: float = 0.02

# Tag that allows the first configured locale when nothing else matched.
WILDCARD_TAG: str = "*"

# ============================================================================
# DESCRIPTORS
# ============================================================================

# ISO 15924 script assumed when a descriptor does not name one.
FALLBACK_SCRIPT: str = "Latn"

# ISO 15924 scripts written right-to-left.
RTL_SCRIPTS: frozenset[str] = frozenset({"Arab", "Hebr", "Mong", "Tfng", "Thaa"})

# ============================================================================
# REQUEST
# ============================================================================

# Environment variable that forces a locale when the URL carries none.
ENV_ROUTE_KEY: str = "ROUTING_LOCALE"

DEFAULT_SESSION_KEY: str = "locale"
DEFAULT_COOKIE_NAME: str = "locale"

# One year.
DEFAULT_COOKIE_MINUTES: int = 60 * 24 * 365

# Appended to regional codes when a POSIX locale name is needed (en_US.UTF-8).
DEFAULT_UTF8_SUFFIX: str = ".UTF-8"

# Maximum cached Babel Locale objects and compiled route patterns.
MAX_LOCALE_CACHE_SIZE: int = 128
