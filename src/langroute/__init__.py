"""langroute - Accept-Language negotiation and locale-prefixed URLs.

Negotiates a request's preferred language against a configured set of
supported locales and rewrites URLs to embed, replace or strip a locale
segment, so a site can serve every language under predictable paths.

Public API:
    LocalizationConfig - Immutable configuration (from a settings mapping)
    LocaleRegistry - Supported locales, default locale and aliases
    LanguageNegotiator - Accept-Language negotiation
    UrlLocalizer - Localized and translated-route URLs
    LocaleSession - Per-request locale resolution, redirects and persistence
    RequestLocaleState - Locale state owned by one request
    NOT_FOUND - Sentinel returned when a translated route has no URL

Exceptions:
    LangRouteError - Base exception class
    ConfigurationError - Invalid localization configuration (startup)
    UnsupportedLocaleError - Locale not supported (per call)

Submodules:
    langroute.localization - Full localization API and boundary protocols
    langroute.diagnostics - Error types, codes and message templates
    langroute.locale_utils - Locale-tag normalization helpers
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

# Essential Public API - Minimal exports for clean namespace
from .diagnostics import ConfigurationError, LangRouteError, UnsupportedLocaleError
from .localization import (
    NOT_FOUND,
    LanguageNegotiator,
    LocaleRegistry,
    LocaleSession,
    LocalizationConfig,
    RequestLocaleState,
    UrlLocalizer,
)

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
try:
    __version__ = _get_version("langroute")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "NOT_FOUND",
    "ConfigurationError",
    "LangRouteError",
    "LanguageNegotiator",
    "LocaleRegistry",
    "LocaleSession",
    "LocalizationConfig",
    "RequestLocaleState",
    "UnsupportedLocaleError",
    "UrlLocalizer",
    "__version__",
]
