"""Locale negotiation and URL localization package.

Provides the localization stack: the supported-locale registry,
Accept-Language negotiation, URL localization and per-request orchestration.

Submodules:
    types         - PEP 695 type aliases (LocaleCode, RouteKey, Url)
    registry      - LocaleDescriptor, LocaleRegistry
    negotiation   - parse_accept_language, LanguageNegotiator, LocaleMatcher
    urls          - UrlLocalizer, NOT_FOUND, substitute_route_attributes
    state         - RequestLocaleState
    collaborators - Boundary protocols and in-memory implementations
    config        - LocalizationConfig, CookieConfig, LocaleCookie
    session       - LocaleSession (per-request orchestration)

Python 3.13+. Babel is optional.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from langroute.enums import LocaleSource, TextDirection
from langroute.localization.collaborators import (
    MappingPreferenceStore,
    MappingTranslations,
    PreferenceStore,
    RequestAccessor,
    RequestSnapshot,
    StaticUrlBuilder,
    Translations,
    UrlBuilder,
)
from langroute.localization.config import CookieConfig, LocaleCookie, LocalizationConfig
from langroute.localization.negotiation import (
    AcceptLanguageEntry,
    BabelLocaleMatcher,
    LanguageNegotiator,
    LocaleMatcher,
    NullLocaleMatcher,
    negotiate,
    parse_accept_language,
)
from langroute.localization.registry import LocaleDescriptor, LocaleRegistry
from langroute.localization.session import LocaleSession
from langroute.localization.state import RequestLocaleState
from langroute.localization.types import LocaleCode, RouteAttributes, RouteKey, Url
from langroute.localization.urls import NOT_FOUND, UrlLocalizer, substitute_route_attributes

__all__ = [
    # Orchestration
    "LocaleSession",
    "RequestLocaleState",
    "LocaleSource",
    # Registry
    "LocaleRegistry",
    "LocaleDescriptor",
    "TextDirection",
    # Negotiation
    "LanguageNegotiator",
    "AcceptLanguageEntry",
    "parse_accept_language",
    "negotiate",
    "LocaleMatcher",
    "NullLocaleMatcher",
    "BabelLocaleMatcher",
    # URL localization
    "UrlLocalizer",
    "NOT_FOUND",
    "substitute_route_attributes",
    # Configuration
    "LocalizationConfig",
    "CookieConfig",
    "LocaleCookie",
    # Boundary protocols and in-memory implementations
    "RequestAccessor",
    "PreferenceStore",
    "Translations",
    "UrlBuilder",
    "RequestSnapshot",
    "MappingPreferenceStore",
    "MappingTranslations",
    "StaticUrlBuilder",
    # Type aliases for user code type annotations
    "LocaleCode",
    "RouteAttributes",
    "RouteKey",
    "Url",
]
