"""Boundary interfaces consumed by the localization core.

The web framework, session storage, translation catalogs and URL generation
live outside langroute. They are described here as Protocols (structural
typing) so any framework adapter can satisfy them without subclassing, and
each comes with a small in-memory implementation used by tests and by
applications that do not need anything richer.

Components:
    RequestAccessor - Read-only view of the current request
    PreferenceStore - Session-like storage of the chosen locale
    Translations - Route-key translation lookup
    UrlBuilder - Relative path to absolute URL conversion
    RequestSnapshot - Immutable RequestAccessor built from a URL and headers
    MappingPreferenceStore - PreferenceStore over a mutable mapping
    MappingTranslations - Translations over nested mappings
    StaticUrlBuilder - UrlBuilder rooted at a fixed base URL

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Protocol
from urllib.parse import urlsplit

from langroute.localization.types import LocaleCode, RouteKey, Url

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocols
    "RequestAccessor",
    "PreferenceStore",
    "Translations",
    "UrlBuilder",
    # In-memory implementations
    "RequestSnapshot",
    "MappingPreferenceStore",
    "MappingTranslations",
    "StaticUrlBuilder",
    # Helpers
    "is_absolute_url",
]


def is_absolute_url(url: str) -> bool:
    """True for a well-formed absolute URL (scheme and host present).

    Example:
        >>> is_absolute_url("https://example.com/es")
        True
        >>> is_absolute_url("/es/products")
        False
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc and parts.hostname)


# ============================================================================
# PROTOCOLS
# ============================================================================


class RequestAccessor(Protocol):
    """Read-only view of the request being localized."""

    def segment(self, index: int) -> str | None:
        """Return the 1-based path segment after the base path, or None."""

    def full_url(self) -> Url:
        """Return the absolute request URL including the query string."""

    def header(self, name: str) -> str | None:
        """Return a request header (case-insensitive name), or None."""

    def cookie(self, name: str) -> str | None:
        """Return a request cookie, or None."""

    def remote_host(self) -> str | None:
        """Return the client host name, or None when unknown."""

    def base_path(self) -> str:
        """Return the application mount prefix ('' when mounted at the root)."""

    def wants_json(self) -> bool:
        """True for AJAX/JSON requests that must never be redirected."""


class PreferenceStore(Protocol):
    """Session-like storage for a user's locale preference."""

    def get(self, key: str) -> str | None:
        """Return the stored value for ``key``, or None."""

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""


class Translations(Protocol):
    """Translation lookup for route keys.

    Example:
        >>> translations.has("routes.product", "es")
        True
        >>> translations.translate("routes.product", "es")
        'productos/{slug}'
    """

    def has(self, key: RouteKey, locale: LocaleCode) -> bool:
        """True if ``key`` has a translation in ``locale``."""

    def translate(self, key: RouteKey, locale: LocaleCode) -> str:
        """Return the translation of ``key`` in ``locale``."""


class UrlBuilder(Protocol):
    """Turns relative paths into absolute URLs (the framework's URL generator)."""

    def to_absolute(self, path: str) -> Url:
        """Return ``path`` as an absolute URL; absolute input is returned unchanged."""


# ============================================================================
# IN-MEMORY IMPLEMENTATIONS
# ============================================================================


@dataclass(frozen=True, slots=True)
class RequestSnapshot:
    """Immutable RequestAccessor built from plain values.

    Example:
        >>> request = RequestSnapshot(
        ...     "https://example.com/es/products?page=2",
        ...     headers={"Accept-Language": "es-ES,es;q=0.9"},
        ... )
        >>> request.segment(1)
        'es'
        >>> request.header("accept-language")
        'es-ES,es;q=0.9'

    Attributes:
        url: Absolute request URL including the query string
        headers: Request headers (names compared case-insensitively)
        cookies: Request cookies
        client_host: Client host name (legacy Accept-Language fallback)
        mount_path: Application mount prefix, e.g. '/app'
        json: Whether the client expects JSON
    """

    url: Url
    headers: Mapping[str, str] = field(default_factory=dict)
    cookies: Mapping[str, str] = field(default_factory=dict)
    client_host: str | None = None
    mount_path: str = ""
    json: bool = False

    def __post_init__(self) -> None:
        lowered = {name.lower(): value for name, value in self.headers.items()}
        object.__setattr__(self, "headers", MappingProxyType(lowered))
        object.__setattr__(self, "cookies", MappingProxyType(dict(self.cookies)))

    def segment(self, index: int) -> str | None:
        path = urlsplit(self.url).path
        prefix = self.mount_path.rstrip("/")
        if prefix and (path == prefix or path.startswith(prefix + "/")):
            path = path[len(prefix) :]
        segments = [part for part in path.split("/") if part]
        if 1 <= index <= len(segments):
            return segments[index - 1]
        return None

    def full_url(self) -> Url:
        return self.url

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    def cookie(self, name: str) -> str | None:
        return self.cookies.get(name)

    def remote_host(self) -> str | None:
        return self.client_host

    def base_path(self) -> str:
        return self.mount_path

    def wants_json(self) -> bool:
        return self.json


class MappingPreferenceStore:
    """PreferenceStore over any mutable mapping (e.g., a framework session dict)."""

    __slots__ = ("_data",)

    def __init__(self, data: MutableMapping[str, str] | None = None) -> None:
        self._data: MutableMapping[str, str] = data if data is not None else {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class MappingTranslations:
    """Translations backed by ``{locale: {route_key: translated_route}}``.

    Example:
        >>> translations = MappingTranslations({"es": {"routes.about": "acerca"}})
        >>> translations.translate("routes.about", "es")
        'acerca'
    """

    __slots__ = ("_catalogs",)

    def __init__(self, catalogs: Mapping[LocaleCode, Mapping[RouteKey, str]]) -> None:
        self._catalogs: Mapping[LocaleCode, Mapping[RouteKey, str]] = MappingProxyType(
            {locale: MappingProxyType(dict(entries)) for locale, entries in catalogs.items()}
        )

    def has(self, key: RouteKey, locale: LocaleCode) -> bool:
        return key in self._catalogs.get(locale, {})

    def translate(self, key: RouteKey, locale: LocaleCode) -> str:
        """Return the translation.

        Raises:
            KeyError: If no translation exists (check with has() first)
        """
        return self._catalogs[locale][key]


@dataclass(frozen=True, slots=True)
class StaticUrlBuilder:
    """UrlBuilder rooted at a fixed base URL.

    Example:
        >>> StaticUrlBuilder("https://example.com").to_absolute("/es/products")
        'https://example.com/es/products'
        >>> StaticUrlBuilder("https://example.com/").to_absolute("")
        'https://example.com'

    Attributes:
        root: Absolute base URL, optionally including a mount path
    """

    root: Url

    def __post_init__(self) -> None:
        if not is_absolute_url(self.root):
            msg = f"root must be an absolute URL, got: '{self.root}'"
            raise ValueError(msg)

    def to_absolute(self, path: str) -> Url:
        if is_absolute_url(path):
            return path
        root = self.root.rstrip("/")
        path = path.lstrip("/")
        return f"{root}/{path}" if path else root
