"""URL localization: insert, replace or strip the locale segment of a URL.

Given a URL (absolute or relative) and a target locale, produces the
canonical localized URL for that locale:

    https://example.com/products?page=2   --es-->  https://example.com/es/products?page=2
    https://example.com/es/products       --fr-->  https://example.com/fr/products
    https://example.com/fr/products       --en-->  https://example.com/products
                                                   (default locale hidden)

Guarantees:
    - At most one locale segment: any existing one is stripped first
    - Query string and fragment are reattached verbatim, never localized
    - Scheme, user info, host and port are kept exactly as given
    - Trailing slashes are trimmed

Translated routes:
    Route keys resolve through the Translations collaborator to per-locale
    patterns such as ``productos/{slug}``. A path matching the pattern of a
    configured route key is rebuilt from the target locale's pattern, so
    ``/es/productos/zapatos`` localizes to ``/fr/produits/zapatos``.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import functools
import logging
import re
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import TYPE_CHECKING, Final, Literal
from urllib.parse import urlsplit, urlunsplit

from langroute.constants import MAX_LOCALE_CACHE_SIZE
from langroute.diagnostics import UnsupportedLocaleError
from langroute.localization.collaborators import (
    MappingTranslations,
    Translations,
    UrlBuilder,
    is_absolute_url,
)

if TYPE_CHECKING:
    from langroute.localization.registry import LocaleRegistry
    from langroute.localization.state import RequestLocaleState
    from langroute.localization.types import LocaleCode, RouteKey, Url

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Sentinel
    "NOT_FOUND",
    "NotFoundType",
    # Localizer
    "UrlLocalizer",
    # Helpers
    "substitute_route_attributes",
]

logger = logging.getLogger(__name__)

# "/{name?}" left over after substitution
_UNRESOLVED_OPTIONAL = re.compile(r"/\{[^}]+\?\}")

# Placeholder with its optional leading slash: "/{slug}", "{page?}"
_PLACEHOLDER = re.compile(r"(/?)\{([^{}/]+?)(\?)?\}")


class NotFoundType(Enum):
    """Type of the NOT_FOUND sentinel (falsy, never raised)."""

    NOT_FOUND = "NOT_FOUND"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND: Final = NotFoundType.NOT_FOUND
"""Returned by route-name URL building when the computed path is empty."""


def substitute_route_attributes(attributes: Mapping[str, str], route: str) -> str:
    """Substitute ``{name}`` and ``{name?}`` placeholders in a translated route.

    Optional placeholders left unresolved are removed together with their
    leading slash. Unresolved required placeholders stay as literal text.

    Example:
        >>> substitute_route_attributes({"slug": "zapatos"}, "/es/productos/{slug}/{page?}")
        '/es/productos/zapatos'
        >>> substitute_route_attributes({}, "/es/productos/{slug}")
        '/es/productos/{slug}'
    """
    for key, value in attributes.items():
        value = str(value)
        route = route.replace(f"{{{key}}}", value).replace(f"{{{key}?}}", value)
    return _UNRESOLVED_OPTIONAL.sub("", route)


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def _compile_route_pattern(translated: str) -> tuple[re.Pattern[str], tuple[str, ...]]:
    """Compile a translated route into a regex matching slash-trimmed paths.

    Placeholders become groups ``p0``, ``p1``, ... (placeholder names need
    not be identifiers); optional placeholders make their segment optional.
    """
    pieces: list[str] = []
    names: list[str] = []
    position = 0
    for index, match in enumerate(_PLACEHOLDER.finditer(translated)):
        slash, name, optional = match.groups()
        pieces.append(re.escape(translated[position : match.start()]))
        group = f"(?P<p{index}>[^/]+)"
        if optional:
            pieces.append(f"(?:{re.escape(slash)}{group})?")
        else:
            pieces.append(f"{re.escape(slash)}{group}")
        names.append(name)
        position = match.end()
    pieces.append(re.escape(translated[position:]))
    return re.compile("^" + "".join(pieces) + "$"), tuple(names)


class UrlLocalizer:
    """Compute localized URLs for supported locales.

    Pure function of its inputs, the immutable registry and the caller's
    RequestLocaleState: no I/O and no shared mutable state, so one instance
    serves every request.

    Example:
        >>> localizer = UrlLocalizer(registry, StaticUrlBuilder("https://example.com"))
        >>> state = RequestLocaleState("en", "https://example.com/products")
        >>> localizer.localize("es", "/products?page=2", state=state)
        'https://example.com/es/products?page=2'
    """

    __slots__ = (
        "_hide_default_locale",
        "_registry",
        "_route_keys",
        "_translations",
        "_url_builder",
    )

    def __init__(
        self,
        registry: LocaleRegistry,
        url_builder: UrlBuilder,
        translations: Translations | None = None,
        *,
        hide_default_locale_in_url: bool = False,
        route_keys: Iterable[RouteKey] = (),
    ) -> None:
        """Initialize the localizer.

        Args:
            registry: Supported locales, default locale and aliases
            url_builder: Converts relative paths to absolute URLs
            translations: Route-key translations (default: none)
            hide_default_locale_in_url: Omit the segment for the default locale
            route_keys: Translated route keys tried when matching a path
        """
        self._registry = registry
        self._url_builder = url_builder
        self._translations: Translations = (
            translations if translations is not None else MappingTranslations({})
        )
        self._hide_default_locale = hide_default_locale_in_url
        self._route_keys: tuple[RouteKey, ...] = tuple(dict.fromkeys(route_keys))

    @property
    def hide_default_locale_in_url(self) -> bool:
        return self._hide_default_locale

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def localize(
        self,
        locale: LocaleCode | None = None,
        url: Url | None = None,
        attributes: Mapping[str, str] | None = None,
        *,
        force_default_location: bool = False,
        state: RequestLocaleState,
    ) -> Url:
        """Return ``url`` localized for ``locale``.

        Args:
            locale: Target locale (alias accepted); None means the current locale
            url: URL or path to localize; None means the active route, or
                else the current request URL
            attributes: Placeholder values for translated routes
            force_default_location: Keep the locale segment even for a hidden
                default locale
            state: The calling request's locale state

        Returns:
            Absolute localized URL

        Raises:
            UnsupportedLocaleError: If ``locale`` does not resolve to a
                supported locale
        """
        target = self._require_supported(state.current_locale if locale is None else locale)
        route_attributes = dict(attributes or {})

        if not url:
            if state.active_route_name:
                routed = self.url_from_translated_route_name(
                    target,
                    state.active_route_name,
                    route_attributes,
                    force_default_location,
                    state=state,
                )
                if routed is not NOT_FOUND:
                    return routed
                logger.debug(
                    "Route '%s' has no URL in locale %s, localizing current URL",
                    state.active_route_name,
                    target,
                )
            url = state.current_url
        else:
            url = self._url_builder.to_absolute(url)

        parts = urlsplit(url)
        suffix = (f"?{parts.query}" if parts.query else "") + (
            f"#{parts.fragment}" if parts.fragment else ""
        )

        base_path = state.base_path.strip("/")
        path = "/" + parts.path.lstrip("/")
        if base_path:
            prefix = f"/{base_path}"
            if path == prefix or path.startswith(f"{prefix}/"):
                path = path[len(prefix) :] or "/"

        url_locale, path = self._strip_locale_segment(path)

        routed_path = ""
        match_locale = url_locale or self._registry.canonical(state.current_locale)
        if match_locale is not None:
            translated = self._find_translated_route(path, match_locale)
            if translated is not None and self._translations.has(translated[0], target):
                route_key, matched_attributes = translated
                routed_path = self._route_path(
                    target,
                    route_key,
                    {**matched_attributes, **route_attributes},
                    force_default_location,
                )

        if routed_path:
            path = routed_path.strip("/")
        else:
            path = path.strip("/")
            if not self._hides_locale(target, force_default_location):
                path = f"{target}/{path}"
        path = f"{base_path}/{path}".strip("/")

        if parts.netloc:
            final = urlunsplit((parts.scheme, parts.netloc, f"/{path}" if path else "", "", ""))
        else:
            final = f"/{path}"

        if is_absolute_url(final):
            return f"{final}{suffix}"
        return f"{self.create_url_from_uri(final, state)}{suffix}"

    def non_localize(self, url: Url | None = None, *, state: RequestLocaleState) -> Url:
        """Return ``url`` in the canonical form for the request's current locale."""
        return self.localize(state.current_locale, url, state=state)

    def url_from_translated_route_name(
        self,
        locale: LocaleCode,
        route_key: RouteKey,
        attributes: Mapping[str, str] | None = None,
        force_default_location: bool = False,
        *,
        state: RequestLocaleState | None = None,
    ) -> Url | Literal[NotFoundType.NOT_FOUND]:
        """Build the URL of a translated route in ``locale``.

        The path is the locale segment (unless hidden) followed by the
        route's translation with placeholders substituted. A route without a
        translation in ``locale`` contributes no path segment.

        Args:
            locale: Target locale (alias accepted)
            route_key: Translation key of the route
            attributes: Placeholder values
            force_default_location: Keep the locale segment even for a hidden
                default locale
            state: Request state supplying a base URL override

        Returns:
            Absolute URL, or NOT_FOUND when the computed path is empty

        Raises:
            UnsupportedLocaleError: If ``locale`` is not supported
        """
        target = self._require_supported(locale)
        route = self._route_path(target, route_key, attributes or {}, force_default_location)
        if not route:
            return NOT_FOUND
        return self.create_url_from_uri(route, state).rstrip("/")

    def create_url_from_uri(self, uri: str, state: RequestLocaleState | None = None) -> Url:
        """Turn a path into an absolute URL, honouring the request's base URL override."""
        uri = uri.lstrip("/")
        if state is not None and state.base_url_override:
            return f"{state.base_url_override}{uri}"
        return self._url_builder.to_absolute(uri)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_supported(self, locale: LocaleCode) -> LocaleCode:
        canonical = self._registry.canonical(locale)
        if canonical is None:
            raise UnsupportedLocaleError(locale)
        return canonical

    def _hides_locale(self, locale: LocaleCode, force_default_location: bool) -> bool:
        return (
            self._hide_default_locale
            and not force_default_location
            and locale == self._registry.default_locale
        )

    def _route_path(
        self,
        target: LocaleCode,
        route_key: RouteKey,
        attributes: Mapping[str, str],
        force_default_location: bool,
    ) -> str:
        """Locale segment (unless hidden) plus the substituted translation; '' when both are absent."""
        route = "" if self._hides_locale(target, force_default_location) else f"/{target}"
        if self._translations.has(route_key, target):
            route = f"{route}/{self._translations.translate(route_key, target)}"
            route = substitute_route_attributes(attributes, route)
        return route

    def _strip_locale_segment(self, path: str) -> tuple[LocaleCode | None, str]:
        """Strip the first matching locale segment ('/es/...' or a bare '/es')."""
        for code in self._registry.codes:
            for segment in dict.fromkeys((code, self._registry.resolve_inverse_alias(code))):
                if path.startswith(f"/{segment}/"):
                    logger.debug("Stripped locale segment '%s' from %s", segment, path)
                    return code, path[len(segment) + 1 :]
                if path == f"/{segment}":
                    logger.debug("Stripped locale segment '%s' from %s", segment, path)
                    return code, "/"
        return None, path

    def _find_translated_route(
        self, path: str, locale: LocaleCode
    ) -> tuple[RouteKey, dict[str, str]] | None:
        """Find the route key whose translation in ``locale`` matches ``path``."""
        trimmed = path.strip("/")
        for route_key in self._route_keys:
            if not self._translations.has(route_key, locale):
                continue
            translated = self._translations.translate(route_key, locale).strip("/")
            if not translated:
                continue
            pattern, names = _compile_route_pattern(translated)
            match = pattern.match(trimmed)
            if match is None:
                continue
            matched = {
                name: match.group(f"p{index}")
                for index, name in enumerate(names)
                if match.group(f"p{index}") is not None
            }
            logger.debug("Path '%s' matched route '%s' in locale %s", path, route_key, locale)
            return route_key, matched
        return None
