"""Per-request locale resolution.

LocaleSession is the glue a framework middleware calls once per request. It
asks the configured sources, in order, which locale the request wants:

    URL segment -> session preference -> cookie -> ROUTING_LOCALE -> Accept-Language

The first candidate that resolves (directly or through an alias) to a
supported locale wins; otherwise the default locale applies. The answer is
returned as a fresh RequestLocaleState owned by that request alone.

LocaleSession itself holds only immutable collaborators and may be shared by
every request handler.

Python 3.13+. Babel is optional (babel_locale).
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from langroute.constants import ENV_ROUTE_KEY
from langroute.diagnostics import UnsupportedLocaleError
from langroute.enums import LocaleSource
from langroute.locale_utils import get_babel_locale
from langroute.localization.config import LocaleCookie
from langroute.localization.negotiation import LanguageNegotiator
from langroute.localization.state import RequestLocaleState
from langroute.localization.urls import UrlLocalizer

if TYPE_CHECKING:
    from babel import Locale

    from langroute.localization.collaborators import (
        PreferenceStore,
        RequestAccessor,
        Translations,
        UrlBuilder,
    )
    from langroute.localization.config import LocalizationConfig
    from langroute.localization.negotiation import LocaleMatcher
    from langroute.localization.registry import LocaleDescriptor, LocaleRegistry
    from langroute.localization.types import LocaleCode, Url

__all__ = ["LocaleSession"]

logger = logging.getLogger(__name__)

_SECONDS_PER_MINUTE = 60


def _same_url(first: Url, second: Url) -> bool:
    """Compare URLs ignoring a trailing slash on the path."""
    a = urlsplit(first)
    b = urlsplit(second)
    return (a.scheme, a.netloc, a.path.rstrip("/"), a.query, a.fragment) == (
        b.scheme,
        b.netloc,
        b.path.rstrip("/"),
        b.query,
        b.fragment,
    )


class LocaleSession:
    """Resolve, switch and persist the locale of individual requests.

    Example:
        >>> session = LocaleSession.from_config(config, StaticUrlBuilder("https://example.com"))
        >>> request = RequestSnapshot(
        ...     "https://example.com/products",
        ...     headers={"Accept-Language": "es-ES,es;q=0.9"},
        ... )
        >>> state = session.resolve(request)
        >>> state.current_locale, state.source
        ('es', <LocaleSource.ACCEPT_LANGUAGE: 'accept_language'>)
        >>> session.redirect_target(request, state)
        'https://example.com/es/products'
    """

    __slots__ = ("_config", "_negotiator", "_urls")

    def __init__(
        self,
        config: LocalizationConfig,
        negotiator: LanguageNegotiator,
        urls: UrlLocalizer,
    ) -> None:
        """Initialize the session.

        Args:
            config: Localization configuration
            negotiator: Accept-Language negotiator over the configured registry
            urls: URL localizer over the same registry
        """
        self._config = config
        self._negotiator = negotiator
        self._urls = urls

    @classmethod
    def from_config(
        cls,
        config: LocalizationConfig,
        url_builder: UrlBuilder,
        translations: Translations | None = None,
        matcher: LocaleMatcher | None = None,
    ) -> LocaleSession:
        """Wire a registry, negotiator and URL localizer from configuration.

        Args:
            config: Localization configuration
            url_builder: Converts relative paths to absolute URLs
            translations: Route-key translations (default: none)
            matcher: Optional extra negotiation pass (e.g., BabelLocaleMatcher)

        Returns:
            Ready-to-share LocaleSession

        Raises:
            ConfigurationError: If the configured locales are invalid
        """
        registry = config.build_registry()
        negotiator = LanguageNegotiator(registry, matcher)
        urls = UrlLocalizer(
            registry,
            url_builder,
            translations,
            hide_default_locale_in_url=config.hide_default_locale_in_url,
            route_keys=config.route_keys,
        )
        return cls(config, negotiator, urls)

    @property
    def config(self) -> LocalizationConfig:
        return self._config

    @property
    def registry(self) -> LocaleRegistry:
        return self._negotiator.registry

    @property
    def negotiator(self) -> LanguageNegotiator:
        return self._negotiator

    @property
    def urls(self) -> UrlLocalizer:
        return self._urls

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(
        self, request: RequestAccessor, store: PreferenceStore | None = None
    ) -> RequestLocaleState:
        """Determine the locale of ``request``.

        Args:
            request: The incoming request
            store: Session storage holding a previously chosen locale

        Returns:
            New RequestLocaleState; ``source`` records which source decided
        """
        state = RequestLocaleState(
            current_locale=self.registry.default_locale,
            current_url=request.full_url(),
            base_path=request.base_path(),
        )

        for source in self._config.detection_order:
            candidate = self._candidate(source, request, store)
            if not candidate:
                continue
            code = self.registry.canonical(candidate)
            if code is None:
                logger.debug("Ignoring unsupported %s locale '%s'", source, candidate)
                continue
            state.current_locale = code
            state.source = source
            logger.debug("Request locale %s resolved from %s", code, source)
            return state

        logger.debug("Request locale defaulted to %s", state.current_locale)
        return state

    def negotiate_locale(self, request: RequestAccessor) -> LocaleCode:
        """Locale for a request that names none explicitly.

        With the default locale hidden from URLs, an unprefixed URL always
        means the default locale, so Accept-Language is not consulted.
        """
        if not self._consults_accept_language():
            return self.registry.default_locale
        return self._negotiator.negotiate(
            request.header("Accept-Language"),
            request.remote_host(),
        )

    def _consults_accept_language(self) -> bool:
        """An unprefixed URL means the default locale when the default is hidden."""
        config = self._config
        return config.use_accept_language_header and not config.hide_default_locale_in_url

    def _candidate(
        self,
        source: LocaleSource,
        request: RequestAccessor,
        store: PreferenceStore | None,
    ) -> str | None:
        match source:
            case LocaleSource.URL:
                return request.segment(1)
            case LocaleSource.SESSION:
                return store.get(self._config.session_key) if store is not None else None
            case LocaleSource.COOKIE:
                return request.cookie(self._config.cookie.name)
            case LocaleSource.ENVIRONMENT:
                return os.environ.get(ENV_ROUTE_KEY)
            case LocaleSource.ACCEPT_LANGUAGE:
                return self.negotiate_locale(request) if self._consults_accept_language() else None
            case _:
                return None

    # ------------------------------------------------------------------
    # Switching and persistence
    # ------------------------------------------------------------------

    def set_locale(
        self,
        state: RequestLocaleState,
        locale: LocaleCode | None,
        request: RequestAccessor | None = None,
    ) -> LocaleCode:
        """Switch the request to ``locale``.

        An unsupported (or missing) locale is replaced by the negotiated
        locale of ``request``, or by the default locale when no request is
        given.

        Returns:
            The locale now current for the request
        """
        code = self.registry.canonical(locale) if locale else None
        if code is not None:
            state.current_locale = code
            state.source = LocaleSource.EXPLICIT
        elif request is not None:
            state.current_locale = self.negotiate_locale(request)
            state.source = LocaleSource.ACCEPT_LANGUAGE
        else:
            state.current_locale = self.registry.default_locale
            state.source = LocaleSource.DEFAULT

        if code is None and locale:
            logger.debug("Locale '%s' is not supported, using %s", locale, state.current_locale)
        return state.current_locale

    def redirect_target(self, request: RequestAccessor, state: RequestLocaleState) -> Url | None:
        """Canonical URL to redirect to, or None when the request is already there.

        Never redirects when automatic detection is disabled or the request
        expects JSON.
        """
        if not self._config.auto_detect_locale or request.wants_json():
            return None

        current = request.full_url()
        target = self._urls.localize(state.current_locale, current, state=state)
        if _same_url(target, current):
            return None
        logger.debug("Redirecting %s to %s", current, target)
        return target

    def remember(self, state: RequestLocaleState, store: PreferenceStore) -> None:
        """Store the request's locale as the user's preference."""
        store.set(self._config.session_key, state.current_locale)

    def locale_cookie(self, locale: LocaleCode) -> LocaleCookie:
        """Build the cookie that remembers ``locale``.

        Raises:
            UnsupportedLocaleError: If ``locale`` is not supported
        """
        code = self.registry.canonical(locale)
        if code is None:
            raise UnsupportedLocaleError(locale)
        cookie = self._config.cookie
        return LocaleCookie(
            name=cookie.name,
            value=code,
            max_age=cookie.minutes * _SECONDS_PER_MINUTE,
            path=cookie.path,
            domain=cookie.domain,
            secure=cookie.secure,
            http_only=cookie.http_only,
            same_site=cookie.same_site,
        )

    # ------------------------------------------------------------------
    # Current-locale metadata
    # ------------------------------------------------------------------

    def descriptor(self, state: RequestLocaleState) -> LocaleDescriptor:
        return self.registry.describe(state.current_locale)

    def posix_locale(self, state: RequestLocaleState) -> str | None:
        """POSIX locale name of the current locale ('es_ES.UTF-8'), or None without a regional code."""
        regional = self.registry.regional(state.current_locale)
        if regional is None:
            return None
        return f"{regional}{self._config.utf8_suffix}"

    def babel_locale(self, state: RequestLocaleState) -> Locale:
        """Babel Locale for the current locale (regional code preferred).

        Raises:
            BabelImportError: If Babel is not installed
            babel.core.UnknownLocaleError: If CLDR has no data for the locale
        """
        descriptor = self.descriptor(state)
        return get_babel_locale(descriptor.regional or descriptor.code)
