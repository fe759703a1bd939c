"""Tests for LocaleSession: per-request resolution, switching and persistence.

Python 3.13+.
"""

from __future__ import annotations

from typing import Any

import pytest

from langroute.constants import ENV_ROUTE_KEY
from langroute.diagnostics import UnsupportedLocaleError
from langroute.enums import LocaleSource
from langroute.localization import (
    LocaleSession,
    LocalizationConfig,
    MappingPreferenceStore,
    MappingTranslations,
    RequestLocaleState,
    RequestSnapshot,
    StaticUrlBuilder,
)

from tests.helpers.site_config import BASE_URL, ROUTE_KEYS, ROUTES, SUPPORTED_LOCALES


@pytest.fixture(autouse=True)
def _no_forced_locale(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(ENV_ROUTE_KEY, raising=False)


def _session(**settings: Any) -> LocaleSession:
    config = LocalizationConfig.from_mapping(
        {
            "locale": "en",
            "supportedLocales": SUPPORTED_LOCALES,
            "translatedRoutes": list(ROUTE_KEYS),
            **settings,
        }
    )
    return LocaleSession.from_config(
        config, StaticUrlBuilder(BASE_URL), MappingTranslations(ROUTES)
    )


@pytest.fixture
def session(config: LocalizationConfig) -> LocaleSession:
    return LocaleSession.from_config(
        config, StaticUrlBuilder(BASE_URL), MappingTranslations(ROUTES)
    )


def _request(path: str = "/cart", **kwargs: Any) -> RequestSnapshot:
    return RequestSnapshot(f"{BASE_URL}{path}", **kwargs)


class TestWiring:
    """Test LocaleSession.from_config."""

    def test_collaborators_share_registry(self, session: LocaleSession) -> None:
        """Negotiator and URL localizer use the configured registry."""
        assert session.registry.codes == ("en", "fr", "es")
        assert session.negotiator.registry is session.registry
        assert session.urls.hide_default_locale_in_url is False

    def test_hide_default_propagates(self) -> None:
        """The URL localizer inherits hideDefaultLocaleInURL."""
        assert _session(hideDefaultLocaleInURL=True).urls.hide_default_locale_in_url


class TestResolve:
    """Detection order: URL, session, cookie, environment, Accept-Language."""

    def test_url_segment_wins(self, session: LocaleSession) -> None:
        """The URL segment beats every other source."""
        request = _request(
            "/fr/cart", cookies={"locale": "es"}, headers={"Accept-Language": "es"}
        )
        state = session.resolve(request, MappingPreferenceStore({"locale": "es"}))
        assert state.current_locale == "fr"
        assert state.source is LocaleSource.URL

    def test_session_beats_cookie(self, session: LocaleSession) -> None:
        """A stored preference beats the cookie."""
        request = _request(cookies={"locale": "fr"})
        state = session.resolve(request, MappingPreferenceStore({"locale": "es"}))
        assert state.current_locale == "es"
        assert state.source is LocaleSource.SESSION

    def test_cookie(self, session: LocaleSession) -> None:
        """The locale cookie is used without a session."""
        state = session.resolve(_request(cookies={"locale": "fr"}))
        assert state.current_locale == "fr"
        assert state.source is LocaleSource.COOKIE

    def test_environment_beats_header(
        self, session: LocaleSession, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """ROUTING_LOCALE forces a locale when the URL has none."""
        monkeypatch.setenv(ENV_ROUTE_KEY, "es")
        state = session.resolve(_request(headers={"Accept-Language": "fr"}))
        assert state.current_locale == "es"
        assert state.source is LocaleSource.ENVIRONMENT

    def test_accept_language(self, session: LocaleSession) -> None:
        """Accept-Language is negotiated last."""
        state = session.resolve(_request(headers={"Accept-Language": "es-ES,es;q=0.9"}))
        assert state.current_locale == "es"
        assert state.source is LocaleSource.ACCEPT_LANGUAGE

    def test_remote_host_fallback(self, session: LocaleSession) -> None:
        """The client host's top-level label is the last negotiation resort."""
        request = _request(headers={"Accept-Language": "de"}, client_host="client.example.fr")
        assert session.resolve(request).current_locale == "fr"

    def test_default(self, session: LocaleSession) -> None:
        """Nothing usable gives the default locale."""
        state = session.resolve(_request())
        assert state.current_locale == "en"
        assert state.source is LocaleSource.DEFAULT

    def test_unsupported_candidates_skipped(self, session: LocaleSession) -> None:
        """Unsupported values fall through to the next source."""
        request = _request("/de/cart", cookies={"locale": "fr"})
        state = session.resolve(request, MappingPreferenceStore({"locale": "it"}))
        assert state.current_locale == "fr"
        assert state.source is LocaleSource.COOKIE

    def test_alias_segment(self) -> None:
        """Alias segments resolve to the canonical code."""
        session = _session(localesMapping={"castellano": "es"})
        state = session.resolve(_request("/castellano/cart"))
        assert state.current_locale == "es"
        assert state.source is LocaleSource.URL

    def test_hidden_default_skips_header(self) -> None:
        """With the default hidden, an unprefixed URL means the default locale."""
        session = _session(hideDefaultLocaleInURL=True)
        state = session.resolve(_request(headers={"Accept-Language": "es"}))
        assert state.current_locale == "en"
        assert state.source is LocaleSource.DEFAULT

    def test_header_disabled(self) -> None:
        """useAcceptLanguageHeader=False ignores the header."""
        session = _session(useAcceptLanguageHeader=False)
        assert session.resolve(_request(headers={"Accept-Language": "es"})).current_locale == "en"

    @pytest.mark.parametrize(
        "settings",
        [{"hideDefaultLocaleInURL": True}, {"useAcceptLanguageHeader": False}],
    )
    def test_header_gate_shared_by_resolve_and_set_locale(self, settings: dict[str, bool]) -> None:
        """Both entry points skip Accept-Language under the same settings."""
        session = _session(**settings)
        request = _request(headers={"Accept-Language": "es"})
        assert session.resolve(request).current_locale == "en"
        assert session.negotiate_locale(request) == "en"
        assert session.set_locale(RequestLocaleState("fr"), "de", request) == "en"

    def test_custom_detection_order(self) -> None:
        """detectionOrder reorders and limits the sources."""
        session = _session(detectionOrder=["cookie", "url"])
        request = _request("/es/cart", cookies={"locale": "fr"}, headers={"Accept-Language": "es"})
        assert session.resolve(request).current_locale == "fr"
        assert session.resolve(_request(headers={"Accept-Language": "es"})).current_locale == "en"

    def test_mount_path(self, session: LocaleSession) -> None:
        """The locale segment follows the mount prefix."""
        request = _request("/app/fr/cart", mount_path="/app")
        state = session.resolve(request)
        assert state.current_locale == "fr"
        assert state.base_path == "/app"
        assert state.current_url == f"{BASE_URL}/app/fr/cart"

    def test_states_are_independent(self, session: LocaleSession) -> None:
        """Each request gets its own state."""
        first = session.resolve(_request("/fr/cart"))
        second = session.resolve(_request("/es/cart"))
        assert (first.current_locale, second.current_locale) == ("fr", "es")
        assert first is not second


class TestSetLocale:
    """Test set_locale."""

    def test_supported(self, session: LocaleSession) -> None:
        """A supported locale is applied as an explicit choice."""
        state = RequestLocaleState("en")
        assert session.set_locale(state, "fr") == "fr"
        assert state.source is LocaleSource.EXPLICIT

    def test_alias(self) -> None:
        """Aliases are stored as their canonical code."""
        session = _session(localesMapping={"castellano": "es"})
        state = RequestLocaleState("en")
        assert session.set_locale(state, "castellano") == "es"
        assert state.current_locale == "es"

    def test_unsupported_negotiates(self, session: LocaleSession) -> None:
        """An unsupported locale falls back to the negotiated one."""
        state = RequestLocaleState("en")
        request = _request(headers={"Accept-Language": "fr-CA"})
        assert session.set_locale(state, "de", request) == "fr"
        assert state.source is LocaleSource.ACCEPT_LANGUAGE

    @pytest.mark.parametrize("locale", ["de", None, ""])
    def test_unsupported_without_request(self, session: LocaleSession, locale: str | None) -> None:
        """Without a request the default locale applies."""
        state = RequestLocaleState("fr")
        assert session.set_locale(state, locale) == "en"
        assert state.source is LocaleSource.DEFAULT

    def test_hidden_default_negotiates_to_default(self) -> None:
        """With the default hidden, negotiation never leaves the default."""
        session = _session(hideDefaultLocaleInURL=True)
        state = RequestLocaleState("fr")
        request = _request(headers={"Accept-Language": "es"})
        assert session.set_locale(state, "de", request) == "en"


class TestRedirectTarget:
    """Test redirect_target."""

    def test_redirects_to_localized_url(self, session: LocaleSession) -> None:
        """A negotiated locale adds its segment."""
        request = _request("/cart?step=2", headers={"Accept-Language": "es"})
        state = session.resolve(request)
        assert session.redirect_target(request, state) == f"{BASE_URL}/es/cart?step=2"

    def test_session_preference_redirect(self, session: LocaleSession) -> None:
        """A stored preference redirects an unprefixed URL."""
        request = _request("/cart")
        state = session.resolve(request, MappingPreferenceStore({"locale": "es"}))
        assert session.redirect_target(request, state) == f"{BASE_URL}/es/cart"

    def test_hidden_default_segment_removed(self) -> None:
        """/en/cart redirects to /cart when the default is hidden."""
        session = _session(hideDefaultLocaleInURL=True)
        request = _request("/en/cart")
        state = session.resolve(request)
        assert session.redirect_target(request, state) == f"{BASE_URL}/cart"

    @pytest.mark.parametrize("path", ["/es/cart", "/es/cart/"])
    def test_already_canonical(self, session: LocaleSession, path: str) -> None:
        """No redirect when the URL is already canonical (trailing slash ignored)."""
        request = _request(path)
        state = session.resolve(request)
        assert session.redirect_target(request, state) is None

    def test_json_requests_not_redirected(self, session: LocaleSession) -> None:
        """Clients expecting JSON are never redirected."""
        request = _request(headers={"Accept-Language": "es"}, json=True)
        assert session.redirect_target(request, session.resolve(request)) is None

    def test_auto_detect_disabled(self) -> None:
        """autoDetectLocale=False disables redirects."""
        session = _session(autoDetectLocale=False)
        request = _request(headers={"Accept-Language": "es"})
        assert session.redirect_target(request, session.resolve(request)) is None

    def test_translated_route_redirect(self, session: LocaleSession) -> None:
        """Known routes are translated, not just prefixed."""
        request = _request("/en/about")
        state = session.resolve(request)
        session.set_locale(state, "fr")
        assert session.redirect_target(request, state) == f"{BASE_URL}/fr/a-propos"


    def test_mounted_translated_route_is_canonical(self, session: LocaleSession) -> None:
        """A translated route below the mount path needs no redirect."""
        request = _request("/app/es/productos/zapatos", mount_path="/app")
        state = session.resolve(request)
        assert state.current_locale == "es"
        assert session.redirect_target(request, state) is None


class TestPersistence:
    """Test remember and locale_cookie."""

    def test_remember(self, session: LocaleSession) -> None:
        """The current locale is written under the session key."""
        data: dict[str, str] = {}
        session.remember(RequestLocaleState("es"), MappingPreferenceStore(data))
        assert data == {"locale": "es"}

    def test_remember_custom_key(self) -> None:
        """localeSessionKey changes the storage key."""
        data: dict[str, str] = {}
        _session(localeSessionKey="lang").remember(
            RequestLocaleState("fr"), MappingPreferenceStore(data)
        )
        assert data == {"lang": "fr"}

    def test_locale_cookie(self, session: LocaleSession) -> None:
        """One-year lax cookie carrying the canonical code."""
        cookie = session.locale_cookie("es")
        assert cookie.name == "locale"
        assert cookie.value == "es"
        assert cookie.max_age == 31536000
        assert cookie.path == "/"
        assert cookie.same_site == "lax"
        assert not cookie.secure

    def test_locale_cookie_settings(self) -> None:
        """Cookie settings come from localeCookie."""
        session = _session(
            localesMapping={"castellano": "es"},
            localeCookie={"name": "lang", "minutes": 10, "secure": True, "domain": "example.com"},
        )
        cookie = session.locale_cookie("castellano")
        assert (cookie.name, cookie.value, cookie.max_age) == ("lang", "es", 600)
        assert cookie.secure
        assert cookie.domain == "example.com"

    def test_locale_cookie_unsupported(self, session: LocaleSession) -> None:
        """Unsupported locales cannot be stored."""
        with pytest.raises(UnsupportedLocaleError):
            session.locale_cookie("de")


class TestMetadata:
    """Test descriptor, posix_locale and babel_locale."""

    def test_descriptor(self, session: LocaleSession) -> None:
        """The current locale's descriptor."""
        descriptor = session.descriptor(RequestLocaleState("fr"))
        assert descriptor.code == "fr"
        assert descriptor.native == "Français"

    def test_posix_locale(self, session: LocaleSession) -> None:
        """Regional code plus the UTF-8 suffix."""
        assert session.posix_locale(RequestLocaleState("es")) == "es_ES.UTF-8"

    def test_posix_locale_custom_suffix(self) -> None:
        """utf8suffix is configurable."""
        assert _session(utf8suffix=".utf8").posix_locale(RequestLocaleState("fr")) == "fr_FR.utf8"

    def test_posix_locale_without_regional(self) -> None:
        """No regional code means no POSIX name."""
        config = LocalizationConfig("en", {"en": {"name": "English"}})
        session = LocaleSession.from_config(config, StaticUrlBuilder(BASE_URL))
        assert session.posix_locale(RequestLocaleState("en")) is None

    def test_babel_locale(self, session: LocaleSession) -> None:
        """The Babel Locale of the regional code."""
        pytest.importorskip("babel")
        locale = session.babel_locale(RequestLocaleState("es"))
        assert locale.language == "es"
        assert locale.territory == "ES"
