"""Localization configuration.

Frozen dataclasses holding every configuration value the localization core
consumes. Configuration is loaded once at startup (typically from a settings
file via ``LocalizationConfig.from_mapping``) and never mutated afterwards.

Both the camelCase keys of the classic configuration file
(``hideDefaultLocaleInURL``) and Python snake_case field names
(``hide_default_locale_in_url``) are accepted by ``from_mapping``.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Literal, TypeAlias

from langroute.constants import (
    DEFAULT_COOKIE_MINUTES,
    DEFAULT_COOKIE_NAME,
    DEFAULT_SESSION_KEY,
    DEFAULT_UTF8_SUFFIX,
)
from langroute.diagnostics import ConfigurationError, ErrorTemplate
from langroute.enums import ConfigurationIssue, LocaleSource
from langroute.localization.registry import LocaleDescriptor, LocaleRegistry
from langroute.localization.types import LocaleCode, RouteKey

__all__ = [
    "DEFAULT_DETECTION_ORDER",
    "CookieConfig",
    "LocaleCookie",
    "LocalizationConfig",
]

DEFAULT_DETECTION_ORDER: tuple[LocaleSource, ...] = (
    LocaleSource.URL,
    LocaleSource.SESSION,
    LocaleSource.COOKIE,
    LocaleSource.ENVIRONMENT,
    LocaleSource.ACCEPT_LANGUAGE,
)

# Sources a request can be asked about; DEFAULT and EXPLICIT are outcomes only.
_DETECTABLE_SOURCES = frozenset(DEFAULT_DETECTION_ORDER)

SameSite: TypeAlias = Literal["lax", "strict", "none"]

_SAME_SITE_VALUES = frozenset({"lax", "strict", "none"})

_COOKIE_KEYS: Mapping[str, str] = MappingProxyType(
    {
        "name": "name",
        "minutes": "minutes",
        "path": "path",
        "domain": "domain",
        "secure": "secure",
        "httpOnly": "http_only",
        "http_only": "http_only",
        "sameSite": "same_site",
        "same_site": "same_site",
    }
)

_CONFIG_KEYS: Mapping[str, str] = MappingProxyType(
    {
        "locale": "default_locale",
        "defaultLocale": "default_locale",
        "supportedLocales": "supported_locales",
        "localesMapping": "locales_mapping",
        "localesOrder": "locales_order",
        "hideDefaultLocaleInURL": "hide_default_locale_in_url",
        "useAcceptLanguageHeader": "use_accept_language_header",
        "autoDetectLocale": "auto_detect_locale",
        "detectionOrder": "detection_order",
        "localeSessionKey": "session_key",
        "localeCookie": "cookie",
        "translatedRoutes": "route_keys",
        "utf8suffix": "utf8_suffix",
    }
)


def _rename_keys(data: Mapping[str, Any], aliases: Mapping[str, str], names: set[str]) -> dict[str, Any]:
    """Map camelCase keys to field names; unknown keys are ignored."""
    renamed: dict[str, Any] = {}
    for key, value in data.items():
        name = aliases.get(key, key)
        if name in names:
            renamed[name] = value
    return renamed


@dataclass(frozen=True, slots=True)
class CookieConfig:
    """Settings of the cookie remembering a user's locale.

    Attributes:
        name: Cookie name (default: 'locale')
        minutes: Lifetime in minutes (default: one year)
        path: Cookie path
        domain: Cookie domain (None: current host only)
        secure: Send over HTTPS only
        http_only: Hide from JavaScript
        same_site: SameSite policy ('lax', 'strict', 'none' or None)
    """

    name: str = DEFAULT_COOKIE_NAME
    minutes: int = DEFAULT_COOKIE_MINUTES
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    http_only: bool = False
    same_site: SameSite | None = "lax"

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If name is empty, minutes is negative, or same_site is
                not a known policy
        """
        if not self.name:
            msg = "cookie name must not be empty"
            raise ValueError(msg)
        if self.minutes < 0:
            msg = "cookie minutes must not be negative"
            raise ValueError(msg)
        if self.same_site is not None and self.same_site not in _SAME_SITE_VALUES:
            msg = f"same_site must be one of lax, strict, none, got: '{self.same_site}'"
            raise ValueError(msg)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CookieConfig:
        """Build from a mapping with camelCase or snake_case keys."""
        values = _rename_keys(data, _COOKIE_KEYS, {f.name for f in fields(cls)})
        if isinstance(values.get("same_site"), str):
            values["same_site"] = values["same_site"].lower()
        return cls(**values)


@dataclass(frozen=True, slots=True)
class LocaleCookie:
    """A locale cookie ready to be attached to a response.

    Attributes:
        name: Cookie name
        value: Locale code
        max_age: Lifetime in seconds
        path: Cookie path
        domain: Cookie domain or None
        secure: Secure flag
        http_only: HttpOnly flag
        same_site: SameSite policy or None
    """

    name: str
    value: LocaleCode
    max_age: int
    path: str
    domain: str | None
    secure: bool
    http_only: bool
    same_site: SameSite | None


@dataclass(frozen=True, slots=True)
class LocalizationConfig:
    """Immutable localization configuration.

    Example:
        >>> config = LocalizationConfig.from_mapping({
        ...     "locale": "en",
        ...     "supportedLocales": {"en": {"name": "English"}, "es": {"name": "Spanish"}},
        ...     "hideDefaultLocaleInURL": True,
        ... })
        >>> config.hide_default_locale_in_url
        True
        >>> config.build_registry().codes
        ('en', 'es')

    Attributes:
        default_locale: Locale used when nothing else applies
        supported_locales: Code -> metadata mapping (name, native, script, dir, regional)
        locales_mapping: Alias -> canonical code
        locales_order: Display order for language selectors
        hide_default_locale_in_url: Omit the locale segment for the default locale
        use_accept_language_header: Negotiate from Accept-Language when no
            other source names a locale
        auto_detect_locale: Redirect requests to their canonical localized URL
        detection_order: Sources consulted, in order, to find a request's locale
        session_key: Session key holding the stored preference
        cookie: Locale cookie settings
        route_keys: Translated route keys considered when matching paths
        utf8_suffix: Suffix appended to regional codes for POSIX locale names
    """

    default_locale: LocaleCode
    supported_locales: Mapping[LocaleCode, Mapping[str, Any] | LocaleDescriptor]
    locales_mapping: Mapping[LocaleCode, LocaleCode] = field(default_factory=dict)
    locales_order: tuple[LocaleCode, ...] = ()
    hide_default_locale_in_url: bool = False
    use_accept_language_header: bool = True
    auto_detect_locale: bool = True
    detection_order: tuple[LocaleSource, ...] = DEFAULT_DETECTION_ORDER
    session_key: str = DEFAULT_SESSION_KEY
    cookie: CookieConfig = field(default_factory=CookieConfig)
    route_keys: tuple[RouteKey, ...] = ()
    utf8_suffix: str = DEFAULT_UTF8_SUFFIX

    def __post_init__(self) -> None:
        """Validate and freeze configuration values.

        Raises:
            ConfigurationError: If no locales are configured, an entry is not
                a mapping, the default locale is not among them, or the
                detection order names an unknown source
        """
        if not self.supported_locales:
            raise ConfigurationError(
                ErrorTemplate.no_supported_locales(),
                ConfigurationIssue.NO_SUPPORTED_LOCALES,
            )
        if self.default_locale not in self.supported_locales:
            raise ConfigurationError(
                ErrorTemplate.unsupported_default_locale(self.default_locale),
                ConfigurationIssue.UNSUPPORTED_DEFAULT_LOCALE,
            )

        supported: dict[LocaleCode, Mapping[str, Any] | LocaleDescriptor] = {}
        for code, metadata in self.supported_locales.items():
            match metadata:
                case LocaleDescriptor():
                    supported[code] = metadata
                case None:
                    supported[code] = MappingProxyType({})
                case Mapping():
                    supported[code] = MappingProxyType(dict(metadata))
                case _:
                    raise ConfigurationError(
                        ErrorTemplate.invalid_locale_entry(
                            code, f"expected a mapping, got {type(metadata).__name__}"
                        ),
                        ConfigurationIssue.INVALID_LOCALE_ENTRY,
                    )
        object.__setattr__(self, "supported_locales", MappingProxyType(supported))
        object.__setattr__(self, "locales_mapping", MappingProxyType(dict(self.locales_mapping)))
        object.__setattr__(self, "locales_order", tuple(self.locales_order))
        object.__setattr__(self, "route_keys", tuple(self.route_keys))
        object.__setattr__(self, "detection_order", self._coerce_detection_order(self.detection_order))
        if isinstance(self.cookie, Mapping):
            object.__setattr__(self, "cookie", CookieConfig.from_mapping(self.cookie))

    @staticmethod
    def _coerce_detection_order(order: Iterable[LocaleSource | str]) -> tuple[LocaleSource, ...]:
        sources: list[LocaleSource] = []
        for entry in order:
            try:
                source = LocaleSource(entry)
            except ValueError:
                source = None
            if source is None or source not in _DETECTABLE_SOURCES:
                raise ConfigurationError(
                    ErrorTemplate.invalid_detection_order(str(entry)),
                    ConfigurationIssue.INVALID_DETECTION_ORDER,
                )
            sources.append(source)
        return tuple(dict.fromkeys(sources))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LocalizationConfig:
        """Build from a settings mapping (camelCase or snake_case keys).

        Unknown keys are ignored so one settings file can carry unrelated
        options.

        Raises:
            ConfigurationError: If required values are missing or invalid
        """
        values = _rename_keys(data, _CONFIG_KEYS, {f.name for f in fields(cls)})
        if "supported_locales" not in values:
            raise ConfigurationError(
                ErrorTemplate.no_supported_locales(),
                ConfigurationIssue.NO_SUPPORTED_LOCALES,
            )
        values.setdefault("default_locale", next(iter(values["supported_locales"]), ""))
        if isinstance(values.get("cookie"), Mapping):
            values["cookie"] = CookieConfig.from_mapping(values["cookie"])
        for key in ("locales_order", "route_keys", "detection_order"):
            if key in values:
                values[key] = tuple(values[key])
        return cls(**values)

    def build_registry(self) -> LocaleRegistry:
        """Build the immutable LocaleRegistry for this configuration."""
        return LocaleRegistry.load(
            self.default_locale,
            self.supported_locales,
            self.locales_mapping,
            self.locales_order,
        )
