"""Supported-locale registry.

Holds the static localization configuration: the default locale, the ordered
set of supported locales with their metadata, and locale-code aliasing.

Key architectural decisions:
- Immutable after construction: frozen dataclass, read-only mapping proxies
- Fail-fast validation: an empty supported set or a default locale outside
  it raises ConfigurationError at startup, never on a request
- Lookups never raise: unknown codes resolve to themselves or to a fallback
  descriptor

Thread Safety:
    The registry is built once at process start and only read afterwards, so
    any number of request handlers may share it without synchronization.

Python 3.13+. Babel is optional (CLDR-derived descriptors).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from langroute.constants import FALLBACK_SCRIPT, RTL_SCRIPTS
from langroute.core.babel_compat import (
    get_likely_subtags,
    get_unknown_locale_error,
    is_babel_available,
)
from langroute.diagnostics import ConfigurationError, ErrorTemplate
from langroute.enums import ConfigurationIssue, TextDirection
from langroute.locale_utils import get_babel_locale
from langroute.localization.types import LocaleCode

__all__ = [
    "LocaleDescriptor",
    "LocaleRegistry",
    "direction_for_script",
]

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("name", "native", "script", "regional", "lang")


def direction_for_script(script: str) -> TextDirection:
    """Return the writing direction of an ISO 15924 script code.

    Example:
        >>> direction_for_script("Arab")
        <TextDirection.RTL: 'rtl'>
        >>> direction_for_script("Cyrl")
        <TextDirection.LTR: 'ltr'>
    """
    return TextDirection.RTL if script in RTL_SCRIPTS else TextDirection.LTR


@dataclass(frozen=True, slots=True)
class LocaleDescriptor:
    """Metadata for one supported locale.

    Immutable, thread-safe, hashable.

    Attributes:
        code: Locale code as used in URLs and configuration (e.g., 'en')
        name: Display name in English (e.g., 'Spanish')
        native: Name in the locale's own language (e.g., 'Español')
        script: ISO 15924 script code (e.g., 'Latn', 'Arab')
        direction: Text direction
        regional: Regional locale code for formatting (e.g., 'en_US'), may be empty
        lang: Explicit language tag used for negotiation; empty means ``code``
    """

    code: LocaleCode
    name: str
    native: str
    script: str = FALLBACK_SCRIPT
    direction: TextDirection = TextDirection.LTR
    regional: str = ""
    lang: str = ""

    @property
    def language_tag(self) -> str:
        """Language tag compared against Accept-Language candidates."""
        return self.lang or self.code

    @classmethod
    def fallback(cls, code: LocaleCode) -> LocaleDescriptor:
        """Descriptor used for codes without metadata: code as names, Latin, ltr."""
        return cls(code=code, name=code, native=code)

    @classmethod
    def from_mapping(cls, code: LocaleCode, data: Mapping[str, object]) -> LocaleDescriptor:
        """Build a descriptor from a configuration entry.

        Missing text fields default to the code itself (names) or to the
        fallback script. A missing ``dir`` is derived from the script.

        Args:
            code: Locale code (the configuration key)
            data: Mapping with optional name, native, script, dir, regional, lang

        Returns:
            LocaleDescriptor for the entry

        Raises:
            ConfigurationError: If a field has the wrong type or ``dir`` is not
                'ltr' or 'rtl'
        """
        for key in _TEXT_FIELDS:
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ConfigurationError(
                    ErrorTemplate.invalid_locale_entry(code, f"'{key}' must be a string"),
                    ConfigurationIssue.INVALID_LOCALE_ENTRY,
                )

        script = str(data.get("script") or FALLBACK_SCRIPT)
        raw_direction = data.get("dir") or data.get("direction")
        if raw_direction:
            try:
                direction = TextDirection(str(raw_direction).lower())
            except ValueError:
                raise ConfigurationError(
                    ErrorTemplate.invalid_locale_entry(
                        code, f"'dir' must be 'ltr' or 'rtl', got {raw_direction!r}"
                    ),
                    ConfigurationIssue.INVALID_LOCALE_ENTRY,
                ) from None
        else:
            direction = direction_for_script(script)

        return cls(
            code=code,
            name=str(data.get("name") or code),
            native=str(data.get("native") or data.get("name") or code),
            script=script,
            direction=direction,
            regional=str(data.get("regional") or ""),
            lang=str(data.get("lang") or ""),
        )

    @classmethod
    def from_babel(cls, code: LocaleCode) -> LocaleDescriptor:
        """Build a descriptor from Babel CLDR data.

        Script and territory missing from the code itself are filled in from
        the CLDR likely-subtags table, so 'ar' yields script 'Arab' and
        regional 'ar_EG'.

        Args:
            code: Locale code known to CLDR

        Returns:
            LocaleDescriptor with English and native display names

        Raises:
            BabelImportError: If Babel is not installed
            babel.core.UnknownLocaleError: If CLDR has no data for the code
            ValueError: If the code is not a valid locale identifier
        """
        babel_locale = get_babel_locale(code)
        script = babel_locale.script
        territory = babel_locale.territory

        if script is None or territory is None:
            likely = get_likely_subtags().get(babel_locale.language, "")
            for subtag in likely.split("_")[1:]:
                if len(subtag) == 4 and script is None:
                    script = subtag
                elif len(subtag) != 4 and territory is None:
                    territory = subtag

        script = script or FALLBACK_SCRIPT
        return cls(
            code=code,
            name=babel_locale.get_display_name("en") or code,
            native=babel_locale.get_display_name() or code,
            script=script,
            direction=TextDirection(babel_locale.text_direction),
            regional=f"{babel_locale.language}_{territory}" if territory else "",
        )


def _describe_from_cldr(code: LocaleCode) -> LocaleDescriptor:
    """Describe a locale configured without metadata, degrading to the fallback."""
    if not is_babel_available():
        logger.debug("No metadata for locale '%s' and Babel is not installed", code)
        return LocaleDescriptor.fallback(code)

    unknown_locale_error = get_unknown_locale_error()
    try:
        return LocaleDescriptor.from_babel(code)
    except (unknown_locale_error, ValueError) as e:
        logger.warning("No CLDR data for locale '%s': %s. Using fallback descriptor", code, e)
        return LocaleDescriptor.fallback(code)


@dataclass(frozen=True, slots=True)
class LocaleRegistry:
    """Immutable registry of supported locales, default locale and aliases.

    Use LocaleRegistry.load() to build one from configuration values. Direct
    construction takes ready-made descriptors and validates the same
    invariants.

    Alias semantics:
        ``aliases`` maps an alternate code to its canonical supported code
        ('en-us' -> 'en'). ``inverse_aliases`` is the flipped map; when several
        aliases share one canonical code, the alias configured LAST wins.

    Example:
        >>> registry = LocaleRegistry.load(
        ...     "en",
        ...     {"en": {"name": "English"}, "ar": {"name": "Arabic", "script": "Arab"}},
        ...     {"en-us": "en"},
        ... )
        >>> registry.is_supported("en-us")
        True
        >>> registry.describe("ar").direction
        <TextDirection.RTL: 'rtl'>

    Attributes:
        default_locale: Locale used when nothing else applies
        supported: Descriptors keyed by code, in configured order
        aliases: Alias -> canonical code
        locales_order: Preferred display order (may be partial)
        inverse_aliases: Canonical code -> alias (derived)
    """

    default_locale: LocaleCode
    supported: Mapping[LocaleCode, LocaleDescriptor]
    aliases: Mapping[LocaleCode, LocaleCode] = field(default_factory=dict)
    locales_order: tuple[LocaleCode, ...] = ()
    inverse_aliases: Mapping[LocaleCode, LocaleCode] = field(init=False)

    def __post_init__(self) -> None:
        """Validate invariants and freeze the mappings.

        Raises:
            ConfigurationError: If ``supported`` is empty or does not contain
                ``default_locale``
        """
        if not self.supported:
            raise ConfigurationError(
                ErrorTemplate.no_supported_locales(),
                ConfigurationIssue.NO_SUPPORTED_LOCALES,
            )
        if self.default_locale not in self.supported:
            raise ConfigurationError(
                ErrorTemplate.unsupported_default_locale(self.default_locale),
                ConfigurationIssue.UNSUPPORTED_DEFAULT_LOCALE,
            )

        aliases = dict(self.aliases)
        inverse: dict[LocaleCode, LocaleCode] = {}
        for alias, canonical in aliases.items():
            inverse[canonical] = alias

        object.__setattr__(self, "supported", MappingProxyType(dict(self.supported)))
        object.__setattr__(self, "aliases", MappingProxyType(aliases))
        object.__setattr__(self, "inverse_aliases", MappingProxyType(inverse))
        object.__setattr__(self, "locales_order", tuple(self.locales_order))

    @classmethod
    def load(
        cls,
        default_locale: LocaleCode,
        supported_locales: Mapping[LocaleCode, Mapping[str, object] | LocaleDescriptor | None]
        | Iterable[LocaleCode],
        alias_map: Mapping[LocaleCode, LocaleCode] | None = None,
        locales_order: Iterable[LocaleCode] | None = None,
    ) -> LocaleRegistry:
        """Build a registry from configuration values.

        Entries with empty metadata (or a plain iterable of codes) are
        described from Babel CLDR data when Babel is installed, otherwise
        with the fallback descriptor.

        Args:
            default_locale: Default locale code
            supported_locales: Code -> metadata mapping, or an iterable of codes
            alias_map: Alias -> canonical code mapping
            locales_order: Display order for language selectors

        Returns:
            Validated, immutable LocaleRegistry

        Raises:
            ConfigurationError: If the default locale is not supported, no
                locales are configured, or an entry is malformed
        """
        if isinstance(supported_locales, Mapping):
            entries = list(supported_locales.items())
        else:
            entries = [(code, None) for code in supported_locales]

        descriptors: dict[LocaleCode, LocaleDescriptor] = {}
        for code, metadata in entries:
            match metadata:
                case LocaleDescriptor():
                    descriptors[code] = metadata
                case None:
                    descriptors[code] = _describe_from_cldr(code)
                case Mapping() if not metadata:
                    descriptors[code] = _describe_from_cldr(code)
                case Mapping():
                    descriptors[code] = LocaleDescriptor.from_mapping(code, metadata)
                case _:
                    raise ConfigurationError(
                        ErrorTemplate.invalid_locale_entry(
                            code, f"expected a mapping, got {type(metadata).__name__}"
                        ),
                        ConfigurationIssue.INVALID_LOCALE_ENTRY,
                    )

        registry = cls(
            default_locale=default_locale,
            supported=descriptors,
            aliases=dict(alias_map or {}),
            locales_order=tuple(locales_order or ()),
        )
        logger.info(
            "Locale registry loaded: default=%s, supported=%s, aliases=%d",
            registry.default_locale,
            ",".join(registry.codes),
            len(registry.aliases),
        )
        return registry

    # ------------------------------------------------------------------
    # Membership and aliasing
    # ------------------------------------------------------------------

    @property
    def codes(self) -> tuple[LocaleCode, ...]:
        """Supported codes in configured (insertion) order."""
        return tuple(self.supported)

    def is_supported(self, code: LocaleCode) -> bool:
        """True if ``code`` or its alias-resolved canonical form is supported."""
        return code in self.supported or self.resolve_alias(code) in self.supported

    def resolve_alias(self, code: LocaleCode) -> LocaleCode:
        """Return the canonical code for an alias, or ``code`` unchanged."""
        return self.aliases.get(code, code)

    def resolve_inverse_alias(self, code: LocaleCode) -> LocaleCode:
        """Return the alias whose canonical target is ``code``, or ``code`` unchanged."""
        return self.inverse_aliases.get(code, code)

    def canonical(self, code: LocaleCode) -> LocaleCode | None:
        """Return the supported code ``code`` stands for, or None."""
        if code in self.supported:
            return code
        resolved = self.resolve_alias(code)
        return resolved if resolved in self.supported else None

    # ------------------------------------------------------------------
    # Descriptors
    # ------------------------------------------------------------------

    def describe(self, code: LocaleCode) -> LocaleDescriptor:
        """Return the descriptor for ``code`` (alias-aware) or a fallback. Never raises."""
        canonical = self.canonical(code)
        if canonical is None:
            return LocaleDescriptor.fallback(code)
        return self.supported[canonical]

    def name(self, code: LocaleCode) -> str:
        return self.describe(code).name

    def native(self, code: LocaleCode) -> str:
        return self.describe(code).native

    def script(self, code: LocaleCode) -> str:
        return self.describe(code).script

    def direction(self, code: LocaleCode) -> TextDirection:
        return self.describe(code).direction

    def regional(self, code: LocaleCode) -> str | None:
        """Regional code (e.g., 'es_ES') or None when not configured."""
        return self.describe(code).regional or None

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def ordered_codes(self) -> tuple[LocaleCode, ...]:
        """Codes in display order.

        Codes listed in ``locales_order`` come first (unknown entries are
        skipped), followed by the remaining codes in configured order.
        """
        listed = [code for code in dict.fromkeys(self.locales_order) if code in self.supported]
        rest = [code for code in self.supported if code not in listed]
        return (*listed, *rest)

    def supported_locales(
        self, exclude: LocaleCode | None = None
    ) -> Mapping[LocaleCode, LocaleDescriptor]:
        """Supported descriptors, optionally without one locale (e.g., the current one)."""
        if exclude is None:
            return self.supported
        excluded = self.canonical(exclude)
        return MappingProxyType(
            {code: descriptor for code, descriptor in self.supported.items() if code != excluded}
        )

    def is_multilingual(self) -> bool:
        """True when more than one locale is supported."""
        return len(self.supported) > 1
