"""Accept-Language negotiation against the supported-locale registry.

Parses an HTTP ``Accept-Language`` header into ranked candidates and picks
the best supported locale.

Algorithm:
    1. Split the header into entries; each entry's quality comes from its
       ``q=`` parameter, or defaults to 1.0 (0.01 for ``*/*``, 0.02 for ``*``
       and ``x/*``). Malformed ``q=`` values count as absent.
    2. A region-qualified tag (``en-US``) also yields its primary subtag
       (``en``) at the same quality, unless ``en`` is listed explicitly.
    3. Candidates are sorted by quality, highest first; ties keep header order.
    4. Each candidate is alias-resolved and matched exactly against supported
       codes, then against each locale's canonicalized regional code and
       language tag.
    5. A ``*`` entry accepts the first configured locale.
    6. An optional LocaleMatcher gets one extra best-effort pass.
    7. A remote host's top-level label (``*.fr``) is tried last.
    8. Otherwise the default locale.

Negotiation never raises: missing headers, malformed entries and no-match
conditions all degrade to the default locale.

Python 3.13+. Babel is optional (BabelLocaleMatcher).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from langroute.constants import (
    DEFAULT_QUALITY,
    WILDCARD_ALL_QUALITY,
    WILDCARD_SUBTYPE_QUALITY,
    WILDCARD_TAG,
)
from langroute.core.babel_compat import get_babel_negotiate
from langroute.locale_utils import canonicalize_locale, primary_subtag

if TYPE_CHECKING:
    from langroute.localization.registry import LocaleRegistry
    from langroute.localization.types import LocaleCode

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Parsing
    "AcceptLanguageEntry",
    "parse_accept_language",
    # Optional matching capability
    "LocaleMatcher",
    "NullLocaleMatcher",
    "BabelLocaleMatcher",
    # Negotiation
    "LanguageNegotiator",
    "negotiate",
]

logger = logging.getLogger(__name__)


# ============================================================================
# PARSING
# ============================================================================


@dataclass(frozen=True, slots=True)
class AcceptLanguageEntry:
    """One ranked candidate from an Accept-Language header.

    Attributes:
        tag: Language tag as written in the header (e.g., 'fr-FR', 'en', '*')
        quality: Quality factor in [0, 1]
        derived: True for a primary subtag added on behalf of a region-qualified tag
    """

    tag: str
    quality: float
    derived: bool = False


def _default_quality(tag: str) -> float:
    if tag == "*/*":
        return WILDCARD_ALL_QUALITY
    if tag == WILDCARD_TAG or "/*" in tag:
        return WILDCARD_SUBTYPE_QUALITY
    return DEFAULT_QUALITY


def _parse_quality(params: Sequence[str]) -> float | None:
    """Return the q= value of an entry, or None when absent or malformed."""
    for param in params:
        name, sep, value = param.partition("=")
        if not sep or name.strip().lower() != "q":
            continue
        try:
            quality = float(value.strip())
        except ValueError:
            return None
        if not math.isfinite(quality) or not 0.0 <= quality <= 1.0:
            return None
        return quality
    return None


def parse_accept_language(header: str | None) -> tuple[AcceptLanguageEntry, ...]:
    """Parse an Accept-Language header into candidates, best first.

    A tag listed twice keeps its first position and its last quality.

    Args:
        header: Raw header value (None or empty yields no candidates)

    Returns:
        Candidates sorted by descending quality (stable)

    Example:
        >>> [e.tag for e in parse_accept_language("fr-FR,fr;q=0.9,en;q=0.8")]
        ['fr-FR', 'fr', 'en']
        >>> parse_accept_language("de-AT")[1]
        AcceptLanguageEntry(tag='de', quality=1.0, derived=True)
    """
    if not header:
        return ()

    explicit: dict[str, float] = {}
    generic: dict[str, float] = {}

    for option in header.split(","):
        parts = [part.strip() for part in option.split(";")]
        tag = parts[0]
        if not tag:
            continue

        quality = _parse_quality(parts[1:])
        if quality is None:
            quality = _default_quality(tag)

        primary = primary_subtag(tag)
        if primary and primary != tag and (primary not in generic or generic[primary] < quality):
            generic[primary] = quality

        explicit[tag] = quality

    entries = [AcceptLanguageEntry(tag, quality) for tag, quality in explicit.items()]
    entries.extend(
        AcceptLanguageEntry(tag, quality, derived=True)
        for tag, quality in generic.items()
        if tag not in explicit
    )
    entries.sort(key=lambda entry: entry.quality, reverse=True)
    return tuple(entries)


# ============================================================================
# OPTIONAL MATCHING CAPABILITY
# ============================================================================


class LocaleMatcher(Protocol):
    """Extra best-effort matching pass run after the built-in algorithm.

    Implementations receive the raw header and the supported codes and return
    a candidate code (any case) or None. Exceptions are logged and ignored.
    """

    def match(self, accept_language: str, available: Sequence[LocaleCode]) -> str | None:
        """Return the best available code for the header, or None."""


class NullLocaleMatcher:
    """LocaleMatcher that never matches (the default)."""

    __slots__ = ()

    def match(self, accept_language: str, available: Sequence[LocaleCode]) -> str | None:  # noqa: ARG002
        return None


class BabelLocaleMatcher:
    """LocaleMatcher backed by Babel's ``negotiate_locale``.

    Applies Babel's CLDR-derived aliases ('no' -> 'nb_NO') and
    case-insensitive comparison on top of the built-in algorithm.

    Raises:
        BabelImportError: At construction if Babel is not installed
    """

    __slots__ = ("_negotiate",)

    def __init__(self) -> None:
        self._negotiate = get_babel_negotiate()

    def match(self, accept_language: str, available: Sequence[LocaleCode]) -> str | None:
        preferred = [
            entry.tag
            for entry in parse_accept_language(accept_language)
            if entry.tag != WILDCARD_TAG and "/" not in entry.tag
        ]
        return self._negotiate(preferred, [code.replace("_", "-") for code in available], sep="-")


# ============================================================================
# NEGOTIATION
# ============================================================================


class LanguageNegotiator:
    """Select the best supported locale for an Accept-Language header.

    Pure function of its inputs and the (immutable) registry: no I/O, no
    shared mutable state. One instance can serve every request.

    Example:
        >>> negotiator = LanguageNegotiator(registry)
        >>> negotiator.negotiate("fr-FR,fr;q=0.9,en;q=0.8")
        'fr'
        >>> negotiator.negotiate(None) == registry.default_locale
        True
    """

    __slots__ = ("_candidates", "_matcher", "_registry")

    def __init__(self, registry: LocaleRegistry, matcher: LocaleMatcher | None = None) -> None:
        """Initialize the negotiator.

        Args:
            registry: Supported locales, default locale and aliases
            matcher: Optional extra matching pass (default: NullLocaleMatcher)
        """
        self._registry = registry
        self._matcher: LocaleMatcher = matcher if matcher is not None else NullLocaleMatcher()
        # (code, canonical language tag, canonical regional code) per locale
        self._candidates: tuple[tuple[LocaleCode, str, str], ...] = tuple(
            (
                code,
                canonicalize_locale(descriptor.language_tag),
                canonicalize_locale(descriptor.regional),
            )
            for code, descriptor in registry.supported.items()
        )

    @property
    def registry(self) -> LocaleRegistry:
        return self._registry

    def negotiate(self, accept_language: str | None, remote_host: str | None = None) -> LocaleCode:
        """Return the best supported locale for the header.

        Args:
            accept_language: Raw Accept-Language header value
            remote_host: Client host name for the legacy top-level-label fallback

        Returns:
            A supported locale code; the default locale when nothing matches
        """
        default = self._registry.default_locale
        if not accept_language or not accept_language.strip():
            logger.debug("No Accept-Language header, using default locale %s", default)
            return default

        entries = parse_accept_language(accept_language)
        for entry in entries:
            matched = self._match_tag(entry.tag)
            if matched is not None:
                logger.debug(
                    "Accept-Language candidate '%s' (q=%s) matched locale %s",
                    entry.tag,
                    entry.quality,
                    matched,
                )
                return matched

        if any(entry.tag == WILDCARD_TAG for entry in entries):
            first = self._registry.codes[0]
            logger.debug("Accept-Language wildcard matched first configured locale %s", first)
            return first

        matched = self._match_with_matcher(accept_language)
        if matched is not None:
            return matched

        if remote_host:
            label = remote_host.rsplit(".", 1)[-1].lower()
            matched = self._registry.canonical(label)
            if matched is not None:
                logger.debug("Remote host '%s' matched locale %s", remote_host, matched)
                return matched

        logger.debug("No Accept-Language match for %r, using default locale %s", accept_language, default)
        return default

    def best_match(self, language: str) -> LocaleCode | None:
        """Return ``language`` if supported, else its supported primary subtag, else None."""
        canonical = self._registry.canonical(language)
        if canonical is not None:
            return canonical
        primary = primary_subtag(language)
        if primary != language:
            return self._registry.canonical(primary)
        return None

    def _match_tag(self, tag: str) -> LocaleCode | None:
        key = self._registry.resolve_alias(tag)
        if key in self._registry.supported:
            return key

        canonical = canonicalize_locale(key)
        if not canonical:
            return None
        for code, language_tag, regional in self._candidates:
            if (regional and regional == canonical) or language_tag == canonical:
                return code
        return None

    def _match_with_matcher(self, accept_language: str) -> LocaleCode | None:
        codes = self._registry.codes
        try:
            candidate = self._matcher.match(accept_language, codes)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.warning("Locale matcher %s failed: %s", type(self._matcher).__name__, exc)
            return None
        if not candidate:
            return None

        wanted = canonicalize_locale(candidate)
        for code in codes:
            if canonicalize_locale(code) == wanted:
                logger.debug("Locale matcher matched locale %s", code)
                return code
        return None


def negotiate(
    accept_language: str | None,
    registry: LocaleRegistry,
    matcher: LocaleMatcher | None = None,
    remote_host: str | None = None,
) -> LocaleCode:
    """Negotiate a locale without keeping a LanguageNegotiator around.

    Example:
        >>> negotiate("*", registry)
        'en'
    """
    return LanguageNegotiator(registry, matcher).negotiate(accept_language, remote_host)
