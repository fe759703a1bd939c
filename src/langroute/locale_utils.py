"""Locale utilities for tag normalization and Babel lookups.

Centralizes the locale-tag string handling used throughout the codebase:
BCP-47 to POSIX conversion, case canonicalization for tag comparison, and
primary-subtag extraction for Accept-Language candidates.

Python 3.13+.
"""

from __future__ import annotations

import functools
import re
from typing import TYPE_CHECKING

from langroute.constants import MAX_LOCALE_CACHE_SIZE
from langroute.core.babel_compat import require_babel

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "canonicalize_locale",
    "clear_locale_cache",
    "get_babel_locale",
    "normalize_locale",
    "primary_subtag",
]

_SUBTAG_SEPARATORS = re.compile(r"[-_]")


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to POSIX format for Babel.

    BCP-47 uses hyphens (en-US), while Babel/POSIX uses underscores (en_US).
    Case is left untouched; use canonicalize_locale() for comparisons.

    Args:
        locale_code: BCP-47 locale code (e.g., "en-US", "pt-BR")

    Returns:
        POSIX-formatted locale code (e.g., "en_US", "pt_BR")

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("en")
        'en'
    """
    return locale_code.replace("-", "_")


def canonicalize_locale(locale_code: str) -> str:
    """Canonicalize the case of a locale tag and join subtags with underscores.

    Language subtag lowercase, 4-letter script subtag title-case, 2-letter or
    3-digit region subtag uppercase, anything else lowercase. This makes
    "en-us", "EN_US" and "en_US" compare equal.

    Args:
        locale_code: Locale tag in BCP-47 or POSIX form

    Returns:
        Canonical POSIX-style tag

    Example:
        >>> canonicalize_locale("en-us")
        'en_US'
        >>> canonicalize_locale("ZH-hant-tw")
        'zh_Hant_TW'
        >>> canonicalize_locale("es-419")
        'es_419'
    """
    subtags = [part for part in _SUBTAG_SEPARATORS.split(locale_code.strip()) if part]
    if not subtags:
        return ""

    canonical = [subtags[0].lower()]
    for subtag in subtags[1:]:
        if len(subtag) == 4 and subtag.isalpha():
            canonical.append(subtag.title())
        elif (len(subtag) == 2 and subtag.isalpha()) or (len(subtag) == 3 and subtag.isdigit()):
            canonical.append(subtag.upper())
        else:
            canonical.append(subtag.lower())
    return "_".join(canonical)


def primary_subtag(locale_code: str) -> str:
    """Return the primary language subtag of a tag ("en-US" -> "en")."""
    return _SUBTAG_SEPARATORS.split(locale_code, maxsplit=1)[0]


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Parses the locale code once and caches the result.

    Thread-safe via lru_cache internal locking.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        BabelImportError: If Babel is not installed
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid

    Example:
        >>> locale = get_babel_locale("en-US")
        >>> locale.language
        'en'
        >>> locale.territory
        'US'
    """
    require_babel("get_babel_locale")
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def clear_locale_cache() -> None:
    """Clear the cached Babel Locale objects."""
    get_babel_locale.cache_clear()
