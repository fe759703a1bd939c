"""Per-request locale state.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from langroute.enums import LocaleSource
from langroute.localization.types import LocaleCode, RouteKey, Url

__all__ = ["RequestLocaleState"]


@dataclass(slots=True)
class RequestLocaleState:
    """Locale state owned by exactly one request.

    Created when the request's locale is resolved and discarded when the
    request ends. Never shared between requests, so it needs no locking.
    Replaces a process-wide "current locale" field.

    Attributes:
        current_locale: Supported locale code chosen for the request
        current_url: Absolute URL of the request (query string included)
        base_path: Application mount prefix ('' at the root)
        source: Where current_locale came from
        base_url_override: Base URL used instead of the URL builder's host
        active_route_name: Route key to localize against instead of current_url
    """

    current_locale: LocaleCode
    current_url: Url = ""
    base_path: str = ""
    source: LocaleSource = LocaleSource.DEFAULT
    base_url_override: str | None = None
    active_route_name: RouteKey | None = None

    def set_base_url(self, url: str) -> None:
        """Override the base URL for generated links (a trailing slash is added)."""
        self.base_url_override = url if url.endswith("/") else f"{url}/"

    def set_route_name(self, route_key: RouteKey | None) -> None:
        """Localize relative to ``route_key`` rather than the literal current URL."""
        self.active_route_name = route_key
