"""Type aliases for the localization domain.

Provides semantic type aliases used throughout the localization package
and by user code when annotating call sites.

Python 3.13+. Zero external dependencies.
"""

from typing import TypeAlias

__all__ = [
    "LocaleCode",
    "RouteAttributes",
    "RouteKey",
    "Url",
]

LocaleCode: TypeAlias = str
"""Locale identifier as configured or requested (e.g., 'en', 'es', 'en-us')."""

RouteKey: TypeAlias = str
"""Translation key naming a translated route (e.g., 'routes.products.show')."""

Url: TypeAlias = str
"""Absolute URL or bare path (e.g., 'https://example.com/es/products', '/products')."""

RouteAttributes: TypeAlias = dict[str, str]
"""Placeholder values substituted into translated routes ({'slug': 'shoes'})."""
