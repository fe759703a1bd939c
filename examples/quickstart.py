"""Quickstart example for langroute.

This example walks through the request lifecycle a framework middleware
performs: resolve the locale, redirect to the canonical URL, build language
selector links and remember the user's choice.

Note: Requests are plain RequestSnapshot values here. A real integration
implements RequestAccessor over its framework's request object.
"""

from langroute import NOT_FOUND, LocaleSession, LocalizationConfig
from langroute.localization import (
    MappingPreferenceStore,
    MappingTranslations,
    RequestSnapshot,
    StaticUrlBuilder,
)

config = LocalizationConfig.from_mapping(
    {
        "locale": "en",
        "supportedLocales": {
            "en": {"name": "English", "native": "English", "regional": "en_GB"},
            "es": {"name": "Spanish", "native": "Español", "regional": "es_ES"},
            "ar": {"name": "Arabic", "native": "العربية", "script": "Arab", "regional": "ar_EG"},
        },
        "localesMapping": {"castellano": "es"},
        "hideDefaultLocaleInURL": True,
        "translatedRoutes": ["routes.product"],
    }
)

translations = MappingTranslations(
    {
        "en": {"routes.product": "products/{slug}"},
        "es": {"routes.product": "productos/{slug}"},
        "ar": {"routes.product": "muntajat/{slug}"},
    }
)

session = LocaleSession.from_config(config, StaticUrlBuilder("https://shop.example.com"), translations)

# Example 1: Resolving a request's locale
print("=" * 50)
print("Example 1: Resolving the Request Locale")
print("=" * 50)

request = RequestSnapshot(
    "https://shop.example.com/es/productos/zapatos?color=red",
    headers={"Accept-Language": "ar-EG,ar;q=0.9,en;q=0.5"},
)
state = session.resolve(request)
print(state.current_locale, state.source)
# Output: es url

# Example 2: Canonical redirects
print("\n" + "=" * 50)
print("Example 2: Canonical Redirects")
print("=" * 50)

request = RequestSnapshot("https://shop.example.com/en/about")
state = session.resolve(request)
print(session.redirect_target(request, state))
# Output: https://shop.example.com/about

# Example 3: Language selector links
print("\n" + "=" * 50)
print("Example 3: Language Selector")
print("=" * 50)

request = RequestSnapshot("https://shop.example.com/es/productos/zapatos?color=red")
state = session.resolve(request)
for code, descriptor in session.registry.supported_locales(exclude=state.current_locale).items():
    print(f"{descriptor.native} ({descriptor.direction}): {session.urls.localize(code, state=state)}")
# Output:
# English (ltr): https://shop.example.com/products/zapatos?color=red
# العربية (rtl): https://shop.example.com/ar/muntajat/zapatos?color=red

# Example 4: Translated routes
print("\n" + "=" * 50)
print("Example 4: Translated Routes")
print("=" * 50)

print(session.urls.url_from_translated_route_name("castellano", "routes.product", {"slug": "botas"}))
# Output: https://shop.example.com/es/productos/botas

missing = session.urls.url_from_translated_route_name("en", "routes.unknown")
print(missing is NOT_FOUND)
# Output: True

# Example 5: Remembering the choice
print("\n" + "=" * 50)
print("Example 5: Session and Cookie")
print("=" * 50)

user_session: dict[str, str] = {}
session.set_locale(state, "ar")
session.remember(state, MappingPreferenceStore(user_session))
print(user_session)
# Output: {'locale': 'ar'}

cookie = session.locale_cookie(state.current_locale)
print(cookie.name, cookie.value, cookie.max_age)
# Output: locale ar 31536000

print(session.posix_locale(state))
# Output: ar_EG.UTF-8
