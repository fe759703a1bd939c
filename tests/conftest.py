"""Pytest configuration for the langroute test suite.

Single Source of Truth for Hypothesis max_examples:
- dev: Local development with 500 examples (thorough property testing)
- ci: GitHub Actions with 50 examples (fast CI feedback)
- verbose: Debug mode with progress output (100 examples)

Profile auto-detection:
- CI=true environment variable -> "ci" profile (GitHub Actions sets this)
- HYPOTHESIS_PROFILE env var -> explicit override
- Otherwise -> "dev" profile (local development)

Override manually: HYPOTHESIS_PROFILE=verbose pytest tests/

Fuzzing Test Separation:
Tests marked with @pytest.mark.fuzz are excluded from normal test runs.
Run them via: pytest -m fuzz
"""

import pytest
from hypothesis import Phase, Verbosity, settings

from langroute.localization import (
    LocaleRegistry,
    LocalizationConfig,
    MappingTranslations,
    StaticUrlBuilder,
    UrlLocalizer,
)

from tests.helpers.site_config import BASE_URL, ROUTE_KEYS, ROUTES, SUPPORTED_LOCALES

# =============================================================================
# HYPOTHESIS PROFILES - SINGLE SOURCE OF TRUTH
# =============================================================================

# Development profile: thorough local testing (500 examples, silent)
settings.register_profile(
    "dev",
    max_examples=500,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
)

# CI profile: fast feedback for GitHub Actions (50 examples)
settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
)

# Verbose profile: debug mode with progress visibility (100 examples)
settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    verbosity=Verbosity.verbose,
)


# =============================================================================
# AUTO-DETECT EXECUTION CONTEXT
# =============================================================================


def _detect_profile() -> str:
    """Detect appropriate Hypothesis profile based on execution context.

    Priority:
    1. HYPOTHESIS_PROFILE env var (explicit override)
    2. CI=true env var (GitHub Actions auto-detection)
    3. Default to "dev" (local development)
    """
    import os

    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit

    if os.environ.get("CI") == "true":
        return "ci"

    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# FUZZING TEST SEPARATION
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register the 'fuzz' marker for intensive property tests."""
    config.addinivalue_line(
        "markers",
        "fuzz: Intensive property tests for fuzzing (excluded from normal test runs)",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip fuzz-marked tests unless explicitly requested.

    Behavior:
    - Normal test run (pytest tests/): Fuzz tests are SKIPPED
    - Explicit fuzz run (pytest -m fuzz): Fuzz tests run
    """
    marker_expr = config.getoption("-m", default="")
    if "fuzz" in str(marker_expr):
        return

    skip_fuzz = pytest.mark.skip(reason="Fuzzing test - run with: pytest -m fuzz")
    for item in items:
        if "fuzz" in item.keywords:
            item.add_marker(skip_fuzz)


# =============================================================================
# SHARED FIXTURES
# =============================================================================


@pytest.fixture
def registry() -> LocaleRegistry:
    """Registry with en (default), fr, es in that order."""
    return LocaleRegistry.load("en", SUPPORTED_LOCALES)


@pytest.fixture
def translations() -> MappingTranslations:
    return MappingTranslations(ROUTES)


@pytest.fixture
def url_builder() -> StaticUrlBuilder:
    return StaticUrlBuilder(BASE_URL)


@pytest.fixture
def localizer(
    registry: LocaleRegistry,
    url_builder: StaticUrlBuilder,
    translations: MappingTranslations,
) -> UrlLocalizer:
    """Localizer showing every locale segment."""
    return UrlLocalizer(
        registry,
        url_builder,
        translations,
        route_keys=ROUTE_KEYS,
    )


@pytest.fixture
def hiding_localizer(
    registry: LocaleRegistry,
    url_builder: StaticUrlBuilder,
    translations: MappingTranslations,
) -> UrlLocalizer:
    """Localizer hiding the default locale segment."""
    return UrlLocalizer(
        registry,
        url_builder,
        translations,
        hide_default_locale_in_url=True,
        route_keys=ROUTE_KEYS,
    )


@pytest.fixture
def config() -> LocalizationConfig:
    return LocalizationConfig.from_mapping(
        {
            "locale": "en",
            "supportedLocales": SUPPORTED_LOCALES,
            "translatedRoutes": list(ROUTE_KEYS),
        }
    )
