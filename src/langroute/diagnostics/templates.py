"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode

__all__ = ["ErrorTemplate"]


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors.
    Each template documents one error case and returns its Diagnostic.
    """

    @staticmethod
    def unsupported_default_locale(locale_code: str) -> Diagnostic:
        """Default locale missing from the supported set.

        Args:
            locale_code: The configured default locale

        Returns:
            Diagnostic for UNSUPPORTED_DEFAULT_LOCALE
        """
        msg = f"Default locale '{locale_code}' is not in the supported locales"
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_DEFAULT_LOCALE,
            message=msg,
            hint="Add the default locale to supported_locales or change default_locale",
            locale_code=locale_code,
        )

    @staticmethod
    def no_supported_locales() -> Diagnostic:
        """Supported locale set is empty.

        Returns:
            Diagnostic for NO_SUPPORTED_LOCALES
        """
        return Diagnostic(
            code=DiagnosticCode.NO_SUPPORTED_LOCALES,
            message="Supported locales are not defined",
            hint="Configure at least one entry in supported_locales",
        )

    @staticmethod
    def invalid_locale_entry(locale_code: str, reason: str) -> Diagnostic:
        """A supported-locale entry cannot be turned into a descriptor.

        Args:
            locale_code: Key of the offending entry
            reason: What is wrong with it

        Returns:
            Diagnostic for INVALID_LOCALE_ENTRY
        """
        msg = f"Invalid configuration for locale '{locale_code}': {reason}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_LOCALE_ENTRY,
            message=msg,
            hint="Locale metadata must be a mapping of name, native, script, dir, regional",
            locale_code=locale_code,
        )

    @staticmethod
    def invalid_detection_order(entry: str) -> Diagnostic:
        """Unknown entry in the locale detection order.

        Args:
            entry: The unrecognized source name

        Returns:
            Diagnostic for INVALID_DETECTION_ORDER
        """
        msg = f"Unknown locale source '{entry}' in detection order"
        return Diagnostic(
            code=DiagnosticCode.INVALID_DETECTION_ORDER,
            message=msg,
            hint="Use url, session, cookie, environment or accept_language",
        )

    @staticmethod
    def unsupported_locale(locale_code: str) -> Diagnostic:
        """Locale requested for URL generation is not supported.

        Args:
            locale_code: The requested locale

        Returns:
            Diagnostic for UNSUPPORTED_LOCALE
        """
        msg = f"Locale '{locale_code}' is not supported"
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_LOCALE,
            message=msg,
            hint=f"Add '{locale_code}' to supported_locales or map it in locales_mapping",
            locale_code=locale_code,
        )
