"""Diagnostic system for langroute errors.

Provides structured error diagnostics with codes and hints.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import ConfigurationError, LangRouteError, UnsupportedLocaleError
from .templates import ErrorTemplate

__all__ = [
    "ConfigurationError",
    "Diagnostic",
    "DiagnosticCode",
    "ErrorTemplate",
    "LangRouteError",
    "UnsupportedLocaleError",
]
