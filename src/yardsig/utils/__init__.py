"""
yardsig Utilities Package.

Common utilities for error handling and diagnostics.
"""

from yardsig.utils.diagnostics import (
    ALL_KINDS,
    Diagnostic,
    DiagnosticKind,
    DiagnosticSink,
    parse_kinds,
)
from yardsig.utils.errors import (
    ConfigurationError,
    SignatureLoadError,
    YardSigError,
)

__all__ = [
    # Errors
    "YardSigError",
    "ConfigurationError",
    "SignatureLoadError",
    # Diagnostics
    "ALL_KINDS",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticSink",
    "parse_kinds",
]
