"""
Error types for yardsig.

Malformed type text never raises; these exceptions cover configuration
mistakes and unavailable signature sources.
"""

from pathlib import Path
from typing import Optional


class YardSigError(Exception):
    """Base exception for all yardsig errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(YardSigError):
    """Raised when an option has an invalid value (unknown mode, log kind, etc.)."""

    pass


class SignatureLoadError(YardSigError):
    """
    Raised when a dependency signature source cannot be read.

    The resolver catches this, reports a warning and carries on without the
    offending source.
    """

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.message} ({self.path})"
        return self.message
