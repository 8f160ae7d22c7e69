"""
Conversion settings.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from yardsig.utils.errors import ConfigurationError


class Dialect(Enum):
    """Signature language the converted types are destined for."""

    RBI = "rbi"
    RBS = "rbs"


VALID_MODES = tuple(dialect.value for dialect in Dialect)


@dataclass(frozen=True)
class Configuration:
    """
    Options affecting how annotations are converted.

    Attributes:
        output_language: Target dialect; RBS enables duck-type interfaces
        replace_errors_with_untyped: Use untyped instead of error constants
        replace_unresolved_with_untyped: Use untyped for names which can't be resolved
    """

    output_language: Dialect = Dialect.RBI
    replace_errors_with_untyped: bool = False
    replace_unresolved_with_untyped: bool = False

    @classmethod
    def for_mode(cls, mode: str, **options: bool) -> "Configuration":
        """
        Build a configuration from a mode name such as "rbi" or "rbs".

        Raises:
            ConfigurationError: If the mode is not recognised
        """
        try:
            dialect = Dialect(mode.lower())
        except ValueError:
            raise ConfigurationError(
                f"invalid mode {mode!r}, expected one of: {', '.join(VALID_MODES)}"
            ) from None
        return cls(output_language=dialect, **options)
