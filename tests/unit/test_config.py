"""
Unit tests for conversion settings.
"""

import pytest

from yardsig.converter.config import VALID_MODES, Configuration, Dialect
from yardsig.utils.errors import ConfigurationError


class TestConfiguration:
    """Tests for Configuration."""

    def test_defaults(self):
        config = Configuration()
        assert config.output_language == Dialect.RBI
        assert not config.replace_errors_with_untyped
        assert not config.replace_unresolved_with_untyped

    @pytest.mark.parametrize(
        "mode, dialect",
        [("rbi", Dialect.RBI), ("rbs", Dialect.RBS), ("RBS", Dialect.RBS)],
    )
    def test_for_mode(self, mode, dialect):
        assert Configuration.for_mode(mode).output_language == dialect

    def test_for_mode_options(self):
        config = Configuration.for_mode("rbs", replace_errors_with_untyped=True)
        assert config.replace_errors_with_untyped
        assert not config.replace_unresolved_with_untyped

    def test_invalid_mode(self):
        """Test that unknown modes are rejected with the valid choices."""
        with pytest.raises(ConfigurationError, match="expected one of: rbi, rbs"):
            Configuration.for_mode("sorbet")

    def test_valid_modes(self):
        assert VALID_MODES == ("rbi", "rbs")

    def test_frozen(self):
        with pytest.raises(AttributeError):
            Configuration().replace_errors_with_untyped = True
