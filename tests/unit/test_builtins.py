"""
Unit tests for the built-in Ruby class table.
"""

import pytest

from yardsig.resolver.builtins import (
    DEFAULT_RUBY_VERSION,
    BuiltinClass,
    builtin_classes,
    parse_ruby_version,
)


class TestBuiltinClasses:
    """Tests for builtin_classes()."""

    def test_core_classes(self):
        """Test that everyday classes are present in every version."""
        for version in [(2, 7), (3, 0), (3, 3)]:
            assert {"String", "Integer", "Hash", "Array", "IO"} <= builtin_classes(version)

    def test_default_version(self):
        assert builtin_classes() == builtin_classes(DEFAULT_RUBY_VERSION)

    @pytest.mark.parametrize(
        "version, present",
        [
            ((2, 7), True),
            ((3, 0), False),
            ((3, 3), False),
        ],
    )
    def test_sorted_set(self, version, present):
        """Test that SortedSet is gone from 3.0 on."""
        assert ("SortedSet" in builtin_classes(version)) is present

    @pytest.mark.parametrize("name", ["Fixnum", "Bignum"])
    def test_integer_aliases(self, name):
        """Test that Fixnum and Bignum are gone from 3.2 on."""
        assert name in builtin_classes((3, 1))
        assert name not in builtin_classes((3, 2))

    @pytest.mark.parametrize(
        "version, present",
        [
            ((2, 7), True),
            ((3, 0), False),
            ((3, 1), False),
            ((3, 2), True),
        ],
    )
    def test_data(self, version, present):
        """Test that Data disappears in 3.0 and returns in 3.2."""
        assert ("Data" in builtin_classes(version)) is present

    def test_ractor(self):
        """Test that classes added later are absent before."""
        assert "Ractor" not in builtin_classes((2, 7))
        assert "Ractor" in builtin_classes((3, 0))

    def test_available_in(self):
        entry = BuiltinClass("Thing", since=(3, 0), removed=(3, 2))
        assert not entry.available_in((2, 7))
        assert entry.available_in((3, 1))
        assert not entry.available_in((3, 2))


class TestParseRubyVersion:
    """Tests for parse_ruby_version()."""

    @pytest.mark.parametrize(
        "text, expected",
        [("3.2", (3, 2)), ("3.2.1", (3, 2)), ("3", (3, 0)), (" 2.7 ", (2, 7))],
    )
    def test_valid(self, text, expected):
        assert parse_ruby_version(text) == expected

    @pytest.mark.parametrize("text", ["", "three", "3.x"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_ruby_version(text)
