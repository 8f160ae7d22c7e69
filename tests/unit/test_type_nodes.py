"""
Unit tests for type nodes and their rendering.
"""

import pytest

from yardsig.converter.config import Dialect
from yardsig.converter.type_nodes import (
    Boolean,
    ErrorPlaceholder,
    GenericInstance,
    Nilable,
    Raw,
    SelfType,
    Tuple,
    Union,
    Untyped,
    array_of,
    class_of,
    hash_of,
    nilable,
    to_type,
    union,
)


class TestEquality:
    """Tests for structural equality."""

    def test_strings_become_raw(self):
        """Test that strings given as members are treated as Raw names."""
        assert Union(["String", "Integer"]) == Union([Raw("String"), Raw("Integer")])
        assert Nilable("String") == Nilable(Raw("String"))
        assert array_of("String") == GenericInstance("Array", (Raw("String"),))

    def test_hashable(self):
        """Test that equal nodes deduplicate in sets."""
        nodes = {hash_of("String", "Symbol"), hash_of("String", "Symbol"), Untyped()}
        assert len(nodes) == 2

    def test_to_type_rejects_other_values(self):
        """Test that only nodes and strings are accepted."""
        with pytest.raises(TypeError):
            to_type(42)


class TestConstructors:
    """Tests for the helper constructors."""

    def test_union_flattens_and_deduplicates(self):
        """Test that nested unions are merged and repeats dropped."""
        inner = Union(["Integer", "Float"])
        assert Union(["String", inner, "Integer"]).members == (
            Raw("String"),
            Raw("Integer"),
            Raw("Float"),
        )

    def test_union_collapses_single_member(self):
        """Test that a union of one type is that type."""
        assert union(["String", "String"]) == Raw("String")

    @pytest.mark.parametrize(
        "members", [[], ["String"], ["String", "String"], ["String", Raw("String")]]
    )
    def test_union_needs_two_distinct_members(self, members):
        """Test that a Union which would hold fewer than two types is rejected."""
        with pytest.raises(ValueError, match="at least two distinct members"):
            Union(members)

    def test_union_of_nested_union_alone(self):
        """Test that union() unwraps a single nested union instead of rejecting it."""
        inner = Union(["Integer", "Float"])
        assert union([inner, "Integer"]) == inner

    def test_union_of_nothing(self):
        with pytest.raises(ValueError):
            union([])

    def test_nilable_wraps_once(self):
        """Test that nilable doesn't nest."""
        assert nilable(nilable("String")) == Nilable("String")

    def test_nilable_untyped(self):
        """Test that untyped is never wrapped."""
        assert nilable(Untyped()) == Untyped()


class TestRbiRendering:
    """Tests for rendering as Sorbet RBI."""

    @pytest.mark.parametrize(
        "node, expected",
        [
            (Untyped(), "T.untyped"),
            (Boolean(), "T::Boolean"),
            (SelfType(), "T.self_type"),
            (Raw("Foo::Bar"), "Foo::Bar"),
            (Nilable("String"), "T.nilable(String)"),
            (Union(["String", "Integer"]), "T.any(String, Integer)"),
            (array_of("String"), "T::Array[String]"),
            (hash_of("Symbol", Nilable("Integer")), "T::Hash[Symbol, T.nilable(Integer)]"),
            (class_of("String"), "T.class_of(String)"),
            (GenericInstance(Raw("Wrapper"), ["String"]), "Wrapper[String]"),
            (Tuple(["String", Boolean()]), "[String, T::Boolean]"),
            (ErrorPlaceholder("foo&bar"), "YARDSIG_ERROR_foobar"),
        ],
    )
    def test_render(self, node, expected):
        """Test the RBI form of each node."""
        assert node.to_rbi() == expected
        assert node.render(Dialect.RBI) == expected


class TestRbsRendering:
    """Tests for rendering as RBS."""

    @pytest.mark.parametrize(
        "node, expected",
        [
            (Untyped(), "untyped"),
            (Boolean(), "bool"),
            (SelfType(), "self"),
            (Nilable("String"), "String?"),
            (Union(["String", "Integer"]), "(String | Integer)"),
            (array_of("String"), "Array[String]"),
            (hash_of("Symbol", "Integer"), "Hash[Symbol, Integer]"),
            (class_of("String"), "singleton(String)"),
            (GenericInstance(Raw("Wrapper"), ["String"]), "Wrapper[String]"),
            (Tuple(["String", "Integer"]), "[String, Integer]"),
        ],
    )
    def test_render(self, node, expected):
        """Test the RBS form of each node."""
        assert node.to_rbs() == expected
        assert node.render(Dialect.RBS) == expected


class TestDescribe:
    """Tests for human-readable descriptions."""

    def test_describe(self):
        assert array_of(Untyped()).describe() == "Array<untyped>"
        assert Nilable(Union(["A", "B"])).describe() == "?(A or B)"
        assert str(hash_of("K", "V")) == "Hash<K, V>"

    def test_error_placeholder_identifier(self):
        """Test that non-identifier characters are stripped."""
        placeholder = ErrorPlaceholder("Hash{String, Symbol")
        assert placeholder.identifier == "HashStringSymbol"
        assert placeholder.name == "YARDSIG_ERROR_HashStringSymbol"
