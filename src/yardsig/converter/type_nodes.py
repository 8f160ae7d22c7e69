"""
Type nodes produced by the converter.

Every node is an immutable value with structural equality, so two conversions
of the same annotation compare equal and nodes can be deduplicated in sets.
Nodes render themselves in either signature dialect:

    Untyped                          T.untyped               untyped
    Boolean                          T::Boolean              bool
    SelfType                         T.self_type             self
    Raw("Foo")                       Foo                     Foo
    Nilable(Raw("Foo"))              T.nilable(Foo)          Foo?
    Union([Foo, Bar])                T.any(Foo, Bar)         (Foo | Bar)
    GenericInstance("Array", [Foo])  T::Array[Foo]           Array[Foo]
    GenericInstance("Class", [Foo])  T.class_of(Foo)         singleton(Foo)
    Tuple([Foo, Bar])                [Foo, Bar]              [Foo, Bar]
    ErrorPlaceholder("Foo Bar")      YARDSIG_ERROR_FooBar    YARDSIG_ERROR_FooBar

Strings given where a node is expected are treated as ``Raw`` names, which
keeps hand-written expected values in tests short.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable

from yardsig.converter.config import Dialect


# Prefix of the constant emitted in place of an unparseable annotation
ERROR_PREFIX = "YARDSIG_ERROR_"

# Built-in generic containers taking exactly one type argument
SINGLE_ARG_GENERIC_TYPES = ("Array", "Set", "Enumerable", "Enumerator", "Range")

# Every built-in generic container understood by both dialects
BUILTIN_GENERIC_TYPES = SINGLE_ARG_GENERIC_TYPES + ("Hash", "Class")

_NON_IDENTIFIER = re.compile(r"[^0-9A-Za-z_]")


class TypeNode(ABC):
    """Base class for all converted types."""

    @abstractmethod
    def describe(self) -> str:
        """Human-readable description, used in diagnostics."""
        pass

    @abstractmethod
    def to_rbi(self) -> str:
        """Render as a Sorbet type expression."""
        pass

    @abstractmethod
    def to_rbs(self) -> str:
        """Render as an RBS type expression."""
        pass

    def render(self, dialect: Dialect) -> str:
        """Render in the given dialect."""
        if dialect == Dialect.RBS:
            return self.to_rbs()
        return self.to_rbi()

    def __str__(self) -> str:
        return self.describe()


def to_type(value: TypeNode | str) -> TypeNode:
    """Coerce a string to a Raw node; nodes are returned unchanged."""
    if isinstance(value, TypeNode):
        return value
    if isinstance(value, str):
        return Raw(value)
    raise TypeError(f"expected a TypeNode or str, got {type(value).__name__}")


# =============================================================================
# Leaf Types
# =============================================================================


@dataclass(frozen=True)
class Untyped(TypeNode):
    """Unknown or unspecified type."""

    def describe(self) -> str:
        return "untyped"

    def to_rbi(self) -> str:
        return "T.untyped"

    def to_rbs(self) -> str:
        return "untyped"


@dataclass(frozen=True)
class Boolean(TypeNode):
    """Either true or false."""

    def describe(self) -> str:
        return "bool"

    def to_rbi(self) -> str:
        return "T::Boolean"

    def to_rbs(self) -> str:
        return "bool"


@dataclass(frozen=True)
class SelfType(TypeNode):
    """The type of the enclosing declaration."""

    def describe(self) -> str:
        return "self"

    def to_rbi(self) -> str:
        return "T.self_type"

    def to_rbs(self) -> str:
        return "self"


@dataclass(frozen=True)
class Raw(TypeNode):
    """A type name emitted verbatim."""

    name: str

    def describe(self) -> str:
        return self.name

    def to_rbi(self) -> str:
        return self.name

    def to_rbs(self) -> str:
        return self.name


@dataclass(frozen=True)
class ErrorPlaceholder(TypeNode):
    """
    Stands in for an annotation which could not be understood.

    Renders as a constant named after the offending text, with every
    character which can't appear in an identifier removed.
    """

    original_text: str

    @property
    def identifier(self) -> str:
        return _NON_IDENTIFIER.sub("", self.original_text)

    @property
    def name(self) -> str:
        return f"{ERROR_PREFIX}{self.identifier}"

    def describe(self) -> str:
        return self.name

    def to_rbi(self) -> str:
        return self.name

    def to_rbs(self) -> str:
        return self.name


# =============================================================================
# Composite Types
# =============================================================================


@dataclass(frozen=True)
class Nilable(TypeNode):
    """A type which may also be nil."""

    inner: TypeNode

    def __post_init__(self) -> None:
        object.__setattr__(self, "inner", to_type(self.inner))

    def describe(self) -> str:
        return f"?{self.inner.describe()}"

    def to_rbi(self) -> str:
        return f"T.nilable({self.inner.to_rbi()})"

    def to_rbs(self) -> str:
        return f"{self.inner.to_rbs()}?"


def _flatten_members(members: Iterable[TypeNode | str]) -> tuple[TypeNode, ...]:
    """Flatten nested unions and drop repeated members, keeping their order."""
    flattened: list[TypeNode] = []
    for member in members:
        member = to_type(member)
        if isinstance(member, Union):
            flattened.extend(member.members)
        else:
            flattened.append(member)
    return tuple(dict.fromkeys(flattened))


@dataclass(frozen=True)
class Union(TypeNode):
    """
    Any one of several types.

    Nested unions are flattened and duplicate members dropped, keeping the
    first occurrence of each. At least two distinct members must remain;
    use ``union()`` when the members may collapse into one.
    """

    members: tuple[TypeNode, ...]

    def __post_init__(self) -> None:
        members = _flatten_members(self.members)
        if len(members) < 2:
            raise ValueError(
                f"a union needs at least two distinct members, got {len(members)}"
            )
        object.__setattr__(self, "members", members)

    def describe(self) -> str:
        return "(" + " or ".join(member.describe() for member in self.members) + ")"

    def to_rbi(self) -> str:
        return "T.any(" + ", ".join(member.to_rbi() for member in self.members) + ")"

    def to_rbs(self) -> str:
        return "(" + " | ".join(member.to_rbs() for member in self.members) + ")"


@dataclass(frozen=True)
class GenericInstance(TypeNode):
    """
    A generic container applied to type arguments.

    ``container`` is the name of a built-in container (``"Array"``,
    ``"Hash"``, ``"Class"``, ...) or, for user-defined generics, the converted
    container type itself.
    """

    container: str | TypeNode
    args: tuple[TypeNode, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(to_type(arg) for arg in self.args))

    @property
    def is_builtin(self) -> bool:
        return isinstance(self.container, str) and self.container in BUILTIN_GENERIC_TYPES

    def _container_name(self, render) -> str:
        if isinstance(self.container, TypeNode):
            return render(self.container)
        return self.container

    def describe(self) -> str:
        name = self._container_name(lambda node: node.describe())
        return f"{name}<" + ", ".join(arg.describe() for arg in self.args) + ">"

    def to_rbi(self) -> str:
        args = ", ".join(arg.to_rbi() for arg in self.args)
        if self.container == "Class":
            return f"T.class_of({args})"
        if self.is_builtin:
            return f"T::{self.container}[{args}]"
        return f"{self._container_name(lambda node: node.to_rbi())}[{args}]"

    def to_rbs(self) -> str:
        args = ", ".join(arg.to_rbs() for arg in self.args)
        if self.container == "Class":
            return f"singleton({args})"
        return f"{self._container_name(lambda node: node.to_rbs())}[{args}]"


@dataclass(frozen=True)
class Tuple(TypeNode):
    """A fixed-size sequence with a type per position."""

    elements: tuple[TypeNode, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(to_type(e) for e in self.elements))

    def describe(self) -> str:
        return "[" + ", ".join(element.describe() for element in self.elements) + "]"

    def to_rbi(self) -> str:
        return "[" + ", ".join(element.to_rbi() for element in self.elements) + "]"

    def to_rbs(self) -> str:
        return "[" + ", ".join(element.to_rbs() for element in self.elements) + "]"


# =============================================================================
# Constructors
# =============================================================================


def union(members: Iterable[TypeNode | str]) -> TypeNode:
    """A Union of the members, or the member itself if only one remains."""
    flattened = _flatten_members(members)
    if len(flattened) == 1:
        return flattened[0]
    return Union(flattened)


def nilable(node: TypeNode | str) -> TypeNode:
    """Wrap in Nilable once; untyped already includes nil."""
    node = to_type(node)
    if isinstance(node, (Untyped, Nilable)):
        return node
    return Nilable(node)


def array_of(element: TypeNode | str) -> GenericInstance:
    return GenericInstance("Array", (element,))


def hash_of(key: TypeNode | str, value: TypeNode | str) -> GenericInstance:
    return GenericInstance("Hash", (key, value))


def class_of(instance: TypeNode | str) -> GenericInstance:
    return GenericInstance("Class", (instance,))
