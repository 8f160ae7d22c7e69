"""
Conversion of YARD type annotations into type nodes.

YARD types are free text written by people, with several competing ways of
saying the same thing:

    Array<String>, Array(String, Integer), <String>     collections and tuples
    Hash<Symbol, String>, Hash{Symbol => String}, {Symbol => String}
    #read & #close                                       duck types
    :up, 3, 3.14                                         literals
    [String, nil]                                        alternatives (several tags)

The converter tries a fixed sequence of rules against each annotation; the
first rule that recognises it produces the node. Rules which contain type
parameters convert them recursively. Nothing here raises on bad input:
unrecognisable text becomes an ErrorPlaceholder (or untyped, if configured)
and a warning is reported through the diagnostic sink.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Optional, Sequence

from yardsig.converter.config import Configuration, Dialect
from yardsig.converter.splitter import is_enclosed, split_type_parameters
from yardsig.converter.type_nodes import (
    BUILTIN_GENERIC_TYPES,
    SINGLE_ARG_GENERIC_TYPES,
    Boolean,
    ErrorPlaceholder,
    GenericInstance,
    Raw,
    SelfType,
    Tuple,
    TypeNode,
    Untyped,
    array_of,
    class_of,
    hash_of,
    nilable,
    union,
)
from yardsig.resolver.resolver import Resolver
from yardsig.utils.diagnostics import DiagnosticSink


# =============================================================================
# Patterns
# =============================================================================

# Ruby namespaces and identifiers: "Foo", "Foo::Bar" and "::Foo::Bar" match,
# "Foo.Bar" and "Foo#bar" don't.
SIMPLE_TYPE_PATTERN = r"(?:::)?[a-zA-Z_]\w*(?:::[a-zA-Z_]\w*)*"
SIMPLE_TYPE_REGEX = re.compile(rf"^{SIMPLE_TYPE_PATTERN}$")

# A namespace followed by an opening angle bracket or curly brace, as in
# "Array<String>" or "Hash{String => Symbol}". The bracket must be closed by
# the last character of the annotation.
GENERIC_TYPE_REGEX = re.compile(rf"^({SIMPLE_TYPE_PATTERN})\s*([<{{])")

# "Array(String, Symbol)" or just "(String, Symbol)"
ORDERED_LIST_REGEX = re.compile(rf"^(?:{SIMPLE_TYPE_PATTERN}\s*)?\(")

# Duck types requiring one or more methods: "#foo", "#foo & #bar",
# "#foo&#bar&#baz", "#setter=", "#empty?", "#<=>"
_METHOD_NAME = r"[a-zA-Z_]\w*[?!=]?"
_OPERATOR = r"\[\]=?|<=>|===?|=~|!=|!~|\*\*|[-+~!]@|<<|>>|<=|>=|[-+*/%&|^<>!~]"
_DUCK_ATOM = rf"\#(?:{_METHOD_NAME}|{_OPERATOR})"
DUCK_TYPE_REGEX = re.compile(rf"^{_DUCK_ATOM}(?:\s*&\s*{_DUCK_ATOM})*$")

# Literal values standing in for their class, read the way YAML 1.1 reads
# scalars: a float needs a decimal point, and an exponent needs its sign.
SYMBOL_LITERAL_REGEX = re.compile(r"""^:(?:[a-zA-Z_]\w*[?!=]?|"[^"]*"|'[^']*')$""")
FLOAT_LITERAL_REGEX = re.compile(
    r"^[-+]?(?:\d[\d_]*\.\d*|\.\d+)(?:[eE][-+]\d+)?$"
    r"|^[-+]?\.(?:inf|Inf|INF)$|^\.(?:nan|NaN|NAN)$"
)
INTEGER_LITERAL_REGEX = re.compile(
    r"^[-+]?(?:0b[01_]+|0x[0-9a-fA-F_]+|0[0-7_]+|[1-9][\d_]*|0)$"
)

LOWERCASE_LEADING_REGEX = re.compile(r"^[_a-z]")

BOOLEAN_NAMES = frozenset(("bool", "Bool", "boolean", "Boolean", "true", "false"))

# Names which never take type parameters
NON_GENERIC_NAMES = BOOLEAN_NAMES | {"self", "nil"}

# Duck types with a matching interface in RBS's core signatures
DUCK_TYPES_TO_RBS_TYPE_NAMES: dict[str, str] = {
    "#to_s": "_ToS",
    "#to_str": "_ToStr",
    "#to_i": "_ToI",
    "#to_r": "_ToR",
    "#to_proc": "_ToProc",
    "#to_path": "_ToPath",
    "#read": "_Reader",
    "#readpartial": "_ReaderPartial",
    "#write": "_Writer",
    "#rewind": "_Rewindable",
    "#to_io": "_ToIO",
    "#exception": "_Exception",
    # Collections take type arguments
    "#to_hash": "_ToHash[untyped, untyped]",
    "#each": "_Each[untyped]",
}

Annotation = Optional[str | Sequence[str]]
Rule = Callable[[str, Any], Optional[TypeNode]]


# =============================================================================
# Converter
# =============================================================================


class TypeConverter:
    """
    Converts YARD type annotations into type nodes.

    Usage:
        converter = TypeConverter(Configuration(output_language=Dialect.RBS))
        converter.convert("Array<String>")             # Array[String]
        converter.convert(["String", "nil"])           # String?
        converter.convert("Foo", item=registry.at("A"))  # resolved from A
    """

    def __init__(
        self,
        config: Optional[Configuration] = None,
        resolver: Optional[Resolver] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> None:
        """
        Initialize the converter.

        Args:
            config: Conversion options, defaults to RBI with no replacements
            resolver: Used to check bare names when an item is given
            sink: Receives warnings and other diagnostics; defaults to the
                resolver's sink, or a silent one
        """
        self.config = config if config is not None else Configuration()
        self.resolver = resolver
        if sink is None:
            sink = resolver.sink if resolver is not None else DiagnosticSink(silent=True)
        self.sink = sink

        # Order matters: e.g. duck types must be tried before generics
        self._rules: list[Rule] = [
            self._convert_boolean,
            self._convert_self,
            self._convert_nil,
            self._convert_simple_type,
            self._convert_duck_type,
            self._convert_generic_type,
            self._convert_ordered_list,
            self._convert_shorthand_hash,
            self._convert_shorthand_array,
            self._convert_literal,
        ]

    def convert(self, yard: Annotation, item: Any = None) -> TypeNode:
        """
        Convert a YARD type into a type node.

        Args:
            yard: None, a single type string, or a list of alternative types
                (one per YARD tag type)
            item: The declaration the type was written in. Bare names are
                only resolved when this is given; it also locates diagnostics.

        Returns:
            The converted type; never raises for malformed annotations
        """
        if yard is None:
            return Untyped()

        if not isinstance(yard, str):
            return self._convert_alternatives(list(yard), item)

        text = yard.strip()
        for rule in self._rules:
            result = rule(text, item)
            if result is not None:
                return result

        return self._handle_error(text, f"{text!r} does not appear to be a type", item)

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def _convert_alternatives(self, yard: list[str], item: Any) -> TypeNode:
        if [entry.strip() for entry in yard] == ["true", "false"]:
            return Boolean()

        is_nil = [entry.strip() == "nil" for entry in yard]
        types = list(
            dict.fromkeys(
                self.convert(entry, item) for entry, nil in zip(yard, is_nil) if not nil
            )
        )
        if not types:
            return Untyped()

        result = union(types)
        if any(is_nil):
            result = nilable(result)
        return result

    def _convert_boolean(self, text: str, item: Any) -> Optional[TypeNode]:
        if text in BOOLEAN_NAMES:
            return Boolean()
        return None

    def _convert_self(self, text: str, item: Any) -> Optional[TypeNode]:
        if text == "self" and item is not None:
            return SelfType()
        return None

    def _convert_nil(self, text: str, item: Any) -> Optional[TypeNode]:
        if text != "nil":
            return None
        if self.config.output_language == Dialect.RBS:
            return Raw("nil")
        return Raw("NilClass")

    def _convert_simple_type(self, text: str, item: Any) -> Optional[TypeNode]:
        if not SIMPLE_TYPE_REGEX.match(text):
            return None

        if text in SINGLE_ARG_GENERIC_TYPES:
            return GenericInstance(text, (Untyped(),))
        if text == "Hash":
            return hash_of(Untyped(), Untyped())

        if LOWERCASE_LEADING_REGEX.match(text):
            self.sink.warn(f"{text} is probably not a type, but using anyway", item)

        if item is None or self.resolver is None or self.resolver.resolvable(text, item):
            return Raw(text)

        # Not reachable from here; see if it's unambiguous anywhere else
        new_path = self.resolver.path_for(text)
        if new_path is not None:
            if new_path != text:
                self.sink.infer(f"{text} was resolved to {new_path}", item)
            return Raw(new_path)

        if self.config.replace_unresolved_with_untyped:
            self.sink.warn(
                f"{text} wasn't able to be resolved to a constant in this project, "
                "replaced with untyped",
                item,
            )
            return Untyped()

        self.sink.warn(f"{text} wasn't able to be resolved to a constant in this project", item)
        return Raw(text)

    def _convert_duck_type(self, text: str, item: Any) -> Optional[TypeNode]:
        if not DUCK_TYPE_REGEX.match(text):
            return None

        if self.config.output_language == Dialect.RBS:
            type_name = DUCK_TYPES_TO_RBS_TYPE_NAMES.get(text)
            if type_name is not None:
                self.sink.duck(
                    f"{text} looks like a duck type with an equivalent RBS interface, "
                    f"replacing with {type_name}",
                    item,
                )
                return Raw(type_name)

        self.sink.duck(f"{text} looks like a duck type, replacing with untyped", item)
        return Untyped()

    def _convert_generic_type(self, text: str, item: Any) -> Optional[TypeNode]:
        match = GENERIC_TYPE_REGEX.match(text)
        if match is None or not is_enclosed(text, match.end() - 1):
            return None

        generic_type = match.group(1)
        # "::Array<String>" is still the built-in Array
        relative_type = generic_type[2:] if generic_type.startswith("::") else generic_type
        if relative_type in NON_GENERIC_NAMES:
            return self._handle_error(
                text, f"Unsupported generic container {generic_type!r} in {text!r}", item
            )

        parameters = self._convert_parameters(text[match.end() : -1], item)

        if relative_type in SINGLE_ARG_GENERIC_TYPES and len(parameters) > 1:
            return GenericInstance(relative_type, (union(parameters),))

        if relative_type == "Class":
            if len(parameters) == 1:
                return class_of(parameters[0])
            return union(class_of(parameter) for parameter in parameters)

        if relative_type == "Hash":
            return self._hash_from(parameters, text, item)

        if relative_type in BUILTIN_GENERIC_TYPES:
            return GenericInstance(relative_type, tuple(parameters))

        # User-defined generic; the container itself isn't resolved as a plain type
        return GenericInstance(self.convert(generic_type), tuple(parameters))

    def _convert_ordered_list(self, text: str, item: Any) -> Optional[TypeNode]:
        match = ORDERED_LIST_REGEX.match(text)
        if match is None or not is_enclosed(text, match.end() - 1):
            return None
        return Tuple(tuple(self._convert_parameters(text[match.end() : -1], item)))

    def _convert_shorthand_hash(self, text: str, item: Any) -> Optional[TypeNode]:
        if not text.startswith("{") or not is_enclosed(text, 0):
            return None
        return self._hash_from(self._convert_parameters(text[1:-1], item), text, item)

    def _convert_shorthand_array(self, text: str, item: Any) -> Optional[TypeNode]:
        if not text.startswith("<") or not is_enclosed(text, 0):
            return None
        parameters = self._convert_parameters(text[1:-1], item)
        if len(parameters) == 1:
            return array_of(parameters[0])
        return array_of(union(parameters))

    def _convert_literal(self, text: str, item: Any) -> Optional[TypeNode]:
        if SYMBOL_LITERAL_REGEX.match(text):
            return Raw("Symbol")
        if FLOAT_LITERAL_REGEX.match(text):
            return Raw("Float")
        if INTEGER_LITERAL_REGEX.match(text):
            return Raw("Integer")
        return None

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _convert_parameters(self, params: str, item: Any) -> list[TypeNode]:
        """Convert each parameter; a group of several comma-separated types becomes a union."""
        parameters = []
        for group in split_type_parameters(params):
            members = split_type_parameters(group)
            if len(members) > 1:
                parameters.append(union(self.convert(member, item) for member in members))
            else:
                parameters.append(self.convert(group, item))
        return parameters

    def _hash_from(self, parameters: list[TypeNode], text: str, item: Any) -> TypeNode:
        if len(parameters) == 2:
            return hash_of(*parameters)
        found = ", ".join(parameter.describe() for parameter in parameters)
        return self._handle_error(
            "".join(parameter.describe() for parameter in parameters),
            f"Invalid hash, must have exactly two types: {text!r} has "
            f"{len(parameters)} ({found}).",
            item,
        )

    def _handle_error(self, name: str, message: str, item: Any) -> TypeNode:
        """Report an unusable annotation and produce its replacement."""
        self.sink.warn(message, item)
        if self.config.replace_errors_with_untyped:
            return Untyped()
        return ErrorPlaceholder(name)


def yard_to_type(
    yard: Annotation,
    item: Any = None,
    config: Optional[Configuration] = None,
    resolver: Optional[Resolver] = None,
    sink: Optional[DiagnosticSink] = None,
) -> TypeNode:
    """Convert a YARD type with a one-off converter. See TypeConverter.convert."""
    return TypeConverter(config, resolver, sink).convert(yard, item)
