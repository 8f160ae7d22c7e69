"""
yardsig Converter Package.

- Type nodes: the converted types and their rendering in RBI and RBS
- Splitter: bracket-aware splitting of type parameter lists
- Type converter: YARD type annotations to type nodes
"""

from yardsig.converter.config import Configuration, Dialect
from yardsig.converter.splitter import split_type_parameters
from yardsig.converter.type_converter import TypeConverter, yard_to_type
from yardsig.converter.type_nodes import (
    Boolean,
    ErrorPlaceholder,
    GenericInstance,
    Nilable,
    Raw,
    SelfType,
    Tuple,
    TypeNode,
    Union,
    Untyped,
)

__all__ = [
    "Configuration",
    "Dialect",
    "split_type_parameters",
    "TypeConverter",
    "yard_to_type",
    # Type nodes
    "TypeNode",
    "Untyped",
    "Boolean",
    "SelfType",
    "Raw",
    "ErrorPlaceholder",
    "Nilable",
    "Union",
    "GenericInstance",
    "Tuple",
]
