"""
yardsig - YARD type annotations to Sorbet RBI and RBS type expressions.

yardsig reads the free-form types written in YARD documentation tags, such as
``Array<String>``, ``Hash{Symbol => Integer}`` or ``#read & #close``, and
converts them into structured types which render as Sorbet RBI or RBS
signatures. Bare class names can be checked against the documented project,
Ruby's built-in classes and dependency signature files.
"""

from yardsig.converter import Configuration, Dialect, TypeConverter, yard_to_type
from yardsig.resolver import Registry, Resolver
from yardsig.utils import DiagnosticSink

__version__ = "0.1.0"
__all__ = [
    "yard_to_type",
    "TypeConverter",
    "Configuration",
    "Dialect",
    "Registry",
    "Resolver",
    "DiagnosticSink",
]
