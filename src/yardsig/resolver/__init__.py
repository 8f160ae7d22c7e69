"""
yardsig Resolver Package.

- Registry: the documented declarations (modules, classes, methods, constants)
- Builtins: version-tagged table of built-in Ruby classes
- Signatures: names harvested from dependency RBS/RBI files
- Resolver: decides whether a type name is reachable from a scope
"""

from yardsig.resolver.builtins import (
    DEFAULT_RUBY_VERSION,
    BuiltinClass,
    builtin_classes,
    parse_ruby_version,
)
from yardsig.resolver.registry import CodeObject, CodeObjectKind, Registry
from yardsig.resolver.resolver import Resolver
from yardsig.resolver.signatures import harvest_rbi, harvest_rbs

__all__ = [
    "DEFAULT_RUBY_VERSION",
    "BuiltinClass",
    "builtin_classes",
    "parse_ruby_version",
    "CodeObject",
    "CodeObjectKind",
    "Registry",
    "Resolver",
    "harvest_rbi",
    "harvest_rbs",
]
