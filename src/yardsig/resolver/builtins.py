"""
Built-in Ruby class names.

These are the top-level constants of a plain Ruby process which are classes
(``Object.constants.select { |c| Object.const_get(c).is_a?(Class) }``),
recorded as a static table because the documented project's interpreter is
not available to us. Each entry carries the range of Ruby versions in which
the class is defined, so that removed classes such as ``SortedSet`` drop out
on the versions which no longer have them.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


RubyVersion = tuple[int, int]

DEFAULT_RUBY_VERSION: RubyVersion = (3, 3)


@dataclass(frozen=True, slots=True)
class BuiltinClass:
    """
    A built-in class and the versions defining it.

    Attributes:
        name: Top-level constant name
        since: First version defining the class (None for "always")
        removed: First version no longer defining it (None for "still present")
    """

    name: str
    since: Optional[RubyVersion] = None
    removed: Optional[RubyVersion] = None

    def available_in(self, version: RubyVersion) -> bool:
        if self.since is not None and version < self.since:
            return False
        if self.removed is not None and version >= self.removed:
            return False
        return True


_CORE_CLASS_NAMES = (
    "ArgumentError",
    "Array",
    "BasicObject",
    "Binding",
    "Class",
    "ClosedQueueError",
    "Complex",
    "ConditionVariable",
    "Dir",
    "EOFError",
    "Encoding",
    "EncodingError",
    "Enumerator",
    "Exception",
    "FalseClass",
    "Fiber",
    "FiberError",
    "File",
    "Float",
    "FloatDomainError",
    "FrozenError",
    "Hash",
    "IO",
    "IOError",
    "IndexError",
    "Integer",
    "Interrupt",
    "KeyError",
    "LoadError",
    "LocalJumpError",
    "Method",
    "Module",
    "Mutex",
    "NameError",
    "NilClass",
    "NoMemoryError",
    "NoMethodError",
    "NotImplementedError",
    "Numeric",
    "Object",
    "Proc",
    "Queue",
    "Random",
    "Range",
    "RangeError",
    "Rational",
    "Regexp",
    "RegexpError",
    "RubyVM",
    "RuntimeError",
    "ScriptError",
    "SecurityError",
    "Set",
    "SignalException",
    "SizedQueue",
    "StandardError",
    "StopIteration",
    "String",
    "Struct",
    "Symbol",
    "SyntaxError",
    "SystemCallError",
    "SystemExit",
    "SystemStackError",
    "Thread",
    "ThreadError",
    "ThreadGroup",
    "Time",
    "TracePoint",
    "TrueClass",
    "TypeError",
    "UnboundMethod",
    "UncaughtThrowError",
    "ZeroDivisionError",
)

BUILTIN_CLASSES: tuple[BuiltinClass, ...] = tuple(
    BuiltinClass(name) for name in _CORE_CLASS_NAMES
) + (
    # Deprecated aliases of Integer, gone in 3.2
    BuiltinClass("Bignum", removed=(3, 2)),
    BuiltinClass("Fixnum", removed=(3, 2)),
    # Removed from set.rb in 3.0
    BuiltinClass("SortedSet", removed=(3, 0)),
    # Deprecated placeholder removed in 3.0, reintroduced as a value type in 3.2
    BuiltinClass("Data", removed=(3, 0)),
    BuiltinClass("Data", since=(3, 2)),
    BuiltinClass("Ractor", since=(3, 0)),
    BuiltinClass("NoMatchingPatternError", since=(3, 0)),
    BuiltinClass("NoMatchingPatternKeyError", since=(3, 1)),
    BuiltinClass("Refinement", since=(3, 1)),
)


def parse_ruby_version(text: str) -> RubyVersion:
    """
    Parse "3.2" or "3.2.1" into a (major, minor) tuple.

    Raises:
        ValueError: If the text is not a dotted version number
    """
    parts = text.strip().split(".")
    if len(parts) < 2:
        parts.append("0")
    try:
        return (int(parts[0]), int(parts[1]))
    except ValueError:
        raise ValueError(f"invalid Ruby version {text!r}") from None


@lru_cache(maxsize=None)
def builtin_classes(ruby_version: RubyVersion = DEFAULT_RUBY_VERSION) -> frozenset[str]:
    """Names of the built-in classes defined by the given Ruby version."""
    return frozenset(
        entry.name for entry in BUILTIN_CLASSES if entry.available_in(ruby_version)
    )
