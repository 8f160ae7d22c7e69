"""
Diagnostic events for yardsig.

Every conversion that has to guess, substitute or give up reports what it did
through a DiagnosticSink. The sink prints a one-line message per event and
forwards the event to any registered hooks, which is how callers collect
warnings or attach them as comments to generated signatures.

Example output:
    [WARN ] (Foo::Bar) lib/foo/bar.rb:12: Baz wasn't able to be resolved to a constant in this project
    [INFER] (Foo::Bar) lib/foo/bar.rb:14: Qux was resolved to Foo::Qux
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Optional, TextIO

from yardsig.utils.errors import ConfigurationError


# =============================================================================
# Diagnostic Kinds
# =============================================================================


class DiagnosticKind(Enum):
    """Kind of a diagnostic event."""

    WARN = "warn"
    INFO = "info"
    DUCK = "duck"
    ERROR = "error"
    INFER = "infer"
    OMIT = "omit"
    DONE = "done"

    @property
    def header(self) -> str:
        """Five-character bracketed prefix shown before the message."""
        return f"[{self.value.upper():<5}]"

    def color_code(self) -> str:
        """Get ANSI color code for this kind."""
        colors = {
            DiagnosticKind.WARN: "\033[93m",  # Yellow
            DiagnosticKind.DUCK: "\033[96m",  # Cyan
            DiagnosticKind.ERROR: "\033[91m",  # Red
            DiagnosticKind.INFER: "\033[94m",  # Blue
            DiagnosticKind.OMIT: "\033[95m",  # Magenta
            DiagnosticKind.DONE: "\033[92m",  # Green
        }
        return colors.get(self, "")


ALL_KINDS: frozenset[DiagnosticKind] = frozenset(DiagnosticKind)

Hook = Callable[..., None]


def parse_kinds(names: Iterable[str]) -> frozenset[DiagnosticKind]:
    """
    Convert kind names (e.g. from the command line) into DiagnosticKinds.

    Raises:
        ConfigurationError: If any name is not a known kind
    """
    kinds = set()
    for name in names:
        try:
            kinds.add(DiagnosticKind(name.lower()))
        except ValueError:
            valid = ", ".join(kind.value for kind in DiagnosticKind)
            raise ConfigurationError(
                f"invalid diagnostic kind {name!r}, expected one of: {valid}"
            ) from None
    return frozenset(kinds)


# =============================================================================
# Diagnostic Records
# =============================================================================


@dataclass(frozen=True)
class Diagnostic:
    """
    A single diagnostic event.

    Attributes:
        kind: What sort of event this is
        message: Human-readable description
        item: The declaration the event is about, if any
        options: Extra keyword options passed through to hooks
    """

    kind: DiagnosticKind
    message: str
    item: Any = None
    options: dict[str, Any] = field(default_factory=dict)

    def location(self) -> Optional[str]:
        """Describe where the item lives, e.g. ``(A::B) lib/a.rb:3:``."""
        if self.item is None:
            return None
        path = getattr(self.item, "path", None)
        filename = getattr(self.item, "file", None)
        line = getattr(self.item, "line", None)
        parts = []
        if path is not None:
            parts.append(f"({path})")
        if filename:
            parts.append(f"{filename}:{line}:" if line is not None else f"{filename}:")
        return " ".join(parts) if parts else None

    def render(self, use_color: bool = True) -> str:
        """Render this diagnostic as a single formatted line."""
        reset = "\033[0m" if use_color else ""
        bold = "\033[1m" if use_color else ""
        color = self.kind.color_code() if use_color else ""
        header = f"{color}{self.kind.header}{reset}" if color else self.kind.header

        location = self.location()
        if location:
            return f"{header} {bold}{location}{reset} {self.message}"
        return f"{header} {self.message}"


# =============================================================================
# Diagnostic Sink
# =============================================================================


class DiagnosticSink:
    """
    Receives diagnostic events from the converter and resolver.

    Events whose kind is not enabled are discarded before anything else
    happens. Enabled events are recorded, printed (unless the sink is silent)
    and handed to every hook as ``hook(kind, message, item, **options)``.

    Usage:
        sink = DiagnosticSink(silent=True)
        sink.add_hook(lambda kind, msg, item, **opts: print(kind, msg))
        sink.warn("Foo wasn't able to be resolved")
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        silent: bool = False,
        enabled_kinds: Optional[Iterable[DiagnosticKind]] = None,
        use_color: bool = True,
    ) -> None:
        self.stream = stream
        self.silent = silent
        self.use_color = use_color
        self.diagnostics: list[Diagnostic] = []
        self._hooks: list[Hook] = []
        self._enabled_kinds = ALL_KINDS
        if enabled_kinds is not None:
            self.enabled_kinds = enabled_kinds

    @property
    def hooks(self) -> list[Hook]:
        """The hooks registered on this sink."""
        return self._hooks

    @property
    def enabled_kinds(self) -> frozenset[DiagnosticKind]:
        """Kinds which are processed; all others are discarded."""
        return self._enabled_kinds

    @enabled_kinds.setter
    def enabled_kinds(self, value: Iterable[DiagnosticKind]) -> None:
        kinds = frozenset(value)
        if not kinds <= ALL_KINDS:
            raise ConfigurationError("invalid diagnostic kinds")
        self._enabled_kinds = kinds

    def add_hook(self, hook: Hook) -> Hook:
        """Register a callable invoked for every enabled diagnostic."""
        self._hooks.append(hook)
        return hook

    def emit(
        self, kind: DiagnosticKind, message: str, item: Any = None, **options: Any
    ) -> Optional[Diagnostic]:
        """Record, print and forward a diagnostic. Returns None if discarded."""
        if kind not in self._enabled_kinds:
            return None

        diagnostic = Diagnostic(kind, message, item, dict(options))
        self.diagnostics.append(diagnostic)

        if not self.silent:
            stream = self.stream if self.stream is not None else sys.stdout
            print(diagnostic.render(self.use_color), file=stream)

        for hook in self._hooks:
            hook(kind, message, item, **options)

        return diagnostic

    def warn(self, message: str, item: Any = None, **options: Any) -> Optional[Diagnostic]:
        """Something the user should look at, but which doesn't stop the run."""
        return self.emit(DiagnosticKind.WARN, message, item, **options)

    def info(self, message: str, item: Any = None, **options: Any) -> Optional[Diagnostic]:
        """General information the user doesn't need to act on."""
        return self.emit(DiagnosticKind.INFO, message, item, **options)

    def duck(self, message: str, item: Any = None, **options: Any) -> Optional[Diagnostic]:
        """A duck type was substituted with something else."""
        return self.emit(DiagnosticKind.DUCK, message, item, **options)

    def error(self, message: str, item: Any = None, **options: Any) -> Optional[Diagnostic]:
        """Something which requires the current process to stop."""
        return self.emit(DiagnosticKind.ERROR, message, item, **options)

    def infer(self, message: str, item: Any = None, **options: Any) -> Optional[Diagnostic]:
        """Information was guessed and is likely correct."""
        return self.emit(DiagnosticKind.INFER, message, item, **options)

    def omit(self, message: str, item: Any = None, **options: Any) -> Optional[Diagnostic]:
        """Non-critical information is missing."""
        return self.emit(DiagnosticKind.OMIT, message, item, **options)

    def done(self, message: str, item: Any = None, **options: Any) -> Optional[Diagnostic]:
        """A process completed successfully."""
        return self.emit(DiagnosticKind.DONE, message, item, **options)

    def count(self, kind: DiagnosticKind) -> int:
        """Count the recorded diagnostics of one kind."""
        return sum(1 for d in self.diagnostics if d.kind == kind)

    def warning_count(self) -> int:
        """Count the number of warning diagnostics."""
        return self.count(DiagnosticKind.WARN)

    def clear(self) -> None:
        """Forget all recorded diagnostics (hooks stay registered)."""
        self.diagnostics.clear()


__all__ = [
    "ALL_KINDS",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticSink",
    "Hook",
    "parse_kinds",
]
