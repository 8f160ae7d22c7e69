"""
Signature file harvesting.

Dependencies often ship type signatures next to their code, either as RBS
declarations (``sig/**/*.rbs``) or as legacy Sorbet RBI files
(``rbi/**/*.rbi``). The resolver only needs the names those files declare, so
this module scans them line by line, tracking ``end``-delimited nesting, and
records every module, class and constant together with its path.

A declaration nested as ``module A; class B; end; end`` is recorded as
``("B", "A::B")``. Namespaces which have no name of their own, such as
``class << self`` in RBI files, only contribute their children.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from yardsig.utils.errors import SignatureLoadError


logger = logging.getLogger("yardsig")

# A (simple name, full path) pair
Declaration = tuple[str, str]

CONSTANT_PATH = r"(?:::)?[A-Z]\w*(?:::[A-Z]\w*)*"

# module Foo / class Foo[T] < Bar / class Foo::Bar
_RBS_NAMESPACE = re.compile(rf"^(module|class)\s+({CONSTANT_PATH})(.*)$")
_RBS_INTERFACE = re.compile(r"^interface\s+_\w+")
# FOO: Integer   (but not "Foo::Bar" on its own)
_RBS_CONSTANT = re.compile(rf"^({CONSTANT_PATH})\s*:(?!:)")

_RBI_NAMESPACE = re.compile(rf"^(module|class)\s+({CONSTANT_PATH})(.*)$")
_RBI_SINGLETON = re.compile(r"^class\s*<<\s*self\b")
# FOO = T.let(...), but not FOO == / FOO =~ / FOO =>
_RBI_CONSTANT = re.compile(rf"^({CONSTANT_PATH})\s*=(?![=~>])")
_RBI_DEF = re.compile(r"^def\s")
_RBI_ENDLESS_DEF = re.compile(r"^def\s+[^(\s]+(\([^)]*\))?\s*=\s")
_RBI_BLOCK_KEYWORD = re.compile(r"^(if|unless|while|until|case|begin)\b")
_TRAILING_DO = re.compile(r"\bdo(\s*\|[^|]*\|)?\s*$")
_TRAILING_END = re.compile(r"(^|[;\s])end\s*$")
_END = re.compile(r"^end\b")


@dataclass
class _Frame:
    """An open ``end``-delimited block; ``parts`` is empty for anonymous blocks."""

    parts: list[str] = field(default_factory=list)


class _Harvester:
    """Shared nesting bookkeeping for both signature formats."""

    def __init__(self) -> None:
        self.stack: list[_Frame] = []
        self.declarations: list[Declaration] = []

    def current_path(self) -> list[str]:
        return [part for frame in self.stack for part in frame.parts]

    def record(self, constant_path: str) -> list[str]:
        parts = [part for part in constant_path.split("::") if part]
        full = self.current_path() + parts
        self.declarations.append((parts[-1], "::".join(full)))
        return parts

    def open(self, parts: Optional[list[str]] = None) -> None:
        self.stack.append(_Frame(list(parts or [])))

    def close(self) -> None:
        # Unbalanced "end"s are ignored rather than failing the whole file
        if self.stack:
            self.stack.pop()


def _logical_lines(text: str) -> list[str]:
    lines = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        lines.append(line)
    return lines


def harvest_rbs(text: str) -> list[Declaration]:
    """Collect module, class and constant declarations from RBS source."""
    harvester = _Harvester()

    for line in _logical_lines(text):
        if _END.match(line):
            harvester.close()
            continue

        match = _RBS_NAMESPACE.match(line)
        if match:
            rest = match.group(3).strip()
            parts = harvester.record(match.group(2))
            # "class Foo = Bar" aliases and one-line "class Foo end" open nothing
            if rest.startswith("=") or _TRAILING_END.search(rest):
                continue
            harvester.open(parts)
            continue

        if _RBS_INTERFACE.match(line):
            harvester.open()
            continue

        match = _RBS_CONSTANT.match(line)
        if match:
            harvester.record(match.group(1))

    return harvester.declarations


def harvest_rbi(text: str) -> list[Declaration]:
    """Collect module, class and constant declarations from RBI source."""
    harvester = _Harvester()

    for line in _logical_lines(text):
        if _END.match(line):
            harvester.close()
            continue

        if _RBI_SINGLETON.match(line):
            if not _TRAILING_END.search(line):
                harvester.open()
            continue

        match = _RBI_NAMESPACE.match(line)
        if match:
            parts = harvester.record(match.group(2))
            if not _TRAILING_END.search(match.group(3)):
                harvester.open(parts)
            continue

        match = _RBI_CONSTANT.match(line)
        if match:
            harvester.record(match.group(1))
            if _TRAILING_DO.search(line):
                harvester.open()
            continue

        if _RBI_DEF.match(line):
            # "def foo; end", "def foo(a) end" and endless "def foo = 1" are complete
            if not _TRAILING_END.search(line) and not _RBI_ENDLESS_DEF.match(line):
                harvester.open()
            continue

        if _RBI_BLOCK_KEYWORD.match(line) or _TRAILING_DO.search(line):
            if not _TRAILING_END.search(line):
                harvester.open()

    return harvester.declarations


SIGNATURE_HARVESTERS: dict[str, Callable[[str], list[Declaration]]] = {
    ".rbs": harvest_rbs,
    ".rbi": harvest_rbi,
}


def signature_files(directory: Path) -> list[Path]:
    """
    List every RBS and RBI file beneath a directory, in a stable order.

    Raises:
        SignatureLoadError: If the directory does not exist
    """
    if not directory.is_dir():
        raise SignatureLoadError("signature collection is not available", directory)
    return sorted(
        path
        for path in directory.rglob("*")
        if path.suffix in SIGNATURE_HARVESTERS and path.is_file()
    )


def load_signature_file(path: Path) -> list[Declaration]:
    """
    Read and harvest a single signature file.

    Raises:
        SignatureLoadError: If the file cannot be read or is not a signature file
    """
    harvester = SIGNATURE_HARVESTERS.get(path.suffix)
    if harvester is None:
        raise SignatureLoadError("not a signature file", path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SignatureLoadError(f"could not read signature file: {exc}", path) from exc

    declarations = harvester(text)
    logger.debug("Harvested %d declarations from %s", len(declarations), path)
    return declarations


def add_declarations(
    declarations: list[Declaration], names_to_paths: dict[str, set[str]]
) -> None:
    """Merge harvested declarations into a simple-name index."""
    for name, path in declarations:
        names_to_paths.setdefault(name, set()).add(path)
