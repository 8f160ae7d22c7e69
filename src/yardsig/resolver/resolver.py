"""
Name resolution for yardsig.

Decides whether a bare type name written in a documentation comment refers to
something Ruby could actually find from the place it was written, and if not,
whether there is exactly one declaration anywhere which it probably meant.

Three sources feed the simple-name index:
1. Classes and modules declared in the registry
2. Built-in Ruby classes for the configured Ruby version
3. Names declared in dependency signature files (RBS and RBI)

The index is built on first use and kept until ``clear()`` is called.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from yardsig.resolver.builtins import DEFAULT_RUBY_VERSION, RubyVersion, builtin_classes
from yardsig.resolver.registry import (
    NAMESPACE_SEPARATOR,
    CodeObject,
    CodeObjectKind,
    Registry,
)
from yardsig.resolver.signatures import (
    add_declarations,
    load_signature_file,
    signature_files,
)
from yardsig.utils.diagnostics import DiagnosticSink
from yardsig.utils.errors import SignatureLoadError


logger = logging.getLogger("yardsig")

# Kinds a name component may resolve through when following a path
LOOKUP_KINDS = (CodeObjectKind.CLASS, CodeObjectKind.METHOD, CodeObjectKind.MODULE)


class Resolver:
    """
    Resolves type names against a registry, the built-in classes and
    dependency signatures.

    Usage:
        resolver = Resolver(registry, sink=sink)
        resolver.prepare()
        resolver.resolvable("String", registry.at("A"))   # True
        resolver.path_for("F")                             # "A::E::F" if unique
    """

    def __init__(
        self,
        registry: Registry,
        signature_paths: Iterable[Path] = (),
        ruby_version: RubyVersion = DEFAULT_RUBY_VERSION,
        sink: Optional[DiagnosticSink] = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            registry: The declarations of the documented project
            signature_paths: Directories holding dependency RBS/RBI files
            ruby_version: Ruby version whose built-in classes are known
            sink: Where warnings about unavailable signature sources go
        """
        self.registry = registry
        self.signature_paths = [Path(path) for path in signature_paths]
        self.ruby_version = ruby_version
        self.sink = sink if sink is not None else DiagnosticSink(silent=True)
        self._names_to_paths: Optional[dict[str, set[str]]] = None

    # -------------------------------------------------------------------------
    # Index
    # -------------------------------------------------------------------------

    @property
    def prepared(self) -> bool:
        """Whether the simple-name index has been built."""
        return self._names_to_paths is not None

    def prepare(self) -> dict[str, set[str]]:
        """Build the simple-name index if it hasn't been built yet, and return it."""
        if self._names_to_paths is not None:
            return self._names_to_paths

        names_to_paths: dict[str, set[str]] = {}
        for obj in self.registry.all(CodeObjectKind.CLASS, CodeObjectKind.MODULE):
            names_to_paths.setdefault(obj.name, set()).add(obj.path)

        for name in self.builtin_classes():
            names_to_paths.setdefault(name, set()).add(name)

        self._load_signature_objects(names_to_paths)

        logger.debug("Built name index with %d simple names", len(names_to_paths))
        self._names_to_paths = names_to_paths
        return names_to_paths

    def _load_signature_objects(self, names_to_paths: dict[str, set[str]]) -> None:
        for directory in self.signature_paths:
            try:
                files = signature_files(directory)
            except SignatureLoadError as exc:
                self.sink.warn(
                    f"Could not load signature collection at {directory} - "
                    "install the dependencies' signatures first"
                )
                logger.debug("Skipping signature directory: %s", exc)
                continue

            for path in files:
                try:
                    add_declarations(load_signature_file(path), names_to_paths)
                except SignatureLoadError as exc:
                    self.sink.warn(f"Skipping unreadable signature file {path}: {exc.message}")

    def clear(self) -> None:
        """Drop the index; the next lookup rebuilds it."""
        self._names_to_paths = None

    def builtin_classes(self) -> frozenset[str]:
        """Names of the built-in classes of the configured Ruby version."""
        return builtin_classes(self.ruby_version)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def paths_for(self, name: str) -> set[str]:
        """
        Every known full path the name could refer to.

        A name starting with ``::`` is an explicit path from the root and is
        returned as-is. Otherwise candidates are looked up by the last path
        component and kept only if they end with the whole name, so ``E::F``
        matches ``A::E::F`` but not ``A::G::F``.
        """
        names_to_paths = self.prepare()

        if name.startswith(NAMESPACE_SEPARATOR):
            return {name}

        simple_name = name.split(NAMESPACE_SEPARATOR)[-1]
        suffix = f"{NAMESPACE_SEPARATOR}{name}"
        return {
            path
            for path in names_to_paths.get(simple_name, ())
            if path == name or path.endswith(suffix)
        }

    def path_for(self, name: str) -> Optional[str]:
        """The only full path the name could refer to, or None if ambiguous or unknown."""
        paths = self.paths_for(name)
        if len(paths) == 1:
            return next(iter(paths))
        return None

    def resolvable(self, name: str, item: CodeObject) -> bool:
        """
        Check whether Ruby itself would resolve ``name`` when written in ``item``.

        A name which is one of the namespaces enclosing ``item`` always
        resolves. Otherwise the name is followed from each enclosing namespace
        up to the root; it resolves if exactly one of those lookups succeeds and
        it doesn't clash with a built-in class, or if none succeed and it is a
        built-in class.
        """
        context = item.namespace

        if NAMESPACE_SEPARATOR not in name:
            if name in context.path.split(NAMESPACE_SEPARATOR):
                return True

        name_parts = name.split(NAMESPACE_SEPARATOR)
        matching_paths: set[str] = set()

        while True:
            followed: Optional[CodeObject] = context
            for part in name_parts:
                if followed is None:
                    break
                followed = followed.child(part, LOOKUP_KINDS)

            if followed is not None:
                matching_paths.add(followed.path)

            if context.is_root or context.parent is None:
                break
            context = context.parent

        is_builtin = name in self.builtin_classes()
        return (is_builtin and not matching_paths) or (
            len(matching_paths) == 1 and not is_builtin
        )
