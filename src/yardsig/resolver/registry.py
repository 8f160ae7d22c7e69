"""
Declaration registry for yardsig.

A small model of the documented code base: a tree of code objects (modules,
classes, methods, constants) rooted at an unnamed root namespace. Type names
are resolved against this tree, so the parts used by the resolver are the
ones a scope needs to offer:

- ``namespace``: the nearest enclosing namespace-like object
- ``path``: the fully qualified path (``A::B``, ``A::B#meth``)
- ``child(name, kinds)``: look up a direct child by name and kind
- ``is_root``: whether this is the top of the tree

Example:
    registry = Registry()
    registry.define("A::B::C", CodeObjectKind.CLASS)
    registry.at("A::B").kind          # CodeObjectKind.MODULE (created on the way)
    registry.at("A::B::C").path       # "A::B::C"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Iterator, Optional


NAMESPACE_SEPARATOR = "::"
METHOD_SEPARATOR = "#"


class CodeObjectKind(Enum):
    """Kind of documented declaration."""

    ROOT = auto()
    MODULE = auto()
    CLASS = auto()
    METHOD = auto()
    CONSTANT = auto()

    @property
    def is_namespace(self) -> bool:
        """Whether objects of this kind can contain other declarations."""
        return self in (CodeObjectKind.ROOT, CodeObjectKind.MODULE, CodeObjectKind.CLASS)


# Kinds addressable with "::" paths
DECLARABLE_KINDS = (CodeObjectKind.MODULE, CodeObjectKind.CLASS, CodeObjectKind.CONSTANT)


@dataclass(eq=False)
class CodeObject:
    """
    A documented declaration.

    Attributes:
        name: Simple name ("" for the root)
        kind: The kind of declaration
        parent: Enclosing object, None only for the root
        file: Source file the declaration came from, if known
        line: 1-indexed line of the declaration, if known
        children: Directly nested declarations, in definition order
    """

    name: str
    kind: CodeObjectKind
    parent: Optional[CodeObject] = None
    file: Optional[str] = None
    line: Optional[int] = None
    children: list[CodeObject] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"CodeObject({self.kind.name.lower()} {self.path or '<root>'})"

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def is_namespace(self) -> bool:
        return self.kind.is_namespace

    @property
    def path(self) -> str:
        """Fully qualified path of this object; the root's path is empty."""
        if self.parent is None:
            return ""
        parent_path = self.parent.path
        if self.kind == CodeObjectKind.METHOD:
            return f"{parent_path}{METHOD_SEPARATOR}{self.name}"
        if not parent_path:
            return self.name
        return f"{parent_path}{NAMESPACE_SEPARATOR}{self.name}"

    @property
    def namespace(self) -> CodeObject:
        """The nearest namespace-like object, starting at this one."""
        current = self
        while not current.is_namespace:
            if current.parent is None:
                raise ValueError(f"{self!r} has no enclosing namespace")
            current = current.parent
        return current

    def child(
        self, name: str, kinds: Optional[Iterable[CodeObjectKind]] = None
    ) -> Optional[CodeObject]:
        """
        Find a direct child by name.

        Args:
            name: Simple name of the child
            kinds: Accepted kinds, or None to accept any kind

        Returns:
            The first matching child, or None
        """
        accepted = set(kinds) if kinds is not None else None
        for candidate in self.children:
            if candidate.name != name:
                continue
            if accepted is None or candidate.kind in accepted:
                return candidate
        return None

    def walk(self) -> Iterator[CodeObject]:
        """Yield this object and every descendant, depth first."""
        yield self
        for candidate in self.children:
            yield from candidate.walk()


class Registry:
    """
    Holds the declaration tree for one documentation corpus.

    Objects are created through ``define`` and ``define_method`` so that every
    object has a parent and appears in its parent's children.
    """

    def __init__(self) -> None:
        self.root = CodeObject("", CodeObjectKind.ROOT)

    def define(
        self,
        path: str,
        kind: CodeObjectKind = CodeObjectKind.CLASS,
        file: Optional[str] = None,
        line: Optional[int] = None,
    ) -> CodeObject:
        """
        Define a module, class or constant by its path.

        Missing intermediate namespaces are created as modules. Defining an
        existing path returns the existing object, upgrading an implicitly
        created module to the requested kind.
        """
        if kind in (CodeObjectKind.ROOT, CodeObjectKind.METHOD):
            raise ValueError(f"cannot define a {kind.name.lower()} by path")

        parts = [part for part in path.split(NAMESPACE_SEPARATOR) if part]
        if not parts:
            raise ValueError(f"invalid path {path!r}")

        current = self.root
        for index, part in enumerate(parts):
            is_last = index == len(parts) - 1
            existing = current.child(part, DECLARABLE_KINDS)
            if existing is None:
                existing = CodeObject(
                    part,
                    kind if is_last else CodeObjectKind.MODULE,
                    parent=current,
                    file=file if is_last else None,
                    line=line if is_last else None,
                )
                current.children.append(existing)
            elif is_last:
                existing.kind = kind
                if file is not None:
                    existing.file = file
                    existing.line = line
            current = existing
        return current

    def define_method(
        self,
        namespace_path: str,
        name: str,
        file: Optional[str] = None,
        line: Optional[int] = None,
    ) -> CodeObject:
        """Define a method inside the namespace at ``namespace_path``."""
        if namespace_path:
            owner = self.at(namespace_path)
            if owner is None:
                owner = self.define(namespace_path, CodeObjectKind.MODULE)
        else:
            owner = self.root
        if not owner.is_namespace:
            raise ValueError(f"{namespace_path!r} is not a namespace")

        method = owner.child(name, [CodeObjectKind.METHOD])
        if method is None:
            method = CodeObject(name, CodeObjectKind.METHOD, parent=owner, file=file, line=line)
            owner.children.append(method)
        return method

    def at(self, path: str) -> Optional[CodeObject]:
        """Look up an object by its full path (``A::B`` or ``A::B#meth``)."""
        if not path or path == NAMESPACE_SEPARATOR:
            return self.root

        method_name = None
        if METHOD_SEPARATOR in path:
            path, method_name = path.split(METHOD_SEPARATOR, 1)

        current: Optional[CodeObject] = self.root
        for part in path.split(NAMESPACE_SEPARATOR):
            if not part:
                continue
            current = current.child(part, DECLARABLE_KINDS) if current is not None else None
        if current is not None and method_name is not None:
            current = current.child(method_name, [CodeObjectKind.METHOD])
        return current

    def all(self, *kinds: CodeObjectKind) -> list[CodeObject]:
        """Every object (excluding the root) of the given kinds, or of any kind."""
        accepted = set(kinds)
        return [
            obj
            for obj in self.root.walk()
            if not obj.is_root and (not accepted or obj.kind in accepted)
        ]

    def clear(self) -> None:
        """Remove every declaration."""
        self.root = CodeObject("", CodeObjectKind.ROOT)
