"""
Pytest configuration and shared fixtures for yardsig tests.
"""

from pathlib import Path
from typing import Iterable, Optional

import pytest

from yardsig.converter.config import Configuration
from yardsig.converter.type_converter import TypeConverter
from yardsig.converter.type_nodes import TypeNode
from yardsig.resolver.builtins import DEFAULT_RUBY_VERSION, RubyVersion
from yardsig.resolver.registry import CodeObject, CodeObjectKind, Registry
from yardsig.resolver.resolver import Resolver
from yardsig.utils.diagnostics import DiagnosticKind, DiagnosticSink


@pytest.fixture
def registry() -> Registry:
    """An empty declaration registry."""
    return Registry()


@pytest.fixture
def sink() -> DiagnosticSink:
    """A sink which records diagnostics without printing them."""
    return DiagnosticSink(silent=True)


@pytest.fixture
def declare(registry):
    """Fixture to declare classes and modules in the registry."""

    def _declare(*paths: str, kind: CodeObjectKind = CodeObjectKind.CLASS) -> Optional[CodeObject]:
        obj = None
        for path in paths:
            obj = registry.define(path, kind)
        return obj

    return _declare


@pytest.fixture
def resolver_factory(registry, sink):
    """Factory fixture for creating resolvers over the shared registry."""

    def _create_resolver(
        signature_paths: Iterable[Path] = (),
        ruby_version: RubyVersion = DEFAULT_RUBY_VERSION,
    ) -> Resolver:
        return Resolver(registry, signature_paths, ruby_version, sink=sink)

    return _create_resolver


@pytest.fixture
def resolver(resolver_factory) -> Resolver:
    """A resolver over the shared registry, without signature directories."""
    return resolver_factory()


@pytest.fixture
def converter_factory(sink):
    """Factory fixture for creating converters."""

    def _create_converter(
        mode: str = "rbi",
        resolver: Optional[Resolver] = None,
        **options: bool,
    ) -> TypeConverter:
        config = Configuration.for_mode(mode, **options)
        return TypeConverter(config, resolver, sink)

    return _create_converter


@pytest.fixture
def convert(converter_factory):
    """Fixture to convert a YARD type with the default RBI configuration."""
    converter = converter_factory()

    def _convert(yard, item=None) -> TypeNode:
        return converter.convert(yard, item)

    return _convert


@pytest.fixture
def messages(sink):
    """Fixture returning the recorded messages of one diagnostic kind."""

    def _messages(kind: DiagnosticKind = DiagnosticKind.WARN) -> list[str]:
        return [d.message for d in sink.diagnostics if d.kind == kind]

    return _messages
