"""
Unit tests for diagnostics and the diagnostic sink.
"""

import io

import pytest

from yardsig.resolver.registry import Registry
from yardsig.utils.diagnostics import (
    ALL_KINDS,
    Diagnostic,
    DiagnosticKind,
    DiagnosticSink,
    parse_kinds,
)
from yardsig.utils.errors import ConfigurationError, SignatureLoadError, YardSigError


class TestDiagnosticKind:
    """Tests for DiagnosticKind."""

    def test_headers_are_aligned(self):
        """Test that every header has the same width."""
        assert DiagnosticKind.WARN.header == "[WARN ]"
        assert DiagnosticKind.INFER.header == "[INFER]"
        assert {len(kind.header) for kind in DiagnosticKind} == {7}

    def test_color_codes(self):
        assert DiagnosticKind.WARN.color_code() == "\033[93m"
        assert DiagnosticKind.INFO.color_code() == ""

    def test_parse_kinds(self):
        assert parse_kinds(["warn", "INFER"]) == {DiagnosticKind.WARN, DiagnosticKind.INFER}

    def test_parse_unknown_kind(self):
        with pytest.raises(ConfigurationError, match="invalid diagnostic kind 'loud'"):
            parse_kinds(["warn", "loud"])


class TestDiagnostic:
    """Tests for rendering single diagnostics."""

    def test_render_without_item(self):
        diagnostic = Diagnostic(DiagnosticKind.WARN, "something happened")
        assert diagnostic.render(use_color=False) == "[WARN ] something happened"

    def test_render_with_item(self):
        """Test that the item's path and source location are shown."""
        item = Registry().define("A::B", file="lib/a/b.rb", line=3)
        diagnostic = Diagnostic(DiagnosticKind.INFER, "Foo was resolved to A::Foo", item)
        assert diagnostic.render(use_color=False) == (
            "[INFER] (A::B) lib/a/b.rb:3: Foo was resolved to A::Foo"
        )

    def test_render_with_color(self):
        diagnostic = Diagnostic(DiagnosticKind.WARN, "careful")
        assert diagnostic.render(use_color=True) == "\033[93m[WARN ]\033[0m careful"

    def test_location_without_file(self):
        item = Registry().define("A")
        assert Diagnostic(DiagnosticKind.WARN, "x", item).location() == "(A)"


class TestDiagnosticSink:
    """Tests for DiagnosticSink."""

    def test_prints_to_stream(self):
        """Test that diagnostics are written one per line."""
        stream = io.StringIO()
        sink = DiagnosticSink(stream=stream, use_color=False)
        sink.warn("first")
        sink.done("second")
        assert stream.getvalue() == "[WARN ] first\n[DONE ] second\n"

    def test_prints_to_stdout_by_default(self, capsys):
        DiagnosticSink(use_color=False).info("hello")
        assert capsys.readouterr().out == "[INFO ] hello\n"

    def test_silent(self):
        """Test that a silent sink records without printing."""
        stream = io.StringIO()
        sink = DiagnosticSink(stream=stream, silent=True)
        sink.warn("quiet")
        assert stream.getvalue() == ""
        assert [d.message for d in sink.diagnostics] == ["quiet"]

    def test_hooks(self):
        """Test that hooks receive kind, message, item and options."""
        received = []
        sink = DiagnosticSink(silent=True)
        sink.add_hook(lambda kind, message, item, **options: received.append((kind, message, item, options)))
        sink.duck("#foo looks like a duck type", item="scope", original="#foo")
        assert received == [(DiagnosticKind.DUCK, "#foo looks like a duck type", "scope", {"original": "#foo"})]
        assert len(sink.hooks) == 1

    def test_disabled_kinds_are_discarded(self):
        """Test that kinds which aren't enabled never reach the record or hooks."""
        received = []
        sink = DiagnosticSink(silent=True, enabled_kinds={DiagnosticKind.WARN})
        sink.add_hook(lambda kind, message, item, **options: received.append(kind))
        assert sink.infer("ignored") is None
        assert sink.warn("kept") is not None
        assert received == [DiagnosticKind.WARN]
        assert sink.count(DiagnosticKind.INFER) == 0

    def test_enabled_kinds_default(self):
        assert DiagnosticSink().enabled_kinds == ALL_KINDS

    def test_invalid_enabled_kinds(self):
        sink = DiagnosticSink()
        with pytest.raises(ConfigurationError):
            sink.enabled_kinds = {"warn"}

    def test_every_kind_has_a_method(self):
        sink = DiagnosticSink(silent=True)
        for kind in DiagnosticKind:
            getattr(sink, kind.value)("message")
        assert [d.kind for d in sink.diagnostics] == list(DiagnosticKind)

    def test_counts_and_clear(self):
        sink = DiagnosticSink(silent=True)
        sink.warn("a")
        sink.warn("b")
        sink.error("c")
        assert sink.warning_count() == 2
        assert sink.count(DiagnosticKind.ERROR) == 1
        sink.clear()
        assert sink.diagnostics == []


class TestErrors:
    """Tests for the error hierarchy."""

    def test_hierarchy(self):
        assert issubclass(ConfigurationError, YardSigError)
        assert issubclass(SignatureLoadError, YardSigError)

    def test_signature_load_error_path(self, tmp_path):
        error = SignatureLoadError("not a signature file", tmp_path / "x.rb")
        assert error.message == "not a signature file"
        assert str(error) == f"not a signature file ({tmp_path / 'x.rb'})"
        assert str(SignatureLoadError("boom")) == "boom"
