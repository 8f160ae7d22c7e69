"""
yardsig Command-Line Interface.

Converts YARD types from the command line and inspects how names resolve.

Usage:
    yardsig convert "Array<String>" "Hash{Symbol => Integer}"
    yardsig convert --mode rbs "#to_s"
    yardsig convert --list String nil            # alternatives of one tag
    yardsig convert --declare A::B --scope A Foo
    yardsig resolve --declare A::E::F --scope A::B F
    yardsig builtins --ruby-version 2.7
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from yardsig import __version__
from yardsig.converter.config import VALID_MODES, Configuration, Dialect
from yardsig.converter.type_converter import TypeConverter
from yardsig.resolver.builtins import DEFAULT_RUBY_VERSION, builtin_classes, parse_ruby_version
from yardsig.resolver.registry import METHOD_SEPARATOR, CodeObject, CodeObjectKind, Registry
from yardsig.resolver.resolver import Resolver
from yardsig.utils.diagnostics import DiagnosticSink, parse_kinds
from yardsig.utils.errors import YardSigError


logger = logging.getLogger("yardsig")


# =============================================================================
# ANSI Color Codes for Terminal Output
# =============================================================================


class Colors:
    """ANSI escape codes for colored terminal output."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls) -> None:
        """Disable all colors (for non-TTY output)."""
        cls.RED = ""
        cls.GREEN = ""
        cls.YELLOW = ""
        cls.CYAN = ""
        cls.GRAY = ""
        cls.BOLD = ""
        cls.RESET = ""


def _init_colors() -> None:
    """Initialize colors based on terminal capabilities."""
    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        Colors.disable()


_init_colors()


# =============================================================================
# Argument Parsing
# =============================================================================


def _common_options() -> argparse.ArgumentParser:
    """Options shared by every subcommand."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-m",
        "--mode",
        choices=VALID_MODES,
        default=Dialect.RBI.value,
        help="Signature language to render types in (default: rbi)",
    )
    common.add_argument(
        "--declare",
        action="append",
        default=[],
        metavar="PATH",
        help=(
            "Declare a class in the registry, e.g. A::B, or a method with A::B#meth "
            "(may be repeated)"
        ),
    )
    common.add_argument(
        "--scope",
        default=None,
        metavar="PATH",
        help="Declaration the types are written in; bare names are only resolved with a scope",
    )
    common.add_argument(
        "--signatures",
        action="append",
        default=[],
        type=Path,
        metavar="DIR",
        help="Directory of dependency .rbs/.rbi files (may be repeated)",
    )
    common.add_argument(
        "--ruby-version",
        default=".".join(str(part) for part in DEFAULT_RUBY_VERSION),
        help="Ruby version whose built-in classes are known (default: %(default)s)",
    )
    common.add_argument(
        "--replace-errors-with-untyped",
        action="store_true",
        help="Use untyped instead of error constants for unparseable types",
    )
    common.add_argument(
        "--replace-unresolved-with-untyped",
        action="store_true",
        help="Use untyped for names which can't be resolved",
    )
    common.add_argument(
        "--diagnostics",
        default=None,
        metavar="KINDS",
        help="Comma-separated diagnostic kinds to show (default: all)",
    )
    common.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Don't print diagnostics",
    )
    common.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    common.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="warning",
        help="Logging level (default: warning)",
    )
    return common


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="yardsig",
        description="yardsig - Convert YARD types into Sorbet RBI and RBS types",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    common = _common_options()

    # Convert command
    convert_parser = subparsers.add_parser(
        "convert",
        aliases=["c"],
        parents=[common],
        help="Convert YARD types",
    )
    convert_parser.add_argument(
        "types",
        nargs="+",
        metavar="TYPE",
        help="YARD type, e.g. 'Array<String>'",
    )
    convert_parser.add_argument(
        "--list",
        action="store_true",
        help="Treat all TYPE arguments as the alternatives of a single tag",
    )

    # Resolve command
    resolve_parser = subparsers.add_parser(
        "resolve",
        aliases=["r"],
        parents=[common],
        help="Show how a type name resolves",
    )
    resolve_parser.add_argument(
        "name",
        help="Type name, e.g. 'F' or 'E::F'",
    )

    # Builtins command
    subparsers.add_parser(
        "builtins",
        parents=[common],
        help="List the built-in classes of a Ruby version",
    )

    return parser


# =============================================================================
# Setup Helpers
# =============================================================================


def _configure_logging(args: argparse.Namespace) -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.setLevel(getattr(logging, args.log_level.upper()))


def _build_sink(args: argparse.Namespace) -> DiagnosticSink:
    """Diagnostics go to stderr so that stdout only holds results."""
    if args.no_color:
        Colors.disable()
    sink = DiagnosticSink(
        stream=sys.stderr,
        silent=args.quiet,
        use_color=not args.no_color and sys.stderr.isatty(),
    )
    if args.diagnostics:
        sink.enabled_kinds = parse_kinds(
            name.strip() for name in args.diagnostics.split(",") if name.strip()
        )
    return sink


def _build_registry(declarations: list[str]) -> Registry:
    registry = Registry()
    for declaration in declarations:
        try:
            if METHOD_SEPARATOR in declaration:
                namespace_path, method_name = declaration.split(METHOD_SEPARATOR, 1)
                registry.define_method(namespace_path, method_name)
            else:
                registry.define(declaration, CodeObjectKind.CLASS)
        except ValueError as e:
            raise YardSigError(f"cannot declare {declaration!r}: {e}") from None
        logger.debug("Declared %s", declaration)
    return registry


def _build_resolver(args: argparse.Namespace, sink: DiagnosticSink) -> Resolver:
    try:
        ruby_version = parse_ruby_version(args.ruby_version)
    except ValueError as e:
        raise YardSigError(str(e)) from None
    return Resolver(
        _build_registry(args.declare),
        signature_paths=args.signatures,
        ruby_version=ruby_version,
        sink=sink,
    )


def _find_scope(registry: Registry, path: Optional[str]) -> Optional[CodeObject]:
    if path is None:
        return None
    scope = registry.at(path)
    if scope is None:
        raise YardSigError(f"scope {path!r} is not declared; add it with --declare")
    return scope


# =============================================================================
# Commands
# =============================================================================


def cmd_convert(args: argparse.Namespace) -> int:
    """Handle the convert command."""
    sink = _build_sink(args)
    config = Configuration.for_mode(
        args.mode,
        replace_errors_with_untyped=args.replace_errors_with_untyped,
        replace_unresolved_with_untyped=args.replace_unresolved_with_untyped,
    )
    resolver = _build_resolver(args, sink)
    scope = _find_scope(resolver.registry, args.scope)
    converter = TypeConverter(config, resolver, sink)

    if args.list:
        print(converter.convert(args.types, scope).render(config.output_language))
        return 0

    for yard in args.types:
        rendered = converter.convert(yard, scope).render(config.output_language)
        if len(args.types) == 1:
            print(rendered)
        else:
            print(f"{Colors.CYAN}{yard}{Colors.RESET}: {rendered}")
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """Handle the resolve command."""
    sink = _build_sink(args)
    resolver = _build_resolver(args, sink)
    scope = _find_scope(resolver.registry, args.scope)
    name: str = args.name

    if scope is not None:
        if resolver.resolvable(name, scope):
            print(f"{Colors.GREEN}resolvable{Colors.RESET} from {scope.path or '<root>'}")
        else:
            print(f"{Colors.YELLOW}not resolvable{Colors.RESET} from {scope.path or '<root>'}")

    paths = sorted(resolver.paths_for(name))
    if not paths:
        print(f"{Colors.RED}unknown:{Colors.RESET} {name}")
        return 1

    if len(paths) == 1:
        print(f"{Colors.BOLD}path:{Colors.RESET} {paths[0]}")
    else:
        print(f"{Colors.YELLOW}ambiguous:{Colors.RESET} {name} could be any of")
        for path in paths:
            print(f"  {path}")
    return 0


def cmd_builtins(args: argparse.Namespace) -> int:
    """Handle the builtins command."""
    try:
        ruby_version = parse_ruby_version(args.ruby_version)
    except ValueError as e:
        raise YardSigError(str(e)) from None

    for name in sorted(builtin_classes(ruby_version)):
        print(name)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    _configure_logging(args)

    command_handlers = {
        "convert": cmd_convert,
        "c": cmd_convert,
        "resolve": cmd_resolve,
        "r": cmd_resolve,
        "builtins": cmd_builtins,
    }

    handler = command_handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except YardSigError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
