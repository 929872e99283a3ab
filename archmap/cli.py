"""CLI entrypoints for archmap commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .budgets import BUDGET_PROFILES
from .config import ConfigError
from .logging import configure_logging
from .pipeline import DEFAULT_OUTPUT, MapOptions, MapPipeline

_MAX_PRINTED_WARNINGS = 5


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}") from exc
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="archmap",
        description="Generate a deterministic architecture map from a repository's import graph.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    map_parser = subparsers.add_parser(
        "map",
        help=f"Analyze a repository and write {DEFAULT_OUTPUT}.",
    )
    _add_verbose_option(map_parser, suppress_default=True)
    map_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )
    map_parser.add_argument(
        "--out",
        default=None,
        help=f"Output file, relative to the repository root (default: {DEFAULT_OUTPUT}).",
    )
    map_parser.add_argument(
        "--config",
        default=None,
        help="Path to an .archmap.yml file (defaults to the one in the repository root).",
    )
    map_parser.add_argument(
        "--focus",
        default=None,
        help="File or directory that must stay expanded in the project tree.",
    )
    map_parser.add_argument(
        "--focus-file",
        default=None,
        help="File to deep-dive: importers, imports and impact path to the public API.",
    )
    map_parser.add_argument(
        "--depth",
        type=_non_negative_int,
        default=None,
        help="Collapse tree directories at this depth or deeper.",
    )
    map_parser.add_argument(
        "--budget",
        choices=sorted(BUDGET_PROFILES),
        default=None,
        help="Budget profile for list truncation (default: default).",
    )
    map_parser.add_argument(
        "--full-signals",
        action="store_true",
        help="Disable every budget and render all lists in full.",
    )
    map_parser.add_argument(
        "--show-orphans",
        action="store_true",
        help="Show ORPHAN on tests, docs and other noise files too.",
    )
    map_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the map instead of writing it to disk.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing map generation.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for archmap commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    if args.command == "map":
        pipeline = MapPipeline()
        options = MapOptions(
            out=args.out,
            config_path=args.config,
            focus=args.focus,
            focus_file=args.focus_file,
            depth=args.depth,
            budget_profile=args.budget,
            full_signals=bool(args.full_signals),
            show_orphans=bool(args.show_orphans),
        )
        try:
            result = pipeline.run(args.path, options)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except ConfigError as exc:
            parser.exit(1, f"Error: {exc}\n")

        if args.stdout:
            sys.stdout.write(result.content)
        else:
            written = pipeline.write(result)
            print(f"Architecture map written to {_relativize(written)} ({result.file_count} files)")
        _print_warnings(result.warnings)
    elif args.command == "serve":
        from .service.app import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _print_warnings(warnings: list[str]) -> None:
    if not warnings:
        return
    print(f"{len(warnings)} warning(s):", file=sys.stderr)
    for warning in warnings[:_MAX_PRINTED_WARNINGS]:
        print(f"  - {warning}", file=sys.stderr)
    hidden = len(warnings) - _MAX_PRINTED_WARNINGS
    if hidden > 0:
        print(f"  ... and {hidden} more (see the Warnings section)", file=sys.stderr)


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
