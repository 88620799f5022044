"""CLI entrypoints for fluentgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import (
    STRATEGIES,
    UNSUPPORTED_POLICIES,
    ConfigError,
    FluentGenConfig,
    load_config,
)
from .generator import FluentGenerator
from .logging import configure_logging
from .models import GenerationResult
from .sink import write_combined, write_combined_file, write_per_file


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


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fluentgen",
        description="Generate chainable With<Field> setters for Go struct types.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate setters for a directory, file or package.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "path",
        help="Directory or file to scan (or package import path with --strategy resolved).",
    )
    generate_parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Destination file (combined mode) or directory (per-file mode). Defaults to stdout.",
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        dest="output_option",
        default=None,
        help="Same as the positional OUTPUT argument.",
    )
    generate_parser.add_argument(
        "--suffix",
        default=None,
        help="Only struct types whose name ends with this suffix get setters (default: Style).",
    )
    generate_parser.add_argument(
        "--receiver",
        default=None,
        help="Receiver name used by generated methods (default: style).",
    )
    generate_parser.add_argument(
        "--strategy",
        choices=STRATEGIES,
        default=None,
        help="Declaration discovery strategy (default: syntax).",
    )
    generate_parser.add_argument(
        "--unsupported",
        choices=UNSUPPORTED_POLICIES,
        default=None,
        help="What to do with fields whose type cannot be rendered (default: skip).",
    )
    generate_parser.add_argument(
        "--per-file",
        action="store_const",
        const="per-file",
        dest="mode",
        default=None,
        help="Write <name>_fluent.go next to each input instead of one combined file.",
    )
    generate_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of files parsed in parallel.",
    )
    generate_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .fluentgen.yml file (defaults to the one in the input directory).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP generation service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for fluentgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "generate":
        try:
            config = _resolve_config(args)
        except ConfigError as exc:
            parser.exit(2, f"fluentgen: invalid configuration: {exc}\n")
        try:
            generator = FluentGenerator(config)
            result = generator.generate(args.path)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"fluentgen: {exc}\n")
        except RuntimeError as exc:
            parser.exit(1, f"fluentgen generate failed: {exc}\nRun with --verbose for more details.\n")
        try:
            _emit(result, config)
        except OSError as exc:
            parser.exit(1, f"fluentgen: writing output: {exc}\n")
        if not result.ok:
            for failure in result.failures:
                sys.stderr.write(f"error: {failure.error}\n")
            parser.exit(1)
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _resolve_config(args: argparse.Namespace) -> FluentGenConfig:
    if args.config is not None:
        base = load_config(args.config)
    else:
        target = Path(args.path)
        base = load_config(target if target.is_dir() else target.parent)
    output = args.output_option or args.output
    return base.with_overrides(
        suffix=args.suffix,
        receiver=args.receiver,
        strategy=args.strategy,
        unsupported_types=args.unsupported,
        workers=args.workers,
        output_mode=args.mode,
        output_path=Path(output) if output else None,
    )


def _emit(result: GenerationResult, config: FluentGenConfig) -> None:
    output = config.output
    if output.mode == "per-file":
        write_per_file(result, file_suffix=output.file_suffix, directory=output.path)
    elif output.path is not None:
        write_combined_file(result, output.path)
    else:
        write_combined(result, sys.stdout)


__all__ = ["main"]


if __name__ == "__main__":
    main(sys.argv[1:])
