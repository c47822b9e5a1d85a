"""CLI entrypoints for sitegen commands."""

from __future__ import annotations

import argparse
import sys
from collections import Counter

from .cancellation import CancellationToken
from .config import ConfigError
from .errors import SiteGenError
from .logging import configure_logging
from .site import Site


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


def _add_site_arguments(parser: argparse.ArgumentParser) -> None:
    _add_verbose_option(parser, suppress_default=True)
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the site root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitegen",
        description="Build static documentation sites from markdown sources.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser("build", help="Run a single build pass.")
    _add_site_arguments(build_parser)
    build_parser.add_argument(
        "--output-type",
        default=None,
        help="Output type to build (defaults to the configured output type).",
    )

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze sources and report diagnostics without building.",
    )
    _add_site_arguments(analyze_parser)

    watch_parser = subparsers.add_parser(
        "watch",
        help="Build, then rebuild whenever sources change (Ctrl+C to stop).",
    )
    _add_site_arguments(watch_parser)
    watch_parser.add_argument("--output-type", default=None)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP build service.")
    _add_site_arguments(serve_parser)
    serve_parser.add_argument("--host", default=None, help="Bind address override.")
    serve_parser.add_argument("--port", type=int, default=None, help="Port override.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for sitegen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        site = Site(args.path)
    except (FileNotFoundError, ConfigError) as exc:
        parser.exit(1, f"{exc}\n")

    try:
        if args.command == "build":
            if not site.build(args.output_type):
                parser.exit(1, "sitegen build failed. Run with --verbose for more details.\n")
            print(f"Site built at {site.config.output_dir}")
        elif args.command == "analyze":
            files = site.analyze()
            counts: Counter[str] = Counter(
                result.severity.value for file in files for result in file.analysis_results
            )
            print(
                f"Analyzed {len(files)} files: {counts['error']} errors, "
                f"{counts['warning']} warnings, {counts['suggestion']} suggestions"
            )
            if counts["error"]:
                parser.exit(1)
        elif args.command == "watch":
            token = CancellationToken()
            try:
                site.watch(token, args.output_type)
            except KeyboardInterrupt:
                token.cancel()
                print("Stopped watching")
        elif args.command == "serve":
            from .service import run_service

            run_service(
                site,
                host=args.host or site.config.service.host,
                port=args.port or site.config.service.port,
            )
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except SiteGenError as exc:
        parser.exit(1, f"sitegen {args.command} failed: {exc}\n")
    except NotADirectoryError as exc:
        parser.exit(1, f"{exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
