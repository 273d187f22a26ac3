"""ACMEDIR command-line entry point.

Usage::

    acmedir services
    acmedir resolve --service LetsEncrypt
    acmedir resolve --url https://acme.example.com/directory --export saved.acmedir
    acmedir resolve --path saved.acmedir --nonce
    acmedir -c config.yaml resolve
    python -m acmedir resolve --service LetsEncrypt-Staging
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

log = logging.getLogger(__name__)


def _get_version() -> str:
    from acmedir import __version__

    return __version__


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="acmedir",
        description="ACMEDIR -- resolve ACME service directories",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="PATH",
        help="Path to a configuration file (YAML or JSON).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable debug output (full tracebacks, verbose logging).",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # services
    subparsers.add_parser("services", help="List known ACME service names")

    # resolve
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve a service directory and print it as JSON",
    )
    source = resolve_parser.add_mutually_exclusive_group()
    source.add_argument("--service", metavar="NAME", help="Registered service name")
    source.add_argument("--url", metavar="URL", help="Directory URL, used verbatim")
    source.add_argument("--path", metavar="FILE", help="Previously exported snapshot")
    resolve_parser.add_argument(
        "--export",
        metavar="FILE",
        help="Also write the directory to FILE (.json for JSON, else snapshot).",
    )
    resolve_parser.add_argument(
        "--nonce",
        action="store_true",
        default=False,
        help="Bootstrap an initial nonce from the directory's newNonce endpoint.",
    )

    return parser


def _print_error(message: str) -> None:
    """Print a user-facing error to stderr."""
    sys.stderr.write(f"error: {message}\n")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.  Parses arguments, loads config, runs the command."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # -- bootstrap logging early (basic stderr until config is loaded) ---
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    # -- load & validate config ---
    if args.config:
        config_path = Path(args.config)
        if not config_path.is_file():
            _print_error(f"configuration file not found: {config_path}")
            sys.exit(1)
        try:
            from acmedir.config import AcmedirConfig, ConfigValidationError

            config = AcmedirConfig(config_file=str(config_path))
        except ConfigValidationError as exc:
            _print_error(str(exc))
            sys.exit(1)

        from acmedir.logging import configure_logging

        configure_logging(config.settings.logging)

    if args.command == "services":
        _run_services()
    else:
        _run_resolve(args)


def _run_services() -> None:
    """Print every known service name with its directory URL."""
    from acmedir.config import current_settings
    from acmedir.core.registry import EndpointRegistry

    registry = EndpointRegistry.from_settings(current_settings().services)
    for name in registry.names():
        marker = " (default)" if name == registry.default_service else ""
        sys.stdout.write(f"{name}{marker}\t{registry.directory_url(name)}\n")


def _run_resolve(args) -> None:
    """Resolve the selected directory, optionally export it, print it."""
    from acmedir.directory.snapshot import export_directory
    from acmedir.errors import DirectoryError
    from acmedir.service_directory import get_service_directory
    from acmedir.state.context import AcmeContext

    context = AcmeContext()
    try:
        directory = get_service_directory(
            service_name=args.service,
            directory_url=args.url,
            path=args.path,
            activate_directory=True,
            activate_nonce=args.nonce,
            context=context,
        )
    except DirectoryError as exc:
        if args.debug:
            raise
        _print_error(exc.detail)
        sys.exit(1)

    if args.export:
        try:
            export_directory(directory, args.export)
        except OSError as exc:
            _print_error(f"cannot write {args.export}: {exc}")
            sys.exit(1)

    output = directory.to_dict()
    if context.nonce is not None:
        output = {"directory": output, "nonce": context.nonce.token}
    sys.stdout.write(json.dumps(output, indent=2) + "\n")
