"""Command-line entry point for mysqlenv."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Mapping, Sequence

from .config import build_store
from .overlay import MysqlEnvironmentProcessor
from .resolver import PASSWORD_PROPERTY
from .store import ConfigStore

LOG = logging.getLogger(__name__)


def mask_secret(value: str, mask_char: str = "*") -> str:
    """Mask a secret for display, keeping two characters at each end."""

    if len(value) <= 4:
        return mask_char * len(value)
    return value[:2] + mask_char * (len(value) - 4) + value[-2:]


def bootstrap(
    environ: Mapping[str, str] | None = None,
    config_file: Path | None = None,
) -> tuple[ConfigStore, dict[str, str]]:
    """Build the configuration store and apply the MySQL overlay once."""

    store = build_store(environ, config_file)
    overrides = MysqlEnvironmentProcessor().process(store)
    return store, overrides


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mysqlenv",
        description="Resolve MySQL datasource settings from platform environment variables.",
    )
    parser.add_argument("--config", type=Path, default=None, help="TOML configuration file.")
    parser.add_argument("--format", choices=("text", "json"), default="text")
    parser.add_argument(
        "--show-secrets",
        action="store_true",
        help="Print the password instead of a masked value.",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def _render(overrides: Mapping[str, str], output_format: str, show_secrets: bool) -> str:
    shown = dict(overrides)
    if not show_secrets and shown.get(PASSWORD_PROPERTY):
        shown[PASSWORD_PROPERTY] = mask_secret(shown[PASSWORD_PROPERTY])
    if output_format == "json":
        return json.dumps(shown, indent=2)
    return "\n".join(f"{key}={value}" for key, value in shown.items())


def main(argv: Sequence[str] | None = None) -> int:
    """Resolve against the current environment and print the overlay."""

    args = _build_parser().parse_args(argv)
    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    _, overrides = bootstrap(config_file=args.config)
    if not overrides:
        print("No MySQL configuration detected.", file=sys.stderr)
        return 0
    print(_render(overrides, args.format, args.show_secrets))
    return 0


if __name__ == "__main__":
    sys.exit(main())
