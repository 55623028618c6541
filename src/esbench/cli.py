"""CLI entry point for esbench."""

from __future__ import annotations

import argparse
import json
import logging
import sys

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    ``provision`` runs the binding's full startup (connect, create the index,
    wait for green) and reports cluster health.  ``health`` only connects.
    """
    parser = argparse.ArgumentParser(
        prog="esbench",
        description="esbench: Elasticsearch binding for YCSB-style benchmarks",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"esbench {_get_version()}",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    common.add_argument(
        "-P",
        dest="properties_file",
        type=str,
        default=None,
        help="Path to a workload .properties file",
    )
    common.add_argument(
        "-p",
        dest="properties",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Set a binding property (repeatable, overrides -P)",
    )
    common.add_argument(
        "--db",
        type=str,
        default=None,
        help="Binding name (overrides config)",
    )
    common.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    common.add_argument(
        "--log-format",
        type=str,
        choices=["json", "console"],
        default=None,
        help="Log format (overrides config)",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("provision", parents=[common], help="Create the target index and wait for green health")
    sub.add_parser("health", parents=[common], help="Report cluster health without provisioning")

    args = parser.parse_args(argv)

    from esbench.config.settings import Settings, load_properties, parse_properties
    from esbench.db import registry
    from esbench.db.base import DBError, DBNotFoundError
    from esbench.observability.logging import setup_logging

    try:
        settings = Settings.from_yaml(args.config) if args.config else Settings()
        properties: dict[str, str] = {}
        if args.properties_file:
            properties.update(load_properties(args.properties_file))
        properties.update(parse_properties("\n".join(args.properties)))
        if properties:
            settings = settings.with_properties(properties)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except DBError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.db:
        settings.db = args.db
    if args.log_level:
        settings.observability.log_level = args.log_level
    if args.log_format:
        settings.observability.log_format = args.log_format

    setup_logging(settings.observability)

    try:
        db = registry.create(settings.db, settings.elasticsearch)
    except DBNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        if args.command == "provision":
            db.init()
        else:
            db.connect()
        health = db.health()
    except DBError as e:
        logger.error("%s failed: %s", args.command, e)
        return 1
    finally:
        try:
            db.cleanup()
        except DBError:
            logger.warning("Error closing binding", exc_info=True)

    print(json.dumps(health.model_dump(), indent=2))
    return 0 if health.status != "unhealthy" else 1


def _get_version() -> str:
    """Get the package version."""
    try:
        from esbench import __version__

        return __version__
    except ImportError:
        return "unknown"


def main_cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    main_cli()
