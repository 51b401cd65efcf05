"""
Elastic Explorer CLI — operator entry points for the vault and the client.

Usage:
    elastic-explorer init            # Move legacy data, create key + database
    elastic-explorer migrate status  # Show applied vs pending SQL migrations
    elastic-explorer migrate apply   # Apply pending SQL migrations
    elastic-explorer endpoints       # List endpoints (passwords shown as set/unset)
    elastic-explorer probe ID        # Detect a cluster's version
    elastic-explorer version         # Show version
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from elastic_explorer.errors import ConfigError, ExplorerError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="elastic-explorer",
        description="Elastic Explorer — credential vault and Elasticsearch client.",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level")

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("init", help="Prepare key, database and legacy data")

    migrate_parser = subparsers.add_parser("migrate", help="Run database migrations")
    migrate_parser.add_argument("action", nargs="?", choices=["status", "apply"], default="status")
    migrate_parser.add_argument("--dry-run", action="store_true", help="List without applying")

    subparsers.add_parser("endpoints", help="List registered endpoints")

    probe_parser = subparsers.add_parser("probe", help="Detect an endpoint's cluster version")
    probe_parser.add_argument("endpoint_id", type=int, help="Endpoint id")

    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.version or args.command == "version":
        from elastic_explorer import __version__

        print(f"elastic-explorer {__version__}")
        return 0

    if args.command is None:
        parser.print_help()
        return 0

    handlers = {
        "init": _cmd_init,
        "migrate": _cmd_migrate,
        "endpoints": _cmd_endpoints,
        "probe": _cmd_probe,
    }
    try:
        return handlers[args.command](args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1


def _configure_logging(verbose: bool) -> None:
    from elastic_explorer.config import get_config

    level = "INFO" if verbose else get_config().log_level
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _cmd_init(args: argparse.Namespace) -> int:
    from elastic_explorer.bootstrap import bootstrap

    runtime = bootstrap()
    try:
        cfg = runtime.config
        print(f"  Data directory: {cfg.app_dir}")
        print(f"  Key file:       {cfg.key_path}")
        print(f"  Database:       {cfg.db_path}")
        report = runtime.legacy_report
        if not report.skipped:
            print(
                f"  Legacy passwords: {len(report.migrated)} migrated, "
                f"{len(report.unrecoverable)} unrecoverable"
            )
    finally:
        runtime.close()
    return 0


def _cmd_migrate(args: argparse.Namespace) -> int:
    from elastic_explorer.db import migrate

    argv = [args.action]
    if args.dry_run:
        argv.append("--dry-run")
    return migrate.main(argv)


def _cmd_endpoints(args: argparse.Namespace) -> int:
    from elastic_explorer.bootstrap import bootstrap

    runtime = bootstrap()
    try:
        endpoints = runtime.endpoints.list()
        if not endpoints:
            print("No endpoints registered.")
            return 0
        print(f"{'ID':<5} {'Name':<25} {'URL':<40} {'User':<15} {'Password'}")
        print("-" * 95)
        for ep in endpoints:
            pw = "set" if ep.has_password else "unset"
            print(f"{ep.id:<5} {ep.name:<25} {ep.url:<40} {ep.username or '':<15} {pw}")
    finally:
        runtime.close()
    return 0


def _cmd_probe(args: argparse.Namespace) -> int:
    from elastic_explorer.bootstrap import bootstrap

    runtime = bootstrap()
    try:
        endpoint = runtime.endpoints.get(args.endpoint_id)
        if endpoint is None:
            print(f"Endpoint {args.endpoint_id} not found.", file=sys.stderr)
            return 1
        return asyncio.run(_probe(runtime.client_for(endpoint), endpoint.name))
    finally:
        runtime.close()


async def _probe(client, name: str) -> int:
    async with client:
        try:
            version = await client.detect_version()
        except ExplorerError as e:
            print(f"{name}: {e}", file=sys.stderr)
            return 1
        print(f"{name}: Elasticsearch {version}")
        print(f"  index templates: {client.gate.path_for('index_template_v2')}")
        for capability in ("sql", "component_templates", "data_streams", "legacy_templates"):
            state = "yes" if client.gate.supports(capability) else "no"
            print(f"  {capability}: {state}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
