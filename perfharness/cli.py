"""CLI entry point for the HTTP performance harness."""

import asyncio
import logging
import sys

import click

from perfharness.catalog import CATALOGS, CatalogValidationError, load_catalog
from perfharness.display import render_report
from perfharness.drivers import (
    run_load_test,
    run_monitor,
    run_quick_benchmark,
    run_validation,
)
from perfharness.export import build_export, default_export_path, write_export
from perfharness.prober import Prober

DEFAULT_BASE_URL = "http://localhost:3004"

USAGE = """\
Unknown test type. Available options:
  cambridge [requests]        - Validation test on known-good endpoints (default: 100 requests)
  quick [requests]            - Quick benchmark (default: 100 requests)
  load [users] [duration]     - Load test (default: 3 users, 60 seconds)
  monitor [interval]          - Real-time monitoring (default: 5 seconds)

Usage examples:
  perf-harness http://localhost:3000 cambridge
  perf-harness http://localhost:3003 quick 50
  perf-harness https://example.com load 5 120
  perf-harness http://localhost:3000 monitor 10"""

TEST_TYPES = {
    "cambridge": "validation",
    "validation": "validation",
    "quick": "quick-benchmark",
    "load": "load-test",
    "monitor": "monitor",
}


def make_prober(base_url: str, timeout: float) -> Prober:
    return Prober(base_url, timeout=timeout)


def _positive_int(args, index: int, default: int) -> int:
    """Read ``args[index]`` as a positive int, falling back to ``default``."""
    try:
        value = int(args[index])
    except (IndexError, ValueError):
        return default
    return value if value > 0 else default


def _resolve_catalog(name):
    if name is None:
        return CATALOGS["default"]
    if name in CATALOGS:
        return CATALOGS[name]
    return load_catalog(name)


@click.command()
@click.argument("base_url", required=False, default=DEFAULT_BASE_URL)
@click.argument("mode", required=False, default="quick")
@click.argument("args", nargs=-1)
@click.option(
    "--out",
    default=None,
    type=click.Path(),
    help="Output path for the JSON export. Defaults to a timestamped file.",
)
@click.option("--no-export", is_flag=True, help="Skip writing the JSON export.")
@click.option(
    "--catalog",
    "catalog_name",
    default=None,
    help="Endpoint catalog: default, validation, comprehensive, or a YAML/JSON file.",
)
@click.option(
    "--timeout",
    default=10.0,
    type=float,
    show_default=True,
    help="Per-request timeout in seconds.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(base_url, mode, args, out, no_export, catalog_name, timeout, verbose):
    """Measure latency and success rate of an HTTP service.

    MODE is one of cambridge, quick, load or monitor.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if mode not in TEST_TYPES:
        click.echo(USAGE, err=True)
        sys.exit(2)

    try:
        catalog = _resolve_catalog(catalog_name)
    except CatalogValidationError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    click.echo(f"Target: {base_url.rstrip('/')}")

    if mode == "monitor":
        interval = _positive_int(args, 0, 5)
        click.echo(f"Interval: {interval} seconds")
        click.echo("Press Ctrl+C to stop monitoring")
        try:
            asyncio.run(_monitor(base_url, timeout, interval, catalog))
        except KeyboardInterrupt:
            pass
        except Exception as exc:
            click.echo(f"Error: performance test failed: {exc}", err=True)
            sys.exit(1)
        return

    try:
        report = asyncio.run(_run(base_url, timeout, mode, args, catalog))
    except Exception as exc:
        click.echo(f"Error: performance test failed: {exc}", err=True)
        sys.exit(1)

    click.echo(render_report(report))

    if not no_export:
        data = build_export(report, base_url.rstrip("/"), TEST_TYPES[mode])
        try:
            path = write_export(data, out or default_export_path())
        except OSError as exc:
            click.echo(f"Error: could not write export: {exc}", err=True)
            sys.exit(1)
        click.echo(f"Results exported to: {path}")


async def _run(base_url, timeout, mode, args, catalog):
    async with make_prober(base_url, timeout) as prober:
        if mode in ("cambridge", "validation"):
            requests = _positive_int(args, 0, 100)
            click.echo(f"Requests: {requests} (known-good endpoints only)")
            return await run_validation(prober, requests)

        if mode == "quick":
            requests = _positive_int(args, 0, 100)
            click.echo(f"Requests: {requests}")
            return await run_quick_benchmark(prober, requests, catalog=catalog)

        users = _positive_int(args, 0, 3)
        duration = _positive_int(args, 1, 60)
        click.echo(f"Concurrent Users: {users}")
        click.echo(f"Duration: {duration} seconds")
        return await run_load_test(prober, users, duration, catalog=catalog)


async def _monitor(base_url, timeout, interval, catalog):
    async with make_prober(base_url, timeout) as prober:
        await run_monitor(
            prober,
            interval,
            catalog=catalog,
            on_stop=lambda report: click.echo(render_report(report)),
        )


if __name__ == "__main__":
    main()
