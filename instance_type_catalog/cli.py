"""Argument parsing, configuration loading, and the instance type count report."""

from __future__ import annotations

import argparse
import cProfile
import logging
import sys
import time

from .catalog import ComputeCatalog
from .catalog.exclude_filter import InstanceCatalogFilter
from .config import AppConfig, resolve_config
from .exceptions import CatalogFetchError, ConfigError
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="instance-type-catalog",
        description="Count the EC2 instance types left after applying the exclude list",
    )
    parser.add_argument(
        "--cpuprofile",
        default="",
        metavar="PATH",
        help="Write a cProfile profile of the whole run to PATH",
    )
    return parser


def _build_catalog(config: AppConfig) -> ComputeCatalog:
    """Instantiate the compute catalog client."""
    from .catalog.aws_catalog import AWSComputeCatalog  # lazy import

    return AWSComputeCatalog(config.aws)


def _report(included_count: int | None, error: CatalogFetchError | None) -> None:
    """Print the count, or the fetch error, on stdout."""
    if error is not None:
        print(error)
    else:
        print(included_count)


def run(config: AppConfig, catalog: ComputeCatalog | None = None) -> int:
    """List included instance types, print the report, and return the exit code.

    Raises ConfigError for a bad exclude list, before any API call.
    """
    start = time.monotonic()
    try:
        if catalog is None:
            catalog = _build_catalog(config)
        instance_filter = InstanceCatalogFilter(
            catalog,
            config.catalog.exclude_list,
            match_mode=config.catalog.match_mode,
            empty_list_excludes_all=config.catalog.empty_list_excludes_all,
        )
        instance_types = instance_filter.list_included_instance_types()
    except CatalogFetchError as exc:
        logger.error("Fetching instance types failed: %s", exc)
        _report(None, exc)
        return 1

    logger.info(
        "Report complete",
        extra={"elapsed_seconds": round(time.monotonic() - start, 2)},
    )
    _report(len(instance_types), None)
    return 0


def main(argv: list[str] | None = None, catalog: ComputeCatalog | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    configure_logging(config.logging)

    profiler: cProfile.Profile | None = None
    if args.cpuprofile:
        # Create the file up front so an unwritable path fails before the run
        try:
            open(args.cpuprofile, "wb").close()
        except OSError as exc:
            logger.error("Cannot create profile file %s: %s", args.cpuprofile, exc)
            return 1
        profiler = cProfile.Profile()
        profiler.enable()

    try:
        return run(config, catalog)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    finally:
        if profiler is not None:
            profiler.disable()
            profiler.dump_stats(args.cpuprofile)
            logger.info("Profile written", extra={"profile_path": args.cpuprofile})
