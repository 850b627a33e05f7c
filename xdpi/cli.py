"""xdpi command-line interface"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn, Optional, Sequence

import yaml

from xdpi import __version__
from xdpi.common.config import Config, ConfigLoader
from xdpi.common.errors import ConnectionUnavailable
from xdpi.common.log_setup import logging_setup
from xdpi.common.settings import settings
from xdpi.core.environment import environment_collect
from xdpi.core.reconcile import topology_reconcile
from xdpi.core.scaling import report_calculate
from xdpi.report.text import report_render
from xdpi.source.factory import SUPPORTED_SOURCES, source_create


def arguments_parse(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments

    Args:
        argv: Argument list, None for sys.argv

    Returns:
        Parsed CLI arguments.
    """
    parser = argparse.ArgumentParser(
        prog="xdpi",
        description="Report resolution, dot pitch, DPI and scaling factors of X11 outputs",
    )

    parser.add_argument("--version", action="version", version=f"xdpi {__version__}")

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config file (default: search standard locations)",
    )

    parser.add_argument(
        "--display", type=str, default=None, help="X11 display name (overrides config)"
    )

    parser.add_argument(
        "--backend",
        type=str,
        action="append",
        choices=SUPPORTED_SOURCES,
        default=None,
        dest="backends",
        help="Query backend; repeat to run several (overrides config)",
    )

    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging (overrides config)"
    )

    parser.add_argument(
        "--info", action="store_true", help="Enable info logging (overrides config)"
    )

    parser.add_argument(
        "--warning", action="store_true", help="Enable warning logging (overrides config)"
    )

    parser.add_argument(
        "--error", action="store_true", help="Enable error logging (overrides config)"
    )

    parser.add_argument(
        "--critical", action="store_true", help="Enable critical logging (overrides config)"
    )

    return parser.parse_args(argv)


def logLevelOverride_get(args: argparse.Namespace) -> str | None:
    """
    Resolve explicit log level override flags.

    Args:
        args: Parsed CLI args.

    Returns:
        Selected log level or None.
    """
    if args.critical:
        return "CRITICAL"
    if args.error:
        return "ERROR"
    if args.warning:
        return "WARNING"
    if args.info:
        return "INFO"
    if args.debug:
        return "DEBUG"
    return None


def configWithSettings_load(args: argparse.Namespace) -> Config:
    """
    Load configuration and initialize settings singleton.

    Args:
        args: Parsed CLI args.

    Returns:
        Loaded config.
    """
    config_path: Path | None = Path(args.config) if args.config else None
    config: Config = ConfigLoader.configWithOverrides_load(
        file_path=config_path,
        display=args.display,
        backends=args.backends,
    )
    settings.initialize(config)
    return config


def backend_run(backend_name: str, config: Config) -> list[str]:
    """
    Query, reconcile and render through one backend.

    Args:
        backend_name: Source identifier
        config: Loaded config

    Returns:
        Rendered report lines

    Raises:
        ConnectionUnavailable: If the backend cannot reach the display
    """
    source = source_create(backend_name, config.display)
    with source:
        raw = source.topology_fetch()
    topology = topology_reconcile(raw, config.names.max_bytes)
    environment = environment_collect(config.environment.variables)
    report = report_calculate(topology, environment, config.scaling.baseline_dpi)
    return report_render(report)


def backends_run(config: Config) -> int:
    """
    Run every configured backend, each one reported on its own.

    Args:
        config: Loaded config

    Returns:
        Number of backends that produced a report
    """
    succeeded = 0
    for backend_name in config.backends:
        try:
            lines = backend_run(backend_name, config)
        except ConnectionUnavailable as e:
            print(f"{backend_name}: {e}", file=sys.stderr)
            continue
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            continue
        print("\n".join(lines))
        succeeded += 1
    return succeeded


def main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main entry point for the xdpi command

    Args:
        argv: Argument list, None for sys.argv
    """
    args = arguments_parse(argv)

    try:
        config = configWithSettings_load(args)
        log_level: str = logLevelOverride_get(args) or config.logging.level
        logging_setup(log_level, config.logging.format, config.logging.file)

        print("*** Resolution and dot pitch information exposed by X11 ***")
        succeeded = backends_run(config)
        print("*** Done ***")
        sys.exit(0 if succeeded else 1)

    except KeyboardInterrupt:
        print("\nShutting down...")
        sys.exit(0)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
