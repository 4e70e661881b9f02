#!/usr/bin/env python3
"""
exporter.py: Receive Ambient Weather station uploads and expose them to Prometheus.

Point the station's "customized" upload at http://<host>:9600/data/report/
and scrape http://<host>:9600/metrics.

Usage:
    python -m ambient_exporter.cli.exporter --elevation 450 [--addr :9600] [--log-file exporter.log]
    python -m ambient_exporter.cli.exporter --version
"""

import argparse
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import List, Optional, Tuple

from ambient_exporter.api.server import create_app
from ambient_exporter.config import DEFAULT_ADDR, DEFAULT_HOST
from ambient_exporter.utils.log_util import app_logger

logger = app_logger(__name__)

DISTRIBUTION = "ambient-exporter"

# Loggers that also go to --log-file
LOGGED_MODULES = (
    __name__,
    "ambient_exporter.api.server",
    "ambient_exporter.api.metrics",
)


def get_version() -> str:
    """Installed version of the exporter, or 'unknown' when running from a checkout."""
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        return "unknown"


def parse_addr(addr: str) -> Tuple[str, int]:
    """
    Split a listen address into host and port.

    ':9600' listens on all interfaces.

    :param addr: 'host:port' or ':port'
    :return: (host, port)
    :raises ValueError: If the port is missing or not a number
    """
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid address: {addr!r}")
    return host or DEFAULT_HOST, int(port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Prometheus exporter for Ambient Weather station uploads."
    )
    parser.add_argument(
        "--addr", type=str, default=DEFAULT_ADDR, help="address for the http server"
    )
    parser.add_argument(
        "--elevation", type=float, default=0, help="station elevation in feet"
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="print version and exit"
    )
    parser.add_argument("--log-file", type=str, help="also write logs to this file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"{DISTRIBUTION} {get_version()}")
        return 0

    if args.log_file:
        for name in LOGGED_MODULES:
            app_logger(name, log_file=args.log_file)

    if args.elevation == 0:
        logger.error("elevation is required")
        return 1

    try:
        host, port = parse_addr(args.addr)
    except ValueError as e:
        logger.error(str(e))
        return 1

    app = create_app(args.elevation)
    logger.info(f"HTTP server starting on {host}:{port} (elevation {args.elevation} ft)")
    try:
        app.run(host=host, port=port, debug=False, threaded=True)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
