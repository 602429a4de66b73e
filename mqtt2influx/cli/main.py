#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import argparse
import logging
import sys
from enum import IntEnum

from mqtt2influx import __version__
from mqtt2influx.client.errors import ConfigurationError, TransportError
from mqtt2influx.client.main import Bridge
from mqtt2influx.lib.constants import LOG_DATE_FORMAT, LOG_FORMAT, ROOT_LOGGER_NAME, TRACE
from mqtt2influx.lib.load_config import load_config

logger = logging.getLogger(ROOT_LOGGER_NAME)


class ExitCode(IntEnum):
    SUCCESS = 0
    CONFIG_ERROR = 1
    TRANSPORT_ERROR = 2


# -v count -> level of the mqtt2influx logger; everything else stays at WARNING
VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG, TRACE)


def verbosity_to_level(verbose: int) -> int:
    return VERBOSITY_LEVELS[min(verbose, len(VERBOSITY_LEVELS) - 1)]


def setup_logging(verbose: int) -> None:
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logging.captureWarnings(True)
    logger.setLevel(verbosity_to_level(verbose))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mqtt2influx",
        description="Forward Glow, Tasmota and zigbee2mqtt readings from MQTT to InfluxDB",
        epilog="""
Example:
  mqtt2influx -vv /etc/mqtt2influx.toml
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("config_file", help="Configuration file to load, in TOML (or JSON) format")
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Enable extra logging levels (repeat up to -vvv)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    logger.info("Reading config from %r", args.config_file)
    try:
        cfg = load_config(args.config_file).raw
        bridge = Bridge.from_config(cfg)
    except ConfigurationError as e:
        logger.error("%s", e)
        return ExitCode.CONFIG_ERROR

    try:
        bridge.start()
    except TransportError as e:
        logger.error("%s", e)
        return ExitCode.TRANSPORT_ERROR

    try:
        bridge.run_forever()
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (Ctrl+C)")
    finally:
        bridge.stop()
    return ExitCode.SUCCESS


if __name__ == "__main__":
    sys.exit(main())
