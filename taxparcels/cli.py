#!/usr/bin/env python3
"""
Extract tax parcels listed in ID files from a GeoJSON or KML export.

Usage:
    taxparcels --json tax_parcels.geojson --ids north.txt,south.txt --out parcels/
    taxparcels --kml tax_parcels.kml --ids north.txt --out parcels/

One output file per ID list is written to --out, named after the ID list
(north.txt -> north.geojson). Progress and missing IDs are printed to stderr.
"""

import argparse
import logging
import sys
from typing import List, Optional

from taxparcels import __version__
from taxparcels.constants import LOG_FORMAT
from taxparcels.errors import ConfigError, TaxParcelsError
from taxparcels.filtering import ParcelFilter
from taxparcels.settings import FilterConfig, split_id_paths
from taxparcels.sources import open_source

logger = logging.getLogger("taxparcels")


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure logging for a command-line run."""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taxparcels",
        description="Filter tax parcel GIS data down to the parcels named in ID files",
    )

    input_group = parser.add_argument_group("input options")
    input_group.add_argument(
        "--json",
        "--geojson",
        dest="geojson_path",
        help="path to the input GeoJSON file",
    )
    input_group.add_argument(
        "--kml",
        dest="kml_path",
        help="path to the input KML file",
    )
    input_group.add_argument(
        "--ids",
        help="comma-delimited list of paths of parcel ID files",
    )

    parser.add_argument(
        "--out",
        dest="out_dir",
        help="directory where the output will be written (default: current directory)",
    )
    parser.add_argument(
        "--config",
        help="YAML file with any of the settings above; flags take precedence",
    )
    parser.add_argument(
        "--key",
        dest="key_property",
        help="property holding the parcel ID (default: TaxParcelNumber)",
    )
    parser.add_argument(
        "--indent",
        type=int,
        help="indent GeoJSON output by this many spaces",
    )
    parser.add_argument("--log-level", help="logging level (default: INFO)")
    parser.add_argument("--log-file", help="also write log messages to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_config(args: argparse.Namespace) -> FilterConfig:
    """Merge environment, config file and command-line flags."""
    config = FilterConfig.load(args.config)

    if args.geojson_path is not None:
        config.geojson_path = args.geojson_path
    if args.kml_path is not None:
        config.kml_path = args.kml_path
    if args.ids is not None:
        config.id_paths = split_id_paths(args.ids)
    if args.out_dir is not None:
        config.out_dir = args.out_dir
    if args.key_property is not None:
        config.key_property = args.key_property
    if args.indent is not None:
        config.indent = args.indent
    if args.log_level is not None:
        config.log_level = args.log_level.upper()
    if args.log_file is not None:
        config.log_file = args.log_file

    config.validate()
    return config


def run(config: FilterConfig):
    """Decode the input once and filter it with every configured ID list."""
    source = open_source(
        config.input_path,
        config.input_format,
        key_property=config.key_property,
        indent=config.indent,
    )
    return ParcelFilter(source, out_dir=config.out_dir).run(config.id_paths)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the taxparcels command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
    except ConfigError as exc:
        parser.error(str(exc))

    setup_logging(config.log_level, config.log_file)

    try:
        run(config)
    except TaxParcelsError as exc:
        logger.error(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
