"""
Command line entry point: ``landcover-cart DATASET [options]``.
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .core import LandcoverCartAnalysis, print_report
from .exceptions import LandcoverCartError
from .utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="landcover-cart",
        description="Classify labelled land cover sample points with CART and assess accuracy.",
    )
    parser.add_argument("dataset", help="Sample table (CSV with .geo or lon/lat columns, GeoJSON, GPKG, Parquet)")
    parser.add_argument("--config", help="JSON or YAML configuration file")
    parser.add_argument("--year", type=int, help="Acquisition year to keep")
    parser.add_argument(
        "--bounds", type=float, nargs=4, metavar=("MINX", "MINY", "MAXX", "MAXY"),
        help="Bounding box in degrees",
    )
    parser.add_argument("--seed", type=int, help="Seed of the train/test split")
    parser.add_argument("--output-dir", help="Directory for report, predictions and map")
    parser.add_argument(
        "--query", type=float, nargs=2, metavar=("LON", "LAT"),
        help="Print the test point nearest to this location",
    )
    parser.add_argument("--log-level", help="Logging level, e.g. DEBUG or WARNING")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        analysis = LandcoverCartAnalysis(args.config)
        overrides = {
            "data.year": args.year,
            "data.bounds": list(args.bounds) if args.bounds else None,
            "split.seed": args.seed,
            "logging.level": args.log_level,
        }
        for key, value in overrides.items():
            if value is not None:
                analysis.config_manager.set(key, value)
        analysis.config_manager.require_valid()

        try:
            setup_logging(analysis.config_manager.get("logging"))
        except ValueError as e:
            raise LandcoverCartError(str(e)) from e

        result = analysis.run(args.dataset, output_dir=args.output_dir)
        print_report(result)

        if args.query:
            lon, lat = args.query
            record = analysis.query_point(lon, lat, result)
            if record is None:
                print("No feature found near the clicked location.")
            else:
                print("Clicked point properties:")
                for key, value in record.items():
                    if key not in ("geometry", "style"):
                        print(f"  {key}: {value}")

        for kind, path in result.outputs.items():
            print(f"{kind}: {path}")
    except LandcoverCartError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
