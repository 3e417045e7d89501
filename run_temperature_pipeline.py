#!/usr/bin/env python3
"""
Runner script for the reef temperature logger dataflow.

This script:
1. Opens the temperature logger dataset (S3 or local Parquet)
2. Selects logger sites, optionally only those inside boundary polygons
3. Aggregates monthly mean temperature per reef zone and site
4. Writes the table, chart and site map when an output directory is given

Usage:
    python run_temperature_pipeline.py
    python run_temperature_pipeline.py --boundary data/reef_outline.gpkg --output-dir outputs
    python run_temperature_pipeline.py --start 2015-01-01 --end 2020-01-01 --by-zone
"""

import argparse
import sys
from pathlib import Path

# Add the current directory to Python path
sys.path.append(str(Path(__file__).parent))

from dataflows import temperature_loggers
from utils import settings
from utils.hamilton_driver import build_driver, execute_and_release, visualize

FINAL_NODES = ["monthly_temperature", "temperature_outputs"]


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Monthly reef temperature by reef zone from logger data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # All sites, results printed only
  python run_temperature_pipeline.py

  # Sites inside a boundary, files written to ./outputs
  python run_temperature_pipeline.py --boundary reefs.gpkg --output-dir outputs

  # Local copy of the dataset
  python run_temperature_pipeline.py --dataset ./data/aims_temperature.parquet
        """
    )
    parser.add_argument(
        "--dataset",
        default=settings.AIMS_TEMPERATURE_DATASET,
        help=f"Dataset address (default: {settings.AIMS_TEMPERATURE_DATASET})"
    )
    parser.add_argument(
        "--boundary",
        help="Polygon file; only sites inside these polygons are kept"
    )
    parser.add_argument("--boundary-layer", help="Layer name inside the boundary file")
    parser.add_argument("--start", help="First timestamp kept (inclusive, ISO date)")
    parser.add_argument("--end", help="Last timestamp kept (exclusive, ISO date)")
    parser.add_argument(
        "--by-zone",
        action="store_true",
        help="Aggregate per reef zone only, not per site"
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help=f"Directory for CSV/PNG/HTML output (e.g. {settings.OUTPUT_DIR})"
    )
    parser.add_argument(
        "--at",
        nargs=2,
        type=float,
        action="append",
        metavar=("LON", "LAT"),
        help="Also print the observations recorded at this position (repeatable)"
    )
    parser.add_argument("--cache", action="store_true", help="Enable Hamilton caching")
    parser.add_argument(
        "--visualize",
        action="store_true",
        help="Save the Hamilton DAG as temperature_pipeline_dag.png and exit"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main runner function."""
    args = parse_args(argv)

    config = {"site_selection": "region" if args.boundary else "all"}
    inputs = {
        "dataset_address": args.dataset,
        "start_date": args.start,
        "end_date": args.end,
        "by_site": not args.by_zone,
        "output_dir": args.output_dir,
    }
    if args.boundary:
        inputs["boundary_path"] = args.boundary
        inputs["boundary_layer"] = args.boundary_layer

    print(f"\n⚙️  Configuration:")
    print(f"  Dataset: {args.dataset}")
    print(f"  Site selection: {config['site_selection']}")
    print(f"  Window: {args.start or '-'} → {args.end or '-'}")
    print(f"  Output dir: {args.output_dir or '(none)'}")

    extra_nodes = []
    if args.at:
        inputs["query_coordinates"] = [tuple(pair) for pair in args.at]
        extra_nodes.append("coordinate_observations")

    dr = build_driver([temperature_loggers], config=config, enable_cache=args.cache)

    if args.visualize:
        visualize(dr, FINAL_NODES, "temperature_pipeline_dag.png", inputs=inputs)
        return 0

    try:
        print("\n🔄 Starting temperature pipeline...")
        results = execute_and_release(dr, FINAL_NODES + extra_nodes, inputs=inputs)
    except Exception as e:
        print(f"\n❌ Pipeline failed: {e}")
        return 1

    monthly = results["monthly_temperature"]
    print(f"\n✅ Pipeline completed: {len(monthly):,} monthly groups")
    print(monthly.head(20).to_string(index=False))
    for kind, path in results["temperature_outputs"].items():
        print(f"  • {kind}: {path}")
    if args.at:
        at_positions = results["coordinate_observations"]
        print(f"\n📍 {len(at_positions):,} observations at {len(args.at)} positions")
        print(at_positions.head(20).to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
