#!/usr/bin/env python3
"""
Runner script for the ABS regional (LGA) statistics dataflow.

Usage:
    python run_regional_pipeline.py                      # Queensland (codes 30000-39999)
    python run_regional_pipeline.py --state 1 --year 2021 --output-dir outputs
    python run_regional_pipeline.py --lookup income --dictionary measures.csv
    python run_regional_pipeline.py --describe erp_p_20 --dictionary measures.csv
"""

import argparse
import sys
from pathlib import Path

# Add the current directory to Python path
sys.path.append(str(Path(__file__).parent))

from dataflows import regional_statistics
from utils import settings
from utils.aggregation_operations import STATE_NAMES, state_code_range
from utils.hamilton_driver import build_driver, execute, execute_and_release, visualize

FINAL_NODES = ["gender_percentage_table", "regional_outputs"]


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Gender share of LGA populations from ABS regional statistics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="States: " + ", ".join(f"{k}={v}" for k, v in STATE_NAMES.items()),
    )
    parser.add_argument(
        "--dataset",
        default=settings.ABS_LGA_DATASET,
        help=f"Dataset address (default: {settings.ABS_LGA_DATASET})"
    )

    region_group = parser.add_mutually_exclusive_group()
    region_group.add_argument(
        "--state",
        type=int,
        choices=sorted(STATE_NAMES),
        help="State/territory digit; selects codes d0000-d9999"
    )
    region_group.add_argument(
        "--code-range",
        nargs=2,
        type=int,
        metavar=("LOW", "HIGH"),
        help="Inclusive region code range (default: 30000 39999)"
    )
    parser.add_argument("--year", type=int, help="Observation year to keep")
    parser.add_argument("--output-dir", default=None, help="Directory for CSV/PNG output")

    parser.add_argument("--lookup", metavar="KEYWORD", help="Search the measure dictionary and exit")
    parser.add_argument("--describe", metavar="CODE", help="Print one measure code's description and unit and exit")
    parser.add_argument(
        "--dictionary",
        default=settings.ABS_MEASURE_DICTIONARY,
        help="Measure dictionary address (Parquet or CSV)"
    )
    parser.add_argument("--cache", action="store_true", help="Enable Hamilton caching")
    parser.add_argument("--visualize", action="store_true", help="Save the Hamilton DAG and exit")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main runner function."""
    args = parse_args(argv)
    dr = build_driver([regional_statistics], config={}, enable_cache=args.cache)

    if args.lookup or args.describe:
        if not args.dictionary:
            print("❌ No measure dictionary configured (--dictionary or ABS_MEASURE_DICTIONARY)")
            return 1
        outputs = []
        lookup_inputs = {"measure_dictionary_address": args.dictionary}
        if args.lookup:
            outputs.append("matching_measures")
            lookup_inputs["measure_keyword"] = args.lookup
        if args.describe:
            outputs.append("measure_description")
            lookup_inputs["measure_code"] = args.describe
        try:
            results = execute(dr, outputs, inputs=lookup_inputs)
        except Exception as e:
            print(f"\n❌ Lookup failed: {e}")
            return 1
        if args.lookup:
            print(results["matching_measures"].to_string(index=False))
        if args.describe:
            for field, value in results["measure_description"].items():
                print(f"  {field}: {value}")
        return 0

    if args.state is not None:
        code_min, code_max = state_code_range(args.state)
    elif args.code_range:
        code_min, code_max = args.code_range
    else:
        code_min, code_max = regional_statistics.DEFAULT_CODE_MIN, regional_statistics.DEFAULT_CODE_MAX

    inputs = {
        "dataset_address": args.dataset,
        "code_min": code_min,
        "code_max": code_max,
        "observation_year": args.year,
        "output_dir": args.output_dir,
    }

    print(f"\n⚙️  Configuration:")
    print(f"  Dataset: {args.dataset}")
    print(f"  Region codes: {code_min}-{code_max}")
    print(f"  Year: {args.year or 'all'}")
    print(f"  Output dir: {args.output_dir or '(none)'}")

    if args.visualize:
        visualize(dr, FINAL_NODES, "regional_pipeline_dag.png", inputs=inputs)
        return 0

    try:
        print("\n🔄 Starting regional statistics pipeline...")
        results = execute_and_release(dr, FINAL_NODES, inputs=inputs)
    except Exception as e:
        print(f"\n❌ Pipeline failed: {e}")
        return 1

    table = results["gender_percentage_table"]
    print(f"\n✅ Pipeline completed: {len(table):,} regions")
    print(table.head(20).to_string(index=False))
    for kind, path in results["regional_outputs"].items():
        print(f"  • {kind}: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
