#!/usr/bin/env python
"""
Command-line interface for the Sink Island Detector

Usage:
    python cli.py fetch --bbox 51.50 -0.13 51.52 -0.10 --output network.json
    python cli.py scan --input network.json --output findings.json
    python cli.py batch --input areas.csv --output ./findings/
"""

import os
import sys
import json
import csv
import argparse
import time
from datetime import datetime

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from loguru import logger
from sink_island.config import ConfigurationError, ScanConfig, get_config, load_config, validate_config
from sink_island.pipeline import SinkIslandScanPipeline


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def build_config(args) -> ScanConfig:
    """Config file first, then command-line overrides"""
    scan_config = load_config(args.config) if getattr(args, "config", None) else ScanConfig(api=get_config().api)
    if getattr(args, "tree_size", None) is not None:
        scan_config.check.tree_size = args.tree_size
    if getattr(args, "minimum_highway_type", None):
        scan_config.check.minimum_highway_type = args.minimum_highway_type
    if getattr(args, "workers", None) is not None:
        scan_config.workers = args.workers
    validate_config(scan_config.check, workers=scan_config.workers)
    return scan_config


def cmd_fetch(args):
    """Download the raw road network for a bounding box"""
    setup_logging(args.verbose)

    bbox = tuple(args.bbox)
    output_path = args.output or f"network_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"

    try:
        pipeline = SinkIslandScanPipeline(cache_dir=args.cache_dir)
        # The bbox travels with the payload so scan can mark cut roads
        data = pipeline.fetch_raw(bbox)
        pipeline.save_network(data, output_path)

        logger.info(f"✓ Generated: {output_path}")
        return 0

    except Exception as e:
        logger.error(f"Failed to fetch road network: {e}")
        return 1


def cmd_scan(args):
    """Scan a saved road network for sink islands"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    try:
        scan_config = build_config(args)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    output_path = args.output or f"findings_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
    bbox = tuple(args.bbox) if args.bbox else None

    try:
        pipeline = SinkIslandScanPipeline(config=scan_config)
        graph = pipeline.load_graph(args.input, bbox=bbox)
        report = pipeline.scan(graph, source=args.input)

        pipeline.save(report, output_path)
        if args.geojson:
            pipeline.reporter.save_geojson(report, args.geojson)

        logger.info(f"✓ Generated: {output_path}")
        logger.info(f"  Sink islands: {len(report.findings)}")
        logger.info(f"  Edges flagged: {report.statistics.edges_flagged}")

        # Print summary to stdout if requested
        if args.summary:
            summary = {
                "source": report.source,
                "tree_size": report.tree_size,
                "minimum_highway_type": report.minimum_highway_type,
                "islands": len(report.findings),
                "largest_island": max((f.size for f in report.findings), default=0),
                "statistics": report.statistics.model_dump()
            }
            print(json.dumps(summary, indent=2))

        return 0

    except Exception as e:
        logger.error(f"Failed to scan road network: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def cmd_batch(args):
    """Fetch and scan several bounding boxes listed in a CSV"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    # Read areas from CSV
    areas = []
    with open(args.input, "r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                areas.append({
                    "name": row.get("name", ""),
                    "bbox": (float(row["south"]), float(row["west"]), float(row["north"]), float(row["east"]))
                })
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping invalid row: {e}")

    if not areas:
        logger.error("No valid areas found in CSV")
        return 1

    try:
        scan_config = build_config(args)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    logger.info(f"Processing {len(areas)} areas...")

    # Create output directory
    os.makedirs(args.output, exist_ok=True)

    pipeline = SinkIslandScanPipeline(config=scan_config, cache_dir=args.cache_dir)
    success = 0
    failed = 0

    for i, area in enumerate(areas, 1):
        name = area.get("name") or f"area_{i:03d}"
        logger.info(f"[{i}/{len(areas)}] {name}: {area['bbox']}")

        try:
            graph = pipeline.fetch_graph(area["bbox"])
            report = pipeline.scan(graph, source=name)

            filename = f"{name.replace(' ', '_').lower()}.json"
            pipeline.save(report, os.path.join(args.output, filename))

            logger.info(f"  ✓ {filename}: {len(report.findings)} sink islands")
            success += 1

        except Exception as e:
            logger.error(f"  ✗ Failed: {e}")
            failed += 1

        # Rate limiting
        if i < len(areas):
            time.sleep(args.delay)

    logger.info(f"\nComplete: {success} succeeded, {failed} failed")
    return 0 if failed == 0 else 1


def add_check_options(parser):
    parser.add_argument("--config", "-c", help="JSON configuration file")
    parser.add_argument("--tree-size", type=int, help="Maximum explored + candidate edges before giving up")
    parser.add_argument("--minimum-highway-type", help="Least important highway type used as a seed")
    parser.add_argument("--workers", type=int, help="Parallel search threads")


def main():
    parser = argparse.ArgumentParser(
        description="Sink Island Detector CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Download a road network:
    python cli.py fetch --bbox 51.50 -0.13 51.52 -0.10 --output network.json

  Scan it:
    python cli.py scan --input network.json --output findings.json --geojson findings.geojson

  Batch fetch and scan from CSV:
    python cli.py batch --input areas.csv --output ./findings/
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Fetch command
    fetch_parser = subparsers.add_parser("fetch", help="Download the road network for a bounding box")
    fetch_parser.add_argument("--bbox", type=float, nargs=4, required=True,
                              metavar=("SOUTH", "WEST", "NORTH", "EAST"), help="Bounding box in degrees")
    fetch_parser.add_argument("--output", "-o", help="Output JSON file")
    fetch_parser.add_argument("--cache-dir", help="Directory for cached Overpass responses")
    fetch_parser.set_defaults(func=cmd_fetch)

    # Scan command
    scan_parser = subparsers.add_parser("scan", help="Scan a saved road network for sink islands")
    scan_parser.add_argument("--input", "-i", required=True, help="Overpass JSON file")
    scan_parser.add_argument("--output", "-o", help="Output JSON report")
    scan_parser.add_argument("--geojson", help="Also write findings as GeoJSON")
    scan_parser.add_argument("--bbox", type=float, nargs=4,
                             metavar=("SOUTH", "WEST", "NORTH", "EAST"),
                             help="Download bounding box (defaults to the one stored by fetch); nodes outside it are treated as cut boundaries")
    scan_parser.add_argument("--summary", "-s", action="store_true", help="Print summary to stdout")
    add_check_options(scan_parser)
    scan_parser.set_defaults(func=cmd_scan)

    # Batch command
    batch_parser = subparsers.add_parser("batch", help="Batch fetch and scan from CSV file")
    batch_parser.add_argument("--input", "-i", required=True, help="Input CSV file (columns: name,south,west,north,east)")
    batch_parser.add_argument("--output", "-o", default="output", help="Output directory")
    batch_parser.add_argument("--cache-dir", help="Directory for cached Overpass responses")
    batch_parser.add_argument("--delay", type=float, default=2.0, help="Delay between areas (seconds)")
    add_check_options(batch_parser)
    batch_parser.set_defaults(func=cmd_batch)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
