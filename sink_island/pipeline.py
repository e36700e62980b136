"""
Main Pipeline Orchestrator for Sink Island Scans

  1. Input: raw Overpass JSON file or a bounding box to download
  2. Build the directed road graph (OSM ways sectioned into edges)
  3. Offer every edge once as a seed to the sink island check
  4. Drop findings that overlap (only possible with parallel workers)
  5. Assemble the scan report

Usage:
    pipeline = SinkIslandScanPipeline()
    graph = pipeline.load_graph("network.json")
    report = pipeline.scan(graph)
    pipeline.save(report, "output/findings.json")
"""

import json
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from .analysis import FlagLedger, SinkIslandCheck
from .config import ScanConfig, get_config, validate_config
from .graph import RoadGraph
from .models import ScanReport, ScanStatistics, SinkIslandFinding
from .osm import OSMCollector, RoadGraphBuilder
from .reporter import IslandReporter


def deduplicate_findings(findings: List[SinkIslandFinding]) -> Tuple[List[SinkIslandFinding], int]:
    """
    Keep at most one finding per island

    Findings are considered largest first (ties broken by task identifier);
    any finding sharing an edge with one already kept is dropped.

    Returns:
        (kept findings ordered by task identifier, number dropped)
    """
    ordered = sorted(findings, key=lambda f: (-f.size, int(f.task_identifier)))
    claimed = set()
    kept = []
    for finding in ordered:
        members = set(finding.edge_identifiers)
        if members & claimed:
            logger.debug(f"Dropping finding {finding.task_identifier}: overlaps an earlier island")
            continue
        claimed |= members
        kept.append(finding)
    kept.sort(key=lambda f: int(f.task_identifier))
    return kept, len(findings) - len(kept)


class SinkIslandScanPipeline:
    """Runs a full-network sink island scan"""

    def __init__(self, config: Optional[ScanConfig] = None, cache_dir: Optional[str] = None):
        self.config = config or get_config()
        validate_config(self.config.check, workers=self.config.workers)
        self.cache_dir = cache_dir
        self.builder = RoadGraphBuilder()
        self.reporter = IslandReporter()

    def load_graph(
        self,
        input_path: str,
        bbox: Optional[Tuple[float, float, float, float]] = None
    ) -> RoadGraph:
        """
        Build the road graph from a saved Overpass response

        Files written by save_network carry the bbox they were downloaded
        for; it is used unless an explicit bbox is given.
        """
        with open(input_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        logger.info(f"Loaded {len(data.get('elements', []))} OSM elements from {input_path}")

        if bbox is None and data.get("bbox"):
            bbox = tuple(float(value) for value in data["bbox"])
            logger.info(f"Using download bounding box {bbox} stored in {input_path}")
        elif bbox is None:
            logger.warning(f"{input_path} has no bounding box, roads cut by the extract edge may be reported")
        return self.builder.build(data, bbox=bbox)

    def fetch_raw(self, bbox: Tuple[float, float, float, float]) -> Dict[str, Any]:
        """Download the raw Overpass payload, stamped with the bbox it covers"""
        collector = OSMCollector(cache_dir=self.cache_dir, api_config=self.config.api)
        data = collector.fetch_raw(bbox)
        return dict(data, bbox=list(bbox))

    def save_network(self, data: Dict[str, Any], output_path: str) -> str:
        """Save a raw payload from fetch_raw for a later load_graph"""
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        logger.info(f"Saved {len(data.get('elements', []))} elements to {output_path}")
        return output_path

    def fetch_graph(self, bbox: Tuple[float, float, float, float]) -> RoadGraph:
        """Download the road network for (south, west, north, east)"""
        collector = OSMCollector(cache_dir=self.cache_dir, api_config=self.config.api)
        return collector.fetch_network(bbox)

    def scan(
        self,
        graph: RoadGraph,
        workers: Optional[int] = None,
        source: Optional[str] = None
    ) -> ScanReport:
        """
        Scan every edge of the graph

        Each call starts from an empty ledger, so repeated scans of the same
        graph produce the same findings.

        Args:
            graph: Road graph to scan
            workers: Threads sharing the ledger (default from config)
            source: Optional label recorded in the report

        Returns:
            ScanReport with findings and statistics

        Raises:
            ConfigurationError: if workers is given and is not a positive integer
        """
        if workers is None:
            workers = self.config.workers
        else:
            validate_config(self.config.check, workers=workers)
        ledger = FlagLedger()
        check = SinkIslandCheck(self.config.check, ledger=ledger)
        seeds = list(graph.edges())

        logger.info(f"Scanning {len(seeds)} edges (tree size {check.tree_size}, "
                    f"minimum highway type {check.minimum_highway_type.value}, workers {workers})")

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                outcomes = list(executor.map(lambda seed: check.examine(seed, graph), seeds))
        else:
            outcomes = [check.examine(seed, graph) for seed in seeds]

        statistics = ScanStatistics(edges_in_graph=len(seeds))
        findings = []
        for outcome in outcomes:
            if outcome is None:
                continue
            statistics.seeds_admitted += 1
            if outcome.aborted:
                statistics.searches_aborted += 1
            else:
                findings.append(check.create_finding(outcome))

        findings, dropped = deduplicate_findings(findings)
        statistics.duplicate_findings_dropped = dropped
        statistics.edges_flagged = len(ledger)

        logger.info(f"Scan complete: {len(findings)} sink islands, "
                    f"{statistics.seeds_admitted} seeds searched, {statistics.searches_aborted} aborted")
        if dropped:
            logger.info(f"Dropped {dropped} overlapping findings from parallel searches")

        return ScanReport(
            tree_size=check.tree_size,
            minimum_highway_type=check.minimum_highway_type.value,
            source=source,
            findings=findings,
            statistics=statistics
        )

    def save(self, report: ScanReport, output_path: str) -> str:
        """Save the scan report to a JSON file"""
        return self.reporter.save_json(report, output_path)
