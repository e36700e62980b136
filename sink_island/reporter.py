"""
Island reporter - writes scan reports to disk
"""

import json
import os
from typing import Any, Dict

from loguru import logger

from .models import ScanReport


class IslandReporter:
    """Serializes findings as a JSON report or a GeoJSON FeatureCollection"""

    def save_json(self, report: ScanReport, output_path: str) -> str:
        """Save the full scan report to a JSON file"""
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(report.model_dump(), f, indent=2, ensure_ascii=False)

        logger.info(f"Saved {len(report.findings)} findings to {output_path}")
        return output_path

    def save_geojson(self, report: ScanReport, output_path: str) -> str:
        """Save one MultiLineString feature per finding"""
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.to_feature_collection(report), f, indent=2, ensure_ascii=False)

        logger.info(f"Saved GeoJSON with {len(report.findings)} features to {output_path}")
        return output_path

    @staticmethod
    def to_feature_collection(report: ScanReport) -> Dict[str, Any]:
        features = []
        for finding in report.findings:
            features.append({
                "type": "Feature",
                "id": finding.task_identifier,
                "geometry": finding.geometry.model_dump(),
                "properties": {
                    "check": report.check,
                    "instruction": finding.instruction,
                    "edge_identifiers": finding.edge_identifiers,
                    "osm_identifiers": finding.osm_identifiers,
                    "size": finding.size
                }
            })
        return {"type": "FeatureCollection", "features": features}
