"""
OSM response parser

Parses Overpass API responses into OSMNode and OSMWay objects
"""

from typing import Dict, Any, Tuple, List
from loguru import logger

from .models import OSMNode, OSMWay


class OSMResponseParser:
    """Parses Overpass API responses"""

    @staticmethod
    def parse_elements(data: Dict[str, Any]) -> Tuple[Dict[int, OSMNode], List[OSMWay]]:
        """
        Parse Overpass response into nodes and ways

        Expects 'out body' output where ways reference nodes by id.
        Elements missing required fields are skipped.

        Args:
            data: JSON response from Overpass API

        Returns:
            Tuple of (nodes dict, ways list)
        """
        nodes = {}
        ways = []
        skipped = 0

        for element in data.get("elements", []):
            element_type = element.get("type")
            if element_type == "node":
                if "lat" not in element or "lon" not in element:
                    skipped += 1
                    continue
                nodes[element["id"]] = OSMNode(
                    id=element["id"],
                    lat=element["lat"],
                    lon=element["lon"],
                    tags=element.get("tags", {})
                )
            elif element_type == "way":
                node_ids = element.get("nodes", [])
                if len(node_ids) < 2:
                    skipped += 1
                    continue
                ways.append(OSMWay(
                    id=element["id"],
                    node_ids=list(node_ids),
                    tags=element.get("tags", {})
                ))

        if skipped:
            logger.warning(f"Skipped {skipped} malformed OSM elements")

        return nodes, ways
