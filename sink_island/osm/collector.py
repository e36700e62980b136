"""
Main OSM Collector

Downloads the road network and parking areas for a bounding box
"""

from typing import Dict, Any, Optional, Tuple
from loguru import logger

from .api_client import OverpassAPIClient
from .cache import OSMCache
from .graph_builder import RoadGraphBuilder
from ..config import APIConfig, get_config
from ..graph import RoadGraph


BBox = Tuple[float, float, float, float]  # (south, west, north, east)


class OSMCollector:
    """
    Collect road network data from OpenStreetMap via Overpass API

    Uses a single batch query for highways and parking amenity areas,
    with optional caching of the raw response to disk.
    """

    def __init__(
        self,
        cache_dir: Optional[str] = None,
        api_config: Optional[APIConfig] = None,
        api_client: Optional[OverpassAPIClient] = None
    ):
        self.api_config = api_config or get_config().api
        self.api_client = api_client or OverpassAPIClient(self.api_config)
        self.cache = OSMCache(cache_dir)
        self.builder = RoadGraphBuilder()
        self.timeout = self.api_config.overpass_timeout

    def build_query(self, bbox: BBox) -> str:
        south, west, north, east = bbox
        area = f"{south},{west},{north},{east}"
        return f"""
        [out:json][timeout:{self.timeout}];
        (
            // Roads (all highway types)
            way["highway"]({area});

            // Parking enclosures for the driveway heuristics
            way["amenity"~"^(parking|parking_space|motorcycle_parking|parking_entrance)$"]({area});
            node["amenity"~"^(parking|parking_space|motorcycle_parking|parking_entrance)$"]({area});
        );
        out body;
        >;
        out body qt;
        """

    def fetch_raw(self, bbox: BBox) -> Dict[str, Any]:
        """
        Fetch the raw Overpass payload for a bounding box

        Args:
            bbox: (south, west, north, east) in degrees

        Returns:
            Overpass JSON response

        Raises:
            OverpassError: if the query fails after all retries
        """
        query = self.build_query(bbox)
        cached = self.cache.get(query)
        if cached is not None:
            return cached

        logger.info(f"Fetching OSM road network within bbox {bbox}")
        data = self.api_client.query(query)
        self.cache.put(query, data)

        logger.info(f"Fetched {len(data.get('elements', []))} OSM elements")
        return data

    def fetch_network(self, bbox: BBox) -> RoadGraph:
        """Fetch and build the road graph, cutting the network at the bbox edge"""
        data = self.fetch_raw(bbox)
        return self.builder.build(data, bbox=bbox)
