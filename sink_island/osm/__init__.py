"""
OpenStreetMap data collection module

Modular OSM road network collector with separate components for:
- API client: Overpass API communication
- Models: Data structures (OSMNode, OSMWay)
- Parser: Response parsing
- Cache: Caching functionality
- Graph builder: Directed road graph construction
- Collector: Main orchestrator class
"""

from .api_client import OverpassAPIClient, OverpassError
from .models import OSMNode, OSMWay
from .graph_builder import RoadGraphBuilder
from .collector import OSMCollector

__all__ = [
    "OverpassAPIClient",
    "OverpassError",
    "OSMNode",
    "OSMWay",
    "RoadGraphBuilder",
    "OSMCollector",
]
