"""
Road graph module

- Models: Node, Edge, Area
- RoadGraph: container with adjacency and an area spatial index
- Tags: highway classification and tag predicates
"""

from .models import Area, Edge, Node
from .road_graph import RoadGraph
from .tags import HighwayTag

__all__ = [
    "Area",
    "Edge",
    "Node",
    "RoadGraph",
    "HighwayTag",
]
