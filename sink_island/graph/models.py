"""
Road graph data models

Directed edges between nodes, plus the amenity areas used to suppress
parking lot driveways
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from shapely.geometry import LineString, Polygon

from .tags import HighwayTag, is_synthetic_boundary


Bounds = Tuple[float, float, float, float]  # (min_lon, min_lat, max_lon, max_lat)


@dataclass(eq=False)
class Node:
    """A graph vertex at an OSM node location"""
    identifier: int
    lon: float
    lat: float
    tags: Dict[str, str] = field(default_factory=dict)
    out_edges: List["Edge"] = field(default_factory=list, repr=False)
    in_edges: List["Edge"] = field(default_factory=list, repr=False)

    @property
    def location(self) -> Tuple[float, float]:
        return (self.lon, self.lat)

    @property
    def is_synthetic_boundary(self) -> bool:
        """True where upstream partitioning cut the network at this node"""
        return is_synthetic_boundary(self.tags)

    def __eq__(self, other):
        return isinstance(other, Node) and other.identifier == self.identifier

    def __hash__(self):
        return hash(("node", self.identifier))


@dataclass(eq=False)
class Edge:
    """
    A directed road section between two nodes

    Forward sections of a way carry positive identifiers, the paired
    reverse direction carries the negated identifier.
    """
    identifier: int
    osm_identifier: int
    start: Node
    end: Node
    coordinates: List[Tuple[float, float]]
    tags: Dict[str, str] = field(default_factory=dict)
    reverse_edge: Optional["Edge"] = field(default=None, repr=False)

    def out_edges(self) -> List["Edge"]:
        """Edges leaving this edge's end node (includes the U-turn onto the reverse edge)"""
        return list(self.end.out_edges)

    def in_edges(self) -> List["Edge"]:
        """Edges arriving at this edge's start node"""
        return list(self.start.in_edges)

    def connected_edges(self) -> List["Edge"]:
        """All edges touching either endpoint, excluding this edge"""
        connected = []
        seen = {self.identifier}
        for node in (self.start, self.end):
            for edge in node.in_edges + node.out_edges:
                if edge.identifier not in seen:
                    seen.add(edge.identifier)
                    connected.append(edge)
        return connected

    def has_reverse_edge(self) -> bool:
        return self.reverse_edge is not None

    def reversed(self) -> Optional["Edge"]:
        return self.reverse_edge

    def highway_tag(self) -> Optional[HighwayTag]:
        return HighwayTag.from_tags(self.tags)

    def as_polyline(self) -> LineString:
        return LineString(self.coordinates)

    def bounds(self) -> Bounds:
        lons = [c[0] for c in self.coordinates]
        lats = [c[1] for c in self.coordinates]
        return (min(lons), min(lats), max(lons), max(lats))

    def __eq__(self, other):
        return isinstance(other, Edge) and other.identifier == self.identifier

    def __hash__(self):
        return hash(("edge", self.identifier))


@dataclass(eq=False)
class Area:
    """A closed polygon with tags (parking lots, amenity enclosures)"""
    identifier: int
    coordinates: List[Tuple[float, float]]
    tags: Dict[str, str] = field(default_factory=dict)

    def as_polygon(self) -> Polygon:
        return Polygon(self.coordinates)

    def bounds(self) -> Bounds:
        lons = [c[0] for c in self.coordinates]
        lats = [c[1] for c in self.coordinates]
        return (min(lons), min(lats), max(lons), max(lats))

    def __eq__(self, other):
        return isinstance(other, Area) and other.identifier == self.identifier

    def __hash__(self):
        return hash(("area", self.identifier))
