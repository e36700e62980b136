"""
Road graph container

Holds nodes, directed edges and areas, and answers the spatial query used
by the parking enclosure heuristic
"""

import threading
from typing import Callable, Dict, Iterator, List, Optional

from loguru import logger
from shapely.geometry import box
from shapely.strtree import STRtree

from .models import Area, Bounds, Edge, Node


class RoadGraph:
    """
    Directed road network

    Usage:
        graph = RoadGraph()
        a = graph.add_node(Node(1, 0.0, 0.0))
        b = graph.add_node(Node(2, 0.0, 0.001))
        graph.add_edge(Edge(1000001, 1, a, b, [a.location, b.location], {"highway": "residential"}))
    """

    def __init__(self):
        self._nodes: Dict[int, Node] = {}
        self._edges: Dict[int, Edge] = {}
        self._areas: List[Area] = []
        self._area_index: Optional[STRtree] = None
        self._index_lock = threading.Lock()

    def add_node(self, node: Node) -> Node:
        existing = self._nodes.get(node.identifier)
        if existing is not None:
            return existing
        self._nodes[node.identifier] = node
        return node

    def add_edge(self, edge: Edge) -> Edge:
        """Register an edge and wire it into its endpoint adjacency lists"""
        if edge.identifier in self._edges:
            logger.warning(f"Edge {edge.identifier} already in graph, keeping the first one")
            return self._edges[edge.identifier]
        self.add_node(edge.start)
        self.add_node(edge.end)
        self._edges[edge.identifier] = edge
        edge.start.out_edges.append(edge)
        edge.end.in_edges.append(edge)

        reverse = self._edges.get(-edge.identifier)
        if reverse is not None:
            edge.reverse_edge = reverse
            reverse.reverse_edge = edge
        return edge

    def add_area(self, area: Area) -> Area:
        with self._index_lock:
            self._areas.append(area)
            self._area_index = None
        return area

    def node(self, identifier: int) -> Optional[Node]:
        return self._nodes.get(identifier)

    def edge(self, identifier: int) -> Optional[Edge]:
        return self._edges.get(identifier)

    def edges(self) -> Iterator[Edge]:
        """Edges in insertion order"""
        return iter(list(self._edges.values()))

    def number_of_nodes(self) -> int:
        return len(self._nodes)

    def number_of_edges(self) -> int:
        return len(self._edges)

    def number_of_areas(self) -> int:
        return len(self._areas)

    def areas_intersecting(
        self,
        bounds: Bounds,
        predicate: Optional[Callable[[Area], bool]] = None
    ) -> List[Area]:
        """
        Areas whose bounding boxes intersect the given bounds

        Args:
            bounds: (min_lon, min_lat, max_lon, max_lat)
            predicate: optional filter applied to the matches

        Returns:
            Matching areas in insertion order
        """
        index = self._spatial_index()
        if index is None:
            return []
        hits = sorted(int(i) for i in index.query(box(*bounds)))
        areas = [self._areas[i] for i in hits]
        if predicate is not None:
            areas = [area for area in areas if predicate(area)]
        return areas

    def _spatial_index(self) -> Optional[STRtree]:
        with self._index_lock:
            if self._area_index is None and self._areas:
                self._area_index = STRtree([box(*area.bounds()) for area in self._areas])
            return self._area_index
