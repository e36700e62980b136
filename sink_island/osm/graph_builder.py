"""
Road graph builder

Turns parsed OSM ways into a directed RoadGraph:
- highway ways are sectioned at intersections into edges
- one-way rules decide which directions exist
- closed amenity ways become areas
- nodes outside the requested bounding box become synthetic boundary nodes
"""

from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from .models import OSMNode, OSMWay
from .parser import OSMResponseParser
from ..graph import Area, Edge, Node, RoadGraph
from ..graph.tags import SYNTHETIC_BOUNDARY_NODE_KEY


# Edge identifier = way id * SECTION_MULTIPLIER + section number (1-based)
SECTION_MULTIPLIER = 1000

FORWARD = 1
BACKWARD = -1
BOTH = 0

ONEWAY_FORWARD_VALUES = {"yes", "true", "1"}
ONEWAY_BACKWARD_VALUES = {"-1", "reverse"}


class RoadGraphBuilder:
    """Builds a RoadGraph from an Overpass 'out body' payload"""

    def __init__(self):
        self.parser = OSMResponseParser()

    def build(
        self,
        data: Dict[str, Any],
        bbox: Optional[Tuple[float, float, float, float]] = None
    ) -> RoadGraph:
        """
        Build the graph

        Args:
            data: Overpass JSON response
            bbox: Optional (south, west, north, east); nodes outside it are
                tagged as synthetic boundary nodes

        Returns:
            RoadGraph with edges and areas
        """
        osm_nodes, ways = self.parser.parse_elements(data)
        graph = RoadGraph()

        highway_ways = [way for way in ways if way.tags.get("highway")]
        split_nodes = self._find_split_nodes(highway_ways)

        for way in highway_ways:
            self._add_way_edges(graph, way, osm_nodes, split_nodes, bbox)

        for way in ways:
            if way.tags.get("amenity") and way.is_closed():
                coords = self._resolve_coordinates(way, osm_nodes)
                if len(coords) >= 4:
                    graph.add_area(Area(identifier=way.id, coordinates=coords, tags=dict(way.tags)))

        logger.info(f"Built road graph: {graph.number_of_nodes()} nodes, "
                    f"{graph.number_of_edges()} edges, {graph.number_of_areas()} areas")
        return graph

    @staticmethod
    def _find_split_nodes(ways: List[OSMWay]) -> set:
        """Nodes shared by several highway ways, or repeated inside one way"""
        usage = Counter()
        for way in ways:
            for node_id in way.node_ids:
                usage[node_id] += 1
        return {node_id for node_id, count in usage.items() if count > 1}

    @staticmethod
    def _direction(tags: Dict[str, str]) -> int:
        oneway = tags.get("oneway", "").strip().lower()
        if oneway in ONEWAY_FORWARD_VALUES:
            return FORWARD
        if oneway in ONEWAY_BACKWARD_VALUES:
            return BACKWARD
        if oneway == "no":
            return BOTH
        # Implied one-way
        if tags.get("junction") == "roundabout" or tags.get("highway") == "motorway":
            return FORWARD
        return BOTH

    def _graph_node(
        self,
        graph: RoadGraph,
        osm_node: OSMNode,
        bbox: Optional[Tuple[float, float, float, float]]
    ) -> Node:
        existing = graph.node(osm_node.id)
        if existing is not None:
            return existing
        tags = dict(osm_node.tags)
        if bbox is not None and not self._inside(osm_node, bbox):
            tags[SYNTHETIC_BOUNDARY_NODE_KEY] = "yes"
        return graph.add_node(Node(identifier=osm_node.id, lon=osm_node.lon, lat=osm_node.lat, tags=tags))

    @staticmethod
    def _inside(osm_node: OSMNode, bbox: Tuple[float, float, float, float]) -> bool:
        south, west, north, east = bbox
        return south <= osm_node.lat <= north and west <= osm_node.lon <= east

    @staticmethod
    def _resolve_coordinates(way: OSMWay, osm_nodes: Dict[int, OSMNode]) -> List[Tuple[float, float]]:
        return [(osm_nodes[n].lon, osm_nodes[n].lat) for n in way.node_ids if n in osm_nodes]

    def _add_way_edges(
        self,
        graph: RoadGraph,
        way: OSMWay,
        osm_nodes: Dict[int, OSMNode],
        split_nodes: set,
        bbox: Optional[Tuple[float, float, float, float]]
    ):
        node_ids = [n for n in way.node_ids if n in osm_nodes]
        if len(node_ids) < len(way.node_ids):
            logger.debug(f"Way {way.id}: {len(way.node_ids) - len(node_ids)} node references missing from payload")
        if len(node_ids) < 2:
            logger.debug(f"Way {way.id}: not enough resolvable nodes, skipped")
            return

        direction = self._direction(way.tags)
        for number, section in enumerate(self._sections(node_ids, split_nodes), start=1):
            nodes = [self._graph_node(graph, osm_nodes[n], bbox) for n in section]
            if direction == BACKWARD:
                nodes = list(reversed(nodes))
            identifier = way.id * SECTION_MULTIPLIER + number
            graph.add_edge(self._make_edge(identifier, way, nodes))
            if direction == BOTH:
                graph.add_edge(self._make_edge(-identifier, way, list(reversed(nodes))))

    @staticmethod
    def _sections(node_ids: List[int], split_nodes: set) -> List[List[int]]:
        sections = []
        current = [node_ids[0]]
        for index in range(1, len(node_ids)):
            node_id = node_ids[index]
            current.append(node_id)
            if node_id in split_nodes and index < len(node_ids) - 1:
                sections.append(current)
                current = [node_id]
        sections.append(current)
        # Consecutive duplicate node references produce zero-length sections
        return [section for section in sections if len(section) >= 2 and len(set(section)) >= 2]

    @staticmethod
    def _make_edge(identifier: int, way: OSMWay, nodes: List[Node]) -> Edge:
        return Edge(
            identifier=identifier,
            osm_identifier=way.id,
            start=nodes[0],
            end=nodes[-1],
            coordinates=[node.location for node in nodes],
            tags=dict(way.tags)
        )
