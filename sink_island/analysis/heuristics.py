"""
Exclusion heuristics - local edge context that makes a search give up

Each rule suppresses a known false positive pattern, such as driveways into
parking facilities or dead ends created by cutting the network at a boundary.
"""

from typing import Optional

from ..graph import Edge, RoadGraph
from ..graph.tags import is_excluded_amenity, is_pedestrian_navigable, is_service_road
from .ledger import FlagLedger


ALREADY_FLAGGED = "already_flagged"
EXCLUDED_AMENITY_END_NODE = "excluded_amenity_end_node"
SYNTHETIC_BOUNDARY = "synthetic_boundary"
SERVICE_ROAD_PEDESTRIAN_CONNECTION = "service_road_pedestrian_connection"


class ExclusionHeuristics:
    """Abort signals for the frontier search, read-only against the ledger"""

    def __init__(self, ledger: FlagLedger):
        self.ledger = ledger

    def abort_reason(self, edge: Edge) -> Optional[str]:
        """Name of the first rule that fires for this edge, or None"""
        # Another search already classified this region, defer to its result
        if self.ledger.is_flagged(edge.identifier):
            return ALREADY_FLAGGED

        service_road = is_service_road(edge.tags)

        # Driveways into parking facilities legitimately dead-end
        if service_road and is_excluded_amenity(edge.end.tags):
            return EXCLUDED_AMENITY_END_NODE

        # Partition cuts create spurious dead-ends
        if edge.start.is_synthetic_boundary or edge.end.is_synthetic_boundary:
            return SYNTHETIC_BOUNDARY

        if service_road and self.is_connected_to_pedestrian_navigable_highway(edge):
            return SERVICE_ROAD_PEDESTRIAN_CONNECTION

        return None

    def should_abort_on(self, edge: Edge) -> bool:
        return self.abort_reason(edge) is not None

    @staticmethod
    def is_connected_to_pedestrian_navigable_highway(edge: Edge) -> bool:
        return any(is_pedestrian_navigable(connected.tags) for connected in edge.connected_edges())

    @staticmethod
    def is_within_excluded_amenity_area(edge: Edge, graph: RoadGraph) -> bool:
        """
        Check if the edge is fully enclosed by an area tagged with an excluded amenity

        This runs a spatial query, so it is used once per seed and not for
        every visited edge.
        """
        areas = graph.areas_intersecting(edge.bounds(), lambda area: is_excluded_amenity(area.tags))
        if not areas:
            return False
        polyline = edge.as_polyline()
        return any(area.as_polygon().covers(polyline) for area in areas)
