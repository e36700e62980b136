import pytest

from sink_island.analysis import FlagLedger
from sink_island.graph import Area, Edge, Node, RoadGraph


class NetworkBuilder:
    """Small in-memory road networks for tests"""

    def __init__(self):
        self.graph = RoadGraph()
        self._next_way = 1

    def node(self, identifier, lon=None, lat=0.0, **tags):
        existing = self.graph.node(identifier)
        if existing is not None:
            existing.tags.update(tags)
            return existing
        lon = identifier * 0.001 if lon is None else lon
        return self.graph.add_node(Node(identifier, lon, lat, dict(tags)))

    def road(self, *node_ids, highway="residential", oneway=True, **tags):
        """One way through the given nodes, one edge per consecutive pair"""
        way_id = self._next_way
        self._next_way += 1
        tags = dict(tags, highway=highway)
        nodes = [self.node(n) for n in node_ids]
        edges = []
        for number, (start, end) in enumerate(zip(nodes, nodes[1:]), start=1):
            identifier = way_id * 1000 + number
            edges.append(self.graph.add_edge(
                Edge(identifier, way_id, start, end, [start.location, end.location], dict(tags))
            ))
            if not oneway:
                self.graph.add_edge(
                    Edge(-identifier, way_id, end, start, [end.location, start.location], dict(tags))
                )
        return edges

    def area(self, identifier, coordinates, **tags):
        return self.graph.add_area(Area(identifier, list(coordinates), dict(tags)))


@pytest.fixture
def network():
    return NetworkBuilder()


@pytest.fixture
def ledger():
    return FlagLedger()


@pytest.fixture
def overpass_payload():
    """Two crossing streets, a one-way dead end and a parking lot with a driveway"""
    return {
        "elements": [
            {"type": "node", "id": 1, "lat": 51.500, "lon": -0.100},
            {"type": "node", "id": 2, "lat": 51.501, "lon": -0.100},
            {"type": "node", "id": 3, "lat": 51.502, "lon": -0.100},
            {"type": "node", "id": 4, "lat": 51.501, "lon": -0.101},
            {"type": "node", "id": 5, "lat": 51.501, "lon": -0.099},
            {"type": "node", "id": 6, "lat": 51.5015, "lon": -0.0985},
            {"type": "node", "id": 7, "lat": 51.5020, "lon": -0.0980},
            {"type": "node", "id": 10, "lat": 51.4990, "lon": -0.0990},
            {"type": "node", "id": 11, "lat": 51.4990, "lon": -0.0970},
            {"type": "node", "id": 12, "lat": 51.4980, "lon": -0.0970},
            {"type": "node", "id": 13, "lat": 51.4980, "lon": -0.0990},
            {"type": "node", "id": 14, "lat": 51.4988, "lon": -0.0985},
            {"type": "node", "id": 15, "lat": 51.4982, "lon": -0.0975},
            {"type": "way", "id": 100, "nodes": [1, 2, 3], "tags": {"highway": "residential"}},
            {"type": "way", "id": 200, "nodes": [4, 2, 5], "tags": {"highway": "residential"}},
            {"type": "way", "id": 300, "nodes": [5, 6, 7],
             "tags": {"highway": "residential", "oneway": "yes"}},
            {"type": "way", "id": 400, "nodes": [10, 11, 12, 13, 10],
             "tags": {"amenity": "parking"}},
            {"type": "way", "id": 500, "nodes": [14, 15],
             "tags": {"highway": "service", "service": "parking_aisle", "oneway": "yes"}},
        ]
    }
