"""
Sink island check

Flags islands of roads where it is impossible to get out. The simplest is
a one-way that dead-ends; that would be a one-edge island.
"""

from typing import Iterable, Optional

from loguru import logger

from ..config import SinkIslandCheckConfig, validate_config
from ..graph import Edge, HighwayTag, RoadGraph
from ..graph.tags import is_service_road
from ..models import GeoJSONMultiLineString, SinkIslandFinding
from .eligibility import EdgeEligibilityFilter
from .frontier_search import BoundedFrontierSearch, SearchOutcome
from .heuristics import ExclusionHeuristics
from .ledger import FlagLedger


class SinkIslandCheck:
    """
    Seed admission and finding creation around the bounded frontier search

    One instance serves one scan; its ledger is shared by every seed.
    """

    def __init__(
        self,
        check_config: Optional[SinkIslandCheckConfig] = None,
        ledger: Optional[FlagLedger] = None
    ):
        self.check_config = check_config or SinkIslandCheckConfig()
        # Fail fast on unusable options
        validate_config(self.check_config)

        self.tree_size = self.check_config.tree_size
        self.minimum_highway_type = HighwayTag.from_string(self.check_config.minimum_highway_type)
        self.ledger = ledger if ledger is not None else FlagLedger()
        self.eligibility = EdgeEligibilityFilter()
        self.heuristics = ExclusionHeuristics(self.ledger)
        self.frontier_search = BoundedFrontierSearch(
            self.ledger,
            tree_size=self.tree_size,
            eligibility=self.eligibility,
            heuristics=self.heuristics
        )

    @property
    def instruction(self) -> str:
        return self.check_config.instructions[0]

    def valid_check_for_object(self, edge: Edge, graph: RoadGraph) -> bool:
        """
        Seed admission

        The seed must be eligible, not yet flagged, at least as important as
        the minimum highway type, and not a service road fully inside a
        parking area.
        """
        if not self.eligibility.is_eligible(edge):
            return False
        if self.ledger.is_flagged(edge.identifier):
            return False
        highway = edge.highway_tag()
        if highway is None or not highway.is_more_important_than_or_equal_to(self.minimum_highway_type):
            return False
        if is_service_road(edge.tags) and self.heuristics.is_within_excluded_amenity_area(edge, graph):
            logger.debug(f"Seed {edge.identifier}: service road inside a parking area, skipped")
            return False
        return True

    def flag(self, edge: Edge) -> Optional[SinkIslandFinding]:
        """Run the search from an admitted seed; a finding only when it did not abort"""
        outcome = self.frontier_search.search(edge)
        if outcome.aborted:
            return None
        return self.create_finding(outcome)

    def check(self, edge: Edge, graph: RoadGraph) -> Optional[SinkIslandFinding]:
        """Admission followed by the search"""
        if not self.valid_check_for_object(edge, graph):
            return None
        return self.flag(edge)

    def examine(self, edge: Edge, graph: RoadGraph) -> Optional[SearchOutcome]:
        """Like check, but hands back the raw search outcome (None when not admitted)"""
        if not self.valid_check_for_object(edge, graph):
            return None
        return self.frontier_search.search(edge)

    def create_finding(self, outcome: SearchOutcome) -> SinkIslandFinding:
        identifiers = outcome.identifiers
        edges = sorted(outcome.explored, key=lambda e: e.identifier)
        return SinkIslandFinding(
            task_identifier=str(min(identifiers)),
            seed_identifier=outcome.seed.identifier,
            edge_identifiers=identifiers,
            osm_identifiers=sorted({e.osm_identifier for e in edges}),
            instruction=self.instruction,
            geometry=self._geometry(edges)
        )

    @staticmethod
    def _geometry(edges: Iterable[Edge]) -> GeoJSONMultiLineString:
        return GeoJSONMultiLineString(
            coordinates=[[[lon, lat] for lon, lat in edge.coordinates] for edge in edges]
        )
