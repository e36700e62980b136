"""
Bounded frontier search - the sink island detection core

Explores breadth-first from a seed edge along eligible outgoing edges.
The search gives up (aborts) when an exclusion heuristic fires or when the
reachable region grows past the configured tree size, since a region that
large is treated as healthy road network. When the frontier empties within
bound, every edge reached is part of a sink island.

Explored edges are recorded in the flag ledger whatever the outcome, so a
region walked once is never walked again from another seed. Terminal edges
of an aborted search are left unflagged.
"""

from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, FrozenSet, List, Optional, Set

from loguru import logger

from ..config import TREE_SIZE_DEFAULT
from ..graph import Edge
from .eligibility import EdgeEligibilityFilter
from .heuristics import ExclusionHeuristics
from .ledger import FlagLedger


TREE_TOO_LARGE = "tree_too_large"


@dataclass(frozen=True)
class SearchOutcome:
    """Result of one bounded frontier search"""
    seed: Edge
    aborted: bool
    explored: FrozenSet[Edge]
    terminal: FrozenSet[Edge]
    reason: Optional[str] = None
    visited: int = 0
    # Candidates still queued when the loop stopped
    pending: int = 0

    @property
    def island(self) -> Optional[FrozenSet[Edge]]:
        """Edges of the sink island, None when the search aborted"""
        return None if self.aborted else self.explored

    @property
    def identifiers(self) -> List[int]:
        return sorted(edge.identifier for edge in self.explored)


class BoundedFrontierSearch:
    """
    Breadth-first exploration bounded by tree size

    Usage:
        ledger = FlagLedger()
        search = BoundedFrontierSearch(ledger, tree_size=50)
        outcome = search.search(seed_edge)
        if not outcome.aborted:
            island = outcome.island
    """

    def __init__(
        self,
        ledger: FlagLedger,
        tree_size: int = TREE_SIZE_DEFAULT,
        eligibility: Optional[EdgeEligibilityFilter] = None,
        heuristics: Optional[ExclusionHeuristics] = None
    ):
        self.ledger = ledger
        self.tree_size = tree_size
        self.eligibility = eligibility or EdgeEligibilityFilter()
        self.heuristics = heuristics or ExclusionHeuristics(ledger)

    def search(self, seed: Edge) -> SearchOutcome:
        """
        Explore outward from the seed

        Args:
            seed: Edge to start from (already admitted)

        Returns:
            SearchOutcome; explored holds the island on success and the
            partially explored region on abort
        """
        # Keyed by edge identifier
        explored: Dict[int, Edge] = {seed.identifier: seed}
        terminal: Dict[int, Edge] = {}
        queued: Set[int] = set()
        candidates: Deque[Edge] = deque()

        aborted = False
        reason = None
        visited = 0
        candidate: Optional[Edge] = seed

        while candidate is not None:
            visited += 1

            reason = self.heuristics.abort_reason(candidate)
            if reason is not None:
                aborted = True
                break

            out_edges = self._out_edges(candidate)
            if not out_edges:
                # Sink edge, not explored until we know how big the tree is
                terminal[candidate.identifier] = candidate
            else:
                explored[candidate.identifier] = candidate
                for out_edge in out_edges:
                    if out_edge.identifier not in explored and out_edge.identifier not in queued:
                        queued.add(out_edge.identifier)
                        candidates.append(out_edge)

                if len(candidates) + len(explored) > self.tree_size:
                    aborted = True
                    reason = TREE_TOO_LARGE
                    break

            candidate = candidates.popleft() if candidates else None

        if not aborted:
            # Whole tree covered, sink points belong to the island
            explored.update(terminal)

        self.ledger.mark_all(explored.keys())

        if aborted:
            logger.debug(f"Seed {seed.identifier}: aborted ({reason}) after {visited} visits, "
                         f"{len(explored)} edges flagged")
        else:
            logger.debug(f"Seed {seed.identifier}: sink island of {len(explored)} edges")

        return SearchOutcome(
            seed=seed,
            aborted=aborted,
            explored=frozenset(explored.values()),
            terminal=frozenset(terminal.values()),
            reason=reason,
            visited=visited,
            pending=len(candidates)
        )

    def _out_edges(self, edge: Edge) -> List[Edge]:
        """Eligible outgoing edges in graph order, dropping inconsistent adjacency"""
        out_edges = []
        seen = set()
        for out_edge in edge.out_edges():
            if out_edge.identifier in seen:
                continue
            if out_edge.start.identifier != edge.end.identifier:
                logger.debug(f"Edge {out_edge.identifier} listed after {edge.identifier} "
                             f"but starts at node {out_edge.start.identifier}, ignored")
                continue
            if self.eligibility.is_eligible(out_edge):
                seen.add(out_edge.identifier)
                out_edges.append(out_edge)
        return out_edges
