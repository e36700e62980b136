"""
Analysis modules for the Sink Island Detector
"""

from .eligibility import EdgeEligibilityFilter
from .heuristics import ExclusionHeuristics
from .ledger import FlagLedger
from .frontier_search import BoundedFrontierSearch, SearchOutcome
from .sink_island_check import SinkIslandCheck

__all__ = [
    "EdgeEligibilityFilter",
    "ExclusionHeuristics",
    "FlagLedger",
    "BoundedFrontierSearch",
    "SearchOutcome",
    "SinkIslandCheck",
]
