"""
Sink Island Detector

Finds clusters of road edges in an OpenStreetMap road network that cannot
be driven out of once entered.
"""

from .analysis import BoundedFrontierSearch, FlagLedger, SinkIslandCheck
from .config import ConfigurationError, ScanConfig, SinkIslandCheckConfig
from .pipeline import SinkIslandScanPipeline

__version__ = "1.0.0"

__all__ = [
    "BoundedFrontierSearch",
    "FlagLedger",
    "SinkIslandCheck",
    "ConfigurationError",
    "ScanConfig",
    "SinkIslandCheckConfig",
    "SinkIslandScanPipeline",
]
