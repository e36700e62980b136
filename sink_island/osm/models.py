"""
OSM data models

Data classes for representing OSM nodes and ways
"""

from typing import List, Dict
from dataclasses import dataclass, field


@dataclass
class OSMNode:
    """Represents an OSM node (point)"""
    id: int
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class OSMWay:
    """Represents an OSM way (line or polygon)"""
    id: int
    node_ids: List[int]
    tags: Dict[str, str] = field(default_factory=dict)

    def is_closed(self) -> bool:
        return len(self.node_ids) >= 4 and self.node_ids[0] == self.node_ids[-1]
