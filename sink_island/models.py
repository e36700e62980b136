"""
Pydantic models for sink island findings and scan reports
"""

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


# ============================================================
# GeoJSON Types
# ============================================================

class GeoJSONMultiLineString(BaseModel):
    type: Literal["MultiLineString"] = "MultiLineString"
    coordinates: List[List[List[float]]]  # [[[lon, lat], ...], ...]


# ============================================================
# Findings
# ============================================================

class SinkIslandFinding(BaseModel):
    """One sink island: every member edge plus the instruction text"""
    task_identifier: str
    seed_identifier: int
    edge_identifiers: List[int]
    osm_identifiers: List[int]
    instruction: str
    geometry: GeoJSONMultiLineString

    @property
    def size(self) -> int:
        return len(self.edge_identifiers)


class ScanStatistics(BaseModel):
    edges_in_graph: int = 0
    seeds_admitted: int = 0
    searches_aborted: int = 0
    edges_flagged: int = 0
    duplicate_findings_dropped: int = 0


class ScanReport(BaseModel):
    check: str = "SinkIslandCheck"
    generated_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    tree_size: int
    minimum_highway_type: str
    source: Optional[str] = None
    findings: List[SinkIslandFinding] = Field(default_factory=list)
    statistics: ScanStatistics = Field(default_factory=ScanStatistics)
