"""
Data models for the debris service.

Catalog records are immutable once parsed. Positions and statistics are
recreated on every computation and handed to consumers as plain models.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RiskLevel(str, Enum):
    """Coarse collision-hazard classification"""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class SizeCategory(str, Enum):
    """Physical size category"""

    SMALL = "Small"
    LARGE = "Large"


class CatalogSource(str, Enum):
    """Where a set of catalog records came from"""

    LIVE = "live"
    FALLBACK = "fallback"


class TleRecord(BaseModel):
    """One catalog entry: a name line followed by the two element lines."""

    model_config = ConfigDict(frozen=True)

    name: str
    line1: str
    line2: str

    @property
    def catalog_number(self) -> Optional[int]:
        """NORAD catalog number from columns 3-7 of line 1, if readable."""
        try:
            return int(self.line1[2:7])
        except ValueError:
            return None


class DebrisPosition(BaseModel):
    """Point-in-time approximate position of a debris object"""

    id: str
    name: str
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    altitude: float = Field(gt=0.0)  # km
    velocity: float = Field(gt=0.0)  # km/h
    risk_level: RiskLevel
    size: SizeCategory
    timestamp: datetime

    @property
    def is_simulated(self) -> bool:
        return self.id.startswith("SIM-")


class OrbitStats(BaseModel):
    """Operations statistics snapshot"""

    total_tracked: int = 0
    small_debris_removed: int = 0
    large_debris_captured: int = 0
    recycled_material: float = 0.0  # kg
    last_update: datetime


class CatalogFetchResult(BaseModel):
    """
    Outcome of a catalog fetch.

    ``reason`` explains why fallback records were substituted and is None
    for live data.
    """

    source: CatalogSource
    records: List[TleRecord]
    reason: Optional[str] = None

    @property
    def is_live(self) -> bool:
        return self.source is CatalogSource.LIVE


class PositionSummary(BaseModel):
    """Aggregate figures over a list of positions"""

    total: int
    high_risk: int
    average_altitude: float
    by_risk: Dict[RiskLevel, int]
    by_size: Dict[SizeCategory, int]
