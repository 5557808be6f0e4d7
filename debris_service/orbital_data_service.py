"""
Orbital Data Service

Derives approximate debris positions from the TLE catalog and keeps the
latest positions and operations statistics for the app's screens.

Positions are NOT propagated from the orbital elements. Each catalog object
is spaced around the globe by its index and given a random altitude in low
Earth orbit; speed follows the circular-orbit approximation
v = sqrt(mu / (R_earth + h)). This is a display approximation.

All pseudo-random draws go through an injected numpy Generator and all
timestamps through an injected clock, so a seeded service is reproducible.

Example:
    service = OrbitalDataService(rng=np.random.default_rng(7))
    positions = asyncio.run(service.calculate_debris_positions())
    stats = service.get_orbit_stats()
"""

import math
from datetime import datetime, timezone
from typing import Callable, List, Optional

import numpy as np

from config import (
    ALTITUDE_RANGE_KM,
    EARTH_RADIUS_KM,
    GRAVITATIONAL_PARAMETER,
    KMS_TO_KMH,
    LARGE_DEBRIS_CAPTURED_PER_DAY,
    LARGE_DEBRIS_JITTER,
    LATITUDE_AMPLITUDE_DEG,
    LATITUDE_JITTER_DEG,
    LATITUDE_LIMIT_DEG,
    RECYCLED_KG_JITTER,
    RECYCLED_KG_PER_DAY,
    SIMULATED_ALTITUDE_RANGE_KM,
    SIMULATED_DEBRIS_COUNT,
    SIMULATED_VELOCITY_RANGE,
    SMALL_DEBRIS_JITTER,
    SMALL_DEBRIS_REMOVED_PER_DAY,
    STATS_EPOCH,
    ServiceConfig,
)
from debris_service.classification import classify_risk, classify_size
from debris_service.models import (
    CatalogFetchResult,
    CatalogSource,
    DebrisPosition,
    OrbitStats,
    RiskLevel,
    SizeCategory,
    TleRecord,
)
from debris_service.tle_catalog import CatalogClient
from logging_config import get_logger

logger = get_logger(__name__)

SIMULATED_RISK_LEVELS = (RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def circular_orbit_speed(altitude_km: float) -> float:
    """Circular orbital speed (km/s) at the given altitude."""
    return math.sqrt(GRAVITATIONAL_PARAMETER / (EARTH_RADIUS_KM + altitude_km))


class OrbitalDataService:
    """
    Debris position and statistics provider.

    Holds one current position list and one current statistics snapshot.
    Each completed computation replaces both; when calls overlap, the last
    one to complete wins.
    """

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        catalog_client: Optional[CatalogClient] = None,
        rng: Optional[np.random.Generator] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the service.

        Args:
            config: Runtime settings (default: read from environment)
            catalog_client: Catalog source (default: CelesTrak client)
            rng: Source of all random draws (default: unseeded generator)
            clock: Returns the current aware UTC datetime
        """
        self.config = config or ServiceConfig()
        self.catalog_client = catalog_client or CatalogClient(self.config)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.clock = clock or utc_now

        self._positions: List[DebrisPosition] = []
        self._stats = OrbitStats(last_update=self.clock())
        self.last_catalog_source: Optional[CatalogSource] = None
        self.last_fallback_reason: Optional[str] = None

    async def fetch_catalog_text(self) -> str:
        """Raw catalog text; raises on transport failure."""
        return await self.catalog_client.fetch_text()

    async def fetch_catalog(self) -> CatalogFetchResult:
        """Fetch the catalog, tagged with whether fallback records were used."""
        result = await self.catalog_client.fetch()
        self.last_catalog_source = result.source
        self.last_fallback_reason = result.reason
        return result

    async def fetch_tle_records(self) -> List[TleRecord]:
        """Parsed catalog records, or the built-in fallback set. Never raises."""
        result = await self.fetch_catalog()
        return result.records

    async def calculate_debris_positions(self) -> List[DebrisPosition]:
        """
        Derive a position for each catalog record and refresh the snapshot.

        A record that fails derivation is logged and skipped.

        Returns:
            The new list of catalog-derived positions
        """
        records = await self.fetch_tle_records()
        total = len(records)
        logger.info("positions_calculation_started", records=total)

        positions = []
        for index, record in enumerate(records):
            try:
                positions.append(self._derive_position(record, index, total))
            except Exception as e:
                logger.error("position_derivation_failed", name=record.name, error=str(e))

        self._positions = positions
        self.update_stats()
        logger.info("positions_calculated", positions=len(positions), skipped=total - len(positions))
        return list(positions)

    def _derive_position(self, record: TleRecord, index: int, total: int) -> DebrisPosition:
        # Even spacing around the globe, not an orbital phase
        angle_deg = index * 360 / total
        angle = math.radians(angle_deg)

        altitude = self.rng.uniform(*ALTITUDE_RANGE_KM)
        latitude = math.sin(angle) * LATITUDE_AMPLITUDE_DEG + self.rng.uniform(
            -LATITUDE_JITTER_DEG, LATITUDE_JITTER_DEG
        )
        latitude = max(-LATITUDE_LIMIT_DEG, min(LATITUDE_LIMIT_DEG, latitude))
        longitude = angle_deg % 360 - 180

        velocity = circular_orbit_speed(altitude) * KMS_TO_KMH

        return DebrisPosition(
            id=f"TLE-{index + 1}",
            name=record.name,
            latitude=latitude,
            longitude=longitude,
            altitude=altitude,
            velocity=velocity,
            risk_level=classify_risk(altitude, velocity),
            size=classify_size(record.name),
            timestamp=self.clock(),
        )

    def generate_simulated_small_debris(self, count: int = SIMULATED_DEBRIS_COUNT) -> List[DebrisPosition]:
        """
        Generate small debris below the public catalog's tracking threshold.

        Does not touch the cached positions.

        Args:
            count: Number of objects to generate

        Returns:
            Positions with ids SIM-1..SIM-count
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")

        now = self.clock()
        simulated = []
        for i in range(count):
            simulated.append(DebrisPosition(
                id=f"SIM-{i + 1}",
                name=f"Small Debris {i + 1}",
                latitude=self.rng.uniform(-90.0, 90.0),
                longitude=self.rng.uniform(-180.0, 180.0),
                altitude=self.rng.uniform(*SIMULATED_ALTITUDE_RANGE_KM),
                velocity=self.rng.uniform(*SIMULATED_VELOCITY_RANGE),
                risk_level=SIMULATED_RISK_LEVELS[int(self.rng.integers(len(SIMULATED_RISK_LEVELS)))],
                size=SizeCategory.SMALL,
                timestamp=now,
            ))
        return simulated

    def get_all_debris_positions(self, count: Optional[int] = None) -> List[DebrisPosition]:
        """Cached catalog positions followed by a fresh simulated batch."""
        if count is None:
            count = self.config.simulated_count
        return list(self._positions) + self.generate_simulated_small_debris(count)

    def update_stats(self) -> None:
        """Recompute the statistics snapshot from the cached positions."""
        now = self.clock()
        days = max(0, (now - STATS_EPOCH).days)

        self._stats = OrbitStats(
            total_tracked=len(self._positions) + self.config.simulated_count,
            small_debris_removed=math.floor(days * SMALL_DEBRIS_REMOVED_PER_DAY)
            + int(self.rng.integers(SMALL_DEBRIS_JITTER)),
            large_debris_captured=math.floor(days * LARGE_DEBRIS_CAPTURED_PER_DAY)
            + int(self.rng.integers(LARGE_DEBRIS_JITTER)),
            recycled_material=math.floor(days * RECYCLED_KG_PER_DAY)
            + self.rng.uniform(0.0, RECYCLED_KG_JITTER),
            last_update=now,
        )

    def get_orbit_stats(self) -> OrbitStats:
        """Copy of the current statistics snapshot."""
        return self._stats.model_copy()


_instance: Optional[OrbitalDataService] = None


def get_instance() -> OrbitalDataService:
    """Process-wide default service, created on first use."""
    global _instance
    if _instance is None:
        _instance = OrbitalDataService()
    return _instance
