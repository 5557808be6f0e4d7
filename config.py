"""
Debris Service Configuration and Constants

This module contains the fallback TLE catalog, physical constants and the
policy constants used throughout the project.

Constants:
    Circular-orbit approximation constants. These are rounded values used for
    display-grade speed estimates, not the WGS-72 set required by SGP4.

Fallback TLE Data:
    Hardcoded debris TLEs returned when the live catalog cannot be fetched.
    They keep the app populated; they are NOT current orbital data and any
    figure derived from them should be treated as illustrative.

Environment overrides:
    CELESTRAK_API_BASE      Catalog host (default https://celestrak.org)
    TLE_FETCH_TIMEOUT       Request timeout in seconds (default 30)
    MAX_CATALOG_RECORDS     Parsed record cap (default 50)
    SIMULATED_DEBRIS_COUNT  Simulated small debris per batch (default 20)
    REFRESH_INTERVAL_SECONDS  Scheduler period (default 60)
"""

import os
from datetime import datetime, timezone
from typing import Dict, List, Optional

# Circular-orbit approximation constants
EARTH_RADIUS_KM: float = 6371.0  # Mean Earth radius (km)
GRAVITATIONAL_PARAMETER: float = 398600.0  # Earth gravitational parameter (km³/s²)
KMS_TO_KMH: float = 3.6  # Applied to the km/s orbital speed; result is reported as "km/h"

# Catalog endpoint
CELESTRAK_BASE: str = "https://celestrak.org"
CELESTRAK_GP_PATH: str = "/NORAD/elements/gp.php"
CATALOG_GROUP: str = "last-30-days"
CATALOG_FORMAT: str = "tle"
FETCH_TIMEOUT_SECONDS: float = 30.0

# Display cap on parsed catalog records
MAX_CATALOG_RECORDS: int = 50

# Synthetic placement of catalog objects
ALTITUDE_RANGE_KM = (200.0, 1200.0)
LATITUDE_AMPLITUDE_DEG: float = 60.0
LATITUDE_JITTER_DEG: float = 20.0
LATITUDE_LIMIT_DEG: float = 85.0

# Simulated small debris (objects too small for the public catalog)
SIMULATED_DEBRIS_COUNT: int = 20
SIMULATED_ALTITUDE_RANGE_KM = (200.0, 1000.0)
SIMULATED_VELOCITY_RANGE = (15.0, 30.0)

# Large-object name keywords, matched case-insensitively as substrings
LARGE_OBJECT_KEYWORDS = ("ROCKET", "R/B", "SATELLITE", "COSMOS", "DEBRIS", "FRAGMENT")

# Operations statistics: per-day rates since the programme start date
STATS_EPOCH: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)
SMALL_DEBRIS_REMOVED_PER_DAY: float = 0.3
LARGE_DEBRIS_CAPTURED_PER_DAY: float = 0.1
RECYCLED_KG_PER_DAY: float = 2.5
SMALL_DEBRIS_JITTER: int = 5  # exclusive upper bound
LARGE_DEBRIS_JITTER: int = 3  # exclusive upper bound
RECYCLED_KG_JITTER: float = 50.0

REFRESH_INTERVAL_SECONDS: float = 60.0

# Fallback debris TLEs (fragments of the 2009 Iridium-Cosmos collision and
# the 2007 Fengyun-1C test)
FALLBACK_TLE_CATALOG: List[Dict[str, str]] = [
    {
        'name': 'COSMOS 2251 DEB',
        'line1': '1 34454U 93036SX  24275.25000000  .00000000  00000-0  00000-0 0  9990',
        'line2': '2 34454  74.0000 180.0000 0001000  90.0000 270.0000 14.12345678 12345',
    },
    {
        'name': 'IRIDIUM 33 DEB',
        'line1': '1 36395U 93036SY  24275.25000000  .00000000  00000-0  00000-0 0  9991',
        'line2': '2 36395  86.4000 320.0000 0002000 120.0000 240.0000 14.34567890 12346',
    },
    {
        'name': 'FENGYUN 1C DEB',
        'line1': '1 37794U 93036SZ  24275.25000000  .00000000  00000-0  00000-0 0  9992',
        'line2': '2 37794  98.8000  45.0000 0003000 150.0000 210.0000 14.56789012 12347',
    },
]


class ServiceConfig:
    """Runtime settings, read from the environment unless given explicitly."""

    def __init__(
        self,
        celestrak_base: Optional[str] = None,
        fetch_timeout: Optional[float] = None,
        max_records: Optional[int] = None,
        simulated_count: Optional[int] = None,
        refresh_interval: Optional[float] = None,
    ):
        self.celestrak_base = celestrak_base or os.getenv('CELESTRAK_API_BASE', CELESTRAK_BASE)
        self.fetch_timeout = fetch_timeout if fetch_timeout is not None else float(
            os.getenv('TLE_FETCH_TIMEOUT', str(FETCH_TIMEOUT_SECONDS))
        )
        self.max_records = max_records if max_records is not None else int(
            os.getenv('MAX_CATALOG_RECORDS', str(MAX_CATALOG_RECORDS))
        )
        self.simulated_count = simulated_count if simulated_count is not None else int(
            os.getenv('SIMULATED_DEBRIS_COUNT', str(SIMULATED_DEBRIS_COUNT))
        )
        self.refresh_interval = refresh_interval if refresh_interval is not None else float(
            os.getenv('REFRESH_INTERVAL_SECONDS', str(REFRESH_INTERVAL_SECONDS))
        )

        if self.max_records <= 0:
            raise ValueError(f"max_records must be positive, got {self.max_records}")
        if self.simulated_count < 0:
            raise ValueError(f"simulated_count must be non-negative, got {self.simulated_count}")

    @property
    def catalog_url(self) -> str:
        return self.celestrak_base.rstrip('/') + CELESTRAK_GP_PATH

    @property
    def catalog_params(self) -> Dict[str, str]:
        return {'GROUP': CATALOG_GROUP, 'FORMAT': CATALOG_FORMAT}
