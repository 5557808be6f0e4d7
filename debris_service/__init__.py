"""
Orbital Debris Data Package

This package derives approximate debris positions, risk levels and operations
statistics from a public TLE catalog for display in the debris-tracking app.

Modules:
    models: Data structures for catalog records, positions and statistics
    tle_catalog: Catalog fetching with fallback, and TLE text parsing
    classification: Risk and size classification policies
    orbital_data_service: Position derivation and statistics snapshot
    summary: Aggregates over position lists for display
    scheduler: Periodic recomputation

Positions are a display approximation distributed around the globe; they are
not propagated from the orbital elements.
"""

from debris_service.models import (
    CatalogFetchResult,
    CatalogSource,
    DebrisPosition,
    OrbitStats,
    PositionSummary,
    RiskLevel,
    SizeCategory,
    TleRecord,
)
from debris_service.orbital_data_service import OrbitalDataService, get_instance

__version__ = "1.0.0"

__all__ = [
    "CatalogFetchResult",
    "CatalogSource",
    "DebrisPosition",
    "OrbitStats",
    "OrbitalDataService",
    "PositionSummary",
    "RiskLevel",
    "SizeCategory",
    "TleRecord",
    "get_instance",
]
