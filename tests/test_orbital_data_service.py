"""
Tests for the Orbital Data Service

Tests position derivation and the cached snapshot:
- Coordinate ranges and circular-orbit speed
- Per-record failure isolation
- Snapshot replacement and statistics
- Simulated small debris
- Reproducibility with a seeded generator

Run with:
    python -m pytest tests/test_orbital_data_service.py -v
"""

import asyncio
import math
import unittest
from datetime import datetime, timedelta, timezone
from unittest import mock

import numpy as np

from config import ServiceConfig
from debris_service import orbital_data_service
from debris_service.models import CatalogFetchResult, CatalogSource, RiskLevel, SizeCategory, TleRecord
from debris_service.orbital_data_service import OrbitalDataService, circular_orbit_speed, get_instance
from debris_service.tle_catalog import fallback_records

FIXED_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)  # 60 days after the stats epoch


def make_records(count: int, prefix: str = "OBJECT") -> list:
    return [
        TleRecord(name=f"{prefix} {i}", line1=f"1 {i:05d}U", line2=f"2 {i:05d}")
        for i in range(count)
    ]


class StubCatalogClient:
    """Catalog client returning canned records."""

    def __init__(self, records=None, fail=False):
        self.records = records if records is not None else []
        self.fail = fail
        self.calls = 0

    async def fetch_text(self) -> str:
        return "\n".join(f"{r.name}\n{r.line1}\n{r.line2}" for r in self.records)

    async def fetch(self) -> CatalogFetchResult:
        self.calls += 1
        if self.fail:
            return CatalogFetchResult(source=CatalogSource.FALLBACK, records=fallback_records(), reason="stub failure")
        return CatalogFetchResult(source=CatalogSource.LIVE, records=list(self.records))


def make_service(records=None, seed=42, fail=False, clock=None) -> OrbitalDataService:
    return OrbitalDataService(
        config=ServiceConfig(simulated_count=20),
        catalog_client=StubCatalogClient(records, fail=fail),
        rng=np.random.default_rng(seed),
        clock=clock or (lambda: FIXED_NOW),
    )


class TestPositionDerivation(unittest.TestCase):
    """Test catalog-derived positions."""

    def test_position_invariants(self):
        """Test ranges hold for every derived position across seeds."""
        for seed in range(10):
            service = make_service(make_records(50), seed=seed)
            positions = asyncio.run(service.calculate_debris_positions())

            self.assertEqual(len(positions), 50)
            for position in positions:
                self.assertGreaterEqual(position.latitude, -85.0)
                self.assertLessEqual(position.latitude, 85.0)
                self.assertGreaterEqual(position.longitude, -180.0)
                self.assertLessEqual(position.longitude, 180.0)
                self.assertGreaterEqual(position.altitude, 200.0)
                self.assertLess(position.altitude, 1200.0)
                self.assertGreater(position.velocity, 0.0)

    def test_ids_longitudes_and_names(self):
        """Test ids, even longitude spacing and name passthrough."""
        service = make_service(make_records(4))
        positions = asyncio.run(service.calculate_debris_positions())

        self.assertEqual([p.id for p in positions], ["TLE-1", "TLE-2", "TLE-3", "TLE-4"])
        self.assertEqual([p.longitude for p in positions], [-180.0, -90.0, 0.0, 90.0])
        self.assertEqual([p.name for p in positions], ["OBJECT 0", "OBJECT 1", "OBJECT 2", "OBJECT 3"])
        for position in positions:
            self.assertEqual(position.timestamp, FIXED_NOW)

    def test_velocity_follows_circular_orbit(self):
        """Test speed is the circular-orbit speed times 3.6."""
        service = make_service(make_records(5))
        positions = asyncio.run(service.calculate_debris_positions())

        for position in positions:
            expected = math.sqrt(398600 / (6371 + position.altitude)) * 3.6
            self.assertAlmostEqual(position.velocity, expected, places=9)

        self.assertAlmostEqual(circular_orbit_speed(0.0), math.sqrt(398600 / 6371), places=12)

    def test_risk_and_size_assigned(self):
        """Test low orbits rate Critical and names drive size."""
        records = [TleRecord(name="SL-8 R/B", line1="1", line2="2"), TleRecord(name="XYZ-100", line1="1", line2="2")]
        service = make_service(records)
        positions = asyncio.run(service.calculate_debris_positions())

        self.assertEqual(positions[0].size, SizeCategory.LARGE)
        self.assertEqual(positions[1].size, SizeCategory.SMALL)
        for position in positions:
            # Circular speeds below 1200 km exceed 25 "km/h"
            expected = RiskLevel.CRITICAL if position.altitude < 600 else RiskLevel.HIGH
            self.assertEqual(position.risk_level, expected)

    def test_seeded_runs_reproduce(self):
        """Test identical seeds give identical positions."""
        first = asyncio.run(make_service(make_records(10), seed=7).calculate_debris_positions())
        second = asyncio.run(make_service(make_records(10), seed=7).calculate_debris_positions())

        self.assertEqual(first, second)

    def test_failed_record_is_skipped(self):
        """Test one failing record does not abort the batch."""
        service = make_service(make_records(3))
        original = service._derive_position

        def flaky(record, index, total):
            if index == 1:
                raise ValueError("bad record")
            return original(record, index, total)

        with mock.patch.object(service, "_derive_position", side_effect=flaky):
            positions = asyncio.run(service.calculate_debris_positions())

        self.assertEqual([p.id for p in positions], ["TLE-1", "TLE-3"])
        self.assertEqual(service.get_orbit_stats().total_tracked, 22)

    def test_empty_catalog(self):
        """Test zero records give zero positions and valid stats."""
        service = make_service([])
        positions = asyncio.run(service.calculate_debris_positions())

        self.assertEqual(positions, [])
        self.assertEqual(service.get_orbit_stats().total_tracked, 20)


class TestCatalogFallback(unittest.TestCase):
    """Test fallback visibility through the service."""

    def test_fallback_records(self):
        """Test transport failure yields the three fallback entries."""
        service = make_service(fail=True)

        records = asyncio.run(service.fetch_tle_records())

        self.assertEqual([r.name for r in records], ["COSMOS 2251 DEB", "IRIDIUM 33 DEB", "FENGYUN 1C DEB"])
        self.assertEqual(service.last_catalog_source, CatalogSource.FALLBACK)
        self.assertEqual(service.last_fallback_reason, "stub failure")

    def test_fallback_positions(self):
        """Test positions are still produced from fallback data."""
        service = make_service(fail=True)

        positions = asyncio.run(service.calculate_debris_positions())

        self.assertEqual(len(positions), 3)
        self.assertEqual(positions[0].size, SizeCategory.LARGE)

    def test_live_source_recorded(self):
        """Test a live fetch is recorded as such."""
        service = make_service(make_records(2))

        asyncio.run(service.fetch_tle_records())

        self.assertEqual(service.last_catalog_source, CatalogSource.LIVE)
        self.assertIsNone(service.last_fallback_reason)

    def test_fetch_catalog_text(self):
        """Test raw text is delegated to the client."""
        service = make_service(make_records(1))

        text = asyncio.run(service.fetch_catalog_text())

        self.assertEqual(text.splitlines()[0], "OBJECT 0")


class TestSnapshot(unittest.TestCase):
    """Test cached positions and statistics."""

    def test_second_calculation_replaces_first(self):
        """Test a recomputation never accumulates stale entries."""
        client = StubCatalogClient(make_records(5, prefix="FIRST"))
        service = OrbitalDataService(
            config=ServiceConfig(simulated_count=20),
            catalog_client=client,
            rng=np.random.default_rng(1),
            clock=lambda: FIXED_NOW,
        )

        asyncio.run(service.calculate_debris_positions())
        client.records = make_records(2, prefix="SECOND")
        asyncio.run(service.calculate_debris_positions())

        real = [p for p in service.get_all_debris_positions() if not p.is_simulated]
        self.assertEqual([p.name for p in real], ["SECOND 0", "SECOND 1"])
        self.assertEqual(service.get_orbit_stats().total_tracked, 22)

    def test_overlapping_calls_last_completion_wins(self):
        """Test the call that completes last owns the snapshot."""

        class SlowFirstClient(StubCatalogClient):
            async def fetch(self):
                self.calls += 1
                call = self.calls
                await asyncio.sleep(0.05 if call == 1 else 0)
                return CatalogFetchResult(
                    source=CatalogSource.LIVE,
                    records=make_records(call, prefix=f"CALL{call}"),
                )

        service = OrbitalDataService(
            catalog_client=SlowFirstClient(),
            rng=np.random.default_rng(0),
            clock=lambda: FIXED_NOW,
        )

        async def run_both():
            await asyncio.gather(service.calculate_debris_positions(), service.calculate_debris_positions())

        asyncio.run(run_both())

        real = [p for p in service.get_all_debris_positions(count=0)]
        self.assertEqual([p.name for p in real], ["CALL1 0"])

    def test_stats_values(self):
        """Test statistics follow elapsed days plus bounded jitter."""
        service = make_service(make_records(10))
        asyncio.run(service.calculate_debris_positions())

        stats = service.get_orbit_stats()
        days = 60
        self.assertEqual(stats.total_tracked, 30)
        self.assertGreaterEqual(stats.small_debris_removed, math.floor(days * 0.3))
        self.assertLess(stats.small_debris_removed, math.floor(days * 0.3) + 5)
        self.assertGreaterEqual(stats.large_debris_captured, math.floor(days * 0.1))
        self.assertLess(stats.large_debris_captured, math.floor(days * 0.1) + 3)
        self.assertGreaterEqual(stats.recycled_material, 150.0)
        self.assertLess(stats.recycled_material, 200.0)
        self.assertEqual(stats.last_update, FIXED_NOW)

    def test_stats_before_epoch_not_negative(self):
        """Test a clock before the epoch does not produce negative counters."""
        early = datetime(2023, 6, 1, tzinfo=timezone.utc)
        service = make_service(make_records(1), clock=lambda: early)
        service.update_stats()

        stats = service.get_orbit_stats()
        self.assertGreaterEqual(stats.small_debris_removed, 0)
        self.assertLess(stats.recycled_material, 50.0)

    def test_initial_stats(self):
        """Test the snapshot is zeroed before any computation."""
        stats = make_service().get_orbit_stats()

        self.assertEqual(stats.total_tracked, 0)
        self.assertEqual(stats.recycled_material, 0.0)
        self.assertEqual(stats.last_update, FIXED_NOW)

    def test_stats_are_copied(self):
        """Test mutating returned stats leaves the service unchanged."""
        service = make_service(make_records(3))
        asyncio.run(service.calculate_debris_positions())

        stats = service.get_orbit_stats()
        stats.total_tracked = 9999
        stats.recycled_material = -1.0

        fresh = service.get_orbit_stats()
        self.assertEqual(fresh.total_tracked, 23)
        self.assertGreaterEqual(fresh.recycled_material, 0.0)

    def test_stats_timestamp_advances(self):
        """Test last_update follows the clock on each recomputation."""
        times = iter([FIXED_NOW + timedelta(minutes=m) for m in range(100)])
        service = make_service(make_records(1), clock=lambda: next(times))

        asyncio.run(service.calculate_debris_positions())
        first = service.get_orbit_stats().last_update
        asyncio.run(service.calculate_debris_positions())
        second = service.get_orbit_stats().last_update

        self.assertGreater(second, first)


class TestSimulatedDebris(unittest.TestCase):
    """Test simulated small debris generation."""

    def test_generate_five(self):
        """Test count, ids and size."""
        debris = make_service().generate_simulated_small_debris(5)

        self.assertEqual(len(debris), 5)
        self.assertEqual([d.id for d in debris], ["SIM-1", "SIM-2", "SIM-3", "SIM-4", "SIM-5"])
        self.assertEqual([d.name for d in debris], [f"Small Debris {i}" for i in range(1, 6)])
        for d in debris:
            self.assertEqual(d.size, SizeCategory.SMALL)
            self.assertTrue(d.is_simulated)

    def test_generated_ranges(self):
        """Test every random field stays within its range."""
        debris = make_service(seed=3).generate_simulated_small_debris(200)

        for d in debris:
            self.assertGreaterEqual(d.latitude, -90.0)
            self.assertLess(d.latitude, 90.0)
            self.assertGreaterEqual(d.longitude, -180.0)
            self.assertLess(d.longitude, 180.0)
            self.assertGreaterEqual(d.altitude, 200.0)
            self.assertLess(d.altitude, 1000.0)
            self.assertGreaterEqual(d.velocity, 15.0)
            self.assertLess(d.velocity, 30.0)
            self.assertIn(d.risk_level, (RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH))
        self.assertEqual(len({d.timestamp for d in debris}), 1)

    def test_default_count_and_edge_counts(self):
        """Test the default batch size, zero and negative counts."""
        service = make_service()

        self.assertEqual(len(service.generate_simulated_small_debris()), 20)
        self.assertEqual(service.generate_simulated_small_debris(0), [])
        with self.assertRaises(ValueError):
            service.generate_simulated_small_debris(-1)

    def test_generation_leaves_cache_alone(self):
        """Test generating simulated debris does not touch cached positions."""
        service = make_service(make_records(2))
        asyncio.run(service.calculate_debris_positions())

        service.generate_simulated_small_debris(10)

        self.assertEqual(len(service.get_all_debris_positions(count=0)), 2)

    def test_all_positions_merge(self):
        """Test real positions come first and the simulated part is regenerated."""
        service = make_service(make_records(3))
        asyncio.run(service.calculate_debris_positions())

        first = service.get_all_debris_positions()
        second = service.get_all_debris_positions()

        self.assertEqual(len(first), 23)
        self.assertEqual([p.id for p in first[:3]], ["TLE-1", "TLE-2", "TLE-3"])
        self.assertEqual(first[3].id, "SIM-1")
        self.assertEqual(first[:3], second[:3])
        self.assertNotEqual(first[3:], second[3:])


class TestDefaultInstance(unittest.TestCase):
    """Test the lazily created default service."""

    def setUp(self):
        orbital_data_service._instance = None

    def tearDown(self):
        orbital_data_service._instance = None

    def test_get_instance_is_shared(self):
        """Test repeated calls return the same service."""
        first = get_instance()
        self.assertIs(first, get_instance())
        self.assertIsInstance(first, OrbitalDataService)


if __name__ == "__main__":
    unittest.main()
