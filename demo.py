"""
Debris Data Service Demonstration

This script exercises the consumer API the way the app's screens use it:
- Fetching and parsing the TLE catalog (with fallback)
- Deriving debris positions and risk/size classes
- Reading the operations statistics
- Merging simulated small debris and summarizing the result

Usage:
    python demo.py [--offline] [--seed N] [--refreshes N] [--verbose]

Arguments:
    --offline: Skip the network and use the built-in fallback catalog
    --seed: Seed the random generator for reproducible output
    --refreshes: Run the refresh scheduler for N cycles
    --verbose: Enable debug logging
"""

import argparse
import asyncio
import logging

import numpy as np

from config import ServiceConfig
from debris_service import OrbitalDataService
from debris_service.scheduler import RefreshScheduler
from debris_service.summary import summarize_positions
from logging_config import configure_logging, get_logger

logger = get_logger(__name__)

# Closed local port; every fetch fails fast and the fallback catalog is used
OFFLINE_BASE = "http://127.0.0.1:9"


async def demonstrate_service(service: OrbitalDataService) -> None:
    """Walk through the consumer API once."""
    result = await service.fetch_catalog()
    logger.info("catalog", source=result.source.value, records=len(result.records), reason=result.reason)

    positions = await service.calculate_debris_positions()
    for position in positions[:3]:
        logger.info(
            "position",
            id=position.id,
            name=position.name,
            lat=round(position.latitude, 2),
            lon=round(position.longitude, 2),
            alt_km=round(position.altitude, 1),
            risk=position.risk_level.value,
            size=position.size.value,
        )

    stats = service.get_orbit_stats()
    logger.info("stats", **stats.model_dump(mode="json"))

    all_positions = service.get_all_debris_positions()
    summary = summarize_positions(all_positions)
    logger.info(
        "summary",
        total=summary.total,
        high_risk=summary.high_risk,
        average_altitude_km=round(summary.average_altitude, 1),
    )


async def demonstrate_refresh(service: OrbitalDataService, refreshes: int) -> None:
    """Run the scheduler with a short interval for a few cycles."""
    scheduler = RefreshScheduler(service, interval_seconds=0.5)
    scheduler.start()
    while scheduler.refresh_count < refreshes:
        await asyncio.sleep(0.1)
    await scheduler.stop()


def main() -> None:
    """Main demonstration entry point."""
    parser = argparse.ArgumentParser(description="Debris Data Service Demonstration")
    parser.add_argument("--offline", action="store_true", help="Use the fallback catalog")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--refreshes", type=int, default=0, help="Scheduler cycles to run")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    if args.verbose:
        configure_logging(level=logging.DEBUG)

    config = ServiceConfig(celestrak_base=OFFLINE_BASE, fetch_timeout=2.0) if args.offline else ServiceConfig()
    service = OrbitalDataService(config=config, rng=np.random.default_rng(args.seed))

    logger.info("Debris Data Service Demonstration")
    asyncio.run(demonstrate_service(service))

    if args.refreshes > 0:
        asyncio.run(demonstrate_refresh(service, args.refreshes))

    logger.info("Demonstration complete")


if __name__ == "__main__":
    main()
