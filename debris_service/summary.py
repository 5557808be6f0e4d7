"""Aggregates over debris position lists for the globe and tracking views."""

from typing import Iterable

from debris_service.models import DebrisPosition, PositionSummary, RiskLevel, SizeCategory

HIGH_RISK_LEVELS = (RiskLevel.HIGH, RiskLevel.CRITICAL)


def summarize_positions(positions: Iterable[DebrisPosition]) -> PositionSummary:
    """
    Count positions by risk and size and average their altitude.

    An empty input yields zero counts and an average altitude of 0.0.
    """
    positions = list(positions)
    by_risk = {level: 0 for level in RiskLevel}
    by_size = {size: 0 for size in SizeCategory}
    total_altitude = 0.0

    for position in positions:
        by_risk[position.risk_level] += 1
        by_size[position.size] += 1
        total_altitude += position.altitude

    average_altitude = total_altitude / len(positions) if positions else 0.0

    return PositionSummary(
        total=len(positions),
        high_risk=sum(by_risk[level] for level in HIGH_RISK_LEVELS),
        average_altitude=average_altitude,
        by_risk=by_risk,
        by_size=by_size,
    )
