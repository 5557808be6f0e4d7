"""
Risk and size classification

Both classifiers are pure functions. Risk depends only on altitude and speed,
size only on the object name.
"""

from config import LARGE_OBJECT_KEYWORDS
from debris_service.models import RiskLevel, SizeCategory

# Altitude band edges (km)
LOW_ORBIT_CEILING_KM = 600.0
MID_ORBIT_CEILING_KM = 1200.0


def classify_risk(altitude: float, velocity: float) -> RiskLevel:
    """
    Classify collision risk from altitude (km) and speed (km/h).

    Low orbits are the most congested, so the same speed rates higher there.

    Args:
        altitude: Altitude in km
        velocity: Speed in the service's km/h units

    Returns:
        RiskLevel for the first matching band
    """
    if altitude < LOW_ORBIT_CEILING_KM:
        if velocity > 25:
            return RiskLevel.CRITICAL
        if velocity > 20:
            return RiskLevel.HIGH
        return RiskLevel.MEDIUM
    if altitude < MID_ORBIT_CEILING_KM:
        if velocity > 20:
            return RiskLevel.HIGH
        if velocity > 15:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW
    return RiskLevel.LOW


def classify_size(name: str) -> SizeCategory:
    """Large if the name mentions a rocket body, satellite or known debris keyword."""
    name_upper = name.upper()
    if any(keyword in name_upper for keyword in LARGE_OBJECT_KEYWORDS):
        return SizeCategory.LARGE
    return SizeCategory.SMALL
