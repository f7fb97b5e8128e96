"""
Geo helpers: great-circle distance for proximity scoring and radius filtering.

All distances are in meters.
"""

import numpy as np

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two (lat, lon) points given in degrees."""
    phi1, lam1, phi2, lam2 = np.radians([lat1, lon1, lat2, lon2])
    d_phi = phi2 - phi1
    d_lam = lam2 - lam1
    a = np.sin(d_phi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lam / 2) ** 2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return float(EARTH_RADIUS_M * c)
