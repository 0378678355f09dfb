"""
Great-circle distance between district anchor points.
"""

from typing import Mapping

import haversine as hs

EARTH_RADIUS_MILES = 3958.8


def miles_between(a: Mapping[str, float], b: Mapping[str, float]) -> float:
    """
    Haversine distance in statute miles between two WGS84 points.

    Args:
        a: Point with 'lat' and 'lon' in degrees
        b: Point with 'lat' and 'lon' in degrees

    Returns:
        Non-negative distance in miles. No validation is done; NaN in gives
        NaN out.

    Example:
        >>> miles_between({'lat': 41.82, 'lon': -71.41}, {'lat': 41.82, 'lon': -71.41})
        0.0
    """
    central_angle = hs.haversine(
        (a['lat'], a['lon']),
        (b['lat'], b['lon']),
        unit=hs.Unit.RADIANS,
        check=False,
    )
    return central_angle * EARTH_RADIUS_MILES
