"""
Tests for great-circle distance.

Run: pytest tests/test_geo.py -v
"""

import math

import pytest

from district_mergers.geo import EARTH_RADIUS_MILES, miles_between

PROVIDENCE = {'lat': 41.8240, 'lon': -71.4128}
BOSTON = {'lat': 42.3601, 'lon': -71.0589}
WESTERLY = {'lat': 41.3776, 'lon': -71.8273}


class TestMilesBetween:

    def test_same_point_is_zero(self):
        assert miles_between(PROVIDENCE, PROVIDENCE) == pytest.approx(0.0, abs=1e-9)

    def test_symmetric(self):
        assert miles_between(PROVIDENCE, BOSTON) == pytest.approx(miles_between(BOSTON, PROVIDENCE))
        assert miles_between(WESTERLY, BOSTON) == pytest.approx(miles_between(BOSTON, WESTERLY))

    def test_one_degree_of_latitude(self):
        a = {'lat': 41.0, 'lon': -71.0}
        b = {'lat': 42.0, 'lon': -71.0}
        assert miles_between(a, b) == pytest.approx(EARTH_RADIUS_MILES * math.pi / 180, rel=1e-9)

    def test_providence_to_boston(self):
        """Roughly 41 miles as the crow flies."""
        assert 40.0 < miles_between(PROVIDENCE, BOSTON) < 42.0

    def test_non_negative(self):
        assert miles_between(BOSTON, WESTERLY) > 0
        assert miles_between(WESTERLY, BOSTON) > 0

    def test_nan_propagates(self):
        assert math.isnan(miles_between({'lat': float('nan'), 'lon': -71.0}, PROVIDENCE))

    def test_accepts_any_mapping_with_lat_lon(self):
        """Extra keys are ignored."""
        a = dict(PROVIDENCE, name="Providence")
        assert miles_between(a, PROVIDENCE) == pytest.approx(0.0, abs=1e-9)
