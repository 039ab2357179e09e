"""Unit tests for the Haversine distance estimator."""

import math

import pytest

from fleetroute.domain.distance import haversine_km
from fleetroute.domain.entities import GeoPoint, InvalidCoordinates


class TestHaversine:
    def test_same_point_is_zero(self):
        p = GeoPoint(28.6139, 77.2090)
        assert haversine_km(p, p) == 0.0

    def test_symmetric(self):
        a = GeoPoint(19.0, 72.0)
        b = GeoPoint(20.0, 73.0)
        assert abs(haversine_km(a, b) - haversine_km(b, a)) < 1e-9

    def test_one_degree_latitude_at_equator(self):
        d = haversine_km(GeoPoint(0.0, 0.0), GeoPoint(1.0, 0.0))
        assert 110.0 < d < 112.0

    def test_known_distance_delhi_to_rohini(self):
        # 0.0902 deg north (~10.0 km) and 0.1065 deg west (~10.4 km)
        d = haversine_km(GeoPoint(28.6139, 77.2090), GeoPoint(28.7041, 77.1025))
        assert abs(d - 14.44) < 0.3

    def test_antipodal_points_are_finite(self):
        d = haversine_km(GeoPoint(0.0, 0.0), GeoPoint(0.0, 180.0))
        assert math.isfinite(d)
        assert abs(d - math.pi * 6371.0) < 1.0

    def test_nan_propagates(self):
        d = haversine_km(GeoPoint(float("nan"), 0.0), GeoPoint(1.0, 1.0))
        assert math.isnan(d)


class TestGeoPointValidation:
    def test_valid_point_returns_self(self):
        p = GeoPoint(-90.0, 180.0)
        assert p.validate() is p

    @pytest.mark.parametrize(
        "lat,lng",
        [(91.0, 0.0), (-90.5, 0.0), (0.0, 180.1), (0.0, -181.0)],
    )
    def test_out_of_range_rejected(self, lat, lng):
        with pytest.raises(InvalidCoordinates):
            GeoPoint(lat, lng).validate()

    def test_nan_rejected(self):
        with pytest.raises(InvalidCoordinates, match="NaN"):
            GeoPoint(float("nan"), 10.0).validate()

    def test_lon_lat_order(self):
        assert GeoPoint(28.5, 77.25).as_lon_lat() == "77.25,28.5"
