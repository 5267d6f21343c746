"""
Unit tests for UTM to latitude/longitude conversion.
"""
import math
import numpy as np
import pytest

from treelog.utils.geo_projection import (
    get_utm_crs_code,
    utm_to_latlng,
    utm_to_latlng_many,
)


class TestUtmCrsCode:
    """Tests for EPSG code lookup."""

    def test_northern_zone(self):
        assert get_utm_crs_code(47, "N") == "EPSG:32647"

    def test_southern_zone(self):
        assert get_utm_crs_code(34, "S") == "EPSG:32734"

    def test_single_digit_zone_padded(self):
        assert get_utm_crs_code(5, "n") == "EPSG:32605"

    @pytest.mark.parametrize("zone", [0, 61, -1])
    def test_invalid_zone(self, zone):
        with pytest.raises(ValueError, match="zone"):
            get_utm_crs_code(zone, "N")

    def test_invalid_hemisphere(self):
        with pytest.raises(ValueError, match="hemisphere"):
            get_utm_crs_code(47, "X")


class TestUtmToLatLng:
    """Tests for single coordinate conversion."""

    def test_central_meridian(self):
        """Easting 500000 lies on the zone's central meridian (99E for zone 47)."""
        lat, lng = utm_to_latlng(500000, 2040000, 47, "N")

        assert lng == pytest.approx(99.0, abs=1e-9)
        assert 18.3 < lat < 18.6

    def test_equator(self):
        """Northing 0 in the north is the equator."""
        lat, lng = utm_to_latlng(500000, 0, 47, "N")

        assert lat == pytest.approx(0.0, abs=1e-9)
        assert lng == pytest.approx(99.0, abs=1e-9)

    def test_southern_hemisphere_false_northing(self):
        """Southern zones use a 10,000 km false northing."""
        lat, lng = utm_to_latlng(500000, 10000000, 47, "S")

        assert lat == pytest.approx(0.0, abs=1e-9)
        assert lng == pytest.approx(99.0, abs=1e-9)

    def test_survey_area(self):
        """A coordinate in the survey area lands near Mae Chaem."""
        lat, lng = utm_to_latlng(435000, 2045000, 47, "N")

        assert lat == pytest.approx(18.49, abs=0.02)
        assert lng == pytest.approx(98.38, abs=0.02)

    def test_idempotent(self):
        """Repeated calls give identical results."""
        first = utm_to_latlng(435123.4, 2045678.9, 47, "N")
        second = utm_to_latlng(435123.4, 2045678.9, 47, "N")

        assert first == second

    @pytest.mark.parametrize("x,y", [
        (166021, 0),
        (833978, 0),
        (300000, 5000000),
        (700000, 9300000),
    ])
    def test_output_within_geographic_bounds(self, x, y):
        """Realistic inputs produce valid latitude/longitude."""
        lat, lng = utm_to_latlng(x, y, 47, "N")

        assert -90 <= lat <= 90
        assert -180 <= lng <= 180

    def test_out_of_range_easting_still_transforms(self):
        """Out-of-range input is converted, not rejected."""
        lat, lng = utm_to_latlng(50000, 2040000, 47, "N")

        assert math.isfinite(lat)
        assert math.isfinite(lng)
        assert lng < 99.0


class TestUtmToLatLngMany:
    """Tests for batch conversion."""

    def test_matches_single_conversion(self):
        eastings = [435000.0, 435120.0, 436000.0]
        northings = [2045000.0, 2045080.0, 2046000.0]

        lats, lngs = utm_to_latlng_many(eastings, northings, 47, "N")

        for x, y, lat, lng in zip(eastings, northings, lats, lngs):
            expected_lat, expected_lng = utm_to_latlng(x, y, 47, "N")
            assert np.isclose(lat, expected_lat)
            assert np.isclose(lng, expected_lng)

    def test_empty_input(self):
        lats, lngs = utm_to_latlng_many([], [], 47, "N")

        assert len(lats) == 0
        assert len(lngs) == 0

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="same length"):
            utm_to_latlng_many([1.0, 2.0], [1.0], 47, "N")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
