# -*- coding: utf-8 -*-
"""
Geodetic Trajectory Tests - Motion, bearing and shape queries.

Verifies the local Mercator projection, dead-reckoning with ``move``,
target seeking with ``move_toward``, perception shape projection, and the
polyline shape contract of ``GeodeticTrajectory``.

Dependencies
------------
pytest
shapely

Author
------
Seagis Contributors

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-06

Modified
--------
2026-10-16
"""

# Standard library
import math

# Third-party
import numpy as np
import pytest
from shapely.geometry import LineString, box

# SEAGIS internal
from seagis.geodesy import EARTH_RADIUS, GeodeticTrajectory, LocalMercator, haversine_distance
from seagis.vocabulary import SegmentType


def stored(value: float) -> float:
    """Degrees after the float32 radians round trip used for storage."""
    return math.degrees(float(np.float32(math.radians(value))))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def path():
    """Trajectory starting near the equator, heading north."""
    return GeodeticTrajectory((2.0, 5.0))


@pytest.fixture
def empty():
    """Trajectory without any position."""
    return GeodeticTrajectory()


# ---------------------------------------------------------------------------
# Local Mercator
# ---------------------------------------------------------------------------

class TestLocalMercator:
    """Tests for the spherical Mercator centred on an origin."""

    def test_origin_projects_to_zero(self):
        """The origin is (0, 0) in the local plane."""
        proj = LocalMercator(math.radians(55.0), math.radians(-21.0))
        x, y = proj.forward(math.radians(55.0), math.radians(-21.0))
        assert x == pytest.approx(0.0, abs=1e-6)
        assert y == pytest.approx(0.0, abs=1e-6)

    def test_round_trip(self):
        """inverse(forward(p)) returns p."""
        proj = LocalMercator(math.radians(10.0), math.radians(40.0))
        lon, lat = math.radians(10.3), math.radians(39.6)
        x, y = proj.forward(lon, lat)
        lon2, lat2 = proj.inverse(x, y)
        assert lon2 == pytest.approx(lon, abs=1e-12)
        assert lat2 == pytest.approx(lat, abs=1e-12)

    def test_true_scale_at_origin_parallel(self):
        """Distances along the origin parallel are true."""
        proj = LocalMercator(0.0, math.radians(30.0))
        x, _ = proj.forward(math.radians(1.0), math.radians(30.0))
        expected = EARTH_RADIUS * math.cos(math.radians(30.0)) * math.radians(1.0)
        assert x == pytest.approx(expected)

    def test_arrays(self):
        """Arrays are projected element-wise."""
        proj = LocalMercator(0.0, 0.0)
        x, y = proj.forward(np.radians([0.0, 1.0]), np.radians([0.0, 1.0]))
        assert x.shape == (2,)
        assert y[0] == pytest.approx(0.0, abs=1e-9)
        assert y[1] > 0


def test_haversine_one_degree_of_latitude():
    """One degree of latitude is R * pi / 180 metres."""
    d = haversine_distance(0.0, 0.0, 0.0, 1.0)
    assert d == pytest.approx(EARTH_RADIUS * math.pi / 180)


# ---------------------------------------------------------------------------
# Position and direction
# ---------------------------------------------------------------------------

class TestPosition:
    """Tests for location storage and bearing."""

    def test_initial_location(self, path):
        """Location is stored with float32 precision."""
        lon, lat = path.get_location()
        assert lon == stored(2.0)
        assert lat == stored(5.0)

    def test_empty_has_no_location(self, empty):
        """No location before set_location."""
        assert empty.get_location() is None
        assert empty.get_point_count() == 0

    def test_set_location_appends(self, path):
        """set_location appends a point and keeps the bearing."""
        path.rotate(30)
        path.set_location((3.0, 6.0))
        assert path.get_point_count() == 2
        assert path.get_direction() == pytest.approx(30.0)
        assert path.get_location() == (stored(3.0), stored(6.0))

    def test_default_heading_north(self, path):
        """Default heading is north."""
        assert path.get_direction() == pytest.approx(0.0)

    def test_rotate_clockwise(self, path):
        """Positive angles turn clockwise."""
        path.rotate(90)
        assert path.get_direction() == pytest.approx(90.0)
        path.rotate(-45)
        assert path.get_direction() == pytest.approx(45.0)

    def test_get_point_out_of_range(self, path):
        """Indexes outside the path raise IndexError."""
        with pytest.raises(IndexError, match="out of range"):
            path.get_point(5)

    def test_growth_keeps_points(self, path):
        """Points survive many reallocations."""
        for i in range(1, 1200):
            path.set_location((2.0 + i * 1e-3, 5.0))
        assert path.get_point_count() == 1200
        assert path.get_point(0) == (stored(2.0), stored(5.0))
        assert path.get_point(1199)[0] == pytest.approx(3.199, abs=1e-5)


# ---------------------------------------------------------------------------
# Motion
# ---------------------------------------------------------------------------

class TestMove:
    """Tests for dead-reckoning along the bearing."""

    def test_move_north(self, path):
        """Moving north keeps the longitude and travels the distance."""
        path.move(10_000)
        lon, lat = path.get_location()
        assert lon == pytest.approx(stored(2.0), abs=1e-6)
        assert haversine_distance(2.0, 5.0, lon, lat) == pytest.approx(10_000, rel=1e-3)

    def test_move_east_west_round_trip(self, path):
        """100 km east then back returns within one metre."""
        path.rotate(90)
        path.move(100_000)
        path.rotate(180)
        path.move(100_000)
        lon, lat = path.get_location()
        assert haversine_distance(2.0, 5.0, lon, lat) < 1.0

    def test_move_backward_round_trip(self, path):
        """move(d) then move(-d) on a diagonal returns within one metre."""
        path.rotate(45)
        path.move(5_000)
        path.move(-5_000)
        lon, lat = path.get_location()
        assert haversine_distance(2.0, 5.0, lon, lat) < 1.0

    def test_move_without_position(self, empty):
        """move is a no-op without a position."""
        empty.move(1000)
        assert empty.get_point_count() == 0


class TestMoveToward:
    """Tests for target seeking."""

    def test_reaches_target_exactly(self, path):
        """A long enough move lands exactly on the stored target."""
        target = (2.05, 5.03)
        assert path.move_toward(10_000, target) is True
        assert path.get_location() == (stored(2.05), stored(5.03))

    def test_undershoot_gets_closer(self, path):
        """A short move returns False and ends closer by the distance."""
        target = (2.05, 5.03)
        before = haversine_distance(*path.get_location(), *target)
        assert path.move_toward(1_000, target) is False
        after = haversine_distance(*path.get_location(), *target)
        assert after < before
        assert before - after == pytest.approx(1_000, abs=10)

    def test_bearing_updated_before_overshoot(self, path):
        """Reaching a target still turns the agent toward it."""
        assert path.move_toward(50_000, (2.1, 5.0)) is True
        assert path.get_direction() == pytest.approx(90.0, abs=0.01)

    def test_bearing_updated_on_undershoot(self, path):
        """Not reaching a target also turns the agent toward it."""
        path.move_toward(100, (2.0, 4.9))
        assert path.get_direction() == pytest.approx(180.0, abs=0.01)

    def test_same_point_is_reached(self, path):
        """A target at the current position is reached without moving."""
        assert path.move_toward(0.0, (2.0, 5.0)) is True
        assert path.get_location() == (stored(2.0), stored(5.0))

    def test_without_position(self, empty):
        """No position: not reached and nothing appended."""
        assert empty.move_toward(1000, (1.0, 1.0)) is False
        assert empty.get_point_count() == 0


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------

class TestShapes:
    """Tests for perception shapes and the polyline contract."""

    def test_relative_to_geographic(self, path):
        """A metre square becomes a box around the current position."""
        area = path.relative_to_geographic((-1000, -1000, 1000, 1000))
        xmin, ymin, xmax, ymax = area.bounds
        lon, lat = path.get_location()
        assert xmin < lon < xmax
        assert ymin < lat < ymax
        width = math.degrees(2000 / (EARTH_RADIUS * math.cos(math.radians(lat))))
        assert xmax - xmin == pytest.approx(width, rel=1e-4)

    def test_relative_to_geographic_geometry(self, path):
        """Shapely geometries are accepted through their bounds."""
        area = path.relative_to_geographic(box(0, 0, 500, 500))
        lon, lat = path.get_location()
        assert area.bounds[0] == pytest.approx(lon, abs=1e-9)
        assert area.bounds[1] == pytest.approx(lat, abs=1e-9)

    def test_relative_to_geographic_empty(self, empty):
        """No position gives None."""
        assert empty.relative_to_geographic((-1, -1, 1, 1)) is None

    def test_path_iterator(self, path):
        """First segment is MOVETO, the others LINETO."""
        path.move(1000)
        path.move(1000)
        kinds = [seg[0] for seg in path.path_iterator()]
        assert kinds == [SegmentType.MOVETO, SegmentType.LINETO, SegmentType.LINETO]

    def test_as_linestring(self, path):
        """A LineString needs at least two points."""
        assert path.as_linestring() is None
        path.move(1000)
        line = path.as_linestring()
        assert isinstance(line, LineString)
        assert len(line.coords) == 2

    def test_bounds(self, path):
        """Integer bounds are floored and ceiled, float bounds exact."""
        path.set_location((3.2, 4.1))
        assert path.get_bounds() == (2, 4, 4, 5)
        xmin, ymin, xmax, ymax = path.get_bounds2d()
        assert xmin == pytest.approx(2.0, abs=1e-5)
        assert ymax == pytest.approx(5.0, abs=1e-5)

    def test_empty_bounds(self, empty):
        """No bounds without a position."""
        assert empty.get_bounds() is None
        assert empty.get_bounds2d() is None

    def test_intersects_and_contains(self, path):
        """Bounding-box intersection; a polyline contains nothing."""
        path.set_location((3.0, 6.0))
        assert path.intersects((2.5, 5.5, 4.0, 7.0))
        assert not path.intersects((10.0, 10.0, 11.0, 11.0))
        assert path.contains((2.5, 5.5)) is False

    def test_length(self, path):
        """Path length sums the segments."""
        path.move(1000)
        path.move(2000)
        assert path.length() == pytest.approx(3000, rel=1e-3)
