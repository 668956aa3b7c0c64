# -*- coding: utf-8 -*-
"""
Geodetic Trajectory - Growing polyline of positions followed by a mobile agent.

Provides ``GeodeticTrajectory``, the path of an agent (typically a tuna
animat) over the WGS84 ellipsoid. The ellipsoid is approximated locally by
a spherical Mercator projection centred on the current position, which is
recomputed on every move or query. The trajectory supports forward motion
by distance along the current bearing, motion toward a target point, and
projection of perception shapes expressed in metres back to geographic
coordinates.

Positions are stored as 32-bit radians to keep long simulations small in
memory; all projection arithmetic is performed in double precision.

Coordinate Conventions
----------------------
- **Public API:** ``(lon, lat)`` in degrees.
- **Storage:** ``(lon, lat)`` in radians, ``float32``.
- **Bearing:** arithmetic convention in radians (0 = east, pi/2 = north).
  ``get_direction`` reports the geographic heading in degrees clockwise
  from true north.

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
2026-10-05

Modified
--------
2026-10-16
"""

# Standard library
import math
from typing import Iterator, Optional, Sequence, Tuple, Union

# Third-party
import numpy as np
from shapely.geometry import LineString, box
from shapely.geometry.base import BaseGeometry

# SEAGIS internal
from seagis.geodesy.mercator import EARTH_RADIUS, LocalMercator, haversine_distance
from seagis.vocabulary import SegmentType

Point = Tuple[float, float]
Rectangle = Union[BaseGeometry, Sequence[float]]

_INITIAL_CAPACITY = 4
_MAX_GROWTH = 512


def _rectangle_bounds(shape: Rectangle) -> Tuple[float, float, float, float]:
    """Return ``(minx, miny, maxx, maxy)`` of a shapely geometry or 4-sequence."""
    if isinstance(shape, BaseGeometry):
        return tuple(float(v) for v in shape.bounds)
    xmin, ymin, xmax, ymax = (float(v) for v in shape)
    return xmin, ymin, xmax, ymax


class GeodeticTrajectory:
    """
    Append-only path of geographic positions with a current bearing.

    The current position is always the last appended point. The point list
    is never truncated: every call to ``set_location``, ``move`` or
    ``move_toward`` appends one point.

    Parameters
    ----------
    position : Tuple[float, float], optional
        Initial ``(lon, lat)`` in degrees. When omitted the trajectory has
        no position until ``set_location`` is called.
    radius : float, default=EARTH_RADIUS
        Earth radius in metres used by the local projections.

    Examples
    --------
    >>> path = GeodeticTrajectory((55.5, -21.0))
    >>> path.rotate(90)              # face east
    >>> path.move(10_000)            # 10 km east
    >>> path.move_toward(50_000, (56.0, -21.2))
    False
    >>> path.get_point_count()
    3
    """

    def __init__(self, position: Optional[Point] = None,
                 radius: float = EARTH_RADIUS) -> None:
        self._points = np.zeros((_INITIAL_CAPACITY, 2), dtype=np.float32)
        self._count = 0
        self._direction = math.pi / 2
        self._radius = radius
        self._xmin = math.inf
        self._ymin = math.inf
        self._xmax = -math.inf
        self._ymax = -math.inf
        if position is not None:
            self.set_location(position)

    # ------------------------------------------------------------------
    # Position and direction
    # ------------------------------------------------------------------

    def _append(self, x: float, y: float) -> None:
        """Append ``(x, y)`` in radians and extend the bounding box."""
        if self._count >= len(self._points):
            n = len(self._points)
            grown = np.zeros((n + min(n, _MAX_GROWTH), 2), dtype=np.float32)
            grown[:n] = self._points
            self._points = grown
        self._points[self._count] = (x, y)
        x = float(self._points[self._count, 0])
        y = float(self._points[self._count, 1])
        self._count += 1
        if x < self._xmin:
            self._xmin = x
        if x > self._xmax:
            self._xmax = x
        if y < self._ymin:
            self._ymin = y
        if y > self._ymax:
            self._ymax = y

    def set_location(self, position: Point) -> None:
        """Append a new position given in degrees.

        The bearing is left unchanged.

        Parameters
        ----------
        position : Tuple[float, float]
            ``(lon, lat)`` in degrees.
        """
        lon, lat = position
        self._append(math.radians(lon), math.radians(lat))

    def get_location(self) -> Optional[Point]:
        """Current position in degrees, or None if no position was set.

        Returns
        -------
        Optional[Tuple[float, float]]
            ``(lon, lat)`` of the last appended point.
        """
        if self._count == 0:
            return None
        return self.get_point(self._count - 1)

    def get_point(self, index: int) -> Point:
        """Position number ``index`` along the path, in degrees.

        Raises
        ------
        IndexError
            If ``index`` is outside ``[0, get_point_count())``.
        """
        if index < 0 or index >= self._count:
            raise IndexError(f"Point index {index} out of range [0, {self._count})")
        x, y = self._points[index]
        return (math.degrees(float(x)), math.degrees(float(y)))

    def get_point_count(self) -> int:
        """Number of positions recorded so far."""
        return self._count

    def get_direction(self) -> float:
        """Heading in degrees clockwise from true north."""
        return 90 - math.degrees(self._direction)

    def rotate(self, angle: float) -> None:
        """Turn by ``angle`` degrees, clockwise positive."""
        self._direction -= math.radians(angle)

    def _projection(self) -> Tuple[LocalMercator, float, float]:
        x = float(self._points[self._count - 1, 0])
        y = float(self._points[self._count - 1, 1])
        return LocalMercator(x, y, self._radius), x, y

    # ------------------------------------------------------------------
    # Motion
    # ------------------------------------------------------------------

    def move(self, distance: float) -> None:
        """Advance ``distance`` metres along the current bearing.

        Uses a Mercator projection centred on the current position. Does
        nothing if the trajectory has no position yet.

        Parameters
        ----------
        distance : float
            Distance in metres. Negative values move backward.
        """
        if self._count == 0:
            return
        proj, _, _ = self._projection()
        x = distance * math.cos(self._direction)
        y = distance * math.sin(self._direction)
        lon, lat = proj.inverse(x, y)
        self._append(float(lon), float(lat))

    def move_toward(self, distance: float, point: Point) -> bool:
        """Advance ``distance`` metres in the direction of ``point``.

        The bearing is updated to point toward the target before the
        overshoot test, whether or not the target is reached. If the
        distance is long enough, the new position is exactly the target.

        Parameters
        ----------
        distance : float
            Distance in metres. A negative value makes the agent flee.
        point : Tuple[float, float]
            Target ``(lon, lat)`` in degrees. A target identical to the
            current position is always reported as reached.

        Returns
        -------
        bool
            True if the target was reached, False if the agent moved
            toward it without reaching it (or has no position).
        """
        if self._count == 0:
            return False
        proj, _, _ = self._projection()
        px, py = proj.forward(math.radians(point[0]), math.radians(point[1]))
        px = float(px)
        py = float(py)

        new_direction = math.atan2(py, px)
        if not math.isnan(new_direction):
            self._direction = new_direction

        planar = math.hypot(px, py)
        fc = distance / planar if planar != 0 else math.inf
        if math.isinf(fc) or fc >= 1:
            self.set_location(point)
            return True
        lon, lat = proj.inverse(px * fc, py * fc)
        self._append(float(lon), float(lat))
        return False

    def relative_to_geographic(self, shape: Rectangle) -> Optional[BaseGeometry]:
        """Convert a rectangle in metres around the current position to degrees.

        Parameters
        ----------
        shape : shapely geometry or (minx, miny, maxx, maxy)
            Rectangle in metres relative to the current position, which is
            the origin ``(0, 0)`` of the local plane. Only the bounds of
            the geometry are used.

        Returns
        -------
        Optional[shapely.geometry.Polygon]
            Axis-aligned box in degrees of longitude and latitude, or None
            if the trajectory has no position.
        """
        if self._count == 0:
            return None
        xmin, ymin, xmax, ymax = _rectangle_bounds(shape)
        proj, _, _ = self._projection()
        xs = np.array([xmin, xmax, xmax, xmin], dtype=np.float64)
        ys = np.array([ymin, ymin, ymax, ymax], dtype=np.float64)
        lons, lats = proj.inverse(xs, ys)
        lons = np.degrees(lons)
        lats = np.degrees(lats)
        return box(
            float(min(lons[0], lons[3])), float(min(lats[0], lats[1])),
            float(max(lons[1], lons[2])), float(max(lats[2], lats[3])),
        )

    # ------------------------------------------------------------------
    # Shape contract
    # ------------------------------------------------------------------

    def path_iterator(self) -> Iterator[Tuple[SegmentType, float, float]]:
        """Iterate over the path as ``(segment_type, lon, lat)`` in degrees.

        The first point is a ``MOVETO`` segment, all others are ``LINETO``.
        """
        for i in range(self._count):
            lon, lat = self.get_point(i)
            yield (SegmentType.MOVETO if i == 0 else SegmentType.LINETO, lon, lat)

    def as_linestring(self) -> Optional[LineString]:
        """Path as a shapely LineString in degrees, or None with fewer than 2 points."""
        if self._count < 2:
            return None
        coords = np.degrees(self._points[:self._count].astype(np.float64))
        return LineString(coords)

    def get_bounds(self) -> Optional[Tuple[int, int, int, int]]:
        """Integer bounding box enclosing the path.

        Returns
        -------
        Optional[Tuple[int, int, int, int]]
            ``(xmin, ymin, xmax, ymax)`` in whole degrees (floored minima,
            ceiled maxima), or None if empty.
        """
        if self._count == 0:
            return None
        return (
            int(math.floor(math.degrees(self._xmin))),
            int(math.floor(math.degrees(self._ymin))),
            int(math.ceil(math.degrees(self._xmax))),
            int(math.ceil(math.degrees(self._ymax))),
        )

    def get_bounds2d(self) -> Optional[Tuple[float, float, float, float]]:
        """Floating bounding box ``(xmin, ymin, xmax, ymax)`` in degrees, or None."""
        if self._count == 0:
            return None
        return (
            math.degrees(self._xmin), math.degrees(self._ymin),
            math.degrees(self._xmax), math.degrees(self._ymax),
        )

    def intersects(self, rectangle: Rectangle) -> bool:
        """Whether the path's bounding box intersects ``rectangle`` (degrees)."""
        bounds = self.get_bounds2d()
        if bounds is None:
            return False
        return box(*bounds).intersects(box(*_rectangle_bounds(rectangle)))

    def contains(self, *args) -> bool:
        """A polyline has no interior: always False."""
        return False

    def length(self) -> float:
        """Great-circle length of the path in metres."""
        total = 0.0
        previous = None
        for i in range(self._count):
            current = self.get_point(i)
            if previous is not None:
                total += haversine_distance(*previous, *current, radius=self._radius)
            previous = current
        return total

    def __len__(self) -> int:
        return self._count

    def __repr__(self) -> str:
        location = self.get_location()
        if location is None:
            return f"GeodeticTrajectory[{self._count} points]"
        return (f"GeodeticTrajectory[{self._count} points; "
                f"last={location[0]:.5f}, {location[1]:.5f}]")
