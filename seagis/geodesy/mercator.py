# -*- coding: utf-8 -*-
"""
Local Mercator Projection - Spherical Mercator centred on a moving origin.

Provides ``LocalMercator``, a spherical Mercator projection whose origin is
placed on an arbitrary geographic point. The scale factor is chosen so that
distances are true at the origin's latitude, which makes forward motion
along a constant bearing exact at the origin and approximately correct
nearby. Animats recompute the projection at every move instead of relying
on a single global projection whose distortion grows far from its origin.

Also provides a great-circle distance helper used for reporting path
lengths.

Coordinate Conventions
----------------------
- **Geographic coordinates:** ``(lon, lat)``. ``LocalMercator`` works in
  radians; ``haversine_distance`` takes degrees.
- **Projected coordinates:** ``(x, y)`` in metres, ``x`` toward east and
  ``y`` toward north, with the origin at ``(0, 0)``.

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
2026-10-14
"""

# Standard library
import math
from typing import Tuple, Union

# Third-party
import numpy as np

#: WGS84 semi-major axis, in metres.
EARTH_RADIUS = 6378137.0

ArrayLike = Union[float, np.ndarray]


class LocalMercator:
    """Spherical Mercator projection centred on ``(lon0, lat0)``.

    Parameters
    ----------
    lon0 : float
        Longitude of the projection origin, in radians.
    lat0 : float
        Latitude of the projection origin, in radians.
    radius : float, default=EARTH_RADIUS
        Sphere radius in metres.

    Examples
    --------
    >>> proj = LocalMercator(math.radians(55.0), math.radians(-21.0))
    >>> x, y = proj.forward(math.radians(55.1), math.radians(-21.0))
    >>> lon, lat = proj.inverse(x, y)
    """

    def __init__(self, lon0: float, lat0: float,
                 radius: float = EARTH_RADIUS) -> None:
        self.lon0 = float(lon0)
        self.lat0 = float(lat0)
        self.ak0 = math.cos(self.lat0) * radius
        self.northing = -self.ak0 * math.log(
            math.tan(math.pi / 4 + 0.5 * self.lat0)
        )

    def forward(self, lon: ArrayLike, lat: ArrayLike) -> Tuple[ArrayLike, ArrayLike]:
        """Project geographic radians to metres relative to the origin.

        Parameters
        ----------
        lon : float or np.ndarray
            Longitude(s) in radians.
        lat : float or np.ndarray
            Latitude(s) in radians.

        Returns
        -------
        Tuple[float or np.ndarray, float or np.ndarray]
            ``(x, y)`` in metres.
        """
        x = self.ak0 * (lon - self.lon0)
        y = self.ak0 * np.log(np.tan(math.pi / 4 + 0.5 * lat)) + self.northing
        return x, y

    def inverse(self, x: ArrayLike, y: ArrayLike) -> Tuple[ArrayLike, ArrayLike]:
        """Inverse project metres relative to the origin to geographic radians.

        Parameters
        ----------
        x : float or np.ndarray
            Easting(s) in metres.
        y : float or np.ndarray
            Northing(s) in metres.

        Returns
        -------
        Tuple[float or np.ndarray, float or np.ndarray]
            ``(lon, lat)`` in radians.
        """
        lon = x / self.ak0 + self.lon0
        lat = math.pi / 2 - 2 * np.arctan(np.exp((self.northing - y) / self.ak0))
        return lon, lat


def haversine_distance(
    lon1: float, lat1: float, lon2: float, lat2: float,
    radius: float = EARTH_RADIUS,
) -> float:
    """Great-circle distance between two points given in degrees.

    Parameters
    ----------
    lon1, lat1 : float
        First point, degrees.
    lon2, lat2 : float
        Second point, degrees.
    radius : float, default=EARTH_RADIUS
        Sphere radius in metres.

    Returns
    -------
    float
        Distance in metres.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = phi2 - phi1
    dlmb = math.radians(lon2 - lon1)
    a = (math.sin(dphi / 2) ** 2
         + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2)
    return 2 * radius * math.asin(min(1.0, math.sqrt(a)))
