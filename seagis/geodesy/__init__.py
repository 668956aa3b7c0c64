# -*- coding: utf-8 -*-
"""
Geodesy Module - Local Mercator projection and agent trajectories.

Provides the spherical Mercator projection used for dead-reckoning over the
WGS84 ellipsoid and the append-only trajectory followed by mobile agents.

Key Classes
-----------
- LocalMercator: Spherical Mercator centred on an arbitrary origin
- GeodeticTrajectory: Growing polyline with bearing-based motion

Usage
-----
    >>> from seagis.geodesy import GeodeticTrajectory
    >>> path = GeodeticTrajectory((55.5, -21.0))
    >>> path.move(20_000)
    >>> reached = path.move_toward(30_000, (55.6, -20.7))

Dependencies
------------
numpy
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
2026-10-05

Modified
--------
2026-10-05
"""

from seagis.geodesy.mercator import EARTH_RADIUS, LocalMercator, haversine_distance
from seagis.geodesy.trajectory import GeodeticTrajectory

__all__ = [
    'EARTH_RADIUS',
    'LocalMercator',
    'haversine_distance',
    'GeodeticTrajectory',
]
