# -*- coding: utf-8 -*-
"""
Coverage Base Classes - Abstract 3D (longitude, latitude, time) coverages.

Defines ``Coverage3D``, a function from a geographic point and a time to
one value per band, and ``Envelope``, its spatio-temporal extent.

Coverages are evaluated either at an explicit ``(point, time)`` or for a
fishery sample seen through a relative position. The second form is a
capability every coverage has: the default implementation applies the
position offset and evaluates at the resulting coordinate, while
subclasses backed by discrete images override it to snap the sample time
onto their image dates.

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
2026-10-07

Modified
--------
2026-10-15
"""

# Standard library
import copy
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Tuple

# Third-party
import numpy as np

# SEAGIS internal
from seagis.catalog.models import RelativePositionEntry, SampleEntry

Point = Tuple[float, float]

#: Geographic coordinate system used by default, longitude first.
DEFAULT_CRS = "EPSG:4326"


@dataclass(frozen=True)
class Envelope:
    """Spatio-temporal extent of a coverage.

    Longitudes and latitudes are in degrees. ``tmin``/``tmax`` may be None
    for coverages without a time limit.
    """

    xmin: float
    xmax: float
    ymin: float
    ymax: float
    tmin: Optional[datetime] = None
    tmax: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        """True if the spatial or temporal extent is empty."""
        if self.xmin > self.xmax or self.ymin > self.ymax:
            return True
        return (self.tmin is not None and self.tmax is not None
                and self.tmin > self.tmax)

    def contains(self, point: Point, time: Optional[datetime] = None) -> bool:
        """Whether ``point`` (and ``time`` if given) lies inside."""
        if not (self.xmin <= point[0] <= self.xmax
                and self.ymin <= point[1] <= self.ymax):
            return False
        if time is None:
            return True
        if self.tmin is not None and time < self.tmin:
            return False
        return self.tmax is None or time <= self.tmax

    def intersect(self, other: 'Envelope') -> 'Envelope':
        """Intersection of two envelopes. May be empty."""
        return Envelope(
            xmin=max(self.xmin, other.xmin),
            xmax=min(self.xmax, other.xmax),
            ymin=max(self.ymin, other.ymin),
            ymax=min(self.ymax, other.ymax),
            tmin=_pick(self.tmin, other.tmin, max),
            tmax=_pick(self.tmax, other.tmax, min),
        )


def _pick(a, b, func):
    if a is None:
        return b
    if b is None:
        return a
    return func(a, b)


class Coverage3D(ABC):
    """
    Abstract base class for spatio-temporal coverages.

    Subclasses implement ``evaluate``. ``clone`` gives a shallow copy
    sharing the underlying data ``source`` but owning a fresh last-read
    cache and lock, so clones can be evaluated independently.

    Parameters
    ----------
    name : str
        Coverage name, reported in outside-coverage errors.
    crs : str, default='EPSG:4326'
        Coordinate reference system of evaluated points.

    Attributes
    ----------
    source : Any
        Underlying data shared between clones.
    """

    def __init__(self, name: str, crs: str = DEFAULT_CRS) -> None:
        self.name = name
        self.crs = crs
        self.source: Any = None
        self._lock = threading.Lock()
        self._reset_cache()

    def _reset_cache(self) -> None:
        """Discard the last-read cache. The default has none."""

    @property
    def num_bands(self) -> int:
        """Number of values returned by ``evaluate``."""
        return 1

    @abstractmethod
    def evaluate(self, point: Point, time: datetime) -> np.ndarray:
        """Band values at a geographic point and time.

        Parameters
        ----------
        point : Tuple[float, float]
            ``(lon, lat)`` in degrees.
        time : datetime
            Evaluation time.

        Returns
        -------
        np.ndarray
            One ``float64`` value per band. NaN marks missing data inside
            the coverage (e.g. cloud).

        Raises
        ------
        PointOutsideCoverageError
            If the point or time is outside the coverage.
        CannotEvaluateError
            For other evaluation faults.
        """

    def evaluate_sample(
        self,
        sample: SampleEntry,
        position: Optional[RelativePositionEntry] = None,
    ) -> np.ndarray:
        """Band values for a sample seen through a relative position.

        The default applies the position offset to the sample and
        evaluates at the resulting coordinate and time.
        """
        point, time = sample.coordinate, sample.time
        if position is not None:
            point, time = position.apply_offset(point, time)
        return self.evaluate(point, time)

    def snap(self, time: datetime) -> datetime:
        """Nearest time for which data exist. The default returns ``time``."""
        return time

    def clone(self) -> 'Coverage3D':
        """Shallow copy sharing ``source`` with a fresh cache and lock."""
        other = copy.copy(self)
        other._lock = threading.Lock()
        other._reset_cache()
        return other

    def get_envelope(self) -> Envelope:
        """Extent of the coverage. The default is the whole world."""
        return Envelope(-180.0, 180.0, -90.0, 90.0)

    def value_range(self, band: int = 0) -> Tuple[float, float]:
        """``(min, max)`` of a band. The default is unbounded."""
        return (-np.inf, np.inf)

    def dispose(self) -> None:
        """Release resources held by this coverage."""
        self._reset_cache()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"
