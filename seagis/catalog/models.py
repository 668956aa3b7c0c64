# -*- coding: utf-8 -*-
"""
Catalog Models - Immutable entries describing series, parameters and samples.

Provides the typed records exchanged between the catalog, the coverage
layer and the environment filler: raster series, raster operations,
relative positions, environmental parameters (optionally derived from a
linear model of descriptors), and fishery samples.

Every entry is a frozen dataclass whose equality and hash depend only on
its catalog identifier, so two entries loaded separately for the same
catalog row compare equal and can be used interchangeably as dict keys.

Time Conventions
----------------
Times are ``datetime`` objects. Naive datetimes are interpreted as UTC.
Relative position offsets are ``timedelta`` objects added to the sample
time (negative values look into the past).

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
2026-10-15
"""

# Standard library
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

# Third-party
import numpy as np

# SEAGIS internal
from seagis.exceptions import ValidationError
from seagis.vocabulary import Distribution

Point = Tuple[float, float]

#: Name reserved for the identity parameter.
IDENTITY_NAME = "Identity"

_DAY = 86400.0


def as_utc(time: datetime) -> datetime:
    """Return ``time`` as an aware UTC datetime (naive means UTC)."""
    if time.tzinfo is None:
        return time.replace(tzinfo=timezone.utc)
    return time.astimezone(timezone.utc)


def as_seconds(time: datetime) -> float:
    """POSIX timestamp of ``time``, treating naive datetimes as UTC."""
    return as_utc(time).timestamp()


@dataclass(frozen=True)
class SeriesEntry:
    """A time-ordered collection of raster images from one pipeline.

    Parameters
    ----------
    id : int
        Catalog identifier.
    name : str
        Series name (e.g. ``'SST (synthesis)'``).
    period : float
        Nominal time interval between images, in days. NaN if unknown.
    remarks : str, optional
        Free text description.
    """

    id: int
    name: str = field(compare=False)
    period: float = field(default=math.nan, compare=False)
    remarks: Optional[str] = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class OperationEntry:
    """A named raster transform applied before evaluation.

    Parameters
    ----------
    id : int
        Catalog identifier.
    name : str
        Operation name.
    column_prefix : str
        Prefix prepended to parameter names to form environment columns
        (e.g. ``'∇'`` for a gradient).
    processor_operation : str, optional
        Name of the raster operation to chain after ``NodataFilter``, or
        None for the plain filter.
    parameters : Mapping[str, Any]
        Named arguments of the raster operation.
    """

    id: int
    name: str = field(compare=False)
    column_prefix: str = field(default="", compare=False)
    processor_operation: Optional[str] = field(default=None, compare=False)
    parameters: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def get_parameter(self, name: str, default: Any = None) -> Any:
        """Value of the named operation parameter, or ``default``."""
        return self.parameters.get(name, default)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class RelativePositionEntry:
    """Spatio-temporal offset relative to a sample's own position and time.

    Parameters
    ----------
    id : int
        Catalog identifier.
    name : str
        Position name, used as a suffix of environment columns.
    time_offset : timedelta
        Offset added to the sample time.
    dx : float
        Longitude offset in degrees.
    dy : float
        Latitude offset in degrees.
    """

    id: int
    name: str = field(compare=False)
    time_offset: timedelta = field(default=timedelta(0), compare=False)
    dx: float = field(default=0.0, compare=False)
    dy: float = field(default=0.0, compare=False)

    def apply_offset(self, point: Point, time: datetime) -> Tuple[Point, datetime]:
        """Shift a sample position and time to where the value is read.

        Parameters
        ----------
        point : Tuple[float, float]
            ``(lon, lat)`` in degrees.
        time : datetime
            Sample time.

        Returns
        -------
        Tuple[Tuple[float, float], datetime]
            Offset coordinate and time.
        """
        return (point[0] + self.dx, point[1] + self.dy), time + self.time_offset

    def reverse_offset(self, point: Point, time: datetime) -> Tuple[Point, datetime]:
        """Inverse of ``apply_offset``."""
        return (point[0] - self.dx, point[1] - self.dy), time - self.time_offset

    @property
    def typical_time_offset(self) -> timedelta:
        """Nominal time offset, used for scheduling only."""
        return self.time_offset

    @property
    def offset_days(self) -> float:
        """Nominal time offset in days, used in coverage cache keys."""
        return self.time_offset.total_seconds() / _DAY

    def get_coordinate(self, sample: "SampleEntry") -> Point:
        """Coordinate at which the sample's environment is read."""
        return self.apply_offset(sample.coordinate, sample.time)[0]

    def get_time(self, sample: "SampleEntry") -> datetime:
        """Time at which the sample's environment is read."""
        return sample.time + self.time_offset

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ParameterEntry:
    """An environmental quantity, read from rasters or derived.

    A parameter without a linear model is read from ``band`` of its
    series, trying the primary series first and then each fallback in
    order. A parameter with a linear model is computed from its terms and
    is never read directly.

    Parameters
    ----------
    id : int
        Catalog identifier.
    name : str
        Parameter name (e.g. ``'SST'``).
    series : Tuple[SeriesEntry, ...]
        Primary series followed by fallback series.
    band : int
        Zero-based band index in the series rasters.
    linear_model : Tuple[LinearModelTerm, ...], optional
        Terms of the linear model if the parameter is derived.

    Raises
    ------
    ValidationError
        If ``band`` is negative, or if a non-identity parameter has
        neither a series nor a linear model.
    """

    id: int
    name: str = field(compare=False)
    series: Tuple[SeriesEntry, ...] = field(default=(), compare=False)
    band: int = field(default=0, compare=False)
    linear_model: Optional[Tuple["LinearModelTerm", ...]] = field(
        default=None, compare=False,
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, 'series', tuple(self.series))
        if self.linear_model is not None:
            object.__setattr__(self, 'linear_model', tuple(self.linear_model))
        if self.band < 0:
            raise ValidationError(
                f"Parameter '{self.name}': band must be >= 0, got {self.band}"
            )
        if not self.series and self.linear_model is None \
                and self.name != IDENTITY_NAME:
            raise ValidationError(
                f"Parameter '{self.name}' has neither a series nor a linear model"
            )

    @property
    def is_identity(self) -> bool:
        """True for the identity parameter, which always evaluates to 1."""
        return (self.name == IDENTITY_NAME and not self.series
                and self.linear_model is None)

    def get_series(self, index: int = 0) -> Optional[SeriesEntry]:
        """Series number ``index`` (0 = primary), or None if out of range."""
        if 0 <= index < len(self.series):
            return self.series[index]
        return None

    def __str__(self) -> str:
        return self.name


#: The identity parameter. Descriptors referencing it contribute 1.
IDENTITY = ParameterEntry(id=0, name=IDENTITY_NAME)


@dataclass(frozen=True)
class DescriptorEntry:
    """Independent variable of a linear model.

    Combines *what* to read (a parameter), *where and when* relative to
    the sample (a relative position), *how* (an operation), and the
    transform applied before combination (a distribution).

    Parameters
    ----------
    id : int
        Catalog identifier.
    name : str
        Descriptor name.
    parameter : ParameterEntry
        Parameter to read.
    position : RelativePositionEntry, optional
        Offset relative to the evaluated point. None means no offset.
    operation : OperationEntry, optional
        Raster operation. None means the plain ``NodataFilter``.
    distribution : Distribution
        Normalization applied to raw values.
    scale, offset : float
        Coefficients of the scaled distributions.
    """

    id: int
    name: str = field(compare=False)
    parameter: ParameterEntry = field(default=IDENTITY, compare=False)
    position: Optional[RelativePositionEntry] = field(default=None, compare=False)
    operation: Optional[OperationEntry] = field(default=None, compare=False)
    distribution: Distribution = field(default=Distribution.NORMAL, compare=False)
    scale: float = field(default=1.0, compare=False)
    offset: float = field(default=0.0, compare=False)

    @property
    def is_identity(self) -> bool:
        """True if this descriptor always contributes the factor 1."""
        return self.parameter.is_identity

    def normalize(self, value: float) -> float:
        """Transform a raw value to make its distribution closer to normal.

        Parameters
        ----------
        value : float
            Raw band value.

        Returns
        -------
        float
            Normalized value. The logarithm of a negative number is NaN
            and the logarithm of zero is ``-inf``.
        """
        if self.distribution is Distribution.NORMAL:
            return value
        scaled = self.scale * value + self.offset
        if self.distribution is Distribution.SCALED:
            return scaled
        with np.errstate(divide='ignore', invalid='ignore'):
            return float(np.log(scaled))

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class LinearModelTerm:
    """One term ``coefficient * d1 * d2 * ...`` of a linear model.

    A term without descriptors, or whose descriptors are all identities,
    is the constant ``coefficient``.
    """

    coefficient: float
    descriptors: Tuple[DescriptorEntry, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, 'descriptors', tuple(self.descriptors))

    @property
    def is_identity(self) -> bool:
        """True if the term reduces to its coefficient."""
        return all(d.is_identity for d in self.descriptors)


@dataclass(frozen=True)
class SampleEntry:
    """A fishery sample: position, time and catch amounts per species.

    Parameters
    ----------
    id : int
        Catalog identifier.
    coordinate : Tuple[float, float]
        ``(lon, lat)`` in degrees.
    time : datetime
        Time of the catch.
    amounts : Mapping[str, float]
        Catch amount per species code.
    """

    id: int
    coordinate: Point = field(compare=False)
    time: datetime = field(compare=False)
    amounts: Mapping[str, float] = field(default_factory=dict, compare=False)

    @property
    def value(self) -> float:
        """Total catch over all species."""
        return float(sum(self.amounts.values()))

    @property
    def dominant_species(self) -> Optional[str]:
        """Species with the largest catch, or None without catch."""
        if not self.amounts:
            return None
        return max(self.amounts, key=self.amounts.get)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict view, used for logging and export."""
        return {
            'id': self.id,
            'lon': self.coordinate[0],
            'lat': self.coordinate[1],
            'time': self.time.isoformat(),
            'amounts': dict(self.amounts),
        }
