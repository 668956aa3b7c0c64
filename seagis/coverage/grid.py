# -*- coding: utf-8 -*-
"""
Gridded Coverage - Time series of regular longitude/latitude rasters.

Provides ``GridSeries``, an in-memory stack of images sharing one regular
grid, and ``GridCoverage3D``, the coverage evaluating it. Evaluation
interpolates bilinearly in space within each image and linearly in time
between the two images bracketing the requested date. The processed
bracket is kept in a small last-read cache, which makes monotonically
increasing time queries cheap.

Data Layout
-----------
``data`` has shape ``(times, rows, cols)`` or ``(times, rows, cols,
bands)``. ``lats`` index rows and ``lons`` index columns. Latitudes may be
given in descending order (north-up images); they are stored ascending.

Dependencies
------------
scipy

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
2026-10-08

Modified
--------
2026-10-16
"""

# Standard library
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

# Third-party
import numpy as np
from scipy.interpolate import RegularGridInterpolator

# SEAGIS internal
from seagis.catalog.models import (
    RelativePositionEntry,
    SampleEntry,
    as_seconds,
)
from seagis.coverage.base import DEFAULT_CRS, Coverage3D, Envelope
from seagis.coverage.operations import NODATA_FILTER, RasterOperation, build_operation_chain
from seagis.exceptions import (
    CannotEvaluateError,
    CannotReprojectError,
    PointOutsideCoverageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

_DAY = 86400.0


def _to_seconds(times) -> np.ndarray:
    """Convert datetimes or ``datetime64`` values to POSIX seconds."""
    arr = np.asarray(times)
    if np.issubdtype(arr.dtype, np.datetime64):
        return arr.astype('datetime64[s]').astype(np.int64).astype(np.float64)
    if arr.dtype == object:
        return np.array([as_seconds(t) for t in arr], dtype=np.float64)
    return arr.astype(np.float64)


def _to_datetime(seconds: float) -> datetime:
    return datetime.fromtimestamp(float(seconds), tz=timezone.utc)


@dataclass
class GridSeries:
    """A stack of rasters on a regular longitude/latitude grid.

    Parameters
    ----------
    name : str
        Series name.
    lons : np.ndarray
        Column longitudes in degrees, strictly increasing.
    lats : np.ndarray
        Row latitudes in degrees, strictly monotonic.
    times : sequence of datetime, ``datetime64`` or POSIX seconds
        Image dates, strictly increasing.
    data : np.ndarray
        ``(times, rows, cols)`` or ``(times, rows, cols, bands)``.
    fill_value : float, optional
        Sentinel for missing pixels.
    crs : str, default='EPSG:4326'
        Coordinate reference system of ``lons``/``lats``.
    period : float, optional
        Nominal days between images. Defaults to the median spacing, or
        one day for a single image.

    Raises
    ------
    ValidationError
        If shapes disagree or axes are not monotonic.
    """

    name: str
    lons: np.ndarray
    lats: np.ndarray
    times: np.ndarray
    data: np.ndarray
    fill_value: Optional[float] = None
    crs: str = DEFAULT_CRS
    period: Optional[float] = None

    def __post_init__(self) -> None:
        self.lons = np.asarray(self.lons, dtype=np.float64)
        self.lats = np.asarray(self.lats, dtype=np.float64)
        self.times = _to_seconds(self.times)
        self.data = np.asarray(self.data)
        if self.data.ndim not in (3, 4):
            raise ValidationError(
                f"Series '{self.name}': data must be 3D or 4D, got {self.data.ndim}D"
            )
        expected = (len(self.times), len(self.lats), len(self.lons))
        if self.data.shape[:3] != expected:
            raise ValidationError(
                f"Series '{self.name}': data shape {self.data.shape[:3]} "
                f"does not match (times, lats, lons) = {expected}"
            )
        if len(self.times) == 0:
            raise ValidationError(f"Series '{self.name}' has no image")
        if len(self.lons) < 2 or len(self.lats) < 2:
            raise ValidationError(
                f"Series '{self.name}' needs at least 2 rows and 2 columns"
            )
        if np.any(np.diff(self.lons) <= 0):
            raise ValidationError(f"Series '{self.name}': lons must increase")
        if np.any(np.diff(self.times) <= 0):
            raise ValidationError(f"Series '{self.name}': times must increase")
        dlat = np.diff(self.lats)
        if np.all(dlat < 0):
            self.lats = self.lats[::-1].copy()
            self.data = self.data[:, ::-1].copy()
        elif not np.all(dlat > 0):
            raise ValidationError(f"Series '{self.name}': lats must be monotonic")
        if self.period is None:
            if len(self.times) > 1:
                self.period = float(np.median(np.diff(self.times))) / _DAY
            else:
                self.period = 1.0

    @property
    def num_bands(self) -> int:
        return 1 if self.data.ndim == 3 else self.data.shape[3]

    @classmethod
    def from_npz(cls, path: Union[str, Path], name: Optional[str] = None) -> 'GridSeries':
        """Load a series saved with ``to_npz``.

        The archive holds ``lons``, ``lats``, ``times`` (POSIX seconds or
        ``datetime64``), ``data`` and optionally ``fill_value`` and
        ``crs``. The series name defaults to the file stem.
        """
        path = Path(path)
        with np.load(path, allow_pickle=False) as npz:
            fill = npz['fill_value'].item() if 'fill_value' in npz else None
            crs = str(npz['crs']) if 'crs' in npz else DEFAULT_CRS
            return cls(
                name=name or path.stem,
                lons=npz['lons'],
                lats=npz['lats'],
                times=npz['times'],
                data=npz['data'],
                fill_value=fill,
                crs=crs,
            )

    def to_npz(self, path: Union[str, Path]) -> None:
        """Save the series in the layout read by ``from_npz``."""
        arrays = {
            'lons': self.lons,
            'lats': self.lats,
            'times': self.times,
            'data': self.data,
            'crs': np.array(self.crs),
        }
        if self.fill_value is not None:
            arrays['fill_value'] = np.array(self.fill_value)
        np.savez_compressed(path, **arrays)


class GridCoverage3D(Coverage3D):
    """
    Coverage evaluating a ``GridSeries`` through a raster operation chain.

    Parameters
    ----------
    series : GridSeries
        Data source, shared between clones.
    operation : str or RasterOperation, default='NodataFilter'
        Processor operation applied to every image read.
    parameters : dict, optional
        Arguments of the processor operation when given by name.
    crs : str, default='EPSG:4326'
        Requested coordinate system. Must equal the series CRS.
    interpolation_allowed : bool, default=True
        If False, the image nearest in time is used instead of a linear
        interpolation between the bracketing images.

    Raises
    ------
    CannotReprojectError
        If ``crs`` differs from the series CRS.
    """

    def __init__(
        self,
        series: GridSeries,
        operation: Union[str, RasterOperation] = NODATA_FILTER,
        parameters: Optional[Dict] = None,
        crs: str = DEFAULT_CRS,
        interpolation_allowed: bool = True,
    ) -> None:
        if crs != series.crs:
            raise CannotReprojectError(
                f"Series '{series.name}' is stored in {series.crs}, "
                f"cannot evaluate in {crs}"
            )
        if isinstance(operation, str):
            self.operation_name = operation
            operation = build_operation_chain(operation, parameters)
        else:
            self.operation_name = repr(operation)
        self.operation = operation
        self.interpolation_allowed = interpolation_allowed
        super().__init__(series.name, crs)
        self.source = series
        self._range: Optional[Tuple[np.ndarray, np.ndarray]] = None

    def _reset_cache(self) -> None:
        self._slices: Dict[int, RegularGridInterpolator] = {}

    @property
    def num_bands(self) -> int:
        return self.source.num_bands

    @property
    def times(self) -> np.ndarray:
        """Image dates as POSIX seconds."""
        return self.source.times

    # ------------------------------------------------------------------
    # Slice access
    # ------------------------------------------------------------------

    def _interpolator(self, index: int) -> RegularGridInterpolator:
        """Interpolator over processed image ``index``, from the bracket cache."""
        with self._lock:
            interp = self._slices.get(index)
            if interp is not None:
                return interp
            series = self.source
            image = self.operation.apply(series.data[index], series.fill_value)
            interp = RegularGridInterpolator(
                (series.lats, series.lons), image,
                method='linear', bounds_error=False, fill_value=np.nan,
            )
            if len(self._slices) >= 2:
                self._slices.pop(next(iter(self._slices)))
            self._slices[index] = interp
            logger.debug("%s: loaded image %d", self.name, index)
            return interp

    def _read(self, index: int, point: Point) -> np.ndarray:
        values = self._interpolator(index)([(point[1], point[0])])
        return np.asarray(values, dtype=np.float64).reshape(self.num_bands)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _outside(self, point: Point, time: datetime, reason: str) -> PointOutsideCoverageError:
        return PointOutsideCoverageError(
            f"{reason} ({point[0]:.4f}, {point[1]:.4f}) at {time} "
            f"is outside coverage '{self.name}'",
            point=point, time=time, coverage=self.name,
        )

    def nearest_index(self, time: datetime) -> int:
        """Index of the image nearest in time to ``time``."""
        times = self.source.times
        t = as_seconds(time)
        i = int(np.searchsorted(times, t))
        if i == 0:
            return 0
        if i >= len(times):
            return len(times) - 1
        return i if times[i] - t < t - times[i - 1] else i - 1

    def snap(self, time: datetime) -> datetime:
        """Date of the image nearest in time to ``time``."""
        return _to_datetime(self.source.times[self.nearest_index(time)])

    def evaluate(self, point: Point, time: datetime) -> np.ndarray:
        series = self.source
        lon, lat = point
        if not (series.lons[0] <= lon <= series.lons[-1]
                and series.lats[0] <= lat <= series.lats[-1]):
            raise self._outside(point, time, "Point")
        times = series.times
        half = 0.5 * series.period * _DAY
        t = as_seconds(time)
        if t < times[0] - half or t > times[-1] + half:
            raise self._outside(point, time, "Date of point")

        try:
            if not self.interpolation_allowed or len(times) == 1 \
                    or t <= times[0] or t >= times[-1]:
                return self._read(self.nearest_index(time), point)
            upper = int(np.searchsorted(times, t))
            lower = upper - 1
            weight = (t - times[lower]) / (times[upper] - times[lower])
            if weight == 0:
                return self._read(lower, point)
            if weight == 1:
                return self._read(upper, point)
            v0 = self._read(lower, point)
            v1 = self._read(upper, point)
            return (1.0 - weight) * v0 + weight * v1
        except (ValueError, IndexError) as e:
            raise CannotEvaluateError(
                f"Cannot evaluate '{self.name}' at {point} {time}: {e}"
            ) from e

    def evaluate_sample(
        self,
        sample: SampleEntry,
        position: Optional[RelativePositionEntry] = None,
    ) -> np.ndarray:
        """Band values for a sample, aligned on the image dates.

        The offset time is snapped to the nearest image, then shifted by
        the whole number of days (truncated toward zero) between that
        image and the offset time.
        """
        point, time = sample.coordinate, sample.time
        if position is not None:
            point, time = position.apply_offset(point, time)
        return self.evaluate(point, self.adjust(time))

    def adjust(self, time: datetime) -> datetime:
        """Snap ``time`` to an image date plus whole days."""
        image_time = as_seconds(self.snap(time))
        days = math.trunc((as_seconds(time) - image_time) / _DAY)
        adjusted = _to_datetime(image_time) + timedelta(days=days)
        if time.tzinfo is None:
            adjusted = adjusted.replace(tzinfo=None)
        return adjusted

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def get_envelope(self) -> Envelope:
        series = self.source
        half = timedelta(days=0.5 * series.period)
        return Envelope(
            xmin=float(series.lons[0]), xmax=float(series.lons[-1]),
            ymin=float(series.lats[0]), ymax=float(series.lats[-1]),
            tmin=_to_datetime(series.times[0]) - half,
            tmax=_to_datetime(series.times[-1]) + half,
        )

    def value_range(self, band: int = 0) -> Tuple[float, float]:
        """``(min, max)`` of a processed band over all images.

        Computed on first call and kept for the life of the coverage.
        """
        if self._range is None:
            series = self.source
            lows = np.full(series.num_bands, np.inf)
            highs = np.full(series.num_bands, -np.inf)
            for index in range(len(series.times)):
                image = self.operation.apply(series.data[index], series.fill_value)
                image = image.reshape(image.shape[0], image.shape[1], -1)
                for b in range(image.shape[2]):
                    values = image[..., b]
                    values = values[np.isfinite(values)]
                    if values.size:
                        lows[b] = min(lows[b], float(values.min()))
                        highs[b] = max(highs[b], float(values.max()))
            self._range = (lows, highs)
        lows, highs = self._range
        return float(lows[band]), float(highs[band])

    def __repr__(self) -> str:
        return (f"GridCoverage3D({self.name!r}, operation={self.operation_name!r}, "
                f"images={len(self.source.times)})")
