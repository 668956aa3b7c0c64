# -*- coding: utf-8 -*-
"""
Coverage Providers - Open coverages for a series and a raster operation.

Defines the ``CoverageProvider`` ABC consumed by the coverage cache and
``GridCoverageProvider``, which serves ``GridCoverage3D`` instances over a
set of in-memory or ``.npz`` gridded series.

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
2026-10-15
"""

# Standard library
import logging
import warnings
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

# SEAGIS internal
from seagis.catalog.models import SeriesEntry
from seagis.coverage.base import DEFAULT_CRS, Coverage3D
from seagis.coverage.grid import GridCoverage3D, GridSeries
from seagis.exceptions import CatalogError

logger = logging.getLogger(__name__)


class CoverageProvider(ABC):
    """Factory of coverages for ``(series, operation)`` pairs."""

    @abstractmethod
    def open(
        self,
        series: SeriesEntry,
        operation_name: str,
        parameters: Optional[Mapping[str, Any]] = None,
        crs: str = DEFAULT_CRS,
    ) -> Coverage3D:
        """Open a coverage over ``series`` with an operation applied.

        Parameters
        ----------
        series : SeriesEntry
            Series to read.
        operation_name : str
            Processor operation, e.g. ``'NodataFilter;GradientMagnitude'``.
        parameters : Mapping[str, Any], optional
            Arguments of the operation.
        crs : str, default='EPSG:4326'
            Coordinate system of evaluated points.

        Returns
        -------
        Coverage3D
            A new coverage.

        Raises
        ------
        CatalogError
            If the series is unknown to this provider.
        CannotReprojectError
            If the series cannot be evaluated in ``crs``.
        """


class GridCoverageProvider(CoverageProvider):
    """
    Provider of ``GridCoverage3D`` over named gridded series.

    Parameters
    ----------
    series : Mapping[str, GridSeries] or Iterable[GridSeries]
        Available series, keyed by series name.
    interpolation_allowed : bool, default=True
        Passed to every opened coverage.

    Attributes
    ----------
    open_count : int
        Number of coverages opened so far.
    """

    def __init__(
        self,
        series: Union[Mapping[str, GridSeries], Iterable[GridSeries]],
        interpolation_allowed: bool = True,
    ) -> None:
        if isinstance(series, Mapping):
            self._series: Dict[str, GridSeries] = dict(series)
        else:
            self._series = {s.name: s for s in series}
        self.interpolation_allowed = interpolation_allowed
        self.open_count = 0

    @classmethod
    def from_directory(cls, directory: Union[str, Path],
                       interpolation_allowed: bool = True) -> 'GridCoverageProvider':
        """Load every ``<series name>.npz`` file of a directory.

        Raises
        ------
        NotADirectoryError
            If ``directory`` does not exist.
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise NotADirectoryError(f"Data directory not found: {directory}")
        series = []
        for path in sorted(directory.glob('*.npz')):
            try:
                series.append(GridSeries.from_npz(path))
            except (KeyError, ValueError) as e:
                warnings.warn(f"Failed to load series {path}: {e}")
        logger.info("Loaded %d series from %s", len(series), directory)
        return cls(series, interpolation_allowed)

    @property
    def series_names(self):
        return sorted(self._series)

    def add(self, series: GridSeries) -> None:
        """Register or replace a series."""
        self._series[series.name] = series

    def open(
        self,
        series: SeriesEntry,
        operation_name: str,
        parameters: Optional[Mapping[str, Any]] = None,
        crs: str = DEFAULT_CRS,
    ) -> Coverage3D:
        grid = self._series.get(series.name)
        if grid is None:
            raise CatalogError(
                f"No data for series '{series.name}'. "
                f"Available: {', '.join(self.series_names) or 'none'}"
            )
        coverage = GridCoverage3D(
            grid, operation_name, dict(parameters or {}), crs,
            interpolation_allowed=self.interpolation_allowed,
        )
        self.open_count += 1
        logger.debug("Opened %r", coverage)
        return coverage
