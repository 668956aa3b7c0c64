# -*- coding: utf-8 -*-
"""
Animat Environment - Environmental fields perceived by simulated animals.

Provides ``Environment``, which holds one coverage per configured
parameter and evaluates it at the date of the current time step. Values
are memoized for the duration of a time step: many animals perceive
overlapping areas, and the same grid nodes are asked for repeatedly.

Each parameter has a validity flag, cleared by ``next_time_step``. The
first evaluation after a step change recomputes the parameter's date
(clock time plus time lag, aligned on the nearest image plus whole days)
and drops the previous step's values. Flags, memo and counters are
guarded by the environment lock. Raster reads happen outside it, and a
value read across a step change is returned but not memoized.

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
2026-10-13

Modified
--------
2026-10-19
"""

# Standard library
import logging
import math
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

# SEAGIS internal
from seagis.animat.clock import Clock
from seagis.animat.config import AnimatParameter, Configuration
from seagis.catalog.base import Catalog
from seagis.catalog.models import as_utc
from seagis.coverage.base import Coverage3D
from seagis.coverage.cache import SeriesCoverageCache
from seagis.exceptions import PointOutsideCoverageError

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


def align_time(coverage: Coverage3D, time: datetime) -> datetime:
    """Date of the image nearest to ``time`` plus the whole days between them."""
    time = as_utc(time)
    snapped = as_utc(coverage.snap(time))
    days = math.trunc((time - snapped).total_seconds() / 86400.0)
    return snapped + timedelta(days=days)


@dataclass
class EnvironmentReport:
    """Evaluation counters since the simulation started."""

    points: int = 0
    outside: int = 0
    missing: int = 0

    @property
    def percent_outside(self) -> float:
        return 100.0 * self.outside / self.points if self.points else 0.0

    def __str__(self) -> str:
        return (f"{self.points} points evaluated, {self.outside} outside coverage "
                f"({self.percent_outside:.1f}%), {self.missing} without data")


@dataclass
class _Entry:
    parameter: AnimatParameter
    coverage: Coverage3D
    is_valid: bool = False
    generation: int = 0
    time: Optional[datetime] = None
    values: Dict[Point, float] = field(default_factory=dict)


class Environment:
    """
    Coverages of the configured parameters at the current time step.

    Parameters
    ----------
    configuration : Configuration
        Parameters to perceive.
    catalog : Catalog
        Resolves series and operation names.
    cache : SeriesCoverageCache
        Shared source of coverages.
    clock : Clock
        Simulation clock.

    Raises
    ------
    CatalogError
        If a configured series or operation is unknown.
    """

    def __init__(
        self,
        configuration: Configuration,
        catalog: Catalog,
        cache: SeriesCoverageCache,
        clock: Clock,
    ) -> None:
        self.configuration = configuration
        self.clock = clock
        self.report = EnvironmentReport()
        self._lock = threading.RLock()
        self._entries: List[_Entry] = []
        cache.activate()
        for parameter in configuration.parameters:
            series = catalog.get_series(parameter.series)
            operation = (catalog.get_operation(parameter.operation)
                         if parameter.operation else None)
            coverage = cache.get_or_create(
                series, operation, parameter.time_lag.total_seconds() / 86400.0,
            )
            self._entries.append(_Entry(parameter, coverage))
        logger.info("Environment of %d parameter(s)", len(self._entries))

    @property
    def parameters(self) -> List[AnimatParameter]:
        return [entry.parameter for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def get_time(self, index: int) -> datetime:
        """Date at which parameter ``index`` is read during the current step."""
        entry = self._entries[index]
        with self._lock:
            if not entry.is_valid:
                entry.time = align_time(
                    entry.coverage, self.clock.time + entry.parameter.time_lag,
                )
                entry.values.clear()
                entry.is_valid = True
            return entry.time

    def evaluate(self, index: int, point: Point) -> float:
        """Value of parameter ``index`` at ``point`` for the current step.

        Returns
        -------
        float
            Value of the coverage's first band, NaN if outside coverage
            or without data.
        """
        entry = self._entries[index]
        key = (float(point[0]), float(point[1]))
        with self._lock:
            time = self.get_time(index)
            generation = entry.generation
            if key in entry.values:
                return entry.values[key]
        outside = False
        try:
            value = float(entry.coverage.evaluate(key, time)[0])
        except PointOutsideCoverageError:
            value = math.nan
            outside = True
        with self._lock:
            # A step change during the read makes the value stale for the memo.
            if entry.generation != generation or not entry.is_valid:
                return value
            if key in entry.values:
                return entry.values[key]
            self.report.points += 1
            if outside:
                self.report.outside += 1
            elif math.isnan(value):
                self.report.missing += 1
            entry.values[key] = value
        return value

    def next_time_step(self) -> None:
        """Advance the clock and invalidate every parameter."""
        with self._lock:
            self.clock.next_step()
            for entry in self._entries:
                entry.generation += 1
                entry.is_valid = False
                entry.values.clear()
        logger.debug("Environment moved to %s", self.clock)
