# -*- coding: utf-8 -*-
"""
Combination Coverage - Linear combinations of parameters read from series.

Provides ``CombinationCoverage3D``, a single-band coverage whose value is
an environmental parameter. A parameter is either read directly from one
band of its series, trying fallback series until one has data, or derived
from a linear model::

    value = sum over terms of  C * n1(d1) * n2(d2) * ...

where each descriptor ``d`` reads a parameter at a relative position
through an operation, and ``n`` is the descriptor's normalization.

Missing Data
------------
Within a descriptor, a series outside coverage or without data at the
point falls back to the next series. A descriptor with no value from any
series makes its term NaN, which makes the sum NaN. An outside-coverage
error is raised only if no descriptor of any term found a value.

Concurrency
-----------
``set_parameter`` publishes a new immutable snapshot under the
configuration lock. Evaluations take the lock only long enough to read
the snapshot, then read rasters and combine values without holding it,
so concurrent evaluations do not wait on each other's I/O.

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
2026-10-09

Modified
--------
2026-10-19
"""

# Standard library
import logging
import math
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Mapping, Optional, Tuple

# Third-party
import numpy as np

# SEAGIS internal
from seagis.catalog.models import (
    DescriptorEntry,
    LinearModelTerm,
    OperationEntry,
    ParameterEntry,
    RelativePositionEntry,
    SampleEntry,
)
from seagis.coverage.base import Coverage3D
from seagis.coverage.cache import SeriesCoverageCache, SeriesKey
from seagis.exceptions import (
    CannotEvaluateError,
    PointOutsideCoverageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True)
class _Snapshot:
    """Immutable evaluation state published by ``set_parameter``."""

    name: str = "combination"
    target: Optional[ParameterEntry] = None
    operation: Optional[OperationEntry] = None
    terms: Optional[Tuple[LinearModelTerm, ...]] = None
    coverages: Mapping[SeriesKey, Coverage3D] = field(default_factory=dict)
    max_bands: int = 0


def descriptor_key(descriptor: DescriptorEntry, series) -> SeriesKey:
    """Cache key of one series read by a descriptor."""
    offset = descriptor.position.offset_days if descriptor.position is not None else 0.0
    return SeriesKey(series, descriptor.operation, offset)


class CombinationCoverage3D(Coverage3D):
    """
    Coverage evaluating the current parameter, direct or derived.

    Parameters
    ----------
    cache : SeriesCoverageCache
        Source of the coverages read by parameters and descriptors.
    name : str, default='combination'
        Name used until a parameter is set.

    Examples
    --------
    >>> coverage = CombinationCoverage3D(SeriesCoverageCache(provider))
    >>> coverage.set_parameter(potential)
    >>> coverage.evaluate_value((55.5, -21.0), datetime(1999, 3, 15))
    0.73
    """

    def __init__(self, cache: SeriesCoverageCache, name: str = "combination") -> None:
        self._config_lock = threading.RLock()
        self._default_name = name
        self._state = _Snapshot(name=name)
        super().__init__(name, cache.crs)
        self.cache = cache

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        """Name of the current parameter, or the coverage name if none is set."""
        return self._snapshot().name

    @name.setter
    def name(self, value: str) -> None:
        with self._config_lock:
            self._state = replace(self._state, name=value)

    @property
    def parameter(self) -> Optional[ParameterEntry]:
        """Parameter currently evaluated."""
        return self._snapshot().target

    @property
    def operation(self) -> Optional[OperationEntry]:
        """Operation applied to the parameter's series."""
        return self._snapshot().operation

    def _snapshot(self) -> _Snapshot:
        with self._config_lock:
            return self._state

    def set_parameter(
        self,
        parameter: Optional[ParameterEntry],
        operation: Optional[OperationEntry] = None,
    ) -> None:
        """Select the parameter to evaluate.

        Opens (or reuses) a coverage for every series the parameter or
        its descriptors read. Does nothing if the parameter and operation
        are unchanged.

        Parameters
        ----------
        parameter : ParameterEntry or None
            Parameter to evaluate. None clears the coverage.
        operation : OperationEntry, optional
            Operation applied to a directly read parameter.

        Raises
        ------
        ValidationError
            If a descriptor refers to a derived parameter, or a band is
            not provided by a series.
        """
        with self._config_lock:
            state = self._state
            if state.target == parameter and state.operation == operation:
                return
            if parameter is None:
                self._state = _Snapshot(name=self._default_name)
                return

            # (key, parameter read through it) for every coverage to open
            reads = []
            if parameter.linear_model is None:
                for series in parameter.series:
                    reads.append((SeriesKey(series, operation, None), parameter))
                max_bands = parameter.band + 1 if parameter.series else 0
            else:
                max_bands = 0
                for term in parameter.linear_model:
                    for descriptor in term.descriptors:
                        if descriptor.is_identity:
                            continue
                        source = descriptor.parameter
                        if source.linear_model is not None:
                            raise ValidationError(
                                f"Descriptor '{descriptor.name}' refers to derived "
                                f"parameter '{source.name}'"
                            )
                        for series in source.series:
                            reads.append((descriptor_key(descriptor, series), source))
                        max_bands = max(max_bands, source.band + 1)

            self.cache.activate()
            coverages = {}
            try:
                for key, source in reads:
                    if key not in coverages:
                        coverages[key] = self._open(key, source)
            except Exception:
                self.cache.rollback()
                raise

            self._state = _Snapshot(
                name=parameter.name,
                target=parameter,
                operation=operation,
                terms=parameter.linear_model,
                coverages=coverages,
                max_bands=max_bands,
            )
            logger.info("Parameter set to %s (%d coverages)",
                        parameter.name, len(coverages))

    def _open(self, key: SeriesKey, parameter: ParameterEntry) -> Coverage3D:
        coverage = self.cache.get_or_create(key.series, key.operation, key.offset)
        if coverage.num_bands <= parameter.band:
            raise ValidationError(
                f"Parameter '{parameter.name}' reads band {parameter.band} but "
                f"series '{key.series.name}' has {coverage.num_bands} band(s)"
            )
        return coverage

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate_value(self, point: Point, time: datetime) -> float:
        """Value of the current parameter at a point and time.

        Parameters
        ----------
        point : Tuple[float, float]
            ``(lon, lat)`` in degrees.
        time : datetime
            Evaluation time.

        Returns
        -------
        float
            Parameter value. NaN if data are missing.

        Raises
        ------
        PointOutsideCoverageError
            If every series of every descriptor is outside coverage.
        CannotEvaluateError
            If no parameter is set.
        """
        return self._evaluate(self._snapshot(), None, point, time)

    def evaluate_sample_value(
        self,
        sample: SampleEntry,
        position: Optional[RelativePositionEntry] = None,
    ) -> float:
        """Value of the current parameter for a fishery sample.

        Series are asked for the sample through
        ``Coverage3D.evaluate_sample``, which lets gridded series align the
        date on their images: a directly read parameter passes
        ``position``, and descriptors pass their own relative position.
        A derived parameter evaluated at ``position`` is instead moved by
        that position first and evaluated as a plain point and time.
        """
        state = self._snapshot()
        if state.target is not None and state.terms is None \
                and not state.target.is_identity:
            return self._evaluate_direct(state, sample, position,
                                         sample.coordinate, sample.time)
        if position is not None:
            point, time = position.apply_offset(sample.coordinate, sample.time)
            return self._evaluate(state, None, point, time)
        return self._evaluate(state, sample, sample.coordinate, sample.time)

    def evaluate(self, point: Point, time: datetime) -> np.ndarray:
        return np.array([self.evaluate_value(point, time)], dtype=np.float64)

    def evaluate_sample(
        self,
        sample: SampleEntry,
        position: Optional[RelativePositionEntry] = None,
    ) -> np.ndarray:
        return np.array([self.evaluate_sample_value(sample, position)],
                        dtype=np.float64)

    @staticmethod
    def _read(
        coverage: Coverage3D,
        band: int,
        sample: Optional[SampleEntry],
        position: Optional[RelativePositionEntry],
        point: Point,
        time: datetime,
    ) -> float:
        if sample is not None:
            values = coverage.evaluate_sample(sample, position)
        else:
            if position is not None:
                point, time = position.apply_offset(point, time)
            values = coverage.evaluate(point, time)
        return float(values[band])

    def _evaluate(
        self,
        state: _Snapshot,
        sample: Optional[SampleEntry],
        point: Point,
        time: datetime,
    ) -> float:
        target = state.target
        if target is None:
            raise CannotEvaluateError(f"No parameter set on coverage '{state.name}'")
        if target.is_identity:
            return 1.0
        if state.terms is None:
            return self._evaluate_direct(state, sample, None, point, time)

        value = 0.0
        any_inside = False
        first_outside: Optional[PointOutsideCoverageError] = None
        for term in state.terms:
            term_value = term.coefficient
            for descriptor in term.descriptors:
                if descriptor.is_identity:
                    continue
                source = descriptor.parameter
                found = False
                for series in source.series:
                    coverage = state.coverages[descriptor_key(descriptor, series)]
                    try:
                        raw = self._read(coverage, source.band, sample,
                                         descriptor.position, point, time)
                    except PointOutsideCoverageError as e:
                        if first_outside is None:
                            first_outside = e
                        continue
                    if not math.isnan(raw):
                        any_inside = True
                        term_value *= descriptor.normalize(raw)
                        found = True
                        break
                if not found:
                    term_value *= math.nan
            value += term_value

        if not any_inside and first_outside is not None:
            raise first_outside
        return value

    def _evaluate_direct(
        self,
        state: _Snapshot,
        sample: Optional[SampleEntry],
        position: Optional[RelativePositionEntry],
        point: Point,
        time: datetime,
    ) -> float:
        target = state.target
        value = math.nan
        inside = False
        first_outside: Optional[PointOutsideCoverageError] = None
        for series in target.series:
            coverage = state.coverages[SeriesKey(series, state.operation, None)]
            try:
                value = self._read(coverage, target.band, sample, position,
                                   point, time)
            except PointOutsideCoverageError as e:
                if first_outside is None:
                    first_outside = e
                continue
            inside = True
            if not math.isnan(value):
                return value
        if not inside and first_outside is not None:
            raise first_outside
        return math.nan

    def dispose(self) -> None:
        """Clear the current parameter. Cached coverages are kept."""
        with self._config_lock:
            self._state = _Snapshot(name=self._default_name)
        super().dispose()
