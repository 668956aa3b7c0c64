# -*- coding: utf-8 -*-
"""
Environment Table Filler - Evaluate parameters at samples and store them.

Provides ``EnvironmentTableFiller``, which evaluates a set of parameters
for every fishery sample at every configured relative position and writes
the results back through the catalog. Tasks are processed in increasing
evaluation time (see ``schedule``) so gridded series read each image
about once.

Samples outside a series are expected: the outside-coverage warning is
logged once per coverage per run and the value is not written. Missing
values (NaN) are not written either.

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
2026-10-11

Modified
--------
2026-10-17
"""

# Standard library
import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set

# SEAGIS internal
from seagis.catalog.base import Catalog
from seagis.catalog.models import (
    OperationEntry,
    ParameterEntry,
    RelativePositionEntry,
    SampleEntry,
)
from seagis.coverage.combination import CombinationCoverage3D
from seagis.environment.scheduler import schedule
from seagis.exceptions import PointOutsideCoverageError

logger = logging.getLogger(__name__)


def column_name(
    parameter: ParameterEntry,
    operation: Optional[OperationEntry] = None,
    position: Optional[RelativePositionEntry] = None,
) -> str:
    """Environment column: operation prefix, parameter name, position name."""
    prefix = operation.column_prefix if operation is not None else ""
    suffix = position.name if position is not None else ""
    return f"{prefix}{parameter.name}{suffix}"


@dataclass
class FillReport:
    """Counters of one ``EnvironmentTableFiller.run``.

    Attributes
    ----------
    evaluated : int
        Tasks evaluated.
    written : int
        Values written to the catalog.
    outside : int
        Tasks outside coverage.
    missing : int
        Tasks inside coverage without data (NaN).
    """

    evaluated: int = 0
    written: int = 0
    outside: int = 0
    missing: int = 0


@dataclass(frozen=True)
class _Request:
    parameter: ParameterEntry
    operation: Optional[OperationEntry]
    positions: Sequence[RelativePositionEntry]


class EnvironmentTableFiller:
    """
    Fill environment columns of fishery samples.

    Parameters
    ----------
    catalog : Catalog
        Source of samples and destination of values.
    coverage : CombinationCoverage3D
        Coverage switched to each requested parameter in turn.

    Examples
    --------
    >>> filler = EnvironmentTableFiller(catalog, ParameterCoverage3D(catalog, provider))
    >>> filler.add_parameter(sst, positions=catalog.list_relative_positions())
    >>> report = filler.run()
    """

    def __init__(self, catalog: Catalog, coverage: CombinationCoverage3D) -> None:
        self.catalog = catalog
        self.coverage = coverage
        self._requests: List[_Request] = []

    def add_parameter(
        self,
        parameter: ParameterEntry,
        operation: Optional[OperationEntry] = None,
        positions: Optional[Iterable[RelativePositionEntry]] = None,
    ) -> None:
        """Request a parameter, optionally at several relative positions."""
        self._requests.append(_Request(parameter, operation, tuple(positions or ())))

    def run(self, samples: Optional[Iterable[SampleEntry]] = None) -> FillReport:
        """Evaluate every requested parameter and store the values.

        Parameters
        ----------
        samples : Iterable[SampleEntry], optional
            Samples to fill. Defaults to every sample of the catalog.

        Returns
        -------
        FillReport
            Counters over all parameters.
        """
        samples = list(samples) if samples is not None else self.catalog.get_samples()
        report = FillReport()
        warned: Set[str] = set()
        logger.info("Filling %d parameter(s) for %d sample(s)",
                    len(self._requests), len(samples))
        for request in self._requests:
            self.coverage.set_parameter(request.parameter, request.operation)
            for task in schedule(samples, request.positions):
                report.evaluated += 1
                try:
                    value = self.coverage.evaluate_sample_value(task.sample, task.position)
                except PointOutsideCoverageError as e:
                    report.outside += 1
                    name = e.coverage or self.coverage.name
                    if name not in warned:
                        warned.add(name)
                        logger.warning("%s", e)
                    continue
                if math.isnan(value):
                    report.missing += 1
                    continue
                column = column_name(request.parameter, request.operation, task.position)
                self.catalog.set_value(task.sample, column, value)
                report.written += 1
        logger.info("Filled %d of %d values (%d outside coverage, %d missing)",
                    report.written, report.evaluated, report.outside, report.missing)
        return report
