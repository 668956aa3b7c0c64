# -*- coding: utf-8 -*-
"""
Parameter Coverage - Environmental parameters resolved from a catalog.

Provides ``ParameterCoverage3D``, the coverage used by table fillers and
potential maps. It resolves parameters and operations by name or
identifier through a ``Catalog``, opens series through a
``CoverageProvider`` with its own ``SeriesCoverageCache``, and adds the
metadata a derived parameter needs: its envelope (the intersection of the
series it reads) and its value range.

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
2026-10-10

Modified
--------
2026-10-17
"""

# Standard library
import logging
import math
from typing import Iterable, Tuple, Union

# SEAGIS internal
from seagis.catalog.base import Catalog
from seagis.catalog.models import DescriptorEntry, OperationEntry, ParameterEntry
from seagis.coverage.base import DEFAULT_CRS, Coverage3D, Envelope
from seagis.coverage.cache import SeriesCoverageCache, processor_operation
from seagis.coverage.combination import CombinationCoverage3D
from seagis.coverage.provider import CoverageProvider
from seagis.exceptions import CannotEvaluateError

logger = logging.getLogger(__name__)

Range = Tuple[float, float]


def _union(ranges: Iterable[Range]) -> Range:
    low, high = math.inf, -math.inf
    for lo, hi in ranges:
        low = min(low, lo)
        high = max(high, hi)
    if low > high:
        return (math.nan, math.nan)
    return (low, high)


def _normalized(descriptor: DescriptorEntry, rng: Range) -> Range:
    a = descriptor.normalize(rng[0])
    b = descriptor.normalize(rng[1])
    return (min(a, b), max(a, b))


def _product(a: Range, b: Range) -> Range:
    products = [a[0] * b[0], a[0] * b[1], a[1] * b[0], a[1] * b[1]]
    products = [p for p in products if not math.isnan(p)]
    if not products:
        return (math.nan, math.nan)
    return (min(products), max(products))


class ParameterCoverage3D(CombinationCoverage3D):
    """
    Coverage of a catalog parameter.

    Parameters
    ----------
    catalog : Catalog
        Lookup of parameters and operations. Closed by ``dispose``.
    provider : CoverageProvider
        Source of series coverages.
    crs : str, default='EPSG:4326'
        Coordinate system of evaluated points.

    Examples
    --------
    >>> coverage = ParameterCoverage3D(catalog, GridCoverageProvider(series))
    >>> coverage.set_parameter('SST', 'Gradient')
    >>> coverage.processor_operation()
    'NodataFilter;GradientMagnitude'
    >>> coverage.evaluate_value((55.5, -21.0), datetime(1999, 3, 15))
    """

    def __init__(
        self,
        catalog: Catalog,
        provider: CoverageProvider,
        crs: str = DEFAULT_CRS,
    ) -> None:
        super().__init__(SeriesCoverageCache(provider, crs), name="parameter")
        self.catalog = catalog

    def set_parameter(
        self,
        parameter: Union[ParameterEntry, str, int, None],
        operation: Union[OperationEntry, str, int, None] = None,
    ) -> None:
        """Select a parameter and operation, given as entries, names or ids.

        Raises
        ------
        CatalogError
            If a name or identifier is unknown to the catalog.
        """
        if parameter is not None and not isinstance(parameter, ParameterEntry):
            parameter = self.catalog.get_parameter(parameter)
        if operation is not None and not isinstance(operation, OperationEntry):
            operation = self.catalog.get_operation(operation)
        super().set_parameter(parameter, operation)

    def processor_operation(self) -> str:
        """Name of the raster operation applied to the parameter's series."""
        return processor_operation(self.operation)

    def _coverages(self) -> Iterable[Coverage3D]:
        return self._snapshot().coverages.values()

    def get_envelope(self) -> Envelope:
        """Intersection of the envelopes of every series read."""
        envelope = None
        for coverage in self._coverages():
            other = coverage.get_envelope()
            envelope = other if envelope is None else envelope.intersect(other)
        return envelope if envelope is not None else super().get_envelope()

    def get_value_range(self) -> Range:
        """``(min, max)`` expected for the current parameter.

        For a directly read parameter, the union of its series ranges.
        For a derived parameter, interval arithmetic over the terms using
        the normalized range of every descriptor.

        Raises
        ------
        CannotEvaluateError
            If no parameter is set.
        """
        state = self._snapshot()
        target = state.target
        if target is None:
            raise CannotEvaluateError(f"No parameter set on coverage '{state.name}'")
        if target.is_identity:
            return (1.0, 1.0)
        if state.terms is None:
            return _union(
                state.coverages[key].value_range(target.band)
                for key in state.coverages
            )
        low, high = 0.0, 0.0
        for term in state.terms:
            term_range = (term.coefficient, term.coefficient)
            for descriptor in term.descriptors:
                if descriptor.is_identity:
                    continue
                source = descriptor.parameter
                raw = _union(
                    coverage.value_range(source.band)
                    for key, coverage in state.coverages.items()
                    if key.series in source.series
                    and key.operation == descriptor.operation
                )
                term_range = _product(term_range, _normalized(descriptor, raw))
            low += term_range[0]
            high += term_range[1]
        return (low, high)

    def value_range(self, band: int = 0) -> Range:
        return self.get_value_range()

    def dispose(self) -> None:
        """Clear the parameter and close the catalog."""
        try:
            super().dispose()
        finally:
            self.catalog.close()
