# -*- coding: utf-8 -*-
"""
Series Coverage Cache - Reuse coverages across descriptors and parameters.

Provides ``SeriesKey`` and ``SeriesCoverageCache``. Several descriptors of
a linear model often read the same series through the same operation, only
at different time offsets. The cache opens each ``(series, operation)``
pair once per activation and hands out clones for the other offsets, so
every offset keeps its own last-read state while sharing the data source.

Activation
----------
``activate()`` begins a new set of keys, typically when a coverage
switches to another parameter. Coverages of the previous activation stay
reachable for reuse and are *not* disposed: evaluations running in other
threads may still hold them. ``rollback()`` undoes the last activation
when a parameter switch fails part way, so the coverages still in use
stay reusable.

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
import threading
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

# SEAGIS internal
from seagis.catalog.models import OperationEntry, SeriesEntry
from seagis.coverage.base import DEFAULT_CRS, Coverage3D
from seagis.coverage.operations import NODATA_FILTER
from seagis.coverage.provider import CoverageProvider

logger = logging.getLogger(__name__)


def processor_operation(operation: Optional[OperationEntry]) -> str:
    """Processor operation name for an operation entry.

    ``'NodataFilter'`` for no operation (or one without a processor
    operation), otherwise ``'NodataFilter;<name>'``.
    """
    if operation is None or not operation.processor_operation:
        return NODATA_FILTER
    return f"{NODATA_FILTER};{operation.processor_operation}"


@dataclass(frozen=True)
class SeriesKey:
    """Cache key of a coverage.

    Parameters
    ----------
    series : SeriesEntry
        Series read by the coverage.
    operation : OperationEntry, optional
        Operation applied, None for the plain filter.
    offset : float, optional
        Nominal time offset in days. None means "any offset".

    Notes
    -----
    ``==`` and ``hash`` are exact: a key with ``offset=None`` equals only
    another key with ``offset=None``. ``matches`` is the wildcard
    relation used to find a coverage to clone.
    """

    series: SeriesEntry
    operation: Optional[OperationEntry]
    offset: Optional[float] = None

    def matches(self, other: 'SeriesKey') -> bool:
        """Same series and operation, and equal offsets or either is None."""
        if self.series != other.series or self.operation != other.operation:
            return False
        return self.offset is None or other.offset is None or self.offset == other.offset

    def wildcard(self) -> 'SeriesKey':
        """This key with the offset replaced by None."""
        return SeriesKey(self.series, self.operation, None)


class SeriesCoverageCache:
    """
    Per-activation cache of coverages keyed by ``SeriesKey``.

    Parameters
    ----------
    provider : CoverageProvider
        Source of new coverages.
    crs : str, default='EPSG:4326'
        Coordinate system requested from the provider.

    Attributes
    ----------
    open_count : int
        Number of coverages opened from the provider.
    clone_count : int
        Number of clones handed out.

    Examples
    --------
    >>> cache = SeriesCoverageCache(provider)
    >>> cache.activate()
    >>> a = cache.get_or_create(sst, None, 0.0)
    >>> b = cache.get_or_create(sst, None, -5.0)    # clone of a
    >>> a.source is b.source
    True
    """

    def __init__(self, provider: CoverageProvider, crs: str = DEFAULT_CRS) -> None:
        self.provider = provider
        self.crs = crs
        self._current: Dict[SeriesKey, Coverage3D] = {}
        self._previous: Dict[SeriesKey, Coverage3D] = {}
        self._replaced: Optional[Tuple[Dict[SeriesKey, Coverage3D],
                                       Dict[SeriesKey, Coverage3D]]] = None
        self._lock = threading.RLock()
        self.open_count = 0
        self.clone_count = 0

    def activate(self) -> None:
        """Start a new activation. Current coverages become reusable ones."""
        with self._lock:
            self._replaced = (self._current, self._previous)
            if self._current:
                self._previous = self._current
            self._current = {}

    def rollback(self) -> None:
        """Return to the state before the last ``activate``.

        Coverages obtained since that call and unknown to the restored
        activations are disposed. Does nothing without a prior
        ``activate``.
        """
        with self._lock:
            if self._replaced is None:
                return
            abandoned = self._current
            self._current, self._previous = self._replaced
            self._replaced = None
            kept = {id(c) for c in
                    list(self._current.values()) + list(self._previous.values())}
            for coverage in {id(c): c for c in abandoned.values()}.values():
                if id(coverage) not in kept:
                    coverage.dispose()
            logger.debug("Activation rolled back, %d coverage(s) dropped",
                         len(abandoned))

    def get_or_create(
        self,
        series: SeriesEntry,
        operation: Optional[OperationEntry] = None,
        offset: Optional[float] = None,
    ) -> Coverage3D:
        """Coverage for a series, operation and nominal offset.

        Lookup order: exact key in the current activation; exact key of
        the previous activation (reused as is); any offset of the same
        series and operation in the current, then the previous activation
        (cloned); finally a new coverage from the provider.

        Parameters
        ----------
        series : SeriesEntry
            Series to read.
        operation : OperationEntry, optional
            Operation to apply.
        offset : float, optional
            Nominal time offset in days.

        Returns
        -------
        Coverage3D
            The cached, cloned or new coverage.
        """
        key = SeriesKey(series, operation, offset)
        with self._lock:
            coverage = self._current.get(key)
            if coverage is not None:
                return coverage
            coverage = self._previous.get(key)
            if coverage is None:
                coverage = self._find_clone(key)
            if coverage is None:
                params = operation.parameters if operation is not None else None
                coverage = self.provider.open(
                    series, processor_operation(operation), params, self.crs,
                )
                self.open_count += 1
                logger.debug("Opened coverage for %s (%s), offset %s",
                             series.name, processor_operation(operation), offset)
            self._current[key] = coverage
            return coverage

    def _find_clone(self, key: SeriesKey) -> Optional[Coverage3D]:
        wildcard = key.wildcard()
        for mapping in (self._current, self._previous):
            for other, coverage in mapping.items():
                if wildcard.matches(other):
                    self.clone_count += 1
                    return coverage.clone()
        return None

    def snapshot(self) -> Mapping[SeriesKey, Coverage3D]:
        """Copy of the coverages of the current activation."""
        with self._lock:
            return dict(self._current)

    def __len__(self) -> int:
        return len(self._current)

    def clear(self) -> None:
        """Dispose and forget every coverage."""
        with self._lock:
            for coverage in {id(c): c for c in
                             list(self._current.values())
                             + list(self._previous.values())}.values():
                coverage.dispose()
            self._current = {}
            self._previous = {}
            self._replaced = None
