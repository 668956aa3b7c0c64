# -*- coding: utf-8 -*-
"""
In-Memory Catalog - Dictionary-backed catalog for simulations and tests.

Provides ``InMemoryCatalog``, a ``Catalog`` whose entries are registered
programmatically and whose computed environmental values are kept in a
dictionary keyed by ``(sample id, column)``.

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
2026-10-13
"""

# Standard library
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple, TypeVar, Union

# SEAGIS internal
from seagis.catalog.base import Catalog, Key
from seagis.catalog.models import (
    OperationEntry,
    ParameterEntry,
    RelativePositionEntry,
    SampleEntry,
    SeriesEntry,
    as_seconds,
)
from seagis.exceptions import CatalogError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def _lookup(entries: Dict[int, T], key: Key, kind: str) -> T:
    if isinstance(key, str):
        for entry in entries.values():
            if entry.name == key:
                return entry
    else:
        entry = entries.get(key)
        if entry is not None:
            return entry
    raise CatalogError(f"No {kind} found for key {key!r}")


class InMemoryCatalog(Catalog):
    """
    Catalog held entirely in memory.

    Entries are registered with the ``add_*`` methods, which return the
    entry so calls can be chained into construction code.

    Attributes
    ----------
    values : Dict[Tuple[int, str], float or bool]
        Environmental values stored by ``set_value``.

    Examples
    --------
    >>> catalog = InMemoryCatalog()
    >>> sst = catalog.add_series(SeriesEntry(1, 'SST'))
    >>> catalog.add_parameter(ParameterEntry(1, 'SST', series=(sst,)))
    >>> catalog.get_parameter('SST').series[0] is sst
    True
    """

    def __init__(self) -> None:
        self._series: Dict[int, SeriesEntry] = {}
        self._operations: Dict[int, OperationEntry] = {}
        self._positions: Dict[int, RelativePositionEntry] = {}
        self._parameters: Dict[int, ParameterEntry] = {}
        self._samples: Dict[int, SampleEntry] = {}
        self.values: Dict[Tuple[int, str], Union[float, bool]] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_series(self, entry: SeriesEntry) -> SeriesEntry:
        self._series[entry.id] = entry
        return entry

    def add_operation(self, entry: OperationEntry) -> OperationEntry:
        self._operations[entry.id] = entry
        return entry

    def add_relative_position(
        self, entry: RelativePositionEntry,
    ) -> RelativePositionEntry:
        self._positions[entry.id] = entry
        return entry

    def add_parameter(self, entry: ParameterEntry) -> ParameterEntry:
        self._parameters[entry.id] = entry
        for series in entry.series:
            self._series.setdefault(series.id, series)
        return entry

    def add_sample(self, entry: SampleEntry) -> SampleEntry:
        self._samples[entry.id] = entry
        return entry

    # ------------------------------------------------------------------
    # Catalog contract
    # ------------------------------------------------------------------

    def get_series(self, key: Key) -> SeriesEntry:
        return _lookup(self._series, key, "series")

    def get_operation(self, key: Key) -> OperationEntry:
        return _lookup(self._operations, key, "operation")

    def get_relative_position(self, key: Key) -> RelativePositionEntry:
        return _lookup(self._positions, key, "relative position")

    def get_parameter(self, key: Key) -> ParameterEntry:
        return _lookup(self._parameters, key, "parameter")

    def list_series(self) -> List[SeriesEntry]:
        return list(self._series.values())

    def list_operations(self) -> List[OperationEntry]:
        return list(self._operations.values())

    def list_relative_positions(self) -> List[RelativePositionEntry]:
        return list(self._positions.values())

    def list_parameters(self) -> List[ParameterEntry]:
        return list(self._parameters.values())

    def get_samples(
        self,
        species: Optional[Iterable[str]] = None,
        time_range: Optional[Tuple[datetime, datetime]] = None,
    ) -> List[SampleEntry]:
        samples = list(self._samples.values())
        if species is not None:
            wanted = set(species)
            samples = [s for s in samples
                       if any(s.amounts.get(code, 0) > 0 for code in wanted)]
        if time_range is not None:
            start = as_seconds(time_range[0])
            end = as_seconds(time_range[1])
            samples = [s for s in samples if start <= as_seconds(s.time) < end]
        return samples

    def set_value(self, sample: SampleEntry, column: str,
                  value: Union[float, bool]) -> None:
        self.values[(sample.id, column)] = value

    def get_value(self, sample: SampleEntry,
                  column: str) -> Optional[Union[float, bool]]:
        """Value previously stored by ``set_value``, or None."""
        return self.values.get((sample.id, column))
