# -*- coding: utf-8 -*-
"""
Catalog Base Class - Abstract interface for metadata lookup and write-back.

Defines the ``Catalog`` ABC consumed by coverages, the environment filler
and the animat simulation. A catalog resolves series, operations, relative
positions and parameters by identifier or by name, enumerates each kind of
entry, lists fishery samples, and stores computed environmental values
back against a sample.

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
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional, Tuple, Union

# SEAGIS internal
from seagis.catalog.models import (
    OperationEntry,
    ParameterEntry,
    RelativePositionEntry,
    SampleEntry,
    SeriesEntry,
)

Key = Union[int, str]


class Catalog(ABC):
    """
    Abstract base class for SEAGIS metadata catalogs.

    Lookups accept either the integer catalog identifier or the entry name
    and raise ``CatalogError`` when nothing matches. Subclasses must
    implement the lookups, enumerations, sample listing and
    ``set_value``. Catalogs are context managers; ``close`` releases any
    underlying storage.
    """

    @abstractmethod
    def get_series(self, key: Key) -> SeriesEntry:
        """Series by identifier or name.

        Raises
        ------
        CatalogError
            If no series matches ``key``.
        """

    @abstractmethod
    def get_operation(self, key: Key) -> OperationEntry:
        """Operation by identifier or name."""

    @abstractmethod
    def get_relative_position(self, key: Key) -> RelativePositionEntry:
        """Relative position by identifier or name."""

    @abstractmethod
    def get_parameter(self, key: Key) -> ParameterEntry:
        """Parameter by identifier or name."""

    @abstractmethod
    def list_series(self) -> List[SeriesEntry]:
        """All series, in catalog order."""

    @abstractmethod
    def list_operations(self) -> List[OperationEntry]:
        """All operations, in catalog order."""

    @abstractmethod
    def list_relative_positions(self) -> List[RelativePositionEntry]:
        """All relative positions, in catalog order."""

    @abstractmethod
    def list_parameters(self) -> List[ParameterEntry]:
        """All parameters, in catalog order."""

    @abstractmethod
    def get_samples(
        self,
        species: Optional[Iterable[str]] = None,
        time_range: Optional[Tuple[datetime, datetime]] = None,
    ) -> List[SampleEntry]:
        """Fishery samples, optionally filtered.

        Parameters
        ----------
        species : Iterable[str], optional
            Keep only samples with a positive catch of one of these species.
        time_range : Tuple[datetime, datetime], optional
            Keep only samples with ``start <= time < end``.

        Returns
        -------
        List[SampleEntry]
            Matching samples, in catalog order.
        """

    @abstractmethod
    def set_value(self, sample: SampleEntry, column: str,
                  value: Union[float, bool]) -> None:
        """Store a computed environmental value for a sample.

        Parameters
        ----------
        sample : SampleEntry
            Sample the value belongs to.
        column : str
            Environment column name (operation prefix, parameter name and
            position name).
        value : float or bool
            Value to store.
        """

    def close(self) -> None:
        """Release the underlying storage. The default does nothing."""

    def __enter__(self) -> 'Catalog':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
