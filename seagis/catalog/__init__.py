# -*- coding: utf-8 -*-
"""
Catalog Module - Metadata entries, lookup and environment write-back.

Key Classes
-----------
- Catalog: Abstract lookup and write-back interface
- InMemoryCatalog: Dictionary-backed catalog
- SQLiteCatalog: Catalog persisting samples and environment values
- SeriesEntry, OperationEntry, RelativePositionEntry, ParameterEntry,
  DescriptorEntry, LinearModelTerm, SampleEntry: Immutable entries

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
2026-10-07
"""

from seagis.catalog.base import Catalog
from seagis.catalog.memory import InMemoryCatalog
from seagis.catalog.models import (
    IDENTITY,
    DescriptorEntry,
    LinearModelTerm,
    OperationEntry,
    ParameterEntry,
    RelativePositionEntry,
    SampleEntry,
    SeriesEntry,
)
from seagis.catalog.sqlite import SQLiteCatalog

__all__ = [
    'Catalog',
    'InMemoryCatalog',
    'SQLiteCatalog',
    'IDENTITY',
    'DescriptorEntry',
    'LinearModelTerm',
    'OperationEntry',
    'ParameterEntry',
    'RelativePositionEntry',
    'SampleEntry',
    'SeriesEntry',
]
