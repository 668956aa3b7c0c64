# -*- coding: utf-8 -*-
"""
Coverage Module - Spatio-temporal evaluation of environmental parameters.

Key Classes
-----------
- Coverage3D: Abstract (lon, lat, time) coverage
- GridSeries, GridCoverage3D: Gridded series and their coverage
- CoverageProvider, GridCoverageProvider: Coverage factories
- SeriesCoverageCache: Per-activation reuse of series coverages
- CombinationCoverage3D: Direct and linear-model parameter evaluation
- ParameterCoverage3D: Catalog-aware parameter coverage

Dependencies
------------
numpy
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
2026-10-07

Modified
--------
2026-10-10
"""

from seagis.coverage.base import DEFAULT_CRS, Coverage3D, Envelope
from seagis.coverage.cache import SeriesCoverageCache, SeriesKey, processor_operation
from seagis.coverage.combination import CombinationCoverage3D
from seagis.coverage.grid import GridCoverage3D, GridSeries
from seagis.coverage.operations import (
    GaussianSmooth,
    GradientMagnitude,
    NodataFilter,
    RasterOperation,
    RasterPipeline,
    available_operations,
    build_operation_chain,
)
from seagis.coverage.parameter import ParameterCoverage3D
from seagis.coverage.provider import CoverageProvider, GridCoverageProvider

__all__ = [
    'DEFAULT_CRS',
    'Coverage3D',
    'Envelope',
    'SeriesCoverageCache',
    'SeriesKey',
    'processor_operation',
    'CombinationCoverage3D',
    'GridCoverage3D',
    'GridSeries',
    'GaussianSmooth',
    'GradientMagnitude',
    'NodataFilter',
    'RasterOperation',
    'RasterPipeline',
    'available_operations',
    'build_operation_chain',
    'ParameterCoverage3D',
    'CoverageProvider',
    'GridCoverageProvider',
]
