# -*- coding: utf-8 -*-
"""
SEAGIS - Environmental parameters and tuna animats for fisheries research.

A Python library combining an animat simulation (tuna agents moving through
remote-sensing environmental fields over a geodetic surface) with a
coverage layer that evaluates environmental parameters at fishery samples,
including parameters derived from linear models of other parameters.

Dependencies
------------
numpy
scipy
shapely

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
2026-10-05

Modified
--------
2026-10-18
"""

__version__ = "0.1.0"
__author__ = "Seagis Contributors"

from seagis.exceptions import (
    SeagisError,
    ValidationError,
    CannotEvaluateError,
    PointOutsideCoverageError,
    CannotReprojectError,
    CatalogError,
    ConfigurationError,
    DependencyError,
)
from seagis.vocabulary import (
    Distribution,
    SegmentType,
    EvaluatorKind,
)

__all__ = [
    'SeagisError',
    'ValidationError',
    'CannotEvaluateError',
    'PointOutsideCoverageError',
    'CannotReprojectError',
    'CatalogError',
    'ConfigurationError',
    'DependencyError',
    'Distribution',
    'SegmentType',
    'EvaluatorKind',
]
