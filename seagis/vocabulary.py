# -*- coding: utf-8 -*-
"""
Vocabulary - Canonical enums for the SEAGIS framework.

Defines the controlled vocabularies shared by the catalog, coverage and
animat packages: descriptor distributions, trajectory path segment types,
and the perception evaluators understood by simulation configurations.

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
2026-10-05
"""

from enum import Enum


class Distribution(Enum):
    """Expected statistical distribution of a descriptor's values.

    Selects the transform applied by ``DescriptorEntry.normalize`` so that
    sample distributions are closer to normal before being combined in a
    linear model.
    """

    NORMAL = "normal"
    SCALED = "scaled"
    LOG_SCALED = "log_scaled"


class SegmentType(Enum):
    """Segment kinds yielded when iterating over a trajectory path."""

    MOVETO = "moveto"
    LINETO = "lineto"


class EvaluatorKind(Enum):
    """Reduction applied to the values observed inside a perception area."""

    MAXIMUM = "maximum"
    AVERAGE = "average"
