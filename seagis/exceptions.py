# -*- coding: utf-8 -*-
"""
SEAGIS Exception Hierarchy - Domain-specific exceptions for SEAGIS operations.

Provides a small exception hierarchy that lets callers (simulation drivers,
table fillers, command-line tools) catch SEAGIS-specific errors distinctly
from Python built-in exceptions. All SEAGIS exceptions subclass both
``SeagisError`` and the appropriate built-in exception so that existing
``except ValueError`` style handlers keep working.

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
2026-10-12
"""

from typing import Any, Optional, Tuple


class SeagisError(Exception):
    """Base exception for all SEAGIS errors."""


class ValidationError(SeagisError, ValueError):
    """Invalid catalog entry, argument, or configuration value.

    Raised for parameters without series, negative bands, malformed
    relative positions, and other input validation failures.
    """


class CannotEvaluateError(SeagisError, RuntimeError):
    """A coverage could not be evaluated for a reason other than missing data.

    Raised for unexpected faults while reading or combining rasters.
    """


class PointOutsideCoverageError(CannotEvaluateError):
    """No data exists at the requested coordinate and time.

    This is the expected, frequent condition (cloud gaps, missing tiles,
    dates outside a series). Evaluators absorb it while alternative series
    remain and only surface it when every alternative is exhausted.

    Parameters
    ----------
    message : str
        Human readable description.
    point : Tuple[float, float], optional
        ``(longitude, latitude)`` in degrees of the failed evaluation.
    time : datetime, optional
        Time of the failed evaluation.
    coverage : str, optional
        Name of the coverage which raised the error. Used to throttle
        logging to one warning per coverage.
    """

    def __init__(
        self,
        message: str,
        point: Optional[Tuple[float, float]] = None,
        time: Optional[Any] = None,
        coverage: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.point = point
        self.time = time
        self.coverage = coverage


class CannotReprojectError(SeagisError, RuntimeError):
    """Coordinate system mismatch between stored rasters and requested output.

    Treated as a programming error: never retried.
    """


class CatalogError(SeagisError, LookupError):
    """Catalog or provider lookup failure.

    Raised for unknown series, parameters, operations or relative
    positions, and for failures of the underlying storage.
    """


class ConfigurationError(SeagisError, ValueError):
    """Simulation configuration could not be parsed.

    Raised at startup for missing required keys, bad numbers, or dates not
    in the expected ``yyyy/MM/dd`` format.
    """


class DependencyError(SeagisError, ImportError):
    """Missing optional dependency required for a specific module.

    Raised when a feature requires an optional package (matplotlib) that
    is not installed.
    """
