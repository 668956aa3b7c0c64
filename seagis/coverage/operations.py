# -*- coding: utf-8 -*-
"""
Raster Operations - Transforms applied to raster slices before evaluation.

Provides the ``RasterOperation`` ABC, a small registry of named operations
and ``RasterPipeline`` which chains them. Coverages are opened with a
processor operation name such as ``'NodataFilter'`` or
``'NodataFilter;GradientMagnitude'``; ``build_operation_chain`` turns that
name into a pipeline applied to every raster slice the coverage reads.

Operations work on ``(rows, cols)`` or ``(rows, cols, bands)`` arrays and
always return ``float64`` arrays with missing values as NaN. Multi-band
slices are processed band by band.

Dependencies
------------
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
2026-10-19
"""

# Standard library
import inspect
import logging
import warnings
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Type

# Third-party
import numpy as np
from scipy import ndimage

# SEAGIS internal
from seagis.exceptions import ValidationError

logger = logging.getLogger(__name__)

#: Name of the operation which replaces fill values by NaN.
NODATA_FILTER = "NodataFilter"

_REGISTRY: Dict[str, Type['RasterOperation']] = {}


def register_operation(cls: Type['RasterOperation']) -> Type['RasterOperation']:
    """Class decorator registering an operation under its class name."""
    _REGISTRY[cls.__name__] = cls
    return cls


def available_operations() -> List[str]:
    """Names of all registered operations."""
    return sorted(_REGISTRY)


class RasterOperation(ABC):
    """Transform applied to one raster slice.

    Subclasses implement ``apply_band`` for a single 2D band; ``apply``
    handles multi-band slices.
    """

    @abstractmethod
    def apply_band(self, band: np.ndarray,
                   fill_value: Optional[float] = None) -> np.ndarray:
        """Transform a 2D float band. Missing values are NaN."""

    def apply(self, image: np.ndarray,
              fill_value: Optional[float] = None) -> np.ndarray:
        """Transform a ``(rows, cols)`` or ``(rows, cols, bands)`` slice.

        Parameters
        ----------
        image : np.ndarray
            Raster slice.
        fill_value : float, optional
            Sentinel marking missing pixels in the raw data.

        Returns
        -------
        np.ndarray
            ``float64`` array of the same shape.
        """
        image = np.asarray(image, dtype=np.float64)
        if image.ndim == 2:
            return self.apply_band(image, fill_value)
        if image.ndim != 3:
            raise ValidationError(
                f"Expected a 2D or 3D raster slice, got shape {image.shape}"
            )
        bands = [self.apply_band(image[..., b], fill_value)
                 for b in range(image.shape[2])]
        return np.stack(bands, axis=-1)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


@register_operation
class NodataFilter(RasterOperation):
    """Replace the fill value and non-finite pixels by NaN."""

    def apply_band(self, band: np.ndarray,
                   fill_value: Optional[float] = None) -> np.ndarray:
        out = np.array(band, dtype=np.float64, copy=True)
        if fill_value is not None and not np.isnan(fill_value):
            out[out == fill_value] = np.nan
        out[~np.isfinite(out)] = np.nan
        return out


@register_operation
class GradientMagnitude(RasterOperation):
    """Magnitude of the Sobel gradient, in value units per pixel.

    Pixels adjacent to missing data are missing.

    Parameters
    ----------
    scale : float, default=1.0
        Factor applied to the magnitude (e.g. to convert per pixel into
        per kilometre).
    """

    def __init__(self, scale: float = 1.0) -> None:
        self.scale = float(scale)

    def apply_band(self, band: np.ndarray,
                   fill_value: Optional[float] = None) -> np.ndarray:
        sx = ndimage.sobel(band, axis=1, mode='nearest')
        sy = ndimage.sobel(band, axis=0, mode='nearest')
        return np.hypot(sx, sy) * (self.scale / 8.0)

    def __repr__(self) -> str:
        return f"GradientMagnitude(scale={self.scale})"


@register_operation
class GaussianSmooth(RasterOperation):
    """Gaussian smoothing which ignores missing pixels.

    Missing pixels stay missing; valid pixels are averaged with their
    valid neighbours only.

    Parameters
    ----------
    sigma : float, default=1.0
        Standard deviation of the kernel, in pixels.
    """

    def __init__(self, sigma: float = 1.0) -> None:
        if sigma <= 0:
            raise ValidationError(f"sigma must be > 0, got {sigma}")
        self.sigma = float(sigma)

    def apply_band(self, band: np.ndarray,
                   fill_value: Optional[float] = None) -> np.ndarray:
        valid = np.isfinite(band)
        data = np.where(valid, band, 0.0)
        weights = ndimage.gaussian_filter(valid.astype(np.float64), self.sigma)
        smoothed = ndimage.gaussian_filter(data, self.sigma)
        with np.errstate(divide='ignore', invalid='ignore'):
            out = smoothed / weights
        out[~valid] = np.nan
        return out

    def __repr__(self) -> str:
        return f"GaussianSmooth(sigma={self.sigma})"


class RasterPipeline(RasterOperation):
    """Sequential chain of raster operations.

    Parameters
    ----------
    steps : Sequence[RasterOperation]
        Operations applied in order. Must not be empty.
    """

    def __init__(self, steps: Sequence[RasterOperation]) -> None:
        if not steps:
            raise ValidationError("RasterPipeline requires at least one operation")
        self._steps: List[RasterOperation] = list(steps)

    @property
    def steps(self) -> List[RasterOperation]:
        return list(self._steps)

    def apply_band(self, band: np.ndarray,
                   fill_value: Optional[float] = None) -> np.ndarray:
        result = band
        for step in self._steps:
            result = step.apply_band(result, fill_value)
        return result

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return f"RasterPipeline({[type(s).__name__ for s in self._steps]})"


def build_operation_chain(
    name: str,
    parameters: Optional[Mapping[str, Any]] = None,
) -> RasterPipeline:
    """Build the pipeline named by a processor operation string.

    Parameters
    ----------
    name : str
        Operation names separated by ``';'``, e.g.
        ``'NodataFilter;GradientMagnitude'``.
    parameters : Mapping[str, Any], optional
        Keyword arguments given to every operation which accepts them.

    Returns
    -------
    RasterPipeline
        The chained operations.

    Raises
    ------
    ValidationError
        If a name is not registered or the chain is empty.
    """
    parameters = dict(parameters or {})
    steps = []
    used = set()
    for part in name.split(';'):
        part = part.strip()
        if not part:
            continue
        cls = _REGISTRY.get(part)
        if cls is None:
            raise ValidationError(
                f"Unknown raster operation '{part}'. "
                f"Available: {', '.join(available_operations())}"
            )
        steps.append(_instantiate(cls, parameters, used))
    unused = sorted(set(parameters) - used)
    if unused:
        warnings.warn(
            f"Operation parameter(s) {', '.join(unused)} not used by '{name}'",
            UserWarning,
        )
    logger.debug("Operation chain %r -> %d steps", name, len(steps))
    return RasterPipeline(steps)


def _instantiate(cls: Type[RasterOperation], parameters: Dict[str, Any],
                 used: Set[str]) -> RasterOperation:
    if cls.__init__ is object.__init__:
        return cls()
    accepted = {
        p.name for p in inspect.signature(cls).parameters.values()
        if p.kind in (p.POSITIONAL_OR_KEYWORD, p.KEYWORD_ONLY)
    }
    kwargs = {k: v for k, v in parameters.items() if k in accepted}
    used.update(kwargs)
    return cls(**kwargs)
