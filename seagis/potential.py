# -*- coding: utf-8 -*-
"""
Potential Maps - Render a parameter coverage as a georeferenced image.

Provides ``PotentialImageGenerator``, which evaluates a
``ParameterCoverage3D`` (typically a derived fishing potential) on a
regular longitude/latitude grid at one date and saves the result as an
image with a blue-white-red palette.

Dependencies
------------
matplotlib

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
2026-10-15

Modified
--------
2026-10-18
"""

# Standard library
import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple, Union

# Third-party
import numpy as np

# SEAGIS internal
from seagis.coverage.base import Envelope
from seagis.coverage.combination import CombinationCoverage3D
from seagis.exceptions import DependencyError, PointOutsideCoverageError, ValidationError

logger = logging.getLogger(__name__)

Bounds = Tuple[float, float, float, float]

#: Palette of potential maps, from low to high values.
POTENTIAL_COLORS = ('#0000ff', '#ffffff', '#ff0000')


class PotentialImageGenerator:
    """
    Evaluate and save a coverage on a regular grid.

    Parameters
    ----------
    coverage : CombinationCoverage3D
        Coverage with its parameter already set.

    Examples
    --------
    >>> generator = PotentialImageGenerator(coverage)
    >>> grid = generator.evaluate_grid((50, -25, 60, -15), 0.1, datetime(1999, 3, 1))
    >>> generator.save('potential.png', grid, (50, -25, 60, -15))
    """

    def __init__(self, coverage: CombinationCoverage3D) -> None:
        self.coverage = coverage

    def default_bounds(self) -> Bounds:
        """Spatial bounds of the coverage envelope."""
        env: Envelope = self.coverage.get_envelope()
        return (env.xmin, env.ymin, env.xmax, env.ymax)

    def evaluate_grid(self, bounds: Optional[Bounds], resolution: float,
                      time: datetime) -> np.ndarray:
        """Evaluate the coverage at pixel centres.

        Parameters
        ----------
        bounds : Tuple[float, float, float, float], optional
            ``(xmin, ymin, xmax, ymax)`` in degrees. Defaults to the
            coverage envelope.
        resolution : float
            Pixel size in degrees.
        time : datetime
            Evaluation date.

        Returns
        -------
        np.ndarray
            ``(rows, cols)`` grid, north row first. Points outside the
            coverage are NaN.

        Raises
        ------
        ValidationError
            If the resolution is not positive or the bounds are empty.
        """
        if resolution <= 0:
            raise ValidationError(f"Resolution must be > 0, got {resolution}")
        if bounds is None:
            bounds = self.default_bounds()
        xmin, ymin, xmax, ymax = bounds
        if xmax <= xmin or ymax <= ymin:
            raise ValidationError(f"Empty bounds {bounds}")
        cols = max(1, int(math.ceil((xmax - xmin) / resolution)))
        rows = max(1, int(math.ceil((ymax - ymin) / resolution)))
        lons = xmin + (np.arange(cols) + 0.5) * resolution
        lats = ymax - (np.arange(rows) + 0.5) * resolution
        grid = np.full((rows, cols), np.nan)
        outside = 0
        for r, lat in enumerate(lats):
            for c, lon in enumerate(lons):
                try:
                    grid[r, c] = self.coverage.evaluate_value((float(lon), float(lat)), time)
                except PointOutsideCoverageError:
                    outside += 1
        logger.info("Evaluated %dx%d grid of %s at %s (%d points outside)",
                    rows, cols, self.coverage.name, time, outside)
        return grid

    def save(self, path: Union[str, Path], grid: np.ndarray, bounds: Bounds,
             title: Optional[str] = None, vmin: Optional[float] = None,
             vmax: Optional[float] = None) -> Path:
        """Save a grid as an image file (format from the file extension).

        Raises
        ------
        DependencyError
            If matplotlib is not installed.
        """
        try:
            from matplotlib.backends.backend_agg import FigureCanvasAgg
            from matplotlib.colors import LinearSegmentedColormap
            from matplotlib.figure import Figure
        except ImportError as e:
            raise DependencyError(
                "matplotlib is required to save potential maps. "
                "Install with: pip install matplotlib"
            ) from e

        path = Path(path)
        cmap = LinearSegmentedColormap.from_list('potential', POTENTIAL_COLORS)
        cmap.set_bad(color='#c0c0c0')
        fig = Figure(figsize=(8, 6))
        FigureCanvasAgg(fig)
        ax = fig.add_subplot(1, 1, 1)
        xmin, ymin, xmax, ymax = bounds
        image = ax.imshow(
            np.ma.masked_invalid(grid), cmap=cmap, vmin=vmin, vmax=vmax,
            extent=(xmin, xmax, ymin, ymax), origin='upper', aspect='auto',
        )
        fig.colorbar(image, ax=ax)
        ax.set_xlabel('Longitude (deg)')
        ax.set_ylabel('Latitude (deg)')
        ax.set_title(title or self.coverage.name)
        fig.savefig(str(path))
        logger.info("Saved potential map to %s", path)
        return path

    def create(self, path: Union[str, Path], time: datetime,
               resolution: float, bounds: Optional[Bounds] = None) -> Path:
        """Evaluate on a grid and save, titled with the parameter and date."""
        if bounds is None:
            bounds = self.default_bounds()
        grid = self.evaluate_grid(bounds, resolution, time)
        title = f"{self.coverage.name} {time:%Y-%m-%d}"
        return self.save(path, grid, bounds, title=title)
