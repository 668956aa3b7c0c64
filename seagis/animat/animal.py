# -*- coding: utf-8 -*-
"""
Tuna Animat - Agent perceiving its environment and moving over the ocean.

Provides ``Tuna``, an animal following a ``GeodeticTrajectory``. At each
time step it observes every configured parameter over its perception
area (a square of ``PERCEPTION_RADIUS`` metres around its position),
then heads for the most attractive observation.

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
2026-10-13

Modified
--------
2026-10-17
"""

# Standard library
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

# Third-party
import numpy as np
from shapely.geometry.base import BaseGeometry

# SEAGIS internal
from seagis.animat.config import Configuration
from seagis.animat.environment import Environment
from seagis.geodesy.trajectory import GeodeticTrajectory
from seagis.vocabulary import EvaluatorKind

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True)
class Observation:
    """Reduced value of one parameter over a perception area.

    ``location`` is where the value was observed (maximum evaluator), or
    None when the value is not tied to a point (average evaluator).
    """

    value: float
    location: Optional[Point] = None


def _grid(area: BaseGeometry, resolution: float) -> List[Point]:
    xmin, ymin, xmax, ymax = area.bounds
    nx = max(2, int(math.ceil((xmax - xmin) / resolution)) + 1)
    ny = max(2, int(math.ceil((ymax - ymin) / resolution)) + 1)
    return [(float(x), float(y))
            for y in np.linspace(ymin, ymax, ny)
            for x in np.linspace(xmin, xmax, nx)]


class Tuna:
    """
    A tuna of one species.

    Parameters
    ----------
    species : str
        Species code.
    position : Tuple[float, float]
        Initial ``(lon, lat)`` in degrees.
    configuration : Configuration
        Perception radius, resolution, daily distance and parameter
        weights.
    """

    def __init__(self, species: str, position: Point,
                 configuration: Configuration) -> None:
        self.species = species
        self.configuration = configuration
        self.path = GeodeticTrajectory(position)
        self.observations: Dict[int, Observation] = {}
        self.alive = True

    def get_location(self) -> Optional[Point]:
        return self.path.get_location()

    def perception_area(self) -> Optional[BaseGeometry]:
        """Square of ``perception_radius`` metres around the position, in degrees."""
        r = self.configuration.perception_radius
        return self.path.relative_to_geographic((-r, -r, r, r))

    def observe(self, environment: Environment) -> Dict[int, Observation]:
        """Observe every parameter over the perception area.

        Returns
        -------
        Dict[int, Observation]
            Observation per parameter index. Parameters without any valid
            value in the area are absent.
        """
        self.observations = {}
        area = self.perception_area()
        if area is None:
            return self.observations
        points = _grid(area, self.configuration.resolution)
        for index, parameter in enumerate(environment.parameters):
            values = np.array([environment.evaluate(index, p) for p in points])
            valid = np.isfinite(values)
            if not valid.any():
                continue
            if parameter.evaluator is EvaluatorKind.AVERAGE:
                self.observations[index] = Observation(float(values[valid].mean()))
            else:
                best = int(np.nanargmax(np.where(valid, values, np.nan)))
                self.observations[index] = Observation(float(values[best]), points[best])
        return self.observations

    def move(self, duration: float) -> None:
        """Move for ``duration`` days.

        Heads toward the located observation with the largest weighted
        value, or goes straight ahead when nothing located was observed.
        """
        distance = self.configuration.daily_distance * duration
        parameters = self.configuration.parameters
        target = None
        best = -math.inf
        for index, observation in self.observations.items():
            if observation.location is None:
                continue
            score = parameters[index].weight * observation.value
            if score > best:
                best = score
                target = observation.location
        if target is None:
            self.path.move(distance)
        else:
            self.path.move_toward(distance, target)

    def __repr__(self) -> str:
        location = self.get_location()
        return f"Tuna({self.species!r}, {location})"
