# -*- coding: utf-8 -*-
"""
Animat Population - The set of tunas of a simulation.

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
2026-10-16
"""

# Standard library
import logging
import threading
from typing import Iterable, Iterator, List, Optional, Tuple

# SEAGIS internal
from seagis.animat.animal import Tuna
from seagis.animat.config import Configuration
from seagis.animat.environment import Environment
from seagis.catalog.models import SampleEntry

logger = logging.getLogger(__name__)


class Population:
    """Tunas moving together through one environment.

    Parameters
    ----------
    configuration : Configuration
        Shared by every animal of the population.
    """

    def __init__(self, configuration: Configuration) -> None:
        self.configuration = configuration
        self._animals: List[Tuna] = []
        self._lock = threading.RLock()

    @classmethod
    def from_samples(cls, samples: Iterable[SampleEntry],
                     configuration: Configuration) -> 'Population':
        """One tuna per configured species caught in each sample."""
        population = cls(configuration)
        for sample in samples:
            for species in configuration.species:
                if sample.amounts.get(species, 0) > 0:
                    population.add(Tuna(species, sample.coordinate, configuration))
        return population

    def add(self, animal: Tuna) -> None:
        with self._lock:
            self._animals.append(animal)

    def kill(self, animal: Tuna) -> None:
        """Remove an animal from the population."""
        with self._lock:
            self._animals.remove(animal)
            animal.alive = False

    def __len__(self) -> int:
        with self._lock:
            return len(self._animals)

    def __iter__(self) -> Iterator[Tuna]:
        with self._lock:
            return iter(list(self._animals))

    def observe(self, environment: Environment) -> None:
        """Let every animal observe its perception area."""
        for animal in self:
            animal.observe(environment)

    def evolve(self, duration: float) -> None:
        """Move every animal for ``duration`` days."""
        for animal in self:
            animal.move(duration)

    def get_bounds(self) -> Optional[Tuple[float, float, float, float]]:
        """``(xmin, ymin, xmax, ymax)`` in degrees enclosing every path."""
        bounds = [b for b in (a.path.get_bounds2d() for a in self) if b is not None]
        if not bounds:
            return None
        return (
            min(b[0] for b in bounds), min(b[1] for b in bounds),
            max(b[2] for b in bounds), max(b[3] for b in bounds),
        )
