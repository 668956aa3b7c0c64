# -*- coding: utf-8 -*-
"""
Animat Simulation - Drive a tuna population through time steps.

Provides ``Simulation``, which builds the clock, environment and initial
population from a configuration, then repeats observe, move and advance
for a number of time steps.

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
2026-10-14

Modified
--------
2026-10-17
"""

# Standard library
import logging
import time
from typing import Callable, Optional

# SEAGIS internal
from seagis.animat.clock import Clock
from seagis.animat.config import Configuration
from seagis.animat.environment import Environment
from seagis.animat.population import Population
from seagis.catalog.base import Catalog
from seagis.coverage.cache import SeriesCoverageCache
from seagis.coverage.provider import CoverageProvider

logger = logging.getLogger(__name__)


class Simulation:
    """
    Animat simulation over gridded environmental series.

    Parameters
    ----------
    name : str
        Simulation name, used in log messages.
    configuration : Configuration
        Parsed configuration.
    catalog : Catalog
        Resolves series and operations and supplies the samples seeding
        the population.
    provider : CoverageProvider
        Source of coverages.
    sleep : Callable[[float], None], optional
        Function waiting ``PAUSE`` seconds between steps. Defaults to
        ``time.sleep``.

    Examples
    --------
    >>> with Simulation('demo', Configuration.load('simulation.txt'),
    ...                 catalog, provider) as simulation:
    ...     simulation.run(30)
    """

    def __init__(
        self,
        name: str,
        configuration: Configuration,
        catalog: Catalog,
        provider: CoverageProvider,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.name = name
        self.configuration = configuration
        self.catalog = catalog
        self.clock = Clock(configuration.start_time, configuration.time_step)
        self.cache = SeriesCoverageCache(provider)
        self.environment = Environment(configuration, catalog, self.cache, self.clock)
        samples = catalog.get_samples(
            species=configuration.species, time_range=self.clock.time_range,
        )
        self.population = Population.from_samples(samples, configuration)
        self._sleep = sleep if sleep is not None else time.sleep
        logger.info("%s: initial population of %d animals", name, len(self.population))

    def step(self) -> None:
        """Run one time step: observe, move, then advance the clock."""
        self.population.observe(self.environment)
        self.population.evolve(self.clock.step_days)
        self.environment.next_time_step()

    def run(self, steps: int) -> None:
        """Run ``steps`` time steps, pausing ``PAUSE`` seconds between them."""
        for i in range(steps):
            self.step()
            logger.info("%s: step %d/%d done, now %s",
                        self.name, i + 1, steps, self.clock.time.date())
            if self.configuration.pause > 0 and i + 1 < steps:
                self._sleep(self.configuration.pause)
        logger.info("%s: %s", self.name, self.environment.report)

    def close(self) -> None:
        """Dispose coverages and close the catalog."""
        try:
            self.cache.clear()
        finally:
            self.catalog.close()
            logger.debug("%s: closed", self.name)

    def __enter__(self) -> 'Simulation':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
