# -*- coding: utf-8 -*-
"""
Animat Module - Tuna agents moving through environmental fields.

Key Classes
-----------
- Configuration: Parsed simulation configuration file
- Clock: Time steps
- Environment: Per-step memoized parameter evaluation
- Tuna: Agent following a geodetic trajectory
- Population: Set of agents
- Simulation: Observe, move, advance loop

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
2026-10-12

Modified
--------
2026-10-14
"""

from seagis.animat.animal import Observation, Tuna
from seagis.animat.clock import Clock
from seagis.animat.config import AnimatParameter, Configuration
from seagis.animat.environment import Environment, EnvironmentReport
from seagis.animat.population import Population
from seagis.animat.simulation import Simulation

__all__ = [
    'Observation',
    'Tuna',
    'Clock',
    'AnimatParameter',
    'Configuration',
    'Environment',
    'EnvironmentReport',
    'Population',
    'Simulation',
]
