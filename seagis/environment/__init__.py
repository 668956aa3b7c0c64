# -*- coding: utf-8 -*-
"""
Environment Module - Environmental values at fishery samples.

Key Classes
-----------
- SamplePosition: Sample and relative position evaluation task
- EnvironmentTableFiller: Evaluates parameters and stores the values

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
2026-10-10

Modified
--------
2026-10-11
"""

from seagis.environment.filler import EnvironmentTableFiller, FillReport, column_name
from seagis.environment.scheduler import SamplePosition, schedule

__all__ = [
    'EnvironmentTableFiller',
    'FillReport',
    'column_name',
    'SamplePosition',
    'schedule',
]
