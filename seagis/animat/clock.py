# -*- coding: utf-8 -*-
"""
Simulation Clock - Time steps of an animat simulation.

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
2026-10-12
"""

# Standard library
from datetime import datetime, timedelta
from typing import Tuple

# SEAGIS internal
from seagis.exceptions import ValidationError


class Clock:
    """Start time, step duration and current step number.

    Parameters
    ----------
    start : datetime
        Start of the first time step.
    step : timedelta
        Duration of a time step. Must be positive.

    Examples
    --------
    >>> clock = Clock(datetime(1999, 1, 1), timedelta(days=1))
    >>> clock.next_step()
    >>> clock.time
    datetime.datetime(1999, 1, 2, 0, 0)
    """

    def __init__(self, start: datetime, step: timedelta) -> None:
        if step <= timedelta(0):
            raise ValidationError(f"Time step must be positive, got {step}")
        self.start = start
        self.step = step
        self.step_number = 0

    @property
    def time(self) -> datetime:
        """Start of the current time step."""
        return self.start + self.step * self.step_number

    @property
    def time_range(self) -> Tuple[datetime, datetime]:
        """``(start, end)`` of the current time step."""
        time = self.time
        return (time, time + self.step)

    @property
    def step_days(self) -> float:
        """Duration of a time step in days."""
        return self.step.total_seconds() / 86400.0

    def next_step(self) -> None:
        """Advance to the next time step."""
        self.step_number += 1

    def __repr__(self) -> str:
        return f"Clock(step {self.step_number}, {self.time.isoformat()})"
