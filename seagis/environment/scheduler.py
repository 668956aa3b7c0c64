# -*- coding: utf-8 -*-
"""
Evaluation Scheduler - Order sample and position pairs by evaluation time.

Gridded coverages cache the pair of images bracketing the last requested
date, so evaluating tasks in increasing time order reads each image about
once. ``schedule`` expands samples and relative positions into
``SamplePosition`` tasks sorted by the time at which each will be read.

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
2026-10-12
"""

# Standard library
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

# SEAGIS internal
from seagis.catalog.models import RelativePositionEntry, SampleEntry, as_seconds


@dataclass(frozen=True)
class SamplePosition:
    """One evaluation task: a sample seen through a relative position.

    Attributes
    ----------
    sample : SampleEntry
        Sample to evaluate.
    position : RelativePositionEntry or None
        Relative position, None to evaluate at the sample itself.
    time : datetime
        Sample time shifted by the position's typical time offset.
    """

    sample: SampleEntry
    position: Optional[RelativePositionEntry]
    time: datetime

    @classmethod
    def create(cls, sample: SampleEntry,
               position: Optional[RelativePositionEntry] = None) -> 'SamplePosition':
        time = sample.time
        if position is not None:
            time = time + position.typical_time_offset
        return cls(sample, position, time)


def schedule(
    samples: Iterable[SampleEntry],
    positions: Optional[Iterable[RelativePositionEntry]] = None,
) -> List[SamplePosition]:
    """Expand and sort evaluation tasks.

    Parameters
    ----------
    samples : Iterable[SampleEntry]
        Samples to evaluate.
    positions : Iterable[RelativePositionEntry], optional
        Relative positions. Empty or None gives one task per sample with
        ``position=None``.

    Returns
    -------
    List[SamplePosition]
        Tasks by non-decreasing ``time``. Ties keep the sample order,
        then the position order.
    """
    positions = list(positions or [])
    if positions:
        tasks = [SamplePosition.create(s, p) for s in samples for p in positions]
    else:
        tasks = [SamplePosition.create(s) for s in samples]
    tasks.sort(key=lambda task: as_seconds(task.time))
    return tasks
