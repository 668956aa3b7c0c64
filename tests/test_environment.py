# -*- coding: utf-8 -*-
"""
Environment Tests - Task scheduling and environment table filling.

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
2026-10-11

Modified
--------
2026-10-17
"""

# Standard library
import logging
from datetime import datetime, timedelta

# Third-party
import numpy as np
import pytest

# SEAGIS internal
from seagis.catalog import (
    InMemoryCatalog,
    OperationEntry,
    ParameterEntry,
    RelativePositionEntry,
    SampleEntry,
    SeriesEntry,
)
from seagis.coverage import GridCoverageProvider, GridSeries, ParameterCoverage3D
from seagis.environment import (
    EnvironmentTableFiller,
    SamplePosition,
    column_name,
    schedule,
)

DAYS = [datetime(1999, 1, 1), datetime(1999, 1, 2), datetime(1999, 1, 3)]


def ramp(name, fill_first=False):
    """``lon + 10 * day`` over lon 0..10, lat -5..5."""
    lons = np.linspace(0.0, 10.0, 11)
    lats = np.linspace(-5.0, 5.0, 11)
    lon2d, _ = np.meshgrid(lons, lats)
    data = np.stack([lon2d + 10.0 * t for t in range(3)])
    if fill_first:
        data[0] = -999.0
    return GridSeries(name, lons, lats, DAYS, data, fill_value=-999.0)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def positions():
    """Same time and two days before."""
    return [
        RelativePositionEntry(1, '', time_offset=timedelta(0)),
        RelativePositionEntry(2, '-2d', time_offset=timedelta(days=-2)),
    ]


@pytest.fixture
def catalog():
    """Catalog with SST parameters and four samples."""
    cat = InMemoryCatalog()
    cat.add_parameter(ParameterEntry(1, 'SST', series=(SeriesEntry(1, 'sst'),)))
    cat.add_parameter(ParameterEntry(2, 'Cloudy', series=(SeriesEntry(2, 'cloudy'),)))
    cat.add_operation(OperationEntry(1, 'Gradient', column_prefix='grad_',
                                     processor_operation='GradientMagnitude'))
    cat.add_sample(SampleEntry(1, (2.5, 0.0), datetime(1999, 1, 2, 6), {'YFT': 1}))
    cat.add_sample(SampleEntry(2, (50.0, 0.0), datetime(1999, 1, 2, 6), {'YFT': 1}))
    cat.add_sample(SampleEntry(3, (60.0, 0.0), datetime(1999, 1, 2, 6), {'YFT': 1}))
    cat.add_sample(SampleEntry(4, (5.0, 1.0), datetime(1999, 1, 1, 3), {'SKJ': 2}))
    return cat


@pytest.fixture
def coverage(catalog):
    """Parameter coverage over the sst and cloudy series."""
    provider = GridCoverageProvider([ramp('sst'), ramp('cloudy', fill_first=True)])
    return ParameterCoverage3D(catalog, provider)


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------

class TestSchedule:
    """Tests for task expansion and ordering."""

    def test_time_order(self, positions):
        """Task times never decrease."""
        samples = [
            SampleEntry(i, (0.0, 0.0), datetime(1999, 1, day))
            for i, day in enumerate((5, 1, 3), start=1)
        ]
        tasks = schedule(samples, positions)
        assert len(tasks) == 6
        times = [t.time for t in tasks]
        assert times == sorted(times)
        assert tasks[0].sample.id == 2
        assert tasks[0].position.name == '-2d'

    def test_without_positions(self):
        """One task per sample without a position."""
        samples = [SampleEntry(1, (0, 0), datetime(1999, 1, 2)),
                   SampleEntry(2, (0, 0), datetime(1999, 1, 1))]
        tasks = schedule(samples)
        assert [t.sample.id for t in tasks] == [2, 1]
        assert all(t.position is None for t in tasks)

    def test_ties_keep_order(self, positions):
        """Equal times keep sample order."""
        samples = [SampleEntry(i, (0, 0), datetime(1999, 1, 1)) for i in (3, 1, 2)]
        tasks = schedule(samples, positions[:1])
        assert [t.sample.id for t in tasks] == [3, 1, 2]

    def test_typical_offset(self, positions):
        """Task time is the sample time plus the typical offset."""
        sample = SampleEntry(1, (0, 0), datetime(1999, 1, 10))
        task = SamplePosition.create(sample, positions[1])
        assert task.time == datetime(1999, 1, 8)


def test_column_name(positions):
    """Prefix, parameter name and position suffix."""
    sst = ParameterEntry(1, 'SST', series=(SeriesEntry(1, 'sst'),))
    grad = OperationEntry(1, 'Gradient', column_prefix='grad_')
    assert column_name(sst) == 'SST'
    assert column_name(sst, grad, positions[1]) == 'grad_SST-2d'


# ---------------------------------------------------------------------------
# Filling
# ---------------------------------------------------------------------------

class TestEnvironmentTableFiller:
    """Tests for evaluating and storing sample environments."""

    def test_fill_values(self, catalog, coverage):
        """Inside values are written under the parameter column."""
        filler = EnvironmentTableFiller(catalog, coverage)
        filler.add_parameter(catalog.get_parameter('SST'))
        report = filler.run()
        assert report.evaluated == 4
        assert report.written == 2
        assert report.outside == 2
        assert catalog.values[(1, 'SST')] == pytest.approx(12.5)
        assert catalog.values[(4, 'SST')] == pytest.approx(5.0)
        assert (2, 'SST') not in catalog.values

    def test_positions_and_operation(self, catalog, coverage, positions):
        """Columns carry the operation prefix and position suffix."""
        filler = EnvironmentTableFiller(catalog, coverage)
        filler.add_parameter(catalog.get_parameter('SST'),
                             catalog.get_operation('Gradient'), positions)
        filler.run([catalog.get_samples()[0]])
        assert catalog.values[(1, 'grad_SST')] == pytest.approx(1.0)
        assert catalog.values[(1, 'grad_SST-2d')] == pytest.approx(1.0)

    def test_missing_not_written(self, catalog, coverage):
        """NaN values are counted but not written."""
        filler = EnvironmentTableFiller(catalog, coverage)
        filler.add_parameter(catalog.get_parameter('Cloudy'))
        report = filler.run(catalog.get_samples(species=['SKJ']))
        assert report.missing == 1
        assert report.written == 0
        assert catalog.values == {}

    def test_outside_warned_once(self, catalog, coverage, caplog):
        """One warning per coverage, however many samples are outside."""
        filler = EnvironmentTableFiller(catalog, coverage)
        filler.add_parameter(catalog.get_parameter('SST'))
        with caplog.at_level(logging.WARNING, logger='seagis.environment.filler'):
            filler.run()
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert 'sst' in warnings[0].getMessage()
