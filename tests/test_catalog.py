# -*- coding: utf-8 -*-
"""
Catalog Tests - Entries, lookups and persisted environment values.

Tests ID-based equality of catalog entries, parameter validation,
descriptor normalization, relative position offsets, in-memory lookups
and sample filtering, and the SQLite persistence of samples and values.

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
2026-10-17
"""

# Standard library
import math
from datetime import datetime, timedelta, timezone

# Third-party
import pytest

# SEAGIS internal
from seagis.catalog import (
    IDENTITY,
    DescriptorEntry,
    InMemoryCatalog,
    LinearModelTerm,
    ParameterEntry,
    RelativePositionEntry,
    SampleEntry,
    SeriesEntry,
    SQLiteCatalog,
)
from seagis.catalog.models import as_seconds, as_utc
from seagis.exceptions import CatalogError, ValidationError
from seagis.vocabulary import Distribution


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sst():
    """Primary SST series."""
    return SeriesEntry(1, 'SST', period=1.0)


@pytest.fixture
def samples():
    """Three samples on consecutive days with mixed species."""
    return [
        SampleEntry(1, (55.0, -20.0), datetime(1999, 1, 1, 6), {'YFT': 2.0}),
        SampleEntry(2, (56.0, -21.0), datetime(1999, 1, 2, 6), {'SKJ': 5.0}),
        SampleEntry(3, (57.0, -22.0), datetime(1999, 1, 3, 6),
                    {'YFT': 1.0, 'SKJ': 4.0}),
    ]


@pytest.fixture
def catalog(sst, samples):
    """In-memory catalog with one parameter and three samples."""
    cat = InMemoryCatalog()
    cat.add_parameter(ParameterEntry(10, 'SST', series=(sst,)))
    cat.add_relative_position(RelativePositionEntry(
        3, '-5d', time_offset=timedelta(days=-5),
    ))
    for sample in samples:
        cat.add_sample(sample)
    return cat


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------

class TestEntries:
    """Tests for catalog entry dataclasses."""

    def test_equality_by_id(self):
        """Entries with the same id are equal whatever their other fields."""
        a = SeriesEntry(1, 'SST')
        b = SeriesEntry(1, 'SST (NRT)', period=8.0)
        assert a == b
        assert hash(a) == hash(b)
        assert a != SeriesEntry(2, 'SST')

    def test_parameter_requires_source(self):
        """A parameter needs a series or a linear model."""
        with pytest.raises(ValidationError, match="neither a series"):
            ParameterEntry(1, 'SST')

    def test_parameter_negative_band(self, sst):
        """Band indexes are zero-based."""
        with pytest.raises(ValidationError, match="band"):
            ParameterEntry(1, 'SST', series=(sst,), band=-1)

    def test_identity_parameter(self):
        """The identity parameter needs no source."""
        assert IDENTITY.is_identity
        assert IDENTITY.get_series() is None

    def test_series_become_tuple(self, sst):
        """Series lists are stored as tuples."""
        param = ParameterEntry(1, 'SST', series=[sst])
        assert param.series == (sst,)
        assert param.get_series(0) is sst
        assert param.get_series(1) is None

    def test_identity_term(self):
        """Terms without or with only identity descriptors are constants."""
        identity = DescriptorEntry(1, 'one')
        assert LinearModelTerm(2.0).is_identity
        assert LinearModelTerm(2.0, (identity,)).is_identity

    def test_sample_properties(self, samples):
        """Total catch and dominant species."""
        sample = samples[2]
        assert sample.value == 5.0
        assert sample.dominant_species == 'SKJ'
        assert sample.to_dict()['lon'] == 57.0
        assert SampleEntry(9, (0, 0), datetime(2000, 1, 1)).dominant_species is None


class TestNormalize:
    """Tests for descriptor distributions."""

    def test_normal(self):
        """NORMAL leaves values unchanged."""
        d = DescriptorEntry(1, 'sst', scale=3.0)
        assert d.normalize(4.0) == 4.0

    def test_scaled(self):
        """SCALED is an affine transform."""
        d = DescriptorEntry(1, 'sst', distribution=Distribution.SCALED,
                            scale=2.0, offset=1.0)
        assert d.normalize(4.0) == 9.0

    def test_log_scaled(self):
        """LOG_SCALED is the logarithm of the affine transform."""
        d = DescriptorEntry(1, 'chl', distribution=Distribution.LOG_SCALED,
                            scale=1.0, offset=1.0)
        assert d.normalize(math.e - 1) == pytest.approx(1.0)

    def test_log_of_zero_and_negative(self):
        """log(0) is -inf and log of a negative number is NaN."""
        d = DescriptorEntry(1, 'chl', distribution=Distribution.LOG_SCALED)
        assert d.normalize(0.0) == -math.inf
        assert math.isnan(d.normalize(-1.0))


class TestRelativePosition:
    """Tests for spatio-temporal offsets."""

    def test_apply_and_reverse(self):
        """reverse_offset undoes apply_offset."""
        pos = RelativePositionEntry(1, 'p', time_offset=timedelta(days=-3),
                                    dx=0.5, dy=-0.25)
        t = datetime(1999, 1, 10)
        point, time = pos.apply_offset((10.0, 20.0), t)
        assert point == (10.5, 19.75)
        assert time == datetime(1999, 1, 7)
        assert pos.reverse_offset(point, time) == ((10.0, 20.0), t)

    def test_offset_days(self):
        """Nominal offset in days."""
        pos = RelativePositionEntry(1, 'p', time_offset=timedelta(hours=-36))
        assert pos.offset_days == -1.5

    def test_sample_accessors(self, samples):
        """Coordinate and time of a sample's read."""
        pos = RelativePositionEntry(1, 'p', time_offset=timedelta(days=1), dx=1.0)
        assert pos.get_coordinate(samples[0]) == (56.0, -20.0)
        assert pos.get_time(samples[0]) == datetime(1999, 1, 2, 6)


def test_naive_times_are_utc():
    """Naive datetimes are read as UTC."""
    naive = datetime(1999, 1, 1)
    aware = datetime(1999, 1, 1, 4, tzinfo=timezone(timedelta(hours=4)))
    assert as_seconds(naive) == as_seconds(aware)
    assert as_utc(naive).tzinfo is timezone.utc


# ---------------------------------------------------------------------------
# In-memory catalog
# ---------------------------------------------------------------------------

class TestInMemoryCatalog:
    """Tests for lookups and sample queries."""

    def test_lookup_by_name_and_id(self, catalog, sst):
        """Entries are found by name or by id."""
        assert catalog.get_parameter('SST') == catalog.get_parameter(10)
        assert catalog.get_series('SST') is sst
        assert catalog.get_relative_position('-5d').offset_days == -5.0

    def test_unknown_key(self, catalog):
        """Unknown keys raise CatalogError."""
        with pytest.raises(CatalogError, match="No parameter"):
            catalog.get_parameter('CHL')
        with pytest.raises(CatalogError):
            catalog.get_operation(1)

    def test_parameter_registers_series(self, catalog, sst):
        """Adding a parameter registers its series."""
        assert catalog.list_series() == [sst]
        assert len(catalog.list_parameters()) == 1

    def test_samples_by_species(self, catalog):
        """Only samples with a positive catch of the species are kept."""
        ids = [s.id for s in catalog.get_samples(species=['YFT'])]
        assert ids == [1, 3]

    def test_samples_by_time(self, catalog):
        """The time range is half open."""
        found = catalog.get_samples(time_range=(
            datetime(1999, 1, 1, 6), datetime(1999, 1, 3, 6),
        ))
        assert [s.id for s in found] == [1, 2]

    def test_set_value(self, catalog, samples):
        """Values are stored per sample and column."""
        catalog.set_value(samples[0], 'SST', 24.5)
        assert catalog.get_value(samples[0], 'SST') == 24.5
        assert catalog.get_value(samples[1], 'SST') is None

    def test_context_manager(self):
        """Catalogs are context managers."""
        with InMemoryCatalog() as cat:
            assert cat.list_operations() == []


# ---------------------------------------------------------------------------
# SQLite catalog
# ---------------------------------------------------------------------------

class TestSQLiteCatalog:
    """Tests for persisted samples and values."""

    def test_values_persist(self, tmp_path, samples):
        """Samples and values are reloaded from the database file."""
        db = tmp_path / 'env.db'
        with SQLiteCatalog(db) as cat:
            for sample in samples:
                cat.add_sample(sample)
            cat.set_value(samples[0], 'SST', 24.5)
            cat.set_value(samples[1], 'SST', True)

        with SQLiteCatalog(db) as cat:
            assert len(cat.get_samples()) == 3
            reloaded = cat.get_samples(species=['SKJ'])
            assert [s.id for s in reloaded] == [2, 3]
            assert reloaded[1].amounts == {'YFT': 1.0, 'SKJ': 4.0}
            assert cat.get_value(samples[0], 'SST') == 24.5
            assert cat.get_value(samples[1], 'SST') == 1.0
            assert cat.get_value(samples[2], 'SST') is None

    def test_query_environment(self, samples):
        """Values are grouped by sample, optionally by column."""
        with SQLiteCatalog(':memory:') as cat:
            cat.set_value(samples[0], 'SST', 24.5)
            cat.set_value(samples[0], 'CHL', 0.2)
            cat.set_value(samples[1], 'SST', 25.0)
            assert cat.query_environment() == {
                1: {'SST': 24.5, 'CHL': 0.2}, 2: {'SST': 25.0},
            }
            assert cat.query_environment('CHL') == {1: {'CHL': 0.2}}

    def test_closed(self, samples):
        """Writing to a closed catalog raises CatalogError."""
        cat = SQLiteCatalog(':memory:')
        cat.close()
        cat.close()
        with pytest.raises(CatalogError, match="closed"):
            cat.set_value(samples[0], 'SST', 1.0)
