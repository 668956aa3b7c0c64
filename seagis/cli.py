# -*- coding: utf-8 -*-
"""
Command Line Interface - Run simulations, fill tables and draw potential maps.

Series are read from ``<series name>.npz`` files in a data directory
(see ``GridSeries.to_npz``). Samples are read from a CSV file with the
columns ``id,lon,lat,time`` followed by one column per species holding the
catch amount.

Usage
-----
    seagis simulate --config simulation.txt --data ./series --samples catches.csv
    seagis fill --data ./series --samples catches.csv --db env.db --parameter SST
    seagis potential --series SST --date 1999-03-01 --file sst.png --data ./series

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
2026-10-19
"""

# Standard library
import argparse
import csv
import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Sequence

# SEAGIS internal
from seagis import __version__
from seagis.animat.config import Configuration
from seagis.animat.simulation import Simulation
from seagis.catalog.memory import InMemoryCatalog
from seagis.catalog.models import (
    OperationEntry,
    ParameterEntry,
    RelativePositionEntry,
    SampleEntry,
    SeriesEntry,
)
from seagis.catalog.sqlite import SQLiteCatalog
from seagis.coverage.operations import NODATA_FILTER, available_operations
from seagis.coverage.parameter import ParameterCoverage3D
from seagis.coverage.provider import GridCoverageProvider
from seagis.environment.filler import EnvironmentTableFiller
from seagis.exceptions import SeagisError, ValidationError
from seagis.potential import PotentialImageGenerator

logger = logging.getLogger(__name__)

_SAMPLE_COLUMNS = ('id', 'lon', 'lat', 'time')


def populate_catalog(catalog: InMemoryCatalog, provider: GridCoverageProvider) -> None:
    """Register one series and one direct parameter per gridded series,
    and one operation per registered raster operation."""
    for i, name in enumerate(provider.series_names, start=1):
        series = catalog.add_series(SeriesEntry(i, name))
        catalog.add_parameter(ParameterEntry(i, name, series=(series,)))
    for i, name in enumerate(available_operations(), start=1):
        if name == NODATA_FILTER:
            continue
        catalog.add_operation(OperationEntry(
            i, name, column_prefix=f"{name}_", processor_operation=name,
        ))


def read_samples(path: Path) -> List[SampleEntry]:
    """Read fishery samples from a CSV file.

    Raises
    ------
    ValueError
        If a required column is missing or a value cannot be parsed.
    """
    samples = []
    with open(path, newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        missing = [c for c in _SAMPLE_COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"{path}: missing column(s) {', '.join(missing)}")
        species = [c for c in reader.fieldnames if c not in _SAMPLE_COLUMNS]
        for row in reader:
            samples.append(SampleEntry(
                id=int(row['id']),
                coordinate=(float(row['lon']), float(row['lat'])),
                time=datetime.fromisoformat(row['time']),
                amounts={s: float(row[s]) for s in species if row.get(s)},
            ))
    return samples


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog='seagis',
        description="Tuna animat simulations and environmental parameter tools.",
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument(
        '-v', '--verbose', action='count', default=0,
        help="Increase log verbosity (-v info, -vv debug).",
    )
    sub = parser.add_subparsers(dest='command', required=True)

    sim = sub.add_parser('simulate', help="Run an animat simulation.")
    sim.add_argument('--config', type=Path, required=True,
                     help="Simulation configuration file.")
    sim.add_argument('--data', type=Path, required=True,
                     help="Directory of <series>.npz files.")
    sim.add_argument('--samples', type=Path, default=None,
                     help="CSV of catches seeding the population.")
    sim.add_argument('--steps', type=int, default=1,
                     help="Number of time steps (default: 1).")

    fill = sub.add_parser('fill', help="Store parameter values at samples.")
    fill.add_argument('--data', type=Path, required=True,
                      help="Directory of <series>.npz files.")
    fill.add_argument('--samples', type=Path, required=True,
                      help="CSV of samples.")
    fill.add_argument('--db', type=Path, required=True,
                      help="SQLite database receiving the values.")
    fill.add_argument('--parameter', action='append', required=True,
                      help="Parameter (series) name. May be repeated.")
    fill.add_argument('--operation', default=None,
                      help="Raster operation, e.g. GradientMagnitude.")
    fill.add_argument('--lag', type=float, action='append', default=None,
                      help="Time offset in days of a relative position. "
                           "May be repeated.")

    pot = sub.add_parser('potential', help="Save a potential map image.")
    pot.add_argument('--series', required=True, help="Parameter (series) name.")
    pot.add_argument('--date', required=True, help="Date as YYYY-MM-DD.")
    pot.add_argument('--file', type=Path, required=True, help="Output image file.")
    pot.add_argument('--data', type=Path, required=True,
                     help="Directory of <series>.npz files.")
    pot.add_argument('--operation', default=None,
                     help="Raster operation, e.g. GradientMagnitude.")
    pot.add_argument('--resolution', type=float, default=0.1,
                     help="Pixel size in degrees (default: 0.1).")
    return parser.parse_args(argv)


def _simulate(args: argparse.Namespace) -> int:
    configuration = Configuration.load(args.config)
    provider = GridCoverageProvider.from_directory(args.data)
    catalog = InMemoryCatalog()
    populate_catalog(catalog, provider)
    if args.samples is not None:
        for sample in read_samples(args.samples):
            catalog.add_sample(sample)
    with Simulation(args.config.stem, configuration, catalog, provider) as simulation:
        simulation.run(args.steps)
        for animal in simulation.population:
            location = animal.get_location()
            print(f"{animal.species}\t{location[0]:.4f}\t{location[1]:.4f}")
        print(simulation.environment.report)
    return 0


def _fill(args: argparse.Namespace) -> int:
    provider = GridCoverageProvider.from_directory(args.data)
    with SQLiteCatalog(args.db) as catalog:
        populate_catalog(catalog, provider)
        for sample in read_samples(args.samples):
            catalog.add_sample(sample)
        positions = [
            catalog.add_relative_position(RelativePositionEntry(
                i, f"{lag:+g}d", time_offset=timedelta(days=lag),
            ))
            for i, lag in enumerate(args.lag or [], start=1)
        ]
        coverage = ParameterCoverage3D(catalog, provider)
        operation = catalog.get_operation(args.operation) if args.operation else None
        filler = EnvironmentTableFiller(catalog, coverage)
        for name in args.parameter:
            filler.add_parameter(catalog.get_parameter(name), operation, positions)
        report = filler.run()
        print(f"{report.written} value(s) written, {report.outside} outside "
              f"coverage, {report.missing} missing")
    return 0


def _potential(args: argparse.Namespace) -> int:
    try:
        date = datetime.strptime(args.date, '%Y-%m-%d')
    except ValueError as e:
        raise ValidationError(f"Invalid --date {args.date!r}: expected YYYY-MM-DD") from e
    provider = GridCoverageProvider.from_directory(args.data)
    catalog = InMemoryCatalog()
    populate_catalog(catalog, provider)
    coverage = ParameterCoverage3D(catalog, provider)
    try:
        coverage.set_parameter(args.series, args.operation)
        path = PotentialImageGenerator(coverage).create(args.file, date, args.resolution)
    finally:
        coverage.dispose()
    print(f"Saved to {path}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point of the ``seagis`` command."""
    args = parse_args(argv)
    level = (logging.WARNING, logging.INFO, logging.DEBUG)[min(args.verbose, 2)]
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')
    commands = {
        'simulate': _simulate,
        'fill': _fill,
        'potential': _potential,
    }
    try:
        return commands[args.command](args)
    except (SeagisError, OSError, ValueError) as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
