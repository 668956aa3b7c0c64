# -*- coding: utf-8 -*-
"""
Simulation Configuration - Parse animat simulation configuration files.

A configuration file holds a block of ``KEY=value`` properties, ended by a
line made only of dashes, followed by one row per environmental parameter
perceived by the animals::

    TIME_ZONE         = UTC
    TIME_STEP         = 1
    START_TIME        = 1999/01/01
    PAUSE             = 0
    RESOLUTION        = 6
    DAILY_DISTANCE    = 50000
    PERCEPTION_RADIUS = 20000
    SPECIES           = YFT, SKJ
    ---------------------------------
    # series ; operation        ; evaluator ; weight ; time lag
    SST      ;                  ; maximum   ; 1
    CHL      ; GradientMagnitude; average   ; 0.5    ; -5

Units
-----
``TIME_STEP`` in days, ``PAUSE`` in seconds, ``RESOLUTION`` in arc
minutes (stored in degrees), ``DAILY_DISTANCE`` and ``PERCEPTION_RADIUS``
in metres, time lags in days.

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
2026-10-16
"""

# Standard library
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# SEAGIS internal
from seagis.exceptions import ConfigurationError
from seagis.vocabulary import EvaluatorKind

logger = logging.getLogger(__name__)

REQUIRED_KEYS = (
    'TIME_ZONE',
    'TIME_STEP',
    'START_TIME',
    'PAUSE',
    'RESOLUTION',
    'DAILY_DISTANCE',
    'PERCEPTION_RADIUS',
    'SPECIES',
)

_DATE_FORMAT = '%Y/%m/%d'


@dataclass(frozen=True)
class AnimatParameter:
    """An environmental parameter perceived by the animals.

    Attributes
    ----------
    series : str
        Name of the series read.
    operation : str, optional
        Name of the operation applied, None for the plain filter.
    evaluator : EvaluatorKind
        Reduction over the perception area.
    weight : float
        Weight of the parameter when choosing where to go.
    time_lag : timedelta
        Offset of the date at which the parameter is read.
    """

    series: str
    operation: Optional[str] = None
    evaluator: EvaluatorKind = EvaluatorKind.MAXIMUM
    weight: float = 1.0
    time_lag: timedelta = timedelta(0)

    @property
    def name(self) -> str:
        """Display name, e.g. ``'SST'`` or ``'GradientMagnitude(CHL)'``."""
        if self.operation:
            return f"{self.operation}({self.series})"
        return self.series


@dataclass(frozen=True)
class Configuration:
    """Parsed simulation configuration."""

    time_zone: tzinfo
    time_step: timedelta
    start_time: datetime
    pause: float
    resolution: float
    daily_distance: float
    perception_radius: float
    species: Tuple[str, ...]
    parameters: Tuple[AnimatParameter, ...]

    @property
    def time_lag(self) -> timedelta:
        """Smallest time lag over all parameters."""
        if not self.parameters:
            return timedelta(0)
        return min(p.time_lag for p in self.parameters)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'Configuration':
        """Read a configuration file.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        ConfigurationError
            If a key is missing or a value cannot be parsed.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        return cls.parse(path.read_text(encoding='utf-8').splitlines(), str(path))

    @classmethod
    def parse(cls, lines: Union[str, Iterable[str]],
              source: str = '<string>') -> 'Configuration':
        """Parse configuration lines (or a whole text)."""
        if isinstance(lines, str):
            lines = lines.splitlines()
        lines = list(lines)
        properties, rest = _read_properties(lines)
        for key in REQUIRED_KEYS:
            if key not in properties:
                raise ConfigurationError(f"{source}: property \"{key}\" is not defined")

        time_zone = _parse_time_zone(properties['TIME_ZONE'])
        try:
            start = datetime.strptime(properties['START_TIME'], _DATE_FORMAT)
        except ValueError as e:
            raise ConfigurationError(
                f"{source}: START_TIME \"{properties['START_TIME']}\" "
                f"is not a yyyy/MM/dd date"
            ) from e
        config = cls(
            time_zone=time_zone,
            time_step=timedelta(days=_number(properties, 'TIME_STEP', source)),
            start_time=start.replace(tzinfo=time_zone),
            pause=_number(properties, 'PAUSE', source),
            resolution=_number(properties, 'RESOLUTION', source) / 60.0,
            daily_distance=_number(properties, 'DAILY_DISTANCE', source),
            perception_radius=_number(properties, 'PERCEPTION_RADIUS', source),
            species=tuple(s.strip() for s in properties['SPECIES'].split(',')
                          if s.strip()),
            parameters=tuple(_read_parameters(rest, source)),
        )
        logger.debug("Loaded configuration from %s: %d parameter(s)",
                     source, len(config.parameters))
        return config


def _is_separator(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and set(stripped) == {'-'}


def _read_properties(lines: List[str]) -> Tuple[Dict[str, str], List[str]]:
    properties: Dict[str, str] = {}
    for i, line in enumerate(lines):
        if _is_separator(line):
            return properties, lines[i + 1:]
        stripped = line.strip()
        if not stripped or stripped[0] in '#!':
            continue
        positions = [p for p in (stripped.find('='), stripped.find(':')) if p >= 0]
        if positions:
            split = min(positions)
            properties[stripped[:split].strip()] = stripped[split + 1:].strip()
        else:
            properties[stripped] = ''
    return properties, []


def _number(properties: Dict[str, str], key: str, source: str) -> float:
    try:
        return float(properties[key])
    except ValueError as e:
        raise ConfigurationError(
            f"{source}: property \"{key}\" is not a number: \"{properties[key]}\""
        ) from e


def _parse_time_zone(name: str) -> tzinfo:
    if name.upper() in ('UTC', 'GMT', 'Z'):
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown TIME_ZONE \"{name}\"") from e


def _read_parameters(lines: List[str], source: str) -> List[AnimatParameter]:
    parameters: List[AnimatParameter] = []
    for number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        fields = [f.strip() for f in line.split(';')]
        fields += [''] * (5 - len(fields))
        series, operation, evaluator, weight, lag = fields[:5]
        if not series:
            raise ConfigurationError(f"{source}: parameter row {number} has no series")
        try:
            kind = EvaluatorKind(evaluator.lower()) if evaluator else EvaluatorKind.MAXIMUM
        except ValueError as e:
            raise ConfigurationError(
                f"{source}: unknown evaluator \"{evaluator}\" for {series}"
            ) from e
        try:
            weight_value = float(weight) if weight else 1.0
            lag_value = float(lag) if lag else 0.0
        except ValueError as e:
            raise ConfigurationError(
                f"{source}: bad weight or time lag for {series}: {line}"
            ) from e
        parameter = AnimatParameter(
            series=series,
            operation=operation or None,
            evaluator=kind,
            weight=weight_value,
            time_lag=timedelta(days=lag_value),
        )
        if parameter not in parameters:
            parameters.append(parameter)
    return parameters
