# -*- coding: utf-8 -*-
"""
SQLite Catalog - Persistent samples and environment values.

Provides ``SQLiteCatalog``, an ``InMemoryCatalog`` whose fishery samples
and computed environmental values are persisted in a local SQLite
database. Series, operations, positions and parameters are registered in
memory as for the parent class; only the tables written by the
environment filler are stored.

Tables
------
- ``samples``: ``id``, ``lon``, ``lat``, ``time`` (ISO 8601) and the
  per-species ``amounts`` as JSON.
- ``environment``: ``sample``, ``column``, ``value`` with one row per
  sample and column.

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
2026-10-15
"""

# Standard library
import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Union

# SEAGIS internal
from seagis.catalog.memory import InMemoryCatalog
from seagis.catalog.models import SampleEntry
from seagis.exceptions import CatalogError

logger = logging.getLogger(__name__)


class SQLiteCatalog(InMemoryCatalog):
    """
    Catalog persisting samples and environment values in SQLite.

    Parameters
    ----------
    db_path : str or Path
        Path to the SQLite database file. ``':memory:'`` keeps the
        database in memory.

    Raises
    ------
    CatalogError
        If the database cannot be opened or initialized.

    Examples
    --------
    >>> with SQLiteCatalog('environment.db') as catalog:
    ...     catalog.add_sample(sample)
    ...     catalog.set_value(sample, 'SST', 24.5)
    """

    def __init__(self, db_path: Union[str, Path]) -> None:
        super().__init__()
        self.db_path = db_path if db_path == ':memory:' else Path(db_path)
        self.conn: Optional[sqlite3.Connection] = None
        self._init_database()
        self._load_samples()

    def _init_database(self) -> None:
        """Open the connection and create tables if needed."""
        try:
            self.conn = sqlite3.connect(str(self.db_path))
            self.conn.row_factory = sqlite3.Row
            cursor = self.conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS samples (
                    id INTEGER PRIMARY KEY,
                    lon REAL NOT NULL,
                    lat REAL NOT NULL,
                    time TEXT NOT NULL,
                    amounts TEXT
                )
            """)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS environment (
                    sample INTEGER NOT NULL,
                    "column" TEXT NOT NULL,
                    value REAL,
                    PRIMARY KEY (sample, "column")
                )
            """)
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_sample_time ON samples(time)"
            )
            self.conn.commit()
        except sqlite3.Error as e:
            raise CatalogError(f"Cannot open catalog database {self.db_path}: {e}") from e

    def _load_samples(self) -> None:
        cursor = self.conn.cursor()
        cursor.execute("SELECT * FROM samples ORDER BY id")
        for row in cursor.fetchall():
            amounts = json.loads(row['amounts']) if row['amounts'] else {}
            super().add_sample(SampleEntry(
                id=row['id'],
                coordinate=(row['lon'], row['lat']),
                time=datetime.fromisoformat(row['time']),
                amounts=amounts,
            ))
        logger.debug("Loaded %d samples from %s", len(self._samples), self.db_path)

    def _connection(self) -> sqlite3.Connection:
        if self.conn is None:
            raise CatalogError(f"Catalog {self.db_path} is closed")
        return self.conn

    def add_sample(self, entry: SampleEntry) -> SampleEntry:
        """Register a sample and persist it."""
        conn = self._connection()
        try:
            conn.execute(
                "INSERT OR REPLACE INTO samples (id, lon, lat, time, amounts) "
                "VALUES (?, ?, ?, ?, ?)",
                (entry.id, entry.coordinate[0], entry.coordinate[1],
                 entry.time.isoformat(), json.dumps(dict(entry.amounts))),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise CatalogError(f"Cannot store sample {entry.id}: {e}") from e
        return super().add_sample(entry)

    def set_value(self, sample: SampleEntry, column: str,
                  value: Union[float, bool]) -> None:
        """Persist a computed value. Booleans are stored as 0 or 1."""
        conn = self._connection()
        stored = float(value)
        try:
            conn.execute(
                'INSERT OR REPLACE INTO environment (sample, "column", value) '
                'VALUES (?, ?, ?)',
                (sample.id, column, stored),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise CatalogError(
                f"Cannot store {column} for sample {sample.id}: {e}"
            ) from e
        super().set_value(sample, column, value)

    def get_value(self, sample: SampleEntry,
                  column: str) -> Optional[Union[float, bool]]:
        """Stored value for ``sample`` and ``column``, or None."""
        cursor = self._connection().cursor()
        cursor.execute(
            'SELECT value FROM environment WHERE sample = ? AND "column" = ?',
            (sample.id, column),
        )
        row = cursor.fetchone()
        return None if row is None else row['value']

    def query_environment(self, column: Optional[str] = None) -> Dict[int, Dict[str, float]]:
        """Stored values grouped by sample identifier.

        Parameters
        ----------
        column : str, optional
            Restrict the result to one column.

        Returns
        -------
        Dict[int, Dict[str, float]]
            ``{sample_id: {column: value}}``.
        """
        query = 'SELECT sample, "column", value FROM environment'
        params = []
        if column is not None:
            query += ' WHERE "column" = ?'
            params.append(column)
        cursor = self._connection().cursor()
        cursor.execute(query, params)
        result: Dict[int, Dict[str, float]] = {}
        for row in cursor.fetchall():
            result.setdefault(row['sample'], {})[row['column']] = row['value']
        return result

    def close(self) -> None:
        """Close database connection."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None
