"""SQLite database for saved workspace reports."""

from __future__ import annotations

import logging
from pathlib import Path

import aiosqlite

logger = logging.getLogger(__name__)

# Tracked in SQLite's user_version pragma
SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS reports (
    id TEXT PRIMARY KEY,
    root TEXT NOT NULL DEFAULT '',
    profile TEXT NOT NULL DEFAULT '',
    total_files INTEGER NOT NULL DEFAULT 0,
    files_scanned INTEGER NOT NULL DEFAULT 0,
    issue_count INTEGER NOT NULL DEFAULT 0,
    failed_files INTEGER NOT NULL DEFAULT 0,
    cancelled INTEGER NOT NULL DEFAULT 0,
    duration REAL NOT NULL DEFAULT 0,
    timestamp REAL NOT NULL
);

CREATE TABLE IF NOT EXISTS report_findings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    report_id TEXT NOT NULL REFERENCES reports(id),
    file_path TEXT NOT NULL,
    line INTEGER NOT NULL,
    start_column INTEGER NOT NULL DEFAULT 0,
    end_column INTEGER NOT NULL DEFAULT 0,
    message TEXT NOT NULL,
    severity TEXT NOT NULL DEFAULT 'error',
    source TEXT NOT NULL DEFAULT ''
);

CREATE INDEX IF NOT EXISTS idx_findings_report
    ON report_findings(report_id);
"""


async def get_db(db_path: str | Path) -> aiosqlite.Connection:
    """Open (or create) the report database, bringing its schema up to date."""
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    db = await aiosqlite.connect(str(db_path))
    db.row_factory = aiosqlite.Row
    await db.execute("PRAGMA journal_mode=WAL")
    await db.execute("PRAGMA foreign_keys=ON")

    version = await schema_version(db)
    if version < SCHEMA_VERSION:
        await _upgrade(db, version)
    elif version > SCHEMA_VERSION:
        logger.warning(
            "Database %s has schema version %d, newer than supported %d",
            db_path,
            version,
            SCHEMA_VERSION,
        )
    return db


async def schema_version(db: aiosqlite.Connection) -> int:
    cursor = await db.execute("PRAGMA user_version")
    row = await cursor.fetchone()
    return row[0] if row else 0


async def _upgrade(db: aiosqlite.Connection, current: int) -> None:
    # Every statement in SCHEMA_SQL is idempotent
    await db.executescript(SCHEMA_SQL)
    await db.execute(f"PRAGMA user_version = {SCHEMA_VERSION:d}")
    await db.commit()
    if current == 0:
        logger.info("Created report database at schema version %d", SCHEMA_VERSION)
    else:
        logger.info("Upgraded report database from %d to %d", current, SCHEMA_VERSION)
