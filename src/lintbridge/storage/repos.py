"""Repository classes for async CRUD operations on SQLite."""

from __future__ import annotations

import aiosqlite

from lintbridge.analyzer.models import WorkspaceReport


class ReportRepo:
    """CRUD for workspace reports and their findings."""

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def save(self, report: WorkspaceReport) -> str:
        """Insert or overwrite a report together with its findings."""
        await self._db.execute(
            "DELETE FROM report_findings WHERE report_id = ?", (report.id,)
        )
        await self._db.execute(
            "INSERT OR REPLACE INTO reports "
            "(id, root, profile, total_files, files_scanned, issue_count, "
            "failed_files, cancelled, duration, timestamp) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                report.id,
                report.root,
                report.profile,
                report.total_files,
                report.files_scanned,
                report.issue_count,
                len(report.failures),
                int(report.cancelled),
                report.duration,
                report.timestamp,
            ),
        )
        await self._db.executemany(
            "INSERT INTO report_findings "
            "(report_id, file_path, line, start_column, end_column, "
            "message, severity, source) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            [
                (
                    report.id,
                    f.file_path,
                    f.line,
                    f.start_column,
                    f.end_column,
                    f.message,
                    f.severity.value,
                    f.source,
                )
                for f in report.findings
            ],
        )
        await self._db.commit()
        return report.id

    async def get(self, report_id: str) -> dict | None:
        cursor = await self._db.execute(
            "SELECT * FROM reports WHERE id = ?", (report_id,)
        )
        row = await cursor.fetchone()
        if not row:
            return None

        result = dict(row)
        result["cancelled"] = bool(result["cancelled"])
        # Insertion order is the scan's enumeration order
        cursor = await self._db.execute(
            "SELECT file_path, line, start_column, end_column, message, "
            "severity, source FROM report_findings WHERE report_id = ? "
            "ORDER BY id",
            (report_id,),
        )
        result["findings"] = [dict(r) async for r in cursor]
        return result

    async def list_all(self, limit: int = 50, offset: int = 0) -> list[dict]:
        cursor = await self._db.execute(
            "SELECT * FROM reports ORDER BY timestamp DESC LIMIT ? OFFSET ?",
            (limit, offset),
        )
        rows = [dict(row) async for row in cursor]
        for row in rows:
            row["cancelled"] = bool(row["cancelled"])
        return rows
