"""JSON shapes for findings, results and reports."""

from __future__ import annotations

from lintbridge.analyzer.models import AnalysisResult, Finding, WorkspaceReport


def finding_to_dict(finding: Finding) -> dict:
    return {
        "file_path": finding.file_path,
        "line": finding.line,
        "start_column": finding.start_column,
        "end_column": finding.end_column,
        "message": finding.message,
        "severity": finding.severity.value,
        "source": finding.source,
    }


def result_to_dict(result: AnalysisResult) -> dict:
    return {
        "file_path": result.file_path,
        "status": result.status.value,
        "error": result.error,
        "issue_count": result.issue_count,
        "findings": [finding_to_dict(f) for f in result.findings],
    }


def report_to_dict(report: WorkspaceReport) -> dict:
    return {
        "id": report.id,
        "root": report.root,
        "profile": report.profile,
        "total_files": report.total_files,
        "files_scanned": report.files_scanned,
        "issue_count": report.issue_count,
        "cancelled": report.cancelled,
        "duration": report.duration,
        "timestamp": report.timestamp,
        "failures": [{"file_path": p, "error": e} for p, e in report.failures],
        "findings": [finding_to_dict(f) for f in report.findings],
    }
