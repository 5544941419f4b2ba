"""Analyzer data models — findings, external diagnostics, and results."""

from __future__ import annotations

import enum
import sys
import time
import uuid
from dataclasses import dataclass, field

# Sentinel end column meaning "extend to the end of the line"
END_OF_LINE = sys.maxsize


class Severity(enum.Enum):
    """Diagnostic severity, mirroring editor diagnostic levels."""

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


class AnalysisStatus(enum.Enum):
    """How a single-document analysis ended."""

    COMPLETED = "completed"
    DISABLED = "disabled"
    SUPPRESSED = "suppressed"
    UNCONFIGURED = "unconfigured"
    FAILED = "failed"


@dataclass(frozen=True)
class Finding:
    """A single violation reported by the external analyzer.

    Lines and columns are zero-based. ``end_column`` may be ``END_OF_LINE``.
    """

    file_path: str
    line: int
    start_column: int
    end_column: int
    message: str
    severity: Severity
    source: str = ""


@dataclass(frozen=True)
class ExternalDiagnostic:
    """A diagnostic already known for a document from another source."""

    source: str
    severity: Severity
    message: str = ""
    line: int = 0


@dataclass
class AnalysisResult:
    """Outcome of analyzing one document."""

    file_path: str
    findings: list[Finding] = field(default_factory=list)
    status: AnalysisStatus = AnalysisStatus.COMPLETED
    error: str = ""

    @property
    def issue_count(self) -> int:
        return len(self.findings)


@dataclass
class WorkspaceReport:
    """Aggregate result of a workspace scan."""

    root: str = ""
    profile: str = ""
    total_files: int = 0
    files_scanned: int = 0
    findings: list[Finding] = field(default_factory=list)
    failures: list[tuple[str, str]] = field(default_factory=list)
    cancelled: bool = False
    duration: float = 0.0
    timestamp: float = field(default_factory=time.time)
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    @property
    def issue_count(self) -> int:
        return len(self.findings)

    def add(self, result: AnalysisResult) -> None:
        """Fold one document's result into the report."""
        self.files_scanned += 1
        self.findings.extend(result.findings)
        if result.status == AnalysisStatus.FAILED:
            self.failures.append((result.file_path, result.error))
