"""Workspace scanner — drives the document analyzer across many files."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Protocol

from lintbridge.analyzer.document import DocumentAnalyzer
from lintbridge.analyzer.errors import ConfigurationMissing
from lintbridge.analyzer.models import (
    AnalysisResult,
    AnalysisStatus,
    ExternalDiagnostic,
    WorkspaceReport,
)
from lintbridge.config import EngineConfig

logger = logging.getLogger(__name__)

# C/C++ sources and headers the validators understand
SOURCE_EXTENSIONS = frozenset({".cpp", ".h", ".hpp", ".c"})

# Build output, dependency and vendored directories never worth analyzing
EXCLUDED_DIRS = frozenset(
    {
        "out",
        "build",
        "_deps",
        "deps",
        "IACore",
        "CMakeFiles",
        "Vendor",
        "External",
        "node_modules",
        ".git",
    }
)

ProgressCallback = Callable[[float, str], None]
DiagnosticsProvider = Callable[[str], Sequence[ExternalDiagnostic]]


class CancellationToken(Protocol):
    def is_set(self) -> bool: ...


def discover_sources(
    root: str | Path,
    extensions: Iterable[str] = SOURCE_EXTENSIONS,
    exclude: Iterable[str] = (),
) -> list[str]:
    """Walk ``root`` and return analyzable source files in a stable order."""
    root = Path(root).resolve()
    suffixes = {e.lower() for e in extensions}
    skip = set(EXCLUDED_DIRS) | set(exclude)

    files: list[str] = []
    for dirpath, dirs, names in os.walk(root):
        # Prune skipped directories in-place
        dirs[:] = sorted(d for d in dirs if d not in skip)
        for name in sorted(names):
            if name in skip:
                continue
            if Path(name).suffix.lower() in suffixes:
                files.append(str(Path(dirpath) / name))
    return files


class WorkspaceScanner:
    """Analyzes a list of files in order, with progress and cancellation."""

    def __init__(
        self,
        analyzer: DocumentAnalyzer,
        diagnostics_provider: DiagnosticsProvider | None = None,
    ) -> None:
        self._analyzer = analyzer
        self._diagnostics_provider = diagnostics_provider

    async def scan(
        self,
        files: Iterable[str],
        config: EngineConfig,
        enabled: bool = True,
        cancel: CancellationToken | None = None,
        progress: ProgressCallback | None = None,
        root: str = "",
    ) -> WorkspaceReport:
        """Scan ``files`` and aggregate their findings.

        Cancellation is checked before each file; a cancelled scan returns
        the files analyzed so far. On an enabled engine with no analyzer
        configured, raises ``ConfigurationMissing`` before touching any file.
        """
        files = list(files)
        start = time.time()
        report = WorkspaceReport(
            root=root,
            profile=self._analyzer.profile.name,
            total_files=len(files),
        )
        if not files:
            return report
        if enabled and not config.analyzer_path:
            raise ConfigurationMissing()

        step = 1.0 / len(files)
        for file_path in files:
            if cancel is not None and cancel.is_set():
                logger.info(
                    "Workspace scan cancelled after %d of %d file(s)",
                    report.files_scanned,
                    report.total_files,
                )
                report.cancelled = True
                break

            result = await self._analyze_file(file_path, config, enabled)
            report.add(result)

            if progress is not None:
                progress(step, os.path.basename(file_path))

        report.duration = time.time() - start
        return report

    async def _analyze_file(
        self, file_path: str, config: EngineConfig, enabled: bool
    ) -> AnalysisResult:
        if enabled and not os.path.isfile(file_path):
            logger.debug("Skipping %s: not a readable file", file_path)
            return AnalysisResult(
                file_path,
                status=AnalysisStatus.FAILED,
                error=f"Could not open file: {file_path}",
            )

        diagnostics: Sequence[ExternalDiagnostic] = ()
        if self._diagnostics_provider is not None:
            diagnostics = self._diagnostics_provider(file_path)

        return await self._analyzer.analyze(
            file_path, config, enabled=enabled, diagnostics=diagnostics
        )
