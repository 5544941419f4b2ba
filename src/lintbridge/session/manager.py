"""Session manager — owns the engine state: toggle, store, analyzer, scanner."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable

from lintbridge.analyzer.document import DocumentAnalyzer
from lintbridge.analyzer.errors import ConfigurationMissing
from lintbridge.analyzer.models import (
    AnalysisResult,
    AnalysisStatus,
    ExternalDiagnostic,
    WorkspaceReport,
)
from lintbridge.analyzer.profiles import AnalyzerProfile, get_profile
from lintbridge.analyzer.runner import ProcessRunner
from lintbridge.analyzer.workspace import (
    CancellationToken,
    DiagnosticsProvider,
    ProgressCallback,
    WorkspaceScanner,
)
from lintbridge.config import EngineConfig
from lintbridge.session.models import EngineStatus, Notice, NoticeLevel
from lintbridge.session.store import DiagnosticStore

logger = logging.getLogger(__name__)


class SessionManager:
    """One analysis session: constructed at startup, closed at shutdown.

    Holds the enabled flag and the diagnostic store every operation works
    against, and routes user-facing failures to the ``on_notice`` callback.
    """

    def __init__(
        self,
        config: EngineConfig,
        profile: AnalyzerProfile | None = None,
        store: DiagnosticStore | None = None,
        runner: ProcessRunner | None = None,
        on_notice: Callable[[Notice], None] | None = None,
        on_status: Callable[[bool], None] | None = None,
        on_report: Callable[[WorkspaceReport], None] | None = None,
    ) -> None:
        self._config = config
        self._profile = profile or get_profile(config.profile)
        self._store = store or DiagnosticStore()
        self._runner = runner or ProcessRunner()
        self._on_notice = on_notice
        self._on_status = on_status
        self._on_report = on_report
        self._enabled = config.enabled
        self._closed = False
        self._cancel_event = threading.Event()
        self._last_report: WorkspaceReport | None = None
        self._analyzer = DocumentAnalyzer(
            self._runner,
            self._store,
            self._profile,
            is_enabled=lambda: self._enabled,
        )

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def profile(self) -> AnalyzerProfile:
        return self._profile

    @property
    def store(self) -> DiagnosticStore:
        return self._store

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def status(self) -> EngineStatus:
        if self._closed:
            return EngineStatus.STOPPED
        return EngineStatus.ENABLED if self._enabled else EngineStatus.DISABLED

    @property
    def last_report(self) -> WorkspaceReport | None:
        return self._last_report

    def set_enabled(self, value: bool) -> bool:
        """Enable or disable the engine. Disabling clears every document."""
        if value == self._enabled:
            return self._enabled

        self._enabled = value
        if not value:
            self._store.clear_all()
            self._notify(NoticeLevel.INFO, f"{self._profile.tag} Validator Disabled")
        else:
            self._notify(NoticeLevel.INFO, f"{self._profile.tag} Validator Enabled")

        logger.info("%s validator %s", self._profile.tag, self.status.value)
        if self._on_status:
            self._on_status(value)
        return value

    def toggle(self) -> bool:
        return self.set_enabled(not self._enabled)

    async def analyze_document(
        self,
        path: str,
        diagnostics: Iterable[ExternalDiagnostic] = (),
    ) -> AnalysisResult:
        """Analyze one document (e.g. on save or open)."""
        result = await self._analyzer.analyze(
            path, self._config, enabled=self._enabled, diagnostics=diagnostics
        )
        if result.status == AnalysisStatus.FAILED and result.error:
            self._notify(NoticeLevel.ERROR, result.error)
        return result

    async def scan_workspace(
        self,
        files: Iterable[str],
        cancel: CancellationToken | None = None,
        progress: ProgressCallback | None = None,
        diagnostics_provider: DiagnosticsProvider | None = None,
        root: str = "",
    ) -> WorkspaceReport:
        """Analyze every file in order; cancellable between files."""
        if cancel is None:
            self._cancel_event = threading.Event()
            cancel = self._cancel_event

        scanner = WorkspaceScanner(self._analyzer, diagnostics_provider)
        try:
            report = await scanner.scan(
                files,
                self._config,
                enabled=self._enabled,
                cancel=cancel,
                progress=progress,
                root=root,
            )
        except ConfigurationMissing as exc:
            logger.warning("Workspace scan aborted: %s", exc)
            self._notify(
                NoticeLevel.ERROR,
                f"{self._profile.tag} {exc}; workspace scan aborted",
            )
            report = WorkspaceReport(root=root, profile=self._profile.name)

        for _, message in report.failures:
            if message:
                self._notify(NoticeLevel.ERROR, message)

        logger.info(
            "Scanned %d of %d file(s): %d issue(s)%s",
            report.files_scanned,
            report.total_files,
            report.issue_count,
            " (cancelled)" if report.cancelled else "",
        )
        self._last_report = report
        if self._on_report:
            self._on_report(report)
        return report

    def cancel_scan(self) -> None:
        """Ask the running workspace scan to stop at the next file boundary."""
        self._cancel_event.set()

    def close(self) -> None:
        """Tear down the session, clearing all visible diagnostics."""
        self._cancel_event.set()
        self._store.clear_all()
        self._closed = True

    def _notify(self, level: NoticeLevel, message: str) -> None:
        if self._on_notice:
            self._on_notice(Notice(level=level, message=message))
