"""Document analyzer — one "analyze this document" operation."""

from __future__ import annotations

import asyncio
import logging
import os
import weakref
from collections.abc import Callable, Iterable

from lintbridge.analyzer.errors import (
    ConfigurationMissing,
    ExecutableNotFound,
    SpawnFailed,
)
from lintbridge.analyzer.models import AnalysisResult, AnalysisStatus, ExternalDiagnostic
from lintbridge.analyzer.parser import parse_output
from lintbridge.analyzer.profiles import AnalyzerProfile
from lintbridge.analyzer.runner import ProcessRunner
from lintbridge.analyzer.suppression import should_suppress
from lintbridge.config import EngineConfig
from lintbridge.session.store import DiagnosticStore

logger = logging.getLogger(__name__)


class DocumentAnalyzer:
    """Composes suppression, the process runner and the parser.

    Analyses of the same document are serialized, so overlapping triggers
    (save + open) resolve with the newest one writing last. A failed run
    leaves the document's previous findings in place.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        store: DiagnosticStore,
        profile: AnalyzerProfile,
        is_enabled: Callable[[], bool] | None = None,
    ) -> None:
        self._runner = runner
        self._store = store
        self._profile = profile
        self._is_enabled = is_enabled
        # Entries vanish once no analysis of the path holds or awaits the lock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    @property
    def profile(self) -> AnalyzerProfile:
        return self._profile

    async def analyze(
        self,
        document_path: str,
        config: EngineConfig,
        enabled: bool = True,
        diagnostics: Iterable[ExternalDiagnostic] = (),
    ) -> AnalysisResult:
        path = os.path.abspath(document_path)
        lock = self._locks.get(path)
        if lock is None:
            lock = self._locks[path] = asyncio.Lock()
        async with lock:
            return await self._analyze(path, config, enabled, diagnostics)

    async def _analyze(
        self,
        path: str,
        config: EngineConfig,
        enabled: bool,
        diagnostics: Iterable[ExternalDiagnostic],
    ) -> AnalysisResult:
        if not self._gate_open(enabled):
            self._store.clear(path)
            return AnalysisResult(path, status=AnalysisStatus.DISABLED)

        if should_suppress(diagnostics):
            logger.debug("Compiler errors present in %s — skipping analysis", path)
            self._store.clear(path)
            return AnalysisResult(path, status=AnalysisStatus.SUPPRESSED)

        try:
            output = await self._runner.run(path, config, self._profile)
        except ConfigurationMissing:
            logger.debug("No validator configured — skipping %s", path)
            return AnalysisResult(path, status=AnalysisStatus.UNCONFIGURED)
        except ExecutableNotFound as exc:
            logger.error("%s", exc)
            return AnalysisResult(
                path,
                status=AnalysisStatus.FAILED,
                error=f"{self._profile.tag} {exc}",
            )
        except SpawnFailed as exc:
            logger.exception("Validator failed on %s", path)
            return AnalysisResult(
                path,
                status=AnalysisStatus.FAILED,
                error=f"{self._profile.tag} Validator failed: {exc}",
            )

        findings = parse_output(output.stdout, self._profile, file_path=path)
        logger.debug("%s: %d finding(s)", path, len(findings))

        if self._gate_open(enabled):
            self._store.set(path, findings)
        return AnalysisResult(path, findings=findings)

    def _gate_open(self, enabled: bool) -> bool:
        if not enabled:
            return False
        return self._is_enabled is None or self._is_enabled()
