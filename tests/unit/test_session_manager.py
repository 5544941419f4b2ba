"""Tests for the session manager."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from lintbridge.analyzer.errors import ExecutableNotFound
from lintbridge.analyzer.models import AnalysisStatus, Finding, Severity
from lintbridge.analyzer.profiles import OXIDE
from lintbridge.analyzer.runner import RunOutput
from lintbridge.config import EngineConfig
from lintbridge.session.manager import SessionManager
from lintbridge.session.models import EngineStatus, Notice, NoticeLevel


def _finding(path: str) -> Finding:
    return Finding(
        file_path=path,
        line=1,
        start_column=0,
        end_column=4,
        message="issue",
        severity=Severity.ERROR,
        source="Auxid",
    )


def _runner(stdout_for=lambda path: f"{path}:2:1:1: [Auxid] Violation: issue\n"):
    async def run(path, config, profile):
        return RunOutput(stdout_for(path), "", 0)

    runner = MagicMock()
    runner.run = run
    return runner


def _manager(runner=None, notices: list[Notice] | None = None, **kwargs) -> SessionManager:
    config = EngineConfig(analyzer_path="/bin/validator")
    return SessionManager(
        config,
        runner=runner or _runner(),
        on_notice=notices.append if notices is not None else None,
        **kwargs,
    )


def test_defaults_from_config():
    manager = SessionManager(EngineConfig(profile="oxide", enabled=False))
    assert manager.profile is OXIDE
    assert manager.enabled is False
    assert manager.status == EngineStatus.DISABLED


def test_unknown_profile_rejected():
    with pytest.raises(ValueError):
        SessionManager(EngineConfig(profile="nope"))


def test_analyze_document_updates_store():
    manager = _manager()
    result = asyncio.run(manager.analyze_document("/w/a.cpp"))

    assert result.status == AnalysisStatus.COMPLETED
    assert len(manager.store.get("/w/a.cpp")) == 1


def test_disable_clears_every_document():
    statuses: list[bool] = []
    notices: list[Notice] = []
    manager = _manager(notices=notices, on_status=statuses.append)
    manager.store.set("/w/a.cpp", [_finding("/w/a.cpp")])
    manager.store.set("/w/b.cpp", [_finding("/w/b.cpp")])

    assert manager.toggle() is False

    assert manager.store.get("/w/a.cpp") == ()
    assert manager.store.get("/w/b.cpp") == ()
    assert len(manager.store) == 0
    assert statuses == [False]
    assert notices[-1].message == "Auxid Validator Disabled"
    assert manager.status == EngineStatus.DISABLED


def test_disabled_analysis_publishes_nothing():
    manager = _manager()
    manager.set_enabled(False)

    result = asyncio.run(manager.analyze_document("/w/a.cpp"))

    assert result.status == AnalysisStatus.DISABLED
    assert "/w/a.cpp" not in manager.store


def test_set_enabled_is_idempotent():
    statuses: list[bool] = []
    manager = _manager(on_status=statuses.append)
    manager.set_enabled(True)
    assert statuses == []

    manager.set_enabled(False)
    manager.set_enabled(True)
    assert statuses == [False, True]
    assert manager.status == EngineStatus.ENABLED


def test_not_found_notice_emitted_per_occurrence():
    async def run(path, config, profile):
        raise ExecutableNotFound(config.analyzer_path)

    runner = MagicMock()
    runner.run = run
    notices: list[Notice] = []
    manager = _manager(runner=runner, notices=notices)

    asyncio.run(manager.analyze_document("/w/a.cpp"))
    asyncio.run(manager.analyze_document("/w/a.cpp"))

    assert [n.level for n in notices] == [NoticeLevel.ERROR, NoticeLevel.ERROR]
    assert notices[0].message == "Auxid Validator not found at: /bin/validator"


def test_scan_notices_every_failed_file(tmp_path: Path):
    files = []
    for name in ("a.cpp", "b.cpp", "c.cpp"):
        (tmp_path / name).write_text("")
        files.append(str(tmp_path / name))

    async def run(path, config, profile):
        raise ExecutableNotFound(config.analyzer_path)

    runner = MagicMock()
    runner.run = run
    notices: list[Notice] = []
    reports = []
    manager = _manager(runner=runner, notices=notices, on_report=reports.append)

    report = asyncio.run(manager.scan_workspace(files))

    assert report.files_scanned == 3
    assert len(report.failures) == 3
    assert [n.message for n in notices] == [
        "Auxid Validator not found at: /bin/validator"
    ] * 3
    assert manager.last_report is report
    assert reports == [report]


def test_scan_without_configuration_notices_and_returns_empty(tmp_path: Path):
    (tmp_path / "a.cpp").write_text("")
    notices: list[Notice] = []
    manager = SessionManager(EngineConfig(), runner=_runner(), on_notice=notices.append)

    report = asyncio.run(manager.scan_workspace([str(tmp_path / "a.cpp")]))

    assert report.files_scanned == 0
    assert report.issue_count == 0
    assert len(notices) == 1
    assert "workspace scan aborted" in notices[0].message


def test_disabled_scan_without_configuration_is_silent(tmp_path: Path):
    (tmp_path / "a.cpp").write_text("")
    notices: list[Notice] = []
    manager = SessionManager(
        EngineConfig(enabled=False), runner=_runner(), on_notice=notices.append
    )

    report = asyncio.run(
        manager.scan_workspace([str(tmp_path / "a.cpp"), str(tmp_path / "gone.cpp")])
    )

    assert notices == []
    assert report.failures == []
    assert report.issue_count == 0
    assert len(manager.store) == 0


def test_cancel_scan_stops_at_next_file(tmp_path: Path):
    files = []
    for i in range(4):
        (tmp_path / f"f{i}.cpp").write_text("")
        files.append(str(tmp_path / f"f{i}.cpp"))
    manager = _manager()

    def progress(increment: float, label: str) -> None:
        if label == "f1.cpp":
            manager.cancel_scan()

    report = asyncio.run(manager.scan_workspace(files, progress=progress))

    assert report.cancelled
    assert report.files_scanned == 2
    assert report.issue_count == 2


def test_close_clears_state():
    manager = _manager()
    asyncio.run(manager.analyze_document("/w/a.cpp"))
    manager.close()

    assert len(manager.store) == 0
    assert manager.status == EngineStatus.STOPPED
