"""Tests for the single-document analyzer."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

from lintbridge.analyzer.document import DocumentAnalyzer
from lintbridge.analyzer.errors import (
    ConfigurationMissing,
    ExecutableNotFound,
    SpawnFailed,
)
from lintbridge.analyzer.models import (
    AnalysisStatus,
    ExternalDiagnostic,
    Finding,
    Severity,
)
from lintbridge.analyzer.profiles import AUXID, OXIDE
from lintbridge.analyzer.runner import RunOutput
from lintbridge.config import EngineConfig
from lintbridge.session.store import DiagnosticStore

PATH = "/w/src/a.cpp"


def _runner(stdout: str = "", side_effect: Exception | None = None) -> MagicMock:
    runner = MagicMock()
    runner.run = AsyncMock(
        return_value=RunOutput(stdout=stdout, stderr="", returncode=0),
        side_effect=side_effect,
    )
    return runner


def _stale_finding() -> Finding:
    return Finding(
        file_path=PATH,
        line=0,
        start_column=0,
        end_column=1,
        message="stale",
        severity=Severity.ERROR,
        source="Auxid",
    )


def _config() -> EngineConfig:
    return EngineConfig(analyzer_path="/bin/validator")


def test_findings_written_to_store():
    store = DiagnosticStore()
    runner = _runner(
        "noise\n"
        "src/a.cpp:10:5:5: [Auxid] Violation: use raw pointer\n"
        "src/a.cpp:12:1:8: [Auxid] Violation: use after move\n"
    )
    analyzer = DocumentAnalyzer(runner, store, AUXID)

    result = asyncio.run(analyzer.analyze(PATH, _config()))

    assert result.status == AnalysisStatus.COMPLETED
    assert result.issue_count == 2
    assert all(f.file_path == PATH for f in result.findings)
    assert list(store.get(PATH)) == result.findings
    runner.run.assert_awaited_once()
    path, config, profile = runner.run.await_args.args
    assert path == PATH
    assert config.analyzer_path == "/bin/validator"
    assert profile is AUXID


def test_no_findings_clears_previous_entry():
    store = DiagnosticStore()
    store.set(PATH, [_stale_finding()])
    analyzer = DocumentAnalyzer(_runner("all clean\n"), store, AUXID)

    result = asyncio.run(analyzer.analyze(PATH, _config()))

    assert result.status == AnalysisStatus.COMPLETED
    assert result.issue_count == 0
    assert PATH not in store


def test_disabled_clears_and_does_no_work():
    store = DiagnosticStore()
    store.set(PATH, [_stale_finding()])
    runner = _runner()
    analyzer = DocumentAnalyzer(runner, store, AUXID)

    result = asyncio.run(analyzer.analyze(PATH, _config(), enabled=False))

    assert result.status == AnalysisStatus.DISABLED
    assert result.findings == []
    assert PATH not in store
    runner.run.assert_not_called()


def test_compiler_errors_suppress_analysis():
    store = DiagnosticStore()
    store.set(PATH, [_stale_finding()])
    runner = _runner("src/a.cpp:1:1:1: [Auxid] Violation: x\n")
    analyzer = DocumentAnalyzer(runner, store, AUXID)
    diagnostics = [ExternalDiagnostic(source="clang", severity=Severity.ERROR)]

    result = asyncio.run(analyzer.analyze(PATH, _config(), diagnostics=diagnostics))

    assert result.status == AnalysisStatus.SUPPRESSED
    assert result.issue_count == 0
    assert PATH not in store
    runner.run.assert_not_called()


def test_compiler_warnings_do_not_suppress():
    store = DiagnosticStore()
    analyzer = DocumentAnalyzer(
        _runner("a.cpp:2:3: [Oxide] Violation: unsafe cast\n"), store, OXIDE
    )
    diagnostics = [ExternalDiagnostic(source="gcc", severity=Severity.WARNING)]

    result = asyncio.run(analyzer.analyze(PATH, _config(), diagnostics=diagnostics))

    assert result.status == AnalysisStatus.COMPLETED
    assert store.get(PATH)[0].severity == Severity.WARNING
    assert store.get(PATH)[0].end_column == 100


def test_executable_not_found_keeps_previous_findings():
    store = DiagnosticStore()
    store.set(PATH, [_stale_finding()])
    analyzer = DocumentAnalyzer(
        _runner(side_effect=ExecutableNotFound("/bin/validator")), store, AUXID
    )

    result = asyncio.run(analyzer.analyze(PATH, _config()))

    assert result.status == AnalysisStatus.FAILED
    assert result.error == "Auxid Validator not found at: /bin/validator"
    assert [f.message for f in store.get(PATH)] == ["stale"]


def test_spawn_failure_reported():
    store = DiagnosticStore()
    analyzer = DocumentAnalyzer(
        _runner(side_effect=SpawnFailed("permission denied")), store, AUXID
    )

    result = asyncio.run(analyzer.analyze(PATH, _config()))

    assert result.status == AnalysisStatus.FAILED
    assert "permission denied" in result.error


def test_missing_configuration_is_silent():
    store = DiagnosticStore()
    store.set(PATH, [_stale_finding()])
    analyzer = DocumentAnalyzer(_runner(side_effect=ConfigurationMissing()), store, AUXID)

    result = asyncio.run(analyzer.analyze(PATH, EngineConfig()))

    assert result.status == AnalysisStatus.UNCONFIGURED
    assert result.error == ""
    assert PATH in store


def test_disabled_while_running_does_not_publish():
    store = DiagnosticStore()
    enabled = {"value": True}

    async def run(path, config, profile):
        enabled["value"] = False
        return RunOutput("a.cpp:1:1:1: [Auxid] Violation: late\n", "", 0)

    runner = MagicMock()
    runner.run = run
    analyzer = DocumentAnalyzer(runner, store, AUXID, is_enabled=lambda: enabled["value"])

    result = asyncio.run(analyzer.analyze(PATH, _config()))

    assert result.issue_count == 1
    assert PATH not in store


def test_overlapping_triggers_are_serialized():
    store = DiagnosticStore()
    active = 0
    max_active = 0
    outputs = iter(
        [
            "a.cpp:1:1:1: [Auxid] Violation: first\n",
            "a.cpp:1:1:1: [Auxid] Violation: second\n",
        ]
    )

    async def run(path, config, profile):
        nonlocal active, max_active
        active += 1
        max_active = max(max_active, active)
        stdout = next(outputs)
        await asyncio.sleep(0.01)
        active -= 1
        return RunOutput(stdout, "", 0)

    runner = MagicMock()
    runner.run = run
    analyzer = DocumentAnalyzer(runner, store, AUXID)

    async def both():
        await asyncio.gather(
            analyzer.analyze(PATH, _config()),
            analyzer.analyze(PATH, _config()),
        )

    asyncio.run(both())

    assert max_active == 1
    assert [f.message for f in store.get(PATH)] == ["second"]


def test_path_locks_released_after_analysis():
    analyzer = DocumentAnalyzer(_runner(), DiagnosticStore(), AUXID)

    async def analyze_many():
        for i in range(20):
            await analyzer.analyze(f"/w/src/f{i}.cpp", _config())

    asyncio.run(analyze_many())

    assert len(analyzer._locks) == 0


def test_end_to_end_with_script(make_validator, source_file: Path, runner, config):
    script = make_validator(
        [
            "Running validator",
            "$3:10:5:5: [Auxid] Violation: use raw pointer",
        ],
        exit_code=1,
    )
    config.analyzer_path = str(script)
    store = DiagnosticStore()
    analyzer = DocumentAnalyzer(runner, store, AUXID)

    result = asyncio.run(analyzer.analyze(str(source_file), config))

    assert result.issue_count == 1
    finding = store.get(str(source_file))[0]
    assert (finding.line, finding.start_column) == (9, 4)
    assert finding.message == "use raw pointer"
