"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from lintbridge.analyzer.runner import ProcessRunner
from lintbridge.config import EngineConfig


@pytest.fixture
def make_validator(tmp_path: Path) -> Callable[..., Path]:
    """Factory for a shell script standing in for the validator executable.

    ``$3`` in an output line expands to the analyzed file. Every invocation
    appends ``<cwd>|<args>`` to ``<script>.log``.
    """

    def _make(
        lines: tuple[str, ...] = (),
        exit_code: int = 0,
        name: str = "validator.sh",
    ) -> Path:
        script = tmp_path / name
        log = tmp_path / f"{name}.log"
        body = [f'echo "{line}"' for line in lines]
        script.write_text(
            "#!/bin/sh\n"
            f'echo "$(pwd -P)|$*" >> "{log}"\n' + "\n".join(body) + f"\nexit {exit_code}\n"
        )
        script.chmod(0o755)
        return script

    return _make


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    src = tmp_path / "src"
    src.mkdir()
    path = src / "main.cpp"
    path.write_text("int main() { return 0; }\n")
    return path


@pytest.fixture
def runner() -> ProcessRunner:
    """A runner that never shells out to clang."""
    return ProcessRunner(include_dir_lookup=lambda clang: None)


@pytest.fixture
def config(tmp_path: Path) -> EngineConfig:
    return EngineConfig(
        analyzer_path="",
        build_path=str(tmp_path / "build"),
        data_dir=tmp_path / "data",
        config_dir=tmp_path / "config",
    )
