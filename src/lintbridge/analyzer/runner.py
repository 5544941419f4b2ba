"""Process runner — invokes the external validator on a single document.

The validator is a black box with a fixed contract::

    <analyzer> -p <build_path> <file> [--extra-arg=-I<clang include>] [profile flags]

It runs in the document's own directory. Its exit status is not
authoritative; stdout is returned whatever the status, since violations are
reported on stdout and may also set a non-zero exit code.
"""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

from lintbridge.analyzer.errors import (
    ConfigurationMissing,
    ExecutableNotFound,
    SpawnFailed,
)
from lintbridge.analyzer.profiles import AnalyzerProfile
from lintbridge.config import EngineConfig

logger = logging.getLogger(__name__)

# Timeout in seconds for the clang resource-dir query.
_CLANG_QUERY_TIMEOUT = 5

_NOT_LOOKED_UP = object()


@dataclass(frozen=True)
class RunOutput:
    """Raw output of one analyzer invocation."""

    stdout: str
    stderr: str
    returncode: int


def find_clang_include_dir(clang: str = "clang") -> str | None:
    """Return clang's builtin include directory, or None if it can't be found.

    Best effort: any failure is logged and treated as "not available".
    """
    try:
        result = subprocess.run(
            [clang, "-print-resource-dir"],
            capture_output=True,
            text=True,
            timeout=_CLANG_QUERY_TIMEOUT,
            check=True,
        )
    except (
        subprocess.TimeoutExpired,
        subprocess.CalledProcessError,
        FileNotFoundError,
        OSError,
    ) as exc:
        logger.warning("Could not find clang resource dir: %s", exc)
        return None

    include_dir = os.path.join(result.stdout.strip(), "include")
    if os.path.isdir(include_dir):
        return include_dir
    logger.debug("clang include dir %s does not exist", include_dir)
    return None


def build_command(
    document_path: str,
    config: EngineConfig,
    profile: AnalyzerProfile,
    include_dir: str | None = None,
) -> list[str]:
    """Assemble the analyzer argv for one document."""
    command = [
        config.analyzer_path,
        "-p",
        config.build_path or ".",
        document_path,
    ]
    if include_dir:
        command.append(f"--extra-arg=-I{include_dir}")
    command.extend(profile.extra_args)
    return command


class ProcessRunner:
    """Runs the analyzer as an asyncio subprocess.

    ``timeout`` is optional; without one a hung analyzer is left to the
    environment to deal with.
    """

    def __init__(
        self,
        timeout: float | None = None,
        include_dir_lookup: Callable[[str], str | None] | None = None,
    ) -> None:
        self._timeout = timeout
        self._include_dir_lookup = include_dir_lookup or find_clang_include_dir
        self._include_dir: object = _NOT_LOOKED_UP

    async def include_dir(self, clang: str) -> str | None:
        """Look up the clang include dir once, off the event loop."""
        if self._include_dir is _NOT_LOOKED_UP:
            self._include_dir = await asyncio.to_thread(
                self._include_dir_lookup, clang
            )
        return self._include_dir  # type: ignore[return-value]

    async def run(
        self,
        document_path: str,
        config: EngineConfig,
        profile: AnalyzerProfile,
    ) -> RunOutput:
        """Run the analyzer against ``document_path`` and collect its output."""
        if not config.analyzer_path:
            raise ConfigurationMissing()

        include_dir = await self.include_dir(config.clang_path)
        command = build_command(document_path, config, profile, include_dir)
        cwd = os.path.dirname(document_path) or None
        if cwd and not os.path.isdir(cwd):
            raise SpawnFailed(f"Working directory {cwd} does not exist")
        logger.debug("Running %s (cwd=%s)", " ".join(command), cwd)

        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
            )
        except FileNotFoundError as exc:
            raise ExecutableNotFound(config.analyzer_path) from exc
        except OSError as exc:
            raise SpawnFailed(f"Could not start {config.analyzer_path}: {exc}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self._timeout
            )
        except asyncio.TimeoutError as exc:
            await _reap(proc)
            raise SpawnFailed(
                f"{config.analyzer_path} timed out after {self._timeout}s"
            ) from exc
        except BaseException:
            # Cancelled mid-run: never leave the analyzer running unattended
            await _reap(proc)
            raise

        stderr_text = stderr.decode("utf-8", errors="replace")
        if stderr_text.strip():
            logger.debug("Analyzer stderr for %s: %s", document_path, stderr_text.strip())
        if proc.returncode:
            logger.debug(
                "Analyzer exited with code %d for %s", proc.returncode, document_path
            )

        return RunOutput(
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr_text,
            returncode=proc.returncode or 0,
        )


async def _reap(proc: asyncio.subprocess.Process) -> None:
    """Kill ``proc`` if it is still running and wait for it to exit."""
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()
