"""Errors raised while invoking the external analyzer."""

from __future__ import annotations


class AnalyzerError(Exception):
    """Base class for analyzer invocation failures."""


class ConfigurationMissing(AnalyzerError):
    """No analyzer executable path is configured."""

    def __init__(self) -> None:
        super().__init__("Validator path not set")


class ExecutableNotFound(AnalyzerError):
    """The configured analyzer executable does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Validator not found at: {path}")
        self.path = path


class SpawnFailed(AnalyzerError):
    """The analyzer process could not be started or did not finish."""
