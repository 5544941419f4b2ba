"""Suppression filter — skip analysis of documents that don't compile."""

from __future__ import annotations

from collections.abc import Iterable

from lintbridge.analyzer.models import ExternalDiagnostic, Severity

# Diagnostic sources reported by C/C++ compiler front-ends
COMPILER_SOURCES = frozenset({"c++", "clang", "gcc"})


def should_suppress(diagnostics: Iterable[ExternalDiagnostic]) -> bool:
    """True if any compiler front-end already reports an error for the document."""
    return any(
        d.severity == Severity.ERROR and d.source.strip().lower() in COMPILER_SOURCES
        for d in diagnostics
    )
