"""Diagnostic state store — the findings currently visible per document."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable, Iterable

from lintbridge.analyzer.models import Finding

logger = logging.getLogger(__name__)

Listener = Callable[[str, tuple[Finding, ...]], None]


def _key(path: str) -> str:
    return os.path.abspath(path)


class DiagnosticStore:
    """Process-wide map from document path to its active findings.

    Entries are immutable tuples swapped under a short lock, so a reader
    always sees a whole entry from before or after an update. Listeners are
    called after each change with the document path and its new findings
    (an empty tuple when cleared).
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[Finding, ...]] = {}
        self._lock = threading.Lock()
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, path: str, findings: Iterable[Finding]) -> None:
        """Replace a document's findings. An empty set clears the entry."""
        key = _key(path)
        value = tuple(findings)
        with self._lock:
            if value:
                self._entries[key] = value
            else:
                self._entries.pop(key, None)
        self._notify(key, value)

    def clear(self, path: str) -> None:
        key = _key(path)
        with self._lock:
            existed = self._entries.pop(key, None) is not None
        if existed:
            self._notify(key, ())

    def clear_all(self) -> None:
        """Remove every document's findings."""
        with self._lock:
            cleared = list(self._entries)
            self._entries = {}
        for key in cleared:
            self._notify(key, ())
        if cleared:
            logger.debug("Cleared diagnostics for %d document(s)", len(cleared))

    def get(self, path: str) -> tuple[Finding, ...]:
        with self._lock:
            return self._entries.get(_key(path), ())

    def snapshot(self) -> dict[str, tuple[Finding, ...]]:
        with self._lock:
            return dict(self._entries)

    def paths(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        with self._lock:
            return _key(path) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _notify(self, key: str, findings: tuple[Finding, ...]) -> None:
        for listener in list(self._listeners):
            try:
                listener(key, findings)
            except Exception:
                logger.exception("Diagnostic listener failed for %s", key)
