"""Session data models — engine status and user-facing notices."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field


class EngineStatus(enum.Enum):
    """Lifecycle state of an analysis session."""

    ENABLED = "enabled"
    DISABLED = "disabled"
    STOPPED = "stopped"


class NoticeLevel(enum.Enum):
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """A message meant for the user, e.g. an editor notification."""

    level: NoticeLevel
    message: str
    timestamp: float = field(default_factory=time.time)
