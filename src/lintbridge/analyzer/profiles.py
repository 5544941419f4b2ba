"""Analyzer profiles — output grammar and presentation rules per validator."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from lintbridge.analyzer.models import Severity


class EndColumnRule(enum.Enum):
    """How to choose an end column when the analyzer gives no usable span."""

    END_OF_LINE = "end_of_line"
    FIXED = "fixed"


@dataclass(frozen=True)
class AnalyzerProfile:
    """Everything that differs between validator front-ends."""

    name: str
    tag: str
    regex: re.Pattern[str]
    severity: Severity
    end_column_rule: EndColumnRule = EndColumnRule.END_OF_LINE
    fixed_end_column: int = 100
    extra_args: tuple[str, ...] = ()


def _violation_regex(tag: str, with_end_column: bool) -> re.Pattern[str]:
    columns = r"(?P<start>\d+):(?P<end>\d+)" if with_end_column else r"(?P<start>\d+)"
    return re.compile(
        r"^(?P<path>.+):(?P<line>\d+):"
        + columns
        + r":\s+\["
        + re.escape(tag)
        + r"\]\s+Violation:\s+(?P<message>.+?)\s*$"
    )


AUXID = AnalyzerProfile(
    name="auxid",
    tag="Auxid",
    regex=_violation_regex("Auxid", with_end_column=True),
    severity=Severity.ERROR,
    end_column_rule=EndColumnRule.END_OF_LINE,
)

OXIDE = AnalyzerProfile(
    name="oxide",
    tag="Oxide",
    regex=_violation_regex("Oxide", with_end_column=False),
    severity=Severity.WARNING,
    end_column_rule=EndColumnRule.FIXED,
    fixed_end_column=100,
    extra_args=("--raw",),
)

PROFILES: dict[str, AnalyzerProfile] = {
    AUXID.name: AUXID,
    OXIDE.name: OXIDE,
}


def get_profile(name: str) -> AnalyzerProfile:
    """Look up a profile by name (case-insensitive)."""
    profile = PROFILES.get(name.strip().lower())
    if profile is None:
        known = ", ".join(sorted(PROFILES))
        raise ValueError(f"Unknown analyzer profile '{name}' (known: {known})")
    return profile
