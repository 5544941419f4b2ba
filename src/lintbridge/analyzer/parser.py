"""Finding parser — turns analyzer stdout lines into findings."""

from __future__ import annotations

from lintbridge.analyzer.models import END_OF_LINE, Finding
from lintbridge.analyzer.profiles import PROFILES, AnalyzerProfile, EndColumnRule


def parse_line(
    line: str,
    profile: AnalyzerProfile | None = None,
    file_path: str | None = None,
) -> Finding | None:
    """Parse one line of analyzer output.

    Returns ``None`` for lines that match no grammar; the analyzer interleaves
    ordinary log output with violations. With no ``profile`` every known
    profile is tried in turn. ``file_path`` replaces the path printed by the
    analyzer.
    """
    line = line.rstrip("\r\n")
    candidates = (profile,) if profile is not None else tuple(PROFILES.values())

    for candidate in candidates:
        match = candidate.regex.match(line)
        if match is None:
            continue

        line_num = int(match.group("line")) - 1
        start = int(match.group("start")) - 1
        if line_num < 0 or start < 0:
            return None

        raw_end = match.groupdict().get("end")
        end = int(raw_end) - 1 if raw_end is not None else None

        return Finding(
            file_path=file_path or match.group("path"),
            line=line_num,
            start_column=start,
            end_column=_end_column(candidate, start, end),
            message=match.group("message"),
            severity=candidate.severity,
            source=candidate.tag,
        )

    return None


def parse_output(
    text: str,
    profile: AnalyzerProfile | None = None,
    file_path: str | None = None,
) -> list[Finding]:
    """Parse every line of analyzer output, preserving order."""
    findings: list[Finding] = []
    for line in text.splitlines():
        finding = parse_line(line, profile, file_path)
        if finding is not None:
            findings.append(finding)
    return findings


def _end_column(profile: AnalyzerProfile, start: int, end: int | None) -> int:
    # Zero-width ranges are invisible in editors; widen them.
    if end is not None and end > start:
        return end
    if end is None and profile.end_column_rule == EndColumnRule.FIXED:
        if profile.fixed_end_column > start:
            return profile.fixed_end_column
    return END_OF_LINE
