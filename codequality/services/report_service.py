from __future__ import annotations

import json
import re

from codequality.core.config import ResultCode, Settings
from codequality.domain.models import Issue, StatsEntry, Summary

INDENT_RE = re.compile(r"^( {4,})", re.MULTILINE)


def pretty_json(issues: list[Issue]) -> str:
    """Pretty-printed report, indented with tabs."""
    text = json.dumps([i.to_dict() for i in issues], indent=4, ensure_ascii=False)
    return INDENT_RE.sub(lambda m: m.group(1).replace("    ", "\t"), text)


def group_issues(issues: list[Issue]) -> list[StatsEntry]:
    """Issues grouped by check name, most frequent first.

    Equal counts keep first-seen order; each entry keeps the last issue seen.
    """
    entries: dict[str, StatsEntry] = {}
    for issue in issues:
        entry = entries.get(issue.check_name)
        if entry is None:
            entries[issue.check_name] = StatsEntry(issue.check_name, 1, issue)
        else:
            entry.count += 1
            entry.last = issue
    return sorted(entries.values(), key=lambda e: -e.count)


def _last_position(issue: Issue) -> str:
    pos = issue.location.positions
    parts = [issue.location.full_path, str(pos.line)]
    if pos.column is not None:
        parts.append(str(pos.column))
    return ":".join(parts)


class ReportService:
    def __init__(self, settings: Settings):
        self.settings = settings

    def exit_code(self, issues: list[Issue]) -> ResultCode:
        if self.settings.strict:
            return ResultCode.ISSUES_WITH_STRICT_MODE if issues else ResultCode.OK
        if any(i.severity == "critical" for i in issues):
            return ResultCode.CRITICAL_ISSUES
        return ResultCode.OK

    def stats_text(self, entries: list[StatsEntry], total: int, critical: int) -> str:
        lines: list[str] = []
        if entries:
            lines.append("Issue types by count:")
            lines.append("\tRNK\tCNT\tTYPE\t")
            for rank, entry in enumerate(entries, start=1):
                lines.append(f"\t#{rank}\t{entry.count}\t{entry.check_name}")
                policy = self.settings.last
                if policy == "always" or (policy == "single" and entry.count == 1):
                    lines.append(f"\t\t\tLast: {_last_position(entry.last)}")
        lines.append(f"Total issues: {total} ({critical} critical)")
        return "\n".join(lines)

    def summarize(self, issues: list[Issue]) -> Summary:
        entries = group_issues(issues)
        critical = sum(1 for i in issues if i.severity == "critical")
        return Summary(
            exit_code=int(self.exit_code(issues)),
            stats_text=self.stats_text(entries, len(issues), critical) if self.settings.stats else "",
            report_json=None if self.settings.silent else pretty_json(issues),
            total=len(issues),
            critical=critical,
            entries=entries,
        )
