import json

from codequality.core.config import ResultCode
from codequality.domain.models import Issue, Location, Position
from codequality.services.report_service import ReportService, group_issues, pretty_json


def _issue(check, severity="major", path="a.php", line=1, column=None):
    return Issue(
        check_name=check,
        description=f"desc {check} {line}",
        severity=severity,
        location=Location(path=path, full_path=f"/repo/{path}", positions=Position(line, column)),
    )


def test_group_issues_ranks_by_count_with_stable_ties():
    issues = [_issue("B"), _issue("A"), _issue("C"), _issue("A", line=2), _issue("C", line=3)]
    entries = group_issues(issues)
    assert [(e.check_name, e.count) for e in entries] == [("A", 2), ("C", 2), ("B", 1)]
    assert entries[0].last.location.positions.line == 2
    assert entries[1].last.location.positions.line == 3


def test_exit_code_non_strict(make_settings):
    service = ReportService(make_settings())
    assert service.exit_code([]) == ResultCode.OK
    assert service.exit_code([_issue("A", "minor"), _issue("B", "major")]) == ResultCode.OK
    assert service.exit_code([_issue("A", "critical")]) == ResultCode.CRITICAL_ISSUES


def test_exit_code_strict_counts_presence(make_settings):
    service = ReportService(make_settings(strict=True))
    assert service.exit_code([]) == ResultCode.OK
    assert service.exit_code([_issue("A", "minor")]) == ResultCode.ISSUES_WITH_STRICT_MODE
    assert service.exit_code([_issue("A", "critical")]) == ResultCode.ISSUES_WITH_STRICT_MODE


def test_stats_text_table(make_settings):
    summary = ReportService(make_settings()).summarize([_issue("A"), _issue("B", "critical"), _issue("A", line=5)])
    assert summary.stats_text.splitlines() == [
        "Issue types by count:",
        "\tRNK\tCNT\tTYPE\t",
        "\t#1\t2\tA",
        "\t#2\t1\tB",
        "Total issues: 3 (1 critical)",
    ]
    assert summary.exit_code == ResultCode.CRITICAL_ISSUES
    assert (summary.total, summary.critical) == (3, 1)


def test_stats_text_without_issues(make_settings):
    assert ReportService(make_settings()).summarize([]).stats_text == "Total issues: 0 (0 critical)"


def test_last_always(make_settings):
    issues = [_issue("A", column=4), _issue("B"), _issue("A", line=7, column=2)]
    lines = ReportService(make_settings(last="always")).summarize(issues).stats_text.splitlines()
    assert lines[2:6] == [
        "\t#1\t2\tA",
        "\t\t\tLast: /repo/a.php:7:2",
        "\t#2\t1\tB",
        "\t\t\tLast: /repo/a.php:1",
    ]


def test_last_single_only_annotates_single_occurrences(make_settings):
    issues = [_issue("A"), _issue("B", path="b.php", line=3), _issue("A", line=7)]
    lines = ReportService(make_settings(last="single")).summarize(issues).stats_text.splitlines()
    assert lines[2:5] == ["\t#1\t2\tA", "\t#2\t1\tB", "\t\t\tLast: /repo/b.php:3"]


def test_stats_disabled(make_settings):
    assert ReportService(make_settings(stats=False)).summarize([_issue("A")]).stats_text == ""


def test_silent_suppresses_report(make_settings):
    summary = ReportService(make_settings(silent=True)).summarize([_issue("A", "critical")])
    assert summary.report_json is None
    assert summary.exit_code == ResultCode.CRITICAL_ISSUES


def test_pretty_json_uses_tabs():
    text = pretty_json([_issue("A", column=2)])
    lines = text.splitlines()
    assert lines[0] == "["
    assert lines[1] == "\t{"
    assert lines[2] == '\t\t"type": "issue",'
    assert not any(line.startswith(" ") for line in lines)
    data = json.loads(text)
    assert data[0]["check_name"] == "A"
    assert data[0]["location"]["positions"] == {"begin": {"line": 1, "column": 2}}


def test_pretty_json_keeps_unicode_and_inner_spaces():
    issue = Issue(
        check_name="X",
        description="Psalm: Ошибка    with spaces",
        severity="minor",
        location=Location("a.php", "/repo/a.php", Position(1)),
    )
    text = pretty_json([issue])
    assert '"description": "Psalm: Ошибка    with spaces"' in text


def test_pretty_json_empty():
    assert pretty_json([]) == "[]"
