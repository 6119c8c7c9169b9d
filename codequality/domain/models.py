from __future__ import annotations

from dataclasses import dataclass, field
from hashlib import sha1
from typing import Any, Literal, Union

Severity = Literal["info", "minor", "major", "critical"]

SEVERITIES: tuple[str, ...] = ("info", "minor", "major", "critical")
CATEGORIES: tuple[str, ...] = ("Clarity", "Style")


@dataclass(frozen=True)
class Position:
    line: int
    column: int | None = None
    end_line: int | None = None
    end_column: int | None = None

    def key(self) -> str:
        """Colon-joined position, empty segments for unknown parts (``12:5::``)."""
        parts = [self.line, self.column, self.end_line, self.end_column]
        return ":".join("" if p is None else str(p) for p in parts)

    def to_dict(self) -> dict[str, Any]:
        begin: dict[str, int] = {"line": self.line}
        if self.column is not None:
            begin["column"] = self.column
        d: dict[str, Any] = {"begin": begin}
        end: dict[str, int] = {}
        if self.end_line is not None:
            end["line"] = self.end_line
        if self.end_column is not None:
            end["column"] = self.end_column
        if end:
            d["end"] = end
        return d


@dataclass(frozen=True)
class Location:
    path: str
    full_path: str
    positions: Position

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "full_path": self.full_path,
            "positions": self.positions.to_dict(),
        }


def make_fingerprint(rel_path: str, positions: Position, description: str) -> str:
    base = f"{rel_path}[{positions.key()}]{description}"
    return sha1(base.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class Issue:
    check_name: str
    description: str
    severity: Severity
    location: Location
    categories: tuple[str, ...] = CATEGORIES
    kind: str = "issue"
    fingerprint: str = field(default="")

    def __post_init__(self) -> None:
        if self.severity not in SEVERITIES:
            raise ValueError(f"Unknown severity: {self.severity!r}")
        if not self.fingerprint:
            fp = make_fingerprint(self.location.path, self.location.positions, self.description)
            object.__setattr__(self, "fingerprint", fp)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "check_name": self.check_name,
            "description": self.description,
            "categories": list(self.categories),
            "severity": self.severity,
            "location": self.location.to_dict(),
            "fingerprint": self.fingerprint,
        }


@dataclass(frozen=True)
class Ok:
    issues: list[Issue]


@dataclass(frozen=True)
class Failed:
    output: str


StageOutcome = Union[Ok, Failed]


@dataclass
class StageFailure:
    tool: str
    title: str
    exit_code: int
    output: str


@dataclass
class PipelineResult:
    issues: list[Issue]
    failure: StageFailure | None = None


@dataclass
class StatsEntry:
    check_name: str
    count: int
    last: Issue


@dataclass
class Summary:
    exit_code: int
    stats_text: str
    report_json: str | None
    total: int
    critical: int
    entries: list[StatsEntry] = field(default_factory=list)
