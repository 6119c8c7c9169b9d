from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from codequality.domain.models import SEVERITIES, Issue, Location, Position

SEVERITY_ALIASES: dict[Any, str] = {
    0: "info",
    "info": "info",
    "notice": "info",
    1: "minor",
    "warning": "minor",
    2: "major",
    "error": "major",
}


def map_severity(value: Any) -> str:
    """Map a tool-native severity (string or ordinal) onto info/minor/major/critical."""
    if isinstance(value, bool):
        return "major"
    if isinstance(value, int):
        return SEVERITY_ALIASES.get(value, "major")
    if isinstance(value, str):
        key = value.strip().lower()
        if key in SEVERITY_ALIASES:
            return SEVERITY_ALIASES[key]
        if key in SEVERITIES:
            return key
    return "major"


def get_rel_path(working_dir: Path | str, path: str) -> str:
    """
    Strip the working directory prefix from a tool-reported path.

    Paths outside the working directory (and relative ones) come back unchanged.
    """
    prefix = str(working_dir).rstrip(os.sep) + os.sep
    if path.startswith(prefix):
        return path[len(prefix):]
    return path


def _known(value: Any) -> int | None:
    """Column/line values that are missing or negative are unknown."""
    if value is None or isinstance(value, bool):
        return None
    try:
        n = int(value)
    except (TypeError, ValueError):
        return None
    return n if n >= 0 else None


def make_issue(
    working_dir: Path,
    path: str,
    start_line: Any,
    description: str,
    severity: Any = "major",
    classifier: str = "",
    start_column: Any = None,
    end_line: Any = None,
    end_column: Any = None,
) -> Issue:
    path = str(path or "")
    line = _known(start_line)
    positions = Position(
        line=1 if line is None else line,
        column=_known(start_column),
        end_line=_known(end_line),
        end_column=_known(end_column),
    )
    return Issue(
        check_name=classifier or description,
        description=description,
        severity=map_severity(severity),
        location=Location(
            path=get_rel_path(working_dir, path),
            full_path=path,
            positions=positions,
        ),
    )


def strip_banner(text: str, opener: str) -> str:
    """Drop lines printed before the first line that starts with ``opener``."""
    lines = text.splitlines()
    for i, line in enumerate(lines):
        if line.startswith(opener):
            return "\n".join(lines[i:])
    return text


def load_json(text: str) -> list | dict | None:
    """Decode a JSON envelope; anything but an array or object is ``None``."""
    try:
        data = json.loads(text)
    except ValueError:
        return None
    return data if isinstance(data, (list, dict)) else None


def get_files(data: Any) -> dict | None:
    """The per-file map of a ``{"files": {...}}`` envelope, or ``None`` when malformed.

    An empty PHP array serializes as ``[]`` rather than ``{}``.
    """
    if not isinstance(data, dict) or "files" not in data:
        return None
    files = data["files"]
    if files == []:
        return {}
    return files if isinstance(files, dict) else None


def records(value: Any) -> list[dict] | None:
    """A list of finding objects; missing is empty, any other shape is ``None``."""
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        return None
    return value


def file_entry(value: Any) -> dict | None:
    """One per-file object of a ``files`` map; PHP encodes an empty one as ``[]``."""
    if value is None or value == []:
        return {}
    return value if isinstance(value, dict) else None
