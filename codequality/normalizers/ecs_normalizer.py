from __future__ import annotations

import re

from codequality.analyzers.base import RawToolResult
from codequality.domain.models import Failed, Issue, Ok, StageOutcome
from .base import FindingNormalizer, NormalizerContext
from .util import file_entry, get_files, load_json, make_issue, records, strip_banner

HUNK_RE = re.compile(
    r"(?:---\s*Original\n\+\+\+\s*New\n)?@@\s*-(\d+),\d+\s*\+\d+,\d+\s*@@",
    re.IGNORECASE,
)
DIFF_CONTEXT = 3


def estimate_line(diff: str) -> int:
    """Best-effort line of a fixer diff: first hunk start plus the diff context."""
    m = HUNK_RE.search(diff or "")
    if not m:
        return 1
    return int(m.group(1)) + DIFF_CONTEXT


class EcsNormalizer(FindingNormalizer):
    def tool_name(self) -> str:
        return "ecs"

    def normalize(self, raw: RawToolResult, ctx: NormalizerContext) -> StageOutcome:
        files = get_files(load_json(strip_banner(raw.output, "{")))
        if files is None:
            return Failed(raw.output)

        out: list[Issue] = []
        for filename, item in files.items():
            entry = file_entry(item)
            diffs = records(entry.get("diffs")) if entry is not None else None
            if diffs is None:
                return Failed(raw.output)
            for diff in diffs:
                line = estimate_line(diff.get("diff") or "")
                for checker in diff.get("applied_checkers") or []:
                    rule = str(checker).replace("\\", ".")
                    out.append(make_issue(
                        ctx.working_dir,
                        filename,
                        line,
                        f"ECS: {rule}",
                        "minor",
                        f"Ecs.{rule}",
                    ))
        return Ok(out)
