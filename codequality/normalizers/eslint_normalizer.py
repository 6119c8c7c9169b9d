from __future__ import annotations

import re

from codequality.analyzers.base import RawToolResult
from codequality.domain.models import Failed, Issue, Ok, StageOutcome
from .base import FindingNormalizer, NormalizerContext
from .util import load_json, make_issue, records, strip_banner

# ESLint echoes unparseable sources verbatim, binary garbage included
SOURCE_RE = re.compile(r',"source":".*?","usedDeprecatedRules":', re.DOTALL)


def scrub_sources(text: str) -> str:
    return SOURCE_RE.sub(',"usedDeprecatedRules":', text)


class EsLintNormalizer(FindingNormalizer):
    def tool_name(self) -> str:
        return "eslint"

    def normalize(self, raw: RawToolResult, ctx: NormalizerContext) -> StageOutcome:
        data = load_json(scrub_sources(strip_banner(raw.output, "[")))
        if not isinstance(data, list):
            return Failed(raw.output)

        out: list[Issue] = []
        for entry in data:
            if not isinstance(entry, dict):
                return Failed(raw.output)
            messages = records(entry.get("messages"))
            if messages is None:
                return Failed(raw.output)
            for msg in messages:
                rule = msg.get("ruleId")
                out.append(make_issue(
                    ctx.working_dir,
                    entry.get("filePath") or "",
                    msg.get("line"),
                    f"ESLint: {msg.get('message') or ''}",
                    msg.get("severity"),
                    f"EsLint.{rule}" if rule else "",
                    msg.get("column"),
                    msg.get("endLine"),
                    msg.get("endColumn"),
                ))
        return Ok(out)
