from codequality.analyzers.base import RawToolResult
from codequality.domain.models import Failed, Issue, Ok, StageOutcome
from .base import FindingNormalizer, NormalizerContext
from .util import load_json, make_issue, records, strip_banner


class StyleLintNormalizer(FindingNormalizer):
    def tool_name(self) -> str:
        return "stylelint"

    def normalize(self, raw: RawToolResult, ctx: NormalizerContext) -> StageOutcome:
        # StyleLint may print deprecation banners ahead of the JSON
        data = load_json(strip_banner(raw.output, "["))
        if not isinstance(data, list):
            return Failed(raw.output)

        out: list[Issue] = []
        for entry in data:
            if not isinstance(entry, dict):
                return Failed(raw.output)
            warnings = records(entry.get("warnings"))
            if warnings is None:
                return Failed(raw.output)
            for w in warnings:
                rule = w.get("rule")
                out.append(make_issue(
                    ctx.working_dir,
                    entry.get("source") or "",
                    w.get("line"),
                    f"StyleLint: {w.get('text') or ''}",
                    w.get("severity"),
                    f"StyleLint.{rule}" if rule else "",
                    w.get("column"),
                    w.get("endLine"),
                    w.get("endColumn"),
                ))
        return Ok(out)
