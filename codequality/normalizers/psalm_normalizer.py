from codequality.analyzers.base import RawToolResult
from codequality.domain.models import Failed, Issue, Ok, StageOutcome
from .base import FindingNormalizer, NormalizerContext
from .util import load_json, make_issue, strip_banner


class PsalmNormalizer(FindingNormalizer):
    def tool_name(self) -> str:
        return "psalm"

    def normalize(self, raw: RawToolResult, ctx: NormalizerContext) -> StageOutcome:
        data = load_json(strip_banner(raw.output, "["))
        if not isinstance(data, list):
            return Failed(raw.output)

        out: list[Issue] = []
        for it in data:
            if not isinstance(it, dict):
                return Failed(raw.output)
            kind = it.get("type") or ""
            # Unparseable source always blocks the pipeline
            severity = "critical" if kind == "ParseError" else it.get("severity")
            out.append(make_issue(
                ctx.working_dir,
                it.get("file_path") or "",
                it.get("line_from"),
                f"Psalm: {it.get('message') or ''}",
                severity,
                f"Psalm.{kind}" if kind else "",
                it.get("column_from"),
                it.get("line_to"),
                it.get("column_to"),
            ))
        return Ok(out)
