from codequality.analyzers.base import RawToolResult
from codequality.domain.models import Failed, Issue, Ok, StageOutcome
from .base import FindingNormalizer, NormalizerContext
from .util import file_entry, get_files, load_json, make_issue, records, strip_banner


class PhpCsNormalizer(FindingNormalizer):
    def tool_name(self) -> str:
        return "phpcs"

    def normalize(self, raw: RawToolResult, ctx: NormalizerContext) -> StageOutcome:
        files = get_files(load_json(strip_banner(raw.output, "{")))
        if files is None:
            return Failed(raw.output)

        out: list[Issue] = []
        for filename, item in files.items():
            entry = file_entry(item)
            messages = records(entry.get("messages")) if entry is not None else None
            if messages is None:
                return Failed(raw.output)
            for msg in messages:
                source = msg.get("source")
                out.append(make_issue(
                    ctx.working_dir,
                    filename,
                    msg.get("line"),
                    f"PHP CS: {msg.get('message') or ''}",
                    msg.get("type"),
                    f"PhpCs.{source}" if source else "",
                    msg.get("column"),
                ))
        return Ok(out)
