from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from codequality.analyzers.base import RawToolResult
from codequality.domain.models import Failed, Issue, Ok, StageOutcome
from .annotations import parse_annotations
from .base import FindingNormalizer, NormalizerContext
from .location import resolve_lines
from .util import load_json, make_issue, strip_banner

logger = logging.getLogger(__name__)

BIOME_SEVERITIES = {
    "fatal": "critical",
    "information": "info",
    "hint": "info",
}


def _severity(value: Any) -> Any:
    if isinstance(value, str):
        return BIOME_SEVERITIES.get(value.lower(), value)
    return value


def _classifier(category: Any) -> str:
    return f"Biome.{category}" if category else ""


class BiomeNormalizer(FindingNormalizer):
    """Biome findings, from either the ``github`` or the ``json`` reporter."""

    def __init__(self, reporter: str = "github"):
        self.reporter = reporter

    def tool_name(self) -> str:
        return "biome"

    def normalize(self, raw: RawToolResult, ctx: NormalizerContext) -> StageOutcome:
        if self.reporter == "json":
            return self._from_json(raw, ctx)
        return self._from_annotations(raw, ctx)

    def _from_annotations(self, raw: RawToolResult, ctx: NormalizerContext) -> StageOutcome:
        annotations = parse_annotations(raw.output)
        if not annotations and raw.exit_code != 0 and raw.output.strip():
            return Failed(raw.output)

        out: list[Issue] = []
        for a in annotations:
            out.append(make_issue(
                ctx.working_dir,
                a.properties.get("file", ""),
                a.get_int("line"),
                f"Biome: {a.message}",
                _severity(a.severity),
                _classifier(a.properties.get("title")),
                a.get_int("col"),
                a.get_int("endLine"),
                a.get_int("endColumn"),
            ))
        return Ok(out)

    def _from_json(self, raw: RawToolResult, ctx: NormalizerContext) -> StageOutcome:
        data = load_json(strip_banner(raw.output, "{"))
        if not isinstance(data, dict) or not isinstance(data.get("diagnostics"), list):
            return Failed(raw.output)

        out: list[Issue] = []
        for d in data["diagnostics"]:
            if not isinstance(d, dict):
                return Failed(raw.output)
            location = d.get("location") or {}
            if not isinstance(location, dict):
                return Failed(raw.output)
            path_info = location.get("path") or {}
            if not isinstance(path_info, dict):
                return Failed(raw.output)
            path = path_info.get("file") or ""
            start, end = _span(location.get("span"))
            source = location.get("sourceCode")
            if not isinstance(source, (str, bytes)):
                source = None
            if source is None and start is not None:
                source = _read_source(ctx.source_dir, path)
            start_line, end_line = resolve_lines(source or "", start, end)
            if source is None:
                end_line = None
            out.append(make_issue(
                ctx.working_dir,
                path,
                start_line,
                f"Biome: {d.get('description') or ''}",
                _severity(d.get("severity")),
                _classifier(d.get("category")),
                end_line=end_line,
            ))
        return Ok(out)


def _span(span: Any) -> tuple[int | None, int | None]:
    if isinstance(span, list) and len(span) == 2 and all(isinstance(v, int) for v in span):
        return span[0], span[1]
    return None, None


def _read_source(source_dir: Path, path: str) -> bytes | None:
    if not path:
        return None
    fp = Path(path) if Path(path).is_absolute() else source_dir / path
    try:
        return fp.read_bytes()
    except OSError as e:
        logger.debug("Cannot read %s for line resolution: %s", fp, e)
        return None
