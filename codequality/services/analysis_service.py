from __future__ import annotations

import logging
import os
from pathlib import Path

from codequality.analyzers.base import AnalyzerContext, StaticCodeAnalyzer
from codequality.analyzers.registry import AnalyzerRegistry
from codequality.analyzers.runtime import detect_js_runtime
from codequality.core.config import Settings
from codequality.domain.models import Failed, Issue, Ok, PipelineResult, StageFailure, StageOutcome
from codequality.normalizers.base import FindingNormalizer, NormalizerContext
from codequality.normalizers.registry import NormalizerRegistry

logger = logging.getLogger(__name__)

GROUPS = ("php", "js")


def _enter(directory: Path | str) -> None:
    if Path.cwd() != Path(directory):
        os.chdir(directory)


class AnalysisService:
    """
    Orchestrates: run each enabled tool → normalize its output → unified issues.

    Stages run one at a time in registry order. The first stage whose output
    cannot be parsed stops the run; no partial issue list is returned then.
    """

    def __init__(
        self,
        analyzer_registry: AnalyzerRegistry,
        normalizer_registry: NormalizerRegistry,
    ):
        self.analyzers = analyzer_registry
        self.stages: list[tuple[StaticCodeAnalyzer, FindingNormalizer]] = []
        for analyzer in analyzer_registry:
            self.stages.append((analyzer, normalizer_registry.by_tool(analyzer.tool_name())))

    def _active(self, analyzer: StaticCodeAnalyzer, settings: Settings) -> bool:
        return analyzer.enabled(settings) and analyzer.is_available(settings)

    def run(self, settings: Settings, working_dir: Path | None = None) -> PipelineResult:
        original_dir = Path.cwd()
        working_dir = working_dir or original_dir

        js_runtime = None
        if any(a.group == "js" and self._active(a, settings) for a, _ in self.stages):
            js_runtime = detect_js_runtime(settings)
        actx = AnalyzerContext(settings=settings, js_runtime=js_runtime)

        issues: list[Issue] = []
        try:
            for group in GROUPS:
                root = settings.php_root if group == "php" else settings.js_root
                _enter(root)
                nctx = NormalizerContext(working_dir=working_dir, source_dir=root)

                for analyzer, normalizer in self.stages:
                    if analyzer.group != group:
                        continue
                    outcome = self._run_stage(analyzer, normalizer, actx, nctx)
                    if isinstance(outcome, Failed):
                        logger.error(outcome.output, extra={"stage": analyzer.tool_name()})
                        logger.error(
                            "Error running %s. See errors above.",
                            analyzer.title,
                            extra={"stage": analyzer.tool_name()},
                        )
                        failure = StageFailure(
                            tool=analyzer.tool_name(),
                            title=analyzer.title,
                            exit_code=int(analyzer.failure_code),
                            output=outcome.output,
                        )
                        return PipelineResult(issues=[], failure=failure)
                    issues.extend(outcome.issues)
        finally:
            _enter(original_dir)

        logger.debug("Analysis complete: %d issues", len(issues))
        return PipelineResult(issues=issues)

    def _run_stage(
        self,
        analyzer: StaticCodeAnalyzer,
        normalizer: FindingNormalizer,
        actx: AnalyzerContext,
        nctx: NormalizerContext,
    ) -> StageOutcome:
        settings = actx.settings
        if not self._active(analyzer, settings):
            return Ok([])

        logger.info(analyzer.running_message(settings), extra={"stage": analyzer.tool_name()})
        raw = analyzer.analyze(actx)
        if raw.error is not None:
            return Failed(raw.error)
        return normalizer.normalize(raw, nctx)
