from __future__ import annotations

from codequality.core.config import (
    DEFAULT_BIOME_CONFIG,
    DEFAULT_ESLINT_CONFIG,
    DEFAULT_STYLELINT_CONFIG,
    ResultCode,
    Settings,
)

from .base import AnalyzerContext, JsAnalyzer


class EsLintAnalyzer(JsAnalyzer):
    title = "ESLint"
    script = "eslint/bin/eslint.js"
    failure_code = ResultCode.ESLINT_FAILED

    def tool_name(self) -> str:
        return "eslint"

    def enabled(self, settings: Settings) -> bool:
        return settings.run_eslint

    def build_command(self, ctx: AnalyzerContext) -> list[str]:
        s = ctx.settings
        cmd = [ctx.js_runtime or "", str(self.binary(s)), "--format=json"]
        if s.eslint_config != DEFAULT_ESLINT_CONFIG:
            cmd += ["--config", s.eslint_config]
        return cmd + [s.js_dir]


class StyleLintAnalyzer(JsAnalyzer):
    title = "StyleLint"
    script = "stylelint/bin/stylelint.mjs"
    failure_code = ResultCode.STYLELINT_FAILED

    def tool_name(self) -> str:
        return "stylelint"

    def enabled(self, settings: Settings) -> bool:
        return settings.run_stylelint

    def build_command(self, ctx: AnalyzerContext) -> list[str]:
        s = ctx.settings
        cmd = [ctx.js_runtime or "", str(self.binary(s)), "--formatter=json"]
        if s.stylelint_config != DEFAULT_STYLELINT_CONFIG:
            cmd += ["--config", s.stylelint_config]
        # The glob is expanded by StyleLint itself
        return cmd + [s.stylelint_files]


class BiomeAnalyzer(JsAnalyzer):
    title = "Biome"
    script = "@biomejs/biome/bin/biome"
    failure_code = ResultCode.BIOME_FAILED

    def tool_name(self) -> str:
        return "biome"

    def enabled(self, settings: Settings) -> bool:
        return settings.run_biome

    def build_command(self, ctx: AnalyzerContext) -> list[str]:
        s = ctx.settings
        cmd = [ctx.js_runtime or "", str(self.binary(s)), "lint", f"--reporter={s.biome_reporter}"]
        if s.biome_config != DEFAULT_BIOME_CONFIG:
            cmd += ["--config-path", s.biome_config]
        return cmd + [s.js_dir]
