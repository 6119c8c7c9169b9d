from __future__ import annotations

from codequality.core.config import (
    DEFAULT_ECS_CONFIG,
    DEFAULT_PHPSTAN_CONFIG,
    DEFAULT_PSALM_CONFIG,
    ResultCode,
    Settings,
)

from .base import AnalyzerContext, PhpAnalyzer


class PsalmAnalyzer(PhpAnalyzer):
    title = "Psalm"
    executable = "psalm"
    failure_code = ResultCode.PSALM_FAILED

    def tool_name(self) -> str:
        return "psalm"

    def enabled(self, settings: Settings) -> bool:
        return settings.run_psalm

    def build_command(self, ctx: AnalyzerContext) -> list[str]:
        s = ctx.settings
        cmd = [str(self.binary(s))]
        if not s.cache:
            cmd.append("--no-cache")
        cmd += ["--memory-limit=-1", "--output-format=json"]
        if s.psalm_config != DEFAULT_PSALM_CONFIG:
            cmd.append(f"--config={s.psalm_config}")
        return cmd + self.target_args(s)


class PhpStanAnalyzer(PhpAnalyzer):
    title = "PHPStan"
    executable = "phpstan"
    failure_code = ResultCode.PHPSTAN_FAILED

    def tool_name(self) -> str:
        return "phpstan"

    def enabled(self, settings: Settings) -> bool:
        return settings.run_phpstan

    def build_command(self, ctx: AnalyzerContext) -> list[str]:
        s = ctx.settings
        cmd = [str(self.binary(s)), "analyse", "--memory-limit=-1", "--no-interaction", "--error-format=json"]
        if s.phpstan_config != DEFAULT_PHPSTAN_CONFIG:
            cmd.append(f"--configuration={s.phpstan_config}")
        return cmd + self.target_args(s)


class PhpCsAnalyzer(PhpAnalyzer):
    title = "PHP CodeSniffer"
    executable = "phpcs"
    failure_code = ResultCode.PHPCS_FAILED

    def tool_name(self) -> str:
        return "phpcs"

    def enabled(self, settings: Settings) -> bool:
        return settings.run_phpcs

    def running_message(self, settings: Settings) -> str:
        return f"Running PHP CodeSniffer with standard {settings.phpcs_standard}..."

    def build_command(self, ctx: AnalyzerContext) -> list[str]:
        s = ctx.settings
        cmd = [str(self.binary(s))]
        if not s.cache:
            cmd.append("--no-cache")
        # phpcs needs an explicit target, "." included
        return cmd + ["--report=json", f"--standard={s.phpcs_standard}", s.php_dir or "."]


class EcsAnalyzer(PhpAnalyzer):
    title = "ECS (Easy Coding Standard)"
    executable = "ecs"
    failure_code = ResultCode.ECS_FAILED

    def tool_name(self) -> str:
        return "ecs"

    def enabled(self, settings: Settings) -> bool:
        return settings.run_ecs

    def build_command(self, ctx: AnalyzerContext) -> list[str]:
        s = ctx.settings
        cmd = [str(self.binary(s))]
        if not s.cache:
            cmd.append("--clear-cache")
        cmd += ["--memory-limit=-1", "--output-format=json"]
        if s.ecs_config != DEFAULT_ECS_CONFIG:
            cmd.append(f"--config={s.ecs_config}")
        return cmd + self.target_args(s)
