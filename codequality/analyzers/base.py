from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from codequality.core.config import ResultCode, Settings
from codequality.core.util import run_cmd

NO_JS_RUNTIME = "No JS runtime found: no Bun, no Node"


@dataclass
class RawToolResult:
    tool: str
    exit_code: int
    output: str
    error: str | None = None


@dataclass
class AnalyzerContext:
    settings: Settings
    js_runtime: str | None = None


class StaticCodeAnalyzer(ABC):
    title: str = ""
    group: Literal["php", "js"] = "php"
    failure_code: ResultCode = ResultCode.OK

    @abstractmethod
    def tool_name(self) -> str: ...

    @abstractmethod
    def enabled(self, settings: Settings) -> bool: ...

    @abstractmethod
    def binary(self, settings: Settings) -> Path: ...

    @abstractmethod
    def build_command(self, ctx: AnalyzerContext) -> list[str]: ...

    def is_available(self, settings: Settings) -> bool:
        return self.binary(settings).is_file()

    def running_message(self, settings: Settings) -> str:
        return f"Running {self.title}..."

    def analyze(self, ctx: AnalyzerContext) -> RawToolResult:
        r = run_cmd(self.build_command(ctx), timeout_sec=ctx.settings.timeout)
        return RawToolResult(tool=self.tool_name(), exit_code=r.exit_code, output=r.output)


class PhpAnalyzer(StaticCodeAnalyzer):
    group = "php"
    executable: str = ""

    def binary(self, settings: Settings) -> Path:
        return settings.tool_bin_dir / self.executable

    @staticmethod
    def target_args(settings: Settings) -> list[str]:
        return [settings.php_dir] if settings.php_dir not in ("", ".") else []


class JsAnalyzer(StaticCodeAnalyzer):
    group = "js"
    script: str = ""

    def binary(self, settings: Settings) -> Path:
        return settings.js_root / "node_modules" / self.script

    def analyze(self, ctx: AnalyzerContext) -> RawToolResult:
        if ctx.js_runtime is None:
            return RawToolResult(tool=self.tool_name(), exit_code=127, output="", error=NO_JS_RUNTIME)
        return super().analyze(ctx)
