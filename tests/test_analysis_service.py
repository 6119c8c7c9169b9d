import json
import logging
import os
from pathlib import Path

import pytest

from codequality.analyzers.php import PsalmAnalyzer
from codequality.analyzers.registry import AnalyzerRegistry
from codequality.core.config import ResultCode
from codequality.core.containers import build_analysis_service, build_analyzer_registry, build_normalizer_registry
from codequality.core.util import CmdResult
from codequality.normalizers.registry import NormalizerRegistry
from codequality.services.analysis_service import AnalysisService


def _install(root: Path, *relpaths: str) -> None:
    for rel in relpaths:
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("", encoding="utf-8")


PSALM_BIN = "vendor/bin/psalm"
PHPSTAN_BIN = "vendor/bin/phpstan"
ESLINT_JS = "node_modules/eslint/bin/eslint.js"


@pytest.fixture
def fake_tools(monkeypatch):
    """Route tool invocations to canned outputs keyed by binary file name."""
    outputs: dict[str, CmdResult] = {}
    calls: list[tuple[str, str]] = []

    def fake_run_cmd(cmd, cwd=None, timeout_sec=None):
        binary = cmd[1] if cmd[0] in ("bun", "node") else cmd[0]
        name = Path(binary).name
        calls.append((name, Path.cwd().resolve()))
        return outputs[name]

    monkeypatch.setattr("codequality.analyzers.base.run_cmd", fake_run_cmd)
    monkeypatch.setattr("codequality.analyzers.runtime.run_cmd", lambda *a, **k: CmdResult(0, "v20"))
    return outputs, calls


def _psalm(path, severity="error", kind="InvalidReturnType"):
    return json.dumps([{
        "severity": severity, "type": kind, "message": "bad", "file_path": path,
        "line_from": 2, "line_to": 2, "column_from": 1, "column_to": 4,
    }])


def test_issues_accumulate_in_stage_order(workdir, make_settings, fake_tools):
    outputs, calls = fake_tools
    _install(workdir, PSALM_BIN, ESLINT_JS)
    outputs["psalm"] = CmdResult(2, _psalm(str(workdir / "a.php")))
    outputs["eslint.js"] = CmdResult(1, json.dumps([{
        "filePath": str(workdir / "b.js"),
        "messages": [{"ruleId": "eqeqeq", "severity": 2, "message": "Expected ===", "line": 1, "column": 3}],
    }]))
    settings = make_settings()

    result = build_analysis_service(settings).run(settings, working_dir=workdir)

    assert result.failure is None
    assert [i.check_name for i in result.issues] == ["Psalm.InvalidReturnType", "EsLint.eqeqeq"]
    assert [i.location.path for i in result.issues] == ["a.php", "b.js"]
    assert [c[0] for c in calls] == ["psalm", "eslint.js"]


def test_disabled_and_missing_tools_are_skipped(workdir, make_settings, fake_tools):
    outputs, calls = fake_tools
    _install(workdir, PSALM_BIN)
    settings = make_settings(psalm=False)

    result = build_analysis_service(settings).run(settings, working_dir=workdir)

    assert result.failure is None
    assert result.issues == []
    assert calls == []


def test_unparseable_output_aborts_with_stage_code(workdir, make_settings, fake_tools, caplog):
    outputs, calls = fake_tools
    _install(workdir, PSALM_BIN, PHPSTAN_BIN, ESLINT_JS)
    outputs["psalm"] = CmdResult(2, _psalm("a.php"))
    outputs["phpstan"] = CmdResult(255, "PHP Fatal error:  Uncaught Error in phpstan.phar")
    settings = make_settings()

    with caplog.at_level(logging.INFO):
        result = build_analysis_service(settings).run(settings, working_dir=workdir)

    assert result.failure is not None
    assert result.failure.exit_code == ResultCode.PHPSTAN_FAILED
    assert result.failure.output == "PHP Fatal error:  Uncaught Error in phpstan.phar"
    assert result.issues == []
    # later stages never run
    assert [c[0] for c in calls] == ["psalm", "phpstan"]
    messages = [r.getMessage() for r in caplog.records]
    assert "PHP Fatal error:  Uncaught Error in phpstan.phar" in messages
    assert "Error running PHPStan. See errors above." in messages


def test_missing_js_runtime_fails_js_stage(workdir, make_settings, fake_tools, monkeypatch):
    _install(workdir, ESLINT_JS)
    monkeypatch.setattr("codequality.analyzers.runtime.run_cmd", lambda *a, **k: CmdResult(127, ""))
    settings = make_settings()

    result = build_analysis_service(settings).run(settings, working_dir=workdir)

    assert result.failure.exit_code == ResultCode.ESLINT_FAILED
    assert result.failure.output == "No JS runtime found: no Bun, no Node"


def test_stages_run_in_their_roots_and_cwd_is_restored(tmp_path, make_settings, fake_tools):
    outputs, calls = fake_tools
    php_root = tmp_path / "backend"
    js_root = tmp_path / "frontend"
    _install(php_root, PSALM_BIN)
    _install(js_root, ESLINT_JS)
    outputs["psalm"] = CmdResult(0, "[]")
    outputs["eslint.js"] = CmdResult(0, "[]")
    start = os.getcwd()
    settings = make_settings(php_root=php_root, js_root=js_root)

    result = build_analysis_service(settings).run(settings, working_dir=tmp_path)

    assert result.failure is None
    assert calls == [("psalm", php_root.resolve()), ("eslint.js", js_root.resolve())]
    assert os.getcwd() == start


def test_cwd_restored_after_failure(workdir, make_settings, fake_tools):
    outputs, _ = fake_tools
    _install(workdir, PSALM_BIN)
    outputs["psalm"] = CmdResult(1, "garbage")
    start = os.getcwd()
    settings = make_settings()

    result = build_analysis_service(settings).run(settings, working_dir=workdir)

    assert result.failure.exit_code == ResultCode.PSALM_FAILED
    assert os.getcwd() == start


def test_runtime_not_probed_without_js_tools(workdir, make_settings, fake_tools, monkeypatch):
    def boom(*args, **kwargs):
        raise AssertionError("runtime probed")

    monkeypatch.setattr("codequality.analyzers.runtime.run_cmd", boom)
    settings = make_settings()
    assert build_analysis_service(settings).run(settings, working_dir=workdir).failure is None


def test_normalizer_registry_covers_every_stage(make_settings):
    registry = build_normalizer_registry(make_settings())
    assert registry.tools() == build_analyzer_registry().list()
    assert registry.by_tool("ecs").tool_name() == "ecs"


def test_missing_normalizer_is_rejected(make_settings):
    with pytest.raises(LookupError, match="psalm"):
        AnalysisService(AnalyzerRegistry([PsalmAnalyzer()]), NormalizerRegistry([]))
