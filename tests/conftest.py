import logging
from pathlib import Path

import pytest

from codequality.analyzers.base import RawToolResult
from codequality.core.config import Settings
from codequality.normalizers.base import NormalizerContext


@pytest.fixture(autouse=True)
def _restore_cwd(monkeypatch):
    """Pipeline tests chdir into project roots; keep every test starting from the same place."""
    monkeypatch.chdir(Path.cwd())


@pytest.fixture(autouse=True)
def _no_log_env(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    monkeypatch.delenv("CODE_QUALITY_TIMEOUT", raising=False)
    yield
    logging.getLogger().handlers.clear()


@pytest.fixture
def workdir(tmp_path) -> Path:
    d = tmp_path / "repo"
    d.mkdir()
    return d


@pytest.fixture
def ctx(workdir) -> NormalizerContext:
    return NormalizerContext(working_dir=workdir, source_dir=workdir)


@pytest.fixture
def make_settings(workdir):
    def _make(**kwargs) -> Settings:
        kwargs.setdefault("php_root", workdir)
        kwargs.setdefault("js_root", workdir)
        return Settings(**kwargs)

    return _make


@pytest.fixture
def make_raw():
    def _make(tool: str, output: str, exit_code: int = 0) -> RawToolResult:
        return RawToolResult(tool=tool, exit_code=exit_code, output=output)

    return _make
