import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)

EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


@dataclass
class CmdResult:
    exit_code: int
    output: str


def _join_lines(text: str) -> str:
    return "\n".join(text.splitlines())


def run_cmd(cmd: Sequence[str], cwd: Path | None = None, timeout_sec: float | None = None) -> CmdResult:
    """Run ``cmd`` to completion and return its exit code and merged stdout/stderr.

    A non-zero exit code is not an error here: linters exit non-zero when they
    find issues. No timeout is applied unless ``timeout_sec`` is given.
    """
    logger.debug("Executing command: %s", subprocess.list2cmdline(list(cmd)))
    try:
        p = subprocess.run(
            list(cmd),
            cwd=str(cwd) if cwd else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            encoding="utf-8",
            errors="replace",
            timeout=timeout_sec,
        )
    except FileNotFoundError as e:
        return CmdResult(EXIT_NOT_FOUND, str(e))
    except subprocess.TimeoutExpired as e:
        out = e.output or ""
        if isinstance(out, bytes):
            out = out.decode("utf-8", errors="replace")
        lines = [_join_lines(out), f"Command timed out after {timeout_sec} seconds"]
        return CmdResult(EXIT_TIMEOUT, "\n".join(line for line in lines if line))
    return CmdResult(p.returncode, _join_lines(p.stdout or ""))
