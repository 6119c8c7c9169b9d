from __future__ import annotations

import logging

from codequality.core.config import Settings
from codequality.core.util import run_cmd

logger = logging.getLogger(__name__)


def detect_js_runtime(settings: Settings) -> str | None:
    """Return the first runtime binary, in preference order, whose ``--version`` succeeds."""
    runtime = None
    for candidate in settings.js_runtimes:
        if run_cmd([candidate, "--version"], timeout_sec=settings.timeout).exit_code == 0:
            runtime = candidate
            break
    logger.debug("JS runtime: %s", runtime)
    return runtime
