#!/usr/bin/env python3
"""GitLab Code Quality report generator for PHP and JS projects."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from codequality.core.config import VERSION, ConfigError, ResultCode, load_settings
from codequality.core.containers import build_analysis_service
from codequality.core.logging import setup_logging
from codequality.services.report_service import ReportService

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gitlab-code-quality",
        description=(
            "Runs Psalm, PHPStan, PHP CodeSniffer, ECS, ESLint, StyleLint and Biome, "
            "and prints one GitLab Code Quality report."
        ),
        epilog="Usage: gitlab-code-quality > gl-code-quality-report.json",
    )
    parser.add_argument("-v", "--version", action="version", version=f"v{VERSION}", help="Print version.")
    parser.add_argument(
        "-s", "--strict", action="store_true", default=None,
        help="Return non-zero exit code if issues are found.",
    )
    parser.add_argument(
        "-vv", "--verbose", dest="verbosity", action="store_const", const=2,
        help="Increase output verbosity.",
    )
    parser.add_argument("-vvv", dest="verbosity", action="store_const", const=3, help=argparse.SUPPRESS)
    parser.add_argument("-vvvv", dest="verbosity", action="store_const", const=4, help=argparse.SUPPRESS)
    parser.add_argument("--php-root", help="PHP project root (composer.json, vendor/bin). Default: current dir.")
    parser.add_argument("--js-root", help="JS project root (node_modules). Default: current dir.")
    parser.add_argument("--bin-dir", help="Directory of the PHP tool binaries. Default: <php-root>/vendor/bin.")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbosity or 1)

    try:
        settings = load_settings(
            php_root=args.php_root,
            js_root=args.js_root,
            overrides={"strict": args.strict, "verbosity": args.verbosity, "bin_dir": args.bin_dir},
        )
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return int(ResultCode.CONFIG_ERROR)

    # composer.json may set its own verbosity
    setup_logging(settings.verbosity)

    result = build_analysis_service(settings).run(settings)
    if result.failure is not None:
        return result.failure.exit_code

    summary = ReportService(settings).summarize(result.issues)
    if summary.report_json is not None:
        sys.stdout.write(summary.report_json + "\n")
        sys.stdout.flush()
    if summary.stats_text:
        for line in summary.stats_text.splitlines():
            logger.info(line)
    return summary.exit_code


if __name__ == "__main__":
    sys.exit(main())
