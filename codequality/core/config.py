from __future__ import annotations

import json
import logging
import os
from enum import IntEnum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

VERSION = "1.6"

COMPOSER_CONFIG_KEY = "gitlab-code-quality"

DEFAULT_PSALM_CONFIG = "psalm.xml"
DEFAULT_PHPSTAN_CONFIG = "phpstan.neon"
DEFAULT_PHPCS_STANDARD = "PSR12"
DEFAULT_ECS_CONFIG = "ecs.php"
DEFAULT_ESLINT_CONFIG = ".eslintrc.yml"
DEFAULT_STYLELINT_CONFIG = ".stylelintrc.yml"
DEFAULT_BIOME_CONFIG = "biome.json"

LastPolicy = Literal["never", "always", "single"]


class ResultCode(IntEnum):
    OK = 0
    PSALM_FAILED = 1
    PHPSTAN_FAILED = 2
    PHPCS_FAILED = 3
    ECS_FAILED = 4
    ESLINT_FAILED = 5
    STYLELINT_FAILED = 6
    CRITICAL_ISSUES = 7
    ISSUES_WITH_STRICT_MODE = 8
    BIOME_FAILED = 9
    CONFIG_ERROR = 10


class ConfigError(ValueError):
    pass


class Settings(BaseModel):
    """Fully resolved run configuration.

    Field aliases are the composer.json ``extra.gitlab-code-quality`` keys.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    # Roots
    php_root: Path = Field(default_factory=Path.cwd)
    js_root: Path = Field(default_factory=Path.cwd)
    bin_dir: Path | None = None

    # Targets
    php_dir: str = Field(".", alias="php-dir")
    js_dir: str = Field("resources", alias="js-dir")
    stylelint_files: str = Field("resources/**/*.{css,scss,sass,vue}", alias="stylelint-files")

    # JS runtimes, in preference order
    bun_bin: str = Field("bun", alias="bun")
    node_bin: str = Field("node", alias="node")

    # Tool toggles
    run_psalm: bool = Field(True, alias="psalm")
    run_phpstan: bool = Field(True, alias="phpstan")
    run_phpcs: bool = Field(True, alias="phpcs")
    run_ecs: bool = Field(True, alias="ecs")
    run_eslint: bool = Field(True, alias="eslint")
    run_stylelint: bool = Field(True, alias="stylelint")
    run_biome: bool = Field(True, alias="biome")

    # Tool configs
    psalm_config: str = Field(DEFAULT_PSALM_CONFIG, alias="psalm-config")
    phpstan_config: str = Field(DEFAULT_PHPSTAN_CONFIG, alias="phpstan-config")
    phpcs_standard: str = Field(DEFAULT_PHPCS_STANDARD, alias="phpcs-standard")
    ecs_config: str = Field(DEFAULT_ECS_CONFIG, alias="ecs-config")
    eslint_config: str = Field(DEFAULT_ESLINT_CONFIG, alias="eslint-config")
    stylelint_config: str = Field(DEFAULT_STYLELINT_CONFIG, alias="stylelint-config")
    biome_config: str = Field(DEFAULT_BIOME_CONFIG, alias="biome-config")
    biome_reporter: Literal["github", "json"] = Field("github", alias="biome-reporter")

    # Output modes
    stats: bool = True
    last: LastPolicy = "never"
    silent: bool = False
    cache: bool = False
    strict: bool = False
    verbosity: int = 1
    timeout: float | None = None

    @field_validator(
        "run_psalm",
        "run_phpstan",
        "run_phpcs",
        "run_ecs",
        "run_eslint",
        "run_stylelint",
        "run_biome",
        mode="before",
    )
    @classmethod
    def _only_false_disables(cls, value: Any) -> bool:
        return value is not False

    @field_validator("last", mode="before")
    @classmethod
    def _last_policy(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return "always" if value else "never"

    @property
    def js_runtimes(self) -> list[str]:
        return [self.bun_bin, self.node_bin]

    @property
    def tool_bin_dir(self) -> Path:
        return self.bin_dir if self.bin_dir is not None else self.php_root / "vendor" / "bin"


def read_composer_config(php_root: Path) -> dict[str, Any]:
    """Return the ``extra.gitlab-code-quality`` section of composer.json, keys normalized."""
    composer_file = php_root / "composer.json"
    if not composer_file.is_file():
        return {}

    logger.debug("Loading Composer config file: %s", composer_file)
    try:
        composer = json.loads(composer_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Cannot read Composer config file %s: %s", composer_file, e)
        return {}

    extra = composer.get("extra") if isinstance(composer, dict) else None
    section = extra.get(COMPOSER_CONFIG_KEY) if isinstance(extra, dict) else None
    if not isinstance(section, dict):
        return {}
    return {str(k).strip().lower(): v for k, v in section.items()}


def load_settings(
    php_root: Path | str | None = None,
    js_root: Path | str | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Build settings from defaults, composer.json and command-line overrides."""
    cwd = Path.cwd()
    php = Path(php_root).resolve() if php_root else cwd
    js = Path(js_root).resolve() if js_root else cwd

    data: dict[str, Any] = read_composer_config(php)
    timeout = os.getenv("CODE_QUALITY_TIMEOUT")
    if timeout and "timeout" not in data:
        data["timeout"] = timeout

    data.update({k: v for k, v in (overrides or {}).items() if v is not None})
    if data.get("bin_dir"):
        data["bin_dir"] = Path(data["bin_dir"]).resolve()
    data["php_root"] = php
    data["js_root"] = js

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
