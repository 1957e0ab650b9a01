"""
Runner configuration.

Loads settings from environment variables (and a local ``.env``) with
pydantic-settings, and resolves the package name used as the default stack
prefix for deployed function names.
"""

from __future__ import annotations

import json
import logging
import os
import tomllib
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sam_runner.models import RunOptions

PACKAGE_NAME_ENV = "PACKAGE_NAME"

logger = logging.getLogger("sam_runner.config")


class RunnerConfig(BaseSettings):
    """
    Environment-driven settings for an event run.
    """

    OUTPUT_DIR: str = Field(..., description="Directory for captured Lambda responses")
    EVENTS_DIR: str = Field(..., description="Directory of JSON event fixtures")
    TEMPLATE_PATH: str = Field(..., description="SAM template path")
    STACK_NAME: Optional[str] = Field(
        default=None, description="Prefix of deployed function names"
    )
    USE_PACKAGE_NAME: bool = Field(
        default=True, description="Use the project package name when STACK_NAME is unset"
    )
    PACKAGE_NAME: Optional[str] = Field(
        default=None, description="Package name used as the stack prefix fallback"
    )
    LOG_LEVEL: str = Field(default="WARNING", description="Log level")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    def to_options(
        self,
        mode: str,
        fixture_filter: str | None = None,
        *,
        verbose: bool = False,
    ) -> RunOptions:
        return RunOptions(
            mode=mode,
            fixture_filter=fixture_filter or None,
            events_dir=Path(self.EVENTS_DIR),
            output_dir=Path(self.OUTPUT_DIR),
            template_path=Path(self.TEMPLATE_PATH),
            stack_name=self.STACK_NAME or None,
            use_package_name_fallback=self.USE_PACKAGE_NAME,
            package_name=self.PACKAGE_NAME or None,
            verbose=verbose,
        )


def _read_pyproject_name(path: Path) -> str | None:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Skipping unreadable %s: %s", path, exc)
        return None
    project = data.get("project")
    if not isinstance(project, dict):
        return None
    name = project.get("name")
    return str(name) if name else None


def _read_package_json_name(path: Path) -> str | None:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
        logger.warning("Skipping unreadable %s: %s", path, exc)
        return None
    name = data.get("name") if isinstance(data, dict) else None
    return str(name) if name else None


def resolve_package_name(
    current_path: Optional[Path] = None,
    *,
    override: Optional[str] = None,
) -> str | None:
    """
    Resolve the project package name.

    Priority: 1. ``override`` (PACKAGE_NAME from RunnerConfig, which includes
    ``.env``), 2. PACKAGE_NAME env var, 3. nearest pyproject.toml
    [project].name, 4. nearest package.json name. Unreadable manifests are
    skipped with a warning.
    """
    override = (override or os.environ.get(PACKAGE_NAME_ENV, "")).strip()
    if override:
        return override

    if current_path is None:
        current_path = Path.cwd()

    for path in [current_path] + list(current_path.parents):
        pyproject = path / "pyproject.toml"
        if pyproject.is_file():
            name = _read_pyproject_name(pyproject)
            if name:
                return name
        package_json = path / "package.json"
        if package_json.is_file():
            name = _read_package_json_name(package_json)
            if name:
                return name
    return None
