"""Application configuration."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

import platformdirs
from pydantic import Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from hostmend.core.base import BaseConfig
from hostmend.core.log import Logger
from hostmend.core.yaml_settings import YamlWithIncludesSettingsSource


def _default_system_root() -> Path:
    return Path(os.environ.get("SystemRoot", r"C:\Windows"))


class ToolsConfig(BaseConfig):
    """Where the maintenance tools live and how they are run."""

    system_root: Path = Field(
        default_factory=_default_system_root,
        description="Windows directory holding System32",
    )
    volume: str = Field(
        default="C:",
        description="Volume checked by FileSystemScan",
    )
    powershell: Path | None = Field(
        default=None,
        description=(
            "PowerShell used for Windows Update; defaults to the "
            "inbox Windows PowerShell under System32"
        ),
    )
    timeout: int | None = Field(
        default=None,
        description=(
            "Seconds before a tool is killed. Unset waits for the tool "
            "however long it takes"
        ),
    )

    @property
    def system_dir(self) -> Path:
        return self.system_root / "System32"

    def tool_path(self, executable: str) -> Path:
        return self.system_dir / executable

    @property
    def powershell_path(self) -> Path:
        if self.powershell is not None:
            return self.powershell
        return (
            self.system_dir / "WindowsPowerShell" / "v1.0" / "powershell.exe"
        )


class Config(BaseConfig):
    """All configuration, loaded from YAML, environment and CLI."""

    tools: ToolsConfig = Field(
        default_factory=ToolsConfig,
        description="Maintenance tool settings",
    )
    logger: Logger = Field(
        default_factory=Logger,
        description="Logger configuration",
    )
    log_root: Path = Field(
        default_factory=lambda: Path(
            platformdirs.user_state_dir("hostmend", appauthor=False)
        ),
        description="Root directory for per-run log files",
    )

    @model_validator(mode='after')
    def _setup_logger(self) -> Config:
        """Install the configured logger as the global one."""
        from hostmend.core.log import setup_logger

        self.logger = setup_logger(
            log_root=self.log_root,
            run_name=datetime.now().strftime('%Y%m%d-%H%M%S'),
            console=self.logger.console,
            file=self.logger.file,
            otlp=self.logger.otlp,
            level=self.logger.level,
        )
        return self


class State(BaseSettings):
    """Settings root: configuration plus extra include files.

    Sources, highest priority first: init arguments, YAML files,
    .env, HOSTMEND_* environment variables, file secrets.
    """

    config: Config = Field(description="Application configuration")
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to merge over the configuration. "
            "Use --include on the command line or include: in YAML."
        ),
    )

    model_config = SettingsConfigDict(
        yaml_file="hostmend.yaml",
        env_file=".env",
        env_prefix="HOSTMEND_",
        env_nested_delimiter="__",
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        extra='ignore',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )

    def close(self):
        self.config.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False


__all__ = ["State", "Config", "ToolsConfig"]
