"""YAML configuration loading with include directive support."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic_settings import BaseSettings, YamlConfigSettingsSource

from hostmend.core.log import logger

DEFAULTS_FILE = Path(__file__).parent.parent / "defaults" / "default.yaml"
CONFIG_NAME = "hostmend.yaml"


def cli_includes(argv: list[str]) -> list[str]:
    """Collect the values of every --include option in argv."""
    includes = []
    args = iter(argv[1:])
    for arg in args:
        if arg == "--include":
            value = next(args, None)
            if value is not None:
                includes.append(value)
        elif arg.startswith("--include="):
            includes.append(arg.split("=", 1)[1])
    return includes


def deep_merge(base: dict, override: dict) -> dict:
    """Merge override into a copy of base; nested dicts merge too."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class YamlWithIncludesSettingsSource(YamlConfigSettingsSource):
    """YAML source layering several files.

    Files are merged in this order, later ones winning:
    packaged defaults, the user config directory, ./hostmend.yaml,
    then every --include given on the command line. Any file may list
    further files under an include: key; those are merged underneath
    the including file.
    """

    def __init__(self, settings_cls: type[BaseSettings], yaml_file=None):
        base = yaml_file or settings_cls.model_config.get("yaml_file")
        self.project_file = base
        super().__init__(settings_cls, cli_includes(sys.argv))

    def _read_files(self, files, *args, **kwargs):
        candidates = [
            DEFAULTS_FILE,
            Path(user_config_dir("hostmend", appauthor=False)) / CONFIG_NAME,
        ]
        if self.project_file:
            candidates.append(Path(self.project_file))
        if files:
            if isinstance(files, (str, os.PathLike)):
                files = [files]
            candidates.extend(Path(f).expanduser() for f in files)

        result = {}
        for path in candidates:
            if path.is_file():
                logger.debug("Loading configuration", file=str(path))
                result = deep_merge(
                    result, self._load_with_includes(path, set())
                )
            else:
                logger.debug("Configuration file not found", file=str(path))
        return result

    def _load_with_includes(self, path: Path, visited: set[Path]) -> dict:
        """Load one file, resolving its include: entries.

        Raises:
            ValueError: On a circular include
        """
        path = path.resolve()
        if path in visited:
            raise ValueError(f"Circular include: {path}")
        visited = visited | {path}

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        includes = data.pop("include", None) or []
        if isinstance(includes, str):
            includes = [includes]

        merged = {}
        for inc in includes:
            inc_path = Path(inc).expanduser()
            if not inc_path.is_absolute():
                inc_path = path.parent / inc_path
            merged = deep_merge(
                merged, self._load_with_includes(inc_path, visited)
            )
        return deep_merge(merged, data)
