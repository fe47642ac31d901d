"""
Config system - Layered typed configuration.

Merge precedence (later overrides earlier)::

    defaults < runtimedist.yaml < .env < RTD_* environment < overrides

Environment keys use a double underscore for nesting:
``RTD_SITEGEN__OUTPUT_DIR=site`` → ``{"sitegen": {"output_dir": "site"}}``.
"""

from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import dotenv_values

from .faults import ConfigInvalidFault, ConfigMissingFault

logger = logging.getLogger("runtimedist.config")

DEFAULT_CONFIG_FILE = "runtimedist.yaml"
DEFAULT_ENV_PREFIX = "RTD_"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULTS: Dict[str, Any] = {
    "sitegen": {
        "store_dir": "releases",
        "output_dir": "site",
        "dry_run": False,
        "log_level": "INFO",
    },
    "publish": {
        "repository": "",
        "draft": False,
        "name_template": "{runtime} {version}",
    },
}


def parse_bool(key: str, value: Any) -> bool:
    """Accept real booleans and the usual string spellings."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigInvalidFault(key, f"expected a boolean, got {value!r}")


# ── Typed views ─────────────────────────────────────────────────────────


@dataclass
class SiteGenConfig:
    store_dir: str = "releases"
    output_dir: str = "site"
    dry_run: bool = False
    log_level: str = "INFO"

    def validate(self) -> "SiteGenConfig":
        if not self.output_dir:
            raise ConfigMissingFault("sitegen.output_dir")
        if not self.store_dir:
            raise ConfigMissingFault("sitegen.store_dir")
        level = self.log_level.upper()
        if level not in _LOG_LEVELS:
            raise ConfigInvalidFault("sitegen.log_level", f"must be one of {', '.join(_LOG_LEVELS)}")
        self.log_level = level
        return self


@dataclass
class PublishConfig:
    repository: str = ""
    draft: bool = False
    name_template: str = "{runtime} {version}"

    def validate(self) -> "PublishConfig":
        if self.repository and self.repository.count("/") != 1:
            raise ConfigInvalidFault("publish.repository", "expected 'owner/name'")
        if "{version}" not in self.name_template:
            raise ConfigInvalidFault("publish.name_template", "must contain '{version}'")
        return self


# ── Loader ──────────────────────────────────────────────────────────────


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources with precedence:
    overrides > environment variables > .env file > YAML file > defaults
    """

    def __init__(self, env_prefix: str = DEFAULT_ENV_PREFIX):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = copy.deepcopy(DEFAULTS)

    @classmethod
    def load(
        cls,
        path: Optional[str] = None,
        env_prefix: str = DEFAULT_ENV_PREFIX,
        env_file: Optional[str] = ".env",
        environ: Optional[Mapping[str, str]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        """
        Load configuration from every source.

        Args:
            path: YAML file; defaults to ``runtimedist.yaml`` when present
            env_prefix: Prefix for environment variables
            env_file: ``.env`` file (skipped when absent)
            environ: Environment mapping (defaults to ``os.environ``)
            overrides: Manual overrides (highest precedence)

        Raises:
            ConfigMissingFault: If an explicit *path* does not exist.
            ConfigInvalidFault: If the YAML file is malformed.
        """
        loader = cls(env_prefix=env_prefix)

        if path:
            if not Path(path).exists():
                raise ConfigMissingFault("config", metadata={"path": path})
            loader._load_yaml_file(Path(path))
        elif Path(DEFAULT_CONFIG_FILE).exists():
            loader._load_yaml_file(Path(DEFAULT_CONFIG_FILE))

        if env_file and Path(env_file).exists():
            loader._load_env_file(env_file)

        loader._load_from_env(os.environ if environ is None else environ)

        if overrides:
            loader._merge_dict(loader.config_data, overrides)

        return loader

    def _load_yaml_file(self, path: Path) -> None:
        import yaml

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigInvalidFault(str(path), f"malformed YAML: {exc}") from exc
        if data is None:
            return
        if not isinstance(data, dict):
            raise ConfigInvalidFault(str(path), "top level must be a mapping")
        self._merge_dict(self.config_data, data)
        logger.debug("Loaded config file %s", path)

    def _load_env_file(self, path: str) -> None:
        values = dotenv_values(path)
        self._load_from_env({k: v for k, v in values.items() if v is not None})
        logger.debug("Loaded env file %s", path)

    def _load_from_env(self, environ: Mapping[str, str]) -> None:
        for key, value in environ.items():
            if key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _set_nested(self, key: str, value: Any) -> None:
        """Convert RTD_SITEGEN__OUTPUT_DIR to a nested dict entry."""
        parts = key[len(self.env_prefix):].lower().split("__")

        current = self.config_data
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value

    def _merge_dict(self, target: dict, source: Mapping[str, Any]) -> None:
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, Mapping):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Get config value by dot-separated path."""
        current: Any = self.config_data
        for part in path.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def to_dict(self) -> dict:
        return copy.deepcopy(self.config_data)

    # ── Typed sections ───────────────────────────────────────────────

    def _section(self, name: str, config_class: type) -> Any:
        data = self.get(name, {})
        if not isinstance(data, dict):
            raise ConfigInvalidFault(name, "expected a mapping")
        kwargs = {}
        for f in fields(config_class):
            if f.name not in data or data[f.name] is None:
                continue
            value = data[f.name]
            key = f"{name}.{f.name}"
            if f.type in (bool, "bool"):
                kwargs[f.name] = parse_bool(key, value)
            elif isinstance(value, (dict, list)):
                raise ConfigInvalidFault(key, "expected a scalar")
            else:
                kwargs[f.name] = str(value)
        return config_class(**kwargs)

    def sitegen(self) -> SiteGenConfig:
        return self._section("sitegen", SiteGenConfig).validate()

    def publish(self) -> PublishConfig:
        return self._section("publish", PublishConfig).validate()
