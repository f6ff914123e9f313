"""Run configuration.

Priority, lowest first:
1. built-in defaults
2. YAML config file
3. environment variables
4. command-line flags (applied by main.py)
"""
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import DEFAULT_PROBE_TIMEOUT, DEFAULT_SERVICE_URL
from .errors import ConfigError
from .models import Action
from .policy import parse_action

log = logging.getLogger(__name__)

ENV_MAP = {
    "REGIONMIGRATE_ROOT": "root_dir",
    "REGIONMIGRATE_SERVICE_URL": "service_url",
    "REGIONMIGRATE_JOURNAL_DIR": "journal_dir",
    "REGIONMIGRATE_LOG_LEVEL": "log_level",
}


@dataclass
class MigrationConfig:
    root_dir: str = "."
    service_url: str = DEFAULT_SERVICE_URL
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT
    log_files: Action = Action.IGNORE
    extra_files: Action = Action.IGNORE
    journal_dir: Optional[str] = None
    log_level: str = "INFO"

    def update(self, values: Dict[str, Any]) -> None:
        known = {f.name for f in fields(self)}
        for key, value in values.items():
            if key not in known:
                raise ConfigError(f"Unknown config key: {key}")
            if value is None:
                continue
            if key in ("log_files", "extra_files") and not isinstance(value, Action):
                value = parse_action(str(value))
            elif key == "probe_timeout":
                try:
                    value = float(value)
                except (TypeError, ValueError) as e:
                    raise ConfigError(f"probe_timeout must be a number, got {value!r}") from e
            elif key in ("root_dir", "service_url", "journal_dir", "log_level"):
                value = str(value)
            setattr(self, key, value)


def load_config(path: Optional[Path] = None, environ=None) -> MigrationConfig:
    config = MigrationConfig()
    if path is not None:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse config file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        config.update(data)
        log.debug("Loaded config from %s", path)

    environ = os.environ if environ is None else environ
    config.update({key: environ[env] for env, key in ENV_MAP.items() if env in environ})
    return config
