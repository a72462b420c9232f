"""
config.py - Settings for a ranking session

Values are resolved in increasing priority:
  defaults (utils.paths) < YAML config file < environment < CLI flags

A .env file in the working directory is loaded by utils.paths on import, so
its TIERMAKER_* entries (TIERMAKER_ROOT included) count as environment.

Example tiermaker.yaml:

    items_file: lists/games.txt
    checkpoint_file: .tiermaker/games.tmp
    results_file: results/games.csv
    history: true
    reconcile: true
    log_level: INFO
"""

import os
import pathlib
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

import yaml
from .paths import ITEMS_FILE, CHECKPOINT_FILE, RESULTS_FILE, CONFIG_FILE, resolve

ENV_PREFIX = "TIERMAKER_"

# env var suffix -> Settings field
_ENV_KEYS = {
    "ITEMS": "items_file",
    "CHECKPOINT": "checkpoint_file",
    "RESULTS": "results_file",
    "HISTORY": "history",
    "RECONCILE": "reconcile",
    "LOG_LEVEL": "log_level",
}

_PATH_FIELDS = ("items_file", "checkpoint_file", "results_file")
_BOOL_FIELDS = ("history", "reconcile")


@dataclass(frozen=True)
class Settings:
    items_file: pathlib.Path = ITEMS_FILE
    checkpoint_file: pathlib.Path = CHECKPOINT_FILE
    results_file: pathlib.Path = RESULTS_FILE
    history: bool = True
    reconcile: bool = True
    log_level: str = "INFO"


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Expected a boolean, got {value!r}")


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Unknown setting(s): {', '.join(unknown)}")

    out: Dict[str, Any] = {}
    for key, value in values.items():
        if value is None:
            continue
        if key in _PATH_FIELDS:
            out[key] = resolve(value)
        elif key in _BOOL_FIELDS:
            out[key] = _as_bool(value)
        else:
            out[key] = str(value).upper()
    return out


def load_config_file(config_path: pathlib.Path) -> Dict[str, Any]:
    """Load settings from a YAML configuration file."""
    with open(config_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{config_path} must contain a mapping, got {type(data).__name__}")
    return data


def env_overrides(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Collect TIERMAKER_* variables that map onto settings."""
    environ = os.environ if environ is None else environ
    return {
        field: environ[ENV_PREFIX + suffix]
        for suffix, field in _ENV_KEYS.items()
        if ENV_PREFIX + suffix in environ
    }


def load_settings(
    config_path: Optional[pathlib.Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> Settings:
    """Build Settings from defaults, the YAML file, the environment and *overrides*.

    An explicit *config_path* must exist; the default tiermaker.yaml is optional.
    """
    settings = Settings()

    if config_path is not None:
        path = resolve(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        settings = replace(settings, **_coerce(load_config_file(path)))
    elif CONFIG_FILE.exists():
        settings = replace(settings, **_coerce(load_config_file(CONFIG_FILE)))

    settings = replace(settings, **_coerce(env_overrides(environ)))
    if overrides:
        settings = replace(settings, **_coerce(overrides))
    return settings
