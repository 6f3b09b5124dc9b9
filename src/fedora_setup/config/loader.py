# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/config/loader.py

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from fedora_setup.errors import SetupError
from .models import SetupConfig

log = logging.getLogger("fedora_setup")

CONFIG_ENV = "FEDORA_SETUP_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/fedora-setup/config.yaml")


class ConfigError(SetupError):
    """The configuration file is missing, unreadable or invalid."""


def _find_config_file(explicit: Optional[Path]) -> Optional[Path]:
    """
    Locate the config file using this priority:

    1. explicit ``--config`` path (must exist)
    2. FEDORA_SETUP_CONFIG environment variable (must exist)
    3. ~/.config/fedora-setup/config.yaml if present
    """
    if explicit is not None:
        p = Path(explicit).expanduser()
        if not p.is_file():
            raise ConfigError(f"config file not found: {p}")
        return p

    env = os.environ.get(CONFIG_ENV)
    if env:
        p = Path(env).expanduser()
        if not p.is_file():
            raise ConfigError(f"{CONFIG_ENV}={env} does not exist")
        return p

    p = DEFAULT_CONFIG_PATH.expanduser()
    if p.is_file():
        return p
    return None


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text(encoding="utf-8")
    expanded = os.path.expandvars(raw)
    data = yaml.safe_load(expanded) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Optional[str | Path] = None, **overrides: Any) -> SetupConfig:
    """
    Load and validate the setup configuration.

    ``overrides`` are top-level keys (e.g. ``profile``, ``dry_run``) given
    on the command line; ``None`` values are ignored so unset flags keep
    the file or default value.
    """
    cfg_path = _find_config_file(Path(path) if path is not None else None)

    data: dict = {}
    if cfg_path is not None:
        log.debug("loading config from %s", cfg_path)
        try:
            data = _load_yaml(cfg_path)
        except yaml.YAMLError as e:
            raise ConfigError(f"{cfg_path}: invalid YAML: {e}") from e

    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return SetupConfig.model_validate(data)
    except ValidationError as e:
        where = f" in {cfg_path}" if cfg_path else ""
        raise ConfigError(f"invalid configuration{where}:\n{e}") from e
