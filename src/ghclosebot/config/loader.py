from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ghclosebot.config.models import BotConfig
from ghclosebot.core.errors import ConfigError

_ENV_PATTERN = re.compile(r"\$\{([A-Z0-9_]+)\}")


def load_config(path: str | Path) -> BotConfig:
    """Read, expand and validate the YAML config.

    The returned object is frozen; a reload builds a new one instead of
    mutating the active config.
    """
    config_path = Path(path)
    if not config_path.exists() or not config_path.is_file():
        raise ConfigError(f"Config file does not exist: {path}")
    try:
        raw_text = config_path.read_text(encoding="utf-8")
        raw: Any = yaml.safe_load(raw_text)
    except OSError as exc:
        raise ConfigError(f"Failed to read config file: {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    return parse_config(raw, source=str(config_path))


def parse_config(raw: dict[str, Any], source: str = "<config>") -> BotConfig:
    expanded = _expand_env_vars(raw, source, "")
    try:
        return BotConfig.model_validate(expanded)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {source}: {exc}") from exc


def _expand_env_vars(value: Any, source: str, key_path: str) -> Any:
    """Expand ${VAR} in every string, naming the file and key of a missing variable."""
    if isinstance(value, dict):
        return {
            key: _expand_env_vars(val, source, f"{key_path}.{key}" if key_path else str(key))
            for key, val in value.items()
        }
    if isinstance(value, list):
        return [_expand_env_vars(item, source, f"{key_path}[{index}]") for index, item in enumerate(value)]
    if isinstance(value, str):
        missing = [name for name in _ENV_PATTERN.findall(value) if os.getenv(name) is None]
        if missing:
            raise ConfigError(
                f"Missing required environment variable {', '.join(missing)} "
                f"for {key_path or '<root>'} in {source}"
            )
        return _ENV_PATTERN.sub(lambda match: os.environ[match.group(1)], value)
    return value
