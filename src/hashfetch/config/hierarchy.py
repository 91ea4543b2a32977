"""Configuration hierarchy — merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Global config   (~/.hashfetch/config.yaml)
  3. Project config   (./hashfetch.yaml or ./.hashfetch.yaml, searched upward)
  4. Environment variables (HASHFETCH_*)
  5. Runtime arguments

Only keys hashfetch knows about survive a layer. YAML keys may be spelled
``follow-redirects`` or ``follow_redirects``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from hashfetch.config.defaults import get_defaults
from hashfetch.errors.exceptions import ConfigurationError
from hashfetch.types import ProcessorConfig

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".hashfetch" / "config.yaml"
_PROJECT_CONFIG_NAMES = ("hashfetch.yaml", ".hashfetch.yaml")
_ENV_PREFIX = "HASHFETCH_"

# Every key a config layer may set: ProcessorConfig fields plus log_level
_KNOWN_KEYS = frozenset(get_defaults())

_ENV_MAP: dict[str, str] = {f"{_ENV_PREFIX}{key.upper()}": key for key in sorted(_KNOWN_KEYS)}

_TRUTHY = {"1", "true", "yes", "on"}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Load and merge configuration from all sources.

    Returns a merged dict with the final resolved values.
    """
    config = get_defaults()

    # Layer 2: Global config
    global_cfg = _load_yaml_config(_GLOBAL_CONFIG_PATH)
    if global_cfg:
        config.update(global_cfg)

    # Layer 3: Project config (search from cwd upward)
    project_path = _find_project_config()
    if project_path:
        project_cfg = _load_yaml_config(project_path)
        if project_cfg:
            logger.debug("Using project config %s", project_path)
            config.update(project_cfg)

    # Layer 4: Environment variables
    config.update(_load_env_vars())

    # Layer 5: Runtime arguments; None means "not given"
    for key, value in runtime_overrides.items():
        if value is not None:
            config[key] = value

    return config


def load_processor_config(**runtime_overrides: Any) -> ProcessorConfig:
    """Merge all layers and validate the result.

    Raises ConfigurationError if a merged value is out of range.
    """
    return build_processor_config(load_config_hierarchy(**runtime_overrides))


def build_processor_config(merged: dict[str, Any]) -> ProcessorConfig:
    """Validate an already-merged config dict."""
    try:
        return ProcessorConfig.from_mapping(merged)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Load a hashfetch YAML file, keeping only known keys.

    Keys are normalized (``Follow-Redirects`` -> ``follow_redirects``);
    anything else is dropped with a warning naming the file.
    """
    if not path.is_file():
        return None
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
        return None

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring", path)
        return None

    config: dict[str, Any] = {}
    for raw_key, value in data.items():
        key = str(raw_key).strip().lower().replace("-", "_")
        if key not in _KNOWN_KEYS:
            logger.warning(
                "Unknown key %r in %s (expected one of: %s)",
                raw_key, path, ", ".join(sorted(_KNOWN_KEYS)),
            )
            continue
        config[key] = value
    return config


def _find_project_config() -> Path | None:
    """Search for hashfetch.yaml (or .hashfetch.yaml) from cwd upward."""
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        for name in _PROJECT_CONFIG_NAMES:
            candidate = parent / name
            if candidate.is_file():
                return candidate
    return None


def _load_env_vars() -> dict[str, Any]:
    """Read HASHFETCH_* environment variables."""
    result: dict[str, Any] = {}
    for env_key, value in os.environ.items():
        if not env_key.startswith(_ENV_PREFIX):
            continue
        config_key = _ENV_MAP.get(env_key)
        if config_key is None:
            logger.warning("Ignoring unknown environment variable %s", env_key)
            continue
        result[config_key] = _coerce_env_value(config_key, value)
    return result


def _coerce_env_value(key: str, value: str) -> Any:
    """Coerce an environment string to the type of the matching ProcessorConfig field.

    Values that don't convert are passed through so validation reports them.
    """
    field = ProcessorConfig.model_fields.get(key)
    target = field.annotation if field is not None else str

    if target is bool:
        return value.strip().lower() in _TRUTHY
    if target in (int, float):
        try:
            return target(value)
        except ValueError:
            logger.warning("Cannot convert %s%s=%r to %s", _ENV_PREFIX, key.upper(), value,
                           target.__name__)
            return value
    return value
