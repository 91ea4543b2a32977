"""Configuration — defaults, YAML files and environment, merged in order."""

from hashfetch.config.hierarchy import (
    build_processor_config,
    load_config_hierarchy,
    load_processor_config,
)

__all__ = ["build_processor_config", "load_config_hierarchy", "load_processor_config"]
