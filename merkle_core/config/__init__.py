"""
Runtime Configuration Module

Provides configuration loading and management for the Merkle engine.
"""

from .runtime import (
    RuntimeConfig,
    get_default_config,
    load_env_file,
    load_runtime_config,
    set_default_config,
)

__all__ = [
    "RuntimeConfig",
    "get_default_config",
    "load_env_file",
    "load_runtime_config",
    "set_default_config",
]
