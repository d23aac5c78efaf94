"""
Runtime Configuration

Central configuration for engine construction (hash algorithm selection)
and debug logging.

Sources, lowest precedence first:
- Defaults
- YAML file (load_runtime_config(path))
- Environment variables, including a .env file in the working directory
"""

from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import find_dotenv, load_dotenv

from merkle_core.crypto.hashing import DEFAULT_HASH_ALGORITHM, get_hash_function


logger = logging.getLogger(__name__)


def load_env_file(path: str | Path | None = None) -> bool:
    """
    Load a .env file into the environment without overriding set variables.

    Without a path, the nearest .env at or above the working directory is used.

    Returns:
        True if a file was found and loaded
    """
    return load_dotenv(path or find_dotenv(usecwd=True))


load_env_file()


@dataclass
class RuntimeConfig:
    """
    Runtime configuration for the Merkle engine.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    debug: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.hash_algorithm = self.hash_algorithm.lower()
        # Fail early on unknown algorithms
        get_hash_function(self.hash_algorithm)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - MERKLE_HASH_ALGORITHM: Hash algorithm name (sha256, keccak256)
        - MERKLE_DEBUG: Enable debug mode (true/false)
        """
        overrides: dict[str, Any] = {}

        if os.getenv("MERKLE_HASH_ALGORITHM"):
            overrides["hash_algorithm"] = os.getenv("MERKLE_HASH_ALGORITHM")
        if os.getenv("MERKLE_DEBUG"):
            overrides["debug"] = os.getenv("MERKLE_DEBUG", "false").lower() == "true"

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        return cls(
            hash_algorithm=data.get("hash_algorithm", DEFAULT_HASH_ALGORITHM),
            debug=bool(data.get("debug", False)),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        if "hash_algorithm" in overrides:
            new_config.hash_algorithm = overrides["hash_algorithm"].lower()
            get_hash_function(new_config.hash_algorithm)
        if "debug" in overrides:
            new_config.debug = overrides["debug"]
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "hash_algorithm": self.hash_algorithm,
            "debug": self.debug,
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config


def load_runtime_config(path: str | Path | None = None) -> RuntimeConfig:
    """
    Load RuntimeConfig from an optional YAML file, then overlay environment variables.

    Environment variables ALWAYS override file values.

    Raises:
        FileNotFoundError: If path is given and does not exist
        UnsupportedHashAlgorithmException: If a configured algorithm is unknown
    """
    if path is not None:
        config = RuntimeConfig.from_yaml(path)
        logger.info(f"Loaded runtime config from {path}")
    else:
        config = RuntimeConfig()
    return config.with_env_overrides()
