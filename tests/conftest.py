"""
Pytest configuration and shared fixtures for Merkle engine tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_merkle = importlib.import_module("fixtures.merkle_fixtures")

ZERO_NODE = _merkle.ZERO_NODE
make_leaves = _merkle.make_leaves
make_tree = _merkle.make_tree

from merkle_core.config import RuntimeConfig, set_default_config


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def zero_node():
    """A 32-byte all-zero node."""
    return ZERO_NODE


@pytest.fixture
def leaves():
    """Five deterministic leaves (not a power of two)."""
    return make_leaves(5)


@pytest.fixture
def tree(leaves):
    """Tree built over the five default leaves."""
    return _merkle.build_merkle_tree(leaves)


@pytest.fixture
def clean_env(monkeypatch):
    """
    Remove MERKLE_* variables so config tests see defaults.

    Each variable is set then deleted so teardown also removes values
    that a test loads from a .env file.
    """
    for var in [
        "MERKLE_HASH_ALGORITHM",
        "MERKLE_DEBUG",
        "MERKLE_LOG_LEVEL",
        "MERKLE_LOG_FILE",
        "MERKLE_OUTPUT_FORMAT",
    ]:
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    set_default_config(RuntimeConfig())
    yield monkeypatch
    set_default_config(RuntimeConfig())


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "property: marks Hypothesis property tests"
    )
