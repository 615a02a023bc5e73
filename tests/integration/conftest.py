"""Shared fixtures for integration tests."""

import os
from pathlib import Path

import pytest

INTEGRATION_DIR = Path(__file__).parent


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless RUN_ACRIS_NETWORK_TESTS=1."""
    if os.environ.get("RUN_ACRIS_NETWORK_TESTS") == "1":
        return
    skip_network = pytest.mark.skip(
        reason="Requires network access. Set RUN_ACRIS_NETWORK_TESTS=1 to run"
    )
    # The hook sees every collected item, not just this directory's
    for item in items:
        if INTEGRATION_DIR in item.path.parents:
            item.add_marker(skip_network)
