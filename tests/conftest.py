"""
Shared test fixtures and configuration for stackctl tests.

This module provides common fixtures used across all test types:
- Isolated config directory (never touches ~/.stackctl)
- Sample flavor and storage catalogs
- Mocked MongoDB Flex and IaaS API clients
"""

from unittest.mock import Mock, patch

import pytest

from stackctl.services.mongodbflex.models import (
    Flavor,
    Instance,
    Storage,
    StorageCatalog,
    StorageRange,
)

PROJECT_ID = "0b7c6a4e-3c4b-4c1f-9f7a-3d5e8e6a1b21"
INSTANCE_ID = "5f1d2a3b-7c8e-4d9f-a0b1-c2d3e4f5a6b7"
REGION = "eu01"

# ============================================================================
# CONFIG FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point ConfigManager at a temporary ~/.stackctl.

    Tests must never read or modify the real user configuration, and must
    not pick up a real access token from the environment.
    """
    config_dir = tmp_path / ".stackctl"
    monkeypatch.delenv("STACKCTL_ACCESS_TOKEN", raising=False)
    with (
        patch("stackctl.config_manager.ConfigManager.DEFAULT_CONFIG_DIR", config_dir),
        patch(
            "stackctl.config_manager.ConfigManager.DEFAULT_CONFIG_FILE",
            config_dir / "config.toml",
        ),
    ):
        yield config_dir


# ============================================================================
# CATALOG FIXTURES
# ============================================================================


@pytest.fixture
def flavors():
    """Flavor catalog with two valid entries and one incomplete entry."""
    return [
        Flavor(id="flavor-1x4", cpu=1, memory=4, description="small"),
        Flavor(id="flavor-2x8", cpu=2, memory=8, description="medium"),
        Flavor(id=None, cpu=4, memory=16, description="incomplete"),
    ]


@pytest.fixture
def storage_catalog():
    """Storage catalog allowing class "CLASS" with 10-100 GB."""
    return StorageCatalog(storage_classes=("CLASS",), storage_range=StorageRange(min=10, max=100))


@pytest.fixture
def current_instance():
    """Existing instance running on the 1 CPU / 4 GB flavor."""
    return Instance(
        id=INSTANCE_ID,
        name="my-instance",
        status="READY",
        flavor=Flavor(id="flavor-1x4", cpu=1, memory=4),
        storage=Storage(storage_class="CLASS", size=20),
        replicas=3,
        version="6.0",
    )


# ============================================================================
# API CLIENT MOCKS
# ============================================================================


@pytest.fixture
def mock_mongodbflex_api(flavors, storage_catalog, current_instance):
    """Mock MongoDB Flex API client answering with the sample catalogs."""
    api = Mock()
    api.list_flavors.return_value = flavors
    api.list_storages.return_value = storage_catalog
    api.list_versions.return_value = ["5.0", "6.0", "4.4"]
    api.get_instance.return_value = current_instance
    return api


@pytest.fixture
def mock_iaas_api():
    """Bare mock IaaS API client."""
    return Mock()
