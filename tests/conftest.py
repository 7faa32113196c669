"""Pytest fixtures for testing platform add-ons."""

import os
from collections.abc import Iterator
from unittest.mock import patch

import pytest

from platform_addons.config import PlatformConfig
from platform_addons.teardown import ClusterIdentity, TeardownProperties, TeardownRegistry
from tests.mocks import RecordingClusterClient


@pytest.fixture
def clean_env() -> Iterator[None]:
    """Run a test with an empty environment and no .env file loading."""
    with patch.dict(os.environ, {}, clear=True), patch("platform_addons.config.load_dotenv"):
        yield


@pytest.fixture
def platform_config(clean_env, tmp_path) -> PlatformConfig:
    """Create a configuration targeting a test cluster.

    Returns:
        PlatformConfig with test values
    """
    return PlatformConfig(
        account="123456789012",
        region="us-west-2",
        cluster_name="test-cluster",
        kubeconfig_path=str(tmp_path / "kubeconfig"),
    )


@pytest.fixture
def cluster_client() -> RecordingClusterClient:
    """Create a cluster client that records creations.

    Returns:
        RecordingClusterClient with no failures configured
    """
    return RecordingClusterClient()


@pytest.fixture
def registry() -> TeardownRegistry:
    return TeardownRegistry()


@pytest.fixture
def teardown_properties() -> TeardownProperties:
    """Create teardown properties for a Helm-installed add-on.

    Returns:
        TeardownProperties for release argocd in namespace argocd
    """
    return TeardownProperties(
        namespace="argocd",
        cluster_identity=ClusterIdentity(name="test-cluster", region="us-west-2"),
        nonce="1700000000000",
        release_name="argocd",
    )


@pytest.fixture
def delete_event(teardown_properties: TeardownProperties) -> dict:
    """Create a raw Delete event as delivered by the lifecycle controller.

    Returns:
        Event dict with wire key names
    """
    return {
        "RequestType": "Delete",
        "RequestId": "req-1",
        "StackId": "arn:aws:cloudformation:us-west-2:123456789012:stack/platform/abc",
        "LogicalResourceId": "argocd-cleanup",
        "PhysicalResourceId": "test-cluster/argocd/cleanup",
        "ResourceType": "Custom::ArgoCDCleanup",
        "ResourceProperties": {"ServiceToken": "arn:token", **teardown_properties.to_wire()},
    }
