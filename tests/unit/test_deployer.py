"""Tests for AddonDeployer."""

import pytest

from platform_addons.orchestration import AddonDeployer, DependencyGraph, ResourceKind, ResourceNode
from platform_addons.utils.errors import DeploymentError
from tests.mocks import RecordingClusterClient


@pytest.fixture
def chain() -> list[ResourceNode]:
    """A -> B -> C, where C depends on B and B depends on A."""
    return DependencyGraph.build(
        [
            ResourceNode(id="A", kind=ResourceKind.NAMESPACE),
            ResourceNode(id="B", kind=ResourceKind.SERVICE_ACCOUNT, depends_on=("A",)),
            ResourceNode(id="C", kind=ResourceKind.WORKLOAD, depends_on=("B",)),
        ]
    )


def test_deploy_creates_in_order(chain, cluster_client):
    """Test that nodes are created in the given order."""
    result = AddonDeployer(addon_name="test").deploy(chain, cluster_client)

    assert cluster_client.created == ["A", "B", "C"]
    assert result.created_ids == ("A", "B", "C")
    assert result.primary_resource_id == "C"
    assert result.primary_handle.node_id == "C"


def test_deploy_records_dependency_edges(chain, cluster_client):
    """Test that each dependency is declared to the cluster client."""
    AddonDeployer().deploy(chain, cluster_client)

    assert cluster_client.edges == [("B", "A"), ("C", "B")]


def test_deploy_explicit_primary(chain, cluster_client):
    """Test selecting a primary resource other than the last node."""
    result = AddonDeployer().deploy(chain, cluster_client, primary_id="B")

    assert result.primary_resource_id == "B"
    assert result.primary_handle.node_id == "B"


def test_deploy_unknown_primary(chain, cluster_client):
    """Test that a primary id outside the graph is rejected before creating anything."""
    with pytest.raises(ValueError, match="not part of the deployment"):
        AddonDeployer().deploy(chain, cluster_client, primary_id="Z")

    assert cluster_client.created == []


def test_deploy_empty(cluster_client):
    """Test that an empty graph is rejected."""
    with pytest.raises(ValueError, match="empty"):
        AddonDeployer().deploy([], cluster_client)


def test_deploy_stops_at_failing_node(chain):
    """Test that a failure halts deployment and names the failing node."""
    client = RecordingClusterClient(fail_on={"B"})

    with pytest.raises(DeploymentError) as exc_info:
        AddonDeployer().deploy(chain, client)

    assert exc_info.value.failed_node_id == "B"
    assert "simulated failure" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    # A stays in place, C is never attempted
    assert client.created == ["A"]


def test_deploy_rejects_unordered_input(cluster_client):
    """Test that a node listed before its dependency is not created."""
    nodes = [
        ResourceNode(id="B", kind=ResourceKind.WORKLOAD, depends_on=("A",)),
        ResourceNode(id="A", kind=ResourceKind.NAMESPACE),
    ]

    with pytest.raises(DeploymentError) as exc_info:
        AddonDeployer().deploy(nodes, cluster_client)

    assert exc_info.value.failed_node_id == "B"
    assert cluster_client.created == []


def test_deploy_logs_with_addon_prefix(chain, cluster_client, caplog):
    """Test that log messages carry the addon name."""
    caplog.set_level("INFO")

    AddonDeployer(addon_name="argocd").deploy(chain, cluster_client)

    assert "[argocd] Creating" in caplog.text
