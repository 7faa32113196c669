"""Tests for KubectlHelmClient."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from platform_addons.addons.base import chart_node, namespace_node
from platform_addons.cluster import ClusterClient, KubectlHelmClient, ResourceHandle
from platform_addons.orchestration import ResourceKind, ResourceNode
from platform_addons.utils.errors import HelmCommandError, KubectlCommandError


@pytest.fixture
def client():
    """Create client for testing."""
    return KubectlHelmClient(Path("/tmp/test-kubeconfig"), helm_timeout=60, kubectl_timeout=30)


def test_client_satisfies_protocol(client):
    """Test that the client implements the ClusterClient protocol."""
    assert isinstance(client, ClusterClient)


@patch("subprocess.run")
def test_create_namespace_applies_manifest(mock_run, client):
    """Test that manifest nodes are piped to kubectl apply."""
    mock_run.return_value = MagicMock(returncode=0, stdout="namespace/argocd created", stderr="")

    handle = client.create(namespace_node("argocd-namespace", "argocd"))

    assert handle == ResourceHandle(
        node_id="argocd-namespace", kind=ResourceKind.NAMESPACE, refs=("namespace/argocd",)
    )
    args, kwargs = mock_run.call_args
    assert args[0] == ["kubectl", "apply", "-f", "-"]
    assert yaml.safe_load(kwargs["input"])["metadata"]["name"] == "argocd"
    assert kwargs["env"]["KUBECONFIG"] == "/tmp/test-kubeconfig"
    assert kwargs["timeout"] == 30


@patch("subprocess.run")
def test_create_manifest_list(mock_run, client):
    """Test a node carrying several objects under the manifest key."""
    mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
    node = ResourceNode(
        id="bundle",
        kind=ResourceKind.WORKLOAD,
        payload={
            "manifest": [
                {"kind": "ConfigMap", "metadata": {"name": "a", "namespace": "ns"}},
                {"kind": "Secret", "metadata": {"name": "b", "namespace": "ns"}},
            ]
        },
    )

    handle = client.create(node)

    assert handle.refs == ("configmap/ns/a", "secret/ns/b")
    documents = list(yaml.safe_load_all(mock_run.call_args.kwargs["input"]))
    assert len(documents) == 2


@patch("subprocess.run")
def test_create_chart_runs_helm_upgrade_install(mock_run, client):
    """Test that chart nodes are installed with helm upgrade --install."""
    mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
    node = chart_node(
        "argocd",
        repository="https://argoproj.github.io/argo-helm",
        chart="argo-cd",
        release="argocd",
        namespace="argocd",
        version="5.51.4",
    )

    handle = client.create(node)

    cmd = mock_run.call_args[0][0]
    assert cmd[:6] == ["helm", "upgrade", "--install", "argocd", "argo-cd", "--namespace"]
    assert "--repo" in cmd
    assert cmd[cmd.index("--version") + 1] == "5.51.4"
    assert "--values" not in cmd
    assert handle.refs == ("helm/argocd/argocd",)
    assert mock_run.call_args.kwargs["timeout"] == 60


@patch("subprocess.run")
def test_create_chart_writes_values_file(mock_run, client):
    """Test that chart values are passed through a temporary file that is removed."""
    seen = {}

    def fake_run(cmd, **kwargs):
        values_path = Path(cmd[cmd.index("--values") + 1])
        seen["path"] = values_path
        seen["values"] = yaml.safe_load(values_path.read_text())
        return MagicMock(returncode=0, stdout="", stderr="")

    mock_run.side_effect = fake_run
    node = chart_node(
        "rollouts",
        repository="https://argoproj.github.io/argo-helm",
        chart="argo-rollouts",
        release="argo-rollouts",
        namespace="argo-rollouts",
        values={"dashboard": {"enabled": True}},
    )

    client.create(node)

    assert seen["values"] == {"dashboard": {"enabled": True}}
    assert not seen["path"].exists()


@patch("subprocess.run")
def test_helm_failure(mock_run, client):
    """Test failed helm command."""
    mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="chart not found")

    with pytest.raises(HelmCommandError, match="chart not found"):
        client.create(chart_node("x", "", "x", "x", "default"))


@patch("subprocess.run")
def test_helm_timeout(mock_run, client):
    """Test helm command timeout."""
    mock_run.side_effect = subprocess.TimeoutExpired(cmd="helm", timeout=60)

    with pytest.raises(HelmCommandError, match="timed out"):
        client.create(chart_node("x", "", "x", "x", "default"))


@patch("subprocess.run")
def test_helm_not_found(mock_run, client):
    """Test helm not installed."""
    mock_run.side_effect = FileNotFoundError()

    with pytest.raises(HelmCommandError, match="not found"):
        client.create(chart_node("x", "", "x", "x", "default"))


@patch("subprocess.run")
def test_kubectl_failure(mock_run, client):
    """Test failed kubectl apply."""
    mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="forbidden")

    with pytest.raises(KubectlCommandError, match="forbidden"):
        client.create(namespace_node("ns", "argocd"))


@patch("subprocess.run")
def test_kubectl_timeout(mock_run, client):
    """Test kubectl command timeout."""
    mock_run.side_effect = subprocess.TimeoutExpired(cmd="kubectl", timeout=30)

    with pytest.raises(KubectlCommandError, match="timed out"):
        client.create(namespace_node("ns", "argocd"))


def test_add_dependency_records_edge(client):
    """Test that dependency edges are recorded."""
    ns = ResourceHandle("ns", ResourceKind.NAMESPACE, ("namespace/argocd",))
    chart = ResourceHandle("argocd", ResourceKind.CHART_RELEASE, ("helm/argocd/argocd",))

    client.add_dependency(chart, ns)

    assert client.dependencies == [("argocd", "ns")]


def test_from_config(platform_config):
    """Test building a client from configuration."""
    client = KubectlHelmClient.from_config(platform_config)

    assert client.kubeconfig_path == platform_config.get_kubeconfig_path()
    assert client.helm_timeout == 300
    assert client.kubectl_timeout == 120
