"""Cluster API clients used by the add-on deployer."""

import logging
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import yaml

from platform_addons.orchestration.nodes import ResourceKind, ResourceNode
from platform_addons.utils.async_subprocess import kubeconfig_env
from platform_addons.utils.errors import HelmCommandError, KubectlCommandError

if TYPE_CHECKING:
    from platform_addons.config import PlatformConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class ClusterClient(Protocol):
    """Capability the deployer needs from a cluster."""

    def create(self, node: ResourceNode) -> Any:
        """Create the node's payload and return a handle to it."""
        ...

    def add_dependency(self, dependent: Any, dependency: Any) -> None:
        """Declare that `dependent` must wait for `dependency`."""
        ...


@dataclass(frozen=True)
class ResourceHandle:
    """Reference to an object created in the cluster."""

    node_id: str
    kind: ResourceKind
    refs: tuple[str, ...]


def manifest_objects(node: ResourceNode) -> list[dict[str, Any]]:
    """Return the Kubernetes objects carried by a manifest node.

    Payloads either hold a single object or a list under the "manifest" key.
    """
    if "manifest" in node.payload:
        return list(node.payload["manifest"])
    return [dict(node.payload)]


def _object_ref(obj: dict[str, Any]) -> str:
    metadata = obj.get("metadata", {})
    kind = str(obj.get("kind", "object")).lower()
    if metadata.get("namespace"):
        return f"{kind}/{metadata['namespace']}/{metadata.get('name', '')}"
    return f"{kind}/{metadata.get('name', '')}"


class KubectlHelmClient:
    """Creates resources with kubectl and helm against a kubeconfig.

    Manifest nodes are piped to `kubectl apply -f -`; chart releases are installed
    with `helm upgrade --install`, so re-running a deployment converges instead of
    failing on existing objects.
    """

    def __init__(self, kubeconfig_path: Path, helm_timeout: int = 300, kubectl_timeout: int = 120):
        """Initialize client.

        Args:
            kubeconfig_path: Path to cluster's kubeconfig file
            helm_timeout: Timeout for helm commands in seconds
            kubectl_timeout: Timeout for kubectl commands in seconds
        """
        self.kubeconfig_path = kubeconfig_path
        self.helm_timeout = helm_timeout
        self.kubectl_timeout = kubectl_timeout
        self.dependencies: list[tuple[str, str]] = []

    @classmethod
    def from_config(cls, config: "PlatformConfig") -> "KubectlHelmClient":
        """Create a client using the kubeconfig and timeouts from configuration."""
        return cls(
            config.get_kubeconfig_path(),
            helm_timeout=config.helm_timeout,
            kubectl_timeout=config.kubectl_timeout,
        )

    def _env(self) -> dict[str, str]:
        return kubeconfig_env(self.kubeconfig_path)

    def _run_kubectl(self, args: list[str], input_text: str | None = None) -> str:
        """Run kubectl command with kubeconfig.

        Args:
            args: Command arguments
            input_text: Optional stdin content

        Returns:
            Command stdout

        Raises:
            KubectlCommandError: If command fails, times out or kubectl is missing
        """
        cmd = ["kubectl"] + args
        logger.debug(f"Running kubectl command: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                input=input_text,
                capture_output=True,
                text=True,
                timeout=self.kubectl_timeout,
                env=self._env(),
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise KubectlCommandError(
                f"kubectl command timed out after {self.kubectl_timeout} seconds"
            ) from e
        except FileNotFoundError as e:
            raise KubectlCommandError("kubectl CLI not found in PATH") from e

        if result.returncode != 0:
            raise KubectlCommandError(f"kubectl command failed: {result.stderr or result.stdout}")
        return result.stdout

    def _run_helm(self, args: list[str]) -> str:
        """Run helm command with kubeconfig.

        Args:
            args: Helm command arguments

        Returns:
            Command stdout

        Raises:
            HelmCommandError: If command fails, times out or helm is missing
        """
        cmd = ["helm"] + args
        logger.debug(f"Running helm command: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.helm_timeout,
                env=self._env(),
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise HelmCommandError(
                f"Helm command timed out after {self.helm_timeout} seconds"
            ) from e
        except FileNotFoundError as e:
            raise HelmCommandError(
                "helm CLI not found. Please install helm: https://helm.sh/docs/intro/install/"
            ) from e

        if result.returncode != 0:
            raise HelmCommandError(f"Helm command failed: {result.stderr or result.stdout}")
        return result.stdout

    def _apply_manifest(self, node: ResourceNode) -> ResourceHandle:
        objects = manifest_objects(node)
        self._run_kubectl(["apply", "-f", "-"], input_text=yaml.safe_dump_all(objects))
        refs = tuple(_object_ref(obj) for obj in objects)
        logger.info(f"Applied {node.id}: {', '.join(refs)}")
        return ResourceHandle(node_id=node.id, kind=node.kind, refs=refs)

    def _install_chart(self, node: ResourceNode) -> ResourceHandle:
        spec = node.payload
        release = spec["release"]
        namespace = spec["namespace"]

        cmd_args = ["upgrade", "--install", release, spec["chart"], "--namespace", namespace]
        if spec.get("repository"):
            cmd_args.extend(["--repo", spec["repository"]])
        if spec.get("version"):
            cmd_args.extend(["--version", spec["version"]])

        values_file = None
        try:
            if spec.get("values"):
                with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
                    yaml.safe_dump(dict(spec["values"]), f)
                    values_file = f.name
                cmd_args.extend(["--values", values_file])

            self._run_helm(cmd_args)
        finally:
            if values_file:
                Path(values_file).unlink(missing_ok=True)

        logger.info(f"Installed Helm release {release} in namespace {namespace}")
        return ResourceHandle(
            node_id=node.id, kind=node.kind, refs=(f"helm/{namespace}/{release}",)
        )

    def create(self, node: ResourceNode) -> ResourceHandle:
        """Create a node in the cluster.

        Args:
            node: Node to create

        Returns:
            Handle to the created objects

        Raises:
            HelmCommandError: If a chart install fails
            KubectlCommandError: If a manifest apply fails
        """
        if node.kind is ResourceKind.CHART_RELEASE:
            return self._install_chart(node)
        return self._apply_manifest(node)

    def add_dependency(self, dependent: ResourceHandle, dependency: ResourceHandle) -> None:
        """Record a dependency edge.

        Creation is already sequential, so the edge is informational for this client.
        """
        self.dependencies.append((dependent.node_id, dependency.node_id))
        logger.debug(f"{dependent.node_id} depends on {dependency.node_id}")
