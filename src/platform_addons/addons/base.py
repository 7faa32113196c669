"""Base addon class for all cluster add-ons."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from platform_addons.cluster.client import ClusterClient
from platform_addons.config import PlatformConfig
from platform_addons.orchestration import (
    AddonDeployer,
    DependencyGraph,
    DeploymentResult,
    ResourceKind,
    ResourceNode,
)
from platform_addons.teardown import (
    ClusterIdentity,
    RegistrationHandle,
    TeardownHandler,
    TeardownProperties,
    TeardownRegistry,
    new_nonce,
)
from platform_addons.utils.errors import DeploymentError, PlatformError
from platform_addons.utils.validation import validate_namespace, validate_release_name

logger = logging.getLogger(__name__)


def namespace_node(node_id: str, namespace: str) -> ResourceNode:
    """Build a Namespace node."""
    return ResourceNode(
        id=node_id,
        kind=ResourceKind.NAMESPACE,
        payload={"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": namespace}},
    )


def chart_node(
    node_id: str,
    repository: str,
    chart: str,
    release: str,
    namespace: str,
    version: str | None = None,
    values: dict[str, Any] | None = None,
    depends_on: tuple[str, ...] = (),
) -> ResourceNode:
    """Build a ChartRelease node."""
    return ResourceNode(
        id=node_id,
        kind=ResourceKind.CHART_RELEASE,
        payload={
            "repository": repository,
            "chart": chart,
            "release": release,
            "namespace": namespace,
            "version": version,
            "values": values or {},
        },
        depends_on=depends_on,
    )


@dataclass(frozen=True)
class AddonInstallation:
    """A deployed add-on and its teardown registration, if any."""

    addon_name: str
    deployment: DeploymentResult
    registration: RegistrationHandle | None = None

    @property
    def primary(self) -> Any:
        """Resource representing the installed add-on.

        With cleanup enabled this is the registration, so anything depending on the
        add-on is also ordered after its teardown hook.
        """
        if self.registration is not None:
            return self.registration
        return self.deployment.primary_handle


class BaseAddon(ABC):
    """Abstract base class for cluster add-ons.

    Subclasses describe their resources as ResourceNodes; this class orders them,
    creates them and registers the teardown handler.
    """

    DEFAULT_NAMESPACE = "default"
    CLEANUP_RESOURCE_TYPE: str | None = None

    def __init__(self, config: PlatformConfig, options: dict[str, Any] | None = None):
        """Initialize addon.

        Args:
            config: Platform configuration (cluster identity, timeouts)
            options: Optional add-on options:
                - namespace: Kubernetes namespace
                - cleanup_enabled: Register a teardown handler (default: True)
        """
        self.config = config
        self.options = options or {}
        self.namespace = self.options.get("namespace", self.DEFAULT_NAMESPACE)
        self.cleanup_enabled = self.options.get("cleanup_enabled", True)
        self.addon_name = self.__class__.__name__.replace("Addon", "").lower()

    def log_info(self, message: str) -> None:
        """Log info message with addon prefix."""
        logger.info(f"[{self.addon_name}] {message}")

    def log_warn(self, message: str) -> None:
        """Log warning message with addon prefix."""
        logger.warning(f"[{self.addon_name}] {message}")

    def log_error(self, message: str) -> None:
        """Log error message with addon prefix."""
        logger.error(f"[{self.addon_name}] {message}")

    @abstractmethod
    def build_nodes(self) -> list[ResourceNode]:
        """Describe the add-on's resources.

        Must be free of side effects; nothing is created until deploy().

        Returns:
            Resource nodes with their dependency edges
        """
        pass

    @abstractmethod
    def teardown_properties(self, nonce: str) -> TeardownProperties:
        """Build the property bag the teardown handler will receive.

        Args:
            nonce: Fresh value distinguishing this registration from earlier ones

        Returns:
            TeardownProperties for this add-on
        """
        pass

    def primary_node_id(self, nodes: list[ResourceNode]) -> str:
        """Id of the node representing the installed add-on (default: last node)."""
        return nodes[-1].id

    def cluster_identity(self) -> ClusterIdentity:
        return ClusterIdentity(name=self.config.cluster_name, region=self.config.region)

    def create_teardown_handler(self) -> TeardownHandler:
        return TeardownHandler(self.config, name=f"{self.addon_name}-cleanup")

    def deploy(
        self, cluster_client: ClusterClient, registry: TeardownRegistry | None = None
    ) -> AddonInstallation:
        """Create the add-on's resources and register its teardown.

        Args:
            cluster_client: Client used to create resources
            registry: Registry receiving the teardown registration (required when
                cleanup is enabled)

        Returns:
            AddonInstallation describing what was created

        Raises:
            ConfigurationError: If cluster identity is missing while cleanup is enabled
            GraphError: If the add-on's resource graph is invalid
            DeploymentError: If a resource cannot be created
        """
        validate_namespace(self.namespace)
        if self.cleanup_enabled:
            self.config.validate()
            if registry is None:
                raise ValueError(f"{self.addon_name}: cleanup is enabled but no registry given")

        # Validate the whole graph before touching the cluster
        ordered = DependencyGraph.build(self.build_nodes())
        primary_id = self.primary_node_id(ordered)

        deployer = AddonDeployer(self.config, addon_name=self.addon_name)
        result = deployer.deploy(ordered, cluster_client, primary_id=primary_id)

        registration = None
        if self.cleanup_enabled:
            registration = registry.register(
                owner=result.primary_handle,
                properties=self.teardown_properties(new_nonce()),
                handler=self.create_teardown_handler(),
                addon_name=self.addon_name,
                resource_type=self.CLEANUP_RESOURCE_TYPE,
            )

        return AddonInstallation(
            addon_name=self.addon_name, deployment=result, registration=registration
        )

    def run(
        self, cluster_client: ClusterClient, registry: TeardownRegistry | None = None
    ) -> dict[str, Any]:
        """Run deploy() and report the outcome as a result dict.

        Returns:
            Dict with installation result:
            - success: bool
            - addon: str
            - message: str
            - installation: AddonInstallation (on success)
            - failed_node: str (on deployment failure)
            - error: str (on failure)
        """
        self.log_info(f"Starting installation for cluster '{self.config.cluster_name}'")
        start_time = time.time()

        try:
            installation = self.deploy(cluster_client, registry)
        except DeploymentError as e:
            self.log_error(f"Installation failed at '{e.failed_node_id}': {e.cause}")
            return {
                "success": False,
                "addon": self.addon_name,
                "failed_node": e.failed_node_id,
                "error": str(e),
                "message": f"{self.addon_name} installation failed at '{e.failed_node_id}'",
                "duration": time.time() - start_time,
            }
        except (PlatformError, ValueError) as e:
            self.log_error(f"Installation rejected: {e}")
            return {
                "success": False,
                "addon": self.addon_name,
                "error": str(e),
                "message": f"{self.addon_name} installation rejected: {e}",
                "duration": time.time() - start_time,
            }

        duration = time.time() - start_time
        self.log_info("Installation completed successfully")
        return {
            "success": True,
            "addon": self.addon_name,
            "installation": installation,
            "message": f"{self.addon_name} installed successfully",
            "duration": duration,
        }


class HelmChartAddon(BaseAddon):
    """Add-on installed from a single Helm chart, optionally into a new namespace."""

    DEFAULT_CHART_VERSION = ""
    HELM_REPO_URL = ""
    HELM_CHART = ""
    RELEASE_NAME = ""

    def __init__(self, config: PlatformConfig, options: dict[str, Any] | None = None):
        """Initialize Helm add-on.

        Args:
            config: Platform configuration
            options: Optional configuration:
                - namespace: Kubernetes namespace
                - version: Helm chart version
                - values: Helm values dict
                - create_namespace: Create the namespace first (default: True)
                - cleanup_enabled: Register a teardown handler (default: True)
        """
        super().__init__(config, options)
        self.version = self.options.get("version", self.DEFAULT_CHART_VERSION)
        self.values = self.options.get("values", {})
        self.create_namespace = self.options.get("create_namespace", True)

    @property
    def chart_node_id(self) -> str:
        return self.RELEASE_NAME

    def build_nodes(self) -> list[ResourceNode]:
        validate_release_name(self.RELEASE_NAME)
        nodes = []
        depends_on: tuple[str, ...] = ()
        if self.create_namespace:
            ns_id = f"{self.RELEASE_NAME}-namespace"
            nodes.append(namespace_node(ns_id, self.namespace))
            depends_on = (ns_id,)

        nodes.append(
            chart_node(
                self.chart_node_id,
                repository=self.HELM_REPO_URL,
                chart=self.HELM_CHART,
                release=self.RELEASE_NAME,
                namespace=self.namespace,
                version=self.version,
                values=self.values,
                depends_on=depends_on,
            )
        )
        return nodes

    def primary_node_id(self, nodes: list[ResourceNode]) -> str:
        return self.chart_node_id

    def teardown_properties(self, nonce: str) -> TeardownProperties:
        return TeardownProperties(
            namespace=self.namespace,
            cluster_identity=self.cluster_identity(),
            nonce=nonce,
            release_name=self.RELEASE_NAME,
        )
