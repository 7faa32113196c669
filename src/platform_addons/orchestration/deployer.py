"""Sequential creation of ordered resource nodes."""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from platform_addons.orchestration.nodes import DeploymentResult, ResourceNode
from platform_addons.utils.errors import DeploymentError

if TYPE_CHECKING:
    from platform_addons.cluster.client import ClusterClient
    from platform_addons.config import PlatformConfig

logger = logging.getLogger(__name__)


class AddonDeployer:
    """Creates an add-on's resources in dependency order.

    No rollback is attempted on failure: nodes created before the failing one stay
    in place for the surrounding lifecycle controller to retry or destroy.
    """

    def __init__(self, config: "PlatformConfig | None" = None, addon_name: str = "addon"):
        """Initialize deployer.

        Args:
            config: Platform configuration (cluster identity, timeouts)
            addon_name: Name used to prefix log messages
        """
        self.config = config
        self.addon_name = addon_name

    def deploy(
        self,
        nodes: Sequence[ResourceNode],
        cluster_client: "ClusterClient",
        primary_id: str | None = None,
    ) -> DeploymentResult:
        """Create nodes in the order given.

        Args:
            nodes: Nodes already ordered by DependencyGraph.build
            cluster_client: Client that creates payloads and records dependency edges
            primary_id: Node representing the installed add-on (defaults to the last node)

        Returns:
            DeploymentResult with creation order and handles

        Raises:
            ValueError: If nodes is empty or primary_id is not one of the nodes
            DeploymentError: If a node cannot be created or its dependencies are missing
        """
        if not nodes:
            raise ValueError("Cannot deploy an empty resource graph")

        node_ids = [node.id for node in nodes]
        primary = primary_id if primary_id is not None else node_ids[-1]
        if primary not in node_ids:
            raise ValueError(f"Primary resource '{primary}' is not part of the deployment")

        handles: dict[str, Any] = {}
        created: list[str] = []

        for node in nodes:
            missing = [dep for dep in node.depends_on if dep not in handles]
            if missing:
                raise DeploymentError(
                    node.id, f"dependencies not created yet: {', '.join(missing)}"
                )

            logger.info(f"[{self.addon_name}] Creating {node.kind.value} '{node.id}'")
            try:
                handle = cluster_client.create(node)
                for dep in dict.fromkeys(node.depends_on):
                    cluster_client.add_dependency(handle, handles[dep])
            except Exception as e:
                logger.error(f"[{self.addon_name}] Failed to create '{node.id}': {e}")
                raise DeploymentError(node.id, e) from e

            handles[node.id] = handle
            created.append(node.id)

        logger.info(
            f"[{self.addon_name}] Created {len(created)} resource(s), primary '{primary}'"
        )
        return DeploymentResult(
            primary_resource_id=primary, created_ids=tuple(created), handles=handles
        )
