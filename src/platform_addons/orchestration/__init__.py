"""Resource graph ordering and deployment."""

from platform_addons.orchestration.deployer import AddonDeployer
from platform_addons.orchestration.graph import DependencyGraph
from platform_addons.orchestration.nodes import DeploymentResult, ResourceKind, ResourceNode

__all__ = [
    "AddonDeployer",
    "DependencyGraph",
    "DeploymentResult",
    "ResourceKind",
    "ResourceNode",
]
