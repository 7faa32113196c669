"""Resource nodes and deployment results."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ResourceKind(Enum):
    """Kind of cluster object a node describes."""

    NAMESPACE = "Namespace"
    SERVICE_ACCOUNT = "ServiceAccount"
    ROLE_BINDING = "RoleBinding"
    WORKLOAD = "Workload"
    CHART_RELEASE = "ChartRelease"


@dataclass(frozen=True)
class ResourceNode:
    """A single declarative unit of cluster state.

    The payload (manifest or chart spec) is passed through to the cluster client
    untouched.
    """

    id: str
    kind: ResourceKind
    payload: Mapping[str, Any] = field(default_factory=dict, compare=False)
    depends_on: tuple[str, ...] = ()

    def __post_init__(self):
        if not self.id:
            raise ValueError("ResourceNode id cannot be empty")
        # Accept any iterable of ids, store as tuple
        object.__setattr__(self, "depends_on", tuple(self.depends_on))


@dataclass(frozen=True)
class DeploymentResult:
    """Outcome of a successful deployment."""

    primary_resource_id: str
    created_ids: tuple[str, ...]
    handles: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @property
    def primary_handle(self) -> Any:
        return self.handles.get(self.primary_resource_id)
