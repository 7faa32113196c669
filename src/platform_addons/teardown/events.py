"""Wire models for lifecycle events and responses.

The lifecycle controller speaks the CloudFormation custom resource protocol:
requests carry "RequestType" and "ResourceProperties", responses carry a
"Status" discriminator plus a "Data" map holding "Message" or "Error".
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from platform_addons.teardown.properties import TeardownProperties


class RequestType(str, Enum):
    """Lifecycle event type."""

    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


class ResponseStatus(str, Enum):
    """Status reported back to the controller."""

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class LifecycleEvent(BaseModel):
    """A Create/Update/Delete notification for a teardown registration."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    request_type: RequestType = Field(alias="RequestType")
    resource_properties: dict[str, Any] = Field(default_factory=dict, alias="ResourceProperties")
    request_id: str | None = Field(default=None, alias="RequestId")
    stack_id: str | None = Field(default=None, alias="StackId")
    logical_resource_id: str | None = Field(default=None, alias="LogicalResourceId")
    physical_resource_id: str | None = Field(default=None, alias="PhysicalResourceId")
    resource_type: str | None = Field(default=None, alias="ResourceType")

    def properties(self) -> TeardownProperties:
        """Parse the resource properties into a TeardownProperties bag."""
        wire = {key: str(value) for key, value in self.resource_properties.items()}
        return TeardownProperties.from_wire(wire)

    def resolve_physical_id(self) -> str:
        """Physical id to report.

        Must stay stable across updates: a changed id makes the controller delete
        the old resource, which would trigger teardown.
        """
        if self.physical_resource_id:
            return self.physical_resource_id
        props = self.resource_properties
        return f"{props.get('clusterName', 'cluster')}/{props.get('namespace', 'default')}/cleanup"


class LifecycleResponse(BaseModel):
    """Response body returned to the lifecycle controller."""

    model_config = ConfigDict(populate_by_name=True)

    status: ResponseStatus = Field(alias="Status")
    reason: str = Field(default="", alias="Reason")
    physical_resource_id: str = Field(alias="PhysicalResourceId")
    stack_id: str | None = Field(default=None, alias="StackId")
    request_id: str | None = Field(default=None, alias="RequestId")
    logical_resource_id: str | None = Field(default=None, alias="LogicalResourceId")
    data: dict[str, str] = Field(default_factory=dict, alias="Data")

    @classmethod
    def success(cls, event: LifecycleEvent, message: str) -> "LifecycleResponse":
        return cls(
            status=ResponseStatus.SUCCESS,
            reason=message,
            physical_resource_id=event.resolve_physical_id(),
            stack_id=event.stack_id,
            request_id=event.request_id,
            logical_resource_id=event.logical_resource_id,
            data={"Message": message},
        )

    @classmethod
    def failed(cls, event: LifecycleEvent, error: str) -> "LifecycleResponse":
        return cls(
            status=ResponseStatus.FAILED,
            reason=error,
            physical_resource_id=event.resolve_physical_id(),
            stack_id=event.stack_id,
            request_id=event.request_id,
            logical_resource_id=event.logical_resource_id,
            data={"Error": error},
        )

    @property
    def succeeded(self) -> bool:
        return self.status is ResponseStatus.SUCCESS

    def to_wire(self) -> dict[str, Any]:
        """Serialize with the controller's key names, omitting unset ids."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
