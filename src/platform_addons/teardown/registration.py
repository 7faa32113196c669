"""Teardown registrations bound to deployed add-ons."""

import logging
from dataclasses import dataclass
from typing import Any

from platform_addons.teardown.events import LifecycleEvent, RequestType
from platform_addons.teardown.handler import TeardownHandler, TeardownOutcome
from platform_addons.teardown.properties import TeardownProperties
from platform_addons.utils.errors import RegistrationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrationHandle:
    """A registered teardown handler and the property bag it will receive.

    `depends_on` is the add-on's primary resource: the registration is processed
    only after it exists, and removed (triggering teardown) when the stack goes.
    """

    addon_name: str
    resource_type: str
    depends_on: Any
    properties: TeardownProperties
    handler: TeardownHandler
    request_type: RequestType
    changed: bool

    def lifecycle_event(self, request_type: RequestType | None = None) -> LifecycleEvent:
        """Build the event the controller would deliver for this registration."""
        return LifecycleEvent(
            request_type=request_type or self.request_type,
            resource_properties=self.properties.to_wire(),
            logical_resource_id=f"{self.addon_name}-cleanup",
            resource_type=self.resource_type,
        )


class TeardownRegistry:
    """Tracks the active teardown registration of each add-on.

    Models the lifecycle controller's contract: a registration whose property bag
    is unchanged is not re-delivered, a changed one yields an Update, and removing
    a registration yields the Delete that runs cleanup.
    """

    def __init__(self):
        self._active: dict[str, RegistrationHandle] = {}

    def register(
        self,
        owner: Any,
        properties: TeardownProperties,
        handler: TeardownHandler,
        addon_name: str,
        resource_type: str | None = None,
    ) -> RegistrationHandle:
        """Register a teardown handler against an add-on's primary resource.

        Args:
            owner: Handle of the primary resource the registration depends on
            properties: Property bag delivered to the handler
            handler: Handler invoked on lifecycle events
            addon_name: Logical add-on the registration belongs to
            resource_type: Controller resource type (defaults to Custom::<Name>Cleanup)

        Returns:
            New RegistrationHandle; previous registrations are never mutated

        Raises:
            RegistrationError: If owner is missing or properties are incomplete
        """
        if owner is None:
            raise RegistrationError(f"Teardown for '{addon_name}' needs an owning resource")
        if not properties.nonce:
            raise RegistrationError(f"Teardown for '{addon_name}' needs a nonce")

        previous = self._active.get(addon_name)
        if previous is None:
            request_type = RequestType.CREATE
            changed = True
        else:
            request_type = RequestType.UPDATE
            changed = previous.properties.to_wire() != properties.to_wire()
            if not changed:
                logger.warning(
                    f"[{addon_name}] Teardown re-registered with unchanged properties "
                    f"(nonce {properties.nonce}); the controller will not re-deliver it"
                )

        handle = RegistrationHandle(
            addon_name=addon_name,
            resource_type=resource_type or _default_resource_type(addon_name),
            depends_on=owner,
            properties=properties,
            handler=handler,
            request_type=request_type,
            changed=changed,
        )
        self._active[addon_name] = handle
        logger.info(
            f"[{addon_name}] Registered teardown ({request_type.value}, nonce {properties.nonce})"
        )
        return handle

    def get(self, addon_name: str) -> RegistrationHandle | None:
        return self._active.get(addon_name)

    def registrations(self) -> list[RegistrationHandle]:
        return list(self._active.values())

    async def dispatch(self, handle: RegistrationHandle) -> TeardownOutcome | None:
        """Deliver the Create/Update event for a registration, if it changed."""
        if not handle.changed:
            return None
        return await handle.handler.handle(handle.lifecycle_event())

    async def remove(self, addon_name: str) -> TeardownOutcome:
        """Remove a registration and deliver its Delete event.

        Raises:
            RegistrationError: If the add-on has no active registration
        """
        handle = self._active.pop(addon_name, None)
        if handle is None:
            raise RegistrationError(f"No teardown registered for '{addon_name}'")
        logger.info(f"[{addon_name}] Removing teardown registration")
        return await handle.handler.handle(handle.lifecycle_event(RequestType.DELETE))


def _default_resource_type(addon_name: str) -> str:
    words = addon_name.replace("_", "-").split("-")
    return "Custom::" + "".join(word[:1].upper() + word[1:] for word in words) + "Cleanup"
