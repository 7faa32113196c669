"""Out-of-band teardown for deployed add-ons.

Add-ons register a handler plus an immutable property bag; the lifecycle
controller invokes the handler when the registration is removed, long after the
deploying process has exited.
"""

from platform_addons.teardown.events import (
    LifecycleEvent,
    LifecycleResponse,
    RequestType,
    ResponseStatus,
)
from platform_addons.teardown.handler import HandlerState, TeardownHandler, TeardownOutcome
from platform_addons.teardown.properties import ClusterIdentity, TeardownProperties, new_nonce
from platform_addons.teardown.registration import RegistrationHandle, TeardownRegistry

__all__ = [
    "ClusterIdentity",
    "HandlerState",
    "LifecycleEvent",
    "LifecycleResponse",
    "RegistrationHandle",
    "RequestType",
    "ResponseStatus",
    "TeardownHandler",
    "TeardownOutcome",
    "TeardownProperties",
    "TeardownRegistry",
    "new_nonce",
]
