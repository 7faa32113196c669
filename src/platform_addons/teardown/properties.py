"""Property bag handed to teardown handlers."""

import threading
import time
from collections.abc import Mapping
from dataclasses import dataclass

from platform_addons.utils.errors import RegistrationError

_nonce_lock = threading.Lock()
_last_nonce = 0


def new_nonce() -> str:
    """Return a millisecond timestamp strictly greater than any previous one.

    Two registrations issued within the same millisecond still get distinct values.
    """
    global _last_nonce

    with _nonce_lock:
        _last_nonce = max(int(time.time() * 1000), _last_nonce + 1)
        return str(_last_nonce)


@dataclass(frozen=True)
class ClusterIdentity:
    """Target cluster for teardown."""

    name: str
    region: str


@dataclass(frozen=True)
class TeardownProperties:
    """Everything a teardown handler needs, independent of the deploying process."""

    namespace: str
    cluster_identity: ClusterIdentity
    nonce: str
    release_name: str | None = None
    crd_selector: str | None = None
    purge_namespace: bool = False

    def to_wire(self) -> dict[str, str]:
        """Serialize to the flat string map delivered with lifecycle events."""
        wire = {
            "timestamp": self.nonce,
            "namespace": self.namespace,
            "clusterName": self.cluster_identity.name,
            "region": self.cluster_identity.region,
        }
        if self.release_name:
            wire["releaseName"] = self.release_name
        if self.crd_selector:
            wire["crdSelector"] = self.crd_selector
        if self.purge_namespace:
            wire["purgeNamespace"] = "true"
        return wire

    @classmethod
    def from_wire(cls, data: Mapping[str, str]) -> "TeardownProperties":
        """Parse the flat string map delivered with lifecycle events.

        Raises:
            RegistrationError: If a required key is missing
        """
        missing = [key for key in ("namespace", "clusterName", "region") if not data.get(key)]
        if missing:
            raise RegistrationError(f"Missing teardown properties: {', '.join(missing)}")

        return cls(
            namespace=data["namespace"],
            cluster_identity=ClusterIdentity(name=data["clusterName"], region=data["region"]),
            nonce=str(data.get("timestamp", "")),
            release_name=data.get("releaseName") or None,
            crd_selector=data.get("crdSelector") or None,
            purge_namespace=str(data.get("purgeNamespace", "")).lower() == "true",
        )
