"""GitOps add-on deployment and teardown orchestration for Kubernetes clusters.

Add-ons are deployed as ordered resource graphs and register out-of-band
teardown handlers that clean up when the owning stack is destroyed.
"""

from importlib.metadata import PackageNotFoundError, version

from platform_addons.config import PlatformConfig

# Read version from package metadata with fallback
try:
    __version__ = version("platform-addons")
except PackageNotFoundError:
    # Fallback for development/testing environments
    __version__ = "0.1.0"

__all__ = [
    "PlatformConfig",
    "__version__",
]
