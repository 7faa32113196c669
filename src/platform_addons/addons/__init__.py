"""Cluster add-ons.

Each add-on describes its resources as a dependency graph, deploys them in order
and registers an out-of-band teardown handler.
"""

from platform_addons.addons.argo_rollouts import ArgoRolloutsAddon
from platform_addons.addons.argocd import ArgoCDAddon
from platform_addons.addons.argocd_core import ArgoCDCoreAddon
from platform_addons.addons.base import AddonInstallation, BaseAddon, HelmChartAddon
from platform_addons.addons.manager import AddonManager

__all__ = [
    "AddonInstallation",
    "AddonManager",
    "ArgoCDAddon",
    "ArgoCDCoreAddon",
    "ArgoRolloutsAddon",
    "BaseAddon",
    "HelmChartAddon",
]
