"""Argo Rollouts addon."""

from typing import Any

from platform_addons.addons.base import HelmChartAddon
from platform_addons.config import PlatformConfig


class ArgoRolloutsAddon(HelmChartAddon):
    """Argo Rollouts controller and CRDs for blue-green and canary delivery.

    Installed from the argo-helm repository. Teardown uninstalls the Helm release
    and deletes the namespace.
    """

    DEFAULT_CHART_VERSION = "2.32.0"
    DEFAULT_NAMESPACE = "argo-rollouts"
    HELM_REPO_URL = "https://argoproj.github.io/argo-helm"
    HELM_CHART = "argo-rollouts"
    RELEASE_NAME = "argo-rollouts"
    CLEANUP_RESOURCE_TYPE = "Custom::ArgoRolloutsCleanup"

    def __init__(self, config: PlatformConfig, options: dict[str, Any] | None = None):
        super().__init__(config, options)
        self.addon_name = "argo-rollouts"
