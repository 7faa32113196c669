"""Argo CD addon installed from the official Helm chart."""

from typing import Any

from platform_addons.addons.base import HelmChartAddon
from platform_addons.addons.bootstrap_app import bootstrap_application
from platform_addons.config import PlatformConfig
from platform_addons.orchestration import ResourceKind, ResourceNode


class ArgoCDAddon(HelmChartAddon):
    """Argo CD addon.

    Installs Argo CD, the declarative GitOps continuous delivery tool, from the
    argo-helm repository. When a bootstrap repository is configured, an Argo CD
    Application pointing at it is applied once the chart is installed.

    Teardown uninstalls the Helm release and deletes the namespace.
    """

    DEFAULT_CHART_VERSION = "5.51.4"
    DEFAULT_NAMESPACE = "argocd"
    HELM_REPO_URL = "https://argoproj.github.io/argo-helm"
    HELM_CHART = "argo-cd"
    RELEASE_NAME = "argocd"
    CLEANUP_RESOURCE_TYPE = "Custom::ArgoCDCleanup"

    def __init__(self, config: PlatformConfig, options: dict[str, Any] | None = None):
        """Initialize Argo CD addon.

        Args:
            config: Platform configuration
            options: Optional configuration (see HelmChartAddon) plus:
                - bootstrap_repo: dict with repo_url, path, and optional
                  target_revision and app_name
        """
        super().__init__(config, options)
        self.bootstrap_repo = self.options.get("bootstrap_repo")
        self.addon_name = "argocd"

    def build_nodes(self) -> list[ResourceNode]:
        nodes = super().build_nodes()
        if self.bootstrap_repo:
            application = bootstrap_application(
                repo_url=self.bootstrap_repo.get("repo_url", ""),
                path=self.bootstrap_repo.get("path", ""),
                target_revision=self.bootstrap_repo.get("target_revision", "main"),
                namespace=self.namespace,
                name=self.bootstrap_repo.get("app_name", "bootstrap-apps"),
            )
            nodes.append(
                ResourceNode(
                    id="argocd-bootstrap-app",
                    kind=ResourceKind.WORKLOAD,
                    payload=application,
                    depends_on=(self.chart_node_id,),
                )
            )
        return nodes
