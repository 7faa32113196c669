"""Argo CD addon installed from the upstream manifests."""

from typing import Any

from platform_addons.addons.base import BaseAddon, namespace_node
from platform_addons.config import PlatformConfig
from platform_addons.orchestration import ResourceKind, ResourceNode
from platform_addons.teardown import TeardownProperties


class ArgoCDCoreAddon(BaseAddon):
    """Argo CD addon using the raw install manifests instead of Helm.

    The manifests are applied by an in-cluster Job running kubectl, which gets
    cluster-admin through a dedicated service account:

        namespace -> service account -> cluster role binding -> install job

    There is no Helm release to uninstall, so teardown deletes every workload in
    the namespace, the Argo CD CRDs, and then the namespace.
    """

    DEFAULT_VERSION = "v3.0.6"
    DEFAULT_NAMESPACE = "argocd"
    CLEANUP_RESOURCE_TYPE = "Custom::ArgoCDCoreCleanup"
    INSTALLER_NAME = "argocd-installer"
    INSTALLER_IMAGE = "bitnami/kubectl:latest"
    CRD_SELECTOR = "app.kubernetes.io/part-of=argocd"
    MANIFEST_URL = (
        "https://raw.githubusercontent.com/argoproj/argo-cd/refs/tags/"
        "{version}/manifests/install.yaml"
    )

    def __init__(self, config: PlatformConfig, options: dict[str, Any] | None = None):
        """Initialize Argo CD core addon.

        Args:
            config: Platform configuration
            options: Optional configuration:
                - namespace: Kubernetes namespace (default: argocd)
                - version: Argo CD release tag (default: v3.0.6)
                - cleanup_enabled: Register a teardown handler (default: True)
        """
        super().__init__(config, options)
        self.version = self.options.get("version", self.DEFAULT_VERSION)
        self.addon_name = "argocd-core"

    @property
    def manifest_url(self) -> str:
        return self.MANIFEST_URL.format(version=self.version)

    def build_nodes(self) -> list[ResourceNode]:
        service_account = ResourceNode(
            id="argocd-installer-sa",
            kind=ResourceKind.SERVICE_ACCOUNT,
            payload={
                "apiVersion": "v1",
                "kind": "ServiceAccount",
                "metadata": {"name": self.INSTALLER_NAME, "namespace": self.namespace},
            },
            depends_on=("argocd-namespace",),
        )

        role_binding = ResourceNode(
            id="argocd-installer-rb",
            kind=ResourceKind.ROLE_BINDING,
            payload={
                "apiVersion": "rbac.authorization.k8s.io/v1",
                "kind": "ClusterRoleBinding",
                "metadata": {"name": "argocd-installer-rb"},
                "subjects": [
                    {
                        "kind": "ServiceAccount",
                        "name": self.INSTALLER_NAME,
                        "namespace": self.namespace,
                    }
                ],
                "roleRef": {
                    "kind": "ClusterRole",
                    "name": "cluster-admin",
                    "apiGroup": "rbac.authorization.k8s.io",
                },
            },
            depends_on=("argocd-installer-sa",),
        )

        install_job = ResourceNode(
            id="argocd-apply",
            kind=ResourceKind.WORKLOAD,
            payload={
                "apiVersion": "batch/v1",
                "kind": "Job",
                "metadata": {"name": "argocd-install-job", "namespace": self.namespace},
                "spec": {
                    "template": {
                        "spec": {
                            "serviceAccountName": self.INSTALLER_NAME,
                            "containers": [
                                {
                                    "name": "kubectl",
                                    "image": self.INSTALLER_IMAGE,
                                    "command": ["/bin/sh", "-c"],
                                    "args": [
                                        f"kubectl apply -f {self.manifest_url} -n {self.namespace}"
                                    ],
                                }
                            ],
                            "restartPolicy": "Never",
                        }
                    },
                    "backoffLimit": 0,
                },
            },
            depends_on=("argocd-installer-rb",),
        )

        return [
            namespace_node("argocd-namespace", self.namespace),
            service_account,
            role_binding,
            install_job,
        ]

    def teardown_properties(self, nonce: str) -> TeardownProperties:
        return TeardownProperties(
            namespace=self.namespace,
            cluster_identity=self.cluster_identity(),
            nonce=nonce,
            crd_selector=self.CRD_SELECTOR,
            purge_namespace=True,
        )
