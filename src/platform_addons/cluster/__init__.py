"""Cluster API access for add-on deployments."""

from platform_addons.cluster.client import ClusterClient, KubectlHelmClient, ResourceHandle

__all__ = ["ClusterClient", "KubectlHelmClient", "ResourceHandle"]
