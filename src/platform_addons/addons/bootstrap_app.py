"""Argo CD Application used to bootstrap GitOps-managed workloads."""

from typing import Any


def bootstrap_application(
    repo_url: str,
    path: str,
    target_revision: str = "main",
    namespace: str = "argocd",
    name: str = "bootstrap-apps",
) -> dict[str, Any]:
    """Build an Argo CD Application manifest pointing at a Git repository.

    The application syncs automatically with pruning and self-heal enabled, so the
    repository becomes the source of truth for everything under `path`.

    Args:
        repo_url: URL of the Git repository containing the application manifests
        path: Path within the repository
        target_revision: Branch, tag or commit to track
        namespace: Namespace where Argo CD runs
        name: Application name

    Returns:
        Application manifest dict

    Raises:
        ValueError: If repo_url or path is empty
    """
    if not repo_url:
        raise ValueError("Bootstrap repository URL cannot be empty")
    if not path:
        raise ValueError("Bootstrap repository path cannot be empty")

    return {
        "apiVersion": "argoproj.io/v1alpha1",
        "kind": "Application",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "annotations": {"argocd.argoproj.io/sync-wave": "0"},
        },
        "spec": {
            "destination": {
                "namespace": namespace,
                "server": "https://kubernetes.default.svc",
            },
            "project": "default",
            "source": {
                "path": path,
                "repoURL": repo_url,
                "targetRevision": target_revision,
            },
            "syncPolicy": {
                "automated": {
                    "allowEmpty": True,
                    "prune": True,
                    "selfHeal": True,
                },
            },
        },
    }
