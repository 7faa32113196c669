"""Named cleanup steps executed by the teardown handler.

Every step is safe to repeat: a redelivered Delete event re-runs the whole list
from the start, so "already gone" must count as success.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from platform_addons.teardown.properties import TeardownProperties
from platform_addons.utils.async_subprocess import CommandResult, kubeconfig_env, run_async
from platform_addons.utils.errors import CleanupError, CleanupFatalError, CleanupStepError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepContext:
    """Per-invocation settings shared by all steps."""

    kubeconfig_path: Path
    helm_timeout: int = 300
    kubectl_timeout: int = 120

    @property
    def env(self) -> dict[str, str]:
        return kubeconfig_env(self.kubeconfig_path)


class CleanupStep(ABC):
    """A single independently-failable teardown action."""

    name: str = "step"
    fatal: bool = False

    def applies_to(self, properties: TeardownProperties) -> bool:
        """Whether this step has anything to do for the given properties."""
        return True

    @abstractmethod
    async def run(self, properties: TeardownProperties, context: StepContext) -> str:
        """Execute the step.

        Returns:
            Short description of what was done

        Raises:
            CleanupStepError: On a non-fatal failure
            CleanupFatalError: On a failure that makes further steps pointless
        """

    def _error(self, message: str) -> CleanupError:
        error_class = CleanupFatalError if self.fatal else CleanupStepError
        return error_class(self.name, message)

    async def _exec(self, cmd: list[str], context: StepContext, timeout: int) -> CommandResult:
        """Run a command, converting launch failures and timeouts into step errors."""
        try:
            return await run_async(cmd, env=context.env, timeout=timeout + 10)
        except asyncio.TimeoutError as e:
            raise self._error(f"{cmd[0]} timed out after {timeout + 10}s") from e
        except FileNotFoundError as e:
            raise self._error(f"{cmd[0]} CLI not found") from e
        except OSError as e:
            raise self._error(f"{cmd[0]} could not be started: {e}") from e


class UpdateKubeconfigStep(CleanupStep):
    """Write a private kubeconfig for the target cluster."""

    name = "update-kubeconfig"
    fatal = True

    async def run(self, properties: TeardownProperties, context: StepContext) -> str:
        cluster = properties.cluster_identity
        result = await self._exec(
            [
                "aws",
                "eks",
                "update-kubeconfig",
                "--name",
                cluster.name,
                "--region",
                cluster.region,
                "--kubeconfig",
                str(context.kubeconfig_path),
            ],
            context,
            timeout=context.kubectl_timeout,
        )
        if not result.ok:
            raise self._error(f"Cannot access cluster '{cluster.name}': {result.output}")
        return f"Configured access to cluster {cluster.name} ({cluster.region})"


class UninstallReleaseStep(CleanupStep):
    """Uninstall the add-on's Helm release."""

    name = "uninstall-release"

    def applies_to(self, properties: TeardownProperties) -> bool:
        return bool(properties.release_name)

    async def run(self, properties: TeardownProperties, context: StepContext) -> str:
        release = properties.release_name
        namespace = properties.namespace
        result = await self._exec(
            [
                "helm",
                "uninstall",
                release,
                "--namespace",
                namespace,
                "--wait",
                "--timeout",
                f"{context.helm_timeout}s",
            ],
            context,
            timeout=context.helm_timeout,
        )
        if result.ok:
            return f"Uninstalled release {release}"
        if "release: not found" in result.output.lower():
            return f"Release {release} not found (already uninstalled)"
        raise self._error(f"helm uninstall {release} failed: {result.output}")


class PurgeNamespaceStep(CleanupStep):
    """Delete every workload in the add-on's namespace."""

    name = "purge-namespace"

    def applies_to(self, properties: TeardownProperties) -> bool:
        return properties.purge_namespace

    async def run(self, properties: TeardownProperties, context: StepContext) -> str:
        result = await self._exec(
            [
                "kubectl",
                "delete",
                "all",
                "--all",
                "--namespace",
                properties.namespace,
                "--ignore-not-found",
                f"--timeout={context.kubectl_timeout}s",
            ],
            context,
            timeout=context.kubectl_timeout,
        )
        if not result.ok:
            raise self._error(f"Failed to delete resources: {result.output}")
        return f"Deleted resources in namespace {properties.namespace}"


class DeleteCrdsStep(CleanupStep):
    """Delete cluster-scoped CRDs owned by the add-on."""

    name = "delete-crds"

    def applies_to(self, properties: TeardownProperties) -> bool:
        return bool(properties.crd_selector)

    async def run(self, properties: TeardownProperties, context: StepContext) -> str:
        result = await self._exec(
            [
                "kubectl",
                "delete",
                "crd",
                "--selector",
                properties.crd_selector,
                "--ignore-not-found",
                f"--timeout={context.kubectl_timeout}s",
            ],
            context,
            timeout=context.kubectl_timeout,
        )
        if not result.ok:
            raise self._error(f"Failed to delete CRDs: {result.output}")
        return f"Deleted CRDs matching {properties.crd_selector}"


class DeleteNamespaceStep(CleanupStep):
    """Delete the add-on's namespace. A missing namespace is not an error."""

    name = "delete-namespace"

    async def run(self, properties: TeardownProperties, context: StepContext) -> str:
        result = await self._exec(
            [
                "kubectl",
                "delete",
                "namespace",
                properties.namespace,
                "--ignore-not-found",
                f"--timeout={context.kubectl_timeout}s",
            ],
            context,
            timeout=context.kubectl_timeout,
        )
        if not result.ok:
            raise self._error(f"Failed to delete namespace: {result.output}")
        return f"Deleted namespace {properties.namespace}"


def default_steps() -> list[CleanupStep]:
    """Cleanup sequence: connect first, namespace last."""
    return [
        UpdateKubeconfigStep(),
        UninstallReleaseStep(),
        PurgeNamespaceStep(),
        DeleteCrdsStep(),
        DeleteNamespaceStep(),
    ]
