"""Addon manager for orchestrating addon deployments."""

import logging
from typing import Any

from platform_addons.addons.argo_rollouts import ArgoRolloutsAddon
from platform_addons.addons.argocd import ArgoCDAddon
from platform_addons.addons.argocd_core import ArgoCDCoreAddon
from platform_addons.addons.base import BaseAddon
from platform_addons.cluster.client import ClusterClient
from platform_addons.config import PlatformConfig
from platform_addons.teardown import HandlerState, TeardownRegistry

logger = logging.getLogger(__name__)


class AddonManager:
    """Manages deployment and removal of cluster add-ons."""

    def __init__(
        self,
        config: PlatformConfig,
        cluster_client: ClusterClient,
        registry: TeardownRegistry | None = None,
    ):
        """Initialize addon manager.

        Args:
            config: Platform configuration
            cluster_client: Client used to create resources
            registry: Teardown registry (a new one is created if omitted)
        """
        self.config = config
        self.cluster_client = cluster_client
        self.registry = registry or TeardownRegistry()
        self._addon_registry: dict[str, type[BaseAddon]] = {}
        self._register_addons()

    def _register_addons(self) -> None:
        """Register available addons."""
        self._addon_registry = {
            "argocd": ArgoCDAddon,
            "argo-cd": ArgoCDAddon,
            "argocd-core": ArgoCDCoreAddon,
            "argocd-manifests": ArgoCDCoreAddon,
            "argo-rollouts": ArgoRolloutsAddon,
            "rollouts": ArgoRolloutsAddon,
        }

    def _validate_addon_name(self, name: str) -> str:
        """Validate and normalize addon name.

        Args:
            name: Addon name

        Returns:
            Normalized addon name

        Raises:
            ValueError: If addon name is invalid
        """
        name_lower = name.lower().strip()
        if name_lower not in self._addon_registry:
            available = ", ".join(sorted(self._addon_registry.keys()))
            raise ValueError(f"Unknown addon: '{name}'. Available addons: {available}")
        return name_lower

    def _options_for(
        self, name: str, options: dict[str, dict[str, Any]]
    ) -> dict[str, Any] | None:
        """Find the options given for an addon under any of its aliases."""
        if name in options:
            return options[name]
        addon_class = self._addon_registry[name]
        for key, value in options.items():
            if self._addon_registry.get(key.lower().strip()) is addon_class:
                return value
        return None

    def get_addon_instance(self, name: str, options: dict[str, Any] | None = None) -> BaseAddon:
        """Get an addon instance.

        Args:
            name: Normalized addon name
            options: Optional addon options

        Returns:
            Addon instance
        """
        addon_class = self._addon_registry[name]
        return addon_class(self.config, options)

    def deploy_addons(
        self, addon_names: list[str], options: dict[str, dict[str, Any]] | None = None
    ) -> dict[str, Any]:
        """Deploy multiple addons in the order given.

        A failed addon does not stop the others.

        Args:
            addon_names: List of addon names to deploy
            options: Optional dict of addon-specific options

        Returns:
            Dict with deployment results:
            - success: bool (True if all succeeded)
            - results: dict of addon_name -> result
            - failed: list of failed addon names
            - message: summary message
        """
        if not addon_names:
            return {
                "success": True,
                "results": {},
                "failed": [],
                "message": "No addons specified",
            }

        options = options or {}
        results: dict[str, Any] = {}
        failed: list[str] = []

        # Deduplicate by addon class so aliases are only deployed once
        unique_addons: list[str] = []
        seen: set[type] = set()
        for name in addon_names:
            try:
                normalized = self._validate_addon_name(name)
            except ValueError as e:
                logger.warning(str(e))
                failed.append(name)
                results[name] = {
                    "success": False,
                    "error": str(e),
                    "message": f"Invalid addon name: {name}",
                }
                continue
            addon_class = self._addon_registry[normalized]
            if addon_class not in seen:
                unique_addons.append(normalized)
                seen.add(addon_class)

        logger.info(
            f"Deploying {len(unique_addons)} addon(s) to cluster '{self.config.cluster_name}': "
            f"{', '.join(unique_addons)}"
        )

        for addon_name in unique_addons:
            try:
                logger.info(f"Processing addon: {addon_name}")
                addon = self.get_addon_instance(addon_name, self._options_for(addon_name, options))
                result = addon.run(self.cluster_client, self.registry)
                results[addon_name] = result

                if not result.get("success"):
                    failed.append(addon_name)
                    logger.warning(
                        f"Addon '{addon_name}' deployment failed (continuing with others)"
                    )

            except Exception as e:
                logger.error(f"Unexpected error deploying addon '{addon_name}': {e}")
                failed.append(addon_name)
                results[addon_name] = {
                    "success": False,
                    "error": str(e),
                    "message": f"Unexpected error: {e}",
                }

        total = len(unique_addons)
        succeeded = sum(1 for r in results.values() if r.get("success"))

        message = f"Addons: {succeeded}/{total} succeeded"
        if failed:
            message += f", {len(failed)} failed: {', '.join(failed)}"

        return {
            "success": len(failed) == 0,
            "results": results,
            "failed": failed,
            "message": message,
        }

    async def remove_addons(self) -> dict[str, Any]:
        """Remove every teardown registration, newest first, running each cleanup.

        Returns:
            Dict with teardown results:
            - success: bool (False only if a teardown reported failure)
            - results: dict of addon_name -> terminal state
            - degraded: list of addons cleaned up with step failures
            - failed: list of addons whose teardown failed
            - message: summary message
        """
        results: dict[str, str] = {}
        degraded: list[str] = []
        failed: list[str] = []

        for handle in reversed(self.registry.registrations()):
            try:
                outcome = await self.registry.remove(handle.addon_name)
            except Exception as e:
                logger.error(f"Unexpected error removing addon '{handle.addon_name}': {e}")
                results[handle.addon_name] = HandlerState.FAILED.value
                failed.append(handle.addon_name)
                continue
            results[handle.addon_name] = outcome.state.value
            if outcome.state is HandlerState.DEGRADED:
                degraded.append(handle.addon_name)
            elif outcome.state is HandlerState.FAILED:
                failed.append(handle.addon_name)

        message = f"Teardown: {len(results)} addon(s) processed"
        if degraded:
            message += f", {len(degraded)} degraded: {', '.join(degraded)}"
        if failed:
            message += f", {len(failed)} failed: {', '.join(failed)}"

        return {
            "success": not failed,
            "results": results,
            "degraded": degraded,
            "failed": failed,
            "message": message,
        }
