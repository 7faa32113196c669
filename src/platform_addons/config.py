"""Configuration management for platform add-ons.

This module handles configuration loading from environment variables and .env files.
Account and region resolution lives here so deployers and teardown handlers receive
it explicitly instead of reading process state.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from platform_addons.utils.errors import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got '{value}'") from e


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class PlatformConfig:
    """Platform add-on configuration.

    Explicit constructor arguments are defaults; environment variables override them.
    """

    # Target account and cluster
    account: str | None = None
    region: str | None = None
    cluster_name: str | None = None

    # Cluster access
    kubeconfig_path: str = "/tmp/kubeconfig"

    # Command timeouts (seconds)
    helm_timeout: int = 300
    kubectl_timeout: int = 120
    teardown_timeout: int = 900

    # Report a failed teardown when every best-effort step failed
    strict_teardown: bool = False

    log_level: str = "info"

    def __post_init__(self):
        """Load configuration from environment variables after initialization."""
        # Load .env file if present
        load_dotenv()

        self.account = os.getenv("CDK_DEFAULT_ACCOUNT", self.account)
        self.region = os.getenv(
            "CDK_DEFAULT_REGION", os.getenv("AWS_REGION", self.region)
        )
        self.cluster_name = os.getenv("CLUSTER_NAME", self.cluster_name)

        self.kubeconfig_path = os.getenv("PLATFORM_KUBECONFIG", self.kubeconfig_path)

        self.helm_timeout = _env_int("HELM_TIMEOUT_SECONDS", self.helm_timeout)
        self.kubectl_timeout = _env_int("KUBECTL_TIMEOUT_SECONDS", self.kubectl_timeout)
        self.teardown_timeout = _env_int("TEARDOWN_TIMEOUT_SECONDS", self.teardown_timeout)
        self.strict_teardown = _env_bool("TEARDOWN_STRICT", self.strict_teardown)

        self.log_level = os.getenv("LOG_LEVEL", self.log_level).lower()

    def validate(self) -> None:
        """Validate settings required to deploy add-ons.

        Raises:
            ConfigurationError: If required settings are missing or out of range.
        """
        if not self.cluster_name:
            raise ConfigurationError(
                "Cluster name is required. Set CLUSTER_NAME environment variable."
            )
        if not self.region:
            raise ConfigurationError(
                "AWS region is required. Set CDK_DEFAULT_REGION or AWS_REGION environment variable."
            )
        for name in ("helm_timeout", "kubectl_timeout", "teardown_timeout"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive")

    def get_kubeconfig_path(self) -> Path:
        """Get kubeconfig file path used by helm and kubectl.

        Returns:
            Path to kubeconfig file
        """
        return Path(self.kubeconfig_path)
