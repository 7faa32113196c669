"""Unit tests for error classes."""

import pytest

from platform_addons.utils.errors import (
    CleanupError,
    CleanupFatalError,
    CleanupStepError,
    CommandError,
    ConfigurationError,
    CycleError,
    DeploymentError,
    DuplicateNodeError,
    GraphError,
    HelmCommandError,
    KubectlCommandError,
    PlatformError,
    RegistrationError,
    UnknownDependencyError,
)


class TestErrorClasses:
    """Test custom error classes."""

    def test_configuration_error(self):
        error = ConfigurationError("Test config error")
        assert str(error) == "Test config error"
        assert isinstance(error, PlatformError)

    def test_cycle_error(self):
        """Test CycleError formats the cycle path."""
        error = CycleError(["a", "b", "a"])
        assert error.cycle == ["a", "b", "a"]
        assert str(error) == "Dependency cycle detected: a -> b -> a"
        assert isinstance(error, GraphError)

    def test_unknown_dependency_error(self):
        error = UnknownDependencyError("chart", "ns")
        assert error.node_id == "chart"
        assert error.missing_id == "ns"
        assert "unknown node 'ns'" in str(error)

    def test_duplicate_node_error(self):
        error = DuplicateNodeError("ns")
        assert error.node_id == "ns"
        assert isinstance(error, GraphError)

    def test_deployment_error(self):
        """Test DeploymentError names the failing node."""
        cause = RuntimeError("forbidden")
        error = DeploymentError("argocd-installer-rb", cause)
        assert error.failed_node_id == "argocd-installer-rb"
        assert error.cause is cause
        assert str(error) == "Failed to create 'argocd-installer-rb': forbidden"

    def test_cleanup_errors(self):
        """Test cleanup errors carry the step name."""
        step_error = CleanupStepError("delete-namespace", "Unauthorized")
        fatal_error = CleanupFatalError("update-kubeconfig", "AccessDenied")

        assert step_error.step == "delete-namespace"
        assert str(step_error) == "[delete-namespace] Unauthorized"
        assert isinstance(step_error, CleanupError)
        assert isinstance(fatal_error, CleanupError)
        assert not isinstance(fatal_error, CleanupStepError)

    def test_command_errors(self):
        assert isinstance(HelmCommandError("x"), CommandError)
        assert isinstance(KubectlCommandError("x"), CommandError)

    def test_error_can_be_raised(self):
        with pytest.raises(PlatformError):
            raise RegistrationError("missing nonce")
